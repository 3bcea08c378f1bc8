"""Async client library for the StudentVUE school information system.

Authenticates a student session over SOAP and maps schedule, gradebook,
attendance, calendar, message and student-info responses into typed,
read-only records.
"""

from studentvue.client import Client, find_districts, login
from studentvue.errors import (
    AuthenticationError,
    MappingError,
    RequestError,
    StudentVueError,
    TransientError,
    UnknownVariantError,
)
from studentvue.message import Message
from studentvue.models import Calendar, EventType, Gradebook, ResourceType
from studentvue.soap import SoapClient

__all__ = [
    "AuthenticationError",
    "Calendar",
    "Client",
    "EventType",
    "Gradebook",
    "MappingError",
    "Message",
    "RequestError",
    "ResourceType",
    "SoapClient",
    "StudentVueError",
    "TransientError",
    "UnknownVariantError",
    "find_districts",
    "login",
]
