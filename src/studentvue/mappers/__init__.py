"""Pure mappers from list-wrapped response trees to domain records."""

from studentvue.mappers.attendance import map_attendance
from studentvue.mappers.calendar import map_calendar_month, resolve_event
from studentvue.mappers.gradebook import map_gradebook, resolve_resource
from studentvue.mappers.messages import map_messages
from studentvue.mappers.schedule import map_schedule
from studentvue.mappers.student_info import map_student_info

__all__ = [
    "map_attendance",
    "map_calendar_month",
    "map_gradebook",
    "map_messages",
    "map_schedule",
    "map_student_info",
    "resolve_event",
    "resolve_resource",
]
