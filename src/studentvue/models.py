"""Pydantic models for StudentVUE data.

All data structures use Pydantic v2 for validation, serialization, and type safety.
Every model is a frozen snapshot built fresh by a mapper; none keeps a
reference to the XML tree it was mapped from.
"""

from datetime import date, datetime
from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field


class Snapshot(BaseModel):
    """Read-only base for mapped records."""

    model_config = ConfigDict(frozen=True)


class ResourceType(str, Enum):
    """Discriminant of a gradebook assignment resource."""

    FILE = "File"
    URL = "URL"


class EventType(str, Enum):
    """Discriminant (DayType) of a calendar entry."""

    ASSIGNMENT = "Assignment"
    HOLIDAY = "Holiday"
    REGULAR = "Regular"


class DateRange(Snapshot):
    start: datetime | None = None
    end: datetime | None = None


class StaffContact(Snapshot):
    name: str | None = None
    email: str | None = None
    staff_gu: str | None = None


# Schedule


class ScheduleTerm(Snapshot):
    index: int | None = None
    name: str | None = None


class ClassScheduleTeacher(Snapshot):
    name: str | None = None
    email: str | None = None
    email_subject: str | None = None
    staff_gu: str | None = None
    url: str | None = None


class ClassScheduleInfo(Snapshot):
    """A class on today's bell schedule."""

    period: int | None = None
    attendance_code: str | None = None
    date: DateRange
    name: str | None = None
    section_gu: str | None = None
    teacher: ClassScheduleTeacher


class SchoolInfo(Snapshot):
    name: str | None = None
    bell_schedule_name: str | None = None
    classes: list[ClassScheduleInfo] = Field(default_factory=list)


class ClassInfo(Snapshot):
    """A class from the term's class listing."""

    name: str | None = None
    period: int | None = None
    room: str | None = None
    section_gu: str | None = None
    teacher: StaffContact


class TermInfo(Snapshot):
    date: DateRange
    index: int | None = None
    name: str | None = None
    school_year_term_code_gu: str | None = None


class Schedule(Snapshot):
    term: ScheduleTerm
    error: str | None = None
    today: list[SchoolInfo] = Field(default_factory=list)
    classes: list[ClassInfo] = Field(default_factory=list)  # source order
    terms: list[TermInfo] = Field(default_factory=list)


# Attendance


class PeriodRange(Snapshot):
    total: int | None = None
    start: int | None = None
    end: int | None = None


class AbsentPeriod(Snapshot):
    period: int | None = None
    name: str | None = None
    reason: str | None = None
    course: str | None = None
    staff: StaffContact
    org_year_gu: str | None = None


class Absence(Snapshot):
    date: datetime | None = None
    reason: str | None = None
    note: str | None = None
    description: str | None = None
    periods: list[AbsentPeriod] = Field(default_factory=list)


class PeriodTotals(Snapshot):
    excused: int | None = None
    tardies: int | None = None
    unexcused: int | None = None
    activities: int | None = None
    unexcused_tardies: int | None = None


class PeriodInfo(Snapshot):
    period: int | None = None
    total: PeriodTotals


class Attendance(Snapshot):
    type: str | None = None
    period: PeriodRange
    school_name: str | None = None
    absences: list[Absence] = Field(default_factory=list)
    period_infos: list[PeriodInfo] = Field(default_factory=list)


# Gradebook


class ReportingPeriod(Snapshot):
    index: int | None = None
    date: DateRange
    name: str | None = None


class ReportingPeriods(Snapshot):
    current: ReportingPeriod
    available: list[ReportingPeriod] = Field(default_factory=list)


class CategoryWeight(Snapshot):
    evaluated: str | None = None
    standard: str | None = None


class CategoryPoints(Snapshot):
    current: float | None = None
    possible: float | None = None


class WeightedCategory(Snapshot):
    type: str | None = None
    calculated_mark: str | None = None
    weight: CategoryWeight
    points: CategoryPoints


class ResourceInfo(Snapshot):
    date: datetime | None = None
    id: str | None = None
    name: str | None = None
    description: str | None = None


class FileInfo(Snapshot):
    type: str | None = None
    name: str | None = None
    uri: str


class FileResource(Snapshot):
    type: Literal[ResourceType.FILE] = ResourceType.FILE
    file: FileInfo
    resource: ResourceInfo


class URLResource(Snapshot):
    type: Literal[ResourceType.URL] = ResourceType.URL
    url: str | None = None
    resource: ResourceInfo
    path: str | None = None


Resource = Annotated[Union[FileResource, URLResource], Field(discriminator="type")]


class AssignmentDates(Snapshot):
    start: datetime | None = None
    due: datetime | None = None


class AssignmentScore(Snapshot):
    type: str | None = None
    value: str | None = None


class Assignment(Snapshot):
    gradebook_id: str | None = None
    name: str | None = None
    type: str | None = None
    date: AssignmentDates
    score: AssignmentScore
    points: str | None = None
    notes: str | None = None
    teacher_id: str | None = None
    description: str | None = None
    has_dropbox: bool = False
    student_id: str | None = None
    dropbox_date: DateRange
    resources: list[Resource] = Field(default_factory=list)


class CalculatedScore(Snapshot):
    string: str | None = None
    raw: float | None = None


class Mark(Snapshot):
    name: str | None = None
    calculated_score: CalculatedScore
    weighted_categories: list[WeightedCategory] = Field(default_factory=list)
    assignments: list[Assignment] = Field(default_factory=list)


class Course(Snapshot):
    period: int | None = None
    title: str | None = None
    room: str | None = None
    staff: StaffContact
    marks: list[Mark] = Field(default_factory=list)


class Gradebook(Snapshot):
    error: str | None = None
    type: str | None = None
    reporting_period: ReportingPeriods
    courses: list[Course] = Field(default_factory=list)


# Student info


class StudentName(Snapshot):
    name: str | None = None
    last_name: str | None = None
    nickname: str | None = None


class Dentist(Snapshot):
    name: str | None = None
    phone: str | None = None
    extn: str | None = None
    office: str | None = None


class Physician(Snapshot):
    name: str | None = None
    phone: str | None = None
    extn: str | None = None
    hospital: str | None = None


class ContactPhones(Snapshot):
    home: str | None = None
    mobile: str | None = None
    other: str | None = None
    work: str | None = None


class EmergencyContact(Snapshot):
    name: str | None = None
    phone: ContactPhones
    relationship: str | None = None


class ItemSource(Snapshot):
    element: str | None = None
    object: str | None = None


class AdditionalInfoItem(Snapshot):
    """One district-defined field: where it comes from and its value."""

    source: ItemSource
    vc_id: str | None = None
    value: str | None = None
    type: str | None = None


class AdditionalInfo(Snapshot):
    """A district-defined group box of custom fields."""

    id: str | None = None
    type: str | None = None
    vc_id: str | None = None
    items: list[AdditionalInfoItem] = Field(default_factory=list)


class StudentInfo(Snapshot):
    student: StudentName
    birth_date: str | None = None
    track: str | None = None
    address: str | None = None
    counselor: StaffContact
    current_school: str | None = None
    dentist: Dentist
    physician: Physician
    email: str | None = None
    emergency_contacts: list[EmergencyContact] = Field(default_factory=list)
    gender: str | None = None
    grade: str | None = None
    locker_info_records: str | None = None
    home_language: str | None = None
    home_room: str | None = None
    home_room_teacher: StaffContact
    additional_info: list[AdditionalInfo] = Field(default_factory=list)


# Calendar


class AssignmentEvent(Snapshot):
    type: Literal[EventType.ASSIGNMENT] = EventType.ASSIGNMENT
    title: str | None = None
    date: datetime | None = None
    start_time: str | None = None
    add_link_data: str | None = None
    agu: str | None = None
    dgu: str | None = None
    link: str | None = None
    view_type: str | None = None


class HolidayEvent(Snapshot):
    type: Literal[EventType.HOLIDAY] = EventType.HOLIDAY
    title: str | None = None
    date: datetime | None = None
    start_time: str | None = None


class RegularEvent(Snapshot):
    type: Literal[EventType.REGULAR] = EventType.REGULAR
    title: str | None = None
    date: datetime | None = None
    start_time: str | None = None
    add_link_data: str | None = None
    agu: str | None = None
    dgu: str | None = None
    link: str | None = None
    description: str | None = None
    view_type: str | None = None


Event = Annotated[
    Union[AssignmentEvent, HolidayEvent, RegularEvent], Field(discriminator="type")
]


class OutputRange(Snapshot):
    """The caller's requested window, echoed back unchanged."""

    start: datetime | date
    end: datetime | date


class CalendarMonth(Snapshot):
    """One StudentCalendar response: school-year bounds plus that month's events."""

    school_date: DateRange
    events: list[Event] = Field(default_factory=list)


class Calendar(Snapshot):
    school_date: DateRange
    output_range: OutputRange
    events: list[Event] = Field(default_factory=list)


# District lookup


class SchoolDistrict(Snapshot):
    parent_vue_url: str | None = None
    address: str | None = None
    id: str | None = None
    name: str | None = None
