"""Schedule mapping for StudentClassList responses.

Response structure:
  StudentClassSchedule @TermIndex @TermIndexName @ErrorMessage
    TodayScheduleInfoData
      SchoolInfos
        SchoolInfo @SchoolName @BellSchedName
          Classes
            ClassInfo @Period @ClassName @StartDate @EndDate @SectionGU
                      @TeacherName @TeacherEmail @EmailSubject @StaffGU @TeacherURL
              AttendanceCode (text)
    ClassLists
      ClassListing @Period @CourseTitle @RoomName @SectionGU
                   @Teacher @TeacherEmail @TeacherStaffGU
    TermLists
      TermListing @TermIndex @TermName @BeginDate @EndDate @SchoolYearTrmCodeGU
"""

from studentvue.models import (
    ClassInfo,
    ClassScheduleInfo,
    ClassScheduleTeacher,
    DateRange,
    Schedule,
    ScheduleTerm,
    SchoolInfo,
    StaffContact,
    TermInfo,
)
from studentvue.utils import parse_date, to_int
from studentvue.xmltree import XMLNode, attr, element, elements, text


def _today_class(course: XMLNode) -> ClassScheduleInfo:
    return ClassScheduleInfo(
        period=to_int(attr(course, "Period")),
        attendance_code=text(course, "AttendanceCode"),
        date=DateRange(
            start=parse_date(attr(course, "StartDate")),
            end=parse_date(attr(course, "EndDate")),
        ),
        name=attr(course, "ClassName"),
        section_gu=attr(course, "SectionGU"),
        teacher=ClassScheduleTeacher(
            name=attr(course, "TeacherName"),
            email=attr(course, "TeacherEmail"),
            email_subject=attr(course, "EmailSubject"),
            staff_gu=attr(course, "StaffGU"),
            url=attr(course, "TeacherURL"),
        ),
    )


def _school(school: XMLNode) -> SchoolInfo:
    return SchoolInfo(
        name=attr(school, "SchoolName"),
        bell_schedule_name=attr(school, "BellSchedName"),
        classes=[
            _today_class(course)
            for course in elements(school, "Classes", "ClassInfo", required=False)
        ],
    )


def _class_listing(listing: XMLNode) -> ClassInfo:
    return ClassInfo(
        name=attr(listing, "CourseTitle"),
        period=to_int(attr(listing, "Period")),
        room=attr(listing, "RoomName"),
        section_gu=attr(listing, "SectionGU"),
        teacher=StaffContact(
            name=attr(listing, "Teacher"),
            email=attr(listing, "TeacherEmail"),
            staff_gu=attr(listing, "TeacherStaffGU"),
        ),
    )


def _term(term: XMLNode) -> TermInfo:
    return TermInfo(
        date=DateRange(
            start=parse_date(attr(term, "BeginDate")),
            end=parse_date(attr(term, "EndDate")),
        ),
        index=to_int(attr(term, "TermIndex")),
        name=attr(term, "TermName"),
        school_year_term_code_gu=attr(term, "SchoolYearTrmCodeGU"),
    )


def map_schedule(tree: XMLNode) -> Schedule:
    """Map a StudentClassList response into a Schedule.

    Classes keep their source order.

    Raises:
        MissingElementError: If the StudentClassSchedule root is absent.
    """
    root = element(tree, "StudentClassSchedule")

    today: list[SchoolInfo] = []
    today_data = element(root, "TodayScheduleInfoData", required=False)
    if today_data is not None:
        today = [
            _school(school)
            for school in elements(today_data, "SchoolInfos", "SchoolInfo", required=False)
        ]

    return Schedule(
        term=ScheduleTerm(
            index=to_int(attr(root, "TermIndex")),
            name=attr(root, "TermIndexName"),
        ),
        error=attr(root, "ErrorMessage"),
        today=today,
        classes=[
            _class_listing(listing)
            for listing in elements(root, "ClassLists", "ClassListing")
        ],
        terms=[_term(term) for term in elements(root, "TermLists", "TermListing")],
    )
