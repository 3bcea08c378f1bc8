"""Attendance mapping for Attendance responses.

Response structure:
  Attendance @Type @PeriodCount @StartPeriod @EndPeriod @SchoolName
    Absences
      Absence @AbsenceDate @Reason @Note @CodeAllDayDescription
        Periods
          Period @Number @Name @Reason @Course @Staff @StaffGU @StaffEMail @OrgYearGU
    TotalExcused / TotalTardies / TotalUnexcused / TotalActivities / TotalUnexcusedTardies
      PeriodTotal @Number @Total

The five Total* collections are parallel: entry i of each describes the same
period. They are combined by position, so their lengths must match.
"""

from studentvue.errors import MisalignedCollectionsError
from studentvue.models import (
    AbsentPeriod,
    Absence,
    Attendance,
    PeriodInfo,
    PeriodRange,
    PeriodTotals,
    StaffContact,
)
from studentvue.utils import parse_date, to_int
from studentvue.xmltree import XMLNode, attr, element, elements

# PeriodTotals field -> source collection
PERIOD_TOTAL_COLLECTIONS: dict[str, str] = {
    "excused": "TotalExcused",
    "tardies": "TotalTardies",
    "unexcused": "TotalUnexcused",
    "activities": "TotalActivities",
    "unexcused_tardies": "TotalUnexcusedTardies",
}


def _absent_period(period: XMLNode) -> AbsentPeriod:
    return AbsentPeriod(
        period=to_int(attr(period, "Number")),
        name=attr(period, "Name"),
        reason=attr(period, "Reason"),
        course=attr(period, "Course"),
        staff=StaffContact(
            name=attr(period, "Staff"),
            staff_gu=attr(period, "StaffGU"),
            email=attr(period, "StaffEMail"),
        ),
        org_year_gu=attr(period, "OrgYearGU"),
    )


def _absence(absence: XMLNode) -> Absence:
    return Absence(
        date=parse_date(attr(absence, "AbsenceDate")),
        reason=attr(absence, "Reason"),
        note=attr(absence, "Note"),
        description=attr(absence, "CodeAllDayDescription"),
        periods=[
            _absent_period(period)
            for period in elements(absence, "Periods", "Period", required=False)
        ],
    )


def _period_infos(root: XMLNode) -> list[PeriodInfo]:
    """Combine the parallel Total* collections into one PeriodInfo per period.

    Raises:
        MisalignedCollectionsError: If the collections differ in length.
    """
    collections = {
        field: elements(root, source, "PeriodTotal", required=False)
        for field, source in PERIOD_TOTAL_COLLECTIONS.items()
    }
    lengths = {
        PERIOD_TOTAL_COLLECTIONS[field]: len(items)
        for field, items in collections.items()
    }
    if len(set(lengths.values())) > 1:
        raise MisalignedCollectionsError(lengths)

    infos: list[PeriodInfo] = []
    for i, activity in enumerate(collections["activities"]):
        totals = {
            field: to_int(attr(items[i], "Total"))
            for field, items in collections.items()
        }
        infos.append(
            PeriodInfo(
                period=to_int(attr(activity, "Number")),
                total=PeriodTotals(**totals),
            )
        )
    return infos


def map_attendance(tree: XMLNode) -> Attendance:
    """Map an Attendance response into an Attendance record.

    Raises:
        MissingElementError: If the Attendance root is absent.
        MisalignedCollectionsError: If the per-period totals cannot be aligned.
    """
    root = element(tree, "Attendance")
    return Attendance(
        type=attr(root, "Type"),
        period=PeriodRange(
            total=to_int(attr(root, "PeriodCount")),
            start=to_int(attr(root, "StartPeriod")),
            end=to_int(attr(root, "EndPeriod")),
        ),
        school_name=attr(root, "SchoolName"),
        absences=[
            _absence(absence)
            for absence in elements(root, "Absences", "Absence", required=False)
        ],
        period_infos=_period_infos(root),
    )
