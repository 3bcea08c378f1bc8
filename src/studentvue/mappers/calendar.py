"""Calendar mapping for StudentCalendar responses.

Response structure:
  CalendarListing @SchoolBegDate @SchoolEndDate @MonthBegDate @MonthEndDate
    EventLists
      EventList @DayType @Title @Date @StartTime
                @AGU @DGU @Link @AddLinkData @ViewType @EvtDescription

DayType selects the event variant. Holiday entries carry only the shared
fields; Regular entries may omit any of their optional attributes.
"""

from studentvue.logging import get_logger
from studentvue.models import (
    AssignmentEvent,
    CalendarMonth,
    DateRange,
    EventType,
    HolidayEvent,
    RegularEvent,
)
from studentvue.utils import parse_date
from studentvue.xmltree import XMLNode, attr, element, elements

log = get_logger(__name__)

CalendarEvent = AssignmentEvent | HolidayEvent | RegularEvent


def resolve_event(event: XMLNode) -> CalendarEvent | None:
    """Resolve an EventList entry into its Assignment, Holiday or Regular variant.

    Entries with an unrecognised DayType are skipped: None is returned and a
    warning is logged.
    """
    day_type = attr(event, "DayType")
    shared = {
        "title": attr(event, "Title"),
        "date": parse_date(attr(event, "Date")),
        "start_time": attr(event, "StartTime"),
    }

    if day_type == EventType.ASSIGNMENT.value:
        return AssignmentEvent(
            **shared,
            add_link_data=attr(event, "AddLinkData"),
            agu=attr(event, "AGU"),
            dgu=attr(event, "DGU"),
            link=attr(event, "Link"),
            view_type=attr(event, "ViewType"),
        )
    if day_type == EventType.HOLIDAY.value:
        return HolidayEvent(**shared)
    if day_type == EventType.REGULAR.value:
        return RegularEvent(
            **shared,
            add_link_data=attr(event, "AddLinkData"),
            agu=attr(event, "AGU"),
            dgu=attr(event, "DGU"),
            link=attr(event, "Link"),
            description=attr(event, "EvtDescription"),
            view_type=attr(event, "ViewType"),
        )

    log.warning("calendar_event_skipped", day_type=day_type, title=shared["title"])
    return None


def map_school_date(listing: XMLNode) -> DateRange:
    """Read the school-year bounds from a CalendarListing element."""
    return DateRange(
        start=parse_date(attr(listing, "SchoolBegDate")),
        end=parse_date(attr(listing, "SchoolEndDate")),
    )


def map_calendar_events(listing: XMLNode) -> list[CalendarEvent]:
    """Resolve every event of a CalendarListing element, in source order."""
    events: list[CalendarEvent] = []
    for entry in elements(listing, "EventLists", "EventList", required=False):
        event = resolve_event(entry)
        if event is not None:
            events.append(event)
    return events


def map_calendar_month(tree: XMLNode) -> CalendarMonth:
    """Map one month's StudentCalendar response.

    Raises:
        MissingElementError: If the CalendarListing root is absent.
    """
    listing = element(tree, "CalendarListing")
    return CalendarMonth(
        school_date=map_school_date(listing),
        events=map_calendar_events(listing),
    )
