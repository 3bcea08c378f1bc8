"""Month-by-month calendar aggregation.

StudentCalendar only answers for the month containing its RequestDate, so a
calendar over an arbitrary window is built from one request per month:

1. Split [start, end] into the calendar months it spans (both ends included).
2. Fetch every month with at most ``concurrency`` requests in flight.
3. Fold the responses in month order: school-year bounds come from the
   first response only, events are concatenated.
4. Drop events whose title was already seen, keeping the first.

A failing month fails the whole calendar with the original exception and
cancels the months still in flight.
"""

import asyncio
from collections.abc import Awaitable, Callable, Iterable, Sequence
from datetime import date, datetime
from typing import TypeVar

from studentvue.logging import get_logger
from studentvue.mappers.calendar import (
    CalendarEvent,
    map_calendar_events,
    map_school_date,
)
from studentvue.models import Calendar, DateRange, OutputRange
from studentvue.utils import month_starts
from studentvue.xmltree import XMLNode, element

log = get_logger(__name__)

DEFAULT_CONCURRENCY = 7

T = TypeVar("T")
R = TypeVar("R")


async def gather_bounded(
    items: Sequence[T],
    worker: Callable[[T], Awaitable[R]],
    concurrency: int | None = DEFAULT_CONCURRENCY,
) -> list[R]:
    """Run ``worker`` over ``items`` with at most ``concurrency`` calls in flight.

    Results are returned in the order of ``items`` regardless of completion
    order. ``concurrency=None`` runs every call at once. On the first
    failure the remaining calls are cancelled and the exception re-raised
    unchanged.

    Raises:
        ValueError: If concurrency is less than 1.
    """
    if concurrency is not None and concurrency < 1:
        raise ValueError(f"concurrency must be at least 1 or None, got {concurrency}")

    semaphore = asyncio.Semaphore(concurrency) if concurrency is not None else None

    async def run(item: T) -> R:
        if semaphore is None:
            return await worker(item)
        async with semaphore:
            return await worker(item)

    tasks = [asyncio.ensure_future(run(item)) for item in items]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


def dedupe_by_title(events: Iterable[CalendarEvent]) -> list[CalendarEvent]:
    """Keep the first event for each title, preserving order.

    Distinct events that share a title on different dates collapse into
    the first one.
    """
    seen: set[str | None] = set()
    unique: list[CalendarEvent] = []
    for event in events:
        if event.title in seen:
            continue
        seen.add(event.title)
        unique.append(event)
    return unique


def merge_calendar_months(
    months: Iterable[XMLNode], start: date | datetime, end: date | datetime
) -> Calendar:
    """Fold month responses (in month order) into one Calendar.

    Raises:
        MissingElementError: If a response has no CalendarListing.
    """
    school_date: DateRange | None = None
    events: list[CalendarEvent] = []
    for tree in months:
        listing = element(tree, "CalendarListing")
        if school_date is None:
            school_date = map_school_date(listing)
        events.extend(map_calendar_events(listing))

    unique = dedupe_by_title(events)
    if len(unique) != len(events):
        log.debug("calendar_events_deduplicated", dropped=len(events) - len(unique))

    return Calendar(
        school_date=school_date or DateRange(),
        output_range=OutputRange(start=start, end=end),
        events=unique,
    )


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


async def aggregate_calendar(
    fetch_month: Callable[[date], Awaitable[XMLNode]],
    start: date | datetime,
    end: date | datetime,
    *,
    concurrency: int | None = DEFAULT_CONCURRENCY,
) -> Calendar:
    """Build a Calendar for [start, end] from one fetch per spanned month.

    Args:
        fetch_month: Coroutine returning the StudentCalendar tree for the
            month starting on the given date.
        start: First day of the window (echoed back as output_range.start).
        end: Last day of the window (echoed back as output_range.end).
        concurrency: Maximum in-flight fetches; None for no limit.

    Raises:
        ValueError: If start is after end or concurrency is less than 1.
    """
    months = month_starts(_as_date(start), _as_date(end))
    log.info(
        "calendar_months_requested",
        first=months[0].isoformat(),
        last=months[-1].isoformat(),
        months=len(months),
        concurrency=concurrency,
    )

    async def fetch(month: date) -> XMLNode:
        tree = await fetch_month(month)
        log.debug("calendar_month_fetched", month=month.isoformat())
        return tree

    trees = await gather_bounded(months, fetch, concurrency)
    return merge_calendar_months(trees, start, end)
