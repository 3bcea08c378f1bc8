"""Scalar conversions shared by the response mappers."""

from datetime import date, datetime

from studentvue.logging import get_logger

log = get_logger(__name__)

# District responses use US month/day/year, sometimes with a clock time.
_DATE_FORMATS: tuple[str, ...] = (
    "%m/%d/%Y",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %I:%M %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%y",
)


def parse_date(value: str | None) -> datetime | None:
    """Parse a district date string into a naive local datetime.

    No timezone normalisation is applied. Empty or unparseable values
    yield None.
    """
    if not value or not value.strip():
        return None
    value = value.strip()
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        log.debug("date_unparseable", value=value)
        return None


def to_int(value: str | None) -> int | None:
    """Parse an integer attribute; non-numeric values yield None."""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        number = to_float(value)
        if number is not None and number.is_integer():
            return int(number)
        return None


def to_float(value: str | None) -> float | None:
    """Parse a decimal attribute; non-numeric values yield None."""
    if value is None or not value.strip():
        return None
    try:
        return float(value.strip())
    except ValueError:
        return None


def to_bool(value: str | None) -> bool:
    """Parse a ``true``/``false`` attribute (case-insensitive)."""
    return (value or "").strip().lower() == "true"


def month_starts(start: date, end: date) -> list[date]:
    """Return the first day of every calendar month spanned by [start, end].

    Both endpoints' months are included.

    Raises:
        ValueError: If start is after end.
    """
    if start > end:
        raise ValueError(f"Invalid interval: start {start} is after end {end}")
    months: list[date] = []
    year, month = start.year, start.month
    while (year, month) <= (end.year, end.month):
        months.append(date(year, month, 1))
        year, month = (year + 1, 1) if month == 12 else (year, month + 1)
    return months
