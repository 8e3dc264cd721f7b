"""Course intake dates.

Each course starts on a fixed weekday every week. The course selection step
offers the next ten start dates, recomputed whenever the selected course
changes.
"""

from datetime import date, datetime
from typing import List, Optional, Union

from dateutil import parser as date_parser
from dateutil.relativedelta import SU, TH, relativedelta, weekday

INTAKE_COUNT = 10

# Courses not listed here start on Sundays.
COURSE_WEEKDAYS = {
    "cyber-security": TH,
}
DEFAULT_WEEKDAY = SU


def cadence_for(course: Optional[str]) -> weekday:
    """Weekday on which intakes for ``course`` start."""
    return COURSE_WEEKDAYS.get((course or "").strip().lower(), DEFAULT_WEEKDAY)


def first_intake(course: Optional[str], today: date) -> date:
    """First intake on or after ``today``.

    Thursday intakes can start on the day itself; Sunday intakes always start
    on the following Sunday, even when today is a Sunday.
    """
    cadence = cadence_for(course)
    if cadence == DEFAULT_WEEKDAY:
        return today + relativedelta(days=+1, weekday=cadence(+1))
    return today + relativedelta(weekday=cadence(+1))


def intake_dates(
    course: Optional[str],
    today: Optional[date] = None,
    count: int = INTAKE_COUNT,
) -> List[date]:
    """Next ``count`` start dates for ``course``, in ascending order.

    Examples:
        >>> [d.isoformat() for d in intake_dates("cyber-security", date(2026, 10, 19), count=2)]
        ['2026-10-22', '2026-10-29']
    """
    start = first_intake(course, today or date.today())
    return [start + relativedelta(weeks=+n) for n in range(count)]


def intake_options(course: Optional[str], today: Optional[date] = None) -> List[str]:
    """Intake values as stored in the draft (ISO-8601 dates)."""
    return [d.isoformat() for d in intake_dates(course, today)]


def parse_intake(value: Union[str, date, None]) -> Optional[date]:
    """Parse a stored intake value, returning None when it is unusable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    try:
        return date_parser.isoparse(value.strip()).date()
    except (ValueError, OverflowError):
        return None


def matches_cadence(course: Optional[str], value: Union[str, date, None]) -> bool:
    """Whether an intake value falls on the weekday of ``course``."""
    parsed = parse_intake(value)
    if parsed is None:
        return False
    return parsed.weekday() == cadence_for(course).weekday


def format_intake(value: Union[str, date, None]) -> str:
    """Render an intake as "Thursday, 22 October 2026".

    Unparsable values are returned unchanged.
    """
    parsed = parse_intake(value)
    if parsed is None:
        return "" if value is None else str(value)
    return f"{parsed:%A}, {parsed.day} {parsed:%B %Y}"


__all__ = [
    "INTAKE_COUNT",
    "COURSE_WEEKDAYS",
    "cadence_for",
    "first_intake",
    "intake_dates",
    "intake_options",
    "parse_intake",
    "matches_cadence",
    "format_intake",
]
