"""Calendar-day helpers shared by every grouping and filtering path.

A record belongs to the calendar day written in its own timestamp. The
timestamp is never shifted into another timezone first, so the weekly,
daily and day-of-week series always agree on where a record falls.
"""

from datetime import date, timedelta

from tradejournal.models import TradeRecord

# Day index convention used everywhere: 0=Sunday .. 6=Saturday.
DAY_NAMES = [
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
]

WEEKDAY_INDICES = [1, 2, 3, 4, 5]


def calendar_day(record: TradeRecord) -> date:
    """Return the calendar day a record belongs to."""
    stamp = record.date
    return date(stamp.year, stamp.month, stamp.day)


def weekday_index(day: date) -> int:
    """Day index of a calendar day, 0=Sunday .. 6=Saturday."""
    # date.weekday() is 0=Monday .. 6=Sunday
    return (day.weekday() + 1) % 7


def week_start(day: date) -> date:
    """The Sunday that starts the calendar week containing ``day``."""
    return day - timedelta(days=weekday_index(day))


def day_key(record: TradeRecord) -> str:
    """ISO date key of the record's calendar day."""
    return calendar_day(record).isoformat()


def week_key(record: TradeRecord) -> str:
    """ISO date key of the Sunday starting the record's week."""
    return week_start(calendar_day(record)).isoformat()
