import logging
from datetime import date, datetime, time, timedelta

from .data_models import DueOn, DueStatus, ParsedCollectionDate

logger = logging.getLogger(__name__)

# After this time of day, today's collection is assumed to have happened already.
DEFAULT_CUTOFF = time(21, 11, 0)


def parse_cutoff(value: str) -> time:
    """Parses an 'HH:MM' or 'HH:MM:SS' cutoff string."""
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(value.strip(), fmt).time()
        except ValueError:
            continue
    raise ValueError(f"Invalid cutoff time {value!r}, expected HH:MM or HH:MM:SS")


def days_until_due(collection_day: date, now: datetime) -> str:
    """Human label for the calendar-day distance from now to the collection day."""
    days = (collection_day - now.date()).days
    if days == 0:
        return "today"
    if days == 1:
        return "tomorrow"
    if days < 0:
        return f"{-days} day{'s' if days < -1 else ''} ago"
    return f"{days} days"


def classify(collection: ParsedCollectionDate, now: datetime, cutoff: time = DEFAULT_CUTOFF) -> DueStatus:
    """
    Decides whether a collection is due today, due tomorrow or not due.

    A collection tomorrow is always due. A collection today is due only until
    the cutoff time has passed.
    """
    today = now.date()
    tomorrow = today + timedelta(days=1)
    collection_day = collection.date
    cutoff_passed = now > datetime.combine(today, cutoff, tzinfo=now.tzinfo)

    if collection_day == tomorrow:
        due_on = DueOn.TOMORROW
    elif collection_day == today and not cutoff_passed:
        due_on = DueOn.TODAY
    else:
        due_on = DueOn.NONE

    if collection_day == today and cutoff_passed:
        logger.debug(f"Collection on {collection.locale_date} is past the {cutoff.strftime('%H:%M')} cutoff")

    return DueStatus(
        is_due=due_on is not DueOn.NONE,
        due_on=due_on,
        collection_date=collection,
        days_until_due=days_until_due(collection_day, now),
    )
