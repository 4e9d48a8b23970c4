import calendar
import logging
import re
from datetime import datetime, time
from typing import Dict

from .data_models import ParsedCollectionDate
from .exceptions import MalformedDateError

logger = logging.getLogger(__name__)

# Collections are anchored late in the day rather than at midnight so that
# truncating the instant back to a calendar date never lands on the day before.
COLLECTION_ANCHOR_TIME = time(23, 0, 0)

# Token positions within a feed title, e.g. "Tue 9 Jul 2018" or "Collection: Tue 9th July 2018"
DAY_TOKEN = 1
MONTH_TOKEN = 2
YEAR_TOKEN = 3

_LEADING_DIGITS = re.compile(r"^(\d+)")
_YEAR = re.compile(r"^\d{4}$")

# Full and abbreviated English month names -> month number ("july", "jul", "sept" ...)
MONTHS: Dict[str, int] = {}
for _number in range(1, 13):
    MONTHS[calendar.month_name[_number].lower()] = _number
    MONTHS[calendar.month_abbr[_number].lower()] = _number
MONTHS["sept"] = 9


def _tokens(title: str):
    tokens = title.split()
    # A "Collection:" style label may precede the weekday; the date fields
    # always sit in the last four tokens in that case.
    if len(tokens) > YEAR_TOKEN + 1 and tokens[0].endswith(":"):
        tokens = tokens[1:]
    return tokens


def parse_collection_date(title: str) -> ParsedCollectionDate:
    """
    Extracts the collection day from a feed title.

    The title is whitespace separated: a leading label/weekday token, then the
    day of month (only its leading digits count, so "9th" is 9), the month
    name and a four digit year.

    Raises:
        MalformedDateError: if the title does not have that shape.
    """
    if not isinstance(title, str):
        raise MalformedDateError(repr(title), "title is not text")

    tokens = _tokens(title)
    if len(tokens) <= YEAR_TOKEN:
        raise MalformedDateError(title, f"expected at least {YEAR_TOKEN + 1} tokens, got {len(tokens)}")

    day_match = _LEADING_DIGITS.match(tokens[DAY_TOKEN])
    if not day_match:
        raise MalformedDateError(title, f"day {tokens[DAY_TOKEN]!r} is not numeric")
    day = int(day_match.group(1))

    month = MONTHS.get(tokens[MONTH_TOKEN].strip(",.").lower())
    if month is None:
        raise MalformedDateError(title, f"unknown month {tokens[MONTH_TOKEN]!r}")

    year_token = tokens[YEAR_TOKEN].strip(",.")
    if not _YEAR.match(year_token):
        raise MalformedDateError(title, f"year {tokens[YEAR_TOKEN]!r} is not a 4-digit number")
    year = int(year_token)

    try:
        instant = datetime.combine(datetime(year, month, day).date(), COLLECTION_ANCHOR_TIME)
    except (ValueError, OverflowError) as e:
        raise MalformedDateError(title, str(e)) from e

    logger.debug(f"Parsed collection title {title!r} as {instant.isoformat()}")
    return ParsedCollectionDate(instant=instant)
