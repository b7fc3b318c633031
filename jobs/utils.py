"""
EXIM Desk - Job Utilities
=========================
Parsing helpers for the free-text date fields stored on jobs and containers.
"""

import logging
from datetime import date, datetime, time
from typing import Optional, Union

from dateutil import parser as date_parser
from django.utils import timezone

logger = logging.getLogger(__name__)


DateInput = Union[str, date, datetime, None]

# Missing month / day parts resolve to the 1st, never to the current date
PARSE_DEFAULT = datetime(2000, 1, 1)


def parse_date(value: DateInput) -> Optional[datetime]:
    """
    Parse a stored date string into a naive local datetime.

    Empty strings and None are treated as absent (never as the epoch).
    Timezone-aware values are converted to the project time zone first.

    Returns:
        datetime or None if the value is missing or unparseable
    """
    if value is None:
        return None

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        return datetime.combine(value, time.min)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            parsed = date_parser.parse(text, default=PARSE_DEFAULT)
        except (ValueError, OverflowError):
            logger.warning(f"[DATES] Ignoring unparseable date value: {text!r}")
            return None

    if timezone.is_aware(parsed):
        parsed = timezone.make_naive(parsed, timezone.get_current_timezone())
    return parsed


def start_of_day(value: DateInput = None) -> datetime:
    """
    Midnight of the given day, or of the current local day when omitted.

    Raises:
        ValueError: if a non-empty value cannot be parsed
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return datetime.combine(timezone.localdate(), time.min)

    parsed = parse_date(value)
    if parsed is None:
        raise ValueError(f"Invalid date: {value!r}")
    return datetime.combine(parsed.date(), time.min)


def has_value(value: Optional[str]) -> bool:
    """True when a stored string field is non-empty after trimming."""
    return bool(value and str(value).strip())
