import math
from datetime import datetime
from typing import Any, Optional

from plantlog.utils.time import parse_utc_z

NO_DATE_TEXT = "No date data available"
INVALID_DATE_TEXT = "Invalid"

DISPLAY_FORMAT = "%Y-%m-%d %H:%M"


def to_instant(raw: Any) -> Optional[datetime]:
    """
    Coerce a raw timestamp value into a datetime.

    Accepts store-native wrappers (anything with a callable ``to_datetime``),
    datetimes, epoch seconds (int/float) and ISO 8601 strings.

    Args:
        raw: Raw timestamp value as found on a document

    Returns:
        The instant, or None if raw is None

    Raises:
        ValueError: If the value cannot be turned into a valid instant
    """
    if raw is None:
        return None

    converter = getattr(raw, "to_datetime", None)
    if callable(converter):
        try:
            value = converter()
        except (TypeError, ValueError, OverflowError, OSError) as e:
            raise ValueError(f"Timestamp conversion failed: {e}") from e
    else:
        value = raw

    if isinstance(value, datetime):
        return value

    # bool is an int subclass but never a timestamp
    if isinstance(value, bool):
        raise ValueError(f"Not a timestamp: {value!r}")

    if isinstance(value, (int, float)):
        if isinstance(value, float) and not math.isfinite(value):
            raise ValueError(f"Not a finite epoch value: {value!r}")
        try:
            return datetime.fromtimestamp(value)
        except (OverflowError, OSError, ValueError) as e:
            raise ValueError(f"Epoch value out of range: {value!r}") from e

    if isinstance(value, str):
        return parse_utc_z(value)

    raise ValueError(f"Unsupported timestamp type: {type(value).__name__}")


def format_local(instant: datetime) -> str:
    """Format an instant as local wall-clock 'YYYY-MM-DD HH:MM'."""
    if instant.tzinfo is not None:
        instant = instant.astimezone()
    return instant.strftime(DISPLAY_FORMAT)


def normalize_date(raw: Any) -> str:
    """
    Turn any supported timestamp representation into the display string.

    Never raises: absent values give NO_DATE_TEXT and unparseable ones
    give INVALID_DATE_TEXT, so one bad record cannot fail a whole listing.
    """
    if raw is None:
        return NO_DATE_TEXT
    try:
        instant = to_instant(raw)
        if instant is None:
            return NO_DATE_TEXT
        return format_local(instant)
    except (ValueError, OverflowError, OSError):
        return INVALID_DATE_TEXT
