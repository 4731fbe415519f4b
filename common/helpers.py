"""
CanvasPrint - Shared Helpers
=============================
Pure utility functions with NO database or module dependencies.
"""

import math
import random
import string
import time
from datetime import datetime, timezone
from typing import Optional

_ID_ALPHABET = string.digits + string.ascii_lowercase


def now_utc() -> datetime:
    """Returns current UTC datetime (timezone-aware)."""
    return datetime.now(timezone.utc)


def epoch_millis(value: Optional[datetime] = None) -> int:
    """Milliseconds since the epoch for `value` (default: now)."""
    if value is None:
        return int(time.time() * 1000)
    return int(value.timestamp() * 1000)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, .5 going up (not banker's rounding)."""
    return int(math.floor(value + 0.5))


def is_number(value) -> bool:
    """True for finite int/float values (bool excluded)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def to_iso(value: datetime) -> str:
    """Serialize a datetime as ISO-8601 (UTC assumed for naive values)."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def parse_iso(value) -> Optional[datetime]:
    """Parse an ISO-8601 string into an aware datetime. Returns None on failure."""
    if not isinstance(value, str) or not value:
        return None
    try:
        # "Z" suffix is what browsers write
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def random_suffix(length: int = 9) -> str:
    """Short lowercase base-36 suffix for client-side identifiers."""
    return "".join(random.choice(_ID_ALPHABET) for _ in range(length))


def format_shekel(value) -> str:
    """Format an amount as shekels with comma separators: ₪1,250"""
    if value is None:
        return "₪0"
    try:
        return "₪{:,}".format(int(value))
    except (ValueError, TypeError):
        return f"₪{value}"
