"""UTC datetime utilities."""

import re
from datetime import datetime, timezone

# date "T" time, optional fraction, mandatory offset ("Z" or ±hh:mm)
_RFC3339_RE = re.compile(
    r"([0-9]{4}-[0-9]{2}-[0-9]{2})T([0-9]{2}:[0-9]{2}:[0-9]{2})"
    r"(?:\.([0-9]+))?(Z|[+-][0-9]{2}:[0-9]{2})"
)


def utc_now() -> datetime:
    """Return timezone-aware UTC now."""
    return datetime.now(timezone.utc)


def parse_rfc3339(value: str) -> datetime:
    """Parse a strict RFC 3339 timestamp into an aware datetime.

    Rejects date-only strings, missing offsets and other ISO 8601 variants
    that ``datetime.fromisoformat`` would otherwise accept.

    Raises:
        ValueError: the string is not an RFC 3339 timestamp.
    """
    match = _RFC3339_RE.fullmatch(value)
    if match is None:
        raise ValueError(f"not an RFC 3339 timestamp: {value!r}")
    date_part, time_part, fraction, offset = match.groups()
    # fromisoformat only takes up to microsecond precision
    micros = f".{fraction[:6].ljust(6, '0')}" if fraction else ""
    if offset == "Z":
        offset = "+00:00"
    return datetime.fromisoformat(f"{date_part}T{time_part}{micros}{offset}")
