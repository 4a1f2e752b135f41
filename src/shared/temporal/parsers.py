"""
Open311 Sync - Timestamp Parsers
"""

from __future__ import annotations

import re
from datetime import datetime

from src.shared.errors import TimestampParseError

# date-time from RFC3339 section 5.6
RFC3339_PATTERN = re.compile(
    r"\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})"
)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp such as ``2020-01-15T10:30:00Z``.

    RFC3339 requires a full date, a full ``HH:MM:SS`` time and a ``Z`` or
    ``+HH:MM`` offset. Date-only strings, naive timestamps, week dates,
    reduced times and compact offsets are rejected even though ISO 8601
    allows them.

    Args:
        value: Timestamp string from the source record

    Returns:
        Timezone-aware datetime

    Raises:
        TimestampParseError: If the value is not a valid RFC3339 timestamp
    """
    if not isinstance(value, str) or not value:
        raise TimestampParseError(value, "empty value")

    if len(value) < 11 or value[10] not in "Tt":
        raise TimestampParseError(value, "missing time component")

    if not RFC3339_PATTERN.fullmatch(value):
        raise TimestampParseError(value, "not in RFC3339 date-time format")

    try:
        parsed = datetime.fromisoformat(value.upper())
    except ValueError as e:
        raise TimestampParseError(value, str(e)) from e

    if parsed.tzinfo is None:
        raise TimestampParseError(value, "missing UTC offset")

    return parsed
