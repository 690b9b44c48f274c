"""Utility functions for the ZTE SNMP client."""

from __future__ import annotations

import logging
import re
from datetime import datetime, timedelta, timezone

from .constants import DATETIME_FORMAT

_LOGGER = logging.getLogger(__name__)

_DURATION_PARTS = (
    (re.compile(r"(\d+)\s*days?"), 86400),
    (re.compile(r"(\d+)\s*hours?"), 3600),
    (re.compile(r"(\d+)\s*minutes?"), 60),
    (re.compile(r"(\d+)\s*seconds?"), 1),
)


def normalize_oid(oid: str) -> str:
    """Strip the leading dot so OIDs compare equal however they were written.

    Example:
        >>> normalize_oid(".1.3.6.1.4.1.3902.1012")
        '1.3.6.1.4.1.3902.1012'

    """
    return str(oid).strip().lstrip(".")


def last_arc(oid: str) -> int:
    """Return the last arc of an OID as an integer.

    Raises:
        ValueError: If the last arc is not numeric

    """
    return int(normalize_oid(oid).rsplit(".", 1)[-1])


def parse_device_datetime(value: str, utc_offset: timedelta) -> datetime | None:
    """Parse a decoded device timestamp into an aware datetime.

    The OLT reports wall-clock time of its own timezone without an offset, so
    the configured offset of the deployment is attached.

    Args:
        value: Timestamp text in "YYYY-MM-DD HH:MM:SS" form
        utc_offset: UTC offset of the OLT clock

    Returns:
        Aware datetime, or None if value is empty or unparsable

    """
    value = value.strip()
    if not value:
        return None
    try:
        parsed = datetime.strptime(value, DATETIME_FORMAT)
    except ValueError:
        _LOGGER.warning("Could not parse timestamp %r", value)
        return None
    return parsed.replace(tzinfo=timezone(utc_offset))


def to_epoch(value: str, utc_offset: timedelta) -> float:
    """Convert a decoded device timestamp to Unix epoch seconds, 0 if unknown."""
    parsed = parse_device_datetime(value, utc_offset)
    if parsed is None:
        return 0.0
    return float(int(parsed.timestamp()))


def format_duration(duration: timedelta) -> str:
    """Format a duration as "X days Y hours Z minutes W seconds".

    Negative durations are clamped to zero.

    """
    total = max(int(duration.total_seconds()), 0)
    days, remainder = divmod(total, 86400)
    hours, remainder = divmod(remainder, 3600)
    minutes, seconds = divmod(remainder, 60)
    return f"{days} days {hours} hours {minutes} minutes {seconds} seconds"


def parse_duration_seconds(value: str) -> float:
    """Convert a formatted duration back to seconds, 0 if empty."""
    total = 0
    for pattern, multiplier in _DURATION_PARTS:
        match = pattern.search(value)
        if match:
            total += int(match.group(1)) * multiplier
    return float(total)
