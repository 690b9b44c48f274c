"""Raw SNMP value decoders for ZTE ONU attributes.

Each function turns one raw varbind value (bytes, str, int or None, as
returned by the client) into one typed attribute value. Decoders never
raise: an absent or malformed value degrades to the empty value of its kind
and a warning is logged, so one bad field never drops a whole ONU.
"""

from __future__ import annotations

import ipaddress
import logging
import string
from datetime import datetime
from typing import Any

from .constants import (
    DATETIME_FORMAT,
    OFFLINE_REASON_MAP,
    ONU_PHASE_STATE_MAP,
    OPTICAL_POWER_FACTOR,
    OPTICAL_POWER_OFFSET,
    OnuStatus,
)

_LOGGER = logging.getLogger(__name__)

_PRINTABLE = set(string.printable.encode())

# Index prefix some firmwares put in front of textual serial numbers
SERIAL_INDEX_PREFIX = "1,"

# Packed serial: 4 ASCII vendor characters + 4 binary bytes
SERIAL_PACKED_LENGTH = 8
SERIAL_VENDOR_LENGTH = 4

# SNMPv2-TC DateAndTime, without and with the UTC offset tail
DATE_AND_TIME_LENGTHS = (8, 11)


def _is_int(raw: Any) -> bool:
    return isinstance(raw, int) and not isinstance(raw, bool)


def _is_printable(raw: bytes) -> bool:
    return all(byte in _PRINTABLE for byte in raw)


def _is_packed_serial(raw: bytes) -> bool:
    vendor = raw[:SERIAL_VENDOR_LENGTH]
    return len(raw) == SERIAL_PACKED_LENGTH and vendor.isascii() and vendor.isalpha()


def decode_text(raw: Any) -> str:
    """Decode a name, description or type value to trimmed text."""
    if raw is None:
        return ""
    if isinstance(raw, (bytes, bytearray)):
        return bytes(raw).decode("utf-8", errors="replace").strip("\x00").strip()
    if isinstance(raw, str):
        return raw.strip("\x00").strip()
    if _is_int(raw):
        return str(raw)

    _LOGGER.warning("Cannot decode %s as text, using empty value", type(raw).__name__)
    return ""


def decode_ip_address(raw: Any) -> str:
    """Decode an IP address given either as text or as 4 packed bytes."""
    if isinstance(raw, (bytes, bytearray)) and len(raw) == 4 and not _is_printable(raw):
        return str(ipaddress.IPv4Address(bytes(raw)))
    return decode_text(raw)


def decode_serial_number(raw: Any) -> str:
    """Decode an ONU serial number.

    Textual serials are returned trimmed with the index prefix removed.
    Packed 8-byte serials become vendor id + upper-case hex, e.g.
    b"ZTEG\\xc0\\xa8\\x01\\x01" -> "ZTEGC0A80101", even when the binary half
    happens to be printable.

    """
    if raw is None:
        return ""

    if isinstance(raw, str):
        raw = raw.encode("utf-8", errors="replace")

    if not isinstance(raw, (bytes, bytearray)):
        _LOGGER.warning("Unexpected serial number type %s", type(raw).__name__)
        return ""

    raw = bytes(raw)
    if _is_packed_serial(raw):
        return raw[:SERIAL_VENDOR_LENGTH].decode("ascii") + raw[SERIAL_VENDOR_LENGTH:].hex().upper()

    raw = raw.strip(b"\x00")
    if not raw:
        return ""

    if _is_printable(raw):
        serial = raw.decode("ascii").strip()
        if serial.startswith(SERIAL_INDEX_PREFIX):
            serial = serial[len(SERIAL_INDEX_PREFIX) :]
        return serial

    _LOGGER.warning("Malformed serial number %r, using empty value", raw)
    return ""


def decode_status(raw: Any) -> OnuStatus:
    """Decode the ONU phase state; unmapped values are Unknown."""
    if not _is_int(raw):
        if raw is not None:
            _LOGGER.warning("Unexpected status value %r, using Unknown", raw)
        return OnuStatus.UNKNOWN
    return ONU_PHASE_STATE_MAP.get(raw, OnuStatus.UNKNOWN)


def decode_optical_power(raw: Any) -> float | None:
    """Decode an Rx/Tx power reading to dBm."""
    if isinstance(raw, (bytes, bytearray, str)):
        text = decode_text(raw)
        try:
            raw = int(text)
        except ValueError:
            _LOGGER.warning("Cannot decode optical power %r", text)
            return None

    if not _is_int(raw):
        if raw is not None:
            _LOGGER.warning("Unexpected optical power value %r", raw)
        return None

    return round(raw * OPTICAL_POWER_FACTOR - OPTICAL_POWER_OFFSET, 2)


def decode_datetime(raw: Any) -> str:
    """Decode a packed DateAndTime value to "YYYY-MM-DD HH:MM:SS".

    An unset timestamp (zero year) decodes to an empty string, meaning never.

    """
    if raw is None:
        return ""
    if not isinstance(raw, (bytes, bytearray)) or len(raw) not in DATE_AND_TIME_LENGTHS:
        _LOGGER.warning("Malformed DateAndTime value %r", raw)
        return ""

    year = int.from_bytes(raw[0:2], "big")
    if year == 0:
        return ""

    try:
        value = datetime(year, raw[2], raw[3], raw[4], raw[5], raw[6])
    except ValueError as err:
        _LOGGER.warning("Invalid DateAndTime value %r: %s", bytes(raw), err)
        return ""

    return value.strftime(DATETIME_FORMAT)


def decode_optical_distance(raw: Any) -> str:
    """Decode the GPON optical distance to metres text."""
    if _is_int(raw) and raw >= 0:
        return str(raw)
    if raw is not None:
        _LOGGER.warning("Cannot decode optical distance %r", raw)
    return ""


def decode_offline_reason(raw: Any) -> str:
    """Decode the last offline reason code (or text) to its name."""
    if _is_int(raw):
        return OFFLINE_REASON_MAP.get(raw, "Unknown")
    return decode_text(raw)
