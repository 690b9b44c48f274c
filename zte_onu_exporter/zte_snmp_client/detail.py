"""ONU detail fetching.

One ONU is read with a single GET carrying the OIDs of all its attributes.
Replies are matched back to attributes by OID, not by position, and decoded
field by field; uptime and last down duration are derived from the decoded
timestamps.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any

from .address_loader import AddressTableLoader
from .client import ZTESnmpClient
from .constants import DEFAULT_UTC_OFFSET_HOURS, INTERFACE_SUFFIX
from .decoder import (
    decode_datetime,
    decode_ip_address,
    decode_offline_reason,
    decode_optical_distance,
    decode_optical_power,
    decode_serial_number,
    decode_status,
    decode_text,
)
from .discovery import async_discover_onus
from .exceptions import OLTConnectionError
from .models import AddressSet, OnuRecord
from .utils import format_duration, normalize_oid, parse_device_datetime

_LOGGER = logging.getLogger(__name__)

# OnuRecord field -> decoder of its raw value
FIELD_DECODERS: dict[str, Callable[[Any], Any]] = {
    "name": decode_text,
    "onu_type": decode_text,
    "serial_number": decode_serial_number,
    "rx_power": decode_optical_power,
    "tx_power": decode_optical_power,
    "status": decode_status,
    "ip_address": decode_ip_address,
    "description": decode_text,
    "last_online": decode_datetime,
    "last_offline": decode_datetime,
    "last_offline_reason": decode_offline_reason,
    "gpon_optical_distance": decode_optical_distance,
}


def build_onu_oids(address_set: AddressSet, onu_id: int) -> dict[str, str]:
    """Build the OID of every attribute of one ONU.

    Returns:
        Normalised OID -> OnuRecord field name

    """
    base1 = address_set.base_oid_1
    base2 = address_set.base_oid_2
    onu = str(onu_id)
    interface = f"{onu}.{INTERFACE_SUFFIX}"

    oids = {
        "name": f"{base1}{address_set.onu_id_name_oid}.{onu}",
        "onu_type": f"{base2}{address_set.onu_type_oid}.{onu}",
        "serial_number": f"{base1}{address_set.onu_serial_number_oid}.{onu}",
        "rx_power": f"{base1}{address_set.onu_rx_power_oid}.{interface}",
        "tx_power": f"{base2}{address_set.onu_tx_power_oid}.{interface}",
        "status": f"{base1}{address_set.onu_status_oid}.{onu}",
        "ip_address": f"{base2}{address_set.onu_ip_address_oid}.{interface}",
        "description": f"{base1}{address_set.onu_description_oid}.{onu}",
        "last_online": f"{base1}{address_set.onu_last_online_oid}.{onu}",
        "last_offline": f"{base1}{address_set.onu_last_offline_oid}.{onu}",
        "last_offline_reason": f"{base1}{address_set.onu_last_offline_reason_oid}.{onu}",
        "gpon_optical_distance": f"{base1}{address_set.onu_gpon_optical_distance_oid}.{onu}",
    }
    return {normalize_oid(oid): field for field, oid in oids.items()}


def compute_uptime(last_online: str, utc_offset: timedelta, now: datetime) -> str:
    """Time since the ONU last came online, empty if that is unknown."""
    online_at = parse_device_datetime(last_online, utc_offset)
    if online_at is None:
        return ""
    return format_duration(now - online_at)


def compute_last_down_duration(last_offline: str, last_online: str, utc_offset: timedelta) -> str:
    """Length of the last outage.

    Empty when either timestamp is unknown, or when the last offline event is
    newer than the last online event (the ONU is still down).

    """
    offline_at = parse_device_datetime(last_offline, utc_offset)
    online_at = parse_device_datetime(last_online, utc_offset)
    if offline_at is None or online_at is None:
        return ""

    duration = online_at - offline_at
    if duration < timedelta(0):
        return ""
    return format_duration(duration)


async def async_fetch_onu_detail(
    client: ZTESnmpClient,
    resolver: AddressTableLoader,
    board_id: int,
    pon_id: int,
    onu_id: int,
    *,
    utc_offset: timedelta = timedelta(hours=DEFAULT_UTC_OFFSET_HOURS),
    now: datetime | None = None,
) -> OnuRecord:
    """Fetch and decode every attribute of one ONU.

    Args:
        client: SNMP client of the OLT
        resolver: Loaded address table
        board_id: OLT board (slot) number
        pon_id: PON port number on the board
        onu_id: ONU id on the PON
        utc_offset: UTC offset of the OLT clock
        now: Current time, defaults to the wall clock

    Returns:
        Decoded ONU record

    Raises:
        AddressNotFoundError: If the board/PON is not in the address table
        OLTConnectionError: If the GET fails

    """
    oid_fields = build_onu_oids(resolver.resolve(board_id, pon_id), onu_id)

    _LOGGER.debug(
        "Fetching ONU details with a single GET: board %d PON %d ONU %d",
        board_id,
        pon_id,
        onu_id,
    )
    pairs = await client.async_get(list(oid_fields))

    record = OnuRecord(board=board_id, pon=pon_id, onu_id=onu_id)
    for oid, value in pairs:
        field = oid_fields.get(normalize_oid(oid))
        if field is None:
            _LOGGER.debug("Ignoring unexpected OID %s in reply", oid)
            continue
        setattr(record, field, FIELD_DECODERS[field](value))

    if now is None:
        now = datetime.now(timezone.utc)
    record.uptime = compute_uptime(record.last_online, utc_offset, now)
    record.last_down_duration = compute_last_down_duration(
        record.last_offline, record.last_online, utc_offset
    )
    return record


async def async_get_onu_serial_numbers(
    client: ZTESnmpClient,
    resolver: AddressTableLoader,
    board_id: int,
    pon_id: int,
) -> list[tuple[int, str]]:
    """List (ONU id, serial number) for every ONU on one board/PON.

    ONUs whose detail fetch fails are left out.

    """
    serials: list[tuple[int, str]] = []
    for onu in await async_discover_onus(client, resolver, board_id, pon_id):
        try:
            record = await async_fetch_onu_detail(client, resolver, board_id, pon_id, onu.onu_id)
        except OLTConnectionError as err:
            _LOGGER.warning(
                "Skipping ONU %d on board %d PON %d: %s", onu.onu_id, board_id, pon_id, err
            )
            continue
        serials.append((onu.onu_id, record.serial_number))
    return serials
