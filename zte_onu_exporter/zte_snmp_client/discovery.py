"""ONU discovery for ZTE OLT PON ports.

This module lists the ONUs provisioned on one board/PON by walking the ONU
id/name subtree once. Each leaf of that subtree is indexed by ONU id, so the
walk yields both the ids in use and the configured ONU names.
"""

from __future__ import annotations

import logging
from typing import Any

from .address_loader import AddressTableLoader
from .client import ZTESnmpClient
from .constants import MAX_ONU_ID
from .decoder import decode_text
from .models import OnuSummary
from .utils import last_arc

_LOGGER = logging.getLogger(__name__)


async def _walk_onu_names(
    client: ZTESnmpClient,
    resolver: AddressTableLoader,
    board_id: int,
    pon_id: int,
) -> dict[int, str]:
    """Walk the id/name subtree of one PON and map ONU id to name."""
    address_set = resolver.resolve(board_id, pon_id)
    names: dict[int, str] = {}

    def visit(oid: str, value: Any) -> None:
        try:
            onu_id = last_arc(oid)
        except ValueError:
            _LOGGER.warning("Skipping ONU name leaf with non-numeric index: %s", oid)
            return
        names[onu_id] = decode_text(value)

    await client.async_walk(address_set.id_name_root, visit)
    return names


async def async_discover_onus(
    client: ZTESnmpClient,
    resolver: AddressTableLoader,
    board_id: int,
    pon_id: int,
) -> list[OnuSummary]:
    """Discover the ONUs provisioned on one board/PON.

    Args:
        client: SNMP client of the OLT
        resolver: Loaded address table
        board_id: OLT board (slot) number
        pon_id: PON port number on the board

    Returns:
        ONU summaries sorted by ONU id

    Raises:
        AddressNotFoundError: If the board/PON is not in the address table
        OLTConnectionError: If the walk fails

    """
    _LOGGER.debug("Discovering ONUs on board %d PON %d", board_id, pon_id)

    names = await _walk_onu_names(client, resolver, board_id, pon_id)
    onus = [
        OnuSummary(board=board_id, pon=pon_id, onu_id=onu_id, name=name)
        for onu_id, name in sorted(names.items())
    ]

    _LOGGER.info("Discovered %d ONUs on board %d PON %d", len(onus), board_id, pon_id)
    return onus


async def async_get_empty_onu_ids(
    client: ZTESnmpClient,
    resolver: AddressTableLoader,
    board_id: int,
    pon_id: int,
) -> list[int]:
    """List the ONU ids still free on one board/PON, ascending."""
    names = await _walk_onu_names(client, resolver, board_id, pon_id)
    return [onu_id for onu_id in range(1, MAX_ONU_ID + 1) if onu_id not in names]
