"""ZTE OID address table loader.

Loads the zte-c320-address-table.json file to provide, for every supported
board/PON pair, the OID sub-addresses of each ONU attribute:
- ONU id/name, type, serial number, description
- Rx/Tx optical power, status, IP address
- last online/offline timestamps, last offline reason, optical distance

The OLT assigns every PON its own sub-tree and the index offsets differ
between attribute branches, so the table is data rather than arithmetic.
"""

from __future__ import annotations

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from .exceptions import AddressNotFoundError, OLTClientError, OLTDecodeError
from .models import AddressSet

_LOGGER = logging.getLogger(__name__)

# JSON port entry key -> AddressSet field
_ATTRIBUTE_FIELDS = {
    "onu_id_name": "onu_id_name_oid",
    "onu_type": "onu_type_oid",
    "onu_serial_number": "onu_serial_number_oid",
    "onu_rx_power": "onu_rx_power_oid",
    "onu_tx_power": "onu_tx_power_oid",
    "onu_status": "onu_status_oid",
    "onu_ip_address": "onu_ip_address_oid",
    "onu_description": "onu_description_oid",
    "onu_last_online": "onu_last_online_oid",
    "onu_last_offline": "onu_last_offline_oid",
    "onu_last_offline_reason": "onu_last_offline_reason_oid",
    "onu_gpon_optical_distance": "onu_gpon_optical_distance_oid",
}


class AddressTableLoader:
    """Load and resolve per board/PON OID address sets."""

    def __init__(self, table_file_path: str | Path | None = None):
        """Initialize the address table loader.

        Args:
            table_file_path: Path to an address table JSON file.
                             If None, the table bundled with this library is used.

        """
        self._addresses: dict[tuple[int, int], AddressSet] = {}
        self._olt_model = ""
        self._loaded = False

        if table_file_path is None:
            module_dir = Path(__file__).parent
            table_file_path = module_dir / "data" / "zte-c320-address-table.json"

        self._table_file_path = Path(table_file_path)

    @property
    def loaded(self) -> bool:
        """Return True once the table has been loaded."""
        return self._loaded

    @property
    def olt_model(self) -> str:
        """OLT model the table was written for."""
        return self._olt_model

    async def async_load(self) -> None:
        """Load the address table asynchronously.

        Safe to call multiple times - will only load once.

        Raises:
            FileNotFoundError: If the table file does not exist
            OLTDecodeError: If the table file is malformed

        """
        if self._loaded:
            return

        table = await asyncio.to_thread(self._read_and_parse_json, self._table_file_path)
        self._build_index(table)
        self._loaded = True

    def load(self) -> None:
        """Load the address table synchronously."""
        if self._loaded:
            return

        self._build_index(self._read_and_parse_json(self._table_file_path))
        self._loaded = True

    def _read_and_parse_json(self, file_path: Path) -> dict[str, Any]:
        """Read and parse the JSON file (runs in thread pool)."""
        _LOGGER.debug("Loading OID address table from %s", file_path)
        content = file_path.read_text(encoding="utf-8")
        try:
            return json.loads(content)
        except json.JSONDecodeError as err:
            raise OLTDecodeError(f"Invalid address table {file_path}: {err}") from err

    def _build_index(self, table: dict[str, Any]) -> None:
        """Build the (board, pon) index from the parsed table."""
        try:
            base_oid_1 = table["base_oid_1"]
            base_oid_2 = table["base_oid_2"]
            ports = table["ports"]
        except (KeyError, TypeError) as err:
            raise OLTDecodeError(f"Address table missing required key: {err}") from err

        addresses: dict[tuple[int, int], AddressSet] = {}
        for entry in ports:
            try:
                key = (int(entry["board"]), int(entry["pon"]))
                oids = {field: entry[name] for name, field in _ATTRIBUTE_FIELDS.items()}
            except (KeyError, TypeError, ValueError) as err:
                raise OLTDecodeError(f"Malformed address table entry {entry!r}: {err}") from err

            if key in addresses:
                raise OLTDecodeError(f"Duplicate address table entry for board {key[0]} PON {key[1]}")

            addresses[key] = AddressSet(
                board_id=key[0],
                pon_id=key[1],
                base_oid_1=base_oid_1,
                base_oid_2=base_oid_2,
                **oids,
            )

        self._addresses = addresses
        self._olt_model = table.get("olt_model", "")

        _LOGGER.info(
            "Loaded %d OID address sets for %s (%d boards)",
            len(self._addresses),
            self._olt_model or "unknown OLT",
            len({board for board, _ in self._addresses}),
        )

    def resolve(self, board_id: int, pon_id: int) -> AddressSet:
        """Get the address set of one board/PON.

        Raises:
            AddressNotFoundError: If the pair is not in the table
            OLTClientError: If the table has not been loaded

        """
        if not self._loaded:
            raise OLTClientError("Address table not loaded, call async_load() first")

        address_set = self._addresses.get((board_id, pon_id))
        if address_set is None:
            raise AddressNotFoundError(board_id, pon_id)
        return address_set

    def supported_ports(self) -> list[tuple[int, int]]:
        """Get every (board, pon) pair of the table, sorted."""
        return sorted(self._addresses)
