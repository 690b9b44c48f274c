"""Common fixtures for ZTE ONU exporter tests."""

from __future__ import annotations

import asyncio
from datetime import datetime, timedelta, timezone
from typing import Any
from unittest.mock import AsyncMock, MagicMock

import pytest

from zte_onu_exporter.zte_snmp_client.address_loader import AddressTableLoader
from zte_onu_exporter.zte_snmp_client.client import ZTESnmpClient
from zte_onu_exporter.zte_snmp_client.detail import build_onu_oids
from zte_onu_exporter.zte_snmp_client.exceptions import OLTConnectionError
from zte_onu_exporter.zte_snmp_client.utils import normalize_oid

# Test configuration values
TEST_HOST = "10.0.0.1"
TEST_COMMUNITY = "public"
TEST_UTC_OFFSET = timedelta(hours=7)
TEST_NOW = datetime(2024, 3, 1, 12, 0, 0, tzinfo=timezone(TEST_UTC_OFFSET))

# Raw SNMP values of one healthy ONU, as the client returns them
RAW_ONLINE_ONU: dict[str, Any] = {
    "name": b"customer-abc",
    "onu_type": b"ZTE-F660",
    "serial_number": b"1,ABC123",
    "rx_power": 7400,
    "tx_power": 16250,
    "status": 4,
    "ip_address": b"\x0a\x14\x1e\x28",
    "description": b"Jl. Merdeka 1",
    "last_online": b"\x07\xe8\x03\x01\x0a\x00\x00\x00",
    "last_offline": b"\x07\xe8\x03\x01\x09\x30\x00\x00",
    "last_offline_reason": 2,
    "gpon_optical_distance": 1234,
}


def date_and_time(year: int, month: int, day: int, hour: int, minute: int, second: int) -> bytes:
    """Pack an 8-byte SNMP DateAndTime value."""
    return year.to_bytes(2, "big") + bytes([month, day, hour, minute, second, 0])


class FakeOLT:
    """In-memory OLT answering walks and GETs through the real address table.

    ONUs are registered with raw attribute values; a GET returns every
    requested OID of one ONU with its raw value, or None when unset.
    """

    def __init__(self, resolver: AddressTableLoader) -> None:
        """Initialize an OLT without ONUs."""
        self.resolver = resolver
        self.names: dict[tuple[int, int], dict[int, Any]] = {}
        self.values: dict[str, Any] = {}
        self.onu_by_oid: dict[str, tuple[int, int, int]] = {}
        self.failing_cells: set[tuple[int, int]] = set()
        self.failing_onus: set[tuple[int, int, int]] = set()
        self.blocked_onus: set[tuple[int, int, int]] = set()
        self.walks: list[str] = []
        self.gets: list[list[str]] = []

    def add_onu(self, board: int, pon: int, onu_id: int, **raw: Any) -> None:
        """Provision one ONU with raw attribute values."""
        self.names.setdefault((board, pon), {})[onu_id] = raw.get("name", b"")
        oid_fields = build_onu_oids(self.resolver.resolve(board, pon), onu_id)
        for oid, field in oid_fields.items():
            self.onu_by_oid[oid] = (board, pon, onu_id)
            self.values[oid] = raw.get(field)

    def _cell_of_root(self, root_oid: str) -> tuple[int, int] | None:
        root = normalize_oid(root_oid)
        for board, pon in self.resolver.supported_ports():
            if normalize_oid(self.resolver.resolve(board, pon).id_name_root) == root:
                return (board, pon)
        return None

    async def async_walk(self, root_oid: str, visit) -> int:
        """Visit the id/name leaves of one PON."""
        self.walks.append(normalize_oid(root_oid))
        cell = self._cell_of_root(root_oid)
        if cell in self.failing_cells:
            raise OLTConnectionError("request timed out")
        names = self.names.get(cell, {})
        for onu_id, name in names.items():
            visit(f"{normalize_oid(root_oid)}.{onu_id}", name)
        return len(names)

    async def async_get(self, oids: list[str]) -> list[tuple[str, Any]]:
        """Answer one GET of one ONU."""
        self.gets.append(list(oids))
        onu = self.onu_by_oid.get(normalize_oid(oids[0]))
        if onu in self.blocked_onus:
            await asyncio.Event().wait()
        if onu in self.failing_onus:
            raise OLTConnectionError("request timed out")
        return [(normalize_oid(oid), self.values.get(normalize_oid(oid))) for oid in oids]


@pytest.fixture
def resolver() -> AddressTableLoader:
    """Return the bundled address table, loaded."""
    loader = AddressTableLoader()
    loader.load()
    return loader


@pytest.fixture
def fake_olt(resolver: AddressTableLoader) -> FakeOLT:
    """Return an empty fake OLT."""
    return FakeOLT(resolver)


@pytest.fixture
def mock_client() -> MagicMock:
    """Return a mock SNMP client."""
    client = MagicMock(spec=ZTESnmpClient)
    client.host = TEST_HOST
    client.async_get = AsyncMock(return_value=[])
    client.async_walk = AsyncMock(return_value=0)
    client.close = AsyncMock()
    return client
