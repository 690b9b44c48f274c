"""Data models."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from .constants import OnuStatus


@dataclass(frozen=True)
class AddressSet:
    """OID sub-addresses of every ONU attribute on one board/PON."""

    board_id: int
    pon_id: int
    base_oid_1: str
    base_oid_2: str
    onu_id_name_oid: str
    onu_type_oid: str
    onu_serial_number_oid: str
    onu_rx_power_oid: str
    onu_tx_power_oid: str
    onu_status_oid: str
    onu_ip_address_oid: str
    onu_description_oid: str
    onu_last_online_oid: str
    onu_last_offline_oid: str
    onu_last_offline_reason_oid: str
    onu_gpon_optical_distance_oid: str

    @property
    def id_name_root(self) -> str:
        """Subtree walked to list the provisioned ONUs."""
        return self.base_oid_1 + self.onu_id_name_oid


@dataclass(frozen=True)
class OnuSummary:
    """ONU found on a PON by discovery."""

    board: int
    pon: int
    onu_id: int
    name: str


@dataclass
class OnuRecord:
    """Decoded ONU details."""

    board: int
    pon: int
    onu_id: int
    name: str = ""
    onu_type: str = ""
    serial_number: str = ""
    rx_power: float | None = None
    tx_power: float | None = None
    status: OnuStatus = OnuStatus.UNKNOWN
    ip_address: str = ""
    description: str = ""
    last_online: str = ""
    last_offline: str = ""
    last_offline_reason: str = ""
    gpon_optical_distance: str = ""
    uptime: str = ""
    last_down_duration: str = ""


@dataclass(frozen=True)
class ScrapeResult:
    """Outcome of one collection cycle, keyed by serial number."""

    records: Mapping[str, OnuRecord] = field(default_factory=dict)
    partial: bool = False
    jobs: int = 0
    failed_fetches: int = 0
    failed_cells: tuple[tuple[int, int], ...] = ()
    duration: float = 0.0

    def __post_init__(self) -> None:
        """Freeze the record mapping."""
        object.__setattr__(self, "records", MappingProxyType(dict(self.records)))

    def __len__(self) -> int:
        """Return the number of ONUs in the result."""
        return len(self.records)
