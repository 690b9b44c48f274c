"""Prometheus metrics for the ZTE ONU exporter."""

from __future__ import annotations

import logging
from datetime import timedelta

from prometheus_client import CONTENT_TYPE_LATEST, CollectorRegistry, Gauge, generate_latest

from .const import (
    DEFAULT_UTC_OFFSET_HOURS,
    EXPORTER_METRIC_PREFIX,
    METRIC_PREFIX,
    POWER_READING_CEILING,
)
from .zte_snmp_client.constants import OnuStatus
from .zte_snmp_client.models import OnuRecord, ScrapeResult
from .zte_snmp_client.utils import parse_duration_seconds, to_epoch

_LOGGER = logging.getLogger(__name__)

SERIAL_LABEL = ["serial_number"]

MAPPING_INFO_LABELS = [
    "board",
    "pon",
    "onu_id",
    "name",
    "serial_number",
    "onu_type",
    "description",
    "offline_reason",
    "ip_address",
]

CONTENT_TYPE = CONTENT_TYPE_LATEST


def _power_reading(status: OnuStatus, value: float | None) -> float | None:
    """Return the power value to export, or None when it must be left out."""
    if status != OnuStatus.ONLINE or value is None:
        return None
    if value >= POWER_READING_CEILING:
        return None
    return value


class OnuMetrics:
    """Gauges of one exporter, held in a registry of their own.

    publish() replaces the whole exported state with one ScrapeResult, so an
    ONU that disappears from the OLT also disappears from the next scrape.
    """

    def __init__(
        self,
        registry: CollectorRegistry | None = None,
        utc_offset: timedelta = timedelta(hours=DEFAULT_UTC_OFFSET_HOURS),
    ) -> None:
        """Create the gauges.

        Args:
            registry: Registry to register into, a new one if None
            utc_offset: UTC offset of the OLT clock, for timestamp series

        """
        self.registry = registry if registry is not None else CollectorRegistry()
        self.utc_offset = utc_offset

        def onu_gauge(name: str, documentation: str, labels: list[str] = SERIAL_LABEL) -> Gauge:
            return Gauge(
                f"{METRIC_PREFIX}_{name}", documentation, labels, registry=self.registry
            )

        def exporter_gauge(name: str, documentation: str) -> Gauge:
            return Gauge(f"{EXPORTER_METRIC_PREFIX}_{name}", documentation, registry=self.registry)

        self.status = onu_gauge(
            "status",
            "ONU status (1: Online, 2: Dying Gasp, 3: LOS, 4: Power-Off, 0: Unknown)",
        )
        self.mapping_info = onu_gauge(
            "mapping_info",
            "Static ONU attributes, value is always 1",
            MAPPING_INFO_LABELS,
        )
        self.rx_power = onu_gauge("rx_power_dbm", "ONU receive optical power in dBm")
        self.tx_power = onu_gauge("tx_power_dbm", "ONU transmit optical power in dBm")
        self.uptime = onu_gauge("uptime_seconds", "Seconds since the ONU last came online")
        self.last_down_duration = onu_gauge(
            "last_down_duration_seconds", "Length of the last ONU outage in seconds"
        )
        self.last_online = onu_gauge(
            "last_online_timestamp_seconds", "Unix time the ONU last came online"
        )
        self.last_offline = onu_gauge(
            "last_offline_timestamp_seconds", "Unix time the ONU last went offline"
        )
        self.optical_distance = onu_gauge(
            "gpon_optical_distance_meters", "GPON optical distance to the ONU in metres"
        )
        self._onu_gauges = [
            self.status,
            self.mapping_info,
            self.rx_power,
            self.tx_power,
            self.uptime,
            self.last_down_duration,
            self.last_online,
            self.last_offline,
            self.optical_distance,
        ]

        self.scrape_duration = exporter_gauge(
            "scrape_duration_seconds", "Duration of the last collection cycle"
        )
        self.scrape_onus = exporter_gauge("scrape_onus", "ONUs exported by the last cycle")
        self.scrape_partial = exporter_gauge(
            "scrape_partial", "1 if the last cycle hit its deadline"
        )
        self.scrape_failed_fetches = exporter_gauge(
            "scrape_failed_fetches", "ONU detail fetches that failed in the last cycle"
        )

    def publish(self, result: ScrapeResult) -> None:
        """Replace the exported series with the records of one cycle."""
        for gauge in self._onu_gauges:
            gauge.clear()

        for record in result.records.values():
            self._publish_record(record)

        self.scrape_duration.set(result.duration)
        self.scrape_onus.set(len(result))
        self.scrape_partial.set(1 if result.partial else 0)
        self.scrape_failed_fetches.set(result.failed_fetches)

        _LOGGER.debug("Published metrics for %d ONUs", len(result))

    def _publish_record(self, record: OnuRecord) -> None:
        serial = record.serial_number

        self.mapping_info.labels(
            board=str(record.board),
            pon=str(record.pon),
            onu_id=str(record.onu_id),
            name=record.name,
            serial_number=serial,
            onu_type=record.onu_type,
            description=record.description,
            offline_reason=record.last_offline_reason,
            ip_address=record.ip_address,
        ).set(1)
        self.status.labels(serial).set(record.status.numeric)

        rx_power = _power_reading(record.status, record.rx_power)
        if rx_power is not None:
            self.rx_power.labels(serial).set(rx_power)
        tx_power = _power_reading(record.status, record.tx_power)
        if tx_power is not None:
            self.tx_power.labels(serial).set(tx_power)

        self.uptime.labels(serial).set(parse_duration_seconds(record.uptime))
        self.last_down_duration.labels(serial).set(
            parse_duration_seconds(record.last_down_duration)
        )
        self.last_online.labels(serial).set(to_epoch(record.last_online, self.utc_offset))
        self.last_offline.labels(serial).set(to_epoch(record.last_offline, self.utc_offset))

        if record.gpon_optical_distance:
            try:
                distance = float(record.gpon_optical_distance)
            except ValueError:
                _LOGGER.warning(
                    "Could not parse optical distance %r of ONU %s",
                    record.gpon_optical_distance,
                    serial,
                )
            else:
                self.optical_distance.labels(serial).set(distance)

    def render(self) -> bytes:
        """Return the registry in the Prometheus text format."""
        return generate_latest(self.registry)
