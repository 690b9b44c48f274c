"""Tests for the Prometheus metrics."""

from __future__ import annotations

import pytest
from prometheus_client import CollectorRegistry

from zte_onu_exporter.metrics import OnuMetrics
from zte_onu_exporter.zte_snmp_client.constants import OnuStatus
from zte_onu_exporter.zte_snmp_client.models import OnuRecord, ScrapeResult

from .conftest import TEST_UTC_OFFSET


def _online_record(**overrides) -> OnuRecord:
    values = {
        "board": 1,
        "pon": 1,
        "onu_id": 3,
        "name": "customer-abc",
        "onu_type": "ZTE-F660",
        "serial_number": "ABC123",
        "rx_power": -15.2,
        "tx_power": 2.5,
        "status": OnuStatus.ONLINE,
        "ip_address": "10.20.30.40",
        "description": "Jl. Merdeka 1",
        "last_online": "1970-01-01 07:01:40",
        "last_offline": "1970-01-01 07:00:00",
        "last_offline_reason": "LOS",
        "gpon_optical_distance": "1234",
        "uptime": "0 days 2 hours 0 minutes 0 seconds",
        "last_down_duration": "0 days 0 hours 1 minutes 40 seconds",
    }
    values.update(overrides)
    return OnuRecord(**values)


def _result(*records: OnuRecord, **kwargs) -> ScrapeResult:
    return ScrapeResult(records={r.serial_number: r for r in records}, **kwargs)


@pytest.fixture
def metrics() -> OnuMetrics:
    """Return metrics in a fresh registry."""
    return OnuMetrics(CollectorRegistry(), utc_offset=TEST_UTC_OFFSET)


def _value(metrics: OnuMetrics, metric: str, **labels) -> float | None:
    return metrics.registry.get_sample_value(metric, labels)


class TestPublish:
    """Tests for OnuMetrics.publish."""

    def test_online_record(self, metrics: OnuMetrics) -> None:
        """Test every series of a healthy ONU."""
        metrics.publish(_result(_online_record()))

        assert _value(metrics, "zte_onu_status", serial_number="ABC123") == 1
        assert _value(metrics, "zte_onu_rx_power_dbm", serial_number="ABC123") == -15.2
        assert _value(metrics, "zte_onu_tx_power_dbm", serial_number="ABC123") == 2.5
        assert _value(metrics, "zte_onu_uptime_seconds", serial_number="ABC123") == 7200
        assert _value(metrics, "zte_onu_last_down_duration_seconds", serial_number="ABC123") == 100
        assert _value(metrics, "zte_onu_last_online_timestamp_seconds", serial_number="ABC123") == 100
        assert _value(metrics, "zte_onu_last_offline_timestamp_seconds", serial_number="ABC123") == 0
        assert _value(metrics, "zte_onu_gpon_optical_distance_meters", serial_number="ABC123") == 1234

    def test_mapping_info(self, metrics: OnuMetrics) -> None:
        """Test the info series carries the static attributes."""
        metrics.publish(_result(_online_record()))

        assert (
            _value(
                metrics,
                "zte_onu_mapping_info",
                board="1",
                pon="1",
                onu_id="3",
                name="customer-abc",
                serial_number="ABC123",
                onu_type="ZTE-F660",
                description="Jl. Merdeka 1",
                offline_reason="LOS",
                ip_address="10.20.30.40",
            )
            == 1
        )

    @pytest.mark.parametrize(
        "status", [OnuStatus.LOS, OnuStatus.DYING_GASP, OnuStatus.POWER_OFF, OnuStatus.UNKNOWN]
    )
    def test_no_power_when_not_online(self, metrics: OnuMetrics, status: OnuStatus) -> None:
        """Test power series are only populated for online ONUs."""
        metrics.publish(_result(_online_record(status=status)))

        assert _value(metrics, "zte_onu_status", serial_number="ABC123") == status.numeric
        assert _value(metrics, "zte_onu_rx_power_dbm", serial_number="ABC123") is None
        assert _value(metrics, "zte_onu_tx_power_dbm", serial_number="ABC123") is None

    def test_out_of_range_power_excluded(self, metrics: OnuMetrics) -> None:
        """Test a reading of 100 or more is never exported."""
        metrics.publish(_result(_online_record(rx_power=100.0, tx_power=131.07)))

        assert _value(metrics, "zte_onu_rx_power_dbm", serial_number="ABC123") is None
        assert _value(metrics, "zte_onu_tx_power_dbm", serial_number="ABC123") is None

    def test_missing_power_excluded(self, metrics: OnuMetrics) -> None:
        """Test an undecodable reading is not exported."""
        metrics.publish(_result(_online_record(rx_power=None)))

        assert _value(metrics, "zte_onu_rx_power_dbm", serial_number="ABC123") is None
        assert _value(metrics, "zte_onu_tx_power_dbm", serial_number="ABC123") == 2.5

    def test_unknown_times_are_zero(self, metrics: OnuMetrics) -> None:
        """Test empty timestamps and durations export as 0."""
        metrics.publish(
            _result(_online_record(last_online="", last_offline="", uptime="", last_down_duration=""))
        )

        assert _value(metrics, "zte_onu_uptime_seconds", serial_number="ABC123") == 0
        assert _value(metrics, "zte_onu_last_down_duration_seconds", serial_number="ABC123") == 0
        assert _value(metrics, "zte_onu_last_online_timestamp_seconds", serial_number="ABC123") == 0

    def test_distance_omitted_when_empty(self, metrics: OnuMetrics) -> None:
        """Test no distance series without a decoded distance."""
        metrics.publish(_result(_online_record(gpon_optical_distance="")))

        assert _value(metrics, "zte_onu_gpon_optical_distance_meters", serial_number="ABC123") is None

    def test_reset_before_populate(self, metrics: OnuMetrics) -> None:
        """Test ONUs missing from the next result disappear."""
        metrics.publish(_result(_online_record(), _online_record(serial_number="GONE01", onu_id=4)))
        metrics.publish(_result(_online_record(status=OnuStatus.LOS)))

        assert _value(metrics, "zte_onu_status", serial_number="GONE01") is None
        assert _value(metrics, "zte_onu_status", serial_number="ABC123") == 3
        assert _value(metrics, "zte_onu_rx_power_dbm", serial_number="ABC123") is None

    def test_scrape_metrics(self, metrics: OnuMetrics) -> None:
        """Test the exporter self-metrics."""
        metrics.publish(_result(_online_record(), partial=True, failed_fetches=2, duration=1.5))

        assert _value(metrics, "zte_exporter_scrape_onus") == 1
        assert _value(metrics, "zte_exporter_scrape_partial") == 1
        assert _value(metrics, "zte_exporter_scrape_failed_fetches") == 2
        assert _value(metrics, "zte_exporter_scrape_duration_seconds") == 1.5


class TestRender:
    """Tests for the text exposition."""

    def test_render(self, metrics: OnuMetrics) -> None:
        """Test the rendered text holds the ONU series."""
        metrics.publish(_result(_online_record()))

        text = metrics.render().decode()

        assert 'zte_onu_status{serial_number="ABC123"} 1.0' in text
        assert "# TYPE zte_onu_rx_power_dbm gauge" in text

    def test_registries_are_independent(self) -> None:
        """Test two exporters do not share series."""
        first = OnuMetrics()
        second = OnuMetrics()
        first.publish(_result(_online_record()))

        assert second.registry.get_sample_value("zte_onu_status", {"serial_number": "ABC123"}) is None
