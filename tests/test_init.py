"""Tests for exporter setup."""

from __future__ import annotations

from datetime import timedelta

import pytest

from zte_onu_exporter import async_setup_exporter, async_unload_exporter
from zte_onu_exporter.config import ExporterConfig
from zte_onu_exporter.coordinator import CollectionPhase

from .conftest import TEST_HOST


class TestSetupExporter:
    """Tests for async_setup_exporter."""

    @pytest.mark.asyncio
    async def test_wires_configuration(self) -> None:
        """Test configuration reaches the client and coordinator."""
        config = ExporterConfig(
            host=TEST_HOST,
            community="secret",
            board_max=1,
            pon_min=2,
            pon_max=4,
            max_concurrent=5,
            scrape_timeout=12,
            utc_offset_hours=8,
        )

        runtime_data = await async_setup_exporter(config)

        assert runtime_data.resolver.loaded is True
        assert runtime_data.client.host == TEST_HOST
        assert runtime_data.client.community == "secret"
        coordinator = runtime_data.coordinator
        assert (coordinator.board_min, coordinator.board_max) == (1, 1)
        assert (coordinator.pon_min, coordinator.pon_max) == (2, 4)
        assert coordinator.max_concurrent == 5
        assert coordinator.deadline == 12
        assert coordinator.utc_offset == timedelta(hours=8)
        assert coordinator.phase is CollectionPhase.IDLE
        assert runtime_data.metrics.utc_offset == timedelta(hours=8)

        await async_unload_exporter(runtime_data)
