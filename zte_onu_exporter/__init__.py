"""ZTE ONU Exporter.

Polls a ZTE C320 OLT over SNMP and exposes per-ONU telemetry to Prometheus.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import ExporterConfig
from .const import DOMAIN, STARTUP_MESSAGE
from .coordinator import ONUCollectionCoordinator
from .metrics import OnuMetrics
from .zte_snmp_client.address_loader import AddressTableLoader
from .zte_snmp_client.client import ZTESnmpClient

_LOGGER = logging.getLogger(__name__)


@dataclass
class RuntimeData:
    """Objects shared by the HTTP handlers for the exporter's lifetime."""

    client: ZTESnmpClient
    resolver: AddressTableLoader
    coordinator: ONUCollectionCoordinator
    metrics: OnuMetrics


async def async_setup_exporter(config: ExporterConfig) -> RuntimeData:
    """Set up the SNMP client, address table, coordinator and metrics.

    Raises:
        OLTDecodeError: If the address table is malformed

    """
    _LOGGER.info(STARTUP_MESSAGE)

    _LOGGER.debug(
        "Setting up exporter: host=%s, port=%d, boards=%d..%d, pons=%d..%d",
        config.host,
        config.port,
        config.board_min,
        config.board_max,
        config.pon_min,
        config.pon_max,
    )

    resolver = AddressTableLoader()
    await resolver.async_load()

    client = ZTESnmpClient(
        host=config.host,
        community=config.community,
        port=config.port,
        timeout=config.snmp_timeout,
        retries=config.snmp_retries,
    )

    coordinator = ONUCollectionCoordinator(
        client,
        resolver,
        board_min=config.board_min,
        board_max=config.board_max,
        pon_min=config.pon_min,
        pon_max=config.pon_max,
        max_concurrent=config.max_concurrent,
        deadline=config.scrape_timeout,
        utc_offset=config.utc_offset,
    )

    _LOGGER.info(
        "Successfully set up %s for %s OLT at %s", DOMAIN, resolver.olt_model, config.host
    )
    return RuntimeData(
        client=client,
        resolver=resolver,
        coordinator=coordinator,
        metrics=OnuMetrics(utc_offset=config.utc_offset),
    )


async def async_unload_exporter(runtime_data: RuntimeData) -> None:
    """Release the SNMP client."""
    _LOGGER.debug("Unloading exporter")
    await runtime_data.client.close()
