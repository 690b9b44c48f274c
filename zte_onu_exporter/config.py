"""Exporter configuration read from the environment."""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import timedelta

import voluptuous as vol

from .const import (
    CONF_BOARD_MAX,
    CONF_BOARD_MIN,
    CONF_COMMUNITY,
    CONF_HOST,
    CONF_LISTEN_HOST,
    CONF_LISTEN_PORT,
    CONF_LOG_LEVEL,
    CONF_MAX_CONCURRENT,
    CONF_PON_MAX,
    CONF_PON_MIN,
    CONF_PORT,
    CONF_SCRAPE_TIMEOUT,
    CONF_SNMP_RETRIES,
    CONF_SNMP_TIMEOUT,
    CONF_UTC_OFFSET_HOURS,
    DEFAULT_BOARD_MAX,
    DEFAULT_BOARD_MIN,
    DEFAULT_COMMUNITY,
    DEFAULT_LISTEN_HOST,
    DEFAULT_LISTEN_PORT,
    DEFAULT_LOG_LEVEL,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_PON_MAX,
    DEFAULT_PON_MIN,
    DEFAULT_PORT,
    DEFAULT_SCRAPE_TIMEOUT,
    DEFAULT_SNMP_RETRIES,
    DEFAULT_SNMP_TIMEOUT,
    DEFAULT_UTC_OFFSET_HOURS,
    MAX_BOARD,
    MAX_CONCURRENT,
    MAX_PON,
    MAX_SCRAPE_TIMEOUT,
    MIN_BOARD,
    MIN_PON,
    MIN_SCRAPE_TIMEOUT,
)

_LOGGER = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _port_number():
    return vol.All(vol.Coerce(int), vol.Range(min=1, max=65535))


CONFIG_SCHEMA = vol.Schema(
    {
        vol.Required(CONF_HOST): vol.All(str, vol.Strip, vol.Length(min=1)),
        vol.Optional(CONF_PORT, default=DEFAULT_PORT): _port_number(),
        vol.Optional(CONF_COMMUNITY, default=DEFAULT_COMMUNITY): str,
        vol.Optional(CONF_SNMP_TIMEOUT, default=DEFAULT_SNMP_TIMEOUT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=60)
        ),
        vol.Optional(CONF_SNMP_RETRIES, default=DEFAULT_SNMP_RETRIES): vol.All(
            vol.Coerce(int), vol.Range(min=0, max=5)
        ),
        vol.Optional(CONF_BOARD_MIN, default=DEFAULT_BOARD_MIN): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_BOARD, max=MAX_BOARD)
        ),
        vol.Optional(CONF_BOARD_MAX, default=DEFAULT_BOARD_MAX): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_BOARD, max=MAX_BOARD)
        ),
        vol.Optional(CONF_PON_MIN, default=DEFAULT_PON_MIN): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_PON, max=MAX_PON)
        ),
        vol.Optional(CONF_PON_MAX, default=DEFAULT_PON_MAX): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_PON, max=MAX_PON)
        ),
        vol.Optional(CONF_MAX_CONCURRENT, default=DEFAULT_MAX_CONCURRENT): vol.All(
            vol.Coerce(int), vol.Range(min=1, max=MAX_CONCURRENT)
        ),
        vol.Optional(CONF_SCRAPE_TIMEOUT, default=DEFAULT_SCRAPE_TIMEOUT): vol.All(
            vol.Coerce(int), vol.Range(min=MIN_SCRAPE_TIMEOUT, max=MAX_SCRAPE_TIMEOUT)
        ),
        vol.Optional(CONF_UTC_OFFSET_HOURS, default=DEFAULT_UTC_OFFSET_HOURS): vol.All(
            vol.Coerce(int), vol.Range(min=-12, max=14)
        ),
        vol.Optional(CONF_LISTEN_HOST, default=DEFAULT_LISTEN_HOST): str,
        vol.Optional(CONF_LISTEN_PORT, default=DEFAULT_LISTEN_PORT): _port_number(),
        vol.Optional(CONF_LOG_LEVEL, default=DEFAULT_LOG_LEVEL): vol.All(
            str, vol.Upper, vol.In(_LOG_LEVELS)
        ),
    },
    extra=vol.REMOVE_EXTRA,
)


@dataclass(frozen=True)
class ExporterConfig:
    """Validated exporter settings."""

    host: str
    port: int = DEFAULT_PORT
    community: str = DEFAULT_COMMUNITY
    snmp_timeout: int = DEFAULT_SNMP_TIMEOUT
    snmp_retries: int = DEFAULT_SNMP_RETRIES
    board_min: int = DEFAULT_BOARD_MIN
    board_max: int = DEFAULT_BOARD_MAX
    pon_min: int = DEFAULT_PON_MIN
    pon_max: int = DEFAULT_PON_MAX
    max_concurrent: int = DEFAULT_MAX_CONCURRENT
    scrape_timeout: int = DEFAULT_SCRAPE_TIMEOUT
    utc_offset_hours: int = DEFAULT_UTC_OFFSET_HOURS
    listen_host: str = DEFAULT_LISTEN_HOST
    listen_port: int = DEFAULT_LISTEN_PORT
    log_level: str = DEFAULT_LOG_LEVEL

    @property
    def utc_offset(self) -> timedelta:
        """UTC offset of the OLT clock."""
        return timedelta(hours=self.utc_offset_hours)


def _check_ranges(data: dict) -> dict:
    if data[CONF_BOARD_MIN] > data[CONF_BOARD_MAX]:
        raise vol.Invalid(
            f"{CONF_BOARD_MIN} ({data[CONF_BOARD_MIN]}) exceeds "
            f"{CONF_BOARD_MAX} ({data[CONF_BOARD_MAX]})"
        )
    if data[CONF_PON_MIN] > data[CONF_PON_MAX]:
        raise vol.Invalid(
            f"{CONF_PON_MIN} ({data[CONF_PON_MIN]}) exceeds {CONF_PON_MAX} ({data[CONF_PON_MAX]})"
        )
    return data


def load_config(environ: Mapping[str, str] | None = None) -> ExporterConfig:
    """Validate exporter settings from environment variables.

    Variables set to an empty string are treated as unset.

    Args:
        environ: Variables to read, defaults to os.environ

    Returns:
        Validated configuration

    Raises:
        vol.Invalid: If a variable is missing, malformed or out of range

    """
    if environ is None:
        environ = os.environ

    raw = {key: value for key, value in environ.items() if value != ""}
    data = _check_ranges(CONFIG_SCHEMA(raw))

    config = ExporterConfig(
        host=data[CONF_HOST],
        port=data[CONF_PORT],
        community=data[CONF_COMMUNITY],
        snmp_timeout=data[CONF_SNMP_TIMEOUT],
        snmp_retries=data[CONF_SNMP_RETRIES],
        board_min=data[CONF_BOARD_MIN],
        board_max=data[CONF_BOARD_MAX],
        pon_min=data[CONF_PON_MIN],
        pon_max=data[CONF_PON_MAX],
        max_concurrent=data[CONF_MAX_CONCURRENT],
        scrape_timeout=data[CONF_SCRAPE_TIMEOUT],
        utc_offset_hours=data[CONF_UTC_OFFSET_HOURS],
        listen_host=data[CONF_LISTEN_HOST],
        listen_port=data[CONF_LISTEN_PORT],
        log_level=data[CONF_LOG_LEVEL],
    )
    _LOGGER.debug(
        "Configuration: host=%s:%d, boards=%d..%d, pons=%d..%d, max_concurrent=%d, timeout=%ds",
        config.host,
        config.port,
        config.board_min,
        config.board_max,
        config.pon_min,
        config.pon_max,
        config.max_concurrent,
        config.scrape_timeout,
    )
    return config
