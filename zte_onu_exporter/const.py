"""Constants for the ZTE ONU exporter."""

from .zte_snmp_client.constants import (
    DEFAULT_COMMUNITY,
    DEFAULT_RETRIES as DEFAULT_SNMP_RETRIES,
    DEFAULT_SNMP_PORT as DEFAULT_PORT,
    DEFAULT_TIMEOUT as DEFAULT_SNMP_TIMEOUT,
    DEFAULT_UTC_OFFSET_HOURS,
)

DOMAIN = "zte_onu_exporter"
VERSION = "1.0.0"

# Configuration (environment variable names)
CONF_HOST = "ZTE_OLT_HOST"
CONF_PORT = "ZTE_OLT_PORT"
CONF_COMMUNITY = "ZTE_SNMP_COMMUNITY"
CONF_SNMP_TIMEOUT = "ZTE_SNMP_TIMEOUT"
CONF_SNMP_RETRIES = "ZTE_SNMP_RETRIES"
CONF_BOARD_MIN = "PROMETHEUS_BOARD_MIN"
CONF_BOARD_MAX = "PROMETHEUS_BOARD_MAX"
CONF_PON_MIN = "PROMETHEUS_PON_MIN"
CONF_PON_MAX = "PROMETHEUS_PON_MAX"
CONF_MAX_CONCURRENT = "PROMETHEUS_MAX_CONCURRENT"
CONF_SCRAPE_TIMEOUT = "PROMETHEUS_SCRAPE_TIMEOUT"
CONF_UTC_OFFSET_HOURS = "ZTE_DEVICE_UTC_OFFSET_HOURS"
CONF_LISTEN_HOST = "EXPORTER_LISTEN_HOST"
CONF_LISTEN_PORT = "EXPORTER_LISTEN_PORT"
CONF_LOG_LEVEL = "LOG_LEVEL"

DEFAULT_BOARD_MIN = 1
DEFAULT_BOARD_MAX = 2
DEFAULT_PON_MIN = 1
DEFAULT_PON_MAX = 16
DEFAULT_MAX_CONCURRENT = 10
DEFAULT_SCRAPE_TIMEOUT = 30
DEFAULT_LISTEN_HOST = "0.0.0.0"
DEFAULT_LISTEN_PORT = 9101
DEFAULT_LOG_LEVEL = "INFO"

MIN_BOARD = 1
MAX_BOARD = 16
MIN_PON = 1
MAX_PON = 16
MAX_CONCURRENT = 100
MIN_SCRAPE_TIMEOUT = 1
MAX_SCRAPE_TIMEOUT = 300

# Prometheus
METRIC_PREFIX = "zte_onu"
EXPORTER_METRIC_PREFIX = "zte_exporter"
METRICS_PATH = "/metrics"

# Power readings at or above this are the OLT's "no reading" marker
POWER_READING_CEILING = 100

STARTUP_MESSAGE = f"""
-------------------------------------------------------------------
ZTE ONU Exporter
Version: {VERSION}
Prometheus exporter for ONUs behind a ZTE C320 OLT
-------------------------------------------------------------------
"""
