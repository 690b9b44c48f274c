"""Constants for the ZTE C320 SNMP client."""

from enum import Enum

DEFAULT_SNMP_PORT = 161
DEFAULT_COMMUNITY = "public"
DEFAULT_TIMEOUT = 5
DEFAULT_RETRIES = 1

# ONU ids a single GPON port can hold
MAX_ONU_ID = 128

# Rx/Tx power arrives as raw units: dBm = raw * 0.002 - 30
OPTICAL_POWER_FACTOR = 0.002
OPTICAL_POWER_OFFSET = 30.0

# Canonical text form of device timestamps
DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"

# OLT clock offset used when none is configured (WIB)
DEFAULT_UTC_OFFSET_HOURS = 7

# Suffix appended after the ONU id for per-interface tables (rx, tx, ip)
INTERFACE_SUFFIX = "1"


class OnuStatus(str, Enum):
    """ONU operational status."""

    ONLINE = "Online"
    DYING_GASP = "Dying Gasp"
    LOS = "LOS"
    POWER_OFF = "Power-Off"
    UNKNOWN = "Unknown"

    @property
    def numeric(self) -> int:
        """Return the value exported on the status series."""
        return STATUS_NUMERIC_MAP[self]


# zxAnGponOnuPhaseState codes to status; everything else is Unknown
ONU_PHASE_STATE_MAP = {
    2: OnuStatus.LOS,
    4: OnuStatus.ONLINE,
    5: OnuStatus.DYING_GASP,
    7: OnuStatus.POWER_OFF,
}

STATUS_NUMERIC_MAP = {
    OnuStatus.UNKNOWN: 0,
    OnuStatus.ONLINE: 1,
    OnuStatus.DYING_GASP: 2,
    OnuStatus.LOS: 3,
    OnuStatus.POWER_OFF: 4,
}

# Last offline cause codes
OFFLINE_REASON_MAP = {
    1: "Unknown",
    2: "LOS",
    3: "LOSi",
    4: "LOFi",
    5: "sfi",
    6: "loai",
    7: "loami",
    8: "AuthFail",
    9: "PowerOff",
    10: "deactiveSucc",
    11: "deactiveFail",
    12: "Reboot",
    13: "Shutdown",
}
