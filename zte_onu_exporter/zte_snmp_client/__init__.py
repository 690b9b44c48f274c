"""ZTE OLT SNMP Client Library."""

from .constants import (
    MAX_ONU_ID,
    OFFLINE_REASON_MAP,
    ONU_PHASE_STATE_MAP,
    STATUS_NUMERIC_MAP,
    OnuStatus,
)
from .exceptions import (
    AddressNotFoundError,
    OLTClientError,
    OLTConnectionError,
    OLTDecodeError,
)

__all__ = [
    # Constants
    "MAX_ONU_ID",
    "OFFLINE_REASON_MAP",
    "ONU_PHASE_STATE_MAP",
    "STATUS_NUMERIC_MAP",
    "OnuStatus",
    # Exceptions
    "AddressNotFoundError",
    "OLTClientError",
    "OLTConnectionError",
    "OLTDecodeError",
]
