"""Exceptions for zte-snmp-client."""


class OLTClientError(Exception):
    """Base exception for the OLT SNMP client."""


class OLTConnectionError(OLTClientError):
    """SNMP transport error (walk or get failed, timed out or was refused)."""


class AddressNotFoundError(OLTClientError):
    """No OID address set exists for the requested board and PON."""

    def __init__(self, board_id: int, pon_id: int) -> None:
        """Initialize with the unsupported board/PON pair."""
        super().__init__(f"No OID address set for board {board_id} PON {pon_id}")
        self.board_id = board_id
        self.pon_id = pon_id


class OLTDecodeError(OLTClientError):
    """The bundled address table is malformed."""
