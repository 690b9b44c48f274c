"""Tests for ZTE SNMP client exceptions."""

from __future__ import annotations

import pytest

from zte_onu_exporter.zte_snmp_client.exceptions import (
    AddressNotFoundError,
    OLTClientError,
    OLTConnectionError,
    OLTDecodeError,
)


class TestExceptionHierarchy:
    """Tests for exception class hierarchy."""

    def test_olt_client_error_is_exception(self) -> None:
        """Test OLTClientError inherits from Exception."""
        assert issubclass(OLTClientError, Exception)

    def test_olt_connection_error_is_client_error(self) -> None:
        """Test OLTConnectionError inherits from OLTClientError."""
        assert issubclass(OLTConnectionError, OLTClientError)

    def test_address_not_found_error_is_client_error(self) -> None:
        """Test AddressNotFoundError inherits from OLTClientError."""
        assert issubclass(AddressNotFoundError, OLTClientError)

    def test_olt_decode_error_is_client_error(self) -> None:
        """Test OLTDecodeError inherits from OLTClientError."""
        assert issubclass(OLTDecodeError, OLTClientError)


class TestAddressNotFoundError:
    """Tests for AddressNotFoundError."""

    def test_message_names_board_and_pon(self) -> None:
        """Test the message names the unsupported pair."""
        with pytest.raises(AddressNotFoundError, match="board 3 PON 17"):
            raise AddressNotFoundError(3, 17)

    def test_keeps_board_and_pon(self) -> None:
        """Test the pair is available to handlers."""
        err = AddressNotFoundError(3, 17)
        assert err.board_id == 3
        assert err.pon_id == 17

    def test_caught_as_client_error(self) -> None:
        """Test it can be caught as the base exception."""
        with pytest.raises(OLTClientError):
            raise AddressNotFoundError(1, 99)
