"""SNMP client for ZTE OLTs."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from typing import Any, TypeAlias

from pyasn1.error import PyAsn1Error
from pyasn1.type import univ
from pysnmp.error import PySnmpError
from pysnmp.hlapi.v3arch.asyncio import (
    CommunityData,
    ContextData,
    ObjectIdentity,
    ObjectType,
    SnmpEngine,
    UdpTransportTarget,
    bulk_walk_cmd,
    get_cmd,
)
from pysnmp.proto.rfc1905 import EndOfMibView, NoSuchInstance, NoSuchObject

from .constants import DEFAULT_COMMUNITY, DEFAULT_RETRIES, DEFAULT_SNMP_PORT, DEFAULT_TIMEOUT
from .exceptions import OLTConnectionError
from .utils import normalize_oid

_LOGGER = logging.getLogger(__name__)

# GETBULK repetitions per walk round trip
WALK_MAX_REPETITIONS = 25

WalkVisitor: TypeAlias = Callable[[str, Any], None]


def convert_value(value: Any) -> Any:
    """Convert a pysnmp value to bytes, int, str or None."""
    if value is None or isinstance(value, (NoSuchObject, NoSuchInstance, EndOfMibView)):
        return None
    if isinstance(value, univ.OctetString):
        return value.asOctets()
    if isinstance(value, univ.Integer):
        return int(value)
    if isinstance(value, univ.ObjectIdentifier):
        return normalize_oid(value.prettyPrint())
    return value.prettyPrint() if hasattr(value, "prettyPrint") else value


class ZTESnmpClient:
    """SNMP v2c client used to query one OLT.

    Stateless request/response: a single instance is shared by every
    collector worker.
    """

    def __init__(
        self,
        host: str,
        community: str = DEFAULT_COMMUNITY,
        port: int = DEFAULT_SNMP_PORT,
        timeout: int = DEFAULT_TIMEOUT,
        retries: int = DEFAULT_RETRIES,
    ):
        """Initialize the SNMP client.

        Args:
            host: OLT hostname or IP address
            community: SNMP v2c read community
            port: SNMP UDP port
            timeout: Per-request timeout in seconds
            retries: Per-request retries

        """
        self.host = host
        self.community = community
        self.port = port
        self.timeout = timeout
        self.retries = retries
        self._engine: SnmpEngine | None = None
        self._transport: UdpTransportTarget | None = None
        self._auth = CommunityData(community, mpModel=1)

    async def connect(self) -> None:
        """Create the SNMP engine and UDP transport.

        Raises:
            OLTConnectionError: If the transport cannot be created

        """
        if self._transport is not None:
            return

        try:
            self._engine = SnmpEngine()
            self._transport = await UdpTransportTarget.create(
                (self.host, self.port),
                timeout=self.timeout,
                retries=self.retries,
            )
        except (PySnmpError, OSError) as err:
            self._engine = None
            raise OLTConnectionError(f"Cannot reach {self.host}:{self.port}: {err}") from err

        _LOGGER.info("SNMP transport ready for %s:%d", self.host, self.port)

    async def async_get(self, oids: Sequence[str]) -> list[tuple[str, Any]]:
        """Fetch several OIDs with one GET request.

        Args:
            oids: OIDs to fetch

        Returns:
            (oid, value) pairs in the order the agent answered

        Raises:
            OLTConnectionError: If the request fails

        """
        await self.connect()

        var_binds_in = [ObjectType(ObjectIdentity(normalize_oid(oid))) for oid in oids]
        try:
            error_indication, error_status, error_index, var_binds = await get_cmd(
                self._engine,
                self._auth,
                self._transport,
                ContextData(),
                *var_binds_in,
            )
        except (PySnmpError, PyAsn1Error, OSError) as err:
            raise OLTConnectionError(f"SNMP GET error: {err}") from err

        if error_indication:
            raise OLTConnectionError(f"SNMP GET failed: {error_indication}")
        if error_status:
            raise OLTConnectionError(
                f"SNMP GET error status {error_status.prettyPrint()} at index {error_index}"
            )

        result = [(normalize_oid(str(name)), convert_value(value)) for name, value in var_binds]
        _LOGGER.debug("SNMP GET %d OIDs from %s returned %d values", len(oids), self.host, len(result))
        return result

    async def async_walk(self, root_oid: str, visit: WalkVisitor) -> int:
        """Walk a subtree, calling visit(oid, value) for every leaf once.

        Args:
            root_oid: Subtree root
            visit: Callback receiving each normalised OID and converted value

        Returns:
            Number of leaves visited

        Raises:
            OLTConnectionError: If any round trip of the walk fails

        """
        await self.connect()

        root = normalize_oid(root_oid)
        prefix = root + "."
        visited = 0
        try:
            async for error_indication, error_status, error_index, var_binds in bulk_walk_cmd(
                self._engine,
                self._auth,
                self._transport,
                ContextData(),
                0,
                WALK_MAX_REPETITIONS,
                ObjectType(ObjectIdentity(root)),
                lexicographicMode=False,
            ):
                if error_indication:
                    raise OLTConnectionError(f"SNMP walk of {root} failed: {error_indication}")
                if error_status:
                    raise OLTConnectionError(
                        f"SNMP walk of {root} error status {error_status.prettyPrint()} at index {error_index}"
                    )
                for name, value in var_binds:
                    oid = normalize_oid(str(name))
                    if not oid.startswith(prefix):
                        continue
                    visit(oid, convert_value(value))
                    visited += 1
        except (PySnmpError, PyAsn1Error, OSError) as err:
            raise OLTConnectionError(f"SNMP walk of {root} error: {err}") from err

        _LOGGER.debug("SNMP walk of %s visited %d leaves", root, visited)
        return visited

    async def close(self) -> None:
        """Release the SNMP engine."""
        if self._engine is not None:
            self._engine.close_dispatcher()
        self._engine = None
        self._transport = None
        _LOGGER.debug("SNMP client for %s closed", self.host)
