"""ONU collection coordinator for the ZTE ONU exporter.

One collection cycle walks every configured board/PON, fans the discovered
ONUs out to a bounded pool of fetch workers and merges their records into a
map keyed by serial number. Only the merge task writes that map. The whole
cycle runs under one deadline; when it expires the records merged so far are
returned as a partial result.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum

from .const import (
    DEFAULT_BOARD_MAX,
    DEFAULT_BOARD_MIN,
    DEFAULT_MAX_CONCURRENT,
    DEFAULT_PON_MAX,
    DEFAULT_PON_MIN,
    DEFAULT_SCRAPE_TIMEOUT,
    DEFAULT_UTC_OFFSET_HOURS,
)
from .helpers import log_debug, log_info, log_warning, onu_context
from .zte_snmp_client.address_loader import AddressTableLoader
from .zte_snmp_client.client import ZTESnmpClient
from .zte_snmp_client.constants import OnuStatus
from .zte_snmp_client.detail import async_fetch_onu_detail
from .zte_snmp_client.discovery import async_discover_onus
from .zte_snmp_client.exceptions import AddressNotFoundError, OLTClientError, OLTConnectionError
from .zte_snmp_client.models import OnuRecord, OnuSummary, ScrapeResult

_LOGGER = logging.getLogger(__name__)

# Discovered ONUs waiting for a fetch worker
JOB_QUEUE_SIZE = 1000

_STOP = object()


class CollectionPhase(Enum):
    """Where a collection cycle currently is."""

    IDLE = "idle"
    DISCOVERING = "discovering"
    FETCHING = "fetching"
    MERGING = "merging"
    DONE = "done"
    DONE_PARTIAL = "done_partial"


@dataclass
class _CycleStats:
    jobs: int = 0
    failed_fetches: int = 0
    failed_cells: list[tuple[int, int]] = field(default_factory=list)


def merge_record(records: dict[str, OnuRecord], record: OnuRecord) -> bool:
    """Merge one fetched record into the serial-number keyed map.

    Records without a serial number are dropped. A record for a serial
    already present replaces the stored one, except that an Unknown status
    never replaces a known one.

    Returns:
        True if the record was stored

    """
    serial = record.serial_number
    if not serial:
        return False

    stored = records.get(serial)
    if (
        stored is not None
        and stored.status != OnuStatus.UNKNOWN
        and record.status == OnuStatus.UNKNOWN
    ):
        return False

    records[serial] = record
    return True


class ONUCollectionCoordinator:
    """Run discovery and detail fetching for every configured board/PON."""

    def __init__(
        self,
        client: ZTESnmpClient,
        resolver: AddressTableLoader,
        *,
        board_min: int = DEFAULT_BOARD_MIN,
        board_max: int = DEFAULT_BOARD_MAX,
        pon_min: int = DEFAULT_PON_MIN,
        pon_max: int = DEFAULT_PON_MAX,
        max_concurrent: int = DEFAULT_MAX_CONCURRENT,
        deadline: float = DEFAULT_SCRAPE_TIMEOUT,
        utc_offset: timedelta = timedelta(hours=DEFAULT_UTC_OFFSET_HOURS),
    ) -> None:
        """Initialize the coordinator.

        Args:
            client: SNMP client shared by every worker
            resolver: Loaded address table
            board_min: First board to poll
            board_max: Last board to poll
            pon_min: First PON to poll on each board
            pon_max: Last PON to poll on each board
            max_concurrent: Number of fetch workers
            deadline: Seconds one cycle may take
            utc_offset: UTC offset of the OLT clock

        """
        self.client = client
        self.resolver = resolver
        self.board_min = board_min
        self.board_max = board_max
        self.pon_min = pon_min
        self.pon_max = pon_max
        self.max_concurrent = max_concurrent
        self.deadline = deadline
        self.utc_offset = utc_offset
        self.phase = CollectionPhase.IDLE
        self.last_result: ScrapeResult | None = None

    async def async_collect(self) -> ScrapeResult:
        """Run one collection cycle.

        Never raises for device errors or deadline expiry: failed cells and
        fetches are logged and counted, and an expired deadline yields a
        partial result.

        Returns:
            Records keyed by serial number with cycle metadata

        """
        started = time.monotonic()
        stats = _CycleStats()
        records: dict[str, OnuRecord] = {}
        jobs: asyncio.Queue = asyncio.Queue(maxsize=JOB_QUEUE_SIZE)
        results: asyncio.Queue = asyncio.Queue()
        tasks: list[asyncio.Task] = []
        partial = False

        _LOGGER.debug(
            "Starting collection: boards %d..%d, PONs %d..%d, %d workers, deadline %ss",
            self.board_min,
            self.board_max,
            self.pon_min,
            self.pon_max,
            self.max_concurrent,
            self.deadline,
        )

        try:
            async with asyncio.timeout(self.deadline):
                workers = [
                    asyncio.create_task(self._fetch_worker(jobs, results, stats))
                    for _ in range(self.max_concurrent)
                ]
                merger = asyncio.create_task(self._merge_results(results, records))
                tasks = [*workers, merger]

                self.phase = CollectionPhase.DISCOVERING
                await self._enqueue_jobs(jobs, stats)

                self.phase = CollectionPhase.FETCHING
                await asyncio.gather(*workers)

                self.phase = CollectionPhase.MERGING
                await results.put(_STOP)
                await merger
        except TimeoutError:
            partial = True
            _LOGGER.warning(
                "Collection deadline of %ss expired during %s, returning partial result",
                self.deadline,
                self.phase.value,
            )
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        # Records handed over before the deadline are still merged
        while not results.empty():
            item = results.get_nowait()
            if item is not _STOP:
                merge_record(records, item)

        self.phase = CollectionPhase.DONE_PARTIAL if partial else CollectionPhase.DONE
        result = ScrapeResult(
            records=records,
            partial=partial,
            jobs=stats.jobs,
            failed_fetches=stats.failed_fetches,
            failed_cells=tuple(stats.failed_cells),
            duration=time.monotonic() - started,
        )
        self.last_result = result

        log_info(
            _LOGGER,
            "async_collect",
            "Collection finished",
            onus=len(result),
            jobs=result.jobs,
            failed_fetches=result.failed_fetches,
            failed_cells=len(result.failed_cells),
            partial=result.partial,
            duration=f"{result.duration:.2f}s",
        )
        return result

    async def _enqueue_jobs(self, jobs: asyncio.Queue, stats: _CycleStats) -> None:
        """Discover every board/PON in turn and queue one job per ONU."""
        for board_id in range(self.board_min, self.board_max + 1):
            for pon_id in range(self.pon_min, self.pon_max + 1):
                try:
                    onus = await async_discover_onus(
                        self.client, self.resolver, board_id, pon_id
                    )
                except (AddressNotFoundError, OLTConnectionError) as err:
                    stats.failed_cells.append((board_id, pon_id))
                    log_warning(
                        _LOGGER,
                        onu_context(board_id, pon_id),
                        "Discovery failed, skipping",
                        error=err,
                    )
                    continue
                except Exception as err:
                    stats.failed_cells.append((board_id, pon_id))
                    _LOGGER.exception(
                        "%s: unexpected error discovering ONUs: %s",
                        onu_context(board_id, pon_id),
                        err,
                    )
                    continue

                for onu in onus:
                    await jobs.put(onu)
                stats.jobs += len(onus)

        for _ in range(self.max_concurrent):
            await jobs.put(_STOP)

    async def _fetch_worker(
        self, jobs: asyncio.Queue, results: asyncio.Queue, stats: _CycleStats
    ) -> None:
        while True:
            job = await jobs.get()
            if job is _STOP:
                return
            record = await self._fetch(job, stats)
            if record is not None:
                await results.put(record)

    async def _fetch(self, onu: OnuSummary, stats: _CycleStats) -> OnuRecord | None:
        context = onu_context(onu.board, onu.pon, onu.onu_id)
        try:
            record = await async_fetch_onu_detail(
                self.client,
                self.resolver,
                onu.board,
                onu.pon,
                onu.onu_id,
                utc_offset=self.utc_offset,
            )
        except OLTClientError as err:
            stats.failed_fetches += 1
            log_warning(_LOGGER, context, "Detail fetch failed", error=err)
            return None
        except Exception as err:
            stats.failed_fetches += 1
            _LOGGER.exception("%s: unexpected error fetching ONU details: %s", context, err)
            return None

        log_debug(
            _LOGGER,
            context,
            "Fetched",
            serial=record.serial_number or "-",
            status=record.status.value,
        )
        return record

    async def _merge_results(
        self, results: asyncio.Queue, records: dict[str, OnuRecord]
    ) -> None:
        while True:
            item = await results.get()
            if item is _STOP:
                return
            if not merge_record(records, item):
                _LOGGER.debug(
                    "Record of ONU %d on board %d PON %d not merged (serial %r, status %s)",
                    item.onu_id,
                    item.board,
                    item.pon,
                    item.serial_number,
                    item.status.value,
                )
