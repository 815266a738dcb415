from __future__ import annotations

import asyncio
import contextlib
import json
import logging
from collections.abc import Callable

from ..catalog.client import CatalogClient
from ..catalog.config import DEFAULT_CATALOG_CONFIG, CatalogConfig
from ..catalog.models import Snapshot
from ..errors import SourceUnavailable
from ..sheets.client import TableSource, build_source
from ..sheets.config import DEFAULT_SHEETS_CONFIG, SheetsConfig
from ..sheets.parser import parse_table
from .engine import Catalog, reconcile
from .history import record_run
from .report import RunState, SyncReport, SyncStatus, utcnow

logger = logging.getLogger(__name__)

StatusListener = Callable[[SyncStatus], None]


class SyncService:
    """
    Runs spreadsheet -> catalog syncs and holds the latest snapshot.

    Only one run is in flight at a time: calling ``run_sync`` while a run is
    active waits for that run and returns its report. The snapshot is
    replaced only after a run reaches the catalog, so a failed run leaves the
    previous one in place.
    """

    def __init__(self, source: TableSource, catalog: Catalog, image_base_url: str) -> None:
        self.source = source
        self.catalog = catalog
        self.image_base_url = image_base_url
        self._snapshot = Snapshot()
        self._status = SyncStatus()
        self._listeners: list[StatusListener] = []
        self._inflight: asyncio.Task[SyncReport] | None = None

    @property
    def snapshot(self) -> Snapshot:
        return self._snapshot

    @property
    def status(self) -> SyncStatus:
        return self._status

    def subscribe(self, listener: StatusListener) -> Callable[[], None]:
        """Call ``listener`` on every status change. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _set_status(self, **changes) -> None:
        self._status = self._status.model_copy(update={**changes, "changed_at": utcnow()})
        for listener in list(self._listeners):
            try:
                listener(self._status)
            except Exception:
                logger.warning("Sync status listener failed", exc_info=True)

    async def wait_idle(self) -> None:
        """Wait for the in-flight run, if any, to finish."""
        if self._inflight is not None and not self._inflight.done():
            with contextlib.suppress(Exception):
                await asyncio.shield(self._inflight)

    async def run_sync(self, trigger: str = "manual") -> SyncReport:
        if self._inflight is not None and not self._inflight.done():
            logger.info("Sync already in progress, waiting for it (%s trigger)", trigger)
            return await asyncio.shield(self._inflight)

        self._inflight = asyncio.ensure_future(self._run(trigger))
        return await asyncio.shield(self._inflight)

    async def _run(self, trigger: str) -> SyncReport:
        logger.info("Starting sync from spreadsheet (%s trigger)", trigger)
        self._set_status(state=RunState.running)

        try:
            table = await self.source.fetch_values()
            snapshot = parse_table(table, self.image_base_url)
            logger.info(
                "Found %d restaurants with menus (%d rows skipped)",
                len(snapshot.restaurants),
                snapshot.skipped_rows,
            )
            report = await reconcile(snapshot.restaurants, snapshot.menu_items, self.catalog)
        except SourceUnavailable as exc:
            logger.warning("Sync source unavailable: %s", exc)
            report = SyncReport(error=str(exc), finished_at=utcnow())
            self._set_status(state=RunState.failed, last_error=str(exc), last_report=report)
            record_run(report, trigger)
            return report
        except Exception as exc:
            logger.error("Sync failed", exc_info=True)
            self._set_status(state=RunState.failed, last_error=str(exc) or type(exc).__name__)
            raise

        self._snapshot = snapshot
        self._set_status(
            state=RunState.succeeded,
            last_success_at=report.finished_at,
            last_error=None,
            last_report=report,
        )
        record_run(report, trigger)
        logger.info("Sync completed: %d synced, %d failed", report.synced_count, len(report.failed))
        return report


def build_sync_service(
    sheets_config: SheetsConfig = DEFAULT_SHEETS_CONFIG,
    catalog_config: CatalogConfig = DEFAULT_CATALOG_CONFIG,
) -> SyncService:
    return SyncService(
        source=build_source(sheets_config),
        catalog=CatalogClient(catalog_config),
        image_base_url=catalog_config.image_base_url,
    )


async def _run_once() -> SyncReport:
    service = build_sync_service()
    try:
        return await service.run_sync(trigger="cli")
    finally:
        await service.catalog.aclose()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    if not (DEFAULT_SHEETS_CONFIG.is_configured and DEFAULT_CATALOG_CONFIG.is_configured):
        raise SystemExit("Missing configuration: set GOOGLE_SHEETS_API_KEY/GOOGLE_SHEET_ID (or SHEET_CSV_PATH) and MENU_API_BASE_URL")
    result = asyncio.run(_run_once())
    print(json.dumps(result.summary(), indent=2))
    raise SystemExit(0 if result.ok and not result.failed else 1)
