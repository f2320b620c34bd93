"""Periodic sheet sync: fetch, parse, and swap in the dataset when it changed."""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any, Optional

from engagement_dashboard.core.config import settings
from engagement_dashboard.core.logger import get_logger
from engagement_dashboard.domain.errors import (
    EmptyOrInvalidPayload,
    NotConfigured,
    SyncError,
)
from engagement_dashboard.domain.models import SyncStatus
from engagement_dashboard.infrastructure.http.sheet_client import SheetClient
from engagement_dashboard.parsing.record_parser import parse_metric_records

from .metrics import (
    DATASET_RECORDS,
    DATASET_REPLACEMENTS_TOTAL,
    STALE_RESPONSES_TOTAL,
    SYNC_LATENCY_SECONDS,
    SYNC_LOOP_ERRORS_TOTAL,
    SYNC_RUNS_TOTAL,
)
from .state import DashboardState

logger = get_logger("dashboard.sync")


class SyncService:
    def __init__(self, state: DashboardState, client: SheetClient):
        self.state = state
        self.client = client

    async def sync_once(self) -> SyncStatus:
        """Run one fetch-parse-apply cycle for the current source.

        Never raises for the three recoverable failure kinds; the outcome is
        recorded on ``state.status`` and returned.
        """
        source = self.state.source
        sequence = self.state.begin_fetch()
        try:
            url = self.state.config.source_url(source)
            if url is None:
                raise NotConfigured(source)
            self._set_status(
                SyncStatus(kind="syncing", source=source, sequence=sequence)
            )
            with SYNC_LATENCY_SECONDS.time():
                text = await self.client.fetch_csv(url)
                result = parse_metric_records(text)
            if not result.records:
                raise EmptyOrInvalidPayload("no valid engagement rows in sheet")
        except SyncError as e:
            return self._fail(e, source, sequence)

        if not self.state.is_latest(sequence):
            STALE_RESPONSES_TOTAL.inc()
            logger.info(
                "sync_response_stale",
                extra={"source": source, "sequence": sequence},
            )
            SYNC_RUNS_TOTAL.labels(kind="stale").inc()
            # the newer fetch owns state.status
            return SyncStatus(
                kind="stale",
                message="superseded by a newer fetch",
                source=source,
                sequence=sequence,
                checked_at=_now(),
            )

        changed = self.state.has_changed(result.records, result.fingerprint)
        if changed:
            self.state.replace_dataset(result.records, result.fingerprint)
            DATASET_REPLACEMENTS_TOTAL.inc()
            DATASET_RECORDS.set(len(result.records))

        status = SyncStatus(
            kind="ok",
            message="sync complete",
            source=source,
            changed=changed,
            record_count=len(result.records),
            rows_dropped=result.rows_dropped,
            latest_data_at=self.state.latest_data_at(),
            checked_at=_now(),
            sequence=sequence,
        )
        self._set_status(status)
        SYNC_RUNS_TOTAL.labels(kind="ok").inc()
        logger.info(
            "sync_completed",
            extra={
                "source": source,
                "changed": changed,
                "record_count": status.record_count,
                "rows_dropped": status.rows_dropped,
                "timestamps_defaulted": result.defaulted_timestamps,
            },
        )
        return status

    async def run(
        self,
        stop_event: asyncio.Event,
        app_state: Any = None,
        interval: Optional[float] = None,
        startup_delay: Optional[float] = None,
    ) -> None:
        """Sync once shortly after startup, then every ``interval`` seconds.

        Only ``stop_event`` or task cancellation ends the loop.
        """
        interval = settings.sync_interval_seconds if interval is None else interval
        startup_delay = (
            settings.sync_startup_delay_seconds
            if startup_delay is None
            else startup_delay
        )
        logger.info("sync_loop_started", extra={"interval_s": interval})
        if await _wait(stop_event, startup_delay):
            return
        first = True
        try:
            while not stop_event.is_set():
                await self._safe_sync()
                if first:
                    first = False
                    if getattr(app_state, "ready_event", None):
                        app_state.ready_event.set()
                if await _wait(stop_event, interval):
                    break
        except asyncio.CancelledError:  # graceful cancellation
            logger.info("sync_loop_cancelled")
            raise
        finally:
            logger.info("sync_loop_stopped")

    async def _safe_sync(self):
        try:
            await self.sync_once()
        except asyncio.CancelledError:
            raise
        except Exception as e:  # noqa: BLE001 - the loop must outlive any tick
            SYNC_LOOP_ERRORS_TOTAL.inc()
            logger.exception("sync_tick_failed", extra={"error": str(e)})
            self._fail_unexpected(e)

    def _fail_unexpected(self, error: Exception):
        """Close out a tick that died mid-flight so status never stays syncing."""
        current = self.state.status
        if current.kind != "syncing" or not self.state.is_latest(current.sequence):
            return
        self._set_status(
            SyncStatus(
                kind="error",
                message=f"{type(error).__name__}: {error}",
                source=current.source,
                record_count=len(self.state.dataset),
                latest_data_at=self.state.latest_data_at(),
                checked_at=_now(),
                sequence=current.sequence,
            )
        )
        SYNC_RUNS_TOTAL.labels(kind="error").inc()

    def _fail(self, error: SyncError, source: str, sequence: int) -> SyncStatus:
        status = SyncStatus(
            kind=error.kind,
            message=str(error),
            source=source,
            record_count=len(self.state.dataset),
            latest_data_at=self.state.latest_data_at(),
            checked_at=_now(),
            sequence=sequence,
        )
        if self.state.is_latest(sequence):
            self._set_status(status)
        SYNC_RUNS_TOTAL.labels(kind=error.kind).inc()
        logger.warning(
            "sync_failed",
            extra={"source": source, "kind": error.kind, "error": str(error)},
        )
        return status

    def _set_status(self, status: SyncStatus):
        self.state.status = status


async def _wait(stop_event: asyncio.Event, timeout: float) -> bool:
    """Sleep up to ``timeout``; True if ``stop_event`` fired meanwhile."""
    if timeout <= 0:
        return stop_event.is_set()
    try:
        await asyncio.wait_for(stop_event.wait(), timeout)
        return True
    except asyncio.TimeoutError:
        return False


def _now() -> datetime:
    return datetime.now(timezone.utc)
