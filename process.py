from __future__ import annotations

import csv
import logging
import re
import subprocess
import threading
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from datetime import date, datetime
from pathlib import Path

from config import (
    FILE_READ_TIMEOUT_SECONDS,
    REFRESH_INTERVAL_SECONDS,
    REPORT_FILE_DATE_FORMAT,
    REPORTS_DIR,
    SOURCE_REPO_DIR,
    SOURCE_REPO_URL,
    SYNC_TIMEOUT_SECONDS,
)
from errors import IngestionError, NetworkError, SourceSyncError
from live_reconciler import apply_live_update
from models import RefreshStatus
from scrapers import LiveParseError, fetch_live_update, utc_now_iso
from store import HierarchicalStore

logger = logging.getLogger(__name__)

REPORT_FILE_PATTERN = re.compile(r"^(\d{2}-\d{2}-\d{4})\.csv$")
ALREADY_UP_TO_DATE = ("Already up to date.", "Already up-to-date.")

_READ_POOL = ThreadPoolExecutor(max_workers=2, thread_name_prefix="report-reader")


def list_source_files(reports_dir: Path = REPORTS_DIR) -> list[tuple[date, Path]]:
    try:
        entries = list(reports_dir.iterdir())
    except OSError as exc:
        raise IngestionError(f"Reports directory unreadable: {reports_dir}. Clone {SOURCE_REPO_URL} first.") from exc
    files: list[tuple[date, Path]] = []
    for path in entries:
        match = REPORT_FILE_PATTERN.match(path.name)
        if not match:
            continue
        try:
            day = datetime.strptime(match.group(1), REPORT_FILE_DATE_FORMAT).date()
        except ValueError:
            logger.warning("Skipping report with impossible date in name: %s", path.name)
            continue
        files.append((day, path))
    return sorted(files)


def read_source_file(path: Path) -> list[dict[str, str]]:
    try:
        with path.open(newline="", encoding="utf-8-sig") as handle:
            return list(csv.DictReader(handle))
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise IngestionError(f"Cannot read report {path}: {exc}") from exc


def read_source_file_bounded(path: Path, timeout: float = FILE_READ_TIMEOUT_SECONDS) -> list[dict[str, str]]:
    future = _READ_POOL.submit(read_source_file, path)
    try:
        return future.result(timeout=timeout)
    except FutureTimeoutError as exc:
        future.cancel()
        raise IngestionError(f"Timed out after {timeout}s reading {path}") from exc


def sync_sources(repo_dir: Path = SOURCE_REPO_DIR, timeout: float = SYNC_TIMEOUT_SECONDS) -> bool:
    """Pull the reports repository; True when new commits arrived."""
    try:
        result = subprocess.run(
            ["git", "-C", str(repo_dir), "pull"],
            capture_output=True,
            text=True,
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as exc:
        raise SourceSyncError(f"git pull timed out after {timeout}s") from exc
    except OSError as exc:
        raise SourceSyncError(f"git pull could not start: {exc}") from exc
    if result.returncode != 0:
        raise SourceSyncError(f"git pull failed ({result.returncode}): {result.stderr.strip()[:256]}")
    output = result.stdout or result.stderr
    return not any(marker in output for marker in ALREADY_UP_TO_DATE)


def ingest_reports(store: HierarchicalStore, reports_dir: Path, status: RefreshStatus) -> None:
    for day, path in list_source_files(reports_dir):
        try:
            rows = read_source_file_bounded(path)
            store.ingest_date(day, rows)
        except IngestionError as exc:
            logger.error("Skipping %s: %s", path.name, exc)
            status.failed_dates.append(day.isoformat())
            continue
        status.ingested_dates += 1


def run_refresh(
    store: HierarchicalStore,
    manual: bool = False,
    repo_dir: Path = SOURCE_REPO_DIR,
    reports_dir: Path = REPORTS_DIR,
    live: bool = True,
) -> RefreshStatus:
    """One refresh cycle. Failures are logged and recorded, never raised."""
    status = RefreshStatus(started_at=utc_now_iso())

    try:
        status.synced = sync_sources(repo_dir)
    except SourceSyncError as exc:
        logger.warning("Source sync failed, using files on disk: %s", exc)
        status.errors.append(str(exc))

    if manual or status.synced or len(store) == 0:
        logger.info("Loading daily reports from %s", reports_dir)
        try:
            ingest_reports(store, reports_dir, status)
        except IngestionError as exc:
            logger.error("Report ingestion aborted: %s", exc)
            status.errors.append(str(exc))
    else:
        logger.info("Reports already up to date, no need to reload")

    if live:
        try:
            payload = fetch_live_update()
            status.live_update = apply_live_update(store, payload)
        except (NetworkError, LiveParseError) as exc:
            logger.warning("Live update skipped: %s", exc)
            status.errors.append(str(exc))

    status.finished_at = utc_now_iso()
    logger.info(
        "Refresh finished: %d dates loaded, %d failed, last date %s",
        status.ingested_dates,
        len(status.failed_dates),
        store.last_date.isoformat() if store.last_date else None,
    )
    return status


class RefreshScheduler:
    """Runs refresh cycles on a timer, never more than one at a time."""

    def __init__(
        self,
        store: HierarchicalStore,
        interval: float = REFRESH_INTERVAL_SECONDS,
        refresh=run_refresh,
    ) -> None:
        self.store = store
        self.interval = interval
        self._refresh = refresh
        self._in_flight = threading.Lock()
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None
        self.last_status: RefreshStatus | None = None

    @property
    def running(self) -> bool:
        return self._in_flight.locked()

    def trigger(self, manual: bool = False) -> bool:
        if not self._in_flight.acquire(blocking=False):
            logger.warning("Refresh already in progress, skipping this trigger")
            return False
        try:
            self.last_status = self._refresh(self.store, manual=manual)
        except Exception:
            logger.exception("Refresh cycle failed; keeping previous data")
        finally:
            self._in_flight.release()
        return True

    def _loop(self) -> None:
        self.trigger(manual=True)
        while not self._stop.wait(self.interval):
            self.trigger()

    def start(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._loop, name="refresh-scheduler", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None
