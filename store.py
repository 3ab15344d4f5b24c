"""Date-indexed store of daily report trees.

Writers stage a day in a private ``DaySnapshot`` and publish it with a single
assignment of a new date index, so readers either see the previous index or
the fully aggregated new day, never a partial one.
"""
from __future__ import annotations

import logging
import threading
from datetime import date, timedelta
from typing import Iterable, Mapping

from aggregator import recalculate
from errors import IngestionError
from records import ROOT, DaySnapshot, Record
from schema_adapter import NormalizedRow, adapt_row

logger = logging.getLogger(__name__)

NodePath = tuple[str, ...]


class HierarchicalStore:
    def __init__(self) -> None:
        self._days: dict[date, DaySnapshot] = {}
        self._last_date: date | None = None
        self._staged: dict[date, DaySnapshot] = {}
        self._write_lock = threading.Lock()

    @property
    def last_date(self) -> date | None:
        return self._last_date

    def dates(self) -> list[date]:
        return sorted(self._days)

    def __len__(self) -> int:
        return len(self._days)

    def insert(self, day: date, row: NormalizedRow) -> None:
        snapshot = self._staged.get(day)
        if snapshot is None:
            snapshot = DaySnapshot(day=day)
            self._staged[day] = snapshot
        handle = ROOT
        for segment in row.path:
            handle = snapshot.ensure_child(handle, segment)
        snapshot.nodes[handle].own = row.metrics()

    def discard(self, day: date) -> None:
        self._staged.pop(day, None)

    def publish(self, day: date) -> DaySnapshot:
        snapshot = self._staged.pop(day, None)
        if snapshot is None:
            snapshot = DaySnapshot(day=day)
        recalculate(snapshot)
        self.replace_snapshot(snapshot)
        return snapshot

    def replace_snapshot(self, snapshot: DaySnapshot) -> None:
        with self._write_lock:
            days = dict(self._days)
            days[snapshot.day] = snapshot
            self._days = days
            if self._last_date is None or snapshot.day > self._last_date:
                self._last_date = snapshot.day

    def ingest_date(self, day: date, rows: Iterable[Mapping[str, str | None]]) -> DaySnapshot:
        self.discard(day)
        try:
            count = 0
            for row in rows:
                self.insert(day, adapt_row(row))
                count += 1
        except IngestionError:
            self.discard(day)
            raise
        snapshot = self.publish(day)
        logger.debug("Published %s with %d rows and %d nodes", day.isoformat(), count, len(snapshot.nodes))
        return snapshot

    def snapshot(self, day: date | None = None) -> DaySnapshot | None:
        if day is None:
            day = self._last_date
        if day is None:
            return None
        return self._days.get(day)

    def lookup(self, path: NodePath = (), day: date | None = None) -> Record | None:
        snapshot = self.snapshot(day)
        if snapshot is None:
            return None
        handle = snapshot.resolve(tuple(path))
        if handle is None:
            return None
        return Record(snapshot, handle)

    def time_series(self, path: NodePath, start: date, end: date | None = None) -> list[tuple[date, Record]]:
        if end is None:
            end = self._last_date
        if end is None:
            return []
        days = self._days
        series: list[tuple[date, Record]] = []
        current = start
        while current <= end:
            snapshot = days.get(current)
            if snapshot is not None:
                handle = snapshot.resolve(tuple(path))
                if handle is not None:
                    series.append((current, Record(snapshot, handle)))
            current = current + timedelta(days=1)
        return series
