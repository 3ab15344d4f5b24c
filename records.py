"""Node arena for one day of reports.

Each day is a ``DaySnapshot``: a flat list of ``Node`` objects where children
are referenced by integer handle and handle ``ROOT`` is the world node.
Published snapshots are only ever replaced, never edited in place.
"""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Iterator

ROOT = 0


@dataclass(frozen=True)
class Metrics:
    confirmed: int = 0
    deaths: int = 0
    recovered: int = 0
    active: int | None = None

    def plus(self, other: "Metrics") -> "Metrics":
        return Metrics(
            confirmed=self.confirmed + other.confirmed,
            deaths=self.deaths + other.deaths,
            recovered=self.recovered + other.recovered,
            active=(self.active or 0) + (other.active or 0),
        )

    def overwrite(self, **fields: int | None) -> "Metrics":
        present = {name: value for name, value in fields.items() if value is not None}
        return replace(self, **present)


ZERO_METRICS = Metrics(active=0)


@dataclass
class Node:
    own: Metrics | None = None
    totals: Metrics = ZERO_METRICS
    children: dict[str, int] = field(default_factory=dict)

    @property
    def has_own_data(self) -> bool:
        return self.own is not None


@dataclass
class DaySnapshot:
    day: date
    nodes: list[Node] = field(default_factory=lambda: [Node()])

    def child_handle(self, handle: int, name: str) -> int | None:
        return self.nodes[handle].children.get(name)

    def ensure_child(self, handle: int, name: str) -> int:
        existing = self.nodes[handle].children.get(name)
        if existing is not None:
            return existing
        self.nodes.append(Node())
        created = len(self.nodes) - 1
        self.nodes[handle].children[name] = created
        return created

    def resolve(self, path: tuple[str, ...]) -> int | None:
        handle = ROOT
        for segment in path:
            found = self.child_handle(handle, segment)
            if found is None:
                return None
            handle = found
        return handle

    def copy_for_update(self, handles: set[int]) -> "DaySnapshot":
        """Shallow copy with the listed nodes duplicated so they can be edited."""
        nodes = list(self.nodes)
        for handle in handles:
            node = nodes[handle]
            nodes[handle] = Node(own=node.own, totals=node.totals, children=dict(node.children))
        return DaySnapshot(day=self.day, nodes=nodes)


@dataclass(frozen=True, eq=False)
class Record:
    """Read-only view of one node of a published snapshot."""

    snapshot: DaySnapshot
    handle: int

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Record):
            return NotImplemented
        return self.snapshot is other.snapshot and self.handle == other.handle

    def __hash__(self) -> int:
        return hash((id(self.snapshot), self.handle))

    @property
    def _node(self) -> Node:
        return self.snapshot.nodes[self.handle]

    @property
    def day(self) -> date:
        return self.snapshot.day

    @property
    def own(self) -> Metrics | None:
        return self._node.own

    @property
    def has_own_data(self) -> bool:
        return self._node.has_own_data

    @property
    def totals(self) -> Metrics:
        return self._node.totals

    def child(self, name: str) -> "Record | None":
        handle = self.snapshot.child_handle(self.handle, name)
        if handle is None:
            return None
        return Record(self.snapshot, handle)

    def children(self) -> Iterator[tuple[str, "Record"]]:
        for name, handle in self._node.children.items():
            yield name, Record(self.snapshot, handle)
