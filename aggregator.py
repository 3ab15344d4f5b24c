from __future__ import annotations

from records import ROOT, ZERO_METRICS, DaySnapshot, Metrics


def recalculate(snapshot: DaySnapshot, handle: int = ROOT) -> Metrics:
    """Recompute totals bottom-up for the subtree at ``handle``.

    Leaves take their own figures. Internal nodes take the sum of their
    children and, when the report also carried a row for the node itself,
    add that row on top. Some daily files list a country total next to its
    provinces and some do not, so the sum can over-count; this is accepted.
    """
    node = snapshot.nodes[handle]
    totals = ZERO_METRICS
    for child in node.children.values():
        totals = totals.plus(recalculate(snapshot, child))
    if node.own is not None:
        totals = totals.plus(node.own)
    node.totals = totals
    return totals
