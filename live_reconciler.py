"""Overlay of the near-real-time scrape onto the newest day.

The live page is more current than the last daily report, so its figures
replace the world and per-country totals of ``last_date`` directly. The
Aggregator is not re-run: after an update a country's totals may no longer
match the sum of its provinces.
"""
from __future__ import annotations

import logging

from locale_names import canonical_country
from models import LiveUpdate
from records import ROOT, Metrics
from store import HierarchicalStore

logger = logging.getLogger(__name__)


def apply_live_update(store: HierarchicalStore, payload: LiveUpdate) -> dict:
    current = store.snapshot()
    if current is None:
        logger.warning("Live update ignored: no daily report loaded yet.")
        return {"date": None, "updated": [], "skipped": [entry.name for entry in payload.per_country]}

    targets: dict[int, list] = {}
    skipped: list[str] = []
    for entry in payload.per_country:
        name = canonical_country(entry.name)
        handle = current.child_handle(ROOT, name)
        if handle is None:
            skipped.append(entry.name)
            continue
        targets.setdefault(handle, []).append((name, entry))

    updated = current.copy_for_update({ROOT, *targets})
    totals = payload.global_totals
    updated.nodes[ROOT].totals = Metrics(
        confirmed=totals.confirmed,
        deaths=totals.deaths,
        recovered=totals.recovered,
        active=totals.active,
    )

    names: list[str] = []
    for handle, entries in targets.items():
        node = updated.nodes[handle]
        for name, entry in entries:
            node.totals = node.totals.overwrite(
                confirmed=entry.confirmed,
                deaths=entry.deaths,
                recovered=entry.recovered,
                active=entry.active,
            )
            names.append(name)

    store.replace_snapshot(updated)
    if skipped:
        logger.debug("Live update skipped unknown countries: %s", ", ".join(skipped))
    logger.info(
        "Live update applied to %s: %d countries updated, %d skipped",
        current.day.isoformat(),
        len(names),
        len(skipped),
    )
    return {"date": current.day.isoformat(), "updated": names, "skipped": skipped}
