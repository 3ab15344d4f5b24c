from __future__ import annotations

import unittest
from datetime import date

from live_reconciler import apply_live_update
from models import LiveCountry, LiveTotals, LiveUpdate
from records import Metrics
from store import HierarchicalStore


def gen_a(country: str, state: str = "", confirmed: str = "0", deaths: str = "0", recovered: str = "0", active: str = "0") -> dict:
    return {
        "FIPS": "",
        "Admin2": "",
        "Province_State": state,
        "Country_Region": country,
        "Confirmed": confirmed,
        "Deaths": deaths,
        "Recovered": recovered,
        "Active": active,
    }


class LiveReconcilerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.store = HierarchicalStore()
        self.store.ingest_date(date(2020, 4, 1), [gen_a("US", "Texas", "5", "1", "0", "4")])
        self.store.ingest_date(
            date(2020, 4, 2),
            [
                gen_a("US", "Texas", "10", "1", "2", "7"),
                gen_a("US", "Ohio", "20", "2", "3", "15"),
                gen_a("Italy", "", "100", "10", "20", "70"),
            ],
        )

    def payload(self, *countries: LiveCountry) -> LiveUpdate:
        return LiveUpdate(
            global_totals=LiveTotals(confirmed=1000, deaths=50, recovered=200, active=750),
            per_country=list(countries),
        )

    def test_overwrites_root_totals(self) -> None:
        apply_live_update(self.store, self.payload())
        root = self.store.lookup(())
        assert root is not None
        self.assertEqual(Metrics(confirmed=1000, deaths=50, recovered=200, active=750), root.totals)

    def test_overwrites_only_present_fields(self) -> None:
        result = apply_live_update(self.store, self.payload(LiveCountry(name="USA", confirmed=40, deaths=4)))
        us = self.store.lookup(("US",))
        assert us is not None
        self.assertEqual(Metrics(confirmed=40, deaths=4, recovered=5, active=22), us.totals)
        self.assertEqual(["US"], result["updated"])
        self.assertEqual("2020-04-02", result["date"])

    def test_children_and_own_data_untouched(self) -> None:
        apply_live_update(self.store, self.payload(LiveCountry(name="US", confirmed=40)))
        texas = self.store.lookup(("US", "Texas"))
        us = self.store.lookup(("US",))
        assert texas is not None and us is not None
        self.assertEqual(10, texas.totals.confirmed)
        self.assertEqual(10, texas.own.confirmed)
        self.assertFalse(us.has_own_data)
        # Children no longer sum to the overwritten parent.
        self.assertNotEqual(us.totals.confirmed, sum(child.totals.confirmed for _, child in us.children()))

    def test_unknown_country_is_skipped_without_creating_node(self) -> None:
        result = apply_live_update(self.store, self.payload(LiveCountry(name="Atlantis", confirmed=5)))
        self.assertIsNone(self.store.lookup(("Atlantis",)))
        self.assertEqual(["Atlantis"], result["skipped"])
        self.assertEqual([], result["updated"])

    def test_only_latest_date_changes(self) -> None:
        apply_live_update(self.store, self.payload(LiveCountry(name="US", confirmed=40)))
        earlier = self.store.lookup(("US",), date(2020, 4, 1))
        assert earlier is not None
        self.assertEqual(5, earlier.totals.confirmed)

    def test_readers_holding_old_record_see_old_totals(self) -> None:
        before = self.store.lookup(("Italy",))
        apply_live_update(self.store, self.payload(LiveCountry(name="Italy", confirmed=999)))
        assert before is not None
        self.assertEqual(100, before.totals.confirmed)
        after = self.store.lookup(("Italy",))
        assert after is not None
        self.assertEqual(999, after.totals.confirmed)

    def test_empty_store_is_noop(self) -> None:
        store = HierarchicalStore()
        result = apply_live_update(store, self.payload(LiveCountry(name="US", confirmed=1)))
        self.assertIsNone(result["date"])
        self.assertIsNone(store.last_date)


if __name__ == "__main__":
    unittest.main()
