from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

import queries
from config import REPORTS_DIR
from errors import IngestionError
from logging_utils import configure_logging
from models import RefreshStatus
from process import ingest_reports
from store import HierarchicalStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Load CSSE daily reports and print the rolled-up summary.")
    parser.add_argument("--reports-dir", type=Path, default=REPORTS_DIR, help="Directory of MM-DD-YYYY.csv files.")
    parser.add_argument("--date", default=None, help="Summary date (YYYY-MM-DD), defaults to the latest report.")
    parser.add_argument("--country", default=None, help="Show one country instead of the world.")
    parser.add_argument("--json", action="store_true", help="Emit JSON instead of text.")
    args = parser.parse_args()

    configure_logging()
    store = HierarchicalStore()
    status = RefreshStatus()
    try:
        ingest_reports(store, args.reports_dir, status)
    except IngestionError as exc:
        print(f"Load failed: {exc}")
        return 2

    if args.country:
        payload = queries.country(store, args.country, args.date)
    else:
        payload = queries.summary_countries(store, args.date)

    if args.json:
        print(json.dumps({"load": status.model_dump(mode="json"), "summary": payload}, indent=2))
        return 0 if "error" not in payload else 1

    print(f"Loaded dates: {status.ingested_dates} failed={len(status.failed_dates)}")
    print(f"Last date: {store.last_date.isoformat() if store.last_date else None}")
    if "error" in payload:
        print(f"Query failed: {payload['error']}")
        return 1
    print(
        f"Confirmed={payload['Confirmed']} Deaths={payload['Deaths']} "
        f"Recovered={payload['Recovered']} Active={payload['Active']}"
    )
    children = payload.get("children", {})
    ranked = sorted(children.items(), key=lambda item: item[1]["Confirmed"], reverse=True)
    for name, row in ranked[:20]:
        print(f"- {name}: confirmed={row['Confirmed']} deaths={row['Deaths']} recovered={row['Recovered']}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
