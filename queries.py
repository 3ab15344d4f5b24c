"""Query contract served to the HTTP layer.

Every function returns a JSON-ready payload. Failures are payloads too:
``{"error": "INVALID_DATE"}`` for bad date input and ``{"error": "NOT_FOUND"}``
when a date or location has no data.
"""
from __future__ import annotations

import re
from datetime import date, datetime

from config import EARLIEST_DATE, QUERY_DATE_FORMAT
from errors import InvalidDateError
from locale_names import canonical_country
from records import Record
from store import HierarchicalStore, NodePath

INVALID_DATE = {"error": "INVALID_DATE"}
NOT_FOUND = {"error": "NOT_FOUND"}
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def parse_query_date(text: str, today: date | None = None) -> date:
    if not isinstance(text, str) or not DATE_PATTERN.match(text):
        raise InvalidDateError(f"Malformed date: {text!r}")
    try:
        parsed = datetime.strptime(text, QUERY_DATE_FORMAT).date()
    except (TypeError, ValueError) as exc:
        raise InvalidDateError(f"Unparseable date: {text!r}") from exc
    if today is None:
        today = date.today()
    if parsed < EARLIEST_DATE or parsed > today:
        raise InvalidDateError(f"Date out of range: {text}")
    return parsed


def format_record(record: Record, depth: int = 0) -> dict:
    totals = record.totals
    payload: dict = {
        "Confirmed": totals.confirmed,
        "Deaths": totals.deaths,
        "Recovered": totals.recovered,
        "Active": totals.active,
    }
    if depth > 0:
        payload["children"] = {name: format_record(child, depth - 1) for name, child in record.children()}
    return payload


def _point(store: HierarchicalStore, path: NodePath, depth: int, day: str | None) -> dict:
    try:
        when = parse_query_date(day) if day is not None else None
    except InvalidDateError:
        return dict(INVALID_DATE)
    record = store.lookup(path, when)
    if record is None:
        return dict(NOT_FOUND)
    return format_record(record, depth)


def _series(
    store: HierarchicalStore,
    path: NodePath,
    depth: int,
    start: str,
    end: str | None,
) -> list[dict] | dict:
    try:
        first = parse_query_date(start)
        last = parse_query_date(end) if end else None
    except InvalidDateError:
        return dict(INVALID_DATE)
    return [{"date": day.isoformat(), **format_record(record, depth)} for day, record in store.time_series(path, first, last)]


def summary(store: HierarchicalStore, day: str | None = None) -> dict:
    return _point(store, (), 0, day)


def summary_countries(store: HierarchicalStore, day: str | None = None) -> dict:
    return _point(store, (), 1, day)


def summary_series(
    store: HierarchicalStore,
    start: str,
    end: str | None = None,
    with_countries: bool = False,
) -> list[dict] | dict:
    return _series(store, (), 1 if with_countries else 0, start, end)


def country(store: HierarchicalStore, name: str, day: str | None = None) -> dict:
    return _point(store, (canonical_country(name),), 1, day)


def country_series(store: HierarchicalStore, name: str, start: str, end: str | None = None) -> list[dict] | dict:
    return _series(store, (canonical_country(name),), 0, start, end)


def subregion(store: HierarchicalStore, name: str, region: str, day: str | None = None) -> dict:
    return _point(store, (canonical_country(name), region), 1, day)


def subregion_series(
    store: HierarchicalStore,
    name: str,
    region: str,
    start: str,
    end: str | None = None,
) -> list[dict] | dict:
    return _series(store, (canonical_country(name), region), 0, start, end)
