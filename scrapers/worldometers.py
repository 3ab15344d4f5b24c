"""Worldometers live counters.

Reads the three headline counters and the per-country table of the
coronavirus page. Cells that do not hold a number (``N/A``, blanks) are left
out of the country entry so the reconciler keeps the report figure.
"""
from __future__ import annotations

import html as html_lib
import re

from config import LIVE_FETCH_TIMEOUT_SECONDS, LIVE_SOURCE_URL
from models import LiveCountry, LiveTotals, LiveUpdate

from .common import fetch_url, parse_int_cell

COUNTER_PATTERN = re.compile(r'<div class="maincounter-number"[^>]*>\s*<span[^>]*>([^<]*)</span>', re.IGNORECASE)
TABLE_PATTERN = re.compile(
    r'<table[^>]*id="main_table_countries_today"[^>]*>.*?<tbody[^>]*>(.*?)</tbody>',
    re.IGNORECASE | re.DOTALL,
)
ROW_PATTERN = re.compile(r"<tr([^>]*)>(.*?)</tr>", re.IGNORECASE | re.DOTALL)
CELL_PATTERN = re.compile(r"<td[^>]*>(.*?)</td>", re.IGNORECASE | re.DOTALL)
TAG_PATTERN = re.compile(r"<[^>]+>")

# Column positions in the country table.
NAME_COLUMN = 1
COUNT_COLUMNS = {"confirmed": 2, "deaths": 4, "recovered": 6, "active": 8}


class LiveParseError(Exception):
    pass


def _cell_text(cell: str) -> str:
    return html_lib.unescape(TAG_PATTERN.sub("", cell)).strip()


def parse_counters(page: str) -> LiveTotals:
    values = [parse_int_cell(_cell_text(raw)) for raw in COUNTER_PATTERN.findall(page)]
    if len(values) < 3:
        raise LiveParseError(f"Expected 3 headline counters, found {len(values)}.")
    confirmed, deaths, recovered = (value or 0 for value in values[:3])
    return LiveTotals(
        confirmed=confirmed,
        deaths=deaths,
        recovered=recovered,
        active=confirmed - deaths - recovered,
    )


def parse_country_rows(page: str) -> list[LiveCountry]:
    table = TABLE_PATTERN.search(page)
    if table is None:
        return []
    countries: list[LiveCountry] = []
    for attrs, body in ROW_PATTERN.findall(table.group(1)):
        if "row_continent" in attrs:
            continue
        cells = [_cell_text(cell) for cell in CELL_PATTERN.findall(body)]
        if len(cells) <= NAME_COLUMN or not cells[NAME_COLUMN]:
            continue
        counts = {
            field: parse_int_cell(cells[index]) if index < len(cells) else None
            for field, index in COUNT_COLUMNS.items()
        }
        countries.append(LiveCountry(name=cells[NAME_COLUMN], **counts))
    return countries


def parse_live_page(page: str) -> LiveUpdate:
    return LiveUpdate(global_totals=parse_counters(page), per_country=parse_country_rows(page))


def fetch_live_update(url: str = LIVE_SOURCE_URL, timeout: float = LIVE_FETCH_TIMEOUT_SECONDS) -> LiveUpdate:
    page = fetch_url(url, timeout=timeout)
    return parse_live_page(page)
