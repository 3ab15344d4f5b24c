"""Daily report row adapter.

The CSSE daily reports changed layout on 2020-03-22. Newer files carry a
``FIPS`` column, an ``Admin2`` (county) column and an ``Active`` count; older
files only have country/province and three counts. Both layouts are mapped
onto ``NormalizedRow`` here so that the store never sees raw headers.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Mapping

from errors import IngestionError
from locale_names import canonical_country
from records import Metrics

GENERATION_A = "A"
GENERATION_B = "B"

GENERATION_A_MARKER = "fips"
PROMOTED_SUBREGIONS = frozenset({"Hong Kong", "Macau"})


@dataclass(frozen=True)
class NormalizedRow:
    country: str
    confirmed: int
    deaths: int
    recovered: int
    active: int | None = None
    subregion: str | None = None
    locality: str | None = None

    @property
    def path(self) -> tuple[str, ...]:
        segments = [self.country]
        if self.subregion:
            segments.append(self.subregion)
        if self.locality:
            segments.append(self.locality)
        return tuple(segments)

    def metrics(self) -> Metrics:
        return Metrics(
            confirmed=self.confirmed,
            deaths=self.deaths,
            recovered=self.recovered,
            active=self.active,
        )


def canonical_header(name: str) -> str:
    return name.strip().lstrip("\ufeff").strip().lower().replace("/", "_").replace(" ", "_")


def parse_count(value: object) -> int:
    if value is None:
        return 0
    text = str(value).strip().replace(",", "")
    if not text:
        return 0
    try:
        return int(text)
    except ValueError:
        pass
    try:
        number = float(text)
    except ValueError:
        return 0
    if math.isnan(number) or math.isinf(number):
        return 0
    return int(number)


def _text(row: Mapping[str, str | None], key: str) -> str | None:
    value = row.get(key)
    if value is None:
        return None
    value = value.strip()
    return value or None


def detect_generation(row: Mapping[str, str | None]) -> str:
    keys = {canonical_header(k) for k in row.keys() if k is not None}
    return GENERATION_A if GENERATION_A_MARKER in keys else GENERATION_B


def adapt_row(row: Mapping[str, str | None]) -> NormalizedRow:
    canon = {canonical_header(k): v for k, v in row.items() if k is not None}
    if "country_region" not in canon:
        raise IngestionError(f"Row has no country column: {sorted(canon)}")
    raw_country = _text(canon, "country_region")
    if raw_country is None:
        raise IngestionError("Row has an empty country value.")

    country = canonical_country(raw_country)
    subregion = _text(canon, "province_state")
    confirmed = parse_count(canon.get("confirmed"))
    deaths = parse_count(canon.get("deaths"))
    recovered = parse_count(canon.get("recovered"))

    if detect_generation(canon) == GENERATION_B:
        return NormalizedRow(
            country=country,
            subregion=subregion,
            confirmed=confirmed,
            deaths=deaths,
            recovered=recovered,
        )

    locality = _text(canon, "admin2")
    if subregion in PROMOTED_SUBREGIONS:
        country = subregion
        subregion = None
    return NormalizedRow(
        country=country,
        subregion=subregion,
        locality=locality,
        confirmed=confirmed,
        deaths=deaths,
        recovered=recovered,
        active=parse_count(canon.get("active")),
    )
