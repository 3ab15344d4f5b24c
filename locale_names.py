from __future__ import annotations

# Upstream sources disagree on country labels; keys are the variants seen in
# the daily reports and the live page, values the names used as tree keys.
LOCALE_CORRECTIONS: dict[str, str] = {
    "USA": "US",
    "UK": "United Kingdom",
    "UAE": "United Arab Emirates",
    "S. Korea": "Korea, South",
    "Ivory Coast": "Cote d'Ivoire",
    "Congo (Kinshasa)": "DRC",
    "Congo (Brazzaville)": "Republic of Congo",
    "Congo": "Republic of Congo",
    "West Bank and Gaza": "Palestine",
    "Taiwan*": "Taiwan",
}

HISTORICAL_COUNTRY_RENAMES: dict[str, str] = {
    "Mainland China": "China",
}


def normalize_locale(raw: str) -> str:
    name = raw.strip()
    return LOCALE_CORRECTIONS.get(name, name)


def modernize_country(name: str) -> str:
    return HISTORICAL_COUNTRY_RENAMES.get(name, name)


def canonical_country(raw: str) -> str:
    """Name under which a country is stored and looked up."""
    return modernize_country(normalize_locale(raw))
