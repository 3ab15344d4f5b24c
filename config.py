from __future__ import annotations

import os
from datetime import date
from pathlib import Path


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        return float(raw)
    except ValueError:
        return default


def _env_flag(name: str, default: bool = False) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "on"}


SOURCE_REPO_DIR = Path(os.getenv("COVID_SOURCE_REPO_DIR", "COVID-19"))
REPORTS_SUBDIR = Path("csse_covid_19_data") / "csse_covid_19_daily_reports"
REPORTS_DIR = SOURCE_REPO_DIR / REPORTS_SUBDIR
SOURCE_REPO_URL = "https://github.com/CSSEGISandData/COVID-19/"

LIVE_SOURCE_URL = os.getenv("COVID_LIVE_SOURCE_URL", "https://www.worldometers.info/coronavirus/")

REFRESH_INTERVAL_SECONDS = _env_float("COVID_REFRESH_INTERVAL_SECONDS", 15 * 60)
SYNC_TIMEOUT_SECONDS = _env_float("COVID_SYNC_TIMEOUT_SECONDS", 120)
FILE_READ_TIMEOUT_SECONDS = _env_float("COVID_FILE_READ_TIMEOUT_SECONDS", 30)
LIVE_FETCH_TIMEOUT_SECONDS = _env_float("COVID_LIVE_FETCH_TIMEOUT_SECONDS", 20)
AUTO_REFRESH = _env_flag("COVID_AUTO_REFRESH")

EARLIEST_DATE = date(2020, 1, 1)
QUERY_DATE_FORMAT = "%Y-%m-%d"
REPORT_FILE_DATE_FORMAT = "%m-%d-%Y"
