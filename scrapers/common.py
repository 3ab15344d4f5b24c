from __future__ import annotations

import time
import urllib.request
from datetime import datetime, timezone

from errors import NetworkError

DEFAULT_TIMEOUT_SECONDS = 20
USER_AGENT = "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"


class FetchError(NetworkError):
    pass


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).replace(microsecond=0).isoformat()


def fetch_url(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS, retries: int = 1) -> str:
    last_err: Exception | None = None
    for attempt in range(retries + 1):
        try:
            headers = {
                "User-Agent": USER_AGENT,
                "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
                "Accept-Language": "en-US,en;q=0.9",
            }
            req = urllib.request.Request(url, headers=headers)
            with urllib.request.urlopen(req, timeout=timeout) as response:
                return response.read().decode("utf-8", errors="ignore")
        except Exception as err:  # pragma: no cover - network dependent
            last_err = err
            if attempt < retries:
                time.sleep(1.5 * (attempt + 1))
    raise FetchError(f"Failed to fetch URL: {url}: {last_err}")


def parse_int_cell(text: str) -> int | None:
    cleaned = text.strip().replace(",", "").replace("+", "")
    if not cleaned:
        return None
    try:
        return int(cleaned)
    except ValueError:
        return None
