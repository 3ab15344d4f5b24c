from .common import FetchError, fetch_url, utc_now_iso
from .worldometers import LiveParseError, fetch_live_update, parse_live_page

__all__ = [
    "FetchError",
    "LiveParseError",
    "fetch_live_update",
    "fetch_url",
    "parse_live_page",
    "utc_now_iso",
]
