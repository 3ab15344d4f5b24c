from __future__ import annotations

import unittest
from unittest.mock import patch

from errors import NetworkError
from scrapers.common import FetchError, fetch_url, parse_int_cell


class _FakeResponse:
    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        return None

    def read(self):
        return b"ok"


class ScrapersCommonTests(unittest.TestCase):
    def test_fetch_url_passes_timeout(self) -> None:
        with patch("urllib.request.urlopen", return_value=_FakeResponse()) as urlopen:
            text = fetch_url("https://example.com", timeout=7, retries=0)
        self.assertEqual("ok", text)
        self.assertEqual(7, urlopen.call_args.kwargs["timeout"])

    def test_fetch_url_raises_network_error_after_retries(self) -> None:
        with patch("urllib.request.urlopen", side_effect=OSError("timed out")) as urlopen:
            with patch("scrapers.common.time.sleep") as sleep:
                with self.assertRaises(FetchError) as ctx:
                    fetch_url("https://example.com", retries=2)
        self.assertIsInstance(ctx.exception, NetworkError)
        self.assertEqual(3, urlopen.call_count)
        self.assertEqual(2, sleep.call_count)

    def test_parse_int_cell(self) -> None:
        self.assertEqual(1234567, parse_int_cell(" 1,234,567 "))
        self.assertEqual(45, parse_int_cell("+45"))
        self.assertIsNone(parse_int_cell("N/A"))
        self.assertIsNone(parse_int_cell(""))


if __name__ == "__main__":
    unittest.main()
