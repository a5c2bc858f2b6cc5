import unittest
from concurrent.futures import ThreadPoolExecutor
from unittest import mock

import requests

from cybernews.errors import FetchError
from cybernews.extraction.fulltext import ArticleBodyExtractor, extract_body_text
from cybernews.ingestion.fetcher import ContentFetcher


LONG = "Attackers exploited a flaw in the VPN appliance to gain initial access. " * 5


def _response(status_code=200, chunks=(b"",)):
    resp = mock.MagicMock()
    resp.status_code = status_code
    resp.iter_content.return_value = list(chunks)
    return resp


GET = "cybernews.ingestion.fetcher.requests.get"


class TestFetcherSecurity(unittest.TestCase):
    def assertBlocked(self, url):
        with self.assertRaises(FetchError) as ctx:
            ContentFetcher().fetch(url)
        self.assertEqual(ctx.exception.kind, FetchError.BLOCKED)

    def test_blocks_localhost(self):
        self.assertBlocked("http://localhost:1234/")

    def test_blocks_private_ip(self):
        self.assertBlocked("http://127.0.0.1:1234/")
        self.assertBlocked("http://192.168.1.10/feed")

    def test_blocks_non_http_scheme(self):
        self.assertBlocked("file:///etc/passwd")


class TestFetcherErrors(unittest.TestCase):
    def test_returns_body_bytes(self):
        with mock.patch(GET, return_value=_response(chunks=[b"<rss>", b"</rss>"])) as get:
            self.assertEqual(ContentFetcher().fetch("https://example.com/feed"), b"<rss></rss>")
        headers = get.call_args.kwargs["headers"]
        self.assertIn("Mozilla/5.0", headers["User-Agent"])
        self.assertEqual(get.call_args.kwargs["timeout"], 10.0)

    def test_http_error_status(self):
        with mock.patch(GET, return_value=_response(status_code=503)):
            with self.assertRaises(FetchError) as ctx:
                ContentFetcher().fetch("https://example.com/feed")
        self.assertEqual(ctx.exception.kind, FetchError.HTTP_STATUS)
        self.assertEqual(ctx.exception.status_code, 503)

    def test_timeout(self):
        with mock.patch(GET, side_effect=requests.Timeout("read timed out")):
            with self.assertRaises(FetchError) as ctx:
                ContentFetcher().fetch("https://example.com/feed")
        self.assertEqual(ctx.exception.kind, FetchError.TIMEOUT)

    def test_connection_error(self):
        with mock.patch(GET, side_effect=requests.ConnectionError("dns failure")):
            with self.assertRaises(FetchError) as ctx:
                ContentFetcher().fetch("https://example.com/feed")
        self.assertEqual(ctx.exception.kind, FetchError.NETWORK)

    def test_oversized_response(self):
        with mock.patch(GET, return_value=_response(chunks=[b"x" * 600, b"x" * 600])):
            with self.assertRaises(FetchError):
                ContentFetcher(max_bytes=1000).fetch("https://example.com/big")

    def test_concurrent_fetches_share_no_session(self):
        fetcher = ContentFetcher()
        urls = [f"https://example.com/feed/{i}" for i in range(8)]
        with mock.patch(GET, side_effect=lambda *a, **kw: _response(chunks=[b"ok"])) as get:
            with ThreadPoolExecutor(max_workers=4) as pool:
                bodies = list(pool.map(fetcher.fetch, urls))
        self.assertEqual(bodies, [b"ok"] * 8)
        self.assertEqual(sorted(c.args[0] for c in get.call_args_list), sorted(urls))
        self.assertFalse(hasattr(fetcher, "session"))


class TestBodyExtraction(unittest.TestCase):
    def test_first_selector_over_threshold_wins(self):
        html = (
            "<html><body>"
            "<div class='article-content'>Too short.</div>"
            f"<div class='post-content'>{LONG}</div>"
            "<div class='entry-content'>" + ("Other text. " * 40) + "</div>"
            "</body></html>"
        )
        text = extract_body_text(html)
        self.assertTrue(text.startswith("Attackers exploited"))
        self.assertNotIn("Other text", text)

    def test_noise_is_removed_before_measuring(self):
        html = (
            "<html><body><div class='content'>"
            "<script>var padding = '" + ("x" * 400) + "';</script>"
            "<nav>" + ("menu " * 100) + "</nav>"
            "<p>Only a short body.</p>"
            "</div></body></html>"
        )
        self.assertIsNone(extract_body_text(html))

    def test_paragraph_selectors_concatenate_and_normalize(self):
        html = "<main><p>" + LONG + "</p>\n\n<p>  Second   paragraph. </p></main>"
        text = extract_body_text(html)
        self.assertIn("Second paragraph.", text)
        self.assertNotIn("  ", text)

    def test_extractor_returns_none_when_fetch_fails(self):
        extractor = ArticleBodyExtractor(fetcher=ContentFetcher())
        self.assertIsNone(extractor.extract("http://localhost/article"))


if __name__ == "__main__":
    unittest.main()
