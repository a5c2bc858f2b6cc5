import unittest

from cybernews.ingestion.url_utils import origin_of, resolve_url


class TestUrlResolution(unittest.TestCase):
    def test_absolute_links_are_kept(self):
        self.assertEqual(
            resolve_url("https://other.example/a?b=1", "https://example.com/news/"),
            "https://other.example/a?b=1",
        )

    def test_root_relative_link_uses_page_origin(self):
        self.assertEqual(
            resolve_url("/2024/03/story", "https://example.com/news/latest"),
            "https://example.com/2024/03/story",
        )

    def test_path_relative_link_resolves_against_origin_not_page_path(self):
        self.assertEqual(
            resolve_url("story-two", "https://example.com:8443/news/latest"),
            "https://example.com:8443/story-two",
        )

    def test_unusable_base_returns_link_unchanged(self):
        self.assertEqual(resolve_url("/a/b", "not a url"), "/a/b")

    def test_origin_of(self):
        self.assertEqual(origin_of("http://Example.com/x/y"), "http://Example.com/")


if __name__ == "__main__":
    unittest.main()
