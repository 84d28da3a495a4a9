import io
import threading
from collections import Counter

import pytest

from tourkit.solutions.webcrawler import (
    START_URL,
    Crawler,
    FakeFetcher,
    FetchError,
    default_fetcher,
    main,
)


class CountingFetcher:
    def __init__(self, inner):
        self.inner = inner
        self.calls = Counter()
        self.lock = threading.Lock()

    def fetch(self, url):
        with self.lock:
            self.calls[url] += 1
        return self.inner.fetch(url)


def test_fake_fetcher_returns_page():
    f = FakeFetcher({"https://example.com/a": ("body", ["https://example.com/b"])})
    assert f.fetch("https://example.com/a") == ("body", ["https://example.com/b"])


def test_fake_fetcher_missing_page_raises():
    with pytest.raises(FetchError) as info:
        FakeFetcher().fetch("https://example.com/x")
    assert str(info.value) == "not found: https://example.com/x"


def test_crawl_records_every_page_once():
    fetcher = CountingFetcher(default_fetcher())
    crawler = Crawler(out=io.StringIO())
    crawler.crawl(START_URL, 4, fetcher)
    fetched = crawler.fetched
    pages = set(default_fetcher().pages)
    assert pages <= set(fetched)
    assert all(fetched[url] is None for url in pages)
    assert all(count == 1 for count in fetcher.calls.values())
    assert set(fetcher.calls) == set(fetched)


def test_crawl_records_missing_page_error():
    out = io.StringIO()
    crawler = Crawler(out=out)
    crawler.crawl(START_URL, 4, default_fetcher())
    missing = "https://example.com/cmd/"
    assert isinstance(crawler.fetched[missing], FetchError)
    assert f"<- Error on {missing}: not found: {missing}" in out.getvalue()


def test_crawl_prints_found_with_quoted_body():
    out = io.StringIO()
    Crawler(out=out).crawl(START_URL, 1, default_fetcher())
    text = out.getvalue()
    assert f'Found: {START_URL} "The Example Site"' in text
    assert f"<- Done with {START_URL}\n" in text


def test_crawl_depth_zero_fetches_nothing():
    out = io.StringIO()
    crawler = Crawler(out=out)
    crawler.crawl(START_URL, 0, default_fetcher())
    assert crawler.fetched == {}
    assert out.getvalue() == f"<- Done with {START_URL}, depth 0.\n"


def test_crawl_depth_limits_reach():
    crawler = Crawler(out=io.StringIO())
    crawler.crawl(START_URL, 1, default_fetcher())
    assert list(crawler.fetched) == [START_URL]


def test_main_prints_stats(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "Fetching stats\n--------------\n" in out
    assert f"{START_URL} was fetched" in out
    assert "https://example.com/cmd/ failed: not found: https://example.com/cmd/" in out