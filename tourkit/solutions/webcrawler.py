"""A concurrent web crawler that fetches each URL once."""

from __future__ import annotations

import json
import sys
import threading
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Sequence, TextIO

START_URL = "https://example.com/"

_LOADING = object()


class FetchError(Exception):
    """Raised when a fetcher has no page for a URL."""


class Fetcher(Protocol):
    def fetch(self, url: str) -> tuple[str, list[str]]: ...


@dataclass
class FakeFetcher:
    """A fetcher that returns canned (body, urls) results."""

    pages: Mapping[str, tuple[str, list[str]]] = field(default_factory=dict)

    def fetch(self, url: str) -> tuple[str, list[str]]:
        """Return the body of url and the URLs found on it."""
        try:
            body, urls = self.pages[url]
        except KeyError:
            raise FetchError(f"not found: {url}") from None
        return body, list(urls)


class Crawler:
    """Crawls pages concurrently, remembering what has been fetched."""

    def __init__(self, out: Optional[TextIO] = None) -> None:
        self._out = out
        self._fetched: dict[str, object] = {}
        self._lock = threading.Lock()
        self._print_lock = threading.Lock()

    @property
    def fetched(self) -> dict[str, Optional[Exception]]:
        """Map each fetched URL to its error, or None on success."""
        with self._lock:
            return {
                url: (None if status is _LOADING else status)  # type: ignore[misc]
                for url, status in self._fetched.items()
            }

    def _say(self, message: str) -> None:
        with self._print_lock:
            print(message, file=self._out if self._out is not None else sys.stdout)

    def crawl(self, url: str, depth: int, fetcher: Fetcher) -> None:
        """Crawl pages starting at url down to the given depth."""
        if depth <= 0:
            self._say(f"<- Done with {url}, depth 0.")
            return

        with self._lock:
            if url in self._fetched:
                already = True
            else:
                already = False
                self._fetched[url] = _LOADING
        if already:
            self._say(f"<- Done with {url}, already fetched.")
            return

        error: Optional[Exception] = None
        try:
            body, urls = fetcher.fetch(url)
        except Exception as exc:
            error = exc

        with self._lock:
            self._fetched[url] = error

        if error is not None:
            self._say(f"<- Error on {url}: {error}")
            return
        self._say(f"Found: {url} {json.dumps(body, ensure_ascii=False)}")

        children = []
        for i, child in enumerate(urls):
            self._say(f"-> Crawling child {i}/{len(urls)} of {url} : {child}.")
            worker = threading.Thread(
                target=self.crawl, args=(child, depth - 1, fetcher)
            )
            worker.start()
            children.append(worker)
        for i, (child, worker) in enumerate(zip(urls, children)):
            self._say(f"<- [{url}] {i}/{len(urls)} Waiting for child {child}.")
            worker.join()
        self._say(f"<- Done with {url}")


def default_fetcher() -> FakeFetcher:
    """Return a fetcher populated with a small linked site."""
    return FakeFetcher(
        {
            "https://example.com/": (
                "The Example Site",
                ["https://example.com/pkg/", "https://example.com/cmd/"],
            ),
            "https://example.com/pkg/": (
                "Packages",
                [
                    "https://example.com/",
                    "https://example.com/cmd/",
                    "https://example.com/pkg/fmt/",
                    "https://example.com/pkg/os/",
                ],
            ),
            "https://example.com/pkg/fmt/": (
                "Package fmt",
                ["https://example.com/", "https://example.com/pkg/"],
            ),
            "https://example.com/pkg/os/": (
                "Package os",
                ["https://example.com/", "https://example.com/pkg/"],
            ),
        }
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Crawl the canned site and print what was fetched."""
    crawler = Crawler()
    crawler.crawl(START_URL, 4, default_fetcher())
    print("Fetching stats\n--------------")
    for url, error in crawler.fetched.items():
        if error is not None:
            print(f"{url} failed: {error}")
        else:
            print(f"{url} was fetched")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())