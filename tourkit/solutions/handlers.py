"""Two tiny WSGI handlers and an app serving them."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Sequence
from wsgiref.simple_server import make_server

_TEXT = [("Content-Type", "text/plain; charset=utf-8")]


def _respond(start_response: Callable, status: str, body: bytes) -> Iterable[bytes]:
    start_response(status, _TEXT + [("Content-Length", str(len(body)))])
    return [body]


@dataclass(frozen=True)
class StringHandler:
    """Serve a fixed string."""

    text: str

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        return _respond(start_response, "200 OK", self.text.encode("utf-8"))


@dataclass(frozen=True)
class StructHandler:
    """Serve a greeting built from its three parts."""

    greeting: str
    punct: str
    who: str

    def __call__(self, environ: dict, start_response: Callable) -> Iterable[bytes]:
        body = f"{self.greeting}{self.punct} {self.who}".encode("utf-8")
        return _respond(start_response, "200 OK", body)


def make_app() -> Callable[[dict, Callable], Iterable[bytes]]:
    """Return a WSGI app routing /string and /struct to the handlers."""
    routes = {
        "/string": StringHandler("I'm a frayed knot."),
        "/struct": StructHandler("Hello", ":", "Gophers!"),
    }

    def app(environ: dict, start_response: Callable) -> Iterable[bytes]:
        handler = routes.get(environ.get("PATH_INFO", ""))
        if handler is None:
            return _respond(start_response, "404 Not Found", b"404 page not found\n")
        return handler(environ, start_response)

    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Serve the app on localhost:4000 until interrupted."""
    try:
        with make_server("localhost", 4000, make_app()) as server:
            server.serve_forever()
    except OSError as exc:
        print(exc, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


if __name__ == "__main__":
    raise SystemExit(main())