"""HTTP server delivering the tour UI, lessons and static files."""

from __future__ import annotations

import argparse
import html
import io
import logging
import mimetypes
import os
import re
import subprocess
import sys
import threading
import time
import urllib.error
import urllib.request
from email.utils import formatdate, parsedate_to_datetime
from pathlib import Path
from socketserver import ThreadingMixIn
from typing import Callable, Iterable, Optional, Sequence, Union
from wsgiref.simple_server import WSGIServer, make_server

from tourkit.tour import LessonNotFound, LessonStore, concat_scripts

SOCKET_PATH = "/socket"
DEFAULT_LISTEN = "127.0.0.1:3999"
HSTS_VALUE = "max-age=31536000; preload"

LOCALHOST_WARNING = """
WARNING!  WARNING!  WARNING!

The tour server appears to be listening on an address that is
not localhost and is configured to run code snippets locally.
Anyone with access to this address and port will have access
to this machine as the user running the tour.

If you don't understand this message, hit Control-C to terminate this process.

WARNING!  WARNING!  WARNING!
"""

_log = logging.getLogger(__name__)
_TEMPLATE_FIELD = re.compile(r"\{\{\s*\.(\w+)\s*\}\}")
_PLAIN = "text/plain; charset=utf-8"

WSGIApp = Callable[[dict, Callable], Iterable[bytes]]


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    daemon_threads = True


def is_root(path: Union[str, Path]) -> bool:
    """Report whether path holds the tour's content and templates."""
    p = Path(path)
    return (p / "content" / "welcome.article").exists() and (
        p / "template" / "index.tmpl"
    ).exists()


def environ(gopath: str) -> list[str]:
    """Return the process environment as KEY=VALUE with GOPATH replaced."""
    env = [f"{k}={v}" for k, v in os.environ.items() if k != "GOPATH"]
    env.append(f"GOPATH={gopath}")
    return env


def split_listen_address(address: str) -> tuple[str, str]:
    """Split "host:port" or "[host]:port" into host and port."""
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"address {address}: missing ']' in address")
        host, rest = address[1:end], address[end + 1:]
        if not rest.startswith(":"):
            raise ValueError(f"address {address}: missing port in address")
        port = rest[1:]
        if ":" in port:
            raise ValueError(f"address {address}: too many colons in address")
        if "[" in host:
            raise ValueError(f"address {address}: unexpected '[' in address")
    else:
        host, sep, port = address.rpartition(":")
        if not sep:
            raise ValueError(f"address {address}: missing port in address")
        if ":" in host:
            raise ValueError(f"address {address}: too many colons in address")
        if "[" in host or "]" in host or "]" in port:
            raise ValueError(f"address {address}: unexpected bracket in address")
    return host, port


def wait_server(url: str, tries: int = 20, delay: float = 0.1) -> bool:
    """Poll url until the server answers; report whether it did."""
    for _ in range(tries):
        try:
            with urllib.request.urlopen(url, timeout=5):
                return True
        except urllib.error.HTTPError as exc:
            exc.close()
            return True
        except OSError:
            time.sleep(delay)
    return False


def browser_command(url: str, platform: Optional[str] = None) -> list[str]:
    """Return the command that opens url in a browser on the platform."""
    platform = platform if platform is not None else sys.platform
    if platform == "darwin":
        return ["open", url]
    if platform.startswith("win"):
        return ["cmd", "/c", "start", url]
    return ["xdg-open", url]


def start_browser(url: str) -> bool:
    """Try to open url in a browser; report whether the opener started."""
    try:
        subprocess.Popen(browser_command(url))
    except OSError:
        return False
    return True


def _send(start_response: Callable, status: str, body: bytes, headers) -> list[bytes]:
    start_response(status, list(headers) + [("Content-Length", str(len(body)))])
    return [body]


def _not_found(start_response: Callable) -> list[bytes]:
    return _send(
        start_response,
        "404 Not Found",
        b"404 page not found\n",
        [("Content-Type", _PLAIN)],
    )


def _send_content(
    environ_: dict, start_response: Callable, body: bytes, mtime: float, headers
) -> list[bytes]:
    last_modified = formatdate(mtime, usegmt=True)
    headers = list(headers) + [("Last-Modified", last_modified)]
    since_header = environ_.get("HTTP_IF_MODIFIED_SINCE")
    if since_header:
        try:
            since = parsedate_to_datetime(since_header).timestamp()
        except (TypeError, ValueError):
            since = None
        if since is not None and int(mtime) <= since:
            start_response("304 Not Modified", headers)
            return [b""]
    return _send(start_response, "200 OK", body, headers)


def _serve_file(
    base: Path, url_path: str, environ_: dict, start_response: Callable
) -> list[bytes]:
    parts = [p for p in url_path.split("/") if p not in ("", ".")]
    if ".." in parts or not parts:
        return _not_found(start_response)
    target = base.joinpath(*parts)
    try:
        if not target.is_file():
            return _not_found(start_response)
        body = target.read_bytes()
        mtime = target.stat().st_mtime
    except OSError:
        return _not_found(start_response)
    ctype = mimetypes.guess_type(target.name)[0] or "application/octet-stream"
    return _send_content(environ_, start_response, body, mtime, [("Content-Type", ctype)])


def make_app(store: LessonStore, root: Union[str, Path], hsts: bool = False) -> WSGIApp:
    """Return a WSGI app serving the UI, lessons, script and static files."""
    root_path = Path(root)
    script_time = time.time()
    page_headers = [("Strict-Transport-Security", HSTS_VALUE)] if hsts else []

    def app(environ_: dict, start_response: Callable) -> Iterable[bytes]:
        path = environ_.get("PATH_INFO") or "/"
        if path == "/script.js" and store.script is not None:
            headers = [
                ("Content-Type", "application/javascript"),
                ("Cache-Control", "max-age=604800"),
            ]
            return _send_content(environ_, start_response, store.script, script_time, headers)
        if path == "/favicon.ico":
            return _serve_file(root_path / "static" / "img", path, environ_, start_response)
        if path.startswith(("/content/img/", "/static/")):
            return _serve_file(root_path, path, environ_, start_response)
        buf = io.BytesIO()
        if path.startswith("/lesson/"):
            try:
                store.write_lesson(path[len("/lesson/"):], buf)
            except LessonNotFound:
                return _not_found(start_response)
            headers = [("Content-Type", "application/json")] + page_headers
            return _send(start_response, "200 OK", buf.getvalue(), headers)
        store.render_ui(buf)
        headers = [("Content-Type", "text/html; charset=utf-8")] + page_headers
        return _send(start_response, "200 OK", buf.getvalue(), headers)

    return app


def _render_index(template: str, analytics_html: str, socket_addr: str, transport: str) -> str:
    values = {
        "AnalyticsHTML": analytics_html,
        "SocketAddr": html.escape(socket_addr),
        "Transport": transport,
    }

    def replace(match: re.Match) -> str:
        name = match.group(1)
        if name not in values:
            raise ValueError(f"render UI: unknown field {name}")
        return values[name]

    return _TEMPLATE_FIELD.sub(replace, template)


def _build_store(root: Path, transport: str, socket_addr: str, analytics_html: str) -> LessonStore:
    try:
        template = (root / "template" / "index.tmpl").read_text("utf-8")
    except OSError as exc:
        raise RuntimeError(f"parse index.tmpl: {exc}") from exc
    ui = _render_index(template, analytics_html, socket_addr, transport).encode("utf-8")
    try:
        playground_js = (root / "static" / "playground.js").read_bytes()
    except OSError as exc:
        raise RuntimeError("playground.js not found in static files") from exc
    store = LessonStore(ui, concat_scripts(root, playground_js))
    # Lessons are read pre-encoded, one JSON document per lesson.
    for lesson_file in sorted((root / "content").glob("*.json")):
        store.add(lesson_file.stem, lesson_file.read_bytes())
    return store


def _find_root() -> Path:
    candidates = []
    explicit = os.environ.get("TOUR_ROOT")
    if explicit:
        candidates.append(Path(explicit))
    candidates.append(Path.cwd())
    gopath = os.environ.get("GOPATH") or str(Path.home() / "go")
    candidates += [
        Path(entry) / "src" / "tour"
        for entry in gopath.split(os.pathsep)
        if entry
    ]
    goroot = os.environ.get("GOROOT")
    if goroot:
        candidates.append(Path(goroot) / "misc" / "tour")
    for candidate in candidates:
        if is_root(candidate):
            return candidate
    raise FileNotFoundError("could not find tour content; check $GOROOT and $GOPATH")


def _parse_bool(text: str) -> bool:
    lowered = text.lower()
    if lowered in ("1", "t", "true"):
        return True
    if lowered in ("0", "f", "false"):
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value {text!r}")


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve the tour.")
    parser.add_argument("-http", "--http", default=DEFAULT_LISTEN, help="host:port to listen on")
    parser.add_argument(
        "-openbrowser", "--openbrowser", nargs="?", const=True, default=True,
        type=_parse_bool, help="open browser automatically",
    )
    return parser.parse_args(argv)


def _serve(host: str, port: str, app: WSGIApp) -> int:
    try:
        with make_server(host, int(port), app, server_class=_ThreadingWSGIServer) as server:
            server.serve_forever()
    except (OSError, ValueError) as exc:
        _log.error("%s", exc)
        return 1
    except KeyboardInterrupt:
        pass
    return 0


def _serve_appengine() -> int:
    root = Path(".")
    try:
        store = _build_store(root, "HTTPTransport", "", os.environ.get("TOUR_ANALYTICS", ""))
    except (OSError, RuntimeError, ValueError) as exc:
        _log.error("%s", exc)
        return 1
    return _serve("", os.environ.get("PORT") or "8080", make_app(store, root, hsts=True))


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Find the tour files and serve them over HTTP."""
    args = _parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")

    if os.environ.get("GAE_ENV") == "standard":
        _log.info("running in App Engine Standard mode")
        return _serve_appengine()

    try:
        root = _find_root()
    except FileNotFoundError as exc:
        _log.error("Couldn't find tour files: %s", exc)
        return 1
    _log.info("Serving content from %s", root)

    try:
        host, port = split_listen_address(args.http)
    except ValueError as exc:
        _log.error("%s", exc)
        return 1
    host = host or "localhost"
    if host not in ("127.0.0.1", "localhost"):
        _log.warning(LOCALHOST_WARNING)
    http_addr = f"{host}:{port}"

    try:
        store = _build_store(root, "SocketTransport", f"ws://{http_addr}{SOCKET_PATH}", "")
    except (OSError, RuntimeError, ValueError) as exc:
        _log.error("%s", exc)
        return 1

    url = f"http://{http_addr}"

    def announce() -> None:
        if wait_server(url) and args.openbrowser and start_browser(url):
            _log.info("A browser window should open. If not, please visit %s", url)
        else:
            _log.info("Please open your web browser and visit %s", url)

    threading.Thread(target=announce, daemon=True).start()
    return _serve(host, port, make_app(store, root))


if __name__ == "__main__":
    raise SystemExit(main())