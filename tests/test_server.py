import socket
import threading
from unittest import mock
from wsgiref.simple_server import WSGIRequestHandler, make_server
from wsgiref.util import setup_testing_defaults

import pytest

from tourkit.server import (
    HSTS_VALUE,
    browser_command,
    environ,
    is_root,
    main,
    make_app,
    split_listen_address,
    start_browser,
    wait_server,
)
from tourkit.tour import LessonStore


class _QuietHandler(WSGIRequestHandler):
    def log_message(self, *args):
        pass


def _call(app, path, extra=None):
    env = {}
    setup_testing_defaults(env)
    env["PATH_INFO"] = path
    env.update(extra or {})
    captured = {}

    def start_response(status, headers, exc_info=None):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(env, start_response))
    return captured["status"], captured["headers"], body


def _make_root(tmp_path):
    (tmp_path / "content").mkdir()
    (tmp_path / "content" / "welcome.article").write_text("Welcome")
    (tmp_path / "template").mkdir()
    (tmp_path / "template" / "index.tmpl").write_text("<html></html>")
    (tmp_path / "static" / "img").mkdir(parents=True)
    (tmp_path / "static" / "style.css").write_text("body{}")
    (tmp_path / "static" / "img" / "favicon.ico").write_bytes(b"ICO")
    return tmp_path


def _store():
    store = LessonStore(ui_content=b"<html>ui</html>", script=b"var x;")
    store.add("basics", b'{"Title":"Basics"}\n')
    return store


def test_is_root(tmp_path):
    assert is_root(tmp_path) is False
    _make_root(tmp_path)
    assert is_root(tmp_path) is True


def test_environ_replaces_gopath(monkeypatch):
    monkeypatch.setenv("GOPATH", "/old")
    monkeypatch.setenv("TOURKIT_SAMPLE", "bar")
    env = environ("/new")
    assert env[-1] == "GOPATH=/new"
    assert [e for e in env if e.startswith("GOPATH=")] == ["GOPATH=/new"]
    assert "TOURKIT_SAMPLE=bar" in env


def test_split_listen_address_default():
    assert split_listen_address("127.0.0.1:3999") == ("127.0.0.1", "3999")


def test_split_listen_address_empty_host_and_ipv6():
    assert split_listen_address(":8080") == ("", "8080")
    assert split_listen_address("[::1]:80") == ("::1", "80")


@pytest.mark.parametrize("address", ["localhost", "a:b:c", "[::1]80", "[::1"])
def test_split_listen_address_errors(address):
    with pytest.raises(ValueError):
        split_listen_address(address)


def test_browser_command_per_platform():
    assert browser_command("http://x", "darwin") == ["open", "http://x"]
    assert browser_command("http://x", "win32") == ["cmd", "/c", "start", "http://x"]
    assert browser_command("http://x", "linux") == ["xdg-open", "http://x"]


def test_start_browser_reports_failure():
    with mock.patch("subprocess.Popen", side_effect=FileNotFoundError("none")):
        assert start_browser("http://x") is False


def test_start_browser_runs_command():
    with mock.patch("subprocess.Popen") as popen:
        assert start_browser("http://x") is True
    popen.assert_called_once_with(browser_command("http://x"))


def test_wait_server_gives_up_on_closed_port():
    with socket.socket() as s:
        s.bind(("127.0.0.1", 0))
        port = s.getsockname()[1]
    assert wait_server(f"http://127.0.0.1:{port}/", tries=2, delay=0) is False


def test_wait_server_sees_running_server(tmp_path):
    app = make_app(_store(), tmp_path)
    server = make_server("127.0.0.1", 0, app, handler_class=_QuietHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    try:
        assert wait_server(f"http://127.0.0.1:{server.server_port}/", tries=5, delay=0.05)
    finally:
        server.shutdown()
        server.server_close()


def test_app_serves_ui_and_lessons(tmp_path):
    app = make_app(_store(), tmp_path)
    status, _, body = _call(app, "/anything")
    assert status.startswith("200") and body == b"<html>ui</html>"
    status, _, body = _call(app, "/lesson/basics")
    assert body == b'{"Title":"Basics"}\n'


def test_app_missing_lesson_is_404(tmp_path):
    status, _, _ = _call(make_app(_store(), tmp_path), "/lesson/missing")
    assert status.startswith("404")


def test_app_hsts_only_on_pages(tmp_path):
    root = _make_root(tmp_path)
    app = make_app(_store(), root, hsts=True)
    _, headers, _ = _call(app, "/")
    assert headers["Strict-Transport-Security"] == HSTS_VALUE
    _, headers, _ = _call(app, "/static/style.css")
    assert "Strict-Transport-Security" not in headers
    _, headers, _ = _call(make_app(_store(), root), "/")
    assert "Strict-Transport-Security" not in headers


def test_app_static_files(tmp_path):
    root = _make_root(tmp_path)
    app = make_app(_store(), root)
    _, _, body = _call(app, "/static/style.css")
    assert body == b"body{}"
    _, _, body = _call(app, "/favicon.ico")
    assert body == b"ICO"
    status, _, _ = _call(app, "/static/../template/index.tmpl")
    assert status.startswith("404")


def test_app_static_not_modified(tmp_path):
    root = _make_root(tmp_path)
    app = make_app(_store(), root)
    _, headers, _ = _call(app, "/static/style.css")
    status, _, _ = _call(
        app, "/static/style.css", {"HTTP_IF_MODIFIED_SINCE": headers["Last-Modified"]}
    )
    assert status.startswith("304")


def test_app_script(tmp_path):
    _, headers, body = _call(make_app(_store(), tmp_path), "/script.js")
    assert body == b"var x;"
    assert headers["Cache-Control"] == "max-age=604800"
    assert headers["Content-Type"] == "application/javascript"


def test_main_without_tour_files(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("GOPATH", str(tmp_path))
    monkeypatch.delenv("GOROOT", raising=False)
    monkeypatch.delenv("GAE_ENV", raising=False)
    assert main([]) == 1


def test_main_rejects_bad_listen_address(tmp_path, monkeypatch):
    root = _make_root(tmp_path)
    monkeypatch.chdir(root)
    monkeypatch.delenv("GAE_ENV", raising=False)
    assert main(["-http", "nohost", "-openbrowser", "false"]) == 1