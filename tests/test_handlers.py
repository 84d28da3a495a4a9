from wsgiref.util import setup_testing_defaults

from tourkit.solutions.handlers import StringHandler, StructHandler, make_app


def _call(app, path="/"):
    environ = {"PATH_INFO": path}
    setup_testing_defaults(environ)
    environ["PATH_INFO"] = path
    captured = {}

    def start_response(status, headers):
        captured["status"] = status
        captured["headers"] = dict(headers)

    body = b"".join(app(environ, start_response))
    return captured["status"], captured["headers"], body


def test_string_handler_serves_text():
    status, headers, body = _call(StringHandler("plain words"))
    assert status.startswith("200")
    assert body == b"plain words"
    assert headers["Content-Length"] == str(len(body))


def test_struct_handler_joins_parts():
    _, _, body = _call(StructHandler("Hi", ",", "you"))
    assert body == b"Hi, you"


def test_app_routes_string():
    status, _, body = _call(make_app(), "/string")
    assert status.startswith("200")
    assert body == b"I'm a frayed knot."


def test_app_routes_struct():
    _, _, body = _call(make_app(), "/struct")
    assert body == b"Hello: Gophers!"


def test_app_unknown_path_is_404():
    status, _, body = _call(make_app(), "/other")
    assert status.startswith("404")
    assert body == b"404 page not found\n"


def test_app_matches_paths_exactly():
    status, _, _ = _call(make_app(), "/string/")
    assert status.startswith("404")