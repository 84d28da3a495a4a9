# tourkit

A small toolkit for running an interactive programming tour: a WSGI lesson
server, the helper libraries the tour's exercises call, and worked answers
to those exercises. It uses only the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Running the tour server

```
tourkit [-http HOST:PORT] [-openbrowser true|false]
```

`-http` (also `--http`) defaults to `127.0.0.1:3999`; an empty host means
`localhost`. If the host is neither `127.0.0.1` nor `localhost`, a warning
is logged. Once the server answers, it tries to open a browser (`open`,
`cmd /c start` or `xdg-open`, depending on the platform) unless
`-openbrowser false` is given.

The content root is the first of these that holds both
`content/welcome.article` and `template/index.tmpl`: `$TOUR_ROOT`, the
current directory, `<entry>/src/tour` for each `$GOPATH` entry (default
`~/go`), and `$GOROOT/misc/tour`.

From the root the server reads:

- `template/index.tmpl`, in which `{{.AnalyticsHTML}}`, `{{.SocketAddr}}`
  and `{{.Transport}}` are substituted (any other field is an error);
- `static/playground.js`, followed by the UI scripts listed in
  `tourkit.tour.SCRIPT_FILES`, concatenated into `/script.js`;
- `content/*.json`, each an already encoded lesson named by its file stem.

Routes:

| Path | Response |
|------|----------|
| `/` and anything unmatched | the rendered UI |
| `/lesson/` | all lessons as one JSON object keyed by name |
| `/lesson/<name>` | one lesson's JSON, or 404 |
| `/script.js` | the concatenated scripts, cached for a week |
| `/favicon.ico` | `static/img/favicon.ico` |
| `/static/...`, `/content/img/...` | files under the root |

When `GAE_ENV=standard` is set, the server instead serves from the current
directory on `$PORT` (default 8080) with the `HTTPTransport` transport,
inserts `$TOUR_ANALYTICS` into the page, and sends a
`Strict-Transport-Security` header on the UI and lesson responses.

### What the server does not do

- It does not compile or run code snippets: there is no `/socket`
  endpoint, and the page is told a socket address it cannot connect to.
- It has no code-formatting endpoint.
- It does not read `.article` lesson sources. Lessons must already be in
  their JSON form under `content/*.json`; `tourkit.tour` provides the pieces
  to build them (`Lesson`, `Page`, `make_code_file`, `encode_lesson`,
  `find_play_code`, `prep_content_appengine`), but no article parser.

## Library modules

- `tourkit.tree`: `Tree` nodes, `insert(t, v)`, and `new(k, rng=None)`
  building a randomly shaped search tree holding `k, 2k, ..., 10k`.
  `str(tree)` gives the parenthesised in-order form, e.g. `((1) 2 (3))`.
- `tourkit.pic`: `encode_png(image)` for any object with `bounds()` and
  `at(x, y)`; `show_image(image)` prints `IMAGE:` followed by the base64 PNG;
  `show(f)` calls `f(256, 256)` and shows the values as a blue-tinted
  picture. `PixelGrid` is a plain RGBA pixel buffer.
- `tourkit.reader`: `validate(reader)` reads up to 1 MiB, checks every byte
  is `A`, prints `OK!` or an error on stderr, and returns whether it passed.
- `tourkit.wc`: `check(f)` runs a word-count function over fixed cases,
  prints `PASS`/`FAIL` reports and returns whether all passed.
- `tourkit.tour`: lesson data classes, `LessonStore` (`add`,
  `write_lesson`, `write_all_lessons`, `render_ui`; unknown names raise
  `LessonNotFound`) and `concat_scripts(root, playground_js)`.
- `tourkit.server`: `make_app(store, root, hsts=False)` returns the WSGI app;
  also `is_root`, `environ`, `split_listen_address`, `wait_server`,
  `browser_command`, `start_browser` and `main`.

```python
import random

from tourkit import tree, wc
from tourkit.solutions.binarytrees import same, walk
from tourkit.solutions.exercises import word_count

t = tree.new(1, random.Random(0))
print(list(walk(t)))   # [1, 2, 3, 4, 5, 6, 7, 8, 9, 10]
print(same(tree.new(1, random.Random(1)), tree.new(2, random.Random(2))))  # False

wc.check(word_count)   # prints PASS reports, returns True
```

## Reference solutions

`tourkit.solutions.exercises` holds `sqrt_checked` (raises
`NegativeSqrtError` for negative input), `sqrt_loop`, the `fibonacci()`
generator, `word_count`, `MyReader` (endless `A` bytes), `rot13` and
`Rot13Reader`, `pic_pattern`, `IPAddr` and `XorImage`.
`tourkit.solutions.binarytrees` has `walk` and `same`;
`tourkit.solutions.webcrawler` has `Crawler`, `FakeFetcher` and
`default_fetcher`; `tourkit.solutions.handlers` has `StringHandler`,
`StructHandler` and `make_app`.

Three of them run as commands:

```
tourkit-binarytrees    # compares random trees and reports PASSED/FAILED
tourkit-webcrawler     # crawls the canned example.com site and prints fetch statistics
tourkit-handlers       # serves /string and /struct on localhost:4000
```