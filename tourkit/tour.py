"""Tour lessons: their JSON form, storage and delivery."""

from __future__ import annotations

import base64
import hashlib
import io
import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import BinaryIO, Iterable, Iterator, Optional, Union

APPENGINE_PREFIX = b"#appengine:"

# Kept in dependency order.
SCRIPT_FILES: tuple[str, ...] = (
    "static/lib/jquery.min.js",
    "static/lib/jquery-ui.min.js",
    "static/lib/angular.min.js",
    "static/lib/codemirror/lib/codemirror.js",
    "static/lib/codemirror/mode/go/go.js",
    "static/lib/angular-ui.min.js",
    "static/js/app.js",
    "static/js/controllers.js",
    "static/js/directives.js",
    "static/js/services.js",
    "static/js/values.js",
)

_JSON_HTML_ESCAPES = (
    ("<", "\\u003c"),
    (">", "\\u003e"),
    ("&", "\\u0026"),
    ("\u2028", "\\u2028"),
    ("\u2029", "\\u2029"),
)


class LessonNotFound(LookupError):
    """Raised when a lesson of the requested name does not exist."""

    def __init__(self, name: str = "") -> None:
        super().__init__("lesson not found")
        self.name = name


@dataclass
class Code:
    """A code element of a lesson page."""

    file_name: str
    raw: bytes
    play: bool = False


@dataclass
class Section:
    """A section of a lesson, holding elements and nested sections."""

    title: str = ""
    elems: list = field(default_factory=list)


def find_play_code(elem: object) -> list[Code]:
    """Return every playable Code element inside elem, in document order."""
    if isinstance(elem, Code):
        return [elem] if elem.play else []
    if isinstance(elem, Section):
        return [code for child in elem.elems for code in find_play_code(child)]
    return []


def nocode(section: Section) -> bool:
    """Report whether the section has no playable Code directly inside it."""
    return not any(isinstance(e, Code) and e.play for e in section.elems)


@dataclass(frozen=True)
class CodeFile:
    """The JSON form of a code file in a page."""

    name: str
    content: str
    hash: str


@dataclass
class Page:
    """The JSON form of a lesson page."""

    title: str
    content: str
    files: list[CodeFile] = field(default_factory=list)


@dataclass
class Lesson:
    """The JSON form of a lesson."""

    title: str
    description: str
    pages: list[Page] = field(default_factory=list)


def make_code_file(name: str, raw: bytes) -> CodeFile:
    """Build a CodeFile whose hash is the base64 SHA-1 of raw."""
    digest = hashlib.sha1(raw).digest()
    return CodeFile(
        name=name,
        content=raw.decode("utf-8", errors="replace"),
        hash=base64.b64encode(digest).decode("ascii"),
    )


def encode_lesson(lesson: Lesson) -> bytes:
    """Encode a lesson as one line of HTML-safe JSON ending in a newline."""
    doc = {
        "Title": lesson.title,
        "Description": lesson.description,
        "Pages": [
            {
                "Title": page.title,
                "Content": page.content,
                "Files": [
                    {"Name": f.name, "Content": f.content, "Hash": f.hash}
                    for f in page.files
                ],
            }
            for page in lesson.pages
        ],
    }
    text = json.dumps(doc, ensure_ascii=False, separators=(",", ":"))
    for raw, escaped in _JSON_HTML_ESCAPES:
        text = text.replace(raw, escaped)
    return (text + "\n").encode("utf-8")


def _strip_appengine(lines: Iterable[bytes]) -> Iterator[bytes]:
    drop = False
    for line in lines:
        if line.startswith(APPENGINE_PREFIX):
            line = line[len(APPENGINE_PREFIX):]
            if line[:1] == b" ":
                line = line[1:]
            drop = True
        elif drop:
            if len(line) > 1:
                line = b""
            drop = False
        if line:
            yield line


def prep_content_appengine(stream: BinaryIO) -> io.BytesIO:
    """Strip the "#appengine:" prefix (and one following space) from lines.

    A non-blank line that follows a run of prefixed lines is dropped.
    """
    return io.BytesIO(b"".join(_strip_appengine(stream)))


def concat_scripts(root: Union[str, Path], playground_js: Union[str, bytes]) -> bytes:
    """Concatenate the playground script and the UI scripts under root."""
    if isinstance(playground_js, str):
        playground_js = playground_js.encode("utf-8")
    parts = [playground_js]
    base = Path(root)
    for rel in SCRIPT_FILES:
        try:
            parts.append((base / rel).read_bytes())
        except OSError as exc:
            raise OSError(f"couldn't open {rel}: {exc}") from exc
    return b"".join(parts)


class LessonStore:
    """Rendered UI, concatenated script and encoded lessons of a tour."""

    def __init__(
        self, ui_content: Optional[bytes] = None, script: Optional[bytes] = None
    ) -> None:
        self.ui_content = ui_content
        self.script = script
        self.lessons: dict[str, bytes] = {}

    def add(self, name: str, content: Union[bytes, Lesson]) -> None:
        """Store a lesson, encoding it first if it is a Lesson."""
        if isinstance(content, Lesson):
            content = encode_lesson(content)
        self.lessons[name] = content

    def _require_ui(self, what: str) -> None:
        if self.ui_content is None:
            raise RuntimeError(f"{what} called before the tour was initialised")

    def write_lesson(self, name: str, out: BinaryIO) -> None:
        """Write the named lesson, or all lessons when name is empty."""
        self._require_ui("write_lesson")
        if not name:
            self.write_all_lessons(out)
            return
        try:
            content = self.lessons[name]
        except KeyError:
            raise LessonNotFound(name) from None
        out.write(content)

    def write_all_lessons(self, out: BinaryIO) -> None:
        """Write every lesson as one JSON object keyed by lesson name."""
        out.write(b"{")
        out.write(
            b",".join(
                json.dumps(name, ensure_ascii=False).encode("utf-8") + b":" + content
                for name, content in self.lessons.items()
            )
        )
        out.write(b"}")

    def render_ui(self, out: BinaryIO) -> None:
        """Write the rendered tour UI."""
        self._require_ui("render_ui")
        assert self.ui_content is not None
        out.write(self.ui_content)