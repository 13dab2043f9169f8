from __future__ import annotations

import re
from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

from brslint.languages.registry import Dialect

SCRIPT_COMMENT_MARKER = "'"
MARKUP_COMMENT_OPEN = "<!--"
MARKUP_COMMENT_CLOSE = "-->"

_INLINE_MARKUP_COMMENT_RE = re.compile(r"<!--.*?-->")


class CommentState(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


def strip_line(dialect: Dialect, state: CommentState, line: str) -> tuple[CommentState, str]:
    """
    Strip comment text from one physical line.

    Returns the comment state to carry into the next line and the stripped
    line. The line terminator, when present, is always kept.
    """

    if dialect is Dialect.SCRIPT:
        return state, strip_script_comment(line)
    if dialect is Dialect.MARKUP:
        return strip_markup_comment(state, line)
    return state, line


def strip_script_comment(line: str) -> str:
    """
    Drop everything from the first `'` outside a string literal to end of line.

    BrightScript escapes a quote inside a string by doubling it (`""`), which
    toggles the in-string flag twice, so plain parity tracking is exact.
    """

    body, terminator = _split_terminator(line)
    in_string = False
    for idx, ch in enumerate(body):
        if ch == '"':
            in_string = not in_string
        elif ch == SCRIPT_COMMENT_MARKER and not in_string:
            return body[:idx] + terminator
    return line


def strip_markup_comment(state: CommentState, line: str) -> tuple[CommentState, str]:
    body, terminator = _split_terminator(line)

    if state is CommentState.INSIDE:
        close = body.find(MARKUP_COMMENT_CLOSE)
        if close == -1:
            return CommentState.INSIDE, terminator
        body = body[close + len(MARKUP_COMMENT_CLOSE) :]
        state = CommentState.OUTSIDE

    body = _INLINE_MARKUP_COMMENT_RE.sub("", body)
    opener = body.find(MARKUP_COMMENT_OPEN)
    if opener != -1:
        return CommentState.INSIDE, body[:opener] + terminator
    return state, body + terminator


def _split_terminator(line: str) -> tuple[str, str]:
    if line.endswith("\n"):
        return line[:-1], "\n"
    return line, ""


@dataclass(frozen=True, slots=True)
class StrippedFile:
    with_comments: str
    without_comments: str
    final_state: CommentState


class CommentStripper:
    """
    Feeds the lines of one file through `strip_line` in order.

    `with_comments` keeps markup comments but never script comments: the
    script dialect has no block form, so its comments are always removed.
    """

    def __init__(self, dialect: Dialect) -> None:
        self.dialect = dialect
        self.state = CommentState.OUTSIDE
        self._with_comments: list[str] = []
        self._without_comments: list[str] = []

    @property
    def in_comment(self) -> bool:
        return self.state is CommentState.INSIDE

    def feed(self, line: str) -> str:
        self.state, stripped = strip_line(self.dialect, self.state, line)
        self._with_comments.append(stripped if self.dialect is Dialect.SCRIPT else line)
        self._without_comments.append(stripped)
        return stripped

    def result(self) -> StrippedFile:
        return StrippedFile(
            with_comments="".join(self._with_comments),
            without_comments="".join(self._without_comments),
            final_state=self.state,
        )


def strip_lines(dialect: Dialect, lines: Iterable[str]) -> StrippedFile:
    stripper = CommentStripper(dialect)
    for line in lines:
        stripper.feed(line)
    return stripper.result()
