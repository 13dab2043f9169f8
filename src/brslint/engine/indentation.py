from __future__ import annotations

import re
from pathlib import Path

from brslint.config import IndentationConfig
from brslint.engine.comments import strip_script_comment
from brslint.engine.types import InspectionRule, LintWarning
from brslint.languages.registry import Dialect, detect_dialect

INDENTATION_RULE = InspectionRule(
    pattern="",
    extra={"id": "indentation", "severity": "warning", "message": "Incorrect indentation"},
)

# BrightScript block structure. Matched against comment-stripped lines.
_BRS_OPENERS = (
    re.compile(r"^\s*(?:(?:public|private)\s+)?(?:function|sub)\b", re.IGNORECASE),
    re.compile(r"[=:(,]\s*(?:function|sub)\s*\(", re.IGNORECASE),
    re.compile(r"^\s*(?:for|while)\b", re.IGNORECASE),
    re.compile(r"^\s*else\s*$", re.IGNORECASE),
    re.compile(r"^\s*#\s*(?:if|else\s*if|else)\b", re.IGNORECASE),
    re.compile(r"^\s*try\s*$", re.IGNORECASE),
    re.compile(r"^\s*catch\b", re.IGNORECASE),
    re.compile(r"[{\[(]\s*$"),
)
_BRS_IF_RE = re.compile(r"^\s*(?:else\s*)?if\b", re.IGNORECASE)
# `if x then y = 1` is a complete statement; `if x then` / `if x` open a block.
_BRS_SINGLE_LINE_IF_RE = re.compile(r"\bthen\b\s*\S", re.IGNORECASE)
_BRS_INLINE_END_RE = re.compile(r"\bend\s*(?:function|sub)\s*$", re.IGNORECASE)
_BRS_CLOSERS = (
    re.compile(r"^\s*[}\])]"),
    re.compile(r"^\s*end\s*(?:function|sub|if|for|while|try)\b", re.IGNORECASE),
    re.compile(r"^\s*(?:end|next)\s*$", re.IGNORECASE),
    re.compile(r"^\s*(?:else|catch)\b", re.IGNORECASE),
    re.compile(r"^\s*#\s*(?:else\s*if|else|end\s*if)\b", re.IGNORECASE),
)

_XML_TAG_RE = re.compile(r"<(/?)([A-Za-z_][\w:.\-]*)[^<>]*?(/?)>")
_XML_OPEN_TAG_START_RE = re.compile(r"<[A-Za-z_][\w:.\-]*[^<>]*$")
_XML_INLINE_COMMENT_RE = re.compile(r"<!--.*?-->")
_XML_COMMENT_OPEN = "<!--"
_XML_COMMENT_CLOSE = "-->"
_CDATA_OPEN = "<![CDATA["
_CDATA_CLOSE = "]]>"


class IndentationInspector:
    """
    Checks leading whitespace against the block depth implied by the file.

    Fed one raw line at a time, in file order, together with the caller's
    comment state for that line. Lines inside a markup comment and blank lines
    are never flagged.
    """

    def __init__(self, config: IndentationConfig, path: Path | str) -> None:
        self.config = config
        self.path = Path(path)
        self.dialect = detect_dialect(self.path)
        self._depth = 0
        self._prev_opens = False
        self._in_tag = False
        self._in_cdata = False
        self._prev_comment = False
        self._warnings: list[LintWarning] = []

    @property
    def warnings(self) -> list[LintWarning]:
        return list(self._warnings)

    def check_line(self, line: str, number: int, comment: bool) -> None:
        if self.dialect is Dialect.SCRIPT:
            self._check_script(line, number)
        elif self.dialect is Dialect.MARKUP:
            self._check_markup(line, number, comment)

    def _check_script(self, line: str, number: int) -> None:
        code = strip_script_comment(line).rstrip("\r\n")

        if self._prev_opens:
            self._depth += 1
        if any(rx.search(code) for rx in _BRS_CLOSERS):
            self._depth = max(0, self._depth - 1)

        self._check_leading(line, number)
        self._prev_opens = _opens_script_block(code)

    def _check_markup(self, line: str, number: int, comment: bool) -> None:
        body = line.rstrip("\r\n")

        started_in_comment = self._prev_comment
        self._prev_comment = comment
        if started_in_comment:
            if not comment and _XML_COMMENT_CLOSE in body:
                # Tags after the closer still move the depth; the line itself is not checked.
                tail = _XML_INLINE_COMMENT_RE.sub("", body.split(_XML_COMMENT_CLOSE, 1)[1])
                self._depth = max(0, self._depth + _tag_balance(tail))
            return

        if self._in_cdata:
            if _CDATA_CLOSE in body:
                self._in_cdata = False
                tail = body.split(_CDATA_CLOSE, 1)[1]
                self._depth = max(0, self._depth + _tag_balance(tail))
            return
        if body.lstrip().startswith(("<?", "<!DOCTYPE")):
            return

        body = _XML_INLINE_COMMENT_RE.sub("", body)
        if comment:
            # Only the code before the block comment opener counts.
            body = body.split(_XML_COMMENT_OPEN, 1)[0]
            if not body.strip():
                return

        stripped = body.lstrip()
        leading_close = stripped.startswith("</")
        net = 0
        if self._in_tag and stripped.startswith(("/>", ">")):
            # A lone tag terminator lines up with the tag it closes.
            self._in_tag = False
            self._depth = max(0, self._depth - 1)
            if stripped.startswith(">"):
                net += 1
            body = stripped.split(">", 1)[1]

        if leading_close:
            self._depth = max(0, self._depth - 1)

        self._check_leading(line, number)

        if _CDATA_OPEN in body and _CDATA_CLOSE not in body:
            self._in_cdata = True
            body = body.split(_CDATA_OPEN, 1)[0]

        net += _tag_balance(body, skip_leading_close=leading_close)
        if self._in_tag:
            # Attribute lines of a multi-line tag sit one level deeper.
            if body.rstrip().endswith("/>"):
                self._in_tag = False
                net -= 1
            elif ">" in body:
                self._in_tag = False
        elif _XML_OPEN_TAG_START_RE.search(body):
            self._in_tag = True
            net += 1

        self._depth = max(0, self._depth + net)

    def _check_leading(self, line: str, number: int) -> None:
        if not line.strip():
            return
        content = line.lstrip(" \t")
        leading = line[: len(line) - len(content)]
        expected = self.config.indent_char * (self._depth * self.config.count)
        if leading != expected:
            self._warnings.append(LintWarning(rule=INDENTATION_RULE.copy(), path=self.path, line=number))


def _opens_script_block(code: str) -> bool:
    if _BRS_INLINE_END_RE.search(code):
        return False
    if _BRS_IF_RE.search(code):
        return _BRS_SINGLE_LINE_IF_RE.search(code) is None
    return any(rx.search(code) for rx in _BRS_OPENERS)


def _tag_balance(body: str, *, skip_leading_close: bool = False) -> int:
    net = 0
    for idx, tag in enumerate(_XML_TAG_RE.finditer(body)):
        closing, _name, self_closing = tag.groups()
        if closing:
            # A leading closer is applied before the line is checked.
            if not (idx == 0 and skip_leading_close):
                net -= 1
        elif not self_closing:
            net += 1
    return net
