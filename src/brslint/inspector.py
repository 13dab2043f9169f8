from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from brslint.config import IndentationConfig
from brslint.engine.comments import CommentStripper
from brslint.engine.indentation import IndentationInspector
from brslint.engine.rules import scan_rules
from brslint.engine.types import InspectionRule, LintWarning
from brslint.languages.registry import detect_dialect
from brslint.suppressions import parse_suppressions
from brslint.utils import split_lines

_logger = logging.getLogger(__name__)


class LineInspector:
    """
    Runs pattern rules (and optionally the indentation check) over one file.

    An instance holds only configuration; every `inspect()` call builds its
    own comment state, suppressions and blobs, so one instance may be shared
    by threads inspecting different files.
    """

    def __init__(
        self,
        rules: Iterable[InspectionRule],
        indentation: IndentationConfig | None = None,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self.rules = tuple(rules)
        self.indentation = indentation
        self.logger = logger or _logger

    def inspect(self, path: Path | str) -> list[LintWarning]:
        """
        Return indentation warnings followed by pattern-rule warnings.

        Raises `OSError` when the file cannot be read and `ConfigError` when a
        rule pattern does not compile.
        """

        path = Path(path)
        text = path.read_text(encoding="utf-8", errors="replace")
        return self.inspect_text(path, text)

    def inspect_text(self, path: Path | str, text: str) -> list[LintWarning]:
        path = Path(path)
        dialect = detect_dialect(path)
        stripper = CommentStripper(dialect)
        indent_inspector = IndentationInspector(self.indentation, path) if self.indentation is not None else None

        lines = split_lines(text)
        suppressions = parse_suppressions(lines)
        for number, line in enumerate(lines):
            stripper.feed(line)
            if indent_inspector is not None:
                indent_inspector.check_line(line, number, stripper.in_comment)

        warnings: list[LintWarning] = []
        if indent_inspector is not None:
            warnings.extend(indent_inspector.warnings)

        stripped = stripper.result()
        warnings.extend(
            scan_rules(
                self.rules,
                with_comments=stripped.with_comments,
                without_comments=stripped.without_comments,
                path=path,
                suppressions=suppressions,
            )
        )
        self.logger.debug(
            "%s: %d warning(s), %d suppressed line(s), dialect=%s",
            path,
            len(warnings),
            len(suppressions.lines),
            dialect.value,
        )
        return warnings
