from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass

IGNORE_DIRECTIVE = "ignore-warning"

_IGNORE_RE = re.compile(re.escape(IGNORE_DIRECTIVE), re.IGNORECASE)


@dataclass(frozen=True, slots=True)
class Suppressions:
    """
    Line ordinals (0-based) carrying an `ignore-warning` directive.

    The directive is matched case-insensitively anywhere on the raw line,
    comment text included, e.g. `x = 1 ' ignore-warning` or
    `<Node /> <!-- IGNORE-WARNING -->`. It silences pattern-rule warnings on
    that same line only; indentation warnings are not affected.
    """

    lines: frozenset[int] = frozenset()

    def is_suppressed(self, line: int | None) -> bool:
        if line is None:
            return False
        return line in self.lines


def _is_ignore_directive(line: str) -> bool:
    return _IGNORE_RE.search(line) is not None


def parse_suppressions(lines: Sequence[str]) -> Suppressions:
    return Suppressions(lines=frozenset(idx for idx, line in enumerate(lines) if _is_ignore_directive(line)))
