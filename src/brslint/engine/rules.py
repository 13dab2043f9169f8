from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from pathlib import Path

from brslint.config import ConfigError
from brslint.engine.types import InspectionRule, LintWarning, MatchedText
from brslint.suppressions import Suppressions


def compile_rule(rule: InspectionRule) -> re.Pattern[str]:
    """
    Compile a rule pattern.

    `^` and `$` anchor at line boundaries inside the blob; `.` never crosses
    a newline. Case-insensitive unless the rule says otherwise.
    """

    flags = re.MULTILINE
    if not rule.case_sensitive:
        flags |= re.IGNORECASE
    try:
        return re.compile(rule.pattern, flags)
    except re.error as exc:
        label = rule.rule_id or rule.pattern
        raise ConfigError(f"Invalid pattern for rule {label!r}: {exc}") from exc


def scan_rule(
    rule: InspectionRule,
    blob: str,
    *,
    path: Path,
    suppressions: Suppressions | None = None,
) -> Iterator[LintWarning]:
    """
    Yield one warning per non-overlapping match of `rule` in `blob`.

    Each search starts where the previous match ended. Matches on suppressed
    lines are dropped but still advance the cursor. A zero-width match moves
    the cursor one extra character so the scan always terminates. An empty
    blob has no lines, so even a pattern like `^` yields nothing.
    """

    if rule.disabled:
        return

    regex = compile_rule(rule)
    if not blob:
        return
    cursor = 0
    line_cursor = 0
    line = 0
    while cursor <= len(blob):
        match = regex.search(blob, cursor)
        if match is None:
            break

        start, end = match.span()
        # Line ordinal = newlines strictly before `start`. Offsets only grow,
        # so count incrementally from the previous match.
        line += blob.count("\n", line_cursor, start)
        line_cursor = start

        cursor = end if end > start else end + 1

        if suppressions is not None and suppressions.is_suppressed(line):
            continue
        yield assemble_warning(rule, path=path, line=line, match=match)


def scan_rules(
    rules: Iterable[InspectionRule],
    *,
    with_comments: str,
    without_comments: str,
    path: Path,
    suppressions: Suppressions | None = None,
) -> list[LintWarning]:
    """Run every enabled rule, grouped in configured order, against its blob."""

    warnings: list[LintWarning] = []
    for rule in rules:
        if rule.disabled:
            continue
        blob = with_comments if rule.include_comments else without_comments
        warnings.extend(scan_rule(rule, blob, path=path, suppressions=suppressions))
    return warnings


def assemble_warning(rule: InspectionRule, *, path: Path, line: int, match: re.Match[str]) -> LintWarning:
    return LintWarning(
        rule=rule.copy(),
        path=path,
        line=line,
        match=MatchedText(
            text=match.group(0),
            groups=match.groups(),
            start=match.start(),
            end=match.end(),
        ),
    )
