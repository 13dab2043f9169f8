from __future__ import annotations

from pathlib import Path
from typing import Any

from brslint.engine.types import InspectionRule, LintWarning
from brslint.inspector import LineInspector


def write_source(root: Path, relpath: str, content: str) -> Path:
    path = root / relpath
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


def make_rule(pattern: str, **kwargs: Any) -> InspectionRule:
    flags = {key: kwargs.pop(key) for key in ("case_sensitive", "include_comments", "disabled") if key in kwargs}
    return InspectionRule(pattern=pattern, extra=kwargs, **flags)


def inspect_source(root: Path, relpath: str, content: str, *rules: InspectionRule) -> list[LintWarning]:
    path = write_source(root, relpath, content)
    return LineInspector(rules).inspect(path)
