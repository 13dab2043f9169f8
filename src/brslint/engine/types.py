from __future__ import annotations

import copy
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal

Severity = Literal["info", "warning", "error"]

DEFAULT_SEVERITY: Severity = "warning"


@dataclass(slots=True)
class InspectionRule:
    """
    One configured pattern check.

    `extra` carries any additional configured fields (`id`, `severity`,
    `message`, ...). The engine never interprets them beyond the convenience
    accessors below; they are copied into every warning the rule produces.
    """

    pattern: str
    case_sensitive: bool = False
    include_comments: bool = False
    disabled: bool = False
    extra: dict[str, Any] = field(default_factory=dict)

    @property
    def rule_id(self) -> str | None:
        value = self.extra.get("id")
        return str(value) if value is not None else None

    @property
    def severity(self) -> str:
        return str(self.extra.get("severity", DEFAULT_SEVERITY))

    @property
    def message(self) -> str:
        return str(self.extra.get("message", self.pattern))

    def copy(self) -> InspectionRule:
        return copy.deepcopy(self)

    def to_dict(self) -> dict[str, Any]:
        out = copy.deepcopy(self.extra)
        out.update(
            {
                "pattern": self.pattern,
                "case_sensitive": self.case_sensitive,
                "include_comments": self.include_comments,
                "disabled": self.disabled,
            }
        )
        return out


@dataclass(frozen=True, slots=True)
class MatchedText:
    text: str
    groups: tuple[str | None, ...] = ()
    start: int = 0
    end: int = 0


@dataclass(slots=True)
class LintWarning:
    rule: InspectionRule
    path: Path
    line: int  # 0-based
    match: MatchedText | None = None

    @property
    def rule_id(self) -> str | None:
        return self.rule.rule_id

    @property
    def severity(self) -> str:
        return self.rule.severity

    @property
    def message(self) -> str:
        return self.rule.message

    def to_dict(self) -> dict[str, Any]:
        out = self.rule.to_dict()
        out["path"] = str(self.path)
        out["line"] = self.line
        out["match"] = None
        if self.match is not None:
            out["match"] = {
                "text": self.match.text,
                "groups": list(self.match.groups),
                "start": self.match.start,
                "end": self.match.end,
            }
        return out
