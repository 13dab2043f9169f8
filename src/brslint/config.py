from __future__ import annotations

import re
import tomllib
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Literal, cast

from brslint.engine.types import InspectionRule
from brslint.languages.registry import DEFAULT_EXTENSIONS


class ConfigError(ValueError):
    """Raised when a brslint configuration or rule pattern is invalid."""


IndentCharacter = Literal["space", "tab"]

CONFIG_FILENAME = ".brslint.toml"
DEFAULT_INDENT_COUNT = 4

_RULE_FLAG_KEYS: dict[str, str] = {
    "case_sensitive": "case_sensitive",
    "case-sensitive": "case_sensitive",
    "include_comments": "include_comments",
    "include-comments": "include_comments",
    "disabled": "disabled",
}
# `regex` is accepted for rule files written for older line-inspector tools.
_PATTERN_KEYS = ("pattern", "regex")
_SEVERITIES = {"info", "warning", "error"}


def default_rules() -> list[InspectionRule]:
    """Built-in rules used when the configuration does not list any."""

    return [
        InspectionRule(
            pattern=r"^\s*stop\b",
            extra={"id": "stop-statement", "severity": "error", "message": "Remove stop statements before release."},
        ),
        InspectionRule(
            pattern=r"^\s*(?:print\b|\?)",
            extra={"id": "print-statement", "severity": "warning", "message": "Remove debug print statements."},
        ),
        InspectionRule(
            pattern=r'CreateObject\(\s*"roAssociativeArray"\s*\)',
            extra={
                "id": "aa-literal",
                "severity": "info",
                "message": 'Use an `{}` literal instead of CreateObject("roAssociativeArray").',
            },
        ),
        InspectionRule(
            pattern=r'CreateObject\(\s*"roArray"',
            extra={
                "id": "array-literal",
                "severity": "info",
                "message": 'Use a `[]` literal instead of CreateObject("roArray").',
            },
        ),
        InspectionRule(
            pattern=r"\bhttp://",
            extra={"id": "insecure-url", "severity": "warning", "message": "Use https:// URLs."},
        ),
    ]


@dataclass(frozen=True, slots=True)
class IndentationConfig:
    character: IndentCharacter = "space"
    count: int = DEFAULT_INDENT_COUNT

    @property
    def indent_char(self) -> str:
        return "\t" if self.character == "tab" else " "


@dataclass(frozen=True, slots=True)
class IgnoreConfig:
    paths: tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LintConfig:
    rules: tuple[InspectionRule, ...] = field(default_factory=lambda: tuple(default_rules()))
    indentation: IndentationConfig | None = None
    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    ignore: IgnoreConfig = field(default_factory=IgnoreConfig)


def load_config(project_dir: Path | str = ".") -> LintConfig:
    """
    Load configuration for `project_dir`.

    `.brslint.toml` (top-level table) wins over `[tool.brslint]` in
    `pyproject.toml`. With neither present, returns defaults.
    """

    project_dir_path = Path(project_dir)

    standalone = project_dir_path / CONFIG_FILENAME
    if standalone.exists():
        return parse_config_table(_read_toml(standalone), prefix="")

    pyproject_path = project_dir_path / "pyproject.toml"
    if not pyproject_path.exists():
        return LintConfig()

    data = _read_toml(pyproject_path)
    tool_table = data.get("tool", {})
    if not isinstance(tool_table, dict):
        return LintConfig()

    brslint_table = tool_table.get("brslint", {})
    if not isinstance(brslint_table, dict) or not brslint_table:
        return LintConfig()

    return parse_config_table(brslint_table, prefix="tool.brslint")


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Invalid TOML in {path}: {exc}") from exc


def parse_config_table(table: dict[str, Any], *, prefix: str = "tool.brslint") -> LintConfig:
    def name(key: str) -> str:
        return f"{prefix}.{key}" if prefix else key

    if "rules" in table:
        rules = tuple(parse_rules(table["rules"], field_name=name("rules")))
    else:
        rules = tuple(default_rules())

    extensions_value = table.get("extensions", list(DEFAULT_EXTENSIONS))
    extensions = _validate_str_list(extensions_value, field_name=name("extensions"))

    return LintConfig(
        rules=rules,
        indentation=_parse_indentation_config(table.get("indentation"), field_name=name("indentation")),
        extensions=extensions,
        ignore=_parse_ignore_config(table.get("ignore"), field_name=name("ignore")),
    )


def parse_rules(value: Any, *, field_name: str = "rules") -> list[InspectionRule]:
    if not isinstance(value, list):
        raise ConfigError(f"`{field_name}` must be an array of tables.")
    return [parse_rule(item, field_name=f"{field_name}[{idx}]") for idx, item in enumerate(value)]


def parse_rule(value: Any, *, field_name: str = "rule") -> InspectionRule:
    """
    Build an `InspectionRule` from a config table.

    Known keys map to rule fields; every other key is kept verbatim in
    `InspectionRule.extra` so it travels into the produced warnings.
    """

    if not isinstance(value, dict):
        raise ConfigError(f"`{field_name}` must be a table.")

    pattern: str | None = None
    flags: dict[str, bool] = {}
    extra: dict[str, Any] = {}
    for key, raw in value.items():
        if key in _PATTERN_KEYS:
            if not isinstance(raw, str) or not raw:
                raise ConfigError(f"`{field_name}.{key}` must be a non-empty string.")
            pattern = raw
        elif key in _RULE_FLAG_KEYS:
            if not isinstance(raw, bool):
                raise ConfigError(f"`{field_name}.{key}` must be a boolean.")
            flags[_RULE_FLAG_KEYS[key]] = raw
        else:
            extra[key] = raw

    if pattern is None:
        raise ConfigError(f"`{field_name}.pattern` is required.")

    severity = extra.get("severity")
    if severity is not None:
        extra["severity"] = _validate_severity(severity, field_name=f"{field_name}.severity")

    try:
        re.compile(pattern)
    except re.error as exc:
        raise ConfigError(f"`{field_name}.pattern` is not a valid regular expression: {exc}") from exc

    return InspectionRule(pattern=pattern, extra=extra, **flags)


def _validate_severity(value: Any, *, field_name: str) -> str:
    if not isinstance(value, str):
        raise ConfigError(f"`{field_name}` must be a string.")
    normalized = value.strip().lower()
    if normalized == "warn":
        normalized = "warning"
    if normalized not in _SEVERITIES:
        raise ConfigError(f"`{field_name}` must be one of: info, warning, error.")
    return normalized


def _validate_str_list(value: Any, *, field_name: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if not isinstance(value, list) or any(not isinstance(v, str) for v in value):
        raise ConfigError(f"`{field_name}` must be a list of strings.")
    return tuple(v.strip() for v in value)


def _parse_indentation_config(value: Any, *, field_name: str) -> IndentationConfig | None:
    if value is None:
        return None
    if value is False:
        return None
    if not isinstance(value, dict):
        raise ConfigError(f"`{field_name}` must be a table.")

    character = value.get("character", "space")
    if not isinstance(character, str) or character.strip().lower() not in {"space", "tab"}:
        raise ConfigError(f"`{field_name}.character` must be one of: space, tab.")
    character = character.strip().lower()

    default_count = 1 if character == "tab" else DEFAULT_INDENT_COUNT
    count = value.get("count", default_count)
    if not isinstance(count, int) or isinstance(count, bool):
        raise ConfigError(f"`{field_name}.count` must be an integer.")
    if count <= 0:
        raise ConfigError(f"`{field_name}.count` must be > 0.")

    return IndentationConfig(character=cast(IndentCharacter, character), count=count)


def _parse_ignore_config(value: Any, *, field_name: str) -> IgnoreConfig:
    if value is None:
        return IgnoreConfig()
    if not isinstance(value, dict):
        raise ConfigError(f"`{field_name}` must be a table.")
    paths = _validate_str_list(value.get("paths", []), field_name=f"{field_name}.paths")
    return IgnoreConfig(paths=paths)


def path_is_ignored(path: Path, *, project_root: Path, ignore_patterns: Iterable[str]) -> bool:
    """
    Return True if `path` matches any ignore patterns.

    Patterns are evaluated against the POSIX-style relative path from `project_root`.

    Supported patterns:
    - Directory prefixes: "components/vendor/" matches everything below it.
    - Globs without slashes: "*.test.brs" matches basenames.
    - Globs with slashes: "source/**/generated/*.brs" matches full relative paths.
    """

    import fnmatch

    try:
        relative = path.resolve().relative_to(project_root.resolve())
    except (ValueError, OSError, RuntimeError):
        # Paths outside the root are never ignored implicitly.
        return False

    rel_posix = relative.as_posix()
    basename = relative.name

    for raw_pattern in ignore_patterns:
        pattern = raw_pattern.strip().replace("\\", "/")
        if not pattern:
            continue
        if pattern.startswith("./"):
            pattern = pattern[2:]

        if pattern.endswith("/"):
            if rel_posix.startswith(pattern):
                return True
            continue

        if "/" in pattern:
            if fnmatch.fnmatch(rel_posix, pattern):
                return True
        else:
            if fnmatch.fnmatch(basename, pattern) or fnmatch.fnmatch(rel_posix, pattern):
                return True

    return False
