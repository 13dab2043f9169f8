from __future__ import annotations

from pathlib import Path

import pytest

from brslint.config import (
    ConfigError,
    IndentationConfig,
    LintConfig,
    default_rules,
    load_config,
    parse_rule,
    path_is_ignored,
)


def test_load_config_defaults_when_no_config(tmp_path: Path) -> None:
    config = load_config(tmp_path)
    assert isinstance(config, LintConfig)
    assert config.indentation is None
    assert config.extensions == (".brs", ".xml")
    assert [r.rule_id for r in config.rules] == [r.rule_id for r in default_rules()]


def test_load_config_reads_tool_table(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text(
        r"""
[tool.brslint]
extensions = [".brs"]

[tool.brslint.indentation]
character = "tab"

[tool.brslint.ignore]
paths = ["components/vendor/"]

[[tool.brslint.rules]]
id = "no-stop"
regex = "^\\s*stop\\b"
severity = "Error"
message = "Remove stop"
case-sensitive = true

[[tool.brslint.rules]]
pattern = "TODO"
include_comments = true
disabled = true
tags = ["cleanup"]
""".lstrip(),
        encoding="utf-8",
    )

    config = load_config(tmp_path)
    assert config.extensions == (".brs",)
    assert config.indentation == IndentationConfig(character="tab", count=1)
    assert config.ignore.paths == ("components/vendor/",)

    first, second = config.rules
    assert first.pattern == r"^\s*stop\b"
    assert first.case_sensitive is True
    assert first.include_comments is False
    assert first.extra == {"id": "no-stop", "severity": "error", "message": "Remove stop"}

    assert second.pattern == "TODO"
    assert second.include_comments is True
    assert second.disabled is True
    assert second.extra == {"tags": ["cleanup"]}
    assert second.severity == "warning"


def test_standalone_config_file_wins_over_pyproject(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[tool.brslint]\nextensions = [".xml"]\n', encoding="utf-8")
    (tmp_path / ".brslint.toml").write_text("rules = []\n", encoding="utf-8")

    config = load_config(tmp_path)
    assert config.rules == ()
    assert config.extensions == (".brs", ".xml")


def test_pyproject_without_tool_table_uses_defaults(tmp_path: Path) -> None:
    (tmp_path / "pyproject.toml").write_text('[project]\nname = "x"\n', encoding="utf-8")
    assert load_config(tmp_path) == LintConfig()


def test_invalid_toml_raises(tmp_path: Path) -> None:
    (tmp_path / ".brslint.toml").write_text("rules = [\n", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid TOML"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    ("table", "message"),
    [
        ({}, "pattern` is required"),
        ({"pattern": ""}, "non-empty string"),
        ({"pattern": "("}, "not a valid regular expression"),
        ({"pattern": "x", "disabled": "yes"}, "must be a boolean"),
        ({"pattern": "x", "severity": "fatal"}, "one of: info, warning, error"),
    ],
)
def test_parse_rule_validation(table: dict, message: str) -> None:
    with pytest.raises(ConfigError, match=message):
        parse_rule(table, field_name="rules[0]")


def test_rules_must_be_array(tmp_path: Path) -> None:
    (tmp_path / ".brslint.toml").write_text('rules = "stop"\n', encoding="utf-8")
    with pytest.raises(ConfigError, match="array of tables"):
        load_config(tmp_path)


@pytest.mark.parametrize(
    ("indentation", "message"),
    [
        ('character = "dots"', "space, tab"),
        ("count = 0", "> 0"),
        ('count = "4"', "must be an integer"),
    ],
)
def test_indentation_validation(tmp_path: Path, indentation: str, message: str) -> None:
    (tmp_path / ".brslint.toml").write_text(f"[indentation]\n{indentation}\n", encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_config(tmp_path)


def test_default_rules_are_fresh_copies() -> None:
    first = default_rules()
    first[0].extra["severity"] = "info"
    assert default_rules()[0].severity == "error"


def test_path_is_ignored_patterns(tmp_path: Path) -> None:
    root = tmp_path
    vendored = root / "components" / "vendor" / "lib.brs"
    generated = root / "source" / "gen" / "api.generated.brs"
    normal = root / "source" / "main.brs"

    assert path_is_ignored(vendored, project_root=root, ignore_patterns=["components/vendor/"])
    assert path_is_ignored(generated, project_root=root, ignore_patterns=["*.generated.brs"])
    assert path_is_ignored(generated, project_root=root, ignore_patterns=["source/*/api.*"])
    assert not path_is_ignored(normal, project_root=root, ignore_patterns=["components/vendor/", "*.generated.brs"])
    assert not path_is_ignored(Path("/elsewhere/main.brs"), project_root=root, ignore_patterns=["*.brs"])
