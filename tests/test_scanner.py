from __future__ import annotations

import os
from pathlib import Path

import pytest

from helpers import make_rule, write_source

from brslint.config import ConfigError, LintConfig
from brslint.scanner import (
    discover_files,
    lint_files,
    lint_path,
    prepare_target,
    resolve_worker_count,
    worker_count_from_env,
)


def test_resolve_worker_count_default_uses_cpu_times_two(monkeypatch) -> None:
    monkeypatch.setattr(os, "cpu_count", lambda: 4)
    assert resolve_worker_count(None) == 8


def test_resolve_worker_count_default_is_clamped_to_max(monkeypatch) -> None:
    monkeypatch.setattr(os, "cpu_count", lambda: 64)
    assert resolve_worker_count(None) == 32


@pytest.mark.parametrize(("raw", "expected"), [("auto", 8), ("", 8), ("nope", 8), ("-1", 8), ("3", 3), ("99", 32)])
def test_resolve_worker_count_parses_values(monkeypatch, raw: str, expected: int) -> None:
    monkeypatch.setattr(os, "cpu_count", lambda: 4)
    assert resolve_worker_count(raw) == expected


def test_worker_count_from_env(monkeypatch) -> None:
    monkeypatch.setenv("BRSLINT_WORKERS", "2")
    assert worker_count_from_env() == 2


def test_prepare_target_finds_manifest_root(project_root: Path) -> None:
    nested = project_root / "source" / "deep"
    nested.mkdir(parents=True)
    target = prepare_target(nested)
    assert target.project_root == project_root.resolve()
    assert target.scan_path == nested.resolve()


def test_discover_files_filters_extensions_skip_dirs_and_ignores(project_root: Path) -> None:
    (project_root / ".brslint.toml").write_text('[ignore]\npaths = ["components/vendor/"]\n', encoding="utf-8")
    main = write_source(project_root, "source/main.brs", "sub main()\nend sub\n")
    home = write_source(project_root, "components/Home.XML", "<component />\n")
    write_source(project_root, "components/vendor/lib.brs", "stop\n")
    write_source(project_root, "out/staged/main.brs", "stop\n")
    write_source(project_root, "images/readme.txt", "stop\n")

    target = prepare_target(project_root)
    assert discover_files(target) == sorted([main.resolve(), home.resolve()])


def test_discover_single_file_ignores_extension_filter(project_root: Path) -> None:
    notes = write_source(project_root, "notes.txt", "stop\n")
    target = prepare_target(notes)
    assert discover_files(target) == [notes.resolve()]


def test_lint_path_uses_project_config(project_root: Path) -> None:
    (project_root / ".brslint.toml").write_text(
        '[[rules]]\nid = "no-stop"\npattern = "stop"\nseverity = "error"\n',
        encoding="utf-8",
    )
    write_source(project_root, "source/a.brs", "stop\n")
    write_source(project_root, "source/b.brs", "x = 1\nstop ' ignore-warning\nstop\n")

    result = lint_path(project_root, workers=1)
    assert len(result.files) == 2
    assert [(w.path.name, w.line, w.rule_id) for w in result.warnings] == [
        ("a.brs", 0, "no-stop"),
        ("b.brs", 2, "no-stop"),
    ]


def test_lint_files_parallel_matches_serial_order(project_root: Path) -> None:
    for idx in range(6):
        write_source(project_root, f"source/f{idx}.brs", "stop\n" * (idx + 1))
    config = LintConfig(rules=(make_rule("stop", id="s"),))
    target = prepare_target(project_root, config=config)
    files = discover_files(target)

    done: list[Path] = []
    serial = lint_files(target, files, workers=1)
    parallel = lint_files(target, files, workers=4, on_file_done=done.append)

    assert [(w.path, w.line) for w in parallel] == [(w.path, w.line) for w in serial]
    assert done == files
    assert len(serial) == sum(range(1, 7))


def test_lint_files_propagates_config_error(project_root: Path) -> None:
    write_source(project_root, "source/a.brs", "x\n")
    target = prepare_target(project_root, config=LintConfig(rules=(make_rule("("),)))
    with pytest.raises(ConfigError):
        lint_files(target, discover_files(target), workers=1)
