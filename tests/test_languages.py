from __future__ import annotations

from pathlib import Path

from brslint.languages.registry import Dialect, detect_dialect, normalize_extensions


def test_detect_dialect_by_extension() -> None:
    assert detect_dialect(Path("source/main.brs")) is Dialect.SCRIPT
    assert detect_dialect("components/Home.XML") is Dialect.MARKUP
    assert detect_dialect("manifest") is Dialect.PLAIN
    assert detect_dialect("notes.txt") is Dialect.PLAIN


def test_normalize_extensions_adds_dot_and_lowercases() -> None:
    assert normalize_extensions(("BRS", ".xml", " ", ".Bs")) == {".brs", ".xml", ".bs"}
