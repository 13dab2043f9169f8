from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path


class Dialect(str, Enum):
    SCRIPT = "script"
    MARKUP = "markup"
    # Files with any other extension are scanned as-is, without comment stripping.
    PLAIN = "plain"


@dataclass(frozen=True, slots=True)
class LanguageSpec:
    name: str
    extensions: tuple[str, ...]
    dialect: Dialect


LANGUAGES: tuple[LanguageSpec, ...] = (
    LanguageSpec("brightscript", (".brs",), Dialect.SCRIPT),
    LanguageSpec("scenegraph", (".xml",), Dialect.MARKUP),
)

DEFAULT_EXTENSIONS: tuple[str, ...] = tuple(ext for spec in LANGUAGES for ext in spec.extensions)

_EXT_TO_DIALECT = {ext: spec.dialect for spec in LANGUAGES for ext in spec.extensions}


def detect_dialect(path: Path | str) -> Dialect:
    """
    Pick the comment dialect from the file extension (case-insensitive).

    Unknown extensions map to `Dialect.PLAIN`.
    """

    return _EXT_TO_DIALECT.get(Path(path).suffix.lower(), Dialect.PLAIN)


def normalize_extensions(values: tuple[str, ...]) -> set[str]:
    exts: set[str] = set()
    for raw in values:
        ext = raw.strip().lower()
        if not ext:
            continue
        if not ext.startswith("."):
            ext = "." + ext
        exts.add(ext)
    return exts
