from __future__ import annotations

from pathlib import Path


def safe_relpath(path: Path, root: Path) -> str:
    """
    Return a POSIX-style path for report output, relative to `root` when the
    file lives under it and `path.as_posix()` otherwise.
    """

    try:
        resolved_path = path.resolve()
    except OSError:
        resolved_path = path

    try:
        resolved_root = root.resolve()
    except OSError:
        resolved_root = root

    try:
        return resolved_path.relative_to(resolved_root).as_posix()
    except ValueError:
        return path.as_posix()


def split_lines(text: str) -> list[str]:
    """
    Split `text` on `\\n` only, keeping the terminator on every line.

    `str.splitlines` also breaks on form feeds, `\\x1c`-`\\x1e` and Unicode
    separators, which would desynchronize ordinals from newline counts.
    """

    parts = text.split("\n")
    tail = parts.pop()
    lines = [part + "\n" for part in parts]
    if tail:
        lines.append(tail)
    return lines
