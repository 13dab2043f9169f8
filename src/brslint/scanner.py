from __future__ import annotations

import logging
import os
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from brslint.config import CONFIG_FILENAME, LintConfig, load_config, path_is_ignored
from brslint.engine.types import LintWarning
from brslint.inspector import LineInspector
from brslint.languages.registry import normalize_extensions

logger = logging.getLogger(__name__)

DEFAULT_SKIP_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".idea",
    ".vscode",
    "node_modules",
    "out",
    "dist",
    "build",
}

# Files that mark the root of a channel project, nearest first.
_ROOT_MARKERS = (CONFIG_FILENAME, "pyproject.toml", "manifest")

BRSLINT_WORKERS_ENV = "BRSLINT_WORKERS"
DEFAULT_MAX_WORKERS = 32


@dataclass(frozen=True, slots=True)
class ScanTarget:
    project_root: Path
    scan_path: Path
    config: LintConfig


@dataclass(frozen=True, slots=True)
class LintResult:
    target: ScanTarget
    files: tuple[Path, ...]
    warnings: tuple[LintWarning, ...]


def resolve_worker_count(
    raw_value: str | None,
    *,
    default: int | None = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
) -> int:
    """
    Resolve a safe worker count from an env var-style string.

    - None/""/"auto" fall back to the default
    - Values <= 0 fall back to the default
    - Values above `max_workers` are clamped
    """

    cpu = os.cpu_count() or 1
    resolved_default = max(1, default if default is not None else (cpu * 2))
    if raw_value is None:
        return min(resolved_default, max_workers)

    normalized = raw_value.strip().lower()
    if not normalized or normalized in {"auto", "default"}:
        return min(resolved_default, max_workers)

    try:
        workers = int(normalized)
    except ValueError:
        return min(resolved_default, max_workers)

    if workers <= 0:
        return min(resolved_default, max_workers)
    return min(workers, max_workers)


def worker_count_from_env(*, default: int | None = None) -> int:
    return resolve_worker_count(os.environ.get(BRSLINT_WORKERS_ENV), default=default)


def prepare_target(scan_path: Path, *, config: LintConfig | None = None) -> ScanTarget:
    """
    Resolve the project root and load its configuration.

    The root is the nearest directory (starting at `scan_path`) holding
    `.brslint.toml`, `pyproject.toml` or a channel `manifest`; otherwise the
    scanned directory itself (or the file's parent).
    """

    scan_path = scan_path.resolve()
    project_root = _detect_project_root(scan_path)
    if config is None:
        config = load_config(project_root)
    return ScanTarget(project_root=project_root, scan_path=scan_path, config=config)


def discover_files(target: ScanTarget) -> list[Path]:
    scan_path = target.scan_path
    root = target.project_root
    ignore_patterns = target.config.ignore.paths
    allowed_exts = normalize_extensions(target.config.extensions)

    if scan_path.is_file():
        # An explicitly named file is linted whatever its extension.
        if path_is_ignored(scan_path, project_root=root, ignore_patterns=ignore_patterns):
            return []
        return [scan_path]

    files: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(scan_path, topdown=True):
        dirnames[:] = [d for d in dirnames if d not in DEFAULT_SKIP_DIRS]
        base = Path(dirpath)

        for filename in filenames:
            path = base / filename
            if path.suffix.lower() not in allowed_exts:
                continue
            if path_is_ignored(path, project_root=root, ignore_patterns=ignore_patterns):
                continue
            files.append(path)

    return sorted(set(files))


def lint_files(
    target: ScanTarget,
    files: list[Path],
    *,
    workers: int = 1,
    on_file_done: Callable[[Path], None] | None = None,
) -> list[LintWarning]:
    """
    Inspect `files` and concatenate their warnings.

    Ordering is deterministic: warnings follow the input `files` order
    whatever the worker count. The first error (unreadable file, bad rule
    pattern) propagates and aborts the run.
    """

    inspector = LineInspector(target.config.rules, target.config.indentation, logger=logger)
    warnings: list[LintWarning] = []

    if workers <= 1 or len(files) <= 1:
        for path in files:
            warnings.extend(inspector.inspect(path))
            if on_file_done is not None:
                on_file_done(path)
        return warnings

    max_workers = min(max(1, workers), len(files))
    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        for path, file_warnings in zip(files, executor.map(inspector.inspect, files), strict=True):
            warnings.extend(file_warnings)
            if on_file_done is not None:
                on_file_done(path)
    return warnings


def lint_path(
    scan_path: Path,
    *,
    config: LintConfig | None = None,
    workers: int | None = None,
    on_file_done: Callable[[Path], None] | None = None,
) -> LintResult:
    target = prepare_target(scan_path, config=config)
    files = discover_files(target)
    logger.debug("discovered %d candidate file(s) under %s", len(files), target.scan_path)
    effective_workers = workers if workers is not None else worker_count_from_env()
    warnings = lint_files(target, files, workers=effective_workers, on_file_done=on_file_done)
    return LintResult(target=target, files=tuple(files), warnings=tuple(warnings))


def _detect_project_root(start: Path) -> Path:
    base = start if start.is_dir() else start.parent
    for candidate in [base, *base.parents]:
        if any((candidate / marker).exists() for marker in _ROOT_MARKERS):
            return candidate
    return base
