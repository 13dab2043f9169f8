from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from brslint import __version__
from brslint.engine.types import LintWarning
from brslint.utils import safe_relpath

REPORT_SCHEMA_VERSION = 1


def render_json(warnings: list[LintWarning], *, files_scanned: int, project_root: Path) -> str:
    payload = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "tool": {"name": "brslint", "version": __version__},
        "files_scanned": files_scanned,
        "warnings": [warning_to_dict(w, project_root=project_root) for w in warnings],
    }
    # TOML dates in rule extras are not JSON-native.
    return json.dumps(payload, indent=2, sort_keys=False, default=str)


def warning_to_dict(w: LintWarning, *, project_root: Path) -> dict[str, Any]:
    """
    Flatten a warning: every rule field (extras included) plus `path`
    (project-relative), 0-based `line` and the `match` details.
    """

    out = w.to_dict()
    out["path"] = safe_relpath(w.path, project_root)
    return out
