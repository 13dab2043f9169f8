from __future__ import annotations

from collections import defaultdict
from pathlib import Path

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from brslint import __version__
from brslint.engine.types import LintWarning
from brslint.utils import safe_relpath

_SEVERITY_ICON = {"error": "✖", "warning": "⚠", "info": "ℹ"}
_SEVERITY_STYLE = {"error": "bold red", "warning": "yellow", "info": "dim"}


def render_terminal(
    warnings: list[LintWarning],
    *,
    files_scanned: int,
    project_root: Path,
    console: Console,
    show_details: bool = True,
) -> None:
    header = Text()
    header.append("brslint ", style="bold")
    header.append(f"v{__version__}", style="dim")

    console.print(Panel(header, subtitle=f"Scanned {files_scanned} files", border_style="cyan"))

    if show_details:
        by_file: dict[str, list[LintWarning]] = defaultdict(list)
        for w in warnings:
            by_file[safe_relpath(w.path, project_root)].append(w)

        for file_path in sorted(by_file):
            console.print(Text(file_path, style="bold"))
            file_lines = _read_lines(project_root / file_path)
            # Stable sort: same-line warnings keep rule order.
            for w in sorted(by_file[file_path], key=lambda item: item.line):
                _print_warning(console, w, file_lines=file_lines)
            console.print()

    _print_summary(warnings, console=console)


def _print_warning(console: Console, w: LintWarning, *, file_lines: list[str]) -> None:
    icon = _SEVERITY_ICON.get(w.severity, "•")
    style = _SEVERITY_STYLE.get(w.severity, "")
    display_line = w.line + 1

    line = Text()
    line.append(f"  {icon} ", style=style)
    line.append(w.rule_id or "rule", style="bold")
    line.append(f"  ({display_line})", style="dim")
    line.append(f"  {w.message}")
    console.print(line)

    if 0 <= w.line < len(file_lines):
        snippet = file_lines[w.line].rstrip("\n")
        console.print(f"     {display_line:>4} │ {snippet}", style="dim", markup=False, highlight=False)


def _print_summary(warnings: list[LintWarning], *, console: Console) -> None:
    counts = {"error": 0, "warning": 0, "info": 0}
    for w in warnings:
        counts[w.severity] = counts.get(w.severity, 0) + 1

    console.print(Text("─" * 60, style="dim"))
    console.print(
        Text(
            f"{len(warnings)} problem(s): {counts['error']} error(s), "
            f"{counts['warning']} warning(s), {counts['info']} info",
            style="bold",
        )
    )
    console.print(Text("─" * 60, style="dim"))


def _read_lines(path: Path) -> list[str]:
    try:
        return path.read_text(encoding="utf-8", errors="replace").split("\n")
    except OSError:
        return []
