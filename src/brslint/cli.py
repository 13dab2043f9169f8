from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console

from brslint import __version__
from brslint.config import ConfigError
from brslint.engine.types import LintWarning
from brslint.logging_utils import configure_logging
from brslint.reporters.json_reporter import render_json
from brslint.reporters.terminal import render_terminal
from brslint.scanner import (
    LintResult,
    discover_files,
    lint_files,
    lint_path,
    prepare_target,
    worker_count_from_env,
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="brslint: pattern and indentation lint for BrightScript and SceneGraph XML.",
)
console = Console()
err_console = Console(stderr=True)
logger = logging.getLogger(__name__)

_SEVERITY_RANK = {"info": 0, "warning": 1, "error": 2}
_FAIL_ON_CHOICES = ("info", "warning", "error", "never")


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(__version__)
        raise typer.Exit()


@app.callback()
def _main(
    ctx: typer.Context,
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Verbose logs (printed to stderr)."),
    ] = False,
    quiet: Annotated[
        bool,
        typer.Option("--quiet", "-q", help="Reduce non-essential output."),
    ] = False,
    progress: Annotated[
        bool,
        typer.Option("--progress/--no-progress", help="Show a progress bar for long runs.", show_default=True),
    ] = True,
) -> None:
    """brslint CLI."""

    if verbose and quiet:
        raise typer.BadParameter("Choose at most one: --verbose or --quiet.")
    configure_logging(verbose=verbose, quiet=quiet)
    ctx.obj = {"verbose": verbose, "quiet": quiet, "progress": progress}


def _cli_settings() -> dict[str, bool]:
    ctx = click.get_current_context(silent=True)
    if ctx is None or not isinstance(ctx.obj, dict):
        return {"verbose": False, "quiet": False, "progress": True}
    return {
        "verbose": bool(ctx.obj.get("verbose", False)),
        "quiet": bool(ctx.obj.get("quiet", False)),
        "progress": bool(ctx.obj.get("progress", True)),
    }


def _lint_with_optional_progress(path: Path, *, show_progress: bool) -> LintResult:
    from rich.progress import BarColumn, Progress, TaskProgressColumn, TextColumn, TimeElapsedColumn

    if not show_progress:
        return lint_path(path)

    target = prepare_target(path)
    files = discover_files(target)
    logger.debug("discovered %d candidate file(s)", len(files))
    workers = worker_count_from_env()

    progress = Progress(
        TextColumn("{task.description}"),
        BarColumn(),
        TaskProgressColumn(),
        TimeElapsedColumn(),
        console=Console(stderr=True),
        transient=True,
    )
    task = progress.add_task("Lint", total=len(files))

    def _on_done(_path: Path) -> None:
        progress.advance(task, 1)

    with progress:
        warnings = lint_files(target, files, workers=workers, on_file_done=_on_done)
    return LintResult(target=target, files=tuple(files), warnings=tuple(warnings))


def _should_fail(warnings: list[LintWarning], fail_on: str) -> bool:
    if fail_on == "never":
        return False
    threshold = _SEVERITY_RANK[fail_on]
    return any(_SEVERITY_RANK.get(w.severity, _SEVERITY_RANK["warning"]) >= threshold for w in warnings)


@app.command()
def lint(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=True,
            dir_okay=True,
            resolve_path=True,
            help="File or directory to lint (default: current directory).",
        ),
    ] = Path("."),
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
    fail_on: Annotated[
        str,
        typer.Option("--fail-on", help="Exit 1 when a warning at or above this severity exists: info, warning, error, never."),
    ] = "error",
) -> None:
    """
    Lint BrightScript/XML sources and report one warning per rule match.
    """

    settings = _cli_settings()
    normalized_format = output_format.strip().lower()
    if normalized_format not in {"terminal", "json"}:
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")
    normalized_fail_on = fail_on.strip().lower()
    if normalized_fail_on not in _FAIL_ON_CHOICES:
        raise typer.BadParameter(f"Unsupported --fail-on value. Use: {', '.join(_FAIL_ON_CHOICES)}.")

    try:
        result = _lint_with_optional_progress(
            path,
            show_progress=settings["progress"] and not settings["quiet"] and normalized_format == "terminal",
        )
    except ConfigError as exc:
        err_console.print(f"Configuration error: {exc}", markup=False)
        raise typer.Exit(code=2) from exc

    warnings = list(result.warnings)
    if normalized_format == "json":
        typer.echo(render_json(warnings, files_scanned=len(result.files), project_root=result.target.project_root))
    else:
        render_terminal(
            warnings,
            files_scanned=len(result.files),
            project_root=result.target.project_root,
            console=console,
            show_details=not settings["quiet"],
        )

    if _should_fail(warnings, normalized_fail_on):
        raise typer.Exit(code=1)


@app.command()
def rules(
    path: Annotated[
        Path,
        typer.Argument(
            exists=True,
            file_okay=False,
            dir_okay=True,
            resolve_path=True,
            help="Project directory (default: current directory).",
        ),
    ] = Path("."),
    output_format: Annotated[
        str,
        typer.Option("--format", help="Output format: terminal, json.", show_default=True),
    ] = "terminal",
) -> None:
    """
    List the rules the project configuration resolves to.

    Like `lint`, the configuration is read from the nearest project root at or
    above PATH.
    """

    from rich.table import Table
    from rich.text import Text

    try:
        config = prepare_target(path).config
    except ConfigError as exc:
        err_console.print(f"Configuration error: {exc}", markup=False)
        raise typer.Exit(code=2) from exc

    rows = [rule.to_dict() for rule in config.rules]

    normalized = output_format.strip().lower()
    if normalized == "json":
        typer.echo(json.dumps(rows, indent=2, sort_keys=True, default=str))
        return
    if normalized != "terminal":
        raise typer.BadParameter("Unsupported format. Use: terminal, json.")

    table = Table(title="brslint rules")
    table.add_column("ID", style="bold")
    table.add_column("Enabled", justify="center")
    table.add_column("Severity")
    table.add_column("Comments", justify="center")
    table.add_column("Case", justify="center")
    table.add_column("Pattern")
    for rule in config.rules:
        table.add_row(
            rule.rule_id or "-",
            "no" if rule.disabled else "yes",
            rule.severity,
            "yes" if rule.include_comments else "no",
            "yes" if rule.case_sensitive else "no",
            Text(rule.pattern),
        )
    console.print(table)
    if config.indentation is not None:
        console.print(
            f"Indentation: {config.indentation.count} {config.indentation.character}(s) per level",
            markup=False,
        )
