"""CLI command implementations"""

import logging
from typing import Annotated, Optional

import typer

from mdsite.config import Settings, load_config
from mdsite.core.frontmatter import report_violation
from mdsite.core.pipeline import BuildError, BuildReport, build_view_model, load_chapters, run_build


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _echo_report(report: BuildReport) -> None:
    """Print per-page results, failures to stderr, and a summary line."""
    for chapter_id, path in report.written:
        typer.echo(f"  {chapter_id or '(no slug)'} -> {path}")
    for source, message in report.failed:
        typer.echo(f"  failed: {source}: {message}", err=True)
    typer.echo(
        f"Build complete - "
        f"{len(report.written)} written, "
        f"{len(report.failed)} failed, "
        f"{len(report.skipped)} skipped, "
        f"{len(report.invalid)} frontmatter violation(s)"
    )


def main_callback(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Log debug output")] = False,
    ):
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def build_cmd(
    source: Annotated[Optional[str], typer.Argument(help="Chapter source directory")] = None,
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    mode: Annotated[Optional[str], typer.Option("--mode", help="preview or production")] = None,
    pattern: Annotated[Optional[str], typer.Option("--pattern", help="Glob pattern under the source directory")] = None,
    workers: Annotated[Optional[int], typer.Option("--max-workers", help="Concurrent page writers")] = None,
    strict: Annotated[Optional[bool], typer.Option("--strict/--lenient", help="Abort on frontmatter violations")] = None,
    ):
    """Run the full pipeline: load -> aggregate -> render and write pages."""
    settings = _settings(overrides={
        "source_dir": source, "output_dir": out, "mode": mode,
        "pattern": pattern, "max_workers": workers, "strict": strict,
    })
    try:
        report = run_build(settings)
    except BuildError as e:
        _fail("Build aborted", e)
    _echo_report(report)
    if not report.ok:
        raise typer.Exit(1)


def check_cmd(
    source: Annotated[Optional[str], typer.Argument(help="Chapter source directory")] = None,
    pattern: Annotated[Optional[str], typer.Option("--pattern", help="Glob pattern under the source directory")] = None,
    ):
    """Validate every chapter's frontmatter without writing anything."""
    settings = _settings(overrides={"source_dir": source, "pattern": pattern, "mode": "preview"})
    report = BuildReport()
    chapters = load_chapters(settings, report)
    for src, violation in report.invalid:
        typer.echo(report_violation(src, violation), err=True)
    for src, message in report.failed:
        typer.echo(f"  failed: {src}: {message}", err=True)
    typer.echo(f"Checked {len(chapters) + len(report.failed)} chapter(s), {len(report.invalid)} violation(s)")
    if report.invalid or report.failed:
        raise typer.Exit(1)


def nav_cmd(
    source: Annotated[Optional[str], typer.Argument(help="Chapter source directory")] = None,
    mode: Annotated[Optional[str], typer.Option("--mode", help="preview or production")] = None,
    pattern: Annotated[Optional[str], typer.Option("--pattern", help="Glob pattern under the source directory")] = None,
    ):
    """Print the navigation tree the build would produce."""
    settings = _settings(overrides={"source_dir": source, "mode": mode, "pattern": pattern})
    view_model = build_view_model(load_chapters(settings))
    if not view_model.nav:
        typer.echo("No chapters found.")
        raise typer.Exit(1)
    for node in view_model.nav:
        parent = view_model.by_id.get(node.id)
        typer.echo(f"{node.order:g} {parent.href if parent else node.id + ' (no chapter)'}")
        for child in node.children:
            typer.echo(f"  {child.order:g} {view_model.by_id[child.id].href}")
