"""Pipeline step functions: load, aggregate, and export orchestration

Loading and aggregation run sequentially in discovery order. Only the final
render/write fan-out is concurrent, over an immutable ViewModel snapshot.
Failures are isolated per file (load) or per page (export) and collected in
a BuildReport; the run itself only aborts in strict mode.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable

from jinja2 import TemplateError

from mdsite.config import Settings
from mdsite.core.aggregate import aggregate
from mdsite.core.export import output_path, write_page
from mdsite.core.frontmatter import Violation, report_violation, validate_frontmatter
from mdsite.core.lifecycle import BuildMode, is_admitted
from mdsite.core.models import Chapter, ParsedDoc, ViewChapter, ViewModel
from mdsite.core.parse import discover_files, make_parser, parse_text, read_file
from mdsite.core.render import render_page
from mdsite.core.utils.ids import to_id


logger = logging.getLogger(__name__)


class BuildError(RuntimeError):
    """Raised when a strict build finds frontmatter violations."""


@dataclass
class BuildReport:
    written:    list[tuple[str, Path]] = field(default_factory=list)
    failed:     list[tuple[str, str]] = field(default_factory=list)        # (source or id, message)
    invalid:    list[tuple[str, Violation]] = field(default_factory=list)  # (source, violation)
    skipped:    list[str] = field(default_factory=list)                    # rejected by lifecycle
    collisions: list[str] = field(default_factory=list)
    dangling:   list[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failed


def to_chapter(parsed: ParsedDoc, report: BuildReport | None = None) -> Chapter:
    """Validate frontmatter (defaults on failure) and attach the chapter id."""
    source = str(parsed.path)
    result = validate_frontmatter(parsed.frontmatter)
    for violation in result.violations:
        logger.warning(report_violation(source, violation))
        if report is not None:
            report.invalid.append((source, violation))
    fm = result.frontmatter
    return Chapter(id=to_id(fm.slug, fm.parent), source=source, frontmatter=fm, body=parsed.body)


def load_chapters(settings: Settings, report: BuildReport | None = None) -> list[Chapter]:
    """Discover, read, parse, validate, and filter chapters, in discovery order."""
    report = report if report is not None else BuildReport()
    mode = BuildMode(settings.mode)
    parser = make_parser(settings.parser_config)

    files = discover_files(Path(settings.source_dir), settings.pattern)
    if not files:
        logger.warning("No chapters matching %s under %s", settings.pattern, settings.source_dir)

    chapters = []
    for path in files:
        try:
            parsed = parse_text(path, read_file(path), parser)
        except (OSError, ValueError) as e:
            logger.error("Failed to load %s: %s", path, e)
            report.failed.append((str(path), str(e)))
            continue

        chapter = to_chapter(parsed, report)
        if not is_admitted(mode, chapter.frontmatter.state):
            logger.debug("Skipping %s (%s) in %s mode", path, chapter.frontmatter.state, mode.value)
            report.skipped.append(chapter.source)
            continue
        chapters.append(chapter)
    return chapters


def _log_collision(previous: ViewChapter, current: ViewChapter) -> None:
    logger.warning(
        "Chapter id %r defined more than once; %s replaces %s",
        current.id, current.href, previous.href,
    )


def build_view_model(chapters: Iterable[Chapter], report: BuildReport | None = None) -> ViewModel:
    """Fold chapters into the ViewModel, logging id collisions and dangling nav entries."""
    view_model = aggregate(chapters, on_collision=_log_collision)
    dangling = view_model.dangling()
    for chapter_id in dangling:
        logger.warning("Navigation entry %r has no chapter of its own", chapter_id)
    if report is not None:
        report.collisions.extend(view_model.collisions)
        report.dangling.extend(dangling)
    return view_model


def run_export(
    view_model: ViewModel,
    settings: Settings,
    report: BuildReport | None = None,
    ) -> list[tuple[str, Path]]:
    """Render and write one page per chapter id concurrently. Returns (id, path) pairs written."""
    report = report if report is not None else BuildReport()
    output_dir = Path(settings.output_dir)
    base_href = settings.base_href if BuildMode(settings.mode) is BuildMode.production else None

    def _emit(chapter_id: str) -> Path:
        chapter = view_model.by_id[chapter_id]
        html = render_page(view_model, chapter, settings.site_title, base_href)
        return write_page(output_path(output_dir, chapter), html)

    results = []
    with ThreadPoolExecutor(max_workers=settings.max_workers, thread_name_prefix="mdsite-export") as pool:
        futures = [(chapter_id, pool.submit(_emit, chapter_id)) for chapter_id in view_model.ids]
        for chapter_id, future in futures:
            try:
                path = future.result()
            except (OSError, ValueError, TemplateError) as e:
                logger.error("Failed to write page %r: %s", chapter_id, e)
                report.failed.append((chapter_id, str(e)))
                continue
            logger.debug("Wrote %s", path)
            results.append((chapter_id, path))
            report.written.append((chapter_id, path))

    return results


def run_build(settings: Settings) -> BuildReport:
    """Run the full pass: load -> aggregate -> render/write. Raises BuildError in strict mode."""
    report = BuildReport()
    chapters = load_chapters(settings, report)
    if settings.strict and report.invalid:
        raise BuildError(f"{len(report.invalid)} frontmatter violation(s); nothing written")

    view_model = build_view_model(chapters, report)
    run_export(view_model, settings, report)
    logger.info(
        "Build finished: %d written, %d failed, %d skipped",
        len(report.written), len(report.failed), len(report.skipped),
    )
    return report
