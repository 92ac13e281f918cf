"""Site writer: map chapters onto the output layout and persist rendered pages"""

from pathlib import Path

from mdsite.core.models import ViewChapter


def output_path(output_dir: Path, chapter: ViewChapter) -> Path:
    """Output path mirrors the nav hierarchy: output_dir / parent / slug.html"""
    return output_dir / (chapter.parent or '') / f"{chapter.slug}.html"


def write_page(path: Path, html: str) -> Path:
    """Create the destination directory if needed and write (overwrite) the page."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(html, encoding='utf-8')
    return path
