"""Page rendering: the jinja2 page template over a ViewModel and one ViewChapter"""

from functools import lru_cache
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, Template, select_autoescape

from mdsite.core.models import ViewChapter, ViewModel


TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"
PAGE_TEMPLATE = "page.html.j2"


@lru_cache(maxsize=None)
def _page_template(templates_dir: Path = TEMPLATES_DIR) -> Template:
    env = Environment(loader=FileSystemLoader(str(templates_dir)), autoescape=select_autoescape(["html", "j2"]))
    return env.get_template(PAGE_TEMPLATE)


def render_page(
    view_model: ViewModel,
    chapter: ViewChapter,
    site_title: str = "mdsite",
    base_href: str | None = None,
    ) -> str:
    """Render one chapter's page. Pure: reads the view model, returns markup.

    Without a base_href, links are made relative to the page's own directory.
    """
    root = "" if base_href or not chapter.parent else "../"
    return _page_template().render(
        view_model=view_model,
        chapter=chapter,
        site_title=site_title,
        base_href=base_href,
        root=root,
    )
