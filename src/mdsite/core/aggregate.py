"""Fold a stream of chapters into a navigation tree and an id-indexed chapter table

The fold is strictly sequential: arrival order decides which chapter wins an
id collision and which order a placeholder parent inherits. Every step returns
a new ViewModel; only the touched ParentNode is rebuilt, untouched siblings
are shared with the previous step.
"""

from dataclasses import replace
from types import MappingProxyType
from typing import Callable, Iterable, Mapping, Optional

from mdsite.core.models import Chapter, ChildNode, Nav, ParentNode, ViewChapter, ViewModel
from mdsite.core.utils.ids import to_id


CollisionHook = Callable[[ViewChapter, ViewChapter], None]


def empty_view_model() -> ViewModel:
    return ViewModel()


def chapter_href(slug: str, parent: Optional[str] = None) -> str:
    """Return the site-relative page path for a chapter."""
    return f"{parent}/{slug}.html" if parent else f"{slug}.html"


def to_view_chapter(chapter: Chapter) -> ViewChapter:
    fm = chapter.frontmatter
    return ViewChapter(
        id=chapter.id,
        slug=fm.slug,
        title=fm.title,
        parent=fm.parent,
        href=chapter_href(fm.slug, fm.parent),
        contents=chapter.body,
    )


def _sort_nodes(nodes):
    """Stable ascending sort by order; ties keep their relative position."""
    return tuple(sorted(nodes, key=lambda n: n.order))


def _index_of(nav: Nav, node_id: str) -> int | None:
    for i, node in enumerate(nav):
        if node.id == node_id:
            return i
    return None


def reduce_chapters(by_id: Mapping[str, ViewChapter], chapter: Chapter) -> Mapping[str, ViewChapter]:
    """Upsert the chapter's ViewChapter; the last writer for an id wins, no merge."""
    return MappingProxyType({**by_id, chapter.id: to_view_chapter(chapter)})


def reduce_nav(nav: Nav, chapter: Chapter) -> Nav:
    """Place one chapter into the two-level navigation tree."""
    fm = chapter.frontmatter

    if not fm.parent:
        i = _index_of(nav, chapter.id)
        if i is not None:
            # known parent (possibly a placeholder): only its order changes
            nav = nav[:i] + (replace(nav[i], order=fm.order),) + nav[i + 1:]
        else:
            nav = nav + (ParentNode(id=chapter.id, order=fm.order),)
        return _sort_nodes(nav)

    parent_id = to_id(fm.parent)
    i = _index_of(nav, parent_id)
    if i is None:
        # Placeholder inherits the child's order until the parent document
        # itself arrives. Nav is not re-sorted here, so the placeholder stays
        # at the end until the next top-level chapter is placed.
        nav = nav + (ParentNode(id=parent_id, order=fm.order),)
        i = len(nav) - 1

    node = nav[i]
    children = _sort_nodes(node.children + (ChildNode(id=to_id(fm.slug, fm.parent), order=fm.order),))
    return nav[:i] + (replace(node, children=children),) + nav[i + 1:]


def reduce_view_model(
    view_model: ViewModel,
    chapter: Chapter,
    on_collision: CollisionHook | None = None,
    ) -> ViewModel:
    """Apply one chapter: nav and chapter-table reductions combined into a new ViewModel."""
    previous = view_model.by_id.get(chapter.id)
    by_id = reduce_chapters(view_model.by_id, chapter)

    ids = view_model.ids
    collisions = view_model.collisions
    if previous is None:
        ids = ids + (chapter.id,)
    else:
        collisions = collisions + (chapter.id,)
        if on_collision is not None:
            on_collision(previous, by_id[chapter.id])

    return ViewModel(
        nav=reduce_nav(view_model.nav, chapter),
        by_id=by_id,
        ids=ids,
        collisions=collisions,
    )


def aggregate(chapters: Iterable[Chapter], on_collision: CollisionHook | None = None) -> ViewModel:
    """Left-fold chapters, in the given order, into a single ViewModel."""
    view_model = empty_view_model()
    for chapter in chapters:
        view_model = reduce_view_model(view_model, chapter, on_collision)
    return view_model
