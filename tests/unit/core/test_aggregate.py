"""Unit tests for core/aggregate.py"""

import pytest

from mdsite.core.aggregate import (
    aggregate,
    chapter_href,
    empty_view_model,
    reduce_chapters,
    reduce_nav,
    reduce_view_model,
)
from mdsite.core.models import ChildNode, ParentNode


def test_chapter_href():
    assert chapter_href("intro") == "intro.html"
    assert chapter_href("a", "intro") == "intro/a.html"


def test_empty_view_model():
    vm = empty_view_model()
    assert vm.nav == ()
    assert dict(vm.by_id) == {}
    assert vm.ids == ()


def test_section_with_children_sorted(make_chapter):
    """Children are ordered by their own order regardless of arrival order."""
    vm = aggregate([
        make_chapter("intro", 1),
        make_chapter("a", 2, parent="intro"),
        make_chapter("b", 1, parent="intro"),
    ])
    assert vm.nav == (
        ParentNode(id="intro", order=1, children=(ChildNode(id="introb", order=1), ChildNode(id="introa", order=2))),
    )
    assert vm.by_id["introb"].href == "intro/b.html"
    assert vm.by_id["intro"].href == "intro.html"
    assert vm.ids == ("intro", "introa", "introb")


def test_view_chapter_fields(make_chapter):
    vm = aggregate([make_chapter("a", 1, parent="intro", title="Chapter A", body="<p>x</p>")])
    chapter = vm.by_id["introa"]
    assert (chapter.id, chapter.slug, chapter.title, chapter.parent) == ("introa", "a", "Chapter A", "intro")
    assert chapter.contents == "<p>x</p>"


def test_parents_sorted_by_order(make_chapter):
    vm = aggregate([make_chapter("c", 3), make_chapter("a", 1), make_chapter("b", 2)])
    assert [n.id for n in vm.nav] == ["a", "b", "c"]


def test_equal_orders_keep_arrival_order(make_chapter):
    """Sorting is stable: ties keep their relative insertion order."""
    vm = aggregate([
        make_chapter("z", 1),
        make_chapter("y", 1),
        make_chapter("x", 1),
        make_chapter("c2", 5, parent="z"),
        make_chapter("c1", 5, parent="z"),
    ])
    assert [n.id for n in vm.nav] == ["z", "y", "x"]
    assert [c.id for c in vm.nav[0].children] == ["zc2", "zc1"]


def test_child_before_parent_synthesizes_placeholder(make_chapter):
    """A child arriving first creates its parent node with the child's order."""
    vm = aggregate([make_chapter("a", 7, parent="intro")])
    assert vm.nav == (ParentNode(id="intro", order=7, children=(ChildNode(id="introa", order=7),)),)
    assert vm.dangling() == ["intro"]


def test_placeholder_order_corrected_when_parent_arrives(make_chapter):
    vm = aggregate([
        make_chapter("other", 3),
        make_chapter("a", 7, parent="intro"),
        make_chapter("intro", 1),
    ])
    assert [(n.id, n.order) for n in vm.nav] == [("intro", 1), ("other", 3)]
    assert [c.id for c in vm.nav[0].children] == ["introa"]
    assert vm.dangling() == []


def test_placeholder_is_not_resorted_until_next_top_level(make_chapter):
    """The placeholder is appended at the end; only a later top-level chapter re-sorts nav."""
    vm = aggregate([make_chapter("late", 9), make_chapter("a", 1, parent="intro")])
    assert [n.id for n in vm.nav] == ["late", "intro"]
    vm = reduce_view_model(vm, make_chapter("mid", 5))
    assert [n.id for n in vm.nav] == ["intro", "mid", "late"]


def test_top_level_update_keeps_children(make_chapter):
    nav = reduce_nav((), make_chapter("a", 1, parent="intro"))
    nav = reduce_nav(nav, make_chapter("intro", 4))
    assert nav[0].order == 4
    assert nav[0].children == (ChildNode(id="introa", order=1),)


def test_reduce_nav_does_not_mutate_input(make_chapter):
    """Fold steps return new nav tuples and share untouched siblings."""
    nav = reduce_nav((), make_chapter("intro", 1))
    nav = reduce_nav(nav, make_chapter("other", 2))
    before = nav
    after = reduce_nav(nav, make_chapter("a", 1, parent="intro"))
    assert before[0].children == ()
    assert after[0].children == (ChildNode(id="introa", order=1),)
    assert after[1] is before[1]


def test_reduce_chapters_does_not_mutate_input(make_chapter):
    first = reduce_chapters({}, make_chapter("a", 1))
    second = reduce_chapters(first, make_chapter("b", 2))
    assert set(first) == {"a"}
    assert set(second) == {"a", "b"}
    with pytest.raises(TypeError):
        second["c"] = None


def test_id_collision_last_write_wins(make_chapter):
    """Two chapters with the same id: the later one wins in by_id and the collision is recorded."""
    seen = []
    vm = aggregate(
        [make_chapter("a", 1, title="First"), make_chapter("a", 2, title="Second")],
        on_collision=lambda prev, cur: seen.append((prev.title, cur.title)),
    )
    assert vm.by_id["a"].title == "Second"
    assert vm.ids == ("a",)
    assert vm.collisions == ("a",)
    assert seen == [("First", "Second")]
    assert vm.nav == (ParentNode(id="a", order=2),)


def test_concatenated_ids_can_collide(make_chapter):
    """ids are plain concatenation, so ('ab', 'c') and ('a', 'bc') share an id."""
    vm = aggregate([make_chapter("c", 1, parent="ab"), make_chapter("bc", 1, parent="a")])
    assert vm.collisions == ("abc",)
    assert vm.by_id["abc"].href == "a/bc.html"


def test_every_distinct_chapter_indexed_and_in_nav(make_chapter):
    chapters = [
        make_chapter("b", 2, parent="s2"),
        make_chapter("s1", 1),
        make_chapter("a", 1, parent="s1"),
        make_chapter("s2", 2),
        make_chapter("c", 0, parent="s1"),
    ]
    vm = aggregate(chapters)
    assert set(vm.by_id) == {c.id for c in chapters}
    assert set(vm.nav_ids()) == set(vm.by_id)
    assert vm.dangling() == []


def test_nav_orders_non_decreasing(make_chapter):
    vm = aggregate([
        make_chapter("x", 3), make_chapter("q", 9, parent="x"), make_chapter("r", -1, parent="x"),
        make_chapter("y", 0.5), make_chapter("z", 2), make_chapter("s", 4, parent="y"),
    ])
    orders = [n.order for n in vm.nav]
    assert orders == sorted(orders)
    for node in vm.nav:
        child_orders = [c.order for c in node.children]
        assert child_orders == sorted(child_orders)


def test_aggregate_is_idempotent(make_chapter):
    chapters = [make_chapter("a", 1, parent="s"), make_chapter("s", 2), make_chapter("t", 1)]
    first, second = aggregate(chapters), aggregate(chapters)
    assert first.nav == second.nav
    assert dict(first.by_id) == dict(second.by_id)
    assert first.ids == second.ids
