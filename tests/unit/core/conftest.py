"""Shared fixtures for core unit tests"""

import pytest

from mdsite.core.frontmatter import Frontmatter
from mdsite.core.models import Chapter
from mdsite.core.utils.ids import to_id


SAMPLE_MD = """\
---
title: Pure Functions
slug: pure-functions
order: 1
state: release
---

# Pure Functions

A paragraph with **bold** text.

```json5
{answer: 42}
```
"""


@pytest.fixture(name="make_chapter")
def make_chapter_fixture():
    """Factory for validated chapters: make_chapter(slug, order, parent=None, state='release')."""
    def _make(slug, order, parent=None, state="release", title=None, body=""):
        fields = {"title": title if title is not None else slug.title(), "slug": slug, "order": order, "state": state}
        if parent is not None:
            fields["parent"] = parent
        fm = Frontmatter(**fields)
        return Chapter(id=to_id(slug, parent), source=f"{parent or ''}/{slug}.md", frontmatter=fm, body=body)
    return _make


@pytest.fixture(name="chapters_dir")
def chapters_dir_fixture(tmp_path):
    """A small chapter tree: one section with two children, plus an outline."""
    root = tmp_path / "chapters"
    (root / "intro").mkdir(parents=True)
    (root / "intro.md").write_text(
        "---\ntitle: Intro\nslug: intro\norder: 1\nstate: release\n---\n\n# Intro\n\nWelcome.\n"
    )
    (root / "intro" / "a.md").write_text(
        "---\ntitle: A\nslug: a\nparent: intro\norder: 2\nstate: release\n---\n\nChapter A.\n"
    )
    (root / "intro" / "b.md").write_text(
        "---\ntitle: B\nslug: b\nparent: intro\norder: 1\nstate: draft\n---\n\nChapter B.\n"
    )
    (root / "later.md").write_text(
        "---\ntitle: Later\nslug: later\norder: 5\nstate: outline\n---\n\nNot yet.\n"
    )
    return root


@pytest.fixture(name="sample_md")
def sample_md_fixture():
    return SAMPLE_MD
