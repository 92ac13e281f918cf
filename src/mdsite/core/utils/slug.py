"""Slug generation for heading anchors, following GitHub's anchor rules"""

import re


_STRIP_RE = re.compile(r'[^\w\- ]')


def slugify(text: str) -> str:
    """Lowercase, drop punctuation, and turn each space into a hyphen.

    Underscores survive and hyphen runs are not collapsed, so anchors match
    the ones GitHub generates for the same heading.
    """
    return _STRIP_RE.sub('', text.lower()).replace(' ', '-')
