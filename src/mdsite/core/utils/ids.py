"""Chapter identity derived from (parent, slug)"""


def to_id(slug: str, parent: str | None = None) -> str:
    """Return the chapter id: parent concatenated with slug, or slug alone for top-level chapters.

    Parent back-references use the same rule, i.e. to_id(parent).
    """
    return (parent or '') + slug
