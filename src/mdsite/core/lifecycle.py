"""Build modes and the lifecycle admission rule"""

from enum import Enum


class BuildMode(str, Enum):
    preview = "preview"
    production = "production"


PUBLISHED_STATES = frozenset({"draft", "release"})


def is_admitted(mode: BuildMode | str, state: str) -> bool:
    """Preview admits every chapter; production rejects outlines."""
    return BuildMode(mode) is BuildMode.preview or state in PUBLISHED_STATES
