"""Intermediate data models for the parse, aggregate, and render pipeline"""

from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping, Optional

from mdsite.core.frontmatter import Frontmatter


@dataclass
class ParsedDoc:
    """Parser output: rendered HTML body plus untyped frontmatter; not persisted."""
    path:        Path
    body:        str               # rendered HTML (frontmatter stripped)
    frontmatter: Any               # whatever the YAML header decoded to


@dataclass(frozen=True)
class Chapter:
    """A validated, identified chapter ready to be folded into the view model."""
    id:          str
    source:      str
    frontmatter: Frontmatter
    body:        str


@dataclass(frozen=True)
class ViewChapter:
    id:       str
    slug:     str
    title:    str
    href:     str
    contents: str
    parent:   Optional[str] = None


@dataclass(frozen=True)
class ChildNode:
    """Reference into ViewModel.by_id, used only for ordering within a parent."""
    id:    str
    order: float


@dataclass(frozen=True)
class ParentNode:
    id:       str
    order:    float
    children: tuple[ChildNode, ...] = ()


Nav = tuple[ParentNode, ...]


@dataclass(frozen=True)
class ViewModel:
    """Navigation tree plus chapter lookup table. Each fold step yields a new instance."""
    nav:        Nav = ()
    by_id:      Mapping[str, ViewChapter] = field(default_factory=lambda: MappingProxyType({}))
    ids:        tuple[str, ...] = ()   # arrival order, one entry per distinct id
    collisions: tuple[str, ...] = ()   # ids overwritten by a later chapter

    def nav_ids(self) -> list[str]:
        """All ids referenced by nav, parents before their children."""
        out = []
        for node in self.nav:
            out.append(node.id)
            out.extend(child.id for child in node.children)
        return out

    def dangling(self) -> list[str]:
        """Nav ids with no chapter in by_id (placeholder parents whose document never arrived)."""
        return [i for i in self.nav_ids() if i not in self.by_id]
