"""Chapter frontmatter schema and lenient decode-or-default validation

Decoding never raises for malformed input. A chapter whose frontmatter does
not match the schema gets DEFAULT_FRONTMATTER plus one Violation per broken
field, so a single bad file degrades to a blank page instead of a failed build.
"""

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Literal, Optional

from pydantic import BaseModel, ConfigDict, FiniteFloat, ValidationError, field_validator


State = Literal["draft", "outline", "release"]

# Type names reported back to authors, keyed by top-level field.
EXPECTED_TYPES: dict[str, str] = {
    "title":  "string",
    "slug":   "string",
    "order":  "number",
    "state":  '"draft" | "outline" | "release"',
    "parent": "string",
}


class Frontmatter(BaseModel):
    """Validated chapter metadata. Unknown keys are ignored; no type coercion."""
    model_config = ConfigDict(strict=True, frozen=True)

    title:  str
    slug:   str
    order:  int | FiniteFloat
    state:  State
    parent: Optional[str] = None   # omit for top-level chapters; an explicit null is rejected

    @field_validator("parent", mode="before")
    @classmethod
    def _parent_not_null(cls, value: Any) -> Any:
        if value is None:
            raise ValueError("parent must be a string when present")
        return value


DEFAULT_FRONTMATTER = Frontmatter(title="", slug="", order=99, state="outline")


@dataclass(frozen=True)
class Violation:
    """One schema violation: dotted field path, expected type name, offending value."""
    path: str
    expected: str
    actual: Any = None


@dataclass(frozen=True)
class Valid:
    frontmatter: Frontmatter

    @property
    def ok(self) -> bool:
        return True

    @property
    def violations(self) -> tuple[Violation, ...]:
        return ()


@dataclass(frozen=True)
class Invalid:
    frontmatter: Frontmatter
    violations: tuple[Violation, ...]

    @property
    def ok(self) -> bool:
        return False


ValidationResult = Valid | Invalid


def _violations(error: ValidationError, data: Mapping) -> tuple[Violation, ...]:
    """Collapse pydantic errors to one Violation per field (union branches report once)."""
    seen: dict[str, Violation] = {}
    for err in error.errors():
        field = str(err["loc"][0]) if err["loc"] else "frontmatter"
        if field in seen:
            continue
        actual = None if err["type"] == "missing" else data.get(field)
        seen[field] = Violation(
            path=f"frontmatter.{field}",
            expected=EXPECTED_TYPES.get(field, err["type"]),
            actual=actual,
        )
    return tuple(seen.values())


def validate_frontmatter(data: Any) -> ValidationResult:
    """Decode untyped frontmatter into Valid(Frontmatter) or Invalid(DEFAULT_FRONTMATTER, violations)."""
    if not isinstance(data, Mapping):
        return Invalid(DEFAULT_FRONTMATTER, (Violation("frontmatter", "object", data),))
    try:
        return Valid(Frontmatter.model_validate(dict(data)))
    except ValidationError as e:
        return Invalid(DEFAULT_FRONTMATTER, _violations(e, data))


def report_violation(source: str, violation: Violation) -> str:
    """Return a human readable description of a single violation."""
    actual = json.dumps(violation.actual, indent=2, default=str)
    return (
        f"Expected value of type {violation.expected} at {violation.path}, "
        f"for chapter {source}, but got {actual}."
    )


def report_violations(source: str, violations: tuple[Violation, ...]) -> str:
    """Convenience wrapper around report_violation, one line per violation."""
    return "\n".join(report_violation(source, v) for v in violations)
