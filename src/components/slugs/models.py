"""
Slugs component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field

# --- Validation Error ---


@dataclass(frozen=True)
class SlugValidationError:
    """Slug validation error."""

    code: str
    message: str
    field: str | None = "slug"


# --- Input Models ---


@dataclass(frozen=True)
class ResolveSlugInput:
    """Input for resolving a unique slug from a title or manual override."""

    title: str
    manual_slug: str | None = None
    exclude_id: str | None = None


@dataclass(frozen=True)
class ValidateSlugInput:
    """Input for validating a slug without touching the store."""

    slug: str


# --- Output Models ---


@dataclass(frozen=True)
class SlugOutput:
    """Resolved slug plus any validation findings for it."""

    slug: str | None
    candidate: str | None = None
    available: bool = True
    errors: list[SlugValidationError] = field(default_factory=list)
    success: bool = True
