"""
Slugs component - slug normalization, validation and unique resolution.

Invariants:
- A resolved slug matches ^[a-z0-9]+(-[a-z0-9]+)*$ and is never a bare reserved word
- A resolved slug is not held by any other live item at resolution time
"""

from __future__ import annotations

import re

from src.rules.models import ContentRules

from ._impl import (
    DEFAULT_MAX_PROBE_ATTEMPTS,
    RESERVED_SLUGS,
    SlugResolver,
    validate_slug,
)
from .models import ResolveSlugInput, SlugOutput, SlugValidationError, ValidateSlugInput
from .ports import SlugLookupPort


def build_resolver(lookup: SlugLookupPort, rules: ContentRules | None = None) -> SlugResolver:
    """Create a resolver, taking reserved words, length limits and format from rules when given."""
    if rules is None:
        return SlugResolver(lookup=lookup)
    slug_rules = rules.slug
    return SlugResolver(
        lookup=lookup,
        reserved=frozenset(slug_rules.reserved) or RESERVED_SLUGS,
        max_probe_attempts=slug_rules.max_probe_attempts or DEFAULT_MAX_PROBE_ATTEMPTS,
        max_length=slug_rules.max,
        min_length=slug_rules.min,
        fallback=slug_rules.fallback,
        pattern=re.compile(slug_rules.pattern),
    )


def run_validate(inp: ValidateSlugInput, *, resolver: SlugResolver | None = None) -> SlugOutput:
    errors = resolver.validate(inp.slug) if resolver else validate_slug(inp.slug)
    return SlugOutput(
        slug=inp.slug if not errors else None,
        candidate=inp.slug,
        errors=errors,
        success=not errors,
    )


def run_resolve(inp: ResolveSlugInput, *, resolver: SlugResolver) -> SlugOutput:
    """
    Preview the slug an item would receive.

    Args:
        inp: Title, optional manual override and the item being edited.
        resolver: Slug resolver bound to a lookup port.

    Returns:
        SlugOutput with the resolved slug. `available` reports whether the
        unsuffixed candidate was free; a taken manual override is reported as
        `slug_taken` because saving it would be rejected.
    """
    candidate = resolver.candidate(inp.title, inp.manual_slug)
    available = resolver.is_available(candidate, inp.exclude_id)

    errors = resolver.validate(candidate, check_reserved=False)
    manual = bool(inp.manual_slug and inp.manual_slug.strip())
    if manual and not available:
        errors.append(
            SlugValidationError(
                code="slug_taken",
                message=f'Slug "{candidate}" is already used by another item',
            )
        )

    if errors:
        return SlugOutput(slug=None, candidate=candidate, available=available, errors=errors, success=False)

    slug = candidate if available else resolver.resolve(inp.title, inp.manual_slug, inp.exclude_id)
    return SlugOutput(slug=slug, candidate=candidate, available=available)
