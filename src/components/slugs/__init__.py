"""
Slugs component - URL-safe slug generation and uniqueness.
"""

from ._impl import (
    DIACRITICS,
    RESERVED_SLUGS,
    SLUG_PATTERN,
    SlugResolver,
    is_reserved,
    normalize_slug,
    truncate_slug,
    validate_slug,
)
from .component import build_resolver, run_resolve, run_validate
from .models import ResolveSlugInput, SlugOutput, SlugValidationError, ValidateSlugInput
from .ports import SlugLookupPort

__all__ = [
    # Entry points
    "build_resolver",
    "run_resolve",
    "run_validate",
    # Policy
    "DIACRITICS",
    "RESERVED_SLUGS",
    "SLUG_PATTERN",
    "SlugResolver",
    "is_reserved",
    "normalize_slug",
    "truncate_slug",
    "validate_slug",
    # Models
    "ResolveSlugInput",
    "SlugOutput",
    "SlugValidationError",
    "ValidateSlugInput",
    # Ports
    "SlugLookupPort",
]
