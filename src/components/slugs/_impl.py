"""
Slug normalization, reserved-word guard and unique slug resolution.

Key behaviors:
- normalize_slug is pure and idempotent, and never returns an empty string
- slugs longer than the configured maximum are cut back to a word boundary
- reserved words (case-insensitive) get a `-1` suffix during resolution
- collisions are resolved by probing `-2`, `-3`, ... up to a bounded limit
- lookup failures propagate; a slug is never assigned on a failed check
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from dataclasses import dataclass

from src.core.errors import SlugExhaustedError

from .models import SlugValidationError
from .ports import SlugLookupPort

logger = logging.getLogger(__name__)

# --- Configuration ---

RESERVED_SLUGS: frozenset[str] = frozenset(
    {
        "admin",
        "api",
        "login",
        "logout",
        "assets",
        "sitemap.xml",
        "robots.txt",
        "dashboard",
        "content",
        "manage",
        "drafts",
        "published",
        "create",
        "edit",
        "home",
        "welcome",
        "verify-email",
        "forgot-password",
        "reset-password",
        "verification-required",
    }
)

DEFAULT_MAX_PROBE_ATTEMPTS = 1000
FALLBACK_SLUG = "untitled"

SLUG_PATTERN = re.compile(r"^[a-z0-9]+(-[a-z0-9]+)*$")

# Lowercase only: normalization lowercases before transliterating
DIACRITICS: dict[str, str] = {
    **dict.fromkeys("àáâãäåāăą", "a"),
    **dict.fromkeys("çćĉċč", "c"),
    **dict.fromkeys("ďđð", "d"),
    **dict.fromkeys("èéêëēĕėęě", "e"),
    **dict.fromkeys("ĝğġģ", "g"),
    **dict.fromkeys("ĥħ", "h"),
    **dict.fromkeys("ìíîïĩīĭįı", "i"),
    "ĵ": "j",
    "ķ": "k",
    **dict.fromkeys("ĺļľŀł", "l"),
    **dict.fromkeys("ñńņňŉ", "n"),
    **dict.fromkeys("òóôõöøōŏő", "o"),
    **dict.fromkeys("ŕŗř", "r"),
    **dict.fromkeys("śŝşš", "s"),
    **dict.fromkeys("ţťŧ", "t"),
    **dict.fromkeys("ùúûüũūŭůűų", "u"),
    "ŵ": "w",
    **dict.fromkeys("ýÿŷ", "y"),
    **dict.fromkeys("źżž", "z"),
    "ß": "ss",
    "æ": "ae",
    "œ": "oe",
    "þ": "th",
    "ĳ": "ij",
}

_TRANSLITERATE = str.maketrans(DIACRITICS)
_SEPARATORS = re.compile(r"[\s_]+")
_DISALLOWED = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUNS = re.compile(r"-+")


# --- Normalizer ---


def normalize_slug(text: str, max_length: int | None = None, fallback: str = FALLBACK_SLUG) -> str:
    """Turn arbitrary text into a URL-safe slug; the fallback when nothing survives."""
    slug = (text or "").strip().lower().translate(_TRANSLITERATE)
    slug = _SEPARATORS.sub("-", slug)
    slug = _DISALLOWED.sub("", slug)
    slug = _HYPHEN_RUNS.sub("-", slug).strip("-")
    return truncate_slug(slug, max_length) or fallback


def truncate_slug(slug: str, max_length: int | None) -> str:
    """
    Cut a slug to at most `max_length` characters.

    The cut falls on the last hyphen inside the limit so words stay whole; a
    single word longer than the limit is cut mid-word.
    """
    if max_length is None or len(slug) <= max_length:
        return slug
    cut = slug[:max_length]
    if slug[max_length] != "-" and "-" in cut:
        cut = cut.rsplit("-", 1)[0]
    return cut.strip("-")


# --- Reserved-Word Guard ---


def is_reserved(slug: str, reserved: Iterable[str] = RESERVED_SLUGS) -> bool:
    lowered = slug.lower()
    return any(lowered == word.lower() for word in reserved)


def validate_slug(
    slug: str,
    reserved: Iterable[str] = RESERVED_SLUGS,
    *,
    min_length: int = 1,
    max_length: int | None = None,
    pattern: re.Pattern[str] = SLUG_PATTERN,
) -> list[SlugValidationError]:
    """
    Check a slug against every rule and report all failures.

    An empty (or blank) slug reports only `empty_slug`. `invalid_format` is
    reported only when the slug passes the character and hyphen checks but
    still does not match a stricter configured pattern.
    """
    if not slug or not slug.strip():
        return [SlugValidationError(code="empty_slug", message="Slug cannot be empty")]

    errors: list[SlugValidationError] = []

    if is_reserved(slug, reserved):
        errors.append(
            SlugValidationError(
                code="reserved_slug",
                message=f'Slug "{slug}" is reserved and cannot be used',
            )
        )

    if re.search(r"[^a-z0-9-]", slug):
        errors.append(
            SlugValidationError(
                code="invalid_characters",
                message="Slug can only contain lowercase letters, numbers, and hyphens",
            )
        )

    if slug.startswith("-") or slug.endswith("-"):
        errors.append(
            SlugValidationError(
                code="boundary_hyphen",
                message="Slug cannot start or end with a hyphen",
            )
        )

    if "--" in slug:
        errors.append(
            SlugValidationError(
                code="repeated_hyphen",
                message="Slug cannot contain consecutive hyphens",
            )
        )

    if not errors and not pattern.match(slug):
        errors.append(
            SlugValidationError(
                code="invalid_format",
                message=f"Slug must match {pattern.pattern}",
            )
        )

    if len(slug) < min_length:
        errors.append(
            SlugValidationError(
                code="too_short",
                message=f"Slug must be at least {min_length} characters",
            )
        )

    if max_length is not None and len(slug) > max_length:
        errors.append(
            SlugValidationError(
                code="too_long",
                message=f"Slug must be at most {max_length} characters",
            )
        )

    return errors


# --- Unique Slug Resolver ---


@dataclass
class SlugResolver:
    """Resolves a title or manual override into a slug no other live item holds."""

    lookup: SlugLookupPort
    reserved: frozenset[str] = RESERVED_SLUGS
    max_probe_attempts: int = DEFAULT_MAX_PROBE_ATTEMPTS
    max_length: int | None = None
    min_length: int = 1
    fallback: str = FALLBACK_SLUG
    pattern: re.Pattern[str] = SLUG_PATTERN

    def candidate(self, title: str, manual_slug: str | None = None) -> str:
        """Base candidate before any collision probing."""
        source = manual_slug if manual_slug and manual_slug.strip() else title
        base = normalize_slug(source, self.max_length, self.fallback)
        if is_reserved(base, self.reserved):
            base = self.suffixed(base, 1)
        return base

    def suffixed(self, base: str, counter: int) -> str:
        """`base-counter`, with the base cut back so the whole slug fits the maximum."""
        suffix = f"-{counter}"
        if self.max_length is not None:
            base = truncate_slug(base, max(self.max_length - len(suffix), 1))
        return f"{base}{suffix}"

    def validate(self, slug: str, *, check_reserved: bool = True) -> list[SlugValidationError]:
        return validate_slug(
            slug,
            self.reserved if check_reserved else (),
            min_length=self.min_length,
            max_length=self.max_length,
            pattern=self.pattern,
        )

    def is_available(self, slug: str, exclude_id: str | None = None) -> bool:
        return not self.lookup.slug_taken(slug, exclude_id)

    def resolve(
        self,
        title: str,
        manual_slug: str | None = None,
        exclude_id: str | None = None,
    ) -> str:
        base = self.candidate(title, manual_slug)
        if self.is_available(base, exclude_id):
            return base

        # Suffixes start at -2; the bare base counts as the first attempt
        for counter in range(2, self.max_probe_attempts + 1):
            probe = self.suffixed(base, counter)
            if self.is_available(probe, exclude_id):
                logger.debug("Slug %s taken, using %s", base, probe)
                return probe

        raise SlugExhaustedError(base, self.max_probe_attempts)
