"""
Content component - content lifecycle state machine and query facade.

State Machine:
- (new) → draft        (save draft)
- (new) → published    (publish without an id)
- draft → published    (publish)
- published → published (republish / edit while live)
- published → draft    (unpublish, published_at retained)

Slug policy:
- drafts regenerate their slug when the title changes
- published items keep their slug unless a manual override is given
- a manual override owned by another live item is rejected (slug_taken)
- whenever the slug changes the previous one is appended to old_slugs

Writes are a single-document put of the full record. A store-level slug
conflict triggers one re-resolution and retry; a second conflict raises
PersistenceError.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

from src.components.slugs import SlugResolver
from src.core.errors import OrderingUnsupported, PersistenceError, StoreError, UniquenessConflict
from src.domain.entities import ContentItem, ContentStatus
from src.ports.store import SERVER_TIMESTAMP
from src.rules.models import ContentRules

from .models import (
    ContentListOutput,
    ContentOperationOutput,
    ContentOutput,
    ContentPatch,
    ContentValidationError,
    DeleteContentInput,
    GetBySlugInput,
    GetContentInput,
    ListContentInput,
    ListTagsInput,
    PublishInput,
    SaveDraftInput,
    SlugLookupOutput,
    TagCount,
    TagCountsOutput,
    UnpublishInput,
    UpdateDraftInput,
)
from .ports import ContentRepoPort

logger = logging.getLogger(__name__)

# --- Default Configuration ---

DEFAULT_TRANSITIONS: dict[ContentStatus, list[ContentStatus]] = {
    "draft": ["published"],
    "published": ["draft", "published"],
}

# Timestamp each listing is ordered by (newest first)
ORDER_FIELDS: dict[ContentStatus | None, str] = {
    "published": "published_at",
    "draft": "updated_at",
    None: "created_at",
}


@dataclass
class LifecycleConfig:
    """Configuration for the content lifecycle."""

    transitions: dict[ContentStatus, list[ContentStatus]] = field(
        default_factory=lambda: DEFAULT_TRANSITIONS.copy()
    )
    title_max_length: int = 200
    excerpt_max_length: int = 500


def config_from_rules(rules: ContentRules) -> LifecycleConfig:
    return LifecycleConfig(
        transitions={k: list(v) for k, v in rules.transitions.items()},  # type: ignore[misc]
        title_max_length=rules.title.max,
        excerpt_max_length=rules.excerpt.get("max", 500),
    )


# BuildResult is (full record fields, validation errors)
BuildResult = tuple[dict[str, Any] | None, list[ContentValidationError]]


# --- Validation Functions ---


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Strip, drop empties and drop duplicates (case-insensitive, ignoring a leading '#')."""
    seen: set[str] = set()
    result: list[str] = []
    for tag in tags or []:
        cleaned = tag.strip()
        key = cleaned.lstrip("#").strip().lower()
        if not key or key in seen:
            continue
        seen.add(key)
        result.append(cleaned)
    return result


def _not_found(content_id: str) -> ContentValidationError:
    return ContentValidationError(code="not_found", message=f"Content {content_id} not found")


def _slug_taken(slug: str) -> ContentValidationError:
    return ContentValidationError(
        code="slug_taken",
        message=f'Slug "{slug}" is already used by another item',
        field="slug",
    )


def _validate_patch(
    patch: ContentPatch,
    config: LifecycleConfig,
    *,
    creating: bool,
) -> list[ContentValidationError]:
    errors: list[ContentValidationError] = []

    if creating or patch.title is not None:
        title = (patch.title or "").strip()
        if not title:
            errors.append(
                ContentValidationError(
                    code="title_required",
                    message="Title is required",
                    field="title",
                )
            )
        elif len(title) > config.title_max_length:
            errors.append(
                ContentValidationError(
                    code="title_too_long",
                    message=f"Title must be at most {config.title_max_length} characters",
                    field="title",
                )
            )

    if patch.excerpt is not None and len(patch.excerpt) > config.excerpt_max_length:
        errors.append(
            ContentValidationError(
                code="excerpt_too_long",
                message=f"Excerpt must be at most {config.excerpt_max_length} characters",
                field="excerpt",
            )
        )

    return errors


# --- State Machine ---


def _can_transition(
    from_status: ContentStatus,
    to_status: ContentStatus,
    config: LifecycleConfig,
) -> bool:
    return to_status in config.transitions.get(from_status, [])


def _invalid_transition(
    from_status: ContentStatus,
    to_status: ContentStatus,
    config: LifecycleConfig,
) -> ContentValidationError:
    allowed = list(config.transitions.get(from_status, []))
    return ContentValidationError(
        code="invalid_transition",
        message=f"Cannot transition from '{from_status}' to '{to_status}'. Allowed: {allowed}",
        field="status",
    )


# --- Slug Decisions ---


def _slug_for_new(
    title: str,
    patch: ContentPatch,
    resolver: SlugResolver,
) -> tuple[str | None, list[ContentValidationError]]:
    manual = patch.manual_slug
    if manual:
        candidate = resolver.candidate(title, manual)
        if not resolver.is_available(candidate):
            return None, [_slug_taken(candidate)]
        return candidate, []
    return resolver.resolve(title), []


def _slug_for_existing(
    existing: ContentItem,
    title: str,
    patch: ContentPatch,
    resolver: SlugResolver,
) -> tuple[str | None, list[ContentValidationError]]:
    manual = patch.manual_slug
    if manual:
        candidate = resolver.candidate(title, manual)
        if candidate == existing.slug:
            return existing.slug, []
        if not resolver.is_available(candidate, existing.id):
            return None, [_slug_taken(candidate)]
        return candidate, []

    # Published slugs are frozen; drafts follow their title
    if existing.status == "draft" and title != existing.title:
        return resolver.resolve(title, exclude_id=existing.id), []
    return existing.slug, []


def _old_slugs_after(existing: ContentItem, new_slug: str) -> list[str]:
    old_slugs = list(existing.old_slugs)
    if new_slug != existing.slug and existing.slug not in old_slugs:
        old_slugs.append(existing.slug)
    return old_slugs


# --- Record Builders ---


def _new_record(
    patch: ContentPatch,
    status: ContentStatus,
    inp: SaveDraftInput | PublishInput,
    resolver: SlugResolver,
) -> BuildResult:
    title = (patch.title or "").strip()
    slug, errors = _slug_for_new(title, patch, resolver)
    if errors:
        return None, errors

    record: dict[str, Any] = {
        "title": title,
        "excerpt": patch.excerpt or "",
        "content": patch.content or "",
        "status": status,
        "author_id": inp.identity.user_id,
        "author_email": inp.identity.email,
        "slug": slug,
        "old_slugs": [],
        "tags": normalize_tags(patch.tags),
        "created_at": SERVER_TIMESTAMP,
        "updated_at": SERVER_TIMESTAMP,
        "published_at": SERVER_TIMESTAMP if status == "published" else None,
        "featured_image": patch.featured_image,
        "thumbnail_url": patch.thumbnail_url,
    }
    source = inp.source if isinstance(inp, PublishInput) else None
    if source is not None:
        record["youtube_video_id"] = source.video_id
        record["youtube_url"] = source.url
        if source.published_at is not None:
            record["published_at"] = source.published_at
    return record, []


def _merged_record(
    existing: ContentItem,
    patch: ContentPatch,
    status: ContentStatus,
    resolver: SlugResolver,
) -> BuildResult:
    title = patch.title.strip() if patch.title is not None else existing.title
    slug, errors = _slug_for_existing(existing, title, patch, resolver)
    if errors or slug is None:
        return None, errors

    record = existing.model_dump(exclude={"id"})
    record.update(
        title=title,
        status=status,
        slug=slug,
        old_slugs=_old_slugs_after(existing, slug),
        updated_at=SERVER_TIMESTAMP,
    )
    if patch.excerpt is not None:
        record["excerpt"] = patch.excerpt
    if patch.content is not None:
        record["content"] = patch.content
    if patch.tags is not None:
        record["tags"] = normalize_tags(patch.tags)
    if patch.featured_image is not None:
        record["featured_image"] = patch.featured_image
    if patch.thumbnail_url is not None:
        record["thumbnail_url"] = patch.thumbnail_url
    if status == "published" and existing.published_at is None:
        record["published_at"] = SERVER_TIMESTAMP
    return record, []


# --- Persistence ---


def _store_write(repo: ContentRepoPort, fields: dict[str, Any], content_id: str | None) -> str:
    try:
        if content_id is None:
            return repo.create(fields)
        repo.save(content_id, fields)
        return content_id
    except UniquenessConflict:
        raise
    except StoreError as e:
        raise PersistenceError(f"Content write failed: {e}") from e


def _persist(
    repo: ContentRepoPort,
    build: Callable[[], BuildResult],
    content_id: str | None = None,
) -> ContentOperationOutput:
    fields, errors = build()
    if errors or fields is None:
        return ContentOperationOutput(content=None, errors=errors, success=False)

    try:
        saved_id = _store_write(repo, fields, content_id)
    except UniquenessConflict as e:
        # Only a slug race is retried
        if e.field != "slug":
            raise
        logger.warning("Slug %s was claimed concurrently; re-resolving", fields["slug"])
        fields, errors = build()
        if errors or fields is None:
            return ContentOperationOutput(content=None, errors=errors, success=False)
        try:
            saved_id = _store_write(repo, fields, content_id)
        except UniquenessConflict as e:
            raise PersistenceError(f"Slug {fields['slug']} conflicted twice") from e

    saved = repo.get_by_id(saved_id)
    if saved is None:
        raise PersistenceError(f"Content {saved_id} missing after write")
    return ContentOperationOutput(content=saved, errors=[], success=True)


def _default_resolver(repo: ContentRepoPort, resolver: SlugResolver | None) -> SlugResolver:
    return resolver or SlugResolver(lookup=repo)


# --- Lifecycle Entry Points ---


def run_save_draft(
    inp: SaveDraftInput,
    *,
    repo: ContentRepoPort,
    resolver: SlugResolver | None = None,
    config: LifecycleConfig | None = None,
) -> ContentOperationOutput:
    """
    Create a new draft.

    Args:
        inp: Editor patch and the creating identity.
        repo: Content repository port.
        resolver: Slug resolver (defaults to one backed by repo).
        config: Lifecycle configuration.

    Returns:
        ContentOperationOutput with the stored draft or validation errors.
    """
    config = config or LifecycleConfig()
    errors = _validate_patch(inp.patch, config, creating=True)
    if errors:
        return ContentOperationOutput(content=None, errors=errors, success=False)

    slugs = _default_resolver(repo, resolver)
    result = _persist(repo, lambda: _new_record(inp.patch, "draft", inp, slugs))
    if result.content:
        logger.info("Saved draft %s slug=%s", result.content.id, result.content.slug)
    return result


def run_publish(
    inp: PublishInput,
    *,
    repo: ContentRepoPort,
    resolver: SlugResolver | None = None,
    config: LifecycleConfig | None = None,
) -> ContentOperationOutput:
    """
    Publish content.

    Without a content_id a new item is created directly as published. With
    one, the patch is merged into the existing item, its author is kept, and
    published_at is set only if it was never published before.

    Returns:
        ContentOperationOutput with the published item, validation errors,
        or a not_found error.
    """
    config = config or LifecycleConfig()
    slugs = _default_resolver(repo, resolver)

    if inp.content_id is None:
        errors = _validate_patch(inp.patch, config, creating=True)
        if errors:
            return ContentOperationOutput(content=None, errors=errors, success=False)
        result = _persist(repo, lambda: _new_record(inp.patch, "published", inp, slugs))
        if result.content:
            logger.info("Published new %s slug=%s", result.content.id, result.content.slug)
        return result

    existing = repo.get_by_id(inp.content_id)
    if existing is None:
        return ContentOperationOutput(content=None, errors=[_not_found(inp.content_id)], success=False)

    if not _can_transition(existing.status, "published", config):
        return ContentOperationOutput(
            content=existing,
            errors=[_invalid_transition(existing.status, "published", config)],
            success=False,
        )

    errors = _validate_patch(inp.patch, config, creating=False)
    if errors:
        return ContentOperationOutput(content=existing, errors=errors, success=False)

    result = _persist(
        repo,
        lambda: _merged_record(existing, inp.patch, "published", slugs),
        existing.id,
    )
    if result.content:
        logger.info(
            "Published %s slug=%s (was %s)",
            result.content.id,
            result.content.slug,
            existing.status,
        )
    return result


def run_update_draft(
    inp: UpdateDraftInput,
    *,
    repo: ContentRepoPort,
    resolver: SlugResolver | None = None,
    config: LifecycleConfig | None = None,
) -> ContentOperationOutput:
    """
    Merge an edit into an existing item without changing its status.

    Returns:
        ContentOperationOutput with the updated item, validation errors,
        or a not_found error.
    """
    config = config or LifecycleConfig()
    existing = repo.get_by_id(inp.content_id)
    if existing is None:
        return ContentOperationOutput(content=None, errors=[_not_found(inp.content_id)], success=False)

    errors = _validate_patch(inp.patch, config, creating=False)
    if errors:
        return ContentOperationOutput(content=existing, errors=errors, success=False)

    slugs = _default_resolver(repo, resolver)
    result = _persist(
        repo,
        lambda: _merged_record(existing, inp.patch, existing.status, slugs),
        existing.id,
    )
    if result.content:
        logger.info("Updated %s slug=%s", result.content.id, result.content.slug)
    return result


def run_unpublish(
    inp: UnpublishInput,
    *,
    repo: ContentRepoPort,
    config: LifecycleConfig | None = None,
) -> ContentOperationOutput:
    """Move a published item back to draft; published_at and slug are kept."""
    config = config or LifecycleConfig()
    existing = repo.get_by_id(inp.content_id)
    if existing is None:
        return ContentOperationOutput(content=None, errors=[_not_found(inp.content_id)], success=False)

    if existing.status != "published" or not _can_transition(existing.status, "draft", config):
        return ContentOperationOutput(
            content=existing,
            errors=[_invalid_transition(existing.status, "draft", config)],
            success=False,
        )

    def build() -> BuildResult:
        record = existing.model_dump(exclude={"id"})
        record.update(status="draft", updated_at=SERVER_TIMESTAMP)
        return record, []

    result = _persist(repo, build, existing.id)
    if result.content:
        logger.info("Unpublished %s slug=%s", result.content.id, result.content.slug)
    return result


def run_delete(
    inp: DeleteContentInput,
    *,
    repo: ContentRepoPort,
) -> ContentOperationOutput:
    """Hard-delete an item in any status."""
    existing = repo.get_by_id(inp.content_id)
    if existing is None:
        return ContentOperationOutput(content=None, errors=[_not_found(inp.content_id)], success=False)

    try:
        repo.delete(inp.content_id)
    except StoreError as e:
        raise PersistenceError(f"Content delete failed: {e}") from e

    logger.info("Deleted %s slug=%s", existing.id, existing.slug)
    return ContentOperationOutput(content=None, errors=[], success=True)


# --- Query Entry Points ---


def _sort_newest_first(items: list[ContentItem], order_field: str) -> list[ContentItem]:
    return sorted(
        items,
        key=lambda item: getattr(item, order_field, None) or item.created_at,
        reverse=True,
    )


def run_get(
    inp: GetContentInput,
    *,
    repo: ContentRepoPort,
) -> ContentOutput:
    content = repo.get_by_id(inp.content_id)
    if content is None:
        return ContentOutput(content=None, errors=[_not_found(inp.content_id)], success=False)
    return ContentOutput(content=content, errors=[], success=True)


def run_list(
    inp: ListContentInput,
    *,
    repo: ContentRepoPort,
) -> ContentListOutput:
    """
    List content newest first.

    Published items are ordered by published_at, drafts by updated_at and
    the unfiltered list by created_at. If the store cannot serve the ordered
    query, the unordered result is sorted here by the same key.
    """
    order_field = ORDER_FIELDS[inp.status]

    if inp.status is None:
        items = _sort_newest_first(repo.list_by_status(None), order_field)
    else:
        try:
            items = repo.list_by_status(inp.status, order_by=order_field)
        except OrderingUnsupported:
            logger.info("Ordered query unavailable for %s; sorting client-side", inp.status)
            items = _sort_newest_first(repo.list_by_status(inp.status), order_field)

    total = len(items)
    # Negative paging would slice from the tail
    offset = max(inp.offset, 0)
    end = offset + max(inp.limit, 0) if inp.limit is not None else None
    return ContentListOutput(
        items=items[offset:end],
        total=total,
        limit=inp.limit,
        offset=inp.offset,
        errors=[],
        success=True,
    )


def run_get_by_slug(
    inp: GetBySlugInput,
    *,
    repo: ContentRepoPort,
) -> SlugLookupOutput:
    """
    Find a published item by its current slug, falling back to old slugs.

    A match on an old slug returns the item with redirect_to set to its
    current slug. The fallback scans every published item.
    """
    slug = inp.slug.strip()
    not_found = SlugLookupOutput(
        errors=[ContentValidationError(code="not_found", message=f"No article at '{slug}'", field="slug")],
        success=False,
    )
    if not slug:
        return not_found

    current = repo.find_by_slug(slug)
    if current is not None and current.is_published:
        return SlugLookupOutput(content=current)

    for item in repo.list_by_status("published"):
        if slug in item.old_slugs:
            logger.info("Old slug %s resolved to %s", slug, item.slug)
            return SlugLookupOutput(content=item, redirect_to=item.slug)

    return not_found


def run_list_tags(
    inp: ListTagsInput,
    *,
    repo: ContentRepoPort,
) -> TagCountsOutput:
    """Count tag usage across published items, most used first."""
    counts: dict[str, int] = {}
    labels: dict[str, str] = {}

    for item in repo.list_by_status("published"):
        for tag in normalize_tags(item.tags):
            label = tag.lstrip("#").strip()
            key = label.lower()
            labels.setdefault(key, label)
            counts[key] = counts.get(key, 0) + 1

    ranked = sorted(counts, key=lambda k: (-counts[k], k))
    if inp.limit is not None:
        ranked = ranked[: max(inp.limit, 0)]
    return TagCountsOutput(tags=[TagCount(tag=labels[k], count=counts[k]) for k in ranked])


def run(
    inp: (
        SaveDraftInput
        | PublishInput
        | UpdateDraftInput
        | UnpublishInput
        | DeleteContentInput
        | GetContentInput
        | GetBySlugInput
        | ListContentInput
        | ListTagsInput
    ),
    *,
    repo: ContentRepoPort,
    resolver: SlugResolver | None = None,
    config: LifecycleConfig | None = None,
) -> ContentOutput | ContentListOutput | ContentOperationOutput | SlugLookupOutput | TagCountsOutput:
    """
    Main entry point for the content component.

    Dispatches to appropriate handler based on input type.
    """
    if isinstance(inp, SaveDraftInput):
        return run_save_draft(inp, repo=repo, resolver=resolver, config=config)

    elif isinstance(inp, PublishInput):
        return run_publish(inp, repo=repo, resolver=resolver, config=config)

    elif isinstance(inp, UpdateDraftInput):
        return run_update_draft(inp, repo=repo, resolver=resolver, config=config)

    elif isinstance(inp, UnpublishInput):
        return run_unpublish(inp, repo=repo, config=config)

    elif isinstance(inp, DeleteContentInput):
        return run_delete(inp, repo=repo)

    elif isinstance(inp, GetContentInput):
        return run_get(inp, repo=repo)

    elif isinstance(inp, GetBySlugInput):
        return run_get_by_slug(inp, repo=repo)

    elif isinstance(inp, ListContentInput):
        return run_list(inp, repo=repo)

    elif isinstance(inp, ListTagsInput):
        return run_list_tags(inp, repo=repo)

    else:
        raise ValueError(f"Unknown input type: {type(inp)}")
