from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query

from src.api.deps import (
    get_content_repo,
    get_lifecycle_config,
    get_resolver,
    require_admin,
    require_writable,
)
from src.api.schemas import (
    ContentItemResponse,
    ContentListResponse,
    ContentPatchRequest,
    ContentStatus,
    SlugPreviewResponse,
    error_details,
)
from src.components.content import (
    ContentOperationOutput,
    DeleteContentInput,
    GetContentInput,
    LifecycleConfig,
    ListContentInput,
    PublishInput,
    SaveDraftInput,
    UnpublishInput,
    UpdateDraftInput,
    run_delete,
    run_get,
    run_list,
    run_publish,
    run_save_draft,
    run_unpublish,
    run_update_draft,
)
from src.components.slugs import ResolveSlugInput, SlugResolver, run_resolve
from src.domain.entities import Identity

router = APIRouter()


def _raise_for_errors(result: ContentOperationOutput) -> None:
    """Map component errors onto HTTP: not_found is 404, anything else 400."""
    if result.success:
        return
    if any(e.code == "not_found" for e in result.errors):
        raise HTTPException(status_code=404, detail="Content not found")
    raise HTTPException(
        status_code=400,
        detail={"error": result.errors[0].message, "details": error_details(result.errors)},
    )


def _item_response(result: ContentOperationOutput) -> ContentItemResponse:
    _raise_for_errors(result)
    if result.content is None:
        raise HTTPException(status_code=404, detail="Content not found")
    return ContentItemResponse.from_item(result.content)


@router.get("", response_model=ContentListResponse)
def list_content(
    status: ContentStatus | None = None,
    limit: int | None = Query(None, ge=1, description="Page size"),
    offset: int = Query(0, ge=0, description="Items to skip"),
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
) -> ContentListResponse:
    """List content for the admin dashboard, newest first."""
    result = run_list(ListContentInput(status=status, limit=limit, offset=offset), repo=repo)
    return ContentListResponse(
        items=[ContentItemResponse.from_item(i) for i in result.items],
        total=result.total,
        limit=result.limit,
        offset=result.offset,
    )


@router.get("/slug-preview", response_model=SlugPreviewResponse)
def slug_preview(
    title: str = "",
    slug: str | None = None,
    exclude_id: str | None = None,
    identity: Identity = Depends(require_admin),
    resolver: SlugResolver = Depends(get_resolver),
) -> SlugPreviewResponse:
    """Show the slug an item would be saved with."""
    result = run_resolve(
        ResolveSlugInput(title=title, manual_slug=slug, exclude_id=exclude_id),
        resolver=resolver,
    )
    return SlugPreviewResponse(
        slug=result.slug,
        candidate=result.candidate,
        available=result.available,
        errors=error_details(result.errors),
    )


@router.get("/{item_id}", response_model=ContentItemResponse)
def get_content(
    item_id: str,
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
) -> ContentItemResponse:
    result = run_get(GetContentInput(content_id=item_id), repo=repo)
    if not result.success or not result.content:
        raise HTTPException(status_code=404, detail="Content not found")
    return ContentItemResponse.from_item(result.content)


@router.post(
    "/drafts",
    response_model=ContentItemResponse,
    status_code=201,
    dependencies=[Depends(require_writable)],
)
def save_draft(
    req: ContentPatchRequest,
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
    resolver: SlugResolver = Depends(get_resolver),
    config: LifecycleConfig = Depends(get_lifecycle_config),
) -> ContentItemResponse:
    """Create a new draft."""
    inp = SaveDraftInput(patch=req.to_patch(), identity=identity)
    return _item_response(run_save_draft(inp, repo=repo, resolver=resolver, config=config))


@router.post(
    "/publish",
    response_model=ContentItemResponse,
    status_code=201,
    dependencies=[Depends(require_writable)],
)
def publish_new(
    req: ContentPatchRequest,
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
    resolver: SlugResolver = Depends(get_resolver),
    config: LifecycleConfig = Depends(get_lifecycle_config),
) -> ContentItemResponse:
    """Create an item directly as published."""
    inp = PublishInput(patch=req.to_patch(), identity=identity)
    return _item_response(run_publish(inp, repo=repo, resolver=resolver, config=config))


@router.put(
    "/{item_id}",
    response_model=ContentItemResponse,
    dependencies=[Depends(require_writable)],
)
def update_draft(
    item_id: str,
    req: ContentPatchRequest,
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
    resolver: SlugResolver = Depends(get_resolver),
    config: LifecycleConfig = Depends(get_lifecycle_config),
) -> ContentItemResponse:
    """Save edits; the item keeps its current status."""
    inp = UpdateDraftInput(content_id=item_id, patch=req.to_patch())
    return _item_response(run_update_draft(inp, repo=repo, resolver=resolver, config=config))


@router.post(
    "/{item_id}/publish",
    response_model=ContentItemResponse,
    dependencies=[Depends(require_writable)],
)
def publish_existing(
    item_id: str,
    req: ContentPatchRequest | None = None,
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
    resolver: SlugResolver = Depends(get_resolver),
    config: LifecycleConfig = Depends(get_lifecycle_config),
) -> ContentItemResponse:
    """Publish an existing item, applying any edits sent along."""
    patch = req.to_patch() if req is not None else ContentPatchRequest().to_patch()
    inp = PublishInput(patch=patch, identity=identity, content_id=item_id)
    return _item_response(run_publish(inp, repo=repo, resolver=resolver, config=config))


@router.post(
    "/{item_id}/unpublish",
    response_model=ContentItemResponse,
    dependencies=[Depends(require_writable)],
)
def unpublish(
    item_id: str,
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
    config: LifecycleConfig = Depends(get_lifecycle_config),
) -> ContentItemResponse:
    inp = UnpublishInput(content_id=item_id)
    return _item_response(run_unpublish(inp, repo=repo, config=config))


@router.delete("/{item_id}", status_code=204, dependencies=[Depends(require_writable)])
def delete_content(
    item_id: str,
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_content_repo),
) -> None:
    """Delete a content item."""
    _raise_for_errors(run_delete(DeleteContentInput(content_id=item_id), repo=repo))
