from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from src.api.deps import get_content_repo
from src.api.schemas import ContentItemResponse, ContentListResponse, TagCountResponse
from src.components.content import (
    GetBySlugInput,
    ListContentInput,
    ListTagsInput,
    run_get_by_slug,
    run_list,
    run_list_tags,
)

router = APIRouter()


@router.get("/articles", response_model=ContentListResponse)
def list_articles(
    limit: int | None = Query(None, ge=1, description="Page size"),
    offset: int = Query(0, ge=0, description="Items to skip"),
    content_repo: Any = Depends(get_content_repo),
) -> ContentListResponse:
    """Published articles, newest first."""
    res = run_list(ListContentInput(status="published", limit=limit, offset=offset), repo=content_repo)
    return ContentListResponse(
        items=[ContentItemResponse.from_item(i) for i in res.items],
        total=res.total,
        limit=res.limit,
        offset=res.offset,
    )


@router.get("/articles/{slug}", response_model=ContentItemResponse)
def get_article(
    slug: str,
    content_repo: Any = Depends(get_content_repo),
) -> Any:
    """
    Get a published article by slug.

    Old slugs answer with a permanent redirect to the current address.
    """
    res = run_get_by_slug(GetBySlugInput(slug=slug), repo=content_repo)
    if not res.success or not res.content:
        raise HTTPException(status_code=404, detail="Content not found")

    if res.redirect_to:
        return RedirectResponse(url=f"/api/public/articles/{res.redirect_to}", status_code=301)

    return ContentItemResponse.from_item(res.content)


@router.get("/tags", response_model=list[TagCountResponse])
def list_tags(
    limit: int | None = Query(None, ge=1, description="Max tags"),
    content_repo: Any = Depends(get_content_repo),
) -> list[TagCountResponse]:
    """Tag usage across published articles."""
    res = run_list_tags(ListTagsInput(limit=limit), repo=content_repo)
    return [TagCountResponse(tag=t.tag, count=t.count) for t in res.tags]
