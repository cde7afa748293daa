"""
Admin Videos API - import channel uploads as published articles.

POST /sync            - import the newest upload if it is new
POST /sync?days=30    - backfill every upload from the last N days

503 when no feed is configured, when the site is read-only, or when the
feed cannot be reached.
"""

from fastapi import APIRouter, Depends, Query

from src.api.deps import (
    get_clock,
    get_content_repo,
    get_import_config,
    get_lifecycle_config,
    get_resolver,
    get_video_feed,
    require_admin,
    require_writable,
)
from src.adapters.content_repo import DocumentContentRepo
from src.api.schemas import VideoImportResult, VideoSyncResponse
from src.components.content import LifecycleConfig
from src.components.slugs import SlugResolver
from src.components.video_import import ImportConfig, SyncVideosInput, VideoFeedPort, run_sync
from src.domain.entities import Identity
from src.ports.clock import ClockPort

router = APIRouter()


@router.post(
    "/sync",
    response_model=VideoSyncResponse,
    summary="Import channel uploads",
    dependencies=[Depends(require_writable)],
)
def sync_videos(
    days: int | None = Query(None, ge=1, le=365, description="Backfill window in days"),
    identity: Identity = Depends(require_admin),
    feed: VideoFeedPort = Depends(get_video_feed),
    repo: DocumentContentRepo = Depends(get_content_repo),
    resolver: SlugResolver = Depends(get_resolver),
    config: ImportConfig = Depends(get_import_config),
    lifecycle: LifecycleConfig = Depends(get_lifecycle_config),
    clock: ClockPort = Depends(get_clock),
) -> VideoSyncResponse:
    summary = run_sync(
        SyncVideosInput(identity=identity, days=days),
        feed=feed,
        repo=repo,
        clock=clock,
        resolver=resolver,
        config=config,
        lifecycle=lifecycle,
    )
    return VideoSyncResponse(
        processed_count=summary.processed_count,
        created_count=summary.created_count,
        skipped_count=summary.skipped_count,
        published_after=summary.published_after,
        results=[
            VideoImportResult(
                video_id=r.video_id,
                status=r.status,
                content_id=r.content.id if r.content else None,
                slug=r.content.slug if r.content else None,
            )
            for r in summary.results
        ],
    )
