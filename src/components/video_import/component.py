"""
Video import component - publishes channel uploads as articles.

Each upload is imported at most once: an item whose youtube_video_id matches
is left alone. Imported items go through the normal publish path, so slugs
come from the same resolver and collision loop as editor-created items.
"""

from __future__ import annotations

import logging
from datetime import timedelta

from src.components.content import (
    ContentPatch,
    LifecycleConfig,
    PublishInput,
    VideoSource,
    run_publish,
)
from src.components.slugs import SlugResolver
from src.core.errors import UniquenessConflict
from src.ports.clock import ClockPort
from src.rules.models import VideoImportRules

from ._impl import prepare_post, watch_url
from .models import ImportConfig, ImportVideoInput, ImportVideoOutput, SyncSummary, SyncVideosInput
from .ports import VideoContentRepoPort, VideoFeedPort

logger = logging.getLogger(__name__)


def config_from_rules(rules: VideoImportRules) -> ImportConfig:
    return ImportConfig(
        max_tags=rules.max_tags,
        excerpt_length=rules.excerpt_length,
        backfill_days=rules.backfill_days,
        max_videos=rules.max_videos,
    )


def run_import_video(
    inp: ImportVideoInput,
    *,
    repo: VideoContentRepoPort,
    resolver: SlugResolver | None = None,
    config: ImportConfig | None = None,
    lifecycle: LifecycleConfig | None = None,
) -> ImportVideoOutput:
    """
    Publish one upload as a new content item.

    Args:
        inp: The upload and the identity recorded as author.
        repo: Content repository that can look items up by video id.
        resolver: Slug resolver (defaults to one backed by repo).
        config: Import configuration.
        lifecycle: Lifecycle configuration passed to the publish step.

    Returns:
        ImportVideoOutput with status created, duplicate, not_public or invalid.
    """
    config = config or ImportConfig()
    video = inp.video

    if video.privacy_status != "public":
        logger.info("Video %s is %s, skipping", video.video_id, video.privacy_status or "not public")
        return ImportVideoOutput(video_id=video.video_id, status="not_public")

    existing = repo.find_by_video_id(video.video_id)
    if existing is not None:
        logger.debug("Video %s already imported as %s", video.video_id, existing.id)
        return ImportVideoOutput(video_id=video.video_id, status="duplicate", content=existing)

    post = prepare_post(video, config)
    source = VideoSource(
        video_id=video.video_id,
        url=watch_url(video.video_id),
        published_at=video.published_at if inp.backfilled else None,
    )
    publish = PublishInput(
        patch=ContentPatch(
            title=post.title,
            excerpt=post.excerpt,
            content=post.content,
            tags=post.tags,
            thumbnail_url=post.thumbnail_url,
        ),
        identity=inp.identity,
        source=source,
    )
    try:
        result = run_publish(publish, repo=repo, resolver=resolver, config=lifecycle)
    except UniquenessConflict as e:
        if e.field != "youtube_video_id":
            raise
        # Imported concurrently by another run
        logger.info("Video %s was imported concurrently", video.video_id)
        return ImportVideoOutput(
            video_id=video.video_id,
            status="duplicate",
            content=repo.find_by_video_id(video.video_id),
        )
    if not result.success:
        logger.warning("Video %s rejected: %s", video.video_id, [e.code for e in result.errors])
        return ImportVideoOutput(video_id=video.video_id, status="invalid", errors=result.errors)

    logger.info("Imported video %s as %s slug=%s", video.video_id, result.content.id, result.content.slug)
    return ImportVideoOutput(video_id=video.video_id, status="created", content=result.content)


def run_sync(
    inp: SyncVideosInput,
    *,
    feed: VideoFeedPort,
    repo: VideoContentRepoPort,
    clock: ClockPort,
    resolver: SlugResolver | None = None,
    config: ImportConfig | None = None,
    lifecycle: LifecycleConfig | None = None,
) -> SyncSummary:
    """
    Import new uploads from the feed.

    Without `days` this is the periodic sync: only the newest upload is
    fetched and it is stamped at import time. With `days` it is a backfill
    of every upload in that window (capped at max_videos), each keeping its
    own upload time. FeedUnavailable from the feed propagates.
    """
    config = config or ImportConfig()
    backfill = inp.days is not None
    published_after = clock.now_utc() - timedelta(days=inp.days) if inp.days is not None else None
    limit = (inp.max_videos or config.max_videos) if backfill else 1

    videos = feed.fetch_videos(published_after=published_after, limit=limit)
    results: list[ImportVideoOutput] = []
    for video in videos[:limit]:
        if published_after and video.published_at and video.published_at < published_after:
            logger.debug("Video %s is older than %s, skipping", video.video_id, published_after)
            continue
        results.append(
            run_import_video(
                ImportVideoInput(video=video, identity=inp.identity, backfilled=backfill),
                repo=repo,
                resolver=resolver,
                config=config,
                lifecycle=lifecycle,
            )
        )

    summary = SyncSummary(results=results, published_after=published_after)
    logger.info(
        "Video sync done: %d processed, %d created, %d skipped",
        summary.processed_count,
        summary.created_count,
        summary.skipped_count,
    )
    return summary
