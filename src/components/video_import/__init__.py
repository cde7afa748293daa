"""
Video import component - channel uploads published as articles.
"""

from ._impl import (
    BOILERPLATE_MARKERS,
    build_body,
    build_excerpt,
    choose_tags,
    extract_tags,
    is_boilerplate,
    pick_thumbnail,
    prepare_post,
    strip_boilerplate,
    watch_url,
)
from .component import config_from_rules, run_import_video, run_sync
from .models import (
    ImportConfig,
    ImportVideoInput,
    ImportVideoOutput,
    PreparedPost,
    SyncSummary,
    SyncVideosInput,
    VideoPayload,
)
from .ports import VideoContentRepoPort, VideoFeedPort

__all__ = [
    # Entry points
    "config_from_rules",
    "run_import_video",
    "run_sync",
    # Policy
    "BOILERPLATE_MARKERS",
    "build_body",
    "build_excerpt",
    "choose_tags",
    "extract_tags",
    "is_boilerplate",
    "pick_thumbnail",
    "prepare_post",
    "strip_boilerplate",
    "watch_url",
    # Models
    "ImportConfig",
    "ImportVideoInput",
    "ImportVideoOutput",
    "PreparedPost",
    "SyncSummary",
    "SyncVideosInput",
    "VideoPayload",
    # Ports
    "VideoContentRepoPort",
    "VideoFeedPort",
]
