"""
Page views component - unique visitor counting.
"""

from ._impl import BOT_SIGNATURES, day_key, is_bot_user_agent, visitor_fingerprint
from .component import run_track_page_view, run_visitor_stats
from .models import PageViewOutput, TrackPageViewInput, ViewStatus, VisitorStatsOutput
from .ports import PageViewRepoPort

__all__ = [
    # Entry points
    "run_track_page_view",
    "run_visitor_stats",
    # Policy
    "BOT_SIGNATURES",
    "day_key",
    "is_bot_user_agent",
    "visitor_fingerprint",
    # Models
    "PageViewOutput",
    "TrackPageViewInput",
    "ViewStatus",
    "VisitorStatsOutput",
    # Ports
    "PageViewRepoPort",
]
