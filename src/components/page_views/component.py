"""
Page views component - approximate count of real visitors.
"""

from __future__ import annotations

import logging

from src.ports.clock import ClockPort

from ._impl import day_key, is_bot_user_agent, visitor_fingerprint
from .models import PageViewOutput, TrackPageViewInput, VisitorStatsOutput
from .ports import PageViewRepoPort

logger = logging.getLogger(__name__)


def run_track_page_view(
    inp: TrackPageViewInput,
    *,
    repo: PageViewRepoPort,
    clock: ClockPort,
) -> PageViewOutput:
    """
    Count a page view once per visitor per day.

    Returns:
        PageViewOutput with status counted, repeat, bot or invalid.
    """
    if not isinstance(inp.path, str) or not inp.path:
        return PageViewOutput(status="invalid")

    if is_bot_user_agent(inp.user_agent):
        logger.debug("Skipping page view from bot or unknown user agent")
        return PageViewOutput(status="bot")

    day = day_key(clock.now_utc())
    fingerprint = visitor_fingerprint(inp.client_ip, inp.user_agent or "", day)
    if not repo.record_view(fingerprint, inp.path, day):
        return PageViewOutput(status="repeat")
    return PageViewOutput(status="counted")


def run_visitor_stats(*, repo: PageViewRepoPort) -> VisitorStatsOutput:
    return VisitorStatsOutput(total_unique_visitors=repo.count_views())
