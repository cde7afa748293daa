"""
Page view component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

# counted - first view from this visitor today
# repeat  - visitor already counted today
# bot     - crawler or missing user agent, not counted
# invalid - no usable path
ViewStatus = Literal["counted", "repeat", "bot", "invalid"]


@dataclass(frozen=True)
class TrackPageViewInput:
    path: object
    client_ip: str
    user_agent: str | None


@dataclass(frozen=True)
class PageViewOutput:
    status: ViewStatus

    @property
    def success(self) -> bool:
        return self.status in ("counted", "repeat")


@dataclass(frozen=True)
class VisitorStatsOutput:
    total_unique_visitors: int
