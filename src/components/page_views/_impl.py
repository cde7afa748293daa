"""
Unique visitor counting.

Key behaviors:
- crawlers and requests without a user agent are never counted
- a visitor is the pair (client IP, user agent) within one UTC day
- only a hash of that pair is stored, never the IP or user agent
"""

from __future__ import annotations

import hashlib
from datetime import UTC, datetime

BOT_SIGNATURES: tuple[str, ...] = (
    "bot",
    "crawler",
    "spider",
    "crawl",
    "slurp",
    "bingpreview",
    "facebookexternalhit",
    "monitor",
)


def is_bot_user_agent(user_agent: str | None) -> bool:
    if not user_agent:
        return True
    lowered = user_agent.lower()
    return any(sig in lowered for sig in BOT_SIGNATURES)


def day_key(now: datetime) -> str:
    return now.astimezone(UTC).date().isoformat()


def visitor_fingerprint(client_ip: str, user_agent: str, day: str) -> str:
    source = f"{client_ip}|{user_agent.lower()}|{day}"
    return hashlib.sha256(source.encode()).hexdigest()[:32]
