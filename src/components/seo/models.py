"""
SEO component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date

from src.domain.entities import ContentItem

# --- Configuration ---


@dataclass(frozen=True)
class StaticPage:
    path: str
    changefreq: str
    priority: float


DEFAULT_STATIC_PAGES: tuple[StaticPage, ...] = (
    StaticPage(path="/welcome/", changefreq="weekly", priority=1.0),
    StaticPage(path="/articles/", changefreq="daily", priority=0.8),
)

DEFAULT_DISALLOW: tuple[str, ...] = ("/admin/", "/admin/*", "/api/")


@dataclass(frozen=True)
class SeoConfig:
    """SEO configuration from rules."""

    site_url: str = "http://localhost:8000"
    article_path_prefix: str = "/articles/"
    article_changefreq: str = "monthly"
    article_priority: float = 0.7
    static_pages: tuple[StaticPage, ...] = DEFAULT_STATIC_PAGES
    disallow: tuple[str, ...] = DEFAULT_DISALLOW
    cache_max_age_seconds: int = 3600
    robots_cache_max_age_seconds: int = 86400


# --- Sitemap ---


@dataclass
class SitemapEntry:
    """Entry for sitemap generation."""

    loc: str
    lastmod: str | None = None
    changefreq: str | None = None
    priority: float | None = None


# --- Input Models ---


@dataclass(frozen=True)
class SitemapInput:
    """Published content snapshot and the build date for static pages."""

    items: list[ContentItem]
    today: date


# --- Output Models ---


@dataclass(frozen=True)
class SeoDocument:
    """A rendered SEO file ready to be served or written to disk."""

    filename: str
    content: str
    media_type: str
    cache_max_age_seconds: int
    entries: list[SitemapEntry] = field(default_factory=list)
