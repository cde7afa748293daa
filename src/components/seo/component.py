"""
SEO component - robots.txt and sitemap.xml generation.

Invariants:
- Only published items appear in the sitemap
- robots.txt always points crawlers at the sitemap
"""

from __future__ import annotations

from datetime import date

from src.domain.entities import ContentItem
from src.rules.models import SeoRules

from .models import SeoConfig, SeoDocument, SitemapEntry, SitemapInput, StaticPage


def config_from_rules(rules: SeoRules) -> SeoConfig:
    return SeoConfig(
        site_url=rules.site_url,
        article_path_prefix=rules.article_path_prefix,
        article_changefreq=rules.article_changefreq,
        article_priority=rules.article_priority,
        static_pages=tuple(
            StaticPage(path=p.path, changefreq=p.changefreq, priority=p.priority)
            for p in rules.static_pages
        ),
        disallow=tuple(rules.disallow),
        cache_max_age_seconds=rules.cache_max_age_seconds,
        robots_cache_max_age_seconds=rules.robots_cache_max_age_seconds,
    )


def _escape_xml(text: str) -> str:
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
        .replace("'", "&apos;")
    )


def _site_root(config: SeoConfig) -> str:
    return config.site_url.rstrip("/")


def _lastmod(item: ContentItem, fallback: date) -> str:
    stamp = item.updated_at or item.published_at or item.created_at
    return stamp.date().isoformat() if stamp else fallback.isoformat()


# --- Renderers ---


def render_robots_txt(config: SeoConfig) -> str:
    root = _site_root(config)
    lines = [
        "User-agent: *",
        "Allow: /",
        *(f"Allow: {page.path}" for page in config.static_pages),
        f"Allow: {config.article_path_prefix}*",
        "",
        *(f"Disallow: {path}" for path in config.disallow),
        "",
        f"Sitemap: {root}/sitemap.xml",
    ]
    return "\n".join(lines) + "\n"


def build_sitemap_entries(inp: SitemapInput, config: SeoConfig) -> list[SitemapEntry]:
    root = _site_root(config)
    today = inp.today.isoformat()

    entries = [
        SitemapEntry(
            loc=f"{root}{page.path}",
            lastmod=today,
            changefreq=page.changefreq,
            priority=page.priority,
        )
        for page in config.static_pages
    ]

    prefix = "/" + config.article_path_prefix.strip("/") + "/"
    for item in inp.items:
        if not item.is_published:
            continue
        entries.append(
            SitemapEntry(
                loc=f"{root}{prefix}{item.slug}/",
                lastmod=_lastmod(item, inp.today),
                changefreq=config.article_changefreq,
                priority=config.article_priority,
            )
        )
    return entries


def render_sitemap_xml(entries: list[SitemapEntry]) -> str:
    """
    Render sitemap entries to XML string.

    Args:
        entries: List of SitemapEntry objects

    Returns:
        Valid sitemap.xml content
    """
    xml_parts = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">',
    ]

    for entry in entries:
        xml_parts.append("  <url>")
        xml_parts.append(f"    <loc>{_escape_xml(entry.loc)}</loc>")
        if entry.lastmod:
            xml_parts.append(f"    <lastmod>{entry.lastmod}</lastmod>")
        if entry.changefreq:
            xml_parts.append(f"    <changefreq>{entry.changefreq}</changefreq>")
        if entry.priority is not None:
            xml_parts.append(f"    <priority>{entry.priority:.1f}</priority>")
        xml_parts.append("  </url>")

    xml_parts.append("</urlset>")
    return "\n".join(xml_parts) + "\n"


# --- Component Entry Points ---


def run_robots(*, config: SeoConfig | None = None) -> SeoDocument:
    config = config or SeoConfig()
    return SeoDocument(
        filename="robots.txt",
        content=render_robots_txt(config),
        media_type="text/plain; charset=utf-8",
        cache_max_age_seconds=config.robots_cache_max_age_seconds,
    )


def run_sitemap(inp: SitemapInput, *, config: SeoConfig | None = None) -> SeoDocument:
    config = config or SeoConfig()
    entries = build_sitemap_entries(inp, config)
    return SeoDocument(
        filename="sitemap.xml",
        content=render_sitemap_xml(entries),
        media_type="application/xml; charset=utf-8",
        cache_max_age_seconds=config.cache_max_age_seconds,
        entries=entries,
    )
