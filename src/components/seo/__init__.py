"""
SEO component - robots.txt and sitemap.xml from published content.
"""

from .component import (
    build_sitemap_entries,
    config_from_rules,
    render_robots_txt,
    render_sitemap_xml,
    run_robots,
    run_sitemap,
)
from .models import SeoConfig, SeoDocument, SitemapEntry, SitemapInput, StaticPage

__all__ = [
    # Entry points
    "run_robots",
    "run_sitemap",
    "config_from_rules",
    # Renderers
    "build_sitemap_entries",
    "render_robots_txt",
    "render_sitemap_xml",
    # Models
    "SeoConfig",
    "SeoDocument",
    "SitemapEntry",
    "SitemapInput",
    "StaticPage",
]
