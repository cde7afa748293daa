from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter, Depends, Response

from src.api.deps import get_content_repo, get_seo_config
from src.components.content import ListContentInput, run_list
from src.components.seo import SeoConfig, SeoDocument, SitemapInput, run_robots, run_sitemap

router = APIRouter()


def _document_response(doc: SeoDocument) -> Response:
    return Response(
        content=doc.content,
        media_type=doc.media_type,
        headers={"Cache-Control": f"public, max-age={doc.cache_max_age_seconds}"},
    )


@router.get("/robots.txt")
def robots_txt(config: SeoConfig = Depends(get_seo_config)) -> Response:
    return _document_response(run_robots(config=config))


@router.get("/sitemap.xml")
def sitemap_xml(
    config: SeoConfig = Depends(get_seo_config),
    content_repo: Any = Depends(get_content_repo),
) -> Response:
    """Sitemap of static pages plus every published article."""
    published = run_list(ListContentInput(status="published"), repo=content_repo)
    inp = SitemapInput(items=published.items, today=datetime.now(UTC).date())
    return _document_response(run_sitemap(inp, config=config))
