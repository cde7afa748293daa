"""
Admin Stats API - dashboard counters.

GET /contacts  - contact submissions, subscribers and newsletter opt-ins
GET /visitors  - unique visitor-days counted by the page view tracker
"""

from typing import Any

from fastapi import APIRouter, Depends

from src.api.deps import get_clock, get_contact_repo, get_page_view_repo, require_admin
from src.api.schemas import ContactStatsResponse, VisitorStatsResponse
from src.components.contact import run_contact_stats
from src.components.page_views import run_visitor_stats
from src.domain.entities import Identity

router = APIRouter()


@router.get("/contacts", response_model=ContactStatsResponse, summary="Contact form statistics")
def contact_stats(
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_contact_repo),
    clock: Any = Depends(get_clock),
) -> ContactStatsResponse:
    stats = run_contact_stats(repo=repo, clock=clock)
    return ContactStatsResponse(
        total_contacts=stats.total_contacts,
        total_subscribers=stats.total_subscribers,
        newsletter_subscribers=stats.newsletter_subscribers,
        timestamp=stats.generated_at,
    )


@router.get("/visitors", response_model=VisitorStatsResponse, summary="Unique visitor count")
def visitor_stats(
    identity: Identity = Depends(require_admin),
    repo: Any = Depends(get_page_view_repo),
) -> VisitorStatsResponse:
    return VisitorStatsResponse(total_unique_visitors=run_visitor_stats(repo=repo).total_unique_visitors)
