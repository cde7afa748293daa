"""
Public form relay endpoints.

Endpoints:
- POST /api/forms/contact - Contact form (optionally subscribes the sender)
- POST /api/forms/newsletter - Newsletter sign-up
- POST /api/forms/page-view - Unique visitor counter
- OPTIONS on both - CORS preflight (204)

Response bodies keep the shape the site's front end reads:
`{success, message, contactId|subscriberId}` on success and
`{error, message?, details?, required?, retryAfter?}` otherwise.
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.api.deps import (
    get_clock,
    get_contact_config,
    get_contact_repo,
    get_email,
    get_page_view_repo,
    get_rate_limiter,
    get_settings_context,
)
from src.api.schemas import ContactFormRequest, NewsletterFormRequest, PageViewRequest
from src.components.contact import (
    ContactConfig,
    ContactFormInput,
    NewsletterFormInput,
    RelayOutput,
    run_contact,
    run_newsletter,
)
from src.components.page_views import TrackPageViewInput, run_track_page_view
from src.components.settings import SettingsContext
from src.core.errors import ContentCoreError

logger = logging.getLogger(__name__)

router = APIRouter()

FORMS_PREFIX = "/api/forms"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


# --- Helper Functions ---


def get_client_ip(request: Request) -> str:
    """Extract client IP from request."""
    # Check X-Forwarded-For header (proxy)
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def _json(status_code: int, body: dict[str, Any]) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body, headers=CORS_HEADERS)


def _relay_response(result: RelayOutput, failure_error: str) -> Response:
    """Translate a relay outcome into the HTTP response the front end expects."""
    if result.status == "accepted":
        body: dict[str, Any] = {"success": True, "message": result.message}
        if result.contact_id:
            body["contactId"] = result.contact_id
        if result.subscriber_id:
            body["subscriberId"] = result.subscriber_id
        return _json(200, body)

    if result.status == "ignored":
        # Honeypot: same body as a real success, minus ids
        return _json(200, {"success": True, "message": "Message received"})

    if result.status == "blocked":
        return _json(403, {"error": "VPN detected", "message": result.message})

    if result.status == "invalid":
        body = {"error": "Invalid input", "message": result.message, "details": result.errors}
        if result.required:
            body["error"] = "Missing required fields"
            body["required"] = result.required
        return _json(400, body)

    if result.status == "cooldown":
        return _json(
            429,
            {
                "error": "Please wait before submitting another message",
                "retryAfter": result.retry_after,
            },
        )

    if result.status == "duplicate":
        return _json(409, {"error": "Already subscribed", "message": result.message})

    if result.status == "disabled":
        return _json(503, {"error": "Forms are temporarily unavailable", "message": result.message})

    return _json(500, {"error": failure_error})


async def forms_validation_error_handler(request: Request, exc: RequestValidationError) -> Response:
    """Unparseable relay bodies get the relay's error shape; other routes keep the default 422."""
    if not request.url.path.startswith(FORMS_PREFIX):
        return await request_validation_exception_handler(request, exc)

    details = []
    for error in exc.errors():
        message = error.get("msg", "Invalid value")
        where = ".".join(str(part) for part in error.get("loc", ())[1:])
        details.append(f"{where}: {message}" if where else message)
    logger.info("Rejected unparseable form body on %s", request.url.path)
    return _json(
        400,
        {"error": "Invalid input", "message": "Please check your input and try again.", "details": details},
    )


# --- Contact ---


@router.options("/contact")
def contact_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post("/contact")
def submit_contact(
    req: ContactFormRequest,
    request: Request,
    repo: Any = Depends(get_contact_repo),
    email: Any = Depends(get_email),
    limiter: Any = Depends(get_rate_limiter),
    config: ContactConfig = Depends(get_contact_config),
    context: SettingsContext = Depends(get_settings_context),
) -> Response:
    inp = ContactFormInput(
        name=req.name,
        email=req.email,
        subject=req.subject,
        message=req.message,
        newsletter=req.newsletter,
        website=req.website,
        form_load_time=req.form_load_time,
        submission_time=req.submission_time,
        client_ip=get_client_ip(request),
        user_agent=request.headers.get("User-Agent", "Unknown"),
    )
    try:
        result = run_contact(
            inp,
            repo=repo,
            email=email,
            limiter=limiter,
            config=config,
            settings=context.snapshot(),
        )
    except ContentCoreError:
        logger.exception("Contact form processing failed")
        return _json(500, {"error": "Failed to process contact form"})

    return _relay_response(result, "Failed to process contact form")


# --- Newsletter ---


@router.options("/newsletter")
def newsletter_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post("/newsletter")
def submit_newsletter(
    req: NewsletterFormRequest,
    request: Request,
    repo: Any = Depends(get_contact_repo),
    email: Any = Depends(get_email),
    config: ContactConfig = Depends(get_contact_config),
    context: SettingsContext = Depends(get_settings_context),
) -> Response:
    inp = NewsletterFormInput(
        name=req.name,
        email=req.email,
        website=req.website,
        client_ip=get_client_ip(request),
        user_agent=request.headers.get("User-Agent", "Unknown"),
    )
    try:
        result = run_newsletter(
            inp,
            repo=repo,
            email=email,
            config=config,
            settings=context.snapshot(),
        )
    except ContentCoreError:
        logger.exception("Newsletter subscription failed")
        return _json(500, {"error": "Failed to process newsletter subscription"})

    return _relay_response(result, "Failed to process newsletter subscription")


# --- Page Views ---


@router.options("/page-view")
def page_view_preflight() -> Response:
    return Response(status_code=204, headers=CORS_HEADERS)


@router.post("/page-view")
def track_page_view(
    req: PageViewRequest,
    request: Request,
    repo: Any = Depends(get_page_view_repo),
    clock: Any = Depends(get_clock),
) -> Response:
    inp = TrackPageViewInput(
        path=req.path,
        client_ip=get_client_ip(request),
        user_agent=request.headers.get("User-Agent"),
    )
    try:
        result = run_track_page_view(inp, repo=repo, clock=clock)
    except ContentCoreError:
        logger.exception("Page view tracking failed")
        return _json(500, {"error": "Failed to track page view"})

    if result.status == "invalid":
        return _json(400, {"error": "Invalid path"})
    if result.status == "bot":
        return Response(status_code=204, headers=CORS_HEADERS)
    return _json(200, {"success": True})
