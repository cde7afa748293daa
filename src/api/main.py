"""
Ministry site API application.

Mounts the admin content API, the public article API, the contact and
newsletter relay with the page view counter, the emergency settings API,
admin stats, the video importer and the crawler files.
"""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from src.api.deps import get_settings
from src.api.routes import admin_settings, admin_stats, admin_videos, content, forms, public, seo
from src.app_shell.config import validate_ops_rules
from src.core.errors import ContentCoreError
from src.rules.loader import load_rules

logger = logging.getLogger(__name__)

# (router, prefix, tag)
ROUTERS = [
    (content.router, "/api/content", "Content"),
    (public.router, "/api/public", "Public"),
    (forms.router, forms.FORMS_PREFIX, "Forms"),
    (admin_settings.router, "/api/admin/settings", "Admin Settings"),
    (admin_stats.router, "/api/admin/stats", "Admin Stats"),
    (admin_videos.router, "/api/admin/videos", "Admin Videos"),
    (seo.router, "", "SEO"),
]


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    settings = get_settings()

    # Refuse to start on a bad rules file or unusable data dir
    try:
        rules = load_rules(settings.rules_path)
        validate_ops_rules(rules, settings.data_dir)
    except (OSError, ValueError, RuntimeError):
        logger.critical("Startup checks failed (rules: %s)", settings.rules_path, exc_info=True)
        raise

    logger.info(
        "API ready: rules %s v%s, store backend %s",
        rules.project.slug,
        rules.project.rules_version,
        settings.store_backend or rules.ops.store_backend,
    )
    yield
    logger.info("API shutting down")


app = FastAPI(
    title="Ministry Site Content API",
    version="0.1.0",
    lifespan=lifespan,
)

for router, prefix, tag in ROUTERS:
    app.include_router(router, prefix=prefix, tags=[tag])

# Forms are posted from any origin; admin calls use bearer tokens, not cookies
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.add_exception_handler(RequestValidationError, forms.forms_validation_error_handler)


@app.exception_handler(ContentCoreError)
async def storage_failure_handler(request: Request, exc: ContentCoreError) -> JSONResponse:
    logger.error("%s on %s %s: %s", type(exc).__name__, request.method, request.url.path, exc)
    return JSONResponse(
        status_code=503,
        content={"detail": "Service temporarily unavailable, please try again"},
    )


@app.get("/health")
def health_check() -> dict[str, str]:
    return {"status": "ok", "service": "api"}
