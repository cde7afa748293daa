"""
Admin Settings API - emergency site switches.

GET returns the in-process snapshot (defaults if nothing is stored).
PUT validates, persists and pushes the new snapshot to subscribers; 400 with
per-field errors on failure.
"""

from typing import Any

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel

from src.api.deps import get_settings_context, require_admin
from src.api.schemas import SiteSettingsResponse, SiteSettingsUpdateRequest
from src.components.settings import (
    GetSettingsInput,
    SettingsContext,
    UpdateSettingsInput,
    SettingsFieldError,
    run_get,
    run_update,
)
from src.domain.entities import Identity, SiteSettings

router = APIRouter()


class ValidationErrorResponse(BaseModel):
    field: str
    code: str
    message: str


# --- Helper Functions ---


def settings_to_response(settings: SiteSettings) -> SiteSettingsResponse:
    return SiteSettingsResponse.model_validate(settings.model_dump())


def validation_errors_to_response(errors: list[SettingsFieldError]) -> list[dict[str, Any]]:
    return [
        ValidationErrorResponse(field=e.field, code=e.code, message=e.message).model_dump()
        for e in errors
    ]


# --- Endpoints ---


@router.get("", response_model=SiteSettingsResponse, summary="Get site settings")
def get_site_settings(
    identity: Identity = Depends(require_admin),
    context: SettingsContext = Depends(get_settings_context),
) -> SiteSettingsResponse:
    return settings_to_response(run_get(GetSettingsInput(), context=context).settings)


@router.put("", response_model=SiteSettingsResponse, summary="Update site settings")
def update_site_settings(
    request: SiteSettingsUpdateRequest,
    identity: Identity = Depends(require_admin),
    context: SettingsContext = Depends(get_settings_context),
) -> SiteSettingsResponse:
    """
    Flip emergency switches.

    Only fields present in the body are changed. Settings writes are allowed
    during read-only mode and lockdown so the switches can be turned off.
    """
    updates = {**request.model_dump(exclude_unset=True), **(request.model_extra or {})}
    result = run_update(UpdateSettingsInput(changes=updates, actor=identity.email), context=context)

    if not result.success:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail={"error": "Validation failed", "details": validation_errors_to_response(result.errors)},
        )

    return settings_to_response(result.settings)
