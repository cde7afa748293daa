"""
Settings component entry points.

Switches: maintenance_mode, read_only_mode, nuclear_lockdown,
disable_contact_forms, disable_registrations, disable_comments and
disable_problem_reports.
"""

from __future__ import annotations

from src.domain.entities import SiteSettings

from ._impl import SettingsContext
from .models import GetSettingsInput, SettingsOutput, UpdateSettingsInput


def run_get(inp: GetSettingsInput, *, context: SettingsContext) -> SettingsOutput:
    return SettingsOutput(settings=context.snapshot())


def run_update(inp: UpdateSettingsInput, *, context: SettingsContext) -> SettingsOutput:
    """
    Apply switch changes and push the result to subscribers.

    Nothing is saved when any change is rejected; the output then carries the
    unchanged snapshot together with the field errors.
    """
    settings, errors = context.update(inp.changes, inp.actor)
    return SettingsOutput(settings=settings, errors=errors)


def writes_blocked(settings: SiteSettings) -> bool:
    return settings.read_only_mode or settings.nuclear_lockdown
