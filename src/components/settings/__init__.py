"""
Emergency site switches: in-process snapshot, validated updates and a push
channel for listeners.
"""

from ._impl import EDITABLE_FIELDS, SettingsContext, get_default_settings, validate_updates
from .component import run_get, run_update, writes_blocked
from .models import GetSettingsInput, SettingsFieldError, SettingsOutput, UpdateSettingsInput
from .ports import SettingsRepoPort

__all__ = [
    "run_get",
    "run_update",
    "writes_blocked",
    "EDITABLE_FIELDS",
    "SettingsContext",
    "get_default_settings",
    "validate_updates",
    "GetSettingsInput",
    "UpdateSettingsInput",
    "SettingsFieldError",
    "SettingsOutput",
    "SettingsRepoPort",
]
