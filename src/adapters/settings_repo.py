"""
Site settings persistence on a DocumentStorePort (collection `site_settings`,
single document `emergency`).
"""

from __future__ import annotations

from pydantic import ValidationError

from src.core.errors import MalformedDocumentError
from src.domain.entities import SiteSettings
from src.ports.store import DocumentStorePort

SETTINGS_COLLECTION = "site_settings"
SETTINGS_DOC_ID = "emergency"


class DocumentSettingsRepo:
    def __init__(self, store: DocumentStorePort):
        self.store = store

    def get(self) -> SiteSettings | None:
        data = self.store.get(SETTINGS_COLLECTION, SETTINGS_DOC_ID)
        if data is None:
            return None
        try:
            return SiteSettings.model_validate(data)
        except ValidationError as e:
            raise MalformedDocumentError(SETTINGS_COLLECTION, SETTINGS_DOC_ID, str(e)) from e

    def save(self, settings: SiteSettings) -> SiteSettings:
        self.store.put(SETTINGS_COLLECTION, SETTINGS_DOC_ID, settings.model_dump())
        return settings
