"""
Contact and subscriber persistence on a DocumentStorePort.

Collections:
- contacts    (one document per accepted contact form submission)
- subscribers (one document per newsletter subscriber email)
"""

from __future__ import annotations

from typing import Any

from src.domain.entities import ContactSubmission, Subscriber
from src.ports.store import SERVER_TIMESTAMP, DocumentStorePort

CONTACTS_COLLECTION = "contacts"
SUBSCRIBERS_COLLECTION = "subscribers"

CONTACT_UNIQUE_FIELDS: dict[str, tuple[str, ...]] = {SUBSCRIBERS_COLLECTION: ("email",)}


class DocumentContactRepo:
    def __init__(self, store: DocumentStorePort):
        self.store = store

    def add_contact(self, submission: ContactSubmission) -> str:
        fields = submission.model_dump()
        fields["submitted_at"] = SERVER_TIMESTAMP
        return self.store.add(CONTACTS_COLLECTION, fields)

    def find_subscriber(self, email: str) -> dict[str, Any] | None:
        docs = self.store.query_equals(SUBSCRIBERS_COLLECTION, "email", email)
        if not docs:
            return None
        return {"id": docs[0].id, **docs[0].data}

    def add_subscriber(self, subscriber: Subscriber) -> str:
        fields = subscriber.model_dump()
        fields["subscribed_at"] = SERVER_TIMESTAMP
        return self.store.add(SUBSCRIBERS_COLLECTION, fields)

    def count_contacts(self) -> int:
        return len(self.store.list_all(CONTACTS_COLLECTION))

    def count_subscribers(self) -> int:
        return len(self.store.list_all(SUBSCRIBERS_COLLECTION))

    def count_newsletter_contacts(self) -> int:
        return len(self.store.query_equals(CONTACTS_COLLECTION, "newsletter", True))
