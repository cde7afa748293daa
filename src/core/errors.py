"""
Error taxonomy for the content core.

Validation failures and "not found" are normal outcomes and are reported in
component output objects. Only store and persistence problems are raised.

Hierarchy:
- ContentCoreError
  - StoreError
    - StoreUnavailable      (read/query could not reach the store)
    - UniquenessConflict    (unique field already held by another document)
    - OrderingUnsupported   (ordered query variant not available)
  - PersistenceError        (a write did not land)
  - MalformedDocumentError  (stored document failed schema validation)
  - SlugExhaustedError      (no free suffix within the probe limit)
  - FeedUnavailable         (the video feed could not be read)
"""

from __future__ import annotations


class ContentCoreError(Exception):
    """Base class for all content core errors."""


# --- Store Errors ---


class StoreError(ContentCoreError):
    """Base class for errors raised by document store adapters."""


class StoreUnavailable(StoreError):
    """The document store could not be reached or rejected the operation."""


class UniquenessConflict(StoreError):
    """A write collided with a unique field held by another document."""

    def __init__(self, collection: str, field: str, value: object) -> None:
        self.collection = collection
        self.field = field
        self.value = value
        super().__init__(f"{collection}.{field} value {value!r} is already taken")


class OrderingUnsupported(StoreError):
    """The store cannot serve the ordered variant of an equality query."""


# --- Core Errors ---


class PersistenceError(ContentCoreError):
    """A content write failed; nothing was persisted."""


class MalformedDocumentError(ContentCoreError):
    """A stored document does not match the expected schema."""

    def __init__(self, collection: str, doc_id: str, detail: str) -> None:
        self.collection = collection
        self.doc_id = doc_id
        self.detail = detail
        super().__init__(f"Malformed document {collection}/{doc_id}: {detail}")


class SlugExhaustedError(ContentCoreError):
    """Every suffix in the probe limit is taken."""

    def __init__(self, base: str, attempts: int) -> None:
        self.base = base
        self.attempts = attempts
        super().__init__(f"No free slug for '{base}' after {attempts} attempts")


class FeedUnavailable(ContentCoreError):
    """The video feed could not be read or returned an unusable response."""
