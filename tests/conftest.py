from pathlib import Path

import pytest

from src.adapters.clock import FixedClock
from src.adapters.contact_repo import CONTACT_UNIQUE_FIELDS
from src.adapters.content_repo import CONTENT_UNIQUE_FIELDS, DocumentContentRepo
from src.adapters.memory_store import InMemoryDocumentStore
from src.adapters.page_view_repo import PAGE_VIEW_UNIQUE_FIELDS
from src.components.content import ContentPatch, SaveDraftInput, run_save_draft
from src.domain.entities import Identity
from src.rules.loader import load_rules

RULES_PATH = Path(__file__).resolve().parents[1] / "rules.yaml"


@pytest.fixture
def rules():
    return load_rules(RULES_PATH)


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def store(clock):
    return InMemoryDocumentStore(
        clock=clock,
        unique_fields={**CONTENT_UNIQUE_FIELDS, **CONTACT_UNIQUE_FIELDS, **PAGE_VIEW_UNIQUE_FIELDS},
    )


@pytest.fixture
def repo(store):
    return DocumentContentRepo(store)


@pytest.fixture
def identity():
    return Identity(user_id="user-1", email="editor@example.org", email_verified=True)


@pytest.fixture
def make_draft(repo, identity, clock):
    """Create a draft and advance the clock so timestamps stay distinct."""

    def _make(title: str, **fields):
        result = run_save_draft(
            SaveDraftInput(patch=ContentPatch(title=title, **fields), identity=identity),
            repo=repo,
        )
        assert result.success, result.errors
        clock.advance(60)
        return result.content

    return _make
