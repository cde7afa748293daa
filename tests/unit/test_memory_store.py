import copy
from datetime import timedelta

import pytest

from src.adapters.clock import FixedClock
from src.adapters.memory_store import InMemoryDocumentStore
from src.core.errors import OrderingUnsupported, UniquenessConflict
from src.ports.store import SERVER_TIMESTAMP


@pytest.fixture
def mem(clock):
    return InMemoryDocumentStore(clock=clock, unique_fields={"content": ("slug",)})


def test_add_and_get(mem):
    doc_id = mem.add("content", {"slug": "a", "title": "A"})
    assert mem.get("content", doc_id) == {"slug": "a", "title": "A"}
    assert mem.get("content", "missing") is None


def test_server_timestamp_resolved(mem, clock):
    doc_id = mem.add("content", {"slug": "a", "created_at": SERVER_TIMESTAMP})
    assert mem.get("content", doc_id)["created_at"] == clock.now_utc()


def test_server_timestamp_survives_copies(mem, clock):
    assert copy.deepcopy(SERVER_TIMESTAMP) is SERVER_TIMESTAMP
    assert copy.copy(SERVER_TIMESTAMP) is SERVER_TIMESTAMP

    fields = copy.deepcopy({"slug": "a", "created_at": SERVER_TIMESTAMP, "updated_at": SERVER_TIMESTAMP})
    doc_id = mem.add("content", fields)
    clock.advance(30)
    mem.put("content", doc_id, {"updated_at": SERVER_TIMESTAMP}, merge=True)

    stored = mem.get("content", doc_id)
    assert stored["updated_at"] == clock.now_utc()
    assert stored["created_at"] == clock.now_utc() - timedelta(seconds=30)


def test_get_returns_copy(mem):
    doc_id = mem.add("content", {"slug": "a", "tags": ["x"]})
    mem.get("content", doc_id)["tags"].append("y")
    assert mem.get("content", doc_id)["tags"] == ["x"]


def test_put_replace_and_merge(mem):
    mem.put("content", "1", {"slug": "a", "title": "A"})
    mem.put("content", "1", {"title": "B"}, merge=True)
    assert mem.get("content", "1") == {"slug": "a", "title": "B"}

    mem.put("content", "1", {"title": "C"})
    assert mem.get("content", "1") == {"title": "C"}


def test_unique_conflict_persists_nothing(mem):
    mem.put("content", "1", {"slug": "same"})
    with pytest.raises(UniquenessConflict) as exc:
        mem.put("content", "2", {"slug": "same"})
    assert exc.value.field == "slug"
    assert mem.get("content", "2") is None


def test_rewriting_own_unique_value_is_allowed(mem):
    mem.put("content", "1", {"slug": "same", "title": "A"})
    mem.put("content", "1", {"slug": "same", "title": "B"})
    assert mem.get("content", "1")["title"] == "B"


def test_unique_fields_are_per_collection(mem):
    mem.put("other", "1", {"slug": "same"})
    mem.put("other", "2", {"slug": "same"})
    assert len(mem.list_all("other")) == 2


def test_query_equals_with_exclude(mem):
    mem.put("content", "1", {"slug": "a", "status": "draft"})
    mem.put("content", "2", {"slug": "b", "status": "draft"})
    ids = {d.id for d in mem.query_equals("content", "status", "draft", exclude_id="1")}
    assert ids == {"2"}


def test_query_equals_ordered(clock):
    mem = InMemoryDocumentStore(clock=clock)
    base = clock.now_utc()
    mem.put("c", "old", {"status": "published", "published_at": base})
    mem.put("c", "new", {"status": "published", "published_at": base + timedelta(days=1)})
    mem.put("c", "none", {"status": "published", "published_at": None})

    ordered = mem.query_equals_ordered("c", "status", "published", "published_at", "desc")
    assert [d.id for d in ordered] == ["new", "old", "none"]

    ordered = mem.query_equals_ordered("c", "status", "published", "published_at", "asc")
    assert [d.id for d in ordered] == ["old", "new", "none"]


def test_ordering_unsupported():
    mem = InMemoryDocumentStore(clock=FixedClock(), ordering_supported=False)
    with pytest.raises(OrderingUnsupported):
        mem.query_equals_ordered("c", "status", "published", "published_at")


def test_delete(mem):
    mem.put("content", "1", {"slug": "a"})
    mem.delete("content", "1")
    mem.delete("content", "1")
    assert mem.get("content", "1") is None
    # Freed unique value can be reused
    mem.put("content", "2", {"slug": "a"})
