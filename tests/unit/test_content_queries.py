"""
Tests for the content query facade: listings, slug lookup with redirects, tags.
"""

import pytest

from src.adapters.content_repo import CONTENT_COLLECTION, CONTENT_UNIQUE_FIELDS, DocumentContentRepo
from src.adapters.memory_store import InMemoryDocumentStore
from src.components.content import (
    ContentPatch,
    GetBySlugInput,
    ListContentInput,
    ListTagsInput,
    PublishInput,
    UpdateDraftInput,
    run_get_by_slug,
    run_list,
    run_list_tags,
    run_publish,
    run_update_draft,
)
from src.core.errors import MalformedDocumentError


@pytest.fixture
def publish(repo, identity, clock):
    def _publish(title: str, **fields):
        result = run_publish(
            PublishInput(patch=ContentPatch(title=title, **fields), identity=identity),
            repo=repo,
        )
        assert result.success, result.errors
        clock.advance(60)
        return result.content

    return _publish


# --- Listing ---


class TestListContent:
    def test_published_newest_first(self, repo, publish, make_draft):
        first = publish("First")
        make_draft("Hidden Draft")
        second = publish("Second")

        result = run_list(ListContentInput(status="published"), repo=repo)
        assert [i.id for i in result.items] == [second.id, first.id]
        assert result.total == 2

    def test_drafts_by_updated_at(self, repo, make_draft, clock):
        older = make_draft("Older")
        newer = make_draft("Newer")
        run_update_draft(UpdateDraftInput(older.id, ContentPatch(excerpt="touched")), repo=repo)

        result = run_list(ListContentInput(status="draft"), repo=repo)
        assert [i.id for i in result.items] == [older.id, newer.id]

    def test_all_by_created_at(self, repo, publish, make_draft):
        a = make_draft("A")
        b = publish("B")
        c = make_draft("C")
        result = run_list(ListContentInput(), repo=repo)
        assert [i.id for i in result.items] == [c.id, b.id, a.id]

    def test_pagination(self, repo, publish):
        items = [publish(f"Post {n}") for n in range(5)]
        result = run_list(ListContentInput(status="published", limit=2, offset=1), repo=repo)
        assert [i.id for i in result.items] == [items[3].id, items[2].id]
        assert result.total == 5

    def test_negative_paging_never_reads_from_the_tail(self, repo, publish):
        items = [publish(f"Post {n}") for n in range(3)]
        result = run_list(ListContentInput(status="published", limit=-1, offset=-2), repo=repo)
        assert result.items == []

        result = run_list(ListContentInput(status="published", offset=-2), repo=repo)
        assert [i.id for i in result.items] == [i.id for i in reversed(items)]

    def test_client_side_sort_when_ordering_unsupported(self, clock, identity):
        store = InMemoryDocumentStore(
            clock=clock,
            unique_fields=CONTENT_UNIQUE_FIELDS,
            ordering_supported=False,
        )
        repo = DocumentContentRepo(store)
        ids = []
        for title in ("One", "Two", "Three"):
            ids.append(run_publish(PublishInput(ContentPatch(title=title), identity), repo=repo).content.id)
            clock.advance(60)

        result = run_list(ListContentInput(status="published"), repo=repo)
        assert [i.id for i in result.items] == list(reversed(ids))


# --- Slug Lookup ---


class TestGetBySlug:
    def test_current_slug(self, repo, publish):
        item = publish("Hello World")
        result = run_get_by_slug(GetBySlugInput(slug="hello-world"), repo=repo)
        assert result.success
        assert result.content.id == item.id
        assert result.redirect_to is None

    def test_draft_is_not_public(self, repo, make_draft):
        make_draft("Secret")
        result = run_get_by_slug(GetBySlugInput(slug="secret"), repo=repo)
        assert not result.success
        assert result.errors[0].code == "not_found"

    def test_old_slug_redirects(self, repo, publish):
        item = publish("Before")
        run_update_draft(UpdateDraftInput(item.id, ContentPatch(slug="after")), repo=repo)

        result = run_get_by_slug(GetBySlugInput(slug="before"), repo=repo)
        assert result.success
        assert result.content.id == item.id
        assert result.redirect_to == "after"

    def test_blank_slug(self, repo):
        assert not run_get_by_slug(GetBySlugInput(slug="  "), repo=repo).success

    def test_unknown_slug(self, repo, publish):
        publish("Something")
        assert not run_get_by_slug(GetBySlugInput(slug="nothing"), repo=repo).success


# --- Tags ---


class TestListTags:
    def test_counts_published_only(self, repo, publish, make_draft):
        publish("One", tags=["Faith", "Hope"])
        publish("Two", tags=["faith"])
        publish("Three", tags=["#Love", "hope", "faith"])
        make_draft("Draft", tags=["Faith", "Draft-only"])

        result = run_list_tags(ListTagsInput(), repo=repo)
        assert [(t.tag, t.count) for t in result.tags] == [("Faith", 3), ("Hope", 2), ("Love", 1)]

    def test_limit(self, repo, publish):
        publish("One", tags=["a", "b", "c"])
        result = run_list_tags(ListTagsInput(limit=2), repo=repo)
        assert len(result.tags) == 2


# --- Boundary Validation ---


def test_malformed_document_raises(store, repo):
    store.put(CONTENT_COLLECTION, "bad", {"title": "No slug or author"})
    with pytest.raises(MalformedDocumentError) as exc:
        repo.get_by_id("bad")
    assert exc.value.doc_id == "bad"
