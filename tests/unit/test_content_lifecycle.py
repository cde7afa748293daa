"""
Tests for the content lifecycle state machine.
"""

from unittest.mock import Mock

import pytest

from src.components.content import (
    ContentPatch,
    DeleteContentInput,
    GetContentInput,
    LifecycleConfig,
    PublishInput,
    SaveDraftInput,
    UnpublishInput,
    UpdateDraftInput,
    config_from_rules,
    normalize_tags,
    run,
    run_delete,
    run_get,
    run_publish,
    run_save_draft,
    run_unpublish,
    run_update_draft,
)
from src.core.errors import PersistenceError, StoreUnavailable, UniquenessConflict
from src.domain.entities import Identity


def _save(repo, identity, title, **fields):
    return run_save_draft(
        SaveDraftInput(patch=ContentPatch(title=title, **fields), identity=identity),
        repo=repo,
    )


# --- Save Draft ---


class TestSaveDraft:
    def test_creates_draft_with_slug(self, repo, identity, clock):
        result = _save(repo, identity, "Hello World", excerpt="Short", tags=["faith"])

        assert result.success
        item = result.content
        assert item.status == "draft"
        assert item.slug == "hello-world"
        assert item.old_slugs == []
        assert item.author_id == identity.user_id
        assert item.author_email == identity.email
        assert item.published_at is None
        assert item.created_at == clock.now_utc()
        assert item.updated_at == clock.now_utc()

    def test_title_required(self, repo, identity):
        result = _save(repo, identity, "   ")
        assert not result.success
        assert [e.code for e in result.errors] == ["title_required"]
        assert repo.list_by_status(None) == []

    def test_title_too_long(self, repo, identity):
        result = run_save_draft(
            SaveDraftInput(patch=ContentPatch(title="x" * 201), identity=identity),
            repo=repo,
            config=LifecycleConfig(title_max_length=200),
        )
        assert [e.code for e in result.errors] == ["title_too_long"]

    def test_excerpt_too_long(self, repo, identity):
        result = _save(repo, identity, "Fine", excerpt="x" * 501)
        assert [e.code for e in result.errors] == ["excerpt_too_long"]

    def test_author_fields_in_patch_are_ignored(self, repo, identity):
        result = _save(repo, identity, "Mine", author_id="someone-else", author_email="x@y.z")
        assert result.content.author_id == identity.user_id

    def test_duplicate_titles_get_suffixes(self, make_draft):
        first = make_draft("Grace")
        second = make_draft("Grace")
        third = make_draft("Grace")
        assert [first.slug, second.slug, third.slug] == ["grace", "grace-2", "grace-3"]

    def test_reserved_title(self, make_draft):
        assert make_draft("Admin").slug == "admin-1"

    def test_manual_slug_normalized(self, make_draft):
        assert make_draft("Anything", slug="My Custom Slug").slug == "my-custom-slug"

    def test_manual_slug_taken_is_rejected(self, repo, identity, make_draft):
        make_draft("Existing", slug="taken")
        result = _save(repo, identity, "Another", slug="taken")
        assert not result.success
        assert [e.code for e in result.errors] == ["slug_taken"]

    def test_tags_normalized(self, make_draft):
        item = make_draft("Tagged", tags=[" Faith ", "faith", "#Hope", "", "hope"])
        assert item.tags == ["Faith", "#Hope"]


# --- Publish ---


class TestPublish:
    def test_publish_new(self, repo, identity, clock):
        result = run_publish(
            PublishInput(patch=ContentPatch(title="Live Now"), identity=identity),
            repo=repo,
        )
        assert result.success
        assert result.content.status == "published"
        assert result.content.published_at == clock.now_utc()

    def test_publish_existing_draft(self, repo, identity, make_draft, clock):
        draft = make_draft("Draft One")
        result = run_publish(
            PublishInput(patch=ContentPatch(), identity=identity, content_id=draft.id),
            repo=repo,
        )
        assert result.success
        assert result.content.status == "published"
        assert result.content.published_at == clock.now_utc()
        assert result.content.created_at == draft.created_at

    def test_republish_keeps_published_at(self, repo, identity, make_draft, clock):
        draft = make_draft("Keep Date")
        first = run_publish(PublishInput(ContentPatch(), identity, draft.id), repo=repo).content
        clock.advance(3600)

        again = run_publish(
            PublishInput(ContentPatch(excerpt="edited"), identity, draft.id),
            repo=repo,
        ).content
        assert again.published_at == first.published_at
        assert again.updated_at == clock.now_utc()
        assert again.excerpt == "edited"

    def test_publish_keeps_original_author(self, repo, make_draft):
        draft = make_draft("Authored")
        other = Identity(user_id="user-2", email="other@example.org", email_verified=True)
        result = run_publish(PublishInput(ContentPatch(), other, draft.id), repo=repo)
        assert result.content.author_id == draft.author_id

    def test_publish_missing(self, repo, identity):
        result = run_publish(PublishInput(ContentPatch(), identity, "nope"), repo=repo)
        assert not result.success
        assert result.errors[0].code == "not_found"

    def test_publish_blocked_by_transitions(self, repo, identity, make_draft):
        draft = make_draft("Locked")
        config = LifecycleConfig(transitions={"draft": [], "published": ["draft"]})
        result = run_publish(PublishInput(ContentPatch(), identity, draft.id), repo=repo, config=config)
        assert result.errors[0].code == "invalid_transition"


# --- Slug Stability ---


class TestSlugStability:
    def test_draft_title_change_regenerates_slug(self, repo, make_draft):
        draft = make_draft("First Title")
        result = run_update_draft(
            UpdateDraftInput(content_id=draft.id, patch=ContentPatch(title="Second Title")),
            repo=repo,
        )
        assert result.content.slug == "second-title"
        assert result.content.old_slugs == ["first-title"]

    def test_draft_keeps_own_slug_on_same_title(self, repo, make_draft):
        draft = make_draft("Same")
        result = run_update_draft(
            UpdateDraftInput(content_id=draft.id, patch=ContentPatch(title="Same", excerpt="x")),
            repo=repo,
        )
        assert result.content.slug == "same"
        assert result.content.old_slugs == []

    def test_published_title_change_keeps_slug(self, repo, identity, make_draft):
        draft = make_draft("Original")
        run_publish(PublishInput(ContentPatch(), identity, draft.id), repo=repo)

        result = run_publish(
            PublishInput(ContentPatch(title="Renamed Completely"), identity, draft.id),
            repo=repo,
        )
        assert result.content.title == "Renamed Completely"
        assert result.content.slug == "original"
        assert result.content.old_slugs == []

    def test_published_manual_slug_change_records_old_slug(self, repo, identity, make_draft):
        draft = make_draft("Original")
        run_publish(PublishInput(ContentPatch(), identity, draft.id), repo=repo)

        result = run_update_draft(
            UpdateDraftInput(content_id=draft.id, patch=ContentPatch(slug="better-name")),
            repo=repo,
        )
        assert result.content.status == "published"
        assert result.content.slug == "better-name"
        assert result.content.old_slugs == ["original"]

    def test_old_slugs_not_duplicated(self, repo, make_draft):
        draft = make_draft("Alpha")
        for title in ("Beta", "Alpha", "Beta"):
            run_update_draft(UpdateDraftInput(draft.id, ContentPatch(title=title)), repo=repo)
        item = run_get(GetContentInput(draft.id), repo=repo).content
        assert item.slug == "beta"
        assert item.old_slugs == ["alpha", "beta"]

    def test_manual_slug_taken_on_update(self, repo, make_draft):
        make_draft("Other", slug="claimed")
        mine = make_draft("Mine")
        result = run_update_draft(UpdateDraftInput(mine.id, ContentPatch(slug="claimed")), repo=repo)
        assert [e.code for e in result.errors] == ["slug_taken"]
        assert run_get(GetContentInput(mine.id), repo=repo).content.slug == "mine"


# --- Unpublish / Delete ---


class TestUnpublishAndDelete:
    def test_unpublish_keeps_published_at_and_slug(self, repo, identity, make_draft):
        draft = make_draft("Going Back")
        published = run_publish(PublishInput(ContentPatch(), identity, draft.id), repo=repo).content

        result = run_unpublish(UnpublishInput(content_id=draft.id), repo=repo)
        assert result.content.status == "draft"
        assert result.content.published_at == published.published_at
        assert result.content.slug == published.slug

    def test_unpublish_draft_is_invalid(self, repo, make_draft):
        draft = make_draft("Never Live")
        result = run_unpublish(UnpublishInput(content_id=draft.id), repo=repo)
        assert result.errors[0].code == "invalid_transition"

    def test_delete(self, repo, make_draft):
        draft = make_draft("Temporary")
        assert run_delete(DeleteContentInput(draft.id), repo=repo).success
        assert run_get(GetContentInput(draft.id), repo=repo).content is None

    def test_delete_missing(self, repo):
        result = run_delete(DeleteContentInput("missing"), repo=repo)
        assert result.errors[0].code == "not_found"

    def test_dispatcher(self, repo, identity):
        result = run(SaveDraftInput(ContentPatch(title="Via Run"), identity), repo=repo)
        assert result.content.slug == "via-run"
        with pytest.raises(ValueError):
            run(object(), repo=repo)  # type: ignore[arg-type]


# --- Concurrency ---


class TestConflictRetry:
    def _mock_repo(self, repo, create_side_effect):
        mock = Mock(wraps=repo)
        mock.create.side_effect = create_side_effect
        return mock

    def test_retry_after_conflict(self, repo, identity):
        calls = []

        def create(fields):
            calls.append(fields["slug"])
            if len(calls) == 1:
                # Another writer claims the slug between resolve and write
                repo.create({**fields, "title": "Racer"})
                raise UniquenessConflict("content", "slug", fields["slug"])
            return repo.create(fields)

        result = _save(self._mock_repo(repo, create), identity, "Contested")
        assert result.success
        assert calls == ["contested", "contested-2"]
        assert result.content.slug == "contested-2"

    def test_second_conflict_raises(self, repo, identity):
        def create(fields):
            raise UniquenessConflict("content", "slug", fields["slug"])

        with pytest.raises(PersistenceError):
            _save(self._mock_repo(repo, create), identity, "Doomed")

    def test_store_failure_becomes_persistence_error(self, repo, identity):
        def create(fields):
            raise StoreUnavailable("offline")

        with pytest.raises(PersistenceError):
            _save(self._mock_repo(repo, create), identity, "Offline")


# --- Configuration ---


class TestHelpers:
    def test_config_from_rules(self, rules):
        config = config_from_rules(rules.content)
        assert config.title_max_length == rules.content.title.max
        assert config.transitions["draft"] == ["published"]

    def test_normalize_tags_none(self):
        assert normalize_tags(None) == []
