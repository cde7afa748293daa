"""
Tests for SettingsContext: snapshot reads, validated updates and the push channel.
"""

from unittest.mock import Mock

import pytest

from src.adapters.settings_repo import SETTINGS_COLLECTION, SETTINGS_DOC_ID, DocumentSettingsRepo
from src.components.settings import (
    GetSettingsInput,
    SettingsContext,
    UpdateSettingsInput,
    run_get,
    run_update,
    writes_blocked,
)
from src.core.errors import MalformedDocumentError, StoreUnavailable
from src.domain.entities import SiteSettings


@pytest.fixture
def settings_repo(store):
    return DocumentSettingsRepo(store)


@pytest.fixture
def context(settings_repo, clock):
    ctx = SettingsContext(settings_repo, clock)
    ctx.refresh()
    return ctx


def test_defaults_when_nothing_stored(context):
    snapshot = context.snapshot()
    assert snapshot == SiteSettings()
    assert not writes_blocked(snapshot)


def test_update_persists_and_snapshots(context, settings_repo, clock):
    settings, errors = context.update({"read_only_mode": True}, "admin@example.org")

    assert errors == []
    assert settings.read_only_mode is True
    assert settings.updated_by == "admin@example.org"
    assert settings.updated_at == clock.now_utc()
    assert context.snapshot() == settings
    assert settings_repo.get() == settings
    assert writes_blocked(settings)


def test_update_rejects_unknown_and_non_bool(context, settings_repo):
    settings, errors = context.update({"theme": "dark", "nuclear_lockdown": "yes"})

    assert {(e.field, e.code) for e in errors} == {
        ("theme", "unknown_field"),
        ("nuclear_lockdown", "invalid_type"),
    }
    assert settings == SiteSettings()
    assert settings_repo.get() is None


def test_refresh_loads_stored(settings_repo, clock):
    settings_repo.save(SiteSettings(maintenance_mode=True))
    ctx = SettingsContext(settings_repo, clock)
    assert ctx.snapshot().maintenance_mode is False
    assert ctx.refresh().maintenance_mode is True


def test_refresh_keeps_snapshot_on_store_failure(clock):
    repo = Mock()
    repo.get.return_value = SiteSettings(nuclear_lockdown=True)
    ctx = SettingsContext(repo, clock)
    ctx.refresh()

    repo.get.side_effect = StoreUnavailable("offline")
    assert ctx.refresh().nuclear_lockdown is True


def test_malformed_stored_settings(store, settings_repo):
    store.put(SETTINGS_COLLECTION, SETTINGS_DOC_ID, {"maintenance_mode": "not-a-bool"})
    with pytest.raises(MalformedDocumentError):
        settings_repo.get()


# --- Push Channel ---


def test_subscribe_receives_current_then_updates(context):
    q = context.subscribe()
    assert q.get_nowait() == SiteSettings()

    context.update({"disable_contact_forms": True}, "admin")
    pushed = q.get_nowait()
    assert pushed.disable_contact_forms is True
    assert q.empty()


def test_full_queue_keeps_newest(context):
    q = context.subscribe(maxsize=1)
    context.update({"maintenance_mode": True})
    context.update({"maintenance_mode": False, "read_only_mode": True})

    latest = q.get_nowait()
    assert latest.read_only_mode is True
    assert q.empty()


def test_unsubscribe(context):
    q = context.subscribe()
    assert context.subscriber_count == 1
    context.unsubscribe(q)
    context.unsubscribe(q)
    assert context.subscriber_count == 0

    q.get_nowait()
    context.update({"maintenance_mode": True})
    assert q.empty()


def test_component_entry_points(context):
    out = run_update(UpdateSettingsInput(changes={"disable_comments": True}, actor="a"), context=context)
    assert out.success
    assert run_get(GetSettingsInput(), context=context).settings.disable_comments is True

    out = run_update(UpdateSettingsInput(changes={"bogus": True}), context=context)
    assert not out.success
    assert out.errors[0].code == "unknown_field"
