import pytest
from fastapi.testclient import TestClient

from src.adapters.dev_email import DevEmailAdapter
from src.adapters.identity import create_identity_token
from src.adapters.settings_repo import DocumentSettingsRepo
from src.api.deps import (
    Settings,
    get_clock,
    get_email,
    get_rate_limiter,
    get_rules,
    get_settings,
    get_settings_context,
    get_store,
)
from src.api.main import app
from src.app_shell.rate_limit import RateLimiter
from src.components.settings import SettingsContext
from src.domain.entities import Identity

SECRET = "api-test-secret"
ADMIN_EMAIL = "admin@example-ministry.org"


@pytest.fixture
def api_settings(tmp_path):
    s = Settings()
    s.data_dir = tmp_path
    s.db_path = str(tmp_path / "site.db")
    s.identity_secret = SECRET
    s.admin_emails = [ADMIN_EMAIL]
    s.notify_email = "office@example-ministry.org"
    return s


@pytest.fixture
def email_outbox():
    return DevEmailAdapter()


@pytest.fixture
def limiter(clock):
    return RateLimiter(clock)


@pytest.fixture
def settings_context(store, clock):
    ctx = SettingsContext(DocumentSettingsRepo(store), clock)
    ctx.refresh()
    return ctx


@pytest.fixture
def client(api_settings, rules, store, clock, email_outbox, limiter, settings_context):
    app.dependency_overrides[get_settings] = lambda: api_settings
    app.dependency_overrides[get_rules] = lambda: rules
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_email] = lambda: email_outbox
    app.dependency_overrides[get_rate_limiter] = lambda: limiter
    app.dependency_overrides[get_settings_context] = lambda: settings_context
    app.dependency_overrides[get_clock] = lambda: clock
    yield TestClient(app)
    app.dependency_overrides.clear()


def _bearer(identity: Identity) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_identity_token(identity, secret=SECRET)}"}


@pytest.fixture
def admin_headers():
    return _bearer(Identity(user_id="admin-1", email=ADMIN_EMAIL, email_verified=True))


@pytest.fixture
def outsider_headers():
    return _bearer(Identity(user_id="user-9", email="visitor@example.org", email_verified=True))


@pytest.fixture
def unverified_admin_headers():
    return _bearer(Identity(user_id="admin-1", email=ADMIN_EMAIL, email_verified=False))
