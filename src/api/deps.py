import logging
import os
import threading
from collections.abc import Iterator
from functools import lru_cache
from pathlib import Path

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from src.adapters.clock import SystemClock
from src.adapters.contact_repo import CONTACT_UNIQUE_FIELDS, DocumentContactRepo
from src.adapters.content_repo import CONTENT_UNIQUE_FIELDS, DocumentContentRepo
from src.adapters.dev_email import DevEmailAdapter
from src.adapters.identity import decode_identity, is_admin
from src.adapters.memory_store import InMemoryDocumentStore
from src.adapters.page_view_repo import PAGE_VIEW_UNIQUE_FIELDS, DocumentPageViewRepo
from src.adapters.settings_repo import DocumentSettingsRepo
from src.adapters.sqlite.document_store import SQLiteDocumentStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.youtube_feed import YouTubeFeedAdapter
from src.app_shell.rate_limit import RateLimiter
from src.components.contact import ContactConfig
from src.components.contact import config_from_rules as contact_config_from_rules
from src.components.content import LifecycleConfig
from src.components.content import config_from_rules as lifecycle_config_from_rules
from src.components.seo import SeoConfig
from src.components.seo import config_from_rules as seo_config_from_rules
from src.components.settings import SettingsContext, writes_blocked
from src.components.slugs import SlugResolver, build_resolver
from src.components.video_import import ImportConfig
from src.components.video_import import config_from_rules as import_config_from_rules
from src.domain.entities import Identity
from src.ports.clock import ClockPort
from src.ports.store import DocumentStorePort
from src.rules.loader import DEFAULT_RULES_PATH, load_rules
from src.rules.models import Rules

logger = logging.getLogger(__name__)


# --- Settings ---
class Settings:
    def __init__(self) -> None:
        self.base_dir = Path(os.getcwd())
        self.data_dir = Path(os.environ.get("SITE_DATA_DIR", "./data"))
        self.db_path = str(self.data_dir / "site.db")
        self.rules_path = Path(os.environ.get("SITE_RULES_PATH", str(DEFAULT_RULES_PATH)))
        self.store_backend = os.environ.get("SITE_STORE_BACKEND", "")
        self.identity_secret = os.environ.get("SITE_IDENTITY_SECRET") or None
        self.notify_email = os.environ.get("SITE_NOTIFY_EMAIL", "")
        self.site_name = os.environ.get("SITE_NAME", "")
        self.admin_emails = [
            e.strip() for e in os.environ.get("IDENTITY_ADMIN_EMAILS", "").split(",") if e.strip()
        ]
        self.youtube_api_key = os.environ.get("YOUTUBE_API_KEY", "")


@lru_cache
def get_settings() -> Settings:
    return Settings()


# --- Rules ---
@lru_cache
def get_rules(settings: Settings = Depends(get_settings)) -> Rules:
    return load_rules(settings.rules_path)


# --- Store ---
# Guards first-use creation of the process-wide singletons below
_singleton_lock = threading.Lock()

_store_instance: DocumentStorePort | None = None


def build_store(backend: str, db_path: str) -> DocumentStorePort:
    """Create a document store for the configured backend."""
    unique_fields = {**CONTENT_UNIQUE_FIELDS, **CONTACT_UNIQUE_FIELDS, **PAGE_VIEW_UNIQUE_FIELDS}
    clock = SystemClock()

    if backend == "memory":
        return InMemoryDocumentStore(clock=clock, unique_fields=unique_fields)
    if backend == "sqlite":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
        applied = SQLiteMigrator(db_path).run_migrations()
        if applied:
            logger.info("Applied migrations: %s", ", ".join(applied))
        return SQLiteDocumentStore(db_path, clock=clock, unique_fields=unique_fields)
    raise ValueError(f"Unknown store backend: {backend}")


def get_store(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> DocumentStorePort:
    """Get store singleton (shared by every request)."""
    global _store_instance
    if _store_instance is None:
        with _singleton_lock:
            if _store_instance is None:
                backend = settings.store_backend or rules.ops.store_backend
                _store_instance = build_store(backend, settings.db_path)
    return _store_instance


# --- Repos ---
def get_content_repo(store: DocumentStorePort = Depends(get_store)) -> DocumentContentRepo:
    return DocumentContentRepo(store)


def get_contact_repo(store: DocumentStorePort = Depends(get_store)) -> DocumentContactRepo:
    return DocumentContactRepo(store)


def get_page_view_repo(store: DocumentStorePort = Depends(get_store)) -> DocumentPageViewRepo:
    return DocumentPageViewRepo(store)


# --- Component configuration ---
def get_resolver(
    repo: DocumentContentRepo = Depends(get_content_repo),
    rules: Rules = Depends(get_rules),
) -> SlugResolver:
    return build_resolver(repo, rules.content)


def get_lifecycle_config(rules: Rules = Depends(get_rules)) -> LifecycleConfig:
    return lifecycle_config_from_rules(rules.content)


def get_contact_config(
    rules: Rules = Depends(get_rules),
    settings: Settings = Depends(get_settings),
) -> ContactConfig:
    return contact_config_from_rules(rules.contact, settings.notify_email, settings.site_name)


def get_seo_config(rules: Rules = Depends(get_rules)) -> SeoConfig:
    return seo_config_from_rules(rules.seo)


def get_import_config(rules: Rules = Depends(get_rules)) -> ImportConfig:
    return import_config_from_rules(rules.video_import)


# --- Adapters ---
def get_clock() -> ClockPort:
    return SystemClock()


def get_video_feed(
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> Iterator[YouTubeFeedAdapter]:
    """Feed client for the configured channel, closed after the request; 503 when no API key is set."""
    if not settings.youtube_api_key or not rules.video_import.channel_id:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Video feed is not configured",
        )
    feed = YouTubeFeedAdapter(
        settings.youtube_api_key,
        rules.video_import.channel_id,
        uploads_playlist_id=rules.video_import.uploads_playlist_id or None,
    )
    try:
        yield feed
    finally:
        feed.close()


_email_instance: DevEmailAdapter | None = None


def get_email() -> DevEmailAdapter:
    """Get email adapter singleton."""
    global _email_instance
    if _email_instance is None:
        with _singleton_lock:
            if _email_instance is None:
                _email_instance = DevEmailAdapter()
    return _email_instance


_rate_limiter_instance: RateLimiter | None = None


def get_rate_limiter() -> RateLimiter:
    """Get rate limiter singleton; cooldowns are per process."""
    global _rate_limiter_instance
    if _rate_limiter_instance is None:
        with _singleton_lock:
            if _rate_limiter_instance is None:
                _rate_limiter_instance = RateLimiter()
    return _rate_limiter_instance


_settings_context_instance: SettingsContext | None = None


def get_settings_context(store: DocumentStorePort = Depends(get_store)) -> SettingsContext:
    """Get site settings context singleton, loaded from the store on first use."""
    global _settings_context_instance
    if _settings_context_instance is None:
        with _singleton_lock:
            if _settings_context_instance is None:
                context = SettingsContext(DocumentSettingsRepo(store))
                context.refresh()
                _settings_context_instance = context
    return _settings_context_instance


# --- Identity ---
bearer_scheme = HTTPBearer(auto_error=False)


def get_identity(
    request: Request,
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> Identity:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    # 1. Header, then cookie
    token = credentials.credentials if credentials else request.cookies.get("access_token")
    if not token:
        raise credentials_exception

    # 2. Verify
    identity = decode_identity(
        token,
        secret=settings.identity_secret,
        algorithm=rules.identity.algorithm,
    )
    if identity is None:
        raise credentials_exception

    return identity


def require_admin(
    identity: Identity = Depends(get_identity),
    settings: Settings = Depends(get_settings),
    rules: Rules = Depends(get_rules),
) -> Identity:
    admin_emails = settings.admin_emails or rules.identity.admin_emails
    if not is_admin(identity, admin_emails, rules.identity.require_verified_email):
        logger.warning("Admin access denied for %s", identity.email)
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return identity


# --- Emergency switches ---
def require_writable(context: SettingsContext = Depends(get_settings_context)) -> None:
    """Refuse content writes in read-only mode or lockdown."""
    if writes_blocked(context.snapshot()):
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Site is currently read-only",
        )
