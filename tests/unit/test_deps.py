"""Tests for the API's process-wide singletons."""

import threading
import time
from concurrent.futures import ThreadPoolExecutor
from unittest.mock import patch

from src.api import deps


def _slow_store(backend, db_path):
    time.sleep(0.05)
    return object()


def test_concurrent_first_calls_build_one_store(rules, monkeypatch):
    monkeypatch.setenv("SITE_STORE_BACKEND", "memory")
    monkeypatch.setattr(deps, "_store_instance", None)
    settings = deps.Settings()
    start = threading.Barrier(8)

    def first_call():
        start.wait()
        return deps.get_store(settings=settings, rules=rules)

    with patch.object(deps, "build_store", side_effect=_slow_store) as build:
        with ThreadPoolExecutor(max_workers=8) as pool:
            stores = list(pool.map(lambda _: first_call(), range(8)))

    assert build.call_count == 1
    assert all(store is stores[0] for store in stores)


def test_adapter_singletons_are_shared(monkeypatch):
    monkeypatch.setattr(deps, "_email_instance", None)
    monkeypatch.setattr(deps, "_rate_limiter_instance", None)

    with ThreadPoolExecutor(max_workers=4) as pool:
        emails = list(pool.map(lambda _: deps.get_email(), range(4)))
        limiters = list(pool.map(lambda _: deps.get_rate_limiter(), range(4)))

    assert all(email is emails[0] for email in emails)
    assert all(limiter is limiters[0] for limiter in limiters)
