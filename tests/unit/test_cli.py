import json
from datetime import UTC, datetime, timedelta
from unittest.mock import MagicMock, patch

import pytest

from src.adapters.identity import decode_identity
from src.app_shell.cli import main
from src.app_shell.config import ConfigurationError, validate_ops_rules
from src.components.video_import import VideoPayload


def test_build_seo_from_snapshot(tmp_path):
    snapshot = tmp_path / "content.json"
    stamp = "2025-02-01T10:00:00+00:00"
    base = {"author_id": "u", "author_email": "a@example.org", "created_at": stamp, "updated_at": stamp}
    snapshot.write_text(
        json.dumps(
            [
                {"id": "1", "title": "Live", "slug": "live", "status": "published", "published_at": stamp, **base},
                {"id": "2", "title": "Draft", "slug": "draft", "status": "draft", **base},
            ]
        )
    )
    out = tmp_path / "public"

    main(["build-seo", "--out", str(out), "--snapshot", str(snapshot)])

    sitemap = (out / "sitemap.xml").read_text()
    assert "/articles/live/" in sitemap
    assert "<lastmod>2025-02-01</lastmod>" in sitemap
    assert "/articles/draft/" not in sitemap
    assert "Sitemap:" in (out / "robots.txt").read_text()


def test_migrate(tmp_path, capsys):
    db = tmp_path / "nested" / "site.db"
    main(["--db", str(db), "migrate"])
    assert db.exists()
    assert "Applied 1 migrations" in capsys.readouterr().out


def test_validate_ops_rules(rules, tmp_path, monkeypatch):
    validate_ops_rules(rules, tmp_path / "data")
    assert (tmp_path / "data").is_dir()

    strict = rules.model_copy(
        update={"ops": rules.ops.model_copy(update={"required_env": ["SITE_TEST_REQUIRED"]})}
    )
    monkeypatch.delenv("SITE_TEST_REQUIRED", raising=False)
    with pytest.raises(ConfigurationError, match="SITE_TEST_REQUIRED"):
        validate_ops_rules(strict, tmp_path / "data")

    monkeypatch.setenv("SITE_TEST_REQUIRED", "1")
    validate_ops_rules(strict, tmp_path / "data")


def test_issue_token_round_trips(capsys):
    main(["issue-token", "--user-id", "u-9", "--email", "admin@example.org", "--verified"])
    identity = decode_identity(capsys.readouterr().out.strip())
    assert identity.user_id == "u-9"
    assert identity.email_verified is True


def test_serve_runs_uvicorn(monkeypatch):
    monkeypatch.delenv("SITE_RULES_PATH", raising=False)
    monkeypatch.delenv("SITE_DATA_DIR", raising=False)
    with patch("uvicorn.run") as run:
        main(["serve", "--port", "9001"])
    run.assert_called_once()
    assert run.call_args.args == ("src.api.main:app",)
    assert run.call_args.kwargs["port"] == 9001


def _fake_feed():
    feed = MagicMock()
    feed.fetch_videos.return_value = [
        VideoPayload(
            video_id="vid-1",
            title="Evening Prayer",
            description="Join us in prayer.",
            published_at=datetime.now(UTC) - timedelta(days=2),
        )
    ]
    return feed


def test_import_videos(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("YOUTUBE_API_KEY", "test-key")
    monkeypatch.setenv("YOUTUBE_AUTHOR_ID", "channel-bot")
    db = tmp_path / "site.db"
    feed = _fake_feed()

    with patch("src.app_shell.cli.YouTubeFeedAdapter", return_value=feed) as adapter:
        main(["--db", str(db), "import-videos"])
        assert "Processed 1 videos: 1 created, 0 skipped." in capsys.readouterr().out

        main(["--db", str(db), "import-videos"])
        assert "Processed 1 videos: 0 created, 1 skipped." in capsys.readouterr().out

    assert adapter.call_args.args[0] == "test-key"
    assert feed.fetch_videos.call_args.kwargs == {"published_after": None, "limit": 1}
    assert feed.close.call_count == 2


def test_import_videos_backfill(tmp_path, monkeypatch, capsys):
    monkeypatch.setenv("YOUTUBE_API_KEY", "test-key")
    feed = _fake_feed()

    with patch("src.app_shell.cli.YouTubeFeedAdapter", return_value=feed):
        main(["--db", str(tmp_path / "site.db"), "import-videos", "--backfill", "--max-videos", "5"])

    assert feed.fetch_videos.call_args.kwargs["limit"] == 5
    assert feed.fetch_videos.call_args.kwargs["published_after"] is not None
    assert "1 created" in capsys.readouterr().out


def test_import_videos_without_api_key(tmp_path, monkeypatch):
    monkeypatch.delenv("YOUTUBE_API_KEY", raising=False)
    with pytest.raises(SystemExit) as exc:
        main(["--db", str(tmp_path / "site.db"), "import-videos"])
    assert exc.value.code == 1
