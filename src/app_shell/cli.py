import argparse
import json
import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path

from src.adapters.clock import SystemClock
from src.adapters.content_repo import CONTENT_COLLECTION, CONTENT_UNIQUE_FIELDS, DocumentContentRepo
from src.adapters.identity import create_identity_token
from src.adapters.memory_store import InMemoryDocumentStore
from src.adapters.sqlite.document_store import SQLiteDocumentStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.youtube_feed import YouTubeFeedAdapter
from src.components.content import ListContentInput, run_list
from src.components.seo import SitemapInput, config_from_rules, run_robots, run_sitemap
from src.components.slugs import build_resolver
from src.components.video_import import SyncVideosInput, run_sync
from src.components.video_import import config_from_rules as import_config_from_rules
from src.domain.entities import Identity
from src.ports.store import DocumentStorePort
from src.rules.loader import DEFAULT_RULES_PATH, load_rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")

DATA_DIR = os.environ.get("SITE_DATA_DIR", "./data")
DB_PATH = str(Path(DATA_DIR) / "site.db")


def load_snapshot(path: Path) -> DocumentStorePort:
    """
    Load a content snapshot into a memory store.

    The snapshot is a JSON list of content documents, each with an "id".
    """
    store = InMemoryDocumentStore(clock=SystemClock(), unique_fields=CONTENT_UNIQUE_FIELDS)
    records = json.loads(path.read_text(encoding="utf-8"))
    for record in records:
        data = dict(record)
        doc_id = str(data.pop("id"))
        store.put(CONTENT_COLLECTION, doc_id, data)
    logger.info("Loaded %d documents from %s", len(records), path)
    return store


def handle_migrate(args: argparse.Namespace) -> None:
    Path(args.db).parent.mkdir(parents=True, exist_ok=True)
    applied = SQLiteMigrator(args.db).run_migrations()
    print(f"Applied {len(applied)} migrations to {args.db}.")


def handle_build_seo(args: argparse.Namespace) -> None:
    rules = load_rules(Path(args.rules))
    config = config_from_rules(rules.seo)

    if args.snapshot:
        store = load_snapshot(Path(args.snapshot))
    else:
        store = SQLiteDocumentStore(args.db, unique_fields=CONTENT_UNIQUE_FIELDS)

    published = run_list(ListContentInput(status="published"), repo=DocumentContentRepo(store))
    today = datetime.now(UTC).date()

    out_dir = Path(args.out)
    out_dir.mkdir(parents=True, exist_ok=True)
    documents = [
        run_robots(config=config),
        run_sitemap(SitemapInput(items=published.items, today=today), config=config),
    ]
    for doc in documents:
        (out_dir / doc.filename).write_text(doc.content, encoding="utf-8")
        logger.info("Wrote %s", out_dir / doc.filename)

    print(f"Built robots.txt and sitemap.xml ({published.total} articles) in {out_dir}.")


def handle_import_videos(args: argparse.Namespace) -> None:
    rules = load_rules(Path(args.rules))
    api_key = os.environ.get("YOUTUBE_API_KEY", "")
    channel_id = rules.video_import.channel_id
    if not api_key or not channel_id:
        logger.error("YOUTUBE_API_KEY and video_import.channel_id must both be set.")
        sys.exit(1)

    author = Identity(
        user_id=os.environ.get("YOUTUBE_AUTHOR_ID", ""),
        email=os.environ.get("YOUTUBE_AUTHOR_EMAIL", ""),
        email_verified=True,
    )
    config = import_config_from_rules(rules.video_import)
    days = config.backfill_days if args.backfill and args.days is None else args.days

    Path(args.db).parent.mkdir(parents=True, exist_ok=True)
    SQLiteMigrator(args.db).run_migrations()
    store = SQLiteDocumentStore(args.db, unique_fields=CONTENT_UNIQUE_FIELDS)
    repo = DocumentContentRepo(store)

    feed = YouTubeFeedAdapter(api_key, channel_id, uploads_playlist_id=rules.video_import.uploads_playlist_id or None)
    try:
        summary = run_sync(
            SyncVideosInput(identity=author, days=days, max_videos=args.max_videos),
            feed=feed,
            repo=repo,
            clock=SystemClock(),
            resolver=build_resolver(repo, rules.content),
            config=config,
        )
    finally:
        feed.close()

    print(
        f"Processed {summary.processed_count} videos: "
        f"{summary.created_count} created, {summary.skipped_count} skipped."
    )


def handle_issue_token(args: argparse.Namespace) -> None:
    identity = Identity(user_id=args.user_id, email=args.email, email_verified=args.verified)
    print(create_identity_token(identity))


def handle_serve(args: argparse.Namespace) -> None:
    import uvicorn

    # The app reads its paths from the environment
    os.environ.setdefault("SITE_RULES_PATH", args.rules)
    os.environ.setdefault("SITE_DATA_DIR", str(Path(args.db).parent))
    uvicorn.run("src.api.main:app", host=args.host, port=args.port, reload=args.reload, log_level="info")


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Ministry Site CLI")
    parser.add_argument("--rules", default=str(DEFAULT_RULES_PATH), help="Path to rules.yaml")
    parser.add_argument("--db", default=DB_PATH, help="SQLite database path")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending SQLite migrations")

    # build-seo
    seo_parser = subparsers.add_parser("build-seo", help="Write robots.txt and sitemap.xml")
    seo_parser.add_argument("--out", required=True, help="Output directory")
    seo_parser.add_argument("--snapshot", help="JSON content snapshot instead of the database")

    # issue-token
    token_parser = subparsers.add_parser("issue-token", help="Issue a dev identity token")
    token_parser.add_argument("--user-id", required=True)
    token_parser.add_argument("--email", required=True)
    token_parser.add_argument("--verified", action="store_true", help="Mark the email verified")

    # import-videos
    videos_parser = subparsers.add_parser("import-videos", help="Publish new channel uploads as articles")
    videos_parser.add_argument("--backfill", action="store_true", help="Import the whole backfill window")
    videos_parser.add_argument("--days", type=int, help="Backfill window in days")
    videos_parser.add_argument("--max-videos", type=int, help="Cap on uploads processed")

    # serve
    serve_parser = subparsers.add_parser("serve", help="Run the API with uvicorn")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    serve_parser.add_argument("--reload", action="store_true")

    args = parser.parse_args(argv)

    if args.command == "migrate":
        handle_migrate(args)
    elif args.command == "build-seo":
        if not Path(args.rules).exists():
            logger.error("Rules file %s not found.", args.rules)
            sys.exit(1)
        handle_build_seo(args)
    elif args.command == "import-videos":
        handle_import_videos(args)
    elif args.command == "issue-token":
        handle_issue_token(args)
    elif args.command == "serve":
        handle_serve(args)


if __name__ == "__main__":
    main()
