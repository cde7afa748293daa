"""
Forward-only SQL migrations for the document store.

Files in `migrations/` are applied in name order. Only the part above the
`-- Down` marker is executed; the rest documents how to undo it by hand.
"""

import logging
import sqlite3
from pathlib import Path

logger = logging.getLogger(__name__)

MIGRATIONS_DIR = Path(__file__).resolve().parents[3] / "migrations"
DOWN_MARKER = "-- Down"


class MigrationError(RuntimeError):
    pass


class SQLiteMigrator:
    def __init__(self, db_path: str | Path, migrations_dir: str | Path = MIGRATIONS_DIR):
        self.db_path = str(db_path)
        self.migrations_dir = Path(migrations_dir)

    def pending(self, conn: sqlite3.Connection) -> list[Path]:
        done = {row[0] for row in conn.execute("SELECT filename FROM schema_migrations")}
        return [p for p in sorted(self.migrations_dir.glob("*.sql")) if p.name not in done]

    def run_migrations(self) -> list[str]:
        """Apply pending migrations, each in its own transaction. Returns the names applied."""
        conn = sqlite3.connect(self.db_path)
        applied: list[str] = []
        try:
            conn.execute(
                "CREATE TABLE IF NOT EXISTS schema_migrations ("
                " filename TEXT PRIMARY KEY,"
                " applied_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP)"
            )
            for path in self.pending(conn):
                logger.info("Applying migration %s", path.name)
                self._apply(conn, path)
                applied.append(path.name)
        finally:
            conn.close()

        if not applied:
            logger.debug("Schema at %s is up to date", self.db_path)
        return applied

    def _apply(self, conn: sqlite3.Connection, path: Path) -> None:
        up_script = path.read_text(encoding="utf-8").split(DOWN_MARKER, 1)[0]
        try:
            conn.executescript(f"BEGIN;\n{up_script}\nCOMMIT;")
            conn.execute("INSERT INTO schema_migrations (filename) VALUES (?)", (path.name,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise MigrationError(f"Migration {path.name} failed: {e}") from e
