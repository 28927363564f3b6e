"""Idempotent database migrations for weblog.

Databases created by older releases lack the repost/heart columns and the
indexes. SQLite supports ADD COLUMN for nullable columns and
CREATE INDEX IF NOT EXISTS, so each step checks before it runs.
"""

import logging

from sqlalchemy import text
from sqlalchemy.engine import Connection, Engine

logger = logging.getLogger(__name__)

_COLUMNS = [
    ("content", "response_to", "VARCHAR DEFAULT ''"),
    ("content", "type", "INTEGER DEFAULT 0"),
    ("url_preview", "thumbnail_url", "VARCHAR DEFAULT ''"),
    ("url_preview", "oembed_html", "TEXT DEFAULT ''"),
]

_INDEXES = [
    "CREATE UNIQUE INDEX IF NOT EXISTS idx_content_uri ON content (uri)",
    "CREATE INDEX IF NOT EXISTS idx_content_date ON content (date)",
    "CREATE INDEX IF NOT EXISTS idx_tag_id ON tag (id)",
    "CREATE INDEX IF NOT EXISTS idx_tag_value ON tag (value)",
]


def _column_exists(conn: Connection, table: str, column: str) -> bool:
    """Check if a column exists in the given table."""
    result = conn.execute(text(f"PRAGMA table_info({table})"))
    columns = [row[1] for row in result]
    return column in columns


def _purge_blank_uri(conn: Connection) -> int:
    """Delete content stored with an empty uri; it can never be addressed."""
    ids = [row[0] for row in conn.execute(text("SELECT id FROM content WHERE uri = ''"))]
    for content_id in ids:
        conn.execute(text("DELETE FROM tag WHERE id = :id"), {"id": content_id})
        conn.execute(text("DELETE FROM content WHERE id = :id"), {"id": content_id})
    return len(ids)


def run_migrations(engine: Engine) -> None:
    """Run all pending migrations idempotently."""
    with engine.connect() as conn:
        for table, column, col_type in _COLUMNS:
            if not _column_exists(conn, table, column):
                logger.info("Adding column %s.%s (%s)", table, column, col_type)
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {column} {col_type}"))
                conn.commit()
            else:
                logger.debug("Column %s.%s already exists, skipping", table, column)

        purged = _purge_blank_uri(conn)
        conn.commit()
        if purged:
            logger.info("Removed %d content rows with an empty uri", purged)

        for statement in _INDEXES:
            conn.execute(text(statement))
        conn.commit()
