"""
Content index persistence (raw SQL).

Every collection lives in one `content_entries` table. Schema fields that are
not first-class columns are kept in `meta` (jsonb).
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from core import db

from .parser import ContentEntry

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS content_entries (
    id          text        NOT NULL,
    collection  text        NOT NULL,
    path        text        NOT NULL,
    stem        text        NOT NULL,
    extension   text        NOT NULL,
    title       text        NOT NULL,
    description text        NOT NULL DEFAULT '',
    date        timestamptz NOT NULL,
    body        text        NOT NULL DEFAULT '',
    html        text        NOT NULL DEFAULT '',
    meta        jsonb       NOT NULL DEFAULT '{}'::jsonb,
    indexed_at  timestamptz NOT NULL DEFAULT now(),
    PRIMARY KEY (collection, path)
);

CREATE UNIQUE INDEX IF NOT EXISTS content_entries_id_idx
    ON content_entries (id);

CREATE INDEX IF NOT EXISTS content_entries_date_idx
    ON content_entries (collection, date DESC);
"""

INSERT_SQL = """
INSERT INTO content_entries (
    id, collection, path, stem, extension, title, description, date, body, html, meta
)
VALUES ($1, $2, $3, $4, $5, $6, $7, $8, $9, $10, $11)
"""

# Columns that can be filtered/ordered/selected directly; everything else is read from `meta`.
ENTRY_COLUMNS = (
    "id",
    "collection",
    "path",
    "stem",
    "extension",
    "title",
    "description",
    "date",
    "body",
    "html",
)


async def ensure_schema() -> None:
    await db.execute(SCHEMA_SQL)


async def replace_collection(collection: str, entries: Sequence[ContentEntry]) -> int:
    """
    Swap the indexed entries of one collection for `entries` in a single transaction.
    """
    async with db.transaction() as conn:
        await conn.execute("DELETE FROM content_entries WHERE collection = $1", collection)
        if entries:
            await db.execute_many(conn, INSERT_SQL, (entry.to_row() for entry in entries))
    return len(entries)


async def run_query(sql: str, args: Sequence[Any]) -> list[dict[str, Any]]:
    return await db.fetch_all(sql, *args)


async def run_query_one(sql: str, args: Sequence[Any]) -> dict[str, Any] | None:
    return await db.fetch_one(sql, *args)


async def run_count(sql: str, args: Sequence[Any]) -> int:
    value = await db.fetch_value(sql, *args)
    return int(value or 0)


async def list_collection_counts() -> dict[str, int]:
    rows = await db.fetch_all(
        """
        SELECT collection, count(*) AS entries
        FROM content_entries
        GROUP BY collection
        """
    )
    return {str(row["collection"]): int(row["entries"]) for row in rows}
