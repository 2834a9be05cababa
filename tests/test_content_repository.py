"""Tests for content/repository.py and core/db.py against a stand-in asyncpg pool."""

import asyncio
import os
import re
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from pathlib import Path

import pytest
from content import repository
from content.collections import get_collection
from content.parser import parse_file
from core import db


class FakeConnection:
    def __init__(self, fail_on_insert: bool = False) -> None:
        self.fail_on_insert = fail_on_insert
        self.statements: list[tuple[str, tuple]] = []
        self.batches: list[tuple[str, list]] = []
        self.codecs: list[tuple[str, str]] = []
        self.transactions: list[str] = []

    async def execute(self, sql, *args):
        self.statements.append((sql, args))

    async def executemany(self, sql, rows):
        if self.fail_on_insert:
            raise RuntimeError("insert failed")
        self.batches.append((sql, list(rows)))

    async def set_type_codec(self, type_name, *, encoder, decoder, schema):
        self.codecs.append((type_name, schema))

    @asynccontextmanager
    async def transaction(self):
        self.transactions.append("begin")
        try:
            yield
        except BaseException:
            self.transactions.append("rollback")
            raise
        self.transactions.append("commit")


class FakePool:
    def __init__(self, conn: FakeConnection) -> None:
        self.conn = conn
        self.acquired = 0
        self.executed: list[str] = []

    @asynccontextmanager
    async def acquire(self):
        self.acquired += 1
        yield self.conn

    async def execute(self, sql, *args):
        self.executed.append(sql)


@pytest.fixture()
def conn(monkeypatch: pytest.MonkeyPatch) -> FakeConnection:
    connection = FakeConnection()
    monkeypatch.setattr(db, "_pool", FakePool(connection))
    return connection


def _insert_columns() -> list[str]:
    match = re.search(r"INSERT INTO content_entries \((.*?)\)", repository.INSERT_SQL, re.S)
    assert match is not None
    return [name.strip() for name in match.group(1).split(",")]


class TestReplaceCollection:
    def test_delete_and_inserts_share_one_transaction(self, conn, content_root: Path):
        articles = get_collection("articles")
        entries = [parse_file(articles, content_root, p) for p in sorted((content_root / "articles").glob("*.md"))]

        count = asyncio.run(repository.replace_collection("articles", entries))

        assert count == 2
        assert db.pool().acquired == 1
        assert conn.transactions == ["begin", "commit"]
        assert conn.statements == [("DELETE FROM content_entries WHERE collection = $1", ("articles",))]
        sql, rows = conn.batches[0]
        assert sql == repository.INSERT_SQL
        assert rows == [entry.to_row() for entry in entries]

    def test_empty_collection_only_deletes(self, conn):
        assert asyncio.run(repository.replace_collection("gallery", [])) == 0
        assert len(conn.statements) == 1
        assert conn.batches == []
        assert conn.transactions == ["begin", "commit"]

    def test_failed_insert_rolls_back(self, conn, content_root: Path):
        conn.fail_on_insert = True
        projects = get_collection("projects")
        entry = parse_file(projects, content_root, content_root / "projects" / "prism.md")

        with pytest.raises(RuntimeError, match="insert failed"):
            asyncio.run(repository.replace_collection("projects", [entry]))
        assert conn.transactions == ["begin", "rollback"]


class TestInsertLayout:
    def test_row_order_matches_insert_columns(self, content_root: Path):
        gallery = get_collection("gallery")
        entry = parse_file(gallery, content_root, content_root / "gallery" / "2024" / "harbour.md")
        columns = _insert_columns()

        assert len(columns) == len(entry.to_row()) == repository.INSERT_SQL.count("$")
        assert list(entry.to_row()) == [getattr(entry, name) for name in columns]

    def test_entry_columns_are_insert_columns(self):
        assert set(repository.ENTRY_COLUMNS) <= set(_insert_columns())
        assert "meta" in _insert_columns()


class TestSchemaAndPool:
    def test_ensure_schema(self, conn):
        asyncio.run(repository.ensure_schema())
        assert db.pool().executed == [repository.SCHEMA_SQL]

    def test_json_codecs_are_registered(self):
        connection = FakeConnection()
        asyncio.run(db._init_connection(connection))
        assert connection.codecs == [("json", "pg_catalog"), ("jsonb", "pg_catalog")]

    def test_pool_required(self, monkeypatch):
        monkeypatch.setattr(db, "_pool", None)
        with pytest.raises(RuntimeError, match="not initialized"):
            db.pool()

    def test_sslmode_is_dropped(self):
        url = db._sanitize_database_url("postgresql://u:p@h:5432/site?sslmode=require&application_name=prism")
        assert url == "postgresql://u:p@h:5432/site?application_name=prism"


@pytest.mark.skipif(not os.environ.get("TEST_DATABASE_URL"), reason="TEST_DATABASE_URL is not set")
def test_round_trip_against_postgres(monkeypatch, content_root: Path):
    monkeypatch.setenv("DATABASE_URL", os.environ["TEST_DATABASE_URL"])
    monkeypatch.setattr(db, "_pool", None)
    gallery = get_collection("gallery")
    entry = parse_file(gallery, content_root, content_root / "gallery" / "2024" / "harbour.md")

    async def scenario():
        await db.init_pool()
        try:
            await repository.ensure_schema()
            await repository.replace_collection("gallery", [entry])
            row = await repository.run_query_one(
                "SELECT path, date, meta FROM content_entries WHERE collection = $1 AND path = $2",
                ["gallery", entry.path],
            )
            wide = await repository.run_count(
                "SELECT count(*) FROM content_entries WHERE collection = $1 "
                "AND (meta #> $2::text[]) > $3::text::jsonb",
                ["gallery", ["parameters", "aperture"], "4"],
            )
            await repository.replace_collection("gallery", [])
            return row, wide
        finally:
            await db.close_pool()

    row, wide = asyncio.run(scenario())
    assert row["date"] == datetime(2024, 8, 11, tzinfo=timezone.utc)
    assert row["meta"]["parameters"]["fNumber"] == "f/4.5"
    assert wide == 1
