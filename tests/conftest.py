"""Shared fixtures: sample content trees and a recording stand-in for the SQL layer."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import pytest
from content import repository

ARTICLE = """---
title: {title}
tags: [{tags}]
date: {date}
author: Prism
---

# {title}

First paragraph of {title}.
"""

GALLERY = """---
title: {title}
description: A photo.
category: {category}
tags: [sea]
date: {date}
parameters:
  camera: X-T4
  lens: 16-55mm
  aperture: 4.5
  shutterSpeed: 1/60
location: Bergen
---
"""

PROJECT = """---
title: {title}
tags: [web]
date: {date}
description: A project.
progress: {progress}
repository:
  repoUsername: someone
  repoName: {name}
---

Project notes.
"""


def write(root: Path, relative: str, text: str) -> Path:
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture()
def content_root(tmp_path: Path) -> Path:
    root = tmp_path / "content"
    write(root, "articles/1.first-post.md", ARTICLE.format(title="First Post", tags="a, b", date="2024-01-10"))
    write(root, "articles/2.second-post.md", ARTICLE.format(title="Second Post", tags="b", date="2024-02-20"))
    write(root, "gallery/2024/harbour.md", GALLERY.format(title="Harbour", category="landscape", date="2024-08-11"))
    write(root, "projects/index.md", "---\ntitle: Projects\n---\n\nLanding.\n")
    write(root, "projects/prism.md", PROJECT.format(title="Prism", date="2025-01-05", progress="beta", name="prism"))
    return root


class RecordingRepository:
    """Captures compiled SQL and serves canned rows instead of hitting Postgres."""

    def __init__(self) -> None:
        self.rows: list[dict[str, Any]] = []
        self.count = 0
        self.calls: list[tuple[str, list[Any]]] = []
        self.replaced: dict[str, list[Any]] = {}

    async def run_query(self, sql: str, args: list[Any]) -> list[dict[str, Any]]:
        self.calls.append((sql, list(args)))
        return [dict(row) for row in self.rows]

    async def run_query_one(self, sql: str, args: list[Any]) -> dict[str, Any] | None:
        self.calls.append((sql, list(args)))
        rows = self.rows
        if "path = $2" in sql:
            rows = [row for row in rows if row.get("path") == args[1]]
        return dict(rows[0]) if rows else None

    async def run_count(self, sql: str, args: list[Any]) -> int:
        self.calls.append((sql, list(args)))
        return self.count

    async def replace_collection(self, collection: str, entries: list[Any]) -> int:
        self.replaced[collection] = list(entries)
        return len(entries)

    async def list_collection_counts(self) -> dict[str, int]:
        return {name: len(entries) for name, entries in self.replaced.items()}


@pytest.fixture()
def fake_repo(monkeypatch: pytest.MonkeyPatch) -> RecordingRepository:
    fake = RecordingRepository()
    for name in ("run_query", "run_query_one", "run_count", "replace_collection", "list_collection_counts"):
        monkeypatch.setattr(repository, name, getattr(fake, name))
    return fake
