"""
Article accessors.

Articles are always listed newest first. Single lookups accept either the full
content path (`/articles/hello-world`) or the bare slug (`hello-world`).
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from content.query import find_entry, find_entry_path, query_collection, query_item_surroundings
from content.service import translate_errors

COLLECTION = "articles"


async def get_all_articles(
    *,
    limit: int | None = None,
    offset: int = 0,
    tag: str | None = None,
) -> list[dict[str, Any]]:
    with translate_errors():
        query = query_collection(COLLECTION).order("date", "DESC").skip(offset)
        if tag:
            query.where("tags", "CONTAINS", tag)
        if limit is not None:
            query.limit(limit)
        return await query.all()


async def get_article(path_or_slug: str) -> dict[str, Any]:
    with translate_errors():
        page = await find_entry(COLLECTION, path_or_slug)
    if page is None:
        raise HTTPException(status_code=404, detail="Article not found.")
    return page


async def get_article_surround(path_or_slug: str) -> list[dict[str, Any] | None]:
    with translate_errors():
        path = await find_entry_path(COLLECTION, path_or_slug)
        return await query_item_surroundings(COLLECTION, path, fields=["description"])
