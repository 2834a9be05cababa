"""
Project accessors.

The site reads projects straight from the query engine rather than through an
HTTP hop; the router below exposes the same functions for external clients.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from content.query import find_entry, find_entry_path, query_collection, query_item_surroundings
from content.schemas import Progress
from content.service import translate_errors

COLLECTION = "projects"


async def get_all_projects(
    *,
    limit: int | None = None,
    offset: int = 0,
    tag: str | None = None,
    progress: Progress | None = None,
) -> list[dict[str, Any]]:
    with translate_errors():
        query = query_collection(COLLECTION).order("date", "DESC").skip(offset)
        if tag:
            query.where("tags", "CONTAINS", tag)
        if progress is not None:
            query.where("progress", "=", progress.value)
        if limit is not None:
            query.limit(limit)
        return await query.all()


async def get_project(path: str) -> dict[str, Any]:
    with translate_errors():
        project = await find_entry(COLLECTION, path)
    if project is None:
        raise HTTPException(status_code=404, detail="Project not found.")
    return project


async def get_project_surround(path: str) -> list[dict[str, Any] | None]:
    with translate_errors():
        return await query_item_surroundings(
            COLLECTION,
            await find_entry_path(COLLECTION, path),
            fields=["description"],
        )
