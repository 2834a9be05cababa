"""
Gallery accessors.
"""

from __future__ import annotations

from typing import Any

from fastapi import HTTPException

from content.query import find_entry, find_entry_path, query_collection, query_item_surroundings
from content.service import translate_errors

COLLECTION = "gallery"


async def get_all_images(
    *,
    limit: int | None = None,
    offset: int = 0,
    tag: str | None = None,
    category: str | None = None,
) -> list[dict[str, Any]]:
    with translate_errors():
        query = query_collection(COLLECTION).order("date", "DESC").skip(offset)
        if tag:
            query.where("tags", "CONTAINS", tag)
        if category:
            query.where("category", "=", category)
        if limit is not None:
            query.limit(limit)
        return await query.all()


async def get_gallery_image(path: str) -> dict[str, Any]:
    with translate_errors():
        image = await find_entry(COLLECTION, path)
    if image is None:
        raise HTTPException(status_code=404, detail="Gallery image not found.")
    return image


async def get_surrounding_images(path: str) -> list[dict[str, Any] | None]:
    with translate_errors():
        return await query_item_surroundings(
            COLLECTION,
            await find_entry_path(COLLECTION, path),
            fields=["description"],
        )
