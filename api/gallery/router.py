"""
Gallery API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from content import schemas

from . import service

router = APIRouter(prefix="/api/v1/gallery")


@router.get("")
async def list_images(
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tag: str | None = Query(default=None, min_length=1, max_length=200),
    category: str | None = Query(default=None, min_length=1, max_length=200),
) -> list[dict]:
    return await service.get_all_images(limit=limit, offset=offset, tag=tag, category=category)


@router.get("/surround")
async def get_surrounding_images(
    body: schemas.SurroundRequest | None = None,
    path: str | None = Query(default=None, min_length=1),
) -> list[dict | None]:
    target = body.target if body is not None else path
    if not target:
        raise HTTPException(status_code=400, detail="`path` is required.")
    return await service.get_surrounding_images(target)


@router.get("/{path:path}")
async def get_gallery_image(path: str) -> dict:
    return await service.get_gallery_image(path)
