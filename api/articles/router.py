"""
Article API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Query

from content import schemas

from . import service

router = APIRouter(prefix="/api/v1/articles")


@router.get("")
async def list_articles(
    limit: int | None = Query(default=None, ge=1, le=500),
    offset: int = Query(default=0, ge=0),
    tag: str | None = Query(default=None, min_length=1, max_length=200),
) -> list[dict]:
    return await service.get_all_articles(limit=limit, offset=offset, tag=tag)


@router.get("/surround")
async def get_article_surround(
    body: schemas.SurroundRequest | None = None,
    path: str | None = Query(default=None, min_length=1),
    slug: str | None = Query(default=None, min_length=1),
) -> list[dict | None]:
    """
    Previous/next articles around `path` (or `slug`), sent in the JSON body or the query string.
    """
    target = body.target if body is not None else (path or slug)
    if not target:
        raise HTTPException(status_code=400, detail="Either `path` or `slug` is required.")
    return await service.get_article_surround(target)


@router.get("/{path:path}")
async def get_article(path: str) -> dict:
    return await service.get_article(path)
