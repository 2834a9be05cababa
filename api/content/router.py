"""
Content maintenance endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from . import dependencies, schemas, service

router = APIRouter(prefix="/api/v1/content")


@router.get("/collections")
async def list_collections() -> dict:
    collections = await service.collections_overview()
    return {"collections": collections, "count": len(collections)}


@router.post("/sync", response_model=schemas.SyncResponse)
async def sync_content(_: None = Depends(dependencies.require_admin)) -> dict:
    """
    Re-index every collection from the content directory.
    """
    with service.translate_errors():
        return await service.sync_content()
