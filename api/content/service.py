"""
Content indexing (orchestration).

Reads every collection from the content directory and swaps the indexed rows
in Postgres, one collection per transaction.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

from fastapi import HTTPException

from core import settings

from . import repository
from .collections import COLLECTIONS
from .errors import ContentError, ContentNotFoundError, InvalidQueryError, UnknownCollectionError
from .loader import load_collection

logger = logging.getLogger(__name__)


async def sync_content(content_dir: Path | None = None) -> dict[str, Any]:
    """
    Re-index all collections from disk.

    Returns per-collection counts plus the files that were skipped and why.
    """
    root = content_dir if content_dir is not None else settings.content_dir()
    if not root.is_dir():
        raise ContentError(f"Content directory not found: {root}")

    report: dict[str, dict[str, Any]] = {}
    total_indexed = 0
    total_errors = 0
    for collection in COLLECTIONS.values():
        result = load_collection(collection, root)
        indexed = await repository.replace_collection(collection.name, result.entries)
        report[collection.name] = {"indexed": indexed, "errors": result.errors}
        total_indexed += indexed
        total_errors += len(result.errors)
        logger.info(
            "content_synced collection=%s indexed=%s errors=%s",
            collection.name,
            indexed,
            len(result.errors),
        )

    return {"collections": report, "indexed": total_indexed, "errors": total_errors}


async def collections_overview() -> list[dict[str, Any]]:
    counts = await repository.list_collection_counts()
    return [
        {
            "name": collection.name,
            "source": collection.include,
            "exclude": list(collection.exclude),
            "schema": collection.schema.__name__,
            "entries": counts.get(collection.name, 0),
        }
        for collection in COLLECTIONS.values()
    ]


@contextmanager
def translate_errors() -> Iterator[None]:
    """
    Map content-layer failures onto HTTP status codes for the accessor services.
    """
    try:
        yield
    except ContentNotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except (UnknownCollectionError, InvalidQueryError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ContentError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
