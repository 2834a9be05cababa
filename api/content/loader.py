"""
Read a collection's markdown files from disk.

Invalid files never stop a load: they are logged and returned as errors so a
re-index can report them while still indexing everything else.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .collections import Collection
from .errors import ContentParseError, ContentValidationError
from .parser import ContentEntry, parse_file

logger = logging.getLogger(__name__)


@dataclass
class LoadResult:
    collection: str
    entries: list[ContentEntry] = field(default_factory=list)
    errors: list[dict[str, Any]] = field(default_factory=list)


def discover(collection: Collection, content_dir: Path) -> list[Path]:
    """
    Files under `content_dir` that belong to `collection`, sorted by relative path.
    """
    base = content_dir / collection.base_dir if collection.base_dir else content_dir
    if not base.is_dir():
        return []

    files: list[Path] = []
    for candidate in base.rglob("*"):
        if not candidate.is_file():
            continue
        if collection.matches(candidate.relative_to(content_dir).as_posix()):
            files.append(candidate)
    return sorted(files, key=lambda p: p.relative_to(content_dir).as_posix())


def load_collection(collection: Collection, content_dir: Path) -> LoadResult:
    result = LoadResult(collection=collection.name)
    seen_paths: dict[str, str] = {}

    for file in discover(collection, content_dir):
        rel = file.relative_to(content_dir).as_posix()
        try:
            entry = parse_file(collection, content_dir, file)
        except ContentValidationError as exc:
            logger.warning("content_invalid collection=%s file=%s", collection.name, exc.file)
            result.errors.append({"file": exc.file.as_posix(), "reason": "validation", "details": exc.errors})
            continue
        except ContentParseError as exc:
            logger.warning("content_unparsable collection=%s file=%s reason=%s", collection.name, exc.file, exc.reason)
            result.errors.append({"file": exc.file.as_posix(), "reason": "parse", "details": exc.reason})
            continue

        # First file wins; paths are unique within a collection.
        owner = seen_paths.get(entry.path)
        if owner is not None:
            logger.warning(
                "content_duplicate_path collection=%s path=%s file=%s first=%s",
                collection.name,
                entry.path,
                rel,
                owner,
            )
            result.errors.append(
                {
                    "file": rel,
                    "reason": "duplicate_path",
                    "details": f"{entry.path} already provided by {owner}",
                }
            )
            continue

        seen_paths[entry.path] = rel
        result.entries.append(entry)

    logger.info(
        "content_loaded collection=%s entries=%s errors=%s",
        collection.name,
        len(result.entries),
        len(result.errors),
    )
    return result
