"""
Content collection definitions.

A collection is a named set of markdown files under the content directory,
selected by an include glob (relative to the content directory) minus exclude
globs (relative to the collection's own directory), and validated against one
frontmatter schema.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from fnmatch import fnmatch
from pathlib import PurePosixPath

from . import schemas
from .errors import UnknownCollectionError

MARKDOWN_EXTENSIONS = frozenset({".md"})


@dataclass(frozen=True)
class Collection:
    name: str
    include: str
    schema: type[schemas.FrontmatterModel]
    exclude: tuple[str, ...] = field(default_factory=tuple)

    @property
    def base_dir(self) -> str:
        # Directory part of the include glob before the first wildcard segment.
        parts: list[str] = []
        for part in PurePosixPath(self.include).parts:
            if any(ch in part for ch in "*?["):
                break
            parts.append(part)
        return "/".join(parts)

    def matches(self, relative_path: str) -> bool:
        """
        True if `relative_path` (posix, relative to the content dir) belongs here.
        """
        rel = PurePosixPath(relative_path)
        if rel.suffix not in MARKDOWN_EXTENSIONS:
            return False
        if not _glob_match(rel.as_posix(), self.include):
            return False

        base = self.base_dir
        inner = rel.as_posix()[len(base) + 1 :] if base else rel.as_posix()
        return not any(_glob_match(inner, pattern) for pattern in self.exclude)


def _glob_match(path: str, pattern: str) -> bool:
    # `*` stays inside one segment; `**` spans any depth (and matches a bare directory prefix).
    if pattern.endswith("/**"):
        prefix = pattern[: -len("/**")]
        return path.startswith(prefix + "/")
    path_parts = path.split("/")
    pattern_parts = pattern.split("/")
    if len(path_parts) != len(pattern_parts):
        return False
    return all(fnmatch(p, q) for p, q in zip(path_parts, pattern_parts))


COLLECTIONS: dict[str, Collection] = {
    "articles": Collection(
        name="articles",
        include="articles/*.md",
        schema=schemas.Article,
    ),
    "gallery": Collection(
        name="gallery",
        include="gallery/**",
        schema=schemas.Gallery,
    ),
    "projects": Collection(
        name="projects",
        include="projects/*.md",
        schema=schemas.Project,
        exclude=("index.md",),
    ),
}


def get_collection(name: str) -> Collection:
    try:
        return COLLECTIONS[name]
    except KeyError:
        raise UnknownCollectionError(name) from None


def collection_names() -> list[str]:
    return list(COLLECTIONS)
