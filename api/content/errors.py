"""
Content-layer failures.

These are separate from HTTP concerns; services translate them into
`HTTPException` with an explicit status code.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any


class ContentError(RuntimeError):
    pass


class UnknownCollectionError(ContentError):
    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown content collection: {name!r}")
        self.name = name


class InvalidQueryError(ContentError):
    pass


class ContentNotFoundError(ContentError):
    def __init__(self, collection: str, path: str) -> None:
        super().__init__(f"No entry at {path!r} in collection {collection!r}")
        self.collection = collection
        self.path = path


class ContentParseError(ContentError):
    def __init__(self, file: Path, reason: str) -> None:
        super().__init__(f"{file}: {reason}")
        self.file = file
        self.reason = reason


class ContentValidationError(ContentError):
    def __init__(self, file: Path, errors: list[dict[str, Any]]) -> None:
        fields = ", ".join(".".join(str(p) for p in err.get("loc", ())) or "<root>" for err in errors)
        super().__init__(f"{file}: schema validation failed ({fields})")
        self.file = file
        self.errors = errors
