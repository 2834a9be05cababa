"""
Markdown content parsing.

One markdown file becomes one `ContentEntry`:
- YAML frontmatter (between leading `---` fences) is validated against the
  collection schema
- the body is kept as raw markdown and rendered to HTML
- `path` is derived from the file location unless frontmatter sets it
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path, PurePosixPath
from typing import Any

import markdown
import yaml
from pydantic import ValidationError

from .collections import Collection
from .errors import ContentParseError, ContentValidationError

_FRONTMATTER_RE = re.compile(
    r"\A---[ \t]*\r?\n(.*?)(?:\r?\n)?^---[ \t]*$\r?\n?",
    re.DOTALL | re.MULTILINE,
)
_ORDER_PREFIX_RE = re.compile(r"^\d+\.")
_UNSAFE_RE = re.compile(r"[^\w.~-]+")
_HEADING_RE = re.compile(r"^#[ \t]+(.+?)[ \t#]*$")

MARKDOWN_EXTENSIONS = ["extra", "sane_lists"]


@dataclass(frozen=True)
class ContentEntry:
    id: str
    collection: str
    path: str
    stem: str
    extension: str
    title: str
    description: str
    date: datetime
    body: str
    html: str
    meta: dict[str, Any]

    def to_row(self) -> tuple[Any, ...]:
        return (
            self.id,
            self.collection,
            self.path,
            self.stem,
            self.extension,
            self.title,
            self.description,
            self.date,
            self.body,
            self.html,
            self.meta,
        )


def split_frontmatter(text: str) -> tuple[dict[str, Any], str]:
    """
    Return (frontmatter, body). Files without a frontmatter block yield ({}, text).
    """
    text = text.lstrip("\ufeff")
    match = _FRONTMATTER_RE.match(text)
    if match is None:
        return {}, text

    try:
        data = yaml.safe_load(match.group(1))
    except yaml.YAMLError as exc:
        raise ContentParseError(Path("<frontmatter>"), f"invalid YAML frontmatter: {exc}") from exc

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ContentParseError(Path("<frontmatter>"), "frontmatter must be a mapping")
    return data, text[match.end():]


def slugify(segment: str) -> str:
    slug = _UNSAFE_RE.sub("-", segment.strip().lower())
    return re.sub(r"-{2,}", "-", slug).strip("-")


def derive_path(stem: str) -> str:
    """
    `articles/2.My Post` -> `/articles/my-post`; `projects/index` -> `/projects`.
    """
    segments = [slugify(_ORDER_PREFIX_RE.sub("", part)) for part in PurePosixPath(stem).parts]
    segments = [s for s in segments if s]
    if segments and segments[-1] == "index":
        segments.pop()
    return "/" + "/".join(segments)


def normalize_path(path: str) -> str:
    return "/" + path.strip().strip("/")


def first_heading(body: str) -> str | None:
    in_fence = False
    for line in body.splitlines():
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        match = _HEADING_RE.match(line)
        if match:
            return match.group(1).strip()
    return None


def first_paragraph(body: str) -> str | None:
    """
    First block of prose: skips headings, fenced code, HTML comments and image-only lines.
    """
    paragraph: list[str] = []
    in_fence = False
    for line in body.splitlines():
        stripped = line.strip()
        if stripped.startswith(("```", "~~~")):
            if paragraph:
                break
            in_fence = not in_fence
            continue
        if in_fence:
            continue
        if not stripped:
            if paragraph:
                break
            continue
        if not paragraph and stripped.startswith(("#", "<!--", "![")):
            continue
        paragraph.append(stripped)
    return " ".join(paragraph) or None


def render_markdown(body: str) -> str:
    return markdown.markdown(body, extensions=MARKDOWN_EXTENSIONS, output_format="html")


def _validation_errors(exc: ValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": [str(p) for p in err["loc"]], "msg": err["msg"], "type": err["type"]}
        for err in exc.errors()
    ]


def parse_text(collection: Collection, relative_path: str, text: str) -> ContentEntry:
    """
    Parse one file's text. `relative_path` is posix and relative to the content dir.
    """
    file = Path(relative_path)
    try:
        frontmatter, body = split_frontmatter(text)
    except ContentParseError as exc:
        raise ContentParseError(file, exc.reason) from exc

    rel = PurePosixPath(relative_path)
    stem = rel.with_suffix("").as_posix()

    heading = first_heading(body)
    paragraph = first_paragraph(body)
    frontmatter.setdefault("title", heading or rel.stem)
    if paragraph is not None:
        frontmatter.setdefault("description", paragraph)

    try:
        model = collection.schema.model_validate(frontmatter)
    except ValidationError as exc:
        raise ContentValidationError(file, _validation_errors(exc)) from exc

    raw_path = frontmatter.get("path")
    path = normalize_path(raw_path) if isinstance(raw_path, str) and raw_path.strip() else derive_path(stem)
    description = frontmatter.get("description")

    return ContentEntry(
        id=f"{collection.name}/{rel.as_posix()}",
        collection=collection.name,
        path=path,
        stem=stem,
        extension=rel.suffix.lstrip("."),
        title=model.title,
        description=str(description) if description is not None else "",
        date=model.date,
        body=body,
        html=render_markdown(body),
        meta=model.model_dump(mode="json", by_alias=True),
    )


def parse_file(collection: Collection, content_root: Path, file: Path) -> ContentEntry:
    relative_path = file.relative_to(content_root).as_posix()
    try:
        text = file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise ContentParseError(Path(relative_path), f"unreadable file: {exc}") from exc
    return parse_text(collection, relative_path, text)
