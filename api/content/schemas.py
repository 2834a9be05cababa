"""
Pydantic schemas for content frontmatter and content request bodies.

Frontmatter keys keep the camelCase names used in the markdown files
(`shutterSpeed`, `repoUsername`, ...); Python attributes are snake_case.
Unknown frontmatter keys are ignored.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, computed_field, field_validator, model_validator


def _coerce_datetime(value: object) -> object:
    # YAML yields `date` for bare 2024-05-01 values; treat those as midnight UTC.
    if isinstance(value, datetime):
        return value if value.tzinfo is not None else value.replace(tzinfo=timezone.utc)
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)
    return value


class FrontmatterModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    title: str
    tags: list[str]
    image: str | None = None
    date: datetime

    @field_validator("date", mode="before")
    @classmethod
    def _date_before(cls, value: object) -> object:
        return _coerce_datetime(value)

    @field_validator("date")
    @classmethod
    def _date_aware(cls, value: datetime) -> datetime:
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value


class Article(FrontmatterModel):
    author: str


class GalleryParameters(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    camera: str
    lens: str
    # Stored as a bare number (4.5); rendered as f/4.5.
    aperture: float
    shutter_speed: str = Field(..., alias="shutterSpeed")

    @computed_field(alias="fNumber")
    @property
    def f_number(self) -> str:
        return f"f/{self.aperture:g}"


class Gallery(FrontmatterModel):
    description: str
    category: str
    parameters: GalleryParameters
    location: str


class Progress(str, Enum):
    ALPHA = "alpha"
    BETA = "beta"
    RELEASE = "release"
    CONCEPT = "concept"


class Repository(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repo_username: str = Field(..., alias="repoUsername")
    repo_name: str = Field(..., alias="repoName")
    private_repo: bool = Field(default=False, alias="privateRepo")
    show_issues: bool = Field(default=True, alias="showIssues")
    show_wiki: bool = Field(default=True, alias="showWiki")
    custom_wiki_link: HttpUrl | None = Field(default=None, alias="customWikiLink")


class Project(FrontmatterModel):
    description: str
    progress: Progress
    repository: Repository


class SurroundRequest(BaseModel):
    """
    Body of the surround endpoints. Older clients send `slug`, newer ones `path`.
    """

    path: str | None = Field(default=None, min_length=1, max_length=1000)
    slug: str | None = Field(default=None, min_length=1, max_length=1000)

    @model_validator(mode="after")
    def _one_of(self) -> "SurroundRequest":
        if not self.path and not self.slug:
            raise ValueError("Either `path` or `slug` is required.")
        return self

    @property
    def target(self) -> str:
        return str(self.path or self.slug)


class SyncResponse(BaseModel):
    collections: dict[str, dict]
    indexed: int
    errors: int
