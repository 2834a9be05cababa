"""
Collection query builder.

`query_collection("articles").order("date", "DESC").all()` compiles to one
parameterised SELECT over `content_entries`. Field names are checked against
an identifier pattern before they reach SQL; values are always bound.

Fields that are not table columns resolve into `meta`, with dots walking
nested objects (`repository.repoName`). Those are compared and ordered as
jsonb, so booleans and numbers keep their type (`aperture > 4` is numeric).
"""

from __future__ import annotations

import copy
import json
import re
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from . import repository
from .collections import get_collection
from .errors import ContentNotFoundError, InvalidQueryError
from .parser import derive_path, normalize_path

_FIELD_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*(\.[A-Za-z_][A-Za-z0-9_]*)*$")

OPERATORS = ("=", "<>", ">", ">=", "<", "<=", "LIKE", "IN", "CONTAINS")
DIRECTIONS = ("ASC", "DESC")

# Neighbour entries always carry these; callers add more with `fields`.
SURROUND_FIELDS = ("path", "stem", "title")


def _check_field(name: str) -> str:
    if not isinstance(name, str) or not _FIELD_RE.match(name):
        raise InvalidQueryError(f"Invalid field name: {name!r}")
    return name


def _coerce_date(value: Any) -> Any:
    if isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError as exc:
            raise InvalidQueryError(f"Invalid date value: {value!r}") from exc
        return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=timezone.utc)
    return value


def _json_param(value: Any) -> str:
    # Bound as text and cast to jsonb in SQL.
    return json.dumps(value, default=str)


def row_to_entry(row: dict[str, Any]) -> dict[str, Any]:
    """
    Flatten a `content_entries` row: schema fields from `meta`, columns on top.
    """
    row = dict(row)
    meta = row.pop("meta", None) or {}
    return {**meta, **row}


class CollectionQuery:
    def __init__(self, collection: str) -> None:
        self.collection = get_collection(collection).name
        self._conditions: list[tuple[str, str, Any]] = []
        self._orders: list[tuple[str, str]] = []
        self._fields: list[str] = []
        self._limit: int | None = None
        self._offset: int = 0

    # -- builder ------------------------------------------------------------

    def path(self, path: str) -> "CollectionQuery":
        return self.where("path", "=", normalize_path(path))

    def where(self, field: str, operator: str, value: Any) -> "CollectionQuery":
        op = operator.strip().upper()
        if op not in OPERATORS:
            raise InvalidQueryError(f"Unsupported operator: {operator!r}")
        if op == "IN" and (isinstance(value, (str, bytes)) or not isinstance(value, Iterable)):
            raise InvalidQueryError("IN expects a list of values.")
        self._conditions.append((_check_field(field), op, value))
        return self

    def order(self, field: str, direction: str = "ASC") -> "CollectionQuery":
        direction = direction.strip().upper()
        if direction not in DIRECTIONS:
            raise InvalidQueryError(f"Invalid order direction: {direction!r}")
        self._orders.append((_check_field(field), direction))
        return self

    def select(self, *fields: str) -> "CollectionQuery":
        self._fields.extend(_check_field(f) for f in fields)
        return self

    def limit(self, limit: int) -> "CollectionQuery":
        if limit < 0:
            raise InvalidQueryError("limit must be >= 0")
        self._limit = int(limit)
        return self

    def skip(self, offset: int) -> "CollectionQuery":
        if offset < 0:
            raise InvalidQueryError("skip must be >= 0")
        self._offset = int(offset)
        return self

    # -- compilation --------------------------------------------------------

    def _field_expr(self, field: str, args: list[Any], *, as_text: bool = False) -> str:
        if field in repository.ENTRY_COLUMNS:
            return field
        args.append(field.split("."))
        operator = "#>>" if as_text else "#>"
        return f"(meta {operator} ${len(args)}::text[])"

    def _where_sql(self, args: list[Any]) -> str:
        args.append(self.collection)
        clauses = [f"collection = ${len(args)}"]

        for field, op, value in self._conditions:
            is_column = field in repository.ENTRY_COLUMNS
            if op == "CONTAINS":
                # List membership on a JSON array field (e.g. tags).
                args.append(field.split("."))
                path_ref = len(args)
                args.append(_json_param(value))
                clauses.append(f"(meta #> ${path_ref}::text[]) @> jsonb_build_array(${len(args)}::text::jsonb)")
                continue

            if op == "LIKE":
                expr = self._field_expr(field, args, as_text=True)
                args.append(str(value))
                clauses.append(f"{expr} LIKE ${len(args)}")
                continue

            expr = self._field_expr(field, args)
            if op == "IN":
                values = [_coerce_date(v) if field == "date" else v for v in value]
                if is_column:
                    args.append(values)
                    clauses.append(f"{expr} = ANY(${len(args)})")
                else:
                    args.append([_json_param(v) for v in values])
                    clauses.append(f"{expr} = ANY(${len(args)}::text[]::jsonb[])")
                continue

            if field == "date":
                args.append(_coerce_date(value))
                clauses.append(f"{expr} {op} ${len(args)}")
            elif is_column:
                args.append(value)
                clauses.append(f"{expr} {op} ${len(args)}")
            else:
                args.append(_json_param(value))
                clauses.append(f"{expr} {op} ${len(args)}::text::jsonb")

        return " AND ".join(clauses)

    def _select_sql(self) -> str:
        if not self._fields:
            return ", ".join((*repository.ENTRY_COLUMNS, "meta"))
        columns = [c for c in repository.ENTRY_COLUMNS if c in self._fields]
        if any(f not in repository.ENTRY_COLUMNS for f in self._fields):
            columns.append("meta")
        return ", ".join(columns or ["path"])

    def _order_sql(self, args: list[Any]) -> str:
        parts = [f"{self._field_expr(field, args)} {direction}" for field, direction in self._orders]
        # Stable order for equal keys.
        if not any(field == "path" for field, _ in self._orders):
            parts.append("path ASC")
        return ", ".join(parts)

    def to_sql(self) -> tuple[str, list[Any]]:
        args: list[Any] = []
        where = self._where_sql(args)
        order = self._order_sql(args)
        sql = f"SELECT {self._select_sql()} FROM content_entries WHERE {where} ORDER BY {order}"
        if self._limit is not None:
            args.append(self._limit)
            sql += f" LIMIT ${len(args)}"
        if self._offset:
            args.append(self._offset)
            sql += f" OFFSET ${len(args)}"
        return sql, args

    def to_count_sql(self) -> tuple[str, list[Any]]:
        args: list[Any] = []
        where = self._where_sql(args)
        return f"SELECT count(*) FROM content_entries WHERE {where}", args

    # -- execution ----------------------------------------------------------

    def _project(self, row: dict[str, Any]) -> dict[str, Any]:
        entry = row_to_entry(row)
        if not self._fields:
            return entry
        return {field: _lookup(entry, field) for field in self._fields}

    async def all(self) -> list[dict[str, Any]]:
        sql, args = self.to_sql()
        rows = await repository.run_query(sql, args)
        return [self._project(row) for row in rows]

    def _clone(self) -> "CollectionQuery":
        clone = copy.copy(self)
        clone._conditions = list(self._conditions)
        clone._orders = list(self._orders)
        clone._fields = list(self._fields)
        return clone

    async def first(self) -> dict[str, Any] | None:
        # Limit a copy so the builder can still be used for `all()`.
        query = self._clone().limit(1)
        sql, args = query.to_sql()
        row = await repository.run_query_one(sql, args)
        return query._project(row) if row is not None else None

    async def count(self) -> int:
        sql, args = self.to_count_sql()
        return await repository.run_count(sql, args)


def _lookup(entry: dict[str, Any], field: str) -> Any:
    value: Any = entry
    for part in field.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def query_collection(collection: str) -> CollectionQuery:
    return CollectionQuery(collection)


async def query_item_surroundings(
    collection: str,
    path: str,
    *,
    fields: Sequence[str] = (),
    before: int = 1,
    after: int = 1,
    order: tuple[str, str] = ("date", "DESC"),
) -> list[dict[str, Any] | None]:
    """
    Neighbours of `path` in collection order.

    Returns `before + after` slots: the entries preceding `path`, then the ones
    following it. Slots past either end of the collection are None.
    """
    if before < 0 or after < 0:
        raise InvalidQueryError("before/after must be >= 0")

    target = normalize_path(path)
    wanted = list(dict.fromkeys((*SURROUND_FIELDS, *fields)))
    items = await query_collection(collection).order(*order).select(*wanted).all()

    index = next((i for i, item in enumerate(items) if item.get("path") == target), None)
    if index is None:
        raise ContentNotFoundError(collection, target)

    preceding = items[max(0, index - before) : index]
    following = items[index + 1 : index + 1 + after]

    slots: list[dict[str, Any] | None] = [None] * (before - len(preceding))
    slots.extend(preceding)
    slots.extend(following)
    slots.extend([None] * (after - len(following)))
    return slots


def candidate_paths(collection: str, value: str) -> list[str]:
    """
    Paths that `value` may name inside `collection`, most specific first.

    A value already under the collection base (`/articles/foo`, `articles/foo`)
    is taken as is. Anything else is tried verbatim first, which covers
    frontmatter `path` overrides outside the base (`/blog/custom`), and then as
    a slug under the base (`foo` -> `/articles/foo`).
    """
    if not value or not value.strip().strip("/"):
        raise InvalidQueryError("A content path or slug is required.")

    base = derive_path(get_collection(collection).base_dir)
    path = normalize_path(value)
    if base == "/" or path == base or path.startswith(base + "/"):
        return [path]
    return [path, base + path]


async def find_entry(collection: str, value: str, *fields: str) -> dict[str, Any] | None:
    """
    First entry matching one of `candidate_paths(collection, value)`, or None.
    """
    for path in candidate_paths(collection, value):
        entry = await query_collection(collection).path(path).select(*fields).first()
        if entry is not None:
            return entry
    return None


async def find_entry_path(collection: str, value: str) -> str:
    entry = await find_entry(collection, value, "path")
    if entry is None:
        raise ContentNotFoundError(collection, normalize_path(value))
    return str(entry["path"])
