"""
Content API HTTP client helpers.

Used endpoints:
- GET /api/v1/articles, /api/v1/gallery, /api/v1/projects           -> [entry, ...]
- GET /api/v1/{collection}/{path}                                     -> entry
- GET /api/v1/{collection}/surround  (JSON body {"path"} / {"slug"})  -> [prev, next]
"""

from __future__ import annotations

from typing import Any

import httpx


# Site API failures are explicit and separable from transport errors.
class SiteApiError(RuntimeError):
    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class SiteNotFoundError(SiteApiError):
    pass


def _normalize_base_url(base_url: str) -> str:
    base_url = (base_url or "").strip()
    if not base_url:
        raise SiteApiError("Site base URL is empty.")
    return base_url.rstrip("/")


def _entry_path(path: str) -> str:
    path = (path or "").strip().strip("/")
    if not path:
        raise SiteApiError("Content path is empty.")
    return path


async def _get_json(
    *,
    base_url: str,
    url: str,
    params: dict[str, Any] | None = None,
    body: dict[str, Any] | None = None,
    timeout_s: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    base_url = _normalize_base_url(base_url)
    if params:
        params = {k: v for k, v in params.items() if v is not None}

    async with httpx.AsyncClient(base_url=base_url, timeout=timeout_s, transport=transport) as client:
        # The surround endpoints read a JSON body even on GET.
        resp = await client.request("GET", url, params=params, json=body)

    if resp.status_code == 404:
        raise SiteNotFoundError(f"Not found: {url}", status_code=404)
    if resp.status_code != 200:
        # Avoid dumping huge bodies; include a small snippet.
        snippet = resp.text[:500]
        raise SiteApiError(f"Site request failed: {resp.status_code} {snippet}", status_code=resp.status_code)

    try:
        return resp.json()
    except ValueError as e:
        raise SiteApiError("Site returned a non-JSON response.", status_code=resp.status_code) from e


async def _get_list(**kwargs: Any) -> list[dict[str, Any]]:
    data = await _get_json(**kwargs)
    if not isinstance(data, list):
        raise SiteApiError("Site returned an unexpected payload (expected a list).")
    return data


async def _get_entry(**kwargs: Any) -> dict[str, Any]:
    data = await _get_json(**kwargs)
    if not isinstance(data, dict):
        raise SiteApiError("Site returned an unexpected payload (expected an object).")
    return data


# -- articles ---------------------------------------------------------------


async def get_all_articles(
    *,
    base_url: str,
    tag: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    return await _get_list(
        base_url=base_url,
        url="/api/v1/articles",
        params={"tag": tag, "limit": limit, "offset": offset},
        transport=transport,
    )


async def get_article(
    slug: str,
    *,
    base_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    return await _get_entry(base_url=base_url, url=f"/api/v1/articles/{_entry_path(slug)}", transport=transport)


async def get_article_surround(
    slug: str,
    *,
    base_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any] | None]:
    return await _get_list(
        base_url=base_url,
        url="/api/v1/articles/surround",
        body={"slug": slug},
        transport=transport,
    )


# -- gallery ----------------------------------------------------------------


async def get_all_images(
    *,
    base_url: str,
    tag: str | None = None,
    category: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    return await _get_list(
        base_url=base_url,
        url="/api/v1/gallery",
        params={"tag": tag, "category": category, "limit": limit, "offset": offset},
        transport=transport,
    )


async def get_gallery_image(
    path: str,
    *,
    base_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    return await _get_entry(base_url=base_url, url=f"/api/v1/gallery/{_entry_path(path)}", transport=transport)


async def get_surrounding_images(
    path: str,
    *,
    base_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any] | None]:
    return await _get_list(
        base_url=base_url,
        url="/api/v1/gallery/surround",
        body={"path": path},
        transport=transport,
    )


# -- projects ---------------------------------------------------------------


async def get_all_projects(
    *,
    base_url: str,
    tag: str | None = None,
    progress: str | None = None,
    limit: int | None = None,
    offset: int | None = None,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any]]:
    return await _get_list(
        base_url=base_url,
        url="/api/v1/projects",
        params={"tag": tag, "progress": progress, "limit": limit, "offset": offset},
        transport=transport,
    )


async def get_project(
    path: str,
    *,
    base_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> dict[str, Any]:
    return await _get_entry(base_url=base_url, url=f"/api/v1/projects/{_entry_path(path)}", transport=transport)


async def get_project_surround(
    path: str,
    *,
    base_url: str,
    transport: httpx.AsyncBaseTransport | None = None,
) -> list[dict[str, Any] | None]:
    return await _get_list(
        base_url=base_url,
        url="/api/v1/projects/surround",
        body={"path": path},
        transport=transport,
    )
