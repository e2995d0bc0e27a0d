"""JSON:API pagination links and meta."""

from __future__ import annotations

from typing import Any, Mapping

from jsonapi_response.config import PaginationSettings
from jsonapi_response.pagination.base import LengthAwarePaginator, Paginator


class PaginationMetaBuilder:
    """Turn a paginator into top-level ``links`` and ``meta`` members."""

    def __init__(self, settings: PaginationSettings | None = None) -> None:
        self.settings = settings or PaginationSettings()

    def build(self, paginator: Paginator) -> dict[str, Any]:
        links: dict[str, Any] = {
            "self": paginator.url(paginator.current_page),
            "first": paginator.url(1),
            "prev": paginator.previous_page_url(),
            "next": paginator.next_page_url(),
        }
        length_aware = isinstance(paginator, LengthAwarePaginator)
        if length_aware:
            links["last"] = paginator.url(paginator.last_page)

        page: dict[str, Any] = {
            "current": paginator.current_page,
            "from": paginator.first_item,
            "to": paginator.last_item,
            "per_page": paginator.per_page,
        }
        # Cursor-style pages cannot report a total; never guess one.
        if length_aware:
            if self.settings.include_total:
                page["total"] = paginator.total
            if self.settings.include_last_page:
                page["last_page"] = paginator.last_page

        return {"links": links, "meta": {self.settings.meta_key: page}}


def resolve_page_number(page: Any) -> int:
    """Return ``page[number]`` as a positive integer, defaulting to 1."""
    value = page.get("number") if isinstance(page, Mapping) else page
    try:
        number = int(value)
    except (TypeError, ValueError):
        return 1
    return max(1, number)


def resolve_page_size(page: Any, settings: PaginationSettings | None = None) -> int:
    """Return ``page[size]`` clamped to ``[1, max_per_page]``."""
    settings = settings or PaginationSettings()
    value = page.get("size") if isinstance(page, Mapping) else None
    try:
        size = int(value) if value is not None else settings.default_per_page
    except (TypeError, ValueError):
        size = settings.default_per_page
    return max(1, min(size, settings.max_per_page))
