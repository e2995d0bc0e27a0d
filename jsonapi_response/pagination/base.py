"""Paginated result sets."""

from __future__ import annotations

import math
from typing import Any, Mapping, Sequence
from urllib.parse import urlencode, urlsplit, urlunsplit


class Paginator:
    """A page of results whose total is unknown (simple or cursor-style paging).

    ``path`` is the collection URL and ``query`` the request's query arguments;
    page URLs keep every argument except the page ones, which are replaced.
    """

    def __init__(
        self,
        items: Sequence[Any],
        *,
        per_page: int,
        current_page: int = 1,
        has_more: bool = False,
        path: str = "",
        query: Mapping[str, Any] | None = None,
        page_param: str = "page",
    ) -> None:
        self.items = list(items)
        self.per_page = max(1, int(per_page))
        self.current_page = max(1, int(current_page))
        self.has_more = has_more
        self.path = path
        self.query = dict(query or {})
        self.page_param = page_param

    def __iter__(self):
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    @property
    def first_item(self) -> int | None:
        if not self.items:
            return None
        return (self.current_page - 1) * self.per_page + 1

    @property
    def last_item(self) -> int | None:
        first = self.first_item
        if first is None:
            return None
        return first + len(self.items) - 1

    def has_more_pages(self) -> bool:
        return self.has_more

    def url(self, page: int) -> str:
        """Return the URL of ``page``."""
        split = urlsplit(self.path)
        number_key = f"{self.page_param}[number]"
        size_key = f"{self.page_param}[size]"
        query_params = {
            key: value
            for key, value in self.query.items()
            if key not in (number_key, size_key)
        }
        query_params[number_key] = max(1, page)
        query_params[size_key] = self.per_page
        query = urlencode(query_params, safe="[],")
        return urlunsplit((split.scheme, split.netloc, split.path, query, split.fragment))

    def previous_page_url(self) -> str | None:
        if self.current_page <= 1:
            return None
        return self.url(self.current_page - 1)

    def next_page_url(self) -> str | None:
        if not self.has_more_pages():
            return None
        return self.url(self.current_page + 1)


class LengthAwarePaginator(Paginator):
    """A page of results with a known total."""

    def __init__(self, items: Sequence[Any], *, total: int, per_page: int, **kwargs: Any) -> None:
        super().__init__(items, per_page=per_page, **kwargs)
        self.total = max(0, int(total))

    @property
    def last_page(self) -> int:
        return max(1, math.ceil(self.total / self.per_page))

    def has_more_pages(self) -> bool:
        return self.current_page < self.last_page
