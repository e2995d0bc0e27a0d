"""Helpers for JSON:API query parameter parsing."""

from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

_BRACKETS = re.compile(r"\[([^\[\]]*)\]")


def split_csv(value: str) -> list[str]:
    return [item for item in (part.strip() for part in value.split(",")) if item]


def _key_path(key: str) -> list[str]:
    """Split ``filter[author][name]`` into ``["filter", "author", "name"]``."""
    head, bracket, _ = key.partition("[")
    if not bracket or not head:
        return [key]
    rest = key[len(head):]
    segments = _BRACKETS.findall(rest)
    if "".join(f"[{segment}]" for segment in segments) != rest:
        return [key]
    return [head, *segments]


def _items(params: Any) -> Iterable[tuple[str, Any]]:
    if hasattr(params, "multi_items"):
        return params.multi_items()
    if isinstance(params, Mapping):
        return params.items()
    return params


def parse_query_params(params: Any) -> dict[str, Any]:
    """Expand bracketed query keys into nested mappings.

    ``filter[name]=x&fields[articles]=title`` becomes
    ``{"filter": {"name": "x"}, "fields": {"articles": "title"}}``. An empty
    bracket pair (``filter[status][]=a``) collects values into a list. Later
    values win over earlier ones.
    """
    result: dict[str, Any] = {}
    for key, value in _items(params):
        if value is None:
            continue
        path = _key_path(str(key))
        append = len(path) > 1 and path[-1] == ""
        if append:
            path = path[:-1]
        node = result
        for segment in path[:-1]:
            child = node.get(segment)
            if not isinstance(child, dict):
                child = {}
                node[segment] = child
            node = child
        last = path[-1]
        if append:
            existing = node.get(last)
            node[last] = [*existing, value] if isinstance(existing, list) else [value]
        else:
            node[last] = value
    return result
