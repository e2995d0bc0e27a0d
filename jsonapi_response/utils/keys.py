"""Member name canonicalization for JSON:API documents."""

from __future__ import annotations

import re
from typing import Any, Mapping

_SEPARATORS = re.compile(r"[-_\s]+")
_ILLEGAL = re.compile(r"[^a-zA-Z0-9]")


def camelize(key: str) -> str:
    """Return ``key`` as a lower camel-case member name.

    The result only holds ASCII letters and digits, starts with a lowercase
    letter and ends with one; ``x`` is added on either side when needed.
    """
    words = [word for word in _SEPARATORS.split(key) if word]
    key = "".join(word[:1].upper() + word[1:] for word in words)
    key = key[:1].lower() + key[1:]
    key = _ILLEGAL.sub("", key)

    if not key or not ("a" <= key[0] <= "z"):
        key = "x" + key
    if not ("a" <= key[-1] <= "z"):
        key += "x"
    return key


def transform_keys(payload: Any, recursive: bool = True) -> Any:
    """Return a copy of ``payload`` with every string key camelized.

    Values are never converted; lists are walked element-wise when
    ``recursive`` is set.
    """
    if isinstance(payload, Mapping):
        result: dict[Any, Any] = {}
        for key, value in payload.items():
            out_key = camelize(key) if isinstance(key, str) else key
            result[out_key] = transform_keys(value, True) if recursive else value
        return result
    if isinstance(payload, list):
        if not recursive:
            return list(payload)
        return [transform_keys(item, True) for item in payload]
    return payload
