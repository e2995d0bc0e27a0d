"""Resource type naming helpers."""

from __future__ import annotations

import re
from typing import Any

import inflect

_inflector = inflect.engine()


def dasherize(value: str) -> str:
    """Return the dash-cased form of a class or type name (``BlogPost`` -> ``blog-post``)."""
    if value.islower():
        return value
    value = "".join(part[:1].upper() + part[1:] for part in value.split())
    return re.sub(r"(.)(?=[A-Z])", r"\1-", value).lower()


def pluralize(value: str) -> str:
    """Pluralize the last dash-separated word (``blog-post`` -> ``blog-posts``)."""
    head, sep, word = value.rpartition("-")
    if not word:
        return value
    return f"{head}{sep}{_inflector.plural_noun(word)}"


def infer_type(model: Any) -> str:
    """Derive a JSON:API type from a class or an instance."""
    cls = model if isinstance(model, type) else type(model)
    return pluralize(dasherize(cls.__name__))
