"""JSON:API document construction."""

from __future__ import annotations

from typing import Any, Iterable, Mapping

from jsonapi_response.config import JSONAPISettings
from jsonapi_response.pagination.base import Paginator
from jsonapi_response.pagination.meta import PaginationMetaBuilder
from jsonapi_response.utils.keys import transform_keys


class JSONAPIDocumentBuilder:
    """Build a top-level JSON:API document.

    ``data`` and ``errors`` are mutually exclusive: setting one drops the other.
    """

    def __init__(self, settings: JSONAPISettings | None = None) -> None:
        self.settings = settings or JSONAPISettings()
        self.document: dict[str, Any] = {}

    def with_data(self, data: Any) -> "JSONAPIDocumentBuilder":
        self.document["data"] = data
        self.document.pop("errors", None)
        return self

    def with_errors(self, errors: Iterable[Any]) -> "JSONAPIDocumentBuilder":
        self.document["errors"] = list(errors)
        self.document.pop("data", None)
        return self

    def with_meta(self, meta: Mapping[str, Any]) -> "JSONAPIDocumentBuilder":
        self.document["meta"] = {**self.document.get("meta", {}), **meta}
        return self

    def with_links(self, links: Mapping[str, Any]) -> "JSONAPIDocumentBuilder":
        self.document["links"] = {**self.document.get("links", {}), **links}
        return self

    def with_included(self, included: Iterable[Mapping[str, Any]]) -> "JSONAPIDocumentBuilder":
        self.document["included"] = [dict(item) for item in included]
        return self

    def with_jsonapi(self, jsonapi: Mapping[str, Any] | None = None) -> "JSONAPIDocumentBuilder":
        self.document["jsonapi"] = dict(jsonapi) if jsonapi is not None else self.default_jsonapi_object()
        return self

    def with_pagination(self, paginator: Paginator) -> "JSONAPIDocumentBuilder":
        pagination = PaginationMetaBuilder(self.settings.pagination).build(paginator)
        self.with_links(pagination["links"])
        self.with_meta(pagination["meta"])
        return self

    def default_jsonapi_object(self) -> dict[str, Any]:
        jsonapi: dict[str, Any] = {"version": self.settings.jsonapi.version}
        if self.settings.jsonapi.meta:
            jsonapi["meta"] = dict(self.settings.jsonapi.meta)
        return jsonapi

    def to_dict(self) -> dict[str, Any]:
        """Return the finished document."""
        document = dict(self.document)
        if self.settings.include_jsonapi:
            document.setdefault("jsonapi", self.default_jsonapi_object())
        else:
            document.pop("jsonapi", None)
        if not self.settings.transform_keys:
            return document
        return transform_keys(document, self.settings.transform_recursive)

    def build_error(self, errors: Iterable[Any]) -> dict[str, Any]:
        """Return a JSON:API error document from error objects."""
        return self.with_errors(errors).to_dict()
