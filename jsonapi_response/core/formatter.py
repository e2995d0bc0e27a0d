"""Turn domain payloads into JSON:API documents and responses."""

from __future__ import annotations

import datetime as dt
import logging
from decimal import Decimal
from http import HTTPStatus
from typing import Any, Iterable, Mapping
from urllib.parse import parse_qsl, urlsplit, urlunsplit

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from starlette.responses import Response

from jsonapi_response.config import JSONAPISettings
from jsonapi_response.core.compound import CompoundDocumentAssembler
from jsonapi_response.core.document import JSONAPIDocumentBuilder
from jsonapi_response.core.errors import JSONAPIErrorBuilder
from jsonapi_response.core.includes import IncludeLimitResolver, IncludeNode, parse_include_tree
from jsonapi_response.pagination.base import Paginator
from jsonapi_response.query.applier import QuerySpecApplier
from jsonapi_response.query.base import EagerLoader
from jsonapi_response.registry import ResourceRegistry
from jsonapi_response.responses import JSONAPIResponse
from jsonapi_response.serializers.base import JSONAPISerializer
from jsonapi_response.serializers.relationships import RelationshipResolver
from jsonapi_response.utils.query_params import parse_query_params

log = logging.getLogger(__name__)

DOCUMENT_MEMBERS = ("data", "errors", "meta", "links", "jsonapi")

_SCALARS = (str, bytes, int, float, bool, Decimal, dt.date, dt.time, dt.timedelta)


def is_resource_object(value: Any) -> bool:
    """Return True for domain objects (anything that is not data or a container)."""
    if value is None or isinstance(value, _SCALARS):
        return False
    return not isinstance(value, (Mapping, list, tuple, set, frozenset))


def looks_like_document(payload: Mapping[str, Any]) -> bool:
    return any(member in payload for member in DOCUMENT_MEMBERS)


class JSONAPIFormatter:
    """Build JSON:API documents for a single object, a collection or a page.

    The include tree is parsed once per call; requested relations are eager
    loaded before any relationship is read, and the document is shaped from
    what is loaded.
    """

    def __init__(
        self,
        settings: JSONAPISettings | None = None,
        registry: ResourceRegistry | None = None,
        eager_loader: EagerLoader | None = None,
    ) -> None:
        self.settings = settings or JSONAPISettings()
        self.registry = registry or ResourceRegistry()
        self.eager_loader = eager_loader
        self.serializer = JSONAPISerializer(self.settings, self.registry)
        self.resolver = RelationshipResolver(self.serializer)
        self.assembler = CompoundDocumentAssembler(self.resolver)
        self.applier = QuerySpecApplier(self.settings, self.registry)
        self.error_builder = JSONAPIErrorBuilder(self.settings)

    def builder(self) -> JSONAPIDocumentBuilder:
        return JSONAPIDocumentBuilder(self.settings)

    def include_tree(self, params: Mapping[str, Any]) -> IncludeNode:
        """Parse the include parameter into the tree used to shape the document."""
        raw = params.get(self.settings.query.include_param)
        if isinstance(raw, Mapping):
            return IncludeNode()
        tree = parse_include_tree(raw)
        if tree and self.settings.query.restrict_document_includes:
            allowed = set(self.applier.allowed_includes(tree.paths()))
            tree = tree.prune(allowed.__contains__)
        return tree

    def include_limits(self, params: Mapping[str, Any]) -> IncludeLimitResolver:
        return IncludeLimitResolver(
            params.get(self.settings.query.max_include_param),
            self.settings.query.max_include,
        )

    def document(
        self,
        payload: Any,
        type_: str | None = None,
        *,
        params: Mapping[str, Any] | None = None,
        url: str | None = None,
    ) -> dict[str, Any]:
        """Return the JSON:API document for ``payload``.

        ``params`` are the parsed query parameters (see
        :func:`jsonapi_response.utils.query_params.parse_query_params`) and
        ``url`` the request URL used for ``self`` links.
        """
        params = params or {}
        if isinstance(payload, Paginator):
            if url and not payload.path:
                self.bind_paginator(payload, url)
            return self._collection_document(payload.items, type_, params, url, paginator=payload)
        if isinstance(payload, Mapping):
            if looks_like_document(payload):
                return dict(payload)
            builder = self.builder().with_data(dict(payload))
            if url:
                builder.with_links({"self": url})
            return builder.to_dict()
        if payload is None or isinstance(payload, _SCALARS):
            return {"data": payload}
        if isinstance(payload, Iterable):
            return self._collection_document(list(payload), type_, params, url)
        return self._single_document(payload, type_, params, url)

    def bind_paginator(self, paginator: Paginator, url: str) -> None:
        """Build page links from ``url``, keeping its query arguments."""
        split = urlsplit(url)
        paginator.path = urlunsplit((split.scheme, split.netloc, split.path, "", ""))
        paginator.query = {**dict(parse_qsl(split.query, keep_blank_values=True)), **paginator.query}

    def _single_document(
        self, instance: Any, type_: str | None, params: Mapping[str, Any], url: str | None
    ) -> dict[str, Any]:
        tree = self.include_tree(params)
        limits = self.include_limits(params)
        self.eager_load([instance], tree)

        resource = self._primary_resource(instance, type_, tree, limits)
        builder = self.builder().with_data(resource)
        self_link = url or self.resource_self_link(instance, type_)
        if self_link:
            builder.with_links({"self": self_link})

        if self.settings.include_compound_documents:
            included = self.assembler.assemble(
                [instance], tree, limits, exclude=self._keys([resource])
            )
            if included:
                builder.with_included(included)
        return builder.to_dict()

    def _collection_document(
        self,
        items: list[Any],
        type_: str | None,
        params: Mapping[str, Any],
        url: str | None,
        paginator: Paginator | None = None,
    ) -> dict[str, Any]:
        tree = self.include_tree(params)
        limits = self.include_limits(params)
        objects = [item for item in items if is_resource_object(item)]
        self.eager_load(objects, tree)

        resources = [
            self._primary_resource(item, type_, tree, limits) if is_resource_object(item) else item
            for item in items
        ]
        builder = self.builder().with_data(resources)
        if paginator is not None:
            builder.with_pagination(paginator)
        if url:
            builder.with_links({"self": url})

        if self.settings.include_compound_documents:
            included = self.assembler.assemble(objects, tree, limits, exclude=self._keys(resources))
            if included:
                builder.with_included(included)
        return builder.to_dict()

    def _primary_resource(
        self, instance: Any, type_: str | None, tree: IncludeNode, limits: IncludeLimitResolver
    ) -> dict[str, Any]:
        relationships = self.resolver.resolve(instance, tree, limits, type_=type_)
        return self.serializer.to_resource(instance, type_=type_, relationships=relationships)

    def _keys(self, resources: Iterable[Any]) -> list[tuple[str, str]]:
        keys = []
        for resource in resources:
            if isinstance(resource, Mapping) and resource.get("type") and resource.get("id") is not None:
                keys.append((resource["type"], resource["id"]))
        return keys

    def eager_load(self, targets: list[Any], tree: IncludeNode) -> None:
        """Load the allowed include paths onto ``targets`` before serialization."""
        if not self.settings.eager_load_includes or self.eager_loader is None:
            return
        if not targets or not tree:
            return
        paths = self.applier.allowed_includes(tree.paths())
        if paths:
            log.debug("Eager loading %s on %d object(s)", paths, len(targets))
            self.eager_loader.load_missing(targets, paths)

    def resource_self_link(self, instance: Any, type_: str | None = None) -> str | None:
        resource_id = self.serializer.get_id(instance)
        if resource_id is None:
            return None
        return self.serializer.resource_url(type_ or self.serializer.get_type(instance), resource_id)

    def errors_document(self, errors: Iterable[Any]) -> dict[str, Any]:
        """Return an error document with normalized error objects."""
        return self.builder().build_error(self.error_builder.normalize(errors))

    def validation_errors_document(
        self,
        messages: Mapping[str, Any],
        *,
        status: int = HTTPStatus.UNPROCESSABLE_ENTITY.value,
        title: str = "Validation Error",
        code: str = "VALIDATION_ERROR",
    ) -> dict[str, Any]:
        errors = self.error_builder.validation_errors(messages, title=title, code=code, status=status)
        return self.errors_document(errors)

    def request_context(self, request: Request | None) -> tuple[dict[str, Any], str | None]:
        """Return the parsed query parameters and full URL of ``request``."""
        if request is None:
            return {}, None
        return parse_query_params(request.query_params), str(request.url)

    def response(
        self,
        payload: Any,
        type_: str | None = None,
        *,
        request: Request | None = None,
        status: int = HTTPStatus.OK.value,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        """Return a JSON:API response for ``payload``.

        A 204 response never carries a body; a 201 response for a domain
        object gets a ``Location`` header unless one is given.
        """
        if status == HTTPStatus.NO_CONTENT.value:
            return Response(status_code=status, headers=dict(headers or {}))

        response_headers = dict(headers or {})
        if status == HTTPStatus.CREATED.value and is_resource_object(payload) and "Location" not in response_headers:
            location = self.resource_self_link(payload, type_)
            if location:
                response_headers["Location"] = location

        params, url = self.request_context(request)
        document = self.document(payload, type_, params=params, url=url)
        return self._json(document, status, response_headers)

    def error_response(
        self,
        errors: Iterable[Any],
        status: int = HTTPStatus.BAD_REQUEST.value,
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        return self._json(self.errors_document(errors), status, dict(headers or {}))

    def validation_error_response(
        self,
        messages: Mapping[str, Any],
        status: int = HTTPStatus.UNPROCESSABLE_ENTITY.value,
        *,
        title: str = "Validation Error",
        code: str = "VALIDATION_ERROR",
        headers: Mapping[str, str] | None = None,
    ) -> Response:
        document = self.validation_errors_document(messages, status=status, title=title, code=code)
        return self._json(document, status, dict(headers or {}))

    def _json(self, document: dict[str, Any], status: int, headers: dict[str, str]) -> Response:
        return JSONAPIResponse(
            content=jsonable_encoder(document),
            status_code=status,
            headers=headers,
            media_type=self.settings.content_type,
        )
