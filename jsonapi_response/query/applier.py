"""Apply client sort/filter/include/fields directives to a query surface.

Anything the client asks for that is not allowed is dropped silently; an
over-broad request is never an error.
"""

from __future__ import annotations

import logging
from typing import Any, Iterable, Mapping

from jsonapi_response.config import JSONAPISettings, QuerySettings
from jsonapi_response.core.includes import split_include_paths
from jsonapi_response.query.base import QuerySurface
from jsonapi_response.registry import ResourceRegistry
from jsonapi_response.utils.query_params import split_csv

log = logging.getLogger(__name__)


class QuerySpecApplier:
    """Validate query directives against allow-lists and issue them on a query."""

    def __init__(
        self,
        settings: JSONAPISettings | None = None,
        registry: ResourceRegistry | None = None,
    ) -> None:
        self.settings = settings or JSONAPISettings()
        self.registry = registry or ResourceRegistry()

    def query_settings(self, options: Mapping[str, Any] | None = None) -> QuerySettings:
        if not options:
            return self.settings.query
        return self.settings.with_query(**options).query

    def apply(
        self,
        query: QuerySurface,
        params: Mapping[str, Any],
        type_: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> QuerySurface:
        """Apply sort, filter, include and fields, in that order."""
        config = self.query_settings(options)
        query = self.apply_sort(query, params, config)
        query = self.apply_filters(query, params, config)
        query = self.apply_includes(query, params, config)
        query = self.apply_fields(query, params, type_, config)
        return query

    def apply_model_query(
        self,
        query: QuerySurface,
        params: Mapping[str, Any],
        type_: str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> QuerySurface:
        """Like :meth:`apply`, with allow-lists derived from the query model's schema."""
        resolved = {**self.registry.schema_allowlists(query.model), **dict(options or {})}
        if type_ is None:
            type_ = self.registry.get(query.model).type
        return self.apply(query, params, type_, resolved)

    def apply_sort(self, query: QuerySurface, params: Mapping[str, Any], config: QuerySettings) -> QuerySurface:
        raw = params.get(config.sort_param)
        if not isinstance(raw, str) or raw == "":
            return query

        for part in split_csv(raw):
            direction = "asc"
            field = part
            if part.startswith("-"):
                direction = "desc"
                field = part[1:]
            if not field:
                continue
            if not config.allow_all_sorts and not self.allowed(field, config.allowed_sorts):
                log.debug("Dropping sort on %s: not allowed", field)
                continue
            query = query.order_by(field, direction)
        return query

    def apply_filters(self, query: QuerySurface, params: Mapping[str, Any], config: QuerySettings) -> QuerySurface:
        filters = params.get(config.filter_param)
        if not isinstance(filters, Mapping):
            return query

        for field, value in filters.items():
            if not config.allow_all_filters and not self.allowed(field, config.allowed_filters):
                log.debug("Dropping filter on %s: not allowed", field)
                continue
            if isinstance(value, Mapping):
                log.debug("Dropping filter on %s: nested filter values are not supported", field)
                continue
            if isinstance(value, (list, tuple, set)):
                query = query.where_in(field, list(value))
            elif isinstance(value, str) and "," in value:
                query = query.where_in(field, [item.strip() for item in value.split(",")])
            else:
                query = query.where(field, value)
        return query

    def apply_includes(self, query: QuerySurface, params: Mapping[str, Any], config: QuerySettings) -> QuerySurface:
        raw = params.get(config.include_param)
        if not isinstance(raw, str) or raw == "":
            return query
        includes = self.allowed_includes(split_include_paths(raw), config)
        if includes:
            query = query.eager_load(includes)
        return query

    def apply_fields(
        self,
        query: QuerySurface,
        params: Mapping[str, Any],
        type_: str | None,
        config: QuerySettings,
    ) -> QuerySurface:
        fields = params.get(config.fields_param)
        if not isinstance(fields, Mapping) or type_ is None:
            return query
        type_fields = fields.get(type_)
        if not isinstance(type_fields, str) or type_fields == "":
            return query

        columns = split_csv(type_fields)
        if not config.allow_all_fields:
            columns = [column for column in columns if self.allowed(column, config.allowed_fields)]
        if not columns:
            return query

        key_name = query.primary_key
        if key_name not in columns:
            columns.append(key_name)
        return query.select(columns)

    def allowed_includes(
        self, paths: Iterable[str], config: QuerySettings | Mapping[str, Any] | None = None
    ) -> list[str]:
        """Return the include paths that may be eager-loaded."""
        if not isinstance(config, QuerySettings):
            config = self.query_settings(config)
        paths = list(paths)
        if config.allow_all_includes:
            return paths
        allowed = [path for path in paths if self.allowed(path, config.allowed_includes)]
        for path in paths:
            if path not in allowed:
                log.debug("Dropping include %s: not allowed", path)
        return allowed

    @staticmethod
    def allowed(field: str, allowed: Iterable[str]) -> bool:
        return field in allowed
