"""Immutable JSON:API configuration."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class _Section(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class JSONAPIObjectSettings(_Section):
    """Top-level ``jsonapi`` member."""

    version: str = "1.1"
    meta: dict[str, Any] = Field(default_factory=dict)


class MethodOverrideSettings(_Section):
    """Header based method override (``POST`` tunnelled as ``PATCH``)."""

    enabled: bool = True
    header: str = "X-HTTP-Method-Override"
    from_method: str = "POST"
    to_method: str = "PATCH"
    apply_to_prefixes: list[str] = Field(default_factory=lambda: ["/api"])


class ErrorSettings(_Section):
    """Defaults used when error objects are normalized."""

    include_all_members: bool = True
    default_status: str = "500"
    default_title: str = "Error"
    default_code: str | None = "ERROR"
    default_detail: str | None = None
    default_links: dict[str, Any] | None = Field(
        default_factory=lambda: {"about": None, "type": None}
    )
    default_source: dict[str, Any] | None = Field(
        default_factory=lambda: {"pointer": "/data"}
    )
    default_meta: dict[str, Any] | None = Field(default_factory=dict)


class PaginationSettings(_Section):
    """Pagination links/meta options."""

    meta_key: str = "page"
    include_total: bool = True
    include_last_page: bool = True
    page_param: str = "page"
    default_per_page: int = 15
    max_per_page: int = 100


class QuerySettings(_Section):
    """Query parameter names and allow-lists."""

    sort_param: str = "sort"
    filter_param: str = "filter"
    include_param: str = "include"
    fields_param: str = "fields"
    max_include_param: str = "max_include"
    max_include: int | str | None = None
    allow_all_sorts: bool = False
    allow_all_filters: bool = True
    allow_all_includes: bool = False
    allow_all_fields: bool = False
    allowed_sorts: list[str] = Field(default_factory=list)
    allowed_filters: list[str] = Field(default_factory=list)
    allowed_includes: list[str] = Field(default_factory=list)
    allowed_fields: list[str] = Field(default_factory=list)
    # Prune the include tree used for document shaping to allowed includes.
    restrict_document_includes: bool = False


class RelationshipSettings(_Section):
    # Emit relationship links for relations requested via ?include= even if not loaded.
    links_for_includes: bool = True


class JSONAPISettings(BaseSettings):
    """JSON:API settings, built once and passed to every component.

    Values can be given as keyword arguments or through the environment::

        JSONAPI_TRANSFORM_KEYS=false
        JSONAPI_QUERY__ALLOW_ALL_SORTS=true
        JSONAPI_PAGINATION__META_KEY=pagination
    """

    model_config = SettingsConfigDict(
        env_prefix="JSONAPI_",
        env_nested_delimiter="__",
        frozen=True,
        extra="ignore",
    )

    content_type: str = "application/vnd.api+json"
    include_jsonapi: bool = False
    include_compound_documents: bool = True
    jsonapi: JSONAPIObjectSettings = Field(default_factory=JSONAPIObjectSettings)
    transform_keys: bool = True
    transform_recursive: bool = True
    resource_links: bool = True
    relationship_links: bool = True
    base_url: str = ""
    method_override: MethodOverrideSettings = Field(default_factory=MethodOverrideSettings)
    errors: ErrorSettings = Field(default_factory=ErrorSettings)
    pagination: PaginationSettings = Field(default_factory=PaginationSettings)
    query: QuerySettings = Field(default_factory=QuerySettings)
    relationships: RelationshipSettings = Field(default_factory=RelationshipSettings)
    # Whether to eager-load ?include= relations during document building.
    eager_load_includes: bool = True

    def with_query(self, **overrides: Any) -> "JSONAPISettings":
        """Return a copy with per-call query options merged over the configured ones."""
        if not overrides:
            return self
        query = self.query.model_copy(update=overrides)
        return self.model_copy(update={"query": query})
