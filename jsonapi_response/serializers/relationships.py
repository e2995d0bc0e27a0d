"""Relationship linkage from already-loaded relations."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from itertools import islice
from typing import Any

from jsonapi_response.core.includes import IncludeLimitResolver, IncludeNode
from jsonapi_response.serializers.base import JSONAPISerializer

log = logging.getLogger(__name__)


def is_to_many(related: Any) -> bool:
    return isinstance(related, Iterable) and not isinstance(related, (str, bytes, Mapping))


def take(related: Iterable[Any], limit: int | None) -> list[Any]:
    """Return the related items in order, truncated to ``limit`` when set."""
    if limit is None:
        return list(related)
    return list(islice(related, limit))


class RelationshipResolver:
    """Build relationship objects for one domain object.

    Only relations already materialized on the object are read; a relation
    that has not been loaded is treated as absent, never fetched.
    """

    def __init__(self, serializer: JSONAPISerializer) -> None:
        self.serializer = serializer
        self.settings = serializer.settings
        self.registry = serializer.registry

    def resolve(
        self,
        instance: Any,
        include_tree: IncludeNode | None = None,
        limits: IncludeLimitResolver | None = None,
        *,
        type_: str | None = None,
        path_prefix: str = "",
    ) -> dict[str, Any]:
        """Return relationship objects keyed by relation name."""
        include_tree = include_tree or IncludeNode()
        limits = limits or IncludeLimitResolver()
        relations = self.registry.loaded_relations(instance)
        if not relations and not include_tree:
            return {}

        type_name = type_ or self.serializer.get_type(instance)
        resource_id = self.serializer.get_id(instance)
        emit_links = self.settings.relationship_links

        result: dict[str, Any] = {}
        for name, related in relations.items():
            limit = None
            if include_tree.get(name) is not None:
                limit = limits.resolve(f"{path_prefix}{name}")
            relation: dict[str, Any] = {"data": self.linkage(related, limit)}
            if emit_links:
                relation["links"] = self.serializer.relationship_links(type_name, resource_id, name)
            result[name] = relation

        if (
            include_tree
            and emit_links
            and self.settings.relationships.links_for_includes
            and resource_id is not None
        ):
            declared = self.registry.get(instance).relations
            for name in include_tree.roots():
                if name in result or name not in declared:
                    continue
                log.debug("Relation %s on %s is not loaded, emitting links only", name, type_name)
                result[name] = {
                    "links": self.serializer.relationship_links(type_name, resource_id, name)
                }
        return result

    def linkage(self, related: Any, limit: int | None = None) -> Any:
        """Return resource identifier(s) for a loaded relation value."""
        if related is None:
            return None
        if is_to_many(related):
            return [self.serializer.identifier(item) for item in take(related, limit)]
        return self.serializer.identifier(related)
