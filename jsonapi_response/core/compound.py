"""Compound document (``included``) assembly."""

from __future__ import annotations

from typing import Any, Iterable

from jsonapi_response.core.includes import IncludeLimitResolver, IncludeNode
from jsonapi_response.serializers.relationships import RelationshipResolver, is_to_many, take


class CompoundDocumentAssembler:
    """Collect the related resources named by an include tree.

    The walk follows the include tree, not the object graph, so it stops at the
    requested depth even when relations point back at each other. One dedup
    map keyed ``type:id`` is shared by all primary objects of a call.
    """

    def __init__(self, resolver: RelationshipResolver) -> None:
        self.resolver = resolver
        self.serializer = resolver.serializer
        self.registry = resolver.registry

    def assemble(
        self,
        primaries: Iterable[Any],
        include_tree: IncludeNode,
        limits: IncludeLimitResolver | None = None,
        *,
        exclude: Iterable[tuple[str, str]] = (),
    ) -> list[dict[str, Any]]:
        """Return the deduplicated ``included`` resources for ``primaries``.

        The primary objects themselves are never included, whatever type they
        were rendered with; ``exclude`` adds further ``(type, id)`` keys.
        """
        if not include_tree:
            return []
        limits = limits or IncludeLimitResolver()
        primaries = list(primaries)
        skip = {id(instance) for instance in primaries}
        seen: dict[str, dict[str, Any]] = {}
        for instance in primaries:
            self._walk(instance, include_tree, limits, "", seen, skip)

        excluded = {f"{type_name}:{resource_id}" for type_name, resource_id in exclude}
        return [resource for key, resource in seen.items() if key not in excluded]

    def _walk(
        self,
        instance: Any,
        node: IncludeNode,
        limits: IncludeLimitResolver,
        prefix: str,
        seen: dict[str, dict[str, Any]],
        skip: set[int],
    ) -> None:
        relations = self.registry.loaded_relations(instance)
        for name, child in node.children.items():
            if name not in relations:
                continue
            path = f"{prefix}{name}"
            for related in self._related_items(relations[name], limits.resolve(path)):
                if id(related) not in skip:
                    resource = self.serializer.to_resource(
                        related,
                        relationships=self.resolver.resolve(
                            related, child, limits, path_prefix=f"{path}."
                        ),
                    )
                    key = self._key(resource)
                    if key is not None:
                        seen[key] = resource
                if child:
                    self._walk(related, child, limits, f"{path}.", seen, skip)

    def _related_items(self, related: Any, limit: int | None) -> list[Any]:
        if related is None:
            return []
        if is_to_many(related):
            return [item for item in take(related, limit) if item is not None]
        return [related]

    def _key(self, resource: dict[str, Any]) -> str | None:
        type_name = resource.get("type")
        resource_id = resource.get("id")
        if type_name is None or resource_id is None:
            return None
        return f"{type_name}:{resource_id}"
