"""Resource object serialization."""

from __future__ import annotations

import datetime as dt
from typing import Any, Iterable, Mapping

from jsonapi_response.config import JSONAPISettings
from jsonapi_response.registry import ResourceRegistry
from jsonapi_response.utils.inflection import dasherize
from jsonapi_response.utils.keys import transform_keys


def format_date(value: Any) -> Any:
    """Render a timestamp value as ISO-8601.

    Date-only strings pass through verbatim, strings that do not parse are
    returned unchanged and empty values become ``None``.
    """
    if isinstance(value, (dt.datetime, dt.date)):
        return value.isoformat()
    if isinstance(value, str):
        if value == "":
            return None
        try:
            dt.date.fromisoformat(value)
            return value
        except ValueError:
            pass
        try:
            return dt.datetime.fromisoformat(value).isoformat()
        except ValueError:
            return value
    if value is None:
        return None
    return value


class JSONAPISerializer:
    """Serialize domain objects into JSON:API resource objects."""

    def __init__(
        self,
        settings: JSONAPISettings | None = None,
        registry: ResourceRegistry | None = None,
    ) -> None:
        self.settings = settings or JSONAPISettings()
        self.registry = registry or ResourceRegistry()

    def to_resource(
        self,
        instance: Any,
        *,
        type_: str | None = None,
        attributes: Mapping[str, Any] | None = None,
        relationships: Mapping[str, Any] | None = None,
        links: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Serialize a domain object into a JSON:API resource object."""
        type_name = type_ or self.get_type(instance)
        resource_id = self.get_id(instance)
        if attributes is None:
            attributes = self.get_attributes(instance)
        return self.resource(
            type_name,
            resource_id,
            dict(attributes),
            relationships=relationships,
            links=links,
        )

    def resource(
        self,
        type_name: str,
        resource_id: str | None,
        attributes: dict[str, Any],
        *,
        relationships: Mapping[str, Any] | None = None,
        links: Mapping[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Assemble a resource object from its members."""
        resource: dict[str, Any] = {"type": type_name}
        if resource_id is not None:
            resource["id"] = resource_id
        resource["attributes"] = attributes

        resource_links = dict(links or {})
        if self.settings.resource_links and resource_id is not None:
            resource_links = {"self": self.resource_url(type_name, resource_id), **resource_links}
        if resource_links:
            resource["links"] = resource_links

        if relationships:
            resource["relationships"] = self._relationships_object(
                type_name, resource_id, relationships
            )
        return self.transform(resource)

    def transform(self, payload: Any) -> Any:
        """Apply the configured key transform."""
        if not self.settings.transform_keys:
            return payload
        return transform_keys(payload, self.settings.transform_recursive)

    def get_type(self, instance: Any) -> str:
        return self.registry.get(instance).type

    def get_id(self, instance: Any) -> str | None:
        """Return the primary key as a string, ``None`` when not yet persisted."""
        descriptor = self.registry.get(instance)
        value = getattr(instance, descriptor.primary_key, None)
        return None if value is None else str(value)

    def get_attributes(self, instance: Any) -> dict[str, Any]:
        """Snapshot the instance's own scalar fields.

        The primary key, a literal ``id``, hidden fields and declared relations
        are left out.
        """
        descriptor = self.registry.get(instance)
        values = getattr(instance, "__dict__", {})
        excluded = {descriptor.primary_key, "id", *descriptor.hidden, *descriptor.relations}

        if descriptor.columns:
            keys = [key for key in descriptor.columns if key in values]
        else:
            keys = [key for key in values if not key.startswith("_")]

        attributes: dict[str, Any] = {}
        for key in keys:
            if key in excluded:
                continue
            value = values[key]
            if key in descriptor.timestamps:
                value = format_date(value)
            elif isinstance(value, (dt.datetime, dt.date)):
                value = value.isoformat()
            attributes[key] = value
        return attributes

    def identifier(self, instance: Any) -> dict[str, Any]:
        """Return the resource identifier object of ``instance``."""
        return {"type": self.get_type(instance), "id": self.get_id(instance)}

    def resource_url(self, type_name: str, resource_id: str) -> str:
        base = self.settings.base_url.rstrip("/")
        return f"{base}/{dasherize(type_name)}/{resource_id}"

    def relationship_links(
        self, type_name: str, resource_id: str | None, relationship: str
    ) -> dict[str, str]:
        if resource_id is None:
            return {}
        resource_path = self.resource_url(type_name, resource_id).rstrip("/")
        return {
            "self": f"{resource_path}/relationships/{relationship}",
            "related": f"{resource_path}/{relationship}",
        }

    def _relationships_object(
        self, type_name: str, resource_id: str | None, relationships: Mapping[str, Any]
    ) -> dict[str, Any]:
        result: dict[str, Any] = {}
        for name, payload in relationships.items():
            relation = dict(payload) if isinstance(payload, Mapping) and (
                "data" in payload or "links" in payload or "meta" in payload
            ) else {"data": payload}
            if self.settings.relationship_links and resource_id is not None:
                relation["links"] = {
                    **self.relationship_links(type_name, resource_id, str(name)),
                    **(relation.get("links") or {}),
                }
            result[name] = relation
        return result
