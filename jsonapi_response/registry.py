"""Declared resource descriptors for domain classes.

Relations are declared up front (or read from a SQLAlchemy mapper at startup)
instead of being discovered by probing instances at request time. The registry
is populated once and only read afterwards.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Mapping

from sqlalchemy import inspect

from jsonapi_response.utils.inflection import infer_type

DEFAULT_TIMESTAMPS = ("created_at", "updated_at")


@dataclass(frozen=True)
class RelationDescriptor:
    """A named relation: to-many when ``many`` is set, to-one otherwise."""

    name: str
    many: bool = False
    target: Any = None


@dataclass(frozen=True)
class ResourceDescriptor:
    """JSON:API view of one domain class."""

    model: Any
    type: str
    primary_key: str = "id"
    columns: tuple[str, ...] = ()
    relations: Mapping[str, RelationDescriptor] = field(default_factory=dict)
    timestamps: tuple[str, ...] = DEFAULT_TIMESTAMPS
    uses_timestamps: bool = True
    hidden: frozenset[str] = frozenset()

    def schema_columns(self) -> list[str]:
        """Return persisted columns, primary key and timestamps, minus hidden columns."""
        columns = list(self.columns)
        if self.primary_key not in columns:
            columns.append(self.primary_key)
        if self.uses_timestamps:
            for column in self.timestamps:
                if column and column not in columns:
                    columns.append(column)
        return [column for column in columns if column and column not in self.hidden]


def _coerce_relations(
    relations: Mapping[str, Any] | Iterable[RelationDescriptor] | None,
) -> dict[str, RelationDescriptor]:
    if relations is None:
        return {}
    if isinstance(relations, Mapping):
        result: dict[str, RelationDescriptor] = {}
        for name, value in relations.items():
            if isinstance(value, RelationDescriptor):
                result[name] = value
            elif isinstance(value, bool):
                result[name] = RelationDescriptor(name, many=value)
            else:
                result[name] = RelationDescriptor(name, **dict(value))
        return result
    return {relation.name: relation for relation in relations}


class ResourceRegistry:
    """Map domain classes to their resource descriptors."""

    def __init__(self) -> None:
        self._descriptors: dict[type, ResourceDescriptor] = {}

    def register(
        self,
        model: type,
        *,
        type_: str | None = None,
        primary_key: str = "id",
        columns: Iterable[str] = (),
        relations: Mapping[str, Any] | Iterable[RelationDescriptor] | None = None,
        timestamps: Iterable[str] = DEFAULT_TIMESTAMPS,
        uses_timestamps: bool = True,
        hidden: Iterable[str] = (),
    ) -> ResourceDescriptor:
        """Declare ``model``.

        ``relations`` maps names to a :class:`RelationDescriptor`, to a bool
        (``True`` for to-many) or to keyword arguments for one.
        """
        descriptor = ResourceDescriptor(
            model=model,
            type=type_ or infer_type(model),
            primary_key=primary_key,
            columns=tuple(columns),
            relations=_coerce_relations(relations),
            timestamps=tuple(timestamps),
            uses_timestamps=uses_timestamps,
            hidden=frozenset(hidden),
        )
        return self.add(descriptor)

    def add(self, descriptor: ResourceDescriptor) -> ResourceDescriptor:
        """Store a prebuilt descriptor (see ``jsonapi_response.sqlalchemy.describe_model``)."""
        self._descriptors[descriptor.model] = descriptor
        return descriptor

    def get(self, model: Any) -> ResourceDescriptor:
        """Return the descriptor for a class or instance.

        Unregistered classes get a default descriptor that is not stored.
        """
        cls = model if isinstance(model, type) else type(model)
        for klass in cls.__mro__:
            descriptor = self._descriptors.get(klass)
            if descriptor is not None:
                return descriptor
        return ResourceDescriptor(model=cls, type=infer_type(cls))

    def __contains__(self, model: Any) -> bool:
        cls = model if isinstance(model, type) else type(model)
        return any(klass in self._descriptors for klass in cls.__mro__)

    def loaded_relations(self, instance: Any) -> dict[str, Any]:
        """Return the declared relations already materialized on ``instance``.

        Nothing is fetched: an unloaded relation is simply absent.
        """
        descriptor = self.get(instance)
        if not descriptor.relations:
            return {}
        state = inspect(instance, raiseerr=False)
        unloaded = getattr(state, "unloaded", None)
        values = getattr(instance, "__dict__", {})

        relations: dict[str, Any] = {}
        for name in descriptor.relations:
            if unloaded is not None:
                if name in unloaded:
                    continue
            elif name not in values:
                continue
            relations[name] = values.get(name)
        return relations

    def schema_allowlists(self, model: Any) -> dict[str, list[str]]:
        """Derive sort/filter/field/include allow-lists from a declared schema."""
        descriptor = self.get(model)
        columns = descriptor.schema_columns()
        return {
            "allowed_sorts": list(columns),
            "allowed_filters": list(columns),
            "allowed_fields": list(columns),
            "allowed_includes": list(descriptor.relations),
        }
