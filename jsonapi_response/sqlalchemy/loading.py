"""SQLAlchemy relation descriptors and eager loading."""

from __future__ import annotations

import logging
from typing import Any, Iterable, Sequence

from sqlalchemy import inspect, select, tuple_
from sqlalchemy.orm import Session, joinedload, selectinload

from jsonapi_response.registry import DEFAULT_TIMESTAMPS, RelationDescriptor, ResourceDescriptor
from jsonapi_response.utils.inflection import infer_type

log = logging.getLogger(__name__)


def primary_key_name(model: Any) -> str:
    mapper = inspect(model)
    return mapper.get_property_by_column(mapper.primary_key[0]).key


def identity_criterion(model: Any, identities: Sequence[tuple]) -> Any:
    """Match rows by identity tuples; composite keys compare as row values."""
    mapper = inspect(model)
    columns = [getattr(model, mapper.get_property_by_column(column).key) for column in mapper.primary_key]
    if len(columns) == 1:
        return columns[0].in_([identity[0] for identity in identities])
    return tuple_(*columns).in_([tuple(identity) for identity in identities])


def describe_model(
    model: Any,
    *,
    type_: str | None = None,
    hidden: Iterable[str] = (),
    timestamps: Iterable[str] = DEFAULT_TIMESTAMPS,
) -> ResourceDescriptor:
    """Build a resource descriptor from a mapped class, once at startup."""
    mapper = inspect(model)
    columns = tuple(attr.key for attr in mapper.column_attrs)
    present_timestamps = tuple(column for column in timestamps if column in columns)
    relations = {
        relationship.key: RelationDescriptor(
            relationship.key,
            many=bool(relationship.uselist),
            target=relationship.mapper.class_,
        )
        for relationship in mapper.relationships
    }
    return ResourceDescriptor(
        model=model,
        type=type_ or getattr(model, "__jsonapi_type__", None) or infer_type(model),
        primary_key=primary_key_name(model),
        columns=columns,
        relations=relations,
        timestamps=present_timestamps,
        uses_timestamps=bool(present_timestamps),
        hidden=frozenset(hidden) | frozenset(getattr(model, "__jsonapi_hidden__", ())),
    )


def relationship_loader(model: Any, path: str) -> Any | None:
    """Return a chained loader option for a dotted relationship path.

    To-many hops use ``selectinload``, to-one hops ``joinedload``. Unknown
    relation names yield ``None``.
    """
    current_model = model
    loader = None
    for relationship_name in [part for part in path.split(".") if part]:
        mapper = inspect(current_model)
        if relationship_name not in mapper.relationships:
            log.debug("%s has no relationship %s", current_model.__name__, relationship_name)
            return None
        rel_property = mapper.relationships[relationship_name]
        relationship_attr = getattr(current_model, relationship_name)
        if loader is None:
            loader = selectinload(relationship_attr) if rel_property.uselist else joinedload(relationship_attr)
        elif rel_property.uselist:
            loader = loader.selectinload(relationship_attr)
        else:
            loader = loader.joinedload(relationship_attr)
        current_model = rel_property.mapper.class_
    return loader


class SQLAlchemyEagerLoader:
    """Load missing relations onto instances that were already fetched.

    Attributes that are already loaded are left untouched; one query is issued
    per mapped class.
    """

    def __init__(self, session: Session) -> None:
        self.session = session

    def load_missing(self, targets: Sequence[Any], paths: Sequence[str]) -> None:
        by_model: dict[type, list[Any]] = {}
        for target in targets:
            state = inspect(target, raiseerr=False)
            if state is None or not getattr(state, "identity", None):
                continue
            by_model.setdefault(type(target), []).append(state.identity)

        for model, ids in by_model.items():
            options = [loader for loader in (relationship_loader(model, path) for path in paths) if loader is not None]
            if not options:
                continue
            statement = select(model).where(identity_criterion(model, ids)).options(*options)
            self.session.execute(statement).scalars().all()
