"""The data-fetching collaborator the query applier drives."""

from __future__ import annotations

from typing import Any, Protocol, Sequence, runtime_checkable


@runtime_checkable
class QuerySurface(Protocol):
    """Query builder operations issued by :class:`QuerySpecApplier`.

    Implementations mutate themselves or return a new surface; the applier
    always continues with the returned value.
    """

    model: Any
    primary_key: str

    def order_by(self, field: str, direction: str) -> "QuerySurface": ...

    def where(self, field: str, value: Any) -> "QuerySurface": ...

    def where_in(self, field: str, values: Sequence[Any]) -> "QuerySurface": ...

    def eager_load(self, paths: Sequence[str]) -> "QuerySurface": ...

    def select(self, columns: Sequence[str]) -> "QuerySurface": ...


@runtime_checkable
class EagerLoader(Protocol):
    """Materialize missing relations on already-fetched objects."""

    def load_missing(self, targets: Sequence[Any], paths: Sequence[str]) -> None: ...
