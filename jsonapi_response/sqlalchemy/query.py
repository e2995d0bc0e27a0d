"""SQLAlchemy query surface for the query applier."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from sqlalchemy import asc, desc, func, inspect, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import Session, load_only

from jsonapi_response.config import PaginationSettings
from jsonapi_response.pagination.base import LengthAwarePaginator, Paginator
from jsonapi_response.pagination.meta import resolve_page_number, resolve_page_size
from jsonapi_response.sqlalchemy.loading import primary_key_name, relationship_loader

log = logging.getLogger(__name__)


class SQLAlchemyQuery:
    """Build a ``select()`` for ``model`` one directive at a time.

    Unknown column or relation names are ignored. Execution methods are
    coroutines and accept both ``Session`` and ``AsyncSession``.
    """

    def __init__(
        self,
        model: Any,
        session: Session | AsyncSession | None = None,
        statement: Any | None = None,
    ) -> None:
        self.model = model
        self.session = session
        self.statement = statement if statement is not None else select(model)
        self._criteria: list[Any] = []

    @property
    def primary_key(self) -> str:
        return primary_key_name(self.model)

    def _column(self, field: str) -> Any | None:
        if field not in inspect(self.model).column_attrs:
            log.debug("%s has no column %s", self.model.__name__, field)
            return None
        return getattr(self.model, field)

    def order_by(self, field: str, direction: str) -> "SQLAlchemyQuery":
        column = self._column(field)
        if column is not None:
            self.statement = self.statement.order_by(desc(column) if direction == "desc" else asc(column))
        return self

    def where(self, field: str, value: Any) -> "SQLAlchemyQuery":
        column = self._column(field)
        if column is not None:
            self._add_criterion(column.is_(None) if value is None else column == value)
        return self

    def where_in(self, field: str, values: Sequence[Any]) -> "SQLAlchemyQuery":
        column = self._column(field)
        if column is not None:
            self._add_criterion(column.in_(list(values)))
        return self

    def eager_load(self, paths: Sequence[str]) -> "SQLAlchemyQuery":
        for path in paths:
            loader = relationship_loader(self.model, path)
            if loader is not None:
                self.statement = self.statement.options(loader)
        return self

    def select(self, columns: Sequence[str]) -> "SQLAlchemyQuery":
        attrs = [column for column in (self._column(name) for name in columns) if column is not None]
        if attrs:
            self.statement = self.statement.options(load_only(*attrs))
        return self

    def _add_criterion(self, criterion: Any) -> None:
        self._criteria.append(criterion)
        self.statement = self.statement.where(criterion)

    async def _execute(self, statement: Any) -> Any:
        if self.session is None:
            raise RuntimeError("SQLAlchemyQuery needs a session to execute.")
        if isinstance(self.session, AsyncSession):
            return await self.session.execute(statement)
        return self.session.execute(statement)

    async def all(self) -> list[Any]:
        """Return every matching instance."""
        result = await self._execute(self.statement)
        return list(result.scalars().all())

    async def first(self) -> Any | None:
        result = await self._execute(self.statement.limit(1))
        return result.scalars().first()

    async def count(self) -> int:
        statement = select(func.count()).select_from(self.model).where(*self._criteria)
        result = await self._execute(statement)
        return int(result.scalar_one())

    async def paginate(
        self,
        per_page: int,
        page: int = 1,
        *,
        path: str = "",
        query: Mapping[str, Any] | None = None,
        page_param: str = "page",
    ) -> LengthAwarePaginator:
        """Return one page of results together with the total count."""
        per_page = max(1, per_page)
        page = max(1, page)
        total = await self.count()
        result = await self._execute(self.statement.limit(per_page).offset((page - 1) * per_page))
        return LengthAwarePaginator(
            list(result.scalars().all()),
            total=total,
            per_page=per_page,
            current_page=page,
            path=path,
            query=query,
            page_param=page_param,
        )

    async def paginate_params(
        self,
        params: Mapping[str, Any],
        settings: PaginationSettings | None = None,
        *,
        path: str = "",
        query: Mapping[str, Any] | None = None,
    ) -> LengthAwarePaginator:
        """Paginate using ``page[number]``/``page[size]`` from parsed query parameters."""
        settings = settings or PaginationSettings()
        page = params.get(settings.page_param)
        return await self.paginate(
            resolve_page_size(page, settings),
            resolve_page_number(page),
            path=path,
            query=query,
            page_param=settings.page_param,
        )

    async def simple_paginate(
        self,
        per_page: int,
        page: int = 1,
        *,
        path: str = "",
        query: Mapping[str, Any] | None = None,
        page_param: str = "page",
    ) -> Paginator:
        """Return one page without counting; ``has_more`` comes from one extra row."""
        per_page = max(1, per_page)
        page = max(1, page)
        result = await self._execute(self.statement.limit(per_page + 1).offset((page - 1) * per_page))
        items = list(result.scalars().all())
        return Paginator(
            items[:per_page],
            per_page=per_page,
            current_page=page,
            has_more=len(items) > per_page,
            path=path,
            query=query,
            page_param=page_param,
        )
