"""Pagination for JSON:API."""

from .base import LengthAwarePaginator, Paginator
from .meta import PaginationMetaBuilder

__all__ = ["LengthAwarePaginator", "PaginationMetaBuilder", "Paginator"]
