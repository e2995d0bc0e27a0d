"""SQLAlchemy helpers for JSON:API."""

from .loading import SQLAlchemyEagerLoader, describe_model
from .query import SQLAlchemyQuery

__all__ = ["SQLAlchemyEagerLoader", "SQLAlchemyQuery", "describe_model"]
