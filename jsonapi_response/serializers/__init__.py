"""Resource and relationship serialization."""

from .base import JSONAPISerializer, format_date
from .relationships import RelationshipResolver

__all__ = ["JSONAPISerializer", "RelationshipResolver", "format_date"]
