"""Core JSON:API document assembly and error helpers."""

from .compound import CompoundDocumentAssembler
from .document import JSONAPIDocumentBuilder
from .errors import JSONAPIErrorBuilder
from .formatter import JSONAPIFormatter
from .includes import IncludeLimitResolver, IncludeNode, parse_include_tree

__all__ = [
    "CompoundDocumentAssembler",
    "IncludeLimitResolver",
    "IncludeNode",
    "JSONAPIDocumentBuilder",
    "JSONAPIErrorBuilder",
    "JSONAPIFormatter",
    "parse_include_tree",
]
