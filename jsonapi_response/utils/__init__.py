"""Utility helpers for JSON:API parsing and naming."""

from .keys import camelize, transform_keys
from .query_params import parse_query_params

__all__ = ["camelize", "parse_query_params", "transform_keys"]
