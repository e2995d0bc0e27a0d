"""Middleware for JSON:API."""

from .error_handler import ErrorHandlerMiddleware
from .method_override import MethodOverrideMiddleware

__all__ = ["ErrorHandlerMiddleware", "MethodOverrideMiddleware"]
