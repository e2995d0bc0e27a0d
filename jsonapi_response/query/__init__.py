"""Query directive handling."""

from .applier import QuerySpecApplier
from .base import EagerLoader, QuerySurface

__all__ = ["EagerLoader", "QuerySpecApplier", "QuerySurface"]
