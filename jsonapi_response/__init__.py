"""JSON:API document formatting and query directives for FastAPI/SQLAlchemy apps."""

from .config import JSONAPISettings
from .core.document import JSONAPIDocumentBuilder
from .core.errors import JSONAPIError, JSONAPIErrorBuilder, NotFoundError, ValidationError
from .core.formatter import JSONAPIFormatter
from .query.applier import QuerySpecApplier
from .registry import RelationDescriptor, ResourceRegistry
from .responses import JSONAPIResponse
from .serializers.base import JSONAPISerializer

__all__ = [
    "JSONAPIDocumentBuilder",
    "JSONAPIError",
    "JSONAPIErrorBuilder",
    "JSONAPIFormatter",
    "JSONAPIResponse",
    "JSONAPISerializer",
    "JSONAPISettings",
    "NotFoundError",
    "QuerySpecApplier",
    "RelationDescriptor",
    "ResourceRegistry",
    "ValidationError",
]
