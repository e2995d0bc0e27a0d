"""JSON:API error objects, normalization and exceptions."""

from __future__ import annotations

import copy
import logging
import uuid
from http import HTTPStatus
from typing import Any, Iterable, Mapping

from jsonapi_response.config import JSONAPISettings

log = logging.getLogger(__name__)


def _blank(value: Any) -> bool:
    return value is None or value == ""


class JSONAPIErrorBuilder:
    """Build JSON:API error objects and error documents."""

    def __init__(self, settings: JSONAPISettings | None = None) -> None:
        self.settings = settings or JSONAPISettings()

    def error_object(
        self,
        status: str | int,
        title: str,
        *,
        detail: str | None = None,
        code: str | None = None,
        source: dict[str, Any] | None = None,
        meta: dict[str, Any] | None = None,
        id: str | None = None,
        links: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Return a JSON:API error object; optional members only when given."""
        error: dict[str, Any] = {"status": str(status), "title": title}
        if id is not None:
            error["id"] = id
        if detail is not None:
            error["detail"] = detail
        if code is not None:
            error["code"] = code
        if links is not None:
            error["links"] = links
        if source is not None:
            error["source"] = source
        if meta:
            error["meta"] = meta
        return error

    def validation_errors(
        self,
        messages: Mapping[str, Any],
        *,
        title: str = "Validation Error",
        code: str = "VALIDATION_ERROR",
        status: int = HTTPStatus.UNPROCESSABLE_ENTITY.value,
    ) -> list[dict[str, Any]]:
        """Return one error object per message of a field-keyed message collection."""
        errors = []
        for field, field_messages in messages.items():
            if not isinstance(field_messages, (list, tuple)):
                field_messages = [field_messages]
            for message in field_messages:
                errors.append(
                    self.error_object(
                        status,
                        title,
                        detail=message if isinstance(message, str) else None,
                        code=code,
                        source={"pointer": f"/data/attributes/{field}"},
                        meta={"field": field},
                    )
                )
        return errors

    def normalize(self, errors: Iterable[Any]) -> list[Any]:
        """Backfill every member of each error object when strict defaulting is on.

        Entries that are not mappings are passed through unchanged.
        """
        errors = list(errors)
        defaults = self.settings.errors
        if not defaults.include_all_members:
            return errors

        normalized_errors: list[Any] = []
        for error in errors:
            if not isinstance(error, Mapping):
                normalized_errors.append(error)
                continue
            normalized = dict(error)
            if _blank(normalized.get("id")):
                normalized["id"] = str(uuid.uuid4())
            if _blank(normalized.get("status")):
                normalized["status"] = str(defaults.default_status)
            else:
                normalized["status"] = str(normalized["status"])
            if _blank(normalized.get("title")):
                normalized["title"] = str(defaults.default_title)

            for member in ("code", "detail", "links", "source", "meta"):
                if member not in normalized:
                    normalized[member] = copy.deepcopy(getattr(defaults, f"default_{member}"))
            normalized_errors.append(normalized)
        return normalized_errors

    def error_document(self, errors: Iterable[Any]) -> dict[str, Any]:
        """Return a JSON:API document with a normalized errors array."""
        return {"errors": self.normalize(errors)}


class JSONAPIError(Exception):
    """Base error rendered as a JSON:API error document.

    ``errors`` holds the error objects; ``status_code`` the HTTP status.
    """

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR.value
    title = "Error"

    def __init__(
        self,
        detail: str = "",
        *,
        status_code: int | None = None,
        errors: list[dict[str, Any]] | None = None,
        code: str | None = None,
    ) -> None:
        super().__init__(detail)
        if status_code is not None:
            self.status_code = status_code
        self.detail = detail
        if errors is None:
            error: dict[str, Any] = {"status": str(self.status_code), "title": self.title}
            if detail:
                error["detail"] = detail
            if code is not None:
                error["code"] = code
            errors = [error]
        self.errors = errors


class NotFoundError(JSONAPIError):
    """Raised when a requested resource does not exist."""

    status_code = HTTPStatus.NOT_FOUND.value
    title = "Not Found"

    def __init__(self, detail: str = "", **kwargs: Any) -> None:
        super().__init__(detail, **kwargs)
        log.info("Not found: %s", detail)


class ValidationError(JSONAPIError):
    """Raised for invalid client input, built from field-keyed messages."""

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY.value
    title = "Validation Error"

    def __init__(
        self,
        messages: Mapping[str, Any] | None = None,
        *,
        detail: str = "",
        status_code: int | None = None,
        code: str = "VALIDATION_ERROR",
    ) -> None:
        errors = None
        status = status_code or self.status_code
        if messages:
            errors = JSONAPIErrorBuilder().validation_errors(
                messages, title=self.title, code=code, status=status
            )
        super().__init__(detail, status_code=status, errors=errors, code=code)
        self.messages = dict(messages or {})
        log.warning("ValidationError: %s", self.messages or detail)
