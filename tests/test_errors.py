import uuid

import pytest

from jsonapi_response.config import JSONAPISettings
from jsonapi_response.core.errors import (
    JSONAPIError,
    JSONAPIErrorBuilder,
    NotFoundError,
    ValidationError,
)


def test_normalize_backfills_every_member():
    [error] = JSONAPIErrorBuilder().normalize([{"title": None}])
    uuid.UUID(error["id"])
    assert error["status"] == "500"
    assert error["title"] == "Error"
    assert error["code"] == "ERROR"
    assert error["detail"] is None
    assert error["links"] == {"about": None, "type": None}
    assert error["source"] == {"pointer": "/data"}
    assert error["meta"] == {}


def test_normalize_keeps_given_members():
    error = {"id": "e1", "status": 404, "title": "Not Found", "detail": "gone", "meta": {"a": 1}}
    [normalized] = JSONAPIErrorBuilder().normalize([error])
    assert normalized["id"] == "e1"
    assert normalized["status"] == "404"
    assert normalized["detail"] == "gone"
    assert normalized["meta"] == {"a": 1}


def test_defaults_are_not_shared_between_errors():
    first, second = JSONAPIErrorBuilder().normalize([{}, {}])
    first["source"]["pointer"] = "/changed"
    assert second["source"] == {"pointer": "/data"}
    assert first["id"] != second["id"]


def test_non_mapping_entries_pass_through():
    assert JSONAPIErrorBuilder().normalize(["boom", {"title": "x"}])[0] == "boom"


def test_strict_defaulting_off():
    settings = JSONAPISettings(errors={"include_all_members": False})
    errors = [{"title": None}]
    assert JSONAPIErrorBuilder(settings).normalize(errors) == [{"title": None}]


def test_error_object_omits_empty_members():
    error = JSONAPIErrorBuilder().error_object(400, "Bad Request", meta={})
    assert error == {"status": "400", "title": "Bad Request"}


def test_validation_errors():
    errors = JSONAPIErrorBuilder().validation_errors({"title": ["required", "too short"], "email": "invalid"})
    assert [error["detail"] for error in errors] == ["required", "too short", "invalid"]
    assert errors[0] == {
        "status": "422",
        "title": "Validation Error",
        "detail": "required",
        "code": "VALIDATION_ERROR",
        "source": {"pointer": "/data/attributes/title"},
        "meta": {"field": "title"},
    }


def test_error_document():
    document = JSONAPIErrorBuilder().error_document([{"status": "400", "title": "Bad"}])
    assert list(document) == ["errors"]
    assert document["errors"][0]["status"] == "400"


def test_exceptions():
    error = NotFoundError("Article 9 not found")
    assert error.status_code == 404
    assert error.errors == [{"status": "404", "title": "Not Found", "detail": "Article 9 not found"}]

    error = ValidationError({"email": "invalid"})
    assert error.status_code == 422
    assert error.errors[0]["source"] == {"pointer": "/data/attributes/email"}

    error = JSONAPIError("conflict", status_code=409, code="CONFLICT")
    assert error.errors == [{"status": "409", "title": "Error", "detail": "conflict", "code": "CONFLICT"}]

    with pytest.raises(JSONAPIError):
        raise ValidationError(detail="bad input")
