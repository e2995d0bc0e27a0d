import pytest
from pydantic import ValidationError

from jsonapi_response.config import JSONAPISettings


def test_defaults():
    settings = JSONAPISettings()
    assert settings.content_type == "application/vnd.api+json"
    assert settings.transform_keys is True
    assert settings.include_jsonapi is False
    assert settings.query.allow_all_filters is True
    assert settings.query.allow_all_sorts is False
    assert settings.pagination.meta_key == "page"
    assert settings.method_override.apply_to_prefixes == ["/api"]


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("JSONAPI_TRANSFORM_KEYS", "false")
    monkeypatch.setenv("JSONAPI_QUERY__ALLOW_ALL_SORTS", "true")
    monkeypatch.setenv("JSONAPI_PAGINATION__META_KEY", "pagination")
    settings = JSONAPISettings()
    assert settings.transform_keys is False
    assert settings.query.allow_all_sorts is True
    assert settings.pagination.meta_key == "pagination"


def test_settings_are_immutable():
    settings = JSONAPISettings()
    with pytest.raises(ValidationError):
        settings.transform_keys = False
    with pytest.raises(ValidationError):
        settings.query.allow_all_sorts = True


def test_with_query_returns_a_copy():
    settings = JSONAPISettings()
    updated = settings.with_query(allowed_sorts=["name"])
    assert updated.query.allowed_sorts == ["name"]
    assert settings.query.allowed_sorts == []
    assert settings.with_query() is settings
