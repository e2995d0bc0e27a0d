from jsonapi_response.config import JSONAPISettings
from jsonapi_response.core.document import JSONAPIDocumentBuilder


def test_data_and_errors_are_exclusive():
    builder = JSONAPIDocumentBuilder()
    document = builder.with_data({"type": "articles"}).with_errors([{"title": "x"}]).to_dict()
    assert "data" not in document
    document = builder.with_data([]).to_dict()
    assert "errors" not in document
    assert document["data"] == []


def test_meta_and_links_merge():
    document = (
        JSONAPIDocumentBuilder()
        .with_data(None)
        .with_meta({"total_count": 1})
        .with_meta({"request_id": "r"})
        .with_links({"self": "/a"})
        .with_links({"next": "/b"})
        .to_dict()
    )
    assert document["meta"] == {"totalCount": 1, "requestId": "r"}
    assert document["links"] == {"self": "/a", "next": "/b"}


def test_jsonapi_member_follows_settings():
    settings = JSONAPISettings(include_jsonapi=True, jsonapi={"meta": {"api_version": "2"}})
    document = JSONAPIDocumentBuilder(settings).with_data(None).to_dict()
    assert document["jsonapi"] == {"version": "1.1", "meta": {"apiVersion": "2"}}

    document = JSONAPIDocumentBuilder().with_data(None).with_jsonapi().to_dict()
    assert "jsonapi" not in document


def test_build_error():
    assert JSONAPIDocumentBuilder().build_error([{"title": "x"}]) == {"errors": [{"title": "x"}]}
