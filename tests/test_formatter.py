import json

from jsonapi_response.config import JSONAPISettings
from jsonapi_response.core.formatter import JSONAPIFormatter, is_resource_object

from .conftest import Article


class RecordingLoader:
    def __init__(self):
        self.calls = []

    def load_missing(self, targets, paths):
        self.calls.append((list(targets), list(paths)))


def included_types(document):
    return [resource["type"] for resource in document.get("included", [])]


def test_is_resource_object(article):
    assert is_resource_object(article)
    for value in (None, "x", 1, 1.5, {"a": 1}, [article], b"x"):
        assert not is_resource_object(value)


def test_single_resource_document(formatter, article):
    document = formatter.document(article)
    assert document["links"] == {"self": "/articles/1"}
    assert document["data"]["type"] == "articles"
    assert document["data"]["attributes"]["createdAt"] == "2024-01-02T03:04:05"
    assert set(document["data"]["relationships"]) == {"author", "comments"}


def test_request_url_is_the_self_link(formatter, article):
    document = formatter.document(article, url="http://testserver/api/articles/1?include=author")
    assert document["links"]["self"] == "http://testserver/api/articles/1?include=author"


def test_scalar_and_empty_payloads(formatter):
    assert formatter.document(None) == {"data": None}
    assert formatter.document("ok") == {"data": "ok"}
    assert formatter.document(3) == {"data": 3}
    assert formatter.document([]) == {"data": []}


def test_mappings(formatter):
    document = {"data": [], "meta": {"total": 0}}
    assert formatter.document(document) == document
    assert formatter.document({"user_name": "ada"}, url="/me") == {
        "data": {"userName": "ada"},
        "links": {"self": "/me"},
    }


def test_collection_keeps_non_object_items(formatter):
    document = formatter.document([Article(1, "A"), {"type": "raw", "id": "2"}])
    assert document["data"][1] == {"type": "raw", "id": "2"}
    assert document["data"][0]["id"] == "1"


def test_shaping_follows_requested_includes_by_default(registry, article):
    settings = JSONAPISettings(query={"allowed_includes": ["author"]})
    document = JSONAPIFormatter(settings, registry).document(article, params={"include": "author,comments"})
    assert included_types(document) == ["authors", "comments", "comments", "comments"]


def test_shaping_can_be_restricted_to_allowed_includes(registry, article):
    settings = JSONAPISettings(
        query={"allowed_includes": ["author"], "restrict_document_includes": True}
    )
    document = JSONAPIFormatter(settings, registry).document(article, params={"include": "author,comments"})
    assert included_types(document) == ["authors"]


def test_only_allowed_includes_are_eager_loaded(registry, article):
    loader = RecordingLoader()
    settings = JSONAPISettings(query={"allowed_includes": ["author", "author.company"]})
    formatter = JSONAPIFormatter(settings, registry, loader)
    formatter.document(article, params={"include": "author.company,comments"})
    assert loader.calls == [([article], ["author", "author.company"])]


def test_eager_loading_can_be_disabled(registry, article):
    loader = RecordingLoader()
    settings = JSONAPISettings(eager_load_includes=False, query={"allow_all_includes": True})
    JSONAPIFormatter(settings, registry, loader).document(article, params={"include": "author"})
    assert loader.calls == []


def test_include_parameter_given_as_mapping_is_ignored(formatter, article):
    assert "included" not in formatter.document(article, params={"include": {"a": "b"}})


def test_no_content_response_has_no_body(formatter, article):
    response = formatter.response(article, status=204)
    assert response.status_code == 204
    assert response.body == b""


def test_created_response_sets_location(formatter, article):
    response = formatter.response(article, status=201)
    assert response.status_code == 201
    assert response.headers["location"] == "/articles/1"
    assert response.headers["content-type"] == "application/vnd.api+json"
    assert json.loads(response.body)["data"]["id"] == "1"


def test_created_response_keeps_explicit_location(formatter, article):
    response = formatter.response(article, status=201, headers={"Location": "/elsewhere"})
    assert response.headers["location"] == "/elsewhere"


def test_error_responses(formatter):
    response = formatter.error_response([{"title": "Bad Request", "status": "400"}])
    body = json.loads(response.body)
    assert response.status_code == 400
    assert body["errors"][0]["title"] == "Bad Request"
    assert "data" not in body

    response = formatter.validation_error_response({"title": ["required"]})
    body = json.loads(response.body)
    assert response.status_code == 422
    assert body["errors"][0]["source"] == {"pointer": "/data/attributes/title"}


def test_primary_resources_are_not_repeated_in_included(registry):
    from .conftest import Author

    author = Author(7, "Ada")
    first = Article(1, "A", author=author)
    second = Article(2, "B", author=author)
    author.articles = [first, second]
    document = JSONAPIFormatter(JSONAPISettings(), registry).document(
        [first], params={"include": "author.articles"}
    )
    keys = [(resource["type"], resource["id"]) for resource in document["included"]]
    assert keys == [("authors", "7"), ("articles", "2")]
