from jsonapi_response.core.compound import CompoundDocumentAssembler
from jsonapi_response.core.includes import IncludeLimitResolver, parse_include_tree
from jsonapi_response.serializers.base import JSONAPISerializer
from jsonapi_response.serializers.relationships import RelationshipResolver

from .conftest import Article, Author, Company


def keys(resources):
    return [(resource["type"], resource["id"]) for resource in resources]


def test_nested_include_with_per_path_limit(formatter, article):
    document = formatter.document(
        article,
        params={"include": "author.company,comments", "max_include": {"comments": "1"}},
    )
    assert len(document["data"]["relationships"]["comments"]["data"]) == 1
    assert keys(document["included"]) == [("authors", "7"), ("companies", "1"), ("comments", "1")]

    author = document["included"][0]
    assert author["relationships"]["company"]["data"] == {"type": "companies", "id": "1"}
    assert "relationships" not in document["included"][1]


def test_shared_related_resource_is_included_once(formatter):
    author = Author(7, "Ada")
    articles = [Article(1, "A", author=author), Article(2, "B", author=author)]
    document = formatter.document(articles, params={"include": "author"})
    assert keys(document["included"]) == [("authors", "7")]
    assert [item["relationships"]["author"]["data"]["id"] for item in document["data"]] == ["7", "7"]


def test_cycles_stop_at_requested_depth(formatter):
    author = Author(7, "Ada")
    first = Article(1, "A", author=author)
    second = Article(2, "B")
    author.articles = [first, second]

    document = formatter.document(first, params={"include": "author.articles"})
    assert keys(document["included"]) == [("authors", "7"), ("articles", "2")]


def test_no_included_member_without_include(formatter, article):
    assert "included" not in formatter.document(article)


def test_compound_documents_disabled(registry, article):
    from jsonapi_response.config import JSONAPISettings
    from jsonapi_response.core.formatter import JSONAPIFormatter

    formatter = JSONAPIFormatter(JSONAPISettings(include_compound_documents=False), registry)
    assert "included" not in formatter.document(article, params={"include": "author"})


def test_assembler_skips_resources_without_id(registry):
    resolver = RelationshipResolver(JSONAPISerializer(registry=registry))
    assembler = CompoundDocumentAssembler(resolver)
    author = Author(7, "Ada", company=Company(None, "Unsaved"))
    included = assembler.assemble(
        [author], parse_include_tree("company"), IncludeLimitResolver(), exclude=[("authors", "7")]
    )
    assert included == []


def test_primary_reached_again_is_not_included_under_a_type_override(formatter):
    author = Author(7, "Ada")
    first = Article(1, "A", author=author)
    second = Article(2, "B", author=author)
    author.articles = [first, second]

    document = formatter.document(first, "posts", params={"include": "author.articles"})
    assert document["data"]["type"] == "posts"
    assert keys(document["included"]) == [("authors", "7"), ("articles", "2")]

    document = formatter.document([first, second], "posts", params={"include": "author.articles"})
    assert keys(document["included"]) == [("authors", "7")]
