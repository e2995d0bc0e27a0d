import pytest

from jsonapi_response.core.includes import (
    IncludeLimitResolver,
    normalize_include_limit,
    parse_include_tree,
    split_include_paths,
)


def test_parse_include_tree_merges_and_drops_empty_entries():
    tree = parse_include_tree("author.company, comments,,author, .tags.")
    assert tree.roots() == ["author", "comments", "tags"]
    assert tree.paths() == ["author", "author.company", "comments", "tags"]
    assert tree.leaf_paths() == ["author.company", "comments", "tags"]


def test_parse_include_tree_empty():
    assert not parse_include_tree(None)
    assert not parse_include_tree("")
    assert not parse_include_tree(" , ")


def test_split_include_paths_accepts_iterables():
    assert split_include_paths(["a.b", "a.b", "c"]) == ["a.b", "c"]


def test_prune_keeps_ancestors():
    tree = parse_include_tree("author.company,comments")
    pruned = tree.prune(lambda path: path == "author.company")
    assert pruned.paths() == ["author", "author.company"]


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        (True, None),
        (0, None),
        (-3, None),
        ("0", None),
        ("abc", None),
        ("nan", None),
        (2, 2),
        ("2", 2),
        (" 3 ", 3),
        (2.9, 2),
        ("2.9", 2),
    ],
)
def test_normalize_include_limit(value, expected):
    assert normalize_include_limit(value) == expected


@pytest.mark.parametrize("value", ["1e1000000", "-1e3000000", "9" * 40, "Infinity", float("inf")])
def test_huge_limits_mean_unlimited(value):
    assert normalize_include_limit(value) is None
    assert IncludeLimitResolver({"comments": value}).resolve("comments") is None


def test_limit_at_upper_bound():
    assert normalize_include_limit("1e18") == 10**18


def test_scalar_limit_applies_to_every_path():
    resolver = IncludeLimitResolver("2", default=10)
    assert resolver.resolve("comments") == 2
    assert resolver.resolve("author.company") == 2


def test_limit_resolution_order():
    spec = {"author.company": 3, "author": {"articles": 5}, "comments": "1"}
    resolver = IncludeLimitResolver(spec, default=9)
    assert resolver.resolve("author.company") == 3
    assert resolver.resolve("author.articles") == 5
    assert resolver.resolve("comments") == 1
    assert resolver.resolve("article.comments") == 1
    assert resolver.resolve("tags") == 9


def test_exact_key_with_mapping_value_falls_through():
    resolver = IncludeLimitResolver({"author": {"company": 2}}, default=4)
    assert resolver.resolve("author") == 4
    assert resolver.resolve("author.company") == 2


def test_no_spec_and_no_default_means_unlimited():
    assert IncludeLimitResolver().resolve("comments") is None
    assert IncludeLimitResolver({"comments": 0}).resolve("comments") is None
