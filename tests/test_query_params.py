from starlette.datastructures import QueryParams

from jsonapi_response.utils.query_params import parse_query_params, split_csv


def test_bracketed_keys_nest():
    params = QueryParams(
        "include=author&filter[status][]=a&filter[status][]=b&fields[articles]=title"
        "&page[number]=2&max_include[comments]=1"
    )
    assert parse_query_params(params) == {
        "include": "author",
        "filter": {"status": ["a", "b"]},
        "fields": {"articles": "title"},
        "page": {"number": "2"},
        "max_include": {"comments": "1"},
    }


def test_malformed_keys_are_kept_verbatim():
    assert parse_query_params({"filter[a": "1", "[x]": "2"}) == {"filter[a": "1", "[x]": "2"}


def test_later_values_win():
    assert parse_query_params([("sort", "a"), ("sort", "b")]) == {"sort": "b"}


def test_split_csv():
    assert split_csv(" a, ,b,") == ["a", "b"]
