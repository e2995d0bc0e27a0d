"""Shared fixtures: plain domain classes and a populated registry."""

from __future__ import annotations

import datetime as dt

import pytest

from jsonapi_response.config import JSONAPISettings
from jsonapi_response.core.formatter import JSONAPIFormatter
from jsonapi_response.registry import ResourceRegistry


class Company:
    def __init__(self, id, name):
        self.id = id
        self.name = name


class Author:
    def __init__(self, id, name, company=None, **relations):
        self.id = id
        self.name = name
        if company is not None:
            self.company = company
        self.__dict__.update(relations)


class Comment:
    def __init__(self, id, body):
        self.id = id
        self.body = body


class Article:
    def __init__(self, id, title, created_at=None, **relations):
        self.id = id
        self.title = title
        self.created_at = created_at
        self.__dict__.update(relations)


@pytest.fixture
def registry():
    registry = ResourceRegistry()
    registry.register(Article, relations={"author": False, "comments": True})
    registry.register(Author, relations={"company": False, "articles": True})
    registry.register(Company)
    registry.register(Comment)
    return registry


@pytest.fixture
def settings():
    return JSONAPISettings()


@pytest.fixture
def formatter(settings, registry):
    return JSONAPIFormatter(settings, registry)


@pytest.fixture
def article():
    company = Company(1, "Acme")
    author = Author(7, "Ada", company=company)
    comments = [Comment(i, f"comment {i}") for i in (1, 2, 3)]
    return Article(
        1,
        "Hello",
        created_at=dt.datetime(2024, 1, 2, 3, 4, 5),
        author=author,
        comments=comments,
    )
