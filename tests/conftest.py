"""Shared pytest fixtures for the relation engine tests."""

import pytest

from movie_db import movie_database
from rel_engine import Relation


@pytest.fixture
def db():
    return movie_database()


@pytest.fixture
def movie(db) -> Relation:
    return db["movie"]


@pytest.fixture
def cinema(db) -> Relation:
    return db["cinema"]


@pytest.fixture
def studio(db) -> Relation:
    return db["studio"]


@pytest.fixture
def movie_star(db) -> Relation:
    return db["movieStar"]


@pytest.fixture
def stars_in(db) -> Relation:
    return db["starsIn"]


@pytest.fixture
def movie_no() -> Relation:
    """movie keyed on (title, year) with a studioNo foreign key."""
    rel = Relation.create("movie", "title year studioNo", "String Integer Integer", "title year")
    rel.insert("Star_Wars", 1977, 12345)
    rel.insert("Jaws", 1975, 555)
    return rel


@pytest.fixture
def studio_no() -> Relation:
    rel = Relation.create("studio", "studioNo studioName", "Integer String", "studioNo")
    rel.insert(12345, "Fox")
    rel.insert(777, "Universal")
    return rel
