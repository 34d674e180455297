"""Tests for relation records, JSON text and save/load."""

from __future__ import annotations

import json

import pytest

import rel_config
from rel_engine import (
    Relation,
    SerializationError,
    deserialize,
    dumps,
    load,
    loads,
    save,
    serialize,
)


def _assert_same(a: Relation, b: Relation):
    assert a.schema == b.schema
    assert a.rows == b.rows
    assert a.index.kind == b.index.kind
    assert list(a.index.items()) == list(b.index.items())


class TestRecord:
    def test_record_layout(self, studio):
        record = serialize(studio)
        assert record["version"] == rel_config.SERIALIZATION_VERSION
        assert record["domains"] == ["String", "String", "Integer"]
        assert record["key"] == ["name"]
        assert record["index"] == "tree"
        assert record["rows"][0] == ["Fox", "Los_Angeles", 7777]

    def test_reproduces_relation(self, movie):
        _assert_same(movie, deserialize(serialize(movie)))

    def test_index_kind_preserved(self):
        rel = Relation.create("r", "a b", "Integer Double", "a", index="hash")
        rel.insert(2, 0.5)
        rel.insert(1, 1.5)
        _assert_same(rel, deserialize(serialize(rel)))

    def test_missing_fields(self):
        with pytest.raises(SerializationError):
            deserialize({"name": "r", "attributes": ["a"]})

    def test_not_a_record(self):
        with pytest.raises(SerializationError):
            deserialize(["r"])

    def test_bad_version(self, studio):
        record = serialize(studio)
        record["version"] = 99
        with pytest.raises(SerializationError):
            deserialize(record)

    def test_corrupt_row(self, studio):
        record = serialize(studio)
        record["rows"][0][2] = "not a number"
        with pytest.raises(SerializationError, match="presNo"):
            deserialize(record)

    @pytest.mark.parametrize("field, value", [
        ("rows", [5]),
        ("key", ["nope"]),
        ("attributes", 5),
        ("domains", ["Bogus", "String", "Integer"]),
        ("domains", ["String", "String"]),
        ("index", "btree"),
    ])
    def test_malformed_shape(self, studio, field, value):
        record = serialize(studio)
        record[field] = value
        with pytest.raises(SerializationError):
            deserialize(record)


class TestText:
    def test_json_round_trip_keeps_floats_and_chars(self, db):
        for rel in (db["movieExec"], db["movieStar"]):
            _assert_same(rel, loads(dumps(rel)))

    def test_dumps_is_json(self, studio):
        assert json.loads(dumps(studio))["name"] == "studio"

    def test_invalid_json(self):
        with pytest.raises(SerializationError):
            loads("{not json")


class TestFiles:
    def test_save_and_load(self, tmp_path, movie):
        path = save(movie, str(tmp_path))
        assert path.endswith("movie" + rel_config.STORE_EXT)
        _assert_same(movie, load("movie", str(tmp_path)))

    def test_default_store_dir(self, tmp_path, monkeypatch, studio):
        monkeypatch.setattr(rel_config, "STORE_DIR", str(tmp_path / "store"))
        save(studio)
        assert (tmp_path / "store" / ("studio" + rel_config.STORE_EXT)).exists()
        _assert_same(studio, load("studio"))

    def test_load_missing(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load("nope", str(tmp_path))
