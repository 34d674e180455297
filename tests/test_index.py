"""Tests for the key index backends."""

from __future__ import annotations

import pytest

from rel_engine import CompositeKey, HashIndex, NullIndex, TreeIndex, make_index


K = CompositeKey.of


class TestMakeIndex:
    @pytest.mark.parametrize("kind, cls", [("none", NullIndex), ("tree", TreeIndex), ("hash", HashIndex)])
    def test_kinds(self, kind, cls):
        assert isinstance(make_index(kind), cls)

    def test_default_is_tree(self):
        assert isinstance(make_index(), TreeIndex)

    def test_unknown_kind(self):
        with pytest.raises(ValueError):
            make_index("bptree")


@pytest.mark.parametrize("cls", [TreeIndex, HashIndex])
class TestOrderedBackends:
    def test_put_and_get(self, cls):
        idx = cls()
        assert idx.put(K("Star_Wars", 1977), ("Star_Wars", 1977)) is None
        assert idx.get(K("Star_Wars", 1977)) == ("Star_Wars", 1977)
        assert idx.get(K("Jaws", 1975)) is None
        assert K("Star_Wars", 1977) in idx

    def test_last_write_wins(self, cls):
        idx = cls()
        idx.put(K(1), (1, "a"))
        assert idx.put(K(1), (1, "b")) == (1, "a")
        assert idx.get(K(1)) == (1, "b")
        assert len(idx) == 1

    def test_iterates_in_key_order(self, cls):
        idx = cls()
        for k in [K("b", 2), K("a", 9), K("b", 1)]:
            idx.put(k, k.values)
        assert list(idx) == [K("a", 9), K("b", 1), K("b", 2)]
        assert [t for _, t in idx.items()] == [("a", 9), ("b", 1), ("b", 2)]


class TestTreeIndex:
    def test_range_and_bounds(self):
        idx = TreeIndex()
        for n in [5, 1, 3, 9]:
            idx.put(K(n), (n,))
        assert idx.first() == K(1)
        assert idx.last() == K(9)
        assert [k.values for k, _ in idx.range(K(2), K(5))] == [(3,), (5,)]
        assert [k.values for k, _ in idx.range(high=K(3))] == [(1,), (3,)]


class TestNullIndex:
    def test_stores_nothing(self):
        idx = NullIndex()
        idx.put(K(1), (1,))
        assert idx.get(K(1)) is None
        assert len(idx) == 0
        assert list(idx) == []
        assert not idx.enabled
