"""Tests for catalogen.similarity module."""

import random

import pytest

from catalogen.records import CatalogRecord, MultipleCategory, SingleCategory
from catalogen.similarity import SimilarityResolver


def _rec(record_id, label=None):
    if isinstance(label, (list, tuple)):
        category = MultipleCategory(tuple(label))
    elif label:
        category = SingleCategory(label)
    else:
        category = None
    return CatalogRecord(id=record_id, slug=record_id, category=category)


@pytest.fixture
def catalog():
    return [
        _rec("A", "Search"),
        _rec("B", "Search"),
        _rec("C", "Search"),
        _rec("D", "Search"),
        _rec("E", "Database"),
    ]


def _ids(records):
    return [r.id for r in records]


def _assert_invariants(target, result, limit=3):
    ids = _ids(result)
    assert len(ids) <= limit
    assert target.id not in ids
    assert len(ids) == len(set(ids))


class TestSimilarityResolver:
    def test_same_category_fills_panel(self, catalog):
        resolver = SimilarityResolver()
        result = resolver.resolve(catalog[0], catalog)
        assert sorted(_ids(result)) == ["B", "C", "D"]

    def test_sparse_category_filled_from_others(self, catalog):
        resolver = SimilarityResolver()
        target = catalog[4]
        result = resolver.resolve(target, catalog)
        _assert_invariants(target, result)
        assert len(result) == 3
        assert set(_ids(result)) <= {"A", "B", "C", "D"}

    def test_large_category_only_same_category(self):
        catalog = [_rec(f"s{i}", "Search") for i in range(8)] + [_rec("o1", "Other")]
        resolver = SimilarityResolver(rng=random.Random(3))
        for target in catalog[:8]:
            for _ in range(20):
                result = resolver.resolve(target, catalog)
                _assert_invariants(target, result)
                assert len(result) == 3
                assert all(r.category == SingleCategory("Search") for r in result)

    def test_same_category_comes_first(self):
        catalog = [_rec("A", "Search"), _rec("B", "Search")] + [
            _rec(f"x{i}", "Other") for i in range(10)
        ]
        resolver = SimilarityResolver(rng=random.Random(1))
        for _ in range(20):
            result = resolver.resolve(catalog[0], catalog)
            assert _ids(result)[0] == "B"
            assert len(result) == 3
            _assert_invariants(catalog[0], result)

    def test_multi_category_intersection(self):
        catalog = [
            _rec("A", ["AI", "Search"]),
            _rec("B", ["Search", "Web"]),
            _rec("C", ["Web"]),
            _rec("D", "Search"),
        ]
        resolver = SimilarityResolver(rng=random.Random(0))
        result = resolver.resolve(catalog[0], catalog)
        assert set(_ids(result)[:2]) == {"B", "D"}
        assert _ids(result)[2] == "C"

    def test_tiny_catalog(self):
        catalog = [_rec("A", "Search"), _rec("B", "Other")]
        result = SimilarityResolver().resolve(catalog[0], catalog)
        assert _ids(result) == ["B"]

    def test_single_record(self):
        catalog = [_rec("A", "Search")]
        assert SimilarityResolver().resolve(catalog[0], catalog) == []

    def test_uncategorized_target(self, catalog):
        target = _rec("Z")
        result = SimilarityResolver().resolve(target, catalog + [target])
        _assert_invariants(target, result)
        assert len(result) == 3

    def test_duplicate_records_in_catalog(self):
        a = _rec("A", "Search")
        b = _rec("B", "Search")
        catalog = [a, b, b, b, _rec("C", "Other")]
        for seed in range(10):
            result = SimilarityResolver(rng=random.Random(seed)).resolve(a, catalog)
            _assert_invariants(a, result)
            assert sorted(_ids(result)) == ["B", "C"]

    def test_seeded_rng_is_reproducible(self):
        catalog = [_rec(f"s{i}", "Search") for i in range(10)]
        first = SimilarityResolver(rng=random.Random(42)).resolve(catalog[0], catalog)
        second = SimilarityResolver(rng=random.Random(42)).resolve(catalog[0], catalog)
        assert _ids(first) == _ids(second)

    def test_custom_limit(self, catalog):
        result = SimilarityResolver(limit=1).resolve(catalog[4], catalog)
        assert len(result) == 1

    def test_zero_limit(self, catalog):
        assert SimilarityResolver(limit=0).resolve(catalog[0], catalog) == []

    def test_negative_limit(self):
        with pytest.raises(ValueError):
            SimilarityResolver(limit=-1)
