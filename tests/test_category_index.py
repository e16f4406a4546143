"""Tests for catalogen.category_index module."""

from catalogen.category_index import build_category_index
from catalogen.records import CatalogRecord, MultipleCategory, SingleCategory


def _rec(record_id, *labels, multiple=False):
    if not labels:
        category = None
    elif multiple or len(labels) > 1:
        category = MultipleCategory(tuple(labels))
    else:
        category = SingleCategory(labels[0])
    return CatalogRecord(id=record_id, slug=record_id, category=category)


class TestBuildCategoryIndex:
    def test_groups_by_label(self):
        records = [_rec("a", "Search"), _rec("b", "Database"), _rec("c", "Search")]
        index = build_category_index(records)
        assert list(index) == ["Search", "Database"]
        assert [r.id for r in index["Search"]] == ["a", "c"]
        assert [r.id for r in index["Database"]] == ["b"]

    def test_multi_category_indexed_under_each_label(self):
        records = [_rec("a", "Search", "AI"), _rec("b", "AI")]
        index = build_category_index(records)
        assert [r.id for r in index["Search"]] == ["a"]
        assert [r.id for r in index["AI"]] == ["a", "b"]

    def test_single_element_list(self):
        index = build_category_index([_rec("a", "Search", multiple=True)])
        assert [r.id for r in index["Search"]] == ["a"]

    def test_uncategorized_excluded(self):
        index = build_category_index([_rec("a"), _rec("b", "Search")])
        assert list(index) == ["Search"]
        assert all(r.id != "a" for members in index.values() for r in members)

    def test_membership_matches_labels(self):
        records = [_rec("a", "X", "Y"), _rec("b", "Y"), _rec("c"), _rec("d", "Z")]
        index = build_category_index(records)
        for label, members in index.items():
            for record in records:
                assert (record in members) == (label in record.labels)

    def test_does_not_mutate_input(self):
        records = [_rec("a", "Search"), _rec("b")]
        snapshot = list(records)
        build_category_index(records)
        assert records == snapshot

    def test_stable_across_runs(self):
        records = [_rec("a", "Search"), _rec("b", "Database", "Search")]
        first = build_category_index(records)
        second = build_category_index(records)
        assert {k: [r.id for r in v] for k, v in first.items()} == {
            k: [r.id for r in v] for k, v in second.items()
        }

    def test_empty(self):
        assert build_category_index([]) == {}
