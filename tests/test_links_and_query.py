"""Tests for linked test case resolution and the test point predicate."""

import pytest

from reqcov import (
    NoLinkedTestCasesError,
    TestPoint,
    WorkItem,
    WorkItemLink,
    build_test_point_query,
    resolve_linked_test_cases,
)
from reqcov._query import TestCaseIdPredicate

TESTED_BY = 3
RELATED = 1


class TestResolveLinkedTestCases:
    """Tests for resolve_linked_test_cases."""

    def test_keeps_only_links_of_the_given_end(self) -> None:
        work_item = WorkItem(
            1,
            "Checkout",
            links=frozenset({WorkItemLink(TESTED_BY, 10), WorkItemLink(RELATED, 12), WorkItemLink(TESTED_BY, 11)}),
        )

        assert resolve_linked_test_cases(work_item, TESTED_BY) == {10, 11}

    def test_duplicate_targets_are_collapsed(self) -> None:
        """A target linked through several links appears once."""
        links = [WorkItemLink(TESTED_BY, 10), WorkItemLink(TESTED_BY, 10), WorkItemLink(RELATED, 10)]
        work_item = WorkItem(1, "Checkout", links=frozenset(links))

        assert resolve_linked_test_cases(work_item, TESTED_BY) == frozenset({10})

    def test_no_links_raises(self) -> None:
        with pytest.raises(NoLinkedTestCasesError) as exc_info:
            resolve_linked_test_cases(WorkItem(2, "Wishlist"), TESTED_BY)

        assert exc_info.value.work_item_id == 2

    def test_only_other_link_types_raises(self) -> None:
        work_item = WorkItem(2, "Wishlist", links=frozenset({WorkItemLink(RELATED, 12)}))

        with pytest.raises(NoLinkedTestCasesError, match="Work item 2"):
            resolve_linked_test_cases(work_item, TESTED_BY)


class TestTestCaseIdPredicate:
    """Tests for the batched test case id predicate."""

    def test_matches_by_test_case_id(self) -> None:
        predicate = build_test_point_query({10, 11})

        assert predicate.matches(TestPoint(10, 100, 1))
        assert not predicate.matches(TestPoint(12, 100, 1))

    def test_to_query_lists_ids_in_order(self) -> None:
        predicate = build_test_point_query([30, 10, 20])

        assert predicate.to_query() == "SELECT * FROM TestPoint WHERE TestCaseId IN (10, 20, 30)"

    def test_batches_cover_every_id_exactly_once(self) -> None:
        ids = set(range(1, 1002))
        predicate = build_test_point_query(ids, batch_size=100)

        batches = list(predicate.batches())

        assert len(batches) == 11
        assert all(len(batch.test_case_ids) <= 100 for batch in batches)
        collected = [i for batch in batches for i in batch.test_case_ids]
        assert sorted(collected) == sorted(ids)

    def test_single_batch_when_under_limit(self) -> None:
        predicate = build_test_point_query({1, 2, 3})

        assert list(predicate.batches()) == [predicate]

    def test_empty_ids_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one"):
            build_test_point_query([])

    @pytest.mark.parametrize("batch_size", [0, -5])
    def test_non_positive_batch_size_rejected(self, batch_size: int) -> None:
        with pytest.raises(ValueError, match="Batch size"):
            TestCaseIdPredicate(frozenset({1}), batch_size)
