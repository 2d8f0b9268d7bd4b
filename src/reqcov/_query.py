"""Selection predicate for fetching the test points of linked test cases.

The predicate is logically ``TestCaseId IN (...)``. Backends with query length
limits iterate ``batches()`` and issue one query per batch.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

    from ._models import TestPoint

DEFAULT_BATCH_SIZE = 200
"""Maximum number of test case ids rendered into one query."""


@dataclass(frozen=True, slots=True)
class TestCaseIdPredicate:
    """Matches test points whose test case id is in ``test_case_ids``."""

    __test__ = False

    test_case_ids: frozenset[int]
    batch_size: int = DEFAULT_BATCH_SIZE

    def __post_init__(self) -> None:
        if not self.test_case_ids:
            msg = "Predicate requires at least one test case id"
            raise ValueError(msg)
        if self.batch_size < 1:
            msg = f"Batch size must be positive, got {self.batch_size}"
            raise ValueError(msg)

    def matches(self, point: TestPoint) -> bool:
        return point.test_case_id in self.test_case_ids

    def batches(self) -> Iterator[TestCaseIdPredicate]:
        """Split into predicates of at most ``batch_size`` ids, in ascending id order."""
        ids = sorted(self.test_case_ids)
        for start in range(0, len(ids), self.batch_size):
            yield TestCaseIdPredicate(frozenset(ids[start : start + self.batch_size]), self.batch_size)

    def to_query(self) -> str:
        """Render as a test point query for backends that accept query text."""
        id_list = ", ".join(str(i) for i in sorted(self.test_case_ids))
        return f"SELECT * FROM TestPoint WHERE TestCaseId IN ({id_list})"


def build_test_point_query(
    test_case_ids: Iterable[int],
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
) -> TestCaseIdPredicate:
    """Build the predicate selecting test points of the given test cases.

    Raises:
        ValueError: If ``test_case_ids`` is empty or ``batch_size`` is not positive.

    """
    return TestCaseIdPredicate(frozenset(test_case_ids), batch_size)
