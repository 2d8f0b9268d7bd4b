"""Backend protocol and per-plan test point fetching.

The work item and test management store is reached only through
``CoverageBackend``. Fetching test points is the one step that may run in
parallel: each active plan is queried independently and the results are
merged by plan id, so completion order never affects the outcome.
"""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import TYPE_CHECKING, Protocol

from ._errors import PartialFetchError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from ._models import ProjectInfo, TestConfiguration, TestPlan, TestPoint, WorkItem
    from ._query import TestCaseIdPredicate

logger = logging.getLogger(__name__)

MAX_WORKERS_LIMIT = 16
"""Upper bound on concurrent plan queries."""


class CoverageBackend(Protocol):
    """Read-only queries a coverage run needs from the test management store.

    Lookups return None when the entity does not exist; the caller turns that
    into a ``NotFoundError`` naming the entity.
    """

    def get_project(self, collection_address: str, project_name: str) -> ProjectInfo | None: ...

    def get_work_item(self, project: ProjectInfo, work_item_id: int) -> WorkItem | None: ...

    def get_forward_link_end(self, project: ProjectInfo, link_type_reference_name: str) -> int | None: ...

    def get_test_plans(self, project: ProjectInfo) -> list[TestPlan]: ...

    def query_test_points(
        self,
        project: ProjectInfo,
        plan: TestPlan,
        predicate: TestCaseIdPredicate,
    ) -> list[TestPoint]: ...

    def get_test_configurations(self, project: ProjectInfo) -> list[TestConfiguration]: ...

    def get_work_items(self, project: ProjectInfo, ids: Sequence[int]) -> list[WorkItem]: ...


def _query_plan(
    backend: CoverageBackend,
    project: ProjectInfo,
    plan: TestPlan,
    predicate: TestCaseIdPredicate,
) -> list[TestPoint]:
    """Query one plan, one backend call per predicate batch."""
    points: list[TestPoint] = []
    for batch in predicate.batches():
        points.extend(backend.query_test_points(project, plan, batch))
    logger.debug("Plan %d (%s): %d matching test point(s)", plan.id, plan.name, len(points))
    return points


def fetch_test_points(
    backend: CoverageBackend,
    project: ProjectInfo,
    plans: Sequence[TestPlan],
    predicate: TestCaseIdPredicate,
    *,
    max_workers: int = 1,
) -> dict[int, list[TestPoint]]:
    """Fetch the test points matching a predicate from every plan.

    Args:
        backend: Backend to query.
        project: Project the plans belong to.
        plans: Plans to query.
        predicate: Test case selection.
        max_workers: Number of plans queried concurrently. 1 queries
            sequentially; larger values are capped at MAX_WORKERS_LIMIT.

    Returns:
        Mapping of plan id to its test points, in ascending plan id order.

    Raises:
        PartialFetchError: If the query failed for any plan (parallel mode).

    """
    ordered = sorted(plans, key=lambda p: p.id)

    if max_workers <= 1 or len(ordered) <= 1:
        return {plan.id: _query_plan(backend, project, plan, predicate) for plan in ordered}

    workers = min(max_workers, MAX_WORKERS_LIMIT, len(ordered))
    logger.debug("Querying %d plan(s) with %d worker(s)", len(ordered), workers)

    fetched: dict[int, list[TestPoint]] = {}
    failures: dict[int, Exception] = {}
    with ThreadPoolExecutor(max_workers=workers) as executor:
        futures = {executor.submit(_query_plan, backend, project, plan, predicate): plan for plan in ordered}
        for future in as_completed(futures):
            plan = futures[future]
            try:
                fetched[plan.id] = future.result()
            except Exception as e:  # noqa: BLE001 - collected and re-raised below
                logger.debug("Plan %d query failed: %s", plan.id, e)
                failures[plan.id] = e

    if failures:
        raise PartialFetchError(failures)

    return {plan.id: fetched[plan.id] for plan in ordered}
