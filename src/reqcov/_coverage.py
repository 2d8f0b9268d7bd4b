"""Coverage check of a single requirement.

``check_coverage`` is the imperative shell around the pure pipeline steps:
it fetches everything a run needs from the backend, then resolves links,
builds the outcome matrix and reduces it to verdicts. All per-run state lives
in a ``CoverageContext`` value; nothing is kept between runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from ._backend import fetch_test_points
from ._catalog import Catalog, KnownLinkType, build_catalog
from ._errors import InvalidInputError, NoActiveTestPlansError, NotFoundError, format_ids
from ._links import resolve_linked_test_cases
from ._matrix import build_outcome_matrix, uncovered_test_cases
from ._models import OutcomeMatrix, ProjectInfo, TestCase, TestPlan, Verdict, WorkItem
from ._query import DEFAULT_BATCH_SIZE, build_test_point_query
from ._verdict import evaluate_matrix, rollup_verdicts

if TYPE_CHECKING:
    from ._backend import CoverageBackend

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CoverageContext:
    """Everything resolved about the run before any aggregation starts."""

    collection_address: str
    project: ProjectInfo
    work_item: WorkItem
    catalog: Catalog
    tested_by_end_id: int


@dataclass(frozen=True, slots=True)
class CoverageReport:
    """Outcome matrix of a requirement together with its verdicts."""

    work_item: WorkItem
    project_name: str
    matrix: OutcomeMatrix
    test_case_verdicts: dict[TestCase, Verdict]
    verdict: Verdict
    uncovered_test_cases: tuple[TestCase, ...]
    active_test_plans: tuple[TestPlan, ...]

    @property
    def linked_count(self) -> int:
        return len(self.matrix) + len(self.uncovered_test_cases)

    def count(self, verdict: Verdict) -> int:
        """Number of covered test cases with the given verdict."""
        return sum(1 for v in self.test_case_verdicts.values() if v == verdict)


def _validate_input(
    collection_address: str,
    project_name: str,
    work_item_id: int,
    batch_size: int,
    max_workers: int,
) -> None:
    if not collection_address or not collection_address.strip():
        msg = "Collection address cannot be empty"
        raise InvalidInputError(msg)
    if not project_name or not project_name.strip():
        msg = "Project name cannot be empty"
        raise InvalidInputError(msg)
    if isinstance(work_item_id, bool) or work_item_id <= 0:
        msg = f"Work item id must be a positive integer, got {work_item_id}"
        raise InvalidInputError(msg)
    if batch_size < 1:
        msg = f"Batch size must be positive, got {batch_size}"
        raise InvalidInputError(msg)
    if max_workers < 1:
        msg = f"Number of workers must be positive, got {max_workers}"
        raise InvalidInputError(msg)


def resolve_context(
    backend: CoverageBackend,
    collection_address: str,
    project_name: str,
    work_item_id: int,
) -> CoverageContext:
    """Look up the project, its catalog, the work item and the TestedBy link end.

    Raises:
        NotFoundError: If any of them does not exist.

    """
    project = backend.get_project(collection_address, project_name)
    if project is None:
        raise NotFoundError("Project", project_name, f"in collection '{collection_address}'")

    catalog = build_catalog(project)

    work_item = backend.get_work_item(project, work_item_id)
    if work_item is None:
        raise NotFoundError("Work item", work_item_id, f"in project '{project.name}'")
    if not catalog.is_requirement(work_item):
        logger.warning(
            f"Work item {work_item.id} is a '{work_item.work_item_type}', "
            "which is not in the requirement category",
        )

    tested_by_end_id = backend.get_forward_link_end(project, KnownLinkType.TESTED_BY)
    if tested_by_end_id is None:
        raise NotFoundError("Link type", KnownLinkType.TESTED_BY.value, f"in project '{project.name}'")

    return CoverageContext(
        collection_address=collection_address,
        project=project,
        work_item=work_item,
        catalog=catalog,
        tested_by_end_id=tested_by_end_id,
    )


def _resolve_test_cases(backend: CoverageBackend, context: CoverageContext, ids: frozenset[int]) -> list[TestCase]:
    """Look up the linked work items and keep those in the test case category.

    Raises:
        NotFoundError: If a linked id does not exist or is not a test case.

    """
    project = context.project
    found = {item.id: item for item in backend.get_work_items(project, sorted(ids)) if item.id in ids}
    not_test_cases = {item.id for item in found.values() if not context.catalog.is_test_case(item)}
    if not_test_cases:
        logger.debug(f"Linked work item(s) {format_ids(not_test_cases)} are not in the test case category")
    missing = (ids - set(found)) | not_test_cases
    if missing:
        raise NotFoundError("Test case", format_ids(missing), f"in project '{project.name}'")
    return [TestCase(found[i].id, found[i].title) for i in sorted(found)]


def check_coverage(  # noqa: PLR0913
    backend: CoverageBackend,
    collection_address: str,
    project_name: str,
    work_item_id: int,
    *,
    batch_size: int = DEFAULT_BATCH_SIZE,
    max_workers: int = 1,
) -> CoverageReport:
    """Compute the test coverage report of a requirement.

    Args:
        backend: Test management backend to read from.
        collection_address: Address of the project collection.
        project_name: Name of the project inside the collection.
        work_item_id: Identifier of the requirement work item.
        batch_size: Maximum number of test case ids per test point query.
        max_workers: Number of test plans queried concurrently.

    Returns:
        The complete CoverageReport.

    Raises:
        InvalidInputError: If an argument is blank or not positive.
        NotFoundError: If the project, a category, the work item, the TestedBy
            link type or a linked test case does not exist.
        NoLinkedTestCasesError: If the requirement has no TestedBy links.
        NoActiveTestPlansError: If the project has no active test plan.
        ConsistencyError: If a test point references an unknown configuration.
        PartialFetchError: If querying test points failed for some plans.

    """
    _validate_input(collection_address, project_name, work_item_id, batch_size, max_workers)

    context = resolve_context(backend, collection_address, project_name, work_item_id)
    project = context.project

    test_case_ids = resolve_linked_test_cases(context.work_item, context.tested_by_end_id)
    test_cases = _resolve_test_cases(backend, context, test_case_ids)

    active_plans = sorted((p for p in backend.get_test_plans(project) if p.is_active), key=lambda p: p.id)
    if not active_plans:
        raise NoActiveTestPlansError(project.name)
    logger.debug(f"Found {len(active_plans)} active test plan(s)")

    predicate = build_test_point_query(test_case_ids, batch_size=batch_size)
    points_by_plan = fetch_test_points(backend, project, active_plans, predicate, max_workers=max_workers)
    configurations = backend.get_test_configurations(project)

    matrix = build_outcome_matrix(test_cases, active_plans, points_by_plan, configurations)
    test_case_verdicts = evaluate_matrix(matrix)
    verdict = rollup_verdicts(test_case_verdicts.values())
    logger.debug(f"Requirement {context.work_item.id}: {len(matrix)} covered test case(s), verdict {verdict}")

    return CoverageReport(
        work_item=context.work_item,
        project_name=project.name,
        matrix=matrix,
        test_case_verdicts=test_case_verdicts,
        verdict=verdict,
        uncovered_test_cases=uncovered_test_cases(test_cases, matrix),
        active_test_plans=tuple(active_plans),
    )
