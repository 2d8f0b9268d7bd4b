"""Outcome matrix construction.

Joins test points against the resolved test cases, the active test plans and
the project's configurations into a test case -> plan -> configuration ->
outcome mapping.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._errors import ConsistencyError
from ._models import Outcome

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping, Sequence

    from ._models import OutcomeMatrix, TestCase, TestConfiguration, TestPlan, TestPoint

logger = logging.getLogger(__name__)


def _retain_points(
    plan_points: Sequence[TestPoint],
    test_case_ids: frozenset[int],
) -> dict[int, list[TestPoint]]:
    """Group a plan's points by test case, keeping only resolved test cases."""
    by_test_case: dict[int, list[TestPoint]] = {}
    for point in plan_points:
        if point.test_case_id in test_case_ids:
            by_test_case.setdefault(point.test_case_id, []).append(point)
    return by_test_case


def _configuration_outcomes(
    points: Sequence[TestPoint],
    configurations: Mapping[int, TestConfiguration],
) -> dict[TestConfiguration, Outcome]:
    """Map each point's configuration to its most recent outcome.

    Raises:
        ConsistencyError: If a point references an unknown configuration.

    """
    outcomes: dict[int, Outcome] = {}
    for point in points:
        if point.configuration_id not in configurations:
            raise ConsistencyError(point.configuration_id, point)
        if point.configuration_id in outcomes:
            logger.debug(
                "Duplicate test point for test case %d, plan %d, configuration %d; keeping the later one",
                point.test_case_id,
                point.test_plan_id,
                point.configuration_id,
            )
        outcomes[point.configuration_id] = point.most_recent_outcome or Outcome.NONE

    return {configurations[config_id]: outcomes[config_id] for config_id in sorted(outcomes)}


def build_outcome_matrix(
    test_cases: Iterable[TestCase],
    active_test_plans: Iterable[TestPlan],
    test_points_by_plan: Mapping[int, Sequence[TestPoint]],
    configurations: Iterable[TestConfiguration],
) -> OutcomeMatrix:
    """Build the outcome matrix for a set of test cases.

    Test cases without any point in an active plan are left out of the matrix.
    Plans that are not active are ignored even if passed in.

    Args:
        test_cases: The resolved linked test cases.
        active_test_plans: The project's active test plans.
        test_points_by_plan: Test points per plan id.
        configurations: All test configurations of the project.

    Returns:
        The outcome matrix, with keys in ascending id order at every level.

    Raises:
        ConsistencyError: If a retained test point references a configuration
            id that is not among ``configurations``.

    """
    cases = sorted(set(test_cases), key=lambda tc: tc.id)
    plans = sorted((p for p in set(active_test_plans) if p.is_active), key=lambda p: p.id)
    config_by_id = {config.id: config for config in configurations}
    test_case_ids = frozenset(tc.id for tc in cases)

    retained_by_plan = {plan.id: _retain_points(test_points_by_plan.get(plan.id, ()), test_case_ids) for plan in plans}

    matrix: OutcomeMatrix = {}
    for test_case in cases:
        row: dict[TestPlan, dict[TestConfiguration, Outcome]] = {}
        for plan in plans:
            points = retained_by_plan[plan.id].get(test_case.id)
            if points:
                row[plan] = _configuration_outcomes(points, config_by_id)
        if row:
            matrix[test_case] = row
        else:
            logger.debug("Test case %d has no test points in any active plan", test_case.id)

    return matrix


def uncovered_test_cases(test_cases: Iterable[TestCase], matrix: OutcomeMatrix) -> tuple[TestCase, ...]:
    """Return the test cases that were left out of the matrix, in id order."""
    return tuple(sorted((tc for tc in set(test_cases) if tc not in matrix), key=lambda tc: tc.id))
