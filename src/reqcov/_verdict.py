"""Reduction of test outcomes into verdicts.

Precedence is fixed: any failing outcome makes the verdict Failed, otherwise
any outcome without a clean pass makes it Inconclusive, otherwise Passed. The
same precedence combines per-test-case verdicts into the requirement verdict.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from ._errors import InvariantViolationError
from ._models import Outcome, Verdict

if TYPE_CHECKING:
    from collections.abc import Iterable

    from ._models import OutcomeMatrix, TestCase

FAILING_OUTCOMES = frozenset({Outcome.ABORTED, Outcome.FAILED, Outcome.ERROR, Outcome.BLOCKED, Outcome.TIMEOUT})
INCONCLUSIVE_OUTCOMES = frozenset({Outcome.WARNING, Outcome.INCONCLUSIVE, Outcome.NOT_EXECUTED, Outcome.NONE})


def evaluate_outcomes(outcomes: Iterable[Outcome]) -> Verdict:
    """Reduce a set of outcomes to a verdict.

    Args:
        outcomes: Outcomes of one test case across all plans and configurations.

    Returns:
        FAILED if any outcome fails, else INCONCLUSIVE if any outcome is not a
        clean pass, else PASSED.

    Raises:
        InvariantViolationError: If ``outcomes`` is empty.

    """
    outcome_set = frozenset(outcomes)
    if not outcome_set:
        msg = "Cannot evaluate an empty outcome set"
        raise InvariantViolationError(msg)

    if outcome_set & FAILING_OUTCOMES:
        return Verdict.FAILED
    if outcome_set & INCONCLUSIVE_OUTCOMES:
        return Verdict.INCONCLUSIVE
    return Verdict.PASSED


def collect_outcomes(matrix: OutcomeMatrix, test_case: TestCase) -> frozenset[Outcome]:
    """Union of a test case's outcomes across every plan and configuration."""
    return frozenset(
        outcome for config_outcomes in matrix[test_case].values() for outcome in config_outcomes.values()
    )


def evaluate_matrix(matrix: OutcomeMatrix) -> dict[TestCase, Verdict]:
    """Compute the verdict of every test case in the matrix."""
    return {test_case: evaluate_outcomes(collect_outcomes(matrix, test_case)) for test_case in matrix}


def rollup_verdicts(verdicts: Iterable[Verdict]) -> Verdict:
    """Combine per-test-case verdicts into one requirement verdict.

    The most severe verdict wins. Without any verdict the requirement has no
    executable coverage, which is reported as INCONCLUSIVE.
    """
    return max(verdicts, key=lambda v: v.severity, default=Verdict.INCONCLUSIVE)
