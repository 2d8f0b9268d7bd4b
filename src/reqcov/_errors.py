"""Errors raised while computing a coverage report.

Every failure of a run is terminal: the caller either receives a complete
report or one of these exceptions carrying a human-readable cause.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterable, Mapping


class CoverageError(Exception):
    """Base class for all coverage evaluation errors."""


class InvalidInputError(CoverageError, ValueError):
    """Arguments were rejected before contacting any backend."""


class NotFoundError(CoverageError):
    """A collection, project, work item, category or link type does not exist."""

    def __init__(self, entity: str, key: object, detail: str = "") -> None:
        self.entity = entity
        self.key = key
        msg = f"{entity} '{key}' does not exist"
        if detail:
            msg = f"{msg} {detail}"
        super().__init__(msg)


class NoLinkedTestCasesError(CoverageError):
    """The requirement has no TestedBy-linked test cases."""

    def __init__(self, work_item_id: int) -> None:
        self.work_item_id = work_item_id
        super().__init__(f"Work item {work_item_id} has no linked test cases")


class NoActiveTestPlansError(CoverageError):
    """The project has no active test plan to take outcomes from."""

    def __init__(self, project_name: str) -> None:
        self.project_name = project_name
        super().__init__(f"Project '{project_name}' has no active test plans")


class ConsistencyError(CoverageError):
    """A test point references a configuration that was not fetched."""

    def __init__(self, configuration_id: int, test_point: object = None) -> None:
        self.configuration_id = configuration_id
        self.test_point = test_point
        super().__init__(
            f"Test point references configuration id {configuration_id}, "
            "which is not among the project's test configurations",
        )


class PartialFetchError(CoverageError):
    """Fetching test points failed for one or more test plans.

    Attributes:
        failures: Mapping of test plan id to the exception raised for it.

    """

    def __init__(self, failures: Mapping[int, Exception]) -> None:
        self.failures = dict(sorted(failures.items()))
        details = "; ".join(f"plan {plan_id}: {cause}" for plan_id, cause in self.failures.items())
        super().__init__(f"Failed to fetch test points for {len(self.failures)} test plan(s): {details}")

    @property
    def plan_ids(self) -> tuple[int, ...]:
        return tuple(self.failures)


class InvariantViolationError(CoverageError, RuntimeError):
    """An internal invariant of the evaluation pipeline was broken."""


class SnapshotError(CoverageError):
    """A snapshot file could not be read or failed validation."""


def format_ids(ids: Iterable[int]) -> str:
    """Render identifiers as a sorted, comma-separated list."""
    return ", ".join(str(i) for i in sorted(ids))
