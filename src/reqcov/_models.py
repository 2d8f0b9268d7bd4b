"""Immutable snapshot types for coverage evaluation.

Every entity here is fetched once per run from a backend and never mutated.
Test cases, plans and configurations compare and hash by identifier only, so
they can be used directly as keys of an outcome matrix.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, TypeAlias

if TYPE_CHECKING:
    from collections.abc import Mapping


class Outcome(StrEnum):
    """Result classification of the most recent execution of a test point.

    ``NONE`` and ``NOT_EXECUTED`` both mean that no meaningful run exists yet.
    """

    NONE = "None"
    NOT_EXECUTED = "NotExecuted"
    PASSED = "Passed"
    FAILED = "Failed"
    INCONCLUSIVE = "Inconclusive"
    WARNING = "Warning"
    ABORTED = "Aborted"
    ERROR = "Error"
    BLOCKED = "Blocked"
    TIMEOUT = "Timeout"


class Verdict(StrEnum):
    """Reduced classification of one or more outcomes.

    Verdicts are ordered by severity: PASSED (0) < INCONCLUSIVE (1) < FAILED (2).
    """

    PASSED = "Passed"
    INCONCLUSIVE = "Inconclusive"
    FAILED = "Failed"

    @property
    def severity(self) -> int:
        """Return severity level used when combining verdicts."""
        match self:
            case Verdict.PASSED:
                return 0
            case Verdict.INCONCLUSIVE:
                return 1
            case Verdict.FAILED:
                return 2


class TestPlanState(StrEnum):
    """Known activity states of a test plan."""

    __test__ = False

    ACTIVE = "Active"
    INACTIVE = "Inactive"


@dataclass(frozen=True, slots=True)
class WorkItemLink:
    """Outgoing link of a work item, identified by the link-type end it uses."""

    link_type_end_id: int
    target_id: int


@dataclass(frozen=True, slots=True)
class WorkItem:
    """Snapshot of a work item and its outgoing links."""

    id: int
    title: str
    work_item_type: str = field(default="", compare=False)
    links: frozenset[WorkItemLink] = field(default=frozenset(), compare=False)


@dataclass(frozen=True, slots=True)
class TestCase:
    """A test case work item. Identity is the identifier."""

    __test__ = False

    id: int
    title: str = field(default="", compare=False)


@dataclass(frozen=True, slots=True)
class TestPlan:
    """A named container of planned test executions.

    ``state`` is kept as reported by the backend; states other than
    ``Active`` and ``Inactive`` are preserved verbatim.
    """

    __test__ = False

    id: int
    name: str = field(default="", compare=False)
    state: str = field(default=TestPlanState.ACTIVE, compare=False)

    @property
    def is_active(self) -> bool:
        return self.state == TestPlanState.ACTIVE


@dataclass(frozen=True, slots=True)
class TestConfiguration:
    """An environment variant a test case runs under (browser, OS, ...)."""

    __test__ = False

    id: int
    name: str = field(default="", compare=False)
    is_default: bool = field(default=False, compare=False)


@dataclass(frozen=True, slots=True)
class TestPoint:
    """Planned execution of one test case under one configuration in one plan.

    ``most_recent_outcome`` is None when the point has never been run.
    """

    __test__ = False

    test_case_id: int
    test_plan_id: int
    configuration_id: int
    most_recent_outcome: Outcome | None = None


@dataclass(frozen=True, slots=True)
class ProjectInfo:
    """A team project inside a project collection.

    ``categories`` maps a category reference name (e.g.
    ``Microsoft.RequirementCategory``) to the work item type names it contains.
    """

    collection_address: str
    name: str
    categories: Mapping[str, tuple[str, ...]] = field(default_factory=dict, compare=False)


OutcomeMatrix: TypeAlias = dict[TestCase, dict[TestPlan, dict[TestConfiguration, Outcome]]]
"""Test case -> test plan -> configuration -> most recent outcome."""
