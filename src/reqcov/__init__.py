"""Requirement test coverage checker."""

__all__ = [
    "Catalog",
    "ConsistencyError",
    "CoverageBackend",
    "CoverageContext",
    "CoverageError",
    "CoverageReport",
    "InvalidInputError",
    "InvariantViolationError",
    "KnownCategory",
    "KnownLinkType",
    "NoActiveTestPlansError",
    "NoLinkedTestCasesError",
    "NotFoundError",
    "Outcome",
    "OutcomeMatrix",
    "PartialFetchError",
    "ProjectInfo",
    "Snapshot",
    "SnapshotBackend",
    "SnapshotError",
    "TestCase",
    "TestCaseIdPredicate",
    "TestConfiguration",
    "TestPlan",
    "TestPlanState",
    "TestPoint",
    "Verdict",
    "WorkItem",
    "WorkItemLink",
    "build_catalog",
    "build_outcome_matrix",
    "build_test_point_query",
    "check_coverage",
    "evaluate_matrix",
    "evaluate_outcomes",
    "export_report",
    "fetch_test_points",
    "load_snapshot",
    "report_to_dict",
    "resolve_linked_test_cases",
    "rollup_verdicts",
]

from ._backend import CoverageBackend, fetch_test_points
from ._catalog import Catalog, KnownCategory, KnownLinkType, build_catalog
from ._coverage import CoverageContext, CoverageReport, check_coverage
from ._errors import (
    ConsistencyError,
    CoverageError,
    InvalidInputError,
    InvariantViolationError,
    NoActiveTestPlansError,
    NoLinkedTestCasesError,
    NotFoundError,
    PartialFetchError,
    SnapshotError,
)
from ._io import export_report, report_to_dict
from ._links import resolve_linked_test_cases
from ._matrix import build_outcome_matrix
from ._models import (
    Outcome,
    OutcomeMatrix,
    ProjectInfo,
    TestCase,
    TestConfiguration,
    TestPlan,
    TestPlanState,
    TestPoint,
    Verdict,
    WorkItem,
    WorkItemLink,
)
from ._query import TestCaseIdPredicate, build_test_point_query
from ._snapshot import Snapshot, SnapshotBackend, load_snapshot
from ._verdict import evaluate_matrix, evaluate_outcomes, rollup_verdicts
