"""Backend reading an exported snapshot of a project collection from TOML.

Example snapshot::

    collection = "http://tfs.local:8080/tfs/DefaultCollection"

    [[projects]]
    name = "Fabrikam"

    [projects.categories]
    "Microsoft.RequirementCategory" = ["User Story"]
    "Microsoft.TestCaseCategory" = ["Test Case"]
    "Microsoft.BugCategory" = ["Bug"]

    [projects.link_types]
    "Microsoft.VSTS.Common.TestedBy" = 3

    [[projects.work_items]]
    id = 1
    title = "Checkout"
    type = "User Story"
    links = [{ link_type_end_id = 3, target_id = 10 }]

    [[projects.test_plans]]
    id = 100
    name = "Release 1"
    state = "Active"

    [[projects.configurations]]
    id = 1
    name = "Windows 8"
    is_default = true

    [[projects.test_points]]
    plan = 100
    test_case = 10
    configuration = 1
    outcome = "Passed"
"""

from __future__ import annotations

import logging
import tomllib
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from ._errors import NotFoundError, SnapshotError
from ._models import (
    Outcome,
    ProjectInfo,
    TestConfiguration,
    TestPlan,
    TestPlanState,
    TestPoint,
    WorkItem,
    WorkItemLink,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from pathlib import Path

    from ._query import TestCaseIdPredicate

logger = logging.getLogger(__name__)


class _Record(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)


class SnapshotLink(_Record):
    link_type_end_id: int
    target_id: PositiveInt


class SnapshotWorkItem(_Record):
    id: PositiveInt
    title: str = ""
    type: str = ""
    links: list[SnapshotLink] = Field(default_factory=list)


class SnapshotTestPlan(_Record):
    id: int
    name: str = ""
    state: str = TestPlanState.ACTIVE


class SnapshotConfiguration(_Record):
    id: int
    name: str = ""
    is_default: bool = False


class SnapshotTestPoint(_Record):
    plan: int
    test_case: PositiveInt
    configuration: int
    outcome: Outcome | None = None


class SnapshotProject(_Record):
    name: str
    categories: dict[str, list[str]] = Field(default_factory=dict)
    link_types: dict[str, int] = Field(default_factory=dict)
    work_items: list[SnapshotWorkItem] = Field(default_factory=list)
    test_plans: list[SnapshotTestPlan] = Field(default_factory=list)
    configurations: list[SnapshotConfiguration] = Field(default_factory=list)
    test_points: list[SnapshotTestPoint] = Field(default_factory=list)


class Snapshot(_Record):
    """Validated content of a snapshot file."""

    collection: str
    projects: list[SnapshotProject] = Field(default_factory=list)


def _normalize_address(address: str) -> str:
    return address.strip().rstrip("/").casefold()


def _to_work_item(item: SnapshotWorkItem) -> WorkItem:
    return WorkItem(
        id=item.id,
        title=item.title,
        work_item_type=item.type,
        links=frozenset(WorkItemLink(link.link_type_end_id, link.target_id) for link in item.links),
    )


def load_snapshot(path: Path) -> Snapshot:
    """Load and validate a snapshot TOML file.

    Raises:
        SnapshotError: If the file cannot be read, is not valid TOML, or does
            not match the snapshot schema.

    """
    try:
        with path.open("rb") as f:
            data = tomllib.load(f)
    except OSError as e:
        msg = f"Cannot read snapshot {path}: {e}"
        raise SnapshotError(msg) from e
    except tomllib.TOMLDecodeError as e:
        msg = f"Invalid TOML in {path}: {e}"
        raise SnapshotError(msg) from e

    try:
        snapshot = Snapshot.model_validate(data)
    except ValidationError as e:
        msg = f"Invalid snapshot {path}: {e}"
        raise SnapshotError(msg) from e

    logger.debug(f"Loaded snapshot of '{snapshot.collection}' with {len(snapshot.projects)} project(s) from {path}")
    return snapshot


class SnapshotBackend:
    """CoverageBackend over an in-memory Snapshot.

    Only test plans and points are filtered per query; everything is already
    loaded, so queries are safe to run from several threads.
    """

    def __init__(self, snapshot: Snapshot) -> None:
        self.snapshot = snapshot
        self._projects = {project.name.casefold(): project for project in snapshot.projects}

    @classmethod
    def from_toml(cls, path: Path) -> SnapshotBackend:
        return cls(load_snapshot(path))

    def _project(self, project: ProjectInfo) -> SnapshotProject:
        return self._projects[project.name.casefold()]

    def get_project(self, collection_address: str, project_name: str) -> ProjectInfo | None:
        if _normalize_address(collection_address) != _normalize_address(self.snapshot.collection):
            raise NotFoundError("Project collection", collection_address)

        project = self._projects.get(project_name.casefold())
        if project is None:
            return None
        return ProjectInfo(
            collection_address=self.snapshot.collection,
            name=project.name,
            categories={name: tuple(types) for name, types in project.categories.items()},
        )

    def get_work_item(self, project: ProjectInfo, work_item_id: int) -> WorkItem | None:
        for item in self._project(project).work_items:
            if item.id == work_item_id:
                return _to_work_item(item)
        return None

    def get_forward_link_end(self, project: ProjectInfo, link_type_reference_name: str) -> int | None:
        wanted = link_type_reference_name.casefold()
        for reference_name, end_id in self._project(project).link_types.items():
            if reference_name.casefold() == wanted:
                return end_id
        return None

    def get_test_plans(self, project: ProjectInfo) -> list[TestPlan]:
        return [TestPlan(plan.id, plan.name, plan.state) for plan in self._project(project).test_plans]

    def query_test_points(
        self,
        project: ProjectInfo,
        plan: TestPlan,
        predicate: TestCaseIdPredicate,
    ) -> list[TestPoint]:
        points = (
            TestPoint(point.test_case, point.plan, point.configuration, point.outcome)
            for point in self._project(project).test_points
            if point.plan == plan.id
        )
        return [point for point in points if predicate.matches(point)]

    def get_test_configurations(self, project: ProjectInfo) -> list[TestConfiguration]:
        return [
            TestConfiguration(config.id, config.name, config.is_default)
            for config in self._project(project).configurations
        ]

    def get_work_items(self, project: ProjectInfo, ids: Sequence[int]) -> list[WorkItem]:
        wanted = set(ids)
        return [_to_work_item(item) for item in self._project(project).work_items if item.id in wanted]
