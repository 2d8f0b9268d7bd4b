"""Typed lookup of the work item categories and link types coverage relies on.

The set of reference names is closed: only the members of ``KnownCategory``
and ``KnownLinkType`` are ever looked up. A project is validated against them
once per run and the result is kept in an immutable ``Catalog``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from ._errors import NotFoundError

if TYPE_CHECKING:
    from ._models import ProjectInfo, WorkItem

logger = logging.getLogger(__name__)


class KnownCategory(StrEnum):
    """Work item categories a project must define."""

    REQUIREMENT = "Microsoft.RequirementCategory"
    TEST_CASE = "Microsoft.TestCaseCategory"
    BUG = "Microsoft.BugCategory"


class KnownLinkType(StrEnum):
    """Link types followed from a requirement."""

    TESTED_BY = "Microsoft.VSTS.Common.TestedBy"


@dataclass(frozen=True, slots=True)
class Catalog:
    """Work item types per known category, resolved for one project.

    Bug types are removed from ``requirement_types`` because some process
    templates place bugs in the requirement category too.
    """

    requirement_types: frozenset[str]
    test_case_types: frozenset[str]
    bug_types: frozenset[str]

    def is_requirement(self, work_item: WorkItem) -> bool:
        return work_item.work_item_type.casefold() in {t.casefold() for t in self.requirement_types}

    def is_test_case(self, work_item: WorkItem) -> bool:
        return work_item.work_item_type.casefold() in {t.casefold() for t in self.test_case_types}


def _find_category(project: ProjectInfo, category: KnownCategory) -> tuple[str, ...]:
    """Look up a category by reference name, ignoring case."""
    wanted = category.value.casefold()
    for reference_name, work_item_types in project.categories.items():
        if reference_name.casefold() == wanted:
            return tuple(work_item_types)
    raise NotFoundError("Category", category.value, f"in project '{project.name}'")


def build_catalog(project: ProjectInfo) -> Catalog:
    """Validate the known categories of a project and resolve their types.

    Args:
        project: The project to validate.

    Returns:
        The resolved Catalog.

    Raises:
        NotFoundError: If any of the known categories is missing.

    """
    bug_types = frozenset(_find_category(project, KnownCategory.BUG))
    requirement_types = frozenset(_find_category(project, KnownCategory.REQUIREMENT)) - bug_types
    test_case_types = frozenset(_find_category(project, KnownCategory.TEST_CASE))

    logger.debug(
        "Resolved categories for '%s': %d requirement, %d test case, %d bug type(s)",
        project.name,
        len(requirement_types),
        len(test_case_types),
        len(bug_types),
    )
    return Catalog(
        requirement_types=requirement_types,
        test_case_types=test_case_types,
        bug_types=bug_types,
    )
