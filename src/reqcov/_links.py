"""Resolution of the test cases a requirement is tested by."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from ._errors import NoLinkedTestCasesError

if TYPE_CHECKING:
    from ._models import WorkItem

logger = logging.getLogger(__name__)


def resolve_linked_test_cases(work_item: WorkItem, forward_end_id: int) -> frozenset[int]:
    """Collect the unique targets of a work item's links of one link-type end.

    Args:
        work_item: The requirement work item.
        forward_end_id: Identifier of the forward end of the TestedBy link type.

    Returns:
        Set of linked test case identifiers.

    Raises:
        NoLinkedTestCasesError: If no link of the given end exists.

    """
    test_case_ids = frozenset(
        link.target_id for link in work_item.links if link.link_type_end_id == forward_end_id
    )
    if not test_case_ids:
        raise NoLinkedTestCasesError(work_item.id)

    logger.debug(f"Work item {work_item.id} links to {len(test_case_ids)} test case(s)")
    return test_case_ids
