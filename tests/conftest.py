"""Shared fixtures: a small project collection snapshot.

Work items of project "Fabrikam":
- 1 "Checkout": tested by 10 (Passed on Default, Failed on Chrome) and 11
  (points only in the inactive plan), related to task 12.
- 2 "Wishlist": no links.
- 3 "Returns": tested by 13, which only has points in the inactive plan.
- 4 "Search": tested by 14, Passed everywhere.
- 5 "Export": tested by 15, whose point references unknown configuration 7.
- 6 "Import": tested by 99, which does not exist.
- 7 "Refunds": tested by task 12, which is not a test case.
"""

from pathlib import Path

import pytest

from reqcov import Snapshot, SnapshotBackend
from reqcov._snapshot import load_snapshot

COLLECTION = "http://tfs.local:8080/tfs/DefaultCollection"
PROJECT = "Fabrikam"
TESTED_BY = 3

SNAPSHOT_TOML = f"""
collection = "{COLLECTION}"

[[projects]]
name = "{PROJECT}"

[projects.categories]
"Microsoft.RequirementCategory" = ["User Story", "Bug"]
"Microsoft.TestCaseCategory" = ["Test Case"]
"Microsoft.BugCategory" = ["Bug"]

[projects.link_types]
"Microsoft.VSTS.Common.TestedBy" = {TESTED_BY}
"System.LinkTypes.Related" = 1

[[projects.work_items]]
id = 1
title = "Checkout"
type = "User Story"
links = [
    {{ link_type_end_id = {TESTED_BY}, target_id = 10 }},
    {{ link_type_end_id = {TESTED_BY}, target_id = 11 }},
    {{ link_type_end_id = 1, target_id = 12 }},
]

[[projects.work_items]]
id = 2
title = "Wishlist"
type = "User Story"

[[projects.work_items]]
id = 3
title = "Returns"
type = "User Story"
links = [{{ link_type_end_id = {TESTED_BY}, target_id = 13 }}]

[[projects.work_items]]
id = 4
title = "Search"
type = "User Story"
links = [{{ link_type_end_id = {TESTED_BY}, target_id = 14 }}]

[[projects.work_items]]
id = 5
title = "Export"
type = "User Story"
links = [{{ link_type_end_id = {TESTED_BY}, target_id = 15 }}]

[[projects.work_items]]
id = 6
title = "Import"
type = "User Story"
links = [{{ link_type_end_id = {TESTED_BY}, target_id = 99 }}]

[[projects.work_items]]
id = 7
title = "Refunds"
type = "User Story"
links = [{{ link_type_end_id = {TESTED_BY}, target_id = 12 }}]

[[projects.work_items]]
id = 10
title = "Pay by card"
type = "Test Case"

[[projects.work_items]]
id = 11
title = "Pay by voucher"
type = "Test Case"

[[projects.work_items]]
id = 12
title = "Cart"
type = "Task"

[[projects.work_items]]
id = 13
title = "Return parcel"
type = "Test Case"

[[projects.work_items]]
id = 14
title = "Full text search"
type = "Test Case"

[[projects.work_items]]
id = 15
title = "Export CSV"
type = "Test Case"

[[projects.test_plans]]
id = 100
name = "Release 1"
state = "Active"

[[projects.test_plans]]
id = 101
name = "Release 0"
state = "Inactive"

[[projects.configurations]]
id = 1
name = "Default"
is_default = true

[[projects.configurations]]
id = 2
name = "Chrome"

[[projects.test_points]]
plan = 100
test_case = 10
configuration = 1
outcome = "Passed"

[[projects.test_points]]
plan = 100
test_case = 10
configuration = 2
outcome = "Failed"

[[projects.test_points]]
plan = 101
test_case = 11
configuration = 1
outcome = "Passed"

[[projects.test_points]]
plan = 101
test_case = 13
configuration = 1
outcome = "Failed"

[[projects.test_points]]
plan = 100
test_case = 14
configuration = 1
outcome = "Passed"

[[projects.test_points]]
plan = 100
test_case = 14
configuration = 2
outcome = "Passed"

[[projects.test_points]]
plan = 100
test_case = 15
configuration = 7
outcome = "Passed"
"""


@pytest.fixture
def snapshot_path(tmp_path: Path) -> Path:
    path = tmp_path / "snapshot.toml"
    path.write_text(SNAPSHOT_TOML)
    return path


@pytest.fixture
def snapshot(snapshot_path: Path) -> Snapshot:
    return load_snapshot(snapshot_path)


@pytest.fixture
def backend(snapshot: Snapshot) -> SnapshotBackend:
    return SnapshotBackend(snapshot)
