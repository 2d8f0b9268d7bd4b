"""Export of coverage reports to TOML or JSON files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any

import tomli_w

if TYPE_CHECKING:
    from ._coverage import CoverageReport

logger = logging.getLogger(__name__)

SUPPORTED_SUFFIXES = (".toml", ".json")


def report_to_dict(report: CoverageReport) -> dict[str, Any]:
    """Convert a coverage report to a nested dictionary.

    Identifiers become string keys so the result is valid for both TOML and
    JSON:
        {
            "requirement": {"id": ..., "verdict": ...},
            "test_cases": {"<id>": {"plans": {"<id>": {"configurations": {"<id>": {...}}}}}},
            "uncovered": [{"id": ..., "title": ...}],
        }

    Args:
        report: The report to convert.

    Returns:
        The nested dictionary.

    """
    test_cases: dict[str, Any] = {}
    for test_case, plans in report.matrix.items():
        plan_data: dict[str, Any] = {}
        for plan, configurations in plans.items():
            plan_data[str(plan.id)] = {
                "name": plan.name,
                "configurations": {
                    str(config.id): {"name": config.name, "outcome": str(outcome)}
                    for config, outcome in configurations.items()
                },
            }
        test_cases[str(test_case.id)] = {
            "title": test_case.title,
            "verdict": str(report.test_case_verdicts[test_case]),
            "plans": plan_data,
        }

    return {
        "requirement": {
            "id": report.work_item.id,
            "title": report.work_item.title,
            "type": report.work_item.work_item_type,
            "project": report.project_name,
            "verdict": str(report.verdict),
        },
        "test_cases": test_cases,
        "uncovered": [{"id": tc.id, "title": tc.title} for tc in report.uncovered_test_cases],
    }


def export_report(report: CoverageReport, output_path: Path | str) -> None:
    """Write a coverage report to a ``.toml`` or ``.json`` file.

    Raises:
        ValueError: If the file suffix is not supported.

    """
    output_path = Path(output_path)
    suffix = output_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        msg = f"Unsupported report format '{suffix}', expected one of {', '.join(SUPPORTED_SUFFIXES)}"
        raise ValueError(msg)

    data = report_to_dict(report)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    if suffix == ".toml":
        with output_path.open("wb") as f:
            tomli_w.dump(data, f)
    else:
        with output_path.open("w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False)

    logger.debug(f"Exported report to {output_path}")
