"""Classify EXPLAIN output rows into performance smells."""
from __future__ import annotations

import re
from typing import Any, Iterable, Mapping

PlanRow = Mapping[str, Any]

FULL_TABLE_SCAN = "full table scan"
FULL_INDEX_SCAN = "full index scan"
FILESORT = "filesort"
TEMPORARY_TABLE = "temporary table"

WARNING_LABELS = (FULL_TABLE_SCAN, FULL_INDEX_SCAN, FILESORT, TEMPORARY_TABLE)

TYPE_FULL_TABLE_SCAN = re.compile(r"^all$", re.IGNORECASE)
TYPE_FULL_INDEX_SCAN = re.compile(r"^index$", re.IGNORECASE)
EXTRA_FILESORT = re.compile(r"filesort", re.IGNORECASE)
EXTRA_TEMPORARY_TABLE = re.compile(r"temporary", re.IGNORECASE)


def _field(row: PlanRow, name: str) -> str:
    value = row.get(name)
    return "" if value is None else str(value)


def classify_row(row: PlanRow) -> list[str]:
    """Warnings for a single plan step.

    The join type yields at most one scan warning; the Extra column is
    checked for filesort and temporary table independently.
    """
    warnings = []
    scan_type = _field(row, "type")
    extra = _field(row, "Extra")

    if TYPE_FULL_TABLE_SCAN.match(scan_type):
        warnings.append(FULL_TABLE_SCAN)
    elif TYPE_FULL_INDEX_SCAN.match(scan_type):
        warnings.append(FULL_INDEX_SCAN)

    if EXTRA_FILESORT.search(extra):
        warnings.append(FILESORT)

    if EXTRA_TEMPORARY_TABLE.search(extra):
        warnings.append(TEMPORARY_TABLE)

    return warnings


def classify_plan(rows: Iterable[PlanRow]) -> list[str]:
    """Warnings for every step of a plan, in row order."""
    warnings: list[str] = []
    for row in rows:
        warnings.extend(classify_row(row))
    return warnings
