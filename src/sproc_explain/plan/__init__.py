"""Query plans: the MySQL planner client and the smell classifier."""
from __future__ import annotations

from .classifier import (
    FILESORT,
    FULL_INDEX_SCAN,
    FULL_TABLE_SCAN,
    TEMPORARY_TABLE,
    WARNING_LABELS,
    PlanRow,
    classify_plan,
    classify_row,
)

from .explainer import (
    MySQLParams,
    MySQLPlanner,
    Planner,
    failure_reason,
)

__all__ = [
    "FILESORT",
    "FULL_INDEX_SCAN",
    "FULL_TABLE_SCAN",
    "TEMPORARY_TABLE",
    "WARNING_LABELS",
    "PlanRow",
    "classify_plan",
    "classify_row",
    "MySQLParams",
    "MySQLPlanner",
    "Planner",
    "failure_reason",
]
