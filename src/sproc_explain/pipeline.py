"""Run every SELECT of the procedures of interest through EXPLAIN.

Queries are processed strictly one after another: the registry and the
planner share one connection, and the report order must follow the order
procedures and statements were discovered in.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable

from .errors import ExplainError
from .plan.classifier import classify_plan
from .plan.explainer import Planner
from .procedures.locator import ProcedureLocator
from .procedures.registry import PlaceholderRegistry
from .procedures.scanner import extract_selects
from .procedures.substitution import normalize_select

logger = logging.getLogger(__name__)


@dataclass
class SelectQuery:
    """One SELECT extracted from a procedure, before normalization."""
    procedure: str
    path: str
    select: str


@dataclass
class PlanWarning:
    """A plan smell found for a normalized query."""
    label: str
    procedure: str
    query: str

    def format(self) -> str:
        return f"Warning: {self.label} in {self.procedure}!\nEXPLAIN {self.query}\n"


@dataclass
class ExecutionError:
    """A query the planner refused to EXPLAIN."""
    reason: str
    procedure: str
    query: str

    def format(self) -> str:
        return f"{self.reason} in {self.procedure}!\n{self.query}\n"


@dataclass
class ExplainReport:
    """Warnings and errors accumulated over a whole run."""
    warnings: list[PlanWarning] = field(default_factory=list)
    errors: list[ExecutionError] = field(default_factory=list)

    @property
    def exit_code(self) -> int:
        return len(self.warnings) + len(self.errors)

    def summary(self) -> str:
        return (
            f"Found {len(self.warnings)} warnings and failed to explain "
            f"{len(self.errors)} queries."
        )


def collect_selects(
    procedure_names: Iterable[str],
    locator: ProcedureLocator,
    ignore: set[str] | None = None
) -> list[SelectQuery]:
    """Extract the SELECTs of every procedure that isn't ignored.

    Procedures that can't be resolved to exactly one source file are skipped.
    """
    ignore = ignore or set()
    queries: list[SelectQuery] = []

    for procedure in procedure_names:
        if procedure in ignore:
            logger.debug(f"Ignoring {procedure}")
            continue

        result = locator.lookup(procedure)
        if not result.found:
            logger.debug(f"Skipping {procedure}: {result.status.value}")
            continue

        selects = extract_selects(result.path, procedure)
        logger.debug(f"{procedure}: {len(selects)} selects in {result.path}")
        queries.extend(
            SelectQuery(procedure=procedure, path=str(result.path), select=select)
            for select in selects
        )

    return queries


async def explain_selects(
    queries: Iterable[SelectQuery],
    registry: PlaceholderRegistry,
    planner: Planner,
    report: ExplainReport | None = None
) -> ExplainReport:
    """Normalize, EXPLAIN and classify each query in turn."""
    report = report or ExplainReport()

    for query in queries:
        normalized = normalize_select(query.select, registry)
        try:
            rows = await planner.explain(normalized)
        except ExplainError as e:
            logger.debug(f"EXPLAIN failed for {query.procedure}: {e.reason}")
            report.errors.append(ExecutionError(
                reason=e.reason,
                procedure=query.procedure,
                query=normalized
            ))
            continue

        report.warnings.extend(
            PlanWarning(label=label, procedure=query.procedure, query=normalized)
            for label in classify_plan(rows)
        )

    return report


async def run_explain_checks(
    procedure_names: Iterable[str],
    locator: ProcedureLocator,
    ignore: set[str],
    registry: PlaceholderRegistry,
    planner: Planner
) -> ExplainReport:
    """Check every procedure of interest and return the accumulated report."""
    queries = collect_selects(procedure_names, locator, ignore)
    logger.info(f"Explaining {len(queries)} selects")
    return await explain_selects(queries, registry, planner)
