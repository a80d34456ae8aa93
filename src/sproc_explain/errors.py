"""Exception hierarchy for sproc-explain.

SetupError subclasses abort a run before any report is produced. ExplainError
is raised per query by the planner and collected into the report instead.
"""
from __future__ import annotations


class SprocExplainError(Exception):
    """Base class for all sproc-explain errors."""


class SetupError(SprocExplainError):
    """Fatal failure while preparing a run."""


class IgnoreFileError(SetupError):
    """The ignore list could not be read."""


class SeedingError(SetupError):
    """Fixture records could not be created."""


class DatabaseConnectionError(SetupError):
    """The planner connection could not be opened."""


class ProductionEnvironmentError(SetupError):
    """Refusing to seed fixtures into a production database."""


class ExplainError(SprocExplainError):
    """The planner rejected a normalized query."""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason
