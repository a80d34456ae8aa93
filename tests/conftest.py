"""Shared pytest fixtures for all tests."""
import pytest

from sproc_explain.errors import ExplainError
from sproc_explain.procedures.registry import PlaceholderRegistry


class FakePlanner:
    """In-memory stand-in for MySQLPlanner.

    Plans are looked up by exact normalized query; queries listed in
    failures raise ExplainError with the given reason.
    """

    def __init__(self, plans=None, failures=None, default=None):
        self.plans = plans or {}
        self.failures = failures or {}
        self.default = default or []
        self.queries = []
        self.statements = []

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None

    async def explain(self, query):
        self.queries.append(query)
        if query in self.failures:
            raise ExplainError(self.failures[query])
        return list(self.plans.get(query, self.default))

    async def execute(self, sql, params=()):
        self.statements.append((sql, tuple(params)))
        return 1


@pytest.fixture
def fake_planner_factory():
    """Factory for in-memory planners."""
    return FakePlanner


@pytest.fixture
def uid():
    return bytes.fromhex("0123456789abcdef0123456789abcdef")


@pytest.fixture
def registry(uid):
    """Registry with the fixed known args and a uid."""
    registry = PlaceholderRegistry.with_defaults()
    registry.set_default("uid", uid)
    return registry


@pytest.fixture
def procedure_source():
    """Two procedures, the way they appear in schema patch files."""
    return """-- Devices for an account
CREATE PROCEDURE `accountDevices_16` (
  IN `uidArg` BINARY(16)
)
BEGIN
  SELECT d.uid, d.id -- device columns
  FROM devices AS d
  WHERE d.uid = uidArg;
END;

CREATE PROCEDURE `sessions_1` (IN `uidArg` BINARY(16))
BEGIN
  SELECT tokenId FROM sessionTokens WHERE uid = uidArg;
  select COUNT(*) FROM sessionTokens;
END;
"""
