"""Fixture seeding for EXPLAIN runs."""
from __future__ import annotations

from .seeder import DEFAULT_RECORD_COUNT, FixtureDatabase, FixtureSeeder

__all__ = ["DEFAULT_RECORD_COUNT", "FixtureDatabase", "FixtureSeeder"]
