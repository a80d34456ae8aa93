"""sproc-explain: EXPLAIN-based smell checks for stored procedures.

Extracts SELECT statements from stored procedure source, replaces procedure
arguments with fixture values and reports plans that scan whole tables or
indexes, sort outside an index, or build temporary tables.
"""
from __future__ import annotations

__version__ = "0.1.0"
