"""Stored procedure source handling.

- Scan procedure bodies for SELECT statements
- Repair parentheses broken by line joining
- Substitute procedure arguments with fixture values
- Locate procedure source files and load the ignore list
"""
from __future__ import annotations

from .registry import (
    DEFAULT_KNOWN_ARGS,
    FixtureValue,
    PlaceholderRegistry,
)

from .scanner import (
    ScanState,
    scan_selects,
    extract_selects,
)

from .balancer import balance_parentheses

from .substitution import (
    render_literal,
    substitute_placeholders,
    normalize_select,
)

from .locator import (
    LookupStatus,
    LookupResult,
    ProcedureLocator,
    discover_procedure_names,
    load_ignore_list,
)

__all__ = [
    "DEFAULT_KNOWN_ARGS",
    "FixtureValue",
    "PlaceholderRegistry",
    "ScanState",
    "scan_selects",
    "extract_selects",
    "balance_parentheses",
    "render_literal",
    "substitute_placeholders",
    "normalize_select",
    "LookupStatus",
    "LookupResult",
    "ProcedureLocator",
    "discover_procedure_names",
    "load_ignore_list",
]
