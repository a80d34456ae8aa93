"""Replace procedure arguments in a SELECT with literal SQL values.

Arguments are recognized by naming convention only: `inXxx` or `xxxArg`,
preceded by a space or an opening parenthesis and optionally back-ticked.
"""
from __future__ import annotations

import re

from .balancer import balance_parentheses
from .registry import FixtureValue, PlaceholderRegistry

IN_ARG = re.compile(r"([ (])`?in((?:[A-Z][A-Za-z]+)+)`?")
SUFFIX_ARG = re.compile(r"([ (])`?([a-z]+(?:[A-Z][A-Za-z]+)*)Arg`?")
TRAILING_TERMINATOR = re.compile(r"\s*;\s*$")


def render_literal(value: FixtureValue | None) -> str:
    """Render a fixture value as a SQL literal.

    Strings are double-quoted without escaping, bytes become UNHEX() calls
    and numbers are left bare, integral floats without a fraction. Booleans
    render as 1 or 0. A missing value renders as nothing.
    """
    if value is None:
        return ""
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, float):
        return str(int(value)) if value.is_integer() else repr(value)
    if isinstance(value, (bytes, bytearray)):
        return f'UNHEX("{bytes(value).hex()}")'
    if isinstance(value, str):
        return f'"{value}"'
    return str(value)


def substitute_placeholders(select: str, registry: PlaceholderRegistry) -> str:
    """Replace every recognized argument in select with its registry value."""

    def replace(match: re.Match) -> str:
        delimiter, name = match.group(1), match.group(2)
        return f"{delimiter}{render_literal(registry.get(name.lower()))}"

    select = IN_ARG.sub(replace, select)
    return SUFFIX_ARG.sub(replace, select)


def normalize_select(select: str, registry: PlaceholderRegistry) -> str:
    """Turn a scanned SELECT into a standalone query ready for EXPLAIN."""
    query = substitute_placeholders(balance_parentheses(select), registry)
    return TRAILING_TERMINATOR.sub("", query)
