"""Line scanner that pulls SELECT statements out of stored procedure source.

The scanner is deliberately crude and relies on a few conventions of the
procedure source files:

- There is never more than one statement on a line.
- `CREATE PROCEDURE` and its matching `END;` always start at column 1.
- SQL comment delimiters never appear inside string literals.

Statements that don't follow these conventions come out mangled and fail
later, at EXPLAIN time.
"""
from __future__ import annotations

import re
from enum import Enum
from pathlib import Path

from .balancer import balance_parentheses

CREATE_PROCEDURE = re.compile(r"^CREATE PROCEDURE `?([A-Z]+_[0-9]+)", re.IGNORECASE)
END_PROCEDURE = re.compile(r"^END;\s*$", re.IGNORECASE)
SELECT = re.compile(r"^\s*SELECT", re.IGNORECASE)
COMMENT = re.compile(r"--.*$")


class ScanState(Enum):
    """Where the scanner is relative to procedure bodies and statements."""
    SEARCHING = "searching"
    IN_PROCEDURE = "in_procedure"
    IN_SELECT = "in_select"


def source_lines(source: str) -> list[str]:
    """Split on newlines only; other line-break characters stay in the line."""
    return [line.rstrip("\r") for line in source.split("\n")]


def strip_comment(line: str) -> str:
    """Remove a trailing `--` comment from a single line."""
    return COMMENT.sub("", line)


def declared_procedure(line: str) -> str | None:
    """Return the procedure name declared on this line, if any."""
    match = CREATE_PROCEDURE.match(line)
    return match.group(1) if match else None


def scan_selects(source: str, procedure: str | None = None) -> list[str]:
    """Extract the raw SELECT statements of one procedure.

    Args:
        source: Full text of a SQL source file
        procedure: Name of the procedure to extract from. If None, the
                   first procedure body encountered is used (and any later
                   ones, since each END; returns the scanner to searching).

    Returns:
        SELECT texts in source order, each built from its lines joined with
        single spaces. A statement still open at end of input is returned
        as-is.
    """
    wanted = procedure.lower() if procedure else None
    state = ScanState.SEARCHING
    selects: list[str] = []

    for raw_line in source_lines(source):
        line = strip_comment(raw_line)

        if state is ScanState.SEARCHING:
            name = declared_procedure(line)
            if name is not None and (wanted is None or name.lower() == wanted):
                state = ScanState.IN_PROCEDURE
            continue

        if END_PROCEDURE.match(line):
            state = ScanState.SEARCHING
            continue

        if state is ScanState.IN_SELECT:
            selects[-1] += f" {line.strip()}"
        elif SELECT.match(line):
            selects.append(line.strip())
            state = ScanState.IN_SELECT

        if state is ScanState.IN_SELECT and ";" in line:
            state = ScanState.IN_PROCEDURE

    return selects


def extract_selects(path: Path | str, procedure: str | None = None) -> list[str]:
    """Read a source file and return the balanced SELECTs of a procedure."""
    source = Path(path).read_text(encoding="utf-8")
    return [balance_parentheses(select) for select in scan_selects(source, procedure)]
