"""Printing an ExplainReport."""
from __future__ import annotations

import sys
from typing import TextIO

from .pipeline import ExplainReport


def print_report(
    report: ExplainReport,
    out: TextIO | None = None,
    err: TextIO | None = None
) -> int:
    """Print errors, then warnings, then the summary line.

    Returns:
        Process exit code: the number of warnings plus errors
    """
    if out is None:
        out = sys.stdout
    if err is None:
        err = sys.stderr

    for error in report.errors:
        print(error.format(), file=err)

    for warning in report.warnings:
        print(warning.format(), file=out)

    print(report.summary(), file=out)
    return report.exit_code
