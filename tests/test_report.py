"""Tests for report printing."""
import io

from sproc_explain.pipeline import ExecutionError, ExplainReport, PlanWarning
from sproc_explain.report import print_report


def test_print_report():
    report = ExplainReport(
        warnings=[PlanWarning("full table scan", "devices_2", "SELECT * FROM devices")],
        errors=[ExecutionError("ProgrammingError: (1064, 'syntax')", "tokens_3", "SELECT * FROM t WHERE a =")],
    )
    out, err = io.StringIO(), io.StringIO()

    exit_code = print_report(report, out=out, err=err)

    assert exit_code == 2
    assert err.getvalue() == (
        "ProgrammingError: (1064, 'syntax') in tokens_3!\nSELECT * FROM t WHERE a =\n\n"
    )
    assert out.getvalue() == (
        "Warning: full table scan in devices_2!\nEXPLAIN SELECT * FROM devices\n\n"
        "Found 1 warnings and failed to explain 1 queries.\n"
    )


def test_clean_run():
    out, err = io.StringIO(), io.StringIO()

    assert print_report(ExplainReport(), out=out, err=err) == 0
    assert out.getvalue() == "Found 0 warnings and failed to explain 0 queries.\n"
    assert err.getvalue() == ""
