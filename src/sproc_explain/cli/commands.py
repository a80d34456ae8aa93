from __future__ import annotations
import argparse
import asyncio
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from sproc_explain.config import ExplainConfig, load_explain_config
from sproc_explain.fixtures.seeder import FixtureSeeder
from sproc_explain.pipeline import ExplainReport, run_explain_checks
from sproc_explain.plan.explainer import MySQLPlanner
from sproc_explain.procedures.balancer import balance_parentheses
from sproc_explain.procedures.locator import (
    ProcedureLocator,
    discover_procedure_names,
    load_ignore_list,
)
from sproc_explain.procedures.registry import PlaceholderRegistry
from sproc_explain.procedures.scanner import scan_selects
from sproc_explain.procedures.substitution import normalize_select
from sproc_explain.report import print_report

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="sproc-explain",
        description="Check stored procedure SELECTs for bad smells using EXPLAIN"
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    # Full run
    run_cmd = sub.add_parser("run", help="Seed fixtures and EXPLAIN every procedure SELECT")
    run_cmd.add_argument("--config", default=None,
                         help="Path to YAML configuration file (default: environment settings)")
    run_cmd.add_argument("--dsn", default=None, help="MySQL connection URL")
    run_cmd.add_argument("--source-root", default=None, help="Directory holding procedure sources")
    run_cmd.add_argument("--caller-file", default=None,
                         help="File whose CALL statements name the procedures to check")
    run_cmd.add_argument("--ignore-file", default=None, help="Procedures to skip, one per line")
    run_cmd.add_argument("--records", type=int, default=None,
                         help="Number of fixture accounts to create")

    # Offline extraction
    scan = sub.add_parser("scan", help="Print the SELECTs extracted from a source file")
    scan.add_argument("file", help="SQL source file")
    scan.add_argument("--procedure", default=None,
                      help="Procedure name (default: first procedure in the file)")
    scan.add_argument("--normalize", action="store_true",
                      help="Substitute fixed known arguments into each SELECT")

    # Discovery
    procs = sub.add_parser("procedures", help="List procedures and their source files")
    procs.add_argument("--config", default=None, help="Path to YAML configuration file")
    procs.add_argument("--source-root", default=None, help="Directory holding procedure sources")
    procs.add_argument("--caller-file", default=None,
                       help="File whose CALL statements name the procedures to check")

    # Database commands
    db = sub.add_parser("db", help="Database commands")
    dbsub = db.add_subparsers(dest="dbcmd", required=True)
    ping = dbsub.add_parser("ping", help="Test database connection")
    ping.add_argument("--config", default=None, help="Path to YAML configuration file")
    ping.add_argument("--dsn", default=None, help="MySQL connection URL")

    return parser


def run(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    load_dotenv()

    args = build_parser().parse_args(argv)

    try:
        if args.cmd == "run":
            config = _load_config(args)
            _configure_logging(config)
            report = asyncio.run(explain_run(config))
            sys.exit(print_report(report))
        elif args.cmd == "scan":
            scan_file(args.file, args.procedure, args.normalize)
        elif args.cmd == "procedures":
            config = _load_config(args)
            _configure_logging(config)
            list_procedures(config)
        elif args.cmd == "db":
            if args.dbcmd == "ping":
                config = _load_config(args)
                asyncio.run(db_ping(config.database.dsn))
    except KeyboardInterrupt:
        print("\nInterrupted by user", file=sys.stderr)
        sys.exit(130)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def _load_config(args: argparse.Namespace) -> ExplainConfig:
    """Load configuration and apply command line overrides."""
    config = load_explain_config(getattr(args, "config", None))

    if getattr(args, "dsn", None):
        config.database.dsn = args.dsn
    if getattr(args, "source_root", None):
        config.sources.root = args.source_root
    if getattr(args, "caller_file", None):
        config.sources.caller_file = args.caller_file
    if getattr(args, "ignore_file", None):
        config.sources.ignore_file = args.ignore_file
    if getattr(args, "records", None) is not None:
        config.seeding.record_count = args.records

    return ExplainConfig.model_validate(config.model_dump())


def _configure_logging(config: ExplainConfig) -> None:
    logging.basicConfig(
        level=getattr(logging, config.logging.level),
        format=config.logging.format,
        handlers=[logging.StreamHandler(sys.stderr)]
    )
    logger.debug(f"Configuration: {config.log_redacted()}")


def _procedure_names(config: ExplainConfig, locator: ProcedureLocator) -> list[str]:
    if config.sources.caller_file:
        return discover_procedure_names(config.sources.caller_file)
    return locator.names()


async def explain_run(config: ExplainConfig) -> ExplainReport:
    """Seed fixtures, then EXPLAIN the SELECTs of every procedure of interest.

    Raises:
        SetupError: If the environment, ignore file, connection or seeding
                    makes the run impossible
    """
    config.check_environment()

    ignore = load_ignore_list(config.sources.ignore_file)
    locator = ProcedureLocator.build(config.sources.root, config.sources.patterns)
    names = _procedure_names(config, locator)
    registry = PlaceholderRegistry.with_defaults(config.seeding.known_args)

    async with MySQLPlanner(config.database.dsn) as planner:
        seeder = FixtureSeeder(planner, registry, config.seeding.record_count)
        await seeder.seed()
        return await run_explain_checks(names, locator, ignore, registry, planner)


def scan_file(path: str, procedure: str | None, normalize: bool) -> None:
    """Print the balanced (and optionally normalized) SELECTs of one procedure."""
    source = Path(path).read_text(encoding="utf-8")
    registry = PlaceholderRegistry.with_defaults()

    selects = [balance_parentheses(select) for select in scan_selects(source, procedure)]
    if not selects:
        print(f"No SELECT statements found in {path}", file=sys.stderr)
        return

    for select in selects:
        print(normalize_select(select, registry) if normalize else select)


def list_procedures(config: ExplainConfig) -> None:
    """Print each procedure of interest with the file it resolves to."""
    locator = ProcedureLocator.build(config.sources.root, config.sources.patterns)

    for name in _procedure_names(config, locator):
        result = locator.lookup(name)
        if result.found:
            print(f"{name}\t{result.path}")
        else:
            print(f"{name}\t{result.status.value}")


async def db_ping(dsn: str) -> None:
    """Test the database connection.

    Raises:
        SetupError: If the connection can't be opened
    """
    async with MySQLPlanner(dsn) as planner:
        version = await planner.server_version()

    print("✓ Database connection successful")
    print(f"  MySQL: {version}")


if __name__ == "__main__":
    run()
