#!/usr/bin/env python3
"""
Health CLI - Main Orchestrator
An agent-first health data CLI: every command prints one JSON envelope with
a result payload and suggested next commands.

Mock data only. The import command reads an Apple Health export to report
its structure and never stores personal data.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Sequence, TextIO

import settings
from bio_analyzer import HealthAnalyzer
from bio_report_generator import HealthReportGenerator
from errors import HealthCLIError, InvalidRangeError, UsageError
from health_export_scanner import read_export, scan
from mock_data import MockDataGenerator
from responses import COMMON_ACTIONS, NextAction, emit, error, success

logger = logging.getLogger("health")

CLI = settings.CLI_NAME


def setup_logging(verbose: bool = False) -> None:
    """Send diagnostics to stderr so stdout carries only the JSON envelope."""
    level = logging.DEBUG if verbose else getattr(logging, settings.LOG_LEVEL, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stderr,
        force=True
    )


class EnvelopeArgumentParser(argparse.ArgumentParser):
    """Raises UsageError instead of printing usage and exiting with status 2."""

    def error(self, message):
        raise UsageError(f"{self.prog}: {message}")


def setup_argparser() -> argparse.ArgumentParser:
    """Set up command line argument parser."""
    parser = EnvelopeArgumentParser(
        prog=CLI,
        description="Agent-first health data CLI (JSON output, mock data)",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  health status                 # Today's overview
  health hrv --days 14          # 2 weeks HRV trend
  health sleep --days 30        # Monthly sleep analysis
  health alert                  # Check current alerts
  health import export.xml      # Parse Apple Health export

Environment Variables:
  HEALTH_DEFAULT_DAYS   - Default window for hrv/sleep (default: 7)
  HEALTH_MAX_IMPORT_MB  - Largest accepted export file (default: 100)
  HEALTH_LOG_LEVEL      - Log level for stderr diagnostics (default: WARNING)
        """
    )

    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable debug logging on stderr"
    )

    subparsers = parser.add_subparsers(dest="command")

    subparsers.add_parser("status", help="Today's health overview with key metrics")

    for name, help_text in (("hrv", "Heart Rate Variability trends and analysis"),
                            ("sleep", "Sleep analysis and patterns")):
        sub = subparsers.add_parser(name, help=help_text)
        sub.add_argument(
            "--days",
            type=int,
            default=settings.DEFAULT_DAYS,
            help=f"Number of days to analyze ({settings.MIN_DAYS}-{settings.MAX_DAYS}, "
                 f"default: {settings.DEFAULT_DAYS})"
        )

    subparsers.add_parser("alert", help="Check health alerts and warning thresholds")

    import_parser = subparsers.add_parser("import", help="Import Apple Health XML data (parser only)")
    import_parser.add_argument("file", type=str, help="Path to Apple Health XML export file")

    return parser


def validate_days(command: str, days: int) -> None:
    """Reject windows outside MIN_DAYS..MAX_DAYS before any analysis runs."""
    if settings.MIN_DAYS <= days <= settings.MAX_DAYS:
        return
    raise InvalidRangeError(
        f"Days parameter must be between {settings.MIN_DAYS} and {settings.MAX_DAYS}",
        fix=f"Use a value between {settings.MIN_DAYS} and {settings.MAX_DAYS} days",
        next_actions=[
            NextAction(f"{CLI} {command}", "Use default 7 days"),
            NextAction(f"{CLI} {command} --days 14", "Try 2 weeks"),
            NextAction(f"{CLI} {command} --days 30", "Try 1 month"),
        ]
    )


def root_command() -> Dict[str, Any]:
    """Self-documenting command tree."""
    result = {
        "name": f"{CLI}-cli",
        "version": settings.CLI_VERSION,
        "description": "Agent-first health data CLI - HATEOAS CLI reference implementation",
        "design_principles": [
            "JSON-only output for agent consumption",
            "HATEOAS next_actions for discoverability",
            "Self-documenting command structure",
            "Consistent error handling with fix suggestions",
            "Mock data only - no personal health data"
        ],
        "commands": [
            {"name": CLI, "description": "Show this help and available commands", "usage": CLI},
            {"name": "status", "description": "Today's health overview with key metrics",
             "usage": f"{CLI} status"},
            {"name": "hrv", "description": "Heart Rate Variability trends and analysis",
             "usage": f"{CLI} hrv [--days {settings.DEFAULT_DAYS}]",
             "options": [{"name": "--days",
                          "description": f"Number of days to analyze (default: {settings.DEFAULT_DAYS})"}]},
            {"name": "sleep", "description": "Sleep analysis and patterns",
             "usage": f"{CLI} sleep [--days {settings.DEFAULT_DAYS}]",
             "options": [{"name": "--days",
                          "description": f"Number of days to analyze (default: {settings.DEFAULT_DAYS})"}]},
            {"name": "alert", "description": "Check health alerts and warning thresholds",
             "usage": f"{CLI} alert"},
            {"name": "import", "description": "Import Apple Health XML data (parser only)",
             "usage": f"{CLI} import <file>",
             "note": "Parser implementation - processes structure without storing personal data"}
        ],
        "examples": [
            f"{CLI} status                 # Today's overview",
            f"{CLI} hrv --days 14         # 2 weeks HRV trend",
            f"{CLI} sleep --days 30       # Monthly sleep analysis",
            f"{CLI} alert                 # Check current alerts",
            f"{CLI} import export.xml     # Parse Apple Health export"
        ],
        "data_sources": {
            "note": "All data is mock/example data for demonstration",
            "supported_formats": ["Apple Health XML", "HealthKit exports"],
            "privacy": "No personal health data is stored or transmitted"
        }
    }
    next_actions = [
        COMMON_ACTIONS["STATUS"],
        COMMON_ACTIONS["HRV"],
        COMMON_ACTIONS["SLEEP"],
        COMMON_ACTIONS["ALERTS"]
    ]
    return success("", result, next_actions)


def status_command(reports: HealthReportGenerator) -> Dict[str, Any]:
    """Today's health overview."""
    result = reports.generate_status()

    next_actions = [COMMON_ACTIONS["HRV"], COMMON_ACTIONS["SLEEP"], COMMON_ACTIONS["ALERTS"]]
    if result["alerts"]:
        next_actions.insert(0, COMMON_ACTIONS["ALERTS"])
    if result["hrv"]["category"] == "low":
        next_actions.append(NextAction(f"{CLI} hrv --days 14", "Analyze HRV trend over 2 weeks"))
    if result["sleep"]["last_night_hours"] < 7:
        next_actions.append(NextAction(f"{CLI} sleep --days 7", "Review sleep patterns this week"))

    return success("status", result, next_actions)


def hrv_command(reports: HealthReportGenerator, days: int) -> Dict[str, Any]:
    """HRV trends over the requested window."""
    validate_days("hrv", days)
    result = reports.generate_hrv_report(days)

    next_actions = [COMMON_ACTIONS["STATUS"], COMMON_ACTIONS["SLEEP"]]
    if days == 7:
        next_actions.append(NextAction(f"{CLI} hrv --days 14", "Extend analysis to 2 weeks"))
    elif days == 14:
        next_actions.append(NextAction(f"{CLI} hrv --days 30", "View monthly HRV pattern"))
    if result["current"]["category"] == "low":
        next_actions.insert(0, COMMON_ACTIONS["ALERTS"])

    return success(f"hrv --days {days}", result, next_actions)


def sleep_command(reports: HealthReportGenerator, days: int) -> Dict[str, Any]:
    """Sleep patterns over the requested window."""
    validate_days("sleep", days)
    result = reports.generate_sleep_report(days)

    next_actions = [COMMON_ACTIONS["STATUS"], COMMON_ACTIONS["HRV"]]
    if days == 7:
        next_actions.append(NextAction(f"{CLI} sleep --days 30", "View monthly sleep patterns"))
    if result["last_night"]["duration"] < 7:
        next_actions.insert(0, COMMON_ACTIONS["ALERTS"])
    if result["consistency"]["bedtime_variance"] > 60:
        next_actions.append(NextAction(f"{CLI} sleep --days 14", "Analyze bedtime consistency over 2 weeks"))

    return success(f"sleep --days {days}", result, next_actions)


def alert_command(reports: HealthReportGenerator) -> Dict[str, Any]:
    """Threshold check across HRV, sleep and steps."""
    result = reports.generate_alert_report()
    active_metrics = {alert["metric"] for alert in result["active_alerts"]}

    next_actions = [COMMON_ACTIONS["STATUS"]]
    if "HRV" in active_metrics:
        next_actions.append(NextAction(f"{CLI} hrv --days 14", "Analyze HRV trend to understand alert"))
    if "Sleep Duration" in active_metrics:
        next_actions.append(NextAction(f"{CLI} sleep --days 7", "Review recent sleep patterns"))
    if "Daily Steps" in active_metrics:
        next_actions.append(NextAction(f"{CLI} status", "Check current activity levels"))
    if not active_metrics:
        next_actions.extend([COMMON_ACTIONS["HRV"], COMMON_ACTIONS["SLEEP"]])

    return success("alert", result, next_actions)


def import_command(file_path: str) -> Dict[str, Any]:
    """Scan an Apple Health export for structure only."""
    scan_result = scan(read_export(file_path, settings.MAX_IMPORT_SIZE_MB))
    result = {
        "file": Path(file_path).name,
        "records_processed": scan_result.records_processed,
        "data_types": scan_result.data_types,
        "date_range": scan_result.date_range,
        "warnings": scan_result.warnings
    }

    next_actions = [
        COMMON_ACTIONS["STATUS"],
        NextAction(f"{CLI} hrv --days 30", "View HRV trends (using mock data for demo)"),
        NextAction(f"{CLI} sleep --days 30", "View sleep patterns (using mock data for demo)")
    ]
    if scan_result.warnings:
        next_actions.insert(0, NextAction(f"{CLI} alert", "Check for any data quality alerts"))

    return success(f"import {file_path}", result, next_actions)


def _command_label(args: argparse.Namespace) -> str:
    """Echo of the invoked command, used in failure envelopes."""
    if args.command in ("hrv", "sleep"):
        return f"{args.command} --days {args.days}"
    if args.command == "import":
        return f"import {args.file}"
    return args.command or ""


def dispatch(args: argparse.Namespace, generator: Optional[MockDataGenerator] = None) -> Dict[str, Any]:
    """Route parsed arguments to a command and return its envelope."""
    if args.command is None:
        return root_command()
    if args.command == "import":
        return import_command(args.file)

    reports = HealthReportGenerator(HealthAnalyzer(generator))
    if args.command == "status":
        return status_command(reports)
    if args.command == "hrv":
        return hrv_command(reports, args.days)
    if args.command == "sleep":
        return sleep_command(reports, args.days)
    if args.command == "alert":
        return alert_command(reports)
    raise ValueError(f"Unknown command: {args.command}")


def run(argv: Optional[Sequence[str]] = None,
        generator: Optional[MockDataGenerator] = None,
        stream: Optional[TextIO] = None) -> int:
    """
    Parse arguments, run one command and print its envelope.

    Returns:
        Exit code (0 success, 1 failure)
    """
    argv = list(sys.argv[1:] if argv is None else argv)
    parser = setup_argparser()
    try:
        args = parser.parse_args(argv)
    except UsageError as e:
        return emit(error(" ".join(argv), e.message, e.code, e.fix, e.next_actions), stream)
    setup_logging(args.verbose)

    command = _command_label(args)
    logger.debug("Running command: %s", command or "(root)")

    try:
        response = dispatch(args, generator)
    except HealthCLIError as e:
        logger.info("%s failed: %s (%s)", command or CLI, e.message, e.code)
        response = error(command, e.message, e.code, e.fix, e.next_actions)
    except Exception as e:
        logger.exception("Unexpected failure in %s", command or CLI)
        response = error(
            command, str(e), "UNCAUGHT_EXCEPTION",
            "Report this error to the maintainers",
            [NextAction(CLI, "Try again with root command")]
        )

    return emit(response, stream)


def main() -> None:
    """Main entry point."""
    sys.exit(run())


if __name__ == "__main__":
    main()
