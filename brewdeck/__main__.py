"""Entry point for python -m brewdeck.

Supports both TUI mode (default) and CLI subcommands for headless operation.

Usage:
    # Launch TUI
    python -m brewdeck

    # Try the dashboard without brew
    python -m brewdeck --demo

    # CLI commands (headless)
    python -m brewdeck list
    python -m brewdeck outdated --json
    python -m brewdeck info wget
    python -m brewdeck doctor
"""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from typing import Any

from brewdeck.exceptions import BrewError
from brewdeck.logging_config import PACKAGE_LOGGER, LogContext, get_logger
from brewdeck.ports import PackageManagerClient

logger = get_logger("cli")


def _setup_logging(args: argparse.Namespace) -> None:
    """Configure logging based on command-line arguments."""
    from brewdeck.logging_config import enable_debug_mode, setup_logging

    if args.debug:
        enable_debug_mode()
    else:
        setup_logging(
            level=args.log_level,
            log_to_console=False,
            log_to_file=not args.no_log_file,
        )


def _print_json(data: Any) -> None:
    """Print data as JSON to stdout."""
    print(json.dumps(data, indent=2, default=str))


def _print_table(rows: list[dict[str, Any]], columns: list[str]) -> None:
    """Print data as a simple table."""
    if not rows:
        print("No results.")
        return

    # Calculate column widths
    widths = {col: len(col) for col in columns}
    for row in rows:
        for col in columns:
            val = str(row.get(col, ""))
            widths[col] = max(widths[col], len(val))

    # Print header
    header = "  ".join(col.ljust(widths[col]) for col in columns)
    print(header)
    print("-" * len(header))

    # Print rows
    for row in rows:
        line = "  ".join(str(row.get(col, "")).ljust(widths[col]) for col in columns)
        print(line)


def _make_client(args: argparse.Namespace) -> PackageManagerClient:
    if args.demo:
        from brewdeck.testing import demo_client

        return demo_client()

    from brewdeck.brew import BrewClient
    from brewdeck.config import load_config_or_default

    return BrewClient(load_config_or_default().brew_path)


# =============================================================================
# CLI Command Handlers
# =============================================================================


async def cmd_list(args: argparse.Namespace) -> int:
    """Handle list command."""
    client = _make_client(args)
    formulae = not args.cask
    casks = not args.formula
    packages = await client.list_installed(formulae=formulae, casks=casks)

    if args.json:
        _print_json([
            {
                "name": p.name,
                "version": p.version,
                "type": p.type.value,
                "pinned": p.pinned,
            }
            for p in packages
        ])
        return 0

    if not packages:
        print("No packages installed.")
        return 0

    _print_table(
        [
            {
                "Name": p.name,
                "Version": p.version or "-",
                "Type": p.type.value,
                "Pinned": "yes" if p.pinned else "",
            }
            for p in packages
        ],
        ["Name", "Version", "Type", "Pinned"],
    )
    return 0


async def cmd_outdated(args: argparse.Namespace) -> int:
    """Handle outdated command."""
    client = _make_client(args)
    packages = await client.outdated()

    if args.json:
        _print_json([
            {
                "name": p.name,
                "current_version": p.current_version,
                "latest_version": p.latest_version,
                "pinned": p.pinned,
                "type": p.type.value,
            }
            for p in packages
        ])
        return 0

    if not packages:
        print("All packages are up to date.")
        return 0

    _print_table(
        [
            {
                "Name": p.name,
                "Current": p.current_version,
                "Latest": p.latest_version,
                "Pinned": "yes" if p.pinned else "",
            }
            for p in packages
        ],
        ["Name", "Current", "Latest", "Pinned"],
    )
    return 0


async def cmd_taps(args: argparse.Namespace) -> int:
    """Handle taps command."""
    client = _make_client(args)
    taps = await client.list_taps()

    if args.json:
        _print_json([{"name": t.name, "official": t.official} for t in taps])
        return 0

    _print_table(
        [{"Name": t.name, "Official": "yes" if t.official else ""} for t in taps],
        ["Name", "Official"],
    )
    return 0


async def cmd_info(args: argparse.Namespace) -> int:
    """Handle info command."""
    from brewdeck.models import model_to_dict

    client = _make_client(args)
    info = await client.info(args.name, args.cask)

    if args.json:
        _print_json(model_to_dict(info))
        return 0

    print(f"{info.name} {info.version}".rstrip())
    if info.description:
        print(info.description)
    if info.homepage:
        print(info.homepage)
    status = "installed" if info.installed else "not installed"
    if info.pinned:
        status += ", pinned"
    if info.outdated:
        status += ", outdated"
    print(f"Status: {status}")
    if info.dependencies:
        print(f"Dependencies: {', '.join(info.dependencies)}")
    if info.build_dependencies:
        print(f"Build dependencies: {', '.join(info.build_dependencies)}")
    if info.caveats:
        print()
        print(info.caveats)
    return 0


async def cmd_doctor(args: argparse.Namespace) -> int:
    """Handle doctor command."""
    client = _make_client(args)
    report = await client.doctor()
    print(report or "Your system is ready to brew.")
    return 0


async def cmd_update(args: argparse.Namespace) -> int:
    """Handle update command, echoing brew's output as it arrives."""
    client = _make_client(args)
    async for line in client.stream_update():
        print(line, flush=True)
    return 0


async def cmd_logs(args: argparse.Namespace) -> int:
    """Handle logs command."""
    from brewdeck.logging_config import get_log_file_path, get_recent_logs

    lines = get_recent_logs(args.lines)
    if not lines:
        print(f"No log entries in {get_log_file_path()}")
        return 0
    sys.stdout.writelines(lines)
    return 0


COMMANDS = {
    "list": cmd_list,
    "outdated": cmd_outdated,
    "taps": cmd_taps,
    "info": cmd_info,
    "doctor": cmd_doctor,
    "update": cmd_update,
    "logs": cmd_logs,
}


def _run_async(coro: Any) -> int:
    """Run an async coroutine and return exit code."""
    try:
        return asyncio.run(coro)
    except BrewError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


# =============================================================================
# Argument Parser Setup
# =============================================================================


def _add_common_args(parser: argparse.ArgumentParser) -> None:
    """Add common arguments to a parser."""
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output in JSON format",
    )


def _create_parser() -> argparse.ArgumentParser:
    """Create the main argument parser with subcommands."""
    parser = argparse.ArgumentParser(
        prog="brewdeck",
        description="brewdeck - An interactive terminal dashboard for Homebrew",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Launch the TUI application
  brewdeck

  # List installed formulae only
  brewdeck list --formula

  # Show outdated packages as JSON
  brewdeck outdated --json

  # Show details for a cask
  brewdeck info firefox --cask
""",
    )

    # Global arguments
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging to console",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Set log level (default: INFO)",
    )
    parser.add_argument(
        "--no-log-file",
        action="store_true",
        help="Disable logging to file",
    )
    parser.add_argument(
        "--demo",
        action="store_true",
        help="Use built-in sample packages instead of brew",
    )

    # Subcommands
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # list
    list_parser = subparsers.add_parser(
        "list",
        help="List installed packages",
    )
    kind = list_parser.add_mutually_exclusive_group()
    kind.add_argument("--formula", action="store_true", help="Only formulae")
    kind.add_argument("--cask", action="store_true", help="Only casks")
    _add_common_args(list_parser)

    # outdated
    outdated_parser = subparsers.add_parser(
        "outdated",
        help="List packages with newer versions available",
    )
    _add_common_args(outdated_parser)

    # taps
    taps_parser = subparsers.add_parser(
        "taps",
        help="List configured taps",
    )
    _add_common_args(taps_parser)

    # info
    info_parser = subparsers.add_parser(
        "info",
        help="Show package details and dependencies",
    )
    info_parser.add_argument("name", help="Package name")
    info_parser.add_argument(
        "--cask",
        action="store_true",
        help="Treat NAME as a cask",
    )
    _add_common_args(info_parser)

    # doctor
    subparsers.add_parser(
        "doctor",
        help="Run brew doctor",
    )

    # update
    subparsers.add_parser(
        "update",
        help="Run brew update, streaming its output",
    )

    # logs
    logs_parser = subparsers.add_parser(
        "logs",
        help="Show the end of the brewdeck log file",
    )
    logs_parser.add_argument(
        "-n",
        "--lines",
        type=int,
        default=50,
        help="Number of lines to show (default: 50)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    """Main entry point for the brewdeck application."""
    parser = _create_parser()
    args = parser.parse_args(argv)

    # Initialize logging
    _setup_logging(args)

    handler = COMMANDS.get(args.command)
    if handler is not None:
        logger.debug("Running %s", args.command)
        with LogContext(get_logger(PACKAGE_LOGGER), command=args.command):
            return _run_async(handler(args))

    # No subcommand - launch TUI
    from brewdeck.app import BrewDeckApp

    if args.demo:
        from brewdeck.models import AppConfig
        from brewdeck.testing import demo_client

        app = BrewDeckApp(client=demo_client(), config=AppConfig(), persist=False)
    else:
        app = BrewDeckApp()
    app.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
