"""Command-line interface for lockpatch."""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv
from rich.console import Console
from rich.markup import escape

from lockpatch import __version__
from lockpatch.base import resolve_merge_policy_config
from lockpatch.constants import ENV_MERGE_POLICY, ERROR_PREFIX, LOCKFILE_NAME, WARNING_PREFIX
from lockpatch.exceptions import LockpatchError
from lockpatch.resolvers import NpmResolver
from lockpatch.schemas import AddRequest, MergePolicy, PackageSpec
from lockpatch.service import LockPatcher
from lockpatch.utils import parse_specifiers

# Load environment variables from .env file
load_dotenv()

console = Console(highlight=False, soft_wrap=True)
err_console = Console(stderr=True, highlight=False, soft_wrap=True)


class ConsoleLogHandler(logging.Handler):
    """Routes log records to stderr, coloured and prefixed by severity."""

    STYLES = {logging.ERROR: "red", logging.WARNING: "yellow", logging.DEBUG: "dim"}

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            if record.levelno >= logging.ERROR:
                message = ERROR_PREFIX + message
            elif record.levelno >= logging.WARNING:
                message = WARNING_PREFIX + message
            style = self.STYLES.get(record.levelno)
            err_console.print(escape(message), style=style)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False) -> None:
    handler = ConsoleLogHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    package_logger = logging.getLogger("lockpatch")
    package_logger.handlers = [handler]
    package_logger.setLevel(logging.DEBUG if verbose else logging.WARNING)


def print_error(message: str) -> None:
    err_console.print(f"[red]{escape(ERROR_PREFIX + message)}[/red]")


async def cmd_add(args):
    """Add packages to package-lock.json."""
    policy = resolve_merge_policy_config(args.policy, os.getenv(ENV_MERGE_POLICY))
    request = AddRequest(
        packages=parse_specifiers(args.packages),
        dry=args.dry,
        policy=policy,
        project_dir=Path.cwd(),
    )
    patcher = LockPatcher.from_request(request, resolver=NpmResolver())

    def announce(spec: PackageSpec):
        console.print(f"[blue]Adding {escape(spec.specifier)} to {LOCKFILE_NAME}...[/blue]")

    result = await patcher.run(request, on_package=announce)

    for package in result.added:
        console.print(f"  {escape(package.path)} → {escape(package.version or 'unknown')}")

    if result.written:
        console.print(f"[green]Successfully added all packages to {LOCKFILE_NAME}[/green]")
    else:
        console.print(f"[yellow]Dry run mode. Not updating {LOCKFILE_NAME}[/yellow]")
        console.print("[green]Successfully resolved all packages[/green]")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lockpatch",
        description="Update package-lock.json with specific missing entries",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--verbose", "--debug", dest="verbose", action="store_true", help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    add_parser = subparsers.add_parser("add", help="Add specific packages to package-lock.json")
    add_parser.add_argument(
        "packages",
        nargs="+",
        metavar="package",
        help="Packages to add (format: package@version or @namespace/package@version)",
    )
    add_parser.add_argument(
        "-d",
        "--dry",
        action="store_true",
        help="Run in dry mode, only update temporary files without replacing package-lock.json",
    )
    add_parser.add_argument(
        "--policy",
        choices=[p.value for p in MergePolicy],
        default=None,
        help=f"Merge policy (default: ${ENV_MERGE_POLICY} or broad)",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 1

    configure_logging(args.verbose)

    command_map = {
        "add": cmd_add,
    }

    try:
        return asyncio.run(command_map[args.command](args))
    except LockpatchError as e:
        if args.verbose:
            err_console.print_exception()
        print_error(str(e))
        return 1
    except KeyboardInterrupt:
        print_error("Interrupted")
        return 1


if __name__ == "__main__":
    sys.exit(main())
