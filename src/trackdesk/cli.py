"""Command-line interface for trackdesk."""

from __future__ import annotations

import argparse
import asyncio
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console

from trackdesk import __version__
from trackdesk.commands import COMMAND_HELP, CommandHandler
from trackdesk.config.loader import load_config
from trackdesk.config.paths import get_user_config_dir
from trackdesk.config.schema import Config
from trackdesk.errors import ConfigError
from trackdesk.logging import get_logger, setup_logging
from trackdesk.repl import InteractiveShell
from trackdesk.result import Ok
from trackdesk.session.coordinator import SessionCoordinator
from trackdesk.ui.console import ConsolePrompter, RichWindowHost

log = get_logger()

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_CONFIG = 2

# Commands that act on the current exercise and accept --exercise
_EXERCISE_COMMANDS = (
    "code", "test", "submit", "download", "readme", "help", "tests", "open",
    "complete", "publish", "unpublish",
)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="trackdesk",
        description="Browse practice tracks, download exercises, test and submit solutions",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Extra YAML config file layered over the defaults",
    )

    subparsers = parser.add_subparsers(dest="command", help="Command")

    subparsers.add_parser("shell", help="Interactive session")
    subparsers.add_parser("tracks", help=COMMAND_HELP["tracks"])
    subparsers.add_parser("status", help=COMMAND_HELP["status"])

    exercises_parser = subparsers.add_parser("exercises", help=COMMAND_HELP["exercises"])
    exercises_parser.add_argument("--track", help="Track slug (default: current track)")

    track_parser = subparsers.add_parser("track", help=COMMAND_HELP["track"])
    track_parser.add_argument("slug", nargs="?", help="Track slug (prompted if omitted)")

    exercise_parser = subparsers.add_parser("exercise", help=COMMAND_HELP["exercise"])
    exercise_parser.add_argument("slug", nargs="?", help="Exercise slug (prompted if omitted)")
    exercise_parser.add_argument("--track", help="Switch to this track first")

    for name in _EXERCISE_COMMANDS:
        sub = subparsers.add_parser(name, help=COMMAND_HELP[name])
        sub.add_argument("--track", help="Switch to this track first")
        sub.add_argument("--exercise", help="Load this exercise first")
        if name == "download":
            sub.add_argument(
                "--no-force",
                dest="force",
                action="store_false",
                help="Reuse the local copy if it already exists",
            )

    configure_parser = subparsers.add_parser("configure", help=COMMAND_HELP["configure"])
    configure_parser.add_argument("--token", help="API token (default: configured token)")
    configure_parser.add_argument("--workspace", type=Path, help="Workspace directory")

    return parser


def _apply_overrides(config: Config, parsed: argparse.Namespace) -> None:
    if parsed.verbose:
        config.logging.verbose = min(1 + parsed.verbose, 4)
    if getattr(parsed, "token", None):
        config.api.token = parsed.token
    if getattr(parsed, "workspace", None):
        config.workspace.root = str(parsed.workspace.expanduser())


async def _run(parsed: argparse.Namespace, config: Config, console: Console) -> int:
    try:
        coordinator = SessionCoordinator.from_config(
            config, RichWindowHost(console), ConsolePrompter(console)
        )
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        return EXIT_CONFIG

    try:
        handler = CommandHandler(coordinator, console)
        if parsed.command == "shell":
            user_dir = get_user_config_dir()
            history = user_dir / "history" if user_dir and user_dir.is_dir() else None
            await InteractiveShell(handler, history_file=history).run()
            return EXIT_OK

        result = await handler.run(
            parsed.command,
            getattr(parsed, "slug", None),
            track=getattr(parsed, "track", None),
            exercise=getattr(parsed, "exercise", None),
            force=getattr(parsed, "force", True),
        )
        return EXIT_OK if isinstance(result, Ok) else EXIT_FAILED
    finally:
        await coordinator.aclose()


def run_cli(args: Sequence[str], console: Console | None = None) -> int:
    """Run the CLI with the given arguments and return the exit code."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.command is None:
        parser.print_help()
        return EXIT_FAILED

    console = console or Console()
    try:
        config = load_config(config_path=parsed.config)
    except ConfigError as e:
        console.print(f"[red]{e}[/red]")
        return EXIT_CONFIG

    _apply_overrides(config, parsed)
    setup_logging(config.logging)
    log.debug("Running %s", parsed.command)

    return asyncio.run(_run(parsed, config, console))


def main() -> None:
    """Console script entry point."""
    sys.exit(run_cli(sys.argv[1:]))
