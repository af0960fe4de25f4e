"""
CLI App - Main entry point for the p4jira command line tool.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional, Sequence

from .exit_codes import ExitCode
from .logging import setup_logging
from .output import Console
from .. import __version__
from ..adapters import (
    EnvironmentConfigProvider,
    FileCheckpointStore,
    JiraAdapter,
    PerforceAdapter,
)
from ..application import SyncOrchestrator
from ..core.domain.events import EventBus
from ..core.ports.change_source import ChangeSourceError
from ..core.ports.checkpoint_store import CheckpointError
from ..core.ports.config_provider import AppConfig, ConfigError


MAX_VERBOSITY = 3


def create_parser() -> argparse.ArgumentParser:
    """
    Create the command-line argument parser for p4jira.

    Returns:
        Configured ArgumentParser instance.
    """
    parser = argparse.ArgumentParser(
        prog="p4jira",
        description="Post submitted Perforce changes as comments on the Jira issues they mention",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Process everything submitted since the last run
  p4jira --project PROJ --depot //depot/main/... --checkpoint-file p4jira.ckpt

  # Preview without posting or moving the checkpoint
  p4jira --project PROJ --fake -vvv

  # Replay specific changes (checkpoint untouched)
  p4jira --project PROJ --changes 1234 1240

  # Start after a given change instead of the checkpoint
  p4jira --project PROJ --since 1200
        """,
    )

    parser.add_argument(
        "--project", "-p",
        type=str,
        help="Jira project key whose issue keys are looked for (or set JIRA_PROJECT)",
    )
    parser.add_argument(
        "--jira-url",
        type=str,
        help="Jira instance URL (or set JIRA_URL)",
    )
    parser.add_argument(
        "--depot",
        type=str,
        help="Depot path to watch, e.g. //depot/main/... (or set P4JIRA_DEPOT_PATH)",
    )

    selection = parser.add_mutually_exclusive_group()
    selection.add_argument(
        "--changes", "-c",
        type=int,
        nargs="+",
        metavar="N",
        help="Process exactly these changes, in order; the checkpoint is not updated",
    )
    selection.add_argument(
        "--since",
        type=int,
        metavar="N",
        help="Process changes after N instead of the stored checkpoint",
    )

    parser.add_argument(
        "--fake", "--dry-run",
        dest="fake",
        action="store_true",
        default=None,
        help="Do everything except posting to Jira and writing the checkpoint",
    )
    parser.add_argument(
        "--verbose", "-v",
        action="count",
        help="Increase logging detail (-v skipped changes, -vv p4 commands, -vvv payloads)",
    )
    parser.add_argument(
        "--threshold",
        type=int,
        metavar="BYTES",
        help="Diffs of at least this many bytes are attached instead of inlined",
    )
    parser.add_argument(
        "--review-url",
        type=str,
        metavar="TEMPLATE",
        help="Link 'Review: ID n' to this URL; {id} is replaced by n",
    )
    parser.add_argument(
        "--checkpoint-file",
        type=str,
        metavar="PATH",
        help="File holding the last processed change (or set P4JIRA_CHECKPOINT_FILE)",
    )
    parser.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Write the log here instead of stdout (or set P4JIRA_LOG_FILE)",
    )
    parser.add_argument(
        "--env-file",
        type=str,
        metavar="PATH",
        help="Read settings from this .env file (default: ./.env when present)",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored output",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser


def load_config(args: argparse.Namespace) -> AppConfig:
    """
    Build the application configuration from the environment and arguments.

    Raises:
        ConfigError: If required settings are missing or malformed
    """
    overrides = vars(args).copy()
    if overrides.get("verbose") is not None:
        overrides["verbose"] = min(overrides["verbose"], MAX_VERBOSITY)

    env_file = Path(args.env_file) if args.env_file else None
    provider = EnvironmentConfigProvider(env_file=env_file, cli_overrides=overrides)

    errors = provider.validate()
    if errors:
        raise ConfigError("Invalid configuration", errors=errors)

    config = provider.load()
    errors = config.validate()
    if errors:
        raise ConfigError("Invalid configuration", errors=errors)

    return config


def build_orchestrator(config: AppConfig, event_bus: Optional[EventBus] = None) -> SyncOrchestrator:
    """Wire the Perforce source, Jira tracker and checkpoint file together."""
    tracker = JiraAdapter(config=config.tracker, dry_run=config.sync.dry_run)
    source = PerforceAdapter(config.source)
    store = FileCheckpointStore(config.sync.checkpoint_path)

    return SyncOrchestrator(
        source=source,
        tracker=tracker,
        checkpoint_store=store,
        project_key=config.tracker.project_key,
        config=config.sync,
        event_bus=event_bus or EventBus(),
    )


def run_sync(config: AppConfig, args: argparse.Namespace, console: Console) -> int:
    """
    Run one synchronization and report it.

    Returns:
        Exit code
    """
    logger = logging.getLogger("main")

    console.header(f"p4jira {__version__}")
    console.info(f"Project: {config.tracker.project_key}")
    console.info(f"Depot: {config.source.depot_path}")
    if config.sync.dry_run:
        console.dry_run_banner()

    orchestrator = build_orchestrator(config)

    console.section("Connecting to Jira")
    if not orchestrator.tracker.test_connection():
        console.error(f"Cannot connect to {config.tracker.url}")
        logger.error(f"Cannot connect to Jira at {config.tracker.url}")
        logger.error("Job aborted")
        return ExitCode.CONNECTION_ERROR
    console.success("Connected")

    console.section("Synchronizing changes")
    try:
        result = orchestrator.run(changes=args.changes, since=args.since)
    except ChangeSourceError as e:
        console.error(f"Perforce failure: {e}")
        logger.error(f"Perforce failure: {e}")
        logger.error("Job aborted")
        return ExitCode.CONNECTION_ERROR
    except CheckpointError as e:
        console.error(f"Checkpoint failure: {e}")
        logger.error(f"Checkpoint failure: {e}")
        logger.error("Job aborted")
        return ExitCode.ERROR
    except KeyboardInterrupt:
        console.warning("Interrupted")
        logger.warning("Interrupted by user")
        logger.error("Job aborted")
        return ExitCode.CANCELLED
    except Exception as e:
        console.error(f"Unexpected error: {e}")
        logger.exception(f"Unexpected error: {e}")
        logger.error("Job aborted")
        return ExitCode.ERROR

    console.run_report(result)

    return ExitCode.SUCCESS if result.success else ExitCode.PARTIAL_SUCCESS


def log_config_abort(errors: list[str], log_file: Optional[str] = None) -> None:
    """Log configuration errors and the abort marker, falling back to stdout."""
    try:
        setup_logging(0, log_file)
    except OSError:
        setup_logging(0)

    logger = logging.getLogger("main")
    for error in errors:
        logger.error(f"Configuration error: {error}")
    logger.error("Job aborted")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """
    Main entry point for the p4jira CLI.

    Parses arguments, loads configuration, sets up logging and runs a sync.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    console = Console(color=not args.no_color, verbose=bool(args.verbose))

    try:
        config = load_config(args)
    except ConfigError as e:
        errors = e.errors or [str(e)]
        console.config_errors(errors)
        log_config_abort(errors, args.log_file)
        return ExitCode.CONFIG_ERROR

    try:
        setup_logging(config.sync.verbosity, config.log_file)
    except OSError as e:
        errors = [f"Cannot open log file {config.log_file}: {e}"]
        console.config_errors(errors)
        log_config_abort(errors)
        return ExitCode.CONFIG_ERROR

    return run_sync(config, args, console)


def run() -> None:
    """
    Entry point for the console script.

    Calls main() and exits with its return code.
    """
    sys.exit(main())


if __name__ == "__main__":
    run()
