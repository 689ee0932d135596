import argparse
import asyncio
import logging
import time
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from rich.console import Console
from rich.text import Text

from . import PROGRAM_NAME, __version__
from .config import Settings
from .core.exceptions import NetmountError
from .logging_config import setup_logging
from .services import (
    MountExecutor,
    MountOrchestrator,
    ReachabilityProbe,
    ReportPrinter,
    TargetValidator,
    load_snapshot,
    read_records,
)

EXIT_OK = 0
EXIT_FATAL = 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROGRAM_NAME,
        description="Mount the network shares listed in the config file on their fstab mount points",
    )

    # Defaults are None so that unset flags fall through to env / settings.env
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_const",
        const=True,
        default=None,
        help="Increased verbosity by showing errors",
    )
    parser.add_argument(
        "-t",
        "--timeout",
        dest="probe_timeout_ms",
        type=int,
        default=None,
        metavar="MS",
        help="Timeout for the host probe in milliseconds (default: 150)",
    )
    parser.add_argument(
        "-c",
        "--config",
        dest="config_file",
        default=None,
        metavar="PATH",
        help="Config file (default: ~/.config/netmount/netmount.conf)",
    )
    parser.add_argument(
        "--mount-info",
        dest="mount_info_file",
        default=None,
        metavar="PATH",
        help="File listing mounted filesystems (default: /proc/self/mountinfo)",
    )
    parser.add_argument(
        "--mount-timeout",
        dest="mount_timeout_seconds",
        type=float,
        default=None,
        metavar="SEC",
        help="Give up on a mount after SEC seconds, 0 waits forever (default: 120)",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Diagnostic log level on stderr (default: WARNING)",
    )
    parser.add_argument(
        "--no-color",
        dest="color",
        action="store_const",
        const=False,
        default=None,
        help="Disable colored output",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s v{__version__}")
    return parser


def settings_from_args(args: argparse.Namespace) -> Settings:
    """Build the run's Settings. Flags given on the command line win over env and settings.env."""
    overrides: Dict[str, Any] = {
        key: value for key, value in vars(args).items() if value is not None
    }
    return Settings(**overrides)


async def run(settings: Settings, console: Optional[Console] = None) -> int:
    """Validate, snapshot, mount everything concurrently and print the report."""
    start_time = time.perf_counter()
    printer = ReportPrinter(settings, console)

    try:
        records = await read_records(settings.config_file)
        targets = TargetValidator().validate(records, source=str(settings.config_file))
        snapshot = await load_snapshot(settings.mount_info_file)
    except NetmountError as e:
        logging.error(f"Aborting before any mount attempt: {e}")
        printer.print_fatal(e)
        return EXIT_FATAL

    orchestrator = MountOrchestrator(ReachabilityProbe(settings), MountExecutor(settings))
    outcomes = await orchestrator.run(targets, snapshot)

    printer.print_outcomes(outcomes)
    printer.print_summary(PROGRAM_NAME, __version__, time.perf_counter() - start_time)
    return EXIT_OK


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ValidationError as e:
        # Pydantic messages contain [type=...] blocks that must not be read as markup
        Console(stderr=True, highlight=False).print(Text(f"Invalid settings:\n{e}"))
        return EXIT_FATAL

    setup_logging(settings)
    return asyncio.run(run(settings))
