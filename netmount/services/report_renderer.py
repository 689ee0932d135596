"""Report Renderer - turns outcomes and fatal errors into stdout lines."""

from typing import Dict, List, Optional, Sequence

from rich.console import Console
from rich.text import Text

from ..config import Settings
from ..core.exceptions import ConfigValidationError, NetmountError
from ..models import MountOutcome, MountStatus

NAME_WIDTH = 20

GENERIC_UNREACHABLE = "not responding"
GENERIC_MOUNT_ERROR = "mount error (increase verbosity with option -v)"
GENERIC_CONFIG_ERROR = "error reading config file, aborting. Use option -v to show error(s)"

STATUS_TEXT: Dict[MountStatus, str] = {
    MountStatus.ALREADY_MOUNTED: "already mounted",
    MountStatus.NO_PORT: "no port given",
    MountStatus.UNREACHABLE: GENERIC_UNREACHABLE,
    MountStatus.MOUNT_FAILED: GENERIC_MOUNT_ERROR,
    MountStatus.MOUNTED: "mounted",
}

STATUS_STYLE: Dict[MountStatus, str] = {
    MountStatus.ALREADY_MOUNTED: "cyan",
    MountStatus.NO_PORT: "yellow",
    MountStatus.UNREACHABLE: "yellow",
    MountStatus.MOUNT_FAILED: "bold red",
    MountStatus.MOUNTED: "bold green",
}


def status_text(outcome: MountOutcome, verbose: bool) -> str:
    """Raw diagnostics are only shown in verbose mode."""
    if verbose and outcome.detail and outcome.status in (
        MountStatus.UNREACHABLE,
        MountStatus.MOUNT_FAILED,
    ):
        return outcome.detail
    return STATUS_TEXT[outcome.status]


def styled_line(outcome: MountOutcome, verbose: bool) -> Text:
    """The single place a status line is laid out; plain and colored output share it."""
    line = Text(f"{outcome.name:<{NAME_WIDTH}} ")
    line.append(status_text(outcome, verbose), style=STATUS_STYLE[outcome.status])
    return line


def format_line(outcome: MountOutcome, verbose: bool) -> str:
    return styled_line(outcome, verbose).plain


def render_report(outcomes: Sequence[MountOutcome], verbose: bool) -> List[str]:
    """One line per outcome, in the order given (the orchestrator sorts by name)."""
    return [format_line(outcome, verbose) for outcome in outcomes]


def summary_line(program: str, version: str, elapsed_seconds: float) -> str:
    return f"{program} v{version} | {elapsed_seconds:.3f} sec."


def config_error_lines(error: NetmountError, verbose: bool) -> List[str]:
    """
    Lines printed when the run aborts before any mount attempt.

    Validation failures hide the details unless verbose is set; verbose mode
    lists the numbered config file followed by every issue found.
    """
    if not isinstance(error, ConfigValidationError):
        return [str(error)]

    if not verbose:
        return [GENERIC_CONFIG_ERROR]

    lines = list(error.numbered_lines)
    lines.append("")
    lines.append("Errors:")
    lines.extend(str(issue) for issue in error.issues)
    return lines


class ReportPrinter:
    """Writes the report to stdout through a rich Console."""

    def __init__(self, settings: Settings, console: Optional[Console] = None):
        self._verbose = settings.verbose
        self._console = console or Console(
            highlight=False, no_color=not settings.color, soft_wrap=True
        )

    def print_outcomes(self, outcomes: Sequence[MountOutcome]) -> None:
        self._console.print()
        for outcome in outcomes:
            self._console.print(styled_line(outcome, self._verbose))

    def print_summary(self, program: str, version: str, elapsed_seconds: float) -> None:
        self._console.print()
        self._console.print(Text(summary_line(program, version, elapsed_seconds), style="dim"))
        self._console.print()

    def print_fatal(self, error: NetmountError) -> None:
        self._console.print()
        for line in config_error_lines(error, self._verbose):
            self._console.print(Text(f" {line}" if line else "", style="red"))
        self._console.print()
