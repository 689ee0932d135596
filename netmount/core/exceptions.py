# netmount/core/exceptions.py

from typing import List

from ..models import ValidationIssue


class NetmountError(Exception):
    """Base class for fatal errors that abort a run before any mount attempt."""


class ConfigUnavailableError(NetmountError):
    """Raised when the config file or the mount info file cannot be read."""
    def __init__(self, path: str, reason: str, source: str = "config file"):
        self.path = path
        self.reason = reason
        self.source = source
        super().__init__(f"Could not find the {source}: {path}")


class ConfigValidationError(NetmountError):
    """Raised when one or more config records are malformed. Carries every issue found."""
    def __init__(self, issues: List[ValidationIssue], numbered_lines: List[str]):
        self.issues = issues
        self.numbered_lines = numbered_lines
        super().__init__(
            f"{len(issues)} invalid record(s) in config file, aborting"
        )


class NoTargetsError(NetmountError):
    """Raised when the config file declares no targets at all."""
    def __init__(self, path: str):
        self.path = path
        super().__init__("No hosts found in config file. Nothing to mount")
