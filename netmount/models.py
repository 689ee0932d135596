from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class MountStatus(str, Enum):
    """
    Terminal status for a single target after a run.

    Decision order: AlreadyMounted -> NoPort -> Unreachable -> Mounted | MountFailed
    """

    ALREADY_MOUNTED = "AlreadyMounted"  # Path found in the mounted-set snapshot
    NO_PORT = "NoPort"  # No port to probe, target skipped
    UNREACHABLE = "Unreachable"  # Host did not accept a TCP connection in time
    MOUNT_FAILED = "MountFailed"  # mount(8) returned non-zero or timed out
    MOUNTED = "Mounted"  # mount(8) succeeded


class MountTarget(BaseModel):
    """
    One declared remote share to local mount point mapping.

    Created once by the TargetValidator and never modified afterwards.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., description="Display name used in the report")
    local_path: str = Field(..., description="Local mount point resolved through fstab")
    host: str = Field(..., description="Host probed before mounting")
    port: str = Field(..., description="TCP port probed before mounting")


class MountOutcome(BaseModel):
    """Exactly one outcome exists per target at the end of a run."""

    model_config = ConfigDict(frozen=True)

    target: MountTarget
    status: MountStatus
    detail: Optional[str] = Field(
        default=None, description="Unreachable reason or mount diagnostic"
    )

    @property
    def name(self) -> str:
        return self.target.name


@dataclass(frozen=True)
class RawRecord:
    """A single config line as read from disk, before validation."""

    line_number: int
    text: str
    fields: List[str] = field(default_factory=list)

    @property
    def is_ignorable(self) -> bool:
        """Blank lines and comment lines are skipped without validation."""
        return not self.text or self.text.startswith("#")


@dataclass(frozen=True)
class ValidationIssue:
    line: int
    message: str

    def __str__(self) -> str:
        return f"{self.line:3d}: {self.message}"


@dataclass(frozen=True)
class ProbeResult:
    reachable: bool
    reason: Optional[str] = None


@dataclass(frozen=True)
class MountResult:
    """Result of one mount(8) invocation."""

    success: bool
    output: str = ""
    return_code: Optional[int] = None
    timed_out: bool = False

    @property
    def diagnostic(self) -> str:
        if self.output:
            return self.output
        if self.timed_out:
            return "mount timed out"
        return f"mount exited with status {self.return_code}"
