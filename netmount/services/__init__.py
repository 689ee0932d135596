"""
Mount orchestration services.

Components:
- read_records: config file -> numbered raw records
- TargetValidator: raw records -> MountTargets (fail-closed)
- MountedSetSnapshot: read-only view of mounted paths
- ReachabilityProbe: bounded TCP check before mounting
- MountExecutor: single mount(8) invocation
- MountOrchestrator: concurrent fan-out and sorted join
- ReportPrinter: stdout report
"""

from .config_reader import read_records
from .target_validator import TargetValidator
from .mounted_snapshot import MountedSetSnapshot, load_snapshot
from .reachability_probe import ReachabilityProbe
from .mount_executor import MountExecutor
from .mount_orchestrator import MountOrchestrator
from .report_renderer import ReportPrinter

__all__ = [
    "read_records",
    "TargetValidator",
    "MountedSetSnapshot",
    "load_snapshot",
    "ReachabilityProbe",
    "MountExecutor",
    "MountOrchestrator",
    "ReportPrinter",
]
