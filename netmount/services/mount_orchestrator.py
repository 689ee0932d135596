"""
Mount Orchestrator - fans out one task per target and joins the outcomes.

Each task walks the same decision order against the shared, read-only
snapshot and returns a MountOutcome. Tasks never print; the caller renders
the sorted outcomes after every task has finished, so report order does not
depend on completion order.
"""

import asyncio
import logging
from typing import List, Sequence

from ..models import MountOutcome, MountStatus, MountTarget
from .mount_executor import MountExecutor
from .mounted_snapshot import MountedSetSnapshot
from .reachability_probe import ReachabilityProbe


class MountOrchestrator:
    """Runs AlreadyMounted -> NoPort -> Probe -> Mount for every target concurrently."""

    def __init__(self, probe: ReachabilityProbe, executor: MountExecutor):
        self._probe = probe
        self._executor = executor

    async def run(
        self, targets: Sequence[MountTarget], snapshot: MountedSetSnapshot
    ) -> List[MountOutcome]:
        """Process all targets and return one outcome per target, sorted by name."""
        logging.info(f"Processing {len(targets)} target(s) concurrently")

        outcomes = await asyncio.gather(
            *(self._process_target(target, snapshot) for target in targets)
        )

        # sorted() is stable: duplicate names keep config order
        return sorted(outcomes, key=lambda outcome: outcome.name)

    async def _process_target(
        self, target: MountTarget, snapshot: MountedSetSnapshot
    ) -> MountOutcome:
        try:
            return await self._decide(target, snapshot)
        except Exception as e:
            # Errors stay inside this target's task
            logging.exception(f"Unexpected error while processing {target.name}")
            return MountOutcome(target=target, status=MountStatus.MOUNT_FAILED, detail=str(e))

    async def _decide(self, target: MountTarget, snapshot: MountedSetSnapshot) -> MountOutcome:
        if snapshot.is_mounted(target.local_path):
            logging.debug(f"{target.name}: {target.local_path} already mounted")
            return MountOutcome(target=target, status=MountStatus.ALREADY_MOUNTED)

        if not target.port:
            logging.debug(f"{target.name}: no port given, skipping")
            return MountOutcome(target=target, status=MountStatus.NO_PORT)

        probe_result = await self._probe.probe(target.host, target.port)
        if not probe_result.reachable:
            logging.info(f"{target.name}: {target.host} unreachable ({probe_result.reason})")
            return MountOutcome(
                target=target, status=MountStatus.UNREACHABLE, detail=probe_result.reason
            )

        mount_result = await self._executor.mount(target.local_path)
        if mount_result.success:
            return MountOutcome(target=target, status=MountStatus.MOUNTED)

        return MountOutcome(
            target=target, status=MountStatus.MOUNT_FAILED, detail=mount_result.diagnostic
        )
