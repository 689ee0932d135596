"""
Tests for MountOrchestrator.

Tests cover:
- Decision order: already mounted -> no port -> unreachable -> mount
- Call-count checks that skipped targets never reach probe or mount
- One outcome per target under concurrency
- Report order independent of completion order
- Second run over a fully mounted set is a no-op
"""

import asyncio
import io
import random
from unittest.mock import patch

import pytest
from rich.console import Console

from netmount.models import MountResult, MountStatus, MountTarget, ProbeResult
from netmount.services.mount_orchestrator import MountOrchestrator
from netmount.services.mounted_snapshot import MountedSetSnapshot
from netmount.services.reachability_probe import ReachabilityProbe
from netmount.services.report_renderer import ReportPrinter


@pytest.fixture
def orchestrator(probe, executor):
    return MountOrchestrator(probe, executor)


def printed_report(settings, outcomes):
    """Report lines exactly as the CLI prints them."""
    output = io.StringIO()
    console = Console(file=output, width=400, color_system=None, highlight=False)
    ReportPrinter(settings, console).print_outcomes(outcomes)
    return [line for line in output.getvalue().splitlines() if line]


class TestDecisionOrder:
    @pytest.mark.asyncio
    async def test_already_mounted_skips_probe_and_mount(
        self, orchestrator, probe, executor, make_target
    ):
        target = make_target("A")
        snapshot = MountedSetSnapshot([target.local_path])

        outcomes = await orchestrator.run([target], snapshot)

        assert outcomes[0].status == MountStatus.ALREADY_MOUNTED
        probe.probe.assert_not_called()
        executor.mount.assert_not_called()

    @pytest.mark.asyncio
    async def test_empty_port_is_no_port(self, orchestrator, probe, executor, make_target):
        target = make_target("A", port="")

        outcomes = await orchestrator.run([target], MountedSetSnapshot())

        assert outcomes[0].status == MountStatus.NO_PORT
        probe.probe.assert_not_called()
        executor.mount.assert_not_called()

    @pytest.mark.asyncio
    async def test_unreachable_never_mounts(self, orchestrator, probe, executor, make_target):
        probe.probe.return_value = ProbeResult(reachable=False, reason="connection refused")
        target = make_target("A")

        outcomes = await orchestrator.run([target], MountedSetSnapshot())

        assert outcomes[0].status == MountStatus.UNREACHABLE
        assert outcomes[0].detail == "connection refused"
        probe.probe.assert_awaited_once_with(target.host, target.port)
        executor.mount.assert_not_called()

    @pytest.mark.asyncio
    async def test_probe_timeout_is_unreachable_and_never_mounts(
        self, settings, executor, make_target
    ):
        settings = settings.model_copy(update={"probe_timeout_ms": 20})
        real_probe = ReachabilityProbe(settings)
        orchestrator = MountOrchestrator(real_probe, executor)

        async def never_connects(host, port):
            await asyncio.sleep(10)

        target = make_target("A")

        with patch("asyncio.open_connection", side_effect=never_connects):
            outcomes = await orchestrator.run([target], MountedSetSnapshot())

        assert outcomes[0].status == MountStatus.UNREACHABLE
        assert "timed out" in outcomes[0].detail
        executor.mount.assert_not_called()

    @pytest.mark.asyncio
    async def test_successful_mount(self, orchestrator, executor, make_target):
        target = make_target("A")

        outcomes = await orchestrator.run([target], MountedSetSnapshot())

        assert outcomes[0].status == MountStatus.MOUNTED
        executor.mount.assert_awaited_once_with(target.local_path)

    @pytest.mark.asyncio
    async def test_failed_mount_carries_diagnostic(self, orchestrator, executor, make_target):
        executor.mount.return_value = MountResult(
            success=False, output="mount: permission denied", return_code=32
        )

        outcomes = await orchestrator.run([make_target("A")], MountedSetSnapshot())

        assert outcomes[0].status == MountStatus.MOUNT_FAILED
        assert outcomes[0].detail == "mount: permission denied"


class TestFanOut:
    @pytest.mark.asyncio
    async def test_one_outcome_per_target(self, orchestrator, make_target):
        targets = [make_target(f"T{i:02d}") for i in range(25)]

        outcomes = await orchestrator.run(targets, MountedSetSnapshot())

        assert len(outcomes) == len(targets)
        assert {o.target for o in outcomes} == set(targets)

    @pytest.mark.asyncio
    async def test_tasks_run_concurrently(self, probe, executor, make_target):
        async def slow_mount(local_path):
            await asyncio.sleep(0.2)
            return MountResult(success=True, return_code=0)

        executor.mount.side_effect = slow_mount
        orchestrator = MountOrchestrator(probe, executor)
        targets = [make_target(f"T{i}") for i in range(10)]

        loop = asyncio.get_running_loop()
        started = loop.time()
        outcomes = await orchestrator.run(targets, MountedSetSnapshot())
        elapsed = loop.time() - started

        assert all(o.status == MountStatus.MOUNTED for o in outcomes)
        assert elapsed < 1.0

    @pytest.mark.asyncio
    async def test_failing_task_does_not_affect_siblings(self, probe, executor, make_target):
        bad = make_target("bad")

        async def mount(local_path):
            if local_path == bad.local_path:
                raise RuntimeError("executor blew up")
            return MountResult(success=True, return_code=0)

        executor.mount.side_effect = mount
        orchestrator = MountOrchestrator(probe, executor)

        outcomes = await orchestrator.run(
            [make_target("alpha"), bad, make_target("zulu")], MountedSetSnapshot()
        )

        by_name = {o.name: o for o in outcomes}
        assert by_name["bad"].status == MountStatus.MOUNT_FAILED
        assert by_name["bad"].detail == "executor blew up"
        assert by_name["alpha"].status == MountStatus.MOUNTED
        assert by_name["zulu"].status == MountStatus.MOUNTED


class TestDeterministicOrder:
    @pytest.mark.asyncio
    async def test_report_sorted_regardless_of_completion_order(
        self, settings, probe, executor, make_target
    ):
        async def jittery_probe(host, port):
            await asyncio.sleep(random.uniform(0, 0.05))
            return ProbeResult(reachable=True)

        probe.probe.side_effect = jittery_probe
        orchestrator = MountOrchestrator(probe, executor)
        names = ["delta", "alpha", "echo", "charlie", "bravo", "foxtrot"]
        targets = [make_target(name) for name in names]

        reports = []
        for _ in range(5):
            outcomes = await orchestrator.run(targets, MountedSetSnapshot())
            reports.append(printed_report(settings, outcomes))

        assert [o.name for o in outcomes] == sorted(names)
        assert [line.split()[0] for line in reports[0]] == sorted(names)
        assert all(report == reports[0] for report in reports)

    @pytest.mark.asyncio
    async def test_duplicate_names_keep_config_order(self, orchestrator, make_target):
        first = make_target("same")
        second = MountTarget(name="same", local_path="/mnt/other", host="h", port="1")

        outcomes = await orchestrator.run([first, second], MountedSetSnapshot())

        assert [o.target for o in outcomes] == [first, second]


class TestIdempotence:
    @pytest.mark.asyncio
    async def test_second_run_is_all_already_mounted(
        self, orchestrator, probe, executor, make_target
    ):
        targets = [make_target(name) for name in ("A", "B", "C")]

        first = await orchestrator.run(targets, MountedSetSnapshot())
        assert all(o.status == MountStatus.MOUNTED for o in first)

        # The system now lists every mounted path
        snapshot = MountedSetSnapshot(o.target.local_path for o in first)
        probe.reset_mock()
        executor.reset_mock()

        second = await orchestrator.run(targets, snapshot)

        assert all(o.status == MountStatus.ALREADY_MOUNTED for o in second)
        probe.probe.assert_not_called()
        executor.mount.assert_not_called()


class TestExample:
    @pytest.mark.asyncio
    async def test_two_targets_one_already_mounted(self, settings, probe, executor):
        a = MountTarget(name="A", local_path="/mnt/a", host="10.0.0.1", port="2049")
        b = MountTarget(name="B", local_path="/mnt/b", host="10.0.0.2", port="2049")
        probe.probe.return_value = ProbeResult(
            reachable=False, reason="10.0.0.2:2049: timed out after 150 ms"
        )
        orchestrator = MountOrchestrator(probe, executor)

        outcomes = await orchestrator.run([b, a], MountedSetSnapshot(["/mnt/a"]))

        assert printed_report(settings, outcomes) == [
            f"{'A':<20} already mounted",
            f"{'B':<20} not responding",
        ]
        probe.probe.assert_awaited_once_with("10.0.0.2", "2049")
