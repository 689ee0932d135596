"""
Pytest configuration and shared fixtures.
"""

import logging
import os
from unittest.mock import AsyncMock

import pytest

from netmount.config import Settings
from netmount.models import MountResult, MountTarget, ProbeResult
from netmount.services.mount_executor import MountExecutor
from netmount.services.reachability_probe import ReachabilityProbe


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path):
    """Keep NETMOUNT_* variables and a stray settings.env out of every test."""
    for key in list(os.environ):
        if key.startswith("NETMOUNT_"):
            monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path):
    return Settings(
        config_file=tmp_path / "netmount.conf",
        mount_info_file=tmp_path / "mountinfo",
        probe_timeout_ms=100,
        mount_timeout_seconds=5,
        color=False,
    )


@pytest.fixture
def make_target(tmp_path):
    """Factory for targets whose mount point exists under tmp_path."""

    def _make(name: str, port: str = "2049", host: str = "10.0.0.1") -> MountTarget:
        local_path = tmp_path / "mnt" / name.lower()
        local_path.mkdir(parents=True, exist_ok=True)
        return MountTarget(name=name, local_path=str(local_path), host=host, port=port)

    return _make


@pytest.fixture
def probe():
    """Probe mock reporting every host reachable."""
    mock = AsyncMock(spec=ReachabilityProbe)
    mock.probe.return_value = ProbeResult(reachable=True)
    return mock


@pytest.fixture
def executor():
    """Executor mock reporting every mount successful."""
    mock = AsyncMock(spec=MountExecutor)
    mock.mount.return_value = MountResult(success=True, return_code=0)
    return mock


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put pytest's back after each test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    level = root_logger.level
    yield
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
