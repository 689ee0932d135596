"""
Mounted-set snapshot - point-in-time view of mounted paths.

Captured once per run before any target is processed and shared read-only
by every mount task, so it needs no locking.
"""

import logging
import re
from pathlib import Path
from typing import FrozenSet, Iterable, Optional, Union

import aiofiles

from ..core.exceptions import ConfigUnavailableError

_OCTAL_ESCAPE = re.compile(r"\\([0-7]{3})")


def _unescape(path: str) -> str:
    """Decode the octal escapes the kernel uses for spaces, tabs and backslashes."""
    return _OCTAL_ESCAPE.sub(lambda m: chr(int(m.group(1), 8)), path)


def _mount_point(line: str) -> Optional[str]:
    parts = line.split()
    # /proc/self/mountinfo: "36 35 98:0 /root /mnt/point rw,noatime - ext3 /dev/root rw"
    if len(parts) >= 5 and "-" in parts and parts[0].isdigit() and parts[1].isdigit():
        return _unescape(parts[4])
    # /proc/mounts and fstab style: "server:/export /mnt/point nfs rw 0 0"
    if len(parts) >= 2 and not parts[0].startswith("#"):
        return _unescape(parts[1])
    return None


class MountedSetSnapshot:
    """Immutable set of mounted paths with substring matching."""

    def __init__(self, paths: Iterable[str] = ()):
        self._paths: FrozenSet[str] = frozenset(paths)

    @classmethod
    def from_text(cls, content: str) -> "MountedSetSnapshot":
        paths = []
        for line in content.splitlines():
            mount_point = _mount_point(line.strip())
            if mount_point:
                paths.append(mount_point)
        return cls(paths)

    @property
    def paths(self) -> FrozenSet[str]:
        return self._paths

    def is_mounted(self, local_path: str) -> bool:
        """True when local_path occurs inside any mounted path."""
        if not local_path:
            return False
        return any(local_path in mounted for mounted in self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def __contains__(self, local_path: object) -> bool:
        return isinstance(local_path, str) and self.is_mounted(local_path)


async def load_snapshot(path: Union[str, Path]) -> MountedSetSnapshot:
    """Read the mount info file once. Raises ConfigUnavailableError if unreadable."""
    try:
        async with aiofiles.open(path, "r", encoding="utf-8", errors="replace") as f:
            content = await f.read()
    except OSError as e:
        logging.error(f"Could not read mount info file {path}: {e}")
        raise ConfigUnavailableError(str(path), str(e), source="mount info file") from e

    snapshot = MountedSetSnapshot.from_text(content)
    logging.debug(f"Mounted-set snapshot from {path}: {len(snapshot)} mounted path(s)")
    return snapshot
