"""Mount Executor - runs mount(8) once for a local mount point."""

import asyncio
import logging
from typing import Optional

from ..config import Settings
from ..models import MountResult

MOUNT_COMMAND = "mount"


class MountExecutor:
    """
    Invokes the system mount command with the mount point as its only argument.

    Host, share and options are resolved by mount(8) from the fstab entry for
    that path. The executor only reports success or failure with the combined
    stdout/stderr output. No retries.
    """

    def __init__(self, settings: Settings, command: str = MOUNT_COMMAND):
        self._timeout = settings.mount_timeout
        self._command = command

    @property
    def timeout(self) -> Optional[float]:
        return self._timeout

    async def mount(self, local_path: str) -> MountResult:
        logging.info(f"Attempting mount: {local_path}")

        try:
            process = await asyncio.create_subprocess_exec(
                self._command,
                local_path,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.STDOUT,
            )
        except OSError as e:
            logging.error(f"Could not start {self._command} for {local_path}: {e}")
            return MountResult(success=False, output=str(e))

        try:
            stdout, _ = await asyncio.wait_for(process.communicate(), timeout=self._timeout)
        except asyncio.TimeoutError:
            logging.error(f"Mount operation timed out after {self._timeout}s for {local_path}")
            process.kill()
            await process.wait()
            return MountResult(
                success=False,
                output=f"mount timed out after {self._timeout:g} sec.",
                return_code=process.returncode,
                timed_out=True,
            )

        output = stdout.decode(errors="replace").strip() if stdout else ""

        if process.returncode == 0:
            logging.info(f"Successfully mounted {local_path}")
            return MountResult(success=True, output=output, return_code=0)

        logging.warning(f"Mount failed for {local_path} (exit {process.returncode}): {output}")
        return MountResult(success=False, output=output, return_code=process.returncode)
