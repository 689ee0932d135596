"""Reachability Probe - bounded TCP handshake to host:port before mounting."""

import asyncio
import logging
import socket

from ..config import Settings
from ..models import ProbeResult


class ReachabilityProbe:
    """Checks whether a host accepts TCP connections. No retries."""

    def __init__(self, settings: Settings):
        self._timeout_ms = settings.probe_timeout_ms
        self._timeout_seconds = settings.probe_timeout_seconds

    @property
    def timeout_seconds(self) -> float:
        return self._timeout_seconds

    async def probe(self, host: str, port: str) -> ProbeResult:
        """Open and immediately close a connection to host:port within the timeout."""
        address = f"{host}:{port}"
        try:
            port_number = int(port)
            _, writer = await asyncio.wait_for(
                asyncio.open_connection(host, port_number),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            reason = f"{address}: timed out after {self._timeout_ms} ms"
            logging.debug(f"Probe timed out: {address}")
            return ProbeResult(reachable=False, reason=reason)
        except ConnectionRefusedError:
            logging.debug(f"Probe refused: {address}")
            return ProbeResult(
                reachable=False, reason=f"{address}: connection refused"
            )
        except socket.gaierror as e:
            logging.debug(f"Probe name resolution failed for {host}: {e}")
            return ProbeResult(
                reachable=False, reason=f"{host}: name resolution failed ({e.strerror or e})"
            )
        except (OSError, ValueError, OverflowError) as e:
            logging.debug(f"Probe failed for {address}: {e}")
            return ProbeResult(reachable=False, reason=f"{address}: {e}")

        await self._close(writer, address)
        logging.debug(f"Probe succeeded: {address}")
        return ProbeResult(reachable=True)

    async def _close(self, writer: asyncio.StreamWriter, address: str) -> None:
        writer.close()
        try:
            await writer.wait_closed()
        except OSError as e:
            # Peer reset after the handshake; the host was still reachable
            logging.debug(f"Error closing probe connection to {address}: {e}")
