"""ingestion/x32_bridge.py — UDP transport between an X32 console and the mirror.

This module is the I/O boundary for the console integration.  All socket
calls live here; core/x32 stays pure.

Architecture
────────────
::

    X32 console (UDP 10023)
        ▲   │
        │   │  OSC datagrams
        │   ▼
    ingestion/x32_bridge.py (this module)
        │
        ├── core.x32.commands  → request buffers (bootstrap, keep-alive)
        └── core.x32.console   ← received datagrams fed to X32Console.process

Scheduling model
────────────────
The bridge runs no threads and no timers.  Callers drive it step by step::

    with X32Bridge(config_from_env()) as bridge:
        next_keep_alive = next_refresh = time.monotonic()
        while True:
            now = time.monotonic()
            if now >= next_refresh:
                bridge.request_full_update()
                next_refresh = now + bridge.config.refresh_seconds
            if now >= next_keep_alive:
                bridge.keep_alive()
                next_keep_alive = now + bridge.config.keep_alive_seconds
            result = bridge.receive_once()

Error handling
──────────────
``OSError`` from ``sendto`` propagates to the caller.  A receive timeout is
not an error: ``receive_once`` returns ``NO_OPERATION``.
"""

from __future__ import annotations

import logging
import os
import socket
import time
from types import TracebackType

from dotenv import load_dotenv

from core.config import DEFAULT_CONFIG, ConsoleConfig
from core.x32.commands import KEEP_ALIVE, full_update
from core.x32.console import X32Console
from core.x32.types import NO_OPERATION, ProcessResult

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Environment
# ---------------------------------------------------------------------------


def config_from_env() -> ConsoleConfig:
    """Build a :class:`ConsoleConfig` from ``X32_*`` environment variables.

    Reads ``.env`` first (via python-dotenv).  Unset variables keep the
    :data:`~core.config.DEFAULT_CONFIG` value.

    Raises:
        ValueError: If a variable is not a valid number or fails validation.
    """
    load_dotenv()
    defaults = DEFAULT_CONFIG
    return ConsoleConfig(
        host=os.getenv("X32_HOST", defaults.host),
        port=int(os.getenv("X32_PORT", str(defaults.port))),
        keep_alive_seconds=float(
            os.getenv("X32_KEEP_ALIVE_SECONDS", str(defaults.keep_alive_seconds))
        ),
        refresh_seconds=float(os.getenv("X32_REFRESH_SECONDS", str(defaults.refresh_seconds))),
        request_spacing_seconds=float(
            os.getenv("X32_REQUEST_SPACING_SECONDS", str(defaults.request_spacing_seconds))
        ),
        receive_timeout_seconds=float(
            os.getenv("X32_RECEIVE_TIMEOUT_SECONDS", str(defaults.receive_timeout_seconds))
        ),
    )


# ---------------------------------------------------------------------------
# Bridge
# ---------------------------------------------------------------------------


class X32Bridge:
    """
    Owns one UDP socket and one :class:`X32Console` mirror.

    Usage:
        bridge = X32Bridge(ConsoleConfig(host="192.168.1.64"))
        bridge.request_full_update()
        result = bridge.receive_once()
    """

    def __init__(
        self,
        config: ConsoleConfig = DEFAULT_CONFIG,
        console: X32Console | None = None,
        sock: socket.socket | None = None,
    ) -> None:
        """
        Initialize the bridge.

        Args:
            config: Connection and timing settings.
            console: Mirror to update; a fresh one is created when omitted.
            sock: Pre-built datagram socket (tests pass a mock).
        """
        self.config = config
        self.console = console if console is not None else X32Console()
        if sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
        self._sock = sock
        self._sock.settimeout(config.receive_timeout_seconds)

    def send(self, buffer: bytes) -> None:
        """Send one encoded buffer to the console."""
        self._sock.sendto(buffer, self.config.address)

    def keep_alive(self) -> None:
        """Renew the ``/xremote`` subscription."""
        self.send(KEEP_ALIVE)

    def request_full_update(self) -> int:
        """
        Send every bootstrap query, spaced by ``request_spacing_seconds``.

        Returns:
            Number of buffers sent.

        Raises:
            OSError: If a send fails (console unreachable, no route).
        """
        t_start = time.perf_counter()
        buffers = full_update()
        spacing = self.config.request_spacing_seconds

        for position, buffer in enumerate(buffers):
            if position and spacing:
                time.sleep(spacing)
            self.send(buffer)

        latency_ms = (time.perf_counter() - t_start) * 1000
        logger.info(
            "Sent %d bootstrap requests to %s:%d in %.1fms",
            len(buffers),
            self.config.host,
            self.config.port,
            latency_ms,
        )
        return len(buffers)

    def receive_once(self) -> ProcessResult:
        """Wait for one datagram and apply it to the mirror.

        Returns ``NO_OPERATION`` when the receive times out.
        """
        try:
            data, _sender = self._sock.recvfrom(self.config.receive_buffer_size)
        except TimeoutError:
            return NO_OPERATION
        return self.console.process(data)

    def close(self) -> None:
        self._sock.close()

    def __enter__(self) -> X32Bridge:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        traceback: TracebackType | None,
    ) -> None:
        self.close()
