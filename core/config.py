"""
Configuration dataclasses for talking to an X32 console.

These immutable config objects keep connection and timing parameters out of
function signatures, so standard setups can be defined once and reused by the
bridge and by scripts.
"""

from dataclasses import dataclass

# The console listens for OSC on this UDP port; it is not configurable on the desk.
X32_OSC_PORT: int = 10023

# The console drops /xremote subscribers after ten seconds of silence.
SUBSCRIPTION_TIMEOUT_SECONDS: float = 10.0


@dataclass(frozen=True)
class ConsoleConfig:
    """
    Connection and timing settings for one console.

    Attributes:
        host: Console IP address or hostname.
        port: Console UDP port. Defaults to 10023.
        keep_alive_seconds: Interval between ``/xremote`` resends. Must stay
            below the console's ten second subscription timeout.
        refresh_seconds: Interval between full re-bootstraps of the mirror.
        request_spacing_seconds: Pause between consecutive bootstrap
            requests. The console drops requests sent in a tight burst.
        receive_timeout_seconds: Socket timeout for a single receive.
        receive_buffer_size: Largest datagram accepted, in bytes.

    Example:
        >>> config = ConsoleConfig(host="192.168.1.64")
        >>> bridge = X32Bridge(config)
    """

    host: str = "127.0.0.1"
    port: int = X32_OSC_PORT
    keep_alive_seconds: float = 5.0
    refresh_seconds: float = 300.0
    request_spacing_seconds: float = 0.05
    receive_timeout_seconds: float = 1.0
    receive_buffer_size: int = 4096

    def __post_init__(self) -> None:
        """Validate configuration parameters."""
        if not self.host:
            raise ValueError("host must not be empty")
        if not 1 <= self.port <= 65535:
            raise ValueError(f"port must be 1-65535, got {self.port}")
        if not 0 < self.keep_alive_seconds < SUBSCRIPTION_TIMEOUT_SECONDS:
            raise ValueError(
                f"keep_alive_seconds must be in (0, {SUBSCRIPTION_TIMEOUT_SECONDS}), "
                f"got {self.keep_alive_seconds}"
            )
        if self.refresh_seconds <= 0:
            raise ValueError(f"refresh_seconds must be positive, got {self.refresh_seconds}")
        if self.request_spacing_seconds < 0:
            raise ValueError(
                f"request_spacing_seconds must be non-negative, got {self.request_spacing_seconds}"
            )
        if self.receive_timeout_seconds <= 0:
            raise ValueError(
                f"receive_timeout_seconds must be positive, got {self.receive_timeout_seconds}"
            )
        if self.receive_buffer_size < 16:
            raise ValueError(
                f"receive_buffer_size must be at least 16, got {self.receive_buffer_size}"
            )

    @property
    def address(self) -> tuple[str, int]:
        """``(host, port)`` pair for ``socket.sendto``."""
        return (self.host, self.port)


# Pre-defined configurations for common use cases

DEFAULT_CONFIG = ConsoleConfig()
"""Local emulator on the standard port with default timings."""

FAST_BOOTSTRAP_CONFIG = ConsoleConfig(request_spacing_seconds=0.0)
"""No spacing between bootstrap requests; for emulators that never drop packets."""
