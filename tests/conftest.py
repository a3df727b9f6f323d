"""
Shared fixtures for the test suite.

Centralizes reusable test infrastructure so individual test files
don't need to repeat message-building and socket-mock boilerplate.
"""

from collections.abc import Callable
from unittest.mock import MagicMock

import pytest

from core.x32.console import X32Console
from core.x32.osc import Message, OscString, encode

# ---------------------------------------------------------------------------
# Message builders
# ---------------------------------------------------------------------------


def make_node_message(line: str) -> Message:
    """Build the ``node`` reply the console sends for a ``/node`` query."""
    return Message("node", (OscString(line),))


def make_fader_lines(bank: str, number: str, on: bool, level: str, name: str) -> list[str]:
    """Mix and config node lines for one fader, as the console formats them."""
    state = "ON" if on else "OFF"
    return [
        f"/{bank}/{number}/mix {state}   {level} OFF +0 OFF   -oo",
        f'/{bank}/{number}/config "{name}" 1 RD 33',
    ]


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture()
def console() -> X32Console:
    """A fresh console mirror with default state."""
    return X32Console()


@pytest.fixture()
def node_message() -> Callable[[str], Message]:
    """Factory for ``node`` reply messages."""
    return make_node_message


@pytest.fixture()
def node_buffer() -> Callable[[str], bytes]:
    """Factory for encoded ``node`` reply datagrams."""
    return lambda line: encode(make_node_message(line))


@pytest.fixture()
def fader_lines() -> Callable[..., list[str]]:
    return make_fader_lines


@pytest.fixture()
def udp_socket() -> MagicMock:
    """``MagicMock`` standing in for a datagram socket."""
    sock = MagicMock()
    sock.recvfrom.side_effect = TimeoutError()
    return sock
