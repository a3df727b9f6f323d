"""core/x32/commands.py — Outgoing query, subscribe and fader summary buffers.

Everything here is a pure function returning encoded bytes ready for
``sendto``.  The console answers each ``/node`` query with one ``node``
message, which :class:`~core.x32.console.X32Console` understands.

Keep-alive
──────────
The console only pushes changes to clients that sent ``/xremote`` within the
last ten seconds.  :data:`KEEP_ALIVE` is that message; resending it is the
caller's job (see ``ConsoleConfig.keep_alive_seconds``).
"""

from __future__ import annotations

from core.x32.osc import Message, encode
from core.x32.types import FaderIndex, FaderKind, FaderState

KEEP_ALIVE: bytes = encode(Message("/xremote"))

SHOW_DATA_ADDRESS = "/showdata"
SHOW_MODE_PATH = "-prefs/show_control"
CURRENT_CUE_PATH = "-show/prepos/current"


def node_query(path: str) -> bytes:
    """``/node "<path>"``: ask the console for one node as a text line."""
    return encode(Message.build("/node", path))


def fader_query(index: FaderIndex) -> list[bytes]:
    """Mix and config node queries for one fader.

    DCAs keep on/level directly under ``/dca/N``; every other bank has a
    ``mix`` node.
    """
    mix_path = index.address if index.kind is FaderKind.DCA else f"{index.address}/mix"
    return [node_query(mix_path), node_query(f"{index.address}/config")]


def show_info_query() -> bytes:
    """``/showdata``: the console replies with the show's cue, scene and snippet tables."""
    return encode(Message(SHOW_DATA_ADDRESS))


def show_mode_query() -> bytes:
    return node_query(SHOW_MODE_PATH)


def current_cue_query() -> bytes:
    return node_query(CURRENT_CUE_PATH)


def fader_display(state: FaderState) -> bytes:
    """Summary line for one fader, sent as a string to its display address.

    Mono on and unnamed encodes as ``/main/02 "[02]  ON   -oo dB M/C"``.
    """
    return encode(Message.build(state.index.display_address, state.display_line))


def full_update() -> list[bytes]:
    """Every buffer needed to populate a fresh :class:`X32Console`.

    Order is fixed: show data, show mode, current cue, then each fader bank in
    bootstrap order (main, mono, matrix, aux, bus, dca, channel).

    Returns:
        147 encoded buffers.
    """
    buffers = [show_info_query(), show_mode_query(), current_cue_query()]
    for index in FaderIndex.all():
        buffers.extend(fader_query(index))
    return buffers
