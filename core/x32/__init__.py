"""
core/x32/ — Pure X32 console protocol engine.

This package contains zero I/O: no sockets, no timers, no filesystem access.
UDP transport lives in ingestion/x32_bridge.py.

Exports:
    Codec:    Message, OscInt, OscFloat, OscString, OscBlob, DecodeError,
              decode, encode, format_buffer
    Curve:    to_decibel, level_from_label, DecibelReading
    Types:    FaderKind, FaderIndex, FaderColor, FaderState, CueState,
              ShowMode, MeterBlock, NoOperation, Meters, Fader, CurrentCue
    Routing:  route, route_node, split_node_text
    State:    X32Console
    Requests: full_update, fader_query, node_query, fader_display, KEEP_ALIVE
"""

from core.x32.commands import KEEP_ALIVE, fader_display, fader_query, full_update, node_query
from core.x32.console import X32Console
from core.x32.fader_curve import DecibelReading, level_from_label, to_decibel
from core.x32.osc import (
    DecodeError,
    Message,
    OscBlob,
    OscFloat,
    OscInt,
    OscString,
    decode,
    encode,
    format_buffer,
)
from core.x32.routing import route, route_node, split_node_text
from core.x32.types import (
    NO_OPERATION,
    CueState,
    CurrentCue,
    Fader,
    FaderColor,
    FaderIndex,
    FaderKind,
    FaderState,
    MeterBlock,
    Meters,
    NoOperation,
    ShowMode,
)

__all__ = [
    # Codec
    "Message",
    "OscInt",
    "OscFloat",
    "OscString",
    "OscBlob",
    "DecodeError",
    "decode",
    "encode",
    "format_buffer",
    # Curve
    "DecibelReading",
    "to_decibel",
    "level_from_label",
    # Types
    "FaderKind",
    "FaderIndex",
    "FaderColor",
    "FaderState",
    "CueState",
    "ShowMode",
    "MeterBlock",
    "NoOperation",
    "NO_OPERATION",
    "Meters",
    "Fader",
    "CurrentCue",
    # Routing
    "route",
    "route_node",
    "split_node_text",
    # State
    "X32Console",
    # Requests
    "KEEP_ALIVE",
    "full_update",
    "fader_query",
    "node_query",
    "fader_display",
]
