"""core/x32/routing.py — Classify console addresses into typed targets.

Two address forms reach the console mirror:

* Standard OSC messages, e.g. ``/ch/07/mix/fader ,f 0.75``, routed by
  :func:`route`.
* Node responses: address ``node`` with one string argument holding a text
  line such as ``/ch/07/mix ON -10.4 OFF +0 OFF -oo``.  The line is split by
  :func:`split_node_text` and its path routed by :func:`route_node`.

Routing compares path segments against a fixed template set.  Numeric
segments must be ASCII digits and are bounds-checked per bank; anything that
does not match exactly yields :data:`UNRECOGNIZED`.  Both routers are total:
they return a target for every input string and never raise.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from core.x32.types import FaderIndex

CUE_SLOTS = 500
SCENE_SLOTS = 100
SNIPPET_SLOTS = 100

_NODE_TOKEN = re.compile(r'[^\s"]+|"([^"]*)"')
_SHOWFILE = ("-show", "showfile")

# ---------------------------------------------------------------------------
# Fields
# ---------------------------------------------------------------------------


class FaderField(str, Enum):
    """Which part of a fader a message updates."""

    LEVEL = "level"
    ON = "on"
    NAME = "name"
    COLOR = "color"
    MIX = "mix"  # node: on/off + level text
    CONFIG = "config"  # node: name, icon, colour


class CueField(str, Enum):
    """Which part of a cue record a message updates.

    Values are the console's own leaf names; ``bit`` is the snippet slot.
    """

    NUMBER = "numb"
    NAME = "name"
    SCENE = "scene"
    SNIPPET = "bit"
    RECORD = "record"  # node: whole record in one line


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FaderTarget:
    index: FaderIndex
    field: FaderField


@dataclass(frozen=True)
class CueTarget:
    """A field of the cue table entry at ``cue`` (0-based)."""

    cue: int
    field: CueField


@dataclass(frozen=True)
class SceneTarget:
    scene: int


@dataclass(frozen=True)
class SnippetTarget:
    snippet: int


@dataclass(frozen=True)
class CurrentCueTarget:
    """``/-show/prepos/current``: the active cue pointer."""


@dataclass(frozen=True)
class ShowModeTarget:
    """``/-prefs/show_control``: cues, scenes or snippets."""


@dataclass(frozen=True)
class MeterTarget:
    identifier: int


@dataclass(frozen=True)
class Unrecognized:
    """No template matched."""


AddressTarget = (
    FaderTarget
    | CueTarget
    | SceneTarget
    | SnippetTarget
    | CurrentCueTarget
    | ShowModeTarget
    | MeterTarget
    | Unrecognized
)

UNRECOGNIZED = Unrecognized()
CURRENT_CUE = CurrentCueTarget()
SHOW_MODE = ShowModeTarget()

_STANDARD_FADER_LEAVES: dict[tuple[str, ...], FaderField] = {
    ("mix", "fader"): FaderField.LEVEL,
    ("mix", "on"): FaderField.ON,
    ("config", "name"): FaderField.NAME,
    ("config", "color"): FaderField.COLOR,
}

# DCAs have no "mix" level in their address tree
_STANDARD_DCA_LEAVES: dict[tuple[str, ...], FaderField] = {
    ("fader",): FaderField.LEVEL,
    ("on",): FaderField.ON,
    ("config", "name"): FaderField.NAME,
    ("config", "color"): FaderField.COLOR,
}

_NODE_FADER_LEAVES: dict[tuple[str, ...], FaderField] = {
    ("mix",): FaderField.MIX,
    ("config",): FaderField.CONFIG,
}

_STANDARD_CUE_LEAVES: dict[str, CueField] = {
    field.value: field for field in CueField if field is not CueField.RECORD
}


# ---------------------------------------------------------------------------
# Splitting
# ---------------------------------------------------------------------------


def split_address(address: str) -> tuple[str, ...]:
    """Split an address into segments, dropping one leading ``/``.

    >>> split_address("/ch/01/mix/fader")
    ('ch', '01', 'mix', 'fader')
    """
    if address.startswith("/"):
        address = address[1:]
    return tuple(address.split("/"))


def split_node_text(text: str) -> tuple[str, list[str]]:
    """Split a node response line into its path and argument tokens.

    Tokens are separated by whitespace; double-quoted tokens may contain
    spaces and are returned without the quotes.

    >>> split_node_text('/ch/01/config "Lead Vox" 1 RD 33')
    ('/ch/01/config', ['Lead Vox', '1', 'RD', '33'])
    """
    tokens = []
    for found in _NODE_TOKEN.finditer(text):
        quoted = found.group(1)
        tokens.append(quoted if quoted is not None else found.group(0))
    if not tokens:
        return "", []
    return tokens[0], tokens[1:]


def _slot(segment: str, limit: int) -> int | None:
    """Parse a zero-based table slot such as ``"007"``; ``None`` if invalid."""
    if not (segment.isascii() and segment.isdigit()):
        return None
    value = int(segment)
    return value if value < limit else None


def _fader(
    parts: tuple[str, ...], leaves: dict[tuple[str, ...], FaderField]
) -> FaderTarget | None:
    if len(parts) < 2:
        return None
    field = leaves.get(parts[2:])
    if field is None:
        return None
    index = FaderIndex.parse(parts[0], parts[1])
    if index is None:
        return None
    return FaderTarget(index, field)


def _showfile(parts: tuple[str, ...], node: bool) -> AddressTarget:
    """Route ``-show/showfile/{cue,scene,snippet}/NNN[/leaf]``."""
    if len(parts) < 4 or parts[:2] != _SHOWFILE:
        return UNRECOGNIZED
    table, slot_text, leaf = parts[2], parts[3], parts[4:]
    if table == "cue":
        cue = _slot(slot_text, CUE_SLOTS)
        if cue is None:
            return UNRECOGNIZED
        if node:
            return CueTarget(cue, CueField.RECORD) if not leaf else UNRECOGNIZED
        if len(leaf) == 1 and leaf[0] in _STANDARD_CUE_LEAVES:
            return CueTarget(cue, _STANDARD_CUE_LEAVES[leaf[0]])
        return UNRECOGNIZED

    if table not in ("scene", "snippet"):
        return UNRECOGNIZED
    if leaf != (() if node else ("name",)):
        return UNRECOGNIZED
    slot = _slot(slot_text, SCENE_SLOTS if table == "scene" else SNIPPET_SLOTS)
    if slot is None:
        return UNRECOGNIZED
    return SceneTarget(slot) if table == "scene" else SnippetTarget(slot)


# ---------------------------------------------------------------------------
# Routers
# ---------------------------------------------------------------------------


def route(address: str) -> AddressTarget:
    """Classify a standard OSC address.

    Args:
        address: Message address, e.g. ``/bus/03/config/name``.

    Returns:
        The matching target, or :data:`UNRECOGNIZED`.
    """
    parts = split_address(address)
    head = parts[0]

    if head == "dca":
        return _fader(parts, _STANDARD_DCA_LEAVES) or UNRECOGNIZED
    if head in ("ch", "bus", "auxin", "mtx", "main"):
        return _fader(parts, _STANDARD_FADER_LEAVES) or UNRECOGNIZED
    if head == "-show":
        if parts == ("-show", "prepos", "current"):
            return CURRENT_CUE
        return _showfile(parts, node=False)
    if parts == ("-prefs", "show_control"):
        return SHOW_MODE
    if head == "meters" and len(parts) == 2:
        identifier = _slot(parts[1], 2**31)
        return MeterTarget(identifier) if identifier is not None else UNRECOGNIZED
    return UNRECOGNIZED


def route_node(path: str) -> AddressTarget:
    """Classify the path of a node response line.

    Accepts ``/ch/01/mix``, ``/ch/01/config``, ``/dca/3`` (a DCA's mix node),
    ``/-show/showfile/cue/004`` and the other node forms.
    """
    parts = split_address(path)
    head = parts[0]

    if head == "dca" and len(parts) == 2:
        index = FaderIndex.parse("dca", parts[1])
        return FaderTarget(index, FaderField.MIX) if index is not None else UNRECOGNIZED
    if head in ("ch", "bus", "auxin", "mtx", "main", "dca"):
        return _fader(parts, _NODE_FADER_LEAVES) or UNRECOGNIZED
    if head == "-show":
        if parts == ("-show", "prepos", "current"):
            return CURRENT_CUE
        return _showfile(parts, node=True)
    if parts == ("-prefs", "show_control"):
        return SHOW_MODE
    return UNRECOGNIZED

