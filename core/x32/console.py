"""core/x32/console.py — In-memory mirror of an X32 console.

Data flow
─────────
::

    bytes ──decode──▶ Message ──route / route_node──▶ AddressTarget
                                                          │
                              X32Console.process ◀────────┘
                                      │
                                      ▼
              NoOperation | Fader(state) | CurrentCue(text) | Meters(block)

``process`` is the only mutator.  It never raises for bad input: malformed
buffers, unknown addresses and arguments of the wrong type all come back as
:data:`~core.x32.types.NO_OPERATION` with the state untouched.  Garbage on the
wire is normal for a UDP peer and must not stop a long-running receive loop.

Show model
──────────
The console reports its show file as tables: 500 cue slots, 100 scene names
and 100 snippet names, plus a pointer to the current cue and a show-control
mode.  :meth:`X32Console.active_cue` renders whichever of those the mode
selects.

Threading
─────────
No locks.  One owner calls ``process``; share across threads only behind an
external lock.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable

from core.x32.fader_curve import level_from_label
from core.x32.osc import (
    Argument,
    DecodeError,
    Message,
    OscBlob,
    OscFloat,
    OscInt,
    OscString,
    decode,
    format_buffer,
)
from core.x32.routing import (
    CUE_SLOTS,
    SCENE_SLOTS,
    SNIPPET_SLOTS,
    AddressTarget,
    CueField,
    CueTarget,
    CurrentCueTarget,
    FaderField,
    FaderTarget,
    MeterTarget,
    SceneTarget,
    ShowModeTarget,
    SnippetTarget,
    route,
    route_node,
    split_node_text,
)
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
    ProcessResult,
    ShowMode,
)

logger = logging.getLogger(__name__)

NODE_ADDRESS = "node"
_EMPTY_SLOT = "--"
_DEFAULT_CUE_TEXT = f"0.0.0 :: {_EMPTY_SLOT} [{_EMPTY_SLOT}] [{_EMPTY_SLOT}]"


def _int_token(text: str) -> int | None:
    """Parse a signed decimal node token such as ``"-1"``; ``None`` if not numeric."""
    body = text[1:] if text[:1] in ("-", "+") else text
    if not (body.isascii() and body.isdigit()):
        return None
    return int(text)


def _reference(value: int | None) -> int | None:
    """Scene/snippet references: negative means none."""
    return None if value is None or value < 0 else value


class X32Console:
    """Mirror of one console's faders and show state.

    Example::

        console = X32Console()
        for buffer in full_update():
            sock.sendto(buffer, address)
        result = console.process(sock.recv(4096))
        if isinstance(result, Fader):
            print(result.state.name, result.state.level_label)
    """

    def __init__(self) -> None:
        self._faders: dict[FaderIndex, FaderState] = {}
        self._cues: list[CueState | None] = []
        self._scenes: list[str | None] = []
        self._snippets: list[str | None] = []
        self._current: int | None = None
        self._show_mode = ShowMode.CUES
        self.reset()

    # ── State lifecycle ──────────────────────────────────────────────────────

    def reset(self) -> None:
        """Return every fader to its defaults and forget the show file.

        The current-cue pointer and show mode are kept.
        """
        self._faders = {index: FaderState(index) for index in FaderIndex.all()}
        self.clear_cues()

    def clear_cues(self) -> None:
        """Empty the cue, scene and snippet tables."""
        self._cues = [None] * CUE_SLOTS
        self._scenes = [None] * SCENE_SLOTS
        self._snippets = [None] * SNIPPET_SLOTS

    # ── Accessors ────────────────────────────────────────────────────────────

    def fader(self, index: FaderIndex | FaderKind | str, number: int = 1) -> FaderState | None:
        """Snapshot of one fader.

        Accepts a :class:`FaderIndex`, or a kind plus 1-based number::

            console.fader(FaderIndex(FaderKind.CHANNEL, 7))
            console.fader(FaderKind.CHANNEL, 7)
            console.fader("bus", 3)

        Returns ``None`` for an index outside the bank's range.
        """
        if not isinstance(index, FaderIndex):
            index = FaderIndex.create(index, number)
            if index is None:
                return None
        return self._faders.get(index)

    def faders(self) -> tuple[FaderState, ...]:
        """All fader snapshots in bootstrap order."""
        return tuple(self._faders.values())

    def cues(self) -> tuple[tuple[int, CueState], ...]:
        """Filled cue slots as ``(slot, cue)`` pairs, lowest slot first."""
        return tuple((slot, cue) for slot, cue in enumerate(self._cues) if cue is not None)

    def scene_name(self, slot: int | None) -> str | None:
        if slot is None or not 0 <= slot < SCENE_SLOTS:
            return None
        return self._scenes[slot]

    def snippet_name(self, slot: int | None) -> str | None:
        if slot is None or not 0 <= slot < SNIPPET_SLOTS:
            return None
        return self._snippets[slot]

    @property
    def show_mode(self) -> ShowMode:
        return self._show_mode

    @property
    def current_slot(self) -> int | None:
        """Current cue pointer as reported by the console, ``None`` if unset."""
        return self._current

    @property
    def current_cue(self) -> CueState:
        """The cue at the current pointer, or a default cue."""
        return self._cue_at(self._current) or CueState()

    def cue_list_size(self) -> tuple[int, int, int]:
        """Number of filled (cue, scene, snippet) slots."""
        return (
            sum(cue is not None for cue in self._cues),
            sum(name is not None for name in self._scenes),
            sum(name is not None for name in self._snippets),
        )

    def active_cue(self) -> str:
        """Human-readable position in the show.

        Cue mode: ``"Cue: 1.2.0 :: Verse [01:Band] [--]"``.
        Scene / snippet mode: ``"Scene: 03:Choir"`` / ``"Snippet: --"``.
        """
        if self._show_mode is ShowMode.SCENES:
            return f"Scene: {self._slot_label(self._current, self.scene_name)}"
        if self._show_mode is ShowMode.SNIPPETS:
            return f"Snippet: {self._slot_label(self._current, self.snippet_name)}"
        return f"Cue: {self._cue_label(self._current)}"

    # ── Rendering helpers ────────────────────────────────────────────────────

    def _cue_at(self, slot: int | None) -> CueState | None:
        if slot is None or not 0 <= slot < CUE_SLOTS:
            return None
        return self._cues[slot]

    @staticmethod
    def _slot_label(slot: int | None, lookup: Callable[[int | None], str | None]) -> str:
        name = lookup(slot)
        return _EMPTY_SLOT if name is None else f"{slot:02}:{name}"

    def _cue_label(self, slot: int | None) -> str:
        cue = self._cue_at(slot)
        if cue is None:
            return _DEFAULT_CUE_TEXT
        return (
            f"{cue.cue_number} :: {cue.name or _EMPTY_SLOT} "
            f"[{self._slot_label(cue.scene, self.scene_name)}] "
            f"[{self._slot_label(cue.snippet, self.snippet_name)}]"
        )

    # ── Processing ───────────────────────────────────────────────────────────

    def process(self, packet: bytes | bytearray | Message) -> ProcessResult:
        """Apply one console packet to the mirror.

        Args:
            packet: A raw datagram or an already decoded :class:`Message`.

        Returns:
            ``Fader`` with the new snapshot, ``CurrentCue`` with the new
            :meth:`active_cue` text, ``Meters`` with the raw block, or
            ``NO_OPERATION`` when the packet was ignored.
        """
        if isinstance(packet, Message):
            message = packet
        else:
            try:
                message = decode(packet)
            except DecodeError as exc:
                logger.debug(
                    "Ignoring malformed packet: %s\n%s", exc, format_buffer(bytes(packet))
                )
                return NO_OPERATION

        if message.address == NODE_ADDRESS:
            result = self._process_node(message)
        else:
            result = self._apply(route(message.address), message.first)

        if result is NO_OPERATION:
            logger.debug("No state change for %s %s", message.address, message.args)
        return result

    def _process_node(self, message: Message) -> ProcessResult:
        line = message.first
        if not isinstance(line, OscString):
            return NO_OPERATION
        path, args = split_node_text(line.value)
        return self._apply_node(route_node(path), args)

    # ── Standard messages ────────────────────────────────────────────────────

    def _apply(self, target: AddressTarget, arg: Argument | None) -> ProcessResult:
        if isinstance(target, FaderTarget):
            return self._apply_fader(target, arg)

        if isinstance(target, CueTarget):
            return self._apply_cue_field(target, arg)

        if isinstance(target, (SceneTarget, SnippetTarget)):
            if not isinstance(arg, OscString):
                return NO_OPERATION
            return self._set_show_name(target, arg.value)

        if isinstance(target, CurrentCueTarget):
            if not isinstance(arg, OscInt):
                return NO_OPERATION
            return self._set_current(arg.value)

        if isinstance(target, ShowModeTarget):
            if not isinstance(arg, OscInt):
                return NO_OPERATION
            self._show_mode = ShowMode.from_code(arg.value)
            return CurrentCue(self.active_cue())

        if isinstance(target, MeterTarget) and isinstance(arg, OscBlob):
            return Meters(MeterBlock(target.identifier, arg.value))

        return NO_OPERATION

    def _apply_fader(self, target: FaderTarget, arg: Argument | None) -> ProcessResult:
        field = target.field
        if field is FaderField.LEVEL and isinstance(arg, OscFloat):
            return self._update_fader(target.index, level=arg.value)
        if field is FaderField.ON and isinstance(arg, OscInt):
            return self._update_fader(target.index, is_on=arg.value == 1)
        if field is FaderField.NAME and isinstance(arg, OscString):
            return self._update_fader(target.index, label=arg.value)
        if field is FaderField.COLOR and isinstance(arg, OscInt):
            color = FaderColor.from_code(arg.value)
            if color is None:
                return NO_OPERATION
            return self._update_fader(target.index, color=color)
        return NO_OPERATION

    def _apply_cue_field(self, target: CueTarget, arg: Argument | None) -> ProcessResult:
        cue = self._cues[target.cue] or CueState()
        field = target.field
        if field is CueField.NAME:
            if not isinstance(arg, OscString):
                return NO_OPERATION
            cue = dataclasses.replace(cue, name=arg.value)
        elif not isinstance(arg, OscInt):
            return NO_OPERATION
        elif field is CueField.NUMBER:
            cue = cue.with_number(arg.value)
        elif field is CueField.SCENE:
            cue = dataclasses.replace(cue, scene=_reference(arg.value))
        elif field is CueField.SNIPPET:
            cue = dataclasses.replace(cue, snippet=_reference(arg.value))
        else:
            return NO_OPERATION
        self._cues[target.cue] = cue
        return CurrentCue(self.active_cue())

    # ── Node responses ───────────────────────────────────────────────────────

    def _apply_node(self, target: AddressTarget, args: list[str]) -> ProcessResult:
        if isinstance(target, FaderTarget):
            return self._apply_fader_node(target, args)

        if isinstance(target, CueTarget) and target.field is CueField.RECORD:
            return self._apply_cue_record(target.cue, args)

        if not args:
            return NO_OPERATION

        if isinstance(target, (SceneTarget, SnippetTarget)):
            return self._set_show_name(target, args[0])

        if isinstance(target, CurrentCueTarget):
            pointer = _int_token(args[0])
            return self._set_current(-1 if pointer is None else pointer)

        if isinstance(target, ShowModeTarget):
            self._show_mode = ShowMode.from_text(args[0])
            return CurrentCue(self.active_cue())

        return NO_OPERATION

    def _apply_fader_node(self, target: FaderTarget, args: list[str]) -> ProcessResult:
        # mix:    ON -10.4 OFF +0 OFF -oo
        # config: "Lead Vox" 1 RD 33
        if target.field is FaderField.MIX and len(args) >= 2:
            return self._update_fader(
                target.index, is_on=args[0] == "ON", level=level_from_label(args[1])
            )
        if target.field is FaderField.CONFIG and args:
            color = FaderColor.from_text(args[2]) if len(args) >= 3 else None
            if color is None:
                return self._update_fader(target.index, label=args[0])
            return self._update_fader(target.index, label=args[0], color=color)
        return NO_OPERATION

    def _apply_cue_record(self, slot: int, args: list[str]) -> ProcessResult:
        # numb "name" skip scene bit ...
        if len(args) < 5:
            return NO_OPERATION
        number = _int_token(args[0])
        if number is None:
            return NO_OPERATION
        self._cues[slot] = CueState.from_cue_number(
            number,
            name=args[1],
            scene=_reference(_int_token(args[3])),
            snippet=_reference(_int_token(args[4])),
        )
        return CurrentCue(self.active_cue())

    # ── Shared mutations ─────────────────────────────────────────────────────

    def _update_fader(self, index: FaderIndex, **changes) -> Fader:
        state = dataclasses.replace(self._faders[index], **changes)
        self._faders[index] = state
        return Fader(state)

    def _set_show_name(self, target: SceneTarget | SnippetTarget, name: str) -> CurrentCue:
        if isinstance(target, SceneTarget):
            self._scenes[target.scene] = name
        else:
            self._snippets[target.snippet] = name
        return CurrentCue(self.active_cue())

    def _set_current(self, pointer: int) -> CurrentCue:
        self._current = None if pointer < 0 else pointer
        return CurrentCue(self.active_cue())
