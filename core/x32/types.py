"""core/x32/types.py — Value objects for the mirrored console state.

Hierarchy
─────────
::

    X32Console (core/x32/console.py)
    ├── FaderState × 72   keyed by FaderIndex
    │     main, mono, matrix 1-6, aux 1-8, bus 1-16, dca 1-8, channel 1-32
    └── CueState          active cue (plus cue/scene/snippet tables)

Every type here is a frozen dataclass or an Enum.  The console replaces
entries rather than mutating them, so any snapshot handed to a caller stays
valid after further updates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from core.x32.fader_curve import to_decibel

# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class FaderKind(str, Enum):
    """Fader banks on the console, in bootstrap order."""

    MAIN = "main"
    MONO = "mono"
    MATRIX = "matrix"
    AUX = "aux"
    BUS = "bus"
    DCA = "dca"
    CHANNEL = "channel"

    @property
    def count(self) -> int:
        """Number of faders in this bank (indices are 1..count)."""
        return _BANK_SIZES[self]


_BANK_SIZES: dict[FaderKind, int] = {
    FaderKind.MAIN: 1,
    FaderKind.MONO: 1,
    FaderKind.MATRIX: 6,
    FaderKind.AUX: 8,
    FaderKind.BUS: 16,
    FaderKind.DCA: 8,
    FaderKind.CHANNEL: 32,
}

# Address bank segment → kind.  ``main`` is resolved by its second segment.
_BANK_SEGMENTS: dict[str, FaderKind] = {
    "mtx": FaderKind.MATRIX,
    "auxin": FaderKind.AUX,
    "bus": FaderKind.BUS,
    "dca": FaderKind.DCA,
    "ch": FaderKind.CHANNEL,
}

_MAIN_SEGMENTS: dict[str, FaderKind] = {"st": FaderKind.MAIN, "m": FaderKind.MONO}


class FaderColor(str, Enum):
    """Scribble-strip colours; values are the console's short codes.

    The console numbers them 0-15, with 8-15 being the inverted variants.
    """

    OFF = "OFF"
    RED = "RD"
    GREEN = "GN"
    YELLOW = "YE"
    BLUE = "BL"
    MAGENTA = "MG"
    CYAN = "CY"
    WHITE = "WH"
    OFF_INVERTED = "OFFi"
    RED_INVERTED = "RDi"
    GREEN_INVERTED = "GNi"
    YELLOW_INVERTED = "YEi"
    BLUE_INVERTED = "BLi"
    MAGENTA_INVERTED = "MGi"
    CYAN_INVERTED = "CYi"
    WHITE_INVERTED = "WHi"

    @property
    def code(self) -> int:
        """Integer code used by ``/config/color`` messages."""
        return list(FaderColor).index(self)

    @classmethod
    def from_code(cls, code: int) -> FaderColor | None:
        """Colour for an integer code, or ``None`` when out of range."""
        members = list(cls)
        return members[code] if 0 <= code < len(members) else None

    @classmethod
    def from_text(cls, text: str) -> FaderColor | None:
        """Colour for a node-response code such as ``"RD"`` or ``"BLi"``."""
        try:
            return cls(text)
        except ValueError:
            return None


class ShowMode(int, Enum):
    """What the console's show control tracks (``/-prefs/show_control``)."""

    CUES = 0
    SCENES = 1
    SNIPPETS = 2

    @classmethod
    def from_text(cls, text: str) -> ShowMode:
        """Mode from a node-response word; unknown words mean CUES."""
        return {"SCENES": cls.SCENES, "SNIPPETS": cls.SNIPPETS}.get(text.upper(), cls.CUES)

    @classmethod
    def from_code(cls, code: int) -> ShowMode:
        """Mode from the ``show_control`` integer; unknown codes mean CUES."""
        try:
            return cls(code)
        except ValueError:
            return cls.CUES


# ---------------------------------------------------------------------------
# Fader index
# ---------------------------------------------------------------------------


@dataclass(frozen=True, order=True)
class FaderIndex:
    """Identifies one fader: bank plus 1-based index.

    Main and mono are single faders and always have ``number == 1``.

    Raises:
        ValueError: If ``number`` is outside the bank's range.
    """

    kind: FaderKind
    number: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "kind", FaderKind(self.kind))
        if isinstance(self.number, bool) or not isinstance(self.number, int):
            raise ValueError(f"fader number must be int, got {self.number!r}")
        if not 1 <= self.number <= self.kind.count:
            raise ValueError(
                f"{self.kind.value} fader number must be 1–{self.kind.count}, got {self.number}"
            )

    @classmethod
    def create(cls, kind: FaderKind | str, number: int = 1) -> FaderIndex | None:
        """Like the constructor, but returns ``None`` for invalid input."""
        try:
            return cls(FaderKind(kind), number)
        except ValueError:
            return None

    @classmethod
    def parse(cls, bank: str, segment: str) -> FaderIndex | None:
        """Resolve console address segments, e.g. ``("ch", "07")``, ``("main", "m")``."""
        if bank == "main":
            kind = _MAIN_SEGMENTS.get(segment)
            return cls(kind) if kind is not None else None
        kind = _BANK_SEGMENTS.get(bank)
        if kind is None or not (segment.isascii() and segment.isdigit()):
            return None
        return cls.create(kind, int(segment))

    @classmethod
    def all(cls) -> tuple[FaderIndex, ...]:
        """Every valid index, bank by bank in bootstrap order."""
        return tuple(cls(kind, n) for kind in FaderKind for n in range(1, kind.count + 1))

    @property
    def default_name(self) -> str:
        """Label the console shows for an unnamed fader."""
        n = self.number
        return {
            FaderKind.MAIN: "Main",
            FaderKind.MONO: "M/C",
            FaderKind.MATRIX: f"Mtx{n:02}",
            FaderKind.AUX: f"Aux{n:02}",
            FaderKind.BUS: f"MixBus{n:02}",
            FaderKind.DCA: f"DCA{n}",
            FaderKind.CHANNEL: f"Ch{n:02}",
        }[self.kind]

    @property
    def address(self) -> str:
        """Console address prefix, e.g. ``/ch/07`` or ``/main/st``."""
        n = self.number
        return {
            FaderKind.MAIN: "/main/st",
            FaderKind.MONO: "/main/m",
            FaderKind.MATRIX: f"/mtx/{n:02}",
            FaderKind.AUX: f"/auxin/{n:02}",
            FaderKind.BUS: f"/bus/{n:02}",
            FaderKind.DCA: f"/dca/{n}",
            FaderKind.CHANNEL: f"/ch/{n:02}",
        }[self.kind]

    @property
    def display_number(self) -> int:
        """Number shown on a fader summary line; mono counts as main 2."""
        return 2 if self.kind is FaderKind.MONO else self.number

    @property
    def display_address(self) -> str:
        """Address for a fader summary line: ``/main/01``, ``/main/02``, else :attr:`address`."""
        if self.kind in (FaderKind.MAIN, FaderKind.MONO):
            return f"/main/{self.display_number:02}"
        return self.address


# ---------------------------------------------------------------------------
# Fader state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FaderState:
    """Mirrored state of one fader."""

    index: FaderIndex
    label: str = ""
    """Console-assigned name; empty until the console reports one."""

    level: float = 0.0
    """Raw fader position as reported (0.0 – 1.0)."""

    is_on: bool = False
    color: FaderColor = FaderColor.WHITE

    @property
    def name(self) -> str:
        """Scribble-strip name, falling back to the default label."""
        return self.label or self.index.default_name

    @property
    def decibel(self) -> float:
        return to_decibel(self.level).decibel

    @property
    def level_label(self) -> str:
        return to_decibel(self.level).label

    @property
    def on_label(self) -> str:
        return "ON" if self.is_on else "OFF"

    @property
    def display_line(self) -> str:
        """Fixed-width summary, e.g. ``"[07]  ON -10.4 dB Lead Vox"``."""
        return (
            f"[{self.index.display_number:02}] {self.on_label:>3} "
            f"{self.level_label:>8} {self.name}"
        )


# ---------------------------------------------------------------------------
# Cue state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CueState:
    """One show-file cue.

    ``scene`` and ``snippet`` are the indices of the scene and snippet the
    cue recalls, or ``None`` when it recalls none.
    """

    major: int = 0
    minor: int = 0
    revision: int = 0
    name: str = ""
    scene: int | None = None
    snippet: int | None = None

    @classmethod
    def from_cue_number(
        cls,
        number: int,
        name: str = "",
        scene: int | None = None,
        snippet: int | None = None,
    ) -> CueState:
        """Split the console's packed cue number: ``123`` → 1.2.3."""
        number = max(0, number)
        return cls(number // 100, (number // 10) % 10, number % 10, name, scene, snippet)

    def with_number(self, number: int) -> CueState:
        """Copy with the packed cue number replaced."""
        return CueState.from_cue_number(number, self.name, self.scene, self.snippet)

    @property
    def cue_number(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}"


# ---------------------------------------------------------------------------
# Meters
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MeterBlock:
    """Raw meter payload from ``/meters/N``.  Never stored by the console."""

    identifier: int
    data: bytes = field(repr=False)

    def levels(self) -> np.ndarray:
        """Decode the payload as little-endian float32 meter values.

        A trailing partial word is ignored.
        """
        usable = len(self.data) - len(self.data) % 4
        return np.frombuffer(self.data[:usable], dtype="<f4").copy()


# ---------------------------------------------------------------------------
# Process results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class NoOperation:
    """The message was ignored; nothing changed."""


@dataclass(frozen=True)
class Meters:
    """A meter block for the caller to consume immediately."""

    block: MeterBlock

    @property
    def identifier(self) -> int:
        return self.block.identifier

    @property
    def data(self) -> bytes:
        return self.block.data


@dataclass(frozen=True)
class Fader:
    """A fader changed; ``state`` is the updated snapshot."""

    state: FaderState


@dataclass(frozen=True)
class CurrentCue:
    """Cue information changed; ``text`` is the new active-cue string."""

    text: str


ProcessResult = NoOperation | Meters | Fader | CurrentCue

NO_OPERATION = NoOperation()
