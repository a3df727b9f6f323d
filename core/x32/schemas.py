"""
core/x32/schemas.py — Pydantic snapshot models for exporting console state.

``snapshot(console).model_dump_json()`` gives a JSON document of the whole
mirror.  Levels are exported as the raw position plus the display label;
the floor reading (-inf dB) has no JSON number, so the float dB value is not
exported.
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from core.x32.console import X32Console
from core.x32.types import CueState, FaderColor, FaderIndex, FaderKind, FaderState, ShowMode


class FaderIndexModel(BaseModel):
    """Which fader: bank, 1-based number and default name."""

    index: int = Field(..., ge=1, description="1-based number within the bank")
    type: FaderKind = Field(..., description="Fader bank")
    name: str = Field(..., description="Default scribble-strip name, e.g. Ch01")

    @classmethod
    def from_index(cls, index: FaderIndex) -> FaderIndexModel:
        return cls(index=index.number, type=index.kind, name=index.default_name)


class FaderModel(BaseModel):
    """One fader as the console currently shows it."""

    source: FaderIndexModel
    color: FaderColor = Field(FaderColor.WHITE, description="Scribble-strip colour code")
    level: float = Field(..., ge=0.0, le=1.0, description="Normalised fader position")
    decibel_label: str = Field(..., description="Level as shown on the console, e.g. -10.4 dB")
    is_on: bool
    label: str = Field(..., description="Scribble-strip name (console label or default)")

    @classmethod
    def from_state(cls, state: FaderState) -> FaderModel:
        return cls(
            source=FaderIndexModel.from_index(state.index),
            color=state.color,
            level=min(1.0, max(0.0, state.level)),
            decibel_label=state.level_label,
            is_on=state.is_on,
            label=state.name,
        )


class CueModel(BaseModel):
    """One filled slot of the show's cue list."""

    slot: int = Field(..., ge=0, description="0-based cue table slot")
    cue_number: str = Field(..., description="Dotted cue number, e.g. 1.2.0")
    name: str
    scene: int | None = Field(None, description="Scene recalled by the cue")
    snippet: int | None = Field(None, description="Snippet recalled by the cue")

    @classmethod
    def from_cue(cls, slot: int, cue: CueState) -> CueModel:
        return cls(
            slot=slot,
            cue_number=cue.cue_number,
            name=cue.name,
            scene=cue.scene,
            snippet=cue.snippet,
        )


class ConsoleSnapshot(BaseModel):
    """Full mirror state at one point in time."""

    active_cue: str = Field(..., description="Active cue, scene or snippet text")
    show_mode: ShowMode
    current_slot: int | None = Field(None, description="Current cue pointer")
    faders: list[FaderModel] = Field(default_factory=list)
    cues: list[CueModel] = Field(default_factory=list)


def snapshot(console: X32Console) -> ConsoleSnapshot:
    """Capture the console mirror as a serialisable model."""
    return ConsoleSnapshot(
        active_cue=console.active_cue(),
        show_mode=console.show_mode,
        current_slot=console.current_slot,
        faders=[FaderModel.from_state(state) for state in console.faders()],
        cues=[CueModel.from_cue(slot, cue) for slot, cue in console.cues()],
    )
