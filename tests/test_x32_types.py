"""
tests/test_x32_types.py — Unit tests for core/x32/types.py

Tests cover:
- FaderIndex bounds per bank, create() absence, parse() of address segments
- Default names and console addresses
- FaderColor codes, ShowMode parsing
- FaderState derived labels and immutability
- CueState cue-number packing
- MeterBlock float decoding
"""

from __future__ import annotations

import dataclasses
import math
import struct

import numpy as np
import pytest

from core.x32.types import (
    NO_OPERATION,
    CueState,
    FaderColor,
    FaderIndex,
    FaderKind,
    FaderState,
    MeterBlock,
    Meters,
    NoOperation,
    ShowMode,
)

_BANK_SIZES = [
    (FaderKind.MAIN, 1),
    (FaderKind.MONO, 1),
    (FaderKind.MATRIX, 6),
    (FaderKind.AUX, 8),
    (FaderKind.BUS, 16),
    (FaderKind.DCA, 8),
    (FaderKind.CHANNEL, 32),
]


# ---------------------------------------------------------------------------
# FaderIndex
# ---------------------------------------------------------------------------


class TestFaderIndexBounds:
    @pytest.mark.parametrize("kind,count", _BANK_SIZES)
    def test_count(self, kind: FaderKind, count: int) -> None:
        assert kind.count == count

    @pytest.mark.parametrize("kind,count", _BANK_SIZES)
    def test_first_and_last_valid(self, kind: FaderKind, count: int) -> None:
        assert FaderIndex(kind, 1).number == 1
        assert FaderIndex(kind, count).number == count

    @pytest.mark.parametrize("kind,count", _BANK_SIZES)
    def test_zero_and_past_end_rejected(self, kind: FaderKind, count: int) -> None:
        with pytest.raises(ValueError):
            FaderIndex(kind, 0)
        with pytest.raises(ValueError):
            FaderIndex(kind, count + 1)

    @pytest.mark.parametrize("kind,count", _BANK_SIZES)
    def test_create_returns_none_out_of_range(self, kind: FaderKind, count: int) -> None:
        assert FaderIndex.create(kind, 0) is None
        assert FaderIndex.create(kind, count + 1) is None
        assert FaderIndex.create(kind, -5) is None

    def test_create_accepts_kind_value(self) -> None:
        assert FaderIndex.create("bus", 3) == FaderIndex(FaderKind.BUS, 3)

    def test_create_unknown_kind_is_none(self) -> None:
        assert FaderIndex.create("drum", 1) is None

    def test_non_int_number_rejected(self) -> None:
        with pytest.raises(ValueError):
            FaderIndex(FaderKind.CHANNEL, True)
        assert FaderIndex.create(FaderKind.CHANNEL, "3") is None  # type: ignore[arg-type]

    def test_all_has_72_unique_indices_in_bank_order(self) -> None:
        indices = FaderIndex.all()
        assert len(indices) == 72
        assert len(set(indices)) == 72
        assert indices[0] == FaderIndex(FaderKind.MAIN)
        assert indices[1] == FaderIndex(FaderKind.MONO)
        assert indices[2] == FaderIndex(FaderKind.MATRIX, 1)
        assert indices[-1] == FaderIndex(FaderKind.CHANNEL, 32)

    def test_hashable_and_frozen(self) -> None:
        index = FaderIndex(FaderKind.AUX, 2)
        assert {index: "x"}[FaderIndex(FaderKind.AUX, 2)] == "x"
        with pytest.raises(dataclasses.FrozenInstanceError):
            index.number = 3  # type: ignore[misc]


class TestFaderIndexParse:
    @pytest.mark.parametrize(
        "bank,segment,expected",
        [
            ("ch", "01", FaderIndex(FaderKind.CHANNEL, 1)),
            ("ch", "32", FaderIndex(FaderKind.CHANNEL, 32)),
            ("bus", "16", FaderIndex(FaderKind.BUS, 16)),
            ("auxin", "08", FaderIndex(FaderKind.AUX, 8)),
            ("mtx", "06", FaderIndex(FaderKind.MATRIX, 6)),
            ("dca", "3", FaderIndex(FaderKind.DCA, 3)),
            ("dca", "03", FaderIndex(FaderKind.DCA, 3)),
            ("main", "st", FaderIndex(FaderKind.MAIN)),
            ("main", "m", FaderIndex(FaderKind.MONO)),
        ],
    )
    def test_valid(self, bank: str, segment: str, expected: FaderIndex) -> None:
        assert FaderIndex.parse(bank, segment) == expected

    @pytest.mark.parametrize(
        "bank,segment",
        [
            ("ch", "00"),
            ("ch", "33"),
            ("bus", "17"),
            ("mtx", "07"),
            ("dca", "9"),
            ("ch", "1a"),
            ("ch", "-1"),
            ("ch", ""),
            ("ch", "٣"),
            ("main", "01"),
            ("fx", "01"),
        ],
    )
    def test_invalid_is_none(self, bank: str, segment: str) -> None:
        assert FaderIndex.parse(bank, segment) is None


class TestFaderIndexNames:
    @pytest.mark.parametrize(
        "index,name,address",
        [
            (FaderIndex(FaderKind.MAIN), "Main", "/main/st"),
            (FaderIndex(FaderKind.MONO), "M/C", "/main/m"),
            (FaderIndex(FaderKind.MATRIX, 1), "Mtx01", "/mtx/01"),
            (FaderIndex(FaderKind.AUX, 1), "Aux01", "/auxin/01"),
            (FaderIndex(FaderKind.BUS, 1), "MixBus01", "/bus/01"),
            (FaderIndex(FaderKind.DCA, 1), "DCA1", "/dca/1"),
            (FaderIndex(FaderKind.CHANNEL, 1), "Ch01", "/ch/01"),
            (FaderIndex(FaderKind.CHANNEL, 32), "Ch32", "/ch/32"),
        ],
    )
    def test_default_name_and_address(self, index: FaderIndex, name: str, address: str) -> None:
        assert index.default_name == name
        assert index.address == address

    def test_address_round_trips_through_parse(self) -> None:
        for index in FaderIndex.all():
            _, bank, segment = index.address.split("/")
            assert FaderIndex.parse(bank, segment) == index


# ---------------------------------------------------------------------------
# Enumerations
# ---------------------------------------------------------------------------


class TestFaderColor:
    def test_sixteen_codes(self) -> None:
        assert [color.code for color in FaderColor] == list(range(16))

    def test_from_code(self) -> None:
        assert FaderColor.from_code(0) is FaderColor.OFF
        assert FaderColor.from_code(1) is FaderColor.RED
        assert FaderColor.from_code(15) is FaderColor.WHITE_INVERTED

    @pytest.mark.parametrize("code", [-1, 16, 100])
    def test_from_code_out_of_range(self, code: int) -> None:
        assert FaderColor.from_code(code) is None

    def test_from_text(self) -> None:
        assert FaderColor.from_text("RD") is FaderColor.RED
        assert FaderColor.from_text("BLi") is FaderColor.BLUE_INVERTED
        assert FaderColor.from_text("purple") is None


class TestShowMode:
    @pytest.mark.parametrize(
        "text,mode",
        [
            ("CUES", ShowMode.CUES),
            ("SCENES", ShowMode.SCENES),
            ("SNIPPETS", ShowMode.SNIPPETS),
            ("scenes", ShowMode.SCENES),
            ("???", ShowMode.CUES),
        ],
    )
    def test_from_text(self, text: str, mode: ShowMode) -> None:
        assert ShowMode.from_text(text) is mode

    @pytest.mark.parametrize(
        "code,mode",
        [
            (0, ShowMode.CUES),
            (1, ShowMode.SCENES),
            (2, ShowMode.SNIPPETS),
            (7, ShowMode.CUES),
            (-1, ShowMode.CUES),
        ],
    )
    def test_from_code(self, code: int, mode: ShowMode) -> None:
        assert ShowMode.from_code(code) is mode

    def test_int_values(self) -> None:
        assert [int(mode) for mode in ShowMode] == [0, 1, 2]


# ---------------------------------------------------------------------------
# FaderState
# ---------------------------------------------------------------------------


class TestFaderState:
    def test_defaults(self) -> None:
        state = FaderState(FaderIndex(FaderKind.CHANNEL, 1))
        assert state.name == "Ch01"
        assert state.level == 0.0
        assert state.level_label == "-oo dB"
        assert state.decibel == -math.inf
        assert state.is_on is False
        assert state.on_label == "OFF"
        assert state.color is FaderColor.WHITE

    def test_label_overrides_default_name(self) -> None:
        state = FaderState(FaderIndex(FaderKind.BUS, 2), label="Drums")
        assert state.name == "Drums"

    def test_derived_labels_follow_level_and_on(self) -> None:
        state = FaderState(FaderIndex(FaderKind.MAIN), level=0.75, is_on=True)
        assert state.level_label == "+0.0 dB"
        assert state.decibel == 0.0
        assert state.on_label == "ON"

    def test_frozen(self) -> None:
        state = FaderState(FaderIndex(FaderKind.MAIN))
        with pytest.raises(dataclasses.FrozenInstanceError):
            state.level = 1.0  # type: ignore[misc]

    def test_display_line(self) -> None:
        state = FaderState(
            FaderIndex(FaderKind.CHANNEL, 7), label="Lead Vox", level=0.75, is_on=True
        )
        assert state.display_line == "[07]  ON  +0.0 dB Lead Vox"

    def test_display_line_unnamed_and_off(self) -> None:
        state = FaderState(FaderIndex(FaderKind.DCA, 3))
        assert state.display_line == "[03] OFF   -oo dB DCA3"

    @pytest.mark.parametrize(
        "index,number,address",
        [
            (FaderIndex(FaderKind.MAIN), 1, "/main/01"),
            (FaderIndex(FaderKind.MONO), 2, "/main/02"),
            (FaderIndex(FaderKind.BUS, 12), 12, "/bus/12"),
            (FaderIndex(FaderKind.DCA, 5), 5, "/dca/5"),
        ],
    )
    def test_display_address(self, index: FaderIndex, number: int, address: str) -> None:
        assert index.display_number == number
        assert index.display_address == address


# ---------------------------------------------------------------------------
# CueState
# ---------------------------------------------------------------------------


class TestCueState:
    def test_default(self) -> None:
        cue = CueState()
        assert cue.cue_number == "0.0.0"
        assert cue.name == ""
        assert cue.scene is None
        assert cue.snippet is None

    @pytest.mark.parametrize(
        "number,dotted",
        [(0, "0.0.0"), (5, "0.0.5"), (100, "1.0.0"), (110, "1.1.0"), (123, "1.2.3"), (1000, "10.0.0")],
    )
    def test_from_cue_number(self, number: int, dotted: str) -> None:
        assert CueState.from_cue_number(number).cue_number == dotted

    def test_negative_number_is_zero(self) -> None:
        assert CueState.from_cue_number(-4).cue_number == "0.0.0"

    def test_with_number_keeps_other_fields(self) -> None:
        cue = CueState(name="Intro", scene=2, snippet=None).with_number(123)
        assert (cue.major, cue.minor, cue.revision) == (1, 2, 3)
        assert cue.name == "Intro"
        assert cue.scene == 2


# ---------------------------------------------------------------------------
# Meters and results
# ---------------------------------------------------------------------------


class TestMeterBlock:
    def test_levels_little_endian_float32(self) -> None:
        values = [4.5, 1.0, 0.0, 0.5, 0.75]
        block = MeterBlock(0, struct.pack("<5f", *values))
        levels = block.levels()
        assert levels.dtype == np.float32
        np.testing.assert_array_equal(levels, np.array(values, dtype=np.float32))

    def test_partial_trailing_word_ignored(self) -> None:
        block = MeterBlock(1, struct.pack("<f", 0.25) + b"\x01\x02")
        assert block.levels().tolist() == [0.25]

    def test_levels_is_writable_copy(self) -> None:
        block = MeterBlock(1, struct.pack("<f", 0.25))
        levels = block.levels()
        levels[0] = 1.0
        assert block.levels()[0] == 0.25

    def test_meters_result_exposes_block(self) -> None:
        result = Meters(MeterBlock(7, b"\x00\x00\x00\x00"))
        assert result.identifier == 7
        assert result.data == b"\x00\x00\x00\x00"


def test_no_operation_singleton_equals_fresh_instance() -> None:
    assert NO_OPERATION == NoOperation()
