"""
tests/test_x32_commands.py — Unit tests for core/x32/commands.py

Tests cover:
- KEEP_ALIVE exact bytes
- /node query encoding
- Per-fader queries (DCA vs other banks)
- full_update(): count, fixed order, determinism, decodability
- fader_display summary lines
"""

from __future__ import annotations

from core.x32.commands import (
    KEEP_ALIVE,
    current_cue_query,
    fader_display,
    fader_query,
    full_update,
    node_query,
    show_info_query,
    show_mode_query,
)
from core.x32.osc import Message, OscString, decode
from core.x32.types import FaderIndex, FaderKind, FaderState


def _node_paths(buffers: list[bytes]) -> list[str]:
    paths = []
    for buffer in buffers:
        msg = decode(buffer)
        assert msg.address == "/node"
        assert isinstance(msg.first, OscString)
        paths.append(msg.first.value)
    return paths


class TestKeepAlive:
    def test_exact_bytes(self) -> None:
        assert KEEP_ALIVE == bytes.fromhex("2f 78 72 65 6d 6f 74 65 00 00 00 00")

    def test_has_no_type_tag(self) -> None:
        assert decode(KEEP_ALIVE) == Message("/xremote")
        assert len(KEEP_ALIVE) == 12


class TestQueries:
    def test_node_query_encoding(self) -> None:
        data = node_query("ch/01/mix")
        assert data == b"/node\x00\x00\x00,s\x00\x00ch/01/mix\x00\x00\x00"

    def test_channel_fader_query(self) -> None:
        paths = _node_paths(fader_query(FaderIndex(FaderKind.CHANNEL, 7)))
        assert paths == ["/ch/07/mix", "/ch/07/config"]

    def test_dca_fader_query_has_no_mix_segment(self) -> None:
        paths = _node_paths(fader_query(FaderIndex(FaderKind.DCA, 2)))
        assert paths == ["/dca/2", "/dca/2/config"]

    def test_main_and_mono(self) -> None:
        assert _node_paths(fader_query(FaderIndex(FaderKind.MAIN))) == [
            "/main/st/mix",
            "/main/st/config",
        ]
        assert _node_paths(fader_query(FaderIndex(FaderKind.MONO))) == [
            "/main/m/mix",
            "/main/m/config",
        ]

    def test_show_queries(self) -> None:
        assert decode(show_info_query()) == Message("/showdata")
        assert _node_paths([show_mode_query(), current_cue_query()]) == [
            "-prefs/show_control",
            "-show/prepos/current",
        ]


class TestFullUpdate:
    def test_count(self) -> None:
        assert len(full_update()) == 3 + 2 * 72

    def test_starts_with_show_queries(self) -> None:
        buffers = full_update()
        assert buffers[:3] == [show_info_query(), show_mode_query(), current_cue_query()]

    def test_bank_order(self) -> None:
        mix_paths = _node_paths(full_update()[3:])[::2]
        banks = []
        for path in mix_paths:
            bank = path.split("/")[1]
            bank = path if bank == "main" else bank
            if not banks or banks[-1] != bank:
                banks.append(bank)
        assert banks == ["/main/st/mix", "/main/m/mix", "mtx", "auxin", "bus", "dca", "ch"]

    def test_every_fader_has_mix_then_config(self) -> None:
        paths = _node_paths(full_update()[3:])
        for index, (mix, config) in zip(FaderIndex.all(), zip(paths[::2], paths[1::2])):
            assert config == f"{index.address}/config"
            assert mix.startswith(index.address)

    def test_last_is_channel_32(self) -> None:
        assert _node_paths(full_update()[-2:]) == ["/ch/32/mix", "/ch/32/config"]

    def test_deterministic(self) -> None:
        assert full_update() == full_update()

    def test_all_buffers_aligned(self) -> None:
        assert all(len(buffer) % 4 == 0 for buffer in full_update())


class TestFaderDisplay:
    def test_main_display_line(self) -> None:
        state = FaderState(FaderIndex(FaderKind.MAIN), label="PA", level=0.75, is_on=True)
        msg = decode(fader_display(state))
        assert msg.address == "/main/01"
        assert msg.args == (OscString("[01]  ON  +0.0 dB PA"),)

    def test_mono_uses_second_main_slot(self) -> None:
        msg = decode(fader_display(FaderState(FaderIndex(FaderKind.MONO), is_on=True)))
        assert msg == Message("/main/02", (OscString("[02]  ON   -oo dB M/C"),))

    def test_channel_uses_console_address(self) -> None:
        msg = decode(fader_display(FaderState(FaderIndex(FaderKind.CHANNEL, 12))))
        assert msg.address == "/ch/12"
        assert msg.first == OscString("[12] OFF   -oo dB Ch12")
