"""core/x32/osc.py — OSC 1.0 message codec for the X32 control protocol.

Converts raw UDP payloads to :class:`Message` objects and back.  Pure module:
no sockets, no logging, no state.

Wire format
───────────
::

    address     "/ch/01/mix/fader\\0" padded with NULs to a multiple of 4
    type tags   ",f\\0\\0"            one char per argument, NUL padded
    arguments   in tag order:
                  i  int32, big-endian
                  f  float32, big-endian IEEE 754
                  s  NUL-terminated string, padded to 4
                  b  int32 length + bytes, padded to 4

An argument-less message may omit the type-tag string entirely.  The console
itself does this (``/xremote`` is 12 bytes: address only), so
:attr:`Message.empty_type_tag` records whether a bare ``","`` was present.

Decoding is strict: padding must be zero bytes and nothing may follow the last
argument.  Float arguments keep their exact wire bits.  Together these make
``encode(decode(b)) == b`` hold for every buffer that decodes at all.
"""

from __future__ import annotations

import struct
from dataclasses import dataclass, field
from typing import ClassVar

_INT32_MIN = -(2**31)
_INT32_MAX = 2**31 - 1
_UINT32_MAX = 2**32 - 1
_TYPE_TAG_MARKER = ","

# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class DecodeError(ValueError):
    """Raised when a buffer is not a well-formed OSC message.

    Args:
        reason: Short description of what was wrong.
        offset: Byte offset where decoding stopped.
    """

    def __init__(self, reason: str, offset: int = 0) -> None:
        """Initialize with the failure reason and byte offset."""
        self.reason = reason
        self.offset = offset
        super().__init__(f"{reason} (at byte {offset})")


# ---------------------------------------------------------------------------
# Arguments
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class OscInt:
    """32-bit signed integer argument (tag ``i``)."""

    value: int
    tag: ClassVar[str] = "i"

    def __post_init__(self) -> None:
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise TypeError(f"OscInt value must be int, got {type(self.value).__name__}")
        if not _INT32_MIN <= self.value <= _INT32_MAX:
            raise ValueError(f"OscInt value out of int32 range: {self.value}")


@dataclass(frozen=True)
class OscFloat:
    """32-bit IEEE float argument (tag ``f``).

    ``bits`` holds the exact float32 wire pattern and is what equality and
    encoding use, so NaN payloads and signalling NaNs survive a round trip.
    ``value`` is the Python float for that pattern.  Build from wire bits
    with :meth:`from_bits`.

    Raises:
        ValueError: If ``value`` does not fit in a float32.
    """

    value: float = field(compare=False)
    bits: int | None = field(default=None, repr=False)
    tag: ClassVar[str] = "f"

    def __post_init__(self) -> None:
        if self.bits is None:
            try:
                packed = struct.pack(">f", float(self.value))
            except OverflowError as exc:
                raise ValueError(f"OscFloat value out of float32 range: {self.value}") from exc
            object.__setattr__(self, "bits", struct.unpack(">I", packed)[0])
        elif not 0 <= self.bits <= _UINT32_MAX:
            raise ValueError(f"OscFloat bits out of uint32 range: {self.bits:#x}")
        as_f32 = struct.unpack(">f", struct.pack(">I", self.bits))[0]
        object.__setattr__(self, "value", as_f32)

    @classmethod
    def from_bits(cls, bits: int) -> OscFloat:
        """Float argument with the exact wire pattern ``bits``."""
        return cls(0.0, bits)


@dataclass(frozen=True)
class OscString:
    """Text argument (tag ``s``)."""

    value: str
    tag: ClassVar[str] = "s"

    def __post_init__(self) -> None:
        if not isinstance(self.value, str):
            raise TypeError(f"OscString value must be str, got {type(self.value).__name__}")
        if "\x00" in self.value:
            raise ValueError("OscString value must not contain NUL characters")


@dataclass(frozen=True)
class OscBlob:
    """Opaque byte blob argument (tag ``b``)."""

    value: bytes
    tag: ClassVar[str] = "b"

    def __post_init__(self) -> None:
        object.__setattr__(self, "value", bytes(self.value))


Argument = OscInt | OscFloat | OscString | OscBlob


def to_argument(value: object) -> Argument:
    """Wrap a Python native in the matching :data:`Argument` variant.

    Args:
        value: ``int``, ``float``, ``str``, ``bytes``/``bytearray``, or an
            existing argument (returned unchanged).

    Raises:
        TypeError: For ``bool`` (ambiguous on the wire) or unsupported types.
    """
    if isinstance(value, (OscInt, OscFloat, OscString, OscBlob)):
        return value
    if isinstance(value, bool):
        raise TypeError("Use int 0/1 instead of bool for OSC")
    if isinstance(value, int):
        return OscInt(value)
    if isinstance(value, float):
        return OscFloat(value)
    if isinstance(value, str):
        return OscString(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return OscBlob(bytes(value))
    raise TypeError(f"Unsupported OSC arg type {type(value)}: {value!r}")


# ---------------------------------------------------------------------------
# Message
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Message:
    """A single OSC message: address plus ordered arguments.

    Attributes:
        address: ASCII address path, e.g. ``/ch/01/mix/fader``.  Console
            replies to ``/node`` queries use the bare address ``node``.
        args: Arguments in wire order.
        empty_type_tag: Emit a bare ``","`` type-tag string when ``args`` is
            empty.  Ignored when there are arguments.
    """

    address: str
    args: tuple[Argument, ...] = field(default_factory=tuple)
    empty_type_tag: bool = False

    def __post_init__(self) -> None:
        if not self.address:
            raise ValueError("address must not be empty")
        if not self.address.isascii() or "\x00" in self.address:
            raise ValueError(f"address must be ASCII without NUL: {self.address!r}")
        object.__setattr__(self, "args", tuple(self.args))
        for arg in self.args:
            if not isinstance(arg, (OscInt, OscFloat, OscString, OscBlob)):
                raise TypeError(f"args must be OSC arguments, got {type(arg).__name__}")
        if self.args:
            object.__setattr__(self, "empty_type_tag", False)

    @classmethod
    def build(cls, address: str, *values: object) -> Message:
        """Build a message from Python natives (see :func:`to_argument`)."""
        return cls(address, tuple(to_argument(v) for v in values))

    @property
    def type_tags(self) -> str:
        """Type-tag characters without the leading marker, e.g. ``"sif"``."""
        return "".join(arg.tag for arg in self.args)

    @property
    def first(self) -> Argument | None:
        """First argument, or ``None`` for an argument-less message."""
        return self.args[0] if self.args else None


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------


def _pad(data: bytes) -> bytes:
    return data + b"\x00" * ((4 - len(data) % 4) % 4)


def _encode_string(text: str, encoding: str = "utf-8") -> bytes:
    """Encode a string as OSC string (null-terminated, 4-byte padded)."""
    return _pad(text.encode(encoding) + b"\x00")


def _encode_argument(arg: Argument) -> bytes:
    if isinstance(arg, OscInt):
        return struct.pack(">i", arg.value)
    if isinstance(arg, OscFloat):
        return struct.pack(">I", arg.bits)
    if isinstance(arg, OscString):
        return _encode_string(arg.value)
    return struct.pack(">i", len(arg.value)) + _pad(arg.value)


def encode(message: Message) -> bytes:
    """Encode a :class:`Message` to its wire form.

    The result length is always a multiple of 4.
    """
    out = _encode_string(message.address, "ascii")
    if message.args or message.empty_type_tag:
        out += _encode_string(_TYPE_TAG_MARKER + message.type_tags, "ascii")
    for arg in message.args:
        out += _encode_argument(arg)
    return out


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------


class _Reader:
    """Cursor over a buffer that enforces OSC alignment rules."""

    def __init__(self, data: bytes) -> None:
        self.data = data
        self.offset = 0

    @property
    def remaining(self) -> int:
        return len(self.data) - self.offset

    def take(self, size: int) -> bytes:
        if size > self.remaining:
            raise DecodeError(f"truncated: need {size} bytes, have {self.remaining}", self.offset)
        chunk = self.data[self.offset : self.offset + size]
        self.offset += size
        return chunk

    def skip_padding(self, used: int) -> None:
        pad = (4 - used % 4) % 4
        if any(self.take(pad)):
            raise DecodeError("non-zero padding bytes", self.offset - pad)

    def raw_string(self) -> bytes:
        end = self.data.find(b"\x00", self.offset)
        if end < 0:
            raise DecodeError("unterminated string", self.offset)
        raw = self.take(end - self.offset)
        self.take(1)
        self.skip_padding(len(raw) + 1)
        return raw

    def text(self, encoding: str) -> str:
        start = self.offset
        raw = self.raw_string()
        try:
            return raw.decode(encoding)
        except UnicodeDecodeError as exc:
            raise DecodeError(f"string is not valid {encoding}", start) from exc


def _decode_argument(reader: _Reader, tag: str) -> Argument:
    if tag == "i":
        return OscInt(struct.unpack(">i", reader.take(4))[0])
    if tag == "f":
        return OscFloat.from_bits(struct.unpack(">I", reader.take(4))[0])
    if tag == "s":
        return OscString(reader.text("utf-8"))
    size = struct.unpack(">i", reader.take(4))[0]
    if size < 0:
        raise DecodeError(f"negative blob length {size}", reader.offset - 4)
    payload = reader.take(size)
    reader.skip_padding(size)
    return OscBlob(payload)


def decode(data: bytes) -> Message:
    """Decode one OSC message from ``data``.

    Args:
        data: Raw datagram payload.

    Returns:
        The decoded :class:`Message`.

    Raises:
        DecodeError: If the buffer is empty, misaligned, truncated, has
            non-zero padding, an unknown type tag, or trailing bytes.
    """
    data = bytes(data)
    if not data:
        raise DecodeError("empty buffer")
    if len(data) % 4:
        raise DecodeError(f"length {len(data)} is not a multiple of 4")

    reader = _Reader(data)
    address = reader.text("ascii")
    if not address:
        raise DecodeError("empty address")
    if reader.remaining == 0:
        return Message(address)

    tag_offset = reader.offset
    tags = reader.text("ascii")
    if not tags.startswith(_TYPE_TAG_MARKER):
        raise DecodeError(f"type tags must start with {_TYPE_TAG_MARKER!r}", tag_offset)
    unknown = sorted(set(tags[1:]) - {"i", "f", "s", "b"})
    if unknown:
        raise DecodeError(f"unknown type tag(s) {''.join(unknown)!r}", tag_offset)

    args = tuple(_decode_argument(reader, tag) for tag in tags[1:])
    if reader.remaining:
        raise DecodeError(f"{reader.remaining} trailing bytes after arguments", reader.offset)
    return Message(address, args, empty_type_tag=not args)


# ---------------------------------------------------------------------------
# Debug rendering
# ---------------------------------------------------------------------------


def format_buffer(data: bytes) -> str:
    """Render a buffer four bytes per line: hex words then printable ASCII.

    >>> format_buffer(b"/xremote\\x00\\x00\\x00\\x00")
    '2f 78 72 65  /xre\\n6d 6f 74 65  mote\\n00 00 00 00  ....'
    """
    lines = []
    for start in range(0, len(data), 4):
        word = data[start : start + 4]
        hex_part = " ".join(f"{b:02x}" for b in word)
        text_part = "".join(chr(b) if 32 <= b <= 126 else "." for b in word)
        lines.append(f"{hex_part:<11}  {text_part}")
    return "\n".join(lines)
