"""core/x32/fader_curve.py — Fader position ↔ decibel conversion.

The console reports fader positions as a normalised float (0.0 – 1.0).  The
fader law is piecewise linear in dB between four calibration breakpoints:

    position   0.0     0.0625   0.25    0.5     1.0
    dB         -90     -60      -30     -10     +10

Anything at or below -89.9 dB is shown by the console as ``-oo`` (minus
infinity).  Node responses carry levels as that text, so
:func:`level_from_label` inverts the curve and snaps the result to the
console's 1024-step fader resolution.

Pure module — no I/O, no state.
"""

from __future__ import annotations

import math
import re
from typing import NamedTuple

# ---------------------------------------------------------------------------
# Calibration
# ---------------------------------------------------------------------------

# (position, dB) anchors, strictly increasing in both columns
BREAKPOINTS: tuple[tuple[float, float], ...] = (
    (0.0, -90.0),
    (0.0625, -60.0),
    (0.25, -30.0),
    (0.5, -10.0),
    (1.0, 10.0),
)

FLOOR_DB = -89.9
FLOOR_LABEL = "-oo dB"
MAX_DB = BREAKPOINTS[-1][1]

_FADER_STEPS = 1023
_LEADING_NUMBER = re.compile(r"^[+\-0-9.]+")


def _segments() -> tuple[tuple[float, float, float], ...]:
    """Precompute (start position, slope, intercept) per segment, highest first."""
    out = []
    for (p0, d0), (p1, d1) in zip(BREAKPOINTS, BREAKPOINTS[1:]):
        slope = (d1 - d0) / (p1 - p0)
        out.append((p0, slope, d0 - p0 * slope))
    return tuple(reversed(out))


_SEGMENTS = _segments()


# ---------------------------------------------------------------------------
# Position → dB
# ---------------------------------------------------------------------------


class DecibelReading(NamedTuple):
    """A fader position expressed in dB."""

    decibel: float  # -inf at the floor
    label: str  # e.g. "-10.4 dB", "+0.0 dB", "-oo dB"


def _clamp(position: float) -> float:
    if math.isnan(position):
        return 0.0
    return min(1.0, max(0.0, position))


def _raw_decibel(position: float) -> float:
    for start, slope, intercept in _SEGMENTS:
        if position >= start:
            return position * slope + intercept
    return BREAKPOINTS[0][1]


def format_decibel(decibel: float) -> str:
    """Render a dB value the way the console's scribble strip does."""
    if decibel <= FLOOR_DB:
        return FLOOR_LABEL
    if -0.05 <= decibel <= 0.05:
        return "+0.0 dB"
    if decibel < 0:
        return f"{decibel:.1f} dB"
    return f"+{decibel:.1f} dB"


def to_decibel(position: float) -> DecibelReading:
    """Convert a normalised fader position to dB.

    Args:
        position: Fader position; clamped to [0, 1], NaN counts as 0.

    Returns:
        :class:`DecibelReading` with ``-inf`` / ``"-oo dB"`` at the floor.

    >>> to_decibel(0.75)
    DecibelReading(decibel=0.0, label='+0.0 dB')
    >>> to_decibel(0.0).label
    '-oo dB'
    """
    decibel = _raw_decibel(_clamp(float(position)))
    if decibel <= FLOOR_DB:
        return DecibelReading(-math.inf, FLOOR_LABEL)
    return DecibelReading(decibel, format_decibel(decibel))


# ---------------------------------------------------------------------------
# dB text → position
# ---------------------------------------------------------------------------


def _position_for(decibel: float) -> float:
    if decibel < -60.0:
        return (decibel + 90.0) / 480.0
    if decibel < -30.0:
        return (decibel + 70.0) / 160.0
    if decibel < -10.0:
        return (decibel + 50.0) / 80.0
    return (decibel + 30.0) / 40.0


def level_from_label(text: str) -> float:
    """Parse a console level string (``"-10.4"``, ``"+3.0 dB"``, ``"-oo"``).

    The result is snapped to the console's 1024-step fader and rounded to
    four decimals, matching what the console itself reports.  Text that does
    not start with a number yields 0.0.

    >>> level_from_label("-10.4 dB")
    0.4946
    """
    text = text.strip()
    if text.startswith("-oo"):
        return 0.0
    match = _LEADING_NUMBER.match(text)
    if match is None:
        return 0.0
    try:
        decibel = float(match.group(0))
    except ValueError:
        return 0.0
    position = _clamp(_position_for(decibel))
    stepped = math.trunc(position * (_FADER_STEPS + 0.5)) / _FADER_STEPS
    return round(stepped, 4)
