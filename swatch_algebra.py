# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Color Algebra
=============
Channel-wise interpolation on packed colors. Every operator moves one or more
channel bytes a fraction ``t`` of the way toward a target and leaves the
other channels bit-for-bit untouched. ``t`` is clamped to [0, 1] and results
are truncated, so a step never overshoots its target.

None of these operators consult the gamut; callers that need an in-gamut
result pass the output through ``GamutLimiter.limit_to_gamut``.

Mixing:
    ``mix`` folds colors in one at a time, blending the k-th extra color with
    weight ``1/(k+1)``. After each step the result is the running mean of the
    colors seen so far, up to byte truncation, so it is not strictly invariant
    under reordering.
"""

from typing import Iterable, Optional, Sequence, Union

import numpy as np
from numpy.typing import NDArray
from numba import njit

from swatch_packing import TRANSPARENT

__all__ = [
    # --- Lightness ---
    "lighten",
    "darken",
    # --- Chromatic poles ---
    "raise_pole",
    "lower_pole",
    "raise_a",
    "lower_a",
    "raise_b",
    "lower_b",
    # --- Alpha ---
    "blot",
    "fade",
    "alpha_multiply",
    # --- Blending ---
    "lerp",
    "mix_array",
    "mix",
    "MixBuffer",
]


@njit(cache=True)
def _clamp_unit(t: float) -> float:
    if not t > 0.0:
        return 0.0
    if t > 1.0:
        return 1.0
    return t


# =============================================================================
# 1. LIGHTNESS
# =============================================================================

@njit(cache=True)
def lighten(color: int, t: float) -> int:
    """Moves lightness a fraction ``t`` of the way toward 255."""
    t = _clamp_unit(t)
    i = color & 0xFF
    return (color & 0xFEFFFF00) | (int(i + (255 - i) * t) & 0xFF)


@njit(cache=True)
def darken(color: int, t: float) -> int:
    """Moves lightness a fraction ``t`` of the way toward 0."""
    t = _clamp_unit(t)
    i = color & 0xFF
    return (color & 0xFEFFFF00) | (int(i * (1.0 - t)) & 0xFF)


# =============================================================================
# 2. CHROMATIC POLES
# =============================================================================

@njit(cache=True)
def raise_pole(color: int, axis: int, t: float) -> int:
    """
    Moves one chromatic channel a fraction ``t`` toward 255.

    Args:
        color: Packed color.
        axis: 1 for the first chromatic channel (A / P), 2 for the second
            (B / T). Any other value returns ``color`` unchanged.
        t: Fraction in [0, 1].
    """
    if axis != 1 and axis != 2:
        return color
    t = _clamp_unit(t)
    shift = axis * 8
    v = color >> shift & 0xFF
    v = int(v + (255 - v) * t) & 0xFF
    return (color & 0xFEFFFFFF & ~(0xFF << shift)) | v << shift


@njit(cache=True)
def lower_pole(color: int, axis: int, t: float) -> int:
    """Moves one chromatic channel a fraction ``t`` toward 0. See :func:`raise_pole`."""
    if axis != 1 and axis != 2:
        return color
    t = _clamp_unit(t)
    shift = axis * 8
    v = color >> shift & 0xFF
    v = int(v * (1.0 - t)) & 0xFF
    return (color & 0xFEFFFFFF & ~(0xFF << shift)) | v << shift


@njit(cache=True)
def raise_a(color: int, t: float) -> int:
    return raise_pole(color, 1, t)


@njit(cache=True)
def lower_a(color: int, t: float) -> int:
    return lower_pole(color, 1, t)


@njit(cache=True)
def raise_b(color: int, t: float) -> int:
    return raise_pole(color, 2, t)


@njit(cache=True)
def lower_b(color: int, t: float) -> int:
    return lower_pole(color, 2, t)


# =============================================================================
# 3. ALPHA
# =============================================================================
# Alpha targets are 254 (opaque) and 0; masking with 0xFE keeps the value even.

@njit(cache=True)
def blot(color: int, t: float) -> int:
    """Moves alpha a fraction ``t`` of the way toward fully opaque."""
    t = _clamp_unit(t)
    a = color >> 24 & 0xFE
    a = int(a + (0xFE - a) * t) & 0xFE
    return (color & 0x00FFFFFF) | a << 24


@njit(cache=True)
def fade(color: int, t: float) -> int:
    """Moves alpha a fraction ``t`` of the way toward fully transparent."""
    t = _clamp_unit(t)
    a = color >> 24 & 0xFE
    a = int(a * (1.0 - t)) & 0xFE
    return (color & 0x00FFFFFF) | a << 24


@njit(cache=True)
def alpha_multiply(color: int, multiplier: float) -> int:
    """Scales alpha by ``multiplier`` (>= 0), saturating at opaque."""
    multiplier = max(multiplier, 0.0)
    a = color >> 24 & 0xFE
    a = min(int(a * multiplier), 0xFE) & 0xFE
    return (color & 0x00FFFFFF) | a << 24


# =============================================================================
# 4. BLENDING
# =============================================================================

@njit(cache=True)
def lerp(start: int, end: int, t: float) -> int:
    """
    Per-channel interpolation from ``start`` toward ``end``, alpha included.

    Each channel is interpolated and truncated independently; the alpha
    result is kept even.
    """
    t = _clamp_unit(t)
    ls = start & 0xFF
    as_ = start >> 8 & 0xFF
    bs = start >> 16 & 0xFF
    als = start >> 24 & 0xFE
    le = end & 0xFF
    ae = end >> 8 & 0xFF
    be = end >> 16 & 0xFF
    ale = end >> 24 & 0xFE
    return (
        (int(ls + t * (le - ls)) & 0xFF)
        | (int(as_ + t * (ae - as_)) & 0xFF) << 8
        | (int(bs + t * (be - bs)) & 0xFF) << 16
        | (int(als + t * (ale - als)) & 0xFE) << 24
    )


@njit(cache=True)
def mix_array(colors: NDArray[np.int64], offset: int, count: int) -> int:
    """
    Running-mean mix of ``colors[offset:offset + count]``.

    Returns ``TRANSPARENT`` when ``count <= 0`` or the range does not fit in
    the array.
    """
    n = colors.shape[0]
    if count <= 0 or offset < 0 or offset + count > n:
        return TRANSPARENT
    result = colors[offset]
    for i in range(1, count):
        result = lerp(result, colors[offset + i], 1.0 / (i + 1))
    return result


def mix(colors: Union[Sequence[int], NDArray[np.integer]], offset: int = 0,
        count: Optional[int] = None) -> int:
    """
    Equal-weight mix of several packed colors.

    Args:
        colors: Packed colors.
        offset: Index of the first color to use.
        count: Number of colors to use. Defaults to all colors after
            ``offset``.

    Returns:
        The mixed color, or ``TRANSPARENT`` for an empty or invalid range.
    """
    arr = np.ascontiguousarray(np.asarray(colors, dtype=np.int64).ravel())
    if count is None:
        count = arr.shape[0] - offset
    return int(mix_array(arr, int(offset), int(count)))


class MixBuffer:
    """
    Growable scratch list of packed colors for one mixing job.

    A buffer belongs to a single call chain; give each thread its own.
    """

    __slots__ = ("_data", "_size")

    def __init__(self, capacity: int = 8) -> None:
        self._data: NDArray[np.int64] = np.zeros(max(int(capacity), 1), dtype=np.int64)
        self._size: int = 0

    def __len__(self) -> int:
        return self._size

    def __repr__(self) -> str:
        return f"MixBuffer(size={self._size}, capacity={self._data.shape[0]})"

    @property
    def capacity(self) -> int:
        return int(self._data.shape[0])

    def append(self, color: int) -> None:
        if self._size == self._data.shape[0]:
            grown = np.zeros(self._data.shape[0] * 2, dtype=np.int64)
            grown[:self._size] = self._data
            self._data = grown
        self._data[self._size] = color & 0xFFFFFFFF
        self._size += 1

    def extend(self, colors: Iterable[int]) -> None:
        for color in colors:
            self.append(color)

    def clear(self) -> None:
        self._size = 0

    def view(self) -> NDArray[np.int64]:
        """The live contents (a view, not a copy)."""
        return self._data[:self._size]

    def mix(self) -> int:
        """Mixes everything currently in the buffer."""
        return int(mix_array(self._data, 0, self._size))
