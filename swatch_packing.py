# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Packed Color Codec
==================
Every perceptual space in Swatch stores a color in one 32-bit integer::

    bits 31..24   alpha     (even values only, 0..254)
    bits 23..16   chroma 2  (B / T axis, 127.5 = neutral)
    bits 15..8    chroma 1  (A / P axis, 127.5 = neutral)
    bits  7..0    primary   (lightness / intensity)

The low bit of alpha is always cleared so the same 32 bits can be
reinterpreted as an IEEE 754 ``float32`` that is never a NaN. Normalized
channel values are ``byte / 255``; the opaque alpha therefore reads as
``254 / 255``.

Quantization uses ``int(v * 255.999)``: every ``byte / 255`` maps back onto
the same byte, and ``1.0`` maps onto 255.
"""

from typing import Final, Tuple, TypeAlias

import numpy as np
from numpy.typing import NDArray
from numba import njit

__all__ = [
    # --- Type Aliases ---
    "PackedColor",
    "ArrayPacked",

    # --- Constants ---
    "TRANSPARENT",
    "ALPHA_MASK",

    # --- Scalar Codec ---
    "quantize",
    "pack",
    "pack_bytes",
    "unpack",
    "channel_l",
    "channel_a",
    "channel_b",
    "channel_alpha",
    "l_byte",
    "a_byte",
    "b_byte",
    "alpha_byte",
    "with_alpha",

    # --- Interchange ---
    "to_float_bits",
    "from_float_bits",
    "pack_rgba8888",
    "unpack_rgba8888",

    # --- Batch ---
    "pack_array",
    "unpack_array",
]

PackedColor: TypeAlias = int
ArrayPacked: TypeAlias = NDArray[np.integer]

ALPHA_MASK: Final[int] = 0xFE000000
_QUANT: Final[float] = 255.999


# =============================================================================
# 1. SCALAR CODEC
# =============================================================================

@njit(cache=True)
def quantize(v: float) -> int:
    """Maps a normalized channel value to a byte, clamping to ``0..255``."""
    if not v > 0.0:
        # also catches NaN
        return 0
    if v >= 1.0:
        return 255
    return int(v * _QUANT)


@njit(cache=True)
def pack_bytes(l_b: int, a_b: int, b_b: int, alpha_b: int) -> int:
    """Packs four channel bytes; out-of-range bytes are clamped, alpha made even."""
    l_b = min(max(l_b, 0), 255)
    a_b = min(max(a_b, 0), 255)
    b_b = min(max(b_b, 0), 255)
    alpha_b = min(max(alpha_b, 0), 255) & 0xFE
    return alpha_b << 24 | b_b << 16 | a_b << 8 | l_b


@njit(cache=True)
def pack(l: float, a: float, b: float, alpha: float) -> int:
    """
    Packs four normalized channels into a color.

    Args:
        l: Primary channel (lightness or intensity), 0..1.
        a: First chromatic channel, 0..1 with 0.5 as neutral.
        b: Second chromatic channel, 0..1 with 0.5 as neutral.
        alpha: Opacity, 0..1. The stored value is rounded down to even.

    Returns:
        The packed 32-bit color. Out-of-range inputs are clamped.
    """
    return pack_bytes(quantize(l), quantize(a), quantize(b), quantize(alpha))


@njit(cache=True)
def l_byte(color: int) -> int:
    return color & 0xFF


@njit(cache=True)
def a_byte(color: int) -> int:
    return color >> 8 & 0xFF


@njit(cache=True)
def b_byte(color: int) -> int:
    return color >> 16 & 0xFF


@njit(cache=True)
def alpha_byte(color: int) -> int:
    return color >> 24 & 0xFE


@njit(cache=True)
def channel_l(color: int) -> float:
    return (color & 0xFF) / 255.0


@njit(cache=True)
def channel_a(color: int) -> float:
    return (color >> 8 & 0xFF) / 255.0


@njit(cache=True)
def channel_b(color: int) -> float:
    return (color >> 16 & 0xFF) / 255.0


@njit(cache=True)
def channel_alpha(color: int) -> float:
    return (color >> 24 & 0xFE) / 255.0


@njit(cache=True)
def unpack(color: int) -> Tuple[float, float, float, float]:
    """Splits a color into its four normalized channels ``(L, A, B, alpha)``."""
    return (
        (color & 0xFF) / 255.0,
        (color >> 8 & 0xFF) / 255.0,
        (color >> 16 & 0xFF) / 255.0,
        (color >> 24 & 0xFE) / 255.0,
    )


@njit(cache=True)
def with_alpha(color: int, alpha: float) -> int:
    """Replaces the alpha channel of ``color``."""
    return (color & 0x00FFFFFF) | (quantize(alpha) & 0xFE) << 24


TRANSPARENT: Final[int] = 0x007F7F00
"""Sentinel for "no color": L=0, A=B=0.5 (neutral), alpha=0."""


# =============================================================================
# 2. INTERCHANGE FORMATS
# =============================================================================

def to_float_bits(color: PackedColor) -> float:
    """
    Reinterprets a packed color as a ``float32`` value.

    Because the alpha low bit is clear, the result is never NaN.
    """
    bits = np.array([color & 0xFEFFFFFF], dtype=np.uint32)
    return float(bits.view(np.float32)[0])


def from_float_bits(value: float) -> PackedColor:
    """Reads back a color stored by :func:`to_float_bits`."""
    arr = np.array([value], dtype=np.float32)
    return int(arr.view(np.uint32)[0]) & 0xFEFFFFFF


@njit(cache=True)
def pack_rgba8888(r: float, g: float, b: float, a: float) -> int:
    """Packs normalized device channels as ``R<<24 | G<<16 | B<<8 | A``."""
    return quantize(r) << 24 | quantize(g) << 16 | quantize(b) << 8 | quantize(a)


@njit(cache=True)
def unpack_rgba8888(rgba: int) -> Tuple[float, float, float, float]:
    """Splits an RGBA8888 integer into normalized ``(r, g, b, a)``."""
    return (
        (rgba >> 24 & 0xFF) / 255.0,
        (rgba >> 16 & 0xFF) / 255.0,
        (rgba >> 8 & 0xFF) / 255.0,
        (rgba & 0xFF) / 255.0,
    )


# =============================================================================
# 3. BATCH CODEC
# =============================================================================

def pack_array(channels: np.ndarray) -> np.ndarray:
    """
    Packs an ``(N, 4)`` array of normalized channels into ``uint32`` colors.

    Raises:
        ValueError: If the last dimension is not 4.
    """
    arr = np.atleast_2d(np.asarray(channels, dtype=np.float64))
    if arr.shape[-1] != 4:
        raise ValueError(f"Expected last dimension size 4, got {arr.shape[-1]}")

    # NaN -> 0, matching the scalar codec
    q = np.where(np.isnan(arr), 0.0, arr)
    q = (np.clip(q, 0.0, 1.0) * _QUANT).astype(np.uint32)
    q = np.minimum(q, 255)
    return (
        (q[:, 3] & 0xFE) << 24
        | q[:, 2] << 16
        | q[:, 1] << 8
        | q[:, 0]
    ).astype(np.uint32)


def unpack_array(colors: ArrayPacked) -> np.ndarray:
    """Unpacks an array of colors into an ``(N, 4)`` array of normalized channels."""
    c = np.asarray(colors, dtype=np.int64).ravel()
    out = np.empty((c.shape[0], 4), dtype=np.float64)
    out[:, 0] = c & 0xFF
    out[:, 1] = c >> 8 & 0xFF
    out[:, 2] = c >> 16 & 0xFF
    out[:, 3] = c >> 24 & 0xFE
    out /= 255.0
    return out
