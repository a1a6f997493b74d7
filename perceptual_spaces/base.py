# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Perceptual Space Converter
==========================
Generic forward/reverse transform between gamma-encoded device RGB and an
opponent perceptual space (one lightness channel, two chromatic axes).

Forward pipeline::

    rgb --gamma decode--> linear --M1--> cone --signed pow--> cone'
        --M2--> (L, a, b) --[forward_light]--> stored (L, a*0.5+0.5, b*0.5+0.5)

The reverse pipeline applies the exact algebraic inverse of every stage and
clamps the device channels to [0, 1] at the end. Matrix inverses are derived
once with ``np.linalg.inv`` so that both directions agree to floating-point
rounding.

Concrete spaces (Oklab, IPT_HQ) are instances of :class:`PerceptualSpace`
configured with their own constants; see ``oklab.py`` and ``ipt_hq.py``.
"""

import functools
import math
from typing import Any, Callable, Final, Tuple, TypeAlias

import numpy as np
from numpy.typing import NDArray
from numba import njit

from swatch_packing import pack_bytes, pack_rgba8888, quantize

__all__ = [
    "ArrayFloat",
    "handle_shapes",
    "forward_light",
    "reverse_light",
    "PerceptualSpace",
]

ArrayFloat: TypeAlias = NDArray[np.floating]

# forward_light(L) = (L - 1) / (1 - L * 3/7) + 1
_LIGHT_FWD: Final[float] = 3.0 / 7.0
_LIGHT_REV: Final[float] = 0.75


def handle_shapes(func: Callable[..., ArrayFloat]) -> Callable[..., ArrayFloat]:
    """
    Decorator to normalize array arguments of a space method to (N, 3).

    Args:
        func: The method to decorate. Its first argument after ``self`` is
            the color array.

    Returns:
        The wrapped method with shape handling.
        - If input is (3,), returns (3,)
        - If input is (N, 3), returns (N, 3)
    """
    @functools.wraps(func)
    def wrapper(self: Any, arr: ArrayFloat, *args: Any, **kwargs: Any) -> ArrayFloat:
        arr = np.asarray(arr, dtype=np.float64)
        arr_in = np.ascontiguousarray(np.atleast_2d(arr))

        if arr_in.shape[-1] != 3:
            raise ValueError(f"Expected last dimension size 3, got {arr_in.shape[-1]}")

        res = func(self, arr_in, *args, **kwargs)

        if arr.ndim == 1:
            return res[0]
        return res
    return wrapper


# =============================================================================
# 1. SCALAR KERNELS
# =============================================================================

@njit(cache=True)
def forward_light(L: float) -> float:
    """Re-curves raw lightness into the stored lightness distribution."""
    return (L - 1.0) / (1.0 - L * _LIGHT_FWD) + 1.0


@njit(cache=True)
def reverse_light(L: float) -> float:
    """Exact inverse of :func:`forward_light`."""
    return (L - 1.0) / (1.0 + L * _LIGHT_REV) + 1.0


@njit(cache=True)
def _signed_pow(x: float, p: float) -> float:
    return math.copysign(abs(x) ** p, x)


@njit(cache=True)
def _device_to_perceptual(r: float, g: float, b: float,
                          m1: ArrayFloat, m2: ArrayFloat,
                          gamma: float, exponent: float,
                          remap_light: bool) -> Tuple[float, float, float]:
    """
    Device RGB (clamped to [0, 1]) to stored-range ``(L, A, B)``.

    A and B are centred on 0.5; they are not clamped so the float
    transform stays invertible.
    """
    r = min(max(r, 0.0), 1.0) ** gamma
    g = min(max(g, 0.0), 1.0) ** gamma
    b = min(max(b, 0.0), 1.0) ** gamma

    c0 = _signed_pow(m1[0, 0] * r + m1[0, 1] * g + m1[0, 2] * b, exponent)
    c1 = _signed_pow(m1[1, 0] * r + m1[1, 1] * g + m1[1, 2] * b, exponent)
    c2 = _signed_pow(m1[2, 0] * r + m1[2, 1] * g + m1[2, 2] * b, exponent)

    L = m2[0, 0] * c0 + m2[0, 1] * c1 + m2[0, 2] * c2
    A = m2[1, 0] * c0 + m2[1, 1] * c1 + m2[1, 2] * c2
    B = m2[2, 0] * c0 + m2[2, 1] * c1 + m2[2, 2] * c2
    if remap_light:
        L = forward_light(L)
    return L, A * 0.5 + 0.5, B * 0.5 + 0.5


@njit(cache=True)
def _perceptual_to_linear(L: float, A: float, B: float,
                          m1_inv: ArrayFloat, m2_inv: ArrayFloat,
                          inv_exponent: float,
                          remap_light: bool) -> Tuple[float, float, float]:
    """Stored-range ``(L, A, B)`` to unclamped linear RGB."""
    if remap_light:
        L = reverse_light(L)
    a = A * 2.0 - 1.0
    b = B * 2.0 - 1.0

    c0 = _signed_pow(m2_inv[0, 0] * L + m2_inv[0, 1] * a + m2_inv[0, 2] * b, inv_exponent)
    c1 = _signed_pow(m2_inv[1, 0] * L + m2_inv[1, 1] * a + m2_inv[1, 2] * b, inv_exponent)
    c2 = _signed_pow(m2_inv[2, 0] * L + m2_inv[2, 1] * a + m2_inv[2, 2] * b, inv_exponent)

    r = m1_inv[0, 0] * c0 + m1_inv[0, 1] * c1 + m1_inv[0, 2] * c2
    g = m1_inv[1, 0] * c0 + m1_inv[1, 1] * c1 + m1_inv[1, 2] * c2
    bl = m1_inv[2, 0] * c0 + m1_inv[2, 1] * c1 + m1_inv[2, 2] * c2
    return r, g, bl


@njit(cache=True)
def _perceptual_to_device(L: float, A: float, B: float,
                          m1_inv: ArrayFloat, m2_inv: ArrayFloat,
                          inv_gamma: float, inv_exponent: float,
                          remap_light: bool) -> Tuple[float, float, float]:
    r, g, b = _perceptual_to_linear(L, A, B, m1_inv, m2_inv, inv_exponent, remap_light)
    r = min(max(r, 0.0), 1.0) ** inv_gamma
    g = min(max(g, 0.0), 1.0) ** inv_gamma
    b = min(max(b, 0.0), 1.0) ** inv_gamma
    return r, g, b


@njit(cache=True)
def _encode_packed(L: float, A: float, B: float, alpha: float) -> int:
    return pack_bytes(quantize(L), quantize(A), quantize(B), quantize(alpha))


@njit(cache=True)
def _batch_from_rgba8888(rgba: NDArray[np.int64],
                         m1: ArrayFloat, m2: ArrayFloat,
                         gamma: float, exponent: float,
                         remap_light: bool) -> NDArray[np.int64]:
    n = rgba.shape[0]
    out = np.empty(n, dtype=np.int64)
    for i in range(n):
        v = rgba[i]
        L, A, B = _device_to_perceptual(
            (v >> 24 & 0xFF) / 255.0, (v >> 16 & 0xFF) / 255.0, (v >> 8 & 0xFF) / 255.0,
            m1, m2, gamma, exponent, remap_light)
        out[i] = _encode_packed(L, A, B, (v & 0xFF) / 255.0)
    return out


@njit(cache=True)
def _batch_to_rgba8888(colors: NDArray[np.int64],
                       m1_inv: ArrayFloat, m2_inv: ArrayFloat,
                       inv_gamma: float, inv_exponent: float,
                       remap_light: bool) -> NDArray[np.int64]:
    n = colors.shape[0]
    out = np.empty(n, dtype=np.int64)
    for i in range(n):
        c = colors[i]
        r, g, b = _perceptual_to_device(
            (c & 0xFF) / 255.0, (c >> 8 & 0xFF) / 255.0, (c >> 16 & 0xFF) / 255.0,
            m1_inv, m2_inv, inv_gamma, inv_exponent, remap_light)
        alpha = c >> 24 & 0xFE
        out[i] = pack_rgba8888(r, g, b, 0.0) | alpha | alpha >> 7
    return out


# =============================================================================
# 2. SPACE DEFINITION
# =============================================================================

class PerceptualSpace:
    """
    One perceptual color space: its constants plus the converters built on them.

    Args:
        name: Registry key, e.g. ``"oklab"``.
        rgb_to_cone: 3x3 matrix from linear RGB to the cone-like intermediate.
        cone_to_opponent: 3x3 matrix from the compressed cone values to
            ``(L, a, b)``.
        exponent: Power applied (sign preserving) to the cone values.
        gamma: Device decoding exponent. 2.0 is the square-law curve.
        remap_light: Whether L is re-curved with :func:`forward_light`.
    """

    __slots__ = (
        "name", "gamma", "exponent", "remap_light",
        "_m1", "_m2", "_m1_inv", "_m2_inv",
        "_m1_t", "_m2_t", "_m1_inv_t", "_m2_inv_t",
    )

    def __init__(self, name: str, rgb_to_cone: ArrayFloat, cone_to_opponent: ArrayFloat,
                 exponent: float, gamma: float = 2.0, remap_light: bool = False) -> None:
        m1 = np.ascontiguousarray(rgb_to_cone, dtype=np.float64)
        m2 = np.ascontiguousarray(cone_to_opponent, dtype=np.float64)
        if m1.shape != (3, 3) or m2.shape != (3, 3):
            raise ValueError(f"Space '{name}': matrices must be 3x3, got {m1.shape} and {m2.shape}")
        if exponent <= 0.0 or gamma <= 0.0:
            raise ValueError(f"Space '{name}': exponent and gamma must be positive")

        self.name: str = name
        self.gamma: float = float(gamma)
        self.exponent: float = float(exponent)
        self.remap_light: bool = bool(remap_light)

        self._m1 = m1
        self._m2 = m2
        self._m1_inv = np.linalg.inv(m1)
        self._m2_inv = np.linalg.inv(m2)

        # Pre-transposed copies for the row-vector batch path
        self._m1_t = m1.T.copy()
        self._m2_t = m2.T.copy()
        self._m1_inv_t = self._m1_inv.T.copy()
        self._m2_inv_t = self._m2_inv.T.copy()

    def __repr__(self) -> str:
        return f"PerceptualSpace(name={self.name!r}, exponent={self.exponent:.4g}, remap_light={self.remap_light})"

    # -- matrix access (read-only views for kernels) -------------------------
    @property
    def forward_matrices(self) -> Tuple[ArrayFloat, ArrayFloat]:
        """``(M1, M2)`` as used by the forward transform."""
        return self._m1, self._m2

    @property
    def inverse_matrices(self) -> Tuple[ArrayFloat, ArrayFloat]:
        """``(M1^-1, M2^-1)`` as used by the reverse transform."""
        return self._m1_inv, self._m2_inv

    # -- scalar float API ----------------------------------------------------
    def to_perceptual(self, r: float, g: float, b: float,
                      alpha: float = 1.0) -> Tuple[float, float, float, float]:
        """
        Converts device RGB to normalized perceptual channels.

        Returns:
            ``(L, A, B, alpha)`` with A and B centred on 0.5. Alpha is clamped
            to [0, 1] and otherwise passed through.
        """
        L, A, B = _device_to_perceptual(float(r), float(g), float(b), self._m1, self._m2,
                                        self.gamma, self.exponent, self.remap_light)
        return L, A, B, min(max(float(alpha), 0.0), 1.0)

    def to_device(self, L: float, A: float, B: float,
                  alpha: float = 1.0) -> Tuple[float, float, float, float]:
        """
        Exact inverse of :meth:`to_perceptual`.

        Returns:
            ``(r, g, b, alpha)`` with every channel clamped to [0, 1].
        """
        r, g, b = _perceptual_to_device(float(L), float(A), float(B), self._m1_inv, self._m2_inv,
                                        1.0 / self.gamma, 1.0 / self.exponent, self.remap_light)
        return r, g, b, min(max(float(alpha), 0.0), 1.0)

    def linear_rgb(self, L: float, A: float, B: float) -> Tuple[float, float, float]:
        """Unclamped linear RGB of a perceptual color (negative = out of gamut)."""
        return _perceptual_to_linear(float(L), float(A), float(B), self._m1_inv, self._m2_inv,
                                     1.0 / self.exponent, self.remap_light)

    # -- packed API ----------------------------------------------------------
    def from_rgba(self, r: float, g: float, b: float, a: float = 1.0) -> int:
        """Packs device RGBA floats (0..1) as a color in this space."""
        L, A, B = _device_to_perceptual(float(r), float(g), float(b), self._m1, self._m2,
                                        self.gamma, self.exponent, self.remap_light)
        return int(_encode_packed(L, A, B, float(a)))

    def to_rgba(self, color: int) -> Tuple[float, float, float, float]:
        """Unpacks a color of this space to device RGBA floats."""
        r, g, b = _perceptual_to_device((color & 0xFF) / 255.0,
                                        (color >> 8 & 0xFF) / 255.0,
                                        (color >> 16 & 0xFF) / 255.0,
                                        self._m1_inv, self._m2_inv,
                                        1.0 / self.gamma, 1.0 / self.exponent, self.remap_light)
        alpha = color >> 24 & 0xFE
        return r, g, b, (alpha | alpha >> 7) / 255.0

    def from_rgba8888(self, rgba: int) -> int:
        """Converts an ``R<<24|G<<16|B<<8|A`` integer into a packed color."""
        arr = np.array([rgba & 0xFFFFFFFF], dtype=np.int64)
        return int(self.from_rgba8888_array(arr)[0])

    def to_rgba8888(self, color: int) -> int:
        """
        Converts a packed color into an ``R<<24|G<<16|B<<8|A`` integer.

        The even alpha byte is widened so that 254 maps back to 255.
        """
        arr = np.array([color & 0xFFFFFFFF], dtype=np.int64)
        return int(self.to_rgba8888_array(arr)[0])

    # -- batch API -----------------------------------------------------------
    def from_rgba8888_array(self, rgba: NDArray[np.integer]) -> NDArray[np.int64]:
        """Vectorized :meth:`from_rgba8888` over any integer array (flattened)."""
        flat = np.ascontiguousarray(np.asarray(rgba, dtype=np.int64).ravel())
        return _batch_from_rgba8888(flat, self._m1, self._m2,
                                    self.gamma, self.exponent, self.remap_light)

    def to_rgba8888_array(self, colors: NDArray[np.integer]) -> NDArray[np.int64]:
        """Vectorized :meth:`to_rgba8888` over any integer array (flattened)."""
        flat = np.ascontiguousarray(np.asarray(colors, dtype=np.int64).ravel())
        return _batch_to_rgba8888(flat, self._m1_inv, self._m2_inv,
                                  1.0 / self.gamma, 1.0 / self.exponent, self.remap_light)

    @handle_shapes
    def rgb_to_perceptual(self, rgb: ArrayFloat) -> ArrayFloat:
        """
        Converts device RGB rows to normalized ``(L, A, B)`` rows.

        Args:
            rgb: Array of shape (3,) or (N, 3), values in [0, 1].

        Returns:
            Array of the same shape; A and B centred on 0.5.
        """
        lin = np.clip(rgb, 0.0, 1.0) ** self.gamma
        cone = np.dot(lin, self._m1_t)
        cone = np.sign(cone) * np.abs(cone) ** self.exponent
        lab = np.dot(cone, self._m2_t)
        if self.remap_light:
            L = lab[:, 0]
            lab[:, 0] = (L - 1.0) / (1.0 - L * _LIGHT_FWD) + 1.0
        lab[:, 1:] = lab[:, 1:] * 0.5 + 0.5
        return lab

    @handle_shapes
    def perceptual_to_rgb(self, lab: ArrayFloat, clip: bool = True) -> ArrayFloat:
        """
        Converts normalized ``(L, A, B)`` rows back to device RGB.

        Args:
            lab: Array of shape (3,) or (N, 3).
            clip: Clamp linear RGB to [0, 1] before encoding. With ``False``
                out-of-gamut rows may come back as NaN.

        Returns:
            Array of the same shape.
        """
        work = lab.copy()
        if self.remap_light:
            L = work[:, 0]
            work[:, 0] = (L - 1.0) / (1.0 + L * _LIGHT_REV) + 1.0
        work[:, 1:] = work[:, 1:] * 2.0 - 1.0
        cone = np.dot(work, self._m2_inv_t)
        cone = np.sign(cone) * np.abs(cone) ** (1.0 / self.exponent)
        lin = np.dot(cone, self._m1_inv_t)
        if clip:
            lin = np.clip(lin, 0.0, 1.0)
        return lin ** (1.0 / self.gamma)
