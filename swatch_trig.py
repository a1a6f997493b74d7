# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Trigonometric Approximations
============================
Fast polynomial approximations of the circular functions, expressed either in
radians or in *turns* (one full revolution = 1.0). Hue angles throughout the
library are carried in turns, so the ``*_turns`` variants are the hot path.

All kernels are compiled with ``fastmath=False``. The hue ordering of the
palette and the hue bucket selected in the gamut table depend on these exact
polynomials, so results must be reproducible bit-for-bit across runs and
threads.

Accuracy (absolute):
    - ``sin_turns`` / ``cos_turns`` / ``sin`` / ``cos``: ~1e-3
    - ``atan`` / ``atan2``: ~1e-4 rad (``*_turns``: ~2e-5 turns)
    - ``asin`` / ``acos``: ~7e-5 rad
"""

import math
from typing import Final

from numba import njit

__all__ = [
    "TAU",
    "sin_turns",
    "cos_turns",
    "sin",
    "cos",
    "atan",
    "atan_turns",
    "atan2",
    "atan2_turns",
    "asin",
    "acos",
    "asin_turns",
    "acos_turns",
]

TAU: Final[float] = 6.283185307179586
HALF_PI: Final[float] = 1.5707963267948966
QUARTER_PI: Final[float] = 0.7853981633974483
# 2 / pi, converts radians to quarter turns
_RAD_TO_QUARTERS: Final[float] = 0.6366197723675814


# =============================================================================
# 1. SINE / COSINE
# =============================================================================

@njit(cache=True)
def _sin_quarters(quarters: float) -> float:
    """
    Sine of an angle measured in quarter turns.

    The angle is folded into a half-period ``[0, 2)``; within it the curve
    ``t(2-t)`` is refined by a second quadratic factor. The half-period index
    decides the sign.
    """
    floor = int(quarters) if quarters >= 0.0 else int(quarters) - 1
    floor &= -2
    t = quarters - floor
    t *= 2.0 - t
    return t * (-0.775 - 0.225 * t) * ((floor & 2) - 1)


@njit(cache=True)
def sin_turns(turns: float) -> float:
    """Approximate sine of an angle given in turns."""
    return _sin_quarters(turns * 4.0)


@njit(cache=True)
def cos_turns(turns: float) -> float:
    """Approximate cosine of an angle given in turns."""
    return _sin_quarters(turns * 4.0 + 1.0)


@njit(cache=True)
def sin(radians: float) -> float:
    """Approximate sine of an angle given in radians."""
    return _sin_quarters(radians * _RAD_TO_QUARTERS)


@njit(cache=True)
def cos(radians: float) -> float:
    """Approximate cosine of an angle given in radians."""
    return _sin_quarters(radians * _RAD_TO_QUARTERS + 1.0)


# =============================================================================
# 2. ARCTANGENT
# =============================================================================
# Both unit kernels evaluate an odd polynomial in c = (n - 1) / (n + 1),
# which maps n in [0, inf) onto [-1, 1) and centres the fit on n = 1.

@njit(cache=True)
def _atan_unit_turns(n: float) -> float:
    """Arctangent of a non-negative ratio, in turns (0 .. 0.25)."""
    c = (n - 1.0) / (n + 1.0)
    c2 = c * c
    c3 = c * c2
    c5 = c3 * c2
    c7 = c5 * c2
    return (0.125 + 0.1590300064615682 * c - 0.051117687016646825 * c3
            + 0.02328064394867594 * c5 - 0.006205912780487965 * c7)


@njit(cache=True)
def _atan_unit(n: float) -> float:
    """Arctangent of a non-negative ratio, in radians (0 .. pi/2)."""
    c = (n - 1.0) / (n + 1.0)
    c2 = c * c
    c3 = c * c2
    c5 = c3 * c2
    c7 = c5 * c2
    return QUARTER_PI + (0.999215 * c - 0.3211819 * c3
                         + 0.1462766 * c5 - 0.0389929 * c7)


@njit(cache=True)
def atan(v: float) -> float:
    """Approximate arctangent in radians, range ``(-pi/2, pi/2)``."""
    return math.copysign(_atan_unit(abs(v)), v)


@njit(cache=True)
def atan_turns(v: float) -> float:
    """Approximate arctangent in turns, range ``(-0.25, 0.25)``."""
    return math.copysign(_atan_unit_turns(abs(v)), v)


@njit(cache=True)
def atan2_turns(y: float, x: float) -> float:
    """
    Angle of the vector ``(x, y)`` as a fraction of a full turn.

    The result is always in ``[0, 1)``: 0 points along +x, 0.25 along +y.
    The ratio is reduced to the first octant with ``min/max`` so the
    polynomial is only ever evaluated on ``[0, 1]``.

    Args:
        y: Vertical component.
        x: Horizontal component.

    Returns:
        Hue angle in turns.
    """
    if y == 0.0 and x >= 0.0:
        return 0.0
    ay = abs(y)
    ax = abs(x)
    hi = max(ax, ay)
    z = _atan_unit_turns(min(ax, ay) / hi)
    if ay > ax:
        z = 0.25 - z
    if x < 0.0:
        z = 0.5 - z
    if y < 0.0:
        z = 1.0 - z
    # 1 - tiny rounds up to 1.0 for angles just below +x
    if z >= 1.0:
        z = 0.0
    return z


@njit(cache=True)
def atan2(y: float, x: float) -> float:
    """Approximate ``atan2`` in radians, range ``(-pi, pi]``."""
    if y == 0.0 and x >= 0.0:
        return 0.0
    ay = abs(y)
    ax = abs(x)
    hi = max(ax, ay)
    z = _atan_unit(min(ax, ay) / hi)
    if ay > ax:
        z = HALF_PI - z
    if x < 0.0:
        z = math.pi - z
    if y < 0.0:
        z = -z
    return z


# =============================================================================
# 3. INVERSE SINE / COSINE
# =============================================================================

@njit(cache=True)
def asin(a: float) -> float:
    """Approximate arcsine in radians. Input is clamped to ``[-1, 1]``."""
    a = min(max(a, -1.0), 1.0)
    if a >= 0.0:
        return HALF_PI - math.sqrt(1.0 - a) * (
            1.5707288 + a * (-0.2121144 + a * (0.0742610 + a * -0.0187293)))
    return -HALF_PI + math.sqrt(1.0 + a) * (
        1.5707288 + a * (0.2121144 + a * (0.0742610 + a * 0.0187293)))


@njit(cache=True)
def acos(a: float) -> float:
    """Approximate arccosine in radians. Input is clamped to ``[-1, 1]``."""
    a = min(max(a, -1.0), 1.0)
    if a >= 0.0:
        return math.sqrt(1.0 - a) * (
            1.5707288 + a * (-0.2121144 + a * (0.0742610 + a * -0.0187293)))
    return math.pi - math.sqrt(1.0 + a) * (
        1.5707288 + a * (0.2121144 + a * (0.0742610 + a * 0.0187293)))


@njit(cache=True)
def asin_turns(a: float) -> float:
    """Approximate arcsine in turns, range ``[-0.25, 0.25]``."""
    a = min(max(a, -1.0), 1.0)
    if a >= 0.0:
        return 0.25 - math.sqrt(1.0 - a) * (
            0.24998925277680106 + a * (-0.033759055260971525
            + a * (0.01181900522894724 + a * -0.0029808606756510357)))
    return math.sqrt(1.0 + a) * (
        0.24998925277680106 + a * (0.033759055260971525
        + a * (0.01181900522894724 + a * 0.0029808606756510357))) - 0.25


@njit(cache=True)
def acos_turns(a: float) -> float:
    """Approximate arccosine in turns, range ``[0, 0.5]``."""
    a = min(max(a, -1.0), 1.0)
    if a >= 0.0:
        return math.sqrt(1.0 - a) * (
            0.24998925277680106 + a * (-0.033759055260971525
            + a * (0.01181900522894724 + a * -0.0029808606756510357)))
    return 0.5 - math.sqrt(1.0 + a) * (
        0.24998925277680106 + a * (0.033759055260971525
        + a * (0.01181900522894724 + a * 0.0029808606756510357)))
