# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Gamut Table & Limiter
=====================
The displayable gamut of a perceptual space is summarised by a 256 x 256 byte
table. Row = stored lightness byte, column = hue bucket
(``floor(256 * hue_turns) mod 256``). Entry ``d`` is a chroma, in units of
1/255 of the signed chromatic range, that covers everything the device RGB
cube reaches in that cell. In stored-byte units (offset from the neutral
127.5) the boundary radius is therefore ``d / 2``.

Membership test (byte offsets ``A_o = A - 127.5``, ``B_o = B - 127.5``)::

    A_o^2 + B_o^2 <= (d / 2)^2 + GAMUT_EPSILON

``GAMUT_EPSILON`` (0.5) admits the two neutral bytes 127/128, whose offsets are
never exactly zero, even where ``d == 0``.

Sampling takes the larger of two passes per cell: the reverse transform
scanned along the bucket's centre angle, and a sweep of all 2^24 device
colors through the same quantizing path as ``from_rgba8888``. The sweep
raises each cell to the smallest ``d`` that admits every color landing in
it, so quantized device colors are never rejected.

Limiting is a radial projection at fixed lightness and hue: the chromatic
offsets are placed on the boundary circle, the outermost admissible byte pair
around that point is taken, and the radius is pulled in one table step at a
time until one is admitted. Lightness and alpha bytes are never touched, so
limiting is idempotent.

Tables are immutable. They are either loaded from a precomputed asset
(65536 raw bytes) or sampled from the space's transforms.
"""

import functools
import math
import warnings
from pathlib import Path
from typing import Final, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray
from numba import njit, prange

from perceptual_spaces import PerceptualSpace, get_space
from perceptual_spaces.base import _device_to_perceptual, _perceptual_to_linear
from swatch_config import get_config
from swatch_packing import pack, quantize
from swatch_trig import TAU, atan2_turns, cos_turns, sin_turns

__all__ = [
    # --- Constants ---
    "TABLE_SIZE",
    "GAMUT_EPSILON",

    # --- Kernels ---
    "hue_bucket",
    "in_gamut_kernel",
    "limit_kernel",
    "maximize_kernel",
    "enrich_kernel",
    "dullen_kernel",

    # --- Classes ---
    "GamutTable",
    "GamutLimiter",

    # --- Factories ---
    "get_gamut_table",
    "get_limiter",
]

TABLE_SIZE: Final[int] = 65536
GAMUT_EPSILON: Final[float] = 0.5
_DEVICE_TOLERANCE: Final[float] = 1e-12

PathLike = Union[str, Path]


# =============================================================================
# 1. KERNELS (Numba)
# =============================================================================
# ``table`` is always the flat uint8 array of a GamutTable.

@njit(cache=True)
def _clamp_unit(t: float) -> float:
    if not t > 0.0:
        return 0.0
    if t > 1.0:
        return 1.0
    return t


@njit(cache=True)
def hue_bucket(hue: float) -> int:
    """Column index of a hue given in turns."""
    return int(hue * 256.0) & 0xFF


@njit(cache=True)
def _offset_hue(ao: float, bo: float) -> float:
    return atan2_turns(bo, ao)


@njit(cache=True)
def _boundary(table: NDArray[np.uint8], l: int, hue: float) -> int:
    return int(table[l << 8 | hue_bucket(hue)])


@njit(cache=True)
def _offsets_in_gamut(table: NDArray[np.uint8], l: int, ao: float, bo: float) -> bool:
    r = _boundary(table, l, _offset_hue(ao, bo)) * 0.5
    return ao * ao + bo * bo <= r * r + GAMUT_EPSILON


@njit(cache=True)
def in_gamut_kernel(color: int, table: NDArray[np.uint8]) -> bool:
    """Membership test on a packed color."""
    ao = (color >> 8 & 0xFF) - 127.5
    bo = (color >> 16 & 0xFF) - 127.5
    return _offsets_in_gamut(table, color & 0xFF, ao, bo)


@njit(cache=True)
def _toward_neutral(x: float) -> int:
    """Chroma byte whose offset has the sign of ``x`` and magnitude at most ``|x|`` (min 0.5)."""
    m = abs(x)
    k = int(m - 0.5) if m >= 0.5 else 0
    if x >= 0.0:
        return min(128 + k, 255)
    return max(127 - k, 0)


@njit(cache=True)
def _project(color: int, hue: float, d: int, table: NDArray[np.uint8]) -> int:
    """Places the chroma of ``color`` at table distance ``d`` along ``hue``, shrinking until admitted."""
    base = color & 0xFE0000FF
    l = color & 0xFF
    c = cos_turns(hue)
    s = sin_turns(hue)
    while d > 0:
        r = d * 0.5
        # byte offsets sit on the half-integer lattice; try the four around the target
        x0 = math.floor(c * r - 0.5) + 0.5
        y0 = math.floor(s * r - 0.5) + 0.5
        best_rr = -1.0
        best_ab = 0
        best_bb = 0
        for i in range(2):
            ao = x0 + i
            if ao < -127.5 or ao > 127.5:
                continue
            for j in range(2):
                bo = y0 + j
                if bo < -127.5 or bo > 127.5:
                    continue
                rr = ao * ao + bo * bo
                if rr > best_rr and _offsets_in_gamut(table, l, ao, bo):
                    best_rr = rr
                    best_ab = int(ao + 127.5)
                    best_bb = int(bo + 127.5)
        if best_rr >= 0.0:
            return base | best_ab << 8 | best_bb << 16
        d -= 1
    return base | _toward_neutral(c) << 8 | _toward_neutral(s) << 16


@njit(cache=True)
def limit_kernel(color: int, table: NDArray[np.uint8]) -> int:
    """Returns ``color`` unchanged if in gamut, else its radial projection onto the boundary."""
    ao = (color >> 8 & 0xFF) - 127.5
    bo = (color >> 16 & 0xFF) - 127.5
    l = color & 0xFF
    if _offsets_in_gamut(table, l, ao, bo):
        return color
    hue = _offset_hue(ao, bo)
    return _project(color, hue, _boundary(table, l, hue), table)


@njit(cache=True)
def maximize_kernel(color: int, table: NDArray[np.uint8]) -> int:
    """Moves the chroma of ``color`` onto the boundary, outward or inward."""
    ao = (color >> 8 & 0xFF) - 127.5
    bo = (color >> 16 & 0xFF) - 127.5
    l = color & 0xFF
    hue = _offset_hue(ao, bo)
    return _project(color, hue, _boundary(table, l, hue), table)


@njit(cache=True)
def _scale_chroma(color: int, scale: float) -> int:
    a = ((color >> 8 & 0xFF) / 255.0 - 0.5) * scale + 0.5
    b = ((color >> 16 & 0xFF) / 255.0 - 0.5) * scale + 0.5
    return (color & 0xFE0000FF) | quantize(a) << 8 | quantize(b) << 16


@njit(cache=True)
def enrich_kernel(color: int, amount: float, table: NDArray[np.uint8]) -> int:
    """Scales chroma by ``1 + amount`` and limits the result."""
    return limit_kernel(_scale_chroma(color, 1.0 + _clamp_unit(amount)), table)


@njit(cache=True)
def dullen_kernel(color: int, amount: float) -> int:
    """Scales chroma by ``1 - amount`` toward neutral."""
    return _scale_chroma(color, 1.0 - _clamp_unit(amount))


@njit(cache=True)
def _saturation_kernel(color: int, table: NDArray[np.uint8]) -> float:
    ao = (color >> 8 & 0xFF) - 127.5
    bo = (color >> 16 & 0xFF) - 127.5
    d = _boundary(table, color & 0xFF, _offset_hue(ao, bo))
    if d == 0:
        return 0.0
    return math.sqrt(ao * ao + bo * bo) / (d * 0.5)


@njit(cache=True)
def _from_hsl_kernel(hue: float, saturation: float, lightness: float, alpha: float,
                     table: NDArray[np.uint8]) -> int:
    hue = hue - math.floor(hue)
    l = quantize(lightness)
    r = _boundary(table, l, hue) * 0.5 * _clamp_unit(saturation)
    ab = _toward_neutral(cos_turns(hue) * r)
    bb = _toward_neutral(sin_turns(hue) * r)
    color = (quantize(alpha) & 0xFE) << 24 | bb << 16 | ab << 8 | l
    return limit_kernel(color, table)


@njit(cache=True, parallel=True)
def _sample_kernel(m1_inv: NDArray[np.float64], m2_inv: NDArray[np.float64],
                   inv_exponent: float, remap_light: bool,
                   out: NDArray[np.uint8]) -> None:
    """
    Fills ``out`` with the largest in-gamut table distance per (lightness, hue).

    Each hue bucket is scanned along its centre angle, scanning the distance
    down from 255 so that the outermost in-gamut value is found.
    """
    lo = -_DEVICE_TOLERANCE
    hi = 1.0 + _DEVICE_TOLERANCE
    for l in prange(256):
        row = np.int64(l) * 256
        L = l / 255.0
        for h in range(256):
            theta = (h + 0.5) / 256.0 * TAU
            c = math.cos(theta)
            s = math.sin(theta)
            best = 0
            for d in range(255, 0, -1):
                chroma = d / 255.0
                r, g, b = _perceptual_to_linear(L, c * chroma * 0.5 + 0.5, s * chroma * 0.5 + 0.5,
                                                m1_inv, m2_inv, inv_exponent, remap_light)
                if lo <= r <= hi and lo <= g <= hi and lo <= b <= hi:
                    best = d
                    break
            out[row + h] = best


@njit(cache=True)
def _covering_distance(rr: float) -> int:
    """Smallest table distance whose membership test admits a squared offset radius ``rr``."""
    if rr <= GAMUT_EPSILON:
        return 0
    d = int(math.ceil(2.0 * math.sqrt(rr - GAMUT_EPSILON)))
    while d < 255:
        r = d * 0.5
        if rr <= r * r + GAMUT_EPSILON:
            break
        d += 1
    return min(d, 255)


@njit(cache=True, parallel=True)
def _sweep_kernel(m1: NDArray[np.float64], m2: NDArray[np.float64],
                  gamma: float, exponent: float, remap_light: bool,
                  rows: NDArray[np.uint8]) -> None:
    """
    Raises ``rows[red]`` to cover every device color with that red byte.

    ``rows`` has shape ``(256, TABLE_SIZE)`` so each red byte writes its own
    table; the caller reduces them with a maximum.
    """
    for red in prange(256):
        row = rows[red]
        r = red / 255.0
        for green in range(256):
            g = green / 255.0
            for blue in range(256):
                L, A, B = _device_to_perceptual(r, g, blue / 255.0, m1, m2,
                                                gamma, exponent, remap_light)
                ao = quantize(A) - 127.5
                bo = quantize(B) - 127.5
                idx = quantize(L) << 8 | hue_bucket(_offset_hue(ao, bo))
                need = _covering_distance(ao * ao + bo * bo)
                if need > row[idx]:
                    row[idx] = need


# =============================================================================
# 2. GAMUT TABLE
# =============================================================================

class GamutTable:
    """
    Immutable 256 x 256 boundary table.

    Args:
        values: 65536 integers in 0..255, row-major by lightness.
        name: Label for diagnostics, usually the space name.

    Raises:
        ValueError: On a wrong size or out-of-range entries.
    """

    __slots__ = ("_values", "name")

    def __init__(self, values: NDArray[np.integer], name: str = "custom") -> None:
        raw = np.asarray(values)
        if raw.size != TABLE_SIZE:
            raise ValueError(f"GamutTable '{name}': expected {TABLE_SIZE} entries, got {raw.size}")
        if raw.dtype != np.uint8:
            if not np.issubdtype(raw.dtype, np.integer):
                raise ValueError(f"GamutTable '{name}': entries must be integers, got {raw.dtype}")
            if raw.min() < 0 or raw.max() > 255:
                raise ValueError(f"GamutTable '{name}': entries must be in 0..255")
        arr = np.array(raw, dtype=np.uint8).ravel()
        arr.setflags(write=False)
        self._values: NDArray[np.uint8] = arr
        self.name: str = name

    def __len__(self) -> int:
        return TABLE_SIZE

    def __repr__(self) -> str:
        return f"GamutTable(name={self.name!r}, max={int(self._values.max())})"

    @property
    def values(self) -> NDArray[np.uint8]:
        """Flat read-only view of the table."""
        return self._values

    def lookup(self, lightness: int, hue_index: int) -> int:
        """
        Boundary distance for a lightness byte and hue bucket.

        Raises:
            IndexError: If either index is outside 0..255.
        """
        if not (0 <= lightness <= 255 and 0 <= hue_index <= 255):
            raise IndexError(f"GamutTable index out of range: ({lightness}, {hue_index})")
        return int(self._values[lightness << 8 | hue_index])

    def to_bytes(self) -> bytes:
        return self._values.tobytes()

    def save(self, path: PathLike) -> None:
        """Writes the table as 65536 raw bytes."""
        Path(path).write_bytes(self.to_bytes())

    @classmethod
    def from_bytes(cls, data: Union[bytes, bytearray, memoryview], name: str = "custom") -> "GamutTable":
        if len(data) != TABLE_SIZE:
            raise ValueError(f"GamutTable '{name}': expected {TABLE_SIZE} bytes, got {len(data)}")
        return cls(np.frombuffer(bytes(data), dtype=np.uint8), name=name)

    @classmethod
    def load(cls, path: PathLike, name: Optional[str] = None) -> "GamutTable":
        """Reads a raw table file written by :meth:`save`."""
        p = Path(path)
        return cls.from_bytes(p.read_bytes(), name=name or p.stem)

    @classmethod
    def sample(cls, space: PerceptualSpace) -> "GamutTable":
        """
        Derives the table of ``space`` from its transforms.

        Every color returned by ``space.from_rgba8888`` is in gamut under the
        resulting table.
        """
        m1_inv, m2_inv = space.inverse_matrices
        out = np.zeros(TABLE_SIZE, dtype=np.uint8)
        _sample_kernel(m1_inv, m2_inv, 1.0 / space.exponent, space.remap_light, out)

        m1, m2 = space.forward_matrices
        rows = np.zeros((256, TABLE_SIZE), dtype=np.uint8)
        _sweep_kernel(m1, m2, space.gamma, space.exponent, space.remap_light, rows)
        np.maximum(out, rows.max(axis=0), out=out)
        return cls(out, name=space.name)


# =============================================================================
# 3. GAMUT LIMITER
# =============================================================================

class GamutLimiter:
    """
    Gamut-aware operations on packed colors of one space.

    All methods are pure; one limiter may be shared between threads.
    """

    __slots__ = ("table", "_values")

    def __init__(self, table: GamutTable) -> None:
        self.table: GamutTable = table
        self._values: NDArray[np.uint8] = table.values

    def __repr__(self) -> str:
        return f"GamutLimiter(table={self.table.name!r})"

    # -- membership ----------------------------------------------------------
    def in_gamut(self, L: float, A: float, B: float) -> bool:
        """Membership test on normalized channels (A, B centred on 0.5)."""
        ao = (float(A) - 0.5) * 255.0
        bo = (float(B) - 0.5) * 255.0
        return bool(_offsets_in_gamut(self._values, quantize(float(L)), ao, bo))

    def in_gamut_packed(self, color: int) -> bool:
        return bool(in_gamut_kernel(color, self._values))

    # -- projection ----------------------------------------------------------
    def limit_to_gamut(self, color: int) -> int:
        """
        Radially projects an out-of-gamut color onto the boundary.

        In-gamut colors are returned unchanged. Lightness and alpha are
        always preserved.
        """
        return int(limit_kernel(color, self._values))

    def limit_channels(self, L: float, A: float, B: float, alpha: float = 1.0) -> int:
        """Packs normalized channels and limits the result."""
        return int(limit_kernel(pack(L, A, B, alpha), self._values))

    def maximize_saturation(self, color: int) -> int:
        """The most colorful in-gamut color with the same lightness, hue and alpha."""
        return int(maximize_kernel(color, self._values))

    def enrich(self, color: int, amount: float) -> int:
        """
        Scales chroma away from neutral by ``1 + amount`` (clamped to 0..1),
        then limits any overshoot.
        """
        return int(enrich_kernel(color, amount, self._values))

    def dullen(self, color: int, amount: float) -> int:
        """Scales chroma toward neutral by ``1 - amount`` (clamped to 0..1)."""
        return int(dullen_kernel(color, amount))

    # -- introspection -------------------------------------------------------
    def hue(self, color: int) -> float:
        """Hue of a packed color in turns, [0, 1)."""
        return float(atan2_turns((color >> 16 & 0xFF) - 127.5, (color >> 8 & 0xFF) - 127.5))

    def saturation(self, color: int) -> float:
        """
        Chroma relative to the boundary at this lightness and hue.

        1.0 is on the boundary; values above 1 are out of gamut. Where the
        boundary distance is 0 the saturation is 0.
        """
        return float(_saturation_kernel(color, self._values))

    def chroma_limit(self, hue: float, lightness: float) -> float:
        """Largest in-gamut chroma (signed-axis units, 0..1) at a hue and lightness."""
        hue = hue - math.floor(hue)
        return self.table.lookup(int(quantize(lightness)), int(hue_bucket(hue))) / 255.0

    def from_hsl(self, hue: float, saturation: float, lightness: float, alpha: float = 1.0) -> int:
        """
        Builds a color from hue (turns), saturation relative to the boundary,
        and stored lightness. The result is always in gamut.
        """
        return int(_from_hsl_kernel(float(hue), float(saturation), float(lightness),
                                    float(alpha), self._values))

    def random_color(self, rng: Optional[np.random.Generator] = None) -> int:
        """Uniformly drawn opaque in-gamut color."""
        rng = np.random.default_rng() if rng is None else rng
        while True:
            L, A, B = rng.random(3)
            color = int(pack(L, A, B, 1.0))
            if in_gamut_kernel(color, self._values):
                return color


# =============================================================================
# 4. PROCESS-WIDE INSTANCES
# =============================================================================

@functools.lru_cache(maxsize=8)
def _table_for(space_name: str) -> GamutTable:
    gamut_dir = get_config().gamut_dir
    if gamut_dir is not None:
        path = gamut_dir / f"{space_name}.gamut"
        if path.is_file():
            return GamutTable.load(path, name=space_name)
        warnings.warn(
            f"No gamut table at '{path}'; sampling '{space_name}' instead.",
            stacklevel=3,
        )
    return GamutTable.sample(get_space(space_name))


def get_gamut_table(space_name: Optional[str] = None) -> GamutTable:
    """Shared, read-only gamut table of a space (default space if ``None``)."""
    return _table_for(get_space(space_name).name)


@functools.lru_cache(maxsize=8)
def _limiter_for(space_name: str) -> GamutLimiter:
    return GamutLimiter(_table_for(space_name))


def get_limiter(space_name: Optional[str] = None) -> GamutLimiter:
    """Shared limiter of a space (default space if ``None``)."""
    return _limiter_for(get_space(space_name).name)
