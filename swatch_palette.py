# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Named Palette
=============
Insertion-ordered mapping from lowercase color names to packed colors of one
perceptual space, plus three orderings derived once at construction:

    - ``names``               alphabetical
    - ``names_by_hue``        translucent first, then near-neutral colors by
                              lightness, then chromatic colors by hue and
                              lightness
    - ``names_by_lightness``  by stored lightness byte

Aliases (``"grey"`` -> ``"gray"``) resolve on lookup but never appear in the
orderings. Unknown names resolve to ``TRANSPARENT`` through :meth:`Palette.get`.

The shipped palette lives in ``perceptual_spaces/data/simple_palette.json``
as RGBA8888 hex codes; each entry is converted into the target space and
limited to its gamut when loaded.
"""

import functools
import json
import warnings
from importlib import resources
from pathlib import Path
from typing import Dict, Final, Iterable, Iterator, Mapping, Optional, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from perceptual_spaces import PerceptualSpace, get_space
from swatch_gamut import GamutLimiter, get_limiter
from swatch_packing import TRANSPARENT

__all__ = [
    "NEUTRAL_SATURATION",
    "Palette",
    "get_palette",
]

NEUTRAL_SATURATION: Final[float] = 0.05
"""Colors at or below this saturation sort with the grays."""

_OPAQUE_THRESHOLD: Final[int] = 128


class Palette:
    """
    Read-only named colors of one space.

    Args:
        entries: ``(name, color)`` pairs in insertion order. Names are
            lower-cased; a repeated name keeps its first color.
        limiter: Limiter of the same space, used to rank colors by hue and
            saturation.
        aliases: Extra names mapped onto existing entries.
    """

    __slots__ = ("_named", "_aliases", "_order", "_alphabetical", "_by_hue", "_by_lightness")

    def __init__(self, entries: Iterable[Tuple[str, int]], limiter: GamutLimiter,
                 aliases: Optional[Mapping[str, str]] = None) -> None:
        named: Dict[str, int] = {}
        for name, color in entries:
            key = name.strip().lower()
            if key in named:
                warnings.warn(f"Palette: duplicate name '{key}' ignored.", stacklevel=2)
                continue
            named[key] = int(color) & 0xFEFFFFFF
        self._named: Dict[str, int] = named
        self._order: Tuple[str, ...] = tuple(named)

        resolved: Dict[str, str] = {}
        for alias, target in (aliases or {}).items():
            a_key = alias.strip().lower()
            t_key = target.strip().lower()
            if t_key not in named:
                warnings.warn(f"Palette: alias '{a_key}' points to unknown color '{t_key}'.", stacklevel=2)
                continue
            if a_key in named:
                warnings.warn(f"Palette: alias '{a_key}' shadows a color and was ignored.", stacklevel=2)
                continue
            resolved[a_key] = t_key
        self._aliases: Dict[str, str] = resolved

        self._alphabetical: Tuple[str, ...] = tuple(sorted(self._order))
        self._by_lightness: Tuple[str, ...] = tuple(sorted(self._order, key=lambda n: named[n] & 0xFF))

        def hue_key(name: str) -> Tuple[int, float, int]:
            c = named[name]
            if (c >> 24 & 0xFE) < _OPAQUE_THRESHOLD:
                return 0, 0.0, 0
            if limiter.saturation(c) <= NEUTRAL_SATURATION:
                return 1, 0.0, c & 0xFF
            return 2, limiter.hue(c), c & 0xFF

        self._by_hue: Tuple[str, ...] = tuple(sorted(self._order, key=hue_key))

    # -- mapping interface ---------------------------------------------------
    def __getitem__(self, name: str) -> int:
        key = name.lower()
        key = self._aliases.get(key, key)
        try:
            return self._named[key]
        except KeyError:
            raise KeyError(f"Unknown color name '{name}'") from None

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        key = name.lower()
        return key in self._named or key in self._aliases

    def __len__(self) -> int:
        return len(self._named)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __repr__(self) -> str:
        return f"Palette(colors={len(self._named)}, aliases={len(self._aliases)})"

    def get(self, name: str, default: int = TRANSPARENT) -> int:
        """Color for ``name`` (exact, lower-case match or alias), else ``default``."""
        key = self._aliases.get(name, name)
        return self._named.get(key, default)

    def items(self) -> Iterator[Tuple[str, int]]:
        return iter(self._named.items())

    # -- orderings -----------------------------------------------------------
    @property
    def insertion_order(self) -> Tuple[str, ...]:
        return self._order

    @property
    def names(self) -> Tuple[str, ...]:
        """Color names in alphabetical order (aliases excluded)."""
        return self._alphabetical

    @property
    def names_by_hue(self) -> Tuple[str, ...]:
        return self._by_hue

    @property
    def names_by_lightness(self) -> Tuple[str, ...]:
        return self._by_lightness

    @property
    def aliases(self) -> Dict[str, str]:
        return dict(self._aliases)

    def opaque_by_hue(self) -> Tuple[Tuple[str, ...], NDArray[np.int64]]:
        """
        Hue-ordered names and colors with translucent entries removed.

        Returns:
            ``(names, colors)`` where ``colors`` is a fresh int64 array.
        """
        names = tuple(n for n in self._by_hue if (self._named[n] >> 24 & 0xFE) >= _OPAQUE_THRESHOLD)
        colors = np.array([self._named[n] for n in names], dtype=np.int64)
        return names, colors

    # -- loading -------------------------------------------------------------
    @classmethod
    def from_json(cls, space: PerceptualSpace, limiter: GamutLimiter,
                  path: Optional[Union[str, Path]] = None) -> "Palette":
        """
        Loads RGBA8888 palette data and converts it into ``space``.

        Args:
            space: Target perceptual space.
            limiter: Limiter of ``space``; every entry is limited to its gamut.
            path: JSON file with ``colors`` (list of ``[name, "RRGGBBAA"]``)
                and optional ``aliases``. Defaults to the shipped palette.

        Raises:
            ValueError: If the file is not a JSON object with a ``colors`` list.
        """
        if path is None:
            text = (resources.files("perceptual_spaces") / "data" / "simple_palette.json").read_text(encoding="utf-8")
        else:
            text = Path(path).read_text(encoding="utf-8")
        data = json.loads(text)
        if not isinstance(data, dict) or not isinstance(data.get("colors"), list):
            raise ValueError("Palette data must be an object with a 'colors' list")

        entries = []
        for row in data["colors"]:
            rgba = _parse_row(row)
            if rgba is None:
                warnings.warn(f"Palette: skipping malformed row {row!r}.", stacklevel=2)
                continue
            color = limiter.limit_to_gamut(space.from_rgba8888(rgba))
            entries.append((row[0], color))
        return cls(entries, limiter, aliases=data.get("aliases") or {})


def _parse_row(row: object) -> Optional[int]:
    if not isinstance(row, (list, tuple)) or len(row) != 2:
        return None
    name, code = row
    if not isinstance(name, str) or not name.strip() or not isinstance(code, str) or len(code) != 8:
        return None
    try:
        return int(code, 16)
    except ValueError:
        return None


@functools.lru_cache(maxsize=8)
def _palette_for(space_name: str) -> Palette:
    return Palette.from_json(get_space(space_name), get_limiter(space_name))


def get_palette(space_name: Optional[str] = None) -> Palette:
    """Shared palette of a space (default space if ``None``)."""
    return _palette_for(get_space(space_name).name)
