# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Color Descriptions
==================
Turns phrases such as ``"lighter dull apricot-olive"`` into packed colors and,
in reverse, finds the short phrase that best approximates a color.

Grammar:
    A phrase is split on every run of non-letters. Each lower-cased word is
    either an *adjective* or a *color name*. Adjectives are recognised by
    their first letter plus one marker letter, and their strength by word
    length alone ("lightaa" reads as "lighter")::

        light  lighter  lightest  lightmost     +0.125 / level, lightness
        dark   darker   darkest   darkmost      -0.15  / level, lightness
        rich   richer   richest   richmost      +0.2   / level, saturation
        dull   duller   dullest   dullmost      -0.2   / level, saturation

    The compound adjectives ``bright`` (light + rich), ``pale`` (light +
    dull), ``deep`` (dark + rich) and ``weak`` (dark + dull) apply one level
    of each part per level of their own.

    A word that looks like an adjective but has no valid length is
    classified ``INVALID`` and looked up as a color name instead. Unknown
    names contribute ``TRANSPARENT`` to the mix, diluting the result.

Pipeline:
    1. mix all color words (running mean, see ``swatch_algebra.mix``)
    2. lighten / darken by the summed lightness delta
    3. enrich (> 0), dullen then limit (< 0), or just limit (== 0)

Reverse search:
    ``best_match`` enumerates every ordered choice of ``mix_count`` opaque
    palette colors (hue order) crossed with 9 lightness and 9 saturation
    levels, runs the same pipeline, and keeps the first candidate with the
    smallest squared L/A/B byte distance to the target. Each call owns its
    scratch buffer, so engines can be shared between threads.
"""

import enum
import functools
import re
from dataclasses import dataclass
from typing import Final, List, NamedTuple, Optional, Tuple

import numpy as np
from numpy.typing import NDArray
from numba import njit

from perceptual_spaces import PerceptualSpace, get_space
from swatch_algebra import MixBuffer, darken, lighten, mix_array
from swatch_config import get_config
from swatch_gamut import GamutLimiter, dullen_kernel, enrich_kernel, get_limiter, limit_kernel
from swatch_palette import Palette, get_palette

__all__ = [
    # --- Lexicon ---
    "LIGHT_STEPS",
    "DARK_STEPS",
    "SATURATION_STEPS",
    "TokenKind",
    "AdjectiveRule",
    "TokenClass",
    "LEXICON",
    "classify_token",
    "tokenize",

    # --- Engine ---
    "Description",
    "DescriptionEngine",
    "get_engine",
    "parse_description",
    "best_match",
]

# Cumulative deltas for levels 1..4
LIGHT_STEPS: Final[Tuple[float, ...]] = (0.125, 0.25, 0.375, 0.5)
DARK_STEPS: Final[Tuple[float, ...]] = (0.15, 0.3, 0.45, 0.6)
SATURATION_STEPS: Final[Tuple[float, ...]] = (0.2, 0.4, 0.6, 0.8)

_SPLIT: Final[re.Pattern[str]] = re.compile(r"[^a-zA-Z]+")


# =============================================================================
# 1. LEXICON
# =============================================================================

class TokenKind(enum.Enum):
    COLOR = "color"
    ADJECTIVE = "adjective"
    INVALID = "invalid"


@dataclass(slots=True, frozen=True)
class AdjectiveRule:
    """
    One adjective family.

    Attributes:
        words: Canonical spellings for levels 1..4.
        initial: Required first letter.
        marker_index: Position of the distinguishing letter.
        marker: The distinguishing letter.
        lightness: +1 (lighter), -1 (darker) or 0.
        saturation: +1 (richer), -1 (duller) or 0.
        extra_lengths: Additional ``(length, level)`` spellings.
    """
    words: Tuple[str, str, str, str]
    initial: str
    marker_index: int
    marker: str
    lightness: int = 0
    saturation: int = 0
    extra_lengths: Tuple[Tuple[int, int], ...] = ()

    @property
    def name(self) -> str:
        return self.words[0]

    def matches(self, token: str) -> bool:
        return (len(token) > self.marker_index
                and token[0] == self.initial
                and token[self.marker_index] == self.marker)

    def level_for(self, length: int) -> int:
        """Level 1..4 for a word length, or 0 when the length is not valid."""
        for level, word in enumerate(self.words, start=1):
            if len(word) == length:
                return level
        for extra, level in self.extra_lengths:
            if extra == length:
                return level
        return 0

    def deltas(self, level: int) -> Tuple[float, float]:
        """``(lightness, saturation)`` contribution of one word at ``level``."""
        light = 0.0
        if self.lightness > 0:
            light = LIGHT_STEPS[level - 1]
        elif self.lightness < 0:
            light = -DARK_STEPS[level - 1]
        sat = 0.0
        if self.saturation > 0:
            sat = SATURATION_STEPS[level - 1]
        elif self.saturation < 0:
            sat = -SATURATION_STEPS[level - 1]
        return light, sat


LIGHT: Final = AdjectiveRule(("light", "lighter", "lightest", "lightmost"), "l", 2, "g", lightness=1)
DARK: Final = AdjectiveRule(("dark", "darker", "darkest", "darkmost"), "d", 1, "a", lightness=-1)
RICH: Final = AdjectiveRule(("rich", "richer", "richest", "richmost"), "r", 1, "i", saturation=1)
DULL: Final = AdjectiveRule(("dull", "duller", "dullest", "dullmost"), "d", 1, "u", saturation=-1)

LEXICON: Final[Tuple[AdjectiveRule, ...]] = (
    LIGHT,
    DARK,
    RICH,
    DULL,
    AdjectiveRule(("bright", "brighter", "brightest", "brightmost"), "b", 3, "g", lightness=1, saturation=1),
    AdjectiveRule(("pale", "paler", "palest", "palemost"), "p", 2, "l", lightness=1, saturation=-1,
                  extra_lengths=((7, 4),)),
    AdjectiveRule(("deep", "deeper", "deepest", "deepmost"), "d", 3, "p", lightness=-1, saturation=1),
    AdjectiveRule(("weak", "weaker", "weakest", "weakmost"), "w", 3, "k", lightness=-1, saturation=-1),
)

# Output vocabulary of the reverse search, indexed by level + 4
_LIGHT_WORDS: Final[Tuple[str, ...]] = tuple(reversed(DARK.words)) + ("",) + LIGHT.words
_SATURATION_WORDS: Final[Tuple[str, ...]] = tuple(reversed(DULL.words)) + ("",) + RICH.words


class TokenClass(NamedTuple):
    kind: TokenKind
    rule: Optional[AdjectiveRule] = None
    level: int = 0


def tokenize(text: str) -> List[str]:
    """Lower-cased words of ``text``, split on runs of non-letters."""
    return [t.lower() for t in _SPLIT.split(text) if t]


def classify_token(token: str, lexicon: Tuple[AdjectiveRule, ...] = LEXICON) -> TokenClass:
    """
    Classifies one lower-case word against the adjective lexicon.

    Returns:
        ``ADJECTIVE`` with its rule and level, ``INVALID`` with the rule whose
        shape matched but whose length did not, or ``COLOR``.
    """
    for rule in lexicon:
        if rule.matches(token):
            level = rule.level_for(len(token))
            if level:
                return TokenClass(TokenKind.ADJECTIVE, rule, level)
            return TokenClass(TokenKind.INVALID, rule, 0)
    return TokenClass(TokenKind.COLOR)


# =============================================================================
# 2. KERNELS (Numba)
# =============================================================================

@njit(cache=True)
def _adjust(color: int, lightness: float, saturation: float, table: NDArray[np.uint8]) -> int:
    if lightness > 0.0:
        color = lighten(color, lightness)
    elif lightness < 0.0:
        color = darken(color, -lightness)
    if saturation > 0.0:
        return enrich_kernel(color, saturation, table)
    if saturation < 0.0:
        return limit_kernel(dullen_kernel(color, -saturation), table)
    return limit_kernel(color, table)


@njit(cache=True)
def _search_kernel(colors: NDArray[np.int64], mix_count: int, target: int,
                   light_levels: NDArray[np.float64], saturation_levels: NDArray[np.float64],
                   table: NDArray[np.uint8], scratch: NDArray[np.int64]) -> int:
    """
    Enumeration code of the best candidate.

    Code layout: slot ``i`` uses color ``(code // p**i) % p``; the lightness
    level index is ``(code // p**k) % 9`` and the saturation level index is
    ``code // (p**k * 9)``.
    """
    p = colors.shape[0]
    color_tries = 1
    for _ in range(mix_count):
        color_tries *= p
    tl = target & 0xFF
    ta = target >> 8 & 0xFF
    tb = target >> 16 & 0xFF

    best_dist = 1 << 62
    best_code = 0
    for code in range(color_tries * 81):
        e = 1
        for i in range(mix_count):
            scratch[i] = colors[(code // e) % p]
            e *= p
        li = (code // color_tries) % 9
        si = code // (color_tries * 9)
        result = _adjust(mix_array(scratch, 0, mix_count), light_levels[li], saturation_levels[si], table)
        dl = (result & 0xFF) - tl
        da = (result >> 8 & 0xFF) - ta
        db = (result >> 16 & 0xFF) - tb
        dist = dl * dl + da * da + db * db
        if dist < best_dist:
            best_dist = dist
            best_code = code
    return best_code


# =============================================================================
# 3. ENGINE
# =============================================================================

@dataclass(slots=True, frozen=True)
class Description:
    """Parsed form of a phrase: color words plus summed adjective deltas."""
    colors: Tuple[str, ...]
    lightness: float
    saturation: float


def _level_table(rule_up: AdjectiveRule, rule_down: AdjectiveRule) -> NDArray[np.float64]:
    """Deltas for levels -4..4, taken from the same rules the parser uses."""
    out = np.zeros(9, dtype=np.float64)
    for level in range(1, 5):
        up_l, up_s = rule_up.deltas(level)
        down_l, down_s = rule_down.deltas(level)
        out[4 + level] = up_l + up_s
        out[4 - level] = down_l + down_s
    return out


class DescriptionEngine:
    """
    Parser and reverse search over one space, limiter and palette.

    The engine holds only read-only state. Scratch memory is allocated per
    call or supplied by the caller.
    """

    __slots__ = ("space", "limiter", "palette", "lexicon",
                 "_search_names", "_search_colors", "_light_levels", "_saturation_levels")

    def __init__(self, space: PerceptualSpace, limiter: GamutLimiter, palette: Palette,
                 lexicon: Tuple[AdjectiveRule, ...] = LEXICON) -> None:
        self.space: PerceptualSpace = space
        self.limiter: GamutLimiter = limiter
        self.palette: Palette = palette
        self.lexicon: Tuple[AdjectiveRule, ...] = lexicon

        names, colors = palette.opaque_by_hue()
        colors.setflags(write=False)
        self._search_names: Tuple[str, ...] = names
        self._search_colors: NDArray[np.int64] = colors
        self._light_levels = _level_table(LIGHT, DARK)
        self._saturation_levels = _level_table(RICH, DULL)
        self._light_levels.setflags(write=False)
        self._saturation_levels.setflags(write=False)

    def __repr__(self) -> str:
        return f"DescriptionEngine(space={self.space.name!r}, colors={len(self._search_names)})"

    # -- forward -------------------------------------------------------------
    def analyze(self, text: str) -> Description:
        """Splits a phrase into color words and summed lightness/saturation deltas."""
        lightness = 0.0
        saturation = 0.0
        colors: List[str] = []
        for token in tokenize(text):
            tc = classify_token(token, self.lexicon)
            if tc.kind is TokenKind.ADJECTIVE and tc.rule is not None:
                dl, ds = tc.rule.deltas(tc.level)
                lightness += dl
                saturation += ds
            else:
                colors.append(token)
        return Description(tuple(colors), lightness, saturation)

    def parse_description(self, text: str, scratch: Optional[MixBuffer] = None) -> int:
        """
        Color described by ``text``.

        Args:
            text: Phrase such as ``"lighter dull apricot-olive"``.
            scratch: Optional buffer to mix in; it is cleared first.

        Returns:
            The packed color. Empty or unrecognised phrases yield
            ``TRANSPARENT``; nothing here raises on bad words.
        """
        desc = self.analyze(text)
        buf = MixBuffer(max(len(desc.colors), 1)) if scratch is None else scratch
        buf.clear()
        for name in desc.colors:
            buf.append(self.palette.get(name))
        return int(_adjust(buf.mix(), desc.lightness, desc.saturation, self.limiter.table.values))

    # -- reverse -------------------------------------------------------------
    def best_match(self, color: int, mix_count: int = 1,
                   scratch: Optional[NDArray[np.int64]] = None) -> str:
        """
        Shortest phrase of ``mix_count`` color names plus adjectives that best
        reproduces ``color``.

        Args:
            color: Target packed color; alpha is ignored.
            mix_count: Number of color names to combine. Values outside
                1 .. ``search_limit`` are clamped into that range.
            scratch: Optional int64 array with at least ``mix_count`` slots.

        Returns:
            ``"<lightness adj> <saturation adj> <name> ..."`` with empty
            adjectives omitted. The phrase is always accepted by
            :meth:`parse_description`.

        Raises:
            ValueError: If ``scratch`` is too small or the palette is empty.
            TypeError: If ``mix_count`` is not an int.
        """
        if isinstance(mix_count, bool) or not isinstance(mix_count, (int, np.integer)):
            raise TypeError(f"mix_count must be an int, got {type(mix_count).__name__}")
        mix_count = max(1, min(int(mix_count), get_config().search_limit))
        if len(self._search_names) == 0:
            raise ValueError("Palette has no opaque colors to search")

        if scratch is None:
            scratch = np.zeros(mix_count, dtype=np.int64)
        elif scratch.dtype != np.int64 or scratch.ndim != 1 or scratch.shape[0] < mix_count:
            raise ValueError(f"scratch must be a 1-D int64 array with >= {mix_count} slots")

        code = int(_search_kernel(self._search_colors, int(mix_count), int(color) & 0xFFFFFFFF,
                                  self._light_levels, self._saturation_levels,
                                  self.limiter.table.values, scratch))

        p = len(self._search_names)
        color_tries = p ** mix_count
        words = [self._search_names[(code // p ** i) % p] for i in range(mix_count)]
        li = (code // color_tries) % 9
        si = code // (color_tries * 9)
        prefix = [w for w in (_LIGHT_WORDS[li], _SATURATION_WORDS[si]) if w]
        return " ".join(prefix + words)


# =============================================================================
# 4. SHARED ENGINES
# =============================================================================

@functools.lru_cache(maxsize=8)
def _engine_for(space_name: str) -> DescriptionEngine:
    return DescriptionEngine(get_space(space_name), get_limiter(space_name), get_palette(space_name))


def get_engine(space: Optional[str] = None) -> DescriptionEngine:
    """Shared engine of a space (default space if ``None``)."""
    return _engine_for(get_space(space).name)


def parse_description(text: str, space: Optional[str] = None) -> int:
    """Color described by ``text`` in ``space``. See :meth:`DescriptionEngine.parse_description`."""
    return get_engine(space).parse_description(text)


def best_match(color: int, mix_count: int = 1, space: Optional[str] = None) -> str:
    """Closest description of ``color``. See :meth:`DescriptionEngine.best_match`."""
    return get_engine(space).best_match(color, mix_count)
