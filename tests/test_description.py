# -*- coding: utf-8 -*-
"""Description grammar, parsing pipeline and reverse search."""

from concurrent.futures import ThreadPoolExecutor

import numpy as np
import pytest

from swatch_algebra import MixBuffer, darken, lighten, mix
from swatch_config import configure
from swatch_description import (
    DARK,
    LEXICON,
    LIGHT,
    Description,
    TokenKind,
    best_match,
    classify_token,
    parse_description,
    tokenize,
)
from swatch_packing import TRANSPARENT


# --- lexicon ------------------------------------------------------------------

def test_tokenize():
    assert tokenize("Lighter  dull apricot-olive!") == ["lighter", "dull", "apricot", "olive"]
    assert tokenize("  ") == []


@pytest.mark.parametrize(
    "token, kind, family, level",
    [
        ("light", TokenKind.ADJECTIVE, "light", 1),
        ("lighter", TokenKind.ADJECTIVE, "light", 2),
        ("lightaa", TokenKind.ADJECTIVE, "light", 2),
        ("lightmost", TokenKind.ADJECTIVE, "light", 4),
        ("lights", TokenKind.INVALID, "light", 0),
        ("darkk", TokenKind.INVALID, "dark", 0),
        ("darkest", TokenKind.ADJECTIVE, "dark", 3),
        ("dullmost", TokenKind.ADJECTIVE, "dull", 4),
        ("rich", TokenKind.ADJECTIVE, "rich", 1),
        ("bright", TokenKind.ADJECTIVE, "bright", 1),
        ("deep", TokenKind.ADJECTIVE, "deep", 1),
        ("palest", TokenKind.ADJECTIVE, "pale", 3),
        ("palemax", TokenKind.ADJECTIVE, "pale", 4),
        ("weaker", TokenKind.ADJECTIVE, "weak", 2),
    ],
)
def test_classify_adjectives(token, kind, family, level):
    tc = classify_token(token)
    assert tc.kind is kind
    assert tc.rule.name == family
    assert tc.level == level


@pytest.mark.parametrize("token", ["lime", "denim", "red", "lavender", "rose", "sky"])
def test_classify_colors(token):
    assert classify_token(token).kind is TokenKind.COLOR


def test_adjective_deltas():
    assert LIGHT.deltas(2) == (0.25, 0.0)
    assert DARK.deltas(4) == (-0.6, 0.0)
    bright = next(rule for rule in LEXICON if rule.name == "bright")
    assert bright.deltas(1) == (0.125, 0.2)


# --- forward ------------------------------------------------------------------

def test_analyze(engine):
    desc = engine.analyze("lighter dull apricot-olive")
    assert desc == Description(("apricot", "olive"), 0.25, -0.2)
    assert engine.analyze("lights red").colors == ("lights", "red")


@pytest.mark.parametrize("text", ["", "   ", "zzz", "!!!", "42"])
def test_unknown_phrases_are_transparent(engine, text):
    assert engine.parse_description(text) == TRANSPARENT


def test_plain_names(engine, palette, limiter):
    red = palette["red"]
    assert engine.parse_description("red") == red
    assert engine.parse_description("red") == limiter.limit_to_gamut(red)
    assert engine.parse_description("RED") == red
    assert engine.parse_description("grey") == engine.parse_description("gray")


def test_lightness_adjectives(engine, palette, limiter):
    red, blue = palette["red"], palette["blue"]
    assert engine.parse_description("lighter red") == limiter.limit_to_gamut(lighten(red, 0.25))
    assert engine.parse_description("darker blue") == limiter.limit_to_gamut(darken(blue, 0.3))


def test_saturation_adjectives(engine, palette, limiter):
    red, green = palette["red"], palette["green"]
    assert engine.parse_description("richest red") == limiter.enrich(red, 0.6)
    assert engine.parse_description("duller green") == limiter.limit_to_gamut(limiter.dullen(green, 0.4))


def test_compound_adjectives(engine, palette, limiter):
    red = palette["red"]
    expected = limiter.enrich(lighten(red, 0.125), 0.2)
    assert engine.parse_description("bright red") == expected
    assert engine.parse_description("light rich red") == expected


def test_opposite_adjectives_cancel(engine, palette):
    assert engine.parse_description("richer duller red") == engine.parse_description("red")


def test_mixing_and_dilution(engine, palette, limiter):
    a, b = palette["apricot"], palette["olive"]
    assert engine.parse_description("apricot olive") == limiter.limit_to_gamut(mix([a, b]))
    assert engine.parse_description("lights red") == limiter.limit_to_gamut(mix([TRANSPARENT, palette["red"]]))


def test_scratch_buffer_reuse(engine):
    buf = MixBuffer(1)
    first = engine.parse_description("lighter dull apricot olive teal", scratch=buf)
    second = engine.parse_description("lighter dull apricot olive teal", scratch=buf)
    assert first == second == engine.parse_description("lighter dull apricot olive teal")
    assert engine.parse_description("red", scratch=buf) == engine.parse_description("red")


def test_module_level_parse(palette):
    assert parse_description("red", space="oklab") == palette["red"]


# --- reverse ------------------------------------------------------------------

def _distance(x, y):
    return sum(((x >> s & 0xFF) - (y >> s & 0xFF)) ** 2 for s in (0, 8, 16))


def test_best_match_recovers_palette_color(engine, palette):
    phrase = engine.best_match(palette["red"])
    assert engine.parse_description(phrase) == palette["red"]
    assert engine.best_match(palette["red"]) == phrase


def test_best_match_is_parseable(engine, palette, limiter):
    target = limiter.limit_to_gamut(lighten(palette["teal"], 0.2))
    phrase = engine.best_match(target)
    words = phrase.split()
    assert 1 <= len(words) <= 3
    assert words[-1] in palette
    result = engine.parse_description(phrase)
    assert _distance(result, target) <= _distance(palette["teal"], target)


def test_two_color_search_is_no_worse(engine, limiter, rng):
    target = limiter.random_color(rng)
    one = engine.parse_description(engine.best_match(target, 1))
    phrase = engine.best_match(target, 2)
    assert sum(classify_token(w).kind is TokenKind.COLOR for w in phrase.split()) == 2
    two = engine.parse_description(phrase)
    assert _distance(two, target) <= _distance(one, target)


def test_best_match_validation(engine, palette):
    red = palette["red"]
    with pytest.raises(TypeError):
        engine.best_match(red, "2")
    with pytest.raises(TypeError):
        engine.best_match(red, True)
    with pytest.raises(ValueError):
        engine.best_match(red, 2, scratch=np.zeros(1, dtype=np.int64))
    with pytest.raises(ValueError):
        engine.best_match(red, 1, scratch=np.zeros(2, dtype=np.int32))


def test_mix_count_is_clamped(engine, palette):
    blue = palette["blue"]
    single = engine.best_match(blue, 1)
    assert engine.best_match(blue, 0) == single
    assert engine.best_match(blue, -7) == single
    assert engine.best_match(blue, np.int64(0)) == single


def test_search_limit_follows_config(engine, palette, clean_config):
    configure(search_limit=1)
    red = palette["red"]
    assert engine.best_match(red, 2) == engine.best_match(red, 1)
    assert best_match(red, 50, space="oklab") == engine.best_match(red, 1)
    configure(search_limit=2)
    words = engine.best_match(palette["olive"], 9).split()
    names = [w for w in words if w in engine.palette]
    assert len(names) == 2


def test_caller_scratch(engine, palette):
    scratch = np.zeros(4, dtype=np.int64)
    assert engine.best_match(palette["blue"], 1, scratch=scratch) == engine.best_match(palette["blue"])


def test_module_level_best_match(palette):
    assert parse_description(best_match(palette["green"], space="oklab"), space="oklab") == palette["green"]


def test_engine_is_shareable_between_threads(engine):
    phrases = ["lighter red", "dull apricot olive", "darkest navy", "pale rose"] * 8
    expected = [engine.parse_description(p) for p in phrases]
    with ThreadPoolExecutor(max_workers=4) as pool:
        assert list(pool.map(engine.parse_description, phrases)) == expected
