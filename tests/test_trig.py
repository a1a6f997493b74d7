# -*- coding: utf-8 -*-
"""Accuracy and range of the polynomial trigonometry."""

import math

import pytest

import swatch_trig as trig

TURNS = [i / 64.0 for i in range(-64, 129)]


def _circular_diff(a, b):
    d = abs(a - b) % 1.0
    return min(d, 1.0 - d)


@pytest.mark.parametrize("t", TURNS)
def test_sin_cos_turns_close_to_math(t):
    assert abs(trig.sin_turns(t) - math.sin(t * math.tau)) < 2e-3
    assert abs(trig.cos_turns(t) - math.cos(t * math.tau)) < 2e-3


def test_sin_cos_radians_close_to_math():
    for i in range(-50, 51):
        x = i * 0.173
        assert abs(trig.sin(x) - math.sin(x)) < 2e-3
        assert abs(trig.cos(x) - math.cos(x)) < 2e-3


def test_sin_turns_exact_at_quarters():
    assert trig.sin_turns(0.0) == 0.0
    assert trig.sin_turns(0.25) == pytest.approx(1.0, abs=1e-12)
    assert trig.sin_turns(-0.25) == pytest.approx(-1.0, abs=1e-12)


def test_atan2_turns_close_to_math():
    for k in range(200):
        theta = (k + 0.5) / 200.0 * math.tau
        for radius in (0.01, 1.0, 300.0):
            y = radius * math.sin(theta)
            x = radius * math.cos(theta)
            expected = (math.atan2(y, x) / math.tau) % 1.0
            assert _circular_diff(trig.atan2_turns(y, x), expected) < 2e-4


def test_atan2_turns_range(rng):
    ys = rng.normal(size=500)
    xs = rng.normal(size=500)
    for y, x in zip(ys, xs):
        v = trig.atan2_turns(float(y), float(x))
        assert 0.0 <= v < 1.0
    assert 0.0 <= trig.atan2_turns(-1e-300, 1.0) < 1.0


def test_atan2_turns_special_points():
    assert trig.atan2_turns(0.0, 0.0) == 0.0
    assert trig.atan2_turns(0.0, 1.0) == pytest.approx(0.0, abs=1e-4)
    assert trig.atan2_turns(0.0, -1.0) == pytest.approx(0.5, abs=1e-4)
    assert trig.atan2_turns(1.0, 0.0) == pytest.approx(0.25, abs=1e-4)


def test_atan2_radians_close_to_math():
    for k in range(100):
        theta = (k + 0.5) / 100.0 * math.tau - math.pi
        y, x = math.sin(theta), math.cos(theta)
        assert abs(trig.atan2(y, x) - math.atan2(y, x)) < 2e-3


def test_atan_close_to_math():
    for i in range(-40, 41):
        v = i * 0.37
        assert abs(trig.atan(v) - math.atan(v)) < 5e-4


@pytest.mark.parametrize("a", [i / 20.0 for i in range(-20, 21)])
def test_asin_acos_close_to_math(a):
    assert abs(trig.asin(a) - math.asin(a)) < 1e-4
    assert abs(trig.acos(a) - math.acos(a)) < 1e-4
    assert abs(trig.asin_turns(a) - math.asin(a) / math.tau) < 5e-5
    assert abs(trig.acos_turns(a) - math.acos(a) / math.tau) < 5e-5


def test_asin_turns_keeps_sign():
    v = trig.asin_turns(-0.5)
    assert -0.25 <= v < 0.0
    assert v == pytest.approx(-trig.asin_turns(0.5), abs=1e-12)
    assert trig.asin_turns(-1.0) == pytest.approx(-0.25, abs=5e-5)
    assert trig.asin_turns(-2.0) == trig.asin_turns(-1.0)
