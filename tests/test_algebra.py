# -*- coding: utf-8 -*-
"""Channel interpolation operators and mixing."""

import numpy as np
import pytest

from swatch_algebra import (
    MixBuffer,
    alpha_multiply,
    blot,
    darken,
    fade,
    lerp,
    lighten,
    lower_a,
    lower_b,
    lower_pole,
    mix,
    mix_array,
    raise_a,
    raise_b,
    raise_pole,
)
from swatch_packing import TRANSPARENT, a_byte, alpha_byte, b_byte, l_byte, pack_bytes

BASE = pack_bytes(100, 50, 60, 254)


def test_lighten_and_darken():
    assert lighten(BASE, 0.5) == pack_bytes(177, 50, 60, 254)
    assert darken(BASE, 0.5) == pack_bytes(50, 50, 60, 254)
    assert l_byte(lighten(BASE, 2.0)) == 255
    assert l_byte(darken(BASE, 1.0)) == 0
    assert darken(BASE, -1.0) == BASE
    assert lighten(BASE, 0.0) == BASE


def test_poles():
    assert a_byte(raise_pole(BASE, 1, 1.0)) == 255
    assert b_byte(lower_pole(BASE, 2, 1.0)) == 0
    assert raise_pole(BASE, 1, 0.5) == pack_bytes(100, 152, 60, 254)
    assert lower_pole(BASE, 2, 0.5) == pack_bytes(100, 50, 30, 254)
    assert raise_a(BASE, 0.3) == raise_pole(BASE, 1, 0.3)
    assert lower_a(BASE, 0.3) == lower_pole(BASE, 1, 0.3)
    assert raise_b(BASE, 0.3) == raise_pole(BASE, 2, 0.3)
    assert lower_b(BASE, 0.3) == lower_pole(BASE, 2, 0.3)


@pytest.mark.parametrize("axis", [0, 3, -1])
def test_invalid_axis_is_identity(axis):
    assert raise_pole(BASE, axis, 1.0) == BASE
    assert lower_pole(BASE, axis, 1.0) == BASE


def test_alpha_operators_keep_parity():
    clear = pack_bytes(100, 50, 60, 0)
    assert alpha_byte(blot(clear, 1.0)) == 254
    assert alpha_byte(blot(clear, 0.5)) == 126
    assert alpha_byte(fade(BASE, 1.0)) == 0
    assert alpha_byte(fade(BASE, 0.5)) == 126
    assert alpha_byte(alpha_multiply(BASE, 0.5)) == 126
    assert alpha_byte(alpha_multiply(BASE, 2.0)) == 254
    assert alpha_byte(alpha_multiply(BASE, -3.0)) == 0
    for t in np.linspace(0.0, 1.0, 11):
        assert alpha_byte(fade(BASE, float(t))) % 2 == 0
        assert alpha_byte(blot(clear, float(t))) % 2 == 0
    assert fade(BASE, 1.0) & 0x00FFFFFF == BASE & 0x00FFFFFF


def test_lerp():
    black = pack_bytes(0, 0, 0, 0)
    white = pack_bytes(255, 255, 255, 254)
    assert lerp(BASE, BASE, 0.7) == BASE
    assert lerp(black, white, 0.5) == pack_bytes(127, 127, 127, 126)
    assert lerp(black, white, 1.5) == white
    assert lerp(black, white, -0.5) == black


def test_mix_identities():
    other = pack_bytes(200, 150, 160, 254)
    assert mix([BASE]) == BASE
    assert mix([BASE, BASE, BASE]) == BASE
    assert mix([BASE, other]) == lerp(BASE, other, 0.5)
    third = pack_bytes(10, 20, 30, 254)
    assert mix([BASE, other, third]) == lerp(lerp(BASE, other, 0.5), third, 1.0 / 3.0)


def test_mix_is_a_running_mean():
    colors = [pack_bytes(0, 128, 128, 254), pack_bytes(60, 128, 128, 254), pack_bytes(120, 128, 128, 254)]
    assert abs(l_byte(mix(colors)) - 60) <= 1
    assert a_byte(mix(colors)) == 128


def test_mix_empty_and_invalid_ranges():
    assert mix([]) == TRANSPARENT
    assert mix([BASE], offset=1) == TRANSPARENT
    assert mix([BASE, BASE], count=5) == TRANSPARENT
    assert mix([BASE, BASE], offset=-1, count=1) == TRANSPARENT
    arr = np.array([BASE, TRANSPARENT, BASE], dtype=np.int64)
    assert mix_array(arr, 2, 1) == BASE
    assert mix_array(arr, 0, 0) == TRANSPARENT


def test_unknown_color_dilutes_mix():
    assert mix([TRANSPARENT, BASE]) == lerp(TRANSPARENT, BASE, 0.5)
    assert alpha_byte(mix([TRANSPARENT, BASE])) == 126


def test_mix_buffer_grows_and_clears():
    buf = MixBuffer(capacity=2)
    colors = [pack_bytes(i * 20, 128, 128, 254) for i in range(7)]
    buf.extend(colors)
    assert len(buf) == 7
    assert buf.capacity >= 7
    assert list(buf.view()) == colors
    assert buf.mix() == mix(colors)
    buf.clear()
    assert len(buf) == 0
    assert buf.mix() == TRANSPARENT
    buf.append(BASE)
    assert buf.mix() == BASE
