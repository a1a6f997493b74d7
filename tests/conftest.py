# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Shared fixtures. Sampled tables and engines are built once per session.
"""

import numpy as np
import pytest

from perceptual_spaces import get_space
from swatch_config import reset_config
from swatch_description import get_engine
from swatch_gamut import GamutLimiter, GamutTable, TABLE_SIZE, get_limiter
from swatch_palette import get_palette


@pytest.fixture(scope="session")
def oklab():
    return get_space("oklab")


@pytest.fixture(scope="session")
def limiter():
    return get_limiter("oklab")


@pytest.fixture(scope="session")
def palette():
    return get_palette("oklab")


@pytest.fixture(scope="session")
def engine():
    return get_engine("oklab")


@pytest.fixture
def zero_limiter():
    """Limiter whose gamut contains only the neutral axis."""
    return GamutLimiter(GamutTable.from_bytes(bytes(TABLE_SIZE), name="zero"))


@pytest.fixture
def rng():
    return np.random.default_rng(20260419)


@pytest.fixture
def clean_config(monkeypatch):
    for var in ("SWATCH_DEFAULT_SPACE", "SWATCH_GAMUT_DIR", "SWATCH_SEARCH_LIMIT"):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()
