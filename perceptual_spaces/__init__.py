# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Registry of the perceptual spaces shipped with Swatch.
"""

from typing import Dict, Final, Optional

from swatch_config import get_config

from .base import PerceptualSpace, forward_light, handle_shapes, reverse_light
from .ipt_hq import IPT_HQ
from .oklab import OKLAB

__all__ = [
    "PerceptualSpace",
    "OKLAB",
    "IPT_HQ",
    "forward_light",
    "reverse_light",
    "handle_shapes",
    "get_space",
    "available_spaces",
]

_SPACES: Final[Dict[str, PerceptualSpace]] = {
    OKLAB.name: OKLAB,
    IPT_HQ.name: IPT_HQ,
}


def available_spaces() -> tuple[str, ...]:
    return tuple(_SPACES)


def get_space(name: Optional[str] = None) -> PerceptualSpace:
    """
    Looks up a space by name (case-insensitive).

    Args:
        name: Registry key. ``None`` selects the configured default space.

    Raises:
        KeyError: If no space of that name exists.
    """
    key = get_config().default_space if name is None else name.strip().lower()
    try:
        return _SPACES[key]
    except KeyError:
        raise KeyError(f"Unknown space '{name}'. Available: {', '.join(_SPACES)}") from None
