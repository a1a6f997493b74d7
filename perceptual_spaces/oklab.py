# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Oklab
=====
Björn Ottosson's Oklab with a square-law gamma in place of the piecewise
sRGB curve, and lightness re-curved by ``forward_light`` so that more of the
stored byte range is spent on dark values.

References:
    - B. Ottosson (2020). "A perceptual color space for image processing".
"""

from typing import Final

import numpy as np

from .base import PerceptualSpace

__all__ = ["OKLAB"]

# Linear RGB -> LMS
_M1_RGB_TO_LMS = np.array([
    [0.4121656120, 0.5362752080, 0.0514575653],
    [0.2118591070, 0.6807189584, 0.1074065790],
    [0.0883097947, 0.2818474174, 0.6302613616],
], dtype=np.float64)

# LMS' (cube root) -> Lab
_M2_LMS_TO_LAB = np.array([
    [0.2104542553,  0.7936177850, -0.0040720468],
    [1.9779984951, -2.4285922050,  0.4505937099],
    [0.0259040371,  0.7827717662, -0.8086757660],
], dtype=np.float64)

OKLAB: Final[PerceptualSpace] = PerceptualSpace(
    "oklab",
    _M1_RGB_TO_LMS,
    _M2_LMS_TO_LAB,
    exponent=1.0 / 3.0,
    gamma=2.0,
    remap_light=True,
)
