# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

IPT_HQ
======
Ebner & Fairchild's IPT with the RGB->LMS step folded into one matrix
(D65 linear RGB straight to Hunt-Pointer-Estevez cones) and the standard 0.43
compression exponent. Intensity is stored as-is, no lightness re-curve.

References:
    - F. Ebner, M. D. Fairchild (1998). "Development and testing of a color
      space (IPT) with improved hue uniformity".
"""

from typing import Final

import numpy as np

from .base import PerceptualSpace

__all__ = ["IPT_HQ"]

# Linear RGB -> LMS
_M1_RGB_TO_LMS = np.array([
    [0.313921, 0.639468, 0.0465970],
    [0.151693, 0.748209, 0.1000044],
    [0.017753, 0.109468, 0.8729690],
], dtype=np.float64)

# LMS' -> IPT
_M2_LMS_TO_IPT = np.array([
    [0.4000,  0.4000,  0.2000],
    [4.4550, -4.8510,  0.3960],
    [0.8056,  0.3572, -1.1628],
], dtype=np.float64)

IPT_HQ: Final[PerceptualSpace] = PerceptualSpace(
    "ipt_hq",
    _M1_RGB_TO_LMS,
    _M2_LMS_TO_IPT,
    exponent=0.43,
    gamma=2.0,
    remap_light=False,
)
