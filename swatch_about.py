# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Release identity. Kept free of imports so the build backend can read
``__version__`` without installing numpy or numba.
"""

from typing import Final

__title__: Final[str] = "Swatch"
__version__: Final[str] = "0.1.0"
__license__: Final[str] = "LGPL-3.0-or-later"
