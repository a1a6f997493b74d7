# -*- coding: utf-8 -*-
"""
Swatch: Packed perceptual colors and the words that describe them
Copyright (c) 2026 opticsWolf

SPDX-License-Identifier: LGPL-3.0-or-later

Runtime Configuration
=====================
A single process-wide :class:`SwatchConfig` snapshot, seeded from the
environment on first access and replaced atomically by :func:`configure`.

Environment variables:
    SWATCH_DEFAULT_SPACE   Space used when callers pass ``space=None``.
    SWATCH_GAMUT_DIR       Directory holding precomputed ``<space>.gamut``
                           tables (65536 raw bytes each).
    SWATCH_SEARCH_LIMIT    Largest ``mix_count`` accepted by ``best_match``.

Caches built from the configuration (gamut tables, palettes, engines) are
keyed by space name; changing ``gamut_dir`` after a table has been built does
not rebuild it.
"""

import dataclasses
import os
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Final, Optional

__all__ = [
    "SwatchConfig",
    "get_config",
    "configure",
    "reset_config",
]

_KNOWN_SPACES: Final[tuple[str, ...]] = ("oklab", "ipt_hq")


@dataclass(slots=True, frozen=True)
class SwatchConfig:
    """
    Immutable configuration snapshot.

    Attributes:
        default_space: Name of the perceptual space used by default.
        gamut_dir: Optional directory with precomputed gamut tables.
        search_limit: Upper bound on ``mix_count`` for reverse searches.
    """
    default_space: str = "oklab"
    gamut_dir: Optional[Path] = None
    search_limit: int = 3

    def __post_init__(self) -> None:
        if not isinstance(self.default_space, str):
            raise TypeError(f"default_space must be a str, got {type(self.default_space).__name__}")
        if self.default_space not in _KNOWN_SPACES:
            raise ValueError(
                f"Unknown space '{self.default_space}'. Available: {', '.join(_KNOWN_SPACES)}"
            )
        if self.gamut_dir is not None and not isinstance(self.gamut_dir, Path):
            object.__setattr__(self, "gamut_dir", Path(self.gamut_dir))
        if isinstance(self.search_limit, bool) or not isinstance(self.search_limit, int):
            raise TypeError(f"search_limit must be an int, got {type(self.search_limit).__name__}")
        if self.search_limit < 1:
            raise ValueError(f"search_limit must be >= 1, got {self.search_limit}")

    @classmethod
    def from_env(cls) -> "SwatchConfig":
        """Builds a configuration from ``SWATCH_*`` environment variables."""
        kwargs: dict[str, Any] = {}
        space = os.environ.get("SWATCH_DEFAULT_SPACE")
        if space:
            kwargs["default_space"] = space.strip().lower()
        gamut_dir = os.environ.get("SWATCH_GAMUT_DIR")
        if gamut_dir:
            kwargs["gamut_dir"] = Path(gamut_dir)
        limit = os.environ.get("SWATCH_SEARCH_LIMIT")
        if limit:
            try:
                kwargs["search_limit"] = int(limit)
            except ValueError:
                raise ValueError(f"SWATCH_SEARCH_LIMIT must be an integer, got '{limit}'") from None
        return cls(**kwargs)


_CONFIG: Optional[SwatchConfig] = None
_CONFIG_LOCK = threading.RLock()


def get_config() -> SwatchConfig:
    """Returns the active configuration, reading the environment on first use."""
    global _CONFIG
    with _CONFIG_LOCK:
        if _CONFIG is None:
            _CONFIG = SwatchConfig.from_env()
        return _CONFIG


def configure(**changes: Any) -> SwatchConfig:
    """
    Replaces selected fields of the active configuration.

    Args:
        **changes: Field names of :class:`SwatchConfig` and their new values.

    Returns:
        The new active configuration.

    Raises:
        TypeError: On unknown field names or wrongly typed values.
        ValueError: On invalid values.
    """
    global _CONFIG
    with _CONFIG_LOCK:
        updated = dataclasses.replace(get_config(), **changes)
        _CONFIG = updated
        return updated


def reset_config() -> None:
    """Drops the active configuration; the next access re-reads the environment."""
    global _CONFIG
    with _CONFIG_LOCK:
        _CONFIG = None
