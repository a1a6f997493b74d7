# -*- coding: utf-8 -*-
"""Process-wide configuration and project metadata."""

from pathlib import Path

import pytest

from perceptual_spaces import IPT_HQ, OKLAB, get_space
import swatch_about
from swatch_config import SwatchConfig, configure, get_config, reset_config


def test_defaults(clean_config):
    cfg = get_config()
    assert cfg == SwatchConfig()
    assert cfg.default_space == "oklab"
    assert cfg.gamut_dir is None
    assert cfg.search_limit == 3
    assert get_space() is OKLAB


def test_environment_overrides(clean_config, monkeypatch, tmp_path):
    monkeypatch.setenv("SWATCH_DEFAULT_SPACE", "IPT_HQ")
    monkeypatch.setenv("SWATCH_GAMUT_DIR", str(tmp_path))
    monkeypatch.setenv("SWATCH_SEARCH_LIMIT", "2")
    reset_config()
    cfg = get_config()
    assert cfg.default_space == "ipt_hq"
    assert cfg.gamut_dir == tmp_path
    assert cfg.search_limit == 2
    assert get_space() is IPT_HQ


def test_bad_environment(clean_config, monkeypatch):
    monkeypatch.setenv("SWATCH_SEARCH_LIMIT", "many")
    reset_config()
    with pytest.raises(ValueError):
        get_config()


def test_configure(clean_config):
    cfg = configure(search_limit=2, gamut_dir="tables")
    assert cfg is get_config()
    assert cfg.search_limit == 2
    assert cfg.gamut_dir == Path("tables")
    with pytest.raises(ValueError):
        configure(search_limit=0)
    with pytest.raises(ValueError):
        configure(default_space="cielab")
    with pytest.raises(TypeError):
        configure(search_limit="3")
    with pytest.raises(TypeError):
        configure(colour="red")
    assert get_config().search_limit == 2


def test_config_is_frozen(clean_config):
    with pytest.raises(AttributeError):
        get_config().search_limit = 5


def test_release_identity():
    assert swatch_about.__title__ == "Swatch"
    assert [int(part) for part in swatch_about.__version__.split(".")] >= [0, 1, 0]
    assert swatch_about.__license__ == "LGPL-3.0-or-later"
