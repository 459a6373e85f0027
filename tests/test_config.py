"""Tests for configuration helpers."""

import pytest

from mosaicwall import config


def test_canvas_sizes():
    assert config.get_canvas_size("landscape") == (3840, 2160)
    assert config.get_canvas_size("portrait") == (2160, 3840)


def test_unknown_orientation():
    with pytest.raises(ValueError):
        config.get_canvas_size("square")


def test_project_dir_under_data_dir():
    assert config.get_project_dir("summer") == config.DATA_DIR / "summer"
