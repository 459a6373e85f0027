"""Shared fixtures."""

import pytest

from mosaicwall import mosaic_generator


@pytest.fixture(autouse=True)
def no_ffprobe(monkeypatch):
    """Test clips are empty files; skip the ffprobe call for each one."""
    monkeypatch.setattr(mosaic_generator, "get_video_resolution", lambda video_path: None)
