"""Tests for layout options and full mosaic plans."""

import random

import pytest

from mosaicwall.grid_optimizer import GridSpec
from mosaicwall.reveal_scheduler import InvalidTimingWindow
from mosaicwall.workflow import get_layout_options, plan_mosaic


def test_layout_options_landscape():
    options = get_layout_options(77, "landscape")

    assert options["grid"] == GridSpec(rows=7, cols=11)
    assert (options["canvas_width"], options["canvas_height"]) == (3840, 2160)
    assert round(options["cell_width"]) == 349
    assert round(options["cell_height"]) == 309
    assert options["overlay_size"] == 3
    assert options["use_image"] is False
    assert options["warnings"] == []


def test_layout_options_portrait():
    options = get_layout_options(77, "portrait")
    assert (options["rows"], options["cols"]) == (11, 7)


def test_layout_options_with_image():
    options = get_layout_options(121, "landscape", has_image=True)
    assert options["grid"] == GridSpec(rows=11, cols=11)
    assert options["overlay_size"] == 7
    assert options["use_image"] is True


def test_image_skipped_on_small_grid():
    options = get_layout_options(25, "landscape", has_image=True)

    assert options["grid"] == GridSpec(rows=5, cols=5)
    assert options["overlay_size"] == 0
    assert options["use_image"] is False
    assert len(options["warnings"]) == 1


@pytest.mark.parametrize("image_size", [(200, 200), (1920, 480)])
def test_small_image_warning(image_size):
    options = get_layout_options(121, "landscape", has_image=True, image_size=image_size)

    assert options["use_image"] is True
    assert options["image_size"] == image_size
    assert options["warnings"] == [
        f"Image is small ({image_size[0]}x{image_size[1]}). "
        "Recommended minimum: 500x500 pixels for best quality."
    ]


def test_image_at_minimum_size_has_no_warning():
    options = get_layout_options(121, "landscape", has_image=True, image_size=(500, 500))
    assert options["warnings"] == []


def test_plan_carries_image_size():
    plan = plan_mosaic(121, "landscape", has_image=True, image_size=(1080, 1080))
    assert plan["image_size"] == (1080, 1080)


def test_layout_options_infeasible_count():
    with pytest.raises(ValueError, match="Remove 1 video"):
        get_layout_options(76, "landscape")


def test_layout_options_no_videos():
    with pytest.raises(ValueError, match="no video files"):
        get_layout_options(0, "landscape")


def test_layout_options_unknown_orientation():
    with pytest.raises(ValueError, match="Unknown orientation"):
        get_layout_options(77, "diagonal")


def test_plan_staggered_without_image():
    plan = plan_mosaic(77, "landscape", staggered=True, rng=random.Random(7))

    assert plan["composition_duration"] == 70
    assert plan["fade_out_duration"] == 1.0
    assert len(plan["cell_end_times"]) == 77
    assert plan["cell_end_times"][(3, 5)] == 70
    assert max(t for key, t in plan["cell_end_times"].items() if key != (3, 5)) < 69.5
    assert plan["piece_reveal_times"] is None
    assert plan["image_start_time"] is None


def test_plan_staggered_with_image():
    plan = plan_mosaic(121, "landscape", has_image=True, staggered=True, rng=random.Random(11))

    assert plan["overlay_size"] == 7
    assert plan["image_start_time"] == 67
    assert plan["image_end_time"] == 70
    assert plan["composition_duration"] == 70
    assert len(plan["piece_reveal_times"]) == 49
    assert all(67 <= t < 70 for t in plan["piece_reveal_times"].values())


def test_plan_looping_with_image():
    plan = plan_mosaic(121, "landscape", has_image=True, staggered=False)

    assert plan["cell_end_times"] is None
    assert plan["last_cell_end_time"] == 60
    assert plan["image_start_time"] == 57
    assert plan["composition_duration"] == 60


def test_plan_rejects_short_effect_window():
    with pytest.raises(InvalidTimingWindow):
        plan_mosaic(77, "landscape", staggered=True, effect_duration=1.0, fade_out_frames=30)


def test_plan_ignores_effect_window_when_not_staggered():
    plan = plan_mosaic(77, "landscape", staggered=False, effect_duration=1.0, fade_out_frames=30)
    assert plan["composition_duration"] == 60


def test_plan_rejects_non_positive_durations():
    with pytest.raises(ValueError):
        plan_mosaic(77, "landscape", base_duration=0)
