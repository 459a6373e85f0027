"""Tests for cell disappearance and image piece reveal timing."""

import random

import pytest

from mosaicwall.grid_optimizer import GridSpec
from mosaicwall.reveal_scheduler import (
    InvalidTimingWindow,
    is_center,
    frames_to_seconds,
    validate_timing_window,
    calculate_staggered_end_time,
    calculate_image_piece_reveal_time,
    calculate_composition_duration,
    image_reveal_start_time,
    last_cell_end_time,
    build_reveal_schedule,
    build_image_reveal_schedule,
)

BASE = 60
EFFECT = 10
FADE = 1.0


def test_is_center():
    assert is_center(3, 5, 7, 11)
    assert not is_center(5, 3, 7, 11)
    assert is_center(0, 0, 1, 1)


def test_frames_to_seconds():
    assert frames_to_seconds(30) == 1.0
    assert frames_to_seconds(15) == 0.5
    assert frames_to_seconds(48, frame_rate=24) == 2.0


def test_center_always_last():
    for seed in range(50):
        rng = random.Random(seed)
        for _ in range(5):
            assert calculate_staggered_end_time(3, 5, 7, 11, BASE, EFFECT, FADE, rng=rng) == BASE + EFFECT


def test_center_without_rng():
    assert calculate_staggered_end_time(3, 5, 7, 11, BASE, EFFECT, FADE) == 70


def test_non_center_window_bounds_and_coverage():
    rng = random.Random(1234)
    low = BASE + FADE
    high = BASE + EFFECT - 0.5

    samples = [calculate_staggered_end_time(0, 0, 7, 11, BASE, EFFECT, FADE, rng=rng) for _ in range(10000)]

    assert all(low <= t < high for t in samples)

    # Every tenth of the window gets hit
    bins = {int((t - low) / (high - low) * 10) for t in samples}
    assert bins == set(range(10))
    assert min(samples) < low + 0.05
    assert max(samples) > high - 0.05


@pytest.mark.parametrize("effect, fade", [(1.0, 1.0), (1.5, 1.0), (0.5, 1.0)])
def test_degenerate_window_rejected(effect, fade):
    with pytest.raises(InvalidTimingWindow):
        validate_timing_window(effect, fade)
    with pytest.raises(InvalidTimingWindow):
        calculate_staggered_end_time(0, 0, 7, 11, BASE, effect, fade)


def test_invalid_timing_window_is_value_error():
    with pytest.raises(ValueError):
        validate_timing_window(1.0, 1.0)


def test_narrow_window_accepted():
    validate_timing_window(1.6, 1.0)


def test_image_piece_reveal_bounds():
    rng = random.Random(99)
    samples = [calculate_image_piece_reveal_time(67, 3, rng=rng) for _ in range(2000)]
    assert all(67 <= t < 70 for t in samples)
    assert max(samples) - min(samples) > 2.5


def test_composition_duration():
    assert calculate_composition_duration(60, 10, True, True) == 70
    assert calculate_composition_duration(60, 10, True, False) == 70
    assert calculate_composition_duration(60, 10, False, False) == 60
    assert calculate_composition_duration(60, 10, False, True) == 60


def test_composition_duration_extends_for_long_reveal():
    assert calculate_composition_duration(60, 10, True, True, image_reveal_duration=5) == 72
    assert calculate_composition_duration(60, 10, False, True, image_reveal_duration=5) == 62


def test_image_window_start():
    assert last_cell_end_time(60, 10, True) == 70
    assert last_cell_end_time(60, 10, False) == 60
    assert image_reveal_start_time(60, 10, True) == 67
    assert image_reveal_start_time(60, 10, False) == 57


def test_reveal_schedule_covers_grid():
    grid = GridSpec(rows=7, cols=11)
    schedule = build_reveal_schedule(grid, BASE, EFFECT, FADE, rng=random.Random(5))

    assert len(schedule) == 77
    assert schedule[(3, 5)] == 70
    assert [key for key, t in schedule.items() if t == 70] == [(3, 5)]
    assert all(BASE + FADE <= t <= 70 - 0.5 for key, t in schedule.items() if key != (3, 5))


def test_reveal_schedule_reproducible_with_seed():
    grid = GridSpec(rows=5, cols=5)
    first = build_reveal_schedule(grid, BASE, EFFECT, FADE, rng=random.Random(42))
    second = build_reveal_schedule(grid, BASE, EFFECT, FADE, rng=random.Random(42))
    assert first == second


def test_reveal_schedule_validates_window():
    with pytest.raises(InvalidTimingWindow):
        build_reveal_schedule(GridSpec(rows=3, cols=3), BASE, 1.0, FADE)


def test_image_reveal_schedule():
    schedule = build_image_reveal_schedule(5, 67, 3, rng=random.Random(3))
    assert sorted(schedule) == [(r, c) for r in range(5) for c in range(5)]
    assert all(67 <= t < 70 for t in schedule.values())
