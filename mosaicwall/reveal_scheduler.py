"""
Reveal timing for mosaic walls.

Cells snap out at random times inside the effect window, except the center
cell which always disappears last. Image overlay pieces snap in at random
times inside the image reveal window.

Pass an rng (random.Random) to make a run reproducible; otherwise the global
random module is used.
"""

import random
from typing import Dict, Tuple, Optional

from .config import FRAME_RATE, IMAGE_REVEAL_DURATION, IMAGE_LEAD_TIME, CENTER_GAP
from .grid_optimizer import GridSpec


class InvalidTimingWindow(ValueError):
    """Effect window is too short for non-center cells to finish before the center."""


def is_center(row: int, col: int, rows: int, cols: int) -> bool:
    """True for the single center cell of an odd×odd grid."""
    return row == rows // 2 and col == cols // 2


def frames_to_seconds(frames: float, frame_rate: float = FRAME_RATE) -> float:
    return frames / frame_rate


def validate_timing_window(effect_duration: float, fade_out_duration: float):
    """
    Check that [base + fade_out, base + effect - CENTER_GAP) is non-empty.

    Raises:
        InvalidTimingWindow: If effect_duration - fade_out_duration <= CENTER_GAP
    """
    if effect_duration - fade_out_duration <= CENTER_GAP:
        raise InvalidTimingWindow(
            f"Effect duration ({effect_duration}s) must exceed fade out ({fade_out_duration:.2f}s) "
            f"by more than {CENTER_GAP}s"
        )


def calculate_staggered_end_time(row: int, col: int, rows: int, cols: int,
                                 base_duration: float, effect_duration: float,
                                 fade_out_duration: float, rng: Optional[random.Random] = None) -> float:
    """
    Time (seconds) at which the cell at (row, col) disappears.

    Args:
        row, col: Cell coordinate (0-indexed)
        rows, cols: Grid dimensions
        base_duration: Seconds every cell loops before the effect starts
        effect_duration: Length of the staggered removal window
        fade_out_duration: Earliest disappearance after base_duration, in seconds
        rng: Optional random source

    Returns:
        base + effect for the center cell; otherwise a uniform sample in
        [base + fade_out, base + effect - CENTER_GAP)

    Raises:
        InvalidTimingWindow: If the non-center window is empty or reversed
    """
    validate_timing_window(effect_duration, fade_out_duration)

    if is_center(row, col, rows, cols):
        return base_duration + effect_duration

    rng = rng or random
    min_end_time = base_duration + fade_out_duration
    max_end_time = base_duration + effect_duration - CENTER_GAP

    # random() is in [0, 1), so the upper bound is never reached
    return min_end_time + rng.random() * (max_end_time - min_end_time)


def calculate_image_piece_reveal_time(start_time: float, reveal_duration: float = IMAGE_REVEAL_DURATION,
                                      rng: Optional[random.Random] = None) -> float:
    """
    Random appearance time for one image piece, in [start_time, start_time + reveal_duration).

    Pieces are sampled independently; two pieces may land on the same time.
    """
    rng = rng or random
    return start_time + rng.random() * reveal_duration


def last_cell_end_time(base_duration: float, effect_duration: float, staggered: bool) -> float:
    """When the last (center) cell disappears."""
    return base_duration + effect_duration if staggered else base_duration


def image_reveal_start_time(base_duration: float, effect_duration: float, staggered: bool) -> float:
    """Image window opens IMAGE_LEAD_TIME seconds before the last cell disappears."""
    return last_cell_end_time(base_duration, effect_duration, staggered) - IMAGE_LEAD_TIME


def calculate_composition_duration(base_duration: float, effect_duration: float,
                                   staggered: bool, has_image: bool,
                                   image_reveal_duration: float = IMAGE_REVEAL_DURATION) -> float:
    """
    Total main composition length, long enough for the full image reveal.

    Args:
        base_duration: Loop duration in seconds
        effect_duration: Staggered removal window (ignored unless staggered)
        staggered: Whether the staggered reveal effect is enabled
        has_image: Whether an image overlay will be shown
        image_reveal_duration: Length of the image reveal window

    Returns:
        Duration in seconds
    """
    duration = last_cell_end_time(base_duration, effect_duration, staggered)

    if has_image:
        image_end_time = image_reveal_start_time(base_duration, effect_duration, staggered) + image_reveal_duration
        duration = max(duration, image_end_time)

    return duration


def build_reveal_schedule(grid: GridSpec, base_duration: float, effect_duration: float,
                          fade_out_duration: float,
                          rng: Optional[random.Random] = None) -> Dict[Tuple[int, int], float]:
    """
    Disappearance time for every cell of the grid.

    Returns:
        Dict mapping (row, col) -> seconds
    """
    validate_timing_window(effect_duration, fade_out_duration)

    schedule = {}
    for row in range(grid.rows):
        for col in range(grid.cols):
            schedule[(row, col)] = calculate_staggered_end_time(
                row, col, grid.rows, grid.cols,
                base_duration, effect_duration, fade_out_duration,
                rng=rng
            )

    return schedule


def build_image_reveal_schedule(size: int, start_time: float,
                                reveal_duration: float = IMAGE_REVEAL_DURATION,
                                rng: Optional[random.Random] = None) -> Dict[Tuple[int, int], float]:
    """
    Appearance time for every piece of a size×size image overlay.

    Returns:
        Dict mapping (piece_row, piece_col) -> seconds
    """
    return {
        (piece_row, piece_col): calculate_image_piece_reveal_time(start_time, reveal_duration, rng=rng)
        for piece_row in range(size)
        for piece_col in range(size)
    }
