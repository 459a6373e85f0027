"""
Workflow orchestration for mosaic building.

Provides high-level functions that coordinate grid resolution, overlay sizing
and reveal timing. Used by the CLI tools and the manifest builder.
"""

import random
from typing import Dict, Any, Optional, Tuple

from .config import (
    get_canvas_size, IMAGE_REVEAL_DURATION, MIN_IMAGE_SIZE, DEFAULT_BASE_DURATION,
    DEFAULT_EFFECT_DURATION, DEFAULT_FADE_OUT_FRAMES
)
from .grid_optimizer import (
    calculate_optimal_grid, calculate_overlay_grid_size, score_breakdown,
    format_infeasible_message
)
from .reveal_scheduler import (
    build_reveal_schedule, build_image_reveal_schedule, calculate_composition_duration,
    image_reveal_start_time, last_cell_end_time, frames_to_seconds, validate_timing_window
)


def get_layout_options(video_count: int, orientation: str, has_image: bool = False,
                       image_size: Optional[Tuple[int, int]] = None) -> Dict[str, Any]:
    """
    Resolve the grid for a video count and orientation.

    Args:
        video_count: Number of videos to place
        orientation: 'landscape' or 'portrait'
        has_image: Whether a center image was found
        image_size: Center image (width, height) if it could be read

    Returns:
        Dict containing:
        - video_count, orientation, canvas_width, canvas_height
        - grid: GridSpec
        - rows, cols, cell_width, cell_height, cell_aspect, score
        - overlay_size: 0, 3, 5 or 7
        - use_image: has_image and the grid can hold an overlay
        - image_size: as passed in
        - warnings: List of messages for the user

    Raises:
        ValueError: If there are no videos or no odd×odd grid exists
    """
    if video_count <= 0:
        raise ValueError("The selected folder contains no video files.")

    canvas_width, canvas_height = get_canvas_size(orientation)

    grid = calculate_optimal_grid(video_count, canvas_width, canvas_height)

    if grid is None:
        raise ValueError(format_infeasible_message(video_count, canvas_width, canvas_height))

    overlay_size = calculate_overlay_grid_size(grid.rows, grid.cols)
    warnings = []

    if has_image and overlay_size == 0:
        warnings.append("Grid too small for image reveal. Minimum 7x7 grid required. Image will be skipped.")

    if has_image and overlay_size > 0 and image_size and min(image_size) < MIN_IMAGE_SIZE:
        warnings.append(
            f"Image is small ({image_size[0]}x{image_size[1]}). "
            f"Recommended minimum: {MIN_IMAGE_SIZE}x{MIN_IMAGE_SIZE} pixels for best quality."
        )

    return {
        "video_count": video_count,
        "orientation": orientation,
        "canvas_width": canvas_width,
        "canvas_height": canvas_height,
        "grid": grid,
        "rows": grid.rows,
        "cols": grid.cols,
        **score_breakdown(grid.rows, grid.cols, canvas_width, canvas_height),
        "overlay_size": overlay_size,
        "use_image": has_image and overlay_size > 0,
        "image_size": image_size,
        "warnings": warnings
    }


def plan_mosaic(video_count: int, orientation: str, has_image: bool = False, staggered: bool = False,
                base_duration: float = DEFAULT_BASE_DURATION,
                effect_duration: float = DEFAULT_EFFECT_DURATION,
                fade_out_frames: int = DEFAULT_FADE_OUT_FRAMES,
                image_size: Optional[Tuple[int, int]] = None,
                rng: Optional[random.Random] = None) -> Dict[str, Any]:
    """
    Build the full layout and timing plan for a mosaic wall.

    Args:
        video_count: Number of videos to place
        orientation: 'landscape' or 'portrait'
        has_image: Whether a center image was found
        staggered: Enable the staggered reveal (cells snap out, center last)
        base_duration: Seconds every video loops
        effect_duration: Staggered removal window in seconds
        fade_out_frames: Earliest snap-out after base_duration, in frames
        image_size: Center image (width, height) if it could be read
        rng: Optional random source for reproducible schedules

    Returns:
        Layout options (see get_layout_options) plus:
        - composition_duration, last_cell_end_time
        - cell_end_times: {(row, col): seconds} or None when not staggered
        - image_start_time, image_end_time, piece_reveal_times: set only when the image is used

    Raises:
        ValueError: If the grid is infeasible or durations are not positive
        InvalidTimingWindow: If staggered and the effect window is too short
    """
    if base_duration <= 0 or effect_duration <= 0 or fade_out_frames <= 0:
        raise ValueError("Durations must be positive")

    plan = get_layout_options(video_count, orientation, has_image, image_size)
    fade_out_duration = frames_to_seconds(fade_out_frames)

    if staggered:
        validate_timing_window(effect_duration, fade_out_duration)

    use_image = plan["use_image"]

    plan.update({
        "staggered": staggered,
        "base_duration": base_duration,
        "effect_duration": effect_duration,
        "fade_out_frames": fade_out_frames,
        "fade_out_duration": fade_out_duration,
        "last_cell_end_time": last_cell_end_time(base_duration, effect_duration, staggered),
        "composition_duration": calculate_composition_duration(
            base_duration, effect_duration, staggered, use_image
        ),
        "cell_end_times": None,
        "image_start_time": None,
        "image_end_time": None,
        "piece_reveal_times": None
    })

    if staggered:
        plan["cell_end_times"] = build_reveal_schedule(
            plan["grid"], base_duration, effect_duration, fade_out_duration, rng=rng
        )

    if use_image:
        start_time = image_reveal_start_time(base_duration, effect_duration, staggered)
        plan["image_start_time"] = start_time
        plan["image_end_time"] = start_time + IMAGE_REVEAL_DURATION
        plan["piece_reveal_times"] = build_image_reveal_schedule(
            plan["overlay_size"], start_time, IMAGE_REVEAL_DURATION, rng=rng
        )

    return plan
