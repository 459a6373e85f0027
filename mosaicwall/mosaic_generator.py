"""
Mosaic generation module.

Handles media scanning, placement math and manifest creation. The manifest
describes every composition, layer and keyframe an editing host needs to
assemble the wall; nothing here decodes or renders video.

Configuration:
- Set MOSAICWALL_DATA_DIR environment variable for data location
- Dev: defaults to /tmp/mosaicwall-local
"""

import json
import random
import subprocess
from pathlib import Path
from typing import List, Dict, Any, Optional, Tuple
from datetime import datetime, timezone

from PIL import Image

from .config import (
    FRAME_RATE, IMAGE_EXTENSIONS, CENTER_IMAGE_EXTENSIONS, SNAP_OUT_LEAD,
    FFPROBE_TIMEOUT,
    DEFAULT_BASE_DURATION, DEFAULT_EFFECT_DURATION, DEFAULT_FADE_OUT_FRAMES
)
from .workflow import plan_mosaic


def get_media_items(source_dir: Path) -> Tuple[List[Path], Optional[Path]]:
    """
    Split a folder into video files and an optional center image.

    Anything that is not an image extension counts as video. Hidden files and
    subdirectories are ignored.

    Args:
        source_dir: Folder to scan

    Returns:
        (videos sorted by name, first jpg/jpeg/png by name or None)
    """
    files = sorted(
        (p for p in source_dir.iterdir() if p.is_file() and not p.name.startswith('.')),
        key=lambda p: p.name.lower()
    )

    videos = [p for p in files if p.suffix.lower() not in IMAGE_EXTENSIONS]
    images = [p for p in files if p.suffix.lower() in CENTER_IMAGE_EXTENSIONS]

    return videos, (images[0] if images else None)


def get_video_resolution(video_path: Path) -> Optional[Tuple[int, int]]:
    """
    Read a video's frame size with ffprobe.

    Args:
        video_path: Path to video file

    Returns:
        (width, height), or None if ffprobe is missing or can't read the file
    """
    try:
        result = subprocess.run(
            [
                "ffprobe", "-v", "error",
                "-select_streams", "v:0",
                "-show_entries", "stream=width,height",
                "-of", "csv=p=0:s=x",
                str(video_path)
            ],
            capture_output=True,
            text=True,
            timeout=FFPROBE_TIMEOUT
        )

    except (subprocess.TimeoutExpired, FileNotFoundError):
        return None

    dims = result.stdout.strip().split('x')

    if result.returncode != 0 or len(dims) != 2 or not all(d.isdigit() and int(d) > 0 for d in dims):
        return None

    return int(dims[0]), int(dims[1])


def get_image_size(image_path: Path) -> Optional[Tuple[int, int]]:
    """
    Read the center image's pixel size from its header.

    Returns:
        (width, height), or None if Pillow can't identify the file
    """
    try:
        with Image.open(image_path) as image:
            return image.size
    except OSError:
        return None


def scale_to_fill(layer_width: float, layer_height: float,
                  target_width: float, target_height: float) -> float:
    """
    Uniform scale (percent) so a layer covers the target completely.

    Raises:
        ValueError: If any dimension is zero
    """
    if layer_width == 0 or layer_height == 0 or target_width == 0 or target_height == 0:
        raise ValueError(
            f"Cannot scale layer: Invalid dimensions. Layer: {layer_width}x{layer_height}, "
            f"Target: {target_width}x{target_height}"
        )

    # max() covers; min() would letterbox
    return max(target_width / layer_width, target_height / layer_height) * 100


def cell_position(row: int, col: int, cell_width: float, cell_height: float) -> Tuple[float, float]:
    """Center of grid cell (row, col) in main composition pixels."""
    return (col + 0.5) * cell_width, (row + 0.5) * cell_height


def image_piece_offset(piece_row: int, piece_col: int, size: int,
                       cell_width: float, cell_height: float) -> Tuple[float, float]:
    """
    Where the full scaled image sits inside one piece window.

    The image covers size×size cells; each piece comp is one cell, so the
    image is shifted opposite to the piece's offset from the overlay center.
    """
    center_index = size // 2
    col_offset = piece_col - center_index
    row_offset = piece_row - center_index

    return (round(cell_width) / 2 - col_offset * cell_width,
            round(cell_height) / 2 - row_offset * cell_height)


def _cell_layers(plan: Dict[str, Any], videos: List[Path]) -> List[Dict[str, Any]]:
    cell_width = plan['cell_width']
    cell_height = plan['cell_height']
    duration = plan['composition_duration']
    cell_end_times = plan['cell_end_times']

    cells = []
    video_index = 0

    for row in range(plan['rows']):
        for col in range(plan['cols']):
            if video_index >= len(videos):
                break

            video = videos[video_index]
            source_size = get_video_resolution(video)

            cell = {
                "name": f"Cell_R{row + 1}C{col + 1}_{video.name}",
                "source": str(video),
                "row": row,
                "col": col,
                "width": round(cell_width),
                "height": round(cell_height),
                "position": list(cell_position(row, col, cell_width, cell_height)),
                "source_size": list(source_size) if source_size else None,
                "fill_size": [cell_width, cell_height],
                "scale": scale_to_fill(*source_size, cell_width, cell_height) if source_size else None,
                "time_remap_expression": "loopOut('cycle');",
                "in_point": 0,
                "out_point": duration,
                "opacity_keyframes": []
            }

            if cell_end_times is not None:
                end_time = cell_end_times[(row, col)]
                cell["out_point"] = end_time
                cell["opacity_keyframes"] = [
                    {"time": end_time - SNAP_OUT_LEAD, "value": 100},
                    {"time": end_time, "value": 0}
                ]

            cells.append(cell)
            video_index += 1

    return cells


def _image_piece_layers(plan: Dict[str, Any], image: Path) -> List[Dict[str, Any]]:
    size = plan['overlay_size']
    cell_width = plan['cell_width']
    cell_height = plan['cell_height']
    start_row, start_col = plan['grid'].overlay_bounds(size)
    start_time = plan['image_start_time']
    fill_width = cell_width * size
    fill_height = cell_height * size
    image_size = plan['image_size']
    image_scale = scale_to_fill(*image_size, fill_width, fill_height) if image_size else None

    pieces = []

    for (piece_row, piece_col), reveal_time in sorted(plan['piece_reveal_times'].items()):
        grid_row = start_row + piece_row
        grid_col = start_col + piece_col

        pieces.append({
            "name": f"ImagePiece_R{piece_row + 1}C{piece_col + 1}",
            "source": str(image),
            "piece_row": piece_row,
            "piece_col": piece_col,
            "width": round(cell_width),
            "height": round(cell_height),
            "position": list(cell_position(grid_row, grid_col, cell_width, cell_height)),
            "image_fill_size": [fill_width, fill_height],
            "image_scale": image_scale,
            "image_position": list(image_piece_offset(piece_row, piece_col, size, cell_width, cell_height)),
            "start_time": start_time,
            "reveal_time": reveal_time,
            # First keyframe is HOLD: the piece snaps in rather than fading
            "opacity_keyframes": [
                {"time": start_time, "value": 0, "interpolation": "hold"},
                {"time": reveal_time, "value": 100}
            ]
        })

    return pieces


def create_manifest(build_dir: Path, plan: Dict[str, Any], videos: List[Path],
                    image: Optional[Path] = None, seed: Optional[int] = None) -> Dict[str, Any]:
    """
    Create manifest.json for the mosaic build.

    Args:
        build_dir: Build directory path
        plan: Plan dict from workflow.plan_mosaic()
        videos: Video files, placed row by row
        image: Center image, used only when plan['use_image'] is set
        seed: Random seed used for the schedule, recorded for reproduction

    Returns:
        Manifest dict
    """
    use_image = plan['use_image'] and image is not None

    manifest = {
        "created_at": int(datetime.now().timestamp()),
        "seed": seed,
        "main_composition": {
            "width": plan['canvas_width'],
            "height": plan['canvas_height'],
            "frame_rate": FRAME_RATE,
            "duration": plan['composition_duration']
        },
        "layout": {
            "orientation": plan['orientation'],
            "rows": plan['rows'],
            "cols": plan['cols'],
            "center_row": plan['grid'].center_row,
            "center_col": plan['grid'].center_col,
            "cell_width": plan['cell_width'],
            "cell_height": plan['cell_height'],
            "score": plan['score'],
            "overlay_size": plan['overlay_size'] if use_image else 0
        },
        "timing": {
            "staggered": plan['staggered'],
            "base_duration": plan['base_duration'],
            "effect_duration": plan['effect_duration'],
            "fade_out_frames": plan['fade_out_frames'],
            "last_cell_end_time": plan['last_cell_end_time'],
            "image_start_time": plan['image_start_time'] if use_image else None,
            "image_end_time": plan['image_end_time'] if use_image else None
        },
        "video_count": len(videos),
        "image": str(image) if use_image else None,
        "image_size": list(plan['image_size']) if use_image and plan['image_size'] else None,
        "cells": _cell_layers(plan, videos),
        "image_pieces": _image_piece_layers(plan, image) if use_image else [],
        "warnings": plan['warnings']
    }

    manifest_path = build_dir / "manifest.json"
    with open(manifest_path, 'w') as f:
        json.dump(manifest, f, indent=2)

    return manifest


def build_mosaic(source_dir: Path, output_dir: Path, orientation: str, staggered: bool = False,
                 base_duration: float = DEFAULT_BASE_DURATION,
                 effect_duration: float = DEFAULT_EFFECT_DURATION,
                 fade_out_frames: int = DEFAULT_FADE_OUT_FRAMES,
                 seed: Optional[int] = None, build_id: Optional[str] = None, logger=None) -> Path:
    """
    Plan a mosaic wall for every video in source_dir and write its manifest.

    Args:
        source_dir: Folder of video files (plus an optional center image)
        output_dir: Project directory; builds go to output_dir/builds/<build_id>
        orientation: 'landscape' or 'portrait'
        staggered: Enable the staggered reveal effect
        base_duration: Loop duration in seconds
        effect_duration: Staggered removal window in seconds
        fade_out_frames: Earliest snap-out after base_duration, in frames
        seed: Optional random seed (recorded in the manifest)
        build_id: Optional build ID (default: timestamp + grid)
        logger: Optional logger

    Returns:
        Path to build directory

    Raises:
        ValueError: If no grid exists for the video count or timings are invalid
    """
    videos, image = get_media_items(source_dir)

    if logger:
        logger.info(f"Found {len(videos)} videos in {source_dir}" +
                    (f" (center image: {image.name})" if image else ""))

    image_size = get_image_size(image) if image else None

    rng = random.Random(seed) if seed is not None else None

    plan = plan_mosaic(
        len(videos), orientation, has_image=image is not None, staggered=staggered,
        base_duration=base_duration, effect_duration=effect_duration,
        fade_out_frames=fade_out_frames, image_size=image_size, rng=rng
    )

    if logger:
        logger.info(f"Grid: {plan['cols']}×{plan['rows']}, "
                    f"cells {round(plan['cell_width'])}×{round(plan['cell_height'])}px, "
                    f"duration {plan['composition_duration']:.2f}s")
        for warning in plan['warnings']:
            logger.warning(warning)

    if not build_id:
        timestamp = datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')
        build_id = f"{timestamp},{len(videos)}={plan['cols']}x{plan['rows']}"

    build_dir = output_dir / "builds" / build_id
    build_dir.mkdir(parents=True, exist_ok=True)

    if logger:
        logger.info("Writing manifest.json")

    create_manifest(build_dir, plan, videos, image, seed=seed)

    if logger:
        logger.info(f"✅ Mosaic planned: {build_dir}")

    return build_dir
