"""
Environment configuration for mosaicwall.

Provides environment-aware paths plus the fixed timing and canvas constants
shared by the planner, the manifest writer and the CLI tools.
"""
import os
from pathlib import Path
from typing import Tuple


# Single source of truth for data directory
# Dev: /tmp/mosaicwall-local (default)
# Override with MOSAICWALL_DATA_DIR (tools load it from .env via python-dotenv)
DATA_DIR = Path(os.getenv('MOSAICWALL_DATA_DIR', '/tmp/mosaicwall-local'))

# Persisted user preferences (last orientation)
SETTINGS_FILE = Path(os.getenv('MOSAICWALL_SETTINGS_FILE', str(DATA_DIR / 'settings.json')))

FRAME_RATE = 30
IMAGE_REVEAL_DURATION = 3   # seconds the image pieces take to snap in
IMAGE_LEAD_TIME = 3         # image window opens this long before the last cell disappears
CENTER_GAP = 0.5            # other cells finish at least this long before the center
SNAP_OUT_LEAD = 0.01        # opacity holds at 100 until this long before a cell's end time

DEFAULT_ORIENTATION = 'landscape'
DEFAULT_BASE_DURATION = 60      # seconds
DEFAULT_EFFECT_DURATION = 10    # seconds
DEFAULT_FADE_OUT_FRAMES = 30    # frames

CANVAS_SIZES = {
    'landscape': (3840, 2160),
    'portrait': (2160, 3840),
}

IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png', '.gif', '.bmp', '.tif', '.tiff'}
CENTER_IMAGE_EXTENSIONS = {'.jpg', '.jpeg', '.png'}

MIN_IMAGE_SIZE = 500           # center image edge below this gets a quality warning
FFPROBE_TIMEOUT = 10           # seconds to wait on ffprobe per video


def get_canvas_size(orientation: str) -> Tuple[int, int]:
    """
    Get main composition size for an orientation.

    Args:
        orientation: 'landscape' or 'portrait'

    Returns:
        (width, height) in pixels

    Raises:
        ValueError: If orientation is unknown
    """
    if orientation not in CANVAS_SIZES:
        raise ValueError(f"Unknown orientation: {orientation} (expected one of {', '.join(CANVAS_SIZES)})")
    return CANVAS_SIZES[orientation]


def get_project_dir(project: str) -> Path:
    """
    Get project directory path.

    Args:
        project: Project name (usually the source folder name)

    Returns:
        Path to project directory (e.g., /tmp/mosaicwall-local/summer_reel)
    """
    return DATA_DIR / project
