#!/usr/bin/env python3
"""
Interactive mosaic wall builder CLI.

Scans a folder of videos (plus an optional center image), resolves the odd×odd
grid, shows a layout preview and writes the build manifest.

Usage:
    ./tools/build_mosaic.py ~/footage/summer                 # Last used orientation
    ./tools/build_mosaic.py ~/footage/summer --portrait --staggered
    ./tools/build_mosaic.py ~/footage/summer --staggered --effect-duration 12 --seed 42 --yes
"""

import sys
import argparse
import logging
from pathlib import Path

from dotenv import load_dotenv

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

# Load .env before config reads MOSAICWALL_DATA_DIR
load_dotenv()

from mosaicwall import config
from mosaicwall.build_logger import BuildLogger
from mosaicwall.grid_optimizer import format_layout_description
from mosaicwall.mosaic_generator import get_media_items, get_image_size, build_mosaic
from mosaicwall.settings import SettingsStore
from mosaicwall.workflow import get_layout_options


SETTINGS_SECTION = "MosaicWall"
ORIENTATION_KEY = "Orientation"

# Setup logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Plan a mosaic wall from a folder of videos")
    parser.add_argument("source_dir", type=Path, help="Folder containing the videos")

    orientation = parser.add_mutually_exclusive_group()
    orientation.add_argument("--landscape", dest="orientation", action="store_const", const="landscape",
                             help="3840x2160 output")
    orientation.add_argument("--portrait", dest="orientation", action="store_const", const="portrait",
                             help="2160x3840 output")

    parser.add_argument("--staggered", action="store_true",
                        help="Videos snap out randomly after the loop, center last")
    parser.add_argument("--base-duration", type=float, default=config.DEFAULT_BASE_DURATION,
                        help="Loop duration in seconds (default: %(default)s)")
    parser.add_argument("--effect-duration", type=float, default=config.DEFAULT_EFFECT_DURATION,
                        help="Staggered removal window in seconds (default: %(default)s)")
    parser.add_argument("--fade-out-frames", type=int, default=config.DEFAULT_FADE_OUT_FRAMES,
                        help="Earliest snap-out after the loop, in frames (default: %(default)s)")
    parser.add_argument("--seed", type=int, help="Random seed for a reproducible reveal")
    parser.add_argument("--output-dir", type=Path,
                        help="Project directory (default: $MOSAICWALL_DATA_DIR/<folder name>)")
    parser.add_argument("--yes", "-y", action="store_true", help="Skip the confirmation prompt")
    return parser.parse_args(argv)


def print_layout_preview(options: dict, image: Path = None):
    """Print grid, cell size and overlay info for confirmation."""
    print()
    print("=" * 80)
    print("LAYOUT PREVIEW")
    print("=" * 80)
    print()
    print(f"Videos: {options['video_count']}")
    print(f"Canvas: {options['canvas_width']}x{options['canvas_height']} ({options['orientation']})")
    print(format_layout_description(options))

    if image:
        size = options['overlay_size']
        if options['use_image']:
            print(f"Center image: {image.name} ({size}x{size} = {size * size} pieces)")
        for warning in options['warnings']:
            print(f"⚠️  {image.name}: {warning}")
    print()


def main(argv=None):
    """Main CLI entry point."""
    args = parse_args(argv)

    source_dir = args.source_dir.expanduser()
    if not source_dir.is_dir():
        print(f"❌ Folder not found: {source_dir}")
        sys.exit(1)

    settings = SettingsStore(config.SETTINGS_FILE)

    try:
        saved_orientation = settings.get_setting(
            SETTINGS_SECTION, ORIENTATION_KEY, config.DEFAULT_ORIENTATION
        )
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)

    orientation = args.orientation or saved_orientation

    videos, image = get_media_items(source_dir)
    image_size = get_image_size(image) if image else None

    try:
        options = get_layout_options(len(videos), orientation, has_image=image is not None,
                                     image_size=image_size)
    except ValueError as e:
        print(f"❌ {e}")
        sys.exit(1)

    print_layout_preview(options, image)

    if not args.yes:
        confirm = input("Proceed? (y/n): ").strip().lower()
        if confirm != 'y':
            print("Cancelled.")
            sys.exit(0)

    output_dir = args.output_dir or config.get_project_dir(source_dir.name)
    with BuildLogger(output_dir, logger) as build_log:
        try:
            build_dir = build_mosaic(
                source_dir, output_dir, orientation,
                staggered=args.staggered,
                base_duration=args.base_duration,
                effect_duration=args.effect_duration,
                fade_out_frames=args.fade_out_frames,
                seed=args.seed,
                logger=build_log
            )
        except ValueError as e:
            build_log.error(str(e))
            print(f"❌ {e}")
            sys.exit(1)

        build_log.info(f"Built {build_dir.name} ({orientation}, {options['cols']}x{options['rows']})")

    # Remember orientation for next run
    settings.save_setting(SETTINGS_SECTION, ORIENTATION_KEY, orientation)

    print()
    print("=" * 80)
    print("✅ BUILD COMPLETE")
    print("=" * 80)
    print()
    print(f"Build directory: {build_dir}")
    print(f"  manifest.json: {build_dir / 'manifest.json'}")
    print()


if __name__ == "__main__":
    main()
