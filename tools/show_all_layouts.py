#!/usr/bin/env python3
"""
Show all odd×odd layout options for a given number of videos with score breakdown.

Usage:
    ./tools/show_all_layouts.py 77
    ./tools/show_all_layouts.py 225 --portrait
"""

import sys
import argparse
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from mosaicwall.config import get_canvas_size
from mosaicwall.grid_optimizer import rank_layouts, format_infeasible_message


def main():
    parser = argparse.ArgumentParser(description="Show all odd×odd layouts for a video count")
    parser.add_argument("n_videos", type=int)
    parser.add_argument("--portrait", action="store_true", help="Score for 2160x3840 instead of 3840x2160")
    args = parser.parse_args()

    orientation = "portrait" if args.portrait else "landscape"
    width, height = get_canvas_size(orientation)

    print(f"\n{'='*80}")
    print(f"ALL LAYOUT OPTIONS FOR {args.n_videos} VIDEOS ({width}x{height})")
    print(f"{'='*80}\n")

    all_layouts = rank_layouts(args.n_videos, width, height)

    if not all_layouts:
        print(format_infeasible_message(args.n_videos, width, height))
        sys.exit(1)

    for i, layout in enumerate(all_layouts, 1):
        print(f"Option {i}:")
        print(f"  Grid: {layout['cols']}×{layout['rows']} ({layout['cell_count']} cells)")
        print(f"  Cell: {layout['cell_width']:.0f}×{layout['cell_height']:.0f}px "
              f"(aspect {layout['cell_aspect']:.2f}:1)")

        if layout['overlay_size']:
            print(f"  Image overlay: {layout['overlay_size']}×{layout['overlay_size']}")
        else:
            print(f"  Image overlay: not supported")

        # Score breakdown
        print(f"  Score breakdown:")
        print(f"    Squareness: {layout['squareness']:.3f}")
        print(f"    Balance:    {layout['balance']:.3f}")
        print(f"    Total:      {layout['score']:.3f}")
        print()

    print(f"\nTotal layouts evaluated: {len(all_layouts)}")


if __name__ == "__main__":
    main()
