"""
Grid layout optimizer for mosaic walls.

Finds odd×odd factorizations of a video count and picks the one whose cells
come closest to square on the target canvas. Odd dimensions guarantee a single
center cell, which the reveal effect depends on.
"""

from dataclasses import dataclass
from typing import List, Dict, Any, Tuple, Optional

# Score weights (tune here - single source of truth)
SQUARENESS_WEIGHT = 0.7    # How close cell width/height is to 1:1
BALANCE_WEIGHT = 0.3       # How close the grid itself is to rows == cols

NEAREST_SEARCH_WINDOW = 200  # Upward search for a feasible count stops here

# Overlay sizes with (min grid dimension, min total cells), largest first
OVERLAY_THRESHOLDS = [
    (7, 11, 121),
    (5, 9, 81),
    (3, 7, 49),
]


@dataclass(frozen=True)
class GridSpec:
    """Chosen grid layout. Center coordinates are always derived from rows/cols."""

    rows: int
    cols: int

    @property
    def center_row(self) -> int:
        return self.rows // 2

    @property
    def center_col(self) -> int:
        return self.cols // 2

    @property
    def cell_count(self) -> int:
        return self.rows * self.cols

    def cell_size(self, canvas_width: float, canvas_height: float) -> Tuple[float, float]:
        """Cell width and height (unrounded) when the grid fills the canvas."""
        return canvas_width / self.cols, canvas_height / self.rows

    def overlay_bounds(self, size: int) -> Tuple[int, int]:
        """
        Top-left grid coordinate of a size×size overlay centered on the grid.

        Args:
            size: Overlay dimension (odd)

        Returns:
            (start_row, start_col)
        """
        half = size // 2
        return self.center_row - half, self.center_col - half


def find_odd_factor_pairs(n: int) -> List[Tuple[int, int]]:
    """
    Find every (rows, cols) pair with rows * cols == n and both odd.

    Both orientations are kept: (7, 11) and (11, 7) place the grid differently
    on the canvas.

    Returns:
        List of (rows, cols), ascending by rows. Empty for even or non-positive n.
    """
    pairs = []

    if n <= 0:
        return pairs

    for rows in range(1, n + 1, 2):
        if n % rows == 0:
            cols = n // rows
            if cols % 2 == 1:
                pairs.append((rows, cols))

    return pairs


def score_breakdown(rows: int, cols: int, canvas_width: float, canvas_height: float) -> Dict[str, float]:
    """
    Score a grid and return the individual components.

    Squareness is 1.0 for perfectly square cells and falls off linearly with
    aspect deviation (it can go negative). Balance is min/max of the grid
    dimensions.
    """
    cell_width, cell_height = GridSpec(rows, cols).cell_size(canvas_width, canvas_height)
    aspect = cell_width / cell_height

    squareness = 1.0 - abs(1.0 - aspect)
    balance = min(rows, cols) / max(rows, cols)

    return {
        'cell_width': cell_width,
        'cell_height': cell_height,
        'cell_aspect': aspect,
        'squareness': squareness,
        'balance': balance,
        'score': squareness * SQUARENESS_WEIGHT + balance * BALANCE_WEIGHT,
    }


def score_grid(rows: int, cols: int, canvas_width: float, canvas_height: float) -> float:
    """Combined score: 70% squareness, 30% balance. Higher is better."""
    return score_breakdown(rows, cols, canvas_width, canvas_height)['score']


def calculate_optimal_grid(item_count: int, canvas_width: float, canvas_height: float) -> Optional[GridSpec]:
    """
    Pick the best odd×odd grid for item_count on the given canvas.

    Candidates are compared with a strict >, so the first one seen wins a tie.

    Returns:
        GridSpec, or None if no odd×odd grid exists (e.g. any even count)
    """
    if canvas_width <= 0 or canvas_height <= 0:
        raise ValueError(f"Canvas must be positive, got {canvas_width}x{canvas_height}")

    candidates = find_odd_factor_pairs(item_count)

    if not candidates:
        return None

    best = None
    best_score = None

    for rows, cols in candidates:
        score = score_grid(rows, cols, canvas_width, canvas_height)
        if best_score is None or score > best_score:
            best_score = score
            best = GridSpec(rows=rows, cols=cols)

    return best


def find_nearest_feasible_counts(item_count: int) -> Dict[str, Optional[int]]:
    """
    Find the closest counts below and above item_count that have an odd×odd grid.

    The downward scan always finds 1 at worst (for item_count > 1). The upward
    scan is limited to NEAREST_SEARCH_WINDOW counts.

    Returns:
        Dict with 'below' and 'above', each an int or None
    """
    result = {'below': None, 'above': None}

    for count in range(item_count - 1, 0, -1):
        if find_odd_factor_pairs(count):
            result['below'] = count
            break

    for count in range(item_count + 1, item_count + NEAREST_SEARCH_WINDOW):
        if find_odd_factor_pairs(count):
            result['above'] = count
            break

    return result


def calculate_overlay_grid_size(rows: int, cols: int) -> int:
    """
    Largest odd image-overlay size that fits centered inside the grid with margin.

    Returns:
        7, 5 or 3, or 0 when the grid is too small for an image overlay
    """
    total_cells = rows * cols
    min_dim = min(rows, cols)

    for size, required_dim, required_cells in OVERLAY_THRESHOLDS:
        if min_dim >= required_dim and total_cells >= required_cells:
            return size

    return 0


def rank_layouts(item_count: int, canvas_width: float, canvas_height: float) -> List[Dict[str, Any]]:
    """
    Score every odd×odd candidate for item_count, best first.

    Ties keep enumeration order (sort is stable), matching calculate_optimal_grid.
    """
    layouts = []

    for rows, cols in find_odd_factor_pairs(item_count):
        grid = GridSpec(rows, cols)
        layouts.append({
            'rows': rows,
            'cols': cols,
            'cell_count': grid.cell_count,
            'overlay_size': calculate_overlay_grid_size(rows, cols),
            **score_breakdown(rows, cols, canvas_width, canvas_height)
        })

    layouts.sort(key=lambda layout: layout['score'], reverse=True)
    return layouts


def format_layout_description(layout: Dict[str, Any]) -> str:
    """
    Format a human-readable description of a layout.

    Args:
        layout: Layout dict with rows, cols, cell_width, cell_height and
                optionally cell_aspect, overlay_size, score

    Returns:
        Multi-line string describing the layout
    """
    lines = []
    lines.append(f"{layout['cols']}×{layout['rows']} grid ({layout['rows'] * layout['cols']} cells, "
                 f"{round(layout['cell_width'])}×{round(layout['cell_height'])}px cells)")

    if 'cell_aspect' in layout:
        lines.append(f"  Cell aspect ratio: {layout['cell_aspect']:.2f}:1")

    if layout.get('overlay_size'):
        size = layout['overlay_size']
        lines.append(f"  Image overlay: {size}×{size} ({size * size} pieces)")

    if 'score' in layout:
        lines.append(f"  Score: {layout['score']:.3f}")

    return "\n".join(lines)


def format_infeasible_message(item_count: int, canvas_width: float, canvas_height: float) -> str:
    """
    Explain why item_count has no odd×odd grid and suggest how many videos to remove or add.
    """
    nearest = find_nearest_feasible_counts(item_count)
    lines = [
        f"Cannot create grid with {item_count} videos.",
        "",
        "Requires odd x odd grid for center alignment.",
        "",
        "Suggestions:",
    ]

    for key, verb in (('below', 'Remove'), ('above', 'Add')):
        count = nearest[key]
        if count is None:
            continue

        delta = abs(item_count - count)
        line = f"- {verb} {delta} video{'s' if delta > 1 else ''} (use {count} total)"

        grid = calculate_optimal_grid(count, canvas_width, canvas_height)
        if grid:
            line += f" → {grid.cols}x{grid.rows} grid"

        lines.append(line)

    return "\n".join(lines)
