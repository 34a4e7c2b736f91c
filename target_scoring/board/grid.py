"""
Scoring grid geometry and cell mapping.
"""
import math
from typing import List, Optional, Tuple
import logging

from target_scoring.core import Target, GridArea

logger = logging.getLogger(__name__)

GRID_ROWS = 3
GRID_COLS = 3

# Row-major point table: top row scores lowest, bottom-right highest
POINT_VALUES: Tuple[Tuple[int, ...], ...] = (
    (1, 2, 3),
    (4, 5, 6),
    (7, 8, 9),
)

# Half-extent of the grid square in target radii
DEFAULT_EXTENT_FACTOR = 4.0


def build_grid_area(
        target: Target,
        extent_factor: float = DEFAULT_EXTENT_FACTOR
) -> GridArea:
    """
    Derive the scoring square around a target.

    The square is deliberately larger than the visible disc so that
    near-miss impacts still land inside the grid.

    Args:
        target: Located target (radius >= 0)
        extent_factor: Half-extent in multiples of the radius

    Returns:
        GridArea centred on the target, side = 2 * extent_factor * radius
    """
    half_extent = target.radius * extent_factor
    return GridArea(
        min_x=target.center_x - half_extent,
        max_x=target.center_x + half_extent,
        min_y=target.center_y - half_extent,
        max_y=target.center_y + half_extent,
    )


class GridMapper:
    """
    Maps pixel coordinates to grid cells and point values.
    """

    def __init__(self, area: GridArea):
        """
        Args:
            area: Scoring square for the current frame
        """
        self.area = area

    def pixel_to_cell(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        """
        Convert pixel coordinates to a grid cell.

        Args:
            x: X coordinate in pixels
            y: Y coordinate in pixels

        Returns:
            (row, col), or None when the point is outside the grid
        """
        if self.area.width <= 0 or self.area.height <= 0:
            return None

        col = math.floor((x - self.area.min_x) / self.area.width * GRID_COLS)
        row = math.floor((y - self.area.min_y) / self.area.height * GRID_ROWS)

        if 0 <= col < GRID_COLS and 0 <= row < GRID_ROWS:
            return row, col
        return None

    @staticmethod
    def cell_points(row: int, col: int) -> int:
        """Point value of a cell."""
        return POINT_VALUES[row][col]

    def is_valid_hit(self, x: float, y: float) -> bool:
        """Check if coordinates fall inside the 3x3 grid."""
        return self.pixel_to_cell(x, y) is not None

    def get_grid_lines(self) -> List[Tuple[float, float, float, float]]:
        """
        Interior grid lines as (x1, y1, x2, y2).

        Vertical and horizontal lines alternate, left/top first.
        """
        lines = []
        for i in range(1, GRID_COLS):
            x = self.area.min_x + i * self.area.cell_width
            y = self.area.min_y + i * self.area.cell_height
            lines.append((x, self.area.min_y, x, self.area.max_y))
            lines.append((self.area.min_x, y, self.area.max_x, y))
        return lines

    def get_cell_centers(self) -> List[Tuple[int, int, float, float]]:
        """
        Cell centres in row-major order.

        Returns:
            List of (row, col, x, y) tuples
        """
        centers = []
        for row in range(GRID_ROWS):
            for col in range(GRID_COLS):
                x = self.area.min_x + (col + 0.5) * self.area.cell_width
                y = self.area.min_y + (row + 0.5) * self.area.cell_height
                centers.append((row, col, x, y))
        return centers
