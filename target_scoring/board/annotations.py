"""
Annotation primitives for the scoring overlay.
"""
from typing import List, Optional, Tuple, Union
import numpy as np
from numpy.typing import NDArray

from target_scoring.core import (
    Target,
    GridArea,
    HitEvent,
    LinePrimitive,
    CirclePrimitive,
    TextPrimitive,
)
from .grid import GridMapper

Primitive = Union[LinePrimitive, CirclePrimitive, TextPrimitive]


class AnnotationEmitter:
    """
    Describes the scoring overlay as an ordered list of drawing primitives.

    Emission order is drawing order: grid, cell labels, target centre,
    motion pixels, hit marker. Nothing here touches scoring.
    """

    CENTER_DOT_RADIUS = 5
    MOTION_DOT_RADIUS = 2
    HIT_RING_RADIUS = 15

    # Label placement relative to anchor points
    CELL_LABEL_OFFSET = (-10, 10)
    HIT_LABEL_OFFSET = (20, 0)

    def emit(
            self,
            target: Optional[Target],
            grid_area: Optional[GridArea],
            motion_pixels: NDArray[np.int32],
            hit: Optional[HitEvent] = None,
            debug: bool = True
    ) -> Tuple[Primitive, ...]:
        """
        Build the overlay for one frame.

        Grid lines and the hit marker are always part of the overlay.
        Cell labels, target centre and motion dots are debug-only, and in
        debug mode the hit marker switches to the "hit_debug" color.

        Args:
            target: Located target (None = nothing to draw)
            grid_area: Grid derived from the target
            motion_pixels: (N, 2) array of motion coordinates
            hit: Accepted hit for this frame, if any
            debug: Include diagnostic primitives

        Returns:
            Immutable tuple of primitives
        """
        if target is None or grid_area is None:
            return ()

        mapper = GridMapper(grid_area)
        primitives = []

        for x1, y1, x2, y2 in mapper.get_grid_lines():
            primitives.append(LinePrimitive(x1, y1, x2, y2, "grid"))

        if debug:
            primitives.extend(self._debug_primitives(mapper, target, motion_pixels))

        if hit is not None:
            color = "hit_debug" if debug else "hit"
            primitives.append(CirclePrimitive(
                hit.x, hit.y, self.HIT_RING_RADIUS, color, filled=False
            ))
            dx, dy = self.HIT_LABEL_OFFSET
            primitives.append(TextPrimitive(
                hit.x + dx, hit.y + dy, f"+{hit.points}", color
            ))

        return tuple(primitives)

    def _debug_primitives(
            self,
            mapper: GridMapper,
            target: Target,
            motion_pixels: NDArray[np.int32]
    ) -> List[Primitive]:
        primitives = []

        dx, dy = self.CELL_LABEL_OFFSET
        for row, col, x, y in mapper.get_cell_centers():
            primitives.append(TextPrimitive(
                x + dx, y + dy, str(mapper.cell_points(row, col)), "cell_label"
            ))

        primitives.append(CirclePrimitive(
            target.center_x, target.center_y,
            self.CENTER_DOT_RADIUS, "target_center", filled=True
        ))

        for x, y in motion_pixels:
            primitives.append(CirclePrimitive(
                float(x), float(y), self.MOTION_DOT_RADIUS, "motion", filled=True
            ))

        return primitives
