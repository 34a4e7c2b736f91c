"""
Board module - scoring grid geometry, annotations, and overlay rendering.
"""
from .grid import (
    GRID_ROWS,
    GRID_COLS,
    POINT_VALUES,
    GridMapper,
    build_grid_area,
)
from .annotations import AnnotationEmitter
from .visualizer import OverlayRenderer

__all__ = [
    "GRID_ROWS",
    "GRID_COLS",
    "POINT_VALUES",
    "GridMapper",
    "build_grid_area",
    "AnnotationEmitter",
    "OverlayRenderer",
]
