"""
Overlay rendering for emitted annotation primitives.
"""
import cv2
import numpy as np
from itertools import groupby
from typing import Iterable, Tuple
import logging

from target_scoring.core import LinePrimitive, CirclePrimitive, TextPrimitive
from .annotations import Primitive

logger = logging.getLogger(__name__)


class OverlayRenderer:
    """
    Draws annotation primitives onto BGR images with OpenCV.

    Primitives are drawn in the order given, later ones over earlier ones.
    Color tokens without an entry in COLORS fall back to white.
    """

    # Color scheme (BGR)
    COLORS = {
        "grid": (0, 255, 255),  # Yellow
        "cell_label": (0, 255, 255),  # Yellow
        "target_center": (255, 0, 0),  # Blue
        "motion": (0, 0, 255),  # Red, blended
        "hit": (0, 255, 255),  # Yellow
        "hit_debug": (0, 255, 0),  # Green
        "text": (255, 255, 255),  # White
    }

    # Tokens drawn semi-transparently
    TRANSLUCENT = {"motion"}

    def __init__(
            self,
            opacity: float = 0.3,
            line_thickness: int = 2,
            font_scale: float = 0.8
    ):
        """
        Args:
            opacity: Opacity of translucent primitives (0.0-1.0)
            line_thickness: Stroke width for lines and rings
            font_scale: Text scale for labels
        """
        self.opacity = max(0.0, min(1.0, opacity))
        self.line_thickness = line_thickness
        self.font_scale = font_scale

    def render(
            self,
            image: np.ndarray,
            primitives: Iterable[Primitive]
    ) -> np.ndarray:
        """
        Draw primitives onto a copy of the image.

        Args:
            image: Input BGR image (not modified)
            primitives: Ordered primitives from AnnotationEmitter

        Returns:
            Annotated image
        """
        result = image.copy()

        # Consecutive translucent primitives share one blended layer
        for translucent, group in groupby(
                primitives, key=lambda p: p.color in self.TRANSLUCENT):
            if translucent:
                layer = result.copy()
                for primitive in group:
                    self._draw(layer, primitive)
                result = cv2.addWeighted(
                    layer, self.opacity, result, 1 - self.opacity, 0
                )
            else:
                for primitive in group:
                    self._draw(result, primitive)

        return result

    def _draw(self, image: np.ndarray, primitive: Primitive) -> None:
        color = self.COLORS.get(primitive.color, self.COLORS["text"])

        if isinstance(primitive, LinePrimitive):
            cv2.line(
                image,
                (int(primitive.x1), int(primitive.y1)),
                (int(primitive.x2), int(primitive.y2)),
                color,
                self.line_thickness
            )
        elif isinstance(primitive, CirclePrimitive):
            cv2.circle(
                image,
                (int(primitive.x), int(primitive.y)),
                max(1, int(primitive.radius)),
                color,
                -1 if primitive.filled else self.line_thickness
            )
        elif isinstance(primitive, TextPrimitive):
            cv2.putText(
                image,
                primitive.text,
                (int(primitive.x), int(primitive.y)),
                cv2.FONT_HERSHEY_SIMPLEX,
                self.font_scale,
                color,
                2
            )
        else:
            logger.warning(f"Unknown primitive type: {type(primitive).__name__}")

    def draw_score_panel(
            self,
            image: np.ndarray,
            info_dict: dict,
            position: Tuple[int, int] = (10, 30)
    ) -> np.ndarray:
        """
        Draw HUD panel with key/value lines.

        Args:
            image: Input image
            info_dict: Dictionary with info to display
            position: Top-left position (x, y)

        Returns:
            Image with info panel
        """
        result = image.copy()
        if not info_dict:
            return result

        x, y = position
        line_height = 25

        max_text_width = max(len(f"{k}: {v}") for k, v in info_dict.items())
        cv2.rectangle(
            result,
            (x - 10, y - 20),
            (x + max_text_width * 10 + 20, y + len(info_dict) * line_height),
            (0, 0, 0),
            -1
        )

        for i, (key, value) in enumerate(info_dict.items()):
            cv2.putText(
                result,
                f"{key}: {value}",
                (x, y + i * line_height),
                cv2.FONT_HERSHEY_SIMPLEX,
                0.6,
                self.COLORS["text"],
                2
            )

        return result
