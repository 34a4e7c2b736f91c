"""
Unit tests for board module.
"""
import numpy as np
import pytest

from target_scoring.core import (
    Target, GridArea, HitEvent, LinePrimitive, CirclePrimitive, TextPrimitive
)
from target_scoring.board import (
    POINT_VALUES, GridMapper, build_grid_area, AnnotationEmitter, OverlayRenderer
)


def reference_area() -> GridArea:
    """Grid for a target at (100, 100) with radius 20."""
    return build_grid_area(Target(center_x=100.0, center_y=100.0, radius=20.0))


def test_point_values_row_major():
    """Point table is 1..9 in row-major order."""
    assert POINT_VALUES == ((1, 2, 3), (4, 5, 6), (7, 8, 9))
    assert [v for row in POINT_VALUES for v in row] == list(range(1, 10))


def test_build_grid_area_reference():
    """Half-extent is four radii around the centre."""
    area = reference_area()

    assert area.min_x == pytest.approx(20.0)
    assert area.max_x == pytest.approx(180.0)
    assert area.min_y == pytest.approx(20.0)
    assert area.max_y == pytest.approx(180.0)


@pytest.mark.parametrize("cx, cy, radius", [
    (100.0, 100.0, 20.0),
    (640.3, 360.7, 11.4),
    (5.0, 700.0, 0.5),
    (0.0, 0.0, 123.0),
])
def test_grid_area_side_and_center(cx, cy, radius):
    """Side is 8 radii and the square is centred on the target."""
    area = build_grid_area(Target(center_x=cx, center_y=cy, radius=radius))

    assert area.width == pytest.approx(8 * radius)
    assert area.height == pytest.approx(8 * radius)
    assert (area.min_x + area.max_x) / 2 == pytest.approx(cx)
    assert (area.min_y + area.max_y) / 2 == pytest.approx(cy)
    assert area.max_x > area.min_x and area.max_y > area.min_y


def test_build_grid_area_custom_extent():
    """Extent factor is configurable."""
    area = build_grid_area(Target(center_x=0.0, center_y=0.0, radius=10.0), extent_factor=2.0)

    assert area.width == pytest.approx(40.0)


def test_pixel_to_cell():
    """Test pixel to cell mapping."""
    mapper = GridMapper(reference_area())

    assert mapper.pixel_to_cell(170, 170) == (2, 2)
    assert mapper.pixel_to_cell(100, 100) == (1, 1)
    assert mapper.pixel_to_cell(20, 20) == (0, 0)
    assert mapper.pixel_to_cell(179.9, 21) == (0, 2)
    assert mapper.pixel_to_cell(21, 179.9) == (2, 0)


def test_pixel_to_cell_outside_grid():
    """Points outside the square (including the far edges) have no cell."""
    mapper = GridMapper(reference_area())

    assert mapper.pixel_to_cell(19.9, 100) is None
    assert mapper.pixel_to_cell(100, 19.9) is None
    assert mapper.pixel_to_cell(180, 100) is None
    assert mapper.pixel_to_cell(100, 180) is None
    assert mapper.pixel_to_cell(500, 500) is None
    assert not mapper.is_valid_hit(0, 0)
    assert mapper.is_valid_hit(100, 100)


def test_degenerate_grid_has_no_cells():
    """Zero-radius target produces an empty grid."""
    area = build_grid_area(Target(center_x=50.0, center_y=50.0, radius=0.0))
    mapper = GridMapper(area)

    assert area.width == 0
    assert mapper.pixel_to_cell(50, 50) is None


def test_cell_points():
    """Cell lookup uses the point table."""
    assert GridMapper.cell_points(0, 0) == 1
    assert GridMapper.cell_points(1, 1) == 5
    assert GridMapper.cell_points(2, 2) == 9
    assert GridMapper.cell_points(2, 0) == 7


def test_grid_lines():
    """Two interior lines per axis, vertical first."""
    lines = GridMapper(reference_area()).get_grid_lines()
    third = 160.0 / 3

    assert len(lines) == 4
    x1, y1, x2, y2 = lines[0]
    assert x1 == pytest.approx(20 + third) and x1 == pytest.approx(x2)
    assert (y1, y2) == pytest.approx((20.0, 180.0))

    x1, y1, x2, y2 = lines[1]
    assert y1 == pytest.approx(20 + third) and y1 == pytest.approx(y2)
    assert (x1, x2) == pytest.approx((20.0, 180.0))

    assert lines[2][0] == pytest.approx(20 + 2 * third)


def test_cell_centers():
    """Cell centres in row-major order."""
    centers = GridMapper(reference_area()).get_cell_centers()

    assert len(centers) == 9
    assert centers[0][:2] == (0, 0)
    assert centers[0][2:] == pytest.approx((20 + 80 / 3, 20 + 80 / 3))
    assert centers[4][2:] == pytest.approx((100.0, 100.0))
    assert centers[5][:2] == (1, 2)


# --- Annotations ---

def test_emitter_without_target():
    """No target, nothing to draw."""
    emitter = AnnotationEmitter()

    assert emitter.emit(None, None, np.empty((0, 2), dtype=np.int32)) == ()


def test_emitter_order_and_content():
    """Grid, labels, centre, motion, hit - in that order."""
    target = Target(center_x=100.0, center_y=100.0, radius=20.0)
    area = build_grid_area(target)
    motion = np.array([[168, 170], [170, 170], [172, 170]], dtype=np.int32)
    hit = HitEvent(row=2, col=2, points=9, x=170.0, y=170.0, motion_pixels=3)

    primitives = AnnotationEmitter().emit(target, area, motion, hit)

    assert isinstance(primitives, tuple)
    assert len(primitives) == 4 + 9 + 1 + 3 + 2

    assert all(isinstance(p, LinePrimitive) and p.color == "grid" for p in primitives[:4])

    labels = primitives[4:13]
    assert [p.text for p in labels] == [str(v) for v in range(1, 10)]
    assert labels[4].x == pytest.approx(90.0)
    assert labels[4].y == pytest.approx(110.0)

    center = primitives[13]
    assert isinstance(center, CirclePrimitive)
    assert center.filled and center.color == "target_center"
    assert (center.x, center.y) == (100.0, 100.0)

    dots = primitives[14:17]
    assert all(p.color == "motion" and p.filled and p.radius == 2 for p in dots)
    assert [(p.x, p.y) for p in dots] == [(168.0, 170.0), (170.0, 170.0), (172.0, 170.0)]

    ring, label = primitives[17:]
    assert isinstance(ring, CirclePrimitive) and not ring.filled
    assert ring.radius == 15
    assert isinstance(label, TextPrimitive)
    assert label.text == "+9"
    assert (label.x, label.y) == (190.0, 170.0)


def test_emitter_plain_overlay():
    """Without debug only grid lines and the hit marker are emitted."""
    target = Target(center_x=100.0, center_y=100.0, radius=20.0)
    motion = np.array([[168, 170], [170, 170], [172, 170]], dtype=np.int32)
    hit = HitEvent(row=2, col=2, points=9, x=170.0, y=170.0, motion_pixels=3)

    primitives = AnnotationEmitter().emit(target, build_grid_area(target), motion, hit, debug=False)

    assert len(primitives) == 4 + 2
    assert all(isinstance(p, LinePrimitive) for p in primitives[:4])
    ring, label = primitives[4:]
    assert ring.color == label.color == "hit"
    assert ring.radius == 15 and not ring.filled
    assert label.text == "+9"


def test_emitter_without_hit():
    """No hit marker when no hit was accepted."""
    target = Target(center_x=100.0, center_y=100.0, radius=20.0)
    primitives = AnnotationEmitter().emit(
        target, build_grid_area(target), np.empty((0, 2), dtype=np.int32)
    )

    assert len(primitives) == 4 + 9 + 1
    assert not any(p.color == "hit_debug" for p in primitives)


# --- Renderer ---

def test_renderer_does_not_modify_input():
    """Rendering works on a copy."""
    image = np.zeros((200, 200, 3), dtype=np.uint8)
    target = Target(center_x=100.0, center_y=100.0, radius=20.0)
    primitives = AnnotationEmitter().emit(
        target, build_grid_area(target), np.array([[50, 50]], dtype=np.int32)
    )

    result = OverlayRenderer().render(image, primitives)

    assert result.shape == image.shape
    assert image.max() == 0
    assert result.max() > 0


def test_renderer_blends_motion_dots():
    """Motion dots are translucent, other primitives opaque."""
    image = np.zeros((50, 50, 3), dtype=np.uint8)
    renderer = OverlayRenderer(opacity=0.3)

    motion = renderer.render(image, [CirclePrimitive(25, 25, 3, "motion", filled=True)])
    solid = renderer.render(image, [CirclePrimitive(25, 25, 3, "hit_debug", filled=True)])

    assert 0 < motion[25, 25, 2] < 255
    assert tuple(solid[25, 25]) == OverlayRenderer.COLORS["hit_debug"]


def test_renderer_unknown_color_falls_back():
    """Unknown color tokens render in the text color."""
    image = np.zeros((50, 50, 3), dtype=np.uint8)

    result = OverlayRenderer().render(image, [CirclePrimitive(25, 25, 5, "nope", filled=True)])

    assert tuple(result[25, 25]) == OverlayRenderer.COLORS["text"]


def test_draw_score_panel():
    """Score panel draws onto a copy."""
    image = np.full((100, 300, 3), 128, dtype=np.uint8)

    result = OverlayRenderer().draw_score_panel(image, {"Score": 9})

    assert result.shape == image.shape
    assert not np.array_equal(result, image)
    assert OverlayRenderer().draw_score_panel(image, {}) is not image
