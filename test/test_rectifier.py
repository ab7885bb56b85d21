"""
Pytest for perspective rectification.
Synthetic rasters are built on the fly, so no test assets are required.
"""
import cv2
import numpy as np
import pytest

from docscan.errors import DegenerateGeometryError, InvalidCornersError
from docscan.rectifier import (
    output_shape,
    rectify,
    round_half_up,
    side_lengths,
    target_size,
    validate_corners,
)

RED = (220, 30, 30, 255)
GREEN = (30, 200, 30, 255)
BLUE = (30, 30, 220, 255)
YELLOW = (230, 220, 20, 255)

# ---------- Utilities to build synthetic scenes ---------- #

def _random_image(width, height, seed=0):
    rng = np.random.default_rng(seed)
    image = rng.integers(0, 256, size=(height, width, 4), dtype=np.uint8)
    image[..., 3] = 255
    return image


def _quadrant_card(width=200, height=100):
    """Card with a distinct colour in each quadrant: red, green / yellow, blue"""
    card = np.zeros((height, width, 4), np.uint8)
    hw, hh = width // 2, height // 2
    card[:hh, :hw] = RED
    card[:hh, hw:] = GREEN
    card[hh:, hw:] = BLUE
    card[hh:, :hw] = YELLOW
    return card


def _place_card_in_frame(card, quad, frame_w=400, frame_h=300):
    """Warp the card onto quad inside a larger opaque grey frame"""
    h, w = card.shape[:2]
    src = np.array([[0, 0], [w, 0], [w, h], [0, h]], dtype=np.float32)
    hmat = cv2.getPerspectiveTransform(src, np.array(quad, dtype=np.float32))
    return cv2.warpPerspective(card, hmat, (frame_w, frame_h),
                               flags=cv2.INTER_NEAREST,
                               borderMode=cv2.BORDER_CONSTANT,
                               borderValue=(60, 60, 60, 255))

# ---------- Tests ---------- #

def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(3.5) == 4
    assert round_half_up(2.4999) == 2
    assert round_half_up(0.0) == 0


def test_axis_aligned_corners_return_the_source():
    source = _random_image(40, 30)
    out = rectify(source, [(0, 0), (40, 0), (40, 30), (0, 30)])
    assert out.shape == source.shape
    np.testing.assert_array_equal(out, source)


def test_rectify_is_deterministic():
    source = _random_image(120, 90, seed=3)
    corners = [(10, 12), (105, 5), (112, 80), (4, 70)]
    np.testing.assert_array_equal(rectify(source, corners), rectify(source, corners))


def test_source_is_not_modified():
    source = _random_image(50, 50)
    before = source.copy()
    rectify(source, [(5, 5), (45, 8), (40, 44), (3, 40)])
    np.testing.assert_array_equal(source, before)


def test_dimensions_for_800x600_scenario():
    source = _random_image(800, 600)
    corners = [(100, 100), (700, 120), (680, 580), (120, 560)]

    top, bottom, left, right = side_lengths(corners)
    assert top == pytest.approx(np.hypot(600, 20))
    assert bottom == pytest.approx(np.hypot(560, 20))
    assert left == pytest.approx(np.hypot(20, 460))
    assert right == pytest.approx(np.hypot(20, 460))

    width, height = target_size(corners)
    assert width == pytest.approx(max(top, bottom))
    assert height == pytest.approx(max(left, right))

    out = rectify(source, corners)
    assert output_shape(corners) == (600, 460)
    assert out.shape == (460, 600, 4)
    assert out.dtype == np.uint8


def test_recovers_warped_quadrant_card():
    card = _quadrant_card(200, 100)
    # Top edge keeps the card width; the sides are just over 100px
    quad = [(100, 50), (300, 50), (290, 150), (110, 150)]
    frame = _place_card_in_frame(card, quad)

    out = rectify(frame, quad)
    assert out.shape == (100, 200, 4)

    h, w = out.shape[:2]
    assert tuple(out[h // 4, w // 4]) == RED
    assert tuple(out[h // 4, 3 * w // 4]) == GREEN
    assert tuple(out[3 * h // 4, 3 * w // 4]) == BLUE
    assert tuple(out[3 * h // 4, w // 4]) == YELLOW


def test_rgb_source_gets_opaque_output():
    source = np.full((20, 30, 3), 90, np.uint8)
    out = rectify(source, [(0, 0), (30, 0), (30, 20), (0, 20)])
    assert out.shape == (20, 30, 4)
    assert np.all(out[..., 3] == 255)
    assert np.all(out[..., :3] == 90)


def test_samples_outside_the_source_stay_transparent():
    source = np.full((20, 20, 4), 200, np.uint8)
    source[10, 10] = (1, 2, 3, 255)
    out = rectify(source, [(-10, -10), (30, -10), (30, 30), (-10, 30)])

    assert out.shape == (40, 40, 4)
    assert tuple(out[0, 0]) == (0, 0, 0, 0)
    assert tuple(out[39, 39]) == (0, 0, 0, 0)
    assert tuple(out[20, 20]) == (1, 2, 3, 255)
    assert tuple(out[15, 15]) == (200, 200, 200, 200)


def test_collinear_corners_do_not_crash():
    source = _random_image(50, 50)
    corners = [(0, 0), (10, 0), (20, 0), (30, 0)]
    out = rectify(source, corners)
    width, height = output_shape(corners)
    assert out.shape == (height, width, 4)


def test_coincident_corners_give_empty_raster():
    source = _random_image(50, 50)
    out = rectify(source, [(25, 25)] * 4)
    assert out.shape == (0, 0, 4)


def test_swapping_opposite_corners_transposes_the_output():
    source = _random_image(30, 20, seed=11)
    # TL and BR exchanged
    out = rectify(source, [(30, 20), (30, 0), (0, 0), (0, 20)])

    assert out.shape == (30, 20, 4)
    assert out.shape != source.shape
    for y in range(1, 30):
        for x in range(1, 20):
            np.testing.assert_array_equal(out[y, x], source[20 - x, 30 - y])


def test_wrong_corner_count_raises():
    source = _random_image(10, 10)
    with pytest.raises(InvalidCornersError):
        rectify(source, [(0, 0), (10, 0), (10, 10)])
    with pytest.raises(InvalidCornersError):
        rectify(source, [(0, 0), (10, 0), (10, 10), (0, 10), (5, 5)])


def test_non_finite_corner_raises():
    source = _random_image(10, 10)
    with pytest.raises(InvalidCornersError):
        rectify(source, [(0, 0), (np.nan, 0), (10, 10), (0, 10)])


def test_validate_corners_accepts_a_normal_quad():
    width, height = validate_corners([(100, 100), (700, 120), (680, 580), (120, 560)])
    assert width > 500 and height > 400


@pytest.mark.parametrize("corners", [
    [(0, 0), (10, 0), (20, 0), (30, 0)],
    [(25, 25)] * 4,
    [(0, 0), (0.5, 0), (0.5, 0.5), (0, 0.5)],
])
def test_validate_corners_rejects_degenerate_sets(corners):
    with pytest.raises(DegenerateGeometryError):
        validate_corners(corners)
