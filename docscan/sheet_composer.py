"""
Printable sheet layout for ID cards: one or two rectified documents on an
A4 page at 300 DPI, scaled to a physical card width.

The page size, the px/cm factor and the vertical placement fractions are
fixed so sheets match the ones produced by earlier versions.
"""

import logging

import cv2
import cv3
import numpy as np

from .raster import as_rgba
from .rectifier import round_half_up
from .unit_converter import cm_to_px

# A4 portrait at 300 DPI
PAGE_WIDTH_PX = 2480
PAGE_HEIGHT_PX = 3508
PAGE_DPI = 300

DEFAULT_CARD_WIDTH_CM = 9.0

# ID-1 card corner (3.18 mm) at 300 DPI
CARD_CORNER_RADIUS_PX = 38

# Vertical centre of each card as a fraction of the page height
CARD_POSITIONS = {
    1: (0.5,),
    2: (0.33, 0.66),
}

PAGE_COLOR = (255, 255, 255, 255)


def rounded_rect_mask(width, height, radius=CARD_CORNER_RADIUS_PX):
    """
    Build a single-channel mask (255 inside) of a rectangle with rounded corners.

    The radius is reduced to fit cards smaller than two radii.
    """
    mask = np.zeros((height, width), dtype=np.uint8)
    radius = int(min(radius, (width - 1) // 2, (height - 1) // 2))
    if radius <= 0:
        mask[:] = 255
        return mask

    right, bottom = width - 1, height - 1

    # Main body
    cv2.rectangle(mask, (radius, 0), (right - radius, bottom), 255, -1)
    cv2.rectangle(mask, (0, radius), (right, bottom - radius), 255, -1)

    # The four corner circles
    cv2.circle(mask, (radius, radius), radius, 255, -1)  # top-left
    cv2.circle(mask, (right - radius, radius), radius, 255, -1)  # top-right
    cv2.circle(mask, (right - radius, bottom - radius), radius, 255, -1)  # bottom-right
    cv2.circle(mask, (radius, bottom - radius), radius, 255, -1)  # bottom-left
    return mask


def layout(sizes, card_width_cm=DEFAULT_CARD_WIDTH_CM):
    """
    Compute where each card lands on the page.

    Args:
        sizes: (width, height) of each image, 1 or 2 entries
        card_width_cm: Printed card width in centimetres

    Returns:
        List of (left, top, width, height) boxes in page pixels

    Raises:
        ValueError: For 0 or more than 2 images, or a non-positive width
    """
    if len(sizes) not in CARD_POSITIONS:
        raise ValueError(f"A sheet holds 1 or 2 images, got {len(sizes)}")
    if card_width_cm <= 0:
        raise ValueError("Card width must be positive")

    card_width = cm_to_px(card_width_cm)
    boxes = []
    for (width, height), fraction in zip(sizes, CARD_POSITIONS[len(sizes)]):
        if width <= 0 or height <= 0:
            raise ValueError(f"Cannot place an empty {width}x{height} image")
        card_height = height * card_width / width
        center_x = PAGE_WIDTH_PX / 2.0
        center_y = PAGE_HEIGHT_PX * fraction
        boxes.append((
            round_half_up(center_x - card_width / 2.0),
            round_half_up(center_y - card_height / 2.0),
            max(1, round_half_up(card_width)),
            max(1, round_half_up(card_height)),
        ))
    return boxes


def _blend(page, card, mask, left, top):
    """Alpha-blend card onto page at (left, top), clipped to the page"""
    page_h, page_w = page.shape[:2]
    card_h, card_w = card.shape[:2]

    x0, y0 = max(left, 0), max(top, 0)
    x1, y1 = min(left + card_w, page_w), min(top + card_h, page_h)
    if x0 >= x1 or y0 >= y1:
        logging.warning("Card at (%d, %d) falls outside the page", left, top)
        return

    region = card[y0 - top:y1 - top, x0 - left:x1 - left]
    coverage = mask[y0 - top:y1 - top, x0 - left:x1 - left, np.newaxis] / 255.0
    alpha = region[..., 3:4] / 255.0 * coverage

    under = page[y0:y1, x0:x1, :3].astype(np.float64)
    page[y0:y1, x0:x1, :3] = np.rint(region[..., :3] * alpha + under * (1.0 - alpha)).astype(np.uint8)


def compose(images, card_width_cm=DEFAULT_CARD_WIDTH_CM):
    """
    Place one or two images on a white A4 page.

    One image is centred on the page; two are centred at 33% and 66% of
    the page height. Each is scaled to card_width_cm wide, aspect ratio
    preserved, and drawn with rounded corners.

    Args:
        images: 1 or 2 RectifiedDocuments or raw rasters (front first)
        card_width_cm: Printed card width in centimetres

    Returns:
        RGBA raster of PAGE_HEIGHT_PX x PAGE_WIDTH_PX
    """
    rasters = [as_rgba(getattr(item, "image", item)) for item in images]
    boxes = layout([(r.shape[1], r.shape[0]) for r in rasters], card_width_cm)

    page = np.empty((PAGE_HEIGHT_PX, PAGE_WIDTH_PX, 4), dtype=np.uint8)
    page[:] = PAGE_COLOR

    for raster, (left, top, width, height) in zip(rasters, boxes):
        logging.info("Placing %dx%d image as %dx%d card at (%d, %d)",
                     raster.shape[1], raster.shape[0], width, height, left, top)
        card = cv3.resize(raster, width, height)
        _blend(page, card, rounded_rect_mask(width, height), left, top)
    return page
