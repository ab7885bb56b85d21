"""
Generate test image for docutool testing
Creates an 8.56x5.4 cm card (ID-1 size) at 300 DPI with:
- Four coloured quadrants (red, green, blue, yellow)
- Rounded corners
- A dark border
- Pre-warped with a perspective transform onto a dark grey photo
The warped corners are written to a JSON file usable with --corners-file.
"""

import json
import os

import cv2
import numpy as np

# Configuration
DPI = 300
CM_TO_INCH = 1 / 2.54

# Card dimensions
WIDTH_CM = 8.56
HEIGHT_CM = 5.4
WIDTH_PX = int(WIDTH_CM * CM_TO_INCH * DPI)
HEIGHT_PX = int(HEIGHT_CM * CM_TO_INCH * DPI)

# Photo around the card
PHOTO_WIDTH_PX = 1600
PHOTO_HEIGHT_PX = 1200

# Colors (BGR format for OpenCV)
QUADRANT_COLORS = [
    (0, 0, 220),    # top-left: red
    (0, 200, 0),    # top-right: green
    (220, 0, 0),    # bottom-right: blue
    (0, 220, 220),  # bottom-left: yellow
]
BORDER = (30, 30, 30)
DARK_GREY_BG = (60, 60, 60)

print(f"Generating test image:")
print(f"  Card: {WIDTH_CM}x{HEIGHT_CM} cm ({WIDTH_PX}x{HEIGHT_PX} px @ {DPI} DPI)")
print(f"  Photo: {PHOTO_WIDTH_PX}x{PHOTO_HEIGHT_PX} px")

card = np.zeros((HEIGHT_PX, WIDTH_PX, 3), dtype=np.uint8)
half_w, half_h = WIDTH_PX // 2, HEIGHT_PX // 2
card[:half_h, :half_w] = QUADRANT_COLORS[0]
card[:half_h, half_w:] = QUADRANT_COLORS[1]
card[half_h:, half_w:] = QUADRANT_COLORS[2]
card[half_h:, :half_w] = QUADRANT_COLORS[3]
cv2.rectangle(card, (0, 0), (WIDTH_PX - 1, HEIGHT_PX - 1), BORDER, 8)

print("  [OK] Drew coloured quadrants")

# Rounded corners: paint everything outside the rounded rectangle grey
corner_radius = int(0.318 * CM_TO_INCH * DPI)
mask = np.zeros((HEIGHT_PX, WIDTH_PX), dtype=np.uint8)
cv2.rectangle(mask, (corner_radius, 0), (WIDTH_PX - corner_radius, HEIGHT_PX), 255, -1)
cv2.rectangle(mask, (0, corner_radius), (WIDTH_PX, HEIGHT_PX - corner_radius), 255, -1)
cv2.circle(mask, (corner_radius, corner_radius), corner_radius, 255, -1)  # top-left
cv2.circle(mask, (WIDTH_PX - corner_radius, corner_radius), corner_radius, 255, -1)  # top-right
cv2.circle(mask, (corner_radius, HEIGHT_PX - corner_radius), corner_radius, 255, -1)  # bottom-left
cv2.circle(mask, (WIDTH_PX - corner_radius, HEIGHT_PX - corner_radius), corner_radius, 255, -1)  # bottom-right
card = np.where(mask[:, :, np.newaxis] == 255, card, np.array(DARK_GREY_BG, dtype=np.uint8))

print(f"  [OK] Rounded the corners ({corner_radius} px radius)")

test_dir = os.path.join(os.path.dirname(__file__), "..", "test")
os.makedirs(test_dir, exist_ok=True)

original_path = os.path.join(test_dir, "test_card_original.png")
cv2.imwrite(original_path, card)
print(f"\n[OK] Saved original card: {original_path}")

# Source points (corners of the card), ordered TL, TR, BR, BL
src_points = np.array([
    [0, 0],
    [WIDTH_PX, 0],
    [WIDTH_PX, HEIGHT_PX],
    [0, HEIGHT_PX]
], dtype=np.float32)

# Where the card lands in the photo: a trapezoid as if shot at an angle
dst_points = np.array([
    [260, 210],
    [1320, 160],
    [1420, 980],
    [180, 900]
], dtype=np.float32)

transform_matrix = cv2.getPerspectiveTransform(src_points, dst_points)
warped_image = cv2.warpPerspective(card, transform_matrix, (PHOTO_WIDTH_PX, PHOTO_HEIGHT_PX),
                                   flags=cv2.INTER_NEAREST,
                                   borderMode=cv2.BORDER_CONSTANT,
                                   borderValue=DARK_GREY_BG)

warped_path = os.path.join(test_dir, "test_card_warped.png")
cv2.imwrite(warped_path, warped_image)
print(f"[OK] Saved warped photo: {warped_path}")

corners_path = os.path.join(test_dir, "test_card_corners.json")
with open(corners_path, 'w') as f:
    json.dump({
        "description": "Corners of the card in test_card_warped.png (TL, TR, BR, BL)",
        "card_size_px": [WIDTH_PX, HEIGHT_PX],
        "corners": [{"x": float(x), "y": float(y)} for x, y in dst_points],
    }, f, indent=2)
print(f"[OK] Saved corners: {corners_path}")

print("\n" + "="*60)
print("Test image generation complete!")
print("="*60)
print(f"\nTo test docutool:")
print(f"  python docutool.py rectify test/test_card_warped.png --corners-file test/test_card_corners.json")
print(f"  python docutool.py sheet test/test_card_warped_scan.png --card-width 8.56")
