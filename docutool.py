"""
DocuTool - Document scanner and ID card sheet maker
Flattens a photographed document from its 4 corner points, applies a
filter preset and rotation, and lays one or two scans out on an A4 sheet.
"""

import argparse
import json
import logging
import sys

from docscan.adjustments import FILTER_PRESETS
from docscan.corner_editor import CornerEditor
from docscan.document import Gallery, RectifiedDocument
from docscan.errors import DegenerateGeometryError, DocScanError
from docscan.geometry import CORNER_LABELS, as_corner_array
from docscan.image_io import DEFAULT_DPI, load_image, save_image, suggest_output_path
from docscan.rectifier import output_shape, validate_corners
from docscan.sheet_composer import DEFAULT_CARD_WIDTH_CM, PAGE_DPI

# Outputs smaller than this (either side) are probably mis-placed corners
MIN_PLAUSIBLE_PX = 16

DEFAULT_SHEET_NAME = "id-card-document.png"


def parse_point(text):
    """Parse an 'x,y' command-line argument into a float pair"""
    try:
        x, y = (float(v) for v in text.split(","))
    except ValueError:
        raise argparse.ArgumentTypeError(f"Expected a point as x,y, got '{text}'")
    return x, y


def load_corners_file(path):
    """Read corners from JSON: [{"x": .., "y": ..}, ...] or [[x, y], ...]"""
    with open(path, 'r', encoding='utf-8') as f:
        data = json.load(f)
    if isinstance(data, dict):
        data = data.get("corners", data)
    return as_corner_array(data)


def run_rectify(args):
    image = load_image(args.image)

    if args.corners_file:
        corners = load_corners_file(args.corners_file)
    elif args.corners:
        corners = as_corner_array(args.corners)
    else:
        corners = None

    editor = CornerEditor(image, corners)
    corners = editor.get_corners()
    for label, (x, y) in zip(CORNER_LABELS, corners):
        logging.debug("%s corner: (%.1f, %.1f)", label, x, y)

    try:
        validate_corners(corners)
    except DegenerateGeometryError as e:
        if not args.force:
            logging.error("%s. Re-adjust the corners (or pass --force).", e)
            return 1
        logging.warning("%s. Continuing because of --force.", e)

    width, height = output_shape(corners)
    if width == 0 or height == 0:
        logging.error("Corners give an empty %dx%d output; nothing to write", width, height)
        return 1
    if width < MIN_PLAUSIBLE_PX or height < MIN_PLAUSIBLE_PX:
        logging.warning("Output is only %dx%d px; the corners may need re-adjusting", width, height)

    gallery = Gallery()
    doc = gallery.upsert(editor.apply_crop())
    doc = gallery.save_changes(doc.id, args.rotate, args.filter)

    output = args.output or suggest_output_path(args.image, "scan")
    save_image(doc.image, output, dpi=args.dpi)
    out_w, out_h = doc.size
    print(f"Scan saved to {output} ({out_w}x{out_h}px, filter={args.filter}, rotation={args.rotate:g})")
    return 0


def run_sheet(args):
    if len(args.images) > 2:
        logging.error("A sheet holds at most 2 images, got %d", len(args.images))
        return 1

    gallery = Gallery()
    for path in args.images:
        doc = gallery.upsert(RectifiedDocument(image=load_image(path)))
        if args.filter != "none":
            doc = gallery.save_changes(doc.id, 0, args.filter)
        gallery.toggle_selection(doc.id)

    page = gallery.compose_selected(args.card_width)
    output = args.output or DEFAULT_SHEET_NAME
    save_image(page, output, dpi=PAGE_DPI)
    print(f"Sheet saved to {output} ({len(args.images)} card(s), {args.card_width:g} cm wide)")
    return 0


def build_parser():
    parser = argparse.ArgumentParser(description='DocuTool - Document scanner and ID card sheet maker')
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging')
    subparsers = parser.add_subparsers(dest='command', required=True)

    rect = subparsers.add_parser('rectify', help='Flatten a document from its 4 corners')
    rect.add_argument('image', help='Photo containing the document')
    corner_group = rect.add_mutually_exclusive_group()
    corner_group.add_argument('--corners', nargs=4, type=parse_point, metavar='X,Y',
                              help='Corners in image pixels, ordered top-left, top-right, bottom-right, bottom-left '
                                   '(default: 10%% inset from each edge)')
    corner_group.add_argument('--corners-file', help='JSON file with the 4 corners')
    rect.add_argument('-o', '--output', help='Output file (default: <image>_scan.<ext>)')
    rect.add_argument('--filter', choices=sorted(FILTER_PRESETS), default='magic',
                      help='Filter preset (default: magic)')
    rect.add_argument('--rotate', type=float, default=0.0,
                      help='Clockwise rotation in degrees (default: 0)')
    rect.add_argument('--dpi', type=int, default=DEFAULT_DPI,
                      help=f'DPI stored in the output file (default: {DEFAULT_DPI})')
    rect.add_argument('--force', action='store_true',
                      help='Write the output even when the corners are degenerate')
    rect.set_defaults(func=run_rectify)

    sheet = subparsers.add_parser('sheet', help='Lay out 1 or 2 scans on an A4 sheet')
    sheet.add_argument('images', nargs='+', help='Front (and optional back) scan')
    sheet.add_argument('--card-width', type=float, default=DEFAULT_CARD_WIDTH_CM,
                       help=f'Printed card width in cm (default: {DEFAULT_CARD_WIDTH_CM:g})')
    sheet.add_argument('-o', '--output', help=f'Output PNG (default: {DEFAULT_SHEET_NAME})')
    sheet.add_argument('--filter', choices=sorted(FILTER_PRESETS), default='none',
                       help='Filter preset applied to each scan (default: none)')
    sheet.set_defaults(func=run_sheet)
    return parser


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s: %(message)s')

    try:
        return args.func(args)
    except (DocScanError, FileNotFoundError, ValueError) as e:
        logging.error("%s", e)
        return 1


if __name__ == "__main__":
    sys.exit(main())
