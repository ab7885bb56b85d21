"""
Pytest for the docutool command line.
"""
import json

import numpy as np
import pytest

import docutool
from docscan.image_io import load_image, read_dpi, save_image
from docscan.sheet_composer import PAGE_HEIGHT_PX, PAGE_WIDTH_PX


@pytest.fixture
def photo(tmp_path):
    image = np.full((100, 120, 4), 90, np.uint8)
    image[..., 3] = 255
    path = tmp_path / "photo.png"
    save_image(image, str(path))
    return path


def test_rectify_with_corners(photo, tmp_path):
    out = tmp_path / "out.png"
    code = docutool.main(["rectify", str(photo), "--corners", "10,10", "90,10", "90,60", "10,60",
                          "--filter", "none", "-o", str(out)])
    assert code == 0
    assert load_image(str(out)).shape == (50, 80, 4)


def test_rectify_with_rotation_and_default_output(photo):
    code = docutool.main(["rectify", str(photo), "--rotate", "90"])
    assert code == 0
    scanned = load_image(str(photo.parent / "photo_scan.png"))
    # Default corners keep 80% of each side, then a quarter turn
    assert scanned.shape == (96, 80, 4)


def test_rectify_with_corners_file(photo, tmp_path):
    corners = tmp_path / "corners.json"
    corners.write_text(json.dumps({"corners": [
        {"x": 0, "y": 0}, {"x": 60, "y": 0}, {"x": 60, "y": 30}, {"x": 0, "y": 30}]}))
    out = tmp_path / "out.png"
    assert docutool.main(["rectify", str(photo), "--corners-file", str(corners), "-o", str(out)]) == 0
    assert load_image(str(out)).shape == (30, 60, 4)


def test_degenerate_corners_fail_unless_forced(photo, tmp_path):
    out = tmp_path / "out.png"
    args = ["rectify", str(photo), "--corners", "0,0", "10,0", "20,0", "30,0", "-o", str(out)]
    assert docutool.main(args) == 1
    assert not out.exists()
    assert docutool.main(args + ["--force"]) == 0
    assert out.exists()


def test_coincident_corners_fail_even_when_forced(photo, tmp_path):
    out = tmp_path / "out.png"
    code = docutool.main(["rectify", str(photo), "--corners", "50,50", "50,50", "50,50", "50,50",
                          "--force", "-o", str(out)])
    assert code == 1
    assert not out.exists()


def test_missing_image_reports_failure(tmp_path):
    assert docutool.main(["rectify", str(tmp_path / "missing.png")]) == 1


def test_sheet_with_front_and_back(photo, tmp_path):
    out = tmp_path / "sheet.png"
    code = docutool.main(["sheet", str(photo), str(photo), "--card-width", "8.56", "-o", str(out)])
    assert code == 0
    assert load_image(str(out)).shape == (PAGE_HEIGHT_PX, PAGE_WIDTH_PX, 4)
    assert read_dpi(str(out), default=0) == 300


def test_sheet_rejects_three_images(photo, tmp_path):
    out = tmp_path / "sheet.png"
    assert docutool.main(["sheet", str(photo), str(photo), str(photo), "-o", str(out)]) == 1
    assert not out.exists()


def test_bad_point_argument_exits():
    with pytest.raises(SystemExit):
        docutool.main(["rectify", "x.png", "--corners", "1;2", "3,4", "5,6", "7,8"])
