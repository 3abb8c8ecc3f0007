import math

from board import Board
from main import icon_image
from ui import hex_corners, axial_to_pixel, fit_radius, point_in_poly


def test_hex_corners_lie_on_circle():
    pts = hex_corners((10, 20), 5)
    assert len(pts) == 6
    for x, y in pts:
        assert math.isclose(math.hypot(x - 10, y - 20), 5)


def test_point_in_poly():
    poly = hex_corners((0, 0), 10)
    assert point_in_poly((0, 0), poly)
    assert point_in_poly((3, -4), poly)
    assert not point_in_poly((20, 0), poly)


def test_neighbours_touch_on_screen():
    radius = 10.0
    b = Board(5)
    for r, c in b.cells():
        x, y = axial_to_pixel(r, c, (0, 0), radius)
        for nr, nc in b.neighbors(r, c):
            nx, ny = axial_to_pixel(nr, nc, (0, 0), radius)
            assert math.isclose(math.hypot(nx - x, ny - y), math.sqrt(3.0) * radius)


def test_fit_radius_fits():
    for n in (3, 7, 11):
        rad = fit_radius(n, 720, 410)
        half = rad * math.sqrt(3.0) / 2
        x, y = axial_to_pixel(n - 1, n - 1, (half, rad), rad)
        assert x + half <= 720 + 1e-6
        assert y + rad <= 410 + 1e-6
    assert fit_radius(3, 10000, 10000) == 40.0


def test_icon_image():
    img = icon_image(32)
    assert img.size == (32, 32)
    assert img.mode == "RGBA"
