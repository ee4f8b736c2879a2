import math

import numpy as np
import pytest

from mhn_globe.projection import (
    SphereState,
    normalize_lon,
    project,
    project_points,
    surface_vector,
    unproject,
    unproject_grid,
)

# One cell of the 120x60 reference raster, in degrees
LAT_CELL = 180.0 / 59
LON_CELL = 360.0 / 119


def lon_diff(a, b):
    return abs((a - b + 180.0) % 360.0 - 180.0)


@pytest.fixture
def big_state():
    return SphereState(width=1601, height=801, aspect_ratio=1.0, radius=320.0)


def test_radius_has_floor():
    assert SphereState(width=10, height=10, radius=0.0).radius == 1.0
    assert SphereState.for_viewport(1, 1, 2.0).radius == 1.0
    assert SphereState.for_viewport(0, 0).radius == 1.0


def test_for_viewport_radius():
    state = SphereState.for_viewport(40, 20, 1.0)
    assert state.radius == pytest.approx(8.0)
    state = SphereState.for_viewport(100, 40, 2.0)
    assert state.radius == pytest.approx(32.0)


def test_resized_keeps_view():
    state = SphereState.for_viewport(80, 40, 2.0, zoom=1.5, pan_x=4.0)
    bigger = state.resized(120, 50)
    assert (bigger.width, bigger.height) == (120, 50)
    assert bigger.zoom == 1.5
    assert bigger.pan_x == 4.0


def test_aspect_ratio_must_be_positive():
    with pytest.raises(ValueError):
        SphereState(width=10, height=10, aspect_ratio=0.0)


def test_normalize_lon():
    assert normalize_lon(190.0) == pytest.approx(-170.0)
    assert normalize_lon(-190.0) == pytest.approx(170.0)
    assert normalize_lon(45.0) == pytest.approx(45.0)
    assert normalize_lon(-270.0) == pytest.approx(90.0)


def test_greenwich_faces_viewer_at_zero_rotation(small_state):
    assert project(small_state, 0.0, 0.0, 0.0) == (20, 10, True)


def test_north_is_up(small_state):
    _, y_north, visible = project(small_state, 45.0, 0.0, 0.0)
    assert visible
    assert y_north < 10
    lat, _ = unproject(small_state, 20.5, 5.5, 0.0)
    assert lat > 0


def test_far_side_is_not_visible(small_state):
    assert project(small_state, 0.0, 180.0, 0.0) == (0, 0, False)
    # Rotating half a turn brings it round
    assert project(small_state, 0.0, 180.0, math.pi)[2]


def test_negative_depth_never_visible(big_state):
    for rotation in np.linspace(0, 2 * math.pi, 9, endpoint=False):
        for lat in range(-85, 90, 10):
            for lon in range(-180, 180, 10):
                _, _, z = surface_vector(lat, lon, rotation)
                if z < 0:
                    assert not project(big_state, lat, lon, rotation)[2]


def test_offscreen_points_are_not_visible():
    state = SphereState(width=20, height=10, aspect_ratio=1.0, radius=8.0, zoom=3.0)
    # Limb of a zoomed sphere falls outside the viewport
    assert not project(state, 0.0, 80.0, 0.0)[2]


def test_unproject_outside_sphere(small_state):
    assert unproject(small_state, 0, 0, 0.0) is None
    assert unproject(small_state, 39, 10, 0.0) is None


def test_unproject_centre(small_state):
    lat, lon = unproject(small_state, 20, 10, 0.0)
    assert lat == pytest.approx(0.0)
    assert lon == pytest.approx(0.0)


def test_unproject_accounts_for_rotation(small_state):
    _, lon = unproject(small_state, 20, 10, math.radians(30))
    assert lon == pytest.approx(30.0)


def test_round_trip_within_one_raster_cell(big_state):
    checked = 0
    for rotation in [0.0, 1.0, 2.5, 4.0, 5.9]:
        for lat in range(-45, 46, 15):
            for lon in range(-180, 180, 15):
                _, _, z = surface_vector(lat, lon, rotation)
                if z < 0.5:
                    continue
                x, y, visible = project(big_state, lat, lon, rotation)
                assert visible
                back = unproject(big_state, x, y, rotation)
                assert back is not None
                lat2, lon2 = back
                assert abs(lat2 - lat) <= LAT_CELL
                assert lon_diff(lon2, lon) <= LON_CELL
                checked += 1
    assert checked > 50


def test_project_points_matches_scalar(big_state):
    lats = np.array([0.0, 30.0, -20.0, 60.0, 10.0])
    lons = np.array([0.0, 20.0, -40.0, 100.0, 170.0])
    xs, ys, visible = project_points(big_state, lats, lons, 0.7)
    for i in range(len(lats)):
        x, y, vis = project(big_state, lats[i], lons[i], 0.7)
        assert bool(visible[i]) == vis
        if vis:
            assert (int(xs[i]), int(ys[i])) == (x, y)


def test_pan_moves_the_sphere(small_state):
    panned = small_state.with_view(pan_x=4.0, pan_y=-2.0)
    assert project(panned, 0.0, 0.0, 0.0) == (24, 8, True)
    lat, lon = unproject(panned, 24, 8, 0.0)
    assert lat == pytest.approx(0.0)
    assert lon == pytest.approx(0.0)


def test_unproject_grid_agrees_with_unproject(small_state):
    grid = unproject_grid(small_state, 1.3)
    for y in range(small_state.height):
        for x in range(small_state.width):
            point = unproject(small_state, x, y, 1.3)
            if point is None:
                assert not grid['on_sphere'][y, x]
                continue
            assert grid['on_sphere'][y, x]
            assert grid['lat'][y, x] == pytest.approx(point[0])
            assert lon_diff(grid['lon'][y, x], point[1]) == pytest.approx(0.0, abs=1e-9)
