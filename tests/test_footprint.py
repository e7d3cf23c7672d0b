import math
import pytest
from hypothesis import given, strategies as st

from config import EngineConfig
from avplan.footprint import calculate_footprint, center_beyond_horizon, footprint_for_lens
from avplan.geometry import forward
from avplan.sensors import LensSpec

MAX_RANGE = EngineConfig().max_footprint_range_ft


def _shoelace(corners):
    area = 0.0
    for a, b in zip(corners, corners[1:] + corners[:1]):
        area += a.x * b.y - b.x * a.y
    return area / 2.0


def test_nominal_footprint_values():
    h = 10_000.0
    fp = calculate_footprint(45.0, 0.0, 20.0, 10.0, h)

    assert fp.near_ground == pytest.approx(h / math.tan(math.radians(50.0)))
    assert fp.far_ground == pytest.approx(h / math.tan(math.radians(40.0)))
    assert fp.near_range == pytest.approx(h / math.sin(math.radians(50.0)))
    assert fp.far_range == pytest.approx(h / math.sin(math.radians(40.0)))
    assert fp.near_width == pytest.approx(2 * fp.near_range * math.tan(math.radians(10.0)))
    assert fp.far_width == pytest.approx(2 * fp.far_range * math.tan(math.radians(10.0)))
    assert fp.center_ground == pytest.approx((fp.near_ground + fp.far_ground) / 2)
    assert fp.center_width == pytest.approx((fp.near_width + fp.far_width) / 2)
    assert fp.far_edge_depression == pytest.approx(40.0)
    assert fp.far_edge_at_horizon is False


def test_corner_order_looking_north():
    fp = calculate_footprint(30.0, 0.0, 20.0, 10.0, 10_000.0)
    nl, nr, fr, fl = fp.corners

    assert nl.x < 0 < nr.x
    assert fl.x < 0 < fr.x
    assert nl.y == pytest.approx(fp.near_ground)
    assert fr.y == pytest.approx(fp.far_ground)
    assert nr.x == pytest.approx(fp.near_width / 2)
    assert fl.x == pytest.approx(-fp.far_width / 2)


def test_corners_rotate_with_azimuth():
    fp = calculate_footprint(30.0, 90.0, 20.0, 10.0, 10_000.0)
    nl, nr, fr, fl = fp.corners
    # Looking east: footprint lies east of the aircraft, left edge to the north
    assert min(c.x for c in fp.corners) > 0
    assert nl.y > nr.y
    assert fl.y > fr.y


def test_far_edge_above_horizon_is_pinned_to_max_range():
    fp = calculate_footprint(5.0, 0.0, 20.0, 12.0, 10_000.0)
    assert fp.far_edge_depression == pytest.approx(-1.0)
    assert fp.far_edge_at_horizon is True
    assert fp.far_range == MAX_RANGE


def test_far_edge_between_zero_and_one_degree():
    fp = calculate_footprint(5.0, 0.0, 20.0, 9.0, 10_000.0)
    assert fp.far_edge_depression == pytest.approx(0.5)
    assert fp.far_edge_at_horizon is False
    assert fp.far_range == MAX_RANGE


def test_blend_zone_never_exceeds_plain_or_max_range():
    h = 50_000.0
    for dep_far in (1.5, 2.0, 3.0, 4.0, 5.0):
        fp = calculate_footprint(dep_far + 5.0, 0.0, 20.0, 10.0, h)
        plain = h / math.sin(math.radians(dep_far))
        assert fp.far_range <= MAX_RANGE
        assert fp.far_range == pytest.approx(min(plain, MAX_RANGE))


def test_near_range_uses_one_degree_floor():
    h = 1_000.0
    fp = calculate_footprint(0.2, 0.0, 20.0, 0.2, h)
    assert fp.near_range == pytest.approx(min(h / math.sin(math.radians(1.0)), MAX_RANGE))
    assert fp.near_ground == fp.far_ground


depressions = st.floats(0.01, 90.0)
fovs = st.floats(0.1, 120.0)
heights = st.floats(1.0, 60_000.0)
azimuths = st.floats(-180.0, 360.0)


@given(dep=depressions, az=azimuths, hfov=fovs, vfov=fovs, h=heights)
def test_footprint_is_finite(dep, az, hfov, vfov, h):
    fp = calculate_footprint(dep, az, hfov, vfov, h)
    values = [
        fp.near_width, fp.far_width, fp.near_ground, fp.far_ground,
        fp.near_range, fp.far_range, fp.center_ground, fp.center_width,
        fp.far_edge_depression,
    ] + [v for c in fp.corners for v in (c.x, c.y)]
    assert all(math.isfinite(v) for v in values)


@given(dep=depressions, az=azimuths, hfov=fovs, vfov=fovs, h=heights)
def test_far_ground_never_inside_near_ground(dep, az, hfov, vfov, h):
    fp = calculate_footprint(dep, az, hfov, vfov, h)
    assert fp.far_ground >= fp.near_ground
    assert fp.far_edge_at_horizon == (dep - vfov / 2 <= 0)


@given(dep=st.floats(5.0, 60.0), az=azimuths, hfov=st.floats(1.0, 90.0),
       vfov=st.floats(1.0, 8.0), h=st.floats(100.0, 20_000.0))
def test_corners_wind_counter_clockwise(dep, az, hfov, vfov, h):
    fp = calculate_footprint(dep, az, hfov, vfov, h)
    if fp.far_ground > fp.near_ground:
        assert _shoelace(list(fp.corners)) > 0


def test_footprint_for_lens_applies_zoom():
    geo = forward(15_000.0, 0.0, 5 * 6076.115)
    lens = LensSpec(id="w", name="Wide", hfov=32.0, vfov=24.0)

    zoomed = footprint_for_lens(geo, lens, zoom=4.0, azimuth_deg=30.0)
    direct = calculate_footprint(geo.depression, 30.0, 8.0, 6.0, geo.height_above_target)
    assert zoomed == direct


def test_footprint_for_lens_invalid_geometry():
    geo = forward(1_000.0, 2_000.0, 100.0)
    lens = LensSpec(id="w", name="Wide", hfov=32.0, vfov=24.0)
    assert footprint_for_lens(geo, lens) is None


def test_center_beyond_horizon_on_small_planet():
    cfg = EngineConfig(earth_radius_ft=100_000.0)
    fp = calculate_footprint(2.0, 0.0, 10.0, 2.0, 1_000.0, cfg)
    assert center_beyond_horizon(fp, 1_000.0, cfg)
    assert not center_beyond_horizon(calculate_footprint(60.0, 0.0, 10.0, 2.0, 1_000.0, cfg),
                                     1_000.0, cfg)
