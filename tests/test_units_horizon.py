import math
import pytest

from config import EngineConfig
from avplan.horizon import beyond_horizon, horizon_distance
from avplan.units import (
    convert_length, convert_speed, ft_to_nmi, nmi_to_ft, ft_to_m, m_to_ft,
    ft_to_km, km_to_ft, ft_to_yd, yd_to_ft, kt_to_ft_per_sec, ktas_from_keas,
)


def test_length_factors():
    assert nmi_to_ft(1.0) == pytest.approx(6076.115)
    assert ft_to_nmi(6076.115) == pytest.approx(1.0)
    assert m_to_ft(1.0) == pytest.approx(3.28084)
    assert km_to_ft(1.0) == pytest.approx(3280.84)
    assert yd_to_ft(1.0) == 3.0
    assert ft_to_yd(9.0) == pytest.approx(3.0)
    assert ft_to_m(3.28084) == pytest.approx(1.0)
    assert ft_to_km(3280.84) == pytest.approx(1.0)


def test_convert_length_between_non_base_units():
    # 1 NM is 1.852 km
    assert convert_length(1.0, "nmi", "km") == pytest.approx(1.852, rel=1e-4)
    assert convert_length(5.0, "km", "km") == 5.0


def test_convert_speed():
    assert convert_speed(100.0, "kt", "kmh") == pytest.approx(185.2)
    assert convert_speed(185.2, "kmh", "kt") == pytest.approx(100.0)
    assert convert_speed(1.0, "kt", "ms") == pytest.approx(0.514444)


def test_unknown_unit_raises():
    with pytest.raises(ValueError):
        convert_length(1.0, "furlong", "ft")
    with pytest.raises(ValueError):
        convert_speed(1.0, "kt", "warp")


def test_knots_to_feet_per_second():
    assert kt_to_ft_per_sec(3600.0) == pytest.approx(6076.115)


def test_ktas_from_keas_grows_with_altitude():
    sea_level = ktas_from_keas(200.0, 0.0)
    high = ktas_from_keas(200.0, 25.0)
    assert sea_level == pytest.approx(200.0 * math.sqrt(1.225 / 1.22))
    assert high > sea_level


def test_horizon_distance_formula():
    cfg = EngineConfig()
    assert horizon_distance(10_000.0) == pytest.approx(math.sqrt(2 * cfg.earth_radius_ft * 10_000.0))
    # ~106 NM at 10 kft
    assert ft_to_nmi(horizon_distance(10_000.0)) == pytest.approx(106.4, rel=0.01)


def test_horizon_distance_non_positive_altitude():
    assert horizon_distance(0.0) == 0.0
    assert horizon_distance(-500.0) == 0.0


def test_beyond_horizon():
    h = 5_000.0
    d = horizon_distance(h)
    assert not beyond_horizon(d * 0.5, h)
    assert beyond_horizon(d * 1.01, h)
