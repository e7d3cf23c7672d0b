import math
import pytest
from hypothesis import given, settings, strategies as st

from config import EngineConfig
from avplan.math_utils import norm
from avplan.models import TurnParams, TurnPhase
from avplan.turn import (
    calculate_turn_phases, compute_turn_path, ground_speed_kt, turn_radius_ft,
    turn_rate_deg_sec, validate_turn_params, wind_vector_ft_sec,
)
from avplan.units import kt_to_ft_per_sec

CFG = EngineConfig()


def test_turn_rate_and_radius_are_consistent():
    v = kt_to_ft_per_sec(120.0)
    rate = turn_rate_deg_sec(120.0, 30.0)
    expected = math.degrees(CFG.gravity_ft_s2 * math.tan(math.radians(30.0)) / v)
    assert rate == pytest.approx(expected)
    assert rate == pytest.approx(5.25, abs=0.01)
    assert turn_rate_deg_sec(120.0, -30.0) == pytest.approx(-rate)

    radius = turn_radius_ft(120.0, 30.0)
    assert radius == pytest.approx(v / math.radians(rate))
    assert turn_radius_ft(120.0, 0.0) == math.inf


def test_wind_vector_points_downwind():
    # Wind from the west blows toward the east
    wx, wy = wind_vector_ft_sec(270.0, 20.0)
    assert wx == pytest.approx(kt_to_ft_per_sec(20.0))
    assert wy == pytest.approx(0.0, abs=1e-9)


def test_ground_speed_head_and_tail_wind():
    assert ground_speed_kt(100.0, 0.0, 0.0, 20.0) == pytest.approx(80.0)
    assert ground_speed_kt(100.0, 0.0, 180.0, 20.0) == pytest.approx(120.0)


def test_turn_phases_timing():
    phases = calculate_turn_phases(90.0, 120.0, 10.0, 30.0)
    assert phases.roll_in_s == pytest.approx(3.0)
    assert phases.roll_out_s == pytest.approx(3.0)
    assert phases.sustained_s == pytest.approx(90.0 / turn_rate_deg_sec(120.0, 30.0))
    assert phases.total_s == pytest.approx(6.0 + phases.sustained_s)

    from_banked = calculate_turn_phases(90.0, 120.0, 10.0, 30.0, starting_bank_deg=10.0)
    assert from_banked.roll_in_s == pytest.approx(2.0)

    with pytest.raises(ValueError):
        calculate_turn_phases(90.0, 120.0, 10.0, 0.0)
    with pytest.raises(ValueError):
        calculate_turn_phases(90.0, 120.0, 0.0, 30.0)


def test_wings_level_flies_straight():
    path = compute_turn_path(TurnParams(ktas=120.0, bank_deg=0.0, roll_rate_deg_sec=10.0,
                                        heading_deg=90.0, duration_s=10.0))
    end = path.points[-1]
    assert end.x == pytest.approx(kt_to_ft_per_sec(120.0) * 10.0)
    assert end.y == pytest.approx(0.0, abs=1e-6)
    assert path.final_heading_deg == pytest.approx(90.0)
    assert set(path.phases[1:]) == {TurnPhase.SUSTAINED_ZERO_BANK}


def test_wind_drifts_the_track():
    path = compute_turn_path(TurnParams(ktas=120.0, bank_deg=0.0, roll_rate_deg_sec=10.0,
                                        heading_deg=0.0, wind_dir_deg=270.0,
                                        wind_speed_kt=20.0, duration_s=60.0))
    end = path.points[-1]
    assert end.x == pytest.approx(kt_to_ft_per_sec(20.0) * 60.0)
    assert end.y == pytest.approx(kt_to_ft_per_sec(120.0) * 60.0)


def test_path_starts_at_origin_with_expected_point_count():
    path = compute_turn_path(TurnParams(ktas=150.0, bank_deg=25.0, roll_rate_deg_sec=5.0,
                                        heading_deg=45.0, duration_s=60.0))
    assert path.points[0].x == 0.0 and path.points[0].y == 0.0
    assert path.phases[0] == TurnPhase.START
    assert len(path) == 121
    assert len(path.phases) == len(path.points)
    assert path.elapsed_s == pytest.approx(60.0)


def test_right_and_left_turns_mirror():
    base = dict(ktas=120.0, roll_rate_deg_sec=10.0, heading_deg=0.0, duration_s=10.0)
    right = compute_turn_path(TurnParams(bank_deg=30.0, **base))
    left = compute_turn_path(TurnParams(bank_deg=-30.0, **base))

    assert right.points[-1].x > 0
    assert left.points[-1].x < 0
    assert left.points[-1].x == pytest.approx(-right.points[-1].x)
    assert left.points[-1].y == pytest.approx(right.points[-1].y)
    assert left.final_heading_deg == pytest.approx(360.0 - right.final_heading_deg)


def test_roll_in_is_tagged():
    path = compute_turn_path(TurnParams(ktas=120.0, bank_deg=30.0, roll_rate_deg_sec=10.0,
                                        heading_deg=0.0, duration_s=10.0))
    # 3 s to reach 30 deg at 10 deg/s; samples every 0.5 s
    assert path.phases[1] == TurnPhase.ROLLING_TO_MAX_BANK
    assert path.phases[5] == TurnPhase.ROLLING_TO_MAX_BANK
    assert path.phases[6] == TurnPhase.SUSTAINED_MAX_BANK
    assert path.phases[-1] == TurnPhase.SUSTAINED_MAX_BANK


def test_rolling_out_from_a_bank_is_tagged():
    path = compute_turn_path(TurnParams(ktas=120.0, bank_deg=0.0, roll_rate_deg_sec=10.0,
                                        heading_deg=0.0, starting_bank_deg=20.0,
                                        duration_s=5.0))
    assert path.phases[1] == TurnPhase.ROLLING_TO_ZERO_BANK
    assert path.phases[-1] == TurnPhase.SUSTAINED_ZERO_BANK


def test_full_circle_closes():
    rate = turn_rate_deg_sec(120.0, 30.0)
    params = TurnParams(ktas=120.0, bank_deg=30.0, roll_rate_deg_sec=1000.0, heading_deg=0.0,
                        duration_s=360.0 / rate, time_step_s=0.05)
    path = compute_turn_path(params)

    end = path.points[-1]
    assert math.hypot(end.x, end.y) < 50.0
    widest = max(math.hypot(p.x, p.y) for p in path.points)
    assert widest == pytest.approx(2 * turn_radius_ft(120.0, 30.0), rel=0.01)


def test_heading_change_mode_rolls_in_and_out():
    params = TurnParams(ktas=120.0, bank_deg=30.0, roll_rate_deg_sec=10.0, heading_deg=0.0,
                        heading_change_deg=90.0)
    phases = calculate_turn_phases(90.0, 120.0, 10.0, 30.0)
    path = compute_turn_path(params)

    assert path.elapsed_s == pytest.approx(phases.total_s)
    # sustained leg alone gives 90 deg; roll-in and roll-out add to it
    assert 100.0 < path.final_heading_deg < 110.0

    seen = set(path.phases)
    assert TurnPhase.ROLLING_TO_MAX_BANK in seen
    assert TurnPhase.SUSTAINED_MAX_BANK in seen
    assert TurnPhase.ROLLING_TO_ZERO_BANK in seen


def test_heading_change_mode_left():
    params = TurnParams(ktas=120.0, bank_deg=-30.0, roll_rate_deg_sec=10.0, heading_deg=0.0,
                        heading_change_deg=90.0)
    path = compute_turn_path(params)
    assert 250.0 < path.final_heading_deg < 260.0


def test_compute_is_idempotent():
    params = TurnParams(ktas=200.0, bank_deg=-20.0, roll_rate_deg_sec=7.0, heading_deg=300.0,
                        wind_dir_deg=45.0, wind_speed_kt=35.0, duration_s=45.0)
    assert compute_turn_path(params) == compute_turn_path(params)


def _params(**overrides):
    base = dict(ktas=120.0, bank_deg=30.0, roll_rate_deg_sec=10.0, heading_deg=0.0)
    base.update(overrides)
    return TurnParams(**base)


@pytest.mark.parametrize("overrides, message", [
    (dict(ktas=0.0), "Airspeed must be positive"),
    (dict(roll_rate_deg_sec=-1.0), "Roll rate must be positive"),
    (dict(bank_deg=90.0), "Bank angle must be between"),
    (dict(wind_speed_kt=-5.0), "Wind speed cannot be negative"),
    (dict(time_step_s=0.0), "Time step must be positive"),
    (dict(duration_s=0.0), "Duration must be positive"),
    (dict(duration_s=4000.0), "Duration cannot exceed"),
    (dict(bank_deg=0.0, heading_change_deg=90.0), "Bank angle must be non-zero"),
    (dict(heading_change_deg=0.01), "Heading change is too small"),
    (dict(ktas=500.0, bank_deg=1.0, heading_change_deg=90.0), "exceeding maximum duration"),
    (dict(duration_s=3600.0, time_step_s=0.001), "Time step too small"),
    (dict(ktas=float("nan")), "finite"),
    (dict(time_step_s=1e-310), "Time step too small"),
    (dict(ktas=1e308, heading_change_deg=90.0), "Airspeed cannot exceed"),
    (dict(wind_speed_kt=1e308), "Wind speed cannot exceed"),
    (dict(ktas=5e-324), "Airspeed is too low"),
    (dict(bank_deg=5e-324, heading_change_deg=90.0), "too shallow to change heading"),
])
def test_validation_messages(overrides, message):
    params = _params(**overrides)
    error = validate_turn_params(params)
    assert error is not None and message in error
    with pytest.raises(ValueError, match=message):
        compute_turn_path(params)


def test_valid_params_pass_validation():
    assert validate_turn_params(_params()) is None
    assert validate_turn_params(_params(heading_change_deg=180.0)) is None


@settings(max_examples=50, deadline=None)
@given(
    ktas=st.floats(60.0, 500.0),
    bank=st.floats(-60.0, 60.0),
    heading=st.floats(0.0, 360.0),
    wind_speed=st.floats(0.0, 80.0),
    wind_dir=st.floats(0.0, 360.0),
)
def test_each_step_moves_at_ground_speed(ktas, bank, heading, wind_speed, wind_dir):
    params = TurnParams(ktas=ktas, bank_deg=bank, roll_rate_deg_sec=10.0, heading_deg=heading,
                        wind_dir_deg=wind_dir, wind_speed_kt=wind_speed, duration_s=20.0)
    path = compute_turn_path(params)
    dt = CFG.turn_time_step_s
    max_step = (kt_to_ft_per_sec(ktas) + kt_to_ft_per_sec(wind_speed)) * dt
    for a, b in zip(path.points, path.points[1:]):
        assert norm((b.x - a.x, b.y - a.y)) <= max_step + 1e-6
    assert 0.0 <= path.final_heading_deg <= 360.0
