"""
Coordinated-turn ground track under wind.

Heading and position are integrated with a fixed time step. Bank ramps toward
the target at the roll rate; turn rate at any bank follows
    turn_rate = g * tan(bank) / V
Positions are local east/north feet from the turn's starting point.
"""
import math
from typing import List, Optional

from config import DEFAULT_CONFIG, EngineConfig
from .math_utils import Vec2, add, heading_vector, norm, normalize360
from .models import Point2D, TurnParams, TurnPath, TurnPhase, TurnPhases
from .units import kt_to_ft_per_sec
from .wind import wind_vector

BANK_TOL_DEG = 1e-6


def turn_rate_deg_sec(ktas: float, bank_deg: float,
                      gravity_ft_s2: float = DEFAULT_CONFIG.gravity_ft_s2) -> float:
    """Signed turn rate; positive bank gives a positive (right) rate."""
    v = kt_to_ft_per_sec(ktas)
    return math.degrees(gravity_ft_s2 * math.tan(math.radians(bank_deg)) / v)


def turn_radius_ft(ktas: float, bank_deg: float,
                   gravity_ft_s2: float = DEFAULT_CONFIG.gravity_ft_s2) -> float:
    if bank_deg == 0:
        return math.inf
    v = kt_to_ft_per_sec(ktas)
    return v * v / (gravity_ft_s2 * math.tan(math.radians(abs(bank_deg))))


def wind_vector_ft_sec(wind_dir_deg: float, wind_speed_kt: float) -> Vec2:
    """East/north drift for a wind reported as the direction it blows FROM."""
    return wind_vector(wind_dir_deg, kt_to_ft_per_sec(wind_speed_kt))


def ground_speed_kt(ktas: float, heading_deg: float,
                    wind_dir_deg: float, wind_speed_kt: float) -> float:
    air = heading_vector(heading_deg, ktas)
    return norm(add(air, wind_vector(wind_dir_deg, wind_speed_kt)))


def calculate_turn_phases(
    heading_change_deg: float,
    ktas: float,
    roll_rate_deg_sec: float,
    target_bank_deg: float,
    starting_bank_deg: float = 0.0,
    gravity_ft_s2: float = DEFAULT_CONFIG.gravity_ft_s2,
) -> TurnPhases:
    """
    Roll-in / sustained / roll-out timing for a turn through heading_change_deg.

    The heading change is a magnitude; direction comes from the bank sign. The
    sustained leg is sized on the steady turn rate only, so the heading
    actually flown also includes what is gained while rolling in and out.
    """
    if target_bank_deg == 0:
        raise ValueError("Bank angle must be non-zero for a heading change")
    if roll_rate_deg_sec <= 0:
        raise ValueError("Roll rate must be positive")

    rate = turn_rate_deg_sec(ktas, target_bank_deg, gravity_ft_s2)
    if rate == 0:
        raise ValueError("Bank angle is too shallow to change heading at this airspeed")
    roll_in = abs(target_bank_deg - starting_bank_deg) / roll_rate_deg_sec
    sustained = abs(heading_change_deg) / abs(rate)
    roll_out = abs(target_bank_deg) / roll_rate_deg_sec

    return TurnPhases(
        roll_in_s=roll_in,
        sustained_s=sustained,
        roll_out_s=roll_out,
        total_s=roll_in + sustained + roll_out,
        target_bank_deg=target_bank_deg,
        turn_rate_deg_sec=rate,
    )


def validate_turn_params(params: TurnParams,
                         cfg: EngineConfig = DEFAULT_CONFIG) -> Optional[str]:
    """Return a human-readable reason the params cannot be flown, or None."""
    numbers = [
        params.ktas, params.bank_deg, params.roll_rate_deg_sec, params.heading_deg,
        params.wind_dir_deg, params.wind_speed_kt, params.duration_s,
        params.starting_bank_deg,
    ]
    if params.time_step_s is not None:
        numbers.append(params.time_step_s)
    if params.heading_change_deg is not None:
        numbers.append(params.heading_change_deg)
    if not all(math.isfinite(n) for n in numbers):
        return "Turn parameters must be finite numbers"

    if params.ktas <= 0:
        return "Airspeed must be positive"
    if params.roll_rate_deg_sec <= 0:
        return "Roll rate must be positive"
    if abs(params.bank_deg) > cfg.max_bank_deg or abs(params.starting_bank_deg) > cfg.max_bank_deg:
        return f"Bank angle must be between -{cfg.max_bank_deg:g} and {cfg.max_bank_deg:g} degrees"
    if params.ktas > cfg.max_turn_ktas:
        return f"Airspeed cannot exceed {cfg.max_turn_ktas:g} kt"
    if params.wind_speed_kt < 0:
        return "Wind speed cannot be negative"
    if params.wind_speed_kt > cfg.max_wind_kt:
        return f"Wind speed cannot exceed {cfg.max_wind_kt:g} kt"

    steepest = max(abs(params.bank_deg), abs(params.starting_bank_deg))
    if not math.isfinite(turn_rate_deg_sec(params.ktas, steepest, cfg.gravity_ft_s2)):
        return "Airspeed is too low for the requested bank angle"

    dt = cfg.turn_time_step_s if params.time_step_s is None else params.time_step_s
    if dt <= 0:
        return "Time step must be positive"

    if params.heading_change_deg is not None:
        if params.bank_deg == 0:
            return "Bank angle must be non-zero for a heading change"
        if abs(params.heading_change_deg) < cfg.min_heading_change_deg:
            return (f"Heading change is too small to be meaningful "
                    f"(minimum {cfg.min_heading_change_deg:g} degrees)")
        try:
            phases = calculate_turn_phases(
                params.heading_change_deg, params.ktas, params.roll_rate_deg_sec,
                params.bank_deg, params.starting_bank_deg, cfg.gravity_ft_s2,
            )
        except ValueError as e:
            return str(e)
        duration = phases.total_s
        if duration > cfg.max_heading_change_turn_s:
            return (f"Turn would take {duration:.1f}s, exceeding maximum duration "
                    f"of {cfg.max_heading_change_turn_s:g}s")
    else:
        duration = params.duration_s
        if duration <= 0:
            return "Duration must be positive"
        if duration > cfg.max_turn_duration_s:
            return f"Duration cannot exceed {cfg.max_turn_duration_s:g}s"

    steps = duration / dt
    if not math.isfinite(steps) or math.ceil(steps) + 1 > cfg.max_turn_points:
        return "Time step too small for the requested duration"
    return None


def _ramp(start: float, target: float, roll_rate: float, t: float) -> float:
    diff = target - start
    swept = roll_rate * t
    if abs(diff) <= swept:
        return target
    return start + math.copysign(swept, diff)


def _bank_at(t: float, params: TurnParams, phases: Optional[TurnPhases]) -> float:
    rate = params.roll_rate_deg_sec
    if phases is None:
        return _ramp(params.starting_bank_deg, params.bank_deg, rate, t)
    if t < phases.roll_in_s:
        return _ramp(params.starting_bank_deg, params.bank_deg, rate, t)
    if t < phases.roll_in_s + phases.sustained_s:
        return params.bank_deg
    return _ramp(params.bank_deg, 0.0, rate, t - phases.roll_in_s - phases.sustained_s)


def _phase_at(t: float, bank: float, params: TurnParams,
              phases: Optional[TurnPhases]) -> TurnPhase:
    if phases is not None:
        if t < phases.roll_in_s:
            return TurnPhase.ROLLING_TO_MAX_BANK
        if t < phases.roll_in_s + phases.sustained_s:
            return TurnPhase.SUSTAINED_MAX_BANK
        if t < phases.total_s:
            return TurnPhase.ROLLING_TO_ZERO_BANK
        return TurnPhase.SUSTAINED_ZERO_BANK

    target = abs(params.bank_deg)
    if abs(bank) < target - BANK_TOL_DEG:
        return TurnPhase.ROLLING_TO_MAX_BANK
    if abs(bank) > target + BANK_TOL_DEG:
        return TurnPhase.ROLLING_TO_ZERO_BANK
    if target <= BANK_TOL_DEG:
        return TurnPhase.SUSTAINED_ZERO_BANK
    return TurnPhase.SUSTAINED_MAX_BANK


def compute_turn_path(params: TurnParams, cfg: EngineConfig = DEFAULT_CONFIG) -> TurnPath:
    """
    Integrate the ground track for params.

    Pure and idempotent: the same params always give the same path. Raises
    ValueError with the validate_turn_params message for unflyable params.
    """
    error = validate_turn_params(params, cfg)
    if error is not None:
        raise ValueError(error)

    g = cfg.gravity_ft_s2
    dt = cfg.turn_time_step_s if params.time_step_s is None else params.time_step_s
    airspeed_ft_s = kt_to_ft_per_sec(params.ktas)
    wind = wind_vector_ft_sec(params.wind_dir_deg, params.wind_speed_kt)

    phases: Optional[TurnPhases] = None
    if params.heading_change_deg is not None:
        phases = calculate_turn_phases(
            params.heading_change_deg, params.ktas, params.roll_rate_deg_sec,
            params.bank_deg, params.starting_bank_deg, g,
        )
        duration = phases.total_s
    else:
        duration = params.duration_s

    x, y = 0.0, 0.0
    hdg = normalize360(params.heading_deg)
    t = 0.0
    points: List[Point2D] = [Point2D(x, y)]
    tags: List[TurnPhase] = [TurnPhase.START]

    while t < duration:
        step = min(dt, duration - t)
        if step < 1e-10:
            break
        t += step

        bank = _bank_at(t, params, phases)
        hdg = normalize360(hdg + turn_rate_deg_sec(params.ktas, bank, g) * step)

        vx, vy = add(heading_vector(hdg, airspeed_ft_s), wind)
        x += vx * step
        y += vy * step

        points.append(Point2D(x, y))
        tags.append(_phase_at(t, bank, params, phases))

    return TurnPath(
        points=tuple(points),
        phases=tuple(tags),
        final_heading_deg=hdg,
        elapsed_s=t,
    )
