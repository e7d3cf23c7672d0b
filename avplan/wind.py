"""
Wind triangle helpers.

Headings and wind directions are cardinal degrees; wind direction is where the
wind blows FROM. Speeds are in whatever unit the caller uses for both the
airspeed and the wind (knots throughout the engine).
"""
import math
from typing import Optional

from .math_utils import Vec2, dot, heading_vector, mul, normalize360


def wind_vector(wind_dir_deg: float, wind_speed: float) -> Vec2:
    """East/north vector the wind pushes the aircraft along."""
    return mul(heading_vector(wind_dir_deg + 180.0), wind_speed)


def along_track_wind(heading_deg: float, wind_dir_deg: float, wind_speed: float) -> float:
    """Signed wind along the heading: positive is a tailwind."""
    return dot(wind_vector(wind_dir_deg, wind_speed), heading_vector(heading_deg))


def cross_track_wind(heading_deg: float, wind_dir_deg: float, wind_speed: float) -> float:
    """Signed wind across the heading: positive pushes the aircraft to the right."""
    return dot(wind_vector(wind_dir_deg, wind_speed), heading_vector(heading_deg + 90.0))


def headwind_component(heading_deg: float, wind_dir_deg: float, wind_speed: float) -> float:
    """Magnitude of the head- or tailwind; see wind_type for which."""
    return abs(along_track_wind(heading_deg, wind_dir_deg, wind_speed))


def crosswind_component(heading_deg: float, wind_dir_deg: float, wind_speed: float) -> float:
    return abs(cross_track_wind(heading_deg, wind_dir_deg, wind_speed))


def wind_type(heading_deg: float, wind_dir_deg: float) -> str:
    """
    "HW" when the wind comes from within 90 deg of the nose, otherwise "TW".

    A direct crosswind is labelled "HW"; its along-track component is zero.
    """
    off_nose = abs(normalize360(heading_deg - wind_dir_deg + 180.0) - 180.0)
    return "HW" if off_nose <= 90.0 else "TW"


def wind_correction_angle(heading_deg: float, wind_dir_deg: float, wind_speed: float,
                          ktas: float) -> Optional[float]:
    """
    Crab angle (deg) needed against the crosswind, or None when the wind is too
    strong for the airspeed to hold a track at all.
    """
    tas = ktas if ktas > 0 else 0.001
    ratio = math.sin(math.radians(wind_dir_deg - heading_deg)) * wind_speed / tas
    if abs(ratio) > 1.0:
        return None
    return math.degrees(math.asin(ratio))


def course_from_heading(heading_deg: float, wind_correction_deg: float) -> float:
    return normalize360(heading_deg - wind_correction_deg)


def mach_from_ktas(ktas: float, alt_kft: float) -> float:
    """Mach number using a linear fit of the speed of sound (m/s) against altitude."""
    speed_of_sound_kt = (-1.2188 * max(alt_kft, 0.0) + 341.59) * 1.944
    return max(ktas, 0.0) / speed_of_sound_kt
