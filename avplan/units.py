import math
from typing import Dict

# Length factors: how many feet in one unit
LENGTH_FACTORS: Dict[str, float] = {
    "ft": 1.0,
    "m": 3.28084,
    "nmi": 6076.115,
    "km": 3280.84,
    "yd": 3.0,
}

# Speed factors: how many of the unit in one knot
SPEED_FACTORS: Dict[str, float] = {
    "kt": 1.0,
    "mph": 1.15078,
    "ms": 0.514444,
    "fpm": 101.2685,
    "kmh": 1.852,
}

SECONDS_PER_HOUR = 3600.0


def _factor(table: Dict[str, float], unit: str, kind: str) -> float:
    try:
        return table[unit]
    except KeyError:
        raise ValueError(f"Unknown {kind} unit: {unit!r}") from None


def convert_length(value: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return value
    in_feet = value * _factor(LENGTH_FACTORS, from_unit, "length")
    return in_feet / _factor(LENGTH_FACTORS, to_unit, "length")


def convert_speed(value: float, from_unit: str, to_unit: str) -> float:
    if from_unit == to_unit:
        return value
    in_knots = value / _factor(SPEED_FACTORS, from_unit, "speed")
    return in_knots * _factor(SPEED_FACTORS, to_unit, "speed")


def ft_to_nmi(ft: float) -> float:
    return convert_length(ft, "ft", "nmi")

def nmi_to_ft(nmi: float) -> float:
    return convert_length(nmi, "nmi", "ft")

def ft_to_m(ft: float) -> float:
    return convert_length(ft, "ft", "m")

def m_to_ft(m: float) -> float:
    return convert_length(m, "m", "ft")

def ft_to_km(ft: float) -> float:
    return convert_length(ft, "ft", "km")

def km_to_ft(km: float) -> float:
    return convert_length(km, "km", "ft")

def ft_to_yd(ft: float) -> float:
    return convert_length(ft, "ft", "yd")

def yd_to_ft(yd: float) -> float:
    return convert_length(yd, "yd", "ft")


def kt_to_ft_per_sec(kt: float) -> float:
    return kt * LENGTH_FACTORS["nmi"] / SECONDS_PER_HOUR


def ktas_from_keas(keas: float, alt_kft: float) -> float:
    """
    True airspeed from equivalent airspeed using a quadratic fit of air
    density (kg/m^3) against altitude in feet. Negative inputs are treated as 0.
    """
    keas = max(keas, 0.0)
    alt_ft = max(alt_kft, 0.0) * 1000.0
    density = 1.22 - 3.39e-5 * alt_ft + 2.8e-10 * alt_ft ** 2
    return keas * math.sqrt(1.225 / density)
