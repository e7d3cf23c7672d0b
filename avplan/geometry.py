"""
Spherical-earth line-of-sight geometry.

Converts between ground range (surface arc), slant range and depression angle
for an observer at alt_msl_ft looking at a target at tgt_elev_ft. The forward
solver is the single source of truth: both inverse forms recover a ground
range and then re-derive everything else through `forward`, so a round trip
never disagrees with a direct forward call.
"""
import logging
import math

from config import DEFAULT_CONFIG, EngineConfig
from .models import GeometryResult, RangeConversionResult

logger = logging.getLogger(__name__)

ERR_BELOW_TARGET = "Aircraft must be above target"
ERR_NEGATIVE_GROUND = "Ground range cannot be negative"
ERR_SLANT_NOT_POSITIVE = "Slant range must be positive"
ERR_SLANT_TOO_SHORT = "Slant range cannot be less than height above target"
ERR_NO_GEOMETRY = "No valid geometry for given parameters"
ERR_DEPRESSION_NOT_POSITIVE = "Depression angle must be positive"


def _invalid_geometry(error: str) -> GeometryResult:
    return GeometryResult(
        slant_range=0.0,
        depression=0.0,
        height_above_target=0.0,
        central_angle=0.0,
        valid=False,
        error=error,
    )


def _invalid_conversion(error: str) -> RangeConversionResult:
    return RangeConversionResult(
        ground_range_ft=0.0,
        slant_range_ft=0.0,
        depression_deg=0.0,
        valid=False,
        error=error,
    )


def _from_forward(ground_range_ft: float, geo: GeometryResult) -> RangeConversionResult:
    if not geo.valid:
        return _invalid_conversion(geo.error or ERR_NO_GEOMETRY)
    return RangeConversionResult(
        ground_range_ft=ground_range_ft,
        slant_range_ft=geo.slant_range,
        depression_deg=geo.depression,
        valid=True,
    )


def forward(alt_msl_ft: float, tgt_elev_ft: float, ground_range_ft: float,
            cfg: EngineConfig = DEFAULT_CONFIG) -> GeometryResult:
    """
    Slant range and depression for a given ground range.

    Law of cosines on the two earth-centred radii, written in the half-angle
    form  s^2 = h^2 + 4 ra rt sin^2(c/2)  which is identical to
    ra^2 + rt^2 - 2 ra rt cos(c)  but does not cancel at short range.
    Depression is measured from the aircraft's local horizontal:
        atan2(h + rt(1 - cos c), rt sin c)
    """
    h = alt_msl_ft - tgt_elev_ft
    if h <= 0:
        return _invalid_geometry(ERR_BELOW_TARGET)
    if ground_range_ft < 0:
        return _invalid_geometry(ERR_NEGATIVE_GROUND)

    if ground_range_ft == 0:
        # Directly overhead
        return GeometryResult(
            slant_range=h,
            depression=90.0,
            height_above_target=h,
            central_angle=0.0,
            valid=True,
        )

    R = cfg.earth_radius_ft
    r_aircraft = R + alt_msl_ft
    r_target = R + tgt_elev_ft
    central_angle = ground_range_ft / R

    sin_half = math.sin(central_angle / 2.0)
    one_minus_cos = 2.0 * sin_half * sin_half

    slant_range = math.sqrt(h * h + 2.0 * r_aircraft * r_target * one_minus_cos)

    vertical_drop = h + r_target * one_minus_cos
    horizontal_dist = r_target * math.sin(central_angle)
    depression = math.degrees(math.atan2(vertical_drop, horizontal_dist))

    return GeometryResult(
        slant_range=slant_range,
        depression=max(0.0, min(90.0, depression)),
        height_above_target=h,
        central_angle=math.degrees(central_angle),
        valid=True,
    )


def from_slant_range(alt_msl_ft: float, tgt_elev_ft: float, slant_range_ft: float,
                     cfg: EngineConfig = DEFAULT_CONFIG) -> RangeConversionResult:
    h = alt_msl_ft - tgt_elev_ft
    if h <= 0:
        return _invalid_conversion(ERR_BELOW_TARGET)
    if slant_range_ft <= 0:
        return _invalid_conversion(ERR_SLANT_NOT_POSITIVE)
    if slant_range_ft < h:
        return _invalid_conversion(ERR_SLANT_TOO_SHORT)

    R = cfg.earth_radius_ft
    r_aircraft = R + alt_msl_ft
    r_target = R + tgt_elev_ft

    # cos(c) = 1 - 2 sin^2(c/2),  sin^2(c/2) = (s - h)(s + h) / (4 ra rt)
    sin_half_sq = (slant_range_ft - h) * (slant_range_ft + h) / (4.0 * r_aircraft * r_target)
    cos_central = 1.0 - 2.0 * sin_half_sq
    if not -1.0 <= cos_central <= 1.0:
        return _invalid_conversion(ERR_NO_GEOMETRY)

    central_angle = 2.0 * math.asin(math.sqrt(sin_half_sq))
    ground_range_ft = central_angle * R

    return _from_forward(ground_range_ft, forward(alt_msl_ft, tgt_elev_ft, ground_range_ft, cfg))


def horizon_ground_range(alt_msl_ft: float, tgt_elev_ft: float,
                         cfg: EngineConfig = DEFAULT_CONFIG) -> float:
    """
    Surface arc (ft) to the point where the line of sight grazes the target
    sphere. Depression is monotonically non-increasing in ground range up to
    here and rises again beyond it.
    """
    R = cfg.earth_radius_ft
    ratio = (R + tgt_elev_ft) / (R + alt_msl_ft)
    return math.acos(max(-1.0, min(1.0, ratio))) * R


def from_depression(alt_msl_ft: float, tgt_elev_ft: float, depression_deg: float,
                    cfg: EngineConfig = DEFAULT_CONFIG) -> RangeConversionResult:
    """
    Ground/slant range for a given depression angle.

    No closed form exists once curvature is included, so this bisects on
    ground range using `forward`. A search that exhausts its iteration budget
    returns its best estimate rather than failing; the residual is then larger
    than the tolerance but the result is still a consistent forward geometry.
    """
    h = alt_msl_ft - tgt_elev_ft
    if h <= 0:
        return _invalid_conversion(ERR_BELOW_TARGET)
    if depression_deg <= 0:
        return _invalid_conversion(ERR_DEPRESSION_NOT_POSITIVE)
    if depression_deg >= 90:
        return _from_forward(0.0, forward(alt_msl_ft, tgt_elev_ft, 0.0, cfg))

    flat_estimate = h / math.tan(math.radians(depression_deg))
    lo = 0.0
    hi = min(cfg.depression_bracket_factor * flat_estimate,
             horizon_ground_range(alt_msl_ft, tgt_elev_ft, cfg))

    ground_range_ft = hi
    trial = forward(alt_msl_ft, tgt_elev_ft, ground_range_ft, cfg).depression
    for _ in range(cfg.depression_max_iter):
        ground_range_ft = 0.5 * (lo + hi)
        trial = forward(alt_msl_ft, tgt_elev_ft, ground_range_ft, cfg).depression
        if abs(trial - depression_deg) < cfg.depression_tol_deg:
            break
        if trial > depression_deg:
            lo = ground_range_ft        # too steep: need more range
        else:
            hi = ground_range_ft
    else:
        logger.debug(
            "Depression search did not converge: target=%.6f deg best=%.6f deg at %.1f ft",
            depression_deg, trial, ground_range_ft,
        )

    return _from_forward(ground_range_ft, forward(alt_msl_ft, tgt_elev_ft, ground_range_ft, cfg))
