"""
NIIRS (National Imagery Interpretability Rating Scale) estimate.

Simplified GIQE 4.0 for mission planning with airborne EO/IR sensors:

    NIIRS = 10.251 - 3.32 * log10(GSD_inches)

where GSD is the geometric mean of the horizontal and vertical pixel footprints
at the slant range, stretched by sqrt(1 / sin(depression)) for oblique looks.
The raw value is then reduced for atmosphere, sensor band and digital zoom and
clamped to 0-9.
"""
import math
from typing import Dict, Optional, Tuple

from config import DEFAULT_CONFIG, EngineConfig
from .models import AtmosphericCondition, GeometryResult, NiirsResult, SensorBand
from .sensors import FlatLens, effective_fov

FT_TO_M = 0.3048

ATMOSPHERIC_FACTORS: Dict[AtmosphericCondition, float] = {
    AtmosphericCondition.EXCELLENT: 0.0,
    AtmosphericCondition.GOOD: 0.2,
    AtmosphericCondition.MODERATE: 0.5,
    AtmosphericCondition.POOR: 1.0,
    AtmosphericCondition.VERY_POOR: 1.8,
}

# IR bands read slightly worse than visible at the same GSD (contrast)
SENSOR_BAND_FACTORS: Dict[SensorBand, float] = {
    SensorBand.VISIBLE: 0.0,
    SensorBand.SWIR: 0.1,
    SensorBand.MWIR: 0.3,
    SensorBand.LWIR: 0.5,
}

DEFAULT_RESOLUTIONS: Dict[str, Tuple[int, int]] = {
    "visible": (1920, 1080),
    "eo": (1920, 1080),
    "mwir": (640, 512),
    "swir": (640, 512),
    "lwir": (640, 480),
    "ir": (640, 512),
    "visible-4k": (3840, 2160),
    "mwir-hd": (1280, 1024),
}

NIIRS_DESCRIPTIONS = {
    0: "Interpretability precluded by obscuration or degradation",
    1: "Detect large facilities (airfields, harbors)",
    2: "Detect large buildings, identify road patterns",
    3: "Detect individual buildings, vehicles as point targets",
    4: "Identify trucks vs cars, count rail cars",
    5: "Identify vehicle types, detect aircraft components",
    6: "Identify aircraft type, detect vehicle features",
    7: "Identify aircraft variants, read vehicle markings",
    8: "Identify equipment details, read license plates",
    9: "Identify rivets, count wire strands",
}


def gsd_elongation_factor(depression_deg: float) -> float:
    """Multiplier on nadir GSD for an oblique look (>= 1, inf at the horizon)."""
    if depression_deg <= 0:
        return math.inf
    if depression_deg >= 90:
        return 1.0
    return math.sqrt(1.0 / math.sin(math.radians(depression_deg)))


def nadir_gsd_ft(slant_range_ft: float, fov_deg: float, pixels: int) -> float:
    """Slant range times the per-pixel IFOV; 0 for non-positive inputs."""
    if pixels <= 0 or slant_range_ft <= 0 or fov_deg <= 0:
        return 0.0
    return slant_range_ft * math.radians(fov_deg) / pixels


def _band_from(camera_type: str) -> Optional[SensorBand]:
    t = camera_type.lower()
    if "mwir" in t or "mid" in t:
        return SensorBand.MWIR
    if "lwir" in t or "long" in t or "thermal" in t:
        return SensorBand.LWIR
    if "swir" in t or "short" in t:
        return SensorBand.SWIR
    return None


def sensor_band(camera_type: str) -> SensorBand:
    return _band_from(camera_type) or SensorBand.VISIBLE


def default_resolution(camera_type: str) -> Tuple[int, int]:
    """(width, height) pixels for a camera that does not state its own."""
    t = camera_type.lower()
    if t in DEFAULT_RESOLUTIONS:
        return DEFAULT_RESOLUTIONS[t]
    band = _band_from(t)
    if band is not None:
        return DEFAULT_RESOLUTIONS[band.value]
    if "ir" in t:
        return DEFAULT_RESOLUTIONS["ir"]
    return DEFAULT_RESOLUTIONS["visible"]


def _invalid(message: str) -> NiirsResult:
    return NiirsResult(
        niirs=0.0, gsd_inches=0.0, gsd_feet=0.0, gsd_meters=0.0,
        atmospheric_factor=0.0, sensor_band_factor=0.0, zoom_degradation=0.0,
        oblique_elongation=0.0, valid=False, message=message,
    )


def calculate_niirs(
    slant_range_ft: float,
    hfov_deg: float,
    vfov_deg: float,
    width_px: int,
    height_px: int,
    band: SensorBand = SensorBand.VISIBLE,
    atmosphere: AtmosphericCondition = AtmosphericCondition.GOOD,
    digital_zoom: float = 1.0,
    depression_deg: float = 90.0,
    cfg: EngineConfig = DEFAULT_CONFIG,
) -> NiirsResult:
    """
    NIIRS for a look at slant_range_ft through an (already zoomed) FOV.

    Invalid when the look is shallower than the minimum depression, or the
    slant range or sensor resolution is not positive.
    """
    if depression_deg < cfg.niirs_min_depression_deg:
        return _invalid(f"Depression angle too shallow (<{cfg.niirs_min_depression_deg:g} deg)")
    if slant_range_ft <= 0:
        return _invalid("Invalid slant range")
    if width_px <= 0 or height_px <= 0:
        return _invalid("Invalid sensor resolution")

    nadir_ft = math.sqrt(nadir_gsd_ft(slant_range_ft, hfov_deg, width_px)
                         * nadir_gsd_ft(slant_range_ft, vfov_deg, height_px))
    elongation = gsd_elongation_factor(depression_deg)
    gsd_feet = nadir_ft * elongation
    gsd_inches = gsd_feet * 12.0
    if gsd_inches <= 0:
        return _invalid("GSD calculation error")

    niirs = 10.251 - 3.32 * math.log10(gsd_inches)

    atmospheric = ATMOSPHERIC_FACTORS[atmosphere]
    band_factor = SENSOR_BAND_FACTORS[band]
    # each 2x of digital zoom costs ~0.5
    zoom_loss = 1.66 * math.log10(digital_zoom) if digital_zoom > 1 else 0.0
    niirs = max(0.0, min(9.0, niirs - atmospheric - band_factor - zoom_loss))

    if depression_deg < cfg.niirs_caution_depression_deg:
        message = "Very low depression - estimate may be optimistic"
    elif depression_deg < cfg.niirs_warning_depression_deg:
        message = "Low depression - increased uncertainty"
    elif niirs >= 8.5:
        message = "Exceptional quality - verify conditions"
    elif niirs <= 1:
        message = "Very low quality - consider adjustments"
    elif digital_zoom > 4:
        message = "High digital zoom - quality degraded"
    elif elongation > 1.3:
        message = f"Oblique elongation: {elongation:.2f}x"
    else:
        message = None

    return NiirsResult(
        niirs=round(niirs, 1),
        gsd_inches=gsd_inches,
        gsd_feet=gsd_feet,
        gsd_meters=gsd_feet * FT_TO_M,
        atmospheric_factor=atmospheric,
        sensor_band_factor=band_factor,
        zoom_degradation=round(zoom_loss, 2),
        oblique_elongation=round(elongation, 2),
        valid=True,
        message=message,
    )


def niirs_for_lens(
    geometry: GeometryResult,
    flat: FlatLens,
    zoom: float = 1.0,
    atmosphere: AtmosphericCondition = AtmosphericCondition.GOOD,
    cfg: EngineConfig = DEFAULT_CONFIG,
) -> Optional[NiirsResult]:
    """NIIRS for a configured lens, falling back to the camera type's resolution."""
    if not geometry.valid:
        return None
    hfov, vfov = effective_fov(flat.lens, zoom)
    default_w, default_h = default_resolution(flat.type)
    return calculate_niirs(
        geometry.slant_range, hfov, vfov,
        flat.sensor_width or default_w,
        flat.sensor_height or default_h,
        band=sensor_band(flat.type),
        atmosphere=atmosphere,
        digital_zoom=zoom,
        depression_deg=geometry.depression,
        cfg=cfg,
    )


def niirs_description(niirs: float) -> str:
    return NIIRS_DESCRIPTIONS[int(math.floor(max(0.0, min(9.0, niirs))))]
