import math
from typing import Optional

from config import DEFAULT_CONFIG, EngineConfig
from .horizon import beyond_horizon
from .math_utils import rotate_enu
from .models import FootprintResult, GeometryResult, Point2D
from .sensors import LensSpec, effective_fov


def _far_range(depression_far: float, height_ft: float, cfg: EngineConfig) -> float:
    """
    Slant range to the far edge.

    Three zones so the far edge does not jump as it nears the horizon:
      - at/below the minimum edge depression: pinned to max range
      - blend zone: pulled toward max range, fading out at the zone top
      - above the blend zone: plain h / sin(dep), capped
    The blend smooths the transition but farRange's slope is still
    discontinuous at the zone edges.
    """
    max_range = cfg.max_footprint_range_ft
    low = cfg.min_edge_depression_deg
    top = cfg.blend_zone_top_deg

    if depression_far <= low:
        return max_range

    calculated = height_ft / math.sin(math.radians(depression_far))
    if depression_far <= top:
        blend = (depression_far - low) / (top - low)  # 0 at low, 1 at top
        far = min(calculated, max_range + (calculated - max_range) * blend * 0.5)
        return min(far, max_range)

    return min(calculated, max_range)


def _ground(depression: float, height_ft: float, cfg: EngineConfig) -> float:
    dep = max(cfg.min_edge_depression_deg, depression)
    return min(height_ft / math.tan(math.radians(dep)), cfg.max_footprint_range_ft)


def calculate_footprint(
    depression_deg: float,
    azimuth_deg: float,
    hfov_deg: float,
    vfov_deg: float,
    height_above_target_ft: float,
    cfg: EngineConfig = DEFAULT_CONFIG,
) -> FootprintResult:
    """
    Project a sensor FOV onto the ground.

    Corners are local east/north offsets (ft) from the aircraft, ordered
    near-left, near-right, far-right, far-left. Valid (no NaNs) for any
    depression in (0, 90] and positive height, with FOVs in (0, 180).
    """
    h = height_above_target_ft
    half_hfov = math.radians(hfov_deg / 2.0)

    dep_near = depression_deg + vfov_deg / 2.0
    dep_far = depression_deg - vfov_deg / 2.0

    near_range = min(
        h / math.sin(math.radians(max(cfg.min_edge_depression_deg, dep_near))),
        cfg.max_footprint_range_ft,
    )
    far_range = _far_range(dep_far, h, cfg)

    near_ground = _ground(dep_near, h, cfg)
    far_ground = _ground(dep_far, h, cfg)

    near_width = 2.0 * near_range * math.tan(half_hfov)
    far_width = 2.0 * far_range * math.tan(half_hfov)

    corners = (
        Point2D(*rotate_enu(near_ground, -near_width / 2.0, azimuth_deg)),
        Point2D(*rotate_enu(near_ground, near_width / 2.0, azimuth_deg)),
        Point2D(*rotate_enu(far_ground, far_width / 2.0, azimuth_deg)),
        Point2D(*rotate_enu(far_ground, -far_width / 2.0, azimuth_deg)),
    )

    return FootprintResult(
        corners=corners,
        near_width=near_width,
        far_width=far_width,
        near_ground=near_ground,
        far_ground=far_ground,
        near_range=near_range,
        far_range=far_range,
        center_ground=(near_ground + far_ground) / 2.0,
        center_width=(near_width + far_width) / 2.0,
        far_edge_at_horizon=dep_far <= 0,
        far_edge_depression=dep_far,
    )


def footprint_for_lens(
    geometry: GeometryResult,
    lens: LensSpec,
    zoom: float = 1.0,
    azimuth_deg: float = 0.0,
    cfg: EngineConfig = DEFAULT_CONFIG,
) -> Optional[FootprintResult]:
    """Footprint of a zoomed lens looking at the target described by geometry."""
    if not geometry.valid:
        return None
    hfov, vfov = effective_fov(lens, zoom)
    return calculate_footprint(
        geometry.depression, azimuth_deg, hfov, vfov, geometry.height_above_target, cfg
    )


def center_beyond_horizon(footprint: FootprintResult, height_above_target_ft: float,
                          cfg: EngineConfig = DEFAULT_CONFIG) -> bool:
    return beyond_horizon(footprint.center_ground, height_above_target_ft, cfg)
