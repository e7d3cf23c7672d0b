import math

from config import DEFAULT_CONFIG, EngineConfig


def horizon_distance(altitude_ft: float, cfg: EngineConfig = DEFAULT_CONFIG) -> float:
    """Surface distance (ft) to the visual horizon: sqrt(2 R h)."""
    if altitude_ft <= 0:
        return 0.0
    return math.sqrt(2.0 * cfg.earth_radius_ft * altitude_ft)


def beyond_horizon(ground_ft: float, height_ft: float,
                   cfg: EngineConfig = DEFAULT_CONFIG) -> bool:
    """True when a point ground_ft away cannot be seen from height_ft."""
    return ground_ft > horizon_distance(height_ft, cfg)
