# Global knobs (geometry + deconfliction + turn engine)
from dataclasses import dataclass

# Spherical earth (mean radius, ft)
EARTH_RADIUS_FT = 20_902_231.0

FT_PER_NM = 6076.115

# ---------------------------------------------------------------------
# Footprint projection
# Range/ground distances are hard-capped so a far edge near the visual
# horizon never runs off to infinity.
# ---------------------------------------------------------------------
MAX_FOOTPRINT_RANGE_NM = 100.0
MIN_EDGE_DEPRESSION_DEG = 1.0      # below this an edge is treated as at max range
BLEND_ZONE_TOP_DEG = 5.0           # far-range blend runs from MIN_EDGE to here

# ---------------------------------------------------------------------
# NIIRS estimate
# Below NIIRS_MIN_DEPRESSION_DEG no estimate is made; the two warning
# bands flag shallow looks where the estimate runs optimistic.
# ---------------------------------------------------------------------
NIIRS_MIN_DEPRESSION_DEG = 5.0
NIIRS_CAUTION_DEPRESSION_DEG = 10.0
NIIRS_WARNING_DEPRESSION_DEG = 15.0

# ---------------------------------------------------------------------
# Inverse depression solver (binary search over ground range)
# ---------------------------------------------------------------------
DEPRESSION_TOL_DEG = 1e-4
DEPRESSION_MAX_ITER = 50
DEPRESSION_BRACKET_FACTOR = 3.0    # upper bracket = factor * flat-earth estimate

# ---------------------------------------------------------------------
# Air deconfliction policy
#   red    : time separation <  RED_SEPARATION_S
#   yellow : time separation <  YELLOW_SEPARATION_S
#   green  : otherwise
# ---------------------------------------------------------------------
RED_SEPARATION_S = 60.0
YELLOW_SEPARATION_S = 180.0
MOE_MAX_PERCENT = 25.0

# ---------------------------------------------------------------------
# Turn kinematics
# ---------------------------------------------------------------------
GRAVITY_FT_S2 = 32.174
TURN_TIME_STEP_S = 0.5
MAX_BANK_DEG = 89.0
MAX_TURN_KTAS = 1000.0
MAX_WIND_KT = 1000.0
MAX_TURN_DURATION_S = 3600.0
MAX_HEADING_CHANGE_TURN_S = 360.0  # heading-change mode must finish inside this
MIN_HEADING_CHANGE_DEG = 0.1
MAX_TURN_POINTS = 200_000

# Worker channel
WORKER_TIMEOUT_S = 5.0
WORKER_MAX_PENDING = 8


@dataclass(frozen=True)
class EngineConfig:
    """Read-only bundle of the knobs above, passed explicitly into the engine."""
    earth_radius_ft: float = EARTH_RADIUS_FT
    max_footprint_range_ft: float = MAX_FOOTPRINT_RANGE_NM * FT_PER_NM
    min_edge_depression_deg: float = MIN_EDGE_DEPRESSION_DEG
    blend_zone_top_deg: float = BLEND_ZONE_TOP_DEG

    niirs_min_depression_deg: float = NIIRS_MIN_DEPRESSION_DEG
    niirs_caution_depression_deg: float = NIIRS_CAUTION_DEPRESSION_DEG
    niirs_warning_depression_deg: float = NIIRS_WARNING_DEPRESSION_DEG

    depression_tol_deg: float = DEPRESSION_TOL_DEG
    depression_max_iter: int = DEPRESSION_MAX_ITER
    depression_bracket_factor: float = DEPRESSION_BRACKET_FACTOR

    red_separation_s: float = RED_SEPARATION_S
    yellow_separation_s: float = YELLOW_SEPARATION_S
    moe_max_percent: float = MOE_MAX_PERCENT

    gravity_ft_s2: float = GRAVITY_FT_S2
    turn_time_step_s: float = TURN_TIME_STEP_S
    max_bank_deg: float = MAX_BANK_DEG
    max_turn_ktas: float = MAX_TURN_KTAS
    max_wind_kt: float = MAX_WIND_KT
    max_turn_duration_s: float = MAX_TURN_DURATION_S
    max_heading_change_turn_s: float = MAX_HEADING_CHANGE_TURN_S
    min_heading_change_deg: float = MIN_HEADING_CHANGE_DEG
    max_turn_points: int = MAX_TURN_POINTS

    worker_timeout_s: float = WORKER_TIMEOUT_S
    worker_max_pending: int = WORKER_MAX_PENDING


DEFAULT_CONFIG = EngineConfig()
