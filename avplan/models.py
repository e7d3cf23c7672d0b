from dataclasses import dataclass
from typing import Optional, Tuple
from enum import Enum, auto


# -------------------------------
# Geometry
# -------------------------------

@dataclass(frozen=True)
class GeometryResult:
    slant_range: float                  # ft
    depression: float                   # deg below local horizontal
    height_above_target: float          # ft
    central_angle: float                # deg, earth-centred
    valid: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class RangeConversionResult:
    ground_range_ft: float
    slant_range_ft: float
    depression_deg: float
    valid: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class Point2D:
    x: float                            # ft east of observer
    y: float                            # ft north of observer


@dataclass(frozen=True)
class FootprintResult:
    corners: Tuple[Point2D, Point2D, Point2D, Point2D]  # NL, NR, FR, FL
    near_width: float
    far_width: float
    near_ground: float
    far_ground: float
    near_range: float
    far_range: float
    center_ground: float
    center_width: float
    far_edge_at_horizon: bool
    far_edge_depression: float


# -------------------------------
# Deconfliction
# -------------------------------

class SeparationStatus(Enum):
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"


@dataclass(frozen=True)
class WorstCaseTraffic:
    traffic_gs_kt: float
    traffic_eta: Optional[float]        # s, None when traffic data is unusable


@dataclass(frozen=True)
class DeconflictionResult:
    time_separation: float              # s
    cpa_distance_nm: float
    cpa_time_seconds: float
    first_to_arrive: str                # "own" | "traffic"
    status: SeparationStatus
    own_eta: float
    traffic_eta: float
    worst_case_traffic_gs: float


# -------------------------------
# Turn kinematics
# -------------------------------

class TurnPhase(Enum):
    START = auto()
    ROLLING_TO_MAX_BANK = auto()
    SUSTAINED_MAX_BANK = auto()
    ROLLING_TO_ZERO_BANK = auto()
    SUSTAINED_ZERO_BANK = auto()


@dataclass(frozen=True)
class TurnParams:
    ktas: float
    bank_deg: float                     # target bank, +ve = right turn
    roll_rate_deg_sec: float
    heading_deg: float
    wind_dir_deg: float = 0.0           # direction the wind blows FROM
    wind_speed_kt: float = 0.0
    duration_s: float = 60.0
    time_step_s: Optional[float] = None # None -> config default
    starting_bank_deg: float = 0.0
    heading_change_deg: Optional[float] = None  # set -> roll in / sustain / roll out


@dataclass(frozen=True)
class TurnPhases:
    roll_in_s: float
    sustained_s: float
    roll_out_s: float
    total_s: float
    target_bank_deg: float
    turn_rate_deg_sec: float


@dataclass(frozen=True)
class TurnPath:
    points: Tuple[Point2D, ...]
    phases: Tuple[TurnPhase, ...]
    final_heading_deg: float
    elapsed_s: float

    def __len__(self) -> int:
        return len(self.points)


# -------------------------------
# Image interpretability (NIIRS)
# -------------------------------

class AtmosphericCondition(Enum):
    EXCELLENT = "excellent"             # > 10 NM visibility
    GOOD = "good"                       # 7-10 NM
    MODERATE = "moderate"               # 4-7 NM, light haze
    POOR = "poor"                       # 2-4 NM
    VERY_POOR = "veryPoor"              # < 2 NM, heavy haze / fog


class SensorBand(Enum):
    VISIBLE = "visible"
    SWIR = "swir"
    MWIR = "mwir"
    LWIR = "lwir"


@dataclass(frozen=True)
class NiirsResult:
    niirs: float                        # 0-9, one decimal
    gsd_inches: float                   # effective GSD incl. oblique elongation
    gsd_feet: float
    gsd_meters: float
    atmospheric_factor: float
    sensor_band_factor: float
    zoom_degradation: float
    oblique_elongation: float           # 1.0 at nadir
    valid: bool
    message: Optional[str] = None
