"""
Air deconfliction timing along a shared convergence point.

Both ownship and traffic are assumed to be flying straight at the same point;
only distance-to-go and ground speed matter (no bearings).
"""
from typing import Optional

from config import DEFAULT_CONFIG, EngineConfig
from .models import DeconflictionResult, SeparationStatus, WorstCaseTraffic
from .units import SECONDS_PER_HOUR


def clamp_moe(moe_percent: float, cfg: EngineConfig = DEFAULT_CONFIG) -> float:
    return min(max(moe_percent, 0.0), cfg.moe_max_percent)


def eta_seconds(distance_nm: float, gs_kt: float) -> Optional[float]:
    if distance_nm <= 0 or gs_kt <= 0:
        return None
    return distance_nm / gs_kt * SECONDS_PER_HOUR


def worst_case_traffic(
    traffic_distance_nm: float,
    traffic_gs_kt: float,
    own_eta: Optional[float],
    moe_percent: float,
    cfg: EngineConfig = DEFAULT_CONFIG,
) -> WorstCaseTraffic:
    """
    Traffic speed inside the margin-of-error band that brings the traffic ETA
    closest to ownship's, i.e. the smallest apparent separation.

    The band is [gs(1 - moe), gs(1 + moe)]. If the speed that would make both
    arrive together lies inside it, that speed is the worst case (zero
    separation); otherwise the nearer band edge is.
    """
    if eta_seconds(traffic_distance_nm, traffic_gs_kt) is None:
        return WorstCaseTraffic(traffic_gs_kt=traffic_gs_kt, traffic_eta=None)

    moe = clamp_moe(moe_percent, cfg)
    if own_eta is None or own_eta <= 0 or moe == 0:
        return WorstCaseTraffic(
            traffic_gs_kt=traffic_gs_kt,
            traffic_eta=eta_seconds(traffic_distance_nm, traffic_gs_kt),
        )

    gs_low = traffic_gs_kt * (1.0 - moe / 100.0)
    gs_high = traffic_gs_kt * (1.0 + moe / 100.0)
    match_gs = traffic_distance_nm * SECONDS_PER_HOUR / own_eta

    worst_gs = min(max(match_gs, gs_low), gs_high)
    return WorstCaseTraffic(
        traffic_gs_kt=worst_gs,
        traffic_eta=eta_seconds(traffic_distance_nm, worst_gs),
    )


def classify_separation(time_separation_s: float,
                        cfg: EngineConfig = DEFAULT_CONFIG) -> SeparationStatus:
    """red < 60 s <= yellow < 180 s <= green (see config)."""
    if time_separation_s < cfg.red_separation_s:
        return SeparationStatus.RED
    if time_separation_s < cfg.yellow_separation_s:
        return SeparationStatus.YELLOW
    return SeparationStatus.GREEN


def calculate_deconfliction(
    own_distance_nm: float,
    own_gs_kt: float,
    traffic_distance_nm: float,
    traffic_gs_kt: float,
    moe_percent: float = 0.0,
    cfg: EngineConfig = DEFAULT_CONFIG,
) -> Optional[DeconflictionResult]:
    """
    Time separation and CPA at the shared point, or None if any distance or
    speed is non-positive.

    CPA distance is how far the later arrival still has to fly when the first
    aircraft reaches the point (0 for a simultaneous arrival).
    """
    own_eta = eta_seconds(own_distance_nm, own_gs_kt)
    if own_eta is None:
        return None

    worst = worst_case_traffic(traffic_distance_nm, traffic_gs_kt, own_eta, moe_percent, cfg)
    traffic_eta = worst.traffic_eta
    if traffic_eta is None:
        return None

    time_separation = abs(own_eta - traffic_eta)

    if own_eta <= traffic_eta:
        first_to_arrive = "own"
        later_gs = worst.traffic_gs_kt
    else:
        first_to_arrive = "traffic"
        later_gs = own_gs_kt

    return DeconflictionResult(
        time_separation=time_separation,
        cpa_distance_nm=later_gs * time_separation / SECONDS_PER_HOUR,
        cpa_time_seconds=min(own_eta, traffic_eta),
        first_to_arrive=first_to_arrive,
        status=classify_separation(time_separation, cfg),
        own_eta=own_eta,
        traffic_eta=traffic_eta,
        worst_case_traffic_gs=worst.traffic_gs_kt,
    )
