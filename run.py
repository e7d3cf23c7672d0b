import argparse
import logging
import sys

from avplan.deconfliction import calculate_deconfliction
from avplan.footprint import center_beyond_horizon, footprint_for_lens
from avplan.geometry import forward, from_depression, from_slant_range
from avplan.models import AtmosphericCondition, TurnParams
from avplan.niirs import niirs_for_lens
from avplan.sensors import DEFAULT_SENSOR_CONFIG, flatten_lenses
from avplan.turn import ground_speed_kt
from avplan.units import convert_length, ft_to_nmi
from avplan.wind import (
    course_from_heading, cross_track_wind, headwind_component, mach_from_ktas,
    wind_correction_angle, wind_type,
)
from avplan.worker import TurnPathWorker
from avplan.exceptions import WorkerError


def cmd_range(args) -> int:
    alt_ft = args.alt_kft * 1000.0
    tgt_ft = args.tgt_kft * 1000.0

    if args.ground is not None:
        ground_ft = convert_length(args.ground, args.unit, "ft")
        geo = forward(alt_ft, tgt_ft, ground_ft)
        if not geo.valid:
            print("Error:", geo.error)
            return 1
        slant, dep = geo.slant_range, geo.depression
    else:
        if args.slant is not None:
            res = from_slant_range(alt_ft, tgt_ft, convert_length(args.slant, args.unit, "ft"))
        else:
            res = from_depression(alt_ft, tgt_ft, args.depression)
        if not res.valid:
            print("Error:", res.error)
            return 1
        ground_ft, slant, dep = res.ground_range_ft, res.slant_range_ft, res.depression_deg

    print(f"ground range : {convert_length(ground_ft, 'ft', args.unit):.3f} {args.unit}")
    print(f"slant range  : {convert_length(slant, 'ft', args.unit):.3f} {args.unit}")
    print(f"depression   : {dep:.3f} deg")
    return 0


def cmd_footprint(args) -> int:
    if args.zoom < 1.0:
        print(f"Error: digital zoom must be >= 1, got {args.zoom:g}")
        return 1
    alt_ft = args.alt_kft * 1000.0
    tgt_ft = args.tgt_kft * 1000.0
    geo = forward(alt_ft, tgt_ft, convert_length(args.ground, "nmi", "ft"))
    if not geo.valid:
        print("Error:", geo.error)
        return 1

    for flat in flatten_lenses(DEFAULT_SENSOR_CONFIG):
        fp = footprint_for_lens(geo, flat.lens, args.zoom, args.azimuth)
        print(f"[{flat.full_name} x{args.zoom:g}]")
        print(f"  near/far ground : {ft_to_nmi(fp.near_ground):.2f} / {ft_to_nmi(fp.far_ground):.2f} NM")
        print(f"  near/far width  : {ft_to_nmi(fp.near_width):.2f} / {ft_to_nmi(fp.far_width):.2f} NM")
        if fp.far_edge_at_horizon:
            print("  far edge at/above horizon")
        if center_beyond_horizon(fp, geo.height_above_target):
            print("  footprint centre beyond visual horizon")
        est = niirs_for_lens(geo, flat, args.zoom, AtmosphericCondition(args.atmosphere))
        if est.valid:
            print(f"  NIIRS           : {est.niirs:.1f}  (GSD {est.gsd_inches:.1f} in)")
        if est.message:
            print(f"  note            : {est.message}")
    return 0


def cmd_deconflict(args) -> int:
    res = calculate_deconfliction(args.own_dist, args.own_gs,
                                  args.traffic_dist, args.traffic_gs, args.moe)
    if res is None:
        print("--- (distances and speeds must be positive)")
        return 1
    print(f"own ETA         : {res.own_eta:.0f} s")
    print(f"traffic ETA     : {res.traffic_eta:.0f} s  (worst-case GS {res.worst_case_traffic_gs:.1f} kt)")
    print(f"time separation : {res.time_separation:.0f} s  [{res.status.value.upper()}]")
    print(f"first to arrive : {res.first_to_arrive}")
    print(f"CPA             : {res.cpa_distance_nm:.2f} NM at {res.cpa_time_seconds:.0f} s")
    return 0


def cmd_wind(args) -> int:
    kind = wind_type(args.heading, args.wind_dir)
    head = headwind_component(args.heading, args.wind_dir, args.wind_speed)
    cross = cross_track_wind(args.heading, args.wind_dir, args.wind_speed)
    print(f"{kind:<15} : {head:.1f} kt")
    print(f"crosswind       : {abs(cross):.1f} kt {'from left' if cross > 0 else 'from right'}")
    wca = wind_correction_angle(args.heading, args.wind_dir, args.wind_speed, args.ktas)
    if wca is None:
        print("Error: wind too strong to hold a track at this airspeed")
        return 1
    print(f"WCA             : {wca:.1f} deg")
    print(f"course          : {course_from_heading(args.heading, wca):.1f} deg")
    print(f"ground speed    : {ground_speed_kt(args.ktas, args.heading, args.wind_dir, args.wind_speed):.1f} kt")
    print(f"mach            : {mach_from_ktas(args.ktas, args.alt_kft):.2f}")
    return 0


def cmd_turn(args) -> int:
    params = TurnParams(
        ktas=args.ktas,
        bank_deg=args.bank,
        roll_rate_deg_sec=args.roll_rate,
        heading_deg=args.heading,
        wind_dir_deg=args.wind_dir,
        wind_speed_kt=args.wind_speed,
        duration_s=args.duration,
        heading_change_deg=args.heading_change,
    )
    with TurnPathWorker() as worker:
        worker.submit(params)
        try:
            response = worker.latest()
        except WorkerError as e:
            print("Worker failed:", e)
            return 2
    if not response.success:
        print("Error:", response.error)
        return 1

    path = response.path
    end = path.points[-1]
    print(f"{len(path)} points over {path.elapsed_s:.1f} s")
    print(f"final heading : {path.final_heading_deg:.1f} deg")
    print(f"end position  : E {ft_to_nmi(end.x):.3f} NM, N {ft_to_nmi(end.y):.3f} NM")
    return 0


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Aviation planning calculators")
    parser.add_argument("--verbose", "-v", action="store_true")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("range", help="ground / slant range / depression conversion")
    p.add_argument("--alt-kft", type=float, required=True)
    p.add_argument("--tgt-kft", type=float, default=0.0)
    p.add_argument("--unit", choices=["nmi", "km", "m", "ft", "yd"], default="nmi")
    g = p.add_mutually_exclusive_group(required=True)
    g.add_argument("--ground", type=float)
    g.add_argument("--slant", type=float)
    g.add_argument("--depression", type=float)
    p.set_defaults(func=cmd_range)

    p = sub.add_parser("footprint", help="sensor footprint for each configured lens")
    p.add_argument("--alt-kft", type=float, required=True)
    p.add_argument("--tgt-kft", type=float, default=0.0)
    p.add_argument("--ground", type=float, required=True, help="ground range to target (NM)")
    p.add_argument("--azimuth", type=float, default=0.0)
    p.add_argument("--zoom", type=float, default=1.0)
    p.add_argument("--atmosphere", choices=[a.value for a in AtmosphericCondition],
                   default=AtmosphericCondition.GOOD.value)
    p.set_defaults(func=cmd_footprint)

    p = sub.add_parser("deconflict", help="time separation at a shared point")
    p.add_argument("--own-dist", type=float, required=True)
    p.add_argument("--own-gs", type=float, required=True)
    p.add_argument("--traffic-dist", type=float, required=True)
    p.add_argument("--traffic-gs", type=float, required=True)
    p.add_argument("--moe", type=float, default=0.0, help="traffic GS margin of error (%%)")
    p.set_defaults(func=cmd_deconflict)

    p = sub.add_parser("wind", help="wind triangle for a heading")
    p.add_argument("--ktas", type=float, required=True)
    p.add_argument("--heading", type=float, required=True)
    p.add_argument("--wind-dir", type=float, required=True)
    p.add_argument("--wind-speed", type=float, required=True)
    p.add_argument("--alt-kft", type=float, default=0.0)
    p.set_defaults(func=cmd_wind)

    p = sub.add_parser("turn", help="wind-corrected turn ground track")
    p.add_argument("--ktas", type=float, required=True)
    p.add_argument("--bank", type=float, required=True, help="+ve right, -ve left")
    p.add_argument("--roll-rate", type=float, default=10.0)
    p.add_argument("--heading", type=float, default=360.0)
    p.add_argument("--wind-dir", type=float, default=0.0)
    p.add_argument("--wind-speed", type=float, default=0.0)
    p.add_argument("--duration", type=float, default=60.0)
    p.add_argument("--heading-change", type=float, default=None)
    p.set_defaults(func=cmd_turn)

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
