import math
from typing import Tuple

Vec2 = Tuple[float, float]

def dot(u: Vec2, v: Vec2) -> float:
    """Projection helper: with a unit heading vector, the component along it."""
    return u[0] * v[0] + u[1] * v[1]

def norm(v: Vec2) -> float:
    return math.hypot(*v)

def add(u: Vec2, v: Vec2) -> Vec2:
    return (u[0] + v[0], u[1] + v[1])

def mul(v: Vec2, k: float) -> Vec2:
    return (v[0] * k, v[1] * k)

def normalize360(deg: float) -> float:
    return deg % 360.0

def heading_vector(hdg_deg: float, magnitude: float = 1.0) -> Vec2:
    """(east, north) components of a vector pointing along a cardinal heading."""
    r = math.radians(hdg_deg)
    return (magnitude * math.sin(r), magnitude * math.cos(r))

def rotate_enu(along: float, cross: float, azimuth_deg: float) -> Vec2:
    """
    Rotate a (along-track, cross-track) offset into local east/north.
    Azimuth is cardinal (0 = north, 90 = east); positive cross is to the right.
    """
    az = math.radians(azimuth_deg)
    s, c = math.sin(az), math.cos(az)
    return (along*s + cross*c, along*c - cross*s)
