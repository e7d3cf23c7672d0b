"""
Read-only sensor / lens specifications.

A host hands these in as plain data (sensor -> cameras -> lenses); the engine
only reads them. Digital zoom is a divisor applied to a lens's FOV.
"""
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class LensSpec:
    id: str
    name: str
    hfov: float
    vfov: float


@dataclass(frozen=True)
class CameraSpec:
    id: str
    name: str
    type: str
    lenses: Tuple[LensSpec, ...]
    digital_zoom: Tuple[float, ...] = (1.0,)
    sensor_width: Optional[int] = None      # pixels
    sensor_height: Optional[int] = None


@dataclass(frozen=True)
class SensorSpec:
    id: str
    name: str
    cameras: Tuple[CameraSpec, ...]


@dataclass(frozen=True)
class TurretSpec:
    min_azimuth: float = -180.0
    max_azimuth: float = 180.0
    min_depression: float = 0.0
    max_depression: float = 90.0

    def allows(self, azimuth_deg: float, depression_deg: float) -> bool:
        return (
            self.min_azimuth <= azimuth_deg <= self.max_azimuth
            and self.min_depression <= depression_deg <= self.max_depression
        )


def _pixels(value: Any) -> Optional[int]:
    return int(value) if value else None


@dataclass(frozen=True)
class SensorConfig:
    turret: TurretSpec
    sensors: Tuple[SensorSpec, ...]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SensorConfig":
        t = data.get("turret", {})
        turret = TurretSpec(
            min_azimuth=float(t.get("minAzimuth", -180.0)),
            max_azimuth=float(t.get("maxAzimuth", 180.0)),
            min_depression=float(t.get("minDepression", 0.0)),
            max_depression=float(t.get("maxDepression", 90.0)),
        )
        sensors = []
        for s in data.get("sensors", []):
            cameras = []
            for c in s.get("cameras", []):
                lenses = tuple(
                    LensSpec(
                        id=ln["id"],
                        name=ln.get("name", ln["id"]),
                        hfov=float(ln["hfov"]),
                        vfov=float(ln["vfov"]),
                    )
                    for ln in c.get("lenses", [])
                )
                zooms = tuple(float(z) for z in c.get("digitalZoom", [1])) or (1.0,)
                cameras.append(CameraSpec(
                    id=c["id"],
                    name=c.get("name", c["id"]),
                    type=c.get("type", "visible"),
                    lenses=lenses,
                    digital_zoom=zooms,
                    sensor_width=_pixels(c.get("sensorWidth")),
                    sensor_height=_pixels(c.get("sensorHeight")),
                ))
            sensors.append(SensorSpec(id=s["id"], name=s.get("name", s["id"]),
                                      cameras=tuple(cameras)))
        return cls(turret=turret, sensors=tuple(sensors))


@dataclass(frozen=True)
class FlatLens:
    """One selectable lens with its owning sensor/camera, for list pickers."""
    sensor_id: str
    sensor_name: str
    camera_id: str
    camera_name: str
    lens: LensSpec
    digital_zoom: Tuple[float, ...]
    type: str
    sensor_width: Optional[int] = None
    sensor_height: Optional[int] = None

    @property
    def full_name(self) -> str:
        return f"{self.sensor_name} {self.camera_name} {self.lens.name}"


DEFAULT_SENSOR_CONFIG = SensorConfig(
    turret=TurretSpec(),
    sensors=(
        SensorSpec(
            id="default-sensor",
            name="Default Sensor",
            cameras=(
                CameraSpec(
                    id="eo",
                    name="EO",
                    type="visible",
                    lenses=(LensSpec(id="default", name="Default", hfov=20.0, vfov=15.0),),
                    digital_zoom=(1.0, 2.0, 4.0),
                ),
            ),
        ),
    ),
)


def flatten_lenses(cfg: SensorConfig = DEFAULT_SENSOR_CONFIG) -> List[FlatLens]:
    out: List[FlatLens] = []
    for sensor in cfg.sensors:
        for camera in sensor.cameras:
            for lens in camera.lenses:
                out.append(FlatLens(
                    sensor_id=sensor.id,
                    sensor_name=sensor.name,
                    camera_id=camera.id,
                    camera_name=camera.name,
                    lens=lens,
                    digital_zoom=camera.digital_zoom,
                    type=camera.type,
                    sensor_width=camera.sensor_width,
                    sensor_height=camera.sensor_height,
                ))
    return out


def effective_fov(lens: LensSpec, zoom: float = 1.0) -> Tuple[float, float]:
    """(hfov, vfov) in degrees after digital zoom."""
    if zoom < 1.0:
        raise ValueError(f"Digital zoom must be >= 1, got {zoom}")
    return lens.hfov / zoom, lens.vfov / zoom
