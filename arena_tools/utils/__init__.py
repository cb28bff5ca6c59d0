from .arena import Arena
from .base import ArenaBase
from .errors import ArenaError, ArenaConfigurationError
from .markers import MarkerRegistry
from .mission import GuardedCell, MissionState
from .randomizer import Randomizer
from .renderer import ArenaRenderer, OpenCVCanvas
from .transform import CoordinateTransform, marker_center_offset
from .types import (
    Marker,
    MarkerDetection,
    Mission,
    Obstacle,
    Position,
    Quadrant,
    TargetLocation,
    detections_from_aruco,
)

__all__ = [
    "Arena",
    "ArenaBase",
    "ArenaError",
    "ArenaConfigurationError",
    "MarkerRegistry",
    "GuardedCell",
    "MissionState",
    "Randomizer",
    "ArenaRenderer",
    "OpenCVCanvas",
    "CoordinateTransform",
    "marker_center_offset",
    "Marker",
    "MarkerDetection",
    "Mission",
    "Obstacle",
    "Position",
    "Quadrant",
    "TargetLocation",
    "detections_from_aruco",
]
