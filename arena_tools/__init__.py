from .utils import (
    Arena,
    ArenaBase,
    ArenaError,
    ArenaConfigurationError,
    MarkerRegistry,
    GuardedCell,
    MissionState,
    Randomizer,
    ArenaRenderer,
    OpenCVCanvas,
    CoordinateTransform,
    marker_center_offset,
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
