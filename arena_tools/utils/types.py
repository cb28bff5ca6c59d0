"""Value types shared between the arena components."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from .base import ArenaBase


class Quadrant(IntEnum):
    """
    Fixed mission quadrants, indexing ArenaBase.QUADRANT_BOUNDS.

    NEAR quadrants sit closest to the start lanes, FAR quadrants hold the
    target and the obstacle paired with it.
    """

    NEAR_UPPER = 0
    NEAR_LOWER = 1
    FAR_LOWER = 2
    FAR_UPPER = 3

    @property
    def opposite(self) -> "Quadrant":
        """The far quadrant that does not hold the target."""
        return _OPPOSITE[self]

    @property
    def neighbor(self) -> "Quadrant":
        """The near quadrant whose obstacle borders this far quadrant."""
        return _NEIGHBOR[self]


_OPPOSITE = {
    Quadrant.FAR_LOWER: Quadrant.FAR_UPPER,
    Quadrant.FAR_UPPER: Quadrant.FAR_LOWER,
}

_NEIGHBOR = {
    Quadrant.FAR_LOWER: Quadrant.NEAR_LOWER,
    Quadrant.FAR_UPPER: Quadrant.NEAR_UPPER,
}


@dataclass(frozen=True)
class Position:
    """Arena position in meters with a heading in radians."""

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0


@dataclass(frozen=True)
class Marker:
    """A tracked fiducial and its arena position for one frame."""

    id: int
    position: Position = field(default_factory=Position)


@dataclass(frozen=True)
class MarkerDetection:
    """
    One detected fiducial in pixel space.

    corners[0] is the reference corner and corners[1] the heading corner.
    """

    id: int
    corners: Tuple[Tuple[float, float], ...]


@dataclass(frozen=True)
class Obstacle:
    """
    Rectangular obstacle. (x, y) is the upper-left corner, so the
    footprint spans [x, x + width] by [y - height, y].
    """

    x: float
    y: float
    width: float
    height: float
    quadrant: Quadrant
    major: bool = False

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2, self.y - self.height / 2)


@dataclass(frozen=True)
class TargetLocation:
    """Circular mission destination."""

    x: float = 0.0
    y: float = 0.0
    theta: float = 0.0
    diameter: float = ArenaBase.TARGET_DIAMETER_M
    quadrant: Optional[Quadrant] = None

    @property
    def radius(self) -> float:
        return self.diameter / 2


@dataclass(frozen=True)
class Mission:
    """One randomized configuration produced by the Randomizer."""

    start: Position
    obstacles: Tuple[Obstacle, ...]
    target: TargetLocation

    @property
    def major_obstacle(self) -> Obstacle:
        return next(o for o in self.obstacles if o.major)

    def obstacle_in(self, quadrant: Quadrant) -> Optional[Obstacle]:
        for obstacle in self.obstacles:
            if obstacle.quadrant == quadrant:
                return obstacle
        return None


def detections_from_aruco(
    corners: Sequence[np.ndarray], ids: Optional[np.ndarray]
) -> List[MarkerDetection]:
    """
    Convert the (corners, ids) pair returned by cv.aruco detection into
    MarkerDetection values.

    Args:
        corners: Sequence of arrays shaped (1, 4, 2) or (4, 2).
        ids: Array shaped (N, 1) or (N,), or None when nothing was found.

    Returns:
        List[MarkerDetection]: One entry per detected marker.
    """

    if ids is None:
        return []

    detections = []
    for marker_corners, marker_id in zip(corners, np.asarray(ids).flatten()):
        points = np.asarray(marker_corners, dtype=float).reshape(-1, 2)
        detections.append(
            MarkerDetection(
                id=int(marker_id),
                corners=tuple((float(x), float(y)) for x, y in points),
            )
        )

    return detections
