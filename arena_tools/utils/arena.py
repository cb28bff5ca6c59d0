"""
Camera-calibrated arena for a marker-guided robot testbed.

Provides the single object that the camera loop, the GUI and the
network server share. Each camera frame is fed to process_markers(),
which recalibrates the pixel <-> meter transform from the two reference
markers and rebuilds the registry of tracked markers. Independently,
randomize() generates a new mission layout (start pose, obstacles and
target) that the overlay and any client can read.

Classes:
    Arena: Facade owning the transform, registry, mission state,
        randomizer and renderer.

Threading:
    Only one thread should call process_markers(). Every other public
    method may be called from any thread. Each field group has its own
    lock and no lock is held across a call into another component's
    lock, except randomize() which holds the target and obstacle locks
    together.

Usage:
    arena = Arena(seed=1)
    arena.randomize()
    arena.process_markers(detections, frame)
    marker = arena.get_position(5)
"""

import logging
from typing import Dict, Iterable, Optional, Sequence, Tuple

import numpy as np

from .base import ArenaBase
from .markers import MarkerRegistry
from .mission import MissionState
from .randomizer import Randomizer
from .renderer import ArenaRenderer
from .transform import CoordinateTransform
from .types import (
    Marker,
    MarkerDetection,
    Mission,
    Obstacle,
    Position,
    TargetLocation,
)

logger = logging.getLogger(__name__)


class Arena(ArenaBase):
    """
    Shared arena state and the operations exposed to collaborators.

    External code never holds references into the mutable state. Every
    getter returns an immutable snapshot.
    """

    def __init__(
        self,
        width_m: Optional[float] = None,
        height_m: Optional[float] = None,
        quadrant_bounds: Optional[Sequence[Sequence[float]]] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
        canvas=None,
    ) -> None:
        """
        Initialise the arena components.

        Args:
            width_m (float, optional): Distance between the reference
                markers in meters. Defaults to DEFAULT_WIDTH_M.
            height_m (float, optional): Arena height in meters.
                Defaults to DEFAULT_HEIGHT_M.
            quadrant_bounds (optional): Mission quadrant boxes.
                Defaults to QUADRANT_BOUNDS.
            seed (int, optional): Seed for mission randomization.
            rng (np.random.Generator, optional): Generator used for
                mission randomization instead of seed.
            canvas (optional): Drawing backend for overlays. Defaults to
                OpenCVCanvas.

        Raises:
            ValueError: If a dimension is not positive.
            ArenaConfigurationError: If quadrant_bounds is invalid.
        """

        self.transform = CoordinateTransform(width_m, height_m)
        self.registry = MarkerRegistry(self.transform)
        self.state = MissionState()
        self.randomizer = Randomizer(quadrant_bounds, seed=seed, rng=rng)
        self.renderer = ArenaRenderer(self.transform, self.state, canvas)

    def __str__(self) -> str:
        width_m, height_m = self.transform.size
        return (
            f"Arena(size={width_m:.2f}x{height_m:.2f} m, "
            f"ppm={self.transform.ppm:.3f}, markers={len(self.registry)})"
        )

    # -------------------------------------------------------------------------
    # Per-frame pipeline
    # -------------------------------------------------------------------------

    def process_markers(
        self,
        detections: Iterable[MarkerDetection],
        image: Optional[np.ndarray] = None,
    ) -> None:
        """
        Calibrate from this frame's reference markers and rebuild the
        marker registry. When image is given, detections are outlined on
        it as well.
        """

        detections = list(detections)

        if image is not None:
            self.renderer.draw_detections(image, detections)

        self.transform.calibrate(detections)
        self.registry.update(detections)

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def camera_coordinate(self, x: float, y: float) -> Tuple[int, int]:
        """Arena meters to integer image pixel."""
        return self.transform.to_pixel_int(x, y)

    def to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        return self.transform.to_pixel(x, y)

    def to_arena(self, px: float, py: float) -> Tuple[float, float]:
        return self.transform.to_arena(px, py)

    def set_size(self, width_m: float, height_m: float) -> None:
        self.transform.set_size(width_m, height_m)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_position(self, marker_id: int) -> Optional[Marker]:
        """
        Return the marker seen in the latest frame, or None if it was
        not visible.
        """

        return self.registry.get(marker_id)

    def markers(self) -> Dict[int, Marker]:
        return self.registry.snapshot()

    def get_target_location(self) -> TargetLocation:
        return self.state.get_target()

    def starting_location(self) -> Position:
        return self.state.get_start()

    def obstacles(self) -> Tuple[Obstacle, ...]:
        return self.state.get_obstacles()

    def custom_point(self) -> Position:
        return self.state.get_custom_point()

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_custom_x(self, x: float) -> None:
        self.state.set_custom_x(x)

    def set_custom_y(self, y: float) -> None:
        self.state.set_custom_y(y)

    def set_custom_point(self, x: float, y: float) -> None:
        self.state.set_custom_x(x)
        self.state.set_custom_y(y)

    def set_draw_custom(self, draw: bool) -> None:
        self.state.set_draw_custom(draw)

    def set_draw_destination(self, draw: bool) -> None:
        self.state.set_draw_destination(draw)

    def set_draw_obstacles(self, draw: bool) -> None:
        self.state.set_draw_obstacles(draw)

    # -------------------------------------------------------------------------
    # Mission
    # -------------------------------------------------------------------------

    def randomize(self) -> Mission:
        """
        Generate and store a new mission layout.

        Returns:
            Mission: The layout that was stored.
        """

        mission = self.state.apply(self.randomizer.generate)
        logger.info(
            "New mission: target at (%.2f, %.2f) in %s, major obstacle in %s",
            mission.target.x,
            mission.target.y,
            mission.target.quadrant.name,
            mission.major_obstacle.quadrant.name,
        )
        return mission

    def draw(self, image: np.ndarray) -> np.ndarray:
        """Draw the mission overlay onto image in place."""
        return self.renderer.draw(image)
