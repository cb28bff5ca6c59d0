"""
Camera pixel <-> arena meter conversion.

The arena frame is anchored by two reference markers: marker 0 marks
the origin and marker 1 lies on the arena x axis at a distance equal to
the configured arena width. From their first corners every processed
frame derives a scale (pixels per meter) and a rotation of the arena
relative to the image.

Image y grows downward while arena y grows upward, so the vertical axis
is flipped in both directions of the conversion.

Classes:
    CoordinateTransform: Thread-safe calibration and point conversion.

Functions:
    marker_center_offset: Corner-to-centre correction for a marker.
"""

import logging
import math
import numbers
import threading
from typing import Iterable, Optional, Sequence, Tuple

import numpy as np

from .base import ArenaBase
from .types import MarkerDetection, Position

logger = logging.getLogger(__name__)


def marker_center_offset(
    side_px: float, theta_marker: float
) -> Tuple[float, float]:
    """
    Offset from a marker's reference corner to its centre, expressed in
    the arena's axis-aligned pixel frame.

    The centre lies half a diagonal away from the reference corner. Two
    parameterisations of the same shift are used, picked by the sign of
    cos(theta_marker), so that each stays well conditioned on its own
    half of the circle. They agree where cos(theta_marker) == 0, and that
    boundary belongs to the first case.

    Args:
        side_px (float): Marker side length in pixels.
        theta_marker (float): Marker heading in the arena frame.

    Returns:
        Tuple[float, float]: (dA, dB) to add to the corner offsets.
    """

    half_diagonal = math.sqrt(2) * side_px / 2

    if math.cos(theta_marker) >= 0:
        d_a = half_diagonal * math.cos(math.pi / 4 - theta_marker)
        d_b = -half_diagonal * math.sin(math.pi / 4 - theta_marker)
    else:
        d_a = -half_diagonal * math.sin(theta_marker - 3 * math.pi / 4)
        d_b = half_diagonal * math.cos(theta_marker - 3 * math.pi / 4)

    return d_a, d_b


class CoordinateTransform(ArenaBase):
    """
    Calibration state and conversions between pixels and arena meters.

    All calibration fields (origin pixel, axis pixel, width, height,
    ppm, theta) are guarded by one lock. Conversions take a single
    snapshot of the fields they need so a concurrent calibrate() can
    never hand them a half-updated frame.

    The origin and axis pixels are written independently. When only
    one reference marker is visible the other keeps the value from the
    last frame it was seen in.

    Usage:
        transform = CoordinateTransform(width_m=4.0, height_m=2.0)
        transform.calibrate(detections)
        px, py = transform.to_pixel(1.0, 0.5)
    """

    def __init__(
        self,
        width_m: Optional[float] = None,
        height_m: Optional[float] = None,
        origin_px: Optional[Tuple[int, int]] = None,
        axis_px: Optional[Tuple[int, int]] = None,
    ) -> None:
        """
        Initialise the transform and derive ppm/theta from the starting
        reference pixels.

        Args:
            width_m (float, optional): Physical distance between the
                reference markers. Defaults to DEFAULT_WIDTH_M.
            height_m (float, optional): Physical arena height. Defaults
                to DEFAULT_HEIGHT_M.
            origin_px (Tuple[int, int], optional): Starting origin pixel.
            axis_px (Tuple[int, int], optional): Starting axis pixel.

        Raises:
            ValueError: If a dimension is not positive or the starting
                pixels coincide.
        """

        width_m = self.DEFAULT_WIDTH_M if width_m is None else width_m
        height_m = self.DEFAULT_HEIGHT_M if height_m is None else height_m
        self._validate_size(width_m, height_m)

        origin_px = origin_px or self.DEFAULT_ORIGIN_PX
        axis_px = axis_px or self.DEFAULT_AXIS_PX
        if tuple(origin_px) == tuple(axis_px):
            raise ValueError(
                "CoordinateTransform.__init__: origin_px and axis_px must "
                "be different pixels."
            )

        self._lock = threading.Lock()
        self._origin_px = (int(origin_px[0]), int(origin_px[1]))
        self._axis_px = (int(axis_px[0]), int(axis_px[1]))
        self._width_m = float(width_m)
        self._height_m = float(height_m)
        self._ppm = 0.0
        self._theta = 0.0

        with self._lock:
            self._recompute()

    def __str__(self) -> str:
        origin_px, axis_px, ppm, theta = self.snapshot()
        return (
            f"CoordinateTransform(origin_px={origin_px}, axis_px={axis_px}, "
            f"ppm={ppm:.3f}, theta={theta:.4f})"
        )

    @staticmethod
    def _is_valid_size(value) -> bool:
        # bool is an int subclass, numpy scalars register as numbers.Real
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            return False
        return math.isfinite(value) and value > 0

    @classmethod
    def _validate_size(cls, width_m: float, height_m: float) -> None:
        if not cls._is_valid_size(width_m):
            raise ValueError(
                "CoordinateTransform: width_m must be a positive number."
            )
        if not cls._is_valid_size(height_m):
            raise ValueError(
                "CoordinateTransform: height_m must be a positive number."
            )

    def _recompute(self) -> None:
        """
        Derive ppm and theta from the reference pixels. Caller holds
        the lock.
        """

        dx = self._axis_px[0] - self._origin_px[0]
        dy = self._axis_px[1] - self._origin_px[1]
        distance_px = math.hypot(dx, dy)

        if distance_px == 0:
            logger.warning(
                "Reference markers share pixel %s, keeping ppm=%.3f "
                "theta=%.4f",
                self._origin_px,
                self._ppm,
                self._theta,
            )
            return

        self._ppm = distance_px / self._width_m
        self._theta = -math.atan2(dy, dx)

    # -------------------------------------------------------------------------
    # Calibration
    # -------------------------------------------------------------------------

    def calibrate(self, detections: Iterable[MarkerDetection]) -> None:
        """
        Update the reference pixels from this frame's detections and
        recompute ppm and theta.

        A reference marker missing from the frame leaves its pixel
        untouched. No error is raised for stale calibration.
        """

        seen = []
        for detection in detections:
            if detection.id not in self.REFERENCE_MARKER_IDS:
                continue
            if len(detection.corners) < 1:
                continue

            corner = detection.corners[self.REFERENCE_CORNER]
            pixel = (int(corner[0]), int(corner[1]))
            with self._lock:
                if detection.id == self.ORIGIN_MARKER_ID:
                    self._origin_px = pixel
                else:
                    self._axis_px = pixel
            seen.append(detection.id)

        if len(seen) < len(self.REFERENCE_MARKER_IDS):
            logger.debug("Calibration partly stale, saw ids %s", seen)

        with self._lock:
            self._recompute()

    def set_size(self, width_m: float, height_m: float) -> None:
        """
        Reconfigure the physical arena size. The new width is used from
        the next calibrate() onward.

        Raises:
            ValueError: If either dimension is not positive.
        """

        self._validate_size(width_m, height_m)
        with self._lock:
            self._width_m = float(width_m)
            self._height_m = float(height_m)

    # -------------------------------------------------------------------------
    # Accessors
    # -------------------------------------------------------------------------

    def snapshot(
        self,
    ) -> Tuple[Tuple[int, int], Tuple[int, int], float, float]:
        """Return (origin_px, axis_px, ppm, theta) read atomically."""
        with self._lock:
            return self._origin_px, self._axis_px, self._ppm, self._theta

    @property
    def ppm(self) -> float:
        with self._lock:
            return self._ppm

    @property
    def theta(self) -> float:
        with self._lock:
            return self._theta

    @property
    def size(self) -> Tuple[float, float]:
        with self._lock:
            return self._width_m, self._height_m

    # -------------------------------------------------------------------------
    # Conversions
    # -------------------------------------------------------------------------

    def to_pixel(self, x: float, y: float) -> Tuple[float, float]:
        """
        Convert an arena point in meters to a (sub)pixel image point.
        """

        with self._lock:
            origin_px, ppm, theta = self._origin_px, self._ppm, self._theta

        a = x * ppm
        b = y * ppm
        c, s = math.cos(theta), math.sin(theta)

        fx = a * c - b * s
        fy = a * s + b * c

        return origin_px[0] + fx, origin_px[1] - fy

    def to_pixel_int(self, x: float, y: float) -> Tuple[int, int]:
        """to_pixel() truncated to integers for OpenCV drawing calls."""
        px, py = self.to_pixel(x, y)
        return int(px), int(py)

    def to_arena(self, px: float, py: float) -> Tuple[float, float]:
        """
        Convert an image point to arena meters. No marker centre
        correction is applied.
        """

        with self._lock:
            origin_px, ppm, theta = self._origin_px, self._ppm, self._theta

        a, b = self._derotate(px, py, origin_px, theta)
        return a / ppm, b / ppm

    def to_arena_center(
        self, corner0_px: Sequence[float], corner1_px: Sequence[float]
    ) -> Position:
        """
        Compute a marker's centre position and heading from its
        reference corner and heading corner.

        Args:
            corner0_px: Reference corner (x, y) in pixels.
            corner1_px: Heading corner (x, y) in pixels.

        Returns:
            Position: Marker centre in meters and heading in radians.
        """

        with self._lock:
            origin_px, ppm, theta = self._origin_px, self._ppm, self._theta

        edge = np.subtract(corner1_px[:2], corner0_px[:2]).astype(float)
        heading_px = math.atan2(edge[1], edge[0])
        theta_marker = theta - heading_px

        a, b = self._derotate(corner0_px[0], corner0_px[1], origin_px, theta)

        side_px = float(np.linalg.norm(edge))
        d_a, d_b = marker_center_offset(side_px, theta_marker)
        a += d_a
        b += d_b

        return Position(a / ppm, b / ppm, theta_marker)

    @staticmethod
    def _derotate(
        px: float, py: float, origin_px: Tuple[int, int], theta: float
    ) -> Tuple[float, float]:
        # Flip y so both frames grow upward before undoing the rotation
        fx = px - origin_px[0]
        fy = origin_px[1] - py
        c, s = math.cos(theta), math.sin(theta)

        a = fx * c + fy * s
        b = fy * c - fx * s
        return a, b
