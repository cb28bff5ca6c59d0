"""
Overlay drawing for the arena.

ArenaRenderer projects mission state into the camera image through a
CoordinateTransform. The primitive drawing calls go through a canvas
object so any surface that offers polylines, ellipses and arrows can be
used. OpenCVCanvas is the default and draws on numpy BGR images.
"""

import math
from typing import Iterable, Optional, Sequence, Tuple

import cv2 as cv
import numpy as np

from .base import ArenaBase
from .mission import MissionState
from .transform import CoordinateTransform
from .types import MarkerDetection

Point = Tuple[int, int]
Color = Tuple[int, int, int]


class OpenCVCanvas:
    """Drawing primitives backed by OpenCV."""

    def polylines(
        self,
        image: np.ndarray,
        points: Sequence[Point],
        closed: bool,
        color: Color,
        thickness: int,
    ) -> None:
        contour = np.array(points, dtype=np.int32).reshape((-1, 1, 2))
        cv.polylines(image, [contour], closed, color, thickness)

    def ellipse(
        self,
        image: np.ndarray,
        center: Point,
        axes: Tuple[int, int],
        color: Color,
        thickness: int,
    ) -> None:
        cv.ellipse(image, center, axes, 0, 0, 360, color, thickness)

    def arrowed_line(
        self,
        image: np.ndarray,
        start: Point,
        end: Point,
        color: Color,
        thickness: int,
        tip_length: float,
    ) -> None:
        cv.arrowedLine(
            image,
            start,
            end,
            color,
            thickness,
            ArenaBase.ARROW_LINE_TYPE,
            0,
            tip_length,
        )


class ArenaRenderer(ArenaBase):
    """
    Draws obstacles, target, custom point, start pad and detected
    markers onto a frame.

    draw() reads each mission field group under its own lock, one after
    another. A frame may therefore show obstacles and a target taken a
    moment apart while randomize() runs.
    """

    def __init__(
        self,
        transform: CoordinateTransform,
        state: MissionState,
        canvas=None,
    ) -> None:
        self._transform = transform
        self._state = state
        self.canvas = canvas if canvas is not None else OpenCVCanvas()

    # -------------------------------------------------------------------------
    # Primitive helpers (arena meters)
    # -------------------------------------------------------------------------

    def draw_circle(
        self,
        image: np.ndarray,
        x: float,
        y: float,
        radius: float,
        color: Optional[Color] = None,
    ) -> None:
        """Draw a circle centred on an arena point, radius in meters."""

        radius_px = int(radius * self._transform.ppm)
        self.canvas.ellipse(
            image,
            self._transform.to_pixel_int(x, y),
            (radius_px, radius_px),
            color or self.TARGET_BLUE,
            self.LINE_THICKNESS,
        )

    def draw_rectangle(
        self,
        image: np.ndarray,
        x: float,
        y: float,
        width: float,
        height: float,
        color: Optional[Color] = None,
    ) -> None:
        """Draw a rectangle whose upper-left arena corner is (x, y)."""

        points = [
            self._transform.to_pixel_int(x, y),
            self._transform.to_pixel_int(x + width, y),
            self._transform.to_pixel_int(x + width, y - height),
            self._transform.to_pixel_int(x, y - height),
        ]
        self.canvas.polylines(
            image, points, True, color or self.GREEN, self.LINE_THICKNESS
        )

    # -------------------------------------------------------------------------
    # Overlays
    # -------------------------------------------------------------------------

    def draw(self, image: np.ndarray) -> np.ndarray:
        """
        Draw the mission overlay in place and return the image.
        """

        state = self._state

        if state.draw_obstacles.get():
            for obstacle in state.get_obstacles():
                self.draw_rectangle(
                    image,
                    obstacle.x,
                    obstacle.y,
                    obstacle.width,
                    obstacle.height,
                )

        if state.draw_destination.get():
            target = state.get_target()
            self.draw_circle(image, target.x, target.y, target.radius)

        if state.draw_custom.get():
            custom = state.get_custom_point()
            self.draw_circle(
                image, custom.x, custom.y, self.CUSTOM_POINT_RADIUS_M
            )

        start = state.get_start()
        half_pad = self.START_PAD_SIZE_M / 2
        self.draw_rectangle(
            image,
            start.x - half_pad,
            start.y + half_pad,
            self.START_PAD_SIZE_M,
            self.START_PAD_SIZE_M,
        )

        dx = self.START_ARROW_HALF_LENGTH_M * math.cos(start.theta)
        dy = self.START_ARROW_HALF_LENGTH_M * math.sin(start.theta)
        self.canvas.arrowed_line(
            image,
            self._transform.to_pixel_int(start.x - dx, start.y - dy),
            self._transform.to_pixel_int(start.x + dx, start.y + dy),
            self.GREEN,
            self.ARROW_THICKNESS,
            self.START_ARROW_TIP,
        )

        return image

    def draw_detections(
        self, image: np.ndarray, detections: Iterable[MarkerDetection]
    ) -> np.ndarray:
        """
        Outline every detection and add a heading arrow from corner 0 to
        corner 1 on tracked (non-reference) markers.
        """

        for detection in detections:
            corners = [(int(x), int(y)) for x, y in detection.corners]
            if len(corners) >= self.MIN_CORNERS:
                self.canvas.polylines(
                    image, corners, True, self.RED, self.LINE_THICKNESS
                )

            if (
                detection.id not in self.REFERENCE_MARKER_IDS
                and len(corners) >= self.MIN_CORNERS
            ):
                self.canvas.arrowed_line(
                    image,
                    corners[self.REFERENCE_CORNER],
                    corners[self.HEADING_CORNER],
                    self.GREEN,
                    self.ARROW_THICKNESS,
                    self.MARKER_ARROW_TIP,
                )

        return image
