"""
Per-frame registry of tracked markers.

Every processed frame replaces the registry wholesale. A marker that is
not in the current frame is not in the registry, there is no tracking
or smoothing across frames.
"""

import logging
import threading
from typing import Dict, Iterable, Optional

from .base import ArenaBase
from .transform import CoordinateTransform
from .types import Marker, MarkerDetection

logger = logging.getLogger(__name__)


class MarkerRegistry(ArenaBase):
    """
    Mapping from marker id to its arena position in the latest frame.

    The registry has its own lock, separate from the calibration lock,
    so a reader may see markers from frame N while the transform has
    already been calibrated from frame N + 1.
    """

    def __init__(self, transform: CoordinateTransform) -> None:
        self._transform = transform
        self._lock = threading.Lock()
        self._markers: Dict[int, Marker] = {}

    def __len__(self) -> int:
        with self._lock:
            return len(self._markers)

    def __contains__(self, marker_id: int) -> bool:
        with self._lock:
            return marker_id in self._markers

    def update(self, detections: Iterable[MarkerDetection]) -> None:
        """
        Replace the registry with this frame's non-reference markers.

        The new mapping is built first and swapped in under the lock, so
        readers see either the previous frame or this one in full.
        """

        markers = {}
        for detection in detections:
            if detection.id in self.REFERENCE_MARKER_IDS:
                continue
            if len(detection.corners) < self.MIN_CORNERS:
                logger.debug(
                    "Skipping marker %d with %d corner(s)",
                    detection.id,
                    len(detection.corners),
                )
                continue

            position = self._transform.to_arena_center(
                detection.corners[self.REFERENCE_CORNER],
                detection.corners[self.HEADING_CORNER],
            )
            markers[detection.id] = Marker(detection.id, position)

        with self._lock:
            self._markers = markers

    def get(self, marker_id: int) -> Optional[Marker]:
        """Return the marker seen in the latest frame, or None."""
        with self._lock:
            return self._markers.get(marker_id)

    def snapshot(self) -> Dict[int, Marker]:
        """Return a copy of the latest frame's markers."""
        with self._lock:
            return dict(self._markers)
