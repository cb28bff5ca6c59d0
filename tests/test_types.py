"""
Value Type Tests
================

Tests for the ArUco detection adapter and the quadrant relations used by
the mission layout.
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from unittest.mock import Mock
import numpy as np
from arena_tools import (
    Arena,
    MarkerDetection,
    Obstacle,
    Quadrant,
    detections_from_aruco,
)


def aruco_corners(x, y, side=40):
    """Corner array shaped like cv.aruco output for one marker."""
    return np.array(
        [[[x, y], [x + side, y], [x + side, y + side], [x, y + side]]],
        dtype=np.float32,
    )


class TestDetectionsFromAruco(unittest.TestCase):
    """
    Conversion of cv.aruco (corners, ids) output.
    """

    def test_column_ids(self):
        """
        Test (1, 4, 2) corner arrays with (N, 1) ids keep id and corner
        order.
        """

        corners = (aruco_corners(100, 400), aruco_corners(200, 300))
        ids = np.array([[0], [5]], dtype=np.int32)

        detections = detections_from_aruco(corners, ids)

        self.assertEqual([d.id for d in detections], [0, 5])
        self.assertEqual(
            detections[1],
            MarkerDetection(
                5,
                (
                    (200.0, 300.0),
                    (240.0, 300.0),
                    (240.0, 340.0),
                    (200.0, 340.0),
                ),
            ),
        )
        self.assertIsInstance(detections[1].id, int)
        self.assertIsInstance(detections[1].corners[0][0], float)

    def test_flat_ids(self):
        """
        Test a flat (N,) ids array and (4, 2) corner arrays.
        """

        corners = [aruco_corners(10, 20)[0], aruco_corners(50, 60)[0]]
        ids = np.array([7, 3])

        detections = detections_from_aruco(corners, ids)

        self.assertEqual([d.id for d in detections], [7, 3])
        self.assertEqual(detections[0].corners[0], (10.0, 20.0))
        self.assertEqual(detections[1].corners[1], (90.0, 60.0))

    def test_no_markers(self):
        """
        Test ids of None (nothing detected) gives an empty list.
        """

        self.assertEqual(detections_from_aruco((), None), [])

    def test_feeds_process_markers(self):
        """
        Test adapted detections calibrate the arena and track a marker.
        """

        corners = (
            aruco_corners(100, 400),
            aruco_corners(500, 400),
            aruco_corners(200, 300),
        )
        ids = np.array([[0], [1], [5]], dtype=np.int32)
        arena = Arena(canvas=Mock())

        arena.process_markers(detections_from_aruco(corners, ids))

        self.assertAlmostEqual(arena.transform.ppm, 100.0)
        marker = arena.get_position(5)
        self.assertIsNotNone(marker)
        self.assertAlmostEqual(marker.position.x, 1.2)
        self.assertAlmostEqual(marker.position.y, 0.8)


class TestQuadrant(unittest.TestCase):
    """
    Quadrant pairing used when placing the target and obstacles.
    """

    def test_opposite(self):
        self.assertEqual(Quadrant.FAR_LOWER.opposite, Quadrant.FAR_UPPER)
        self.assertEqual(Quadrant.FAR_UPPER.opposite, Quadrant.FAR_LOWER)

    def test_neighbor(self):
        self.assertEqual(Quadrant.FAR_LOWER.neighbor, Quadrant.NEAR_LOWER)
        self.assertEqual(Quadrant.FAR_UPPER.neighbor, Quadrant.NEAR_UPPER)

    def test_obstacle_center(self):
        """
        Test the centre is measured down from the top edge.
        """

        obstacle = Obstacle(1.0, 2.0, 0.4, 0.2, Quadrant.NEAR_UPPER)
        x, y = obstacle.center
        self.assertAlmostEqual(x, 1.2)
        self.assertAlmostEqual(y, 1.9)


if __name__ == "__main__":
    unittest.main()
