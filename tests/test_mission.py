"""
MissionState Module Tests
=========================

Unit tests for the guarded cells and the independently locked mission
fields.
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import threading
import unittest
from arena_tools import (
    ArenaBase,
    GuardedCell,
    Mission,
    MissionState,
    Obstacle,
    Position,
    Quadrant,
    TargetLocation,
)


def run_in_thread(func, timeout=1.0):
    """Run func in a worker thread and report whether it finished."""
    worker = threading.Thread(target=func, daemon=True)
    worker.start()
    worker.join(timeout)
    return not worker.is_alive()


class TestGuardedCell(unittest.TestCase):
    """
    Tests for the single-value lock container.
    """

    def test_get_set(self):
        """
        Test set replaces the stored value.
        """

        cell = GuardedCell(1)
        cell.set(2)
        self.assertEqual(cell.get(), 2)

    def test_update(self):
        """
        Test update applies the function and returns the new value.
        """

        cell = GuardedCell(10)
        self.assertEqual(cell.update(lambda v: v + 5), 15)
        self.assertEqual(cell.get(), 15)

    def test_update_is_atomic(self):
        """
        Test concurrent increments are not lost.
        """

        cell = GuardedCell(0)

        def increment():
            for _ in range(1000):
                cell.update(lambda v: v + 1)

        workers = [threading.Thread(target=increment) for _ in range(8)]
        for worker in workers:
            worker.start()
        for worker in workers:
            worker.join()

        self.assertEqual(cell.get(), 8000)

    def test_get_blocks_while_locked(self):
        """
        Test readers wait for a holder of the cell lock.
        """

        cell = GuardedCell("a")
        with cell.lock:
            self.assertFalse(run_in_thread(cell.get, timeout=0.1))


class TestMissionState(unittest.TestCase):
    """
    Tests for the mission field groups and their lock independence.
    """

    def setUp(self):
        self.state = MissionState()

    def test_defaults(self):
        """
        Test the state starts with three obstacles, a target of the
        standard diameter and all overlays hidden.
        """

        self.assertEqual(len(self.state.get_obstacles()), 3)
        self.assertAlmostEqual(self.state.get_target().diameter, 0.18)
        self.assertFalse(self.state.draw_obstacles.get())
        self.assertFalse(self.state.draw_destination.get())
        self.assertFalse(self.state.draw_custom.get())

    def test_default_obstacles_inside_their_quadrants(self):
        """
        Test each default obstacle lies in the quadrant it is tagged with
        and exactly one is major.
        """

        obstacles = self.state.get_obstacles()
        for obstacle in obstacles:
            min_x, max_x, min_y, max_y = ArenaBase.QUADRANT_BOUNDS[
                obstacle.quadrant
            ]
            self.assertGreaterEqual(obstacle.x, min_x)
            self.assertLessEqual(obstacle.x + obstacle.width, max_x)
            self.assertGreaterEqual(obstacle.y - obstacle.height, min_y)
            self.assertLessEqual(obstacle.y, max_y)

        self.assertEqual(sum(o.major for o in obstacles), 1)
        self.assertEqual(
            [o.quadrant for o in obstacles],
            [Quadrant.NEAR_UPPER, Quadrant.NEAR_LOWER, Quadrant.FAR_UPPER],
        )

    def test_custom_point_axes_are_independent(self):
        """
        Test setting x keeps y and setting y keeps x.
        """

        self.state.set_custom_x(1.5)
        self.state.set_custom_y(0.25)
        self.state.set_custom_x(2.0)

        self.assertEqual(self.state.get_custom_point(), Position(2.0, 0.25))

    def test_draw_flags_are_independent(self):
        """
        Test each flag setter only changes its own flag.
        """

        self.state.set_draw_destination(True)

        self.assertTrue(self.state.draw_destination.get())
        self.assertFalse(self.state.draw_obstacles.get())
        self.assertFalse(self.state.draw_custom.get())

    def test_flag_setters_do_not_wait_for_mission_locks(self):
        """
        Test toggling flags and the custom point does not block while a
        mission is being written.
        """

        with self.state.mission_locks():
            self.assertTrue(
                run_in_thread(lambda: self.state.set_draw_obstacles(True))
            )
            self.assertTrue(
                run_in_thread(lambda: self.state.set_draw_destination(True))
            )
            self.assertTrue(
                run_in_thread(lambda: self.state.set_custom_x(1.0))
            )

        self.assertTrue(self.state.draw_obstacles.get())

    def test_get_target_waits_for_mission_locks(self):
        """
        Test the target snapshot is not readable mid-randomize.
        """

        with self.state.mission_locks():
            self.assertFalse(
                run_in_thread(self.state.get_target, timeout=0.1)
            )

    def test_apply_holds_both_locks_while_generating(self):
        """
        Test apply generates with the target and obstacle locks held
        and then stores the mission.
        """

        mission = Mission(
            Position(0.35, 1.0, 0.0),
            (
                Obstacle(1.5, 1.5, 0.32, 0.13, Quadrant.NEAR_UPPER),
                Obstacle(1.5, 0.8, 0.13, 0.32, Quadrant.NEAR_LOWER),
                Obstacle(3.0, 1.7, 0.41, 0.23, Quadrant.FAR_UPPER, True),
            ),
            TargetLocation(3.0, 0.5, quadrant=Quadrant.FAR_LOWER),
        )
        held = {}

        def generate():
            held["target"] = self.state.target.lock.locked()
            held["obstacles"] = self.state.obstacles.lock.locked()
            held["start"] = self.state.start.lock.locked()
            return mission

        result = self.state.apply(generate)

        self.assertIs(result, mission)
        self.assertEqual(
            held, {"target": True, "obstacles": True, "start": False}
        )
        self.assertEqual(self.state.get_obstacles(), mission.obstacles)
        self.assertEqual(self.state.get_target(), mission.target)
        self.assertEqual(self.state.get_start(), mission.start)

    def test_target_snapshot_is_immutable(self):
        """
        Test callers cannot change the stored target through a snapshot.
        """

        target = self.state.get_target()
        with self.assertRaises(AttributeError):
            target.x = 5.0


if __name__ == "__main__":
    unittest.main()
