"""
Shared mission state.

The mission is split into field groups that are each guarded by their
own lock: start pose, obstacles, target, custom point, and one cell per
draw flag. A reader that touches several groups takes each lock in
turn, so it may combine obstacles from one instant with a target from a
slightly later one. Only randomize() holds more than one lock, and it
always takes the target lock before the obstacle lock.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Callable, Generic, Iterator, Tuple, TypeVar

from .base import ArenaBase
from .types import Mission, Obstacle, Position, Quadrant, TargetLocation

T = TypeVar("T")


class GuardedCell(Generic[T]):
    """
    A single value protected by its own lock.

    Reads return the stored value. Values stored here are immutable
    (frozen dataclasses, tuples, bools) so a returned value is already
    a snapshot.
    """

    def __init__(self, value: T) -> None:
        self.lock = threading.Lock()
        self._value = value

    def get(self) -> T:
        with self.lock:
            return self._value

    def set(self, value: T) -> None:
        with self.lock:
            self._value = value

    def update(self, func: Callable[[T], T]) -> T:
        """Apply func to the current value atomically and store the result."""
        with self.lock:
            self._value = func(self._value)
            return self._value

    def set_locked(self, value: T) -> None:
        """Store a value while the caller already holds self.lock."""
        self._value = value


class MissionState(ArenaBase):
    """
    Independently locked mission fields.

    Before the first randomize() call the obstacles hold a fixed layout
    with one standard-sized obstacle inside each slot's quadrant.
    """

    def __init__(self) -> None:
        self.start = GuardedCell(Position())
        self.obstacles: GuardedCell[Tuple[Obstacle, ...]] = GuardedCell(
            (
                Obstacle(
                    1.6,
                    1.6,
                    self.MINOR_OBSTACLE_LONG_M,
                    self.MINOR_OBSTACLE_SHORT_M,
                    Quadrant.NEAR_UPPER,
                ),
                Obstacle(
                    1.6,
                    0.8,
                    self.MAJOR_OBSTACLE_LONG_M,
                    self.MAJOR_OBSTACLE_SHORT_M,
                    Quadrant.NEAR_LOWER,
                    major=True,
                ),
                Obstacle(
                    2.8,
                    1.6,
                    self.MINOR_OBSTACLE_LONG_M,
                    self.MINOR_OBSTACLE_SHORT_M,
                    Quadrant.FAR_UPPER,
                ),
            )
        )
        self.target = GuardedCell(
            TargetLocation(diameter=self.TARGET_DIAMETER_M)
        )
        self.custom_point = GuardedCell(Position())

        self.draw_obstacles = GuardedCell(False)
        self.draw_destination = GuardedCell(False)
        self.draw_custom = GuardedCell(False)

    # -------------------------------------------------------------------------
    # Snapshots
    # -------------------------------------------------------------------------

    def get_start(self) -> Position:
        return self.start.get()

    def get_obstacles(self) -> Tuple[Obstacle, ...]:
        return self.obstacles.get()

    def get_target(self) -> TargetLocation:
        return self.target.get()

    def get_custom_point(self) -> Position:
        return self.custom_point.get()

    # -------------------------------------------------------------------------
    # Setters
    # -------------------------------------------------------------------------

    def set_custom_x(self, x: float) -> None:
        self.custom_point.update(
            lambda p: Position(float(x), p.y, p.theta)
        )

    def set_custom_y(self, y: float) -> None:
        self.custom_point.update(
            lambda p: Position(p.x, float(y), p.theta)
        )

    def set_draw_obstacles(self, draw: bool) -> None:
        self.draw_obstacles.set(bool(draw))

    def set_draw_destination(self, draw: bool) -> None:
        self.draw_destination.set(bool(draw))

    def set_draw_custom(self, draw: bool) -> None:
        self.draw_custom.set(bool(draw))

    # -------------------------------------------------------------------------
    # Mission replacement
    # -------------------------------------------------------------------------

    @contextmanager
    def mission_locks(self) -> Iterator[None]:
        """Hold the target and obstacle locks, in that order."""
        with self.target.lock, self.obstacles.lock:
            yield

    def apply(self, generate: Callable[[], Mission]) -> Mission:
        """
        Generate a mission and store it.

        The target and obstacles are generated and written while both of
        their locks are held. The start pose is written under its own
        lock afterwards.
        """

        with self.mission_locks():
            mission = generate()
            self.obstacles.set_locked(tuple(mission.obstacles))
            self.target.set_locked(mission.target)

        self.start.set(mission.start)
        return mission
