"""
Randomized mission layouts.

A mission is one start pose, three obstacles and one target. Obstacles
0 and 1 sit in the two near quadrants. A coin flip puts the target in
one of the far quadrants and the last obstacle in the other, pushed away
from the target so the robot always has a clear approach.

Every position is drawn from SAMPLING_STEPS evenly spaced values of its
valid interval, so layouts are reproducible from the generator seed.
Obstacles 0 and 1 are not checked against each other and may overlap.
"""

from typing import Optional, Sequence, Tuple

import numpy as np

from .base import ArenaBase
from .errors import ArenaConfigurationError
from .types import Mission, Obstacle, Position, Quadrant, TargetLocation

Bounds = Tuple[float, float, float, float]


class Randomizer(ArenaBase):
    """
    Generator of self-consistent missions.

    Usage:
        randomizer = Randomizer(seed=42)
        mission = randomizer.generate()

    Raises:
        ArenaConfigurationError: If the quadrant bounds are inverted or
            too small to fit an obstacle or the target.
    """

    NEAR_QUADRANTS = (Quadrant.NEAR_UPPER, Quadrant.NEAR_LOWER)
    FAR_QUADRANTS = (Quadrant.FAR_LOWER, Quadrant.FAR_UPPER)

    def __init__(
        self,
        quadrant_bounds: Optional[Sequence[Sequence[float]]] = None,
        seed: Optional[int] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Args:
            quadrant_bounds: Four (min x, max x, min y, max y) boxes in
                Quadrant order. Defaults to QUADRANT_BOUNDS.
            seed (int, optional): Seed for a new numpy Generator.
            rng (np.random.Generator, optional): Generator to draw from.
                Takes precedence over seed.
        """

        if quadrant_bounds is None:
            quadrant_bounds = self.QUADRANT_BOUNDS

        self._bounds = tuple(
            tuple(float(v) for v in bounds) for bounds in quadrant_bounds
        )
        self._validate_bounds()

        self._rng = rng if rng is not None else np.random.default_rng(seed)

    def bounds(self, quadrant: Quadrant) -> Bounds:
        return self._bounds[quadrant]

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def _validate_bounds(self) -> None:
        if len(self._bounds) != len(Quadrant):
            raise ArenaConfigurationError(
                f"Randomizer: expected {len(Quadrant)} quadrant bounds, "
                f"got {len(self._bounds)}."
            )

        for quadrant in Quadrant:
            bounds = self._bounds[quadrant]
            if len(bounds) != 4:
                raise ArenaConfigurationError(
                    f"Randomizer: quadrant {quadrant.name} needs "
                    f"(min x, max x, min y, max y), got {bounds}."
                )

            min_x, max_x, min_y, max_y = bounds
            if max_x <= min_x or max_y <= min_y:
                raise ArenaConfigurationError(
                    f"Randomizer: quadrant {quadrant.name} has inverted "
                    f"bounds {bounds}."
                )

            if min(max_x - min_x, max_y - min_y) <= self.MAJOR_OBSTACLE_LONG_M:
                raise ArenaConfigurationError(
                    f"Randomizer: quadrant {quadrant.name} is too small "
                    f"for a {self.MAJOR_OBSTACLE_LONG_M} m obstacle."
                )

        # Worst case: the neighbouring obstacle centre at its quadrant edge
        for quadrant in self.FAR_QUADRANTS:
            neighbor_max_x = self._bounds[quadrant.neighbor][1]
            lo_x, hi_x = self._target_x_range(quadrant, neighbor_max_x)
            lo_y, hi_y = self._target_y_range(
                quadrant, self.MAJOR_OBSTACLE_LONG_M
            )
            if hi_x <= lo_x or hi_y <= lo_y:
                raise ArenaConfigurationError(
                    f"Randomizer: no room for the target in quadrant "
                    f"{quadrant.name}."
                )

    # -------------------------------------------------------------------------
    # Sampling helpers
    # -------------------------------------------------------------------------

    def _draw(self, n: int) -> int:
        return int(self._rng.integers(n))

    def _sample(self, lo: float, hi: float) -> float:
        """One of SAMPLING_STEPS evenly spaced values in [lo, hi)."""
        step = self._draw(self.SAMPLING_STEPS)
        return lo + step * (hi - lo) / self.SAMPLING_STEPS

    def _coin(self) -> bool:
        return self._draw(2) == 1

    # -------------------------------------------------------------------------
    # Mission pieces
    # -------------------------------------------------------------------------

    def _random_start(self) -> Position:
        lane = self._draw(self.START_LANE_COUNT)
        heading = self._draw(len(self.START_HEADINGS_RAD))
        return Position(
            self.START_X_M,
            self.START_LANE_FIRST_Y_M + lane * self.START_LANE_SPACING_M,
            self.START_HEADINGS_RAD[heading],
        )

    def _random_dimensions(self, major: bool) -> Tuple[float, float]:
        if major:
            long_m = self.MAJOR_OBSTACLE_LONG_M
            short_m = self.MAJOR_OBSTACLE_SHORT_M
        else:
            long_m = self.MINOR_OBSTACLE_LONG_M
            short_m = self.MINOR_OBSTACLE_SHORT_M

        # Long axis horizontal or vertical
        if self._coin():
            return long_m, short_m
        return short_m, long_m

    def _place_obstacle(
        self, quadrant: Quadrant, width: float, height: float, major: bool
    ) -> Obstacle:
        min_x, max_x, min_y, max_y = self._bounds[quadrant]
        x = self._sample(min_x, max_x - width)
        # y is the top edge, so the footprint ends at y - height >= min_y
        y = self._sample(min_y + height, max_y)
        return Obstacle(x, y, width, height, quadrant, major)

    def _target_x_range(
        self, quadrant: Quadrant, neighbor_center_x: float
    ) -> Tuple[float, float]:
        min_x, max_x, _, _ = self._bounds[quadrant]
        lo = max(min_x, neighbor_center_x + self.OBSTACLE_CLEARANCE_M)
        return (
            lo + self.TARGET_DIAMETER_M,
            max_x - self.TARGET_FAR_EDGE_MARGIN_M,
        )

    def _target_y_range(
        self, quadrant: Quadrant, paired_height: float
    ) -> Tuple[float, float]:
        """
        Target centre y range inside quadrant, narrowed so the obstacle
        in the opposite quadrant still fits once pushed away.
        """

        _, _, min_y, max_y = self._bounds[quadrant]
        _, _, opp_min_y, opp_max_y = self._bounds[quadrant.opposite]
        separation = self.OBSTACLE_CLEARANCE_M + self.TARGET_DIAMETER_M / 2

        lo = min_y + self.TARGET_DIAMETER_M
        hi = max_y - self.TARGET_DIAMETER_M

        if self._is_above(quadrant.opposite, quadrant):
            hi = min(hi, opp_max_y - paired_height - separation)
        else:
            lo = max(lo, opp_min_y + paired_height + separation)

        return lo, hi

    def _is_above(self, quadrant: Quadrant, other: Quadrant) -> bool:
        _, _, min_y, max_y = self._bounds[quadrant]
        _, _, other_min_y, other_max_y = self._bounds[other]
        return min_y + max_y > other_min_y + other_max_y

    def _place_target(
        self, quadrant: Quadrant, neighbor: Obstacle, paired_height: float
    ) -> TargetLocation:
        lo_x, hi_x = self._target_x_range(quadrant, neighbor.center[0])
        lo_y, hi_y = self._target_y_range(quadrant, paired_height)
        return TargetLocation(
            self._sample(lo_x, hi_x),
            self._sample(lo_y, hi_y),
            diameter=self.TARGET_DIAMETER_M,
            quadrant=quadrant,
        )

    def _place_paired_obstacle(
        self,
        quadrant: Quadrant,
        width: float,
        height: float,
        target: TargetLocation,
        major: bool,
    ) -> Obstacle:
        """
        Place the obstacle sharing the far half with the target, then
        clamp it so its near edge stays clear of the target.
        """

        obstacle = self._place_obstacle(quadrant, width, height, major)
        separation = self.OBSTACLE_CLEARANCE_M + target.radius

        if self._is_above(quadrant, target.quadrant):
            y = max(obstacle.y, target.y + separation + height)
        else:
            y = min(obstacle.y, target.y - separation)

        return Obstacle(obstacle.x, y, width, height, quadrant, major)

    # -------------------------------------------------------------------------
    # Main interface
    # -------------------------------------------------------------------------

    def generate(self) -> Mission:
        """
        Draw a new mission. Never fails for validated bounds.

        Returns:
            Mission: Start pose, obstacles in slot order 0..2, target.
        """

        start = self._random_start()

        major_index = self._draw(self.NUM_OBSTACLES)
        dimensions = [
            self._random_dimensions(i == major_index)
            for i in range(self.NUM_OBSTACLES)
        ]

        obstacles = [
            self._place_obstacle(quadrant, *dimensions[i], i == major_index)
            for i, quadrant in enumerate(self.NEAR_QUADRANTS)
        ]

        if self._coin():
            target_quadrant = Quadrant.FAR_LOWER
        else:
            target_quadrant = Quadrant.FAR_UPPER

        neighbor = next(
            o for o in obstacles if o.quadrant == target_quadrant.neighbor
        )
        paired_width, paired_height = dimensions[2]
        target = self._place_target(target_quadrant, neighbor, paired_height)

        obstacles.append(
            self._place_paired_obstacle(
                target_quadrant.opposite,
                paired_width,
                paired_height,
                target,
                major_index == 2,
            )
        )

        return Mission(start, tuple(obstacles), target)
