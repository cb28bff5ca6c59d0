"""
Shared configuration constants for the arena components.

Every tunable value used by the coordinate transform, the marker
registry, the mission randomizer and the overlay renderer lives here as
a class attribute of ArenaBase. Components inherit from ArenaBase so
that a subclass can override any constant in one place.
"""

import math


class ArenaBase:
    """
    Class-level configuration shared by all arena components.
    """

    # -------------------------------------------------------------------------
    # Marker Constants
    # -------------------------------------------------------------------------

    # Fiducial IDs used only for calibration
    ORIGIN_MARKER_ID = 0
    AXIS_MARKER_ID = 1
    REFERENCE_MARKER_IDS = (ORIGIN_MARKER_ID, AXIS_MARKER_ID)

    # Corner indices inside a detection
    REFERENCE_CORNER = 0
    HEADING_CORNER = 1
    MIN_CORNERS = 2

    # -------------------------------------------------------------------------
    # Arena Geometry Constants (meters)
    # -------------------------------------------------------------------------

    DEFAULT_WIDTH_M = 4.0
    DEFAULT_HEIGHT_M = 2.0

    # Calibration used until reference markers are seen
    DEFAULT_ORIGIN_PX = (500, 500)
    DEFAULT_AXIS_PX = (600, 600)

    # -------------------------------------------------------------------------
    # Mission Constants (meters / radians)
    # -------------------------------------------------------------------------

    TARGET_DIAMETER_M = 0.18
    CUSTOM_POINT_RADIUS_M = 0.09

    MAJOR_OBSTACLE_LONG_M = 0.41
    MAJOR_OBSTACLE_SHORT_M = 0.23
    MINOR_OBSTACLE_LONG_M = 0.32
    MINOR_OBSTACLE_SHORT_M = 0.13
    NUM_OBSTACLES = 3

    # Min x, Max x, Min y, Max y for each quadrant
    QUADRANT_BOUNDS = (
        (1.4, 2.25, 1.0, 1.8),
        (1.4, 2.25, 0.2, 1.0),
        (2.25, 3.8, 0.2, 1.0),
        (2.25, 3.8, 1.0, 1.8),
    )

    # Minimum distance kept between the target and nearby obstacles
    OBSTACLE_CLEARANCE_M = 0.5
    # The target never gets closer than this to the far x edge
    TARGET_FAR_EDGE_MARGIN_M = 0.3

    # Uniform sampling resolution (number of discrete steps)
    SAMPLING_STEPS = 100

    START_X_M = 0.35
    START_LANE_FIRST_Y_M = 0.4
    START_LANE_SPACING_M = 0.3
    START_LANE_COUNT = 5
    START_HEADINGS_RAD = (-math.pi, -math.pi / 2, 0.0, math.pi / 2)

    # -------------------------------------------------------------------------
    # Visualization Constants (BGR format for OpenCV)
    # -------------------------------------------------------------------------

    RED = (0, 0, 255)
    GREEN = (0, 255, 0)
    TARGET_BLUE = (255, 200, 0)

    LINE_THICKNESS = 2
    ARROW_THICKNESS = 3
    ARROW_LINE_TYPE = 8
    MARKER_ARROW_TIP = 0.5
    START_ARROW_TIP = 0.3

    START_PAD_SIZE_M = 0.35
    START_ARROW_HALF_LENGTH_M = 0.1
