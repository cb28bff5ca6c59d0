# Live demo: camera -> ArUco detection -> arena calibration and overlay.
import os
import sys
import logging
import argparse
from typing import List, Optional

import cv2 as cv

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from arena_tools import Arena, ArenaBase, detections_from_aruco


ARUCO_DICTIONARY = cv.aruco.DICT_4X4_50
WINDOW_NAME = "Arena"
REFRESH_RATE_MS = 30

# Tracked marker ids printed in the status line
STATUS_MARKER_IDS = (2, 3, 4, 5)

KEY_QUIT = ord("q")
KEY_RANDOMIZE = ord("r")
KEY_TOGGLE_OBSTACLES = ord("o")
KEY_TOGGLE_DESTINATION = ord("d")
KEY_TOGGLE_CUSTOM = ord("c")


# -----------------------------------------------------------------------------
# Setup Functions
# -----------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Calibrate a camera against the arena and overlay a "
        "randomized mission."
    )
    parser.add_argument("--camera", type=int, default=0, help="Camera index")
    parser.add_argument(
        "--width",
        type=float,
        default=ArenaBase.DEFAULT_WIDTH_M,
        help="Distance between reference markers 0 and 1 [m]",
    )
    parser.add_argument(
        "--height",
        type=float,
        default=ArenaBase.DEFAULT_HEIGHT_M,
        help="Arena height [m]",
    )
    parser.add_argument(
        "--seed", type=int, default=None, help="Mission randomizer seed"
    )
    parser.add_argument(
        "--custom",
        type=float,
        nargs=2,
        metavar=("X", "Y"),
        default=None,
        help="Show a custom debug point at X Y [m]",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Debug logging"
    )
    return parser


def create_detector() -> cv.aruco.ArucoDetector:
    dictionary = cv.aruco.getPredefinedDictionary(ARUCO_DICTIONARY)
    parameters = cv.aruco.DetectorParameters()
    return cv.aruco.ArucoDetector(dictionary, parameters)


def handle_key(arena: Arena, key: int, flags: dict) -> bool:
    """
    Apply a key press to the arena. Returns False when the loop should
    stop.
    """

    if key == KEY_QUIT:
        return False

    if key == KEY_RANDOMIZE:
        mission = arena.randomize()
        target = mission.target
        print(
            f"Arena: New mission, target ({target.x:.2f}, {target.y:.2f}) "
            f"in {target.quadrant.name}"
        )
    elif key == KEY_TOGGLE_OBSTACLES:
        flags["obstacles"] = not flags["obstacles"]
        arena.set_draw_obstacles(flags["obstacles"])
    elif key == KEY_TOGGLE_DESTINATION:
        flags["destination"] = not flags["destination"]
        arena.set_draw_destination(flags["destination"])
    elif key == KEY_TOGGLE_CUSTOM:
        flags["custom"] = not flags["custom"]
        arena.set_draw_custom(flags["custom"])

    return True


def format_status(arena: Arena) -> str:
    parts = []
    for marker_id in STATUS_MARKER_IDS:
        marker = arena.get_position(marker_id)
        if marker is not None:
            p = marker.position
            parts.append(f"#{marker_id} ({p.x:.2f}, {p.y:.2f}, {p.theta:.2f})")
    return " | ".join(parts) if parts else "no tracked markers"


# -----------------------------------------------------------------------------
# Main Loop
# -----------------------------------------------------------------------------


def run(args: argparse.Namespace) -> int:
    arena = Arena(args.width, args.height, seed=args.seed)
    arena.randomize()

    flags = {"obstacles": True, "destination": True, "custom": False}
    arena.set_draw_obstacles(flags["obstacles"])
    arena.set_draw_destination(flags["destination"])

    if args.custom is not None:
        arena.set_custom_point(*args.custom)
        flags["custom"] = True
        arena.set_draw_custom(True)

    detector = create_detector()
    camera = cv.VideoCapture(args.camera)
    if not camera.isOpened():
        print(f"Arena: Could not open camera {args.camera}")
        return 1

    print("Arena: r = randomize, o/d/c = toggle overlays, q = quit")

    last_visible = None
    try:
        while True:
            ok, frame = camera.read()
            if not ok:
                print("Arena: Camera read failed")
                break

            gray = cv.cvtColor(frame, cv.COLOR_BGR2GRAY)
            corners, ids, _ = detector.detectMarkers(gray)

            arena.process_markers(detections_from_aruco(corners, ids), frame)
            arena.draw(frame)
            cv.imshow(WINDOW_NAME, frame)

            visible = sorted(arena.markers())
            if visible != last_visible:
                print(f"Arena: {format_status(arena)}")
                last_visible = visible

            key = cv.waitKey(REFRESH_RATE_MS) & 0xFF
            if not handle_key(arena, key, flags):
                break
    finally:
        camera.release()
        cv.destroyAllWindows()

    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
