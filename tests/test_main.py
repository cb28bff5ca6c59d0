"""
Demo Script Tests
=================

Tests for the command-line demo helpers. The camera loop itself is not
run, the arena is replaced with a Mock where key handling is tested.
"""

import sys
import os

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import unittest
from unittest.mock import Mock, patch
from arena_tools import Arena, MarkerDetection
from arena_tools import main as demo


class TestDemo(unittest.TestCase):
    """
    Argument parsing, key handling and status formatting.
    """

    def test_parser_defaults(self):
        """
        Test the parser falls back to the arena defaults.
        """

        args = demo.build_parser().parse_args([])

        self.assertEqual(args.camera, 0)
        self.assertEqual(args.width, 4.0)
        self.assertEqual(args.height, 2.0)
        self.assertIsNone(args.seed)
        self.assertIsNone(args.custom)
        self.assertFalse(args.verbose)

    def test_parser_options(self):
        """
        Test every option is parsed.
        """

        args = demo.build_parser().parse_args(
            ["--camera", "2", "--width", "3.5", "--height", "1.5",
             "--seed", "9", "--custom", "1.0", "0.5", "-v"]
        )

        self.assertEqual(args.camera, 2)
        self.assertEqual(args.width, 3.5)
        self.assertEqual(args.height, 1.5)
        self.assertEqual(args.seed, 9)
        self.assertEqual(args.custom, [1.0, 0.5])
        self.assertTrue(args.verbose)

    def test_handle_key_quit(self):
        """
        Test 'q' stops the loop.
        """

        self.assertFalse(demo.handle_key(Mock(), ord("q"), {}))

    def test_handle_key_randomize(self):
        """
        Test 'r' randomizes the arena.
        """

        arena = Arena(seed=1, canvas=Mock())
        with patch("builtins.print") as mock_print:
            self.assertTrue(demo.handle_key(arena, ord("r"), {}))

        self.assertIn("New mission", mock_print.call_args[0][0])

    def test_handle_key_toggles(self):
        """
        Test 'o', 'd' and 'c' flip their overlay flags.
        """

        arena = Mock()
        flags = {"obstacles": True, "destination": True, "custom": False}

        demo.handle_key(arena, ord("o"), flags)
        demo.handle_key(arena, ord("d"), flags)
        demo.handle_key(arena, ord("c"), flags)

        arena.set_draw_obstacles.assert_called_once_with(False)
        arena.set_draw_destination.assert_called_once_with(False)
        arena.set_draw_custom.assert_called_once_with(True)
        self.assertEqual(
            flags, {"obstacles": False, "destination": False, "custom": True}
        )

    def test_handle_key_other(self):
        """
        Test an unbound key (or no key, 255) changes nothing.
        """

        arena = Mock()
        self.assertTrue(demo.handle_key(arena, 255, {}))
        arena.assert_not_called()
        arena.randomize.assert_not_called()

    def test_format_status(self):
        """
        Test the status lists visible tracked markers.
        """

        arena = Arena(canvas=Mock())
        self.assertEqual(demo.format_status(arena), "no tracked markers")

        arena.process_markers(
            [
                MarkerDetection(0, ((100, 400), (140, 400))),
                MarkerDetection(1, ((500, 400), (540, 400))),
                MarkerDetection(3, ((200, 300), (200, 340))),
            ]
        )
        self.assertEqual(demo.format_status(arena), "#3 (0.80, 0.80, -1.57)")

    def test_run_camera_unavailable(self):
        """
        Test run returns 1 when the camera cannot be opened.
        """

        args = demo.build_parser().parse_args(["--seed", "1"])
        camera = Mock()
        camera.isOpened.return_value = False

        with patch.object(demo.cv, "VideoCapture", return_value=camera):
            with patch("builtins.print"):
                self.assertEqual(demo.run(args), 1)


if __name__ == "__main__":
    unittest.main()
