from __future__ import annotations

import math
import unittest

from fractalnav_core.core.viewport import MIN_PIXEL_EXTENT, PlaneBounds, Viewport


class ViewportResizeTests(unittest.TestCase):
    def test_resize_narrower_than_plane_widens_y_symmetrically(self) -> None:
        vp = Viewport(-2.0, 1.0, -1.0, 1.0, width=800, height=600)
        vp.resize(800, 600)
        self.assertEqual((vp.x_min, vp.x_max), (-2.0, 1.0))
        self.assertAlmostEqual(vp.y_min, -1.125)
        self.assertAlmostEqual(vp.y_max, 1.125)
        self.assertAlmostEqual(vp.plane_aspect_ratio, 800 / 600)

    def test_resize_wider_than_plane_widens_x_around_center(self) -> None:
        vp = Viewport(-2.0, 1.0, -1.0, 1.0, width=800, height=600)
        vp.resize(1000, 400)
        self.assertEqual((vp.y_min, vp.y_max), (-1.0, 1.0))
        self.assertAlmostEqual(vp.x_min, -0.5 - 2.5)
        self.assertAlmostEqual(vp.x_max, -0.5 + 2.5)

    def test_resize_preserves_aspect_and_center_for_many_sizes(self) -> None:
        sizes = [(1, 1), (3, 7), (640, 480), (1920, 1080), (123.5, 987.25), (4000, 10)]
        for w, h in sizes:
            with self.subTest(size=(w, h)):
                vp = Viewport(-0.75, 0.25, 0.1, 0.4, width=800, height=600)
                center = vp.center
                vp.resize(w, h)
                self.assertTrue(math.isclose(vp.plane_aspect_ratio, w / h, rel_tol=1e-12))
                self.assertAlmostEqual(vp.center[0], center[0], places=12)
                self.assertAlmostEqual(vp.center[1], center[1], places=12)

    def test_resize_reports_change(self) -> None:
        vp = Viewport(-2.0, 1.0, -1.0, 1.0, width=800, height=600)
        self.assertTrue(vp.resize(800, 600))
        self.assertFalse(vp.resize(800, 600))

    def test_resize_clamps_collapsed_window(self) -> None:
        vp = Viewport(width=800, height=600)
        vp.resize(0, -5)
        self.assertEqual((vp.width, vp.height), (MIN_PIXEL_EXTENT, MIN_PIXEL_EXTENT))
        self.assertTrue(math.isfinite(vp.x_scale))
        self.assertTrue(math.isfinite(vp.y_scale))
        self.assertLess(vp.y_min, vp.y_max)


class ViewportSnapshotTests(unittest.TestCase):
    def test_snapshot_is_independent_copy(self) -> None:
        vp = Viewport(-2.0, 1.0, -1.0, 1.0)
        snap = vp.snapshot()
        vp.translate(0.5, 0.5)
        self.assertEqual(snap, PlaneBounds(-2.0, 1.0, -1.0, 1.0))

    def test_restore_keeps_pixel_extents(self) -> None:
        vp = Viewport(-2.0, 1.0, -1.0, 1.0, width=800, height=600)
        snap = vp.snapshot()
        vp.resize(300, 300)
        vp.restore(snap)
        self.assertEqual(vp.snapshot(), snap)
        self.assertEqual((vp.width, vp.height), (300.0, 300.0))

    def test_view_snapshot_carries_pixel_size(self) -> None:
        vp = Viewport(-2.0, 1.0, -1.0, 1.0, width=320.7, height=200)
        view = vp.view_snapshot()
        self.assertEqual(view.bounds, vp.snapshot())
        self.assertEqual(view.pixel_size, (320, 200))

    def test_degenerate_bounds_rejected(self) -> None:
        vp = Viewport()
        with self.assertRaises(ValueError):
            vp.set_bounds(PlaneBounds(1.0, 1.0, -1.0, 1.0))
        with self.assertRaises(ValueError):
            vp.set_bounds(PlaneBounds(0.0, 1.0, float("nan"), 1.0))
        with self.assertRaises(ValueError):
            Viewport(0.0, -1.0, 0.0, 1.0)
        self.assertEqual(vp.snapshot(), PlaneBounds(-2.0, 1.0, -1.0, 1.0))


if __name__ == "__main__":
    unittest.main()
