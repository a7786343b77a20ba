from __future__ import annotations

import unittest

from fractalnav_core.core.selection import SelectionRect, SelectionZoomEngine
from fractalnav_core.core.undo import UndoManager
from fractalnav_core.core.viewport import PlaneBounds, Viewport


class SelectionRectTests(unittest.TestCase):
    def test_normalized_handles_negative_size(self) -> None:
        rect = SelectionRect(x=300.0, y=200.0, width=-200.0, height=-100.0)
        self.assertEqual(rect.normalized(), SelectionRect(x=100.0, y=100.0, width=200.0, height=100.0))

    def test_grow_accumulates_drag_deltas(self) -> None:
        rect = SelectionRect(x=10.0, y=10.0).grow(5.0, 3.0).grow(-20.0, 4.0)
        self.assertEqual((rect.width, rect.height), (-15.0, 7.0))

    def test_fit_to_aspect_grows_height_around_center(self) -> None:
        fitted = SelectionRect(x=100.0, y=100.0, width=200.0, height=100.0).fit_to_aspect(4.0 / 3.0)
        self.assertAlmostEqual(fitted.width, 200.0)
        self.assertAlmostEqual(fitted.height, 150.0)
        self.assertAlmostEqual(fitted.x, 100.0)
        self.assertAlmostEqual(fitted.y, 75.0)

    def test_fit_to_aspect_grows_width_around_center(self) -> None:
        fitted = SelectionRect(x=0.0, y=0.0, width=10.0, height=40.0).fit_to_aspect(2.0)
        self.assertAlmostEqual(fitted.width, 80.0)
        self.assertAlmostEqual(fitted.height, 40.0)
        self.assertAlmostEqual(fitted.x, -35.0)
        self.assertEqual(fitted.center, (5.0, 20.0))


class SelectionZoomEngineTests(unittest.TestCase):
    def _viewport(self) -> Viewport:
        return Viewport(-2.0, 1.0, -1.0, 1.0, width=800, height=600)

    def test_selection_is_fitted_before_conversion(self) -> None:
        engine = SelectionZoomEngine(self._viewport())
        bounds = engine.plan(SelectionRect(x=100.0, y=100.0, width=200.0, height=100.0))
        assert bounds is not None
        self.assertAlmostEqual(bounds.x_min, -1.625)
        self.assertAlmostEqual(bounds.x_max, -0.875)
        self.assertAlmostEqual(bounds.y_min, 0.25)
        self.assertAlmostEqual(bounds.y_max, 0.75)
        self.assertLess(bounds.x_min, bounds.x_max)
        self.assertLess(bounds.y_min, bounds.y_max)

    def test_mirrored_drags_produce_identical_bounds(self) -> None:
        engine = SelectionZoomEngine(self._viewport())
        down_right = engine.plan(SelectionRect(x=100.0, y=100.0, width=200.0, height=100.0))
        up_left = engine.plan(SelectionRect(x=300.0, y=200.0, width=-200.0, height=-100.0))
        up_right = engine.plan(SelectionRect(x=100.0, y=200.0, width=200.0, height=-100.0))
        self.assertEqual(down_right, up_left)
        self.assertEqual(down_right, up_right)

    def test_degenerate_selection_is_noop(self) -> None:
        vp = self._viewport()
        undo = UndoManager()
        engine = SelectionZoomEngine(vp)
        for rect in (SelectionRect(5.0, 5.0, 0.0, 30.0), SelectionRect(5.0, 5.0, 30.0, 0.0), SelectionRect(5.0, 5.0)):
            with self.subTest(rect=rect):
                self.assertIsNone(engine.finalize(rect, undo))
        self.assertFalse(undo.can_undo())
        self.assertEqual(vp.snapshot(), PlaneBounds(-2.0, 1.0, -1.0, 1.0))

    def test_finalize_pushes_pre_zoom_bounds(self) -> None:
        vp = self._viewport()
        undo = UndoManager()
        before = vp.snapshot()
        bounds = SelectionZoomEngine(vp).finalize(SelectionRect(10.0, 10.0, 40.0, 30.0), undo)
        self.assertEqual(vp.snapshot(), bounds)
        self.assertEqual(undo.undo(), before)

    def test_precision_exhausted_selection_is_rejected(self) -> None:
        vp = Viewport(0.5, 0.5 + 1e-15, 0.0, 1e-15, width=800, height=800)
        undo = UndoManager()
        before = vp.snapshot()
        self.assertIsNone(SelectionZoomEngine(vp).finalize(SelectionRect(400.0, 400.0, 0.001, 0.001), undo))
        self.assertEqual(vp.snapshot(), before)
        self.assertFalse(undo.can_undo())


if __name__ == "__main__":
    unittest.main()
