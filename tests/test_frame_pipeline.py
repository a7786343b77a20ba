from __future__ import annotations

import unittest

import torch

from fractalnav_core.render.frame_pipeline import fit_cached_image, scale_rgba


class FramePipelineTests(unittest.TestCase):
    def test_scale_rgba_updates_shape(self) -> None:
        frame = torch.zeros((2, 3, 4), dtype=torch.uint8)
        out = scale_rgba(frame, target_w=7, target_h=5)
        self.assertEqual(tuple(out.shape), (5, 7, 4))
        self.assertEqual(out.dtype, torch.uint8)

    def test_matching_size_is_returned_as_is(self) -> None:
        frame = torch.zeros((3, 4, 4), dtype=torch.uint8)
        self.assertIs(fit_cached_image(frame, target_w=4, target_h=3), frame)

    def test_stretch_mode_fills_target(self) -> None:
        frame = torch.zeros((2, 4, 4), dtype=torch.uint8)
        frame[:, :, 0] = 120
        frame[:, :, 3] = 255
        out = fit_cached_image(frame, target_w=8, target_h=8, preserve_aspect_ratio=False)
        self.assertEqual(tuple(out.shape), (8, 8, 4))
        self.assertTrue(torch.all(out[:, :, 0] == 120))

    def test_preserve_aspect_letterboxes(self) -> None:
        frame = torch.zeros((2, 4, 4), dtype=torch.uint8)
        frame[:, :, 1] = 200
        frame[:, :, 3] = 255
        out = fit_cached_image(frame, target_w=8, target_h=8)
        self.assertEqual(tuple(out.shape), (8, 8, 4))
        self.assertEqual(int(out[0, :, :3].sum().item()), 0)
        self.assertTrue(torch.all(out[0, :, 3] == 255))
        self.assertGreater(int(out[4, :, 1].sum().item()), 0)

    def test_rejects_invalid_target(self) -> None:
        frame = torch.zeros((2, 2, 4), dtype=torch.uint8)
        with self.assertRaises(ValueError):
            fit_cached_image(frame, target_w=0, target_h=2)


if __name__ == "__main__":
    unittest.main()
