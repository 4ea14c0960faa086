from __future__ import annotations

import unittest

from specplot.layout import PlotRect, compute_plot_rect
from specplot.spec import PaddingSpec


class PlotRectTests(unittest.TestCase):
    def test_padding_carves_plot_area(self) -> None:
        rect = compute_plot_rect(640, 400, PaddingSpec(top=20, right=20, bottom=40, left=60))
        self.assertEqual(rect, PlotRect(x=60, y=40, width=560, height=340))
        self.assertEqual(rect.x_max, 620)
        self.assertEqual(rect.y_max, 380)

    def test_missing_padding_uses_defaults(self) -> None:
        self.assertEqual(compute_plot_rect(640, 400), compute_plot_rect(640, 400, PaddingSpec()))

    def test_oversized_padding_falls_back_to_symmetric_margin(self) -> None:
        rect = compute_plot_rect(10, 10, PaddingSpec(top=20, right=20, bottom=40, left=60))
        self.assertAlmostEqual(rect.x, 1)
        self.assertAlmostEqual(rect.y, 1)
        self.assertAlmostEqual(rect.width, 8)
        self.assertAlmostEqual(rect.height, 8)

    def test_fallback_applies_to_both_axes(self) -> None:
        # Width fits, height does not: both dimensions still use the margin.
        rect = compute_plot_rect(1000, 50, PaddingSpec(top=30, right=10, bottom=30, left=10))
        self.assertAlmostEqual(rect.x, 100)
        self.assertAlmostEqual(rect.width, 800)
        self.assertAlmostEqual(rect.y, 5)
        self.assertAlmostEqual(rect.height, 40)

    def test_fallback_clamps_to_one_unit(self) -> None:
        rect = compute_plot_rect(0.5, 0.5)
        self.assertEqual(rect.width, 1)
        self.assertEqual(rect.height, 1)

    def test_negative_rect_rejected(self) -> None:
        with self.assertRaises(ValueError):
            PlotRect(x=0, y=0, width=-1, height=1)


if __name__ == "__main__":
    unittest.main()
