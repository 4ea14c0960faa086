from __future__ import annotations

import unittest

import numpy as np

from specplot.compiler import compile_chart
from specplot.config import CompileOptions
from specplot.geometry import Bar
from specplot.preview import render_preview
from specplot.raster import draw_polyline, fill_rect, new_canvas
from specplot.templates import bar_chart_spec, line_chart_spec, stacked_bar_chart_spec


class RenderPreviewTests(unittest.TestCase):
    def test_canvas_shape_matches_chart(self) -> None:
        image = render_preview(compile_chart(bar_chart_spec()))
        self.assertEqual(image.shape, (400, 640, 4))
        self.assertEqual(image.dtype, np.uint8)
        self.assertEqual(tuple(image[0, 0]), (255, 255, 255, 255))

    def test_bar_interior_is_painted(self) -> None:
        geometry = compile_chart(bar_chart_spec())
        bar = geometry.marks[0]
        assert isinstance(bar, Bar)
        rect = geometry.plot_rect
        cx = int(round(rect.x + bar.x + bar.width / 2))
        cy = int(round(geometry.height - (rect.y + bar.y + bar.height / 2)))
        image = render_preview(geometry)
        self.assertEqual(tuple(image[cy, cx]), (78, 121, 167, 255))

    def test_stacked_preview_draws_legend(self) -> None:
        image = render_preview(compile_chart(stacked_bar_chart_spec()))
        right_margin = image[:, 625:, :3]
        self.assertTrue(np.any(right_margin != 255))

    def test_line_is_drawn(self) -> None:
        image = render_preview(compile_chart(line_chart_spec()))
        plot = image[30:360, 60:620, :3]
        orange = np.all(plot == np.array([242, 142, 44], dtype=np.uint8), axis=-1)
        self.assertTrue(orange.any())

    def test_3d_geometry_rejected(self) -> None:
        geometry = compile_chart(bar_chart_spec(), options=CompileOptions(is_3d=True))
        with self.assertRaises(ValueError):
            render_preview(geometry)


class RasterPrimitiveTests(unittest.TestCase):
    def test_fill_rect_is_inclusive_and_clipped(self) -> None:
        canvas = new_canvas(4, 4)
        fill_rect(canvas, 2, 2, 10, 10, (0, 0, 0, 255))
        self.assertEqual(int((canvas[:, :, 0] == 0).sum()), 4)

    def test_polyline_connects_endpoints(self) -> None:
        canvas = new_canvas(10, 10)
        draw_polyline(canvas, np.asarray([0, 9]), np.asarray([0, 9]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[0, 0]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[9, 9]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[5, 5]), (255, 0, 0, 255))

    def test_new_canvas_rejects_empty_size(self) -> None:
        with self.assertRaises(ValueError):
            new_canvas(0, 5)


if __name__ == "__main__":
    unittest.main()
