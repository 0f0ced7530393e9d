from __future__ import annotations

from pathlib import Path
import tempfile
import unittest

import numpy as np
from PIL import Image

from scatterplot import container, scatterplot
from scatterplot.export import RasterStyle, rasterize
from scatterplot.raster import draw_disc, draw_line, new_canvas
from scatterplot.scene import SceneNode


def _chart():
    return (
        scatterplot(container())
        .width(600)
        .height(400)
        .duration(0)
        .data([{"key": "a", "x": 1, "y": 2}, {"key": "b", "x": 2, "y": 4}, {"key": "c", "x": 3, "y": 6}])
        .x_accessor(lambda d: d["x"])
        .y_accessor(lambda d: d["y"])
        .render()
    )


class RasterExportTests(unittest.TestCase):
    def test_rasterizes_chart_at_outer_size(self) -> None:
        frame = _chart().to_rgba()
        self.assertEqual(frame.shape, (450, 660, 4))
        self.assertEqual(frame.dtype, np.uint8)
        self.assertEqual(tuple(frame[0, 0]), (255, 255, 255, 255))
        # centre of mark "b": (300, 200) inside a (40, 20) margin
        self.assertEqual(tuple(frame[220, 340]), (31, 119, 180, 255))

    def test_rasterize_is_deterministic(self) -> None:
        self.assertTrue(np.array_equal(_chart().to_rgba(), _chart().to_rgba()))

    def test_save_png_round_trip(self) -> None:
        chart = _chart()
        with tempfile.TemporaryDirectory() as tmp:
            out = chart.save_png(Path(tmp) / "chart.png")
            self.assertTrue(out.exists())
            with Image.open(out) as img:
                self.assertEqual(img.size, (660, 450))

    def test_rejects_non_svg_root(self) -> None:
        with self.assertRaises(ValueError):
            rasterize(SceneNode("g"))
        with self.assertRaises(ValueError):
            RasterStyle(font_size_px=0)

    def test_hidden_nodes_are_skipped(self) -> None:
        svg = SceneNode("svg", {"width": 10, "height": 10})
        svg.append("rect", {"width": 10, "height": 10, "fill": "black", "visibility": "hidden"})
        frame = rasterize(svg)
        self.assertTrue(np.all(frame == 255))

    def test_clip_path_limits_painting(self) -> None:
        svg = SceneNode("svg", {"width": 20, "height": 20})
        svg.append("defs").append("clipPath", {"id": "c"}).append("rect", {"width": 10, "height": 10})
        svg.append("rect", {"width": 20, "height": 20, "fill": "black", "clip-path": "url(#c)"})
        frame = rasterize(svg)
        self.assertEqual(tuple(frame[5, 5]), (0, 0, 0, 255))
        self.assertEqual(tuple(frame[15, 15]), (255, 255, 255, 255))


class RasterPrimitiveTests(unittest.TestCase):
    def test_dashed_line_leaves_gaps(self) -> None:
        canvas = new_canvas(30, 3)
        draw_line(canvas, 0, 1, 29, 1, (0, 0, 0, 255), dash=(5, 5))
        self.assertEqual(tuple(canvas[1, 2]), (0, 0, 0, 255))
        self.assertEqual(tuple(canvas[1, 7]), (255, 255, 255, 255))
        self.assertEqual(tuple(canvas[1, 12]), (0, 0, 0, 255))

    def test_disc_covers_radius(self) -> None:
        canvas = new_canvas(21, 21)
        draw_disc(canvas, 10.5, 10.5, 5, (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[10, 10]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[10, 14]), (255, 0, 0, 255))
        self.assertEqual(tuple(canvas[0, 0]), (255, 255, 255, 255))

    def test_canvas_rejects_empty_size(self) -> None:
        with self.assertRaises(ValueError):
            new_canvas(0, 5)


if __name__ == "__main__":
    unittest.main()
