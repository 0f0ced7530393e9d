from __future__ import annotations

import unittest

from scatterplot.colors import CATEGORY10, CategoricalColorScale, parse_color
from scatterplot.config import ChartConfig, Margin, default_key


class ConfigTests(unittest.TestCase):
    def test_rejects_invalid_dimensions(self) -> None:
        with self.assertRaises(ValueError):
            ChartConfig(width=0)
        with self.assertRaises(ValueError):
            ChartConfig(height=-1)
        with self.assertRaises(ValueError):
            ChartConfig(radius=-1)
        with self.assertRaises(ValueError):
            ChartConfig(duration_ms=-5)

    def test_rejects_non_callable_accessor(self) -> None:
        with self.assertRaises(TypeError):
            ChartConfig(x_accessor="x")

    def test_margin_coercion(self) -> None:
        margin = Margin.coerce({"top": 1, "left": 4})
        self.assertEqual(margin, Margin(top=1.0, right=20.0, bottom=30.0, left=4.0))
        with self.assertRaises(ValueError):
            Margin.coerce({"middle": 3})
        with self.assertRaises(ValueError):
            Margin(top=-1)
        with self.assertRaises(TypeError):
            Margin.coerce(5)

    def test_outer_size_includes_margins(self) -> None:
        cfg = ChartConfig(width=600, height=400, margin=Margin(20, 20, 30, 40))
        self.assertEqual(cfg.outer_width, 660)
        self.assertEqual(cfg.outer_height, 450)

    def test_require_ready(self) -> None:
        with self.assertRaises(ValueError):
            ChartConfig().require_ready()
        ChartConfig(data=[], x_accessor=len, y_accessor=len).require_ready()

    def test_default_key_reads_mapping_or_attribute(self) -> None:
        class Point:
            key = "p"

        self.assertEqual(default_key({"key": "m"}), "m")
        self.assertEqual(default_key(Point()), "p")


class ColorTests(unittest.TestCase):
    def test_category_scale_assigns_in_order_of_appearance(self) -> None:
        scale = CategoricalColorScale()
        self.assertEqual(scale("b"), CATEGORY10[0])
        self.assertEqual(scale("a"), CATEGORY10[1])
        self.assertEqual(scale("b"), CATEGORY10[0])
        self.assertEqual(scale.domain(), ["b", "a"])

    def test_category_scale_cycles_palette(self) -> None:
        scale = CategoricalColorScale(("#000", "#fff"))
        self.assertEqual([scale(i) for i in range(3)], ["#000", "#fff", "#000"])
        copy = scale.copy()
        copy(99)
        self.assertNotIn(99, scale.domain())

    def test_empty_palette_rejected(self) -> None:
        with self.assertRaises(ValueError):
            CategoricalColorScale(())

    def test_parse_color(self) -> None:
        self.assertEqual(parse_color("#1f77b4"), (31, 119, 180, 255))
        self.assertEqual(parse_color("#fff"), (255, 255, 255, 255))
        self.assertEqual(parse_color("rgb(1, 2, 3)"), (1, 2, 3, 255))
        self.assertEqual(parse_color("black"), (0, 0, 0, 255))
        self.assertIsNone(parse_color("none"))
        self.assertIsNone(parse_color("#12"))


if __name__ == "__main__":
    unittest.main()
