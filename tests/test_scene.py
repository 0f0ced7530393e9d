from __future__ import annotations

import unittest
import xml.etree.ElementTree as ET

from scatterplot.scene import SceneNode, container, format_value, number


class SceneNodeTests(unittest.TestCase):
    def _tree(self) -> SceneNode:
        root = container()
        svg = root.append("svg", {"width": 100, "height": 50})
        axis = svg.append("g", {"class": "x axis"})
        axis.append("line", {"x1": 0.0, "x2": 10.5})
        svg.append("text", {"class": "x label"}, text="time")
        clip = svg.append("defs").append("clipPath", {"id": "chartClip"})
        clip.append("rect", {"width": 10})
        return root

    def test_select_by_class_tag_and_descendant(self) -> None:
        root = self._tree()
        self.assertEqual(root.select(".x.axis").tag, "g")
        self.assertEqual(root.select(".x.label").text, "time")
        self.assertEqual(root.select(".axis line").attr("x2"), 10.5)
        self.assertEqual(root.select("#chartClip rect").attr("width"), 10)
        self.assertIsNone(root.select(".y.axis"))
        self.assertEqual(len(root.select_all(".x")), 2)

    def test_remove_detaches_node(self) -> None:
        root = self._tree()
        label = root.select(".x.label")
        label.remove()
        self.assertIsNone(label.parent)
        self.assertIsNone(root.select(".x.label"))
        label.remove()

    def test_attr_and_style_accessors(self) -> None:
        node = SceneNode("line")
        self.assertIs(node.attr("x1", 3), node)
        self.assertEqual(node.attr("x1"), 3)
        node.attr("x1", None)
        self.assertIsNone(node.attr("x1"))
        node.style("stroke", "black").style("stroke-width", 1)
        self.assertEqual(node.style("stroke-width"), "1")

    def test_markup_serializes_attrs_style_and_text(self) -> None:
        root = self._tree()
        line = root.select("line")
        line.style("stroke", "black")
        line.datum = {"secret": True}
        elem = ET.fromstring(root.select("svg").to_markup())
        self.assertEqual(elem.get("width"), "100")
        parsed_line = elem.find("./g/line")
        self.assertIsNotNone(parsed_line)
        self.assertEqual(parsed_line.get("x2"), "10.5")
        self.assertEqual(parsed_line.get("style"), "stroke: black")
        self.assertNotIn("secret", root.to_markup())

    def test_value_formatting_and_parsing(self) -> None:
        self.assertEqual(format_value(300.0), "300")
        self.assertEqual(format_value(1 / 3), "0.333333")
        self.assertEqual(format_value(True), "true")
        self.assertEqual(number("12px"), 12.0)
        self.assertEqual(number("bad", 4.0), 4.0)
        self.assertEqual(number(None), 0.0)


if __name__ == "__main__":
    unittest.main()
