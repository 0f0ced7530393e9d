from __future__ import annotations

import unittest

from scatterplot.scene import SceneNode
from scatterplot.transitions import TransitionScheduler, ease_cubic_in_out, ease_linear


class _Clock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now


class TransitionSchedulerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.clock = _Clock()
        self.scheduler = TransitionScheduler(clock=self.clock, easing=ease_linear)
        self.node = SceneNode("circle", {"cx": 0.0, "fill": "#000000"})

    def test_numeric_attributes_interpolate(self) -> None:
        handle = self.scheduler.begin(self.node, {"cx": 100.0}, 1000)
        self.assertEqual(self.scheduler.active_count(), 1)
        self.clock.now = 0.5
        self.scheduler.tick()
        self.assertAlmostEqual(self.node.attr("cx"), 50.0)
        self.assertFalse(handle.done())

    def test_completion_applies_final_values_and_notifies(self) -> None:
        seen = []
        handle = self.scheduler.begin(self.node, {"cx": 100.0, "fill": "#ff0000"}, 1000)
        handle.add_done_callback(seen.append)
        self.clock.now = 0.25
        self.scheduler.tick()
        self.assertEqual(self.node.attr("fill"), "#000000")
        finished = self.scheduler.tick(now=1.0)
        self.assertEqual(finished, [handle])
        self.assertTrue(handle.done())
        self.assertEqual(seen, [handle])
        self.assertEqual(self.node.attr("cx"), 100.0)
        self.assertEqual(self.node.attr("fill"), "#ff0000")
        self.assertEqual(self.scheduler.active_count(), 0)

    def test_new_transition_interrupts_running_one(self) -> None:
        seen = []
        first = self.scheduler.begin(self.node, {"cx": 100.0}, 1000)
        first.add_done_callback(seen.append)
        self.clock.now = 0.5
        self.scheduler.tick()
        second = self.scheduler.begin(self.node, {"cx": 0.0}, 1000)
        self.assertTrue(first.cancelled())
        self.assertEqual(second.from_attrs["cx"], 50.0)
        self.scheduler.finish_all()
        self.assertEqual(seen, [])
        self.assertEqual(self.node.attr("cx"), 0.0)

    def test_zero_duration_completes_synchronously(self) -> None:
        handle = self.scheduler.begin(self.node, {"cx": 7.0}, 0)
        self.assertTrue(handle.done())
        self.assertEqual(self.node.attr("cx"), 7.0)
        self.assertEqual(self.scheduler.active_count(), 0)

    def test_callback_added_after_completion_runs_immediately(self) -> None:
        handle = self.scheduler.begin(self.node, {"cx": 7.0}, 0)
        seen = []
        handle.add_done_callback(seen.append)
        self.assertEqual(seen, [handle])

    def test_interrupt_tree_cancels_descendants(self) -> None:
        group = SceneNode("g")
        circle = group.append("circle", {"r": 1.0})
        text = group.append("text", {"x": 0.0})
        self.scheduler.begin(circle, {"r": 5.0}, 1000)
        self.scheduler.begin(text, {"x": 5.0}, 1000)
        self.assertEqual(self.scheduler.interrupt_tree(group), 2)
        self.assertFalse(self.scheduler.is_animating(circle))
        self.assertEqual(self.scheduler.active_count(), 0)

    def test_rejects_negative_duration(self) -> None:
        with self.assertRaises(ValueError):
            self.scheduler.begin(self.node, {"cx": 1.0}, -1)

    def test_cubic_easing_is_symmetric(self) -> None:
        self.assertEqual(ease_cubic_in_out(0.0), 0.0)
        self.assertEqual(ease_cubic_in_out(1.0), 1.0)
        self.assertAlmostEqual(ease_cubic_in_out(0.5), 0.5)
        self.assertAlmostEqual(ease_cubic_in_out(0.25) + ease_cubic_in_out(0.75), 1.0)


if __name__ == "__main__":
    unittest.main()
