from __future__ import annotations

from decimal import Decimal
import unittest

from scatterplot.cleaning import as_records, clean_data, coerce_number
from scatterplot.errors import PlotDataError


RECORDS = [
    {"key": "a", "x": 1, "y": 2},
    {"key": "b", "x": None, "y": 1},
    {"key": "c", "x": "abc", "y": 1},
    {"key": "d", "x": float("nan"), "y": 1},
    {"key": "e", "x": 0, "y": 5},
    {"key": "f", "x": 2, "y": 0},
    {"key": "g", "x": -1, "y": 3},
    {"key": "h", "x": 3, "y": 4},
    {"key": "i", "x": 4, "y": float("inf")},
    {"key": "j", "x": object(), "y": 2},
]


def _keys(cleaned) -> list[str]:
    return [r["key"] for r in cleaned.records]


class CleaningTests(unittest.TestCase):
    def test_filter_depends_on_log_toggles(self) -> None:
        expected = {
            (False, False): ["a", "e", "f", "g", "h"],
            (True, False): ["a", "f", "h"],
            (False, True): ["a", "e", "g", "h"],
            (True, True): ["a", "h"],
        }
        for (x_log, y_log), keys in expected.items():
            with self.subTest(x_log=x_log, y_log=y_log):
                cleaned = clean_data(RECORDS, lambda d: d["x"], lambda d: d["y"], x_log=x_log, y_log=y_log)
                self.assertEqual(_keys(cleaned), keys)
                self.assertEqual(cleaned.dropped, len(RECORDS) - len(keys))
                self.assertEqual(len(cleaned.x), len(keys))
                self.assertEqual(len(cleaned.y), len(keys))

    def test_coordinates_align_with_records(self) -> None:
        cleaned = clean_data(RECORDS, lambda d: d["x"], lambda d: d["y"])
        for record, x, y in cleaned.rows():
            self.assertEqual(float(record["x"]), x)
            self.assertEqual(float(record["y"]), y)

    def test_coerce_number_accepts_numeric_like_values(self) -> None:
        self.assertEqual(coerce_number(Decimal("2.5")), 2.5)
        self.assertEqual(coerce_number(True), 1.0)
        self.assertEqual(coerce_number(" 3 "), 3.0)
        self.assertNotEqual(coerce_number("three"), coerce_number("three"))
        self.assertNotEqual(coerce_number([1]), coerce_number([1]))

    def test_accessor_errors_propagate(self) -> None:
        with self.assertRaises(KeyError):
            clean_data([{"x": 1}], lambda d: d["x"], lambda d: d["y"])

    def test_as_records_rejects_non_collections(self) -> None:
        with self.assertRaises(PlotDataError):
            as_records("abc")
        with self.assertRaises(PlotDataError):
            as_records({"x": 1})
        with self.assertRaises(PlotDataError):
            as_records(42)
        with self.assertRaises(PlotDataError):
            as_records(None)

    def test_pandas_dataframe_rows_become_records(self) -> None:
        try:
            import pandas as pd
        except Exception:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame({"key": ["a", "b"], "x": [1.0, None], "y": [2.0, 3.0]})
        cleaned = clean_data(df, lambda d: d["x"], lambda d: d["y"])
        self.assertEqual(_keys(cleaned), ["a"])


if __name__ == "__main__":
    unittest.main()
