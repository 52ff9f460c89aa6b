"""
Unit tests for the fixed-edge Histogram.
"""

import unittest

from running_stats.algorithms.histogram import Histogram, HistogramBin
from running_stats.core.errors import IncompatibleMergeError, InvalidArgumentError


class TestHistogramBin(unittest.TestCase):
    """Test cases for HistogramBin."""

    def test_name(self):
        self.assertEqual(HistogramBin(0.0, 1.0, True, False).name, "[0.00, 1.00)")
        self.assertEqual(HistogramBin(1.0, 2.5, False, True).name, "(1.00, 2.50]")

    def test_midpoint(self):
        self.assertEqual(HistogramBin(2.0, 4.0, True, False).midpoint, 3.0)
        self.assertEqual(HistogramBin(float("-inf"), 0.0, True, False).midpoint, float("-inf"))

    def test_contains(self):
        b = HistogramBin(0.0, 1.0, True, False)
        self.assertTrue(b.contains(0.0))
        self.assertTrue(b.contains(0.5))
        self.assertFalse(b.contains(1.0))
        self.assertFalse(b.contains(-0.1))


class TestHistogram(unittest.TestCase):
    """Test cases for Histogram."""

    def test_init(self):
        h = Histogram([0, 1, 2, 3])
        self.assertEqual(h.edges, [0.0, 1.0, 2.0, 3.0])
        self.assertTrue(h.left_closed)
        self.assertTrue(h.ends_closed)
        self.assertEqual(h.counts, [0, 0, 0])
        self.assertEqual(len(h), 3)
        self.assertEqual(h.nobs, 0)

    def test_invalid_edges(self):
        for edges in ([1.0], [], [0.0, 0.0, 1.0], [2.0, 1.0], [0.0, float("nan")]):
            with self.assertRaises(InvalidArgumentError):
                Histogram(edges)

    def test_left_closed_ends_closed(self):
        h = Histogram([0.0, 1.0, 2.0, 3.0])
        h.fit_many([0.0, 1.0, 2.5, 3.0, -1.0, 3.5])
        self.assertEqual(h.counts, [1, 1, 2])
        self.assertEqual(h.nobs, 4)
        self.assertEqual(h.out_of_bounds, (1, 1))

    def test_left_closed_ends_open(self):
        h = Histogram([0.0, 1.0, 2.0, 3.0], ends_closed=False)
        h.fit_many([0.0, 2.0, 3.0])
        self.assertEqual(h.counts, [1, 0, 1])
        self.assertEqual(h.nobs, 2)
        self.assertEqual(h.out_of_bounds, (0, 1))

    def test_right_closed_ends_closed(self):
        h = Histogram([0.0, 1.0, 2.0, 3.0], left_closed=False)
        h.fit_many([0.0, 1.0, 2.0, 3.0])
        self.assertEqual(h.counts, [2, 1, 1])
        self.assertEqual(h.nobs, 4)

    def test_right_closed_ends_open(self):
        h = Histogram([0.0, 1.0, 2.0, 3.0], left_closed=False, ends_closed=False)
        h.fit_many([0.0, 0.5, 3.0])
        self.assertEqual(h.counts, [1, 0, 1])
        self.assertEqual(h.out_of_bounds, (1, 0))

    def test_fit_with_count(self):
        h = Histogram([0.0, 10.0])
        h.fit(5.0, 4)
        h.fit(50.0, 2)
        h.fit(5.0, 0)
        self.assertEqual(h.counts, [4])
        self.assertEqual(h.nobs, 4)
        self.assertEqual(h.out_of_bounds, (0, 2))

    def test_fit_invalid(self):
        h = Histogram([0.0, 1.0])
        with self.assertRaises(InvalidArgumentError):
            h.fit(float("nan"))
        with self.assertRaises(InvalidArgumentError):
            h.fit(0.5, -1)

    def test_infinite_values_are_out_of_bounds(self):
        h = Histogram([0.0, 1.0])
        h.fit(float("inf"))
        h.fit(float("-inf"))
        self.assertEqual(h.nobs, 0)
        self.assertEqual(h.out_of_bounds, (1, 1))

    def test_bins(self):
        h = Histogram([0.0, 1.0, 2.0])
        h.fit(0.5)
        names = [b.name for b in h]
        self.assertEqual(names, ["[0.00, 1.00)", "[1.00, 2.00]"])
        self.assertEqual([b.count for b in h.bins], [1, 0])

        h = Histogram([0.0, 1.0, 2.0], left_closed=False)
        self.assertEqual([b.name for b in h.bins], ["[0.00, 1.00]", "(1.00, 2.00]"])

    def test_bins_agree_with_fit(self):
        for left_closed in (True, False):
            for ends_closed in (True, False):
                h = Histogram([0.0, 1.0, 2.0], left_closed=left_closed, ends_closed=ends_closed)
                for value in (0.0, 0.5, 1.0, 1.5, 2.0):
                    single = h.clone_empty()
                    single.fit(value)
                    for b in single.bins:
                        self.assertEqual(b.count, 1 if b.contains(value) else 0)

    def test_merge(self):
        a = Histogram([0.0, 1.0, 2.0])
        b = Histogram([0.0, 1.0, 2.0])
        a.fit_many([0.5, 1.5, 5.0])
        b.fit_many([0.2, -1.0])
        a.merge(b)
        self.assertEqual(a.counts, [2, 1])
        self.assertEqual(a.nobs, 3)
        self.assertEqual(a.out_of_bounds, (1, 1))
        self.assertEqual(b.counts, [1, 0])

    def test_merge_incompatible(self):
        a = Histogram([0.0, 1.0, 2.0])
        with self.assertRaises(IncompatibleMergeError):
            a.merge(Histogram([0.0, 1.0, 3.0]))
        with self.assertRaises(IncompatibleMergeError):
            a.merge(Histogram([0.0, 1.0, 2.0], left_closed=False))
        with self.assertRaises(IncompatibleMergeError):
            a.merge(Histogram([0.0, 1.0, 2.0], ends_closed=False))

    def test_reset(self):
        h = Histogram([0.0, 1.0], left_closed=False)
        h.fit_many([0.5, 7.0])
        h.reset()
        self.assertEqual(h.to_dict(), Histogram([0.0, 1.0], left_closed=False).to_dict())

    def test_serialization(self):
        h = Histogram([0.0, 1.0, 2.0], left_closed=False, ends_closed=False)
        h.fit_many([0.5, 1.0, 2.0, 3.0])
        restored = Histogram.deserialize(h.serialize())
        self.assertEqual(restored.to_dict(), h.to_dict())

        data = h.to_dict()
        data["counts"] = [1, 1, 1]
        with self.assertRaises(ValueError):
            Histogram.from_dict(data)


if __name__ == "__main__":
    unittest.main()
