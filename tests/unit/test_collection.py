"""
Unit tests for the shared accumulator contract and the collection helpers.
"""

import json
import math
import random
import unittest

from running_stats import (
    STATISTIC_TYPES,
    Beta,
    CountMap,
    EmpiricalCdf,
    Extrema,
    Histogram,
    Mean,
    Moments,
    Normal,
    Sum,
    Variance,
    combine,
    load_statistic,
    merge_all,
)
from running_stats.core.errors import (
    IncompatibleMergeError,
    InvalidArgumentError,
    RunningStatsError,
)

# (factory, sample observations) for every statistic kind
KINDS = [
    (Sum, [1.0, 2.5, -4.0]),
    (Mean, [1.0, 2.5, -4.0]),
    (Variance, [1.0, 2.5, -4.0]),
    (Moments, [1.0, 2.5, -4.0]),
    (Extrema, [1.0, 2.5, -4.0]),
    (lambda: EmpiricalCdf(num_bins=2), [1.0, 2.5, -4.0]),
    (lambda: Histogram([-5.0, 0.0, 5.0]), [1.0, 2.5, -4.0]),
    (CountMap, [1, 2, 2]),
    (Beta, [True, False, True]),
    (Normal, [1.0, 2.5, -4.0]),
]


class TestStatisticContract(unittest.TestCase):
    """Behaviour every statistic kind shares."""

    def assertStatsClose(self, first, second):
        self.assertEqual(first.keys(), second.keys())
        for key, x in first.items():
            y = second[key]
            if isinstance(x, float) and math.isnan(x):
                self.assertTrue(math.isnan(y), key)
            elif isinstance(x, float):
                self.assertTrue(math.isclose(x, y, rel_tol=1e-9, abs_tol=1e-12), key)
            else:
                self.assertEqual(x, y, key)

    def test_all_kinds_registered(self):
        self.assertEqual(len(STATISTIC_TYPES), len(KINDS))
        for factory, _ in KINDS:
            self.assertIn(type(factory()).__name__, STATISTIC_TYPES)

    def test_fresh_is_empty(self):
        for factory, _ in KINDS:
            stat = factory()
            self.assertEqual(stat.nobs, 0)
            self.assertTrue(stat.is_empty)

    def test_nobs_counts_observations(self):
        for factory, values in KINDS:
            stat = factory()
            stat.fit_many(values)
            stat.fit(values[0], 2)
            self.assertEqual(stat.nobs, len(values) + 2, type(stat).__name__)

    def test_negative_count_rejected(self):
        for factory, values in KINDS:
            stat = factory()
            with self.assertRaises(InvalidArgumentError):
                stat.fit(values[0], -1)
            self.assertEqual(stat.nobs, 0)

    def test_reset_matches_fresh(self):
        for factory, values in KINDS:
            stat = factory()
            stat.fit_many(values)
            stat.reset()
            self.assertEqual(stat.to_dict(), factory().to_dict(), type(stat).__name__)

    def test_clone_empty_keeps_configuration(self):
        for factory, values in KINDS:
            stat = factory()
            stat.fit_many(values)
            empty = stat.clone_empty()
            self.assertEqual(empty.to_dict(), factory().to_dict())
            self.assertEqual(stat.nobs, len(values))

    def test_merge_other_kind_rejected(self):
        for factory, _ in KINDS:
            stat = factory()
            other = Mean() if not isinstance(stat, Mean) else Sum()
            with self.assertRaises(IncompatibleMergeError):
                stat.merge(other)
            with self.assertRaises(RunningStatsError):
                stat.merge(other)

    def test_merge_matches_single_stream(self):
        for factory, values in KINDS:
            a = factory()
            a.fit_many(values[:1])
            b = factory()
            b.fit_many(values[1:])
            a.merge(b)

            whole = factory()
            whole.fit_many(values)
            self.assertEqual(a.nobs, whole.nobs)
            self.assertStatsClose(a.get_stats(), whole.get_stats())

    def test_json_roundtrip(self):
        for factory, values in KINDS:
            stat = factory()
            stat.fit_many(values)
            restored = type(stat).deserialize(stat.serialize())
            self.assertEqual(restored.to_dict(), stat.to_dict())

    def test_get_stats_and_repr(self):
        for factory, values in KINDS:
            stat = factory()
            stat.fit_many(values)
            stats = stat.get_stats()
            self.assertEqual(stats["type"], type(stat).__name__)
            self.assertEqual(stats["nobs"], len(values))
            self.assertTrue(repr(stat).startswith(type(stat).__name__ + "("))


class TestLoadStatistic(unittest.TestCase):
    """Test cases for load_statistic."""

    def test_restores_every_kind(self):
        for factory, values in KINDS:
            stat = factory()
            stat.fit_many(values)
            restored = load_statistic(json.loads(stat.serialize()))
            self.assertIs(type(restored), type(stat))
            self.assertEqual(restored.to_dict(), stat.to_dict())

    def test_unknown_type(self):
        with self.assertRaises(ValueError):
            load_statistic({"type": "Median", "nobs": 0})
        with self.assertRaises(ValueError):
            load_statistic({"nobs": 0})


class TestMergeAll(unittest.TestCase):
    """Test cases for combine and merge_all."""

    def test_combine_leaves_operands(self):
        a = Variance()
        a.fit_many([1.0, 2.0])
        b = Variance()
        b.fit(3.0)
        c = combine(a, b)
        self.assertEqual(c.nobs, 3)
        self.assertEqual(c.value, 1.0)
        self.assertEqual(a.nobs, 2)
        self.assertEqual(b.nobs, 1)

    def test_merge_all_matches_single_stream(self):
        random.seed(1)
        data = [random.gauss(5, 2) for _ in range(1000)]
        parts = []
        for i in range(7):
            part = Variance()
            part.fit_many(data[i::7])
            parts.append(part)

        total = merge_all(parts)
        whole = Variance()
        for v in data:
            whole.fit(v)

        self.assertEqual(total.nobs, 1000)
        self.assertTrue(math.isclose(total.mean, whole.mean, rel_tol=1e-9))
        self.assertTrue(math.isclose(total.value, whole.value, rel_tol=1e-9))
        # Inputs are not modified
        self.assertEqual(sum(p.nobs for p in parts), 1000)

    def test_merge_all_bounded_bins(self):
        random.seed(12)
        parts = []
        for _ in range(5):
            part = EmpiricalCdf(num_bins=10)
            part.fit_many(random.random() for _ in range(100))
            parts.append(part)
        total = merge_all(parts)
        self.assertEqual(total.nobs, 500)
        self.assertLessEqual(len(total.bins), 10)

    def test_merge_all_single(self):
        m = Mean()
        m.fit(2.0)
        result = merge_all([m])
        self.assertIsNot(result, m)
        self.assertEqual(result.to_dict(), m.to_dict())

    def test_merge_all_errors(self):
        with self.assertRaises(InvalidArgumentError):
            merge_all([])
        with self.assertRaises(IncompatibleMergeError):
            merge_all([Mean(), Variance()])


if __name__ == "__main__":
    unittest.main()
