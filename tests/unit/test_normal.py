"""
Unit tests for the Normal distribution fit.
"""

import math
import unittest

from running_stats.algorithms.normal import Normal
from running_stats.core.errors import InvalidArgumentError


class TestNormal(unittest.TestCase):
    """Test cases for Normal."""

    def test_empty(self):
        n = Normal()
        self.assertTrue(math.isnan(n.mean))
        self.assertTrue(math.isnan(n.variance))
        self.assertTrue(math.isnan(n.pdf(0.0)))
        self.assertTrue(math.isnan(n.cdf(0.0)))
        self.assertTrue(math.isnan(n.quantile(0.5)))

    def test_fit(self):
        n = Normal()
        n.fit_many([1.0, 2.0, 3.0])
        self.assertEqual(n.nobs, 3)
        self.assertEqual(n.mean, 2.0)
        self.assertEqual(n.variance, 1.0)
        self.assertEqual(n.std, 1.0)

    def test_distribution_functions(self):
        n = Normal()
        n.fit_many([1.0, 2.0, 3.0])
        self.assertAlmostEqual(n.pdf(2.0), 1.0 / math.sqrt(2.0 * math.pi))
        self.assertAlmostEqual(n.cdf(2.0), 0.5)
        self.assertAlmostEqual(n.cdf(3.0), 0.8413447460685429)
        self.assertAlmostEqual(n.quantile(0.5), 2.0)
        self.assertAlmostEqual(n.quantile(0.8413447460685429), 3.0, places=6)
        self.assertEqual(n.quantile(0.0), -math.inf)
        self.assertEqual(n.quantile(1.0), math.inf)

    def test_degenerate(self):
        n = Normal()
        n.fit(5.0, 3)
        self.assertEqual(n.variance, 0.0)
        self.assertTrue(math.isnan(n.cdf(5.0)))

    def test_quantile_invalid(self):
        n = Normal()
        with self.assertRaises(InvalidArgumentError):
            n.quantile(1.5)

    def test_merge(self):
        a = Normal()
        a.fit(1.0)
        b = Normal()
        b.fit_many([2.0, 3.0])
        a.merge(b)
        self.assertEqual(a.nobs, 3)
        self.assertEqual(a.mean, 2.0)
        self.assertEqual(a.variance, 1.0)

    def test_reset_and_serialization(self):
        n = Normal()
        n.fit_many([4.0, 6.0])
        restored = Normal.deserialize(n.serialize())
        self.assertEqual(restored.to_dict(), n.to_dict())

        n.reset()
        self.assertEqual(n.to_dict(), Normal().to_dict())


if __name__ == "__main__":
    unittest.main()
