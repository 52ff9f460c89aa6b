"""
Basic example of using running-stats for stream processing.

This example feeds a simulated stream of sensor readings through several
accumulators and prints what each reports.
"""

import random

from running_stats import Beta, CountMap, EmpiricalCdf, Extrema, Histogram, Variance


def demonstrate_moments_and_extrema():
    """Demonstrate the variance and extrema accumulators on a simulated stream."""
    print("\n=== Variance and Extrema Demo ===")

    variance = Variance()
    extrema = Extrema()

    print("Processing 1000 readings...")
    for i in range(1000):
        reading = random.gauss(20.0, 2.5)
        variance.fit(reading)
        extrema.fit(reading)

        # Print progress occasionally
        if i % 250 == 0:
            print(f"  Processed {i} readings, running mean {variance.mean:.3f}")

    print(f"\nMean: {variance.mean:.3f}")
    print(f"Variance: {variance.value:.3f}")
    print(f"Std dev: {variance.std:.3f}")
    print(f"Min: {extrema.min:.3f} (seen {extrema.min_count}x)")
    print(f"Max: {extrema.max:.3f} (seen {extrema.max_count}x)")

    # Serialize and restore
    serialized = variance.serialize(format="json")
    print(f"\nSerialized size: {len(serialized)} bytes")
    restored = Variance.deserialize(serialized, format="json")
    print(f"Restored: {restored!r}")


def demonstrate_quantiles():
    """Demonstrate approximate quantiles with a bounded number of bins."""
    print("\n=== EmpiricalCdf Demo ===")

    cdf = EmpiricalCdf(num_bins=50)
    values = [random.expovariate(0.1) for _ in range(20000)]
    cdf.fit_many(values)

    exact = sorted(values)
    print(f"{'p':>6} {'estimate':>10} {'exact':>10}")
    for p in (0.1, 0.25, 0.5, 0.75, 0.9, 0.99):
        estimate = cdf.quantile(p)
        truth = exact[min(int(p * len(exact)), len(exact) - 1)]
        print(f"{p:>6.2f} {estimate:>10.3f} {truth:>10.3f}")
    print(f"Bins used: {len(cdf.bins)} of {cdf.num_bins}")
    print(f"P(X <= 10) ~ {cdf.cdf(10.0):.3f}")


def demonstrate_exact_counters():
    """Demonstrate the exact histogram, frequency map and success counter."""
    print("\n=== Exact Counters Demo ===")

    histogram = Histogram([0, 5, 10, 15, 20], left_closed=True)
    counts = CountMap()
    outcomes = Beta()

    for _ in range(500):
        roll = random.randint(1, 6) + random.randint(1, 6)
        histogram.fit(roll)
        counts.fit(roll)
        outcomes.fit(roll >= 10)

    print("Histogram of two-dice totals:")
    for b in histogram:
        print(f"  {b.name}: {b.count}")

    print(f"\nMost common total: {counts.mode()} ({counts[counts.mode()]} times)")
    print(f"Totals seen: {counts.keys()}")
    print(f"Share of totals >= 10: {outcomes.mean:.3f} +/- {outcomes.variance ** 0.5:.3f}")


if __name__ == "__main__":
    random.seed(42)
    demonstrate_moments_and_extrema()
    demonstrate_quantiles()
    demonstrate_exact_counters()
