"""
Parallel Reduction Demo for running-stats.

This example splits a stream across worker processes. Each worker fits its
own private accumulators, and the partial results are merged at the end
without revisiting the raw data.
"""

import random
from concurrent.futures import ProcessPoolExecutor

from running_stats import EmpiricalCdf, Histogram, Moments, load_statistic, merge_all

NUM_WORKERS = 4
CHUNK_SIZE = 25_000


def fit_chunk(seed):
    """Fit one chunk of a simulated latency stream and return serialized partials."""
    rng = random.Random(seed)
    moments = Moments()
    cdf = EmpiricalCdf(num_bins=64)
    histogram = Histogram([0, 10, 20, 50, 100, 200, 500])

    for _ in range(CHUNK_SIZE):
        latency = rng.lognormvariate(3.0, 0.8)
        moments.fit(latency)
        cdf.fit(latency)
        histogram.fit(latency)

    # Partials cross the process boundary as plain dictionaries
    return [moments.to_dict(), cdf.to_dict(), histogram.to_dict()]


def demonstrate_parallel_reduction():
    """Fit chunks in parallel and merge the partial accumulators."""
    print("\n=== Parallel Reduction Demo ===")

    with ProcessPoolExecutor(max_workers=NUM_WORKERS) as executor:
        partials = list(executor.map(fit_chunk, range(NUM_WORKERS)))

    moments = merge_all([load_statistic(p[0]) for p in partials])
    cdf = merge_all([load_statistic(p[1]) for p in partials])
    histogram = merge_all([load_statistic(p[2]) for p in partials])

    print(f"Observations: {moments.nobs}")
    print(f"  Mean: {moments.mean:.2f}")
    print(f"  Std dev: {moments.variance ** 0.5:.2f}")
    print(f"  Skewness: {moments.skewness:.2f}")
    print(f"  Excess kurtosis: {moments.excess_kurtosis:.2f}")

    print("\nQuantiles:")
    for p in (0.5, 0.9, 0.99):
        print(f"  p{int(p * 100)}: {cdf.quantile(p):.2f}")
    print(f"  Bins used: {len(cdf.bins)} of {cdf.num_bins}")

    print("\nHistogram:")
    for b in histogram:
        print(f"  {b.name:>18}: {b.count}")
    below, above = histogram.out_of_bounds
    print(f"  Out of range: {below} below, {above} above")


def demonstrate_in_process_merge():
    """Show that merging partials matches fitting a single stream."""
    print("\n=== In-Process Merge Demo ===")

    values = [random.gauss(100, 15) for _ in range(10_000)]
    whole = Moments()
    whole.fit_many(values)

    parts = []
    for i in range(0, len(values), 1_000):
        part = Moments()
        part.fit_many(values[i : i + 1_000])
        parts.append(part)
    merged = merge_all(parts)

    print(f"Single stream: mean={whole.mean:.6f} variance={whole.variance:.6f}")
    print(f"Merged parts:  mean={merged.mean:.6f} variance={merged.variance:.6f}")


if __name__ == "__main__":
    random.seed(42)
    demonstrate_in_process_merge()
    demonstrate_parallel_reduction()
