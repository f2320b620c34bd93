"""Prometheus metrics for the dashboard, all under the ``dashboard_`` namespace.

Labelled counters are declared with the full set of values each label can
take; every child is created up front so ``/metrics`` reports a zero series
for outcomes that have not happened yet.
"""

from __future__ import annotations

from itertools import product
from typing import Iterable, Optional, Sequence

from prometheus_client import Counter, Gauge, Histogram

NAMESPACE = "dashboard"

# Sheet fetches finish in well under a second or hit the timeout
FETCH_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0)


def counter(
    name: str, documentation: str, **label_values: Iterable[str]
) -> Counter:
    """Counter whose label children are all created at zero.

    ``counter("sync_runs_total", "...", kind=("ok", "stale"))`` declares label
    ``kind`` and pre-creates both series.
    """
    metric = Counter(name, documentation, tuple(label_values), namespace=NAMESPACE)
    if label_values:
        for combo in product(*(tuple(v) for v in label_values.values())):
            metric.labels(*combo)
    return metric


def histogram(
    name: str, documentation: str, buckets: Optional[Sequence[float]] = None
) -> Histogram:
    if buckets is None:
        return Histogram(name, documentation, namespace=NAMESPACE)
    return Histogram(name, documentation, namespace=NAMESPACE, buckets=buckets)


def gauge(name: str, documentation: str) -> Gauge:
    return Gauge(name, documentation, namespace=NAMESPACE)
