"""Routing SLI metrics for Prometheus.

1. classification_duration_seconds  - intent classifier latency
2. capability_duration_seconds      - provider latency, by action
3. routed_total                     - dispatched requests, by action
4. capability_failures_total        - provider failures caught by the router
5. classification_fallback_total    - classifier fallbacks to chat, by reason

Pass a custom CollectorRegistry for test isolation; production uses the
process-wide default registry, so build RouterSLI once per process.
"""

from __future__ import annotations

import time
from collections.abc import Generator  # noqa: TC003 -- used at runtime by contextmanager
from contextlib import contextmanager

from prometheus_client import REGISTRY, CollectorRegistry, Counter, Histogram

_LATENCY_BUCKETS = (0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0)


class RouterSLI:
    def __init__(self, *, registry: CollectorRegistry | None = None) -> None:
        reg = registry if registry is not None else REGISTRY

        self.classification_duration = Histogram(
            "walsis_classification_duration_seconds",
            "Time spent classifying a prompt into an action",
            buckets=_LATENCY_BUCKETS,
            registry=reg,
        )
        self.capability_duration = Histogram(
            "walsis_capability_duration_seconds",
            "Time spent inside a capability provider",
            ["action"],
            buckets=_LATENCY_BUCKETS,
            registry=reg,
        )
        self.routed_total = Counter(
            "walsis_routed",
            "Requests dispatched to a capability",
            ["action"],
            registry=reg,
        )
        self.capability_failures_total = Counter(
            "walsis_capability_failures",
            "Capability failures converted to error results",
            ["action"],
            registry=reg,
        )
        self.classification_fallback_total = Counter(
            "walsis_classification_fallback",
            "Classifications that fell back to chat",
            ["reason"],
            registry=reg,
        )

    @contextmanager
    def timer(self, histogram: Histogram) -> Generator[None, None, None]:
        """Observe elapsed time on ``histogram``, even if the block raises."""
        start = time.monotonic()
        try:
            yield
        finally:
            histogram.observe(time.monotonic() - start)
