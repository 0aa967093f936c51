# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Metric instrument definitions for formguard."""

from __future__ import annotations

import time
from collections import Counter
from typing import Iterable

from .runtime import meter

validation_total = meter.create_counter(
    name="formguard.validation.total",
    description="Counts validation passes, partitioned by schema and outcome.",
    unit="1",
)

violation_total = meter.create_counter(
    name="formguard.violation.total",
    description="Counts reported violations, partitioned by schema and rule kind.",
    unit="1",
)

validation_latency_ms = meter.create_histogram(
    name="formguard.validation.latency.ms",
    description="Time taken by a single validation pass.",
    unit="ms",
)


def record_validation_metrics(schema: str, violations: Iterable, started_at: float) -> None:
    """Record latency, outcome and per-kind violation counts for one pass.

    Args:
        schema: Name of the validated schema (or target) for attribution
        violations: Violations produced by the pass
        started_at: Timestamp from time.perf_counter() when the pass started
    """

    duration_ms = (time.perf_counter() - started_at) * 1000.0
    kinds = Counter(getattr(v, "kind", None) or "unknown" for v in violations)
    outcome = "invalid" if kinds else "valid"

    validation_latency_ms.record(duration_ms, {"schema": schema, "outcome": outcome})
    validation_total.add(1, {"schema": schema, "outcome": outcome})
    for kind, count in kinds.items():
        violation_total.add(count, {"schema": schema, "kind": kind})


__all__ = [
    "validation_total",
    "violation_total",
    "validation_latency_ms",
    "record_validation_metrics",
]
