# Copyright (c) 2025 Artoo Corporation
# Licensed under the Business Source License 1.1 (see LICENSE).
# Change Date: 2029-09-08  •  Change License: LGPL-3.0-or-later

"""Telemetry helpers (OpenTelemetry metrics and tracing)."""

from .metrics import (
    record_validation_metrics,
    validation_latency_ms,
    validation_total,
    violation_total,
)
from .runtime import get_tracer, meter

__all__ = [
    "get_tracer",
    "meter",
    "record_validation_metrics",
    "validation_latency_ms",
    "validation_total",
    "violation_total",
]
