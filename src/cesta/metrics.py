"""Prometheus metrics definitions for Cesta."""

from __future__ import annotations

from prometheus_client import Counter, Histogram

REQUEST_COUNT = Counter(
    "cesta_http_requests_total",
    "Total number of HTTP requests processed by the Cesta API",
    ["method", "path", "status"],
)

REQUEST_LATENCY = Histogram(
    "cesta_http_request_duration_seconds",
    "Latency of HTTP requests processed by the Cesta API",
    ["method", "path"],
)

GROUP_OPERATIONS = Counter(
    "cesta_group_operations_total",
    "Shopping group lifecycle operations by outcome",
    ["operation", "outcome"],
)

INGREDIENTS_AGGREGATED = Counter(
    "cesta_ingredients_aggregated_total",
    "Ingredient triples consumed by the aggregator",
)

__all__ = [
    "REQUEST_COUNT",
    "REQUEST_LATENCY",
    "GROUP_OPERATIONS",
    "INGREDIENTS_AGGREGATED",
]
