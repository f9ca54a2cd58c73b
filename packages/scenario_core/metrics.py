"""Prometheus metrics definitions for scenario flows.

This module provides centralized metric definitions for observability.
The embedding application decides how the default registry is exported.
"""

from prometheus_client import Counter  # type: ignore[import-not-found]

# Lifecycle metrics
SCENARIOS_STARTED = Counter(
    "scenario_starts_total",
    "Scenarios started",
)
NODE_TRANSITIONS = Counter(
    "scenario_node_transitions_total",
    "Node transitions delivered",
    ["node"],
)

# Failure metrics
INVALID_NODE_REQUESTS = Counter(
    "scenario_invalid_node_requests_total",
    "set_node calls with an unknown node id",
)
DELIVERY_FAILURES = Counter(
    "scenario_delivery_failures_total",
    "Context updates the injector failed to deliver",
)
