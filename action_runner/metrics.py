"""Prometheus metrics for action execution."""

from prometheus_client import Counter, Gauge, Histogram

ACTIONS_EXECUTED = Counter(
    "action_runner_actions_executed_total",
    "Total number of template actions executed",
    ["action", "status"],
)

ACTION_DURATION = Histogram(
    "action_runner_action_duration_seconds",
    "Time spent executing template actions",
    ["action"],
)

REGISTERED_ACTIONS = Gauge(
    "action_runner_registered_actions", "Number of registered template actions"
)
