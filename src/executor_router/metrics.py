"""Prometheus metrics for executor routing.

Counters are labeled so decisions can be broken down by the rule that made
them and the executor that was chosen.
"""

from typing import Final

from prometheus_client import Counter

ROUTING_DECISIONS: Final[Counter] = Counter(
    "executor_router_decisions_total",
    "Total routed executor calls, labeled by rule, executor and operation.",
    labelnames=("rule", "executor", "operation"),
)

RULE_FAILURES: Final[Counter] = Counter(
    "executor_router_rule_failures_total",
    "Total executor rule evaluations that raised, labeled by rule.",
    labelnames=("rule",),
)
