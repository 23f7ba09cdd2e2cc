"""
Shared metrics configuration for the ACL engine.
"""

from typing import Dict, Any, Optional

from prometheus_client import Counter, CollectorRegistry, REGISTRY


class AclMetrics:
    """Prometheus counters for permission lookups, store writes and decisions."""

    def __init__(self, service_name: str = "acl", registry: Optional[CollectorRegistry] = None):
        self.service_name = service_name
        self.registry = registry if registry is not None else REGISTRY
        self._metrics: Dict[str, Any] = {}
        self._setup_metrics()

    def _setup_metrics(self):
        """Set up counters for the engine."""
        self._metrics["cache_lookups_total"] = Counter(
            "acl_cache_lookups_total",
            "Permission cache lookups",
            ["service", "tier", "result"],
            registry=self.registry
        )

        self._metrics["store_operations_total"] = Counter(
            "acl_store_operations_total",
            "Backing store operations",
            ["service", "operation"],
            registry=self.registry
        )

        self._metrics["decisions_total"] = Counter(
            "acl_decisions_total",
            "is_granted decisions",
            ["service", "result", "cascaded"],
            registry=self.registry
        )

    def record_cache_lookup(self, tier: str, hit: bool):
        """Record a cache lookup against one tier."""
        self._metrics["cache_lookups_total"].labels(
            service=self.service_name,
            tier=tier,
            result="hit" if hit else "miss"
        ).inc()

    def record_store_operation(self, operation: str):
        """Record a backing store operation (fetch, insert, update, delete)."""
        self._metrics["store_operations_total"].labels(
            service=self.service_name,
            operation=operation
        ).inc()

    def record_decision(self, granted: bool, cascaded: bool):
        """Record the outcome of an is_granted call."""
        self._metrics["decisions_total"].labels(
            service=self.service_name,
            result="granted" if granted else "denied",
            cascaded=str(cascaded).lower()
        ).inc()
