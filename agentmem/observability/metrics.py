"""Prometheus metrics for the memory subsystem."""

from prometheus_client import Counter, Gauge, Histogram

MEMORY_OPERATIONS = Counter(
    "agentmem_operations_total",
    "Memory orchestrator operations by outcome",
    labelnames=["operation", "outcome"],
)

REMOTE_LATENCY = Histogram(
    "agentmem_remote_latency_seconds",
    "Latency of remote memory service calls in seconds",
    labelnames=["operation"],
    buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0, 30.0),
)

CACHE_SIZE = Gauge(
    "agentmem_cache_entries",
    "Number of entries held in the local memory cache",
)

LISTENER_ERRORS = Counter(
    "agentmem_listener_errors_total",
    "Exceptions raised by memory event listeners",
    labelnames=["event_type"],
)

MALFORMED_DATA = Counter(
    "agentmem_malformed_data_total",
    "Malformed remote fields or preference records that were skipped",
    labelnames=["kind"],
)
