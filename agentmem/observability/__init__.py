"""Observability: structured logging and metrics.

Provides standardized observability primitives using structlog for logging
and Prometheus for metrics.
"""

from agentmem.observability.logging import get_logger, setup_logging

__all__ = ["get_logger", "setup_logging"]
