"""Observability helpers for AuthGate."""

from authgate.observability.metrics import metrics

__all__ = ["metrics"]
