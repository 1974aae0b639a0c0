"""AuthGate REST API."""

from authgate.api.router import router

__all__ = ["router"]
