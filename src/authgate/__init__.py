"""AuthGate - identity and authorization backbone of an authenticating proxy."""

__version__ = "0.1.0"
