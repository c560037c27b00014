"""Route group exports."""

from . import health, routes, signals, zones

__all__ = ["health", "routes", "signals", "zones"]
