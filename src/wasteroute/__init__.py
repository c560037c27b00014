"""Zone simulation and priority route engine for waste collection."""

__version__ = "0.1.0"
