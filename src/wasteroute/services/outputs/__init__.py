"""Serializers from domain objects to API models."""

from .formatter import route_to_response, signal_to_model, zone_to_model

__all__ = ["route_to_response", "signal_to_model", "zone_to_model"]
