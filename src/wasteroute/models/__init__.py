"""Domain models."""

from .domain import Candidate, RiskLevel, SignalPoint, Zone, ZoneSnapshot

__all__ = ["Candidate", "RiskLevel", "SignalPoint", "Zone", "ZoneSnapshot"]
