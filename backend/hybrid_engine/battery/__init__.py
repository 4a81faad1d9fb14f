"""Battery storage engine -- SOC tracking with DoD floor and power limit."""

from .soc_tracker import MIN_DISCHARGE_KWH, SOCTracker

__all__ = ["MIN_DISCHARGE_KWH", "SOCTracker"]
