"""Hourly dispatch simulation over representative seasonal days.

Dispatch is load-following: PV serves load first, surplus charges the
battery (subject to the charge-source policy) and is otherwise curtailed;
deficits are met from the battery and then from diesel.
"""

from .seasonal import (
    SEASONS,
    DispatchTimestep,
    SeasonalProfile,
    dispatch_hour,
    simulate_season,
    simulate_seasons,
)

__all__ = [
    "SEASONS",
    "DispatchTimestep",
    "SeasonalProfile",
    "dispatch_hour",
    "simulate_season",
    "simulate_seasons",
]
