"""
State of Charge (SOC) tracker for the dispatch simulator.

Tracks stored energy in kWh with hourly time steps.  Charging losses are
applied entirely on the way in (only ``input * efficiency`` is stored);
discharge is delivered one-for-one from storage.  Stored energy is always
kept within ``[capacity * (1 - DoD), capacity]``.
"""

from __future__ import annotations

import numpy as np

# Minimum usable energy (kWh) above the floor before discharge is allowed.
MIN_DISCHARGE_KWH = 1.0


class SOCTracker:
    """Energy-counting SOC tracker with a power limit and DoD floor.

    Parameters
    ----------
    capacity_kwh : float
        Nameplate energy capacity in kWh.  Zero disables the battery.
    power_kw : float
        Maximum charge and discharge power in kW.
    dod : float
        Usable depth of discharge in (0, 1].
    efficiency : float
        Round-trip efficiency in (0, 1], charged on the input side.
    initial_soc_kwh : float or None
        Starting stored energy.  ``None`` starts at the minimum SOC.
    """

    def __init__(
        self,
        capacity_kwh: float,
        power_kw: float,
        dod: float,
        efficiency: float,
        initial_soc_kwh: float | None = None,
    ) -> None:
        if capacity_kwh < 0:
            raise ValueError(f"capacity_kwh must be >= 0, got {capacity_kwh}")
        if power_kw < 0:
            raise ValueError(f"power_kw must be >= 0, got {power_kw}")
        if not 0 < dod <= 1.0:
            raise ValueError(f"dod must be in (0, 1], got {dod}")
        if not 0 < efficiency <= 1.0:
            raise ValueError(f"efficiency must be in (0, 1], got {efficiency}")

        self.capacity_kwh: float = capacity_kwh
        self.power_kw: float = power_kw
        self.dod: float = dod
        self.efficiency: float = efficiency

        start = self.min_soc_kwh if initial_soc_kwh is None else initial_soc_kwh
        self._soc_kwh: float = self._clip(start)
        self._initial_soc_kwh: float = self._soc_kwh

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def min_soc_kwh(self) -> float:
        return self.capacity_kwh * (1.0 - self.dod)

    @property
    def max_soc_kwh(self) -> float:
        return self.capacity_kwh

    @property
    def soc_kwh(self) -> float:
        return self._soc_kwh

    @property
    def soc_fraction(self) -> float:
        """Stored energy as a fraction of capacity (0.0 with no battery)."""
        if self.capacity_kwh <= 0:
            return 0.0
        return self._soc_kwh / self.capacity_kwh

    @property
    def available_kwh(self) -> float:
        """Energy that can be withdrawn before reaching the floor."""
        return max(0.0, self._soc_kwh - self.min_soc_kwh)

    @property
    def headroom_kwh(self) -> float:
        """Storage space left before reaching capacity."""
        return max(0.0, self.max_soc_kwh - self._soc_kwh)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def charge(self, power_kw: float) -> float:
        """Offer *power_kw* of surplus for one hour.

        Returns
        -------
        float
            Input power accepted (kW, >= 0).  The stored increment is this
            value times the round-trip efficiency.
        """
        if power_kw <= 0:
            return 0.0
        accepted = min(power_kw, self.power_kw, self.headroom_kwh / self.efficiency)
        self._soc_kwh = self._clip(self._soc_kwh + accepted * self.efficiency)
        return float(accepted)

    def discharge(self, power_kw: float) -> float:
        """Request *power_kw* from storage for one hour.

        Nothing is delivered unless more than ``MIN_DISCHARGE_KWH`` is
        available above the floor.

        Returns
        -------
        float
            Power delivered (kW, >= 0).
        """
        if power_kw <= 0:
            return 0.0
        available = self.available_kwh
        if available <= MIN_DISCHARGE_KWH:
            return 0.0
        delivered = min(power_kw, self.power_kw, available)
        self._soc_kwh = self._clip(self._soc_kwh - delivered)
        return float(delivered)

    def reset(self) -> None:
        """Reset SOC to the value provided at construction."""
        self._soc_kwh = self._initial_soc_kwh

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------

    def _clip(self, soc_kwh: float) -> float:
        return float(np.clip(soc_kwh, self.min_soc_kwh, self.max_soc_kwh))

    def __repr__(self) -> str:
        return (
            f"SOCTracker(capacity_kwh={self.capacity_kwh}, "
            f"power_kw={self.power_kw}, soc_kwh={self._soc_kwh:.2f})"
        )
