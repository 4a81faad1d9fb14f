"""Representative 24-hour load profile for a remote site.

The same daily shape is assumed for every day of the year; a scale factor
lets the user resize a preset pattern without editing each hour.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

import numpy as np
from numpy.typing import NDArray

from hybrid_engine.catalog import LOAD_PATTERNS

HOURS_PER_DAY = 24
HOURS_PER_YEAR = 8760


@dataclass(frozen=True)
class LoadProfile:
    """Hourly demand (kW) for a representative day.

    Parameters
    ----------
    hourly_kw : tuple of float
        24 unscaled demand values, index 0 = 00:00-01:00.
    scale : float
        Multiplier applied to every hour.  Default 1.0.
    """

    hourly_kw: tuple[float, ...]
    scale: float = 1.0

    def __post_init__(self) -> None:
        values = tuple(float(v) for v in self.hourly_kw)
        if len(values) != HOURS_PER_DAY:
            raise ValueError(
                f"hourly_kw must have {HOURS_PER_DAY} values, got {len(values)}"
            )
        if not all(math.isfinite(v) for v in values):
            raise ValueError("hourly_kw values must be finite")
        if any(v < 0 for v in values):
            raise ValueError("hourly_kw values must be >= 0")
        if not math.isfinite(self.scale) or self.scale < 0:
            raise ValueError(f"scale must be finite and >= 0, got {self.scale}")
        object.__setattr__(self, "hourly_kw", values)

    @classmethod
    def from_pattern(cls, key: str, scale: float = 1.0) -> "LoadProfile":
        """Build a profile from one of the built-in load patterns."""
        if key not in LOAD_PATTERNS:
            raise ValueError(
                f"Unknown load pattern '{key}'. "
                f"Choose from: {sorted(LOAD_PATTERNS.keys())}"
            )
        _label, values = LOAD_PATTERNS[key]
        return cls(hourly_kw=tuple(values), scale=scale)

    # ------------------------------------------------------------------
    # Derived statistics
    # ------------------------------------------------------------------

    @property
    def scaled(self) -> NDArray[np.float64]:
        """Scaled hourly demand, shape (24,)."""
        return np.asarray(self.hourly_kw, dtype=np.float64) * self.scale

    @property
    def average_kw(self) -> float:
        return float(np.mean(self.scaled))

    @property
    def peak_kw(self) -> float:
        return float(np.max(self.scaled))

    @property
    def min_kw(self) -> float:
        return float(np.min(self.scaled))

    @property
    def load_factor(self) -> float:
        """Average over peak demand; 0.0 for an all-zero profile."""
        peak = self.peak_kw
        return self.average_kw / peak if peak > 0 else 0.0

    @property
    def annual_kwh(self) -> float:
        return self.average_kw * HOURS_PER_YEAR

    def window_energy_kwh(self, start_hour: int, end_hour: int) -> float:
        """Scaled energy over hours ``[start_hour, end_hour)``.

        Hour indices wrap modulo 24, so a window may extend past midnight
        when ``end_hour`` exceeds 24.
        """
        scaled = self.scaled
        return float(
            sum(scaled[h % HOURS_PER_DAY] for h in range(start_hour, end_hour))
        )
