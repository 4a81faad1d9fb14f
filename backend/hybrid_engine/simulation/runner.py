"""Calculation orchestrator for hybrid microgrid sizing.

``CalculationRunner`` wires the sizing, dispatch, accounting, financial and
sensitivity stages into one deterministic pass over an immutable
:class:`~hybrid_engine.config.SystemConfig`.  Each stage consumes only the
configuration and the outputs of earlier stages.  A failure in any stage
aborts the run; no partial results are returned.
"""

from __future__ import annotations

import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Callable

from hybrid_engine.accounting.energy import EnergySummary, account_energy
from hybrid_engine.config import SystemConfig
from hybrid_engine.dispatch.seasonal import SeasonalProfile, simulate_seasons
from hybrid_engine.economics.cashflow import FinancialSummary, evaluate_financials
from hybrid_engine.economics.sensitivity import SensitivityTables, sensitivity_analysis
from hybrid_engine.sizing.capacity import SizingResult, size_system

logger = logging.getLogger(__name__)


# ======================================================================
# Errors
# ======================================================================

class InvalidInputError(ValueError):
    """Configuration cannot be evaluated (e.g. no load)."""


class CalculationError(RuntimeError):
    """A pipeline stage failed unexpectedly."""

    def __init__(self, stage: str, message: str) -> None:
        self.stage = stage
        super().__init__(f"{stage} failed: {message}")


# ======================================================================
# Results
# ======================================================================

@dataclass
class CalculationResults:
    """Everything produced by one calculation run."""
    config: SystemConfig
    sizing: SizingResult
    seasons: list[SeasonalProfile]
    energy: EnergySummary
    financials: FinancialSummary
    sensitivity: SensitivityTables
    advisories: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        load = self.config.load
        return {
            "load": {
                "average_kw": round(load.average_kw, 1),
                "peak_kw": round(load.peak_kw, 1),
                "min_kw": round(load.min_kw, 1),
                "load_factor_pct": round(load.load_factor * 100.0, 1),
                "annual_kwh": round(load.annual_kwh),
            },
            "sizing": self.sizing.to_dict(),
            "seasons": [s.to_dict() for s in self.seasons],
            "energy": self.energy.to_dict(),
            "financials": self.financials.to_dict(),
            "sensitivity": self.sensitivity.to_dict(),
            "advisories": list(self.advisories),
        }


# ======================================================================
# Runner
# ======================================================================

class CalculationRunner:
    """End-to-end calculation for one configuration snapshot.

    Parameters
    ----------
    config : SystemConfig
        Immutable run configuration.
    progress_callback : callable or None
        Optional ``callback(step: str, fraction: float)`` invoked before
        each stage.  *fraction* ranges from 0.0 to 1.0.
    """

    def __init__(
        self,
        config: SystemConfig,
        progress_callback: Callable[[str, float], None] | None = None,
    ) -> None:
        self.config = config
        self._progress = progress_callback

    def _report(self, step: str, fraction: float) -> None:
        if self._progress is not None:
            self._progress(step, fraction)
        logger.debug(
            "Calculation step: %s (%.0f %%)", step, fraction * 100,
            extra={"stage": step, "progress_pct": round(fraction * 100)},
        )

    def _stage(self, name: str, fraction: float, fn: Callable[..., Any], *args: Any) -> Any:
        self._report(name, fraction)
        try:
            return fn(*args)
        except (InvalidInputError, CalculationError):
            raise
        except Exception as exc:
            logger.exception("Stage '%s' failed", name, extra={"stage": name})
            raise CalculationError(name, str(exc) or type(exc).__name__) from exc

    def run(self) -> CalculationResults:
        """Execute sizing, dispatch, accounting, financial and sensitivity.

        Raises
        ------
        InvalidInputError
            Average load is not a positive finite number.  Raised before
            any stage runs.
        CalculationError
            Any stage raised unexpectedly.
        """
        config = self.config
        average_kw = config.load.average_kw
        if not math.isfinite(average_kw) or average_kw <= 0:
            raise InvalidInputError("Invalid loads")

        started = time.perf_counter()
        battery = config.technology.battery_spec

        sizing = self._stage("Sizing", 0.0, size_system, config)
        seasons = self._stage(
            "Dispatch", 0.2, simulate_seasons,
            config.load, sizing, config.location.latitude,
            battery.dod, battery.efficiency, config.advanced.battery_charge_source,
        )
        energy = self._stage("Energy accounting", 0.5, account_energy, config, sizing, seasons)
        financials = self._stage("Financial", 0.7, evaluate_financials, config, sizing, energy)
        sensitivity = self._stage(
            "Sensitivity", 0.9, sensitivity_analysis,
            config, sizing, energy, financials.capex,
        )
        self._report("Complete", 1.0)

        advisories = [*sizing.advisories, *energy.advisories]

        run_duration_ms = round((time.perf_counter() - started) * 1000, 1)
        logger.info(
            "Calculation complete: PV %.0f kWp, battery %.0f kWh, diesel %.0f kW, "
            "NPV benefit %.0f (%.1fms)",
            sizing.pv_kwp,
            sizing.battery_kwh,
            sizing.diesel_kw,
            financials.npv_benefit,
            run_duration_ms,
            extra={
                "stage": "Complete",
                "run_duration_ms": run_duration_ms,
                "pv_kwp": round(sizing.pv_kwp, 1),
                "battery_kwh": round(sizing.battery_kwh, 1),
                "diesel_kw": round(sizing.diesel_kw, 1),
            },
        )

        return CalculationResults(
            config=config,
            sizing=sizing,
            seasons=seasons,
            energy=energy,
            financials=financials,
            sensitivity=sensitivity,
            advisories=advisories,
        )


def run_calculation(
    config: SystemConfig,
    progress_callback: Callable[[str, float], None] | None = None,
) -> CalculationResults:
    """Run the full pipeline for *config* and return a fresh results value."""
    return CalculationRunner(config, progress_callback).run()
