"""Tests for the calculation pipeline in hybrid_engine.simulation.runner."""

from __future__ import annotations

import json
import logging

import numpy as np
import pytest

from hybrid_engine.config import AdvancedInputs
from hybrid_engine.load.load_profile import LoadProfile
from hybrid_engine.simulation import runner as runner_module
from hybrid_engine.simulation.runner import (
    CalculationError,
    CalculationRunner,
    InvalidInputError,
    run_calculation,
)


class TestRunCalculation:
    def test_full_pipeline(self, flat_config):
        results = run_calculation(flat_config)
        assert results.config is flat_config
        assert len(results.seasons) == 4
        assert len(results.energy.monthly) == 12
        assert len(results.financials.cash_flows) == 26
        assert len(results.sensitivity.fuel_price) == 6

    def test_to_dict_is_json_serialisable(self, default_config):
        data = run_calculation(default_config).to_dict()
        assert set(data) == {
            "load", "sizing", "seasons", "energy", "financials", "sensitivity", "advisories",
        }
        assert data["load"]["peak_kw"] == 800.0
        json.dumps(data)

    def test_deterministic(self, flat_config):
        a = run_calculation(flat_config).to_dict()
        b = run_calculation(flat_config).to_dict()
        assert a == b

    def test_advisories_collected_from_stages(self, make_config):
        config = make_config(
            renewable_target_pct=90.0,
            advanced=AdvancedInputs(diesel_free_days=1),
        )
        results = run_calculation(config)
        assert "Sized for 1 diesel-free days" in results.advisories
        assert any(a.startswith("Low diesel load factor") for a in results.advisories)

    def test_progress_callback(self, flat_config):
        steps: list[tuple[str, float]] = []
        run_calculation(flat_config, progress_callback=lambda s, f: steps.append((s, f)))

        names = [s for s, _ in steps]
        assert names == [
            "Sizing", "Dispatch", "Energy accounting", "Financial", "Sensitivity", "Complete",
        ]
        fractions = [f for _, f in steps]
        assert fractions == sorted(fractions)
        assert fractions[-1] == 1.0


class TestRunnerErrors:
    def test_zero_load_rejected(self, make_config):
        config = make_config(load=LoadProfile(hourly_kw=(0.0,) * 24))
        steps: list[str] = []
        with pytest.raises(InvalidInputError, match="Invalid loads"):
            CalculationRunner(config, lambda s, f: steps.append(s)).run()
        assert steps == []

    def test_overflowing_load_rejected(self, make_config):
        # Finite entries whose scaled values overflow to inf.
        config = make_config(load=LoadProfile(hourly_kw=(1e300,) * 24, scale=1e10))
        steps: list[str] = []
        with np.errstate(over="ignore"), pytest.raises(InvalidInputError, match="Invalid loads"):
            CalculationRunner(config, lambda s, f: steps.append(s)).run()
        assert steps == []

    def test_invalid_input_is_value_error(self):
        assert issubclass(InvalidInputError, ValueError)

    def test_stage_failure_wrapped(self, make_config):
        # Zero performance ratio gives a zero yield per kWp.
        config = make_config(advanced=AdvancedInputs(performance_ratio=0.0))
        with pytest.raises(CalculationError) as exc_info:
            run_calculation(config)
        assert exc_info.value.stage == "Sizing"
        assert str(exc_info.value).startswith("Sizing failed:")
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)

    def test_later_stage_failure_names_stage(self, flat_config, monkeypatch):
        def _boom(*args):
            raise KeyError("cash")

        monkeypatch.setattr(runner_module, "evaluate_financials", _boom)
        with pytest.raises(CalculationError, match="Financial failed"):
            run_calculation(flat_config)


class TestRunnerLogging:
    def test_stage_fields_attached(self, flat_config, caplog):
        with caplog.at_level(logging.DEBUG, logger="hybrid_engine.simulation.runner"):
            run_calculation(flat_config)

        stages = [getattr(r, "stage", None) for r in caplog.records]
        assert stages[:5] == ["Sizing", "Dispatch", "Energy accounting", "Financial", "Sensitivity"]

        done = [r for r in caplog.records if getattr(r, "run_duration_ms", None) is not None]
        assert len(done) == 1
        assert done[0].levelno == logging.INFO
        assert done[0].run_duration_ms >= 0
        assert done[0].pv_kwp > 0

    def test_failed_stage_logged(self, flat_config, monkeypatch, caplog):
        def _boom(*args):
            raise KeyError("cash")

        monkeypatch.setattr(runner_module, "evaluate_financials", _boom)
        with caplog.at_level(logging.ERROR), pytest.raises(CalculationError):
            run_calculation(flat_config)
        failed = [r for r in caplog.records if r.levelno == logging.ERROR]
        assert failed[0].stage == "Financial"
