"""Tests for hybrid_engine.sizing: rule-based capacity sizing."""

from __future__ import annotations

import pytest

from hybrid_engine.config import AdvancedInputs, TechnologySelection
from hybrid_engine.load.load_profile import LoadProfile
from hybrid_engine.sizing import (
    AUTO_DIESEL_MARGIN,
    battery_energy_for_storage,
    effective_yield_per_kwp,
    pv_capacity_for_target,
    size_system,
)
from hybrid_engine.solar.resource import annual_average_psh


class TestHelpers:
    def test_yield_per_kwp(self):
        expected = annual_average_psh(-31.95) * 365 * 0.82
        assert effective_yield_per_kwp(-31.95, 0.82) == pytest.approx(expected)

    def test_pv_capacity_for_target(self):
        assert pv_capacity_for_target(1_700_000.0, 1700.0) == pytest.approx(1000.0)

    def test_zero_yield_raises(self):
        with pytest.raises(ZeroDivisionError):
            pv_capacity_for_target(1000.0, 0.0)

    def test_battery_energy_for_storage(self):
        assert battery_energy_for_storage(500.0, 4.0, 0.9) == pytest.approx(2222.222, rel=1e-6)


class TestSizeSystem:
    """Flat 500 kW load at Perth unless stated otherwise."""

    def test_seventy_percent_flat_load(self, flat_config):
        result = size_system(flat_config)

        assert result.annual_demand_kwh == pytest.approx(500.0 * 8760)
        assert result.target_renewable_kwh == pytest.approx(0.7 * 500.0 * 8760)
        assert result.pv_kwp == pytest.approx(
            result.target_renewable_kwh / result.yield_per_kwp
        )
        assert result.pv_kwp > 0
        assert result.battery_kwh == pytest.approx(500.0 * 4.0 / 0.9)
        assert result.diesel_kw == pytest.approx(AUTO_DIESEL_MARGIN * 500.0)
        assert result.diesel_units == 1
        assert result.advisories == []

    def test_inverter_from_dc_ac_ratio(self, flat_sizing):
        assert flat_sizing.inverter_kw == pytest.approx(flat_sizing.pv_kwp / 1.2)

    def test_battery_power_capped_by_peak(self, flat_sizing):
        # energy x C-rate = 1111 kW, peak x 1.1 = 550 kW
        assert flat_sizing.battery_kw == pytest.approx(550.0)

    def test_battery_power_from_c_rate(self, make_config):
        config = make_config(advanced=AdvancedInputs(c_rate=0.1))
        result = size_system(config)
        assert result.battery_kw == pytest.approx(result.battery_kwh * 0.1)

    def test_zero_target_sits_at_minimum_pv(self, make_config):
        config = make_config(
            renewable_target_pct=0.0,
            advanced=AdvancedInputs(min_pv_kwp=50.0, storage_hours=0.0, min_battery_kwh=20.0),
        )
        result = size_system(config)
        assert result.pv_kwp == pytest.approx(50.0)
        assert result.battery_kwh == pytest.approx(20.0)

    def test_battery_independent_of_target(self, make_config):
        low = size_system(make_config(renewable_target_pct=0.0))
        high = size_system(make_config(renewable_target_pct=100.0))
        assert low.battery_kwh == pytest.approx(high.battery_kwh)
        assert low.pv_kwp < high.pv_kwp

    def test_tracking_reduces_pv(self, make_config):
        fixed = size_system(make_config())
        tracked = size_system(
            make_config(technology=TechnologySelection(tracking="single_axis"))
        )
        assert tracked.effective_pr == pytest.approx(0.82 * 1.22)
        assert tracked.pv_kwp == pytest.approx(fixed.pv_kwp / 1.22)

    def test_chemistry_dod_changes_battery(self, make_config):
        result = size_system(
            make_config(technology=TechnologySelection(battery="lead_acid_agm"))
        )
        assert result.battery_kwh == pytest.approx(500.0 * 4.0 / 0.5)

    @pytest.mark.parametrize("target", [0.0, 25.0, 50.0, 70.0, 95.0, 100.0])
    @pytest.mark.parametrize("pattern", ["flat", "commercial"])
    def test_results_within_bounds(self, make_config, target, pattern):
        adv = AdvancedInputs(
            min_pv_kwp=100.0,
            max_pv_kwp=1500.0,
            min_battery_kwh=200.0,
            max_battery_kwh=1500.0,
            max_battery_power_kw=400.0,
        )
        result = size_system(make_config(
            load=LoadProfile.from_pattern(pattern),
            renewable_target_pct=target,
            advanced=adv,
        ))
        assert 100.0 <= result.pv_kwp <= 1500.0
        assert 200.0 <= result.battery_kwh <= 1500.0
        assert 0.0 <= result.battery_kw <= 400.0
        assert result.inverter_kw == pytest.approx(result.pv_kwp / adv.dc_ac_ratio)

    def test_pv_clamped_to_maximum(self, make_config):
        result = size_system(make_config(advanced=AdvancedInputs(max_pv_kwp=1000.0)))
        assert result.pv_kwp == pytest.approx(1000.0)
        assert result.inverter_kw == pytest.approx(1000.0 / 1.2)


class TestAutonomy:
    """Diesel-free days add PV and storage."""

    def test_window_energy_recorded(self, autonomy_config):
        result = size_system(autonomy_config)
        assert result.autonomy_window_kwh == pytest.approx(6 * 500.0)

    def test_pv_increment(self, flat_config, autonomy_config):
        base = size_system(flat_config)
        result = size_system(autonomy_config)
        extra = 3000.0 * 2 * 1.3 / result.yield_per_kwp
        assert result.pv_kwp == pytest.approx(base.pv_kwp + extra)

    def test_battery_raised_to_autonomy_storage(self, autonomy_config):
        result = size_system(autonomy_config)
        # window mean 500 kW x 6 h / 0.9 exceeds 4 h of average demand
        assert result.battery_kwh == pytest.approx(500.0 * 6.0 / 0.9)

    def test_advisory(self, autonomy_config):
        result = size_system(autonomy_config)
        assert "Sized for 2 diesel-free days" in result.advisories


class TestManualDiesel:
    def test_units_times_size(self, make_config):
        config = make_config(advanced=AdvancedInputs(
            diesel_auto_size=False, diesel_unit_kw=300.0, diesel_quantity=2,
        ))
        result = size_system(config)
        assert result.diesel_kw == pytest.approx(600.0)
        assert result.diesel_units == 2
        assert result.diesel_unit_kw == pytest.approx(300.0)
        assert result.advisories == []

    def test_undersized_fleet_advisory(self, make_config):
        config = make_config(advanced=AdvancedInputs(
            diesel_auto_size=False, diesel_unit_kw=200.0, diesel_quantity=2,
        ))
        result = size_system(config)
        assert result.diesel_kw == pytest.approx(400.0)
        assert "Diesel (400kW) < peak (500kW)" in result.advisories

    def test_quantity_at_least_one(self, make_config):
        config = make_config(advanced=AdvancedInputs(
            diesel_auto_size=False, diesel_unit_kw=600.0, diesel_quantity=0,
        ))
        result = size_system(config)
        assert result.diesel_units == 1
        assert result.diesel_kw == pytest.approx(600.0)


class TestSizingResultDict:
    def test_keys_and_rounding(self, flat_sizing):
        data = flat_sizing.to_dict()
        assert data["diesel_kw"] == 600.0
        assert data["battery_kwh"] == pytest.approx(2222.2)
        assert "advisories" not in data
