"""Tests for hybrid_engine.battery.soc_tracker."""

from __future__ import annotations

import pytest

from hybrid_engine.battery import MIN_DISCHARGE_KWH, SOCTracker


def _tracker(**kwargs) -> SOCTracker:
    params = {"capacity_kwh": 100.0, "power_kw": 50.0, "dod": 0.9, "efficiency": 0.9}
    params.update(kwargs)
    return SOCTracker(**params)


class TestConstruction:
    def test_starts_at_minimum(self):
        bat = _tracker()
        assert bat.soc_kwh == pytest.approx(10.0)
        assert bat.soc_fraction == pytest.approx(0.1)

    def test_initial_soc_clipped(self):
        assert _tracker(initial_soc_kwh=500.0).soc_kwh == pytest.approx(100.0)
        assert _tracker(initial_soc_kwh=0.0).soc_kwh == pytest.approx(10.0)

    @pytest.mark.parametrize("kwargs", [
        {"capacity_kwh": -1.0},
        {"power_kw": -1.0},
        {"dod": 0.0},
        {"dod": 1.5},
        {"efficiency": 0.0},
    ])
    def test_invalid_parameters(self, kwargs):
        with pytest.raises(ValueError):
            _tracker(**kwargs)

    def test_zero_capacity(self):
        bat = _tracker(capacity_kwh=0.0)
        assert bat.soc_fraction == 0.0
        assert bat.charge(100.0) == 0.0
        assert bat.discharge(100.0) == 0.0


class TestCharge:
    def test_efficiency_applied_on_input(self):
        bat = _tracker()
        accepted = bat.charge(20.0)
        assert accepted == pytest.approx(20.0)
        assert bat.soc_kwh == pytest.approx(10.0 + 18.0)

    def test_power_limit(self):
        bat = _tracker()
        assert bat.charge(200.0) == pytest.approx(50.0)

    def test_headroom_limit(self):
        bat = _tracker(initial_soc_kwh=91.0)
        accepted = bat.charge(50.0)
        assert accepted == pytest.approx(9.0 / 0.9)
        assert bat.soc_kwh == pytest.approx(100.0)

    def test_full_battery_accepts_nothing(self):
        bat = _tracker(initial_soc_kwh=100.0)
        assert bat.charge(10.0) == 0.0

    def test_non_positive_request(self):
        bat = _tracker()
        assert bat.charge(0.0) == 0.0
        assert bat.charge(-5.0) == 0.0


class TestDischarge:
    def test_delivers_one_for_one(self):
        bat = _tracker(initial_soc_kwh=60.0)
        assert bat.discharge(20.0) == pytest.approx(20.0)
        assert bat.soc_kwh == pytest.approx(40.0)

    def test_floor_respected(self):
        bat = _tracker(initial_soc_kwh=30.0)
        assert bat.discharge(45.0) == pytest.approx(20.0)
        assert bat.soc_kwh == pytest.approx(bat.min_soc_kwh)

    def test_power_limit(self):
        bat = _tracker(initial_soc_kwh=100.0)
        assert bat.discharge(80.0) == pytest.approx(50.0)

    def test_threshold_blocks_small_reserve(self):
        bat = _tracker(initial_soc_kwh=10.0 + MIN_DISCHARGE_KWH / 2)
        assert bat.discharge(5.0) == 0.0

    def test_just_above_threshold(self):
        bat = _tracker(initial_soc_kwh=10.0 + MIN_DISCHARGE_KWH + 0.5)
        assert bat.discharge(5.0) == pytest.approx(1.5)


class TestReset:
    def test_reset_restores_initial(self):
        bat = _tracker(initial_soc_kwh=50.0)
        bat.discharge(20.0)
        bat.reset()
        assert bat.soc_kwh == pytest.approx(50.0)

    def test_soc_stays_in_bounds_over_sequence(self):
        bat = _tracker()
        for step in range(48):
            if step % 3:
                bat.charge(37.0)
            else:
                bat.discharge(64.0)
            assert bat.min_soc_kwh - 1e-9 <= bat.soc_kwh <= bat.max_soc_kwh + 1e-9
