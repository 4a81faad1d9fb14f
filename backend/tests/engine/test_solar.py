"""Tests for hybrid_engine.solar.resource: peak sun hours and hourly shape."""

from __future__ import annotations

import math

import numpy as np
import pytest

from hybrid_engine.solar.resource import (
    SUNRISE_HOUR,
    SUNSET_HOUR,
    annual_average_psh,
    monthly_psh,
    peak_sun_hours,
    solar_potential_kw,
)


class TestPeakSunHours:
    """Reference curves, generic fallback and input validation."""

    @pytest.mark.parametrize("latitude", np.arange(-90.0, 90.5, 7.5))
    def test_finite_positive_everywhere(self, latitude):
        for month in range(12):
            psh = peak_sun_hours(month, float(latitude))
            assert math.isfinite(psh)
            assert psh > 0

    def test_perth_reference_curve(self):
        assert peak_sun_hours(0, -31.95) == pytest.approx(7.4)
        assert peak_sun_hours(5, -31.95) == pytest.approx(3.6)

    def test_reference_tolerance_is_strict(self):
        """Exactly 1 degree from Perth falls through to the generic curve."""
        inside = peak_sun_hours(0, -31.95 + 0.99)
        outside = peak_sun_hours(0, -30.95)
        assert inside == pytest.approx(7.4)
        assert outside != pytest.approx(7.4)

    def test_darwin_and_alice_springs(self):
        assert peak_sun_hours(8, -12.46) == pytest.approx(7.2)
        assert peak_sun_hours(5, -23.70) == pytest.approx(4.5)

    def test_northern_hemisphere_is_shifted_six_months(self):
        """January in the north uses the southern July value."""
        lat = 40.0
        south = peak_sun_hours(6, -lat)
        north = peak_sun_hours(0, lat)
        assert north == pytest.approx(south)

    def test_attenuation_with_latitude(self):
        assert peak_sun_hours(0, -60.0) < peak_sun_hours(0, -45.0)
        # Equator, generic curve, no attenuation
        assert peak_sun_hours(0, -0.0) == pytest.approx(5.5)

    @pytest.mark.parametrize("month", [-1, 12])
    def test_month_out_of_range(self, month):
        with pytest.raises(ValueError, match="month"):
            peak_sun_hours(month, -31.95)

    def test_annual_average(self):
        values = monthly_psh(-31.95)
        assert values.shape == (12,)
        assert annual_average_psh(-31.95) == pytest.approx(float(values.mean()))


class TestSolarPotential:
    """Half-sine daily shape."""

    def test_zero_outside_daylight(self):
        for hour in list(range(0, SUNRISE_HOUR)) + list(range(SUNSET_HOUR + 1, 24)):
            assert solar_potential_kw(hour, 1000.0, 6.0, 0.82) == 0.0

    def test_zero_at_sunrise_and_sunset(self):
        assert solar_potential_kw(SUNRISE_HOUR, 1000.0, 6.0, 0.82) == pytest.approx(0.0)
        assert solar_potential_kw(SUNSET_HOUR, 1000.0, 6.0, 0.82) == pytest.approx(0.0, abs=1e-9)

    def test_peaks_at_noon(self):
        values = [solar_potential_kw(h, 1000.0, 6.0, 0.82) for h in range(24)]
        assert int(np.argmax(values)) == 12

    def test_daily_energy_matches_psh(self):
        """Hourly sum is within 1 % of kWp x PSH x PR."""
        pv, psh, pr = 1000.0, 6.0, 0.82
        total = sum(solar_potential_kw(h, pv, psh, pr) for h in range(24))
        assert total == pytest.approx(pv * psh * pr, rel=0.01)

    def test_scales_linearly_with_capacity(self):
        a = solar_potential_kw(10, 500.0, 5.0, 0.8)
        b = solar_potential_kw(10, 1000.0, 5.0, 0.8)
        assert b == pytest.approx(2 * a)
