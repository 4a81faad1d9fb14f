"""Shared test fixtures for the hybrid sizing engine and API tests."""

from __future__ import annotations

import pytest

from hybrid_engine.config import AdvancedInputs, SiteLocation, SystemConfig
from hybrid_engine.load.load_profile import LoadProfile
from hybrid_engine.sizing.capacity import SizingResult, size_system

PERTH = SiteLocation("Perth, WA", -31.95, 115.86)


# ======================================================================
# Load fixtures
# ======================================================================

@pytest.fixture
def flat_load() -> LoadProfile:
    """Constant 500 kW demand."""
    return LoadProfile.from_pattern("flat")


@pytest.fixture
def commercial_load() -> LoadProfile:
    """Daytime-peaking commercial profile (200-800 kW)."""
    return LoadProfile.from_pattern("commercial")


# ======================================================================
# Configuration fixtures
# ======================================================================

@pytest.fixture
def default_config() -> SystemConfig:
    """Default inputs: Perth, commercial load, 70 % renewable target."""
    return SystemConfig()


@pytest.fixture
def flat_config(flat_load) -> SystemConfig:
    """Flat 500 kW at Perth with a 70 % renewable target."""
    return SystemConfig(location=PERTH, load=flat_load, renewable_target_pct=70.0)


@pytest.fixture
def autonomy_config(flat_load) -> SystemConfig:
    """Flat load with two diesel-free days over 10:00-16:00."""
    return SystemConfig(
        location=PERTH,
        load=flat_load,
        renewable_target_pct=70.0,
        advanced=AdvancedInputs(diesel_free_days=2),
    )


@pytest.fixture
def flat_sizing(flat_config) -> SizingResult:
    return size_system(flat_config)


@pytest.fixture
def make_config():
    """Factory for flat-load Perth configs with selected fields replaced."""

    def _make(**overrides) -> SystemConfig:
        params = {
            "location": PERTH,
            "load": LoadProfile.from_pattern("flat"),
            "renewable_target_pct": 70.0,
        }
        params.update(overrides)
        return SystemConfig(**params)

    return _make
