"""API test infrastructure: async httpx client against the in-process app."""

from __future__ import annotations

from collections.abc import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from hybrid_engine.catalog import LOAD_PATTERNS


# ---------------------------------------------------------------------------
# FastAPI app with fresh in-memory state
# ---------------------------------------------------------------------------

@pytest_asyncio.fixture
async def app():
    from hybrid_app.main import create_app
    from hybrid_app.core.rate_limit import calculation_limiter, report_limiter
    from hybrid_app.core.run_gate import run_gate

    application = create_app()

    # Reset rate limiters and the stored result between tests
    calculation_limiter.reset()
    report_limiter.reset()
    run_gate.clear()

    yield application

    run_gate.clear()


@pytest_asyncio.fixture
async def client(app) -> AsyncGenerator[AsyncClient, None]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


# ---------------------------------------------------------------------------
# Request payloads
# ---------------------------------------------------------------------------

@pytest.fixture
def flat_body() -> dict:
    """Calculation body for a flat 500 kW load at Perth."""
    return {
        "location": {"name": "Perth, WA", "latitude": -31.95, "longitude": 115.86},
        "load": {"hourly_kw": list(LOAD_PATTERNS["flat"][1]), "scale": 1.0},
        "renewable_target_pct": 70.0,
    }
