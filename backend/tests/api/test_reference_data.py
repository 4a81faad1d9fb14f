"""Tests for catalog and load-profile endpoints."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
from httpx import AsyncClient

from hybrid_engine.catalog import LOAD_PATTERNS

pytestmark = pytest.mark.asyncio


class TestCatalog:
    async def test_catalog(self, client: AsyncClient):
        resp = await client.get("/api/v1/catalog")
        assert resp.status_code == 200
        data = resp.json()
        assert data["battery_chemistries"]["lfp"]["dod"] == 0.9
        assert data["tracking_systems"]["single_axis"]["yield_factor"] == 1.22
        assert data["diesel_classes"]["medium"]["sfc_partial"] == 0.30
        assert data["reference_sites"][0]["name"] == "Perth, WA"


class TestLoadPatterns:
    async def test_list_patterns(self, client: AsyncClient):
        resp = await client.get("/api/v1/load-profiles/patterns")
        assert resp.status_code == 200
        patterns = {p["key"]: p for p in resp.json()}
        assert set(patterns) == set(LOAD_PATTERNS)
        assert patterns["flat"]["average_kw"] == 500.0
        assert len(patterns["commercial"]["hourly_kw"]) == 24


class TestLoadCSV:
    async def test_template_download(self, client: AsyncClient):
        values = [float(100 + h) for h in range(24)]
        resp = await client.post("/api/v1/load-profiles/template", json={"hourly_kw": values})
        assert resp.status_code == 200
        assert resp.headers["content-type"].startswith("text/csv")
        assert "load_profile_template.csv" in resp.headers["content-disposition"]
        lines = resp.text.strip().splitlines()
        assert lines[0] == "Hour,Load_kW"
        assert lines[24] == "23,123"

    async def test_template_needs_24_values(self, client: AsyncClient):
        resp = await client.post("/api/v1/load-profiles/template", json={"hourly_kw": [1.0]})
        assert resp.status_code == 422

    async def test_import(self, client: AsyncClient):
        content = "Hour,Load_kW\n0,100\n1,oops\n2,-5\n"
        resp = await client.post(
            "/api/v1/load-profiles/import",
            files={"file": ("load.csv", content.encode(), "text/csv")},
        )
        assert resp.status_code == 200
        data = resp.json()
        assert len(data["hourly_kw"]) == 24
        assert data["hourly_kw"][:3] == [100.0, 500.0, 0.0]
        assert data["peak_kw"] == 500.0

    async def test_import_round_trip(self, client: AsyncClient):
        values = list(LOAD_PATTERNS["commercial"][1])
        template = await client.post("/api/v1/load-profiles/template", json={"hourly_kw": values})
        resp = await client.post(
            "/api/v1/load-profiles/import",
            files={"file": ("load.csv", template.content, "text/csv")},
        )
        assert resp.json()["hourly_kw"] == [float(v) for v in values]

    async def test_import_not_utf8(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/load-profiles/import",
            files={"file": ("load.csv", b"\xff\xfe\x00bad", "text/csv")},
        )
        assert resp.status_code == 400

    async def test_import_too_large(self, client: AsyncClient):
        resp = await client.post(
            "/api/v1/load-profiles/import",
            files={"file": ("load.csv", b"0" * (65 * 1024), "text/csv")},
        )
        assert resp.status_code == 413


class TestHealth:
    async def test_healthy(self, client: AsyncClient):
        with patch("redis.from_url") as mock_from_url:
            mock_from_url.return_value = MagicMock()
            resp = await client.get("/health")
        assert resp.status_code == 200
        assert resp.json() == {"status": "ok", "services": {"redis": "ok"}}

    async def test_degraded_without_redis(self, client: AsyncClient):
        with patch("redis.from_url") as mock_from_url:
            mock_from_url.return_value.ping.side_effect = ConnectionError("refused")
            resp = await client.get("/health")
        assert resp.status_code == 200
        data = resp.json()
        assert data["status"] == "degraded"
        assert data["services"]["redis"].startswith("error")
