"""Tests for share links and the PDF report endpoint."""

from __future__ import annotations

import pytest
from httpx import AsyncClient

from hybrid_app.schemas.project import ProjectSnapshot
from hybrid_app.services.sharing import (
    InvalidShareTokenError,
    decode_snapshot,
    encode_snapshot,
)

pytestmark = pytest.mark.asyncio


def _snapshot_body() -> dict:
    return {
        "loads": [float(300 + h) for h in range(24)],
        "scale": 1.5,
        "renewable_target_pct": 85.0,
        "location": {"name": "Broome, WA", "latitude": -17.96, "longitude": 122.24},
        "project_info": {
            "name": "Broome Depot", "client": "Acme", "reference": "BD-2031", "revision": "B",
        },
    }


class TestShareTokens:
    """Service-level encoding (no HTTP)."""

    async def test_round_trip(self):
        snapshot = ProjectSnapshot.model_validate(_snapshot_body())
        token = encode_snapshot(snapshot)
        assert "=" not in token
        assert decode_snapshot(token) == snapshot

    @pytest.mark.parametrize("token", ["!!!", "bm90LWpzb24", "e30"])
    async def test_invalid_tokens(self, token):
        # "bm90LWpzb24" is base64 for "not-json", "e30" is "{}" (no loads)
        with pytest.raises(InvalidShareTokenError):
            decode_snapshot(token)


class TestShareEndpoints:
    async def test_share_and_open(self, client: AsyncClient):
        body = _snapshot_body()
        resp = await client.post("/api/v1/projects/share", json=body)
        assert resp.status_code == 200
        token = resp.json()["token"]

        opened = await client.get(f"/api/v1/projects/shared/{token}")
        assert opened.status_code == 200
        data = opened.json()
        assert data["loads"] == body["loads"]
        assert data["renewable_target_pct"] == 85.0
        assert data["location"]["name"] == "Broome, WA"
        assert data["project_info"]["revision"] == "B"
        assert data["project_info"]["reference"] == "BD-2031"

    async def test_open_invalid_token(self, client: AsyncClient):
        resp = await client.get("/api/v1/projects/shared/not-a-token")
        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid share token"

    async def test_share_rejects_short_loads(self, client: AsyncClient):
        body = _snapshot_body()
        body["loads"] = body["loads"][:10]
        resp = await client.post("/api/v1/projects/share", json=body)
        assert resp.status_code == 422


class TestReports:
    async def test_download_pdf(self, client: AsyncClient, flat_body):
        resp = await client.post(
            "/api/v1/reports",
            json={
                "calculation": flat_body,
                "project_info": {"name": "Remote Site 1", "revision": "C"},
            },
        )
        assert resp.status_code == 200
        assert resp.headers["content-type"] == "application/pdf"
        assert 'filename="Remote_Site_1_RevC.pdf"' in resp.headers["content-disposition"]
        assert resp.content[:4] == b"%PDF"

    async def test_report_rejects_zero_load(self, client: AsyncClient, flat_body):
        flat_body["load"]["hourly_kw"] = [0.0] * 24
        resp = await client.post("/api/v1/reports", json={"calculation": flat_body})
        assert resp.status_code == 422
