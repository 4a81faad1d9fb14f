"""Tests for request logging middleware and the JSON formatter."""

from __future__ import annotations

import json
import logging
from unittest.mock import patch

import pytest
from httpx import AsyncClient

from hybrid_app.core.logging import JSONFormatter, bind_task_id, request_id_var

pytestmark = pytest.mark.asyncio


class TestRequestId:
    async def test_generated_request_id(self, client: AsyncClient):
        resp = await client.get("/api/v1/catalog")
        assert len(resp.headers["x-request-id"]) == 8

    async def test_forwarded_request_id(self, client: AsyncClient):
        resp = await client.get("/api/v1/catalog", headers={"X-Request-ID": "abc123"})
        assert resp.headers["x-request-id"] == "abc123"


class TestJSONFormatter:
    async def test_fields(self):
        record = logging.LogRecord(
            "hybrid.access", logging.INFO, __file__, 1, "%s done", ("GET",), None
        )
        record.status_code = 200
        token = request_id_var.set("rid-1")
        try:
            entry = json.loads(JSONFormatter().format(record))
        finally:
            request_id_var.reset(token)

        assert entry["message"] == "GET done"
        assert entry["level"] == "INFO"
        assert entry["request_id"] == "rid-1"
        assert entry["status_code"] == 200
        assert "method" not in entry

    async def test_run_fields_and_task_id(self):
        record = logging.LogRecord(
            "hybrid_engine.simulation.runner", logging.INFO, __file__, 1,
            "Calculation complete", (), None,
        )
        record.stage = "Complete"
        record.run_duration_ms = 12.5
        record.pv_kwp = 1400.0
        with bind_task_id("task-42"):
            entry = json.loads(JSONFormatter().format(record))

        assert entry["task_id"] == "task-42"
        assert entry["stage"] == "Complete"
        assert entry["run_duration_ms"] == 12.5
        assert entry["pv_kwp"] == 1400.0
        assert "request_id" not in entry

    async def test_task_id_unbound_after_block(self):
        with bind_task_id("task-1"):
            pass
        record = logging.LogRecord("x", logging.INFO, __file__, 1, "m", (), None)
        assert "task_id" not in json.loads(JSONFormatter().format(record))


class TestAccessLog:
    async def test_one_record_per_request(self, client: AsyncClient, caplog):
        with caplog.at_level(logging.INFO, logger="hybrid.access"):
            await client.get("/api/v1/catalog")
        records = [r for r in caplog.records if r.name == "hybrid.access"]
        assert len(records) == 1
        assert records[0].status_code == 200
        assert records[0].path == "/api/v1/catalog"

    async def test_health_checks_below_info(self, client: AsyncClient, caplog):
        with patch("redis.from_url"), caplog.at_level(logging.INFO, logger="hybrid.access"):
            await client.get("/health")
        assert not [r for r in caplog.records if r.name == "hybrid.access"]
