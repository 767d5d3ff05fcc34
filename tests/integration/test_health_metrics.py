"""Tests for the health probes and the metrics endpoint."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from redis.asyncio import Redis

from src.funnelhub.core.config import get_settings
from src.funnelhub.main import create_app

pytestmark = [pytest.mark.integration, pytest.mark.asyncio]


@asynccontextmanager
async def healthy_session():
    yield AsyncMock()


@asynccontextmanager
async def broken_session():
    raise ConnectionRefusedError("connection refused")
    yield  # pragma: no cover


class MockTime:
    def __init__(self, start: float = 1000.0):
        self.current_time = start

    def __call__(self) -> float:
        return self.current_time


async def test_liveness(client: AsyncClient) -> None:
    response = await client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


class TestReadiness:
    async def test_healthy_without_redis(self, client: AsyncClient) -> None:
        with patch("src.funnelhub.core.health.get_session", healthy_session):
            response = await client.get("/health/ready")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["database"] == "healthy"
        assert data["redis"] == "not_configured"

    async def test_database_down_is_503(self, client: AsyncClient) -> None:
        with patch("src.funnelhub.core.health.get_session", broken_session):
            response = await client.get("/health/ready")

        assert response.status_code == 503
        data = response.json()
        assert data["status"] == "unhealthy"
        assert data["database"].startswith("unhealthy")

    async def test_redis_checked_when_configured(
        self, client: AsyncClient, fake_redis: Redis
    ) -> None:
        with (
            patch("src.funnelhub.core.health.get_session", healthy_session),
            patch("src.funnelhub.core.health.get_redis", AsyncMock(return_value=fake_redis)),
        ):
            response = await client.get("/health/ready")

        assert response.json()["redis"] == "healthy"

    async def test_redis_down_is_degraded_not_unhealthy(self, client: AsyncClient) -> None:
        broken_redis = AsyncMock()
        broken_redis.ping.side_effect = ConnectionError("redis down")
        with (
            patch("src.funnelhub.core.health.get_session", healthy_session),
            patch("src.funnelhub.core.health.get_redis", AsyncMock(return_value=broken_redis)),
        ):
            response = await client.get("/health/ready")

        assert response.status_code == 200
        assert response.json()["status"] == "degraded"

    async def test_result_is_cached_briefly(self, client: AsyncClient) -> None:
        mock_time = MockTime()
        with (
            patch("src.funnelhub.core.health.time.time", mock_time),
            patch("src.funnelhub.core.health.get_session", healthy_session),
        ):
            first = await client.get("/health/ready")
            mock_time.current_time += 5
            second = await client.get("/health/ready")
            mock_time.current_time += 10
            third = await client.get("/health/ready")

        assert first.json()["cached"] is False
        assert second.json()["cached"] is True
        assert second.json()["cache_age_seconds"] == 5.0
        assert third.json()["cached"] is False


class TestMetrics:
    async def test_exposed(self, client: AsyncClient) -> None:
        await client.get("/health")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert "http_requests_total" in response.text

    async def test_key_required_when_configured(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(get_settings(), "metrics_api_key", "metrics-secret")
        app = create_app()

        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
            denied = await client.get("/metrics")
            allowed = await client.get("/metrics", headers={"X-Metrics-Key": "metrics-secret"})

        assert denied.status_code == 401
        assert denied.json()["detail"] == "Invalid or missing metrics API key"
        assert allowed.status_code == 200
