"""
Tests for application startup and shutdown wiring.
"""

import logging
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from app import main
from app.main import app
from app.usecases.message_processor import MessageProcessor


@pytest.fixture
def collaborators():
    """Patch the database and network clients built during startup."""
    delivery_client = MagicMock()
    delivery_client.aclose = AsyncMock()
    cache = MagicMock()
    cache.aclose = AsyncMock()

    with patch("app.main.init_database", new_callable=AsyncMock) as init_database, \
            patch("app.main.dispose_database", new_callable=AsyncMock) as dispose_database, \
            patch("app.main.WebhookDeliveryClient") as client_class, \
            patch("app.main.RedisCache") as cache_class:
        client_class.from_settings.return_value = delivery_client
        cache_class.from_settings.return_value = cache
        yield {
            "init_database": init_database,
            "dispose_database": dispose_database,
            "delivery_client": delivery_client,
            "cache": cache,
        }


class TestLifespan:
    """Tests for the lifespan context manager."""

    def test_startup_builds_processor(self, collaborators):
        with TestClient(app) as client:
            processor = app.state.message_processor
            response = client.get("/processor/status")

        assert isinstance(processor, MessageProcessor)
        assert response.json() == {"running": False, "next_run": None}
        collaborators["init_database"].assert_awaited_once()

    def test_shutdown_closes_clients(self, collaborators):
        with TestClient(app):
            pass

        collaborators["delivery_client"].aclose.assert_awaited_once()
        collaborators["cache"].aclose.assert_awaited_once()
        collaborators["dispose_database"].assert_awaited_once()

    def test_shutdown_of_stopped_processor_logs_no_warning(self, collaborators, caplog):
        with caplog.at_level(logging.WARNING):
            with TestClient(app):
                pass

        assert "Message processor not running" not in caplog.text

    def test_auto_start(self, collaborators):
        with patch.object(main.settings, "processor_auto_start", True):
            with TestClient(app) as client:
                processor = app.state.message_processor
                response = client.get("/processor/status")

        assert response.json()["running"] is True
        assert response.json()["next_run"] is not None
        assert processor.is_running is False

    def test_start_and_stop_through_api(self, collaborators):
        with TestClient(app) as client:
            started = client.post("/processor/start")
            running = client.get("/processor/status").json()["running"]
            stopped = client.post("/processor/stop")

        assert started.json() == {"message": "message processor started"}
        assert running is True
        assert stopped.json() == {"message": "message processor stopped"}
