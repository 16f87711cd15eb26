"""
Integration tests for the schedule and health API.
"""

import time
from datetime import datetime

import pytest
from fastapi.testclient import TestClient

from clipcast.config import ClipCastConfig, StoreConfig, TasksConfig
from clipcast.main import create_app
from clipcast.store.memory import MemoryDocumentStore

CRON_HEADERS = {"X-Appengine-Cron": "true"}


@pytest.fixture
def production_config() -> ClipCastConfig:
    return ClipCastConfig(store=StoreConfig(backend="memory"))


@pytest.fixture
def client(production_config, small_store):
    app = create_app(production_config, small_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def develop_client(develop_config, small_store):
    app = create_app(develop_config, small_store)
    with TestClient(app) as test_client:
        yield test_client


@pytest.mark.integration
class TestExportEndpoint:
    """Tests for /_task/export."""

    def test_requires_cron_header(self, client: TestClient):
        response = client.get("/_task/export")

        assert response.status_code == 400

    def test_wrong_header_value(self, client: TestClient):
        response = client.get("/_task/export", headers={"X-Appengine-Cron": "false"})

        assert response.status_code == 400

    def test_cron_request(self, client: TestClient, small_store: MemoryDocumentStore):
        response = client.get("/_task/export", headers=CRON_HEADERS)

        assert response.status_code == 200
        assert response.json()["generated"] is True
        assert len([k for k in small_store.document_keys if k.startswith("Schedule/")]) == 2

    def test_develop_mode_skips_header_check(self, develop_client: TestClient):
        response = develop_client.get("/_task/export")

        assert response.status_code == 200

    def test_repeated_export(self, client: TestClient):
        client.get("/_task/export", headers=CRON_HEADERS)

        response = client.get("/_task/export", headers=CRON_HEADERS)

        assert response.status_code == 200
        assert response.json()["generated"] is False
        assert response.json()["items"] == 0

    def test_export_already_running(self, client: TestClient):
        service = client.app.state.schedule_service
        service.export_lock.acquire()
        try:
            response = client.get("/_task/export", headers=CRON_HEADERS)
        finally:
            service.export_lock.release()

        assert response.status_code == 409
        assert response.json()["detail"]["running"] is True

    def test_empty_corpus(self, develop_config, empty_store):
        with TestClient(create_app(develop_config, empty_store)) as client:
            response = client.get("/_task/export")

        assert response.status_code == 500
        assert response.json()["detail"]["kind"] == "stats_not_found"


@pytest.mark.integration
class TestScheduleEndpoint:
    """Tests for /schedule."""

    def test_not_generated_yet(self, client: TestClient):
        response = client.get("/schedule")

        assert response.status_code == 404
        assert response.json()["detail"]["kind"] == "not_found"

    def test_window(self, client: TestClient):
        client.get("/_task/export", headers=CRON_HEADERS)

        response = client.get("/schedule")

        assert response.status_code == 200
        channels = response.json()["channels"]
        assert len(channels) == 4
        for channel in channels:
            items = channel["items"]
            # three hours of five-minute clips, plus the boundary items
            assert 36 <= len(items) <= 38
            assert set(items[0]) == {"start_time", "duration", "clip_id"}
            assert items[0]["duration"] == 300.0
            first_start = datetime.fromisoformat(items[0]["start_time"])
            assert first_start <= datetime.now(first_start.tzinfo)


@pytest.mark.integration
class TestHealthEndpoint:
    """Tests for /health."""

    def test_health(self, client: TestClient):
        response = client.get("/health")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert "version" in data
        assert "timestamp" in data

    def test_schedule_health_before_export(self, client: TestClient):
        data = client.get("/health/schedule").json()

        assert data == {"status": "degraded", "corpus_size": 500, "today": False, "tomorrow": False}

    def test_schedule_health_after_export(self, client: TestClient):
        client.get("/_task/export", headers=CRON_HEADERS)

        data = client.get("/health/schedule").json()

        assert data["status"] == "healthy"
        assert data["today"] is True
        assert data["tomorrow"] is True

    def test_schedule_health_without_corpus(self, develop_config, empty_store):
        with TestClient(create_app(develop_config, empty_store)) as client:
            data = client.get("/health/schedule").json()

        assert data["corpus_size"] is None
        assert data["status"] == "degraded"


@pytest.mark.integration
@pytest.mark.slow
class TestBackgroundExport:
    """Tests for the in-process export task."""

    def test_runs_on_startup(self, small_store: MemoryDocumentStore):
        config = ClipCastConfig(
            store=StoreConfig(backend="memory"),
            tasks=TasksConfig(enabled=True, run_immediately=True),
        )
        app = create_app(config, small_store)

        with TestClient(app) as client:
            deadline = time.monotonic() + 10
            while time.monotonic() < deadline:
                if client.get("/health/schedule").json()["tomorrow"]:
                    break
                time.sleep(0.1)

            assert app.state.task_scheduler.is_running
            assert client.get("/health/schedule").json()["status"] == "healthy"

        assert not app.state.task_scheduler.is_running
