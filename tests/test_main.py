"""Tests for the FastAPI endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient

from main import app, get_extractor, get_settings
from scene_scheduler.config import Settings
from scene_scheduler.exceptions import ConfigurationError

client = TestClient(app)


@pytest.fixture
def extractor():
    """Extractor double returning two DINER scenes per fragment."""
    mock = MagicMock()
    mock.extract.return_value = [
        {"scene_number": 1, "location_name": "DINER", "location_type": "EXT",
         "time_of_day": "DAY", "estimatedTime": 2},
        {"scene_number": 2, "location_name": "DINER", "location_type": "INT",
         "time_of_day": "NIGHT", "estimatedTime": 3},
    ]
    return mock


@pytest.fixture(autouse=True)
def overrides(extractor):
    """Swap the environment-driven dependencies for test doubles."""
    app.dependency_overrides[get_settings] = lambda: Settings(openai_api_key="sk-test", day_budget_hours=12.0)
    app.dependency_overrides[get_extractor] = lambda: extractor
    yield
    app.dependency_overrides.clear()


def test_root():
    response = client.get("/")

    assert response.status_code == 200
    assert response.json()["status"] == "active"


def test_health():
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


class TestScheduleEndpoint:
    """Tests for POST /schedule."""

    def test_schedules_scenes(self):
        response = client.post("/schedule", json={
            "scenes": [
                {"scene_number": 1, "location_name": "DINER", "estimatedTime": 5},
                {"scene_number": 2, "location_name": "PARK", "estimatedTime": 5},
            ],
            "day_budget_hours": 7,
        })

        assert response.status_code == 200
        data = response.json()
        assert data["success"] is True
        assert [day["day_number"] for day in data["data"]["schedule"]] == [1, 2]
        assert data["data"]["config"]["day_budget_hours"] == 7

    def test_empty_scene_list(self):
        response = client.post("/schedule", json={"scenes": []})

        assert response.status_code == 200
        assert response.json()["data"]["schedule"] == []

    def test_zero_budget_is_rejected(self):
        response = client.post("/schedule", json={"scenes": [], "day_budget_hours": 0})

        assert response.status_code == 400
        data = response.json()
        assert data["success"] is False
        assert "day_budget_hours" in data["error"]

    def test_unknown_strategy_is_rejected(self):
        response = client.post("/schedule", json={"scenes": [], "strategy": "fastest"})

        assert response.status_code == 400

    def test_cast_overlap_strategy(self):
        response = client.post("/schedule", json={
            "scenes": [{"scene_number": 1, "location_name": "A", "characters": ["ANNA"]}],
            "strategy": "cast_overlap",
            "inclusion_policy": "strict",
        })

        config = response.json()["data"]["config"]
        assert config["strategy"] == "cast_overlap"
        assert config["inclusion_policy"] == "strict"

    def test_missing_scenes_field(self):
        response = client.post("/schedule", json={"day_budget_hours": 7})

        assert response.status_code == 422


class TestUploadEndpoint:
    """Tests for POST /upload and POST /extract."""

    def test_upload_schedules_extracted_scenes(self, pdf_factory, extractor):
        response = client.post(
            "/upload",
            files={"script": ("script.pdf", pdf_factory(3), "application/pdf")},
            params={"day_budget_hours": 12},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["extraction"] == {"fragments": 1, "failed_fragments": 0}
        # Night scene first on the call sheet
        assert [scene["scene_number"] for scene in data["schedule"][0]["scenes"]] == [2, 1]
        extractor.extract.assert_called_once()

    def test_upload_invalid_budget(self, pdf_factory, extractor):
        response = client.post(
            "/upload",
            files={"script": ("script.pdf", pdf_factory(1), "application/pdf")},
            params={"day_budget_hours": -1},
        )

        assert response.status_code == 400
        extractor.extract.assert_not_called()

    def test_upload_not_a_pdf(self):
        response = client.post(
            "/upload",
            files={"script": ("script.pdf", b"plain text", "application/pdf")},
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_upload_without_file(self):
        response = client.post("/upload")

        assert response.status_code == 422

    def test_extract_returns_scenes(self, pdf_factory):
        response = client.post(
            "/extract",
            files={"script": ("script.pdf", pdf_factory(2), "application/pdf")},
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["scene_count"] == 2
        assert data["scenes"][0]["estimatedTime"] == 2.0

    def test_missing_api_key(self, pdf_factory):
        def no_key():
            raise ConfigurationError("OPENAI_API_KEY is not set")

        app.dependency_overrides[get_extractor] = no_key

        response = client.post(
            "/extract",
            files={"script": ("script.pdf", pdf_factory(1), "application/pdf")},
        )

        assert response.status_code == 500
        assert response.json()["details"] == "OPENAI_API_KEY is not set"
