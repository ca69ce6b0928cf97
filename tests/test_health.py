# tests/test_health.py
from unittest.mock import MagicMock

from fastapi.testclient import TestClient

from wipercheck.main import create_app


def test_health_check(settings):
    service = MagicMock()
    client = TestClient(create_app(settings=settings, journey_service=service))

    response = client.get("/health")

    assert response.status_code == 200
    assert response.text == "OK"
    assert not service.mock_calls


def test_lifespan_builds_and_releases_service(settings):
    app = create_app(settings=settings)
    assert app.state.journey_service is None

    with TestClient(app) as client:
        assert client.get("/health").text == "OK"
        service = app.state.journey_service
        assert service is not None
        assert service.weather.cache is None

    assert app.state.journey_service is None
