from fastapi.testclient import TestClient

from rates_bridge.core.config import settings
from rates_bridge.main import app


def test_health_reports_app_and_version():
    resp = TestClient(app).get("/health")

    assert resp.status_code == 200
    assert resp.json() == {
        "status": "healthy",
        "app": settings.APP_NAME,
        "version": settings.API_VERSION,
    }