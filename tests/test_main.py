# tests/test_main.py
import asyncio

from fastapi.testclient import TestClient

from cadence.core.config import settings
from cadence.core.exceptions import EntityNotFoundException, InvalidRepetitionMomentException
from cadence.main import app, cadence_exception_handler

# Startup is not triggered without the context manager, so no database is touched.
client = TestClient(app)


def test_root():
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["project_name"] == settings.PROJECT_NAME


def test_health_check():
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_stateless_routes_are_mounted():
    response = client.post(
        f"{settings.API_V1_STR}/occurrences/count",
        json={"rule": {"type": "weekly", "moment": "1"}, "anchor": "2024-01-01", "count": 1},
    )
    assert response.status_code == 200
    assert response.json()["occurrences"] == ["2024-01-08"]


async def _handle(exc):
    return await cadence_exception_handler(None, exc)


def test_domain_errors_map_to_status_codes():
    not_found = asyncio.run(_handle(EntityNotFoundException("Recurrence", 7)))
    assert not_found.status_code == 404

    invalid = asyncio.run(_handle(InvalidRepetitionMomentException("weekly", "", "moment is empty")))
    assert invalid.status_code == 422
