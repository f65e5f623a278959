# tests/test_health.py
from typing import Any

from fastapi import status


def test_health_responds(client: Any) -> None:
    """The health endpoint answers without touching the database."""
    r = client.get("/health")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"status": "ok"}


def test_root_describes_service(client: Any) -> None:
    r = client.get("/")
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["name"] == "Picfeed"
