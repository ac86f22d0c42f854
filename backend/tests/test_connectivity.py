# backend/tests/test_connectivity.py
# Health check et accès au stockage des profils.

import asyncio

from bookit.core.health_checks import check_profile_store
from bookit.db.profile_store import InMemoryProfileStore, get_profile_store
from bookit.main import app


class DownStore(InMemoryProfileStore):
    async def ping(self) -> bool:
        raise ConnectionError("connection refused")


def test_health_ok(client):
    r = client.get("/health")
    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "ok"
    assert body["checks"] == {"profile_store": "ok"}
    assert body["version"]


def test_health_reports_store_failure(client):
    app.dependency_overrides[get_profile_store] = lambda: DownStore()
    r = client.get("/health")
    assert r.status_code == 503
    body = r.json()
    assert body["status"] == "error"
    assert body["checks"]["profile_store"].startswith("error: ")


def test_check_profile_store():
    assert asyncio.run(check_profile_store(InMemoryProfileStore())) == "ok"
    assert asyncio.run(check_profile_store(DownStore())) == "error: connection refused"
