# backend/tests/conftest.py
# Environnement de test : stockage en mémoire, logs dans un dossier temporaire, horloge fixe.

import datetime as dt
import os
import tempfile

# Doit précéder tout import de `bookit` (settings mis en cache au premier appel)
os.environ.setdefault("PROFILE_STORE_BACKEND", "memory")
os.environ.setdefault("LOGS_DIR", tempfile.mkdtemp(prefix="bookit-logs-"))
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")
os.environ.setdefault("MAX_BODY_KB", "16")

import pytest
from fastapi.testclient import TestClient

from bookit.api.deps import get_clock
from bookit.core.security import get_current_user_id
from bookit.db.profile_store import InMemoryProfileStore, get_profile_store
from bookit.main import app

TEST_USER_ID = "user-1"
NOW = dt.datetime(2024, 1, 8, tzinfo=dt.timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def store():
    return InMemoryProfileStore()


@pytest.fixture
def client(store):
    """TestClient authentifié (`user-1`), stockage neuf et horloge figée à `NOW`."""
    app.dependency_overrides[get_current_user_id] = lambda: TEST_USER_ID
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()


@pytest.fixture
def anonymous_client(store):
    """TestClient sans surcharge d'identité (le jeton Bearer est vraiment vérifié)."""
    app.dependency_overrides[get_profile_store] = lambda: store
    app.dependency_overrides[get_clock] = lambda: (lambda: NOW)
    c = TestClient(app)
    yield c
    app.dependency_overrides.clear()
