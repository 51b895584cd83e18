# tests/conftest.py
import pytest
from fastapi.testclient import TestClient

from policy_server.config import Settings
from policy_server.db import Database
from policy_server.main import create_app
from policy_server.services.store import PolicyStore

ADMIN_KEY = "test-admin-key"
HMAC_SECRET = "test-hmac-secret"


@pytest.fixture
def settings(tmp_path):
    return Settings(
        database_url=f"sqlite:///{tmp_path / 'policy.db'}",
        admin_key=ADMIN_KEY,
        hmac_secret=HMAC_SECRET,
        policy_ttl_seconds=60,
        log_format="text",
        log_level="WARNING",
        logging_config_path=str(tmp_path / "no-such-LOGGING.yaml"),
    )


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    """TestClient with lifespan run (schema created, default tenant seeded)"""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def admin_headers():
    return {"X-Admin-Key": ADMIN_KEY}


@pytest.fixture
def database(tmp_path):
    db = Database(f"sqlite:///{tmp_path / 'store.db'}")
    db.init_schema()
    yield db
    db.dispose()


@pytest.fixture
def store(database):
    return PolicyStore(database)
