import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from securefeedback import create_app
from securefeedback.core.startup import initialize_database


# ==================== Pytest Markers ====================
def pytest_configure(config):
    """Register custom pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests (no external dependencies)")
    config.addinivalue_line("markers", "integration: Integration tests (database, API)")


@pytest.fixture()
def app():
    """
    Create a per-test app backed by its own in-memory SQLite database.

    Each app builds a fresh pool manager, so rows never leak between tests.
    """
    app = create_app("testing")
    initialize_database(app)
    try:
        yield app
    finally:
        app.extensions["pool_manager"].close()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def pool_manager(app):
    return app.extensions["pool_manager"]


@pytest.fixture()
def registration_payload():
    return {
        "nombre": "María José",
        "apellido": "Núñez",
        "email": "maria.nunez@example.com",
        "telefono": "+34 (600) 123-456",
        "pais": "España",
    }
