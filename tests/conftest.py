import sys
from pathlib import Path

import pytest


BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))


@pytest.fixture()
def app_client(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("ENV", "testing")
    monkeypatch.setenv("MONGODB_URI", "mongomock://localhost")
    monkeypatch.setenv("DB_NAME", "hr2_test")
    monkeypatch.setenv("BOOTSTRAP_TOKEN", "test-bootstrap")
    monkeypatch.setenv("LOG_LEVEL", "WARNING")

    # Prevent accidental pollution from any existing env config.
    monkeypatch.delenv("CORS_ORIGINS", raising=False)
    monkeypatch.delenv("JWT_SECRET", raising=False)

    from hr2 import create_app
    from hr2.db import reset_client_for_tests
    from hr2.middlewares.rate_limit import limiter

    reset_client_for_tests()
    limiter.reset()

    app = create_app()
    app.testing = True

    with app.test_client() as client:
        yield app, client

    reset_client_for_tests()
