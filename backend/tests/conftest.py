import os
import uuid

import pytest

# Use in-memory sqlite for tests; must be set before steptracker.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")


@pytest.fixture
def client():
    from fastapi.testclient import TestClient  # noqa: WPS433
    from steptracker.main import app  # noqa: WPS433
    return TestClient(app)


@pytest.fixture
def user_headers():
    # fresh identity per test so rows from other tests never leak in
    return {"X-User-Id": f"test-{uuid.uuid4().hex[:12]}"}
