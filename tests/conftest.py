import os

import pytest

os.environ["SECRET_KEY"] = "test-secret"
os.environ.pop("PUBLIC_URL", None)
os.environ.pop("VERCEL_PROJECT_PRODUCTION_URL", None)
os.environ.pop("PORT", None)
os.environ.pop("OPPONENT_DELAY_MS", None)


@pytest.fixture
def client():
    from app import app

    app.config.update(TESTING=True)
    with app.test_client() as client:
        yield client
