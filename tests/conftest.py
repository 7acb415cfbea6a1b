import base64

import pytest

from survey_api import create_app, notifications
from survey_api.config import TestingConfig
from survey_api.models import db


def basic_auth(user: str, password: str) -> dict:
    token = base64.b64encode(f"{user}:{password}".encode("utf-8")).decode("ascii")
    return {"Authorization": f"Basic {token}"}


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    yield app
    with app.app_context():
        db.drop_all()
        db.engine.dispose()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_headers():
    return basic_auth(TestingConfig.ADMIN_USER, TestingConfig.ADMIN_PASS)


@pytest.fixture
def dispatched(monkeypatch):
    """Record notification dispatches instead of running them."""
    calls = []

    def fake_dispatch(settings, survey_id, brand_name):
        calls.append((settings, survey_id, brand_name))

    monkeypatch.setattr(notifications, "dispatch_notification", fake_dispatch)
    return calls
