import pytest

from survey_api import create_app
from survey_api.config import TestingConfig
from survey_api.models import db


def _make_app(**overrides):
    config = type("Config", (TestingConfig,), overrides)
    return create_app(config)


@pytest.fixture
def custom_app():
    made = []

    def factory(**overrides):
        app = _make_app(**overrides)
        made.append(app)
        return app

    yield factory
    for app in made:
        with app.app_context():
            db.drop_all()


def test_health_without_notifications(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.get_json() == {"status": "ok", "emailjs_enabled": False, "environment": "test"}


def test_health_reports_notification_config(custom_app):
    app = custom_app(EMAILJS_SERVICE_ID="svc", EMAILJS_TEMPLATE_ID="tpl", EMAILJS_USER_ID="usr")
    assert app.test_client().get("/health").get_json()["emailjs_enabled"] is True


def test_unknown_route(client):
    resp = client.get("/nope")
    assert resp.status_code == 404
    assert resp.get_json() == {"error": "Not found"}


def test_wrong_method_is_json(client):
    resp = client.get("/api/surveys")
    assert resp.status_code == 405
    assert "error" in resp.get_json()


def test_unhandled_error_is_generic(app, caplog):
    @app.route("/boom")
    def boom():
        raise RuntimeError("internal detail")

    resp = app.test_client().get("/boom")
    assert resp.status_code == 500
    assert resp.get_json() == {"error": "Server error"}
    assert "internal detail" in caplog.text


def test_security_headers(client):
    resp = client.get("/health")
    assert resp.headers["X-Content-Type-Options"] == "nosniff"
    assert resp.headers["X-Frame-Options"] == "SAMEORIGIN"


def test_cors_disabled_by_default(client):
    resp = client.get("/health", headers={"Origin": "https://example.com"})
    assert "Access-Control-Allow-Origin" not in resp.headers


def test_cors_allowed_origins(custom_app):
    app = custom_app(ENABLE_CORS=True, CORS_ORIGINS=["https://example.com"])
    client = app.test_client()
    allowed = client.get("/health", headers={"Origin": "https://example.com"})
    assert allowed.headers["Access-Control-Allow-Origin"] == "https://example.com"
    other = client.get("/health", headers={"Origin": "https://evil.example"})
    assert "Access-Control-Allow-Origin" not in other.headers


def test_submission_rate_limit(custom_app, dispatched):
    app = custom_app(RATELIMIT_ENABLED=True, SURVEY_SUBMIT_LIMIT="2 per hour")
    client = app.test_client()
    for _ in range(2):
        assert client.post("/api/surveys", json={"brand_name": "Acme"}).status_code == 201
    resp = client.post("/api/surveys", json={"brand_name": "Acme"})
    assert resp.status_code == 429
    assert resp.get_json() == {"error": "Too many submissions from this IP, please try again later."}
