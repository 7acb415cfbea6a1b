import base64

import pytest

from conftest import basic_auth
from survey_api.auth import AdminCredentials, Credentials, check_credentials, parse_basic_auth


def _header(raw: bytes) -> str:
    return "Basic " + base64.b64encode(raw).decode("ascii")


def test_parse_valid_header():
    assert parse_basic_auth(_header(b"admin:s3cret")) == Credentials("admin", "s3cret")


def test_password_keeps_text_after_first_colon():
    assert parse_basic_auth(_header(b"admin:a:b")) == Credentials("admin", "a:b")


@pytest.mark.parametrize(
    "header",
    [
        None,
        "",
        "Basic",
        "Basic ",
        "Bearer abc.def",
        "Basic !!!not-base64!!!",
        _header(b"no-colon-here"),
        _header(b"\xff\xfe:\xfd"),
    ],
)
def test_malformed_headers_mean_no_credentials(header):
    assert parse_basic_auth(header) is None


def test_check_credentials_requires_exact_match():
    expected = AdminCredentials("admin", "s3cret")
    assert check_credentials(Credentials("admin", "s3cret"), expected)
    assert not check_credentials(Credentials("admin", "S3cret"), expected)
    assert not check_credentials(Credentials("Admin", "s3cret"), expected)
    assert not check_credentials(Credentials("admin", "s3cret "), expected)
    assert not check_credentials(None, expected)


def test_unconfigured_credentials_reject_everything():
    assert not check_credentials(Credentials("", ""), AdminCredentials())


def test_missing_header_gets_challenge(client):
    resp = client.get("/api/admin/surveys")
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"].startswith("Basic")
    assert resp.get_json() == {"error": "Missing or invalid Authorization header"}


def test_wrong_credentials_get_challenge(client):
    resp = client.get("/api/admin/surveys", headers=basic_auth("admin", "wrong"))
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"].startswith("Basic")
    assert resp.get_json() == {"error": "Unauthorized"}


@pytest.mark.parametrize("method,path", [("GET", "/api/admin/surveys/1"), ("DELETE", "/api/admin/surveys/1")])
def test_detail_and_delete_are_protected(client, dispatched, method, path):
    created = client.post("/api/surveys", json={"brand_name": "Acme"})
    assert created.status_code == 201
    resp = client.open(path, method=method, headers=basic_auth("admin", "nope"))
    assert resp.status_code == 401
    assert "brand_name" not in resp.get_data(as_text=True)


def test_correct_credentials_pass(client, admin_headers):
    resp = client.get("/api/admin/surveys", headers=admin_headers)
    assert resp.status_code == 200


@pytest.mark.parametrize(
    "method,path",
    [
        ("GET", "/api/admin/surveys/abc"),
        ("POST", "/api/admin/surveys"),
        ("PUT", "/api/admin/surveys/1"),
        ("GET", "/api/admin/surveys/1/extra"),
    ],
)
def test_auth_runs_before_routing_errors(client, method, path):
    resp = client.open(path, method=method)
    assert resp.status_code == 401
    assert resp.headers["WWW-Authenticate"].startswith("Basic")


def test_routing_errors_after_auth(client, admin_headers):
    assert client.get("/api/admin/surveys/abc", headers=admin_headers).status_code == 404
    assert client.post("/api/admin/surveys", headers=admin_headers).status_code == 405


def test_similar_paths_are_not_guarded(client):
    resp = client.get("/api/admin/surveys-archive")
    assert resp.status_code == 404
    assert "WWW-Authenticate" not in resp.headers
