"""HTTP Basic authentication for the admin area."""
import base64
import binascii
import hmac
from dataclasses import dataclass
from typing import NamedTuple, Optional

from flask import current_app, g, jsonify, request

CHALLENGE = 'Basic realm="Admin Area"'


class Credentials(NamedTuple):
    username: str
    password: str


@dataclass(frozen=True)
class AdminCredentials:
    """Expected admin username/password, read once at startup."""

    username: str = ""
    password: str = ""

    @property
    def configured(self) -> bool:
        return bool(self.username and self.password)


def parse_basic_auth(header: Optional[str]) -> Optional[Credentials]:
    """
    Decode a header like "Basic dXNlcjpwYXNz".
    Returns Credentials, or None for anything missing or malformed.
    """
    if not header or not header.startswith("Basic "):
        return None
    token = header[len("Basic "):].strip()
    if not token:
        return None
    try:
        decoded = base64.b64decode(token, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return None
    user, sep, password = decoded.partition(":")
    if not sep:
        return None
    return Credentials(user, password)


def check_credentials(creds: Optional[Credentials], expected: AdminCredentials) -> bool:
    """True only if both values equal the configured ones."""
    if creds is None or not expected.configured:
        return False
    user_ok = hmac.compare_digest(creds.username.encode("utf-8"), expected.username.encode("utf-8"))
    pass_ok = hmac.compare_digest(creds.password.encode("utf-8"), expected.password.encode("utf-8"))
    return user_ok and pass_ok


def _challenge(message: str):
    response = jsonify({"error": message})
    response.status_code = 401
    response.headers["WWW-Authenticate"] = CHALLENGE
    return response


def require_admin():
    """before_request guard: attach g.admin or answer 401 with a Basic challenge."""
    if request.method == "OPTIONS":
        return None
    expected = current_app.extensions["survey_api"].admin
    creds = parse_basic_auth(request.headers.get("Authorization"))
    if creds is None:
        current_app.logger.warning("Admin auth: missing or invalid header from %s", request.remote_addr)
        return _challenge("Missing or invalid Authorization header")
    if not expected.configured:
        current_app.logger.warning("Admin auth: ADMIN_USER/ADMIN_PASS not set, rejecting request")
    if check_credentials(creds, expected):
        g.admin = {"user": creds.username}
        return None
    current_app.logger.warning("Admin auth: bad credentials from %s", request.remote_addr)
    return _challenge("Unauthorized")


def protect_prefix(app, prefix: str) -> None:
    """Run require_admin for every request under prefix, before routing errors (404/405) surface."""

    @app.before_request
    def _admin_guard():
        if request.path == prefix or request.path.startswith(prefix + "/"):
            return require_admin()
        return None
