"""Public survey submission."""
import json
from datetime import datetime, timezone

from flask import Blueprint, current_app, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from survey_api import notifications, store
from survey_api.limits import limiter
from survey_api.models import RESPONSE_FIELDS, encode_responses

surveys_bp = Blueprint("surveys", __name__)

SEMANTIC_FIELDS = ("brand_name", "brand_service") + RESPONSE_FIELDS


def _clean(value):
    """Strings trimmed; None for missing, blank or falsy values (false, 0, {}, []).

    Other values pass through unchanged so the responses blob keeps their structure.
    """
    if isinstance(value, str):
        value = value.strip()
    return value or None


def _as_text(value) -> str | None:
    """Column value for brand_name/brand_service: non-strings stored as JSON text."""
    if value is None or isinstance(value, str):
        return value
    return json.dumps(value)


def _parse_submitted_at(value) -> datetime:
    """Client timestamp (ISO 8601) as naive UTC; now when absent. Raises ValueError."""
    raw = _clean(value)
    if raw is None:
        return datetime.now(timezone.utc).replace(tzinfo=None)
    if not isinstance(raw, str):
        raise ValueError("submitted_at must be a string")
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    parsed = datetime.fromisoformat(raw)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


TOO_MANY_SUBMISSIONS = "Too many submissions from this IP, please try again later."


@surveys_bp.route("", methods=["POST"])
@limiter.limit(lambda: current_app.config["SURVEY_SUBMIT_LIMIT"], error_message=TOO_MANY_SUBMISSIONS)
def create_survey():
    """Validate and store a survey; respond with its id, then notify by email."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        data = {}
    fields = {key: _clean(data.get(key)) for key in SEMANTIC_FIELDS}
    if not any(fields.values()):
        return jsonify({"error": "At least one field is required"}), 400
    try:
        submitted_at = _parse_submitted_at(data.get("submitted_at"))
    except ValueError:
        return jsonify({"error": "Invalid submitted_at"}), 400

    brand_name = _as_text(fields["brand_name"])
    try:
        survey_id = store.insert_survey(
            brand_name=brand_name,
            brand_service=_as_text(fields["brand_service"]),
            responses=encode_responses(fields),
            submitted_at=submitted_at,
        )
    except SQLAlchemyError as e:
        store.log_store_error("POST /api/surveys", e)
        return jsonify({"error": "Failed to save survey"}), 500

    current_app.logger.info("Survey %s saved", survey_id)
    settings = current_app.extensions["survey_api"].notifications
    notifications.dispatch_notification(settings, survey_id, brand_name)
    return jsonify({"id": survey_id}), 201
