"""Admin survey listing, detail and delete (HTTP Basic protected)."""
from flask import Blueprint, current_app, g, jsonify, request
from sqlalchemy.exc import SQLAlchemyError

from survey_api import store
from survey_api.queries import SurveyListQuery

ADMIN_PREFIX = "/api/admin/surveys"

# Basic auth for everything under ADMIN_PREFIX is installed by create_app (auth.protect_prefix)
admin_bp = Blueprint("admin", __name__)


@admin_bp.route("", methods=["GET"])
def list_surveys():
    """Paginated listing: ?page, ?limit, ?search."""
    query = SurveyListQuery.from_args(request.args)
    try:
        items, total = store.list_surveys(query)
    except SQLAlchemyError as e:
        store.log_store_error("GET /api/admin/surveys", e, query=request.args.to_dict())
        return jsonify({"error": "Failed to fetch surveys"}), 500
    return jsonify({"items": items, "total": total, "page": query.page, "limit": query.limit})


@admin_bp.route("/<int:survey_id>", methods=["GET"])
def get_survey(survey_id):
    try:
        survey = store.get_survey(survey_id)
    except SQLAlchemyError as e:
        store.log_store_error("GET /api/admin/surveys/:id", e, id=survey_id)
        return jsonify({"error": "Failed to fetch survey detail"}), 500
    if survey is None:
        return jsonify({"error": "Not found"}), 404
    return jsonify(survey)


@admin_bp.route("/<int:survey_id>", methods=["DELETE"])
def delete_survey(survey_id):
    try:
        deleted = store.delete_survey(survey_id)
    except SQLAlchemyError as e:
        store.log_store_error("DELETE /api/admin/surveys/:id", e, id=survey_id)
        return jsonify({"error": "Failed to delete survey"}), 500
    if not deleted:
        return jsonify({"error": "Not found"}), 404
    current_app.logger.info("Survey %s deleted by %s", survey_id, g.admin["user"])
    return jsonify({"deletedId": survey_id})
