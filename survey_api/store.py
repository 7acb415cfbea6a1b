"""Statements against the surveys table.

Each function takes its own connection from the pool with a context manager,
so the connection goes back to the pool on success and on error alike.
SQLAlchemyError propagates to the caller.
"""
import logging
import traceback
from datetime import datetime

from sqlalchemy import delete, insert, select
from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from survey_api.models import Survey, db, serialize_survey
from survey_api.queries import SurveyListQuery

logger = logging.getLogger(__name__)


def insert_survey(
    *,
    brand_name: str | None,
    brand_service: str | None,
    responses: str,
    submitted_at: datetime,
) -> int:
    """Insert one submitted survey and return its id."""
    stmt = insert(Survey).values(
        brand_name=brand_name,
        brand_service=brand_service,
        description=brand_service,
        responses=responses,
        is_submitted=True,
        submitted_at=submitted_at,
    )
    with db.engine.begin() as conn:
        result = conn.execute(stmt)
        return result.inserted_primary_key[0]


def list_surveys(query: SurveyListQuery) -> tuple[list[dict], int]:
    """Return (items, total) for one page of the listing."""
    with db.engine.connect() as conn:
        total = conn.execute(query.count_statement()).scalar() or 0
        rows = conn.execute(query.data_statement()).mappings().all()
    return [serialize_survey(row) for row in rows], total


def get_survey(survey_id: int) -> dict | None:
    with db.engine.connect() as conn:
        row = conn.execute(select(Survey.__table__).where(Survey.id == survey_id).limit(1)).mappings().first()
    return serialize_survey(row) if row is not None else None


def delete_survey(survey_id: int) -> bool:
    """Hard delete. False when no row matched."""
    with db.engine.begin() as conn:
        result = conn.execute(delete(Survey).where(Survey.id == survey_id))
    return result.rowcount > 0


def error_code(err: SQLAlchemyError):
    """Driver error code (e.g. MySQL errno) when available, else SQLAlchemy's code."""
    orig = getattr(err, "orig", None)
    code = getattr(orig, "errno", None) or getattr(orig, "sqlite_errorname", None)
    # PyMySQL: args == (errno, message)
    if code is None and getattr(orig, "args", None) and isinstance(orig.args[0], int):
        code = orig.args[0]
    return code or getattr(err, "code", None)


def log_store_error(context: str, err: SQLAlchemyError, **params) -> None:
    """Full diagnostic for the server log only; never sent to clients."""
    stack = "".join(traceback.format_exception(type(err), err, err.__traceback__))
    stack = "\n".join(stack.splitlines()[:6])
    logger.error(
        "%s error (detailed): %s",
        context,
        {
            "message": str(getattr(err, "orig", None) or err),
            "code": error_code(err),
            "sql": err.statement if isinstance(err, DBAPIError) else None,
            "params": params,
            "stack": stack,
        },
    )
