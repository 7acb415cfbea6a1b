"""SQLAlchemy models."""
import json
from datetime import datetime

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import Boolean, DateTime, String, Text, func
from sqlalchemy.orm import Mapped, mapped_column

db = SQLAlchemy()

# Auxiliary answers kept together in the `responses` JSON blob
RESPONSE_FIELDS = ("target_audience", "business_why", "customer_impression", "contact")


class Survey(db.Model):
    """One public survey submission."""

    __tablename__ = "surveys"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    brand_name: Mapped[str | None] = mapped_column(String(255), nullable=True)
    brand_service: Mapped[str | None] = mapped_column(String(255), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)  # copy of brand_service
    responses: Mapped[str | None] = mapped_column(Text, nullable=True)
    is_submitted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    submitted_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime, nullable=False, server_default=func.current_timestamp()
    )

    def __repr__(self) -> str:
        return f"<Survey {self.id} ({self.brand_name})>"


def encode_responses(values: dict) -> str:
    """Serialize the auxiliary fields (missing ones as null) for the `responses` column."""
    return json.dumps({key: values.get(key) for key in RESPONSE_FIELDS})


def serialize_survey(row) -> dict:
    """JSON-ready dict from a result row mapping."""
    out = {}
    for key, value in dict(row).items():
        if isinstance(value, datetime):
            value = value.isoformat()
        elif key == "is_submitted" and value is not None:
            value = bool(value)
        elif key == "responses" and isinstance(value, str):
            try:
                value = json.loads(value)
            except ValueError:
                pass
        out[key] = value
    return out
