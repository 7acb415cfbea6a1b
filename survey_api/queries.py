"""Search and pagination statements for the admin survey listing."""
from dataclasses import dataclass

from sqlalchemy import bindparam, func, or_, select

from survey_api.models import Survey

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20
MAX_LIMIT = 100

# Columns returned by the listing (created_at is only in the detail view)
LIST_COLUMNS = (
    Survey.id,
    Survey.brand_name,
    Survey.brand_service,
    Survey.description,
    Survey.responses,
    Survey.is_submitted,
    Survey.submitted_at,
)


def _to_int(value, default: int) -> int:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class SurveyListQuery:
    """
    One page of the admin listing.

    The count and data statements share the same optional filter, so `total`
    always describes the set being paged through.
    """

    page: int = DEFAULT_PAGE
    limit: int = DEFAULT_LIMIT
    search: str = ""

    @classmethod
    def from_args(cls, args) -> "SurveyListQuery":
        """Build from request.args: page >= 1, 1 <= limit <= 100, search trimmed."""
        page = max(1, _to_int(args.get("page"), DEFAULT_PAGE))
        limit = max(1, min(MAX_LIMIT, _to_int(args.get("limit"), DEFAULT_LIMIT)))
        search = (args.get("search") or "").strip()
        return cls(page=page, limit=limit, search=search)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    def filter_clause(self):
        """brand_name/brand_service/description LIKE one shared %search% parameter, or None."""
        if not self.search:
            return None
        like = bindparam("search", value=f"%{self.search}%")
        return or_(
            Survey.brand_name.like(like),
            Survey.brand_service.like(like),
            Survey.description.like(like),
        )

    def count_statement(self):
        stmt = select(func.count().label("cnt")).select_from(Survey)
        clause = self.filter_clause()
        if clause is not None:
            stmt = stmt.where(clause)
        return stmt

    def data_statement(self):
        stmt = select(*LIST_COLUMNS)
        clause = self.filter_clause()
        if clause is not None:
            stmt = stmt.where(clause)
        return (
            stmt.order_by(Survey.submitted_at.desc(), Survey.id.desc())
            .limit(self.limit)
            .offset(self.offset)
        )
