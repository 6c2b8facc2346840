# sandfleet/crud/common.py
from typing import Optional, Sequence, Tuple

from sqlalchemy import or_
from sqlalchemy.orm import Query

from sandfleet.core.errors import ValidationError

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 20


def check_pagination(page: int, limit: int, *, max_limit: int) -> None:
    """Reject non-positive page/limit and limits above the list's cap."""
    problems = []
    if page is None or page < 1:
        problems.append(
            {"loc": ["query", "page"], "msg": "Page must be a positive integer", "type": "value_error"}
        )
    if limit is None or limit < 1 or limit > max_limit:
        problems.append(
            {
                "loc": ["query", "limit"],
                "msg": f"Limit must be between 1 and {max_limit}",
                "type": "value_error",
            }
        )
    if problems:
        raise ValidationError("Invalid pagination parameters.", details=problems)


def _escape_like(term: str) -> str:
    return term.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def apply_search(q: Query, search: Optional[str], columns: Sequence) -> Query:
    """Case-insensitive literal substring match, OR-ed across `columns`."""
    term = (search or "").strip()
    if not term:
        return q
    pattern = f"%{_escape_like(term)}%"
    return q.filter(or_(*[col.ilike(pattern, escape="\\") for col in columns]))


def paginate(q: Query, *, page: int, limit: int, order_by: Sequence) -> Tuple[list, int]:
    """Return (rows for the requested page, total matches before slicing)."""
    total = q.order_by(None).count()
    rows = q.order_by(*order_by).offset((page - 1) * limit).limit(limit).all()
    return rows, total


def page_count(total: int, limit: int) -> int:
    return -(-total // limit) if limit else 0
