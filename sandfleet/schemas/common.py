# sandfleet/schemas/common.py
from datetime import datetime
from typing import Annotated

from pydantic import AfterValidator, BaseModel
from pydantic.alias_generators import to_camel

from sandfleet.crud.common import page_count
from sandfleet.db.base import to_naive_utc

# Incoming timestamps are stored as naive UTC; offsets are applied, not dropped
UtcDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]


class CamelModel(BaseModel):
    """Snake_case attributes in Python, camelCase keys on the wire."""

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        from_attributes = True


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int

    @classmethod
    def build(cls, *, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, pages=page_count(total, limit))
