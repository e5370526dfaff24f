"""Shared schema base classes and pagination envelope."""

import math

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base for API shapes: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class Pagination(CamelModel):
    """Page metadata returned alongside every paginated list."""

    total: int = Field(..., ge=0, description="Total rows matching the filters")
    page: int = Field(..., ge=1, description="1-indexed page number")
    limit: int = Field(..., ge=1, description="Page size")
    total_pages: int = Field(..., ge=0, description="ceil(total / limit)")

    @classmethod
    def build(cls, total: int, page: int, limit: int) -> "Pagination":
        return cls(total=total, page=page, limit=limit, total_pages=math.ceil(total / limit))


class MessageResponse(BaseModel):
    """Plain acknowledgement, e.g. after a delete."""

    message: str


class ErrorResponse(BaseModel):
    """Body of every non-2xx response."""

    error: str
