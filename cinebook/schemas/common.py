"""
Response envelope shared by every endpoint:
{success, message, data | error | errors, pagination?}
"""

import math
from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel

T = TypeVar("T")


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    total_pages: int

    @classmethod
    def build(cls, page: int, limit: int, total: int) -> "Pagination":
        return cls(page=page, limit=limit, total=total, total_pages=math.ceil(total / limit) if limit else 0)


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str
    data: Optional[T] = None
    pagination: Optional[Pagination] = None


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    error: Optional[str] = None
    errors: Optional[list[dict[str, Any]]] = None


def ok(message: str, data: Any = None, pagination: Optional[Pagination] = None) -> dict:
    return {"success": True, "message": message, "data": data, "pagination": pagination}
