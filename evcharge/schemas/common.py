"""
Response envelope shared by every endpoint.
"""
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, model_serializer

T = TypeVar("T")


class ErrorDetail(BaseModel):
    code: str
    message: str


class ApiResponse(BaseModel, Generic[T]):
    """{success, data} on success, {success, error} on failure"""
    success: bool
    data: Optional[T] = None
    error: Optional[ErrorDetail] = None

    @model_serializer(mode="wrap")
    def _drop_unused_branch(self, handler):
        payload = handler(self)
        payload.pop("error" if self.success else "data", None)
        return payload

    @classmethod
    def ok(cls, data: T) -> "ApiResponse[T]":
        return cls(success=True, data=data)


class PageResponse(BaseModel, Generic[T]):
    content: List[T]
    page: int
    size: int
    total_elements: int
    total_pages: int
