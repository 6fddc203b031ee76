"""
API models and schemas for the FastAPI application.
"""

from datetime import datetime
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class ResponseStatus(str, Enum):
    """Envelope status values."""
    SUCCESS = "success"
    FAIL = "fail"


class BookPayload(BaseModel):
    """Request body for creating or replacing a book."""
    name: Optional[str] = Field(None, description="Book title")
    year: int = Field(0, description="Publication year")
    author: str = Field("", description="Book author")
    summary: str = Field("", description="Short summary")
    publisher: str = Field("", description="Publisher name")
    page_count: int = Field(0, ge=0, description="Total number of pages")
    read_page: int = Field(0, ge=0, description="Last page read")
    reading: bool = Field(False, description="Whether the book is being read")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class BookRecord(BaseModel):
    """A stored book."""
    id: str = Field(..., description="Unique book identifier")
    name: str = Field(..., description="Book title")
    year: int = Field(0, description="Publication year")
    author: str = Field("", description="Book author")
    summary: str = Field("", description="Short summary")
    publisher: str = Field("", description="Publisher name")
    page_count: int = Field(0, description="Total number of pages")
    read_page: int = Field(0, description="Last page read")
    finished: bool = Field(..., description="Whether every page has been read")
    reading: bool = Field(False, description="Whether the book is being read")
    inserted_at: datetime = Field(..., description="Creation timestamp")
    updated_at: datetime = Field(..., description="Last update timestamp")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class BookSummary(BaseModel):
    """Projection of a book used by the list endpoint."""
    id: str = Field(..., description="Unique book identifier")
    name: str = Field(..., description="Book title")
    publisher: str = Field(..., description="Publisher name")


class BookIdData(BaseModel):
    book_id: str = Field(..., description="Identifier of the created book")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
    }


class BookData(BaseModel):
    book: BookRecord


class BookListData(BaseModel):
    books: List[BookSummary] = Field(default_factory=list)


class Envelope(BaseModel):
    """
    Response wrapper shared by every books endpoint.

    ``message`` and ``data`` are left out of the rendered body when unset.
    """
    status: ResponseStatus = Field(..., description="success or fail")
    message: Optional[str] = Field(None, description="Human-readable outcome")
    data: Optional[Any] = Field(None, description="Operation payload")

    def render(self) -> dict:
        """Dump to a JSON-ready dict using the camelCase field names."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str = Field(..., description="Service status")
    timestamp: datetime = Field(..., description="Current timestamp")
    version: str = Field(..., description="API version")
    books_count: int = Field(..., description="Number of stored books")
