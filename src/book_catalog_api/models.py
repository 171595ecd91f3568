from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .database import SQLITE_MAX_INTEGER, SQLITE_MIN_INTEGER


class Author(BaseModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime


class Publisher(BaseModel):
    id: int
    name: str
    created_at: datetime
    updated_at: datetime


class Book(BaseModel):
    id: int
    title: str
    genre: Optional[str] = None
    language: Optional[str] = None
    edition: Optional[str] = None
    place: Optional[str] = None
    year: Optional[int] = None
    author_id: int
    publisher_id: int
    created_at: datetime
    updated_at: datetime


class BookPage(BaseModel):
    total_books: int
    list: List[Book]
    pagination: str


class Message(BaseModel):
    message: str


class BookParams(BaseModel):
    """Whitelisted attributes accepted under the ``book`` key."""

    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    title: Optional[str] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    edition: Optional[str] = None
    place: Optional[str] = None
    year: Optional[int] = Field(default=None, ge=SQLITE_MIN_INTEGER, le=SQLITE_MAX_INTEGER)
    publisher_id: Optional[int] = None
    author_id: Optional[int] = None

    @field_validator("year", "publisher_id", "author_id", mode="before")
    @classmethod
    def _blank_to_none(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class AuthorParams(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: Optional[str] = None


class PublisherParams(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    name: Optional[str] = None
