"""
Pydantic schemas for the movie catalog.
"""

from datetime import date, datetime
from typing import Literal, Optional
from pydantic import BaseModel, Field

Genre = Literal[
    "Action", "Adventure", "Animation", "Biography", "Comedy", "Crime",
    "Documentary", "Drama", "Family", "Fantasy", "History", "Horror",
    "Music", "Mystery", "Romance", "Sci-Fi", "Sport", "Thriller", "War", "Western",
]


class MovieCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    genres: list[Genre] = Field(..., min_length=1)
    languages: list[str] = Field(..., min_length=1)
    duration: int = Field(..., ge=1, le=600)
    cast: list[str] = Field(..., min_length=1)
    director: str = Field(..., min_length=1, max_length=100)
    release_date: date
    rating: Optional[float] = Field(None, ge=0, le=10)


class MovieUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=2000)
    genres: Optional[list[Genre]] = Field(None, min_length=1)
    languages: Optional[list[str]] = Field(None, min_length=1)
    duration: Optional[int] = Field(None, ge=1, le=600)
    cast: Optional[list[str]] = Field(None, min_length=1)
    director: Optional[str] = Field(None, min_length=1, max_length=100)
    release_date: Optional[date] = None
    rating: Optional[float] = Field(None, ge=0, le=10)
    is_active: Optional[bool] = None


class MovieResponse(BaseModel):
    id: int
    name: str
    description: Optional[str]
    genres: list[str]
    languages: list[str]
    duration: int
    cast: list[str]
    director: str
    release_date: date
    rating: Optional[float]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class MovieSummary(BaseModel):
    id: int
    name: str
    duration: int
    genres: list[str]
    languages: list[str]

    model_config = {"from_attributes": True}
