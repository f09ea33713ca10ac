"""
Pydantic schemas for showtimes and their seat inventory.
"""

from datetime import date, datetime
from typing import Optional
from pydantic import BaseModel, Field

from cinebook.schemas.movie import MovieSummary
from cinebook.schemas.theater import TheaterSummary


class ShowtimeCreate(BaseModel):
    movie_id: int = Field(..., gt=0)
    theater_id: int = Field(..., gt=0)
    screen_number: int = Field(..., ge=1)
    show_time: datetime
    show_date: Optional[date] = None  # derived from show_time when omitted
    price: float = Field(..., ge=0)


class ShowtimeUpdate(BaseModel):
    show_time: Optional[datetime] = None
    show_date: Optional[date] = None
    price: Optional[float] = Field(None, ge=0)
    is_active: Optional[bool] = None


class ShowtimeSlot(BaseModel):
    show_time: datetime
    price: float = Field(..., ge=0)


class AssignMovieRequest(BaseModel):
    movie_id: int = Field(..., gt=0)
    theater_id: int = Field(..., gt=0)
    screen_number: int = Field(..., ge=1)
    show_times: list[ShowtimeSlot] = Field(..., min_length=1, max_length=50)


class ShowtimeResponse(BaseModel):
    id: int
    movie_id: int
    theater_id: int
    screen_number: int
    show_date: date
    show_time: datetime
    price: float
    total_seats: int
    available_seats: int
    booked_seats: list[int]
    is_active: bool
    movie: Optional[MovieSummary] = None
    theater: Optional[TheaterSummary] = None

    model_config = {"from_attributes": True}


class TheaterShowtimes(BaseModel):
    """A theater together with its upcoming shows of one movie."""

    theater: TheaterSummary
    showtimes: list[ShowtimeResponse]
