"""
Pydantic schemas for booking-related request/response validation.
"""

from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field

from cinebook.models.booking import BookingStatus, PaymentMethod
from cinebook.schemas.movie import MovieSummary
from cinebook.schemas.theater import TheaterSummary


class PaymentDetails(BaseModel):
    payment_method: PaymentMethod
    payment_id: Optional[str] = Field(None, max_length=100)
    transaction_id: Optional[str] = Field(None, max_length=100)


class BookingCreate(BaseModel):
    showtime_id: int = Field(..., gt=0)
    number_of_tickets: int = Field(..., gt=0)
    seat_numbers: list[int] = Field(..., min_length=1)
    payment_details: Optional[PaymentDetails] = None


class PaymentDetailsResponse(BaseModel):
    payment_id: Optional[str]
    payment_method: Optional[PaymentMethod]
    transaction_id: Optional[str]


class BookingUser(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str

    model_config = {"from_attributes": True}


class BookingResponse(BaseModel):
    id: int
    booking_reference: str
    user_id: int
    movie_id: int
    theater_id: int
    showtime_id: int
    screen_number: int
    show_time: datetime
    number_of_tickets: int
    seat_numbers: list[int]
    total_amount: float
    booking_date: datetime
    status: BookingStatus
    payment_details: Optional[PaymentDetailsResponse] = None
    movie: Optional[MovieSummary] = None
    theater: Optional[TheaterSummary] = None
    user: Optional[BookingUser] = None

    model_config = {"from_attributes": True}
