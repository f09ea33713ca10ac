"""
Pydantic schemas for theaters and screens.
"""

from datetime import datetime
from typing import Literal, Optional
from pydantic import BaseModel, EmailStr, Field, field_validator

Amenity = Literal[
    "Parking", "Food Court", "Wheelchair Accessible", "Air Conditioning",
    "Dolby Atmos", "IMAX", "3D", "Recliner Seats", "Online Booking", "WiFi",
]


class ScreenIn(BaseModel):
    screen_number: int = Field(..., ge=1)
    total_seats: int = Field(..., ge=1, le=500)
    rows: Optional[int] = Field(None, ge=1)
    seats_per_row: Optional[int] = Field(None, ge=1)
    is_active: bool = True


class TheaterCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    address: str = Field(..., min_length=1, max_length=500)
    city: str = Field(..., min_length=1, max_length=100)
    state: str = Field(..., min_length=1, max_length=100)
    pincode: str = Field(..., pattern=r"^\d{6}$")
    phone: Optional[str] = Field(None, pattern=r"^\+?[\d\s()-]+$")
    email: Optional[EmailStr] = None
    amenities: list[Amenity] = Field(default_factory=list)
    screens: list[ScreenIn] = Field(..., min_length=1)

    @field_validator("screens")
    @classmethod
    def unique_screen_numbers(cls, screens: list[ScreenIn]) -> list[ScreenIn]:
        numbers = [s.screen_number for s in screens]
        if len(numbers) != len(set(numbers)):
            raise ValueError("Screen numbers must be unique")
        return screens


class TheaterUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    address: Optional[str] = Field(None, min_length=1, max_length=500)
    city: Optional[str] = Field(None, min_length=1, max_length=100)
    state: Optional[str] = Field(None, min_length=1, max_length=100)
    pincode: Optional[str] = Field(None, pattern=r"^\d{6}$")
    phone: Optional[str] = Field(None, pattern=r"^\+?[\d\s()-]+$")
    email: Optional[EmailStr] = None
    amenities: Optional[list[Amenity]] = None
    screens: Optional[list[ScreenIn]] = Field(None, min_length=1)
    is_active: Optional[bool] = None

    @field_validator("screens")
    @classmethod
    def unique_screen_numbers(cls, screens):
        if screens is not None:
            numbers = [s.screen_number for s in screens]
            if len(numbers) != len(set(numbers)):
                raise ValueError("Screen numbers must be unique")
        return screens


class ScreenResponse(BaseModel):
    screen_number: int
    total_seats: int
    rows: Optional[int]
    seats_per_row: Optional[int]
    is_active: bool

    model_config = {"from_attributes": True}


class TheaterResponse(BaseModel):
    id: int
    name: str
    address: str
    city: str
    state: str
    pincode: str
    phone: Optional[str]
    email: Optional[str]
    amenities: list[str]
    screens: list[ScreenResponse]
    is_active: bool
    created_at: datetime

    model_config = {"from_attributes": True}


class TheaterSummary(BaseModel):
    id: int
    name: str
    address: str
    city: str
    state: str

    model_config = {"from_attributes": True}
