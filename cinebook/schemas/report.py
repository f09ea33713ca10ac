"""
Pydantic schemas for reporting projections.
"""

from datetime import datetime
from pydantic import BaseModel

from cinebook.models.booking import BookingStatus


class MovieBookingStats(BaseModel):
    movie_id: int
    movie_name: str
    genres: list[str]
    languages: list[str]
    total_tickets: int
    total_revenue: float
    booking_count: int


class TheaterMovieStats(BaseModel):
    movie_id: int
    movie_name: str
    total_tickets: int
    total_revenue: float
    show_count: int


class TheaterBookingStats(BaseModel):
    theater_id: int
    theater_name: str
    city: str
    state: str
    movies: list[TheaterMovieStats]
    total_tickets: int
    total_revenue: float


class UserBookingSummary(BaseModel):
    booking_reference: str
    movie_name: str
    theater_name: str
    show_time: datetime
    number_of_tickets: int
    booking_date: datetime
    status: BookingStatus
    total_amount: float


class RevenueBreakdown(BaseModel):
    id: int
    name: str
    revenue: float
    bookings: int
    tickets: int


class RevenueSummary(BaseModel):
    total_revenue: float
    total_bookings: int
    total_tickets: int
    average_booking_value: float
    average_ticket_price: float


class RevenuePeriod(BaseModel):
    start_date: datetime
    end_date: datetime


class RevenueReport(BaseModel):
    summary: RevenueSummary
    movie_breakdown: list[RevenueBreakdown]
    theater_breakdown: list[RevenueBreakdown]
    period: RevenuePeriod


class UserAnalytics(BaseModel):
    total_users: int
    active_users: int
    inactive_users: int
    users_with_bookings: int
    users_without_bookings: int
    conversion_rate: float


class DashboardOverview(BaseModel):
    total_users: int
    total_movies: int
    total_theaters: int
    active_showtimes: int
    confirmed_bookings: int
    total_revenue: float
