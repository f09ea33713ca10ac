"""
Booking endpoints with concurrency-safe seat reservation.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from cinebook.api.deps import get_booking_service, get_current_user, get_report_service, require_admin
from cinebook.core.exceptions import NotOwnerError
from cinebook.models.booking import Booking, BookingStatus
from cinebook.models.user import User
from cinebook.repositories.booking_repository import BookingFilters
from cinebook.schemas.booking import BookingCreate, BookingResponse
from cinebook.schemas.common import ApiResponse, Pagination, ok
from cinebook.schemas.report import UserBookingSummary
from cinebook.services.booking_service import BookingService
from cinebook.services.report_service import ReportService

router = APIRouter(prefix="/bookings", tags=["Bookings"])


def _ensure_visible(booking: Booking, user: User) -> None:
    if booking.user_id != user.id and not user.is_admin:
        raise NotOwnerError("You can only view your own bookings")


@router.post("/", response_model=ApiResponse[BookingResponse], status_code=status.HTTP_201_CREATED)
async def create_booking(
    booking_data: BookingCreate,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """
    Book specific seats of a showtime.

    Seats are reserved atomically; if another booking took one of them first
    the request fails with 409 and nothing is reserved.
    """
    booking = await service.create_booking(booking_data, user.id)
    return ok("Booking created successfully", BookingResponse.model_validate(booking))


@router.get("/my-bookings", response_model=ApiResponse[list[BookingResponse]])
async def my_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    bookings, total = await service.get_user_bookings(user.id, page, limit)
    return ok(
        "Bookings retrieved successfully",
        [BookingResponse.model_validate(b) for b in bookings],
        Pagination.build(page, limit, total),
    )


@router.get("/my-summary", response_model=ApiResponse[list[UserBookingSummary]])
async def my_summary(
    user: User = Depends(get_current_user),
    reports: ReportService = Depends(get_report_service),
):
    return ok("Booking summary retrieved successfully", await reports.user_booking_summary(user.id))


@router.put("/{booking_id}/cancel", response_model=ApiResponse[BookingResponse])
async def cancel_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    """Cancel a booking and release its seats back to the showtime."""
    booking = await service.cancel_booking(booking_id, user.id)
    return ok("Booking cancelled successfully", BookingResponse.model_validate(booking))


@router.get("/reference/{reference}", response_model=ApiResponse[BookingResponse])
async def get_booking_by_reference(
    reference: str,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = await service.get_booking_by_reference(reference)
    _ensure_visible(booking, user)
    return ok("Booking retrieved successfully", BookingResponse.model_validate(booking))


@router.get("/admin/all", response_model=ApiResponse[list[BookingResponse]])
async def list_all_bookings(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user_id: Optional[int] = None,
    movie_id: Optional[int] = None,
    theater_id: Optional[int] = None,
    booking_status: Optional[BookingStatus] = Query(None, alias="status"),
    booking_date_from: Optional[datetime] = None,
    booking_date_to: Optional[datetime] = None,
    show_time_from: Optional[datetime] = None,
    show_time_to: Optional[datetime] = None,
    admin: User = Depends(require_admin),
    service: BookingService = Depends(get_booking_service),
):
    filters = BookingFilters(
        user_id=user_id,
        movie_id=movie_id,
        theater_id=theater_id,
        status=booking_status,
        booking_date_from=booking_date_from,
        booking_date_to=booking_date_to,
        show_time_from=show_time_from,
        show_time_to=show_time_to,
    )
    bookings, total = await service.get_bookings(filters, page, limit)
    return ok(
        "Bookings retrieved successfully",
        [BookingResponse.model_validate(b) for b in bookings],
        Pagination.build(page, limit, total),
    )


@router.get("/{booking_id}", response_model=ApiResponse[BookingResponse])
async def get_booking(
    booking_id: int,
    user: User = Depends(get_current_user),
    service: BookingService = Depends(get_booking_service),
):
    booking = await service.get_booking_by_id(booking_id)
    _ensure_visible(booking, user)
    return ok("Booking retrieved successfully", BookingResponse.model_validate(booking))
