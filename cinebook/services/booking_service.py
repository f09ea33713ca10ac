"""
Booking lifecycle: create, cancel and read bookings.

A booking is created in the same database transaction that reserves its
seats. If anything fails after the seats were taken (reference allocation,
the INSERT itself, the commit) the transaction is rolled back, which hands
the seats back. Should that rollback fail too, the inventory may be out of
sync with the bookings table; that is logged at critical level and raised
as InventoryInconsistencyError for an operator to reconcile.

Cancellation marks the booking cancelled first and releases its seats
second, again in one transaction.

Status transitions: confirmed -> cancelled. Nothing creates `pending`.
"""

import secrets
import string
import time
from datetime import datetime, timedelta
from typing import Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.config import get_settings
from cinebook.core.exceptions import (
    AppError,
    ConflictError,
    ShowtimeNotFoundError,
    ShowtimeNotBookableError,
    SeatCountMismatchError,
    TicketLimitExceededError,
    DuplicateSeatError,
    DuplicateReferenceError,
    BookingNotFoundError,
    NotOwnerError,
    AlreadyCancelledError,
    CancellationWindowPassedError,
    InventoryInconsistencyError,
)
from cinebook.core.logging import get_logger
from cinebook.core.metrics import (
    booking_latency,
    inventory_rollback_failures,
    record_booking_attempt,
    record_cancellation,
)
from cinebook.db.base import utcnow
from cinebook.models.booking import Booking, BookingStatus
from cinebook.repositories.booking_repository import BookingRepository, BookingFilters
from cinebook.repositories.showtime_repository import ShowtimeRepository
from cinebook.schemas.booking import BookingCreate
from cinebook.services.inventory_service import SeatInventory

logger = get_logger(__name__)

_BASE36 = string.digits + string.ascii_uppercase


def _base36(value: int) -> str:
    digits = []
    while True:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
        if value == 0:
            return "".join(reversed(digits))


def generate_booking_reference(now: Optional[datetime] = None) -> str:
    """`BK` + base36 creation millis + five random base36 characters."""
    moment = now or utcnow()
    millis = int(moment.timestamp() * 1000)
    suffix = "".join(secrets.choice(_BASE36) for _ in range(5))
    return f"BK{_base36(millis)}{suffix}"


class BookingService:
    def __init__(
        self,
        db: AsyncSession,
        bookings: BookingRepository,
        showtimes: ShowtimeRepository,
        inventory: SeatInventory,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.bookings = bookings
        self.showtimes = showtimes
        self.inventory = inventory
        self.clock = clock
        self.settings = get_settings()

    async def create_booking(self, request: BookingCreate, user_id: int) -> Booking:
        started = time.perf_counter()
        try:
            booking = await self._create(request, user_id)
        except AppError as exc:
            record_booking_attempt("conflict" if isinstance(exc, ConflictError) else "rejected")
            await self._rollback(request)
            raise
        except Exception as exc:
            record_booking_attempt("error")
            logger.error(
                "booking_persist_failed",
                showtime_id=request.showtime_id,
                seats=list(request.seat_numbers),
                error=str(exc),
            )
            await self._rollback(request)
            raise
        finally:
            booking_latency.observe(time.perf_counter() - started)

        record_booking_attempt("success")
        logger.info(
            "booking_created",
            booking_id=booking.id,
            reference=booking.booking_reference,
            user_id=user_id,
            showtime_id=booking.showtime_id,
            seats=booking.seat_numbers,
            total_amount=float(booking.total_amount),
        )
        return await self.get_booking_by_id(booking.id)

    async def _create(self, request: BookingCreate, user_id: int) -> Booking:
        showtime = await self.showtimes.get(request.showtime_id)
        if showtime is None:
            raise ShowtimeNotFoundError()

        now = self.clock()
        if not showtime.is_active or showtime.show_time <= now:
            raise ShowtimeNotBookableError()

        self._check_seat_request(request)

        total_amount = showtime.price * request.number_of_tickets
        screen_number = showtime.screen_number
        show_time = showtime.show_time
        movie_id = showtime.movie_id
        theater_id = showtime.theater_id

        await self.inventory.reserve_seats(showtime.id, request.seat_numbers)

        booking = Booking(
            booking_reference=await self._allocate_reference(),
            user_id=user_id,
            movie_id=movie_id,
            theater_id=theater_id,
            showtime_id=request.showtime_id,
            screen_number=screen_number,
            show_time=show_time,
            number_of_tickets=request.number_of_tickets,
            seat_numbers=list(request.seat_numbers),
            total_amount=total_amount,
            booking_date=now,
            status=BookingStatus.CONFIRMED,
        )
        if request.payment_details is not None:
            booking.payment_method = request.payment_details.payment_method
            booking.payment_id = request.payment_details.payment_id
            booking.transaction_id = request.payment_details.transaction_id

        try:
            await self.bookings.add(booking)
        except IntegrityError as exc:
            raise DuplicateReferenceError() from exc
        await self.db.commit()
        return booking

    def _check_seat_request(self, request: BookingCreate) -> None:
        limit = self.settings.MAX_TICKETS_PER_BOOKING
        if not 1 <= request.number_of_tickets <= limit:
            raise TicketLimitExceededError(limit)
        if len(request.seat_numbers) != request.number_of_tickets:
            raise SeatCountMismatchError()
        if len(set(request.seat_numbers)) != len(request.seat_numbers):
            raise DuplicateSeatError()

    async def _allocate_reference(self) -> str:
        for _ in range(self.settings.REFERENCE_MAX_ATTEMPTS):
            reference = generate_booking_reference(self.clock())
            if not await self.bookings.reference_exists(reference):
                return reference
        raise DuplicateReferenceError()

    async def _rollback(self, request: BookingCreate) -> None:
        """Undo everything the attempt did, including any seat reservation."""
        try:
            await self.db.rollback()
        except Exception as rollback_exc:
            inventory_rollback_failures.inc()
            logger.critical(
                "inventory_rollback_failed",
                showtime_id=request.showtime_id,
                seats=list(request.seat_numbers),
                error=str(rollback_exc),
            )
            raise InventoryInconsistencyError() from rollback_exc

    async def cancel_booking(self, booking_id: int, user_id: int) -> Booking:
        try:
            booking = await self._cancel(booking_id, user_id)
        except AppError:
            await self.db.rollback()
            record_cancellation(False)
            raise
        except Exception:
            await self.db.rollback()
            raise

        record_cancellation(True)
        logger.info(
            "booking_cancelled",
            booking_id=booking_id,
            user_id=user_id,
            showtime_id=booking.showtime_id,
            seats_released=booking.seat_numbers,
        )
        return await self.get_booking_by_id(booking_id)

    async def _cancel(self, booking_id: int, user_id: int) -> Booking:
        booking = await self.bookings.get(booking_id, for_update=True)
        if booking is None:
            raise BookingNotFoundError()
        if booking.user_id != user_id:
            raise NotOwnerError()
        if booking.status == BookingStatus.CANCELLED:
            raise AlreadyCancelledError()

        window = timedelta(hours=self.settings.CANCELLATION_WINDOW_HOURS)
        if booking.show_time - self.clock() < window:
            raise CancellationWindowPassedError(self.settings.CANCELLATION_WINDOW_HOURS)

        booking.status = BookingStatus.CANCELLED
        await self.db.flush()
        await self.inventory.release_seats(booking.showtime_id, booking.seat_numbers)
        await self.db.commit()
        return booking

    async def get_booking_by_id(self, booking_id: int) -> Booking:
        booking = await self.bookings.get(booking_id)
        if booking is None:
            raise BookingNotFoundError()
        return booking

    async def get_booking_by_reference(self, reference: str) -> Booking:
        booking = await self.bookings.get_by_reference(reference.strip().upper())
        if booking is None:
            raise BookingNotFoundError()
        return booking

    async def get_user_bookings(
        self, user_id: int, page: int = 1, limit: int = 10
    ) -> tuple[list[Booking], int]:
        return await self.get_bookings(BookingFilters(user_id=user_id), page, limit)

    async def get_bookings(
        self, filters: BookingFilters, page: int = 1, limit: int = 10
    ) -> tuple[list[Booking], int]:
        bookings = await self.bookings.find(filters, limit=limit, offset=(page - 1) * limit)
        total = await self.bookings.count(filters)
        return bookings, total
