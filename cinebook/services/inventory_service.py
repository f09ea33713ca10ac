"""
Seat inventory for a single showtime.

CONCURRENCY STRATEGY: conditional update + unique seat rows
============================================================

Problem:
  Two users ask for seat 7 of the same show at the same moment. A naive
  "read booked seats, check, write" lets both pass the check before either
  writes. Result: a double-booked seat.

Solution:
  reserve_seats runs three statements inside the caller's transaction:

  1. UPDATE showtimes SET available_seats = available_seats - N
     WHERE id = :id AND is_active AND show_time > :now AND available_seats >= N
     -> capacity and bookability are enforced by the row being matched at
        all, and on PostgreSQL the row stays locked until commit/rollback,
        so competing reservations for this showtime queue up here.
  2. SELECT the requested seats that already have a showtime_seats row.
     Under the row lock this sees every seat committed by earlier winners.
  3. INSERT one showtime_seats row per seat. The unique constraint on
     (showtime_id, seat_number) is the final safety net.

  If any step fails the caller rolls the transaction back, which undoes the
  decrement. A request that loses the race gets SeatAlreadyBookedError and is
  not retried: the user has to pick other seats.

  release_seats is the mirror image: delete the seat rows, then add back
  exactly as many seats as rows were deleted, so releasing a seat that is
  not booked changes nothing.

Neither operation commits.
"""

from datetime import datetime
from typing import Callable, Iterable

from sqlalchemy.exc import IntegrityError

from cinebook.core.exceptions import (
    ShowtimeNotFoundError,
    ShowtimeNotBookableError,
    SeatOutOfRangeError,
    SeatAlreadyBookedError,
    InsufficientAvailabilityError,
    ValidationFailure,
)
from cinebook.core.logging import get_logger
from cinebook.core.metrics import record_seat_operation, seat_conflicts
from cinebook.db.base import utcnow
from cinebook.models.showtime import Showtime
from cinebook.repositories.showtime_repository import ShowtimeRepository

logger = get_logger(__name__)


class SeatInventory:
    def __init__(self, showtimes: ShowtimeRepository, clock: Callable[[], datetime] = utcnow):
        self.showtimes = showtimes
        self.clock = clock

    async def reserve_seats(self, showtime_id: int, seat_numbers: Iterable[int]) -> Showtime:
        seats = sorted(set(seat_numbers))
        if not seats:
            raise ValidationFailure("At least one seat number is required")
        now = self.clock()

        showtime = await self.showtimes.get(showtime_id)
        if showtime is None:
            raise ShowtimeNotFoundError()
        if not showtime.is_active or showtime.show_time <= now:
            raise ShowtimeNotBookableError()

        out_of_range = [s for s in seats if s < 1 or s > showtime.total_seats]
        if out_of_range:
            raise SeatOutOfRangeError(out_of_range, showtime.total_seats)

        # Fast path: the snapshot already shows a conflict
        taken = sorted(set(seats) & set(showtime.booked_seats))
        if taken:
            self._conflict(showtime_id, taken)

        if not await self.showtimes.take_availability(showtime_id, len(seats), now):
            await self._explain_rejected(showtime_id, len(seats), now)

        taken = await self.showtimes.booked_among(showtime_id, seats)
        if taken:
            self._conflict(showtime_id, taken)

        try:
            await self.showtimes.insert_seats(showtime_id, seats)
        except IntegrityError:
            # Lost the race without the row lock (e.g. SQLite)
            self._conflict(showtime_id, seats)

        record_seat_operation("reserve", len(seats))
        logger.info("seats_reserved", showtime_id=showtime_id, seats=seats)
        return await self.showtimes.get(showtime_id)

    async def release_seats(self, showtime_id: int, seat_numbers: Iterable[int]) -> Showtime:
        seats = sorted(set(seat_numbers))

        showtime = await self.showtimes.get(showtime_id, for_update=True)
        if showtime is None:
            raise ShowtimeNotFoundError()

        removed = await self.showtimes.delete_seats(showtime_id, seats) if seats else 0
        if removed:
            await self.showtimes.return_availability(showtime_id, removed)
            record_seat_operation("release", removed)

        logger.info(
            "seats_released",
            showtime_id=showtime_id,
            requested=seats,
            released=removed,
        )
        return await self.showtimes.get(showtime_id)

    def _conflict(self, showtime_id: int, seats: list[int]) -> None:
        seat_conflicts.inc()
        logger.warning("seat_conflict", showtime_id=showtime_id, seats=seats)
        raise SeatAlreadyBookedError(seats)

    async def _explain_rejected(self, showtime_id: int, requested: int, now: datetime) -> None:
        """The conditional update matched nothing; re-read to report why."""
        current = await self.showtimes.get(showtime_id)
        if current is None:
            raise ShowtimeNotFoundError()
        if not current.is_active or current.show_time <= now:
            raise ShowtimeNotBookableError()
        logger.warning(
            "reservation_rejected_no_capacity",
            showtime_id=showtime_id,
            requested=requested,
            available=current.available_seats,
        )
        raise InsufficientAvailabilityError(requested, current.available_seats)
