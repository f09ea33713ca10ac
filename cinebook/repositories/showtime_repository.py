"""
Showtime persistence, including the primitive seat-inventory statements.

The inventory statements are deliberately small: each one is a single SQL
statement so the service can compose them inside one transaction.
"""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

from sqlalchemy import select, update, delete, func
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.models.showtime import Showtime, ShowtimeSeat


@dataclass
class ShowtimeFilters:
    movie_id: Optional[int] = None
    theater_id: Optional[int] = None
    screen_number: Optional[int] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    include_inactive: bool = False


class ShowtimeRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, showtime_id: int, for_update: bool = False) -> Optional[Showtime]:
        """Load a showtime with fresh seat state, optionally row-locked."""
        query = (
            select(Showtime)
            .where(Showtime.id == showtime_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update(of=Showtime)
        result = await self.db.execute(query)
        return result.unique().scalar_one_or_none()

    async def add(self, showtime: Showtime) -> Showtime:
        self.db.add(showtime)
        await self.db.flush()
        await self.db.refresh(showtime)
        return showtime

    async def slot_taken(
        self,
        theater_id: int,
        screen_number: int,
        show_time: datetime,
        exclude_id: Optional[int] = None,
    ) -> bool:
        query = select(Showtime.id).where(
            Showtime.theater_id == theater_id,
            Showtime.screen_number == screen_number,
            Showtime.show_time == show_time,
            Showtime.is_active.is_(True),
        )
        if exclude_id is not None:
            query = query.where(Showtime.id != exclude_id)
        result = await self.db.execute(query.limit(1))
        return result.scalar_one_or_none() is not None

    def _filtered(self, query, filters: ShowtimeFilters):
        if not filters.include_inactive:
            query = query.where(Showtime.is_active.is_(True))
        if filters.movie_id is not None:
            query = query.where(Showtime.movie_id == filters.movie_id)
        if filters.theater_id is not None:
            query = query.where(Showtime.theater_id == filters.theater_id)
        if filters.screen_number is not None:
            query = query.where(Showtime.screen_number == filters.screen_number)
        if filters.date_from is not None:
            query = query.where(Showtime.show_date >= filters.date_from)
        if filters.date_to is not None:
            query = query.where(Showtime.show_date <= filters.date_to)
        return query

    async def find(self, filters: ShowtimeFilters, limit: int, offset: int) -> list[Showtime]:
        query = (
            self._filtered(select(Showtime), filters)
            .order_by(Showtime.show_time.asc(), Showtime.id.asc())
            .offset(offset)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return list(result.unique().scalars().all())

    async def count(self, filters: ShowtimeFilters) -> int:
        query = self._filtered(select(func.count(Showtime.id)), filters)
        return (await self.db.execute(query)).scalar_one()

    async def find_upcoming_for_movie(self, movie_id: int, now: datetime) -> list[Showtime]:
        result = await self.db.execute(
            select(Showtime)
            .where(
                Showtime.movie_id == movie_id,
                Showtime.is_active.is_(True),
                Showtime.show_time > now,
            )
            .order_by(Showtime.theater_id, Showtime.show_time)
        )
        return list(result.unique().scalars().all())

    async def count_active(self) -> int:
        result = await self.db.execute(
            select(func.count(Showtime.id)).where(Showtime.is_active.is_(True))
        )
        return result.scalar_one()

    # Seat inventory primitives

    async def take_availability(self, showtime_id: int, count: int, now: datetime) -> bool:
        """
        Conditionally decrement available_seats.

        One statement: the row is only touched while it is active, in the
        future and still has `count` seats. On PostgreSQL the UPDATE holds the
        row lock until the surrounding transaction ends, which serializes
        competing reservations for the same showtime.
        """
        result = await self.db.execute(
            update(Showtime)
            .where(
                Showtime.id == showtime_id,
                Showtime.is_active.is_(True),
                Showtime.show_time > now,
                Showtime.available_seats >= count,
            )
            .values(
                available_seats=Showtime.available_seats - count,
                version=Showtime.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def return_availability(self, showtime_id: int, count: int) -> bool:
        result = await self.db.execute(
            update(Showtime)
            .where(Showtime.id == showtime_id)
            .values(
                available_seats=Showtime.available_seats + count,
                version=Showtime.version + 1,
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def booked_among(self, showtime_id: int, seat_numbers: Iterable[int]) -> list[int]:
        result = await self.db.execute(
            select(ShowtimeSeat.seat_number).where(
                ShowtimeSeat.showtime_id == showtime_id,
                ShowtimeSeat.seat_number.in_(list(seat_numbers)),
            )
        )
        return sorted(result.scalars().all())

    async def insert_seats(self, showtime_id: int, seat_numbers: Iterable[int]) -> None:
        """Raises IntegrityError if any seat row already exists."""
        self.db.add_all(
            ShowtimeSeat(showtime_id=showtime_id, seat_number=seat) for seat in seat_numbers
        )
        await self.db.flush()

    async def delete_seats(self, showtime_id: int, seat_numbers: Iterable[int]) -> int:
        result = await self.db.execute(
            delete(ShowtimeSeat)
            .where(
                ShowtimeSeat.showtime_id == showtime_id,
                ShowtimeSeat.seat_number.in_(list(seat_numbers)),
            )
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
