"""
Booking persistence and the aggregate queries the reports are built on.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.models.booking import Booking, BookingStatus
from cinebook.models.movie import Movie
from cinebook.models.theater import Theater


@dataclass
class BookingFilters:
    user_id: Optional[int] = None
    movie_id: Optional[int] = None
    theater_id: Optional[int] = None
    status: Optional[BookingStatus] = None
    booking_date_from: Optional[datetime] = None
    booking_date_to: Optional[datetime] = None
    show_time_from: Optional[datetime] = None
    show_time_to: Optional[datetime] = None


class BookingRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def add(self, booking: Booking) -> Booking:
        self.db.add(booking)
        await self.db.flush()
        return booking

    async def get(self, booking_id: int, for_update: bool = False) -> Optional[Booking]:
        query = (
            select(Booking)
            .where(Booking.id == booking_id)
            .execution_options(populate_existing=True)
        )
        if for_update:
            query = query.with_for_update(of=Booking)
        result = await self.db.execute(query)
        return result.unique().scalar_one_or_none()

    async def get_by_reference(self, reference: str) -> Optional[Booking]:
        result = await self.db.execute(
            select(Booking)
            .where(Booking.booking_reference == reference)
            .execution_options(populate_existing=True)
        )
        return result.unique().scalar_one_or_none()

    async def reference_exists(self, reference: str) -> bool:
        result = await self.db.execute(
            select(Booking.id).where(Booking.booking_reference == reference).limit(1)
        )
        return result.scalar_one_or_none() is not None

    def _filtered(self, query, filters: BookingFilters):
        if filters.user_id is not None:
            query = query.where(Booking.user_id == filters.user_id)
        if filters.movie_id is not None:
            query = query.where(Booking.movie_id == filters.movie_id)
        if filters.theater_id is not None:
            query = query.where(Booking.theater_id == filters.theater_id)
        if filters.status is not None:
            query = query.where(Booking.status == filters.status)
        if filters.booking_date_from is not None:
            query = query.where(Booking.booking_date >= filters.booking_date_from)
        if filters.booking_date_to is not None:
            query = query.where(Booking.booking_date <= filters.booking_date_to)
        if filters.show_time_from is not None:
            query = query.where(Booking.show_time >= filters.show_time_from)
        if filters.show_time_to is not None:
            query = query.where(Booking.show_time <= filters.show_time_to)
        return query

    async def find(
        self,
        filters: BookingFilters,
        limit: Optional[int] = None,
        offset: int = 0,
    ) -> list[Booking]:
        query = self._filtered(select(Booking), filters).order_by(
            Booking.booking_date.desc(), Booking.id.desc()
        )
        if offset:
            query = query.offset(offset)
        if limit:
            query = query.limit(limit)
        result = await self.db.execute(query)
        return list(result.unique().scalars().all())

    async def count(self, filters: BookingFilters) -> int:
        query = self._filtered(select(func.count(Booking.id)), filters)
        return (await self.db.execute(query)).scalar_one()

    # Aggregates over confirmed bookings

    async def totals_by_movie(self) -> list[tuple[Movie, int, float, int]]:
        """(movie, tickets, revenue, bookings) sorted by tickets sold."""
        totals = (
            select(
                Booking.movie_id,
                func.sum(Booking.number_of_tickets).label("total_tickets"),
                func.sum(Booking.total_amount).label("total_revenue"),
                func.count(Booking.id).label("booking_count"),
            )
            .where(Booking.status == BookingStatus.CONFIRMED)
            .group_by(Booking.movie_id)
            .subquery()
        )
        result = await self.db.execute(
            select(Movie, totals.c.total_tickets, totals.c.total_revenue, totals.c.booking_count)
            .join(totals, totals.c.movie_id == Movie.id)
            .order_by(totals.c.total_tickets.desc(), Movie.id)
        )
        return [
            (movie, int(tickets), float(revenue), int(count))
            for movie, tickets, revenue, count in result.all()
        ]

    async def totals_by_theater_and_movie(self) -> list[dict]:
        result = await self.db.execute(
            select(
                Theater.id.label("theater_id"),
                Theater.name.label("theater_name"),
                Theater.city,
                Theater.state,
                Movie.id.label("movie_id"),
                Movie.name.label("movie_name"),
                func.sum(Booking.number_of_tickets).label("total_tickets"),
                func.sum(Booking.total_amount).label("total_revenue"),
                func.count(func.distinct(Booking.showtime_id)).label("show_count"),
            )
            .join(Theater, Theater.id == Booking.theater_id)
            .join(Movie, Movie.id == Booking.movie_id)
            .where(Booking.status == BookingStatus.CONFIRMED)
            .group_by(Theater.id, Theater.name, Theater.city, Theater.state, Movie.id, Movie.name)
        )
        return [dict(row._mapping) for row in result.all()]

    async def count_users_with_confirmed(self) -> int:
        result = await self.db.execute(
            select(func.count(func.distinct(Booking.user_id))).where(
                Booking.status == BookingStatus.CONFIRMED
            )
        )
        return result.scalar_one()

    async def confirmed_totals(self) -> tuple[int, float]:
        result = await self.db.execute(
            select(func.count(Booking.id), func.coalesce(func.sum(Booking.total_amount), 0)).where(
                Booking.status == BookingStatus.CONFIRMED
            )
        )
        count, revenue = result.one()
        return count, float(revenue)
