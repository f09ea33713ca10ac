"""
Read-only reporting over bookings.

Only confirmed bookings count towards tickets and revenue. The per-movie and
per-theater aggregates are computed in SQL; the date-bounded revenue report
folds the matching bookings in Python because it needs both breakdowns from
one pass.
"""

from datetime import datetime

from cinebook.core.exceptions import ValidationFailure
from cinebook.core.logging import get_logger
from cinebook.models.booking import BookingStatus
from cinebook.repositories.booking_repository import BookingRepository, BookingFilters
from cinebook.repositories.movie_repository import MovieRepository
from cinebook.repositories.showtime_repository import ShowtimeRepository
from cinebook.repositories.theater_repository import TheaterRepository
from cinebook.repositories.user_repository import UserRepository
from cinebook.schemas.report import (
    DashboardOverview,
    MovieBookingStats,
    RevenueBreakdown,
    RevenuePeriod,
    RevenueReport,
    RevenueSummary,
    TheaterBookingStats,
    TheaterMovieStats,
    UserAnalytics,
    UserBookingSummary,
)

logger = get_logger(__name__)


class ReportService:
    def __init__(
        self,
        bookings: BookingRepository,
        users: UserRepository,
        movies: MovieRepository,
        theaters: TheaterRepository,
        showtimes: ShowtimeRepository,
    ):
        self.bookings = bookings
        self.users = users
        self.movies = movies
        self.theaters = theaters
        self.showtimes = showtimes

    async def bookings_by_movie(self) -> list[MovieBookingStats]:
        rows = await self.bookings.totals_by_movie()
        return [
            MovieBookingStats(
                movie_id=movie.id,
                movie_name=movie.name,
                genres=movie.genres or [],
                languages=movie.languages or [],
                total_tickets=tickets,
                total_revenue=revenue,
                booking_count=count,
            )
            for movie, tickets, revenue, count in rows
        ]

    async def bookings_by_theater(self) -> list[TheaterBookingStats]:
        grouped: dict[int, TheaterBookingStats] = {}
        for row in await self.bookings.totals_by_theater_and_movie():
            stats = grouped.get(row["theater_id"])
            if stats is None:
                stats = grouped[row["theater_id"]] = TheaterBookingStats(
                    theater_id=row["theater_id"],
                    theater_name=row["theater_name"],
                    city=row["city"],
                    state=row["state"],
                    movies=[],
                    total_tickets=0,
                    total_revenue=0.0,
                )
            tickets = int(row["total_tickets"])
            revenue = float(row["total_revenue"])
            stats.movies.append(
                TheaterMovieStats(
                    movie_id=row["movie_id"],
                    movie_name=row["movie_name"],
                    total_tickets=tickets,
                    total_revenue=revenue,
                    show_count=int(row["show_count"]),
                )
            )
            stats.total_tickets += tickets
            stats.total_revenue += revenue

        result = sorted(grouped.values(), key=lambda s: (-s.total_tickets, s.theater_id))
        for stats in result:
            stats.movies.sort(key=lambda m: (-m.total_tickets, m.movie_id))
        return result

    async def user_booking_summary(self, user_id: int) -> list[UserBookingSummary]:
        bookings = await self.bookings.find(BookingFilters(user_id=user_id))
        return [
            UserBookingSummary(
                booking_reference=b.booking_reference,
                movie_name=b.movie.name if b.movie else "",
                theater_name=b.theater.name if b.theater else "",
                show_time=b.show_time,
                number_of_tickets=b.number_of_tickets,
                booking_date=b.booking_date,
                status=b.status,
                total_amount=float(b.total_amount),
            )
            for b in bookings
        ]

    async def revenue_report(self, start_date: datetime, end_date: datetime) -> RevenueReport:
        if start_date > end_date:
            raise ValidationFailure("Start date must be before end date")

        bookings = await self.bookings.find(
            BookingFilters(
                status=BookingStatus.CONFIRMED,
                booking_date_from=start_date,
                booking_date_to=end_date,
            )
        )

        by_movie: dict[int, RevenueBreakdown] = {}
        by_theater: dict[int, RevenueBreakdown] = {}
        total_revenue = 0.0
        total_tickets = 0
        for booking in bookings:
            amount = float(booking.total_amount)
            total_revenue += amount
            total_tickets += booking.number_of_tickets
            for bucket, key, name in (
                (by_movie, booking.movie_id, booking.movie.name if booking.movie else ""),
                (by_theater, booking.theater_id, booking.theater.name if booking.theater else ""),
            ):
                entry = bucket.setdefault(
                    key, RevenueBreakdown(id=key, name=name, revenue=0.0, bookings=0, tickets=0)
                )
                entry.revenue += amount
                entry.bookings += 1
                entry.tickets += booking.number_of_tickets

        count = len(bookings)
        summary = RevenueSummary(
            total_revenue=round(total_revenue, 2),
            total_bookings=count,
            total_tickets=total_tickets,
            average_booking_value=round(total_revenue / count, 2) if count else 0.0,
            average_ticket_price=round(total_revenue / total_tickets, 2) if total_tickets else 0.0,
        )
        logger.info(
            "revenue_report_generated",
            start=start_date.isoformat(),
            end=end_date.isoformat(),
            bookings=count,
        )
        return RevenueReport(
            summary=summary,
            movie_breakdown=sorted(by_movie.values(), key=lambda e: -e.revenue),
            theater_breakdown=sorted(by_theater.values(), key=lambda e: -e.revenue),
            period=RevenuePeriod(start_date=start_date, end_date=end_date),
        )

    async def popular_movies(self, limit: int = 10) -> list[MovieBookingStats]:
        return (await self.bookings_by_movie())[:limit]

    async def popular_theaters(self, limit: int = 10) -> list[TheaterBookingStats]:
        return (await self.bookings_by_theater())[:limit]

    async def user_analytics(self) -> UserAnalytics:
        total = await self.users.count()
        active = await self.users.count(active_only=True)
        with_bookings = await self.bookings.count_users_with_confirmed()
        return UserAnalytics(
            total_users=total,
            active_users=active,
            inactive_users=total - active,
            users_with_bookings=with_bookings,
            users_without_bookings=max(total - with_bookings, 0),
            conversion_rate=round(with_bookings / total * 100, 2) if total else 0.0,
        )

    async def dashboard(self) -> DashboardOverview:
        confirmed, revenue = await self.bookings.confirmed_totals()
        return DashboardOverview(
            total_users=await self.users.count(),
            total_movies=await self.movies.count_active(),
            total_theaters=await self.theaters.count_active(),
            active_showtimes=await self.showtimes.count_active(),
            confirmed_bookings=confirmed,
            total_revenue=round(revenue, 2),
        )
