"""
Theater, screen and showtime management.

Theaters and showtimes are soft-deleted through `is_active`; read paths hide
inactive rows unless the caller explicitly asks for them.
"""

from collections import OrderedDict
from datetime import datetime
from decimal import Decimal
from typing import Callable

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.exceptions import NotFoundError, ConflictError, ValidationFailure, ShowtimeNotFoundError
from cinebook.core.logging import get_logger
from cinebook.db.base import utcnow
from cinebook.models.showtime import Showtime
from cinebook.models.theater import Theater, Screen
from cinebook.repositories.movie_repository import MovieRepository
from cinebook.repositories.showtime_repository import ShowtimeRepository, ShowtimeFilters
from cinebook.repositories.theater_repository import TheaterRepository, TheaterFilters
from cinebook.schemas.showtime import ShowtimeCreate, ShowtimeUpdate, AssignMovieRequest
from cinebook.schemas.theater import TheaterCreate, TheaterUpdate

logger = get_logger(__name__)


def _money(value: float) -> Decimal:
    return Decimal(str(value)).quantize(Decimal("0.01"))


class TheaterService:
    def __init__(
        self,
        db: AsyncSession,
        theaters: TheaterRepository,
        showtimes: ShowtimeRepository,
        movies: MovieRepository,
        clock: Callable[[], datetime] = utcnow,
    ):
        self.db = db
        self.theaters = theaters
        self.showtimes = showtimes
        self.movies = movies
        self.clock = clock

    # Theaters

    async def create_theater(self, theater_data: TheaterCreate, created_by: int) -> Theater:
        if await self.theaters.location_taken(
            theater_data.name, theater_data.city, theater_data.address
        ):
            raise ConflictError("Theater with this name and location already exists")

        fields = theater_data.model_dump(exclude={"screens"})
        theater = Theater(
            **fields,
            created_by=created_by,
            screens=[Screen(**screen.model_dump()) for screen in theater_data.screens],
        )
        await self.theaters.add(theater)
        await self.db.commit()

        logger.info(
            "theater_created",
            theater_id=theater.id,
            name=theater.name,
            screens=len(theater_data.screens),
        )
        return await self.get_theater(theater.id)

    async def get_theater(self, theater_id: int, include_inactive: bool = False) -> Theater:
        theater = await self.theaters.get(theater_id)
        if theater is None or (not theater.is_active and not include_inactive):
            raise NotFoundError("Theater not found")
        return theater

    async def update_theater(self, theater_id: int, update: TheaterUpdate) -> Theater:
        theater = await self.get_theater(theater_id, include_inactive=True)
        changes = update.model_dump(exclude_unset=True, exclude={"screens"})

        if {"name", "city", "address"} & changes.keys():
            if await self.theaters.location_taken(
                changes.get("name", theater.name),
                changes.get("city", theater.city),
                changes.get("address", theater.address),
                exclude_id=theater_id,
            ):
                raise ConflictError("Theater with this name and location already exists")

        for field, value in changes.items():
            setattr(theater, field, value)
        if update.screens is not None:
            self._merge_screens(theater, update.screens)

        await self.db.commit()
        logger.info("theater_updated", theater_id=theater_id, fields=sorted(changes))
        return await self.get_theater(theater_id, include_inactive=True)

    @staticmethod
    def _merge_screens(theater: Theater, screens) -> None:
        """
        Upsert screens by number. Screens missing from the update are
        deactivated, not removed, because showtimes refer to them by number.
        """
        incoming = {screen.screen_number: screen for screen in screens}
        for existing in theater.screens:
            data = incoming.pop(existing.screen_number, None)
            if data is None:
                existing.is_active = False
                continue
            for field, value in data.model_dump().items():
                setattr(existing, field, value)
        for data in incoming.values():
            theater.screens.append(Screen(**data.model_dump()))

    async def delete_theater(self, theater_id: int) -> None:
        theater = await self.get_theater(theater_id, include_inactive=True)
        theater.is_active = False
        await self.db.commit()
        logger.info("theater_deactivated", theater_id=theater_id)

    async def list_theaters(
        self, filters: TheaterFilters, page: int = 1, limit: int = 10
    ) -> tuple[list[Theater], int]:
        theaters = await self.theaters.find(filters)
        start = (page - 1) * limit
        return theaters[start:start + limit], len(theaters)

    async def get_theaters_for_movie(self, movie_id: int) -> list[tuple[Theater, list[Showtime]]]:
        """Active theaters with upcoming shows of the movie, ordered by theater name."""
        showtimes = await self.showtimes.find_upcoming_for_movie(movie_id, self.clock())
        by_theater: "OrderedDict[int, list[Showtime]]" = OrderedDict()
        for showtime in showtimes:
            by_theater.setdefault(showtime.theater_id, []).append(showtime)

        theaters = await self.theaters.get_many(list(by_theater))
        return [(theater, by_theater[theater.id]) for theater in theaters]

    # Showtimes

    async def create_showtime(
        self, showtime_data: ShowtimeCreate, created_by: int, commit: bool = True
    ) -> Showtime:
        show_time = showtime_data.show_time
        if show_time.tzinfo is None:
            raise ValidationFailure("Show time must include a timezone offset")
        if show_time <= self.clock():
            raise ValidationFailure("Show time must be in the future")

        movie = await self.movies.get(showtime_data.movie_id)
        if movie is None or not movie.is_active:
            raise NotFoundError("Movie not found")

        theater = await self.get_theater(showtime_data.theater_id)
        screen = theater.find_screen(showtime_data.screen_number)
        if screen is None or not screen.is_active:
            raise NotFoundError("Screen not found or inactive")

        if await self.showtimes.slot_taken(theater.id, screen.screen_number, show_time):
            raise ConflictError("Show time already exists for this screen at the same time")

        showtime = Showtime(
            movie_id=movie.id,
            theater_id=theater.id,
            screen_number=screen.screen_number,
            show_date=showtime_data.show_date or show_time.date(),
            show_time=show_time,
            price=_money(showtime_data.price),
            total_seats=screen.total_seats,
            available_seats=screen.total_seats,
            is_active=True,
            created_by=created_by,
        )
        try:
            await self.showtimes.add(showtime)
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("Show time already exists for this screen at the same time") from exc
        logger.info(
            "showtime_created",
            showtime_id=showtime.id,
            movie_id=movie.id,
            theater_id=theater.id,
            screen=screen.screen_number,
            total_seats=screen.total_seats,
        )
        if not commit:
            return showtime
        await self.db.commit()
        return await self.get_showtime(showtime.id)

    async def assign_movie(self, request: AssignMovieRequest, created_by: int) -> list[Showtime]:
        """Create several showtimes for one screen; all or nothing."""
        created = []
        try:
            for slot in request.show_times:
                showtime = await self.create_showtime(
                    ShowtimeCreate(
                        movie_id=request.movie_id,
                        theater_id=request.theater_id,
                        screen_number=request.screen_number,
                        show_time=slot.show_time,
                        price=slot.price,
                    ),
                    created_by,
                    commit=False,
                )
                created.append(showtime.id)
            await self.db.commit()
        except Exception:
            await self.db.rollback()
            raise
        return [await self.get_showtime(showtime_id) for showtime_id in created]

    async def get_showtime(self, showtime_id: int, include_inactive: bool = False) -> Showtime:
        showtime = await self.showtimes.get(showtime_id)
        if showtime is None or (not showtime.is_active and not include_inactive):
            raise ShowtimeNotFoundError()
        return showtime

    async def update_showtime(self, showtime_id: int, update: ShowtimeUpdate) -> Showtime:
        """Only price, time and the active flag are editable; seats are not."""
        showtime = await self.get_showtime(showtime_id, include_inactive=True)
        changes = update.model_dump(exclude_unset=True)

        if "show_time" in changes:
            new_time = changes["show_time"]
            if new_time.tzinfo is None:
                raise ValidationFailure("Show time must include a timezone offset")
            if new_time <= self.clock():
                raise ValidationFailure("Show time must be in the future")
            if await self.showtimes.slot_taken(
                showtime.theater_id, showtime.screen_number, new_time, exclude_id=showtime_id
            ):
                raise ConflictError("Show time already exists for this screen at the same time")
            showtime.show_time = new_time
            showtime.show_date = changes.get("show_date") or new_time.date()
        elif "show_date" in changes:
            showtime.show_date = changes["show_date"]

        if "price" in changes:
            showtime.price = _money(changes["price"])
        if "is_active" in changes:
            if (
                changes["is_active"]
                and not showtime.is_active
                and await self.showtimes.slot_taken(
                    showtime.theater_id, showtime.screen_number, showtime.show_time, exclude_id=showtime_id
                )
            ):
                raise ConflictError("Another show is already scheduled on this screen at the same time")
            showtime.is_active = changes["is_active"]

        try:
            await self.db.commit()
        except IntegrityError as exc:
            await self.db.rollback()
            raise ConflictError("Show time already exists for this screen at the same time") from exc
        logger.info("showtime_updated", showtime_id=showtime_id, fields=sorted(changes))
        return await self.get_showtime(showtime_id, include_inactive=True)

    async def delete_showtime(self, showtime_id: int) -> None:
        """Soft delete; existing bookings keep pointing at the showtime."""
        showtime = await self.get_showtime(showtime_id, include_inactive=True)
        showtime.is_active = False
        await self.db.commit()
        logger.info("showtime_deactivated", showtime_id=showtime_id)

    async def list_showtimes(
        self, filters: ShowtimeFilters, page: int = 1, limit: int = 10
    ) -> tuple[list[Showtime], int]:
        showtimes = await self.showtimes.find(filters, limit=limit, offset=(page - 1) * limit)
        total = await self.showtimes.count(filters)
        return showtimes, total
