"""
Theater, screen and showtime endpoints.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from cinebook.api.deps import get_optional_user, get_theater_service, require_admin
from cinebook.models.user import User
from cinebook.repositories.showtime_repository import ShowtimeFilters
from cinebook.repositories.theater_repository import TheaterFilters
from cinebook.schemas.common import ApiResponse, Pagination, ok
from cinebook.schemas.showtime import (
    AssignMovieRequest,
    ShowtimeCreate,
    ShowtimeResponse,
    ShowtimeUpdate,
    TheaterShowtimes,
)
from cinebook.schemas.theater import TheaterCreate, TheaterResponse, TheaterSummary, TheaterUpdate
from cinebook.services.theater_service import TheaterService

router = APIRouter(prefix="/theaters", tags=["Theaters"])


def _is_admin(user: Optional[User]) -> bool:
    return user is not None and user.is_admin


@router.get("/", response_model=ApiResponse[list[TheaterResponse]])
async def list_theaters(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    name: Optional[str] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    pincode: Optional[str] = None,
    amenity: Optional[str] = None,
    include_inactive: bool = False,
    user: Optional[User] = Depends(get_optional_user),
    service: TheaterService = Depends(get_theater_service),
):
    filters = TheaterFilters(
        name=name,
        city=city,
        state=state,
        pincode=pincode,
        amenity=amenity,
        include_inactive=include_inactive and _is_admin(user),
    )
    theaters, total = await service.list_theaters(filters, page, limit)
    return ok(
        "Theaters retrieved successfully",
        [TheaterResponse.model_validate(t) for t in theaters],
        Pagination.build(page, limit, total),
    )


# Showtime routes are declared before /{theater_id} so the literal segment wins

@router.get("/showtimes", response_model=ApiResponse[list[ShowtimeResponse]])
async def list_showtimes(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    movie_id: Optional[int] = None,
    theater_id: Optional[int] = None,
    screen_number: Optional[int] = Query(None, ge=1),
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    include_inactive: bool = False,
    user: Optional[User] = Depends(get_optional_user),
    service: TheaterService = Depends(get_theater_service),
):
    filters = ShowtimeFilters(
        movie_id=movie_id,
        theater_id=theater_id,
        screen_number=screen_number,
        date_from=date_from,
        date_to=date_to,
        include_inactive=include_inactive and _is_admin(user),
    )
    showtimes, total = await service.list_showtimes(filters, page, limit)
    return ok(
        "Showtimes retrieved successfully",
        [ShowtimeResponse.model_validate(s) for s in showtimes],
        Pagination.build(page, limit, total),
    )


@router.post("/showtimes", response_model=ApiResponse[ShowtimeResponse], status_code=status.HTTP_201_CREATED)
async def create_showtime(
    showtime_data: ShowtimeCreate,
    admin: User = Depends(require_admin),
    service: TheaterService = Depends(get_theater_service),
):
    showtime = await service.create_showtime(showtime_data, admin.id)
    return ok("Showtime created successfully", ShowtimeResponse.model_validate(showtime))


@router.post(
    "/showtimes/assign-movie",
    response_model=ApiResponse[list[ShowtimeResponse]],
    status_code=status.HTTP_201_CREATED,
)
async def assign_movie(
    request: AssignMovieRequest,
    admin: User = Depends(require_admin),
    service: TheaterService = Depends(get_theater_service),
):
    """Schedule one movie on one screen at several times."""
    showtimes = await service.assign_movie(request, admin.id)
    return ok(
        f"{len(showtimes)} showtimes created successfully",
        [ShowtimeResponse.model_validate(s) for s in showtimes],
    )


@router.get("/showtimes/{showtime_id}", response_model=ApiResponse[ShowtimeResponse])
async def get_showtime(
    showtime_id: int,
    user: Optional[User] = Depends(get_optional_user),
    service: TheaterService = Depends(get_theater_service),
):
    """Seat counts and booked seats are read live, never cached."""
    showtime = await service.get_showtime(showtime_id, include_inactive=_is_admin(user))
    return ok("Showtime retrieved successfully", ShowtimeResponse.model_validate(showtime))


@router.put("/showtimes/{showtime_id}", response_model=ApiResponse[ShowtimeResponse])
async def update_showtime(
    showtime_id: int,
    update: ShowtimeUpdate,
    admin: User = Depends(require_admin),
    service: TheaterService = Depends(get_theater_service),
):
    showtime = await service.update_showtime(showtime_id, update)
    return ok("Showtime updated successfully", ShowtimeResponse.model_validate(showtime))


@router.delete("/showtimes/{showtime_id}", response_model=ApiResponse[None])
async def delete_showtime(
    showtime_id: int,
    admin: User = Depends(require_admin),
    service: TheaterService = Depends(get_theater_service),
):
    await service.delete_showtime(showtime_id)
    return ok("Showtime deleted successfully")


@router.get("/movie/{movie_id}", response_model=ApiResponse[list[TheaterShowtimes]])
async def theaters_for_movie(
    movie_id: int,
    service: TheaterService = Depends(get_theater_service),
):
    """Theaters with upcoming shows of a movie."""
    pairs = await service.get_theaters_for_movie(movie_id)
    data = [
        TheaterShowtimes(
            theater=TheaterSummary.model_validate(theater),
            showtimes=[ShowtimeResponse.model_validate(s) for s in showtimes],
        )
        for theater, showtimes in pairs
    ]
    return ok("Theaters retrieved successfully", data)


@router.get("/{theater_id}", response_model=ApiResponse[TheaterResponse])
async def get_theater(
    theater_id: int,
    user: Optional[User] = Depends(get_optional_user),
    service: TheaterService = Depends(get_theater_service),
):
    theater = await service.get_theater(theater_id, include_inactive=_is_admin(user))
    return ok("Theater retrieved successfully", TheaterResponse.model_validate(theater))


@router.post("/", response_model=ApiResponse[TheaterResponse], status_code=status.HTTP_201_CREATED)
async def create_theater(
    theater_data: TheaterCreate,
    admin: User = Depends(require_admin),
    service: TheaterService = Depends(get_theater_service),
):
    theater = await service.create_theater(theater_data, admin.id)
    return ok("Theater created successfully", TheaterResponse.model_validate(theater))


@router.put("/{theater_id}", response_model=ApiResponse[TheaterResponse])
async def update_theater(
    theater_id: int,
    update: TheaterUpdate,
    admin: User = Depends(require_admin),
    service: TheaterService = Depends(get_theater_service),
):
    theater = await service.update_theater(theater_id, update)
    return ok("Theater updated successfully", TheaterResponse.model_validate(theater))


@router.delete("/{theater_id}", response_model=ApiResponse[None])
async def delete_theater(
    theater_id: int,
    admin: User = Depends(require_admin),
    service: TheaterService = Depends(get_theater_service),
):
    await service.delete_theater(theater_id)
    return ok("Theater deleted successfully")
