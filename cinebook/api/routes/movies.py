"""
Movie catalog endpoints with Redis caching on the public listing.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status

from cinebook.api.deps import get_movie_service, get_optional_user, require_admin
from cinebook.core.logging import get_logger
from cinebook.models.user import User
from cinebook.repositories.movie_repository import MovieFilters
from cinebook.schemas.common import ApiResponse, Pagination, ok
from cinebook.schemas.movie import MovieCreate, MovieResponse, MovieUpdate
from cinebook.services.cache_service import get_cached, make_movie_list_key, set_cached
from cinebook.services.movie_service import MovieService

logger = get_logger(__name__)
router = APIRouter(prefix="/movies", tags=["Movies"])


@router.get("/", response_model=ApiResponse[list[MovieResponse]])
async def list_movies(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    name: Optional[str] = None,
    genre: Optional[str] = None,
    language: Optional[str] = None,
    min_rating: Optional[float] = Query(None, ge=0, le=10),
    include_inactive: bool = False,
    user: Optional[User] = Depends(get_optional_user),
    service: MovieService = Depends(get_movie_service),
):
    """
    List movies with filters and pagination.
    Anonymous listings are cached; only admins may see inactive movies.
    """
    include_inactive = include_inactive and user is not None and user.is_admin
    key = None
    if not include_inactive:
        key = make_movie_list_key(
            page=page, limit=limit, name=name, genre=genre, language=language, min_rating=min_rating
        )
        cached = await get_cached(key)
        if cached:
            logger.info("movie_list_cache_hit", page=page)
            return cached

    filters = MovieFilters(
        name=name,
        genre=genre,
        language=language,
        min_rating=min_rating,
        include_inactive=include_inactive,
    )
    movies, total = await service.list_movies(filters, page, limit)
    response = ok(
        "Movies retrieved successfully",
        [MovieResponse.model_validate(m).model_dump(mode="json") for m in movies],
        Pagination.build(page, limit, total).model_dump(),
    )
    if key is not None:
        await set_cached(key, response)
    return response


@router.get("/genres", response_model=ApiResponse[list[str]])
async def list_genres(service: MovieService = Depends(get_movie_service)):
    return ok("Genres retrieved successfully", await service.get_genres())


@router.get("/languages", response_model=ApiResponse[list[str]])
async def list_languages(service: MovieService = Depends(get_movie_service)):
    return ok("Languages retrieved successfully", await service.get_languages())


@router.get("/{movie_id}", response_model=ApiResponse[MovieResponse])
async def get_movie(
    movie_id: int,
    user: Optional[User] = Depends(get_optional_user),
    service: MovieService = Depends(get_movie_service),
):
    movie = await service.get_movie(movie_id, include_inactive=user is not None and user.is_admin)
    return ok("Movie retrieved successfully", MovieResponse.model_validate(movie))


@router.post("/", response_model=ApiResponse[MovieResponse], status_code=status.HTTP_201_CREATED)
async def create_movie(
    movie_data: MovieCreate,
    admin: User = Depends(require_admin),
    service: MovieService = Depends(get_movie_service),
):
    movie = await service.create_movie(movie_data, admin.id)
    return ok("Movie created successfully", MovieResponse.model_validate(movie))


@router.put("/{movie_id}", response_model=ApiResponse[MovieResponse])
async def update_movie(
    movie_id: int,
    update: MovieUpdate,
    admin: User = Depends(require_admin),
    service: MovieService = Depends(get_movie_service),
):
    movie = await service.update_movie(movie_id, update)
    return ok("Movie updated successfully", MovieResponse.model_validate(movie))


@router.delete("/{movie_id}", response_model=ApiResponse[None])
async def delete_movie(
    movie_id: int,
    admin: User = Depends(require_admin),
    service: MovieService = Depends(get_movie_service),
):
    await service.delete_movie(movie_id)
    return ok("Movie deleted successfully")
