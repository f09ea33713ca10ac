"""
Movie catalog service. Listing pages are cached in Redis; every write
invalidates them.
"""

from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.exceptions import NotFoundError, ConflictError
from cinebook.core.logging import get_logger
from cinebook.models.movie import Movie
from cinebook.repositories.movie_repository import MovieRepository, MovieFilters
from cinebook.schemas.movie import MovieCreate, MovieUpdate
from cinebook.services import cache_service

logger = get_logger(__name__)


class MovieService:
    def __init__(self, db: AsyncSession, movies: MovieRepository):
        self.db = db
        self.movies = movies

    async def create_movie(self, movie_data: MovieCreate, created_by: int) -> Movie:
        if await self.movies.name_taken(movie_data.name):
            raise ConflictError("Movie with this name already exists")

        movie = Movie(**movie_data.model_dump(), created_by=created_by)
        await self.movies.add(movie)
        await self.db.commit()
        await cache_service.invalidate_prefix()

        logger.info("movie_created", movie_id=movie.id, name=movie.name)
        return movie

    async def get_movie(self, movie_id: int, include_inactive: bool = False) -> Movie:
        movie = await self.movies.get(movie_id)
        if movie is None or (not movie.is_active and not include_inactive):
            raise NotFoundError("Movie not found")
        return movie

    async def update_movie(self, movie_id: int, update: MovieUpdate) -> Movie:
        movie = await self.get_movie(movie_id, include_inactive=True)
        changes = update.model_dump(exclude_unset=True)

        if "name" in changes and await self.movies.name_taken(changes["name"], exclude_id=movie_id):
            raise ConflictError("Movie with this name already exists")

        for field, value in changes.items():
            setattr(movie, field, value)
        await self.db.commit()
        await self.db.refresh(movie)
        await cache_service.invalidate_prefix()

        logger.info("movie_updated", movie_id=movie_id, fields=sorted(changes))
        return movie

    async def delete_movie(self, movie_id: int) -> None:
        """Soft delete: the movie stays referenced by showtimes and bookings."""
        movie = await self.get_movie(movie_id, include_inactive=True)
        movie.is_active = False
        await self.db.commit()
        await cache_service.invalidate_prefix()
        logger.info("movie_deactivated", movie_id=movie_id)

    async def list_movies(
        self, filters: MovieFilters, page: int = 1, limit: int = 10
    ) -> tuple[list[Movie], int]:
        movies = await self.movies.find(filters)
        start = (page - 1) * limit
        return movies[start:start + limit], len(movies)

    async def get_genres(self) -> list[str]:
        movies = await self.movies.all_active()
        return sorted({genre for movie in movies for genre in movie.genres or []})

    async def get_languages(self) -> list[str]:
        movies = await self.movies.all_active()
        return sorted({lang for movie in movies for lang in movie.languages or []})
