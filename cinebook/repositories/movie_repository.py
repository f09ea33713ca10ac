from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.models.movie import Movie


@dataclass
class MovieFilters:
    name: Optional[str] = None
    genre: Optional[str] = None
    language: Optional[str] = None
    min_rating: Optional[float] = None
    include_inactive: bool = False


class MovieRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, movie_id: int) -> Optional[Movie]:
        return await self.db.get(Movie, movie_id)

    async def add(self, movie: Movie) -> Movie:
        self.db.add(movie)
        await self.db.flush()
        await self.db.refresh(movie)
        return movie

    async def name_taken(self, name: str, exclude_id: Optional[int] = None) -> bool:
        query = select(Movie.id).where(
            func.lower(Movie.name) == name.lower(), Movie.is_active.is_(True)
        )
        if exclude_id is not None:
            query = query.where(Movie.id != exclude_id)
        return (await self.db.execute(query.limit(1))).scalar_one_or_none() is not None

    def _filtered(self, query, filters: MovieFilters):
        if not filters.include_inactive:
            query = query.where(Movie.is_active.is_(True))
        if filters.name:
            query = query.where(Movie.name.ilike(f"%{filters.name}%"))
        if filters.min_rating is not None:
            query = query.where(Movie.rating >= filters.min_rating)
        return query

    async def find(self, filters: MovieFilters) -> list[Movie]:
        """
        Genre and language live in JSON lists, so those two filters are
        applied after the SQL query to stay portable across dialects.
        """
        query = self._filtered(select(Movie), filters).order_by(
            Movie.release_date.desc(), Movie.id.desc()
        )
        movies = list((await self.db.execute(query)).scalars().all())
        if filters.genre:
            movies = [m for m in movies if filters.genre in (m.genres or [])]
        if filters.language:
            wanted = filters.language.lower()
            movies = [m for m in movies if wanted in (lang.lower() for lang in m.languages or [])]
        return movies

    async def all_active(self) -> list[Movie]:
        result = await self.db.execute(select(Movie).where(Movie.is_active.is_(True)))
        return list(result.scalars().all())

    async def count_active(self) -> int:
        result = await self.db.execute(
            select(func.count(Movie.id)).where(Movie.is_active.is_(True))
        )
        return result.scalar_one()
