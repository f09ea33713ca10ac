from dataclasses import dataclass
from typing import Optional

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.models.theater import Theater


@dataclass
class TheaterFilters:
    name: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    pincode: Optional[str] = None
    amenity: Optional[str] = None
    include_inactive: bool = False


class TheaterRepository:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def get(self, theater_id: int) -> Optional[Theater]:
        result = await self.db.execute(
            select(Theater)
            .where(Theater.id == theater_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def add(self, theater: Theater) -> Theater:
        self.db.add(theater)
        await self.db.flush()
        await self.db.refresh(theater)
        return theater

    async def location_taken(
        self, name: str, city: str, address: str, exclude_id: Optional[int] = None
    ) -> bool:
        """Case-insensitive match on name, city and address among active theaters."""
        query = select(Theater.id).where(
            func.lower(Theater.name) == name.lower(),
            func.lower(Theater.city) == city.lower(),
            func.lower(Theater.address) == address.lower(),
            Theater.is_active.is_(True),
        )
        if exclude_id is not None:
            query = query.where(Theater.id != exclude_id)
        return (await self.db.execute(query.limit(1))).scalar_one_or_none() is not None

    def _filtered(self, query, filters: TheaterFilters):
        if not filters.include_inactive:
            query = query.where(Theater.is_active.is_(True))
        if filters.name:
            query = query.where(Theater.name.ilike(f"%{filters.name}%"))
        if filters.city:
            query = query.where(Theater.city.ilike(f"%{filters.city}%"))
        if filters.state:
            query = query.where(Theater.state.ilike(f"%{filters.state}%"))
        if filters.pincode:
            query = query.where(Theater.pincode == filters.pincode)
        return query

    async def find(self, filters: TheaterFilters) -> list[Theater]:
        query = self._filtered(select(Theater), filters).order_by(Theater.name, Theater.id)
        theaters = list((await self.db.execute(query)).scalars().all())
        if filters.amenity:
            theaters = [t for t in theaters if filters.amenity in (t.amenities or [])]
        return theaters

    async def get_many(self, theater_ids: list[int]) -> list[Theater]:
        if not theater_ids:
            return []
        result = await self.db.execute(
            select(Theater)
            .where(Theater.id.in_(theater_ids), Theater.is_active.is_(True))
            .order_by(Theater.name)
        )
        return list(result.scalars().all())

    async def count_active(self) -> int:
        result = await self.db.execute(
            select(func.count(Theater.id)).where(Theater.is_active.is_(True))
        )
        return result.scalar_one()
