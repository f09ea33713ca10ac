"""
Movie catalog entry. Soft-deleted through `is_active`.
"""

from sqlalchemy import Column, Integer, String, Boolean, Date, Float, JSON, ForeignKey, Index, CheckConstraint

from cinebook.db.base import Base, TimestampMixin

GENRES = (
    "Action", "Adventure", "Animation", "Biography", "Comedy", "Crime",
    "Documentary", "Drama", "Family", "Fantasy", "History", "Horror",
    "Music", "Mystery", "Romance", "Sci-Fi", "Sport", "Thriller", "War", "Western",
)


class Movie(Base, TimestampMixin):
    __tablename__ = "movies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    description = Column(String(2000), nullable=True)
    genres = Column(JSON, nullable=False, default=list)
    languages = Column(JSON, nullable=False, default=list)
    duration = Column(Integer, nullable=False)  # minutes
    cast = Column(JSON, nullable=False, default=list)
    director = Column(String(100), nullable=False)
    release_date = Column(Date, nullable=False)
    rating = Column(Float, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    __table_args__ = (
        CheckConstraint("duration BETWEEN 1 AND 600", name="check_movie_duration"),
        CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 10)", name="check_movie_rating"),
        Index("ix_movies_active_release", "is_active", "release_date"),
    )

    def __repr__(self) -> str:
        return f"<Movie(id={self.id}, name={self.name})>"
