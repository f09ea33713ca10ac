"""
Repositories wrap one AsyncSession each and never commit; the service that
owns the unit of work decides when to commit or roll back.
"""

from cinebook.repositories.user_repository import UserRepository
from cinebook.repositories.movie_repository import MovieRepository, MovieFilters
from cinebook.repositories.theater_repository import TheaterRepository, TheaterFilters
from cinebook.repositories.showtime_repository import ShowtimeRepository, ShowtimeFilters
from cinebook.repositories.booking_repository import BookingRepository, BookingFilters

__all__ = [
    "UserRepository",
    "MovieRepository", "MovieFilters",
    "TheaterRepository", "TheaterFilters",
    "ShowtimeRepository", "ShowtimeFilters",
    "BookingRepository", "BookingFilters",
]
