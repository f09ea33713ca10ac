"""
FastAPI dependencies: the authenticated user and service factories.

Each factory builds its repositories on the request's session, so one
request shares one unit of work across every service it touches.
"""

from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from cinebook.core.exceptions import AuthenticationError, AuthorizationError
from cinebook.core.security import decode_access_token
from cinebook.db.session import get_db
from cinebook.models.user import User
from cinebook.repositories import (
    BookingRepository,
    MovieRepository,
    ShowtimeRepository,
    TheaterRepository,
    UserRepository,
)
from cinebook.services.auth_service import AuthService
from cinebook.services.booking_service import BookingService
from cinebook.services.inventory_service import SeatInventory
from cinebook.services.movie_service import MovieService
from cinebook.services.report_service import ReportService
from cinebook.services.theater_service import TheaterService

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user. Raises 401 / 403."""
    if credentials is None:
        raise AuthenticationError("Access denied. No token provided.")

    payload = decode_access_token(credentials.credentials)
    try:
        user_id = int(payload.get("sub"))
    except (TypeError, ValueError):
        raise AuthenticationError("Invalid token")

    user = await UserRepository(db).get(user_id)
    if user is None:
        raise AuthenticationError("Invalid token. User not found.")
    if not user.is_active:
        raise AuthorizationError("Account is deactivated")
    return user


async def get_optional_user(
    credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Like get_current_user, but anonymous callers get None instead of 401."""
    if credentials is None:
        return None
    return await get_current_user(credentials, db)


async def require_admin(user: User = Depends(get_current_user)) -> User:
    if not user.is_admin:
        raise AuthorizationError("Access denied. Admin privileges required.")
    return user


def get_auth_service(db: AsyncSession = Depends(get_db)) -> AuthService:
    return AuthService(db, UserRepository(db))


def get_movie_service(db: AsyncSession = Depends(get_db)) -> MovieService:
    return MovieService(db, MovieRepository(db))


def get_theater_service(db: AsyncSession = Depends(get_db)) -> TheaterService:
    return TheaterService(db, TheaterRepository(db), ShowtimeRepository(db), MovieRepository(db))


def get_booking_service(db: AsyncSession = Depends(get_db)) -> BookingService:
    showtimes = ShowtimeRepository(db)
    return BookingService(db, BookingRepository(db), showtimes, SeatInventory(showtimes))


def get_report_service(db: AsyncSession = Depends(get_db)) -> ReportService:
    return ReportService(
        BookingRepository(db),
        UserRepository(db),
        MovieRepository(db),
        TheaterRepository(db),
        ShowtimeRepository(db),
    )
