from cinebook.schemas.common import ApiResponse, ErrorResponse, Pagination
from cinebook.schemas.user import UserCreate, UserResponse, UserLogin, UserUpdate, PasswordChange, Token, AuthResponse
from cinebook.schemas.movie import MovieCreate, MovieUpdate, MovieResponse, MovieSummary
from cinebook.schemas.theater import TheaterCreate, TheaterUpdate, TheaterResponse, TheaterSummary
from cinebook.schemas.showtime import (
    ShowtimeCreate, ShowtimeUpdate, ShowtimeResponse, AssignMovieRequest, TheaterShowtimes,
)
from cinebook.schemas.booking import BookingCreate, BookingResponse, PaymentDetails

__all__ = [
    "ApiResponse", "ErrorResponse", "Pagination",
    "UserCreate", "UserResponse", "UserLogin", "UserUpdate", "PasswordChange", "Token", "AuthResponse",
    "MovieCreate", "MovieUpdate", "MovieResponse", "MovieSummary",
    "TheaterCreate", "TheaterUpdate", "TheaterResponse", "TheaterSummary",
    "ShowtimeCreate", "ShowtimeUpdate", "ShowtimeResponse", "AssignMovieRequest", "TheaterShowtimes",
    "BookingCreate", "BookingResponse", "PaymentDetails",
]
