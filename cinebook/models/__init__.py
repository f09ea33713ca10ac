from cinebook.models.user import User, UserRole
from cinebook.models.movie import Movie
from cinebook.models.theater import Theater, Screen
from cinebook.models.showtime import Showtime, ShowtimeSeat
from cinebook.models.booking import Booking, BookingStatus, PaymentMethod

__all__ = [
    "User", "UserRole",
    "Movie",
    "Theater", "Screen",
    "Showtime", "ShowtimeSeat",
    "Booking", "BookingStatus", "PaymentMethod",
]
