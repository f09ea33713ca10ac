"""
Typed application errors.

Every business-rule violation raised by the service layer is an AppError
carrying the HTTP status the API should answer with. The handlers registered
in `cinebook.main` turn them into the standard response envelope, so storage
errors never reach the caller in their raw shape.
"""

from typing import Iterable, Optional


class AppError(Exception):
    status_code: int = 400
    default_message: str = "Request could not be processed"

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        self.message = message or self.default_message
        if status_code is not None:
            self.status_code = status_code
        super().__init__(self.message)


# Error families

class NotFoundError(AppError):
    status_code = 404
    default_message = "Resource not found"


class ValidationFailure(AppError):
    status_code = 400
    default_message = "Validation failed"


class ConflictError(AppError):
    status_code = 409
    default_message = "Resource conflict"


class AuthenticationError(AppError):
    status_code = 401
    default_message = "Could not validate credentials"


class AuthorizationError(AppError):
    status_code = 403
    default_message = "Access denied. Insufficient permissions."


class TemporalError(AppError):
    status_code = 400
    default_message = "Operation is not allowed at this time"


class ConfigurationError(AppError):
    """Fatal: missing secrets or storage left in an inconsistent state."""

    status_code = 500
    default_message = "Server misconfiguration"


# Showtime inventory

class ShowtimeNotFoundError(NotFoundError):
    default_message = "Show time not found"


class ShowtimeNotBookableError(TemporalError):
    default_message = "Show time is not available for booking"


class SeatOutOfRangeError(ValidationFailure):
    def __init__(self, seats: Iterable[int], total_seats: int):
        self.seats = sorted(seats)
        super().__init__(
            f"Invalid seat numbers: {_join(self.seats)} (valid range is 1-{total_seats})"
        )


class SeatAlreadyBookedError(ConflictError):
    def __init__(self, seats: Iterable[int]):
        self.seats = sorted(seats)
        super().__init__(f"Seats {_join(self.seats)} are already booked")


class InsufficientAvailabilityError(ConflictError):
    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(
            f"Not enough seats available. Requested: {requested}, Available: {available}"
        )


class InventoryInconsistencyError(ConfigurationError):
    default_message = "Seat inventory could not be restored; operator attention required"


# Booking lifecycle

class BookingNotFoundError(NotFoundError):
    default_message = "Booking not found"


class SeatCountMismatchError(ValidationFailure):
    default_message = "Number of seat numbers must match number of tickets"


class TicketLimitExceededError(ValidationFailure):
    def __init__(self, limit: int):
        super().__init__(f"Number of tickets must be between 1 and {limit}")


class DuplicateSeatError(ValidationFailure):
    default_message = "Duplicate seat numbers are not allowed"


class NotOwnerError(AuthorizationError):
    default_message = "You can only cancel your own bookings"


class AlreadyCancelledError(ValidationFailure):
    default_message = "Booking is already cancelled"


class CancellationWindowPassedError(TemporalError):
    def __init__(self, hours: int):
        super().__init__(f"Bookings can only be cancelled at least {hours} hours before show time")


class DuplicateReferenceError(ConflictError):
    default_message = "Could not allocate a unique booking reference"


def _join(seats) -> str:
    return ", ".join(str(s) for s in seats)
