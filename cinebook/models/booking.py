"""
Booking: one user's reservation of specific seats for a showtime.

Key design decisions:
- `screen_number` and `show_time` are copied from the showtime at creation
  and never re-read, so later showtime edits do not rewrite history.
- Status only ever moves confirmed -> cancelled. `pending` is part of the
  stored domain but nothing produces it.
- `booking_reference` is the human-facing identifier, unique across all
  bookings.
"""

import enum

from sqlalchemy import (
    Column, Integer, String, Numeric, JSON, Enum, ForeignKey, Index, CheckConstraint,
)
from sqlalchemy.orm import relationship

from cinebook.db.base import Base, TimestampMixin, UTCDateTime, utcnow


class BookingStatus(str, enum.Enum):
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"
    PENDING = "pending"


class PaymentMethod(str, enum.Enum):
    CREDIT_CARD = "credit_card"
    DEBIT_CARD = "debit_card"
    UPI = "upi"
    NET_BANKING = "net_banking"
    WALLET = "wallet"
    CASH = "cash"


def _values(enum_cls):
    return [member.value for member in enum_cls]


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    booking_reference = Column(String(32), nullable=False, unique=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id"), nullable=False, index=True)
    theater_id = Column(Integer, ForeignKey("theaters.id"), nullable=False, index=True)
    showtime_id = Column(Integer, ForeignKey("showtimes.id"), nullable=False, index=True)
    screen_number = Column(Integer, nullable=False)
    show_time = Column(UTCDateTime(), nullable=False)
    number_of_tickets = Column(Integer, nullable=False)
    seat_numbers = Column(JSON, nullable=False)
    total_amount = Column(Numeric(10, 2), nullable=False)
    booking_date = Column(UTCDateTime(), nullable=False, default=utcnow)
    status = Column(
        Enum(BookingStatus, name="booking_status", values_callable=_values),
        nullable=False,
        default=BookingStatus.CONFIRMED,
    )

    payment_id = Column(String(100), nullable=True)
    payment_method = Column(
        Enum(PaymentMethod, name="payment_method", values_callable=_values), nullable=True
    )
    transaction_id = Column(String(100), nullable=True)

    user = relationship("User", lazy="joined")
    movie = relationship("Movie", lazy="joined")
    theater = relationship("Theater", lazy="joined")

    __table_args__ = (
        CheckConstraint(
            "number_of_tickets BETWEEN 1 AND 10", name="check_booking_ticket_count"
        ),
        CheckConstraint("total_amount >= 0", name="check_booking_amount_non_negative"),
        Index("ix_bookings_user_date", "user_id", "booking_date"),
        Index("ix_bookings_showtime_status", "showtime_id", "status"),
        Index("ix_bookings_movie_status", "movie_id", "status"),
    )

    @property
    def payment_details(self):
        if not (self.payment_id or self.payment_method or self.transaction_id):
            return None
        return {
            "payment_id": self.payment_id,
            "payment_method": self.payment_method,
            "transaction_id": self.transaction_id,
        }

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, ref={self.booking_reference}, status={self.status})>"
