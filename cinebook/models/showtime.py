"""
Showtime with its seat inventory.

Key design decisions:
- `available_seats` is denormalized next to the booked-seat rows so the
  reservation guard is a single conditional UPDATE on one row.
- Booked seats live in `showtime_seats`, one row per seat. The unique
  constraint on (showtime_id, seat_number) makes double-booking impossible
  even if two transactions slip past the application checks.
- `version` is bumped on every inventory mutation.
- Invariant: available_seats + count(showtime_seats) == total_seats.
"""

from sqlalchemy import (
    Column, Integer, Boolean, Date, Numeric, ForeignKey, Index, UniqueConstraint, CheckConstraint, text,
)
from sqlalchemy.orm import relationship

from cinebook.db.base import Base, TimestampMixin, UTCDateTime


class Showtime(Base, TimestampMixin):
    __tablename__ = "showtimes"

    id = Column(Integer, primary_key=True, index=True)
    movie_id = Column(Integer, ForeignKey("movies.id"), nullable=False, index=True)
    theater_id = Column(Integer, ForeignKey("theaters.id"), nullable=False, index=True)
    screen_number = Column(Integer, nullable=False)
    show_date = Column(Date, nullable=False)
    show_time = Column(UTCDateTime(), nullable=False)
    price = Column(Numeric(10, 2), nullable=False)
    total_seats = Column(Integer, nullable=False)
    available_seats = Column(Integer, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    version = Column(Integer, nullable=False, default=1)

    movie = relationship("Movie", lazy="joined")
    theater = relationship("Theater", lazy="joined")
    seats = relationship(
        "ShowtimeSeat",
        back_populates="showtime",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="ShowtimeSeat.seat_number",
    )

    __table_args__ = (
        CheckConstraint("available_seats >= 0", name="check_showtime_available_non_negative"),
        CheckConstraint("total_seats > 0", name="check_showtime_total_positive"),
        CheckConstraint("available_seats <= total_seats", name="check_showtime_available_lte_total"),
        CheckConstraint("price >= 0", name="check_showtime_price_non_negative"),
        # One active show per screen slot; soft-deleted rows free the slot
        Index(
            "uq_showtime_active_slot",
            "theater_id",
            "screen_number",
            "show_time",
            unique=True,
            postgresql_where=text("is_active"),
            sqlite_where=text("is_active = 1"),
        ),
        Index("ix_showtimes_active_date", "is_active", "show_date", "show_time"),
        Index("ix_showtimes_theater_date", "theater_id", "show_date"),
    )

    @property
    def booked_seats(self) -> list[int]:
        return [seat.seat_number for seat in self.seats]

    def __repr__(self) -> str:
        return (
            f"<Showtime(id={self.id}, screen={self.screen_number}, "
            f"available={self.available_seats}/{self.total_seats})>"
        )


class ShowtimeSeat(Base):
    __tablename__ = "showtime_seats"

    id = Column(Integer, primary_key=True)
    showtime_id = Column(
        Integer, ForeignKey("showtimes.id", ondelete="CASCADE"), nullable=False, index=True
    )
    seat_number = Column(Integer, nullable=False)

    showtime = relationship("Showtime", back_populates="seats")

    __table_args__ = (
        UniqueConstraint("showtime_id", "seat_number", name="uq_showtime_seat"),
        CheckConstraint("seat_number >= 1", name="check_seat_number_positive"),
    )

    def __repr__(self) -> str:
        return f"<ShowtimeSeat(showtime={self.showtime_id}, seat={self.seat_number})>"
