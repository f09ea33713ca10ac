"""
Theaters and their screens.

A screen's `total_seats` is copied onto every showtime created for it; later
edits to the screen do not touch existing showtimes.
"""

from sqlalchemy import (
    Column, Integer, String, Boolean, JSON, ForeignKey, UniqueConstraint, CheckConstraint, Index,
)
from sqlalchemy.orm import relationship

from cinebook.db.base import Base, TimestampMixin

AMENITIES = (
    "Parking", "Food Court", "Wheelchair Accessible", "Air Conditioning",
    "Dolby Atmos", "IMAX", "3D", "Recliner Seats", "Online Booking", "WiFi",
)


class Theater(Base, TimestampMixin):
    __tablename__ = "theaters"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False, index=True)
    address = Column(String(500), nullable=False)
    city = Column(String(100), nullable=False)
    state = Column(String(100), nullable=False)
    pincode = Column(String(6), nullable=False)
    phone = Column(String(20), nullable=True)
    email = Column(String(255), nullable=True)
    amenities = Column(JSON, nullable=False, default=list)
    is_active = Column(Boolean, default=True, nullable=False)
    created_by = Column(Integer, ForeignKey("users.id"), nullable=False)

    screens = relationship(
        "Screen",
        back_populates="theater",
        lazy="selectin",
        cascade="all, delete-orphan",
        order_by="Screen.screen_number",
    )

    __table_args__ = (
        Index("ix_theaters_city_active", "city", "is_active"),
    )

    def find_screen(self, screen_number: int):
        for screen in self.screens:
            if screen.screen_number == screen_number:
                return screen
        return None

    def __repr__(self) -> str:
        return f"<Theater(id={self.id}, name={self.name}, city={self.city})>"


class Screen(Base):
    __tablename__ = "screens"

    id = Column(Integer, primary_key=True)
    theater_id = Column(Integer, ForeignKey("theaters.id", ondelete="CASCADE"), nullable=False, index=True)
    screen_number = Column(Integer, nullable=False)
    total_seats = Column(Integer, nullable=False)
    rows = Column(Integer, nullable=True)
    seats_per_row = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    theater = relationship("Theater", back_populates="screens")

    __table_args__ = (
        UniqueConstraint("theater_id", "screen_number", name="uq_theater_screen_number"),
        CheckConstraint("screen_number >= 1", name="check_screen_number_positive"),
        CheckConstraint("total_seats BETWEEN 1 AND 500", name="check_screen_total_seats"),
    )

    def __repr__(self) -> str:
        return f"<Screen(theater={self.theater_id}, number={self.screen_number}, seats={self.total_seats})>"
