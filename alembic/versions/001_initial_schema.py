"""Initial schema: users, movies, theaters, screens, showtimes, seats, bookings.

Revision ID: 001
Revises: None
Create Date: 2026-10-17
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

user_role = sa.Enum("user", "admin", name="user_role")
booking_status = sa.Enum("confirmed", "cancelled", "pending", name="booking_status")
payment_method = sa.Enum(
    "credit_card", "debit_card", "upi", "net_banking", "wallet", "cash", name="payment_method"
)


def _timestamps() -> list:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("first_name", sa.String(50), nullable=False),
        sa.Column("last_name", sa.String(50), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", user_role, nullable=False, server_default="user"),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        *_timestamps(),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "movies",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("description", sa.String(2000), nullable=True),
        sa.Column("genres", sa.JSON(), nullable=False),
        sa.Column("languages", sa.JSON(), nullable=False),
        sa.Column("duration", sa.Integer(), nullable=False),
        sa.Column("cast", sa.JSON(), nullable=False),
        sa.Column("director", sa.String(100), nullable=False),
        sa.Column("release_date", sa.Date(), nullable=False),
        sa.Column("rating", sa.Float(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("duration BETWEEN 1 AND 600", name="check_movie_duration"),
        sa.CheckConstraint("rating IS NULL OR (rating >= 0 AND rating <= 10)", name="check_movie_rating"),
    )
    op.create_index("ix_movies_id", "movies", ["id"])
    op.create_index("ix_movies_name", "movies", ["name"])
    op.create_index("ix_movies_active_release", "movies", ["is_active", "release_date"])

    op.create_table(
        "theaters",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(200), nullable=False),
        sa.Column("address", sa.String(500), nullable=False),
        sa.Column("city", sa.String(100), nullable=False),
        sa.Column("state", sa.String(100), nullable=False),
        sa.Column("pincode", sa.String(6), nullable=False),
        sa.Column("phone", sa.String(20), nullable=True),
        sa.Column("email", sa.String(255), nullable=True),
        sa.Column("amenities", sa.JSON(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_theaters_id", "theaters", ["id"])
    op.create_index("ix_theaters_name", "theaters", ["name"])
    op.create_index("ix_theaters_city_active", "theaters", ["city", "is_active"])

    op.create_table(
        "screens",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "theater_id", sa.Integer(), sa.ForeignKey("theaters.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("screen_number", sa.Integer(), nullable=False),
        sa.Column("total_seats", sa.Integer(), nullable=False),
        sa.Column("rows", sa.Integer(), nullable=True),
        sa.Column("seats_per_row", sa.Integer(), nullable=True),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.UniqueConstraint("theater_id", "screen_number", name="uq_theater_screen_number"),
        sa.CheckConstraint("screen_number >= 1", name="check_screen_number_positive"),
        sa.CheckConstraint("total_seats BETWEEN 1 AND 500", name="check_screen_total_seats"),
    )
    op.create_index("ix_screens_theater_id", "screens", ["theater_id"])

    op.create_table(
        "showtimes",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("movie_id", sa.Integer(), sa.ForeignKey("movies.id"), nullable=False),
        sa.Column("theater_id", sa.Integer(), sa.ForeignKey("theaters.id"), nullable=False),
        sa.Column("screen_number", sa.Integer(), nullable=False),
        sa.Column("show_date", sa.Date(), nullable=False),
        sa.Column("show_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("total_seats", sa.Integer(), nullable=False),
        sa.Column("available_seats", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.text("true")),
        sa.Column("created_by", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False, server_default=sa.text("1")),
        *_timestamps(),
        sa.CheckConstraint("available_seats >= 0", name="check_showtime_available_non_negative"),
        sa.CheckConstraint("total_seats > 0", name="check_showtime_total_positive"),
        sa.CheckConstraint("available_seats <= total_seats", name="check_showtime_available_lte_total"),
        sa.CheckConstraint("price >= 0", name="check_showtime_price_non_negative"),
    )
    op.create_index(
        "uq_showtime_active_slot",
        "showtimes",
        ["theater_id", "screen_number", "show_time"],
        unique=True,
        postgresql_where=sa.text("is_active"),
    )
    op.create_index("ix_showtimes_id", "showtimes", ["id"])
    op.create_index("ix_showtimes_movie_id", "showtimes", ["movie_id"])
    op.create_index("ix_showtimes_theater_id", "showtimes", ["theater_id"])
    # Listing pages filter active shows by date, then order by time
    op.create_index("ix_showtimes_active_date", "showtimes", ["is_active", "show_date", "show_time"])
    op.create_index("ix_showtimes_theater_date", "showtimes", ["theater_id", "show_date"])

    # One row per booked seat. The unique constraint is what makes a seat
    # impossible to sell twice, whatever the application does.
    op.create_table(
        "showtime_seats",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column(
            "showtime_id", sa.Integer(), sa.ForeignKey("showtimes.id", ondelete="CASCADE"), nullable=False
        ),
        sa.Column("seat_number", sa.Integer(), nullable=False),
        sa.UniqueConstraint("showtime_id", "seat_number", name="uq_showtime_seat"),
        sa.CheckConstraint("seat_number >= 1", name="check_seat_number_positive"),
    )
    op.create_index("ix_showtime_seats_showtime_id", "showtime_seats", ["showtime_id"])

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column("booking_reference", sa.String(32), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("movie_id", sa.Integer(), sa.ForeignKey("movies.id"), nullable=False),
        sa.Column("theater_id", sa.Integer(), sa.ForeignKey("theaters.id"), nullable=False),
        sa.Column("showtime_id", sa.Integer(), sa.ForeignKey("showtimes.id"), nullable=False),
        sa.Column("screen_number", sa.Integer(), nullable=False),
        sa.Column("show_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("number_of_tickets", sa.Integer(), nullable=False),
        sa.Column("seat_numbers", sa.JSON(), nullable=False),
        sa.Column("total_amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("booking_date", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", booking_status, nullable=False, server_default="confirmed"),
        sa.Column("payment_id", sa.String(100), nullable=True),
        sa.Column("payment_method", payment_method, nullable=True),
        sa.Column("transaction_id", sa.String(100), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("number_of_tickets BETWEEN 1 AND 10", name="check_booking_ticket_count"),
        sa.CheckConstraint("total_amount >= 0", name="check_booking_amount_non_negative"),
    )
    op.create_index("ix_bookings_id", "bookings", ["id"])
    op.create_index("ix_bookings_booking_reference", "bookings", ["booking_reference"], unique=True)
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_movie_id", "bookings", ["movie_id"])
    op.create_index("ix_bookings_theater_id", "bookings", ["theater_id"])
    op.create_index("ix_bookings_showtime_id", "bookings", ["showtime_id"])
    op.create_index("ix_bookings_user_date", "bookings", ["user_id", "booking_date"])
    op.create_index("ix_bookings_showtime_status", "bookings", ["showtime_id", "status"])
    op.create_index("ix_bookings_movie_status", "bookings", ["movie_id", "status"])


def downgrade() -> None:
    op.drop_table("bookings")
    op.drop_table("showtime_seats")
    op.drop_table("showtimes")
    op.drop_table("screens")
    op.drop_table("theaters")
    op.drop_table("movies")
    op.drop_table("users")
    payment_method.drop(op.get_bind(), checkfirst=True)
    booking_status.drop(op.get_bind(), checkfirst=True)
    user_role.drop(op.get_bind(), checkfirst=True)
