"""
Tests for booking endpoints: seat reservation, cancellation and reads.
"""

import asyncio
from datetime import timedelta

import pytest
from httpx import AsyncClient

from tests.conftest import make_showtime, requires_postgres

BOOKINGS = "/api/v1/bookings/"


def _showtime_url(showtime_id: int) -> str:
    return f"/api/v1/theaters/showtimes/{showtime_id}"


async def _book(client: AsyncClient, headers: dict, showtime_id: int, seats: list[int], tickets=None):
    return await client.post(
        BOOKINGS,
        json={
            "showtime_id": showtime_id,
            "number_of_tickets": len(seats) if tickets is None else tickets,
            "seat_numbers": seats,
        },
        headers=headers,
    )


@pytest.mark.asyncio
async def test_book_and_cancel_restores_inventory(client: AsyncClient, auth_headers, showtime_id):
    """Booking three seats charges 3 x price; cancelling gives the seats back."""
    response = await _book(client, auth_headers, showtime_id, [1, 2, 3])
    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    booking = body["data"]
    assert booking["status"] == "confirmed"
    assert booking["total_amount"] == 600.0
    assert booking["seat_numbers"] == [1, 2, 3]
    assert booking["booking_reference"].startswith("BK")
    assert booking["booking_reference"] == booking["booking_reference"].upper()
    assert booking["movie"]["name"] == "The Long Night"
    assert booking["theater"]["name"] == "Grand Cinema"

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["available_seats"] == 47
    assert showtime["booked_seats"] == [1, 2, 3]

    cancel = await client.put(f"{BOOKINGS}{booking['id']}/cancel", headers=auth_headers)
    assert cancel.status_code == 200
    assert cancel.json()["data"]["status"] == "cancelled"

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["available_seats"] == 50
    assert showtime["booked_seats"] == []


@pytest.mark.asyncio
async def test_book_already_booked_seat(client: AsyncClient, auth_headers, other_headers, showtime_id):
    """A request overlapping booked seats fails with 409 and reserves nothing."""
    first = await _book(client, auth_headers, showtime_id, [1, 2, 3])
    assert first.status_code == 201

    second = await _book(client, other_headers, showtime_id, [3, 4])
    assert second.status_code == 409
    body = second.json()
    assert body["success"] is False
    assert body["error"] == "SeatAlreadyBookedError"
    assert "3" in body["message"]

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["available_seats"] == 47
    assert showtime["booked_seats"] == [1, 2, 3]


@pytest.mark.asyncio
async def test_book_seat_count_mismatch(client: AsyncClient, auth_headers, showtime_id):
    response = await _book(client, auth_headers, showtime_id, [1, 2], tickets=3)
    assert response.status_code == 400
    assert response.json()["error"] == "SeatCountMismatchError"


@pytest.mark.asyncio
async def test_book_duplicate_seats_in_request(client: AsyncClient, auth_headers, showtime_id):
    response = await _book(client, auth_headers, showtime_id, [5, 5])
    assert response.status_code == 400
    assert response.json()["error"] == "DuplicateSeatError"


@pytest.mark.asyncio
async def test_book_seat_out_of_range(client: AsyncClient, auth_headers, showtime_id):
    response = await _book(client, auth_headers, showtime_id, [50, 51])
    assert response.status_code == 400
    assert response.json()["error"] == "SeatOutOfRangeError"

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["available_seats"] == 50


@pytest.mark.asyncio
async def test_book_too_many_tickets(client: AsyncClient, auth_headers, showtime_id):
    response = await _book(client, auth_headers, showtime_id, list(range(1, 12)))
    assert response.status_code == 400
    assert response.json()["error"] == "TicketLimitExceededError"
    assert "10" in response.json()["message"]

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["available_seats"] == 50


@pytest.mark.asyncio
async def test_book_unknown_showtime(client: AsyncClient, auth_headers, test_showtime):
    response = await _book(client, auth_headers, 9999, [1])
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_book_past_showtime(client: AsyncClient, db_session, auth_headers, test_movie, test_theater, admin_user):
    past = await make_showtime(
        db_session, test_movie, test_theater, admin_user, starts_in=timedelta(hours=-1)
    )
    response = await _book(client, auth_headers, past.id, [1])
    assert response.status_code == 400
    assert response.json()["error"] == "ShowtimeNotBookableError"


@pytest.mark.asyncio
async def test_book_deleted_showtime(client: AsyncClient, auth_headers, admin_headers, showtime_id):
    deleted = await client.delete(_showtime_url(showtime_id), headers=admin_headers)
    assert deleted.status_code == 200

    response = await _book(client, auth_headers, showtime_id, [1])
    assert response.status_code == 400
    assert response.json()["error"] == "ShowtimeNotBookableError"


@pytest.mark.asyncio
async def test_book_more_than_available(client: AsyncClient, db_session, auth_headers, test_movie, test_theater, admin_user):
    tiny = await make_showtime(db_session, test_movie, test_theater, admin_user, total_seats=2)
    response = await _book(client, auth_headers, tiny.id, [1, 2, 3])
    # Seat 3 is outside a two-seat screen
    assert response.status_code == 400

    assert (await _book(client, auth_headers, tiny.id, [1, 2])).status_code == 201
    response = await _book(client, auth_headers, tiny.id, [1])
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_book_unauthenticated(client: AsyncClient, showtime_id):
    response = await client.post(
        BOOKINGS,
        json={"showtime_id": showtime_id, "number_of_tickets": 1, "seat_numbers": [1]},
    )
    assert response.status_code == 401
    assert response.json()["success"] is False


@pytest.mark.asyncio
async def test_cancel_someone_elses_booking(client: AsyncClient, auth_headers, other_headers, showtime_id):
    booking = (await _book(client, auth_headers, showtime_id, [10])).json()["data"]

    response = await client.put(f"{BOOKINGS}{booking['id']}/cancel", headers=other_headers)
    assert response.status_code == 403

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["booked_seats"] == [10]


@pytest.mark.asyncio
async def test_cancel_twice(client: AsyncClient, auth_headers, showtime_id):
    booking = (await _book(client, auth_headers, showtime_id, [7, 8])).json()["data"]

    assert (await client.put(f"{BOOKINGS}{booking['id']}/cancel", headers=auth_headers)).status_code == 200
    again = await client.put(f"{BOOKINGS}{booking['id']}/cancel", headers=auth_headers)
    assert again.status_code == 400
    assert again.json()["error"] == "AlreadyCancelledError"

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["available_seats"] == 50


@pytest.mark.asyncio
async def test_cancel_inside_window(client: AsyncClient, db_session, auth_headers, test_movie, test_theater, admin_user):
    soon = await make_showtime(
        db_session, test_movie, test_theater, admin_user, starts_in=timedelta(hours=1)
    )
    booking = (await _book(client, auth_headers, soon.id, [1])).json()["data"]

    response = await client.put(f"{BOOKINGS}{booking['id']}/cancel", headers=auth_headers)
    assert response.status_code == 400
    assert response.json()["error"] == "CancellationWindowPassedError"


@pytest.mark.asyncio
async def test_cancel_unknown_booking(client: AsyncClient, auth_headers):
    response = await client.put(f"{BOOKINGS}424242/cancel", headers=auth_headers)
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_get_booking_by_reference(client: AsyncClient, auth_headers, other_headers, admin_headers, showtime_id):
    booking = (await _book(client, auth_headers, showtime_id, [4])).json()["data"]
    reference = booking["booking_reference"]

    mine = await client.get(f"{BOOKINGS}reference/{reference.lower()}", headers=auth_headers)
    assert mine.status_code == 200
    assert mine.json()["data"]["id"] == booking["id"]

    assert (await client.get(f"{BOOKINGS}reference/{reference}", headers=other_headers)).status_code == 403
    assert (await client.get(f"{BOOKINGS}reference/{reference}", headers=admin_headers)).status_code == 200
    assert (await client.get(f"{BOOKINGS}reference/BKNOPE", headers=auth_headers)).status_code == 404


@pytest.mark.asyncio
async def test_my_bookings_paginated(client: AsyncClient, auth_headers, other_headers, showtime_id):
    for seat in (1, 2, 3):
        assert (await _book(client, auth_headers, showtime_id, [seat])).status_code == 201
    assert (await _book(client, other_headers, showtime_id, [4])).status_code == 201

    response = await client.get(f"{BOOKINGS}my-bookings?page=1&limit=2", headers=auth_headers)
    assert response.status_code == 200
    body = response.json()
    assert len(body["data"]) == 2
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "total_pages": 2}


@pytest.mark.asyncio
async def test_admin_list_filters_by_status(client: AsyncClient, auth_headers, admin_headers, showtime_id):
    first = (await _book(client, auth_headers, showtime_id, [1])).json()["data"]
    await _book(client, auth_headers, showtime_id, [2])
    await client.put(f"{BOOKINGS}{first['id']}/cancel", headers=auth_headers)

    assert (await client.get(f"{BOOKINGS}admin/all", headers=auth_headers)).status_code == 403

    response = await client.get(f"{BOOKINGS}admin/all?status=cancelled", headers=admin_headers)
    assert response.status_code == 200
    data = response.json()["data"]
    assert [b["id"] for b in data] == [first["id"]]


@requires_postgres
@pytest.mark.asyncio
async def test_concurrent_bookings_same_seat(client: AsyncClient, auth_headers, other_headers, showtime_id):
    """Exactly one of many simultaneous requests for seat 5 succeeds."""
    headers = [auth_headers, other_headers] * 5
    responses = await asyncio.gather(
        *(_book(client, h, showtime_id, [5]) for h in headers)
    )
    statuses = sorted(r.status_code for r in responses)
    assert statuses.count(201) == 1
    assert statuses.count(409) == len(headers) - 1

    showtime = (await client.get(_showtime_url(showtime_id))).json()["data"]
    assert showtime["available_seats"] == 49
    assert showtime["booked_seats"] == [5]
