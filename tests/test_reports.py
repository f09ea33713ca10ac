"""
Tests for the admin reporting endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest
import pytest_asyncio
from httpx import AsyncClient

from tests.conftest import make_showtime

REPORTS = "/api/v1/reports"


async def _book(client, headers, showtime_id, seats):
    response = await client.post(
        "/api/v1/bookings/",
        json={"showtime_id": showtime_id, "number_of_tickets": len(seats), "seat_numbers": seats},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()["data"]


@pytest_asyncio.fixture
async def booked(client, db_session, auth_headers, other_headers, test_movie, test_theater, admin_user, showtime_id):
    """Three confirmed bookings (6 tickets) and one cancelled booking."""
    pricey = await make_showtime(
        db_session, test_movie, test_theater, admin_user, price="300.00", screen_number=2
    )
    await _book(client, auth_headers, showtime_id, [1, 2])
    await _book(client, other_headers, showtime_id, [3])
    await _book(client, auth_headers, pricey.id, [10, 11, 12])
    cancelled = await _book(client, other_headers, showtime_id, [4])
    await client.put(f"/api/v1/bookings/{cancelled['id']}/cancel", headers=other_headers)


@pytest.mark.asyncio
async def test_reports_require_admin(client: AsyncClient, auth_headers):
    assert (await client.get(f"{REPORTS}/dashboard")).status_code == 401
    assert (await client.get(f"{REPORTS}/dashboard", headers=auth_headers)).status_code == 403


@pytest.mark.asyncio
async def test_bookings_by_movie(client: AsyncClient, admin_headers, booked):
    data = (await client.get(f"{REPORTS}/bookings/movies", headers=admin_headers)).json()["data"]
    assert len(data) == 1
    assert data[0]["movie_name"] == "The Long Night"
    assert data[0]["total_tickets"] == 6
    assert data[0]["booking_count"] == 3
    assert data[0]["total_revenue"] == 1500.0


@pytest.mark.asyncio
async def test_bookings_by_theater(client: AsyncClient, admin_headers, booked):
    data = (await client.get(f"{REPORTS}/bookings/theaters", headers=admin_headers)).json()["data"]
    assert len(data) == 1
    theater = data[0]
    assert theater["theater_name"] == "Grand Cinema"
    assert theater["total_tickets"] == 6
    assert theater["movies"][0]["show_count"] == 2


@pytest.mark.asyncio
async def test_revenue_report(client: AsyncClient, admin_headers, booked):
    now = datetime.now(timezone.utc)
    params = {
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=1)).isoformat(),
    }
    response = await client.get(f"{REPORTS}/revenue", params=params, headers=admin_headers)
    assert response.status_code == 200
    summary = response.json()["data"]["summary"]
    assert summary["total_revenue"] == 1500.0
    assert summary["total_bookings"] == 3
    assert summary["total_tickets"] == 6
    assert summary["average_booking_value"] == 500.0
    assert summary["average_ticket_price"] == 250.0

    reversed_range = {"start_date": params["end_date"], "end_date": params["start_date"]}
    response = await client.get(f"{REPORTS}/revenue", params=reversed_range, headers=admin_headers)
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_user_analytics_and_dashboard(client: AsyncClient, admin_headers, booked):
    analytics = (await client.get(f"{REPORTS}/users/analytics", headers=admin_headers)).json()["data"]
    assert analytics["total_users"] == 3
    assert analytics["users_with_bookings"] == 2
    assert analytics["conversion_rate"] == 66.67

    dashboard = (await client.get(f"{REPORTS}/dashboard", headers=admin_headers)).json()["data"]
    assert dashboard["total_movies"] == 1
    assert dashboard["total_theaters"] == 1
    assert dashboard["active_showtimes"] == 2
    assert dashboard["confirmed_bookings"] == 3
    assert dashboard["total_revenue"] == 1500.0


@pytest.mark.asyncio
async def test_my_summary(client: AsyncClient, auth_headers, booked):
    response = await client.get("/api/v1/bookings/my-summary", headers=auth_headers)
    assert response.status_code == 200
    rows = response.json()["data"]
    assert len(rows) == 2
    assert {r["theater_name"] for r in rows} == {"Grand Cinema"}
    assert sorted(r["number_of_tickets"] for r in rows) == [2, 3]
