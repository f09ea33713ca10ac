"""
Tests for theater and showtime management endpoints.
"""

from datetime import datetime, timedelta, timezone

import pytest
from httpx import AsyncClient

THEATERS = "/api/v1/theaters/"
SHOWTIMES = "/api/v1/theaters/showtimes"

NEW_THEATER = {
    "name": "Riverside Screens",
    "address": "22 River Road",
    "city": "Mumbai",
    "state": "Maharashtra",
    "pincode": "400001",
    "amenities": ["Parking", "Dolby Atmos"],
    "screens": [
        {"screen_number": 1, "total_seats": 120},
        {"screen_number": 2, "total_seats": 80, "rows": 8, "seats_per_row": 10},
    ],
}


def _future(hours: int = 24) -> str:
    return (datetime.now(timezone.utc) + timedelta(hours=hours)).replace(microsecond=0).isoformat()


@pytest.mark.asyncio
async def test_create_theater(client: AsyncClient, auth_headers, admin_headers):
    assert (await client.post(THEATERS, json=NEW_THEATER, headers=auth_headers)).status_code == 403

    response = await client.post(THEATERS, json=NEW_THEATER, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["city"] == "Mumbai"
    assert [s["screen_number"] for s in data["screens"]] == [1, 2]

    duplicate = await client.post(THEATERS, json=NEW_THEATER, headers=admin_headers)
    assert duplicate.status_code == 409


@pytest.mark.asyncio
async def test_create_theater_duplicate_screen_numbers(client: AsyncClient, admin_headers):
    payload = {
        **NEW_THEATER,
        "screens": [{"screen_number": 1, "total_seats": 10}, {"screen_number": 1, "total_seats": 20}],
    }
    response = await client.post(THEATERS, json=payload, headers=admin_headers)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_theaters_with_filters(client: AsyncClient, admin_headers, test_theater):
    await client.post(THEATERS, json=NEW_THEATER, headers=admin_headers)

    all_theaters = (await client.get(THEATERS)).json()
    assert all_theaters["pagination"]["total"] == 2

    pune = (await client.get(f"{THEATERS}?city=pune")).json()["data"]
    assert [t["name"] for t in pune] == ["Grand Cinema"]

    imax = (await client.get(f"{THEATERS}?amenity=IMAX")).json()["data"]
    assert [t["name"] for t in imax] == ["Grand Cinema"]


@pytest.mark.asyncio
async def test_update_theater_screens(client: AsyncClient, admin_headers, test_theater):
    response = await client.put(
        f"{THEATERS}{test_theater.id}",
        json={"screens": [{"screen_number": 1, "total_seats": 60}, {"screen_number": 3, "total_seats": 30}]},
        headers=admin_headers,
    )
    assert response.status_code == 200
    screens = {s["screen_number"]: s for s in response.json()["data"]["screens"]}
    assert screens[1]["total_seats"] == 60
    assert screens[2]["is_active"] is False
    assert screens[3]["total_seats"] == 30


@pytest.mark.asyncio
async def test_delete_theater(client: AsyncClient, admin_headers, test_theater):
    theater_id = test_theater.id
    assert (await client.delete(f"{THEATERS}{theater_id}", headers=admin_headers)).status_code == 200
    assert (await client.get(f"{THEATERS}{theater_id}")).status_code == 404


@pytest.mark.asyncio
async def test_create_showtime_inherits_screen_capacity(client: AsyncClient, admin_headers, test_movie, test_theater):
    response = await client.post(
        SHOWTIMES,
        json={
            "movie_id": test_movie.id,
            "theater_id": test_theater.id,
            "screen_number": 2,
            "show_time": _future(),
            "price": 250,
        },
        headers=admin_headers,
    )
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["total_seats"] == 100
    assert data["available_seats"] == 100
    assert data["booked_seats"] == []
    assert data["price"] == 250.0


@pytest.mark.asyncio
async def test_create_showtime_rejections(client: AsyncClient, admin_headers, test_movie, test_theater):
    base = {
        "movie_id": test_movie.id,
        "theater_id": test_theater.id,
        "screen_number": 1,
        "show_time": _future(),
        "price": 150,
    }

    missing_screen = await client.post(SHOWTIMES, json={**base, "screen_number": 9}, headers=admin_headers)
    assert missing_screen.status_code == 404

    past = await client.post(SHOWTIMES, json={**base, "show_time": _future(-2)}, headers=admin_headers)
    assert past.status_code == 400

    assert (await client.post(SHOWTIMES, json=base, headers=admin_headers)).status_code == 201
    clash = await client.post(SHOWTIMES, json=base, headers=admin_headers)
    assert clash.status_code == 409


@pytest.mark.asyncio
async def test_assign_movie_is_all_or_nothing(client: AsyncClient, admin_headers, test_movie, test_theater):
    request = {
        "movie_id": test_movie.id,
        "theater_id": test_theater.id,
        "screen_number": 1,
        "show_times": [
            {"show_time": _future(24), "price": 180},
            {"show_time": _future(28), "price": 220},
        ],
    }
    response = await client.post(f"{SHOWTIMES}/assign-movie", json=request, headers=admin_headers)
    assert response.status_code == 201
    assert len(response.json()["data"]) == 2

    # The first slot collides, so the second is not created either
    request["show_times"] = [
        {"show_time": request["show_times"][0]["show_time"], "price": 180},
        {"show_time": _future(32), "price": 220},
    ]
    response = await client.post(f"{SHOWTIMES}/assign-movie", json=request, headers=admin_headers)
    assert response.status_code == 409

    listing = (await client.get(f"{SHOWTIMES}?movie_id={test_movie.id}")).json()
    assert listing["pagination"]["total"] == 2


@pytest.mark.asyncio
async def test_update_showtime(client: AsyncClient, admin_headers, showtime_id):
    response = await client.put(
        f"{SHOWTIMES}/{showtime_id}", json={"price": 275.5}, headers=admin_headers
    )
    assert response.status_code == 200
    assert response.json()["data"]["price"] == 275.5

    past = await client.put(
        f"{SHOWTIMES}/{showtime_id}", json={"show_time": _future(-1)}, headers=admin_headers
    )
    assert past.status_code == 400


@pytest.mark.asyncio
async def test_deleted_showtime_hidden_from_listing(client: AsyncClient, admin_headers, showtime_id):
    assert (await client.get(SHOWTIMES)).json()["pagination"]["total"] == 1

    await client.delete(f"{SHOWTIMES}/{showtime_id}", headers=admin_headers)

    assert (await client.get(SHOWTIMES)).json()["pagination"]["total"] == 0
    assert (await client.get(f"{SHOWTIMES}/{showtime_id}")).status_code == 404
    admin_listing = await client.get(f"{SHOWTIMES}?include_inactive=true", headers=admin_headers)
    assert admin_listing.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_theaters_for_movie(client: AsyncClient, test_movie, test_theater, showtime_id):
    response = await client.get(f"{THEATERS}movie/{test_movie.id}")
    assert response.status_code == 200
    data = response.json()["data"]
    assert len(data) == 1
    assert data[0]["theater"]["name"] == "Grand Cinema"
    assert [s["id"] for s in data[0]["showtimes"]] == [showtime_id]


@pytest.mark.asyncio
async def test_recreate_showtime_after_soft_delete(client: AsyncClient, admin_headers, test_movie, test_theater):
    body = {
        "movie_id": test_movie.id,
        "theater_id": test_theater.id,
        "screen_number": 1,
        "show_time": _future(30),
        "price": 150,
    }
    first = await client.post(SHOWTIMES, json=body, headers=admin_headers)
    assert first.status_code == 201
    first_id = first.json()["data"]["id"]
    await client.delete(f"{SHOWTIMES}/{first_id}", headers=admin_headers)

    again = await client.post(SHOWTIMES, json=body, headers=admin_headers)
    assert again.status_code == 201
    assert again.json()["data"]["id"] != first_id

    # The slot is active again, so the old row cannot come back
    revived = await client.put(f"{SHOWTIMES}/{first_id}", json={"is_active": True}, headers=admin_headers)
    assert revived.status_code == 409
    assert revived.json()["error"] == "ConflictError"

    listing = await client.get(f"{SHOWTIMES}?theater_id={test_theater.id}&screen_number=1")
    assert listing.json()["pagination"]["total"] == 1


@pytest.mark.asyncio
async def test_move_showtime_onto_freed_slot(client: AsyncClient, admin_headers, test_movie, test_theater):
    base = {
        "movie_id": test_movie.id,
        "theater_id": test_theater.id,
        "screen_number": 1,
        "price": 150,
    }
    slot = _future(40)
    deleted = await client.post(SHOWTIMES, json={**base, "show_time": slot}, headers=admin_headers)
    await client.delete(f"{SHOWTIMES}/{deleted.json()['data']['id']}", headers=admin_headers)

    moving = await client.post(SHOWTIMES, json={**base, "show_time": _future(44)}, headers=admin_headers)
    moving_id = moving.json()["data"]["id"]

    response = await client.put(f"{SHOWTIMES}/{moving_id}", json={"show_time": slot}, headers=admin_headers)
    assert response.status_code == 200

    blocker = await client.post(SHOWTIMES, json={**base, "show_time": _future(48)}, headers=admin_headers)
    clash = await client.put(
        f"{SHOWTIMES}/{moving_id}",
        json={"show_time": blocker.json()["data"]["show_time"]},
        headers=admin_headers,
    )
    assert clash.status_code == 409
