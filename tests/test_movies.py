"""
Tests for movie catalog endpoints.
"""

import pytest
from httpx import AsyncClient

MOVIES = "/api/v1/movies/"

NEW_MOVIE = {
    "name": "Monsoon Express",
    "description": "A train, a storm and a missing ticket",
    "genres": ["Comedy", "Family"],
    "languages": ["Hindi"],
    "duration": 125,
    "cast": ["D. Lead"],
    "director": "E. Maker",
    "release_date": "2026-06-01",
    "rating": 7.4,
}


@pytest.mark.asyncio
async def test_create_movie_requires_admin(client: AsyncClient, auth_headers, admin_headers):
    assert (await client.post(MOVIES, json=NEW_MOVIE)).status_code == 401
    assert (await client.post(MOVIES, json=NEW_MOVIE, headers=auth_headers)).status_code == 403

    response = await client.post(MOVIES, json=NEW_MOVIE, headers=admin_headers)
    assert response.status_code == 201
    data = response.json()["data"]
    assert data["name"] == "Monsoon Express"
    assert data["is_active"] is True


@pytest.mark.asyncio
async def test_create_duplicate_movie(client: AsyncClient, admin_headers, test_movie):
    response = await client.post(
        MOVIES, json={**NEW_MOVIE, "name": "the long night"}, headers=admin_headers
    )
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_create_movie_invalid_genre(client: AsyncClient, admin_headers):
    response = await client.post(
        MOVIES, json={**NEW_MOVIE, "genres": ["Telenovela"]}, headers=admin_headers
    )
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_list_and_filter_movies(client: AsyncClient, admin_headers, test_movie):
    await client.post(MOVIES, json=NEW_MOVIE, headers=admin_headers)

    response = await client.get(MOVIES)
    assert response.status_code == 200
    body = response.json()
    assert body["pagination"]["total"] == 2
    # Newest release first
    assert [m["name"] for m in body["data"]] == ["Monsoon Express", "The Long Night"]

    by_genre = (await client.get(f"{MOVIES}?genre=Thriller")).json()["data"]
    assert [m["name"] for m in by_genre] == ["The Long Night"]

    by_language = (await client.get(f"{MOVIES}?language=hindi")).json()["data"]
    assert len(by_language) == 2

    by_rating = (await client.get(f"{MOVIES}?min_rating=8")).json()["data"]
    assert [m["name"] for m in by_rating] == ["The Long Night"]


@pytest.mark.asyncio
async def test_soft_delete_hides_movie(client: AsyncClient, admin_headers, test_movie):
    movie_id = test_movie.id
    response = await client.delete(f"{MOVIES}{movie_id}", headers=admin_headers)
    assert response.status_code == 200

    assert (await client.get(f"{MOVIES}{movie_id}")).status_code == 404
    assert (await client.get(MOVIES)).json()["data"] == []

    # Admins still see it
    admin_view = await client.get(f"{MOVIES}{movie_id}", headers=admin_headers)
    assert admin_view.status_code == 200
    assert admin_view.json()["data"]["is_active"] is False
    listing = await client.get(f"{MOVIES}?include_inactive=true", headers=admin_headers)
    assert len(listing.json()["data"]) == 1


@pytest.mark.asyncio
async def test_update_movie(client: AsyncClient, admin_headers, test_movie):
    response = await client.put(
        f"{MOVIES}{test_movie.id}", json={"rating": 9.0, "duration": 150}, headers=admin_headers
    )
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["rating"] == 9.0
    assert data["duration"] == 150
    assert data["name"] == "The Long Night"


@pytest.mark.asyncio
async def test_genres_and_languages(client: AsyncClient, test_movie):
    genres = (await client.get(f"{MOVIES}genres")).json()["data"]
    assert genres == ["Drama", "Thriller"]

    languages = (await client.get(f"{MOVIES}languages")).json()["data"]
    assert languages == ["English", "Hindi"]
