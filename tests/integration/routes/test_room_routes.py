"""
Integration tests for the /api/rooms endpoints.
"""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient


@pytest.mark.integration
def test_list_rooms_returns_inventory(api_client: TestClient) -> None:
    response = api_client.get("/api/rooms")

    assert response.status_code == 200
    rooms = response.json()
    assert [room["id"] for room in rooms] == [1, 2, 3, 4, 5]
    assert rooms[0]["room_type"] == "BEDROOM_1"
    assert rooms[4]["is_available"] is False


@pytest.mark.integration
def test_get_room(api_client: TestClient) -> None:
    response = api_client.get("/api/rooms/4")

    assert response.status_code == 200
    assert response.json()["name"] == "Entire Cottage"
    assert response.json()["max_occupancy"] == 6


@pytest.mark.integration
def test_get_unknown_room_returns_404(api_client: TestClient) -> None:
    assert api_client.get("/api/rooms/404").status_code == 404


@pytest.mark.integration
def test_available_rooms_without_dates_lists_enabled_rooms(api_client: TestClient) -> None:
    response = api_client.get("/api/rooms/available")

    assert response.status_code == 200
    assert [room["id"] for room in response.json()] == [1, 2, 3, 4]


@pytest.mark.integration
def test_available_rooms_for_dates_excludes_booked(api_client: TestClient) -> None:
    api_client.post(
        "/api/reservations",
        json={
            "room_id": 2,
            "check_in_date": "2024-06-01",
            "check_out_date": "2024-06-05",
            "number_of_guests": 1,
        },
        headers={"X-User-Id": "alice"},
    )

    overlapping = api_client.get("/api/rooms/available?start_date=2024-06-03&end_date=2024-06-06")
    after = api_client.get("/api/rooms/available?start_date=2024-06-05&end_date=2024-06-06")

    assert [room["id"] for room in overlapping.json()] == [1, 3, 4]
    assert [room["id"] for room in after.json()] == [1, 2, 3, 4]


@pytest.mark.integration
def test_available_rooms_in_the_past_is_empty(api_client: TestClient) -> None:
    response = api_client.get("/api/rooms/available?start_date=2024-04-01&end_date=2024-04-03")

    assert response.status_code == 200
    assert response.json() == []


@pytest.mark.integration
@pytest.mark.parametrize(
    "query",
    ["start_date=2024-06-03", "start_date=2024-06-06&end_date=2024-06-03"],
)
def test_available_rooms_rejects_bad_window(api_client: TestClient, query: str) -> None:
    assert api_client.get(f"/api/rooms/available?{query}").status_code == 400
