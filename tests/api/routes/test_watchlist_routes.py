from __future__ import annotations

from src.api.auth.auth import get_authenticated_user_id
from src.main import app


def _add(client, user_id: str, ticker: str, **extra):
    return client.post("/api/watchlist", json={"userId": user_id, "ticker": ticker, **extra})


def test_add_then_list_newest_first_for_owner_only(client) -> None:
    _add(client, "u1", "MSFT")
    _add(client, "u2", "TSLA")

    response = _add(client, "u1", "aapl")

    assert response.status_code == 201
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "AAPL added to watchlist!"
    item = body["item"]
    assert item["ticker"] == "AAPL"
    assert item["market"] == "US"
    assert item["currency"] == "USD"
    assert item["name"] == "AAPL"
    assert item["userId"] == "u1"
    assert "addedAt" in item

    listing = client.get("/api/watchlist", params={"userId": "u1"})

    assert listing.status_code == 200
    assert [i["ticker"] for i in listing.json()["watchlist"]] == ["AAPL", "MSFT"]


def test_duplicate_add_is_409(client) -> None:
    _add(client, "u1", "AAPL")

    response = _add(client, "u1", "aapl")

    assert response.status_code == 409
    assert response.json() == {
        "success": False,
        "error": "Conflict",
        "message": "AAPL is already in your watchlist",
    }
    assert len(client.get("/api/watchlist", params={"userId": "u1"}).json()["watchlist"]) == 1


def test_add_without_ticker_is_400(client) -> None:
    response = client.post("/api/watchlist", json={"userId": "u1"})

    assert response.status_code == 400
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Missing required fields"
    assert "ticker" in body["message"]


def test_list_without_user_is_400(client) -> None:
    response = client.get("/api/watchlist")

    assert response.status_code == 400
    assert response.json()["message"] == "User ID is required"


def test_delete_is_scoped_to_owner(client) -> None:
    item_id = _add(client, "u1", "AAPL").json()["item"]["id"]

    response = client.delete("/api/watchlist", params={"id": item_id, "userId": "u2"})
    assert response.status_code == 200
    assert response.json() == {"success": True, "message": "Watchlist item deleted!"}
    assert len(client.get("/api/watchlist", params={"userId": "u1"}).json()["watchlist"]) == 1

    client.delete("/api/watchlist", params={"id": item_id, "userId": "u1"})
    assert client.get("/api/watchlist", params={"userId": "u1"}).json()["watchlist"] == []


def test_delete_without_id_is_400(client) -> None:
    response = client.delete("/api/watchlist", params={"userId": "u1"})

    assert response.status_code == 400
    assert response.json()["success"] is False


def test_create_alert_with_numeric_string(client) -> None:
    response = client.post(
        "/api/alerts",
        json={"userId": "u1", "ticker": "aapl", "alertType": "price_above", "targetValue": "123.45"},
    )

    assert response.status_code == 201
    body = response.json()
    assert body["message"] == "Alert created for AAPL!"
    assert body["alert"]["targetValue"] == 123.45
    assert body["alert"]["isActive"] is True
    assert body["alert"]["triggeredAt"] is None

    alerts = client.get("/api/alerts", params={"userId": "u1"}).json()["alerts"]
    assert [a["ticker"] for a in alerts] == ["AAPL"]


def test_create_alert_with_garbage_target_is_400(client) -> None:
    response = client.post(
        "/api/alerts",
        json={"userId": "u1", "ticker": "AAPL", "alertType": "price_above", "targetValue": "not-a-number"},
    )

    assert response.status_code == 400
    assert response.json()["error"] == "Invalid request"
    assert client.get("/api/alerts", params={"userId": "u1"}).json()["alerts"] == []


def test_create_alert_missing_type_is_400(client) -> None:
    response = client.post("/api/alerts", json={"userId": "u1", "ticker": "AAPL", "targetValue": 10})

    assert response.status_code == 400
    assert response.json()["error"] == "Missing required fields"


def test_delete_alert(client) -> None:
    alert_id = client.post(
        "/api/alerts",
        json={"userId": "u1", "ticker": "AAPL", "alertType": "price_below", "targetValue": 90},
    ).json()["alert"]["id"]

    response = client.delete("/api/alerts", params={"id": alert_id, "userId": "u1"})

    assert response.json() == {"success": True, "message": "Alert deleted!"}
    assert client.get("/api/alerts", params={"userId": "u1"}).json()["alerts"] == []


def test_token_user_must_match_claimed_user(client) -> None:
    app.dependency_overrides[get_authenticated_user_id] = lambda: "u1"

    assert client.get("/api/watchlist", params={"userId": "u2"}).status_code == 401

    response = client.post("/api/watchlist", json={"ticker": "AAPL"})
    assert response.status_code == 201
    assert response.json()["item"]["userId"] == "u1"


def test_auth_required_without_token_is_401(client, monkeypatch) -> None:
    monkeypatch.setenv("AUTH_REQUIRED", "true")

    response = client.get("/api/watchlist", params={"userId": "u1"})

    assert response.status_code == 401
    assert response.json() == {
        "success": False,
        "error": "Unauthorized",
        "message": "Authentication required",
    }


def test_token_without_auth_provider_is_503(client, monkeypatch) -> None:
    monkeypatch.delenv("SUPABASE_URL", raising=False)

    response = client.get(
        "/api/watchlist",
        params={"userId": "u1"},
        headers={"Authorization": "Bearer some-token"},
    )

    assert response.status_code == 503
    assert response.json()["error"] == "Service not configured"
