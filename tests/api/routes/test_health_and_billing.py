from __future__ import annotations


def test_health(client, monkeypatch) -> None:
    monkeypatch.setenv("APP_VERSION", "9.9.9")

    response = client.get("/api/health")

    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "healthy"
    assert body["version"] == "9.9.9"
    assert body["uptime"] >= 0
    assert body["database"] == "configured"
    assert "timestamp" in body


def test_health_head(client) -> None:
    assert client.head("/api/health").status_code == 200


def test_create_order_without_gateway_keys_is_503(client) -> None:
    response = client.post(
        "/api/razorpay/create-order",
        json={"plan": "pro", "userId": "u1", "userEmail": "u1@example.com"},
    )

    assert response.status_code == 503
    assert response.json() == {
        "success": False,
        "error": "Service not configured",
        "message": "Payment gateway is not configured",
    }
