from __future__ import annotations

import json

import httpx
import pytest

from src.api.errors import ConfigurationError, UpstreamError, ValidationError
from src.api.services.billing_service import BillingService
from src.config import get_settings


@pytest.fixture
def settings(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_test_key")
    monkeypatch.setenv("RAZORPAY_KEY_SECRET", "rzp_test_secret")
    return get_settings()


def test_create_order_posts_to_razorpay(settings) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["auth"] = request.headers["Authorization"]
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"id": "order_123", "amount": 99900, "currency": "INR"})

    service = BillingService(settings, http=httpx.Client(transport=httpx.MockTransport(handler)))

    order = service.create_order("pro", "u1", "u1@example.com")

    assert order == {"order_id": "order_123", "amount": 99900, "currency": "INR"}
    assert seen["auth"].startswith("Basic ")
    assert seen["body"]["amount"] == 99900
    assert seen["body"]["notes"] == {"plan": "pro", "userId": "u1", "userEmail": "u1@example.com"}
    assert len(seen["body"]["receipt"]) <= 40


def test_unknown_plan_is_rejected(settings) -> None:
    service = BillingService(settings, http=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(500))))

    with pytest.raises(ValidationError, match="Invalid plan"):
        service.create_order("enterprise", "u1", "u1@example.com")


def test_gateway_rejection_is_upstream_error(settings) -> None:
    service = BillingService(settings, http=httpx.Client(transport=httpx.MockTransport(lambda r: httpx.Response(400))))

    with pytest.raises(UpstreamError) as excinfo:
        service.create_order("pro", "u1", "u1@example.com")

    assert excinfo.value.upstream_status == 400


def test_missing_keys_is_configuration_error(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("RAZORPAY_KEY_SECRET", raising=False)
    monkeypatch.setenv("RAZORPAY_KEY_ID", "rzp_test_key")

    with pytest.raises(ConfigurationError):
        BillingService(get_settings())
