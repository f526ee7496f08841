from __future__ import annotations

import logging
import time
from typing import Optional

import httpx

from src.api.errors import ConfigurationError, UpstreamError, ValidationError
from src.config import Settings

logger = logging.getLogger("stockwatch.api.billing")

RAZORPAY_ORDERS_URL = "https://api.razorpay.com/v1/orders"

# Amounts in the smallest currency unit (paise)
PLAN_PRICING = {"pro": 99900}
PLAN_CURRENCY = "INR"


class BillingService:
    def __init__(self, settings: Settings, http: Optional[httpx.Client] = None) -> None:
        if not settings.billing_configured:
            raise ConfigurationError("Payment gateway is not configured")
        self._key_id = settings.razorpay_key_id
        self._key_secret = settings.razorpay_key_secret
        self._http = http

    @property
    def key_id(self) -> str:
        return self._key_id

    def create_order(self, plan: str, user_id: str, user_email: str) -> dict:
        amount = PLAN_PRICING.get(plan)
        if amount is None:
            raise ValidationError("Invalid plan")

        payload = {
            "amount": amount,
            "currency": PLAN_CURRENCY,
            "receipt": f"stockwatch_{plan}_{user_id}_{int(time.time())}"[:40],
            "notes": {"plan": plan, "userId": user_id, "userEmail": user_email},
        }
        http = self._http or httpx.Client(timeout=15)
        try:
            response = http.post(RAZORPAY_ORDERS_URL, json=payload, auth=(self._key_id, self._key_secret))
        except httpx.RequestError as e:
            logger.warning("Razorpay order request failed: %s", e)
            raise UpstreamError("Payment gateway is unavailable", status_code=503)
        finally:
            if self._http is None:
                http.close()

        if response.status_code not in (200, 201):
            logger.error("Razorpay order creation failed (%s): %s", response.status_code, response.text)
            raise UpstreamError("Payment gateway rejected the order", upstream_status=response.status_code)

        order = response.json()
        return {"order_id": order["id"], "amount": order.get("amount", amount), "currency": order.get("currency", PLAN_CURRENCY)}
