from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional, Protocol
from urllib.parse import quote as url_quote

from sqlalchemy import select
from sqlalchemy.orm import Session

from src.api.errors import StockWatchError
from src.models.notification import NOTIFICATION_ALERT_TRIGGERED, Notification
from src.models.quote_schemas import Quote
from src.models.stock_alert import ALERT_TYPE_PRICE_ABOVE, ALERT_TYPE_PRICE_BELOW, PRICE_ALERT_TYPES, StockAlert
from src.utils import RateLimiter

logger = logging.getLogger("stockwatch.alerts_engine.evaluation")


class QuoteSource(Protocol):
    def get_quote(self, symbol: str, market: Optional[str] = None, exchange: Optional[str] = None) -> Quote:
        raise NotImplementedError


@dataclass(frozen=True)
class AlertEvaluationSummary:
    processed: int
    triggered: int
    skipped: int
    failed: int

    def to_dict(self) -> dict:
        return asdict(self)


def is_triggered(alert_type: str, target_value: Decimal, price: float) -> bool:
    current = Decimal(str(price))
    if alert_type == ALERT_TYPE_PRICE_ABOVE:
        return current >= target_value
    if alert_type == ALERT_TYPE_PRICE_BELOW:
        return current <= target_value
    return False


class AlertEvaluationService:
    """
    Checks active price alerts against fresh quotes.

    One quote is fetched per distinct (ticker, market). A crossed alert is deactivated
    and its owner gets an alert_triggered notification.
    """

    def __init__(
        self,
        quotes: QuoteSource,
        limiter: RateLimiter,
        base_url: str,
        quote_wait_seconds: float = 5.0,
    ) -> None:
        self._quotes = quotes
        self._limiter = limiter
        self._base_url = base_url.rstrip("/")
        self._quote_wait_seconds = quote_wait_seconds

    def evaluate(self, session: Session, limit: int = 1000) -> AlertEvaluationSummary:
        stmt = (
            select(StockAlert)
            .where(StockAlert.is_active.is_(True))
            .where(StockAlert.alert_type.in_(PRICE_ALERT_TYPES))
            .order_by(StockAlert.id)
            .limit(limit)
        )
        alerts = session.execute(stmt).scalars().all()

        groups: dict[tuple[str, str], list[StockAlert]] = defaultdict(list)
        for alert in alerts:
            groups[(alert.ticker, alert.market)].append(alert)

        triggered = skipped = failed = 0
        now = datetime.now(timezone.utc)
        for (ticker, market), group in groups.items():
            if not self._limiter.wait(timeout=self._quote_wait_seconds):
                logger.info("Rate limited; skipping %d alert(s) on %s", len(group), ticker)
                skipped += len(group)
                continue
            try:
                quote = self._quotes.get_quote(ticker, market)
            except StockWatchError as exc:
                logger.warning("Quote for %s (%s) unavailable: %s", ticker, market, exc.message)
                failed += len(group)
                continue

            for alert in group:
                if not is_triggered(alert.alert_type, Decimal(str(alert.target_value)), quote.price):
                    continue
                alert.is_active = False
                alert.triggered_at = now
                session.add(self._build_notification(alert, quote))
                triggered += 1

        return AlertEvaluationSummary(
            processed=len(alerts),
            triggered=triggered,
            skipped=skipped,
            failed=failed,
        )

    def _build_notification(self, alert: StockAlert, quote: Quote) -> Notification:
        direction = "above" if alert.alert_type == ALERT_TYPE_PRICE_ABOVE else "below"
        target = Decimal(str(alert.target_value)).normalize()
        return Notification(
            user_id=alert.user_id,
            type=NOTIFICATION_ALERT_TRIGGERED,
            title=f"{alert.ticker} price alert",
            message=(
                f"{alert.name} is trading at {quote.price:.2f} {quote.currency}, "
                f"{direction} your target of {target:f} {alert.currency}."
            ),
            link=f"{self._base_url}/dashboard?ticker={url_quote(alert.ticker)}",
            read=False,
        )
