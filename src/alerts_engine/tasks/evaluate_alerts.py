from __future__ import annotations

import httpx
from celery import shared_task

from src.alerts_engine.services.alert_evaluation import AlertEvaluationService
from src.api.data_access.stock_data_provider import YahooFinanceClient
from src.api.database.database import SessionLocal
from src.api.services.stock_data_service import QuoteProvider
from src.config import get_settings
from src.utils import RateLimiter

# Yahoo tolerates roughly one chart call per second from a single host.
quote_limiter = RateLimiter(60, 60.0)


@shared_task(name="alerts.evaluate_price_alerts")
def run_price_alert_evaluation(limit: int = 1000) -> dict:
    return evaluate_price_alerts(limit=limit)


def evaluate_price_alerts(limit: int = 1000) -> dict:
    settings = get_settings()
    session = SessionLocal()
    try:
        with httpx.Client(timeout=settings.yahoo_timeout_seconds) as http:
            service = AlertEvaluationService(
                quotes=QuoteProvider(YahooFinanceClient(http)),
                limiter=quote_limiter,
                base_url=settings.app_base_url,
            )
            summary = service.evaluate(session, limit=limit)
        session.commit()
        return summary.to_dict()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()
