from __future__ import annotations

import os
from typing import Callable, Iterator

import httpx
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

# Keep the app away from any real database, auth provider or payment gateway.
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")
for _name in ("AUTH_REQUIRED", "SUPABASE_URL", "RAZORPAY_KEY_ID", "RAZORPAY_KEY_SECRET", "RUN_MIGRATIONS_ON_STARTUP"):
    os.environ.pop(_name, None)

from src.api.data_access.stock_data_provider import YahooFinanceClient  # noqa: E402
from src.api.database.database import Base, get_db  # noqa: E402
from src.api.services.stock_data_service import QuoteProvider, get_quote_provider  # noqa: E402
from src.main import app  # noqa: E402
from src.models import notification, portfolio, stock_alert, support_ticket, watchlist  # noqa: E402,F401

YahooHandler = Callable[[httpx.Request], httpx.Response]


def chart_payload(
    symbol: str,
    price: float | None,
    previous_close: float = 100.0,
    currency: str = "USD",
    exchange: str = "NMS",
    name: str | None = None,
) -> dict:
    meta = {
        "symbol": symbol,
        "currency": currency,
        "exchangeName": exchange,
        "chartPreviousClose": previous_close,
        "regularMarketVolume": 1000,
        "longName": name or symbol,
    }
    if price is not None:
        meta["regularMarketPrice"] = price
    return {"chart": {"result": [{"meta": meta}], "error": None}}


def no_network(request: httpx.Request) -> httpx.Response:
    raise AssertionError(f"unexpected upstream call to {request.url}")


def make_provider(handler: YahooHandler = no_network, history_loader=None) -> QuoteProvider:
    http = httpx.Client(transport=httpx.MockTransport(handler))
    if history_loader is None:
        return QuoteProvider(YahooFinanceClient(http))
    return QuoteProvider(YahooFinanceClient(http), history_loader=history_loader)


@pytest.fixture
def engine() -> Iterator[Engine]:
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine: Engine) -> Iterator[Session]:
    db = sessionmaker(bind=engine, autoflush=False)()
    yield db
    db.close()


@pytest.fixture
def yahoo_handler() -> dict:
    """Tests swap `handler` to script Yahoo's responses for route-level calls."""
    return {"handler": no_network}


@pytest.fixture
def client(session: Session, yahoo_handler: dict) -> Iterator[TestClient]:
    def _provider() -> QuoteProvider:
        return make_provider(lambda request: yahoo_handler["handler"](request))

    app.dependency_overrides[get_db] = lambda: session
    app.dependency_overrides[get_quote_provider] = _provider
    yield TestClient(app, raise_server_exceptions=False)
    app.dependency_overrides.clear()


@pytest.fixture
def chart() -> Callable[..., dict]:
    return chart_payload


@pytest.fixture
def provider_factory() -> Callable[..., QuoteProvider]:
    return make_provider
