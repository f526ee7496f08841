from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, Depends, Query

from src.api.data_access.market_catalog import EXCHANGES, MARKETS
from src.api.errors import NotFoundError, ValidationError
from src.api.services.stock_data_service import (
    QuoteProvider,
    get_index_constituents,
    get_market_status,
    get_popular_stocks,
    get_quote_provider,
    list_markets,
    search_popular_stocks,
)
from src.models.quote_schemas import (
    HistoryInterval,
    HistoryPeriod,
    HistoryResponse,
    IndexListing,
    LocalSearchResponse,
    Quote,
    SearchResponse,
)

router = APIRouter(prefix="/api/stock", tags=["stocks"])


# SEARCH FUNCTIONS --------------------------------------------------------------------------------

@router.get("/global-search", response_model=SearchResponse)
def global_search(
    q: Optional[str] = Query(default=None, description="Ticker or company name"),
    market: Optional[str] = Query(default=None, description="Market code, e.g. US, IN, GB"),
    limit: int = Query(default=30, ge=1, description="Max results (capped at 100)"),
    provider: QuoteProvider = Depends(get_quote_provider),
):
    """
    Search listings across exchanges through Yahoo Finance.

    Results are de-duplicated by symbol and filtered to `market` when one is given.
    """
    return provider.search(q or "", market, limit)


@router.get("/search", response_model=LocalSearchResponse)
def local_search(
    q: Optional[str] = Query(default=None, description="Ticker or company name"),
    limit: int = Query(default=20, ge=1, description="Max results (capped at 100)"),
):
    """Search the curated popular-stock lists of every market without calling Yahoo."""
    return search_popular_stocks(q, limit)


# MARKETS -----------------------------------------------------------------------------------------

@router.get("/markets")
def get_markets():
    return {"markets": [m.model_dump(by_alias=True) for m in list_markets()]}


@router.get("/market-status")
def market_status(market: Optional[str] = Query(default=None)):
    """Open/closed state of one market, or of every supported market when none is given."""
    if market:
        return get_market_status(market).model_dump(by_alias=True)

    statuses = [get_market_status(code).model_dump(by_alias=True) for code in MARKETS]
    return {
        "markets": statuses,
        "total": len(statuses),
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/popular")
def popular_stocks(market: Optional[str] = Query(default="US")):
    stocks = get_popular_stocks(market)
    return {"market": (market or "US").upper(), "stocks": [s.model_dump(by_alias=True) for s in stocks]}


@router.get("/nifty", response_model=IndexListing)
def nifty_50():
    return get_index_constituents("nifty")


@router.get("/sensex", response_model=IndexListing)
def sensex():
    return get_index_constituents("sensex")


# STOCK INFO FUNCTIONS ----------------------------------------------------------------------------

@router.get("/history/{symbol}", response_model=HistoryResponse, response_model_exclude_none=True)
def get_stock_history(
    symbol: str,
    market: Optional[str] = Query(default=None),
    period: HistoryPeriod = Query(default=HistoryPeriod.SIX_MONTHS),
    interval: HistoryInterval = Query(default=HistoryInterval.ONE_DAY),
    provider: QuoteProvider = Depends(get_quote_provider),
):
    return provider.get_history(symbol, market, period, interval)


@router.get("/quote/{symbol}", response_model=Quote)
def get_global_quote(
    symbol: str,
    market: Optional[str] = Query(default=None),
    provider: QuoteProvider = Depends(get_quote_provider),
):
    """Quote for a symbol on any supported market."""
    return provider.get_quote(symbol, market)


@router.get("/{exchange}", response_model=Quote)
def get_exchange_quote(
    exchange: str,
    symbol: Optional[str] = Query(default=None),
    provider: QuoteProvider = Depends(get_quote_provider),
):
    """
    Quote for a symbol listed on a specific exchange (nse, bse, lse, tse, nyse, nasdaq).

    The exchange's own table is checked before falling back to the live provider.
    """
    listing = EXCHANGES.get(exchange.lower())
    if listing is None:
        raise NotFoundError(f"Unsupported exchange: {exchange}")
    if not symbol or not symbol.strip():
        raise ValidationError("Symbol is required")

    market, exchange_code = listing
    return provider.get_quote(symbol, market, exchange=exchange_code)
