from enum import StrEnum
from typing import Any, Dict, List, Optional

from src.models.watchlist_schemas import CamelModel


class HistoryPeriod(StrEnum):
    """yfinance `period` values offered by the history endpoint."""

    ONE_DAY = "1d"
    FIVE_DAYS = "5d"
    ONE_MONTH = "1mo"
    THREE_MONTHS = "3mo"
    SIX_MONTHS = "6mo"
    ONE_YEAR = "1y"
    TWO_YEARS = "2y"
    FIVE_YEARS = "5y"
    YEAR_TO_DATE = "ytd"
    ALL = "max"


class HistoryInterval(StrEnum):
    FIVE_MINUTES = "5m"
    FIFTEEN_MINUTES = "15m"
    ONE_HOUR = "1h"
    ONE_DAY = "1d"
    ONE_WEEK = "1wk"
    ONE_MONTH = "1mo"


class Quote(CamelModel):
    symbol: str
    name: str
    price: float
    change: float
    change_percent: float
    volume: int = 0
    market_cap: Optional[float] = None
    currency: str
    exchange: str
    country: str
    sector: Optional[str] = None
    last_updated: str


class SearchResult(CamelModel):
    symbol: str
    name: str
    market: str
    currency: str
    exchange: Optional[str] = None


class SearchResponse(CamelModel):
    query: str
    market: str
    results: List[SearchResult]
    total: int


class HistoryResponse(CamelModel):
    symbol: str
    market: Optional[str] = None
    period: str
    interval: str
    candles: List[Dict[str, Any]]


class MarketInfo(CamelModel):
    code: str
    name: str
    currency: str
    exchanges: List[str]


class TradingHours(CamelModel):
    open: str
    close: str
    days: List[str]


class MarketStatus(CamelModel):
    country: str
    currency: str
    exchange: str
    timezone: str
    is_open: bool
    market_status: str
    current_time: str
    next_open: Optional[str] = None
    next_close: Optional[str] = None
    trading_hours: TradingHours


class PopularStock(CamelModel):
    symbol: str
    name: str
    sector: str


class IndexListing(CamelModel):
    index: str
    market: str
    currency: str
    stocks: List[PopularStock]
    total: int
    description: str


class LocalSearchResult(PopularStock):
    market: str
    currency: str


class LocalSearchResponse(CamelModel):
    query: str
    results: List[LocalSearchResult]
    total: int
