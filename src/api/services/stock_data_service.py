from __future__ import annotations

import logging
from datetime import datetime, time as dtime, timedelta
from typing import Callable, Iterator, Optional
from zoneinfo import ZoneInfo

import httpx
import pandas as pd

from src.api.data_access import mock_quotes
from src.api.data_access.market_catalog import (
    INDEX_CONSTITUENT_DETAILS,
    INDIA_BSE_SUFFIX,
    INDIA_NSE_SUFFIX,
    INDICES,
    MARKETS,
    POPULAR_STOCKS,
    WEEKDAYS,
    alternate_india_symbol,
    default_currency,
    has_suffix,
    infer_market,
    normalize_market,
    strip_suffix,
    to_yahoo_symbol,
)
from src.api.data_access.stock_data_provider import YahooFinanceClient, chart_meta, fetch_history
from src.api.errors import NotFoundError, UpstreamError, ValidationError
from src.config import get_settings
from src.models.quote_schemas import (
    HistoryInterval,
    HistoryPeriod,
    HistoryResponse,
    IndexListing,
    LocalSearchResponse,
    LocalSearchResult,
    MarketInfo,
    MarketStatus,
    PopularStock,
    Quote,
    SearchResponse,
    SearchResult,
)
from src.utils import frame_to_records, round_2_decimals, utc_now_iso

logger = logging.getLogger("stockwatch.api.quotes")

MAX_SEARCH_LIMIT = 100


class QuoteProvider:
    """
    Resolves quotes, search results and price history for a ticker.

    Regional mock tables are consulted first; anything else goes to Yahoo. The only
    retry is a single alternate-suffix attempt for Indian listings.
    """

    def __init__(
        self,
        yahoo: YahooFinanceClient,
        history_loader: Callable[[str, str, str], pd.DataFrame] = fetch_history,
    ) -> None:
        self._yahoo = yahoo
        self._history_loader = history_loader

    # QUOTES -----------------------------------------------------------------------------------

    def get_quote(self, symbol: str, market: Optional[str] = None, exchange: Optional[str] = None) -> Quote:
        symbol = (symbol or "").strip().upper()
        if not symbol:
            raise ValidationError("Symbol is required")
        market = normalize_market(market) or (infer_market(symbol) if has_suffix(symbol) else "US")

        mock = self._find_mock(symbol, market, exchange)
        if mock is not None:
            return Quote(**mock, last_updated=utc_now_iso())

        return self._fetch_live_quote(symbol, market, exchange)

    def _find_mock(self, symbol: str, market: str, exchange: Optional[str]) -> Optional[dict]:
        if exchange:
            exchanges = (exchange.upper(),)
        elif symbol.endswith(INDIA_NSE_SUFFIX):
            exchanges = ("NSE",)
        elif symbol.endswith(INDIA_BSE_SUFFIX):
            exchanges = ("BSE",)
        else:
            exchanges = mock_quotes.EXCHANGES_BY_MARKET.get(market, ())

        key = strip_suffix(symbol)
        for name in exchanges:
            row = mock_quotes.TABLES_BY_EXCHANGE.get(name, {}).get(key)
            if row is not None:
                return row
        return None

    def _fetch_live_quote(self, symbol: str, market: str, exchange: Optional[str] = None) -> Quote:
        yahoo_symbol = to_yahoo_symbol(symbol, market, exchange)
        try:
            payload = self._yahoo.fetch_chart(yahoo_symbol)
        except UpstreamError as e:
            if e.upstream_status is None or market != "IN" or has_suffix(symbol):
                raise self._as_not_found(e, symbol)
            yahoo_symbol = alternate_india_symbol(yahoo_symbol)
            logger.info("Retrying %s as %s after HTTP %s", symbol, yahoo_symbol, e.upstream_status)
            try:
                payload = self._yahoo.fetch_chart(yahoo_symbol)
            except UpstreamError as retry_error:
                raise self._as_not_found(retry_error, symbol)

        return self._quote_from_chart(payload, yahoo_symbol, market)

    @staticmethod
    def _as_not_found(error: UpstreamError, symbol: str) -> Exception:
        if error.upstream_status == 404:
            return NotFoundError(f"Stock {symbol} not found")
        return error

    def _quote_from_chart(self, payload: dict, yahoo_symbol: str, market: str) -> Quote:
        meta = chart_meta(payload)
        price = meta.get("regularMarketPrice") if meta else None
        if not isinstance(price, (int, float)):
            raise NotFoundError(f"No quote data for {yahoo_symbol}")

        previous = meta.get("chartPreviousClose") or meta.get("previousClose")
        if isinstance(previous, (int, float)) and previous:
            change = price - previous
            change_percent = change / previous * 100
        else:
            change = 0.0
            change_percent = 0.0

        return Quote(
            symbol=meta.get("symbol") or yahoo_symbol,
            name=meta.get("longName") or meta.get("shortName") or yahoo_symbol,
            price=round_2_decimals(price),
            change=round_2_decimals(change),
            change_percent=round_2_decimals(change_percent),
            volume=int(meta.get("regularMarketVolume") or 0),
            market_cap=None,
            currency=meta.get("currency") or default_currency(market),
            exchange=meta.get("exchangeName") or meta.get("fullExchangeName") or "Unknown",
            country=market,
            sector=None,
            last_updated=utc_now_iso(),
        )

    # SEARCH -----------------------------------------------------------------------------------

    def search(self, query: str, market: Optional[str] = None, limit: int = 30) -> SearchResponse:
        query = (query or "").strip()
        if not query:
            raise ValidationError("Query is required")
        market = normalize_market(market)
        limit = max(1, min(limit, MAX_SEARCH_LIMIT))

        raw = self._yahoo.search(query, limit)
        mapped = [
            _map_search_quote(q)
            for q in raw
            if q.get("symbol") and (q.get("shortname") or q.get("longname") or q.get("name"))
        ]
        filtered = [r for r in mapped if r.market == market] if market else mapped

        return SearchResponse(
            query=query,
            market=market or "all",
            results=_dedupe_by_symbol(filtered)[:limit],
            total=len(filtered),
        )

    # HISTORY ----------------------------------------------------------------------------------

    def get_history(
        self,
        symbol: str,
        market: Optional[str] = None,
        period: HistoryPeriod = HistoryPeriod.SIX_MONTHS,
        interval: HistoryInterval = HistoryInterval.ONE_DAY,
    ) -> HistoryResponse:
        market = normalize_market(market)
        yahoo_symbol = to_yahoo_symbol(symbol, market)
        frame = self._history_loader(yahoo_symbol, str(period), str(interval))

        candles = []
        for row in frame_to_records(frame):
            ohlc = [row.get("open"), row.get("high"), row.get("low"), row.get("close")]
            if not all(isinstance(v, (int, float)) for v in ohlc):
                continue
            candles.append({
                "time": row.get("date"),
                "open": row["open"],
                "high": row["high"],
                "low": row["low"],
                "close": row["close"],
                "volume": int(row.get("volume") or 0),
            })

        if not candles:
            raise NotFoundError(f"No history available for {yahoo_symbol}")

        return HistoryResponse(
            symbol=yahoo_symbol,
            market=market,
            period=str(period),
            interval=str(interval),
            candles=candles,
        )


def _map_search_quote(q: dict) -> SearchResult:
    symbol = q["symbol"]
    exchange = q.get("exchDisp") or q.get("exchange") or ""
    market = infer_market(symbol, exchange)
    return SearchResult(
        symbol=symbol,
        name=q.get("shortname") or q.get("longname") or q.get("name") or symbol,
        market=market,
        currency=q.get("currency") or default_currency(market),
        exchange=exchange or None,
    )


def _dedupe_by_symbol(results: list[SearchResult]) -> list[SearchResult]:
    seen: set[str] = set()
    unique = []
    for result in results:
        if result.symbol not in seen:
            seen.add(result.symbol)
            unique.append(result)
    return unique


def get_quote_provider() -> Iterator[QuoteProvider]:
    """Request-scoped provider; the HTTP client is closed when the request ends."""
    settings = get_settings()
    with httpx.Client(timeout=settings.yahoo_timeout_seconds) as http:
        yield QuoteProvider(YahooFinanceClient(http))


# MARKETS ------------------------------------------------------------------------------------

def list_markets() -> list[MarketInfo]:
    return [
        MarketInfo(code=m.code, name=m.name, currency=m.currency, exchanges=list(m.exchanges))
        for m in MARKETS.values()
    ]


def get_popular_stocks(market: Optional[str]) -> list[PopularStock]:
    code = normalize_market(market) or "US"
    return [PopularStock(**s) for s in POPULAR_STOCKS.get(code, POPULAR_STOCKS["US"])]


def search_popular_stocks(query: Optional[str], limit: int = 20) -> LocalSearchResponse:
    """Case-insensitive substring match on symbol or name across the curated per-market lists."""
    query = (query or "").strip()
    if not query:
        raise ValidationError("Query parameter is required")
    limit = max(1, min(limit, MAX_SEARCH_LIMIT))
    needle = query.lower()

    results = [
        LocalSearchResult(**stock, market=code, currency=default_currency(code))
        for code, stocks in POPULAR_STOCKS.items()
        for stock in stocks
        if needle in stock["symbol"].lower() or needle in stock["name"].lower()
    ][:limit]
    return LocalSearchResponse(query=query, results=results, total=len(results))


def get_index_constituents(index: str) -> IndexListing:
    config = INDICES.get(index.lower())
    if config is None:
        raise NotFoundError(f"Unknown index: {index}")

    stocks = []
    for symbol in config.symbols:
        name, sector = INDEX_CONSTITUENT_DETAILS.get(symbol, (symbol, "Unknown"))
        stocks.append(PopularStock(symbol=symbol, name=name, sector=sector))
    return IndexListing(
        index=config.name,
        market="IN",
        currency=default_currency("IN"),
        stocks=stocks,
        total=len(stocks),
        description=config.description,
    )


def _parse_hhmm(value: str) -> dtime:
    hours, minutes = value.split(":")
    return dtime(int(hours), int(minutes))


def get_market_status(market: str, now: Optional[datetime] = None) -> MarketStatus:
    """
    Whether `market` is trading at `now` (defaults to the current time).

    Weekday sessions only; exchange holidays are not modelled.
    """
    code = normalize_market(market)
    config = MARKETS.get(code or "")
    if config is None:
        raise ValidationError(f"Unsupported market: {market}")

    tz = ZoneInfo(config.timezone)
    local_now = (now or datetime.now(tz)).astimezone(tz)
    open_at, close_at = _parse_hhmm(config.open_time), _parse_hhmm(config.close_time)

    is_trading_day = local_now.weekday() < 5
    is_open = is_trading_day and open_at <= local_now.time() < close_at

    next_open = None
    for days_ahead in range(0, 8):
        day = (local_now + timedelta(days=days_ahead)).date()
        candidate = datetime.combine(day, open_at, tzinfo=tz)
        if day.weekday() < 5 and candidate > local_now:
            next_open = candidate
            break

    next_close = datetime.combine(local_now.date(), close_at, tzinfo=tz) if is_open else None

    return MarketStatus(
        country=config.code,
        currency=config.currency,
        exchange=config.exchanges[0],
        timezone=config.timezone,
        is_open=is_open,
        market_status="open" if is_open else "closed",
        current_time=local_now.isoformat(),
        next_open=next_open.isoformat() if next_open else None,
        next_close=next_close.isoformat() if next_close else None,
        trading_hours={"open": config.open_time, "close": config.close_time, "days": WEEKDAYS},
    )
