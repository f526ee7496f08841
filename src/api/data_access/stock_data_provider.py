from __future__ import annotations

import logging
from typing import Any, Optional

import httpx
import pandas as pd
import yfinance as yf

from src.api.errors import UpstreamError

logger = logging.getLogger("stockwatch.data_access.yahoo")

CHART_URL = "https://query1.finance.yahoo.com/v8/finance/chart/{symbol}"
SEARCH_URL = "https://query2.finance.yahoo.com/v1/finance/search"

# Yahoo rejects requests without a browser-ish user agent.
DEFAULT_HEADERS = {"User-Agent": "Mozilla/5.0 (compatible; stockwatch/1.0)"}


class YahooFinanceClient:
    """Thin wrapper over Yahoo's public chart and search endpoints."""

    def __init__(self, http: httpx.Client) -> None:
        self._http = http

    def _get(self, url: str, params: dict[str, Any]) -> dict:
        try:
            response = self._http.get(url, params=params, headers=DEFAULT_HEADERS)
        except httpx.RequestError as e:
            logger.warning("Yahoo request to %s failed: %s", url, e)
            raise UpstreamError("Market data provider is unreachable", status_code=503)

        if response.status_code != 200:
            raise UpstreamError(
                f"Market data provider returned HTTP {response.status_code}",
                upstream_status=response.status_code,
            )
        try:
            return response.json()
        except ValueError:
            logger.warning("Yahoo returned a non-JSON body for %s", url)
            raise UpstreamError("Market data provider returned an invalid response")

    def fetch_chart(self, symbol: str, range_: str = "1d", interval: str = "1d") -> dict:
        return self._get(CHART_URL.format(symbol=symbol), {"range": range_, "interval": interval})

    def search(self, query: str, count: int) -> list[dict]:
        data = self._get(
            SEARCH_URL,
            {
                "q": query,
                "quotesCount": count,
                "newsCount": 0,
                "enableFuzzyQuery": "true",
                "lang": "en-US",
                "quotesQueryId": "tss_match_phrase_query",
            },
        )
        quotes = data.get("quotes")
        return quotes if isinstance(quotes, list) else []


def fetch_history(symbol: str, period: str, interval: str) -> pd.DataFrame:
    """Price history via yfinance with lowercase OHLCV column names."""
    try:
        history = yf.Ticker(symbol).history(period=period, interval=interval)
    except Exception as e:
        logger.exception("yfinance history failed for %s", symbol)
        raise UpstreamError(f"Failed to fetch history for {symbol}") from e

    history = history.reset_index()  # Date/Datetime index into a column
    return history.rename(columns={
        "Date": "date",
        "Datetime": "date",
        "Open": "open",
        "High": "high",
        "Low": "low",
        "Close": "close",
        "Volume": "volume",
    })


def chart_meta(payload: dict) -> Optional[dict]:
    result = (payload.get("chart") or {}).get("result") or []
    if not result:
        return None
    return result[0].get("meta") or None
