from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]


@dataclass(frozen=True)
class MarketConfig:
    code: str
    name: str
    currency: str
    exchanges: tuple[str, ...]
    timezone: str
    open_time: str
    close_time: str
    yahoo_suffix: str


MARKETS: dict[str, MarketConfig] = {
    "US": MarketConfig("US", "United States", "USD", ("NYSE", "NASDAQ"), "America/New_York", "09:30", "16:00", ""),
    "IN": MarketConfig("IN", "India", "INR", ("NSE", "BSE"), "Asia/Kolkata", "09:15", "15:30", ".NS"),
    "GB": MarketConfig("GB", "United Kingdom", "GBP", ("LSE",), "Europe/London", "08:00", "16:30", ".L"),
    "JP": MarketConfig("JP", "Japan", "JPY", ("TSE",), "Asia/Tokyo", "09:00", "15:00", ".T"),
    "AU": MarketConfig("AU", "Australia", "AUD", ("ASX",), "Australia/Sydney", "10:00", "16:00", ".AX"),
    "CA": MarketConfig("CA", "Canada", "CAD", ("TSX",), "America/Toronto", "09:30", "16:00", ".TO"),
    "DE": MarketConfig("DE", "Germany", "EUR", ("XETRA",), "Europe/Berlin", "09:00", "17:30", ".DE"),
    "FR": MarketConfig("FR", "France", "EUR", ("EPA",), "Europe/Paris", "09:00", "17:30", ".PA"),
}

# Route path segment -> (market, exchange)
EXCHANGES: dict[str, tuple[str, str]] = {
    "nse": ("IN", "NSE"),
    "bse": ("IN", "BSE"),
    "lse": ("GB", "LSE"),
    "tse": ("JP", "TSE"),
    "nyse": ("US", "NYSE"),
    "nasdaq": ("US", "NASDAQ"),
}

INDIA_NSE_SUFFIX = ".NS"
INDIA_BSE_SUFFIX = ".BO"

POPULAR_STOCKS: dict[str, list[dict[str, str]]] = {
    "IN": [
        {"symbol": "RELIANCE.NS", "name": "Reliance Industries Ltd", "sector": "Energy"},
        {"symbol": "TCS.NS", "name": "Tata Consultancy Services Ltd", "sector": "Technology"},
        {"symbol": "INFY.NS", "name": "Infosys Ltd", "sector": "Technology"},
        {"symbol": "HDFCBANK.NS", "name": "HDFC Bank Ltd", "sector": "Financial Services"},
        {"symbol": "ICICIBANK.NS", "name": "ICICI Bank Ltd", "sector": "Financial Services"},
        {"symbol": "BEL.NS", "name": "Bharat Electronics Ltd", "sector": "Defence"},
        {"symbol": "HAL.NS", "name": "Hindustan Aeronautics Ltd", "sector": "Defence"},
        {"symbol": "SUNPHARMA.NS", "name": "Sun Pharmaceutical Industries", "sector": "Pharma"},
        {"symbol": "CIPLA.NS", "name": "Cipla Ltd", "sector": "Pharma"},
        {"symbol": "TATAELXSI.NS", "name": "Tata Elxsi Ltd", "sector": "Technology"},
    ],
    "GB": [
        {"symbol": "VOD.L", "name": "Vodafone Group PLC", "sector": "Telecom"},
        {"symbol": "BP.L", "name": "BP PLC", "sector": "Energy"},
        {"symbol": "HSBA.L", "name": "HSBC Holdings PLC", "sector": "Financials"},
    ],
    "JP": [
        {"symbol": "7203.T", "name": "Toyota Motor Corporation", "sector": "Automotive"},
        {"symbol": "6758.T", "name": "Sony Group Corporation", "sector": "Technology"},
    ],
    "US": [
        {"symbol": "AAPL", "name": "Apple Inc.", "sector": "Technology"},
        {"symbol": "MSFT", "name": "Microsoft Corporation", "sector": "Technology"},
        {"symbol": "GOOGL", "name": "Alphabet Inc.", "sector": "Technology"},
        {"symbol": "NVDA", "name": "NVIDIA Corporation", "sector": "Technology"},
    ],
}

# Exchange recorded on a portfolio holding when the client does not name one
DEFAULT_EXCHANGES = {"US": "NASDAQ", "IN": "NSE", "GB": "LSE", "JP": "TSE"}

NIFTY_50_SYMBOLS = (
    "RELIANCE", "TCS", "HDFCBANK", "INFY", "HINDUNILVR", "ITC", "SBIN", "BHARTIARTL", "KOTAKBANK", "LT",
    "ASIANPAINT", "MARUTI", "AXISBANK", "NESTLEIND", "POWERGRID", "TITAN", "ULTRACEMCO", "WIPRO", "ONGC", "NTPC",
    "TECHM", "SUNPHARMA", "TATAMOTORS", "COALINDIA", "JSWSTEEL", "BAJFINANCE", "HCLTECH", "DRREDDY", "GRASIM", "CIPLA",
    "EICHERMOT", "HEROMOTOCO", "ADANIPORTS", "BAJAJFINSV", "BRITANNIA", "DIVISLAB", "HDFCLIFE", "ICICIBANK",
    "INDUSINDBK", "M&M", "SHREECEM", "TATACONSUM", "TATASTEEL", "UPL", "APOLLOHOSP", "BAJAJ-AUTO", "BPCL",
    "HINDALCO", "SBILIFE", "TATAPOWER",
)
SENSEX_SYMBOLS = NIFTY_50_SYMBOLS[:30]

# symbol -> (company name, sector); constituents not listed here fall back to the bare symbol
INDEX_CONSTITUENT_DETAILS = {
    "RELIANCE": ("Reliance Industries Ltd", "Energy"),
    "TCS": ("Tata Consultancy Services Ltd", "Technology"),
    "HDFCBANK": ("HDFC Bank Ltd", "Financial Services"),
    "INFY": ("Infosys Ltd", "Technology"),
    "HINDUNILVR": ("Hindustan Unilever Ltd", "Consumer Goods"),
    "ITC": ("ITC Ltd", "Consumer Goods"),
    "SBIN": ("State Bank of India", "Financial Services"),
    "BHARTIARTL": ("Bharti Airtel Ltd", "Telecommunications"),
    "KOTAKBANK": ("Kotak Mahindra Bank Ltd", "Financial Services"),
    "LT": ("Larsen & Toubro Ltd", "Industrials"),
}


@dataclass(frozen=True)
class IndexConfig:
    name: str
    symbols: tuple[str, ...]
    description: str


INDICES: dict[str, IndexConfig] = {
    "nifty": IndexConfig(
        name="NIFTY 50",
        symbols=NIFTY_50_SYMBOLS,
        description=(
            "Nifty 50 is a benchmark Indian stock market index representing 50 of the largest "
            "companies listed on the National Stock Exchange of India."
        ),
    ),
    "sensex": IndexConfig(
        name="SENSEX",
        symbols=SENSEX_SYMBOLS,
        description=(
            "SENSEX is a stock market index of 30 well-established and financially sound "
            "companies listed on Bombay Stock Exchange."
        ),
    ),
}


def normalize_market(market: Optional[str]) -> Optional[str]:
    """Uppercase a market code, mapping the UK alias to GB. Empty input gives None."""
    if not market or not market.strip():
        return None
    code = market.strip().upper()
    return "GB" if code == "UK" else code


def default_currency(market: Optional[str]) -> str:
    config = MARKETS.get(normalize_market(market) or "US")
    return config.currency if config else "USD"


def has_suffix(symbol: str) -> bool:
    return "." in symbol


def to_yahoo_symbol(symbol: str, market: Optional[str], exchange: Optional[str] = None) -> str:
    """
    Map a bare ticker to Yahoo's exchange-suffixed form.

    Symbols that already carry a suffix are returned as-is. An explicit NSE or BSE
    exchange picks the Indian suffix. Without one, Indian numeric codes are BSE
    listings and get ".BO"; everything else in India defaults to NSE.
    """
    upper = symbol.strip().upper()
    market = normalize_market(market)
    if not market or has_suffix(upper):
        return upper
    if market == "IN" and exchange:
        if exchange.upper() == "BSE":
            return f"{upper}{INDIA_BSE_SUFFIX}"
        if exchange.upper() == "NSE":
            return f"{upper}{INDIA_NSE_SUFFIX}"
    if market == "IN" and upper.isdigit():
        return f"{upper}{INDIA_BSE_SUFFIX}"
    config = MARKETS.get(market)
    return f"{upper}{config.yahoo_suffix if config else ''}"


def alternate_india_symbol(yahoo_symbol: str) -> str:
    base = strip_suffix(yahoo_symbol)
    if yahoo_symbol.endswith(INDIA_BSE_SUFFIX):
        return f"{base}{INDIA_NSE_SUFFIX}"
    return f"{base}{INDIA_BSE_SUFFIX}"


def strip_suffix(symbol: str) -> str:
    return symbol.split(".", 1)[0] if has_suffix(symbol) else symbol


def infer_market(symbol: str, exchange_hint: str = "") -> str:
    upper = symbol.upper()
    if upper.endswith(INDIA_NSE_SUFFIX) or upper.endswith(INDIA_BSE_SUFFIX) or upper.isdigit():
        return "IN"
    for code, config in MARKETS.items():
        if config.yahoo_suffix and upper.endswith(config.yahoo_suffix):
            return code
    hint = exchange_hint.upper()
    if "NSE" in hint or "BSE" in hint:
        return "IN"
    if "LSE" in hint or "LONDON" in hint:
        return "GB"
    if "TSE" in hint or "TOKYO" in hint:
        return "JP"
    return "US"


def default_exchange(market: Optional[str]) -> str:
    return DEFAULT_EXCHANGES.get(normalize_market(market) or "US", "Unknown")
