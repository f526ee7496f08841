"""Static regional quote tables served ahead of the live Yahoo lookup."""

def _row(symbol, name, price, change, change_percent, volume, market_cap, currency, exchange, country, sector):
    return {
        "symbol": symbol,
        "name": name,
        "price": price,
        "change": change,
        "change_percent": change_percent,
        "volume": volume,
        "market_cap": market_cap,
        "currency": currency,
        "exchange": exchange,
        "country": country,
        "sector": sector,
    }


NSE_QUOTES = {
    "RELIANCE": _row("RELIANCE", "Reliance Industries Ltd", 2456.75, 12.50, 0.51, 1250000, 16600000000000, "INR", "NSE", "IN", "Energy"),
    "TCS": _row("TCS", "Tata Consultancy Services Ltd", 3456.80, -25.30, -0.73, 850000, 12500000000000, "INR", "NSE", "IN", "Technology"),
    "INFY": _row("INFY", "Infosys Ltd", 1523.45, 8.75, 0.58, 2100000, 6400000000000, "INR", "NSE", "IN", "Technology"),
    "HDFCBANK": _row("HDFCBANK", "HDFC Bank Ltd", 1689.20, 15.80, 0.94, 1800000, 12800000000000, "INR", "NSE", "IN", "Financial Services"),
    "ICICIBANK": _row("ICICIBANK", "ICICI Bank Ltd", 987.65, -5.25, -0.53, 2200000, 6800000000000, "INR", "NSE", "IN", "Financial Services"),
}

BSE_QUOTES = {
    "500325": _row("500325", "Reliance Industries Ltd", 2456.75, 12.50, 0.51, 1250000, 16600000000000, "INR", "BSE", "IN", "Energy"),
    "532540": _row("532540", "Tata Consultancy Services Ltd", 3456.80, -25.30, -0.73, 850000, 12500000000000, "INR", "BSE", "IN", "Technology"),
    "500209": _row("500209", "Infosys Ltd", 1523.45, 8.75, 0.58, 2100000, 6400000000000, "INR", "BSE", "IN", "Technology"),
    "500180": _row("500180", "HDFC Bank Ltd", 1689.20, 15.80, 0.94, 1800000, 12800000000000, "INR", "BSE", "IN", "Financial Services"),
    "532174": _row("532174", "ICICI Bank Ltd", 987.65, -5.25, -0.53, 2200000, 6800000000000, "INR", "BSE", "IN", "Financial Services"),
}

LSE_QUOTES = {
    "TSCO": _row("TSCO", "Tesco PLC", 245.75, 1.50, 0.61, 1250000, 16600000000, "GBP", "LSE", "GB", "Retail"),
    "VOD": _row("VOD", "Vodafone Group PLC", 89.80, -2.30, -2.50, 850000, 25000000000, "GBP", "LSE", "GB", "Telecommunications"),
    "BP": _row("BP", "BP PLC", 456.45, 3.75, 0.83, 2100000, 64000000000, "GBP", "LSE", "GB", "Energy"),
}

TSE_QUOTES = {
    "7203": _row("7203", "Toyota Motor Corporation", 2456.75, 12.50, 0.51, 1250000, 16600000000000, "JPY", "TSE", "JP", "Automotive"),
    "6758": _row("6758", "Sony Group Corporation", 12345.80, -25.30, -0.73, 850000, 12500000000000, "JPY", "TSE", "JP", "Technology"),
    "9984": _row("9984", "SoftBank Group Corp", 5678.45, 8.75, 0.58, 2100000, 6400000000000, "JPY", "TSE", "JP", "Technology"),
}

TABLES_BY_EXCHANGE = {
    "NSE": NSE_QUOTES,
    "BSE": BSE_QUOTES,
    "LSE": LSE_QUOTES,
    "TSE": TSE_QUOTES,
}

# Lookup order per market.
EXCHANGES_BY_MARKET = {
    "IN": ("NSE", "BSE"),
    "GB": ("LSE",),
    "JP": ("TSE",),
}
