from __future__ import annotations

import httpx
import pytest


def test_exchange_route_serves_mock_table(client) -> None:
    response = client.get("/api/stock/nse", params={"symbol": "reliance"})

    assert response.status_code == 200
    quote = response.json()
    assert quote["symbol"] == "RELIANCE"
    assert quote["currency"] == "INR"
    assert quote["exchange"] == "NSE"
    assert quote["changePercent"] == 0.51
    assert "lastUpdated" in quote


def test_bse_route_queries_bse_listing_for_live_symbols(client, yahoo_handler, chart) -> None:
    requested = []

    def handler(request: httpx.Request) -> httpx.Response:
        symbol = request.url.path.rsplit("/", 1)[-1]
        requested.append(symbol)
        return httpx.Response(200, json=chart(symbol, 2450.0, previous_close=2400.0, currency="INR", exchange="BSE"))

    yahoo_handler["handler"] = handler

    response = client.get("/api/stock/bse", params={"symbol": "RELIANCE"})

    assert response.status_code == 200
    assert requested == ["RELIANCE.BO"]
    assert response.json()["symbol"] == "RELIANCE.BO"


@pytest.mark.parametrize(("code", "name"), [("500180", "HDFC Bank Ltd"), ("532174", "ICICI Bank Ltd")])
def test_bse_bank_codes_come_from_mock_table(client, code: str, name: str) -> None:
    response = client.get("/api/stock/bse", params={"symbol": code})

    assert response.status_code == 200
    quote = response.json()
    assert quote["name"] == name
    assert quote["exchange"] == "BSE"
    assert quote["currency"] == "INR"


def test_unknown_exchange_is_404(client) -> None:
    response = client.get("/api/stock/moon", params={"symbol": "AAPL"})

    assert response.status_code == 404
    assert response.json()["success"] is False


def test_exchange_route_requires_symbol(client) -> None:
    response = client.get("/api/stock/lse")

    assert response.status_code == 400
    assert response.json()["message"] == "Symbol is required"


def test_unknown_symbol_is_404(client, yahoo_handler) -> None:
    yahoo_handler["handler"] = lambda request: httpx.Response(404)

    response = client.get("/api/stock/quote/NOSUCH")

    assert response.status_code == 404
    assert response.json() == {
        "success": False,
        "error": "Not found",
        "message": "Stock NOSUCH not found",
    }


def test_upstream_failure_is_502(client, yahoo_handler) -> None:
    yahoo_handler["handler"] = lambda request: httpx.Response(500)

    response = client.get("/api/stock/quote/AAPL")

    assert response.status_code == 502
    body = response.json()
    assert body["success"] is False
    assert body["error"] == "Upstream service error"


def test_live_quote_route(client, yahoo_handler, chart) -> None:
    yahoo_handler["handler"] = lambda request: httpx.Response(200, json=chart("MSFT", 420.0, previous_close=400.0))

    response = client.get("/api/stock/quote/msft")

    assert response.status_code == 200
    assert response.json()["price"] == 420.0
    assert response.json()["changePercent"] == 5.0


def test_global_search_route(client, yahoo_handler) -> None:
    yahoo_handler["handler"] = lambda request: httpx.Response(
        200,
        json={"quotes": [{"symbol": "VOD.L", "shortname": "Vodafone", "exchDisp": "LSE"}]},
    )

    response = client.get("/api/stock/global-search", params={"q": "vod", "market": "GB", "limit": 5})

    assert response.status_code == 200
    body = response.json()
    assert body["query"] == "vod"
    assert body["market"] == "GB"
    assert body["total"] == 1
    assert body["results"][0] == {
        "symbol": "VOD.L",
        "name": "Vodafone",
        "market": "GB",
        "currency": "GBP",
        "exchange": "LSE",
    }


def test_global_search_without_query_is_400(client) -> None:
    response = client.get("/api/stock/global-search")

    assert response.status_code == 400
    assert response.json()["message"] == "Query is required"


def test_markets_and_market_status(client) -> None:
    markets = client.get("/api/stock/markets").json()["markets"]
    assert {"code": "JP", "name": "Japan", "currency": "JPY", "exchanges": ["TSE"]} in markets

    single = client.get("/api/stock/market-status", params={"market": "JP"}).json()
    assert single["country"] == "JP"
    assert single["tradingHours"]["open"] == "09:00"

    everything = client.get("/api/stock/market-status").json()
    assert everything["total"] == len(markets)


def test_market_status_unknown_market_is_400(client) -> None:
    assert client.get("/api/stock/market-status", params={"market": "XX"}).status_code == 400


def test_popular_route(client) -> None:
    body = client.get("/api/stock/popular", params={"market": "jp"}).json()

    assert body["market"] == "JP"
    assert body["stocks"][0]["symbol"] == "7203.T"


def test_local_search_matches_symbol_or_name_across_markets(client) -> None:
    response = client.get("/api/stock/search", params={"q": "TATA"})

    assert response.status_code == 200
    body = response.json()
    assert body["query"] == "TATA"
    assert body["total"] == 2
    assert [r["symbol"] for r in body["results"]] == ["TCS.NS", "TATAELXSI.NS"]
    assert body["results"][0]["market"] == "IN"
    assert body["results"][0]["currency"] == "INR"


def test_local_search_applies_limit(client) -> None:
    body = client.get("/api/stock/search", params={"q": "corporation", "limit": 2}).json()

    assert [r["symbol"] for r in body["results"]] == ["7203.T", "6758.T"]
    assert body["total"] == 2


def test_local_search_without_query_is_400(client) -> None:
    response = client.get("/api/stock/search")

    assert response.status_code == 400
    assert response.json()["message"] == "Query parameter is required"


def test_nifty_and_sensex_listings(client) -> None:
    nifty = client.get("/api/stock/nifty").json()
    sensex = client.get("/api/stock/sensex").json()

    assert nifty["index"] == "NIFTY 50"
    assert nifty["total"] == 50
    assert nifty["market"] == "IN"
    assert nifty["currency"] == "INR"
    assert nifty["stocks"][0] == {"symbol": "RELIANCE", "name": "Reliance Industries Ltd", "sector": "Energy"}
    assert {"symbol": "M&M", "name": "M&M", "sector": "Unknown"} in nifty["stocks"]
    assert "National Stock Exchange" in nifty["description"]

    assert sensex["index"] == "SENSEX"
    assert sensex["total"] == 30
    assert sensex["stocks"][-1]["symbol"] == "CIPLA"
    assert "Bombay Stock Exchange" in sensex["description"]
