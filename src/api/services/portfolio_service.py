from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union

from sqlalchemy.orm import Session

from src.api.data_access.market_catalog import default_exchange, normalize_market
from src.api.errors import NotFoundError, ValidationError
from src.api.services.watchlist_service import DEFAULT_CURRENCY, DEFAULT_MARKET, parse_decimal, storage_errors
from src.models.portfolio import PortfolioHolding
from src.utils import round_2_decimals

logger = logging.getLogger("stockwatch.api.portfolio")

Amount = Union[str, int, float, Decimal, None]

# shares and prices are NUMERIC(18, 4)
MAX_AMOUNT = 10**14
PERCENT_PLACES = Decimal("0.0001")


@dataclass(frozen=True)
class Position:
    total_value: Decimal
    gain_loss: Decimal
    gain_loss_percent: Decimal


def compute_position(shares: Decimal, avg_price: Decimal, current_price: Decimal) -> Position:
    """Market value and gain/loss of a holding. With no cost basis the percentage is 0."""
    invested = shares * avg_price
    total_value = shares * current_price
    gain_loss = total_value - invested
    if invested > 0:
        percent = (gain_loss / invested * 100).quantize(PERCENT_PLACES)
    else:
        percent = Decimal("0")
    if abs(percent) >= MAX_AMOUNT:
        raise ValidationError("Gain/loss percentage is too large to store")
    return Position(total_value, gain_loss, percent)


def summarize(holdings: list[PortfolioHolding]) -> dict:
    total_value = sum((Decimal(h.total_value) for h in holdings), Decimal("0"))
    total_invested = sum((Decimal(h.shares) * Decimal(h.avg_price) for h in holdings), Decimal("0"))
    total_gain_loss = total_value - total_invested
    percent = total_gain_loss / total_invested * 100 if total_invested > 0 else Decimal("0")
    return {
        "total_value": round_2_decimals(total_value),
        "total_invested": round_2_decimals(total_invested),
        "total_gain_loss": round_2_decimals(total_gain_loss),
        "total_gain_loss_percent": round_2_decimals(percent),
        "item_count": len(holdings),
    }


class PortfolioStore:
    """Portfolio holdings, scoped to the owning user id like the watchlist."""

    def __init__(self, session: Session) -> None:
        self._session = session

    def list_holdings(self, user_id: str) -> list[PortfolioHolding]:
        with storage_errors(self._session, "fetch portfolio"):
            return (
                self._session.query(PortfolioHolding)
                .filter(PortfolioHolding.user_id == user_id)
                .order_by(PortfolioHolding.added_at.desc(), PortfolioHolding.id.desc())
                .all()
            )

    def add_holding(
        self,
        user_id: str,
        ticker: str,
        shares: Amount,
        avg_price: Amount,
        current_price: Amount,
        name: Optional[str] = None,
        market: Optional[str] = None,
        currency: Optional[str] = None,
        exchange: Optional[str] = None,
    ) -> PortfolioHolding:
        if not (user_id or "").strip() or not (ticker or "").strip():
            raise ValidationError("Missing required fields")
        ticker = ticker.strip().upper()
        shares, avg_price, current_price = _parse_amounts(shares, avg_price, current_price)
        market = normalize_market(market) or DEFAULT_MARKET
        position = compute_position(shares, avg_price, current_price)

        holding = PortfolioHolding(
            user_id=user_id.strip(),
            ticker=ticker,
            name=(name or "").strip() or ticker,
            shares=shares,
            avg_price=avg_price,
            current_price=current_price,
            total_value=position.total_value,
            gain_loss=position.gain_loss,
            gain_loss_percent=position.gain_loss_percent,
            market=market,
            currency=(currency or "").strip().upper() or DEFAULT_CURRENCY,
            exchange=(exchange or "").strip().upper() or default_exchange(market),
        )
        with storage_errors(self._session, "save portfolio item"):
            self._session.add(holding)
            self._session.commit()
        self._session.refresh(holding)
        logger.info("Added %s shares of %s to portfolio of user %s", shares, ticker, user_id)
        return holding

    def update_holding(
        self,
        user_id: str,
        holding_id: int,
        shares: Amount,
        avg_price: Amount,
        current_price: Amount,
    ) -> PortfolioHolding:
        """Replace the position's numbers and recompute its value. Foreign ids are 404."""
        shares, avg_price, current_price = _parse_amounts(shares, avg_price, current_price)
        position = compute_position(shares, avg_price, current_price)

        with storage_errors(self._session, "update portfolio item"):
            holding = (
                self._session.query(PortfolioHolding)
                .filter(PortfolioHolding.id == holding_id, PortfolioHolding.user_id == user_id)
                .first()
            )
            if holding is None:
                raise NotFoundError("Portfolio item not found")
            holding.shares = shares
            holding.avg_price = avg_price
            holding.current_price = current_price
            holding.total_value = position.total_value
            holding.gain_loss = position.gain_loss
            holding.gain_loss_percent = position.gain_loss_percent
            self._session.commit()
            self._session.refresh(holding)
        return holding

    def remove_holding(self, user_id: str, holding_id: int) -> bool:
        """Delete the holding if the caller owns it. Unknown or foreign ids are a silent no-op."""
        with storage_errors(self._session, "delete portfolio item"):
            deleted = (
                self._session.query(PortfolioHolding)
                .filter(PortfolioHolding.id == holding_id, PortfolioHolding.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self._session.commit()
        if not deleted:
            logger.info("Portfolio item %s not owned by user %s; nothing deleted", holding_id, user_id)
        return True


def _parse_amounts(shares: Amount, avg_price: Amount, current_price: Amount) -> tuple[Decimal, Decimal, Decimal]:
    parsed_shares = parse_decimal(shares, "shares", MAX_AMOUNT)
    parsed_avg = parse_decimal(avg_price, "avgPrice", MAX_AMOUNT)
    parsed_current = parse_decimal(current_price, "currentPrice", MAX_AMOUNT)
    if parsed_shares <= 0:
        raise ValidationError("shares must be greater than 0")
    if parsed_avg < 0 or parsed_current < 0:
        raise ValidationError("Prices cannot be negative")
    return parsed_shares, parsed_avg, parsed_current
