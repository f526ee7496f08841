from __future__ import annotations

import logging
import math
from contextlib import contextmanager
from decimal import Decimal, InvalidOperation
from typing import Iterator, Optional, Union

from sqlalchemy import UniqueConstraint
from sqlalchemy.exc import IntegrityError, OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from src.api.data_access.market_catalog import normalize_market
from src.api.database.database import Base
from src.api.errors import ConflictError, StorageError, ValidationError
from src.models.stock_alert import ALERT_TYPE_VALUES, StockAlert
from src.models.watchlist import WATCHLIST_UNIQUE_CONSTRAINT, WatchlistItem

logger = logging.getLogger("stockwatch.api.watchlist")

DEFAULT_MARKET = "US"
DEFAULT_CURRENCY = "USD"
MAX_TARGET_VALUE = 10**14


@contextmanager
def storage_errors(session: Session, action: str, conflicts: Optional[dict[str, str]] = None) -> Iterator[None]:
    """
    Roll back and re-raise database failures as StorageError.

    `conflicts` maps unique constraint names to the ConflictError message raised when a
    write violates that constraint. Any other IntegrityError is a StorageError.
    """
    try:
        yield
    except IntegrityError as e:
        session.rollback()
        for constraint, message in (conflicts or {}).items():
            if violates_unique(e, constraint):
                raise ConflictError(message) from e
        logger.exception("Integrity error while trying to %s", action)
        raise StorageError(f"Failed to {action}") from e
    except OperationalError as e:
        session.rollback()
        logger.exception("Database unavailable while trying to %s", action)
        raise StorageError(f"Failed to {action}", status_code=503) from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Database error while trying to %s", action)
        raise StorageError(f"Failed to {action}") from e


def violates_unique(error: IntegrityError, constraint_name: str) -> bool:
    """True when `error` is a unique violation of the named constraint in Base's metadata."""
    diag = getattr(error.orig, "diag", None)
    if getattr(diag, "constraint_name", None) == constraint_name:
        return True
    message = str(error.orig)
    if constraint_name in message:
        return True
    # SQLite reports the constrained columns rather than the constraint name
    for table in Base.metadata.tables.values():
        for constraint in table.constraints:
            if isinstance(constraint, UniqueConstraint) and constraint.name == constraint_name:
                columns = ", ".join(f"{table.name}.{column.name}" for column in constraint.columns)
                return f"UNIQUE constraint failed: {columns}" in message
    return False


def parse_decimal(value: Union[str, int, float, Decimal, None], field: str, max_value: int) -> Decimal:
    """Accept numbers or numeric strings; anything non-finite or too large to store is rejected."""
    if value is None or isinstance(value, bool) or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required")
    try:
        number = float(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(number):
        raise ValidationError(f"{field} must be a finite number")
    try:
        parsed = Decimal(str(value).strip())
    except InvalidOperation:
        parsed = Decimal(str(number))
    if abs(parsed) >= max_value:
        raise ValidationError(f"{field} must be below {max_value:,}")
    return parsed


def parse_target_value(value: Union[str, int, float, Decimal, None]) -> Decimal:
    # target_value is NUMERIC(18, 4)
    return parse_decimal(value, "targetValue", MAX_TARGET_VALUE)


class WatchlistStore:
    """Watchlist and alert persistence, always scoped to the owning user id."""

    def __init__(self, session: Session) -> None:
        self._session = session

    # WATCHLIST -------------------------------------------------------------------------------

    def list_watchlist(self, user_id: str) -> list[WatchlistItem]:
        with storage_errors(self._session, "fetch watchlist"):
            return (
                self._session.query(WatchlistItem)
                .filter(WatchlistItem.user_id == user_id)
                .order_by(WatchlistItem.added_at.desc(), WatchlistItem.id.desc())
                .all()
            )

    def add_watchlist_item(
        self,
        user_id: str,
        ticker: str,
        name: Optional[str] = None,
        market: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> WatchlistItem:
        user_id, ticker = _require(user_id, "userId"), _require(ticker, "ticker").upper()
        market = normalize_market(market) or DEFAULT_MARKET

        item = WatchlistItem(
            user_id=user_id,
            ticker=ticker,
            name=(name or "").strip() or ticker,
            market=market,
            currency=(currency or "").strip().upper() or DEFAULT_CURRENCY,
        )
        # The unique constraint on (user_id, ticker, market) makes this insert the duplicate check.
        conflicts = {WATCHLIST_UNIQUE_CONSTRAINT: f"{ticker} is already in your watchlist"}
        with storage_errors(self._session, "save watchlist item", conflicts):
            self._session.add(item)
            self._session.commit()
        self._session.refresh(item)
        logger.info("Added %s (%s) to watchlist of user %s", ticker, market, user_id)
        return item

    def remove_watchlist_item(self, user_id: str, item_id: int) -> bool:
        """Delete the item if the caller owns it. Unknown or foreign ids are a silent no-op."""
        with storage_errors(self._session, "delete watchlist item"):
            deleted = (
                self._session.query(WatchlistItem)
                .filter(WatchlistItem.id == item_id, WatchlistItem.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self._session.commit()
        if not deleted:
            logger.info("Watchlist item %s not owned by user %s; nothing deleted", item_id, user_id)
        return True

    # ALERTS ----------------------------------------------------------------------------------

    def list_alerts(self, user_id: str) -> list[StockAlert]:
        with storage_errors(self._session, "fetch alerts"):
            return (
                self._session.query(StockAlert)
                .filter(StockAlert.user_id == user_id)
                .order_by(StockAlert.created_at.desc(), StockAlert.id.desc())
                .all()
            )

    def add_alert(
        self,
        user_id: str,
        ticker: str,
        alert_type: str,
        target_value: Union[str, int, float, Decimal, None],
        name: Optional[str] = None,
        market: Optional[str] = None,
        currency: Optional[str] = None,
    ) -> StockAlert:
        user_id, ticker = _require(user_id, "userId"), _require(ticker, "ticker").upper()
        alert_type = _require(alert_type, "alertType")
        if alert_type not in ALERT_TYPE_VALUES:
            raise ValidationError(f"alertType must be one of {', '.join(ALERT_TYPE_VALUES)}")
        value = parse_target_value(target_value)
        market = normalize_market(market) or DEFAULT_MARKET

        alert = StockAlert(
            user_id=user_id,
            ticker=ticker,
            name=(name or "").strip() or ticker,
            alert_type=alert_type,
            target_value=value,
            market=market,
            currency=(currency or "").strip().upper() or DEFAULT_CURRENCY,
            is_active=True,
        )
        with storage_errors(self._session, "create alert"):
            self._session.add(alert)
            self._session.commit()
        self._session.refresh(alert)
        return alert

    def remove_alert(self, user_id: str, alert_id: int) -> bool:
        with storage_errors(self._session, "delete alert"):
            (
                self._session.query(StockAlert)
                .filter(StockAlert.id == alert_id, StockAlert.user_id == user_id)
                .delete(synchronize_session=False)
            )
            self._session.commit()
        return True


def _require(value: Optional[str], field: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field} is required")
    return str(value).strip()
