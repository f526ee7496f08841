from datetime import datetime, timezone

from src.api.database.database import Base
from sqlalchemy import Column, Integer, String, TIMESTAMP, UniqueConstraint, Index, func


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


WATCHLIST_UNIQUE_CONSTRAINT = "uq_watchlists_user_ticker_market"


class WatchlistItem(Base):
    # One ticker a user follows on one market.
    __tablename__ = "watchlists"
    __table_args__ = (
        UniqueConstraint("user_id", "ticker", "market", name=WATCHLIST_UNIQUE_CONSTRAINT),
        Index("ix_watchlists_user_id", "user_id"),
    )

    id = Column(Integer, primary_key=True, nullable=False)
    user_id = Column(String, nullable=False)
    ticker = Column(String, nullable=False)
    name = Column(String, nullable=False)
    market = Column(String, nullable=False, server_default="US")
    currency = Column(String, nullable=False, server_default="USD")
    added_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
