from src.api.database.database import Base
from sqlalchemy import Column, Index, Integer, Numeric, String, TIMESTAMP, func

from src.models.watchlist import _utcnow


class PortfolioHolding(Base):
    # A position a user holds. total_value and the gain/loss columns are recomputed on every write.
    __tablename__ = "portfolios"
    __table_args__ = (Index("ix_portfolios_user_id", "user_id"),)

    id = Column(Integer, primary_key=True, nullable=False)
    user_id = Column(String, nullable=False)
    ticker = Column(String, nullable=False)
    name = Column(String, nullable=False)
    shares = Column(Numeric(18, 4), nullable=False)
    avg_price = Column(Numeric(18, 4), nullable=False)
    current_price = Column(Numeric(18, 4), nullable=False)
    total_value = Column(Numeric(32, 4), nullable=False)
    gain_loss = Column(Numeric(32, 4), nullable=False)
    gain_loss_percent = Column(Numeric(18, 4), nullable=False)
    market = Column(String, nullable=False, server_default="US")
    currency = Column(String, nullable=False, server_default="USD")
    exchange = Column(String, nullable=False)
    added_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )
