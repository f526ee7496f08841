from src.api.database.database import Base
from sqlalchemy import Boolean, Column, Enum, Index, Integer, Numeric, String, TIMESTAMP, func, true

from src.models.watchlist import _utcnow

ALERT_TYPE_PRICE_ABOVE = "price_above"
ALERT_TYPE_PRICE_BELOW = "price_below"
ALERT_TYPE_VOLUME_SPIKE = "volume_spike"
ALERT_TYPE_EARNINGS = "earnings"
ALERT_TYPE_NEWS = "news"
ALERT_TYPE_VALUES = (
    ALERT_TYPE_PRICE_ABOVE,
    ALERT_TYPE_PRICE_BELOW,
    ALERT_TYPE_VOLUME_SPIKE,
    ALERT_TYPE_EARNINGS,
    ALERT_TYPE_NEWS,
)
PRICE_ALERT_TYPES = (ALERT_TYPE_PRICE_ABOVE, ALERT_TYPE_PRICE_BELOW)

alert_type_enum = Enum(
    *ALERT_TYPE_VALUES,
    name="stock_alert_type",
    native_enum=False,
)


class StockAlert(Base):
    # Threshold alert on a ticker. Repeated alerts on the same ticker are allowed.
    __tablename__ = "stock_alerts"
    __table_args__ = (Index("ix_stock_alerts_user_id", "user_id"),)

    id = Column(Integer, primary_key=True, nullable=False)
    user_id = Column(String, nullable=False)
    ticker = Column(String, nullable=False)
    name = Column(String, nullable=False)
    alert_type = Column(alert_type_enum, nullable=False)
    target_value = Column(Numeric(18, 4), nullable=False)
    market = Column(String, nullable=False, server_default="US")
    currency = Column(String, nullable=False, server_default="USD")
    is_active = Column(Boolean, nullable=False, default=True, server_default=true())
    triggered_at = Column(TIMESTAMP(timezone=True), nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
