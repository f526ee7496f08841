from src.api.database.database import Base
from sqlalchemy import Boolean, Column, Enum, Index, Integer, String, Text, TIMESTAMP, false, func

from src.models.watchlist import _utcnow

NOTIFICATION_TICKET_CREATED = "ticket_created"
NOTIFICATION_TICKET_RESOLVED = "ticket_resolved"
NOTIFICATION_ALERT_TRIGGERED = "alert_triggered"
NOTIFICATION_PLAN_UPDATED = "plan_updated"
NOTIFICATION_TYPE_VALUES = (
    NOTIFICATION_TICKET_CREATED,
    NOTIFICATION_TICKET_RESOLVED,
    NOTIFICATION_ALERT_TRIGGERED,
    NOTIFICATION_PLAN_UPDATED,
)

notification_type_enum = Enum(
    *NOTIFICATION_TYPE_VALUES,
    name="notification_type",
    native_enum=False,
)


class Notification(Base):
    __tablename__ = "notifications"
    __table_args__ = (Index("ix_notifications_user_id", "user_id"),)

    id = Column(Integer, primary_key=True, nullable=False)
    user_id = Column(String, nullable=False)
    type = Column(notification_type_enum, nullable=False)
    title = Column(String, nullable=False)
    message = Column(Text, nullable=False)
    link = Column(String, nullable=True)
    read = Column(Boolean, nullable=False, default=False, server_default=false())
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
