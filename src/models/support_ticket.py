from src.api.database.database import Base
from sqlalchemy import CheckConstraint, Column, Enum, Index, Integer, String, Text, TIMESTAMP, func

from src.models.watchlist import _utcnow

TICKET_PRIORITY_VALUES = ("low", "medium", "high", "urgent")
TICKET_CATEGORY_VALUES = ("technical", "billing", "feature_request", "bug_report", "general")
TICKET_STATUS_OPEN = "open"
TICKET_STATUS_RESOLVED = "resolved"
TICKET_STATUS_VALUES = ("open", "in_progress", "resolved", "closed")

ticket_priority_enum = Enum(*TICKET_PRIORITY_VALUES, name="ticket_priority", native_enum=False)
ticket_category_enum = Enum(*TICKET_CATEGORY_VALUES, name="ticket_category", native_enum=False)
ticket_status_enum = Enum(*TICKET_STATUS_VALUES, name="ticket_status", native_enum=False)


class SupportTicket(Base):
    __tablename__ = "support_tickets"
    __table_args__ = (
        Index("ix_support_tickets_user_id", "user_id"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="ck_support_tickets_rating"),
    )

    id = Column(Integer, primary_key=True, nullable=False)
    user_id = Column(String, nullable=False)
    user_email = Column(String, nullable=False)
    subject = Column(String, nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(ticket_priority_enum, nullable=False, server_default="medium")
    category = Column(ticket_category_enum, nullable=False, server_default="general")
    status = Column(ticket_status_enum, nullable=False, server_default=TICKET_STATUS_OPEN)
    assigned_to = Column(String, nullable=True)
    resolution = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    feedback = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, default=_utcnow, server_default=func.now())
    updated_at = Column(
        TIMESTAMP(timezone=True),
        nullable=False,
        default=_utcnow,
        onupdate=_utcnow,
        server_default=func.now(),
    )
