from datetime import datetime
from typing import List, Literal, Optional

from pydantic import Field

from src.models.watchlist_schemas import CamelModel, RequiredStr

TicketPriority = Literal["low", "medium", "high", "urgent"]
TicketCategory = Literal["technical", "billing", "feature_request", "bug_report", "general"]
TicketStatus = Literal["open", "in_progress", "resolved", "closed"]


class NotificationResponse(CamelModel):
    id: int
    user_id: str
    type: str
    title: str
    message: str
    link: Optional[str]
    read: bool
    created_at: datetime


class NotificationsResponse(CamelModel):
    success: bool = True
    notifications: List[NotificationResponse]
    unread: int


class SupportTicketCreate(CamelModel):
    user_id: Optional[str] = None
    user_email: RequiredStr
    subject: RequiredStr
    description: RequiredStr
    priority: TicketPriority = "medium"
    category: TicketCategory = "general"


class SupportTicketUpdate(CamelModel):
    user_id: Optional[str] = None
    status: Optional[TicketStatus] = None
    resolution: Optional[str] = None
    assigned_to: Optional[str] = None


class SupportTicketRating(CamelModel):
    ticket_id: int
    user_id: Optional[str] = None
    rating: int = Field(ge=1, le=5)
    feedback: Optional[str] = None


class SupportTicketResponse(CamelModel):
    id: int
    user_id: str
    user_email: str
    subject: str
    description: str
    priority: str
    category: str
    status: str
    assigned_to: Optional[str]
    resolution: Optional[str]
    rating: Optional[int]
    feedback: Optional[str]
    created_at: datetime
    updated_at: datetime


class SupportTicketsResponse(CamelModel):
    success: bool = True
    tickets: List[SupportTicketResponse]


class SupportTicketEnvelope(CamelModel):
    success: bool = True
    ticket: SupportTicketResponse


class CreateOrderRequest(CamelModel):
    plan: RequiredStr
    user_id: RequiredStr
    user_email: RequiredStr


class CreateOrderResponse(CamelModel):
    success: bool = True
    order_id: str
    amount: int
    currency: str
    key_id: str
