from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from src.api.auth.auth import get_authenticated_user_id, scope_user
from src.api.database.database import get_db
from src.api.services.support_service import SupportTicketStore
from src.models.support_schemas import (
    SupportTicketCreate,
    SupportTicketEnvelope,
    SupportTicketRating,
    SupportTicketsResponse,
    SupportTicketUpdate,
)

router = APIRouter(prefix="/api/support/tickets", tags=["support"])


def get_ticket_store(db: Session = Depends(get_db)) -> SupportTicketStore:
    return SupportTicketStore(db)


@router.get("", response_model=SupportTicketsResponse)
def list_tickets(
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: SupportTicketStore = Depends(get_ticket_store),
):
    owner = scope_user(auth_user_id, user_id)
    return {"tickets": store.list_for_user(owner)}


@router.post("", response_model=SupportTicketEnvelope, status_code=status.HTTP_201_CREATED)
def create_ticket(
    payload: SupportTicketCreate,
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: SupportTicketStore = Depends(get_ticket_store),
):
    owner = scope_user(auth_user_id, payload.user_id)
    ticket = store.create(
        owner,
        payload.user_email,
        payload.subject,
        payload.description,
        priority=payload.priority,
        category=payload.category,
    )
    return {"ticket": ticket}


@router.put("", response_model=SupportTicketEnvelope)
def rate_ticket(
    payload: SupportTicketRating,
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: SupportTicketStore = Depends(get_ticket_store),
):
    """Attach a 1-5 rating and optional feedback to a ticket."""
    owner = scope_user(auth_user_id, payload.user_id)
    ticket = store.rate(payload.ticket_id, owner, payload.rating, payload.feedback)
    return {"ticket": ticket}


@router.get("/{ticket_id}", response_model=SupportTicketEnvelope)
def get_ticket(
    ticket_id: int,
    user_id: Optional[str] = Query(default=None, alias="userId"),
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: SupportTicketStore = Depends(get_ticket_store),
):
    owner = scope_user(auth_user_id, user_id)
    return {"ticket": store.get(ticket_id, owner)}


@router.patch("/{ticket_id}", response_model=SupportTicketEnvelope)
def update_ticket(
    ticket_id: int,
    payload: SupportTicketUpdate,
    auth_user_id: Optional[str] = Depends(get_authenticated_user_id),
    store: SupportTicketStore = Depends(get_ticket_store),
):
    """Status/resolution/assignee changes. Moving a ticket to resolved notifies its owner."""
    owner = scope_user(auth_user_id, payload.user_id)
    ticket = store.update(
        ticket_id,
        user_id=owner,
        status=payload.status,
        resolution=payload.resolution,
        assigned_to=payload.assigned_to,
    )
    return {"ticket": ticket}
