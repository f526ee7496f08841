from __future__ import annotations

import logging
from typing import Optional

from sqlalchemy.orm import Session

from src.api.errors import NotFoundError, ValidationError
from src.api.services.watchlist_service import storage_errors
from src.models.notification import (
    NOTIFICATION_TICKET_CREATED,
    NOTIFICATION_TICKET_RESOLVED,
    Notification,
)
from src.models.support_ticket import TICKET_STATUS_OPEN, TICKET_STATUS_RESOLVED, SupportTicket

logger = logging.getLogger("stockwatch.api.support")


class NotificationStore:
    def __init__(self, session: Session) -> None:
        self._session = session

    def list_for_user(self, user_id: str) -> list[Notification]:
        with storage_errors(self._session, "fetch notifications"):
            return (
                self._session.query(Notification)
                .filter(Notification.user_id == user_id)
                .order_by(Notification.created_at.desc(), Notification.id.desc())
                .all()
            )

    def add(
        self,
        user_id: str,
        type_: str,
        title: str,
        message: str,
        link: Optional[str] = None,
        commit: bool = True,
    ) -> Notification:
        notification = Notification(
            user_id=user_id,
            type=type_,
            title=title,
            message=message,
            link=link,
            read=False,
        )
        with storage_errors(self._session, "create notification"):
            self._session.add(notification)
            if commit:
                self._session.commit()
        return notification

    def mark_read(self, user_id: str, notification_id: int) -> Notification:
        with storage_errors(self._session, "update notification"):
            notification = (
                self._session.query(Notification)
                .filter(Notification.id == notification_id, Notification.user_id == user_id)
                .first()
            )
            if notification is None:
                raise NotFoundError("Notification not found")
            notification.read = True
            self._session.commit()
            self._session.refresh(notification)
        return notification


class SupportTicketStore:
    """Support tickets. Creating or resolving a ticket also notifies its owner."""

    def __init__(self, session: Session) -> None:
        self._session = session
        self._notifications = NotificationStore(session)

    def list_for_user(self, user_id: str) -> list[SupportTicket]:
        with storage_errors(self._session, "fetch tickets"):
            return (
                self._session.query(SupportTicket)
                .filter(SupportTicket.user_id == user_id)
                .order_by(SupportTicket.created_at.desc(), SupportTicket.id.desc())
                .all()
            )

    def get(self, ticket_id: int, user_id: str) -> SupportTicket:
        with storage_errors(self._session, "fetch ticket"):
            ticket = (
                self._session.query(SupportTicket)
                .filter(SupportTicket.id == ticket_id, SupportTicket.user_id == user_id)
                .first()
            )
        if ticket is None:
            raise NotFoundError("Ticket not found")
        return ticket

    def create(
        self,
        user_id: str,
        user_email: str,
        subject: str,
        description: str,
        priority: str = "medium",
        category: str = "general",
    ) -> SupportTicket:
        ticket = SupportTicket(
            user_id=user_id,
            user_email=user_email,
            subject=subject,
            description=description,
            priority=priority,
            category=category,
            status=TICKET_STATUS_OPEN,
        )
        with storage_errors(self._session, "create ticket"):
            self._session.add(ticket)
            self._session.flush()
            self._notifications.add(
                user_id,
                NOTIFICATION_TICKET_CREATED,
                "Support ticket created",
                f"We received your ticket #{ticket.id}: {subject}",
                commit=False,
            )
            self._session.commit()
        self._session.refresh(ticket)
        logger.info("Ticket %s created for user %s", ticket.id, user_id)
        return ticket

    def update(
        self,
        ticket_id: int,
        user_id: str,
        status: Optional[str] = None,
        resolution: Optional[str] = None,
        assigned_to: Optional[str] = None,
    ) -> SupportTicket:
        ticket = self.get(ticket_id, user_id)
        resolved_now = status == TICKET_STATUS_RESOLVED and ticket.status != TICKET_STATUS_RESOLVED

        with storage_errors(self._session, "update ticket"):
            if status:
                ticket.status = status
            if resolution:
                ticket.resolution = resolution
            if assigned_to:
                ticket.assigned_to = assigned_to
            if resolved_now:
                self._notifications.add(
                    ticket.user_id,
                    NOTIFICATION_TICKET_RESOLVED,
                    "Support ticket resolved",
                    f"Your ticket #{ticket.id} ({ticket.subject}) has been resolved",
                    commit=False,
                )
            self._session.commit()
            self._session.refresh(ticket)
        return ticket

    def rate(
        self,
        ticket_id: int,
        user_id: str,
        rating: int,
        feedback: Optional[str] = None,
    ) -> SupportTicket:
        if rating < 1 or rating > 5:
            raise ValidationError("Rating must be between 1 and 5")
        ticket = self.get(ticket_id, user_id)
        with storage_errors(self._session, "update ticket rating"):
            ticket.rating = rating
            ticket.feedback = feedback or None
            self._session.commit()
            self._session.refresh(ticket)
        return ticket
