"""Support ticket and notification services."""

import logging
from datetime import datetime, UTC
from typing import Any, Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import Notification, SupportMessage, SupportTicket
from crowdvest.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

SENDER_TYPES = ("user", "admin")
PRIORITIES = ("low", "medium", "high", "urgent")


def _check_party(party_type: str) -> None:
    if party_type not in SENDER_TYPES:
        raise ValidationError(
            f"Invalid party '{party_type}'. Expected one of: {', '.join(SENDER_TYPES)}"
        )


class SupportService:
    """Service for support tickets.

    Every ticket tracks how many messages each side has not read yet: a
    message from the user counts against the admin side and vice versa.
    """

    def __init__(self, db: Database):
        """Initialize support service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require_ticket(self, ticket_id: int) -> SupportTicket:
        ticket = self.db.get_support_ticket(ticket_id)
        if ticket is None:
            raise NotFoundError(errors.not_found("Support ticket", ticket_id))
        return ticket

    def open_ticket(
        self,
        user_id: int,
        subject: str,
        body: Optional[str] = None,
        category: Optional[str] = None,
        priority: str = "medium",
    ) -> int:
        """Open a ticket, optionally with the user's first message.

        Returns:
            Ticket ID

        Raises:
            ValidationError: If the subject is empty or the priority unknown
        """
        if not subject or not subject.strip():
            raise ValidationError("Ticket subject is required")
        if priority not in PRIORITIES:
            raise ValidationError(
                f"Invalid priority '{priority}'. Expected one of: {', '.join(PRIORITIES)}"
            )

        ticket_id = self.db.create_support_ticket(
            user_id=user_id, subject=subject.strip(), category=category, priority=priority
        )
        if body:
            self.db.create_support_message(ticket_id, user_id, "user", body)
        logger.info("User %d opened ticket %d", user_id, ticket_id)
        return ticket_id

    def get_ticket(self, ticket_id: int) -> Optional[SupportTicket]:
        """Get a ticket by ID."""
        return self.db.get_support_ticket(ticket_id)

    def list_messages(self, ticket_id: int) -> list[SupportMessage]:
        """List a ticket's messages in posting order."""
        return self.db.list_support_messages(ticket_id)

    def post_message(self, ticket_id: int, sender_id: int, sender_type: str, body: str) -> int:
        """Post a message; the other party's unread counter goes up by one.

        Raises:
            NotFoundError: If the ticket does not exist
            ValidationError: If the sender type is unknown, the body empty,
                or the ticket closed
        """
        _check_party(sender_type)
        if not body or not body.strip():
            raise ValidationError("Message body is required")
        ticket = self._require_ticket(ticket_id)
        if ticket.status == "closed":
            raise ValidationError(f"Ticket {ticket_id} is closed")
        return self.db.create_support_message(ticket_id, sender_id, sender_type, body)

    def mark_as_read(self, message_id: int) -> bool:
        """Mark one message read. Returns False if it already was."""
        if self.db.get_support_message(message_id) is None:
            raise NotFoundError(errors.not_found("Support message", message_id))
        return self.db.mark_support_message_read(message_id, datetime.now(UTC))

    def mark_ticket_read(self, ticket_id: int, reader_type: str) -> int:
        """Mark everything the other party sent as read by reader_type."""
        _check_party(reader_type)
        self._require_ticket(ticket_id)
        return self.db.mark_ticket_messages_read(ticket_id, reader_type, datetime.now(UTC))

    def delete_message(self, message_id: int) -> None:
        """Delete a message, releasing its unread count if it was unread."""
        if self.db.get_support_message(message_id) is None:
            raise NotFoundError(errors.not_found("Support message", message_id))
        self.db.delete_support_message(message_id)

    def close_ticket(self, ticket_id: int) -> None:
        """Close a ticket."""
        self._require_ticket(ticket_id)
        self.db.close_support_ticket(ticket_id, datetime.now(UTC))
        logger.info("Closed ticket %d", ticket_id)


class NotificationService:
    """Service for in-app notifications."""

    def __init__(self, db: Database):
        self.db = db

    def notify(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        data: Optional[dict[str, Any]] = None,
        action_url: Optional[str] = None,
    ) -> int:
        """Create an unread notification for a user."""
        if not title or not title.strip():
            raise ValidationError("Notification title is required")
        return self.db.create_notification(
            user_id=user_id,
            notification_type=notification_type,
            title=title.strip(),
            message=message,
            data=data,
            action_url=action_url,
        )

    def get_notification(self, notification_id: int) -> Optional[Notification]:
        return self.db.get_notification(notification_id)

    def mark_as_read(self, notification_id: int) -> None:
        self.db.mark_notification_read(notification_id, datetime.now(UTC))

    def mark_all_as_read(self, user_id: int) -> int:
        """Mark every unread notification of a user read. Returns how many changed."""
        return self.db.mark_all_notifications_read(user_id, datetime.now(UTC))

    def unread_count(self, user_id: int) -> int:
        return self.db.count_unread_notifications(user_id)

    def list_unread(self, user_id: int, limit: Optional[int] = None) -> list[Notification]:
        return self.db.list_unread_notifications(user_id, limit=limit)
