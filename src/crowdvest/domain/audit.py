"""Activity log service.

Activity log entries are write-once: they can be created and read, never
changed or removed.
"""

import logging
from datetime import datetime
from typing import Any, Optional

from crowdvest.database.base import Database
from crowdvest.domain.entities import ActivityLog, TargetRef
from crowdvest.domain.errors import ValidationError
from crowdvest.domain.guards import ACTIVITY_LOG

logger = logging.getLogger(__name__)


class ActivityLogService:
    """Service for recording and querying the activity log."""

    def __init__(self, db: Database):
        """Initialize activity log service.

        Args:
            db: Database instance
        """
        self.db = db

    def log(
        self,
        action: str,
        actor_id: Optional[int] = None,
        target: Optional[TargetRef] = None,
        description: Optional[str] = None,
        old_values: Optional[dict[str, Any]] = None,
        new_values: Optional[dict[str, Any]] = None,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> int:
        """Record an action.

        Args:
            action: Action name (e.g., "kyc.approved")
            actor_id: User who performed the action, None for system actions
            target: Optional tagged reference to the affected row
            description: Optional free text
            old_values: Field values before the change
            new_values: Field values after the change
            ip_address: Request IP address
            user_agent: Request user agent

        Returns:
            Log entry ID

        Raises:
            ValidationError: If the action is empty or the target type is unknown
        """
        if not action or not action.strip():
            raise ValidationError("Action is required")

        log_id = self.db.create_activity_log(
            action=action.strip(),
            actor_id=actor_id,
            target=target,
            description=description,
            old_values=old_values,
            new_values=new_values,
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.info("Activity %s by %s on %s", action, actor_id, target)
        return log_id

    def get_log(self, log_id: int) -> Optional[ActivityLog]:
        """Get a log entry by ID."""
        return self.db.get_activity_log(log_id)

    def list_logs(
        self,
        actor_id: Optional[int] = None,
        action: Optional[str] = None,
        target: Optional[TargetRef] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[ActivityLog]:
        """List log entries, newest first, with optional filters."""
        return self.db.list_activity_logs(
            actor_id=actor_id, action=action, target=target, since=since, until=until, limit=limit
        )

    def resolve_target(self, log_id: int) -> Optional[dict[str, Any]]:
        """Return the column values of the row a log entry points to.

        Returns None when the entry has no target or the row no longer exists.
        """
        return self.db.resolve_activity_target(log_id)

    def update(self, log_id: int, changes: dict[str, Any]) -> None:
        """Log entries cannot be changed; any real change raises ImmutableRecordError."""
        self.db.update_audit_record(ACTIVITY_LOG, log_id, changes)

    def delete(self, log_id: int) -> None:
        """Log entries cannot be deleted; always raises ImmutableRecordError."""
        self.db.delete_audit_record(ACTIVITY_LOG, log_id)
