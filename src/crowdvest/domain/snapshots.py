"""Company snapshot service."""

import logging
from dataclasses import asdict
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import Company, CompanySnapshot
from crowdvest.domain.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _json_value(value: Any) -> Any:
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


def company_snapshot_data(company: Company) -> dict[str, Any]:
    """JSON-safe copy of a company's fields."""
    return {key: _json_value(value) for key, value in asdict(company).items()}


class SnapshotService:
    """Captures write-once, point-in-time copies of company data."""

    def __init__(self, db: Database):
        self.db = db

    def capture(self, company_id: int, reason: str, captured_by: Optional[int] = None) -> int:
        """Snapshot a company's current data.

        Raises:
            NotFoundError: If the company does not exist
            ValidationError: If no reason is given
        """
        if not reason or not reason.strip():
            raise ValidationError("Snapshot reason is required")
        company = self.db.get_company(company_id)
        if company is None:
            raise NotFoundError(errors.not_found("Company", company_id))

        snapshot_id = self.db.create_company_snapshot(
            company_id=company_id,
            snapshot_reason=reason.strip(),
            snapshot_data=company_snapshot_data(company),
            captured_by_id=captured_by,
        )
        logger.info("Captured snapshot %d of company %d (%s)", snapshot_id, company_id, reason)
        return snapshot_id

    def list_snapshots(self, company_id: int) -> list[CompanySnapshot]:
        """List snapshots of a company, newest first."""
        return self.db.list_company_snapshots(company_id)

    def latest(self, company_id: int) -> Optional[CompanySnapshot]:
        snapshots = self.db.list_company_snapshots(company_id)
        return snapshots[0] if snapshots else None
