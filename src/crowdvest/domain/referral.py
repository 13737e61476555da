"""Referral campaign and referral domain service."""

import logging
from datetime import date, datetime, UTC
from decimal import Decimal
from typing import Optional

from crowdvest.config import DEFAULT_MAX_REFERRAL_MULTIPLIER
from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import Referral, ReferralCampaign
from crowdvest.domain.errors import NotFoundError, ValidationError
from crowdvest.domain.guards import check_self_referral, validate_referral_campaign
from crowdvest.utils.amount_parser import quantize_money

logger = logging.getLogger(__name__)

REFERRAL_PENDING = "pending"
REFERRAL_COMPLETED = "completed"


class ReferralService:
    """Service for referral campaigns and referrals."""

    def __init__(self, db: Database, max_multiplier: Decimal = DEFAULT_MAX_REFERRAL_MULTIPLIER):
        """Initialize referral service.

        Args:
            db: Database instance
            max_multiplier: Highest multiplier a campaign may use
        """
        self.db = db
        self.max_multiplier = max_multiplier

    def _validate(
        self,
        name: str,
        start_date: date,
        end_date: date,
        multiplier: Decimal,
        bonus_amount: Decimal,
        max_referrals: Optional[int],
    ) -> None:
        result = validate_referral_campaign(
            name, start_date, end_date, multiplier, bonus_amount, self.max_multiplier
        )
        if not result.ok:
            logger.warning("Rejected referral campaign '%s': %s", name, result.error)
            result.raise_if_failed()
        if max_referrals is not None and max_referrals < 0:
            raise ValidationError(f"max_referrals cannot be negative (got {max_referrals})")

    def _require_campaign(self, campaign_id: int) -> ReferralCampaign:
        campaign = self.db.get_referral_campaign(campaign_id)
        if campaign is None:
            raise NotFoundError(errors.not_found("Referral campaign", campaign_id))
        return campaign

    def create_campaign(
        self,
        name: str,
        start_date: date,
        end_date: date,
        multiplier: Decimal = Decimal("1.00"),
        bonus_amount: Decimal = Decimal("0.00"),
        description: Optional[str] = None,
        max_referrals: Optional[int] = None,
        is_active: bool = True,
    ) -> int:
        """Create a referral campaign.

        Args:
            name: Campaign name
            start_date: First day of the campaign
            end_date: Last day of the campaign (not before start_date)
            multiplier: Referral bonus multiplier, above 0 and at most the cap
            bonus_amount: Flat bonus per completed referral (not negative)
            description: Optional description
            max_referrals: Optional cap on referrals attributed to the campaign
            is_active: Whether the campaign is switched on

        Returns:
            Campaign ID

        Raises:
            ValidationError: If any of the rules above is broken
        """
        self._validate(name, start_date, end_date, multiplier, bonus_amount, max_referrals)
        campaign_id = self.db.create_referral_campaign(
            name=name.strip(),
            start_date=start_date,
            end_date=end_date,
            multiplier=multiplier,
            bonus_amount=bonus_amount,
            description=description,
            max_referrals=max_referrals,
            is_active=is_active,
        )
        logger.info("Created referral campaign %d '%s' (%s to %s)", campaign_id, name, start_date, end_date)
        return campaign_id

    def update_campaign(
        self,
        campaign_id: int,
        name: Optional[str] = None,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        multiplier: Optional[Decimal] = None,
        bonus_amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        max_referrals: Optional[int] = None,
        is_active: Optional[bool] = None,
    ) -> None:
        """Update a campaign. The merged result is validated like a new campaign."""
        campaign = self._require_campaign(campaign_id)
        changes = {
            key: value
            for key, value in {
                "name": name,
                "start_date": start_date,
                "end_date": end_date,
                "multiplier": multiplier,
                "bonus_amount": bonus_amount,
                "description": description,
                "max_referrals": max_referrals,
                "is_active": is_active,
            }.items()
            if value is not None
        }
        if not changes:
            return

        self._validate(
            changes.get("name", campaign.name),
            changes.get("start_date", campaign.start_date),
            changes.get("end_date", campaign.end_date),
            changes.get("multiplier", campaign.multiplier),
            changes.get("bonus_amount", campaign.bonus_amount),
            changes.get("max_referrals", campaign.max_referrals),
        )
        self.db.update_referral_campaign(campaign_id, changes)
        logger.info("Updated referral campaign %d: %s", campaign_id, ", ".join(sorted(changes)))

    def get_campaign(self, campaign_id: int) -> Optional[ReferralCampaign]:
        """Get a campaign by ID."""
        return self.db.get_referral_campaign(campaign_id)

    def list_campaigns(self) -> list[ReferralCampaign]:
        """List all campaigns, latest first."""
        return self.db.list_referral_campaigns()

    def active_campaigns(self, on_date: Optional[date] = None) -> list[ReferralCampaign]:
        """List campaigns running on a date (today by default)."""
        return self.db.list_running_referral_campaigns(on_date or date.today())

    def referral_bonus(self, campaign_id: int) -> Decimal:
        """Bonus paid per completed referral: bonus_amount times multiplier."""
        campaign = self._require_campaign(campaign_id)
        return quantize_money(campaign.bonus_amount * campaign.multiplier)

    def record_referral(
        self, referrer_id: int, referred_id: int, campaign_id: Optional[int] = None
    ) -> int:
        """Link a referred user to their referrer.

        Returns:
            Referral ID

        Raises:
            ValidationError: On self-referral, or if the campaign is not running
                or is full
            ConflictError: If the referred user was already referred
        """
        result = check_self_referral(referrer_id, referred_id)
        if not result.ok:
            logger.warning("Rejected referral: %s", result.error)
            result.raise_if_failed()

        if campaign_id is not None:
            campaign = self._require_campaign(campaign_id)
            if not campaign.is_running(date.today()):
                raise ValidationError(f"Referral campaign '{campaign.name}' is not running")
            if (
                campaign.max_referrals is not None
                and self.db.count_campaign_referrals(campaign_id) >= campaign.max_referrals
            ):
                raise ValidationError(
                    f"Referral campaign '{campaign.name}' reached its limit of {campaign.max_referrals}"
                )

        referral_id = self.db.create_referral(
            referrer_id=referrer_id, referred_id=referred_id, campaign_id=campaign_id
        )
        logger.info("User %d referred user %d (campaign %s)", referrer_id, referred_id, campaign_id)
        return referral_id

    def get_referral(self, referral_id: int) -> Optional[Referral]:
        """Get a referral by ID."""
        return self.db.get_referral(referral_id)

    def complete_referral(self, referral_id: int) -> None:
        """Mark a pending referral completed.

        Raises:
            NotFoundError: If the referral does not exist
            ValidationError: If it is already completed
        """
        referral = self.db.get_referral(referral_id)
        if referral is None:
            raise NotFoundError(errors.not_found("Referral", referral_id))
        if referral.status == REFERRAL_COMPLETED:
            raise ValidationError(f"Referral {referral_id} is already completed")
        self.db.update_referral_status(referral_id, REFERRAL_COMPLETED, datetime.now(UTC))
        logger.info("Referral %d completed", referral_id)
