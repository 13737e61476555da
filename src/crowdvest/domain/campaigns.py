"""Offer campaign service.

A campaign is redeemed by code against one of several kinds of record
(investment, subscription or payment). Each redemption stores a tagged
reference to that record and bumps the campaign's usage counter in the same
transaction.
"""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Any, Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import Campaign, CampaignUsage, TargetRef
from crowdvest.domain.errors import NotFoundError, ValidationError
from crowdvest.domain.guards import check_date_range, check_non_negative
from crowdvest.utils.amount_parser import quantize_money

logger = logging.getLogger(__name__)

DISCOUNT_PERCENTAGE = "percentage"
DISCOUNT_FIXED = "fixed"
DISCOUNT_TYPES = (DISCOUNT_PERCENTAGE, DISCOUNT_FIXED)


def compute_discount(campaign: Campaign, amount: Decimal) -> Decimal:
    """Discount a campaign gives on an amount.

    Percentage discounts are capped by max_discount when set; no discount
    ever exceeds the amount itself.
    """
    if campaign.discount_type == DISCOUNT_PERCENTAGE:
        discount = amount * (campaign.discount_percent or Decimal("0")) / 100
        if campaign.max_discount is not None:
            discount = min(discount, campaign.max_discount)
    else:
        discount = campaign.discount_amount or Decimal("0")
    return quantize_money(min(discount, amount))


class CampaignService:
    """Service for offer campaigns and their redemptions."""

    def __init__(self, db: Database):
        """Initialize campaign service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_campaign(
        self,
        code: str,
        title: str,
        discount_type: str,
        discount_percent: Optional[Decimal] = None,
        discount_amount: Optional[Decimal] = None,
        max_discount: Optional[Decimal] = None,
        min_amount: Optional[Decimal] = None,
        usage_limit: Optional[int] = None,
        per_user_limit: Optional[int] = None,
        starts_at: Optional[datetime] = None,
        ends_at: Optional[datetime] = None,
    ) -> int:
        """Create a campaign. Codes are stored upper-case.

        Returns:
            Campaign ID

        Raises:
            ValidationError: If the discount definition, limits or window are invalid
            ConflictError: If the code is taken
        """
        if not code or not code.strip():
            raise ValidationError("Campaign code is required")
        if discount_type not in DISCOUNT_TYPES:
            raise ValidationError(
                f"Invalid discount type '{discount_type}'. Expected one of: {', '.join(DISCOUNT_TYPES)}"
            )
        if discount_type == DISCOUNT_PERCENTAGE:
            if discount_percent is None or not Decimal("0") < discount_percent <= Decimal("100"):
                raise ValidationError("Percentage campaigns need a discount_percent between 0 and 100")
        elif discount_amount is None or discount_amount <= 0:
            raise ValidationError("Fixed campaigns need a positive discount_amount")

        for field, value in (("max_discount", max_discount), ("min_amount", min_amount)):
            check_non_negative(field, value).raise_if_failed()
        for field, limit in (("usage_limit", usage_limit), ("per_user_limit", per_user_limit)):
            if limit is not None and limit < 1:
                raise ValidationError(f"{field} must be at least 1 (got {limit})")
        check_date_range(starts_at, ends_at).raise_if_failed()

        campaign_id = self.db.create_campaign(
            code=code.strip().upper(),
            title=title,
            discount_type=discount_type,
            discount_percent=discount_percent,
            discount_amount=discount_amount,
            max_discount=max_discount,
            min_amount=min_amount,
            usage_limit=usage_limit,
            per_user_limit=per_user_limit,
            starts_at=starts_at,
            ends_at=ends_at,
        )
        logger.info("Created campaign %s", code.strip().upper())
        return campaign_id

    def get_campaign(self, code: str) -> Optional[Campaign]:
        """Get a campaign by code."""
        return self.db.get_campaign_by_code(code.strip())

    def apply_campaign(
        self, code: str, user_id: int, target: TargetRef, amount: Decimal
    ) -> CampaignUsage:
        """Redeem a campaign against a record.

        Args:
            code: Campaign code (case-insensitive)
            user_id: Redeeming user
            target: The investment, subscription or payment the discount applies to
            amount: Amount before discount

        Returns:
            The recorded usage (discount_applied and final_amount filled in)

        Raises:
            NotFoundError: If no campaign has the code
            ValidationError: If the campaign is not live, the amount is below the
                minimum, a usage limit is reached, or the target type is not
                one campaigns apply to
        """
        check_non_negative("amount", amount).raise_if_failed()
        campaign = self.db.get_campaign_by_code(code.strip())
        if campaign is None:
            raise NotFoundError(errors.not_found("Campaign", code))

        now = datetime.now(UTC)
        if not self.db.is_campaign_live(campaign.id, now):
            raise ValidationError(f"Campaign {campaign.code} is not active")
        if campaign.min_amount is not None and amount < campaign.min_amount:
            raise ValidationError(
                f"Campaign {campaign.code} requires a minimum amount of {campaign.min_amount}"
            )
        if (
            campaign.per_user_limit is not None
            and self.db.count_campaign_usages(campaign.id, user_id=user_id) >= campaign.per_user_limit
        ):
            raise ValidationError(f"User {user_id} has already used campaign {campaign.code}")

        discount = compute_discount(campaign, amount)
        usage_id = self.db.create_campaign_usage(
            campaign_id=campaign.id,
            user_id=user_id,
            target=target,
            original_amount=quantize_money(amount),
            discount_applied=discount,
            used_at=now,
        )
        logger.info("User %d applied %s to %s: discount %s", user_id, campaign.code, target, discount)
        return self.db.get_campaign_usage(usage_id)

    def resolve_usage_target(self, usage_id: int) -> Optional[dict[str, Any]]:
        """Return the column values of the record a usage applies to."""
        return self.db.resolve_campaign_usage_target(usage_id)
