"""Tagged-union resolution for polymorphic associations.

A polymorphic column pair (``*_type``, ``*_id``) stores a discriminant from
one of the registries below plus a row id. Only registered discriminants are
accepted; there is no dynamic class lookup.
"""

from typing import Any, Optional

from sqlalchemy.orm import Session

from crowdvest.database.models import (
    Base,
    Company,
    Deal,
    LegalAgreement,
    Payment,
    SagaExecution,
    Sector,
    ShareListing,
    Subscription,
    User,
    UserInvestment,
    Withdrawal,
    FeatureFlag,
    ReferralCampaign,
    Campaign,
    SupportTicket,
    UserKyc,
)
from crowdvest.domain.entities import TargetRef
from crowdvest.domain.errors import ValidationError
from crowdvest.domain.guards import GuardResult

Registry = dict[str, type[Base]]

# Activity log targets: any auditable entity
ACTIVITY_TARGETS: Registry = {
    "user": User,
    "kyc": UserKyc,
    "company": Company,
    "sector": Sector,
    "deal": Deal,
    "payment": Payment,
    "withdrawal": Withdrawal,
    "subscription": Subscription,
    "investment": UserInvestment,
    "campaign": Campaign,
    "referral_campaign": ReferralCampaign,
    "feature_flag": FeatureFlag,
    "legal_agreement": LegalAgreement,
    "saga": SagaExecution,
    "support_ticket": SupportTicket,
    "share_listing": ShareListing,
}

# Campaign usages apply to an investment, a subscription or a payment
CAMPAIGN_APPLICABLES: Registry = {
    "investment": UserInvestment,
    "subscription": Subscription,
    "payment": Payment,
}


def check_target(ref: TargetRef, registry: Registry) -> GuardResult:
    """Reject discriminants that are not registered."""
    if ref.type not in registry:
        return GuardResult.failure(
            ValidationError(
                f"Unknown target type '{ref.type}'. Expected one of: {', '.join(sorted(registry))}"
            )
        )
    return GuardResult.success()


def resolve_target(session: Session, ref: TargetRef, registry: Registry) -> Optional[Any]:
    """Load the ORM row a tagged reference points to, or None if it is gone.

    Raises:
        ValidationError: If the discriminant is not registered
    """
    check_target(ref, registry).raise_if_failed()
    return session.get(registry[ref.type], ref.id)


def make_ref(target_type: Optional[str], target_id: Optional[int]) -> Optional[TargetRef]:
    """Build a TargetRef from a stored column pair (None when either half is missing)."""
    if target_type is None or target_id is None:
        return None
    return TargetRef(type=target_type, id=target_id)
