"""Domain model entities for crowdvest.

These are pure data classes representing business concepts, independent of
the database schema. The Database interface returns these instead of ORM
objects so that services never hold live session state.
"""

from dataclasses import dataclass
from datetime import datetime, date
from decimal import Decimal
from typing import Any, Optional


@dataclass(frozen=True)
class TargetRef:
    """Tagged reference to a row of one of several entity types."""

    type: str
    id: int

    def __str__(self) -> str:
        return f"{self.type}#{self.id}"


@dataclass(frozen=True)
class FeatureFlag:
    """Feature flag domain entity."""

    id: int
    key: str
    name: str
    description: Optional[str]
    is_active: bool
    rollout_percentage: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class Sector:
    """Sector domain entity."""

    id: int
    name: str
    slug: str
    slug_overridden: bool
    description: Optional[str]
    is_active: bool
    created_at: datetime


@dataclass(frozen=True)
class Company:
    """Company domain entity."""

    id: int
    name: str
    slug: str
    slug_overridden: bool
    sector_id: Optional[int]
    status: str
    description: Optional[str]
    latest_valuation: Optional[Decimal]
    total_funding: Optional[Decimal]
    created_at: datetime


@dataclass(frozen=True)
class ReferralCampaign:
    """Referral campaign domain entity."""

    id: int
    name: str
    description: Optional[str]
    start_date: date
    end_date: date
    multiplier: Decimal
    bonus_amount: Decimal
    max_referrals: Optional[int]
    is_active: bool
    created_at: datetime

    def is_running(self, on_date: date) -> bool:
        return self.is_active and self.start_date <= on_date <= self.end_date


@dataclass(frozen=True)
class Referral:
    """Referral domain entity."""

    id: int
    referrer_id: int
    referred_id: int
    campaign_id: Optional[int]
    status: str
    completed_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class SagaExecution:
    """Saga execution domain entity."""

    id: int
    saga_id: str
    saga_type: str
    user_id: Optional[int]
    status: str
    metadata: Optional[dict[str, Any]]
    steps_total: int
    steps_completed: int
    failure_reason: Optional[str]
    failure_step: Optional[int]
    started_at: Optional[datetime]
    completed_at: Optional[datetime]
    failed_at: Optional[datetime]
    compensated_at: Optional[datetime]
    resolved_at: Optional[datetime]
    resolved_by: Optional[int]
    resolution_notes: Optional[str]
    created_at: datetime

    @property
    def progress_percentage(self) -> int:
        if not self.steps_total:
            return 0
        return int(self.steps_completed * 100 / self.steps_total)


@dataclass(frozen=True)
class SagaStep:
    """Saga step domain entity."""

    id: int
    saga_execution_id: int
    step_number: int
    operation: str
    status: str
    result_data: Optional[dict[str, Any]]
    executed_at: datetime
    compensation_status: Optional[str]
    compensation_error: Optional[str]
    compensated_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class ActivityLog:
    """Activity log domain entity."""

    id: int
    actor_id: Optional[int]
    action: str
    target: Optional[TargetRef]
    description: Optional[str]
    old_values: Optional[dict[str, Any]]
    new_values: Optional[dict[str, Any]]
    ip_address: Optional[str]
    user_agent: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class CompanySnapshot:
    """Company snapshot domain entity."""

    id: int
    company_id: int
    snapshot_reason: str
    snapshot_data: dict[str, Any]
    captured_by_id: Optional[int]
    created_at: datetime


@dataclass(frozen=True)
class LegalAgreement:
    """Legal agreement domain entity."""

    id: int
    agreement_type: str
    title: str
    slug: str
    status: str
    current_version: Optional[str]
    requires_signature: bool


@dataclass(frozen=True)
class AgreementSignature:
    """User agreement signature domain entity."""

    id: int
    user_id: int
    agreement_id: int
    agreement_version: str
    signed_at: datetime
    ip_address: Optional[str]
    user_agent: Optional[str]
    content_hash: str
    created_at: datetime


@dataclass(frozen=True)
class KbArticle:
    """Knowledge base article domain entity."""

    id: int
    title: str
    slug: str
    category: Optional[str]
    status: str
    views_count: int
    helpful_count: int
    not_helpful_count: int
    created_at: datetime


@dataclass(frozen=True)
class ArticleFeedback:
    """Article helpfulness rating domain entity."""

    id: int
    article_id: int
    user_id: int
    is_helpful: bool
    comment: Optional[str]
    created_at: datetime


@dataclass(frozen=True)
class SupportTicket:
    """Support ticket domain entity."""

    id: int
    user_id: int
    subject: str
    category: Optional[str]
    priority: str
    status: str
    unread_by_user_count: int
    unread_by_admin_count: int
    closed_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class SupportMessage:
    """Support message domain entity."""

    id: int
    ticket_id: int
    sender_id: int
    sender_type: str
    body: str
    is_read: bool
    read_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class Notification:
    """In-app notification domain entity."""

    id: int
    user_id: int
    notification_type: str
    title: str
    message: str
    data: Optional[dict[str, Any]]
    action_url: Optional[str]
    read_at: Optional[datetime]
    created_at: datetime

    @property
    def is_read(self) -> bool:
        return self.read_at is not None


@dataclass(frozen=True)
class Payment:
    """Payment domain entity."""

    id: int
    user_id: int
    subscription_id: Optional[int]
    amount: Decimal
    currency: str
    status: str
    gateway: Optional[str]
    gateway_order_id: Optional[str]
    gateway_payment_id: Optional[str]
    failure_reason: Optional[str]
    paid_at: Optional[datetime]
    created_at: datetime


@dataclass(frozen=True)
class BonusTransaction:
    """Bonus transaction domain entity."""

    id: int
    user_id: int
    subscription_id: Optional[int]
    payment_id: Optional[int]
    bonus_type: str
    amount: Decimal
    tds_deducted: Decimal
    multiplier: Decimal
    base_amount: Optional[Decimal]
    description: Optional[str]
    reversal_of_id: Optional[int]
    reversed_at: Optional[datetime]
    created_at: datetime

    @property
    def net_amount(self) -> Decimal:
        return self.amount - self.tds_deducted

    @property
    def is_reversal(self) -> bool:
        return self.reversal_of_id is not None


@dataclass(frozen=True)
class Campaign:
    """Offer campaign domain entity."""

    id: int
    code: str
    title: str
    discount_type: str
    discount_percent: Optional[Decimal]
    discount_amount: Optional[Decimal]
    max_discount: Optional[Decimal]
    min_amount: Optional[Decimal]
    usage_limit: Optional[int]
    usage_count: int
    per_user_limit: Optional[int]
    starts_at: Optional[datetime]
    ends_at: Optional[datetime]
    is_active: bool


@dataclass(frozen=True)
class CampaignUsage:
    """Campaign redemption domain entity."""

    id: int
    campaign_id: int
    user_id: int
    target: TargetRef
    original_amount: Decimal
    discount_applied: Decimal
    used_at: datetime

    @property
    def final_amount(self) -> Decimal:
        return self.original_amount - self.discount_applied
