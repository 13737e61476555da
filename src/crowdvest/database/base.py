"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional, Any
from datetime import date, datetime
from decimal import Decimal

# Import entities directly to avoid circular import through domain/__init__.py
from crowdvest.domain.entities import (
    ActivityLog,
    AgreementSignature,
    ArticleFeedback,
    BonusTransaction,
    Campaign,
    CampaignUsage,
    Company,
    CompanySnapshot,
    FeatureFlag,
    KbArticle,
    LegalAgreement,
    Notification,
    Payment,
    Referral,
    ReferralCampaign,
    SagaExecution,
    SagaStep,
    Sector,
    SupportMessage,
    SupportTicket,
    TargetRef,
)


class Database(ABC):
    """Abstract database interface for crowdvest."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # User operations
    @abstractmethod
    def create_user(self, username: str, email: str, role: str = "user") -> int:
        """Create a user. Returns user ID."""
        pass

    @abstractmethod
    def user_exists(self, user_id: int) -> bool:
        """Check whether a user exists."""
        pass

    # Audit record operations
    @abstractmethod
    def update_audit_record(self, kind: str, record_id: int, changes: dict[str, Any]) -> None:
        """Apply changes to a write-once record, subject to its guard.

        Raises:
            ImmutableRecordError: If any changed field is not writable
        """
        pass

    @abstractmethod
    def delete_audit_record(self, kind: str, record_id: int) -> None:
        """Attempt to delete a write-once record. Always raises ImmutableRecordError."""
        pass

    # Feature flag operations
    @abstractmethod
    def create_feature_flag(
        self,
        key: str,
        name: str,
        description: Optional[str] = None,
        is_active: bool = False,
        rollout_percentage: Optional[int] = None,
    ) -> int:
        """Create a feature flag. Returns flag ID."""
        pass

    @abstractmethod
    def get_feature_flag(self, flag_id: int) -> Optional[FeatureFlag]:
        """Get feature flag by ID."""
        pass

    @abstractmethod
    def get_feature_flag_by_key(self, key: str) -> Optional[FeatureFlag]:
        """Get feature flag by key."""
        pass

    @abstractmethod
    def list_feature_flags(self) -> list[FeatureFlag]:
        """List all feature flags ordered by key."""
        pass

    @abstractmethod
    def update_feature_flag(
        self,
        flag_id: int,
        is_active: Optional[bool] = None,
        rollout_percentage: Optional[int] = None,
        update_rollout: bool = False,
    ) -> None:
        """Update feature flag fields.

        Args:
            update_rollout: If True, update rollout_percentage even if it's None (to clear it)
        """
        pass

    # Activity log operations
    @abstractmethod
    def create_activity_log(
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
        """Create an activity log entry. Returns log ID."""
        pass

    @abstractmethod
    def get_activity_log(self, log_id: int) -> Optional[ActivityLog]:
        """Get activity log entry by ID."""
        pass

    @abstractmethod
    def list_activity_logs(
        self,
        actor_id: Optional[int] = None,
        action: Optional[str] = None,
        target: Optional[TargetRef] = None,
        since: Optional[datetime] = None,
        until: Optional[datetime] = None,
        limit: Optional[int] = None,
    ) -> list[ActivityLog]:
        """List activity log entries, newest first."""
        pass

    @abstractmethod
    def resolve_activity_target(self, log_id: int) -> Optional[dict[str, Any]]:
        """Load the column values of the row an activity log entry points to."""
        pass

    # Saga operations
    @abstractmethod
    def create_saga(
        self,
        saga_id: str,
        saga_type: str,
        user_id: Optional[int] = None,
        metadata: Optional[dict[str, Any]] = None,
        steps_total: int = 0,
    ) -> int:
        """Create a pending saga execution. Returns row ID."""
        pass

    @abstractmethod
    def get_saga(self, saga_id: str) -> Optional[SagaExecution]:
        """Get saga execution by its saga_id."""
        pass

    @abstractmethod
    def list_sagas(
        self,
        status: Optional[str] = None,
        saga_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[SagaExecution]:
        """List saga executions, newest first."""
        pass

    @abstractmethod
    def list_stale_sagas(self, statuses: list[str], started_before: datetime) -> list[SagaExecution]:
        """List sagas in the given statuses that started before a cutoff."""
        pass

    @abstractmethod
    def update_saga(self, saga_id: str, changes: dict[str, Any]) -> None:
        """Apply progress/transition changes to a saga.

        Raises:
            ValidationError: If the status change is not a valid transition
            ImmutableRecordError: If a permanent field would change
        """
        pass

    @abstractmethod
    def create_saga_step(
        self,
        saga_id: str,
        step_number: int,
        operation: str,
        executed_at: datetime,
        result_data: Optional[dict[str, Any]] = None,
    ) -> int:
        """Record a completed step and increment the saga's steps_completed. Returns step ID."""
        pass

    @abstractmethod
    def get_saga_step(self, step_id: int) -> Optional[SagaStep]:
        """Get saga step by ID."""
        pass

    @abstractmethod
    def list_saga_steps(self, saga_id: str) -> list[SagaStep]:
        """List the steps of a saga ordered by step number."""
        pass

    # Referral operations
    @abstractmethod
    def create_referral_campaign(
        self,
        name: str,
        start_date: date,
        end_date: date,
        multiplier: Decimal,
        bonus_amount: Decimal,
        description: Optional[str] = None,
        max_referrals: Optional[int] = None,
        is_active: bool = True,
    ) -> int:
        """Create a referral campaign. Returns campaign ID."""
        pass

    @abstractmethod
    def get_referral_campaign(self, campaign_id: int) -> Optional[ReferralCampaign]:
        """Get referral campaign by ID."""
        pass

    @abstractmethod
    def list_referral_campaigns(self) -> list[ReferralCampaign]:
        """List referral campaigns, latest start date first."""
        pass

    @abstractmethod
    def list_running_referral_campaigns(self, on_date: date) -> list[ReferralCampaign]:
        """List active campaigns whose date range covers on_date."""
        pass

    @abstractmethod
    def update_referral_campaign(self, campaign_id: int, changes: dict[str, Any]) -> None:
        """Update referral campaign fields."""
        pass

    @abstractmethod
    def create_referral(
        self, referrer_id: int, referred_id: int, campaign_id: Optional[int] = None
    ) -> int:
        """Create a referral. Returns referral ID.

        Raises:
            ConflictError: If the referred user already has a referral
        """
        pass

    @abstractmethod
    def get_referral(self, referral_id: int) -> Optional[Referral]:
        """Get referral by ID."""
        pass

    @abstractmethod
    def count_campaign_referrals(self, campaign_id: int) -> int:
        """Count referrals attributed to a campaign."""
        pass

    @abstractmethod
    def update_referral_status(
        self, referral_id: int, status: str, completed_at: Optional[datetime] = None
    ) -> None:
        """Update referral status."""
        pass

    # Sector operations
    @abstractmethod
    def create_sector(
        self,
        name: str,
        slug: str,
        slug_overridden: bool = False,
        description: Optional[str] = None,
    ) -> int:
        """Create a sector. Returns sector ID."""
        pass

    @abstractmethod
    def get_sector(self, sector_id: int) -> Optional[Sector]:
        """Get sector by ID (soft-deleted sectors excluded)."""
        pass

    @abstractmethod
    def get_sector_by_slug(self, slug: str) -> Optional[Sector]:
        """Get sector by slug (soft-deleted sectors excluded)."""
        pass

    @abstractmethod
    def list_sectors(self, include_inactive: bool = False) -> list[Sector]:
        """List sectors ordered by sort order then name."""
        pass

    @abstractmethod
    def sector_slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a slug is taken by another sector."""
        pass

    @abstractmethod
    def update_sector(
        self,
        sector_id: int,
        name: Optional[str] = None,
        slug: Optional[str] = None,
        slug_overridden: Optional[bool] = None,
    ) -> None:
        """Update sector fields."""
        pass

    @abstractmethod
    def get_sector_usage(self, sector_id: int) -> tuple[int, int]:
        """Return (company count, deal count) referencing a sector."""
        pass

    @abstractmethod
    def delete_sector(self, sector_id: int) -> None:
        """Soft-delete a sector.

        Raises:
            IntegrityGuardError: If companies or deals still reference it
        """
        pass

    # Company operations
    @abstractmethod
    def create_company(
        self,
        name: str,
        slug: str,
        slug_overridden: bool = False,
        sector_id: Optional[int] = None,
        description: Optional[str] = None,
        status: str = "draft",
    ) -> int:
        """Create a company. Returns company ID."""
        pass

    @abstractmethod
    def get_company(self, company_id: int) -> Optional[Company]:
        """Get company by ID (soft-deleted companies excluded)."""
        pass

    @abstractmethod
    def company_slug_exists(self, slug: str, exclude_id: Optional[int] = None) -> bool:
        """Check whether a slug is taken by another company."""
        pass

    @abstractmethod
    def update_company(
        self,
        company_id: int,
        name: Optional[str] = None,
        slug: Optional[str] = None,
        slug_overridden: Optional[bool] = None,
        sector_id: Optional[int] = None,
    ) -> None:
        """Update company fields."""
        pass

    @abstractmethod
    def create_deal(
        self,
        company_id: int,
        title: str,
        slug: str,
        share_price: Decimal,
        total_shares: int,
        min_investment: Decimal,
        sector_id: Optional[int] = None,
    ) -> int:
        """Create a deal. Returns deal ID."""
        pass

    # Company snapshot operations
    @abstractmethod
    def create_company_snapshot(
        self,
        company_id: int,
        snapshot_reason: str,
        snapshot_data: dict[str, Any],
        captured_by_id: Optional[int] = None,
    ) -> int:
        """Create a company snapshot. Returns snapshot ID."""
        pass

    @abstractmethod
    def list_company_snapshots(self, company_id: int) -> list[CompanySnapshot]:
        """List snapshots of a company, newest first."""
        pass

    # Legal agreement operations
    @abstractmethod
    def create_legal_agreement(
        self, agreement_type: str, title: str, slug: str, requires_signature: bool = True
    ) -> int:
        """Create a draft legal agreement. Returns agreement ID."""
        pass

    @abstractmethod
    def get_legal_agreement(self, agreement_id: int) -> Optional[LegalAgreement]:
        """Get legal agreement by ID."""
        pass

    @abstractmethod
    def publish_agreement_version(
        self,
        agreement_id: int,
        version: str,
        content: str,
        effective_date: date,
        change_summary: Optional[str] = None,
        published_by_id: Optional[int] = None,
    ) -> int:
        """Store a new version and make it the agreement's current, active version.

        Returns:
            Version row ID

        Raises:
            ConflictError: If the version already exists for the agreement
        """
        pass

    @abstractmethod
    def get_agreement_version_content(self, agreement_id: int, version: str) -> Optional[str]:
        """Get the text of one agreement version."""
        pass

    @abstractmethod
    def create_agreement_signature(
        self,
        user_id: int,
        agreement_id: int,
        agreement_version: str,
        content_hash: str,
        signed_at: datetime,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> int:
        """Record a signature. Returns signature ID.

        Raises:
            ConflictError: If the user already signed this version
        """
        pass

    @abstractmethod
    def get_agreement_signature(
        self, user_id: int, agreement_id: int, agreement_version: str
    ) -> Optional[AgreementSignature]:
        """Get a user's signature of one agreement version."""
        pass

    # Help center operations
    @abstractmethod
    def create_kb_article(
        self,
        title: str,
        slug: str,
        content: str,
        category: Optional[str] = None,
        author_id: Optional[int] = None,
    ) -> int:
        """Create a knowledge base article. Returns article ID."""
        pass

    @abstractmethod
    def get_kb_article(self, article_id: int) -> Optional[KbArticle]:
        """Get article by ID."""
        pass

    @abstractmethod
    def kb_article_slug_exists(self, slug: str) -> bool:
        """Check whether an article slug is taken."""
        pass

    @abstractmethod
    def increment_article_views(self, article_id: int) -> None:
        """Atomically increment an article's view counter."""
        pass

    @abstractmethod
    def create_article_feedback(
        self, article_id: int, user_id: int, is_helpful: bool, comment: Optional[str] = None
    ) -> int:
        """Store a rating and bump the matching counter. Returns feedback ID.

        Raises:
            ConflictError: If the user already rated the article
        """
        pass

    @abstractmethod
    def get_article_feedback(self, feedback_id: int) -> Optional[ArticleFeedback]:
        """Get rating by ID."""
        pass

    @abstractmethod
    def update_article_feedback(
        self, feedback_id: int, is_helpful: bool, comment: Optional[str] = None
    ) -> None:
        """Change a rating, moving the counter only when is_helpful changes."""
        pass

    @abstractmethod
    def delete_article_feedback(self, feedback_id: int) -> None:
        """Delete a rating and decrement the matching counter."""
        pass

    # Support operations
    @abstractmethod
    def create_support_ticket(
        self,
        user_id: int,
        subject: str,
        category: Optional[str] = None,
        priority: str = "medium",
    ) -> int:
        """Open a support ticket. Returns ticket ID."""
        pass

    @abstractmethod
    def get_support_ticket(self, ticket_id: int) -> Optional[SupportTicket]:
        """Get support ticket by ID."""
        pass

    @abstractmethod
    def create_support_message(
        self, ticket_id: int, sender_id: int, sender_type: str, body: str
    ) -> int:
        """Post a message and bump the other party's unread counter. Returns message ID."""
        pass

    @abstractmethod
    def get_support_message(self, message_id: int) -> Optional[SupportMessage]:
        """Get support message by ID."""
        pass

    @abstractmethod
    def list_support_messages(self, ticket_id: int) -> list[SupportMessage]:
        """List the messages of a ticket in posting order."""
        pass

    @abstractmethod
    def mark_support_message_read(self, message_id: int, read_at: datetime) -> bool:
        """Mark a message read. Returns False if it already was."""
        pass

    @abstractmethod
    def mark_ticket_messages_read(self, ticket_id: int, reader_type: str, read_at: datetime) -> int:
        """Mark every message sent to reader_type as read. Returns how many changed."""
        pass

    @abstractmethod
    def delete_support_message(self, message_id: int) -> None:
        """Delete a message, releasing its unread count if it was unread."""
        pass

    @abstractmethod
    def close_support_ticket(self, ticket_id: int, closed_at: datetime) -> None:
        """Close a ticket."""
        pass

    # Notification operations
    @abstractmethod
    def create_notification(
        self,
        user_id: int,
        notification_type: str,
        title: str,
        message: str,
        data: Optional[dict[str, Any]] = None,
        action_url: Optional[str] = None,
    ) -> int:
        """Create a notification. Returns notification ID."""
        pass

    @abstractmethod
    def get_notification(self, notification_id: int) -> Optional[Notification]:
        """Get notification by ID."""
        pass

    @abstractmethod
    def mark_notification_read(self, notification_id: int, read_at: datetime) -> None:
        """Mark one notification read (no-op if already read)."""
        pass

    @abstractmethod
    def mark_all_notifications_read(self, user_id: int, read_at: datetime) -> int:
        """Mark all unread notifications of a user read. Returns how many changed."""
        pass

    @abstractmethod
    def count_unread_notifications(self, user_id: int) -> int:
        """Count unread notifications of a user."""
        pass

    @abstractmethod
    def list_unread_notifications(
        self, user_id: int, limit: Optional[int] = None
    ) -> list[Notification]:
        """List unread notifications of a user, newest first."""
        pass

    # Payment operations
    @abstractmethod
    def create_payment(
        self,
        user_id: int,
        amount: Decimal,
        currency: str = "INR",
        gateway: Optional[str] = None,
        gateway_order_id: Optional[str] = None,
        subscription_id: Optional[int] = None,
    ) -> int:
        """Create a pending payment. Returns payment ID."""
        pass

    @abstractmethod
    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get payment by ID."""
        pass

    @abstractmethod
    def update_payment_status(
        self,
        payment_id: int,
        status: str,
        gateway_payment_id: Optional[str] = None,
        failure_reason: Optional[str] = None,
        paid_at: Optional[datetime] = None,
    ) -> None:
        """Update payment status and gateway outcome."""
        pass

    # Bonus operations
    @abstractmethod
    def create_bonus_transaction(
        self,
        user_id: int,
        bonus_type: str,
        amount: Decimal,
        tds_deducted: Decimal = Decimal("0.00"),
        multiplier: Decimal = Decimal("1.00"),
        base_amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        payment_id: Optional[int] = None,
        subscription_id: Optional[int] = None,
    ) -> int:
        """Create a bonus transaction. Returns bonus ID."""
        pass

    @abstractmethod
    def get_bonus_transaction(self, bonus_id: int) -> Optional[BonusTransaction]:
        """Get bonus transaction by ID."""
        pass

    @abstractmethod
    def list_bonus_transactions(self, user_id: int) -> list[BonusTransaction]:
        """List a user's bonus transactions in creation order."""
        pass

    @abstractmethod
    def reverse_bonus_transaction(
        self, bonus_id: int, reversed_at: datetime, description: Optional[str] = None
    ) -> int:
        """Create the negated reversal row and stamp the original. Returns reversal ID.

        Raises:
            ValidationError: If the bonus is a reversal or was already reversed
        """
        pass

    # Offer campaign operations
    @abstractmethod
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
        """Create an offer campaign. Returns campaign ID."""
        pass

    @abstractmethod
    def get_campaign(self, campaign_id: int) -> Optional[Campaign]:
        """Get campaign by ID."""
        pass

    @abstractmethod
    def get_campaign_by_code(self, code: str) -> Optional[Campaign]:
        """Get campaign by code (case-insensitive)."""
        pass

    @abstractmethod
    def is_campaign_live(self, campaign_id: int, moment: datetime) -> bool:
        """Check whether a campaign is active and within its window at moment."""
        pass

    @abstractmethod
    def count_campaign_usages(self, campaign_id: int, user_id: Optional[int] = None) -> int:
        """Count redemptions of a campaign, optionally for one user."""
        pass

    @abstractmethod
    def create_campaign_usage(
        self,
        campaign_id: int,
        user_id: int,
        target: TargetRef,
        original_amount: Decimal,
        discount_applied: Decimal,
        used_at: datetime,
    ) -> int:
        """Record a redemption and increment usage_count. Returns usage ID.

        Raises:
            ValidationError: If the target type is not a campaign applicable,
                or the campaign's usage limit has been reached
        """
        pass

    @abstractmethod
    def get_campaign_usage(self, usage_id: int) -> Optional[CampaignUsage]:
        """Get campaign usage by ID."""
        pass

    @abstractmethod
    def resolve_campaign_usage_target(self, usage_id: int) -> Optional[dict[str, Any]]:
        """Load the column values of the row a campaign usage applies to."""
        pass
