"""SQLAlchemy models for the crowdvest database, split by area.

Importing this package registers every table on ``Base.metadata``.
"""

from crowdvest.database.models.base import (
    Base,
    TimestampMixin,
    SoftDeleteMixin,
    AuditRecordMixin,
    now_utc,
    create_session_factory,
)
from crowdvest.database.models.users import (
    User,
    UserProfile,
    UserKyc,
    KycDocument,
    UserLoginHistory,
)
from crowdvest.database.models.companies import (
    Sector,
    Company,
    CompanyDocument,
    CompanyTeamMember,
    CompanyFundingRound,
    Deal,
    CompanySnapshot,
)
from crowdvest.database.models.investing import Plan, Subscription, UserInvestment
from crowdvest.database.models.payments import (
    Payment,
    Wallet,
    WalletTransaction,
    Withdrawal,
    BonusTransaction,
)
from crowdvest.database.models.promotions import (
    ReferralCampaign,
    Referral,
    Campaign,
    CampaignUsage,
    LuckyDraw,
    LuckyDrawEntry,
)
from crowdvest.database.models.support import (
    SupportTicket,
    SupportMessage,
    Notification,
    NotificationLog,
)
from crowdvest.database.models.help_center import (
    KbArticle,
    ArticleFeedback,
    Tutorial,
    TutorialStep,
    UserTutorialProgress,
    HelpTooltip,
)
from crowdvest.database.models.legal import (
    LegalAgreement,
    LegalAgreementVersion,
    UserAgreementSignature,
)
from crowdvest.database.models.logs import ActivityLog, ErrorLog, InvestorViewHistory
from crowdvest.database.models.sagas import SagaExecution, SagaStep
from crowdvest.database.models.platform import (
    FeatureFlag,
    Report,
    BlogPost,
    ShareListing,
    ListingActivity,
)

__all__ = [
    # base
    "Base",
    "TimestampMixin",
    "SoftDeleteMixin",
    "AuditRecordMixin",
    "now_utc",
    "create_session_factory",
    # users
    "User",
    "UserProfile",
    "UserKyc",
    "KycDocument",
    "UserLoginHistory",
    # companies
    "Sector",
    "Company",
    "CompanyDocument",
    "CompanyTeamMember",
    "CompanyFundingRound",
    "Deal",
    "CompanySnapshot",
    # investing
    "Plan",
    "Subscription",
    "UserInvestment",
    # payments
    "Payment",
    "Wallet",
    "WalletTransaction",
    "Withdrawal",
    "BonusTransaction",
    # promotions
    "ReferralCampaign",
    "Referral",
    "Campaign",
    "CampaignUsage",
    "LuckyDraw",
    "LuckyDrawEntry",
    # support
    "SupportTicket",
    "SupportMessage",
    "Notification",
    "NotificationLog",
    # help center
    "KbArticle",
    "ArticleFeedback",
    "Tutorial",
    "TutorialStep",
    "UserTutorialProgress",
    "HelpTooltip",
    # legal
    "LegalAgreement",
    "LegalAgreementVersion",
    "UserAgreementSignature",
    # logs
    "ActivityLog",
    "ErrorLog",
    "InvestorViewHistory",
    # sagas
    "SagaExecution",
    "SagaStep",
    # platform
    "FeatureFlag",
    "Report",
    "BlogPost",
    "ShareListing",
    "ListingActivity",
]
