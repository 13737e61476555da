"""User, profile and KYC models."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, SoftDeleteMixin, now_utc


class User(TimestampMixin, SoftDeleteMixin, Base):
    """Platform user (investor, admin or company representative)."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True)
    username = Column(String(64), unique=True, nullable=False)
    email = Column(String(255), unique=True, nullable=False)
    mobile = Column(String(20), unique=True, nullable=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), default="user", nullable=False)  # user, admin, company
    status = Column(String(20), default="active", nullable=False)  # active, suspended, blocked
    referral_code = Column(String(20), unique=True, nullable=True)
    referred_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    email_verified_at = Column(DateTime, nullable=True)
    mobile_verified_at = Column(DateTime, nullable=True)
    last_login_at = Column(DateTime, nullable=True)

    # Relationships
    referred_by = relationship("User", remote_side=[id], backref="referred_users")
    profile = relationship(
        "UserProfile", back_populates="user", uselist=False, cascade="all, delete-orphan"
    )
    kyc = relationship(
        "UserKyc",
        back_populates="user",
        uselist=False,
        cascade="all, delete-orphan",
        foreign_keys="UserKyc.user_id",
    )
    login_history = relationship(
        "UserLoginHistory", back_populates="user", cascade="all, delete-orphan"
    )
    wallet = relationship("Wallet", back_populates="user", uselist=False)
    subscriptions = relationship("Subscription", back_populates="user")
    payments = relationship("Payment", back_populates="user")
    notifications = relationship("Notification", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"

    @classmethod
    def active(cls):
        return (cls.status == "active") & cls.deleted_at.is_(None)


class UserProfile(TimestampMixin, Base):
    """Personal details owned by a user."""

    __tablename__ = "user_profiles"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    gender = Column(String(10), nullable=True)
    address_line_1 = Column(String(255), nullable=True)
    address_line_2 = Column(String(255), nullable=True)
    city = Column(String(100), nullable=True)
    state = Column(String(100), nullable=True)
    pincode = Column(String(10), nullable=True)
    country = Column(String(2), default="IN", nullable=False)
    avatar_url = Column(String(500), nullable=True)

    # Relationships
    user = relationship("User", back_populates="profile")

    @property
    def full_name(self) -> str:
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class UserKyc(TimestampMixin, Base):
    """KYC record for a user; owns the uploaded KYC documents."""

    __tablename__ = "user_kyc"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    pan_number = Column(String(10), nullable=True)
    aadhaar_last_four = Column(String(4), nullable=True)
    demat_account = Column(String(32), nullable=True)
    bank_account_number = Column(String(32), nullable=True)
    bank_ifsc = Column(String(11), nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, submitted, verified, rejected
    submitted_at = Column(DateTime, nullable=True)
    verified_at = Column(DateTime, nullable=True)
    verified_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="kyc", foreign_keys=[user_id])
    verified_by = relationship("User", foreign_keys=[verified_by_id])
    documents = relationship("KycDocument", back_populates="kyc", cascade="all, delete-orphan")

    @property
    def is_verified(self) -> bool:
        return self.status == "verified"


class KycDocument(TimestampMixin, Base):
    """An uploaded KYC document (the file itself lives in external storage)."""

    __tablename__ = "kyc_documents"

    id = Column(Integer, primary_key=True)
    user_kyc_id = Column(Integer, ForeignKey("user_kyc.id"), nullable=False)
    doc_type = Column(String(30), nullable=False)  # pan, aadhaar_front, aadhaar_back, bank_proof, ...
    file_path = Column(String(500), nullable=False)
    file_name = Column(String(255), nullable=True)
    mime_type = Column(String(100), nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    verification_notes = Column(Text, nullable=True)
    verified_at = Column(DateTime, nullable=True)

    __table_args__ = (UniqueConstraint("user_kyc_id", "doc_type", name="uq_kyc_document_type"),)

    # Relationships
    kyc = relationship("UserKyc", back_populates="documents")


class UserLoginHistory(Base):
    """Login attempts with forensic request details."""

    __tablename__ = "user_login_history"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    device_type = Column(String(20), nullable=True)
    is_successful = Column(Boolean, default=True, nullable=False)
    failure_reason = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (Index("ix_user_login_history_user_created", "user_id", "created_at"),)

    # Relationships
    user = relationship("User", back_populates="login_history")
