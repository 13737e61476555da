"""Knowledge base, tutorial and contextual help models."""

from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    JSON,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, SoftDeleteMixin, now_utc


class KbArticle(TimestampMixin, SoftDeleteMixin, Base):
    """Help center article.

    helpful_count/not_helpful_count are cached from ArticleFeedback rows.
    """

    __tablename__ = "kb_articles"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    category = Column(String(100), nullable=True)
    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(String(20), default="published", nullable=False)  # draft, published
    views_count = Column(Integer, default=0, nullable=False)
    helpful_count = Column(Integer, default=0, nullable=False)
    not_helpful_count = Column(Integer, default=0, nullable=False)

    # Relationships
    author = relationship("User")
    feedback = relationship("ArticleFeedback", back_populates="article")

    @property
    def helpfulness_ratio(self) -> Decimal:
        total = (self.helpful_count or 0) + (self.not_helpful_count or 0)
        if total == 0:
            return Decimal("0.00")
        return (Decimal(self.helpful_count) * 100 / Decimal(total)).quantize(Decimal("0.01"))


class ArticleFeedback(TimestampMixin, Base):
    """A user's helpful / not helpful rating of an article."""

    __tablename__ = "article_feedback"

    id = Column(Integer, primary_key=True)
    article_id = Column(Integer, ForeignKey("kb_articles.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    is_helpful = Column(Boolean, nullable=False)
    comment = Column(Text, nullable=True)

    __table_args__ = (UniqueConstraint("article_id", "user_id", name="uq_article_feedback_user"),)

    # Relationships
    article = relationship("KbArticle", back_populates="feedback")
    user = relationship("User")


class Tutorial(TimestampMixin, Base):
    """Guided product tour."""

    __tablename__ = "tutorials"

    id = Column(Integer, primary_key=True)
    slug = Column(String(120), unique=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    category = Column(String(100), nullable=True)
    user_role = Column(String(10), default="all", nullable=False)  # all, user, admin, company
    difficulty = Column(String(15), default="beginner", nullable=False)
    estimated_minutes = Column(Integer, default=5, nullable=False)
    auto_launch = Column(Boolean, default=False, nullable=False)
    trigger_page = Column(String(255), nullable=True)
    trigger_conditions = Column(JSON, nullable=True)
    views_count = Column(Integer, default=0, nullable=False)
    completions_count = Column(Integer, default=0, nullable=False)
    avg_completion_rate = Column(Numeric(5, 2), default=Decimal("0.00"), nullable=False)
    sort_order = Column(Integer, default=0, nullable=False)
    is_featured = Column(Boolean, default=False, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    steps = relationship(
        "TutorialStep",
        back_populates="tutorial",
        cascade="all, delete-orphan",
        order_by="TutorialStep.step_number",
    )


class TutorialStep(TimestampMixin, Base):
    """One step of a tutorial."""

    __tablename__ = "tutorial_steps"

    id = Column(Integer, primary_key=True)
    tutorial_id = Column(Integer, ForeignKey("tutorials.id"), nullable=False)
    step_number = Column(Integer, nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    target_element = Column(String(255), nullable=True)
    position = Column(String(10), default="center", nullable=False)
    requires_action = Column(Boolean, default=False, nullable=False)
    action_type = Column(String(30), nullable=True)
    can_skip = Column(Boolean, default=True, nullable=False)

    __table_args__ = (UniqueConstraint("tutorial_id", "step_number", name="uq_tutorial_step_number"),)

    # Relationships
    tutorial = relationship("Tutorial", back_populates="steps")


class UserTutorialProgress(Base):
    """How far a user got through a tutorial."""

    __tablename__ = "user_tutorial_progress"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    tutorial_id = Column(Integer, ForeignKey("tutorials.id"), nullable=False)
    current_step = Column(Integer, default=1, nullable=False)
    total_steps = Column(Integer, nullable=False)
    completed = Column(Boolean, default=False, nullable=False)
    completed_at = Column(DateTime, nullable=True)
    started_at = Column(DateTime, default=now_utc, nullable=False)
    last_activity_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (UniqueConstraint("user_id", "tutorial_id", name="uq_user_tutorial"),)

    # Relationships
    user = relationship("User")
    tutorial = relationship("Tutorial")

    @property
    def progress_percentage(self) -> int:
        if not self.total_steps:
            return 0
        if self.completed:
            return 100
        return int((self.current_step - 1) * 100 / self.total_steps)


class HelpTooltip(TimestampMixin, Base):
    """Contextual tooltip attached to a UI element."""

    __tablename__ = "help_tooltips"

    id = Column(Integer, primary_key=True)
    element_id = Column(String(255), unique=True, nullable=False)
    title = Column(String(255), nullable=False)
    content = Column(Text, nullable=False)
    position = Column(String(10), default="auto", nullable=False)
    page_url = Column(String(255), nullable=True)
    user_role = Column(String(10), default="all", nullable=False)
    conditions = Column(JSON, nullable=True)
    show_once = Column(Boolean, default=False, nullable=False)
    dismissible = Column(Boolean, default=True, nullable=False)
    priority = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    __table_args__ = (Index("ix_help_tooltips_page_active", "page_url", "is_active"),)
