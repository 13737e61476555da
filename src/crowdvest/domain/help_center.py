"""Help center service.

Each article caches how many readers found it helpful and how many did not.
The counters are kept in step with the ratings by the rating writes
themselves; they are never recounted.
"""

import logging
from typing import Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import ArticleFeedback, KbArticle
from crowdvest.domain.errors import ConflictError, NotFoundError, ValidationError
from crowdvest.utils.slug import slugify

logger = logging.getLogger(__name__)


class HelpCenterService:
    """Service for knowledge base articles and their ratings."""

    def __init__(self, db: Database):
        self.db = db

    def create_article(
        self,
        title: str,
        content: str,
        category: Optional[str] = None,
        author_id: Optional[int] = None,
    ) -> int:
        """Create a published article with a slug derived from its title."""
        if not title or not title.strip():
            raise ValidationError("Article title is required")
        slug = slugify(title)
        if not slug:
            raise ValidationError(f"Cannot derive a slug from '{title}'")
        if self.db.kb_article_slug_exists(slug):
            raise ConflictError(errors.duplicate_slug("Article", slug))
        return self.db.create_kb_article(
            title=title.strip(), slug=slug, content=content, category=category, author_id=author_id
        )

    def get_article(self, article_id: int) -> Optional[KbArticle]:
        return self.db.get_kb_article(article_id)

    def record_view(self, article_id: int) -> None:
        self.db.increment_article_views(article_id)

    def rate_article(
        self, article_id: int, user_id: int, is_helpful: bool, comment: Optional[str] = None
    ) -> int:
        """Rate an article once per user.

        Returns:
            Feedback ID

        Raises:
            NotFoundError: If the article does not exist
            ConflictError: If the user already rated it (use change_rating)
        """
        feedback_id = self.db.create_article_feedback(
            article_id=article_id, user_id=user_id, is_helpful=is_helpful, comment=comment
        )
        logger.debug("User %d rated article %d helpful=%s", user_id, article_id, is_helpful)
        return feedback_id

    def get_rating(self, feedback_id: int) -> Optional[ArticleFeedback]:
        return self.db.get_article_feedback(feedback_id)

    def change_rating(self, feedback_id: int, is_helpful: bool, comment: Optional[str] = None) -> None:
        """Change a rating; counters move only if helpfulness flipped."""
        if self.db.get_article_feedback(feedback_id) is None:
            raise NotFoundError(errors.not_found("Article feedback", feedback_id))
        self.db.update_article_feedback(feedback_id, is_helpful=is_helpful, comment=comment)

    def delete_rating(self, feedback_id: int) -> None:
        """Remove a rating and its contribution to the counters."""
        if self.db.get_article_feedback(feedback_id) is None:
            raise NotFoundError(errors.not_found("Article feedback", feedback_id))
        self.db.delete_article_feedback(feedback_id)
