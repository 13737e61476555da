"""Legal agreement service."""

import hashlib
import logging
from datetime import date, datetime, UTC
from typing import Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import AgreementSignature, LegalAgreement
from crowdvest.domain.errors import ConflictError, NotFoundError, ValidationError
from crowdvest.utils.slug import slugify

logger = logging.getLogger(__name__)


def content_hash(content: str) -> str:
    """SHA-256 hex digest of an agreement text, stored with each signature."""
    return hashlib.sha256(content.encode("utf-8")).hexdigest()


class AgreementService:
    """Service for legal agreements, their versions and user signatures."""

    def __init__(self, db: Database):
        """Initialize agreement service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, agreement_id: int) -> LegalAgreement:
        agreement = self.db.get_legal_agreement(agreement_id)
        if agreement is None:
            raise NotFoundError(errors.not_found("Legal agreement", agreement_id))
        return agreement

    def create_agreement(
        self, agreement_type: str, title: str, requires_signature: bool = True
    ) -> int:
        """Create a draft agreement with no published version."""
        if not title or not title.strip():
            raise ValidationError("Agreement title is required")
        return self.db.create_legal_agreement(
            agreement_type=agreement_type,
            title=title.strip(),
            slug=slugify(title),
            requires_signature=requires_signature,
        )

    def get_agreement(self, agreement_id: int) -> Optional[LegalAgreement]:
        return self.db.get_legal_agreement(agreement_id)

    def publish_version(
        self,
        agreement_id: int,
        version: str,
        content: str,
        effective_date: Optional[date] = None,
        change_summary: Optional[str] = None,
        published_by_id: Optional[int] = None,
    ) -> int:
        """Publish a new version; it becomes the current one and the agreement goes active.

        Raises:
            NotFoundError: If the agreement does not exist
            ValidationError: If the version label or content is empty
            ConflictError: If the version was already published
        """
        self._require(agreement_id)
        if not version or not version.strip():
            raise ValidationError("Version is required")
        if not content or not content.strip():
            raise ValidationError("Agreement content is required")

        version_id = self.db.publish_agreement_version(
            agreement_id=agreement_id,
            version=version.strip(),
            content=content,
            effective_date=effective_date or date.today(),
            change_summary=change_summary,
            published_by_id=published_by_id,
        )
        logger.info("Published version %s of agreement %d", version, agreement_id)
        return version_id

    def sign(
        self,
        user_id: int,
        agreement_id: int,
        ip_address: Optional[str] = None,
        user_agent: Optional[str] = None,
    ) -> int:
        """Record that a user accepted the agreement's current version.

        Returns:
            Signature ID

        Raises:
            NotFoundError: If the agreement does not exist
            ValidationError: If it is not active or has no published version
            ConflictError: If the user already signed the current version
        """
        agreement = self._require(agreement_id)
        if agreement.status != "active" or agreement.current_version is None:
            raise ValidationError(f"Agreement '{agreement.title}' has no active version to sign")

        content = self.db.get_agreement_version_content(agreement_id, agreement.current_version)
        if content is None:
            raise ConflictError(
                f"Agreement {agreement_id} points at missing version {agreement.current_version}"
            )

        signature_id = self.db.create_agreement_signature(
            user_id=user_id,
            agreement_id=agreement_id,
            agreement_version=agreement.current_version,
            content_hash=content_hash(content),
            signed_at=datetime.now(UTC),
            ip_address=ip_address,
            user_agent=user_agent,
        )
        logger.info(
            "User %d signed agreement %d version %s", user_id, agreement_id, agreement.current_version
        )
        return signature_id

    def get_signature(
        self, user_id: int, agreement_id: int, version: str
    ) -> Optional[AgreementSignature]:
        return self.db.get_agreement_signature(user_id, agreement_id, version)

    def has_signed_current(self, user_id: int, agreement_id: int) -> bool:
        """Check whether a user signed the agreement's current version."""
        agreement = self._require(agreement_id)
        if agreement.current_version is None:
            return False
        return (
            self.db.get_agreement_signature(user_id, agreement_id, agreement.current_version)
            is not None
        )
