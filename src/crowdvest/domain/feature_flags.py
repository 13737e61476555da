"""Feature flags with deterministic percentage rollout."""

import logging
import zlib
from typing import Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import FeatureFlag
from crowdvest.domain.errors import NotFoundError, ValidationError
from crowdvest.domain.guards import check_rollout_percentage

logger = logging.getLogger(__name__)


def bucket_for(user_id: int, flag_key: str) -> int:
    """Return the rollout bucket (0-99) a user falls into for a flag.

    The bucket is the CRC-32 of the decimal user id followed by the flag key,
    modulo 100. Existing rollouts depend on this exact input, so neither the
    hash nor the concatenation order may change.
    """
    return zlib.crc32(f"{user_id}{flag_key}".encode("utf-8")) % 100


def is_enabled(
    flag_key: str, is_active: bool, rollout_percentage: Optional[int], user_id: Optional[int]
) -> bool:
    """Evaluate a flag for a user."""
    if not is_active:
        return False
    if rollout_percentage is None or rollout_percentage >= 100:
        return True
    if user_id is None:
        return False
    return bucket_for(user_id, flag_key) < rollout_percentage


class FeatureFlagService:
    """Service for managing and evaluating feature flags."""

    def __init__(self, db: Database):
        """Initialize feature flag service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_flag(
        self,
        key: str,
        name: str,
        description: Optional[str] = None,
        is_active: bool = False,
        rollout_percentage: Optional[int] = None,
    ) -> int:
        """Create a feature flag.

        Args:
            key: Unique flag key used by callers (e.g., "new_checkout")
            name: Human-readable name
            description: Optional description
            is_active: Whether the flag starts switched on
            rollout_percentage: Optional 0-100 share of users to enable it for

        Returns:
            Flag ID

        Raises:
            ValidationError: If the key is empty or the percentage is out of range
            ConflictError: If the key already exists
        """
        if not key or not key.strip():
            raise ValidationError("Flag key is required")
        check_rollout_percentage(rollout_percentage).raise_if_failed()

        flag_id = self.db.create_feature_flag(
            key=key.strip(),
            name=name,
            description=description,
            is_active=is_active,
            rollout_percentage=rollout_percentage,
        )
        logger.info("Created feature flag %s (active=%s, rollout=%s)", key, is_active, rollout_percentage)
        return flag_id

    def get_flag(self, key: str) -> Optional[FeatureFlag]:
        """Get a flag by key."""
        return self.db.get_feature_flag_by_key(key)

    def list_flags(self) -> list[FeatureFlag]:
        """List all flags."""
        return self.db.list_feature_flags()

    def _require(self, key: str) -> FeatureFlag:
        flag = self.db.get_feature_flag_by_key(key)
        if flag is None:
            raise NotFoundError(errors.not_found("Feature flag", key))
        return flag

    def set_active(self, key: str, is_active: bool) -> None:
        """Switch a flag on or off.

        Raises:
            NotFoundError: If the flag does not exist
        """
        flag = self._require(key)
        self.db.update_feature_flag(flag.id, is_active=is_active)
        logger.info("Feature flag %s %s", key, "activated" if is_active else "deactivated")

    def set_rollout_percentage(self, key: str, percentage: Optional[int]) -> None:
        """Set or clear (None) a flag's rollout percentage.

        Raises:
            NotFoundError: If the flag does not exist
            ValidationError: If the percentage is outside 0-100
        """
        flag = self._require(key)
        result = check_rollout_percentage(percentage)
        if not result.ok:
            logger.warning("Rejected rollout change for %s: %s", key, result.error)
            result.raise_if_failed()
        self.db.update_feature_flag(flag.id, rollout_percentage=percentage, update_rollout=True)
        logger.info("Feature flag %s rollout set to %s", key, percentage)

    def is_enabled_for(self, key: str, user_id: Optional[int] = None) -> bool:
        """Evaluate a flag for a user. Unknown flags are disabled."""
        flag = self.db.get_feature_flag_by_key(key)
        if flag is None:
            logger.debug("Unknown feature flag %s evaluated as disabled", key)
            return False
        return is_enabled(flag.key, flag.is_active, flag.rollout_percentage, user_id)
