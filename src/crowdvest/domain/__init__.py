"""Domain layer for crowdvest.

Services live in their own modules (``crowdvest.domain.saga``,
``crowdvest.domain.feature_flags``, ...) and are imported from there; this
package only re-exports the error types and the guard result.
"""

from crowdvest.domain.errors import (
    DomainError,
    ValidationError,
    NotFoundError,
    ConflictError,
    ImmutableRecordError,
    IntegrityGuardError,
)
from crowdvest.domain.guards import GuardResult

__all__ = [
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "ConflictError",
    "ImmutableRecordError",
    "IntegrityGuardError",
    "GuardResult",
]
