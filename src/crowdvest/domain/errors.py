"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed pre-save validation."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


class ImmutableRecordError(DomainError):
    """Attempt to modify or delete a write-once record."""


class IntegrityGuardError(DomainError):
    """Delete blocked because dependent rows still reference the record."""


def not_found(entity: str, entity_id: object) -> str:
    """Return message for a missing entity."""
    return f"{entity} {entity_id} not found"


def immutable_update(kind: str, record_id: object, fields: list[str]) -> str:
    """Return message for a rejected update of a write-once record."""
    return (
        f"Cannot modify {kind} {record_id}: field{'s' if len(fields) != 1 else ''} "
        f"{', '.join(sorted(fields))} {'are' if len(fields) != 1 else 'is'} immutable"
    )


def immutable_delete(kind: str, record_id: object) -> str:
    """Return message for a rejected delete of a write-once record."""
    return f"Cannot delete {kind} {record_id}: records are permanent for audit purposes"


def invalid_saga_transition(saga_id: str, from_status: str, to_status: str) -> str:
    """Return message for a saga status change outside the state machine."""
    return f"Saga {saga_id} cannot move from '{from_status}' to '{to_status}'"


def sector_delete_blocked(name: str, company_count: int, deal_count: int) -> str:
    """Return message when a sector still has companies or deals."""
    parts = []
    if company_count > 0:
        parts.append(f"{company_count} compan{'ies' if company_count != 1 else 'y'}")
    if deal_count > 0:
        parts.append(f"{deal_count} deal{'s' if deal_count != 1 else ''}")
    return (
        f"Cannot delete sector '{name}': it has {', '.join(parts)}. "
        "Please reassign or delete them first."
    )


def duplicate_slug(entity: str, slug: str) -> str:
    """Return message for a slug already in use."""
    return f"{entity} with slug '{slug}' already exists"


def immutable_bulk_update(kind: str) -> str:
    """Return message for a rejected bulk UPDATE of write-once records."""
    return f"Cannot bulk-update {kind} records: change them one at a time through the ORM"
