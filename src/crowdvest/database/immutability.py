"""Flush-time enforcement of write-once record rules.

``SQLAlchemyDatabase`` checks the guards explicitly before every audit-record
write. The listener installed here runs the same guard functions on every
flush and on every ORM bulk statement, so ORM code that mutates an audit record
directly through a session is rejected as well.
"""

import logging
from typing import Any

from sqlalchemy import event, inspect
from sqlalchemy.orm import ORMExecuteState, Session, sessionmaker

from crowdvest.domain import errors
from crowdvest.domain.errors import ImmutableRecordError
from crowdvest.domain.guards import GuardResult, check_audit_delete, check_audit_update

logger = logging.getLogger(__name__)


def attribute_changes(instance: Any) -> tuple[dict[str, Any], dict[str, Any]]:
    """Return (persisted values, pending changes) for a mapped instance.

    Keys are mapped attribute names, not column names.
    """
    state = inspect(instance)
    current: dict[str, Any] = {}
    changes: dict[str, Any] = {}
    for attr in state.mapper.column_attrs:
        history = state.attrs[attr.key].history
        if history.deleted:
            current[attr.key] = history.deleted[0]
        elif history.unchanged:
            current[attr.key] = history.unchanged[0]
        if history.added:
            changes[attr.key] = history.added[0]
    return current, changes


def _immutable_kind(instance: Any) -> str:
    return getattr(type(instance), "__immutable_kind__", "")


def _before_flush(session: Session, flush_context: Any, instances: Any) -> None:
    for instance in session.dirty:
        kind = _immutable_kind(instance)
        if not kind or not session.is_modified(instance, include_collections=False):
            continue
        current, changes = attribute_changes(instance)
        result = check_audit_update(kind, current.get("id"), current, changes)
        if not result.ok:
            logger.warning("Rejected update of %s %s: %s", kind, current.get("id"), result.error)
            result.raise_if_failed()

    for instance in session.deleted:
        kind = _immutable_kind(instance)
        if kind:
            result = check_audit_delete(kind, instance.id)
            logger.warning("Rejected delete of %s %s", kind, instance.id)
            result.raise_if_failed()




def _do_orm_execute(orm_execute_state: ORMExecuteState) -> None:
    if not (orm_execute_state.is_update or orm_execute_state.is_delete):
        return
    mapper = orm_execute_state.bind_mapper
    kind = getattr(mapper.class_, "__immutable_kind__", "") if mapper is not None else ""
    if not kind:
        return

    if orm_execute_state.is_delete:
        result = check_audit_delete(kind, "(bulk)")
    else:
        result = GuardResult.failure(ImmutableRecordError(errors.immutable_bulk_update(kind)))
    logger.warning("Rejected bulk statement on %s: %s", kind, result.error)
    result.raise_if_failed()


def install_immutability_guards(session_factory: sessionmaker[Session]) -> None:
    """Register the flush and bulk-statement guards on a session factory (idempotent).

    Bulk ``UPDATE``/``DELETE`` statements skip the unit of work, so they are
    refused outright for write-once mappers; permitted changes go through
    attribute assignment and the flush check.
    """
    if not event.contains(session_factory, "before_flush", _before_flush):
        event.listen(session_factory, "before_flush", _before_flush)
    if not event.contains(session_factory, "do_orm_execute", _do_orm_execute):
        event.listen(session_factory, "do_orm_execute", _do_orm_execute)
