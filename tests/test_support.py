"""Tests for support tickets and notifications."""

import pytest

from crowdvest.domain.errors import NotFoundError, ValidationError
from crowdvest.domain.support import NotificationService, SupportService


@pytest.fixture
def support(temp_db):
    return SupportService(temp_db)


@pytest.fixture
def notifications(temp_db):
    return NotificationService(temp_db)


@pytest.fixture
def ticket_id(support, users):
    return support.open_ticket(users["alice"], "Withdrawal stuck", body="It has been 3 days", priority="high")


def test_open_ticket_with_first_message(support, ticket_id):
    ticket = support.get_ticket(ticket_id)

    assert ticket.status == "open"
    assert ticket.priority == "high"
    assert ticket.unread_by_admin_count == 1
    assert ticket.unread_by_user_count == 0
    assert [m.body for m in support.list_messages(ticket_id)] == ["It has been 3 days"]


def test_open_ticket_validation(support, users):
    with pytest.raises(ValidationError):
        support.open_ticket(users["alice"], "  ")
    with pytest.raises(ValidationError):
        support.open_ticket(users["alice"], "Help", priority="whenever")


def test_messages_count_against_the_other_side(support, ticket_id, users):
    support.post_message(ticket_id, users["admin"], "admin", "Looking into it")
    support.post_message(ticket_id, users["admin"], "admin", "Fixed now")
    support.post_message(ticket_id, users["alice"], "user", "Thanks")

    ticket = support.get_ticket(ticket_id)
    assert ticket.unread_by_user_count == 2
    assert ticket.unread_by_admin_count == 2


def test_mark_message_read_decrements_once(support, ticket_id, users):
    message_id = support.post_message(ticket_id, users["admin"], "admin", "Looking into it")

    assert support.mark_as_read(message_id) is True
    assert support.mark_as_read(message_id) is False
    assert support.get_ticket(ticket_id).unread_by_user_count == 0


def test_mark_ticket_read_clears_reader_side(support, ticket_id, users):
    support.post_message(ticket_id, users["admin"], "admin", "One")
    support.post_message(ticket_id, users["admin"], "admin", "Two")

    assert support.mark_ticket_read(ticket_id, "user") == 2
    ticket = support.get_ticket(ticket_id)
    assert ticket.unread_by_user_count == 0
    assert ticket.unread_by_admin_count == 1
    assert all(m.is_read for m in support.list_messages(ticket_id) if m.sender_type == "admin")


def test_deleting_unread_message_releases_count(support, ticket_id, users):
    message_id = support.post_message(ticket_id, users["admin"], "admin", "Oops, wrong ticket")
    support.delete_message(message_id)

    assert support.get_ticket(ticket_id).unread_by_user_count == 0
    assert support.get_ticket(ticket_id).unread_by_admin_count == 1


def test_deleting_read_message_keeps_count(support, ticket_id, users):
    read_id = support.post_message(ticket_id, users["admin"], "admin", "Read one")
    support.post_message(ticket_id, users["admin"], "admin", "Unread one")
    support.mark_as_read(read_id)
    support.delete_message(read_id)

    assert support.get_ticket(ticket_id).unread_by_user_count == 1


def test_closed_ticket_takes_no_messages(support, ticket_id, users):
    support.close_ticket(ticket_id)
    ticket = support.get_ticket(ticket_id)
    assert ticket.status == "closed"
    assert ticket.closed_at is not None

    with pytest.raises(ValidationError):
        support.post_message(ticket_id, users["alice"], "user", "Hello?")


def test_unknown_sender_type(support, ticket_id, users):
    with pytest.raises(ValidationError):
        support.post_message(ticket_id, users["alice"], "bot", "beep")


def test_post_to_unknown_ticket(support, users):
    with pytest.raises(NotFoundError):
        support.post_message(999, users["alice"], "user", "Hello")


def test_notifications_unread_lifecycle(notifications, users):
    first = notifications.notify(users["alice"], "kyc", "KYC approved", "You can invest now")
    notifications.notify(users["alice"], "deal", "New deal", "Acme is live", data={"deal_id": 3})
    notifications.notify(users["bob"], "deal", "New deal", "Acme is live")

    assert notifications.unread_count(users["alice"]) == 2
    notifications.mark_as_read(first)
    assert notifications.get_notification(first).is_read is True
    assert [n.title for n in notifications.list_unread(users["alice"])] == ["New deal"]

    assert notifications.mark_all_as_read(users["alice"]) == 1
    assert notifications.unread_count(users["alice"]) == 0
    assert notifications.unread_count(users["bob"]) == 1


def test_mark_read_twice_keeps_first_timestamp(notifications, users):
    notification_id = notifications.notify(users["alice"], "kyc", "KYC approved", "Done")
    notifications.mark_as_read(notification_id)
    first_read = notifications.get_notification(notification_id).read_at
    notifications.mark_as_read(notification_id)

    assert notifications.get_notification(notification_id).read_at == first_read
