"""Tests for legal agreements and signatures."""

import hashlib

import pytest

from crowdvest.domain.agreements import AgreementService, content_hash
from crowdvest.domain.errors import ConflictError, ImmutableRecordError, NotFoundError, ValidationError
from crowdvest.domain.guards import AGREEMENT_SIGNATURE


@pytest.fixture
def agreements(temp_db):
    return AgreementService(temp_db)


@pytest.fixture
def agreement_id(agreements):
    return agreements.create_agreement("terms", "Terms of Service")


def test_new_agreement_is_draft(agreements, agreement_id):
    agreement = agreements.get_agreement(agreement_id)

    assert agreement.slug == "terms-of-service"
    assert agreement.status == "draft"
    assert agreement.current_version is None


def test_cannot_sign_without_version(agreements, agreement_id, users):
    with pytest.raises(ValidationError):
        agreements.sign(users["alice"], agreement_id)
    assert agreements.has_signed_current(users["alice"], agreement_id) is False


def test_publish_and_sign(agreements, agreement_id, users):
    agreements.publish_version(agreement_id, "1.0", "You agree to everything.")
    signature_id = agreements.sign(users["alice"], agreement_id, ip_address="10.0.0.8")

    signature = agreements.get_signature(users["alice"], agreement_id, "1.0")
    assert signature.id == signature_id
    assert signature.content_hash == hashlib.sha256(b"You agree to everything.").hexdigest()
    assert signature.ip_address == "10.0.0.8"
    assert agreements.get_agreement(agreement_id).status == "active"
    assert agreements.has_signed_current(users["alice"], agreement_id) is True


def test_signing_twice_conflicts(agreements, agreement_id, users):
    agreements.publish_version(agreement_id, "1.0", "Text")
    agreements.sign(users["alice"], agreement_id)
    with pytest.raises(ConflictError):
        agreements.sign(users["alice"], agreement_id)


def test_new_version_needs_new_signature(agreements, agreement_id, users):
    agreements.publish_version(agreement_id, "1.0", "Old text")
    agreements.sign(users["alice"], agreement_id)
    agreements.publish_version(agreement_id, "2.0", "New text", change_summary="Fees changed")

    assert agreements.get_agreement(agreement_id).current_version == "2.0"
    assert agreements.has_signed_current(users["alice"], agreement_id) is False

    agreements.sign(users["alice"], agreement_id)
    assert agreements.has_signed_current(users["alice"], agreement_id) is True
    assert agreements.get_signature(users["alice"], agreement_id, "1.0").content_hash == content_hash("Old text")


def test_duplicate_version_conflicts(agreements, agreement_id):
    agreements.publish_version(agreement_id, "1.0", "Text")
    with pytest.raises(ConflictError):
        agreements.publish_version(agreement_id, "1.0", "Other text")


def test_publish_to_unknown_agreement(agreements):
    with pytest.raises(NotFoundError):
        agreements.publish_version(99, "1.0", "Text")


def test_signature_is_immutable(temp_db, agreements, agreement_id, users):
    agreements.publish_version(agreement_id, "1.0", "Text")
    signature_id = agreements.sign(users["alice"], agreement_id)

    with pytest.raises(ImmutableRecordError):
        temp_db.update_audit_record(AGREEMENT_SIGNATURE, signature_id, {"ip_address": "1.2.3.4"})
    with pytest.raises(ImmutableRecordError):
        temp_db.delete_audit_record(AGREEMENT_SIGNATURE, signature_id)
