"""Tests for sectors, companies and slug handling."""

from datetime import UTC, datetime
from decimal import Decimal

import pytest

from crowdvest.database.models import Company, Sector
from crowdvest.domain.errors import ConflictError, IntegrityGuardError, NotFoundError, ValidationError
from crowdvest.domain.sector import derive_slug


def test_derive_slug_from_name():
    assert derive_slug("Food & Beverages") == ("food-and-beverages", False)


def test_derive_slug_manual_override():
    assert derive_slug("Food & Beverages", "FnB") == ("fnb", True)


def test_derive_slug_rejects_empty():
    with pytest.raises(ValidationError):
        derive_slug("!!!")


def test_create_sector(sector_service):
    sector_id = sector_service.create_sector("Clean Energy", description="Solar and wind")
    sector = sector_service.get_sector(sector_id)

    assert sector.name == "Clean Energy"
    assert sector.slug == "clean-energy"
    assert sector.slug_overridden is False
    assert sector_service.get_sector_by_slug("clean-energy").id == sector_id


def test_duplicate_slug_conflicts(sector_service):
    sector_service.create_sector("Clean Energy")
    with pytest.raises(ConflictError):
        sector_service.create_sector("Clean  Energy!")


def test_rename_rederives_slug(sector_service):
    sector_id = sector_service.create_sector("Fintech")
    sector_service.rename_sector(sector_id, "Financial Services")

    assert sector_service.get_sector(sector_id).slug == "financial-services"


def test_rename_keeps_manual_slug(sector_service):
    sector_id = sector_service.create_sector("Fintech", slug="money")
    sector_service.rename_sector(sector_id, "Financial Services")
    sector = sector_service.get_sector(sector_id)

    assert sector.name == "Financial Services"
    assert sector.slug == "money"
    assert sector.slug_overridden is True


def test_reset_slug_goes_back_to_derived(sector_service):
    sector_id = sector_service.create_sector("Fintech", slug="money")
    sector_service.set_slug(sector_id, None)
    sector = sector_service.get_sector(sector_id)

    assert sector.slug == "fintech"
    assert sector.slug_overridden is False


def test_rename_into_taken_slug_conflicts(sector_service):
    sector_service.create_sector("Healthcare")
    sector_id = sector_service.create_sector("Health")
    with pytest.raises(ConflictError):
        sector_service.rename_sector(sector_id, "Healthcare")


def test_delete_unused_sector(sector_service):
    sector_id = sector_service.create_sector("Agritech")
    sector_service.delete_sector(sector_id)

    assert sector_service.get_sector(sector_id) is None
    assert sector_service.list_sectors() == []


def test_delete_sector_with_company_is_blocked(sector_service, company_service):
    sector_id = sector_service.create_sector("Agritech")
    company_service.create_company("FarmCo", sector_id=sector_id)

    with pytest.raises(IntegrityGuardError, match="1 company"):
        sector_service.delete_sector(sector_id)
    assert sector_service.get_sector(sector_id) is not None


def test_delete_marks_sector_inactive(temp_db, sector_service):
    sector_id = sector_service.create_sector("Agritech")
    sector_service.delete_sector(sector_id)

    row = temp_db._get_session().get(Sector, sector_id)
    assert row.deleted_at is not None
    assert row.is_active is False


def test_delete_sector_with_only_soft_deleted_company_is_blocked(
    temp_db, sector_service, company_service
):
    sector_id = sector_service.create_sector("Agritech")
    company_id = company_service.create_company("FarmCo", sector_id=sector_id)
    session = temp_db._get_session()
    session.get(Company, company_id).deleted_at = datetime.now(UTC)
    session.commit()

    with pytest.raises(IntegrityGuardError, match="1 company"):
        sector_service.delete_sector(sector_id)
    assert sector_service.get_sector(sector_id) is not None


def test_delete_sector_with_deal_is_blocked(temp_db, sector_service, company_service):
    sector_id = sector_service.create_sector("Agritech")
    company_id = company_service.create_company("FarmCo")
    temp_db.create_deal(
        company_id=company_id,
        title="FarmCo Pre-IPO",
        slug="farmco-pre-ipo",
        share_price=Decimal("120.00"),
        total_shares=1000,
        min_investment=Decimal("5000.00"),
        sector_id=sector_id,
    )

    with pytest.raises(IntegrityGuardError, match="1 deal"):
        sector_service.delete_sector(sector_id)


def test_delete_unknown_sector(sector_service):
    with pytest.raises(NotFoundError):
        sector_service.delete_sector(404)


def test_company_slug_follows_name(company_service):
    company_id = company_service.create_company("Acme Robotics")
    company_service.rename_company(company_id, "Acme AI")

    assert company_service.get_company(company_id).slug == "acme-ai"


def test_company_with_unknown_sector(company_service):
    with pytest.raises(NotFoundError):
        company_service.create_company("Acme", sector_id=77)
