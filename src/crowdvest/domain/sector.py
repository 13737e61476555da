"""Sector and company domain services.

Both entities carry a slug that follows the name: it is derived at creation
and re-derived on rename, unless it was set by hand, in which case it stays
put until it is reset.
"""

import logging
from typing import Callable, Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import Company, Sector
from crowdvest.domain.errors import ConflictError, NotFoundError, ValidationError
from crowdvest.utils.slug import slugify

logger = logging.getLogger(__name__)


def derive_slug(name: str, manual_slug: Optional[str] = None) -> tuple[str, bool]:
    """Return (slug, overridden) for a name and an optional hand-written slug.

    Raises:
        ValidationError: If no usable slug can be derived
    """
    overridden = manual_slug is not None
    slug = slugify(manual_slug if overridden else name)
    if not slug:
        source = manual_slug if overridden else name
        raise ValidationError(f"Cannot derive a slug from '{source}'")
    return slug, overridden


def _check_slug_free(
    entity: str, slug: str, exists: Callable[..., bool], exclude_id: Optional[int] = None
) -> None:
    if exists(slug, exclude_id=exclude_id):
        raise ConflictError(errors.duplicate_slug(entity, slug))


class SectorService:
    """Service for managing sectors."""

    def __init__(self, db: Database):
        """Initialize sector service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, sector_id: int) -> Sector:
        sector = self.db.get_sector(sector_id)
        if sector is None:
            raise NotFoundError(errors.not_found("Sector", sector_id))
        return sector

    def create_sector(
        self, name: str, slug: Optional[str] = None, description: Optional[str] = None
    ) -> int:
        """Create a sector.

        Args:
            name: Sector name
            slug: Optional hand-written slug; derived from the name when omitted
            description: Optional description

        Returns:
            Sector ID

        Raises:
            ValidationError: If the name is empty
            ConflictError: If the slug is taken
        """
        if not name or not name.strip():
            raise ValidationError("Sector name is required")
        name = name.strip()
        final_slug, overridden = derive_slug(name, slug)
        _check_slug_free("Sector", final_slug, self.db.sector_slug_exists)

        sector_id = self.db.create_sector(
            name=name, slug=final_slug, slug_overridden=overridden, description=description
        )
        logger.info("Created sector %d '%s' (%s)", sector_id, name, final_slug)
        return sector_id

    def rename_sector(self, sector_id: int, name: str) -> None:
        """Rename a sector, re-deriving its slug unless it was set by hand.

        Raises:
            NotFoundError: If the sector does not exist
            ValidationError: If the name is empty
            ConflictError: If the re-derived slug is taken
        """
        sector = self._require(sector_id)
        if not name or not name.strip():
            raise ValidationError("Sector name is required")
        name = name.strip()

        new_slug = None
        if not sector.slug_overridden:
            new_slug, _ = derive_slug(name)
            _check_slug_free("Sector", new_slug, self.db.sector_slug_exists, exclude_id=sector_id)

        self.db.update_sector(sector_id, name=name, slug=new_slug)
        logger.info("Renamed sector %d to '%s'", sector_id, name)

    def set_slug(self, sector_id: int, slug: Optional[str]) -> None:
        """Set a hand-written slug, or pass None to go back to the derived one."""
        sector = self._require(sector_id)
        new_slug, overridden = derive_slug(sector.name, slug)
        _check_slug_free("Sector", new_slug, self.db.sector_slug_exists, exclude_id=sector_id)
        self.db.update_sector(sector_id, slug=new_slug, slug_overridden=overridden)

    def get_sector(self, sector_id: int) -> Optional[Sector]:
        """Get a sector by ID."""
        return self.db.get_sector(sector_id)

    def get_sector_by_slug(self, slug: str) -> Optional[Sector]:
        """Get a sector by slug."""
        return self.db.get_sector_by_slug(slug)

    def list_sectors(self, include_inactive: bool = False) -> list[Sector]:
        """List sectors."""
        return self.db.list_sectors(include_inactive=include_inactive)

    def delete_sector(self, sector_id: int) -> None:
        """Soft-delete a sector.

        Raises:
            NotFoundError: If the sector does not exist
            IntegrityGuardError: If companies or deals still reference it
        """
        self._require(sector_id)
        self.db.delete_sector(sector_id)
        logger.info("Deleted sector %d", sector_id)


class CompanyService:
    """Service for managing companies."""

    def __init__(self, db: Database):
        """Initialize company service.

        Args:
            db: Database instance
        """
        self.db = db

    def create_company(
        self,
        name: str,
        sector_id: Optional[int] = None,
        slug: Optional[str] = None,
        description: Optional[str] = None,
        status: str = "draft",
    ) -> int:
        """Create a company.

        Raises:
            ValidationError: If the name is empty
            NotFoundError: If the sector does not exist
            ConflictError: If the slug is taken
        """
        if not name or not name.strip():
            raise ValidationError("Company name is required")
        if sector_id is not None and self.db.get_sector(sector_id) is None:
            raise NotFoundError(errors.not_found("Sector", sector_id))
        name = name.strip()
        final_slug, overridden = derive_slug(name, slug)
        _check_slug_free("Company", final_slug, self.db.company_slug_exists)

        company_id = self.db.create_company(
            name=name,
            slug=final_slug,
            slug_overridden=overridden,
            sector_id=sector_id,
            description=description,
            status=status,
        )
        logger.info("Created company %d '%s'", company_id, name)
        return company_id

    def rename_company(self, company_id: int, name: str) -> None:
        """Rename a company, re-deriving its slug unless it was set by hand."""
        company = self.db.get_company(company_id)
        if company is None:
            raise NotFoundError(errors.not_found("Company", company_id))
        if not name or not name.strip():
            raise ValidationError("Company name is required")
        name = name.strip()

        new_slug = None
        if not company.slug_overridden:
            new_slug, _ = derive_slug(name)
            _check_slug_free("Company", new_slug, self.db.company_slug_exists, exclude_id=company_id)

        self.db.update_company(company_id, name=name, slug=new_slug)

    def get_company(self, company_id: int) -> Optional[Company]:
        """Get a company by ID."""
        return self.db.get_company(company_id)
