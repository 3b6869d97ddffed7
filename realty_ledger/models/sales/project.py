"""Project and unit models."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal

from realty_ledger.models.base import Address
from realty_ledger.models.sales.enums import UnitStatus


@dataclass
class Project:
    """Development project grouping a set of units."""

    id: int
    name: str
    address: Address = field(default_factory=Address)
    created_at: datetime | None = None


@dataclass
class Unit:
    """Sellable unit inside a project."""

    id: int
    project_id: int | None
    unit_number: str
    price: Decimal
    status: UnitStatus
    sold_to: int | None = None  # Buyer id
    reserved_by: int | None = None  # Buyer id
    unit_type: str = ""
    floor: int | None = None
    sqft: Decimal | None = None
    bedrooms: int | None = None
    bathrooms: int | None = None
    created_at: datetime | None = None
