"""Buyer model for sales domain."""

from dataclasses import dataclass, field
from datetime import datetime

from realty_ledger.models.base import Address


@dataclass
class Buyer:
    """Person buying or reserving units."""

    id: int
    first_name: str
    last_name: str
    email: str
    phone: str = ""
    credit_score: int | None = None  # 300-850
    address: Address = field(default_factory=Address)
    created_at: datetime | None = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()
