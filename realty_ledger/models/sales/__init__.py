"""Sales domain models."""

from realty_ledger.models.sales.buyer import Buyer
from realty_ledger.models.sales.enums import (
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    UnitStatus,
)
from realty_ledger.models.sales.invoice import Invoice, Payment
from realty_ledger.models.sales.project import Project, Unit

__all__ = [
    "Buyer",
    "Invoice",
    "InvoiceStatus",
    "Payment",
    "PaymentMethod",
    "PaymentStatus",
    "Project",
    "Unit",
    "UnitStatus",
]
