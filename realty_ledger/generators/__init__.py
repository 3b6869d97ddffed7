"""Sample data generators for the sales domain."""

from realty_ledger.generators.sales import (
    BuyerGenerator,
    InvoiceGenerator,
    PaymentGenerator,
    ProjectGenerator,
    UnitGenerator,
)

__all__ = [
    "BuyerGenerator",
    "InvoiceGenerator",
    "PaymentGenerator",
    "ProjectGenerator",
    "UnitGenerator",
]
