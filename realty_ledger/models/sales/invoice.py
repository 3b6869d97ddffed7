"""Invoice and payment models."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal

from realty_ledger.models.sales.enums import InvoiceStatus, PaymentMethod, PaymentStatus


@dataclass
class Invoice:
    """Invoice issued to a buyer for a unit.

    ``status`` is the stored value and may be stale: a pending invoice
    whose due date has passed is displayed as overdue (see
    ``realty_ledger.reconciliation.status``).
    """

    id: int
    invoice_number: str
    buyer_id: int | None
    unit_id: int | None
    total_amount: Decimal
    status: InvoiceStatus
    due_date: date | datetime | None
    issue_date: date | datetime | None = None
    project_id: int | None = None  # Derived via the unit when missing
    tax_amount: Decimal | None = None
    subtotal: Decimal | None = None
    paid_date: date | datetime | None = None
    payment_terms: str = ""
    description: str = ""
    notes: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None


@dataclass
class Payment:
    """Payment received from a buyer, usually against one invoice."""

    id: int
    buyer_id: int | None
    amount: Decimal
    status: PaymentStatus
    payment_method: PaymentMethod | None = None
    payment_date: date | datetime | None = None
    invoice_id: int | None = None  # Some payments only reference unit/buyer
    unit_id: int | None = None
    transaction_id: str = ""
    notes: str = ""
    created_at: datetime | None = None
    updated_at: datetime | None = None
