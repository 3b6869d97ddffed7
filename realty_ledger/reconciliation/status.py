"""Effective (display) status of invoices.

An invoice stores the status it was last saved with. A pending invoice
whose due date has passed is shown as overdue without the stored value
ever being rewritten; every function here is a read-side projection.
"""

from __future__ import annotations

import math
from datetime import datetime, timezone
from decimal import Decimal

from realty_ledger.models.sales import Invoice, InvoiceStatus
from realty_ledger.models.sales.records import as_enum, coerce_amount, coerce_datetime

SECONDS_PER_DAY = 24 * 60 * 60

STATUS_SORT_ORDER: dict[InvoiceStatus, int] = {
    InvoiceStatus.PAID: 1,
    InvoiceStatus.PENDING: 2,
    InvoiceStatus.OVERDUE: 3,
    InvoiceStatus.CANCELLED: 4,
    InvoiceStatus.DRAFT: 5,
}


def utc_now() -> datetime:
    """Current time as a naive UTC timestamp."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def resolve_now(now: datetime | None = None) -> datetime:
    """Return ``now`` as a naive UTC timestamp, defaulting to the wall clock.

    Naive values are taken to be UTC already, matching how aware due
    dates are normalized.
    """
    if now is None:
        return utc_now()
    return coerce_datetime(now) or utc_now()


def is_overdue(invoice: Invoice | None, now: datetime | None = None) -> bool:
    """Return True when a pending invoice is past its due date.

    A missing or unparsable due date is never overdue.
    """
    if invoice is None or as_enum(InvoiceStatus, invoice.status) != InvoiceStatus.PENDING:
        return False
    due = coerce_datetime(invoice.due_date)
    if due is None:
        return False
    return due < resolve_now(now)


def effective_status(invoice: Invoice, now: datetime | None = None) -> InvoiceStatus:
    """Return the status an invoice should be displayed with.

    Parameters
    ----------
    invoice : Invoice
        Invoice as stored.
    now : datetime | None
        Reference time, naive UTC (default: UTC wall clock).

    Returns
    -------
    InvoiceStatus
        ``OVERDUE`` for a pending invoice past its due date, otherwise the
        stored status unchanged. A status stored as a plain string is
        returned as the matching member, or as-is when it matches none.
    """
    if is_overdue(invoice, now):
        return InvoiceStatus.OVERDUE
    return as_enum(InvoiceStatus, invoice.status) or invoice.status


def days_until_due(invoice: Invoice | None, now: datetime | None = None) -> int:
    """Whole days until the due date, rounded up; negative once past due."""
    if invoice is None:
        return 0
    due = coerce_datetime(invoice.due_date)
    if due is None:
        return 0
    delta = (due - resolve_now(now)).total_seconds()
    return math.ceil(delta / SECONDS_PER_DAY)


def days_overdue(invoice: Invoice | None, now: datetime | None = None) -> int:
    """Whole days past the due date, rounded up; 0 unless overdue."""
    if not is_overdue(invoice, now):
        return 0
    due = coerce_datetime(invoice.due_date)
    delta = (resolve_now(now) - due).total_seconds()
    return math.ceil(delta / SECONDS_PER_DAY)


def invoice_subtotal(invoice: Invoice | None) -> Decimal:
    """Amount before tax: total minus tax when a tax amount is present."""
    if invoice is None:
        return Decimal("0")
    total = coerce_amount(invoice.total_amount)
    if invoice.tax_amount:
        return total - coerce_amount(invoice.tax_amount)
    return total
