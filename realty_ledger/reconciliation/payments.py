"""Reconciliation of payments against the invoice they settle."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable

from realty_ledger.models.sales import Invoice, Payment, PaymentStatus
from realty_ledger.models.sales.records import ZERO, as_enum, coerce_amount


@dataclass(frozen=True)
class PaymentBalance:
    """Balance of one invoice after applying its payments."""

    total_paid: Decimal
    remaining: Decimal
    is_paid_in_full: bool

    @property
    def credit(self) -> Decimal:
        """Overpaid amount; zero unless ``remaining`` is negative."""
        return -self.remaining if self.remaining < 0 else ZERO

    @property
    def amount_due(self) -> Decimal:
        """Amount still owed; never negative."""
        return self.remaining if self.remaining > 0 else ZERO

    def to_dict(self) -> dict[str, Decimal | bool]:
        return {
            "totalPaid": self.total_paid,
            "remaining": self.remaining,
            "isPaidInFull": self.is_paid_in_full,
        }


def counts_toward_balance(payment: Payment, include_pending: bool = False) -> bool:
    """Return True when a payment reduces the balance of its invoice.

    Completed payments always count. Pending payments count only when
    ``include_pending`` is set. Failed and refunded payments never count.
    """
    status = as_enum(PaymentStatus, payment.status)
    if status == PaymentStatus.COMPLETED:
        return True
    return include_pending and status == PaymentStatus.PENDING


def total_paid(
    invoice: Invoice,
    payments: Iterable[Payment] | None,
    include_pending: bool = False,
) -> Decimal:
    """Sum the counted payments that reference ``invoice``."""
    return sum(
        (
            coerce_amount(p.amount)
            for p in payments or ()
            if p.invoice_id is not None
            and p.invoice_id == invoice.id
            and counts_toward_balance(p, include_pending)
        ),
        ZERO,
    )


def aggregate(
    invoice: Invoice,
    payments: Iterable[Payment] | None,
    include_pending: bool = False,
) -> PaymentBalance:
    """Compute the payment balance of one invoice.

    Parameters
    ----------
    invoice : Invoice
        Invoice to reconcile.
    payments : Iterable[Payment] | None
        Full, unfiltered payments collection. ``None`` counts as empty.
    include_pending : bool
        Also count pending payments toward the balance.

    Returns
    -------
    PaymentBalance
        ``remaining`` may be negative when the invoice was overpaid.
    """
    paid = total_paid(invoice, payments, include_pending)
    remaining = coerce_amount(invoice.total_amount) - paid
    return PaymentBalance(
        total_paid=paid,
        remaining=remaining,
        is_paid_in_full=remaining <= 0,
    )
