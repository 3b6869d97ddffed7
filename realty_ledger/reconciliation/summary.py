"""Roll-up statistics for dashboard cards.

All summarizers are pure: the same snapshot and the same ``now`` always
give the same result, whatever the order of the input collections. Money
is summed as ``Decimal`` so totals are exact, and every addend goes
through ``coerce_amount`` so a malformed amount counts as zero instead
of poisoning the total.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

from realty_ledger.models.sales import (
    Buyer,
    Invoice,
    InvoiceStatus,
    Payment,
    PaymentMethod,
    PaymentStatus,
    Project,
    Unit,
    UnitStatus,
)
from realty_ledger.models.sales.records import ZERO, as_enum, coerce_amount, coerce_datetime
from realty_ledger.reconciliation.payments import counts_toward_balance
from realty_ledger.reconciliation.status import effective_status, resolve_now

ONE_DECIMAL = Decimal("0.1")
CENTS = Decimal("0.01")


@dataclass(frozen=True)
class InvoiceSummary:
    """Counts and sums over a filtered invoice set."""

    total: int = 0
    paid: int = 0
    pending: int = 0
    overdue: int = 0
    cancelled: int = 0
    total_amount: Decimal = ZERO
    paid_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    total_paid_amount: Decimal = ZERO
    outstanding_amount: Decimal = ZERO

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total,
            "paid": self.paid,
            "pending": self.pending,
            "overdue": self.overdue,
            "cancelled": self.cancelled,
            "totalAmount": self.total_amount,
            "paidAmount": self.paid_amount,
            "pendingAmount": self.pending_amount,
            "totalPaidAmount": self.total_paid_amount,
            "outstandingAmount": self.outstanding_amount,
        }


@dataclass(frozen=True)
class StatusBucket:
    count: int = 0
    amount: Decimal = ZERO


@dataclass(frozen=True)
class BuyerSummary:
    """Per-buyer totals joined from invoices, payments and units."""

    buyer: Buyer
    properties: int = 0
    owned: int = 0
    reserved: int = 0
    total_invoiced: Decimal = ZERO
    total_paid: Decimal = ZERO
    outstanding: Decimal = ZERO
    invoice_count: int = 0
    payment_count: int = 0

    @property
    def has_outstanding(self) -> bool:
        return self.outstanding > 0

    @property
    def is_active(self) -> bool:
        return self.properties > 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "buyerId": self.buyer.id,
            "properties": self.properties,
            "owned": self.owned,
            "reserved": self.reserved,
            "totalInvoiced": self.total_invoiced,
            "totalPaid": self.total_paid,
            "outstanding": self.outstanding,
            "invoiceCount": self.invoice_count,
            "paymentCount": self.payment_count,
        }


@dataclass(frozen=True)
class BuyerPortfolioSummary:
    total: int = 0
    active: int = 0
    with_outstanding: int = 0
    total_revenue: Decimal = ZERO
    total_outstanding: Decimal = ZERO
    average_credit_score: int = 0


@dataclass(frozen=True)
class PaymentSummary:
    total_count: int = 0
    completed: int = 0
    pending: int = 0
    failed: int = 0
    refunded: int = 0
    completed_amount: Decimal = ZERO
    pending_amount: Decimal = ZERO
    by_method: dict[str, Decimal] = field(default_factory=dict)


@dataclass(frozen=True)
class MonthlyIncome:
    label: str  # e.g. "Jan 2024"
    month_start: date
    amount: Decimal


@dataclass(frozen=True)
class IncomeGrowth:
    current_month: Decimal
    previous_month: Decimal
    growth_percent: Decimal
    is_positive: bool


@dataclass(frozen=True)
class ProjectIncome:
    project_id: int
    name: str
    amount: Decimal


@dataclass(frozen=True)
class UnitSummary:
    total: int = 0
    available: int = 0
    reserved: int = 0
    sold: int = 0
    total_value: Decimal = ZERO
    available_value: Decimal = ZERO
    average_price: Decimal = ZERO
    availability_rate: Decimal = ZERO  # Percent, one decimal
    sold_rate: Decimal = ZERO


def summarize(
    invoices: Iterable[Invoice] | None,
    payments: Iterable[Payment] | None,
    now: datetime | None = None,
    include_pending: bool = False,
) -> InvoiceSummary:
    """Summarize an already-filtered invoice set.

    Parameters
    ----------
    invoices : Iterable[Invoice] | None
        Invoices to summarize. ``None`` counts as empty.
    payments : Iterable[Payment] | None
        Payments collection; only payments referencing one of ``invoices``
        and counting toward balances contribute to ``total_paid_amount``.
    now : datetime | None
        Reference time for overdue detection (default: UTC wall clock).
    include_pending : bool
        Also count pending payments as paid.

    Returns
    -------
    InvoiceSummary
        All-zero summary for an empty set.
    """
    now = resolve_now(now)
    invoices = list(invoices or ())

    counts = {status: 0 for status in InvoiceStatus}
    amounts = {status: ZERO for status in InvoiceStatus}
    total_amount = ZERO
    invoice_ids = set()

    for invoice in invoices:
        status = effective_status(invoice, now)
        amount = coerce_amount(invoice.total_amount)
        if status in counts:
            counts[status] += 1
            amounts[status] += amount
        total_amount += amount
        invoice_ids.add(invoice.id)

    total_paid_amount = sum(
        (
            coerce_amount(p.amount)
            for p in payments or ()
            if p.invoice_id in invoice_ids and counts_toward_balance(p, include_pending)
        ),
        ZERO,
    )

    return InvoiceSummary(
        total=len(invoices),
        paid=counts[InvoiceStatus.PAID],
        pending=counts[InvoiceStatus.PENDING],
        overdue=counts[InvoiceStatus.OVERDUE],
        cancelled=counts[InvoiceStatus.CANCELLED],
        total_amount=total_amount,
        paid_amount=amounts[InvoiceStatus.PAID],
        pending_amount=amounts[InvoiceStatus.PENDING],
        total_paid_amount=total_paid_amount,
        outstanding_amount=total_amount - total_paid_amount,
    )


def status_breakdown(
    invoices: Iterable[Invoice] | None,
    now: datetime | None = None,
) -> dict[InvoiceStatus, StatusBucket]:
    """Count and amount per effective status, every status present."""
    now = resolve_now(now)
    counts = {status: 0 for status in InvoiceStatus}
    amounts = {status: ZERO for status in InvoiceStatus}
    for invoice in invoices or ():
        status = effective_status(invoice, now)
        if status in counts:
            counts[status] += 1
            amounts[status] += coerce_amount(invoice.total_amount)
    return {status: StatusBucket(counts[status], amounts[status]) for status in InvoiceStatus}


def summarize_buyer(
    buyer: Buyer,
    invoices: Iterable[Invoice] | None,
    payments: Iterable[Payment] | None,
    units: Iterable[Unit] | None,
    include_pending: bool = False,
) -> BuyerSummary:
    """Join a buyer with their invoices, payments and units.

    A payment belongs to the buyer when its ``buyer_id`` matches or when
    it references one of the buyer's invoices. Only payments counting
    toward balances are added to ``total_paid``; ``payment_count`` counts
    all of the buyer's payments.
    """
    buyer_invoices = [i for i in invoices or () if i.buyer_id == buyer.id]
    invoice_ids = {i.id for i in buyer_invoices}
    buyer_payments = [
        p
        for p in payments or ()
        if p.buyer_id == buyer.id or (p.invoice_id is not None and p.invoice_id in invoice_ids)
    ]

    owned = 0
    reserved = 0
    for unit in units or ():
        if unit.sold_to == buyer.id:
            owned += 1
        elif unit.reserved_by == buyer.id:
            reserved += 1

    total_invoiced = sum((coerce_amount(i.total_amount) for i in buyer_invoices), ZERO)
    paid = sum(
        (coerce_amount(p.amount) for p in buyer_payments if counts_toward_balance(p, include_pending)),
        ZERO,
    )

    return BuyerSummary(
        buyer=buyer,
        properties=owned + reserved,
        owned=owned,
        reserved=reserved,
        total_invoiced=total_invoiced,
        total_paid=paid,
        outstanding=total_invoiced - paid,
        invoice_count=len(buyer_invoices),
        payment_count=len(buyer_payments),
    )


def summarize_buyers(summaries: Iterable[BuyerSummary] | None) -> BuyerPortfolioSummary:
    """Aggregate per-buyer summaries for the buyers overview cards."""
    summaries = list(summaries or ())
    scores = [s.buyer.credit_score for s in summaries if s.buyer.credit_score]
    average = Decimal(sum(scores)) / len(scores) if scores else ZERO

    return BuyerPortfolioSummary(
        total=len(summaries),
        active=sum(1 for s in summaries if s.is_active),
        with_outstanding=sum(1 for s in summaries if s.has_outstanding),
        total_revenue=sum((s.total_paid for s in summaries), ZERO),
        total_outstanding=sum((s.outstanding for s in summaries), ZERO),
        average_credit_score=int(average.quantize(Decimal("1"), rounding=ROUND_HALF_UP)),
    )


def summarize_payments(payments: Iterable[Payment] | None) -> PaymentSummary:
    """Counts per payment status and completed amounts per method."""
    counts = {status: 0 for status in PaymentStatus}
    completed_amount = ZERO
    pending_amount = ZERO
    by_method: dict[str, Decimal] = {}
    total = 0

    for payment in payments or ():
        total += 1
        status = as_enum(PaymentStatus, payment.status)
        if status is None:
            continue
        counts[status] += 1
        amount = coerce_amount(payment.amount)
        if status == PaymentStatus.COMPLETED:
            completed_amount += amount
            method = as_enum(PaymentMethod, payment.payment_method)
            key = method.value if method is not None else "unknown"
            by_method[key] = by_method.get(key, ZERO) + amount
        elif status == PaymentStatus.PENDING:
            pending_amount += amount

    return PaymentSummary(
        total_count=total,
        completed=counts[PaymentStatus.COMPLETED],
        pending=counts[PaymentStatus.PENDING],
        failed=counts[PaymentStatus.FAILED],
        refunded=counts[PaymentStatus.REFUNDED],
        completed_amount=completed_amount,
        pending_amount=pending_amount,
        by_method=dict(sorted(by_method.items())),
    )


def monthly_income(
    payments: Iterable[Payment] | None,
    now: datetime | None = None,
    months: int = 12,
) -> list[MonthlyIncome]:
    """Completed income per calendar month, oldest first, ending at ``now``."""
    now = resolve_now(now)
    payments = list(payments or ())
    result = []
    for offset in range(months - 1, -1, -1):
        start = _month_start(now, -offset)
        end = _month_start(now, -offset + 1)
        amount = _completed_between(payments, start, min(end, now), end_inclusive=end > now)
        result.append(MonthlyIncome(label=start.strftime("%b %Y"), month_start=start.date(), amount=amount))
    return result


def income_growth(payments: Iterable[Payment] | None, now: datetime | None = None) -> IncomeGrowth:
    """Compare completed income of the current month with the previous one."""
    now = resolve_now(now)
    payments = list(payments or ())
    current_start = _month_start(now, 0)
    current = _completed_between(payments, current_start, now, end_inclusive=True)
    previous = _completed_between(payments, _month_start(now, -1), current_start)

    if previous > 0:
        growth = ((current - previous) / previous * 100).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)
    else:
        growth = ZERO

    return IncomeGrowth(
        current_month=current,
        previous_month=previous,
        growth_percent=growth,
        is_positive=current >= previous,
    )


def project_income(
    payments: Iterable[Payment] | None,
    units: Iterable[Unit] | None,
    projects: Iterable[Project] | None,
) -> list[ProjectIncome]:
    """Completed income per project, joined through each payment's unit."""
    unit_projects = {u.id: u.project_id for u in units or ()}
    totals: dict[int, Decimal] = {}
    for payment in payments or ():
        if payment.status != PaymentStatus.COMPLETED:
            continue
        project_id = unit_projects.get(payment.unit_id)
        if project_id is None:
            continue
        totals[project_id] = totals.get(project_id, ZERO) + coerce_amount(payment.amount)

    return [
        ProjectIncome(project_id=p.id, name=p.name, amount=totals[p.id])
        for p in projects or ()
        if totals.get(p.id, ZERO) > 0
    ]


def summarize_units(units: Iterable[Unit] | None) -> UnitSummary:
    """Inventory counts and values over a unit collection."""
    units = list(units or ())
    if not units:
        return UnitSummary()

    counts = {status: 0 for status in UnitStatus}
    total_value = ZERO
    available_value = ZERO
    for unit in units:
        price = coerce_amount(unit.price)
        status = as_enum(UnitStatus, unit.status)
        if status is not None:
            counts[status] += 1
        total_value += price
        if status == UnitStatus.AVAILABLE:
            available_value += price

    total = len(units)
    return UnitSummary(
        total=total,
        available=counts[UnitStatus.AVAILABLE],
        reserved=counts[UnitStatus.RESERVED],
        sold=counts[UnitStatus.SOLD],
        total_value=total_value,
        available_value=available_value,
        average_price=(total_value / total).quantize(CENTS, rounding=ROUND_HALF_UP),
        availability_rate=_percent(counts[UnitStatus.AVAILABLE], total),
        sold_rate=_percent(counts[UnitStatus.SOLD], total),
    )


def _percent(part: int, whole: int) -> Decimal:
    return (Decimal(part) / whole * 100).quantize(ONE_DECIMAL, rounding=ROUND_HALF_UP)


def _month_start(now: datetime, offset: int) -> datetime:
    """First instant of the month ``offset`` months away from ``now``."""
    index = now.year * 12 + (now.month - 1) + offset
    return datetime(index // 12, index % 12 + 1, 1)


def _completed_between(
    payments: list[Payment],
    start: datetime,
    end: datetime,
    end_inclusive: bool = False,
) -> Decimal:
    total = ZERO
    for payment in payments:
        if payment.status != PaymentStatus.COMPLETED:
            continue
        paid_at = coerce_datetime(payment.payment_date)
        if paid_at is None or paid_at < start:
            continue
        if paid_at > end or (paid_at == end and not end_inclusive):
            continue
        total += coerce_amount(payment.amount)
    return total
