"""Search, filter, sort and paging of loaded collections."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Generic, Iterable, Sequence, TypeVar

from realty_ledger.models.sales import (
    Buyer,
    Invoice,
    InvoiceStatus,
    Payment,
    PaymentStatus,
    Project,
    Unit,
)
from realty_ledger.models.sales.records import as_enum, coerce_amount, coerce_datetime
from realty_ledger.reconciliation.lookups import find_by_id, project_for_invoice
from realty_ledger.reconciliation.status import (
    STATUS_SORT_ORDER,
    effective_status,
    resolve_now,
)
from realty_ledger.reconciliation.summary import BuyerSummary

T = TypeVar("T")

ALL = "all"


class DateRange(str, Enum):
    ALL = "all"
    LAST_7_DAYS = "7d"
    LAST_30_DAYS = "30d"
    LAST_90_DAYS = "90d"

    def cutoff(self, now: datetime) -> datetime | None:
        """Earliest timestamp inside the range, ``None`` for ``ALL``."""
        days = {"7d": 7, "30d": 30, "90d": 90}.get(self.value)
        return now - timedelta(days=days) if days else None


class BuyerStanding(str, Enum):
    ALL = "all"
    CURRENT = "current"  # Nothing outstanding
    OUTSTANDING = "outstanding"
    ACTIVE = "active"  # Owns or reserves at least one unit
    INACTIVE = "inactive"


@dataclass(frozen=True)
class Page(Generic[T]):
    items: list[T]
    page: int
    per_page: int
    total_items: int
    total_pages: int

    @property
    def first_index(self) -> int:
        """1-based index of the first item shown, 0 when empty."""
        return (self.page - 1) * self.per_page + 1 if self.items else 0

    @property
    def last_index(self) -> int:
        return self.first_index + len(self.items) - 1 if self.items else 0


def filter_invoices(
    invoices: Iterable[Invoice] | None,
    *,
    buyers: Iterable[Buyer] | None = None,
    units: Iterable[Unit] | None = None,
    projects: Iterable[Project] | None = None,
    search: str | None = None,
    status: InvoiceStatus | str | None = None,
    date_range: DateRange | str | None = None,
    now: datetime | None = None,
) -> list[Invoice]:
    """Filter invoices the way the invoices page does.

    ``search`` matches invoice number, buyer name or email, unit number
    and project name, case-insensitively. ``status`` is compared with the
    effective status, so ``overdue`` selects pending invoices past due and
    ``pending`` excludes them. ``date_range`` applies to the issue date.
    """
    now = resolve_now(now)
    buyers = list(buyers or ())
    units = list(units or ())
    projects = list(projects or ())
    wanted = _wanted_status(InvoiceStatus, status)
    cutoff = _cutoff(date_range, now)
    term = (search or "").strip().lower()

    result = []
    for invoice in invoices or ():
        if wanted is not None and effective_status(invoice, now) != wanted:
            continue
        if cutoff is not None and not _on_or_after(invoice.issue_date, cutoff):
            continue
        if term:
            buyer = find_by_id(buyers, invoice.buyer_id)
            unit = find_by_id(units, invoice.unit_id)
            project = project_for_invoice(invoice, units, projects)
            haystack = [
                invoice.invoice_number,
                buyer.full_name if buyer else None,
                buyer.email if buyer else None,
                unit.unit_number if unit else None,
                project.name if project else None,
            ]
            if not _matches(term, haystack):
                continue
        result.append(invoice)
    return result


def filter_payments(
    payments: Iterable[Payment] | None,
    *,
    buyers: Iterable[Buyer] | None = None,
    units: Iterable[Unit] | None = None,
    search: str | None = None,
    status: PaymentStatus | str | None = None,
    date_range: DateRange | str | None = None,
    now: datetime | None = None,
) -> list[Payment]:
    """Filter payments by buyer/unit/method search, status and payment date."""
    now = resolve_now(now)
    buyers = list(buyers or ())
    units = list(units or ())
    wanted = _wanted_status(PaymentStatus, status)
    cutoff = _cutoff(date_range, now)
    term = (search or "").strip().lower()

    result = []
    for payment in payments or ():
        if wanted is not None and as_enum(PaymentStatus, payment.status) != wanted:
            continue
        if cutoff is not None and not _on_or_after(payment.payment_date, cutoff):
            continue
        if term:
            buyer = find_by_id(buyers, payment.buyer_id)
            unit = find_by_id(units, payment.unit_id)
            haystack = [
                buyer.first_name if buyer else None,
                buyer.last_name if buyer else None,
                buyer.email if buyer else None,
                unit.unit_number if unit else None,
                getattr(payment.payment_method, "value", payment.payment_method),
            ]
            if not _matches(term, haystack):
                continue
        result.append(payment)
    return result


def filter_buyers(
    summaries: Iterable[BuyerSummary] | None,
    search: str | None = None,
    standing: BuyerStanding | str | None = None,
) -> list[BuyerSummary]:
    """Filter buyers with their stats by name/email/phone/city and standing."""
    standing = as_enum(BuyerStanding, standing) or BuyerStanding.ALL
    term = (search or "").strip().lower()

    result = []
    for summary in summaries or ():
        buyer = summary.buyer
        if term and not _matches(
            term, [buyer.full_name, buyer.email, buyer.phone, buyer.address.city]
        ):
            continue
        if standing == BuyerStanding.CURRENT and summary.has_outstanding:
            continue
        if standing == BuyerStanding.OUTSTANDING and not summary.has_outstanding:
            continue
        if standing == BuyerStanding.ACTIVE and not summary.is_active:
            continue
        if standing == BuyerStanding.INACTIVE and summary.is_active:
            continue
        result.append(summary)
    return result


def sort_invoices(
    invoices: Iterable[Invoice] | None,
    sort_by: str = "due_date",
    ascending: bool = True,
    *,
    buyers: Iterable[Buyer] | None = None,
    now: datetime | None = None,
) -> list[Invoice]:
    """Sort invoices by a named key; records missing the key sort last.

    Keys: ``due_date``, ``issue_date``, ``created_at``, ``total_amount``,
    ``invoice_number``, ``status`` (effective status order) and
    ``buyer_name``. Unknown keys sort by ``id``.
    """
    now = resolve_now(now)
    buyers = list(buyers or ())
    keys: dict[str, Callable[[Invoice], Any]] = {
        "due_date": lambda i: coerce_datetime(i.due_date),
        "issue_date": lambda i: coerce_datetime(i.issue_date),
        "created_at": lambda i: coerce_datetime(i.created_at),
        "total_amount": lambda i: coerce_amount(i.total_amount),
        "invoice_number": lambda i: i.invoice_number or None,
        "status": lambda i: STATUS_SORT_ORDER.get(effective_status(i, now)),
        "buyer_name": lambda i: _buyer_sort_name(find_by_id(buyers, i.buyer_id)),
    }
    return _sorted(invoices, keys.get(sort_by, lambda i: i.id), ascending)


def sort_payments(
    payments: Iterable[Payment] | None,
    sort_by: str = "date",
    ascending: bool = False,
    *,
    buyers: Iterable[Buyer] | None = None,
) -> list[Payment]:
    """Sort payments by ``amount``, ``date``, ``buyer`` or ``status``.

    Unknown keys sort by ``id``.
    """
    buyers = list(buyers or ())
    keys: dict[str, Callable[[Payment], Any]] = {
        "amount": lambda p: coerce_amount(p.amount),
        "date": lambda p: coerce_datetime(p.payment_date),
        "buyer": lambda p: _buyer_sort_name(find_by_id(buyers, p.buyer_id)),
        "status": lambda p: getattr(p.status, "value", p.status) or None,
    }
    return _sorted(payments, keys.get(sort_by, lambda p: p.id), ascending)


def sort_buyers(
    summaries: Iterable[BuyerSummary] | None,
    sort_by: str = "created_at",
    ascending: bool = False,
) -> list[BuyerSummary]:
    """Sort buyers with stats by ``name``, ``email``, ``properties``,
    ``total_paid``, ``outstanding``, ``credit_score`` or ``created_at``.
    """
    keys: dict[str, Callable[[BuyerSummary], Any]] = {
        "name": lambda s: _buyer_sort_name(s.buyer),
        "email": lambda s: s.buyer.email.lower() or None,
        "properties": lambda s: s.properties,
        "total_paid": lambda s: s.total_paid,
        "outstanding": lambda s: s.outstanding,
        "credit_score": lambda s: s.buyer.credit_score or 0,
        "created_at": lambda s: coerce_datetime(s.buyer.created_at),
    }
    return _sorted(summaries, keys.get(sort_by, keys["created_at"]), ascending)


def paginate(items: Sequence[T], page: int = 1, per_page: int = 12) -> Page[T]:
    """Slice one page out of ``items``; ``page`` is clamped to the valid range."""
    per_page = max(1, per_page)
    total_pages = math.ceil(len(items) / per_page)
    page = min(max(1, page), max(1, total_pages))
    start = (page - 1) * per_page
    return Page(
        items=list(items[start : start + per_page]),
        page=page,
        per_page=per_page,
        total_items=len(items),
        total_pages=total_pages,
    )


def _sorted(items: Iterable[T] | None, key: Callable[[T], Any], ascending: bool) -> list[T]:
    keyed = [(key(item), item) for item in items or ()]
    present = [pair for pair in keyed if pair[0] is not None]
    missing = [item for value, item in keyed if value is None]
    present.sort(key=lambda pair: pair[0], reverse=not ascending)
    return [item for _, item in present] + missing


def _wanted_status(enum_type: type[Enum], status: Any) -> Any:
    if status is None or status == ALL:
        return None
    return as_enum(enum_type, status) or status


def _cutoff(date_range: DateRange | str | None, now: datetime) -> datetime | None:
    selected = as_enum(DateRange, date_range)
    return selected.cutoff(now) if selected else None


def _on_or_after(value: Any, cutoff: datetime) -> bool:
    moment = coerce_datetime(value)
    return moment is not None and moment >= cutoff


def _matches(term: str, values: Iterable[str | None]) -> bool:
    return any(term in value.lower() for value in values if value)


def _buyer_sort_name(buyer: Buyer | None) -> str | None:
    if buyer is None:
        return None
    return buyer.full_name.lower() or None
