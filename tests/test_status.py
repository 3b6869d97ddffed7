"""Tests for effective invoice status."""

import time
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal
from typing import Iterator

import pytest

from realty_ledger.models.sales import Invoice, InvoiceStatus
from realty_ledger.reconciliation.status import (
    STATUS_SORT_ORDER,
    days_overdue,
    days_until_due,
    effective_status,
    invoice_subtotal,
    is_overdue,
    resolve_now,
    utc_now,
)


def make_invoice(status: InvoiceStatus | str, due_date: object, **kwargs: object) -> Invoice:
    return Invoice(
        id=kwargs.pop("id", 1),
        invoice_number="INV-2025-0001",
        buyer_id=1,
        unit_id=1,
        total_amount=kwargs.pop("total_amount", Decimal("100000")),
        status=status,
        due_date=due_date,
        **kwargs,
    )


@pytest.fixture
def host_ahead_of_utc(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    """Run with the process local time zone nine hours ahead of UTC."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is unavailable on this platform")
    monkeypatch.setenv("TZ", "JST-9")
    time.tzset()
    yield
    monkeypatch.undo()
    time.tzset()


class TestEffectiveStatus:
    """Tests for effective_status and is_overdue."""

    def test_pending_past_due_is_overdue(self, now: datetime) -> None:
        """Test a pending invoice due yesterday shows as overdue."""
        invoice = make_invoice(InvoiceStatus.PENDING, now - timedelta(days=1))

        assert is_overdue(invoice, now) is True
        assert effective_status(invoice, now) == InvoiceStatus.OVERDUE

    def test_pending_not_yet_due_stays_pending(self, now: datetime) -> None:
        """Test a pending invoice due tomorrow stays pending."""
        invoice = make_invoice(InvoiceStatus.PENDING, now + timedelta(days=1))

        assert is_overdue(invoice, now) is False
        assert effective_status(invoice, now) == InvoiceStatus.PENDING

    @pytest.mark.parametrize(
        "status", [InvoiceStatus.PAID, InvoiceStatus.CANCELLED, InvoiceStatus.DRAFT]
    )
    def test_settled_statuses_unchanged(self, status: InvoiceStatus, now: datetime) -> None:
        """Test paid, cancelled and draft ignore the due date."""
        invoice = make_invoice(status, now - timedelta(days=365))

        assert effective_status(invoice, now) == status

    def test_stored_value_not_mutated(self, now: datetime) -> None:
        """Test that deriving the status leaves the record untouched."""
        invoice = make_invoice(InvoiceStatus.PENDING, now - timedelta(days=3))

        effective_status(invoice, now)

        assert invoice.status == InvoiceStatus.PENDING

    def test_due_exactly_now_not_overdue(self, now: datetime) -> None:
        """Test the comparison is strict."""
        invoice = make_invoice(InvoiceStatus.PENDING, now)

        assert is_overdue(invoice, now) is False

    def test_date_due_date_compared_at_midnight(self) -> None:
        """Test a plain date is due at the start of that day."""
        invoice = make_invoice(InvoiceStatus.PENDING, date(2025, 7, 6))

        assert is_overdue(invoice, datetime(2025, 7, 6, 0, 0)) is False
        assert is_overdue(invoice, datetime(2025, 7, 6, 0, 1)) is True

    def test_missing_due_date_not_overdue(self, now: datetime) -> None:
        """Test an invoice without a due date is never overdue."""
        invoice = make_invoice(InvoiceStatus.PENDING, None)

        assert effective_status(invoice, now) == InvoiceStatus.PENDING

    def test_unparsable_due_date_not_overdue(self, now: datetime) -> None:
        """Test a garbage due date is treated as not overdue."""
        invoice = make_invoice(InvoiceStatus.PENDING, "not-a-date")

        assert is_overdue(invoice, now) is False

    def test_string_status_is_normalized(self, now: datetime) -> None:
        """Test statuses stored as plain strings are matched."""
        overdue = make_invoice("pending", now - timedelta(days=1))
        paid = make_invoice("PAID", now - timedelta(days=1))

        assert effective_status(overdue, now) == InvoiceStatus.OVERDUE
        assert effective_status(paid, now) == InvoiceStatus.PAID

    def test_aware_due_date_against_naive_now(self) -> None:
        """Test timezone-aware due dates compare in UTC."""
        due = datetime(2025, 7, 6, 12, 0, tzinfo=timezone(timedelta(hours=3)))  # 09:00 UTC
        invoice = make_invoice(InvoiceStatus.PENDING, due)

        assert is_overdue(invoice, datetime(2025, 7, 6, 8, 59)) is False
        assert is_overdue(invoice, datetime(2025, 7, 6, 9, 1)) is True

    @pytest.mark.usefixtures("host_ahead_of_utc")
    def test_utc_due_date_with_default_now(self) -> None:
        """Test Z-suffixed due dates against the default clock off UTC."""
        clock = datetime.now(timezone.utc).replace(microsecond=0, tzinfo=None)
        soon = f"{clock + timedelta(hours=2):%Y-%m-%dT%H:%M:%S}Z"
        earlier = f"{clock - timedelta(hours=2):%Y-%m-%dT%H:%M:%S}Z"
        due_soon = make_invoice(InvoiceStatus.PENDING, soon)
        due_before = make_invoice(InvoiceStatus.PENDING, earlier)

        assert is_overdue(due_soon) is False
        assert effective_status(due_soon) == InvoiceStatus.PENDING
        assert is_overdue(due_before) is True

    def test_none_invoice(self, now: datetime) -> None:
        """Test None is never overdue."""
        assert is_overdue(None, now) is False


class TestDueDates:
    """Tests for days_until_due, days_overdue and invoice_subtotal."""

    def test_days_until_due_rounds_up(self, now: datetime) -> None:
        """Test 13.5 days rounds up to 14."""
        invoice = make_invoice(InvoiceStatus.PENDING, date(2025, 7, 20))

        assert days_until_due(invoice, now) == 14

    def test_days_until_due_negative_when_past(self, now: datetime) -> None:
        """Test past due dates give a non-positive count."""
        invoice = make_invoice(InvoiceStatus.PENDING, date(2025, 7, 1))

        assert days_until_due(invoice, now) == -5

    def test_days_until_due_without_due_date(self, now: datetime) -> None:
        """Test missing due date gives zero."""
        assert days_until_due(make_invoice(InvoiceStatus.PENDING, None), now) == 0

    def test_days_overdue(self, now: datetime) -> None:
        """Test days overdue for a pending invoice past due."""
        invoice = make_invoice(InvoiceStatus.PENDING, date(2025, 7, 1))

        assert days_overdue(invoice, now) == 6

    def test_days_overdue_zero_for_paid(self, now: datetime) -> None:
        """Test paid invoices are never overdue."""
        invoice = make_invoice(InvoiceStatus.PAID, date(2025, 7, 1))

        assert days_overdue(invoice, now) == 0

    def test_subtotal_subtracts_tax(self) -> None:
        """Test subtotal is total minus tax."""
        invoice = make_invoice(
            InvoiceStatus.PENDING,
            None,
            total_amount=Decimal("108000"),
            tax_amount=Decimal("8000"),
        )

        assert invoice_subtotal(invoice) == Decimal("100000")

    def test_subtotal_without_tax(self) -> None:
        """Test subtotal equals total when no tax is recorded."""
        invoice = make_invoice(InvoiceStatus.PENDING, None, total_amount=Decimal("5000"))

        assert invoice_subtotal(invoice) == Decimal("5000")
        assert invoice_subtotal(None) == Decimal("0")


class TestStatusHelpers:
    """Tests for status ordering and clock resolution."""

    def test_sort_order_covers_every_status(self) -> None:
        """Test every invoice status has a rank."""
        assert set(STATUS_SORT_ORDER) == set(InvoiceStatus)
        assert STATUS_SORT_ORDER[InvoiceStatus.PAID] < STATUS_SORT_ORDER[InvoiceStatus.OVERDUE]

    def test_resolve_now_passthrough(self, now: datetime) -> None:
        """Test an explicit now is returned unchanged."""
        assert resolve_now(now) == now

    def test_resolve_now_defaults_to_clock(self) -> None:
        """Test the UTC wall clock is used when now is omitted."""
        before = datetime.now(timezone.utc).replace(tzinfo=None)
        resolved = resolve_now()

        assert resolved.tzinfo is None
        assert before <= resolved <= datetime.now(timezone.utc).replace(tzinfo=None)

    @pytest.mark.usefixtures("host_ahead_of_utc")
    def test_utc_now_ignores_local_zone(self) -> None:
        """Test utc_now tracks UTC rather than the host zone."""
        local = datetime.now()
        current = utc_now()

        assert abs((local - current) - timedelta(hours=9)) < timedelta(minutes=1)
        assert current.tzinfo is None
