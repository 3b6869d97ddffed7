"""Tests for raw record conversion."""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from realty_ledger.exceptions import InvalidRecordError
from realty_ledger.models.sales import (
    InvoiceStatus,
    PaymentMethod,
    PaymentStatus,
    UnitStatus,
)
from realty_ledger.models.sales.records import (
    as_enum,
    buyer_from_record,
    coerce_amount,
    coerce_datetime,
    coerce_id,
    invoice_from_record,
    parse_date,
    payment_from_record,
    project_from_record,
    unit_from_record,
)


class TestCoercion:
    """Tests for the coercion helpers."""

    @pytest.mark.parametrize(
        "raw,expected",
        [
            (100, Decimal("100")),
            (12.5, Decimal("12.5")),
            ("1,250,000.50", Decimal("1250000.50")),
            (Decimal("7"), Decimal("7")),
            ("abc", Decimal("0")),
            ("NaN", Decimal("0")),
            (float("inf"), Decimal("0")),
            (None, Decimal("0")),
            (True, Decimal("0")),
            ([1], Decimal("0")),
        ],
    )
    def test_coerce_amount(self, raw: object, expected: Decimal) -> None:
        """Test malformed amounts fall back to zero."""
        assert coerce_amount(raw) == expected

    def test_coerce_datetime(self) -> None:
        """Test dates, aware datetimes and strings."""
        aware = datetime(2025, 7, 6, 12, 0, tzinfo=timezone(timedelta(hours=3)))

        assert coerce_datetime(date(2025, 7, 6)) == datetime(2025, 7, 6)
        assert coerce_datetime(aware) == datetime(2025, 7, 6, 9, 0)
        assert coerce_datetime("2025-07-06T10:00:00Z") == datetime(2025, 7, 6, 10, 0)
        assert coerce_datetime("soon") is None
        assert coerce_datetime(None) is None

    def test_parse_date(self) -> None:
        """Test ISO parsing."""
        assert parse_date("2025-07-06") == date(2025, 7, 6)
        assert parse_date("2025-07-06T08:30:00") == datetime(2025, 7, 6, 8, 30)
        assert parse_date("2025-13-01") is None
        assert parse_date("") is None
        assert parse_date(20250706) is None

    def test_coerce_id(self) -> None:
        """Test identifiers."""
        assert coerce_id("12") == 12
        assert coerce_id(5) == 5
        assert coerce_id("abc") is None
        assert coerce_id(None) is None

    def test_as_enum(self) -> None:
        """Test lenient enum matching."""
        assert as_enum(InvoiceStatus, "PAID") is InvoiceStatus.PAID
        assert as_enum(InvoiceStatus, " overdue ") is InvoiceStatus.OVERDUE
        assert as_enum(InvoiceStatus, InvoiceStatus.DRAFT) is InvoiceStatus.DRAFT
        assert as_enum(InvoiceStatus, "archived") is None
        assert as_enum(InvoiceStatus, 3) is None


class TestRecordConverters:
    """Tests for the entity converters."""

    def test_invoice_from_record(self) -> None:
        """Test camelCase invoice records with string numbers."""
        invoice = invoice_from_record({
            "id": 1,
            "invoiceNumber": "INV-2025-0001",
            "buyerId": "3",
            "unitId": 4,
            "totalAmount": "108000.00",
            "taxAmount": 8000,
            "status": "Pending",
            "issuedDate": "2025-06-01",
            "dueDate": "2025-07-01",
            "createdAt": "2025-06-01T09:15:00Z",
        })

        assert invoice.buyer_id == 3
        assert invoice.total_amount == Decimal("108000.00")
        assert invoice.tax_amount == Decimal("8000")
        assert invoice.subtotal is None
        assert invoice.status is InvoiceStatus.PENDING
        assert invoice.issue_date == date(2025, 6, 1)
        assert invoice.due_date == date(2025, 7, 1)
        assert invoice.project_id is None

    def test_invoice_snake_case(self) -> None:
        """Test snake_case keys as written by the JSON export."""
        invoice = invoice_from_record({
            "id": 2, "invoice_number": "INV-2", "buyer_id": 1, "unit_id": 1,
            "total_amount": "5.00", "status": "paid", "due_date": None,
        })

        assert invoice.invoice_number == "INV-2"
        assert invoice.due_date is None

    def test_invoice_unknown_status(self) -> None:
        """Test unknown statuses are rejected."""
        with pytest.raises(InvalidRecordError, match="Unknown invoice status"):
            invoice_from_record({"id": 1, "status": "archived"})

    def test_missing_id(self) -> None:
        """Test records without an id are rejected."""
        with pytest.raises(InvalidRecordError, match="no usable id"):
            buyer_from_record({"firstName": "Jane"})

    def test_payment_from_record(self) -> None:
        """Test payments keep an unknown method as None."""
        payment = payment_from_record({
            "id": 5, "invoiceId": 1, "buyerId": 1, "amount": "2500",
            "status": "completed", "paymentMethod": "mpesa", "paymentDate": "2025-07-03",
        })

        assert payment.status is PaymentStatus.COMPLETED
        assert payment.payment_method is None
        assert payment.amount == Decimal("2500")

        wired = payment_from_record({"id": 6, "status": "pending", "paymentMethod": "wire_transfer"})
        assert wired.payment_method is PaymentMethod.WIRE_TRANSFER

    def test_buyer_from_record(self) -> None:
        """Test phone aliases and nested addresses."""
        buyer = buyer_from_record({
            "id": 1, "firstName": "Jane", "lastName": "Wanjiru", "email": "jane@example.com",
            "phoneNumber": "+254700000001", "creditScore": "720",
            "address": {"street": "Ngong Rd", "city": "Nairobi", "zipCode": "00100"},
        })

        assert buyer.full_name == "Jane Wanjiru"
        assert buyer.phone == "+254700000001"
        assert buyer.credit_score == 720
        assert buyer.address.city == "Nairobi"
        assert buyer.address.postal_code == "00100"
        assert buyer.address.country == "KE"

    def test_unit_from_record(self) -> None:
        """Test unit records."""
        unit = unit_from_record({
            "id": 3, "projectId": 1, "unitNumber": "12B", "price": "8500000",
            "status": "reserved", "reservedBy": 2, "type": "2br", "sqft": 950,
        })

        assert unit.status is UnitStatus.RESERVED
        assert unit.reserved_by == 2
        assert unit.sold_to is None
        assert unit.unit_type == "2br"
        assert unit.sqft == Decimal("950")

    def test_project_from_record_string_address(self) -> None:
        """Test projects with a flat address string."""
        project = project_from_record({"id": 1, "name": "Acacia Heights",
                                       "address": "Kilimani", "city": "Nairobi"})

        assert project.address.street == "Kilimani"
        assert project.address.city == "Nairobi"
