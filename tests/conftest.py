"""Pytest configuration and fixtures."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from realty_ledger.models.base import Address
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


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def now() -> datetime:
    """Fixed evaluation time: midday, July 6th 2025."""
    return datetime(2025, 7, 6, 12, 0)


@pytest.fixture
def projects() -> list[Project]:
    """Two projects."""
    return [
        Project(id=1, name="Acacia Heights", address=Address(city="Nairobi")),
        Project(id=2, name="Baobab Gardens", address=Address(city="Mombasa")),
    ]


@pytest.fixture
def units() -> list[Unit]:
    """One sold, one reserved and one available unit."""
    return [
        Unit(id=1, project_id=1, unit_number="101", price=Decimal("5000000"),
             status=UnitStatus.SOLD, sold_to=1),
        Unit(id=2, project_id=1, unit_number="102", price=Decimal("6000000"),
             status=UnitStatus.RESERVED, reserved_by=2),
        Unit(id=3, project_id=2, unit_number="201", price=Decimal("8000000"),
             status=UnitStatus.AVAILABLE),
    ]


@pytest.fixture
def buyers() -> list[Buyer]:
    """Two buyers holding units and one without any."""
    return [
        Buyer(id=1, first_name="Jane", last_name="Wanjiru", email="jane@example.com",
              phone="+254700000001", credit_score=720, address=Address(city="Nairobi"),
              created_at=datetime(2024, 1, 10)),
        Buyer(id=2, first_name="Otieno", last_name="Kamau", email="otieno@example.com",
              phone="+254700000002", credit_score=651, address=Address(city="Mombasa"),
              created_at=datetime(2024, 3, 5)),
        Buyer(id=3, first_name="Amina", last_name="Hassan", email="amina@example.com",
              address=Address(city="Kisumu"), created_at=datetime(2024, 6, 1)),
    ]


@pytest.fixture
def invoices() -> list[Invoice]:
    """One paid, one overdue, one pending and one cancelled invoice."""
    return [
        Invoice(id=1, invoice_number="INV-2025-0001", buyer_id=1, unit_id=1,
                total_amount=Decimal("5000000"), status=InvoiceStatus.PAID,
                issue_date=date(2025, 5, 2), due_date=date(2025, 6, 1)),
        Invoice(id=2, invoice_number="INV-2025-0002", buyer_id=2, unit_id=2, project_id=1,
                total_amount=Decimal("600000"), status=InvoiceStatus.PENDING,
                issue_date=date(2025, 6, 1), due_date=date(2025, 7, 1)),
        Invoice(id=3, invoice_number="INV-2025-0003", buyer_id=1, unit_id=1, project_id=1,
                total_amount=Decimal("100000"), status=InvoiceStatus.PENDING,
                issue_date=date(2025, 6, 20), due_date=date(2025, 7, 20)),
        Invoice(id=4, invoice_number="INV-2025-0004", buyer_id=2, unit_id=2, project_id=1,
                total_amount=Decimal("50000"), status=InvoiceStatus.CANCELLED,
                issue_date=date(2025, 4, 1), due_date=date(2025, 5, 1)),
    ]


@pytest.fixture
def payments() -> list[Payment]:
    """Completed, pending and failed payments against the sample invoices."""
    return [
        Payment(id=1, buyer_id=1, invoice_id=1, unit_id=1, amount=Decimal("3000000"),
                status=PaymentStatus.COMPLETED, payment_method=PaymentMethod.BANK_TRANSFER,
                payment_date=date(2025, 5, 10), transaction_id="TXN-20250510-0001"),
        Payment(id=2, buyer_id=1, invoice_id=1, unit_id=1, amount=Decimal("2000000"),
                status=PaymentStatus.COMPLETED, payment_method=PaymentMethod.WIRE_TRANSFER,
                payment_date=date(2025, 6, 15), transaction_id="TXN-20250615-0002"),
        Payment(id=3, buyer_id=2, invoice_id=2, unit_id=2, amount=Decimal("200000"),
                status=PaymentStatus.PENDING, payment_method=PaymentMethod.CASH,
                payment_date=date(2025, 7, 2), transaction_id="TXN-20250702-0003"),
        Payment(id=4, buyer_id=2, invoice_id=2, unit_id=2, amount=Decimal("600000"),
                status=PaymentStatus.FAILED, payment_method=PaymentMethod.CREDIT_CARD,
                payment_date=date(2025, 6, 5), transaction_id="TXN-20250605-0004"),
        Payment(id=5, buyer_id=1, invoice_id=3, unit_id=1, amount=Decimal("40000"),
                status=PaymentStatus.COMPLETED, payment_method=PaymentMethod.ACH,
                payment_date=date(2025, 7, 3), transaction_id="TXN-20250703-0005"),
    ]
