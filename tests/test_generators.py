"""Tests for sample data generators."""

from datetime import date
from decimal import Decimal

from realty_ledger.generators import (
    BuyerGenerator,
    InvoiceGenerator,
    PaymentGenerator,
    ProjectGenerator,
    UnitGenerator,
)
from realty_ledger.models.sales import InvoiceStatus, PaymentStatus, Unit, UnitStatus


def make_unit(price: str = "5000000") -> Unit:
    return Unit(id=7, project_id=2, unit_number="304", price=Decimal(price),
                status=UnitStatus.SOLD, sold_to=1)


class TestProjectAndUnitGenerators:
    """Tests for ProjectGenerator and UnitGenerator."""

    def test_project(self, seed: int) -> None:
        """Test a generated project."""
        project = ProjectGenerator(seed=seed).generate(1)

        assert project.id == 1
        assert project.name.split()[-1] in ProjectGenerator.SUFFIXES
        assert project.address.city

    def test_reproducible(self, seed: int) -> None:
        """Test the same seed gives the same data."""
        first = ProjectGenerator(seed=seed).generate(1)
        second = ProjectGenerator(seed=seed).generate(1)

        assert first.name == second.name
        assert first.address == second.address

    def test_units(self, seed: int) -> None:
        """Test generated units are available and sensibly priced."""
        units = list(UnitGenerator(seed=seed).generate_for_project(10, 3, 20))

        assert [u.id for u in units] == list(range(10, 30))
        for unit in units:
            bedrooms, _, (low, high) = UnitGenerator.UNIT_TYPES[unit.unit_type]
            assert unit.project_id == 3
            assert unit.status == UnitStatus.AVAILABLE
            assert unit.price % 10_000 == 0
            assert low <= unit.price <= high
            assert unit.bedrooms == bedrooms
            assert unit.unit_number.startswith(str(unit.floor))


class TestBuyerGenerator:
    """Tests for BuyerGenerator."""

    def test_buyers(self, seed: int) -> None:
        """Test generated buyers."""
        buyers = list(BuyerGenerator(seed=seed).generate_batch(1, 50))

        assert len(buyers) == 50
        assert len({b.email for b in buyers}) == 50
        for buyer in buyers:
            assert 300 <= buyer.credit_score <= 850
            assert str(buyer.id) in buyer.email
            assert buyer.full_name


class TestInvoiceGenerator:
    """Tests for InvoiceGenerator."""

    def test_full_price_invoice(self, seed: int) -> None:
        """Test tax and terms on a sale invoice."""
        invoice = InvoiceGenerator(seed=seed).generate(7, make_unit(), 1, date(2025, 6, 1))

        assert invoice.invoice_number == "INV-2025-0007"
        assert invoice.subtotal == Decimal("5000000.00")
        assert invoice.tax_amount == Decimal("400000.00")
        assert invoice.total_amount == Decimal("5400000.00")
        assert invoice.due_date == date(2025, 7, 1)
        assert invoice.status == InvoiceStatus.PENDING
        assert invoice.project_id == 2
        assert invoice.description == "Purchase of Unit 304"

    def test_deposit_invoice(self, seed: int) -> None:
        """Test reservation deposits are a tenth of the price."""
        invoice = InvoiceGenerator(seed=seed).generate(
            8, make_unit("4550000"), 1, date(2025, 6, 1), deposit=True
        )

        assert invoice.subtotal == Decimal("455000.00")
        assert invoice.total_amount == Decimal("491400.00")
        assert invoice.description.startswith("Reservation deposit")


class TestPaymentGenerator:
    """Tests for PaymentGenerator."""

    def test_payment(self, seed: int) -> None:
        """Test a payment inherits the invoice references."""
        invoice = InvoiceGenerator(seed=seed).generate(3, make_unit(), 1, date(2025, 6, 1))

        payment = PaymentGenerator(seed=seed).generate(
            12, invoice, Decimal("1000.005"), date(2025, 6, 9)
        )

        assert payment.invoice_id == 3
        assert payment.buyer_id == 1
        assert payment.unit_id == 7
        assert payment.amount == Decimal("1000.01")
        assert payment.status == PaymentStatus.COMPLETED
        assert payment.transaction_id == "TXN-20250609-0012"
        assert payment.payment_method is not None

    def test_split_amount_is_exact(self, seed: int) -> None:
        """Test installments add up to the total to the cent."""
        generator = PaymentGenerator(seed=seed)
        total = Decimal("5400000.00")

        for parts in (1, 2, 3, 7):
            amounts = generator.split_amount(total, parts)
            assert len(amounts) == parts
            assert sum(amounts) == total
            assert all(a > 0 for a in amounts)
