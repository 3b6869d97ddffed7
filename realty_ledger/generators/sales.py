"""Generators for projects, units, buyers, invoices and payments."""

from __future__ import annotations

import random
from datetime import date, datetime, timedelta
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterator

from realty_ledger.generators.base import BaseGenerator
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

CENTS = Decimal("0.01")


class ProjectGenerator(BaseGenerator):
    """Generate development projects."""

    SUFFIXES = ["Heights", "Gardens", "Tower", "Residences", "Park", "Court"]

    def generate(self, project_id: int) -> Project:
        """Generate a project.

        Parameters
        ----------
        project_id : int
            Identifier to assign.

        Returns
        -------
        Project
            Generated project.
        """
        return Project(
            id=project_id,
            name=f"{self.fake.last_name()} {random.choice(self.SUFFIXES)}",
            address=Address(
                street=self.fake.street_address(),
                city=self.fake.city(),
                state=self.fake.state_abbr(),
                postal_code=self.fake.postcode(),
            ),
            created_at=datetime.now() - timedelta(days=random.randint(400, 1500)),
        )


class UnitGenerator(BaseGenerator):
    """Generate units for a project."""

    # Unit type -> (bedrooms, sqft range, price range in KES)
    UNIT_TYPES = {
        "studio": (0, (350, 500), (3_000_000, 5_500_000)),
        "1br": (1, (500, 750), (5_000_000, 8_500_000)),
        "2br": (2, (750, 1100), (8_000_000, 14_000_000)),
        "3br": (3, (1100, 1600), (13_000_000, 22_000_000)),
        "penthouse": (4, (1800, 3000), (25_000_000, 45_000_000)),
    }
    TYPE_WEIGHTS = [0.15, 0.30, 0.30, 0.20, 0.05]

    def generate(self, unit_id: int, project_id: int, floor: int | None = None) -> Unit:
        """Generate an available unit."""
        unit_type = random.choices(list(self.UNIT_TYPES), weights=self.TYPE_WEIGHTS, k=1)[0]
        bedrooms, sqft_range, price_range = self.UNIT_TYPES[unit_type]
        floor = floor if floor is not None else random.randint(1, 20)
        price = random.randint(price_range[0] // 10_000, price_range[1] // 10_000) * 10_000

        return Unit(
            id=unit_id,
            project_id=project_id,
            unit_number=f"{floor}{random.randint(1, 8):02d}",
            price=Decimal(price),
            status=UnitStatus.AVAILABLE,
            unit_type=unit_type,
            floor=floor,
            sqft=Decimal(random.randint(*sqft_range)),
            bedrooms=bedrooms,
            bathrooms=max(1, bedrooms),
        )

    def generate_for_project(self, first_id: int, project_id: int, count: int) -> Iterator[Unit]:
        """Generate ``count`` units with consecutive ids."""
        for offset in range(count):
            yield self.generate(first_id + offset, project_id)


class BuyerGenerator(BaseGenerator):
    """Generate buyers."""

    def generate(self, buyer_id: int) -> Buyer:
        """Generate a buyer with a 300-850 credit score."""
        first_name = self.fake.first_name()
        last_name = self.fake.last_name()
        # Normal distribution around 680, clipped to the valid range
        credit_score = int(min(850, max(300, random.gauss(680, 70))))

        return Buyer(
            id=buyer_id,
            first_name=first_name,
            last_name=last_name,
            email=f"{first_name}.{last_name}{buyer_id}@{self.fake.free_email_domain()}".lower(),
            phone=self.fake.phone_number(),
            credit_score=credit_score,
            address=Address(
                street=self.fake.street_address(),
                city=self.fake.city(),
                state=self.fake.state_abbr(),
                postal_code=self.fake.postcode(),
            ),
            created_at=datetime.now() - timedelta(days=random.randint(30, 730)),
        )

    def generate_batch(self, first_id: int, count: int) -> Iterator[Buyer]:
        for offset in range(count):
            yield self.generate(first_id + offset)


class InvoiceGenerator(BaseGenerator):
    """Generate invoices for sold or reserved units."""

    TAX_RATE = Decimal("0.08")
    DEPOSIT_RATE = Decimal("0.10")
    PAYMENT_TERMS_DAYS = 30

    def generate(
        self,
        invoice_id: int,
        unit: Unit,
        buyer_id: int,
        issue_date: date,
        status: InvoiceStatus = InvoiceStatus.PENDING,
        deposit: bool = False,
    ) -> Invoice:
        """Generate an invoice for a unit.

        Parameters
        ----------
        invoice_id : int
            Identifier to assign.
        unit : Unit
            Unit being invoiced.
        buyer_id : int
            Buyer being invoiced.
        issue_date : date
            Issue date; the due date follows ``PAYMENT_TERMS_DAYS`` later.
        status : InvoiceStatus
            Stored status.
        deposit : bool
            Invoice a reservation deposit instead of the full price.

        Returns
        -------
        Invoice
            Generated invoice with tax applied.
        """
        base = unit.price * (self.DEPOSIT_RATE if deposit else 1)
        subtotal = base.quantize(CENTS, rounding=ROUND_HALF_UP)
        tax = (subtotal * self.TAX_RATE).quantize(CENTS, rounding=ROUND_HALF_UP)
        kind = "Reservation deposit for" if deposit else "Purchase of"

        return Invoice(
            id=invoice_id,
            invoice_number=f"INV-{issue_date.year}-{invoice_id:04d}",
            buyer_id=buyer_id,
            unit_id=unit.id,
            project_id=unit.project_id,
            total_amount=subtotal + tax,
            tax_amount=tax,
            subtotal=subtotal,
            status=status,
            issue_date=issue_date,
            due_date=issue_date + timedelta(days=self.PAYMENT_TERMS_DAYS),
            payment_terms=f"Net {self.PAYMENT_TERMS_DAYS}",
            description=f"{kind} Unit {unit.unit_number}",
            created_at=datetime.combine(issue_date, datetime.min.time()),
        )


class PaymentGenerator(BaseGenerator):
    """Generate payments against invoices."""

    METHODS = list(PaymentMethod)
    METHOD_WEIGHTS = [0.05, 0.10, 0.10, 0.30, 0.25, 0.05, 0.15]

    def generate(
        self,
        payment_id: int,
        invoice: Invoice,
        amount: Decimal,
        payment_date: date,
        status: PaymentStatus = PaymentStatus.COMPLETED,
    ) -> Payment:
        """Generate a payment of ``amount`` against ``invoice``."""
        method = random.choices(self.METHODS, weights=self.METHOD_WEIGHTS, k=1)[0]
        return Payment(
            id=payment_id,
            invoice_id=invoice.id,
            buyer_id=invoice.buyer_id,
            unit_id=invoice.unit_id,
            amount=amount.quantize(CENTS, rounding=ROUND_HALF_UP),
            payment_method=method,
            payment_date=payment_date,
            status=status,
            transaction_id=f"TXN-{payment_date:%Y%m%d}-{payment_id:04d}",
            created_at=datetime.combine(payment_date, datetime.min.time()),
        )

    def split_amount(self, total: Decimal, parts: int) -> list[Decimal]:
        """Split ``total`` into ``parts`` random installments summing exactly to it."""
        if parts <= 1:
            return [total]
        weights = [random.uniform(0.5, 1.5) for _ in range(parts)]
        scale = sum(weights)
        amounts = [
            (total * Decimal(str(w / scale))).quantize(CENTS, rounding=ROUND_HALF_UP)
            for w in weights[:-1]
        ]
        amounts.append(total - sum(amounts))
        return amounts
