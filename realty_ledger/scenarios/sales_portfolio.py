"""Sales portfolio scenario: projects, buyers and their invoice history."""

from __future__ import annotations

import logging
import random
from dataclasses import asdict
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any

from realty_ledger.config import ScenarioConfig
from realty_ledger.generators import (
    BuyerGenerator,
    InvoiceGenerator,
    PaymentGenerator,
    ProjectGenerator,
    UnitGenerator,
)
from realty_ledger.models.sales import (
    Buyer,
    Invoice,
    InvoiceStatus,
    PaymentStatus,
    Unit,
    UnitStatus,
)
from realty_ledger.reconciliation import (
    income_growth,
    summarize,
    summarize_buyers,
    summarize_payments,
    summarize_units,
)
from realty_ledger.store.sales import SalesDataStore

logger = logging.getLogger(__name__)


class SalesPortfolioScenario:
    """Generate a realistic sales portfolio.

    This scenario creates:
    - Projects, each with a block of units
    - Buyers with varying credit scores
    - Sold units invoiced at full price, reserved units invoiced a deposit
    - Payment histories with:
        - Invoices paid in full
        - Partial payments on pending invoices
        - Failed payment attempts
        - Unpaid invoices that drift past their due date
    """

    def __init__(
        self,
        num_projects: int = 3,
        units_per_project: int = 12,
        num_buyers: int = 20,
        sale_rate: float = 0.5,
        reservation_rate: float = 0.2,
        partial_payment_rate: float = 0.3,
        failed_payment_rate: float = 0.05,
        seed: int | None = None,
        *,
        config: ScenarioConfig | None = None,
        reference_date: date | None = None,
    ) -> None:
        """Initialize sales portfolio scenario.

        Parameters
        ----------
        num_projects : int
            Number of projects to generate.
        units_per_project : int
            Units generated per project.
        num_buyers : int
            Number of buyers to generate.
        sale_rate : float
            Share of units sold (0.0 to 1.0).
        reservation_rate : float
            Share of units reserved.
        partial_payment_rate : float
            Share of open invoices with a partial payment.
        failed_payment_rate : float
            Probability of a failed payment attempt per invoice.
        seed : int | None
            Random seed for reproducibility.
        config : ScenarioConfig | None
            Optional scenario configuration. If provided, overrides the
            size and rate arguments.
        reference_date : date | None
            "Today" for the generated history (default: today).
        """
        if config is not None:
            num_projects = config.num_projects
            units_per_project = config.units_per_project
            num_buyers = config.num_buyers
            sale_rate = config.sale_rate
            reservation_rate = config.reservation_rate
            partial_payment_rate = config.partial_payment_rate
            failed_payment_rate = config.failed_payment_rate

        self.config = config
        self.num_projects = num_projects
        self.units_per_project = units_per_project
        self.num_buyers = num_buyers
        self.sale_rate = sale_rate
        self.reservation_rate = reservation_rate
        self.partial_payment_rate = partial_payment_rate
        self.failed_payment_rate = failed_payment_rate
        self.seed = seed
        self.reference_date = reference_date or date.today()

        if seed is not None:
            random.seed(seed)

        self.store = SalesDataStore()
        self._project_gen = ProjectGenerator(seed=seed)
        self._unit_gen = UnitGenerator(seed=seed)
        self._buyer_gen = BuyerGenerator(seed=seed)
        self._invoice_gen = InvoiceGenerator(seed=seed)
        self._payment_gen = PaymentGenerator(seed=seed)
        self._next_invoice_id = 1
        self._next_payment_id = 1

    def generate(self) -> SalesDataStore:
        """Generate all data for the sales portfolio scenario.

        Returns
        -------
        SalesDataStore
            Store containing all generated data.
        """
        logger.info(
            "Starting sales portfolio scenario: %d projects x %d units, %d buyers",
            self.num_projects,
            self.units_per_project,
            self.num_buyers,
        )

        for project_id in range(1, self.num_projects + 1):
            self.store.add_project(self._project_gen.generate(project_id))

        next_unit_id = 1
        for project_id in self.store.projects:
            for unit in self._unit_gen.generate_for_project(
                next_unit_id, project_id, self.units_per_project
            ):
                self.store.add_unit(unit)
            next_unit_id += self.units_per_project

        for buyer in self._buyer_gen.generate_batch(1, self.num_buyers):
            self.store.add_buyer(buyer)

        logger.info(
            "Generated %d projects, %d units, %d buyers",
            len(self.store.projects),
            len(self.store.units),
            len(self.store.buyers),
        )

        buyers = list(self.store.buyers.values())
        if buyers:
            for unit in list(self.store.units.values()):
                roll = random.random()
                if roll < self.sale_rate:
                    self._sell(unit, random.choice(buyers))
                elif roll < self.sale_rate + self.reservation_rate:
                    self._reserve(unit, random.choice(buyers))

        logger.info(
            "Generated %d invoices with %d payments",
            len(self.store.invoices),
            len(self.store.payments),
        )
        return self.store

    def _sell(self, unit: Unit, buyer: Buyer) -> None:
        unit.status = UnitStatus.SOLD
        unit.sold_to = buyer.id
        self.store.add_unit(unit)

        issue_date = self.reference_date - timedelta(days=random.randint(5, 400))
        invoice = self._new_invoice(unit, buyer, issue_date, deposit=False)

        roll = random.random()
        if roll < 0.05:
            invoice.status = InvoiceStatus.CANCELLED
        elif roll < 0.6:
            self._pay_in_full(invoice, issue_date)
        elif random.random() < self.partial_payment_rate:
            self._pay_partially(invoice, issue_date)

        self._maybe_fail_payment(invoice, issue_date)
        self.store.add_invoice(invoice)

    def _reserve(self, unit: Unit, buyer: Buyer) -> None:
        unit.status = UnitStatus.RESERVED
        unit.reserved_by = buyer.id
        self.store.add_unit(unit)

        issue_date = self.reference_date - timedelta(days=random.randint(1, 90))
        invoice = self._new_invoice(unit, buyer, issue_date, deposit=True)
        if random.random() < 0.5:
            self._pay_in_full(invoice, issue_date)
        self._maybe_fail_payment(invoice, issue_date)
        self.store.add_invoice(invoice)

    def _new_invoice(self, unit: Unit, buyer: Buyer, issue_date: date, deposit: bool) -> Invoice:
        invoice = self._invoice_gen.generate(
            self._next_invoice_id, unit, buyer.id, issue_date, deposit=deposit
        )
        self._next_invoice_id += 1
        return invoice

    def _pay_in_full(self, invoice: Invoice, issue_date: date) -> None:
        parts = random.choice([1, 1, 2, 3])
        paid_on = issue_date
        for amount in self._payment_gen.split_amount(invoice.total_amount, parts):
            paid_on = self._payment_day(paid_on)
            self._add_payment(invoice, amount, paid_on, PaymentStatus.COMPLETED)
        invoice.status = InvoiceStatus.PAID
        invoice.paid_date = paid_on

    def _pay_partially(self, invoice: Invoice, issue_date: date) -> None:
        share = Decimal(str(round(random.uniform(0.1, 0.7), 2)))
        status = PaymentStatus.PENDING if random.random() < 0.2 else PaymentStatus.COMPLETED
        self._add_payment(invoice, invoice.total_amount * share, self._payment_day(issue_date), status)

    def _maybe_fail_payment(self, invoice: Invoice, issue_date: date) -> None:
        if random.random() < self.failed_payment_rate:
            self._add_payment(
                invoice, invoice.total_amount, self._payment_day(issue_date), PaymentStatus.FAILED
            )

    def _add_payment(self, invoice: Invoice, amount: Decimal, paid_on: date, status: PaymentStatus) -> None:
        payment = self._payment_gen.generate(self._next_payment_id, invoice, amount, paid_on, status)
        self._next_payment_id += 1
        self.store.add_payment(payment)

    def _payment_day(self, after: date) -> date:
        """A day after ``after`` that is not later than the reference date."""
        return min(after + timedelta(days=random.randint(1, 20)), self.reference_date)

    def export(self, sinks: list[Any]) -> None:
        """Export generated data to sinks.

        Parameters
        ----------
        sinks : list[Any]
            List of sink instances (ConsoleSink, JsonFileSink, CsvFileSink).
        """
        for sink in sinks:
            sink.write_batch("projects", list(self.store.projects.values()))
            sink.write_batch("units", list(self.store.units.values()))
            sink.write_batch("buyers", list(self.store.buyers.values()))
            sink.write_batch("invoices", list(self.store.invoices.values()))
            sink.write_batch("payments", list(self.store.payments.values()))

        logger.info("Exported sales portfolio to %d sinks", len(sinks))

    def get_dashboard_summary(
        self,
        now: datetime | None = None,
        include_pending: bool = False,
    ) -> dict[str, Any]:
        """Get the dashboard cards for the generated portfolio.

        Returns
        -------
        dict[str, Any]
            Invoice, buyer, payment and unit statistics.
        """
        if now is None:
            now = datetime.combine(self.reference_date, datetime.max.time())

        invoices = list(self.store.invoices.values())
        payments = list(self.store.payments.values())

        return {
            "invoices": summarize(invoices, payments, now, include_pending).to_dict(),
            "buyers": asdict(summarize_buyers(self.store.buyer_summaries(include_pending))),
            "payments": asdict(summarize_payments(payments)),
            "units": asdict(summarize_units(self.store.units.values())),
            "income_growth": asdict(income_growth(payments, now)),
        }
