"""Buyer account statements: invoices and payments as one ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Iterable

from realty_ledger.models.sales import Buyer, Invoice, Payment, Project, Unit
from realty_ledger.models.sales.records import coerce_amount, coerce_datetime
from realty_ledger.reconciliation.lookups import (
    find_by_id,
    project_for_invoice,
    project_for_payment,
)


@dataclass(frozen=True)
class StatementLine:
    """One entry of a buyer statement.

    Invoice lines carry a positive amount and payment lines a negative one,
    so the sum of ``amount`` over a statement is the buyer's gross balance.
    """

    entry_id: str  # "invoice-<id>" or "payment-<id>"
    kind: str  # "invoice" or "payment"
    date: date | datetime | None
    description: str
    amount: Decimal
    status: str
    reference: str
    unit_number: str | None = None
    project_name: str | None = None
    payment_method: str | None = None


def build_statement(
    buyer: Buyer,
    invoices: Iterable[Invoice] | None,
    payments: Iterable[Payment] | None,
    units: Iterable[Unit] | None,
    projects: Iterable[Project] | None,
) -> list[StatementLine]:
    """Build a buyer's statement, newest entry first.

    Entries without a date sort last.
    """
    invoices = list(invoices or ())
    units = list(units or ())
    projects = list(projects or ())

    lines = []
    for invoice in invoices:
        if invoice.buyer_id != buyer.id:
            continue
        unit = find_by_id(units, invoice.unit_id)
        project = project_for_invoice(invoice, units, projects)
        lines.append(
            StatementLine(
                entry_id=f"invoice-{invoice.id}",
                kind="invoice",
                date=invoice.issue_date,
                description=f"Invoice {invoice.invoice_number} - {_where(unit, project)}",
                amount=coerce_amount(invoice.total_amount),
                status=_status_value(invoice.status),
                reference=invoice.invoice_number,
                unit_number=unit.unit_number if unit else None,
                project_name=project.name if project else None,
            )
        )

    for payment in payments or ():
        if payment.buyer_id != buyer.id:
            continue
        unit = find_by_id(units, payment.unit_id)
        project = project_for_payment(payment, invoices, units, projects)
        lines.append(
            StatementLine(
                entry_id=f"payment-{payment.id}",
                kind="payment",
                date=payment.payment_date,
                description=f"Payment - {_where(unit, project)}",
                amount=-coerce_amount(payment.amount),
                status=_status_value(payment.status),
                reference=payment.transaction_id,
                unit_number=unit.unit_number if unit else None,
                project_name=project.name if project else None,
                payment_method=getattr(payment.payment_method, "value", payment.payment_method),
            )
        )

    return sorted(lines, key=lambda line: coerce_datetime(line.date) or datetime.min, reverse=True)


def _where(unit: Unit | None, project: Project | None) -> str:
    unit_label = f"Unit {unit.unit_number}" if unit and unit.unit_number else "Unit"
    project_label = project.name if project and project.name else "Project"
    return f"{unit_label} in {project_label}"


def _status_value(status: object) -> str:
    return getattr(status, "value", str(status))
