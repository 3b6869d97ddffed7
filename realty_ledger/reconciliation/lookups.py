"""Foreign-key joins over plain collections.

Every lookup returns ``None`` when the related record is missing; callers
render their own fallback.
"""

from __future__ import annotations

from typing import Iterable, Protocol, TypeVar

from realty_ledger.models.sales import Buyer, Invoice, Payment, Project, Unit

UNKNOWN_PROJECT = "Unknown Project"


class _HasId(Protocol):
    id: int


T = TypeVar("T", bound=_HasId)


def find_by_id(records: Iterable[T] | None, record_id: int | None) -> T | None:
    """Return the first record with ``id == record_id``, or ``None``."""
    if record_id is None:
        return None
    for record in records or ():
        if record.id == record_id:
            return record
    return None


def project_for_invoice(
    invoice: Invoice,
    units: Iterable[Unit] | None,
    projects: Iterable[Project] | None,
) -> Project | None:
    """Resolve an invoice's project, deriving it through the unit if needed."""
    project_id = invoice.project_id
    if project_id is None:
        unit = find_by_id(units, invoice.unit_id)
        project_id = unit.project_id if unit else None
    return find_by_id(projects, project_id)


def project_for_payment(
    payment: Payment,
    invoices: Iterable[Invoice] | None,
    units: Iterable[Unit] | None,
    projects: Iterable[Project] | None,
) -> Project | None:
    """Resolve a payment's project through its invoice, then its unit."""
    units = list(units or ())
    invoice = find_by_id(invoices, payment.invoice_id)
    if invoice is not None:
        project = project_for_invoice(invoice, units, projects)
        if project is not None:
            return project
    unit = find_by_id(units, payment.unit_id)
    return find_by_id(projects, unit.project_id) if unit else None


def unit_display_name(unit: Unit, projects: Iterable[Project] | None) -> str:
    """Format a unit as ``"<project> - Unit <number>"``."""
    project = find_by_id(projects, unit.project_id)
    name = project.name if project and project.name else UNKNOWN_PROJECT
    return f"{name} - Unit {unit.unit_number}"


def buyer_name(buyer: Buyer | None) -> str:
    """Full name of a buyer, or an empty string when missing."""
    return buyer.full_name if buyer else ""
