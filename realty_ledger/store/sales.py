"""Sales domain data store with relationship indexes."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping

from realty_ledger.exceptions import (
    InvalidRecordError,
    ReferentialIntegrityError,
)
from realty_ledger.models.sales import Buyer, Invoice, Payment, Project, Unit
from realty_ledger.models.sales.records import (
    buyer_from_record,
    invoice_from_record,
    payment_from_record,
    project_from_record,
    unit_from_record,
)
from realty_ledger.reconciliation.payments import PaymentBalance, aggregate
from realty_ledger.reconciliation.summary import BuyerSummary, summarize_buyer

logger = logging.getLogger(__name__)

ENTITY_TYPES = ("projects", "units", "buyers", "invoices", "payments")


@dataclass
class SalesDataStore:
    """In-memory snapshot of the sales collections.

    Relationship indexes are rebuilt lazily, once per change of the
    snapshot, rather than scanned on every query. ``version`` increases on
    every insert so callers can key caches on it.

    With ``strict=True`` inserts referencing an unknown parent raise
    ``ReferentialIntegrityError``; otherwise dangling references are kept
    and resolve to ``None``.
    """

    strict: bool = False

    projects: dict[int, Project] = field(default_factory=dict)
    units: dict[int, Unit] = field(default_factory=dict)
    buyers: dict[int, Buyer] = field(default_factory=dict)
    invoices: dict[int, Invoice] = field(default_factory=dict)
    payments: dict[int, Payment] = field(default_factory=dict)

    version: int = 0

    # Relationship indexes
    _indexed_version: int = -1
    _project_units: dict[int, list[int]] = field(default_factory=dict)
    _buyer_units: dict[int, list[int]] = field(default_factory=dict)
    _buyer_invoices: dict[int, list[int]] = field(default_factory=dict)
    _buyer_payments: dict[int, list[int]] = field(default_factory=dict)
    _invoice_payments: dict[int, list[int]] = field(default_factory=dict)

    def add_project(self, project: Project) -> None:
        """Add or replace a project."""
        self.projects[project.id] = project
        self.version += 1

    def add_unit(self, unit: Unit) -> None:
        """Add or replace a unit."""
        if self.strict:
            self._require(self.projects, unit.project_id, "Project")
            self._require(self.buyers, unit.sold_to, "Buyer")
            self._require(self.buyers, unit.reserved_by, "Buyer")
        self.units[unit.id] = unit
        self.version += 1

    def add_buyer(self, buyer: Buyer) -> None:
        """Add or replace a buyer."""
        self.buyers[buyer.id] = buyer
        self.version += 1

    def add_invoice(self, invoice: Invoice) -> None:
        """Add or replace an invoice."""
        if self.strict:
            self._require(self.buyers, invoice.buyer_id, "Buyer")
            self._require(self.units, invoice.unit_id, "Unit")
            self._require(self.projects, invoice.project_id, "Project")
        self.invoices[invoice.id] = invoice
        self.version += 1

    def add_payment(self, payment: Payment) -> None:
        """Add or replace a payment."""
        if self.strict:
            self._require(self.invoices, payment.invoice_id, "Invoice")
            self._require(self.buyers, payment.buyer_id, "Buyer")
            self._require(self.units, payment.unit_id, "Unit")
        self.payments[payment.id] = payment
        self.version += 1

    def load_records(
        self,
        entity_type: str,
        records: Iterable[Mapping[str, Any]] | None,
        strict: bool = False,
    ) -> int:
        """Convert raw API records and add them to the store.

        Parameters
        ----------
        entity_type : str
            One of: projects, units, buyers, invoices, payments.
        records : Iterable[Mapping[str, Any]] | None
            Raw records as served by the API.
        strict : bool
            Raise on the first invalid record instead of skipping it.

        Returns
        -------
        int
            Number of records loaded.
        """
        loaders: dict[str, tuple[Callable[[Mapping[str, Any]], Any], Callable[[Any], None]]] = {
            "projects": (project_from_record, self.add_project),
            "units": (unit_from_record, self.add_unit),
            "buyers": (buyer_from_record, self.add_buyer),
            "invoices": (invoice_from_record, self.add_invoice),
            "payments": (payment_from_record, self.add_payment),
        }
        if entity_type not in loaders:
            raise ValueError(f"Unknown entity type: {entity_type}")

        convert, add = loaders[entity_type]
        loaded = 0
        skipped = 0
        for record in records or ():
            try:
                add(convert(record))
            except (InvalidRecordError, ReferentialIntegrityError) as exc:
                if strict:
                    raise
                skipped += 1
                logger.warning("Skipping %s record: %s", entity_type, exc)
                continue
            loaded += 1

        if skipped:
            logger.info("Loaded %d %s (%d skipped)", loaded, entity_type, skipped)
        else:
            logger.debug("Loaded %d %s", loaded, entity_type)
        return loaded

    # Lookups
    def get_project(self, project_id: int | None) -> Project | None:
        return self.projects.get(project_id) if project_id is not None else None

    def get_unit(self, unit_id: int | None) -> Unit | None:
        return self.units.get(unit_id) if unit_id is not None else None

    def get_buyer(self, buyer_id: int | None) -> Buyer | None:
        return self.buyers.get(buyer_id) if buyer_id is not None else None

    def get_invoice(self, invoice_id: int | None) -> Invoice | None:
        return self.invoices.get(invoice_id) if invoice_id is not None else None

    def get_payment(self, payment_id: int | None) -> Payment | None:
        return self.payments.get(payment_id) if payment_id is not None else None

    # Query methods
    def get_project_units(self, project_id: int) -> list[Unit]:
        """Get all units of a project."""
        self._ensure_indexes()
        return [self.units[uid] for uid in self._project_units.get(project_id, [])]

    def get_buyer_units(self, buyer_id: int) -> list[Unit]:
        """Get units sold to or reserved by a buyer."""
        self._ensure_indexes()
        return [self.units[uid] for uid in self._buyer_units.get(buyer_id, [])]

    def get_buyer_invoices(self, buyer_id: int) -> list[Invoice]:
        """Get all invoices issued to a buyer."""
        self._ensure_indexes()
        return [self.invoices[iid] for iid in self._buyer_invoices.get(buyer_id, [])]

    def get_buyer_payments(self, buyer_id: int) -> list[Payment]:
        """Get payments made by a buyer or against one of their invoices."""
        self._ensure_indexes()
        payment_ids = set(self._buyer_payments.get(buyer_id, []))
        for invoice_id in self._buyer_invoices.get(buyer_id, []):
            payment_ids.update(self._invoice_payments.get(invoice_id, []))
        return [self.payments[pid] for pid in sorted(payment_ids)]

    def get_invoice_payments(self, invoice_id: int) -> list[Payment]:
        """Get all payments referencing an invoice, whatever their status."""
        self._ensure_indexes()
        return [self.payments[pid] for pid in self._invoice_payments.get(invoice_id, [])]

    def project_for_invoice(self, invoice: Invoice) -> Project | None:
        """Resolve an invoice's project, deriving it through the unit if needed."""
        if invoice.project_id is not None:
            return self.get_project(invoice.project_id)
        unit = self.get_unit(invoice.unit_id)
        return self.get_project(unit.project_id) if unit else None

    def invoice_balance(self, invoice_id: int, include_pending: bool = False) -> PaymentBalance | None:
        """Payment balance of one invoice, ``None`` if the invoice is unknown."""
        invoice = self.get_invoice(invoice_id)
        if invoice is None:
            return None
        return aggregate(invoice, self.get_invoice_payments(invoice_id), include_pending)

    def buyer_summary(self, buyer_id: int, include_pending: bool = False) -> BuyerSummary | None:
        """Stats for one buyer, ``None`` if the buyer is unknown."""
        buyer = self.get_buyer(buyer_id)
        if buyer is None:
            return None
        return summarize_buyer(
            buyer,
            self.get_buyer_invoices(buyer_id),
            self.get_buyer_payments(buyer_id),
            self.get_buyer_units(buyer_id),
            include_pending=include_pending,
        )

    def buyer_summaries(self, include_pending: bool = False) -> list[BuyerSummary]:
        """Stats for every buyer, in insertion order."""
        return [self.buyer_summary(buyer_id, include_pending) for buyer_id in self.buyers]

    def summary(self) -> dict[str, int]:
        """Return summary counts of all entities."""
        return {
            "projects": len(self.projects),
            "units": len(self.units),
            "buyers": len(self.buyers),
            "invoices": len(self.invoices),
            "payments": len(self.payments),
        }

    def _ensure_indexes(self) -> None:
        if self._indexed_version == self.version:
            return

        self._project_units = {}
        self._buyer_units = {}
        self._buyer_invoices = {}
        self._buyer_payments = {}
        self._invoice_payments = {}

        for unit in self.units.values():
            if unit.project_id is not None:
                self._project_units.setdefault(unit.project_id, []).append(unit.id)
            for buyer_id in {unit.sold_to, unit.reserved_by} - {None}:
                self._buyer_units.setdefault(buyer_id, []).append(unit.id)

        for invoice in self.invoices.values():
            if invoice.buyer_id is not None:
                self._buyer_invoices.setdefault(invoice.buyer_id, []).append(invoice.id)

        for payment in self.payments.values():
            if payment.buyer_id is not None:
                self._buyer_payments.setdefault(payment.buyer_id, []).append(payment.id)
            if payment.invoice_id is not None:
                self._invoice_payments.setdefault(payment.invoice_id, []).append(payment.id)

        self._indexed_version = self.version

    @staticmethod
    def _require(collection: Mapping[int, Any], entity_id: int | None, label: str) -> None:
        if entity_id is not None and entity_id not in collection:
            raise ReferentialIntegrityError(f"{label} {entity_id} not found")
