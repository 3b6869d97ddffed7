"""Tests for the sales portfolio scenario."""

import json
from datetime import date, datetime
from pathlib import Path

import pytest

from realty_ledger.config import ScenarioConfig
from realty_ledger.models.sales import InvoiceStatus, UnitStatus
from realty_ledger.reconciliation import aggregate, summarize
from realty_ledger.scenarios import SalesPortfolioScenario
from realty_ledger.sinks import JsonFileSink
from realty_ledger.store import SalesDataStore
from realty_ledger.store.sales import ENTITY_TYPES

REFERENCE_DATE = date(2025, 7, 6)


@pytest.fixture
def scenario(seed: int) -> SalesPortfolioScenario:
    """Generated scenario with a fixed reference date."""
    scenario = SalesPortfolioScenario(
        num_projects=3,
        units_per_project=12,
        num_buyers=15,
        seed=seed,
        reference_date=REFERENCE_DATE,
    )
    scenario.generate()
    return scenario


class TestSalesPortfolioScenario:
    """Tests for SalesPortfolioScenario."""

    def test_generate_counts(self, scenario: SalesPortfolioScenario) -> None:
        """Test the requested sizes are generated."""
        store = scenario.store

        assert len(store.projects) == 3
        assert len(store.units) == 36
        assert len(store.buyers) == 15
        assert len(store.invoices) > 0
        assert len(store.payments) > 0

    def test_config_overrides_arguments(self, seed: int) -> None:
        """Test a ScenarioConfig replaces the size arguments."""
        config = ScenarioConfig(name="small", num_projects=1, units_per_project=4, num_buyers=2)

        store = SalesPortfolioScenario(
            num_projects=9, seed=seed, config=config, reference_date=REFERENCE_DATE
        ).generate()

        assert len(store.projects) == 1
        assert len(store.units) == 4
        assert len(store.buyers) == 2

    def test_invoices_match_units(self, scenario: SalesPortfolioScenario) -> None:
        """Test each invoice belongs to the unit's buyer."""
        store = scenario.store

        for invoice in store.invoices.values():
            unit = store.units[invoice.unit_id]
            assert unit.status in (UnitStatus.SOLD, UnitStatus.RESERVED)
            assert invoice.buyer_id in (unit.sold_to, unit.reserved_by)
            assert invoice.project_id == unit.project_id

    def test_paid_invoices_are_settled(self, scenario: SalesPortfolioScenario) -> None:
        """Test stored paid invoices are fully covered by completed payments."""
        store = scenario.store

        for invoice in store.invoices.values():
            balance = aggregate(invoice, store.get_invoice_payments(invoice.id))
            if invoice.status == InvoiceStatus.PAID:
                assert balance.is_paid_in_full
            else:
                assert not balance.is_paid_in_full

    def test_no_future_payments(self, scenario: SalesPortfolioScenario) -> None:
        """Test payments are never dated after the reference date."""
        assert all(p.payment_date <= REFERENCE_DATE for p in scenario.store.payments.values())

    def test_reproducible(self, seed: int, scenario: SalesPortfolioScenario) -> None:
        """Test the same seed generates the same ledger."""
        again = SalesPortfolioScenario(
            num_buyers=15, seed=seed, reference_date=REFERENCE_DATE
        ).generate()

        assert [i.total_amount for i in again.invoices.values()] == [
            i.total_amount for i in scenario.store.invoices.values()
        ]
        assert [p.amount for p in again.payments.values()] == [
            p.amount for p in scenario.store.payments.values()
        ]

    def test_dashboard_summary(self, scenario: SalesPortfolioScenario) -> None:
        """Test the dashboard cards."""
        summary = scenario.get_dashboard_summary()

        assert set(summary) == {"invoices", "buyers", "payments", "units", "income_growth"}
        assert summary["invoices"]["total"] == len(scenario.store.invoices)
        assert summary["units"]["total"] == 36
        assert summary["buyers"]["total"] == 15
        assert summary["payments"]["total_count"] == len(scenario.store.payments)

    def test_export_and_reload(self, scenario: SalesPortfolioScenario, tmp_path: Path) -> None:
        """Test exported JSON loads back into an equivalent store."""
        scenario.export([JsonFileSink(tmp_path)])

        reloaded = SalesDataStore()
        for entity_type in ENTITY_TYPES:
            records = json.loads((tmp_path / f"{entity_type}.json").read_text(encoding="utf-8"))
            reloaded.load_records(entity_type, records, strict=True)

        now = datetime(2025, 7, 6, 12, 0)
        original = scenario.store
        assert reloaded.summary() == original.summary()
        assert summarize(
            reloaded.invoices.values(), reloaded.payments.values(), now
        ) == summarize(original.invoices.values(), original.payments.values(), now)
