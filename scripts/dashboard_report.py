#!/usr/bin/env python3
"""Print the dashboard cards for a sales portfolio.

Reads the JSON files written by ``generate_sample_data.py`` (or API dumps
with the same file names), or generates a fresh portfolio when no input
directory is given.
"""

import argparse
import json
import sys
from datetime import datetime
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from realty_ledger.config import LOG_FORMATS, LedgerConfig
from realty_ledger.exceptions import LedgerError
from realty_ledger.formatting import format_compact_price, format_percentage, format_price
from realty_ledger.logging import get_logger, setup_logging
from realty_ledger.reconciliation import (
    days_overdue,
    filter_invoices,
    income_growth,
    monthly_income,
    paginate,
    project_income,
    sort_invoices,
    summarize,
    summarize_buyers,
    summarize_payments,
    summarize_units,
)
from realty_ledger.reconciliation.status import utc_now
from realty_ledger.scenarios import SalesPortfolioScenario
from realty_ledger.store import SalesDataStore
from realty_ledger.store.sales import ENTITY_TYPES

logger = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--input-dir", type=Path, default=None, help="Directory of JSON dumps")
    parser.add_argument("--seed", type=int, default=None, help="Seed when generating data")
    parser.add_argument(
        "--as-of",
        type=datetime.fromisoformat,
        default=None,
        help="Evaluation time (ISO format, naive values are UTC, default: now)",
    )
    parser.add_argument(
        "--include-pending",
        action="store_true",
        help="Count pending payments toward invoice balances",
    )
    parser.add_argument("--log-level", default=None, help="Logging level")
    parser.add_argument(
        "--log-format", choices=LOG_FORMATS, default=None, help="Log output format"
    )
    return parser.parse_args(argv)


def load_store(input_dir: Path) -> SalesDataStore:
    """Load every ``<entity>.json`` file present in ``input_dir``."""
    store = SalesDataStore()
    for entity_type in ENTITY_TYPES:
        path = input_dir / f"{entity_type}.json"
        if not path.exists():
            logger.warning("No %s file in %s", entity_type, input_dir)
            continue
        with open(path, encoding="utf-8") as f:
            store.load_records(entity_type, json.load(f))
    return store


def print_report(
    store: SalesDataStore,
    now: datetime,
    include_pending: bool,
    currency: str,
    page_size: int,
) -> None:
    """Print the dashboard cards."""
    invoices = list(store.invoices.values())
    payments = list(store.payments.values())

    invoice_stats = summarize(invoices, payments, now, include_pending)
    buyer_stats = summarize_buyers(store.buyer_summaries(include_pending))
    payment_stats = summarize_payments(payments)
    unit_stats = summarize_units(store.units.values())
    growth = income_growth(payments, now)

    print("=" * 60)
    print(f"Sales Dashboard as of {now:%Y-%m-%d %H:%M}")
    print("=" * 60)

    print("\nInvoices")
    print(f"  {'Total:':22}{invoice_stats.total}")
    print(f"  {'Paid:':22}{invoice_stats.paid} ({format_price(invoice_stats.paid_amount, currency)})")
    print(f"  {'Pending:':22}{invoice_stats.pending} ({format_price(invoice_stats.pending_amount, currency)})")
    print(f"  {'Overdue:':22}{invoice_stats.overdue}")
    print(f"  {'Cancelled:':22}{invoice_stats.cancelled}")
    print(f"  {'Invoiced:':22}{format_price(invoice_stats.total_amount, currency)}")
    print(f"  {'Collected:':22}{format_price(invoice_stats.total_paid_amount, currency)}")
    print(f"  {'Outstanding:':22}{format_price(invoice_stats.outstanding_amount, currency)}")

    print("\nBuyers")
    print(f"  {'Total:':22}{buyer_stats.total}")
    print(f"  {'Active:':22}{buyer_stats.active}")
    print(f"  {'With outstanding:':22}{buyer_stats.with_outstanding}")
    print(f"  {'Avg credit score:':22}{buyer_stats.average_credit_score}")

    print("\nPayments")
    print(f"  {'Completed:':22}{payment_stats.completed} ({format_price(payment_stats.completed_amount, currency)})")
    print(f"  {'Pending:':22}{payment_stats.pending}")
    print(f"  {'Failed:':22}{payment_stats.failed}")
    for method, amount in sorted(payment_stats.by_method.items()):
        print(f"    {method + ':':20}{format_compact_price(amount, currency)}")

    print("\nUnits")
    print(f"  {'Available:':22}{unit_stats.available} of {unit_stats.total}")
    print(f"  {'Sold rate:':22}{format_percentage(unit_stats.sold_rate)}")
    print(f"  {'Average price:':22}{format_price(unit_stats.average_price, currency)}")

    print("\nIncome")
    sign = "+" if growth.is_positive else ""
    print(f"  {'This month:':22}{format_price(growth.current_month, currency)} ({sign}{format_percentage(growth.growth_percent)})")
    for month in monthly_income(payments, now, months=6):
        print(f"    {month.label + ':':20}{format_compact_price(month.amount, currency)}")
    for project in project_income(payments, store.units.values(), store.projects.values()):
        print(f"    {project.name + ':':20}{format_compact_price(project.amount, currency)}")

    overdue = sort_invoices(
        filter_invoices(invoices, status="overdue", now=now), "due_date", now=now
    )
    page = paginate(overdue, page=1, per_page=page_size)
    print(f"\nOverdue invoices (showing {page.first_index}-{page.last_index} of {page.total_items})")
    for invoice in page.items:
        buyer = store.get_buyer(invoice.buyer_id)
        name = buyer.full_name if buyer else "Unknown buyer"
        balance = store.invoice_balance(invoice.id, include_pending)
        print(
            f"  {invoice.invoice_number:16}{name:24}"
            f"{format_price(balance.amount_due, currency):>18}  {days_overdue(invoice, now)}d"
        )
    print("=" * 60)


def main(argv: list[str] | None = None) -> int:
    """Build the store and print the report."""
    args = parse_args(argv)
    try:
        config = LedgerConfig.from_env()
    except LedgerError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(args.log_level or config.log_level, args.log_format or config.log_format)

    if args.input_dir is not None:
        store = load_store(args.input_dir)
    else:
        seed = args.seed if args.seed is not None else config.seed
        store = SalesPortfolioScenario(seed=seed, config=config.scenario).generate()

    now = args.as_of or utc_now()
    include_pending = args.include_pending or config.reporting.count_pending_payments
    print_report(
        store, now, include_pending, config.reporting.currency, config.reporting.page_size
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
