"""Invoice status derivation, payment reconciliation and roll-up statistics."""

from realty_ledger.reconciliation.cache import ReportCache
from realty_ledger.reconciliation.filters import (
    BuyerStanding,
    DateRange,
    Page,
    filter_buyers,
    filter_invoices,
    filter_payments,
    paginate,
    sort_buyers,
    sort_invoices,
    sort_payments,
)
from realty_ledger.reconciliation.lookups import (
    find_by_id,
    project_for_invoice,
    project_for_payment,
    unit_display_name,
)
from realty_ledger.reconciliation.payments import (
    PaymentBalance,
    aggregate,
    counts_toward_balance,
)
from realty_ledger.reconciliation.statement import StatementLine, build_statement
from realty_ledger.reconciliation.status import (
    STATUS_SORT_ORDER,
    days_overdue,
    days_until_due,
    effective_status,
    invoice_subtotal,
    is_overdue,
)
from realty_ledger.reconciliation.summary import (
    BuyerPortfolioSummary,
    BuyerSummary,
    IncomeGrowth,
    InvoiceSummary,
    MonthlyIncome,
    PaymentSummary,
    ProjectIncome,
    StatusBucket,
    UnitSummary,
    income_growth,
    monthly_income,
    project_income,
    status_breakdown,
    summarize,
    summarize_buyer,
    summarize_buyers,
    summarize_payments,
    summarize_units,
)

__all__ = [
    "STATUS_SORT_ORDER",
    "BuyerPortfolioSummary",
    "BuyerStanding",
    "BuyerSummary",
    "DateRange",
    "IncomeGrowth",
    "InvoiceSummary",
    "MonthlyIncome",
    "Page",
    "PaymentBalance",
    "PaymentSummary",
    "ProjectIncome",
    "ReportCache",
    "StatementLine",
    "StatusBucket",
    "UnitSummary",
    "aggregate",
    "build_statement",
    "counts_toward_balance",
    "days_overdue",
    "days_until_due",
    "effective_status",
    "filter_buyers",
    "filter_invoices",
    "filter_payments",
    "find_by_id",
    "income_growth",
    "invoice_subtotal",
    "is_overdue",
    "monthly_income",
    "paginate",
    "project_for_invoice",
    "project_for_payment",
    "project_income",
    "sort_buyers",
    "sort_invoices",
    "sort_payments",
    "status_breakdown",
    "summarize",
    "summarize_buyer",
    "summarize_buyers",
    "summarize_payments",
    "summarize_units",
    "unit_display_name",
]
