"""Pre-built scenarios for generating sample sales data."""

from realty_ledger.scenarios.sales_portfolio import SalesPortfolioScenario

__all__ = ["SalesPortfolioScenario"]
