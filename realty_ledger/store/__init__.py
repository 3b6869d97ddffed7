"""In-memory data stores for maintaining entity relationships."""

from realty_ledger.store.sales import SalesDataStore

__all__ = ["SalesDataStore"]
