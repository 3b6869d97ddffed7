"""Domain models for the sales ledger."""

from realty_ledger.models.base import Address

__all__ = ["Address"]
