"""Reconciliation and reporting core for a real-estate sales dashboard."""

__version__ = "0.1.0"
