"""Output sinks for exporting sales data."""

from realty_ledger.sinks.console import ConsoleSink
from realty_ledger.sinks.csv_file import CsvFileSink
from realty_ledger.sinks.json_file import JsonFileSink

__all__ = ["ConsoleSink", "CsvFileSink", "JsonFileSink"]
