"""CSV file sink for spreadsheet exports."""

import csv
import logging
from pathlib import Path
from typing import Any

from realty_ledger.exceptions import SinkError
from realty_ledger.sinks.serialization import flatten, to_dict

logger = logging.getLogger(__name__)


class CsvFileSink:
    """Output data to one CSV file per entity type.

    Nested fields such as addresses are flattened into ``address_city``
    style columns. Columns follow the first record's field order, with
    keys first seen in later records appended.
    """

    def __init__(self, output_dir: str | Path) -> None:
        self.output_dir = Path(output_dir)
        try:
            self.output_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SinkError(f"Cannot create output directory {self.output_dir}: {exc}") from exc
        self._counts: dict[str, int] = {}

    def write_batch(self, entity_type: str, records: list[Any]) -> None:
        """Write a batch of records to ``<entity_type>.csv``."""
        file_path = self.output_dir / f"{entity_type}.csv"
        rows = [flatten(to_dict(record)) for record in records]

        columns: list[str] = []
        for row in rows:
            columns.extend(key for key in row if key not in columns)

        try:
            with open(file_path, "w", encoding="utf-8", newline="") as f:
                writer = csv.DictWriter(f, fieldnames=columns, restval="")
                writer.writeheader()
                writer.writerows(rows)
        except OSError as exc:
            raise SinkError(f"Failed to write {file_path}: {exc}") from exc

        self._counts[entity_type] = len(rows)
        logger.debug("Wrote %d %s to %s", len(rows), entity_type, file_path)

    def close(self) -> None:
        """Print summary."""
        print(f"CSV files written to: {self.output_dir}")
        for entity_type, count in self._counts.items():
            print(f"  {entity_type}: {count} records")
