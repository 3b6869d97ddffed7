#!/usr/bin/env python3
"""Generate a sample sales portfolio and export it.

Writes one file per entity type (projects, units, buyers, invoices,
payments) to the output directory, or prints the records to stdout.
Defaults come from the environment (see ``LedgerConfig.from_env``).
"""

import argparse
import sys
from datetime import date
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from realty_ledger.config import LOG_FORMATS, LedgerConfig, ScenarioConfig
from realty_ledger.exceptions import LedgerError
from realty_ledger.logging import setup_logging
from realty_ledger.scenarios import SalesPortfolioScenario
from realty_ledger.sinks import ConsoleSink, CsvFileSink, JsonFileSink


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--projects", type=int, default=3, help="Number of projects")
    parser.add_argument("--units-per-project", type=int, default=12, help="Units per project")
    parser.add_argument("--buyers", type=int, default=20, help="Number of buyers")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--as-of",
        type=date.fromisoformat,
        default=None,
        help="Reference date for the generated history (YYYY-MM-DD)",
    )
    parser.add_argument(
        "--format",
        choices=["json", "csv", "console"],
        default="json",
        help="Output format",
    )
    parser.add_argument("--output-dir", type=Path, default=None, help="Output directory")
    parser.add_argument("--log-level", default=None, help="Logging level")
    parser.add_argument(
        "--log-format", choices=LOG_FORMATS, default=None, help="Log output format"
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """Generate and export the sample portfolio."""
    args = parse_args(argv)
    try:
        config = LedgerConfig.from_env()
    except LedgerError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2

    setup_logging(args.log_level or config.log_level, args.log_format or config.log_format)

    scenario_config = ScenarioConfig(
        name="sample",
        num_projects=args.projects,
        units_per_project=args.units_per_project,
        num_buyers=args.buyers,
    )
    seed = args.seed if args.seed is not None else config.seed
    scenario = SalesPortfolioScenario(
        seed=seed, config=scenario_config, reference_date=args.as_of
    )
    scenario.generate()

    output_dir = args.output_dir or config.output.json_output_dir
    try:
        if args.format == "json":
            sink = JsonFileSink(output_dir, pretty=config.output.pretty_json)
        elif args.format == "csv":
            sink = CsvFileSink(output_dir)
        else:
            sink = ConsoleSink(max_records=5)
        scenario.export([sink])
        sink.close()
    except LedgerError as exc:
        print(f"Export failed: {exc}", file=sys.stderr)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
