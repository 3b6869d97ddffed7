"""Configuration management for realty-ledger."""

import os
from dataclasses import dataclass, field
from pathlib import Path

from realty_ledger.exceptions import ConfigurationError

LOG_FORMATS = ("standard", "json")


@dataclass
class ReportingConfig:
    """Options that change how balances and summaries are computed."""

    count_pending_payments: bool = False
    currency: str = "KES"
    page_size: int = 12
    cache_granularity_seconds: int = 60


@dataclass
class OutputConfig:
    """Output configuration."""

    json_output_dir: Path = field(default_factory=lambda: Path("output"))
    pretty_json: bool = False


@dataclass
class ScenarioConfig:
    """Sizes for the sample sales portfolio."""

    name: str
    num_projects: int = 3
    units_per_project: int = 12
    num_buyers: int = 20
    sale_rate: float = 0.5
    reservation_rate: float = 0.2
    partial_payment_rate: float = 0.3
    failed_payment_rate: float = 0.05


@dataclass
class LedgerConfig:
    """Main configuration for realty-ledger."""

    reporting: ReportingConfig = field(default_factory=ReportingConfig)
    output: OutputConfig = field(default_factory=OutputConfig)
    scenario: ScenarioConfig | None = None
    seed: int | None = None
    log_level: str = "INFO"
    log_format: str = "standard"

    @classmethod
    def from_env(cls) -> "LedgerConfig":
        """Create config from environment variables."""
        reporting = ReportingConfig(
            count_pending_payments=_env_bool("COUNT_PENDING_PAYMENTS", False),
            currency=os.getenv("CURRENCY", "KES"),
            page_size=_env_int("PAGE_SIZE", 12),
            cache_granularity_seconds=_env_int("CACHE_GRANULARITY", 60),
        )

        output = OutputConfig(
            json_output_dir=Path(os.getenv("OUTPUT_DIR", "output")),
            pretty_json=_env_bool("PRETTY_JSON", False),
        )

        seed = os.getenv("SEED")

        return cls(
            reporting=reporting,
            output=output,
            seed=_env_int("SEED", 0) if seed else None,
            log_level=os.getenv("LOG_LEVEL", "INFO"),
            log_format=_env_choice("LOG_FORMAT", "standard", LOG_FORMATS),
        )


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in ("1", "true", "yes")


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    try:
        return int(value)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {value!r}") from None


def _env_choice(name: str, default: str, choices: tuple[str, ...]) -> str:
    value = os.getenv(name)
    if value is None or value == "":
        return default
    value = value.strip().lower()
    if value not in choices:
        raise ConfigurationError(f"{name} must be one of {', '.join(choices)}, got {value!r}")
    return value
