"""Configuration loading from environment variables and the .env file."""

from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from trade_journal.instruments import DEFAULT_PIP_VALUE, PIP_VALUES, normalize_symbol


class LogFormat(str, Enum):
    """Log output format."""

    JSON = "json"
    CONSOLE = "console"


class Settings(BaseSettings):
    """Journal engine settings.

    Loaded from environment variables and the .env file. The engine functions
    never read these directly; callers pass the derived values in.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ==================== Pip values ====================
    default_pip_value: float = Field(
        default=DEFAULT_PIP_VALUE,
        gt=0.0,
        description="Pip value per standard lot for symbols missing from the table",
    )
    pip_value_overrides: dict[str, float] = Field(
        default_factory=dict,
        description="Per-symbol pip values merged over the built-in table",
    )

    # ==================== Risk ====================
    default_risk_pct: float = Field(
        default=1.0,
        gt=0.0,
        le=100.0,
        description="Risk per trade (percent of balance) when none is given",
    )
    baseline_balance: float | None = Field(
        default=None,
        description="Starting balance used for ROI; unset means ROI is unavailable",
    )

    # ==================== Logging ====================
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Log level",
    )
    log_format: LogFormat = Field(
        default=LogFormat.CONSOLE,
        description="Log output format",
    )

    # ==================== Data ====================
    trades_file: Path = Field(
        default=Path("data/trades.json"),
        description="Default trade file read by the CLI",
    )

    @field_validator("trades_file", mode="before")
    @classmethod
    def parse_trades_file(cls, v: str | Path) -> Path:
        """Convert strings to Path objects."""
        return Path(v) if isinstance(v, str) else v

    @field_validator("pip_value_overrides")
    @classmethod
    def check_pip_values(cls, v: dict[str, float]) -> dict[str, float]:
        """Reject non-positive pip values."""
        for symbol, value in v.items():
            if value <= 0:
                raise ValueError(f"pip value for {symbol} must be positive")
        return v

    def pip_value_table(self) -> dict[str, float]:
        """Return the built-in pip table with overrides applied."""
        table = dict(PIP_VALUES)
        for symbol, value in self.pip_value_overrides.items():
            table[normalize_symbol(symbol)] = float(value)
        return table

    @property
    def has_baseline(self) -> bool:
        """Whether ROI can be reported."""
        return self.baseline_balance is not None and self.baseline_balance > 0


_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the global settings instance."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reload_settings() -> Settings:
    """Reload settings from the environment."""
    global _settings
    _settings = Settings()
    return _settings
