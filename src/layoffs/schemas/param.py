"""ParamConfig: Expert defaults for the cleaning pipeline.

This module defines the complete default configuration. ALL pipeline
parameters must have defaults here. No runtime code should define fallback
values - this is the single source of truth for defaults.

Runtime code NEVER reads from ParamConfig directly - it only receives InternalConfig.
"""

from typing import Literal, Optional
from pydantic import Field, field_validator
from layoffs.schemas.base import LayoffsBaseModel


OutputFormat = Literal["parquet", "sqlite", "csv"]
BackfillKey = Literal["company", "location"]


# =============================================================================
# Nested Configuration Models
# =============================================================================

class LoaderConfig(LayoffsBaseModel):
    """Delimited file loader configuration."""
    input_path: Optional[str] = None
    encoding: str = "utf-8"
    delimiter: str = Field(",", min_length=1, max_length=1)


class GlobalConfig(LayoffsBaseModel):
    """Settings shared by every stage."""
    null_tokens: list[str] = Field(
        default_factory=lambda: ["", "NULL"],
        description="Raw spellings of 'not reported'",
    )

    @field_validator("null_tokens")
    @classmethod
    def dedupe_null_tokens(cls, v):
        """Keep first occurrence of each token, in order."""
        return list(dict.fromkeys(v))


class StandardizerConfig(LayoffsBaseModel):
    """Field standardization rule parameters."""
    strip_fields: list[str] = Field(default_factory=lambda: ["company"])
    industry_prefixes: dict[str, str] = Field(
        default_factory=lambda: {"Crypto": "Crypto"},
        description="Prefix -> canonical industry label",
    )
    country_trailing_periods: list[str] = Field(default_factory=lambda: ["United States"])
    date_formats: list[str] = Field(
        default_factory=lambda: ["%m/%d/%Y", "%Y-%m-%d"],
        min_length=1,
    )


class ReconcilerConfig(LayoffsBaseModel):
    """Null reconciliation configuration."""
    backfill_keys: list[BackfillKey] = Field(default_factory=lambda: ["company"])

    @field_validator("backfill_keys")
    @classmethod
    def company_leads_backfill_key(cls, v):
        """Backfill always matches on company; location only refines it."""
        v = list(dict.fromkeys(v))
        if not v or v[0] != "company":
            raise ValueError("backfill_keys must start with 'company'")
        return v


class OutputConfig(LayoffsBaseModel):
    """Clean dataset output configuration."""
    base_dir: Optional[str] = None
    formats: list[OutputFormat] = Field(default_factory=lambda: ["parquet"])
    compression: Literal["snappy", "gzip", "zstd", "none"] = "snappy"
    table_name: str = Field("layoffs_clean", min_length=1)
    ledger_filename: str = "cleaning_runs.db"

    @field_validator("formats", mode="before")
    @classmethod
    def normalize_formats(cls, v):
        """Accept 'parquet,csv' strings and mixed case."""
        if isinstance(v, str):
            v = v.split(",")
        return list(dict.fromkeys(str(f).strip().lower() for f in v))


class LoggingConfig(LayoffsBaseModel):
    """Logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    @field_validator("level", mode="before")
    @classmethod
    def uppercase_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v


# =============================================================================
# Main ParamConfig
# =============================================================================

class ParamConfig(LayoffsBaseModel):
    """Complete expert configuration with all defaults.

    This is the single source of truth for all pipeline parameters.
    Every tunable parameter MUST have a default here.

    Usage
    -----
    This config is NOT used directly by runtime code. It serves as the
    base layer in config resolution:

        internal_cfg = resolve_config(param_cfg, user_cfg, cli_cfg)

    Runtime code only sees InternalConfig.
    """

    loader: LoaderConfig = Field(default_factory=LoaderConfig)
    global_: GlobalConfig = Field(default_factory=GlobalConfig, alias="global")
    standardizer: StandardizerConfig = Field(default_factory=StandardizerConfig)
    reconciler: ReconcilerConfig = Field(default_factory=ReconcilerConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = LayoffsBaseModel.model_config.copy()
    model_config.update({"populate_by_name": True})  # Allow both 'global' and 'global_'
