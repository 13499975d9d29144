"""InternalConfig: Authoritative runtime configuration.

This is the ONLY config schema that runtime code sees. It is fully validated,
normalized, and contains NO optional fields that processing code depends on.

All .get() calls, fallback defaults, and validation logic are FORBIDDEN in
runtime code - everything is explicit here.
"""

from typing import Literal, Optional
from pydantic import Field, ConfigDict, field_validator
from layoffs.schemas.base import LayoffsBaseModel
from layoffs.schemas.param import BackfillKey, OutputFormat


# =============================================================================
# Nested Configuration Models (Runtime)
# =============================================================================

class InternalLoaderConfig(LayoffsBaseModel):
    """Runtime loader configuration.

    Note: input_path may be None when records are handed to the pipeline
    directly. The CLI runner validates it before loading.
    """
    input_path: Optional[str]
    encoding: str
    delimiter: str = Field(min_length=1, max_length=1)


class InternalGlobalConfig(LayoffsBaseModel):
    """Runtime global settings."""
    null_tokens: list[str]


class InternalStandardizerConfig(LayoffsBaseModel):
    """Runtime standardization rule parameters."""
    strip_fields: list[str]
    industry_prefixes: dict[str, str]
    country_trailing_periods: list[str]
    date_formats: list[str] = Field(min_length=1)


class InternalReconcilerConfig(LayoffsBaseModel):
    """Runtime reconciliation configuration."""
    backfill_keys: list[BackfillKey]

    @field_validator("backfill_keys")
    @classmethod
    def company_leads_backfill_key(cls, v):
        v = list(dict.fromkeys(v))
        if not v or v[0] != "company":
            raise ValueError("backfill_keys must start with 'company'")
        return v


class InternalOutputConfig(LayoffsBaseModel):
    """Runtime output configuration."""
    base_dir: Optional[str]
    formats: list[OutputFormat]
    compression: Literal["snappy", "gzip", "zstd", "none"]
    table_name: str = Field(min_length=1)
    ledger_filename: str


class InternalLoggingConfig(LayoffsBaseModel):
    """Runtime logging configuration."""
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


# =============================================================================
# Main InternalConfig
# =============================================================================

class InternalConfig(LayoffsBaseModel):
    """Authoritative runtime configuration.

    This is the ONLY configuration schema that processing code sees.
    It is fully validated, immutable, and contains explicit values for
    all parameters.

    Usage
    -----
    Runtime modules receive InternalConfig and access fields directly:

        def __init__(self, config: InternalConfig):
            self.backfill_keys = config.reconciler.backfill_keys  # NOT .get()
            self.null_tokens = config.global_.null_tokens

    Rules
    -----
    - NO .get() calls
    - NO fallback defaults
    - NO validation

    All of that happens during config resolution, not in runtime code.
    """

    loader: InternalLoaderConfig
    global_: InternalGlobalConfig = Field(alias="global")
    standardizer: InternalStandardizerConfig
    reconciler: InternalReconcilerConfig
    output: InternalOutputConfig
    logging: InternalLoggingConfig

    model_config = ConfigDict(
        extra='forbid',
        validate_assignment=True,
        use_enum_values=True,
        frozen=True,  # Immutable after construction
        populate_by_name=True,  # Allow both 'global' and 'global_'
    )
