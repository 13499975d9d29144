"""UserConfig: Forgiving, minimal user-facing configuration.

This schema accepts user inputs in a variety of formats, with aliases
for common naming patterns (e.g., INPUT_PATH → input_path, BASE_DIR → base_dir).

UserConfig is intentionally minimal - users only specify what they want
to override from the expert defaults. Validation is lenient to accept
both uppercase and lowercase keys, comma-separated lists, etc.
"""

from typing import Any, Optional
from pydantic import Field, field_validator
from layoffs.schemas.base import LayoffsBaseModel


def _split_csv(v):
    """Turn 'a, b' into ['a', 'b']; lists pass through."""
    if isinstance(v, str):
        return [part.strip() for part in v.split(",") if part.strip()]
    return v


class UserLoaderConfig(LayoffsBaseModel):
    """User-facing loader config."""
    input_path: Optional[str] = None
    encoding: Optional[str] = None
    delimiter: Optional[str] = None


class UserStandardizerConfig(LayoffsBaseModel):
    """User-facing standardizer config."""
    strip_fields: Optional[list[str]] = None
    industry_prefixes: Optional[dict[str, str]] = None
    country_trailing_periods: Optional[list[str]] = None
    date_formats: Optional[list[str]] = None


class UserReconcilerConfig(LayoffsBaseModel):
    """User-facing reconciler config."""
    backfill_keys: Optional[list[str]] = None

    @field_validator("backfill_keys", mode="before")
    @classmethod
    def split_keys(cls, v):
        return _split_csv(v)


class UserOutputConfig(LayoffsBaseModel):
    """User-facing output config."""
    base_dir: Optional[str] = None
    formats: Optional[list[str]] = None
    compression: Optional[str] = None
    table_name: Optional[str] = None
    ledger_filename: Optional[str] = None

    @field_validator("formats", mode="before")
    @classmethod
    def split_formats(cls, v):
        v = _split_csv(v)
        if v is None:
            return v
        return [str(f).lower() for f in v]


class UserConfig(LayoffsBaseModel):
    """User-facing configuration schema.

    Minimal, forgiving, and uses common aliases. Users only specify
    what they want to override from ParamConfig defaults.

    This config is converted to internal overrides during resolution.

    Usage
    -----
        user_cfg = UserConfig(
            input_path="data/layoffs.csv",
            base_dir="/data/layoffs_out",
            output_formats=["parquet", "csv"],
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    # Input settings (flat aliases)
    input_path: Optional[str] = Field(None, alias="INPUT_PATH")
    encoding: Optional[str] = Field(None, alias="ENCODING")
    delimiter: Optional[str] = Field(None, alias="DELIMITER")
    null_tokens: Optional[list[str]] = Field(None, alias="NULL_TOKENS")

    # Cleaning settings (flat aliases)
    date_formats: Optional[list[str]] = Field(None, alias="DATE_FORMATS")
    backfill_keys: Optional[list[str]] = Field(None, alias="BACKFILL_KEYS")

    # Output settings (flat aliases)
    base_dir: Optional[str] = Field(None, alias="BASE_DIR")
    output_formats: Optional[list[str]] = Field(None, alias="OUTPUT_FORMATS")
    log_level: Optional[str] = Field(None, alias="LOG_LEVEL")

    # Nested overrides (advanced users)
    loader: Optional[UserLoaderConfig] = None
    global_: Optional[dict[str, Any]] = Field(None, alias="global")
    standardizer: Optional[UserStandardizerConfig] = None
    reconciler: Optional[UserReconcilerConfig] = None
    output: Optional[UserOutputConfig] = None

    model_config = LayoffsBaseModel.model_config.copy()
    # Allow forgiving input dictionaries (ignore unknown legacy keys)
    model_config.update({"populate_by_name": True, "extra": "ignore"})

    @field_validator("date_formats", "backfill_keys", "output_formats", mode="before")
    @classmethod
    def split_comma_lists(cls, v):
        """Accept 'a,b' as well as ['a', 'b']."""
        return _split_csv(v)

    @field_validator("log_level", mode="before")
    @classmethod
    def uppercase_log_level(cls, v):
        if isinstance(v, str):
            return v.strip().upper()
        return v

    def to_internal_overrides(self) -> dict:
        """Convert flat UserConfig to nested InternalConfig structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        # Loader section
        loader = {}
        if self.input_path is not None:
            loader["input_path"] = str(self.input_path)
        if self.encoding is not None:
            loader["encoding"] = self.encoding
        if self.delimiter is not None:
            loader["delimiter"] = self.delimiter
        if self.loader is not None:
            loader.update(self.loader.model_dump(exclude_none=True))
        if loader:
            overrides["loader"] = loader

        # Global section
        global_cfg = {}
        if self.null_tokens is not None:
            global_cfg["null_tokens"] = self.null_tokens
        if self.global_ is not None:
            global_cfg.update({k: v for k, v in self.global_.items() if v is not None})
        if global_cfg:
            overrides["global"] = global_cfg

        # Standardizer section
        standardizer = {}
        if self.date_formats is not None:
            standardizer["date_formats"] = self.date_formats
        if self.standardizer is not None:
            standardizer.update(self.standardizer.model_dump(exclude_none=True))
        if standardizer:
            overrides["standardizer"] = standardizer

        # Reconciler section
        reconciler = {}
        if self.backfill_keys is not None:
            reconciler["backfill_keys"] = self.backfill_keys
        if self.reconciler is not None:
            reconciler.update(self.reconciler.model_dump(exclude_none=True))
        if reconciler:
            overrides["reconciler"] = reconciler

        # Output section
        output = {}
        if self.base_dir is not None:
            output["base_dir"] = str(self.base_dir)
        if self.output_formats is not None:
            output["formats"] = [f.lower() for f in self.output_formats]
        if self.output is not None:
            output.update(self.output.model_dump(exclude_none=True))
        if output:
            overrides["output"] = output

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
