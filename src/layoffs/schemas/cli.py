"""CLIConfig: Command-line operational overrides.

Minimal configuration for operational parameters that commonly change
between runs: input file, output directory, output formats, verbosity.

This schema handles command-line arguments parsed by argparse.
"""

from typing import Literal, Optional
from pydantic import field_validator
from layoffs.schemas.base import LayoffsBaseModel


class CLIConfig(LayoffsBaseModel):
    """Command-line configuration overrides.

    Operational-only settings that override user and param configs.
    Highest priority in config resolution.

    Notes
    -----
    ``strict_location_backfill`` switches the industry backfill key from
    ``company`` to ``company + location``. This changes which records get
    an industry, so it is never the default.

    Usage
    -----
        cli_cfg = CLIConfig(
            input_path="data/layoffs.csv",
            base_dir="/scratch/layoffs_output",
        )

        internal = resolve_config(param_cfg, user_cfg, cli_cfg)
    """

    input_path: Optional[str] = None
    base_dir: Optional[str] = None
    output_formats: Optional[list[Literal["parquet", "sqlite", "csv"]]] = None
    strict_location_backfill: Optional[bool] = None
    log_level: Optional[Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]] = None

    @field_validator("output_formats", mode="before")
    @classmethod
    def split_formats(cls, v):
        if isinstance(v, str):
            v = v.split(",")
        if v is None:
            return v
        return [str(f).strip().lower() for f in v if str(f).strip()]

    def to_internal_overrides(self) -> dict:
        """Convert CLI config to internal config structure.

        Returns
        -------
        dict
            Nested dictionary matching InternalConfig structure
        """
        overrides = {}

        if self.input_path is not None:
            overrides["loader"] = {"input_path": str(self.input_path)}

        output_overrides = {}
        if self.base_dir is not None:
            output_overrides["base_dir"] = str(self.base_dir)
        if self.output_formats is not None:
            output_overrides["formats"] = self.output_formats
        if output_overrides:
            overrides["output"] = output_overrides

        if self.strict_location_backfill is not None:
            keys = ["company", "location"] if self.strict_location_backfill else ["company"]
            overrides["reconciler"] = {"backfill_keys": keys}

        if self.log_level is not None:
            overrides["logging"] = {"level": self.log_level}

        return overrides
