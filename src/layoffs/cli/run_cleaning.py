"""Core cleaning pipeline execution logic.

This module contains the actual pipeline runner and the ``layoffs-clean``
entry point. Scripts are thin wrappers; this is the real implementation.
"""

import sys
import json
import argparse
import logging
import importlib.util
from pathlib import Path
from typing import Optional, Dict, Any

from layoffs.setup_directories import setup_output_directories
from layoffs.contracts import ContractViolation
from layoffs.io import CleanDatasetWriter, RawRecordLoader
from layoffs.pipeline import CleaningPipeline, PipelineResult, RunTracker, new_run_id
from layoffs.schemas import resolve_config, ParamConfig, UserConfig, CLIConfig


logger = logging.getLogger(__name__)


def load_user_config_dict(config_path: str) -> dict:
    """Load user config dict from Python file.

    Returns the raw dict before Pydantic validation.

    Parameters
    ----------
    config_path : str
        Path to user config Python file containing CONFIG dict.

    Returns
    -------
    dict
        Raw user configuration dictionary.

    Raises
    ------
    FileNotFoundError
        If config file does not exist.
    ValueError
        If no CONFIG dict found in file.
    """
    path = Path(config_path)
    if not path.exists():
        raise FileNotFoundError(f"Config not found: {path}")

    spec = importlib.util.spec_from_file_location("config_module", path)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)

    # Find CONFIG dict
    for name in dir(module):
        if name.startswith('CONFIG'):
            obj = getattr(module, name)
            if isinstance(obj, dict):
                return obj

    raise ValueError(f"No CONFIG dict found in {path}")


def run_cleaning_pipeline(
    user_config_path: Optional[str] = None,
    cli_args: Optional[Dict[str, Any]] = None,
    verbose: bool = False
) -> PipelineResult:
    """Load, clean and persist the layoffs dataset.

    1. Loads and resolves configuration (Param < User < CLI)
    2. Sets up output directories and logging
    3. Registers the run in the run ledger
    4. Loads raw records, runs the four cleaning stages
    5. Writes the clean table in every configured format

    Parameters
    ----------
    user_config_path : str, optional
        Path to user config file (Python file with CONFIG dict).
    cli_args : dict, optional
        CLI argument overrides. Keys: input_path, base_dir, output_formats,
        strict_location_backfill, log_level. All optional.
    verbose : bool, optional
        If True, enable DEBUG logging and print full resolved config.

    Returns
    -------
    PipelineResult
        Clean table and diagnostics.

    Raises
    ------
    ValueError
        If configuration validation fails or no input path is configured.
    ContractViolation
        If a stage breaks its contract. The run is recorded as failed.
    """
    param_cfg = ParamConfig()

    user_cfg = None
    if user_config_path is not None:
        user_cfg = UserConfig.model_validate(load_user_config_dict(user_config_path))

    cli_args = dict(cli_args or {})
    if verbose and "log_level" not in cli_args:
        cli_args["log_level"] = "DEBUG"

    # Filter None values
    cli_dict = {k: v for k, v in cli_args.items() if v is not None}
    cli_cfg = CLIConfig.model_validate(cli_dict) if cli_dict else CLIConfig()

    config = resolve_config(param_cfg, user_cfg, cli_cfg)

    input_path = config.loader.input_path
    if input_path is None:
        raise ValueError("No input file configured (set INPUT_PATH or pass --input)")

    output_dirs = setup_output_directories(config.output.base_dir)
    run_id = new_run_id()

    pipeline = CleaningPipeline(config)
    pipeline.setup_logging(output_dirs["logs"], run_id)

    print(f"\n{'='*60}")
    print("World Layoffs Cleaning Pipeline")
    print('='*60)
    print(f"Run:     {run_id}")
    print(f"Config:  {user_config_path or '(defaults)'}")
    print(f"Input:   {input_path}")
    print(f"Output:  {output_dirs['base']}")
    print(f"Formats: {', '.join(config.output.formats)}")
    print('='*60)

    if verbose:
        print("\nFull Internal Configuration:")
        print(json.dumps(config.model_dump(by_alias=True), indent=2))
        print('='*60)

    with RunTracker(output_dirs["base"] / config.output.ledger_filename) as tracker:
        tracker.start_run(source=str(input_path), run_id=run_id)
        try:
            raw = RawRecordLoader(config).load(input_path)
            result = pipeline.run(raw)
            written = CleanDatasetWriter(config, output_dirs["clean"]).write(result.clean)
        except ContractViolation as e:
            tracker.fail_run(run_id, pipeline.failed_stage, str(e))
            raise
        except Exception as e:
            tracker.fail_run(run_id, None, f"{type(e).__name__}: {e}")
            raise
        tracker.complete_run(run_id, result.diagnostics.as_dict())

    _print_summary(result, written)
    return result


def _print_summary(result: PipelineResult, written: dict):
    d = result.diagnostics
    print(f"\n{'='*60}")
    print("Stage counts")
    print('='*60)
    print(f"  raw:           {d.raw_count}")
    print(f"  staged:        {d.staged_count}")
    print(f"  deduplicated:  {d.deduplicated_count}  (-{d.duplicates_removed} duplicates)")
    print(f"  standardized:  {d.standardized_count}  ({d.date_coercion_failures} date failures)")
    print(f"  reconciled:    {d.reconciled_count}  "
          f"({d.backfilled} backfilled, -{d.dropped_no_signal} without signal)")
    print(f"  final:         {d.final_count}")
    for fmt, path in written.items():
        print(f"  {fmt:<8s} -> {path}")
    print('='*60)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Clean the world layoffs dataset")
    parser.add_argument("--config", help="Path to user config file (Python file with CONFIG dict)")
    parser.add_argument("--input", dest="input_path", help="Raw CSV file")
    parser.add_argument("--base-dir", help="Output directory")
    parser.add_argument("--formats", dest="output_formats",
                        help="Comma-separated output formats: parquet,sqlite,csv")
    parser.add_argument("--strict-location-backfill", action="store_true", default=None,
                        help="Backfill industry only from records with the same company AND location")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv=None) -> int:
    """``layoffs-clean`` entry point. Returns the process exit code."""
    args = build_parser().parse_args(argv)

    cli_args = {
        "input_path": args.input_path,
        "base_dir": args.base_dir,
        "output_formats": args.output_formats,
        "strict_location_backfill": args.strict_location_backfill,
    }

    try:
        run_cleaning_pipeline(args.config, cli_args=cli_args, verbose=args.verbose)
    except ContractViolation as e:
        print(f"Pipeline aborted: {e}", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
