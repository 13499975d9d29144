"""World layoffs cleaning user configuration.

This is the user-facing configuration file. Modify settings here to customize
the pipeline behavior. Advanced settings are in layoffs.schemas.param.

Usage:
    python scripts/run_cleaning_pipeline.py --config scripts/user_config.py
    layoffs-clean --config scripts/user_config.py --formats parquet,sqlite
"""

CONFIG = {
    # ========================================================================
    # INPUT
    # ========================================================================
    "INPUT_PATH": "data/layoffs.csv",
    "ENCODING": "utf-8",
    "DELIMITER": ",",
    "NULL_TOKENS": ["", "NULL"],   # Cells spelled like this are "not reported"

    # ========================================================================
    # OUTPUT
    # ========================================================================
    "BASE_DIR": "./output",        # clean/, logs/ and the run ledger go here
    "OUTPUT_FORMATS": ["parquet", "csv"],

    # ========================================================================
    # CLEANING
    # ========================================================================
    "DATE_FORMATS": ["%m/%d/%Y", "%Y-%m-%d"],
    # "company" only, or "company,location" for stricter industry backfill
    "BACKFILL_KEYS": ["company"],

    # ========================================================================
    # LOGGING
    # ========================================================================
    "LOG_LEVEL": "INFO",

    # Advanced: nested section overrides
    # "standardizer": {"industry_prefixes": {"Crypto": "Crypto", "Fin-Tech": "Fintech"}},
    # "output": {"compression": "zstd"},
}
