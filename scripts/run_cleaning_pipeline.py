#!/usr/bin/env python3
"""World layoffs cleaning pipeline runner.

Usage:
    python scripts/run_cleaning_pipeline.py --config scripts/user_config.py
    python scripts/run_cleaning_pipeline.py --config scripts/user_config.py --formats parquet,csv
    python scripts/run_cleaning_pipeline.py --input data/layoffs.csv --strict-location-backfill

Note: User config in scripts/user_config.py, expert defaults in layoffs.schemas.param
"""

import sys

from layoffs.cli.run_cleaning import main


if __name__ == "__main__":
    sys.exit(main())
