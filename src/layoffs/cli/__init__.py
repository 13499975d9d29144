"""Command-line interface modules for the cleaning pipeline.

This package contains core execution logic, making scripts/ optional and deletable.
"""

from layoffs.cli.run_cleaning import run_cleaning_pipeline, main

__all__ = ['run_cleaning_pipeline', 'main']
