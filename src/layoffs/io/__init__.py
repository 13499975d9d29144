"""Reading raw records and writing the cleaned dataset."""

from layoffs.io.loader import RawRecordLoader
from layoffs.io.writer import CleanDatasetWriter

__all__ = ["RawRecordLoader", "CleanDatasetWriter"]
