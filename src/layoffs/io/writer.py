"""Persist the cleaned dataset as Parquet, SQLite and/or CSV."""

import logging
import sqlite3
from pathlib import Path
from typing import TYPE_CHECKING

from layoffs.tables import CleanTable

if TYPE_CHECKING:
    from layoffs.schemas import InternalConfig

__all__ = ['CleanDatasetWriter']

logger = logging.getLogger(__name__)

DATE_FORMAT = "%Y-%m-%d"


class CleanDatasetWriter:
    """Write a ``CleanTable`` in each configured output format.

    File names derive from ``output.table_name``::

        clean/layoffs_clean.parquet
        clean/layoffs_clean.db        (table ``layoffs_clean``)
        clean/layoffs_clean.csv
    """

    def __init__(self, config: "InternalConfig", output_dir: Path | str):
        self.formats = list(config.output.formats)
        self.table_name = config.output.table_name
        compression = config.output.compression
        self.compression = None if compression == "none" else compression
        self.output_dir = Path(output_dir)

    def write(self, clean: CleanTable) -> dict:
        """Write every configured format.

        Returns
        -------
        dict
            Format name to written path.
        """
        self.output_dir.mkdir(parents=True, exist_ok=True)
        writers = {
            "parquet": self.write_parquet,
            "sqlite": self.write_sqlite,
            "csv": self.write_csv,
        }
        return {fmt: writers[fmt](clean) for fmt in self.formats}

    def write_parquet(self, clean: CleanTable) -> Path:
        filepath = self.output_dir / f"{self.table_name}.parquet"
        clean.frame.to_parquet(filepath, engine='pyarrow',
                               compression=self.compression, index=False)
        logger.info("Exported %d rows to: %s", len(clean), filepath)
        return filepath

    def write_sqlite(self, clean: CleanTable) -> Path:
        """Replace the table on every run; dates stored as ISO text."""
        filepath = self.output_dir / f"{self.table_name}.db"
        df = clean.frame
        df["date"] = df["date"].dt.strftime(DATE_FORMAT)
        df = df.astype(object).where(df.notna(), None)

        conn = sqlite3.connect(str(filepath))
        try:
            df.to_sql(self.table_name, conn, if_exists='replace', index=False,
                      dtype={"date": "DATE"})
            conn.commit()
        finally:
            conn.close()

        logger.info("Exported %d rows to: %s (table %s)", len(clean), filepath, self.table_name)
        return filepath

    def write_csv(self, clean: CleanTable) -> Path:
        """Absence is written as an empty cell, so the loader reads it back as absent."""
        filepath = self.output_dir / f"{self.table_name}.csv"
        clean.frame.to_csv(filepath, index=False, date_format=DATE_FORMAT, na_rep="")
        logger.info("Exported %d rows to: %s", len(clean), filepath)
        return filepath
