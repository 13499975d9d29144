"""Delimited-file loader for raw layoff records."""

import logging
from pathlib import Path
from typing import TYPE_CHECKING

import pandas as pd

from layoffs.tables import RawTable

if TYPE_CHECKING:
    from layoffs.schemas import InternalConfig

__all__ = ['RawRecordLoader']

logger = logging.getLogger(__name__)


class RawRecordLoader:
    """Read raw records from a CSV-like file into a ``RawTable``.

    Every cell is read as text; typing is the standardizer's job. Cells
    exactly equal to a configured null token are loaded as absent.
    """

    def __init__(self, config: "InternalConfig"):
        self.encoding = config.loader.encoding
        self.delimiter = config.loader.delimiter
        self.null_tokens = list(config.global_.null_tokens)

    def load(self, path: Path | str) -> RawTable:
        """Load ``path``.

        Raises
        ------
        FileNotFoundError, OSError, UnicodeDecodeError
            Propagated unchanged from the underlying read.
        ValueError
            If the header lacks a business field.
        """
        path = Path(path)
        df = pd.read_csv(
            path,
            sep=self.delimiter,
            encoding=self.encoding,
            dtype=str,
            keep_default_na=False,
        )
        df = df.where(~df.isin(self.null_tokens), None)
        raw = RawTable.from_frame(df)

        logger.info("Loaded %d raw records from %s", len(raw), path)
        return raw
