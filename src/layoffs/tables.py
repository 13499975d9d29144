"""Record schema and stage-typed tables.

Every stage boundary of the cleaning pipeline has its own table type. A
stage accepts only the type its predecessor produces, so running stages
out of order is a contract violation rather than a silent divergence::

    RawTable -> StagedTable -> DedupedTable -> StandardizedTable -> CleanTable

Tables wrap a ``pandas.DataFrame`` and are never mutated in place; each
stage builds a new frame.
"""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping

import pandas as pd

__all__ = [
    "BUSINESS_FIELDS",
    "TEXT_FIELDS",
    "SIGNAL_FIELDS",
    "RANK_FIELD",
    "RawTable",
    "StagedTable",
    "DedupedTable",
    "StandardizedTable",
    "CleanTable",
]

# Row-level identity: two records equal on all of these are duplicates.
BUSINESS_FIELDS = (
    "company",
    "location",
    "industry",
    "total_laid_off",
    "percentage_laid_off",
    "date",
    "stage",
    "country",
    "funds_raised_millions",
)

TEXT_FIELDS = ("company", "location", "industry", "stage", "country")

# A record needs at least one of these to carry layoff-magnitude signal.
SIGNAL_FIELDS = ("total_laid_off", "percentage_laid_off")

RANK_FIELD = "row_num"


def _as_object_frame(df: pd.DataFrame) -> pd.DataFrame:
    """Cast to object dtype with ``None`` as the only missing value."""
    df = df.astype(object)
    return df.where(df.notna(), None)


@dataclass(frozen=True, eq=False)
class _Table:
    frame: pd.DataFrame

    def __len__(self) -> int:
        return len(self.frame)


@dataclass(frozen=True, eq=False)
class RawTable(_Table):
    """Raw records as received from the loader: loosely typed, never mutated."""

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "RawTable":
        """Build from dict-like records. Missing business fields become absent."""
        df = pd.DataFrame.from_records(list(records), columns=list(BUSINESS_FIELDS))
        return cls(_as_object_frame(df))

    @classmethod
    def from_frame(cls, df: pd.DataFrame) -> "RawTable":
        """Build from a frame holding every business field.

        Extra columns (including a leftover ``row_num``) are dropped.

        Raises
        ------
        ValueError
            If a business field column is missing.
        """
        missing = [col for col in BUSINESS_FIELDS if col not in df.columns]
        if missing:
            raise ValueError(f"Raw records missing business fields: {missing}")
        df = df.loc[:, list(BUSINESS_FIELDS)].reset_index(drop=True)
        return cls(_as_object_frame(df))


@dataclass(frozen=True, eq=False)
class StagedTable(_Table):
    """Working copy annotated with the duplicate rank ``row_num``."""


@dataclass(frozen=True, eq=False)
class DedupedTable(_Table):
    """Staged records with exactly one survivor per duplicate group."""


@dataclass(frozen=True, eq=False)
class StandardizedTable(_Table):
    """Deduplicated records after the field rule table has been applied."""


class CleanTable:
    """Terminal, read-only output of the pipeline.

    ``frame`` on this type hands out a copy so downstream consumers can
    never alter the cleaned view.
    """

    __slots__ = ("_frame",)

    def __init__(self, frame: pd.DataFrame):
        self._frame = frame

    @property
    def frame(self) -> pd.DataFrame:
        return self._frame.copy()

    def __len__(self) -> int:
        return len(self._frame)

    def to_records(self) -> list[dict]:
        """Rows as plain dicts: ``None`` for absence, ``datetime.date`` for dates."""
        records = []
        for row in self._frame.to_dict(orient="records"):
            records.append({field: _to_python(field, row[field]) for field in BUSINESS_FIELDS})
        return records


def _to_python(field: str, value):
    if value is None or value is pd.NA or value is pd.NaT:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    if field == "date":
        return pd.Timestamp(value).date()
    if field == "total_laid_off":
        return int(value)
    if field in ("percentage_laid_off", "funds_raised_millions"):
        return float(value)
    return value

