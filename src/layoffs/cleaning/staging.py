"""Ingestion/staging stage.

Copies raw records into a working table and tags each record with its
duplicate rank: the 1-based position of the record within the group of
records identical on all nine business fields.
"""

import logging

from layoffs.contracts import require_stage_input
from layoffs.tables import BUSINESS_FIELDS, RANK_FIELD, RawTable, StagedTable

__all__ = ['stage_records']

logger = logging.getLogger(__name__)


def stage_records(raw: RawTable) -> StagedTable:
    """Build the staged working copy of ``raw``.

    Absent values group together (two absent ``industry`` values are equal
    for ranking). Ranks within a group follow source order, so the first
    occurrence of a record always gets ``row_num == 1``.

    Parameters
    ----------
    raw : RawTable
        Raw records. Never mutated.

    Returns
    -------
    StagedTable
        Same records, same order, plus the ``row_num`` column.
    """
    require_stage_input(raw, RawTable, "Staging")

    df = raw.frame.copy()
    ranks = df.groupby(list(BUSINESS_FIELDS), dropna=False, sort=False).cumcount() + 1
    df[RANK_FIELD] = ranks.astype("int64")

    logger.info("Staged %d records (%d with row_num > 1)", len(df), int((df[RANK_FIELD] > 1).sum()))
    return StagedTable(df)
