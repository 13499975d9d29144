"""Duplicate elimination stage."""

import logging

from layoffs.contracts import assert_deduplicated, require_stage_input
from layoffs.tables import RANK_FIELD, DedupedTable, StagedTable

__all__ = ['eliminate_duplicates']

logger = logging.getLogger(__name__)


def eliminate_duplicates(staged: StagedTable) -> DedupedTable:
    """Keep exactly the rank-1 record of every duplicate group.

    Raises
    ------
    ContractViolation
        If any surviving pair still matches on all business fields, which
        means the grouping key used during staging is wrong.
    """
    require_stage_input(staged, StagedTable, "Dedup")

    df = staged.frame
    kept = df.loc[df[RANK_FIELD] == 1].reset_index(drop=True)
    deduped = DedupedTable(kept)
    assert_deduplicated(deduped, len(df))

    logger.info("Duplicates removed: %d (%d -> %d records)",
                len(df) - len(kept), len(df), len(kept))
    return deduped
