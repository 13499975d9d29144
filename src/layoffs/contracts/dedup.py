"""Duplicate elimination contract.

Enforces the guarantee that exactly one representative per duplicate
group survives. A failure here means the grouping key is wrong and the
run must abort rather than emit an inconsistent dataset.
"""

from layoffs.contracts.base import require
from layoffs.tables import BUSINESS_FIELDS, RANK_FIELD, DedupedTable


def assert_deduplicated(deduped: DedupedTable, staged_count: int) -> None:
    """Enforce duplicate elimination contract.

    Parameters
    ----------
    deduped : DedupedTable
        Output of ``eliminate_duplicates``
    staged_count : int
        Number of staged records before filtering

    Raises
    ------
    ContractViolation
        If duplicates remain or the record count grew
    """
    df = deduped.frame
    require(
        len(df) <= staged_count,
        f"Dedup contract violated: count grew from {staged_count} to {len(df)}"
    )
    require(
        (df[RANK_FIELD] == 1).all(),
        f"Dedup contract violated: records with '{RANK_FIELD}' > 1 survived"
    )

    remaining = int(df.duplicated(subset=list(BUSINESS_FIELDS)).sum())
    require(
        remaining == 0,
        f"Dedup contract violated: count mismatch, {remaining} surviving records "
        f"still match another on all business fields"
    )
